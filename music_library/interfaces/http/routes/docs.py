"""OpenAPI document and Swagger UI for the song API."""

from __future__ import annotations

from functools import lru_cache

from apispec import APISpec
from flask import Blueprint, jsonify, url_for

from music_library import __version__
from music_library.models.dto import SongDTO, SongPayload, SongWithVerses

docs_bp = Blueprint("docs_bp", __name__, url_prefix="/swagger")

_REF = "#/components/schemas/{model}"

_SONG_ID = {
    "in": "path",
    "name": "song_id",
    "required": True,
    "description": "Song ID",
    "schema": {"type": "integer", "format": "int64"},
}


def _query(name: str, description: str, schema: dict) -> dict:
    return {"in": "query", "name": name, "required": False, "description": description, "schema": schema}


def _json(schema_name: str) -> dict:
    return {"application/json": {"schema": {"$ref": _REF.format(model=schema_name)}}}


def _error(description: str) -> dict:
    return {"description": description, "content": _json("Error")}


_SONG_BODY = {"required": True, "content": _json("SongPayload")}


@lru_cache(maxsize=1)
def build_openapi_spec() -> dict:
    spec = APISpec(
        title="Music Library API",
        version=__version__,
        openapi_version="3.1.0",
        info={"description": "A REST API for managing a music library"},
    )

    spec.components.schema("Song", SongDTO.model_json_schema(by_alias=True, mode="serialization", ref_template=_REF))
    spec.components.schema("SongPayload", SongPayload.model_json_schema(by_alias=True, ref_template=_REF))
    spec.components.schema(
        "SongWithVerses",
        SongWithVerses.model_json_schema(by_alias=True, mode="serialization", ref_template=_REF),
    )
    spec.components.schema(
        "Error",
        {
            "type": "object",
            "properties": {"error": {"type": "string"}, "message": {"type": "string"}},
            "required": ["error", "message"],
        },
    )

    spec.path(
        path="/api/v1/songs",
        operations={
            "get": {
                "summary": "List songs",
                "description": "Get songs with filtering and pagination",
                "tags": ["songs"],
                "parameters": [
                    _query("group", "Filter by group name (case-insensitive substring)", {"type": "string"}),
                    _query("song", "Filter by song name (case-insensitive substring)", {"type": "string"}),
                    _query("release_date", "Filter by release date (substring)", {"type": "string"}),
                    _query("page", "Page number", {"type": "integer", "minimum": 1, "default": 1}),
                    _query("page_size", "Page size", {"type": "integer", "minimum": 1, "default": 10}),
                ],
                "responses": {
                    "200": {
                        "description": "Songs ordered by ID",
                        "content": {
                            "application/json": {
                                "schema": {"type": "array", "items": {"$ref": _REF.format(model="Song")}},
                            }
                        },
                    },
                    "400": _error("Invalid query parameters"),
                    "500": _error("Storage failure"),
                },
            },
            "post": {
                "summary": "Create song",
                "description": "Fetch release date, lyrics and link from the music info API, then store the song",
                "tags": ["songs"],
                "requestBody": _SONG_BODY,
                "responses": {
                    "201": {"description": "Created song", "content": _json("Song")},
                    "400": _error("Invalid request body"),
                    "500": _error("Music info API or storage failure"),
                },
            },
        },
    )
    spec.path(
        path="/api/v1/songs/{song_id}",
        operations={
            "get": {
                "summary": "Get song",
                "tags": ["songs"],
                "parameters": [_SONG_ID],
                "responses": {
                    "200": {"description": "Song", "content": _json("Song")},
                    "400": _error("Invalid song ID"),
                    "404": _error("Song not found"),
                },
            },
            "put": {
                "summary": "Update song",
                "description": "Replace every stored field of the song",
                "tags": ["songs"],
                "parameters": [_SONG_ID],
                "requestBody": _SONG_BODY,
                "responses": {
                    "200": {"description": "Updated song", "content": _json("Song")},
                    "400": _error("Invalid song ID or body"),
                    "404": _error("Song not found"),
                },
            },
            "delete": {
                "summary": "Delete song",
                "tags": ["songs"],
                "parameters": [_SONG_ID],
                "responses": {
                    "204": {"description": "Song deleted"},
                    "400": _error("Invalid song ID"),
                    "404": _error("Song not found"),
                },
            },
        },
    )
    spec.path(
        path="/api/v1/songs/{song_id}/verses",
        operations={
            "get": {
                "summary": "Get song with verses",
                "description": "Get a song with one page of its lyrics split into verses",
                "tags": ["songs"],
                "parameters": [
                    _SONG_ID,
                    _query("verse_page", "Verse page number", {"type": "integer", "minimum": 1, "default": 1}),
                    _query("verse_size", "Verses per page", {"type": "integer", "minimum": 1, "default": 4}),
                ],
                "responses": {
                    "200": {"description": "Song with verses", "content": _json("SongWithVerses")},
                    "400": _error("Invalid song ID or pagination"),
                    "404": _error("Song not found or verse page out of range"),
                },
            },
        },
    )
    return spec.to_dict()


_INDEX_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>Music Library API</title>
  <link rel="stylesheet" href="https://unpkg.com/swagger-ui-dist@5/swagger-ui.css">
</head>
<body>
  <div id="swagger-ui"></div>
  <script src="https://unpkg.com/swagger-ui-dist@5/swagger-ui-bundle.js"></script>
  <script>
    window.ui = SwaggerUIBundle({url: "%s", dom_id: "#swagger-ui"});
  </script>
</body>
</html>
"""


@docs_bp.route("/doc.json")
def openapi_document():
    return jsonify(build_openapi_spec())


@docs_bp.route("/")
@docs_bp.route("/index.html")
def swagger_ui():
    html = _INDEX_HTML % url_for("docs_bp.openapi_document")
    return html, 200, {"Content-Type": "text/html; charset=utf-8"}


__all__ = ["docs_bp", "build_openapi_spec"]
