"""Song CRUD and verse routes."""

from __future__ import annotations

import logging

from flask import Blueprint, current_app, jsonify, request
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from music_library.domain.catalog import SongService
from music_library.errors import MusicLibraryError, ValidationError
from music_library.models.dto import MAX_DB_INT, SongFilter, SongPayload, VersePagination


logger = logging.getLogger(__name__)

songs_bp = Blueprint('songs_bp', __name__, url_prefix='/api/v1/songs')


def get_song_service() -> SongService:
    return current_app.extensions['song_service']


def _parse_song_id(raw: str) -> int:
    try:
        song_id = int(raw)
    except (TypeError, ValueError):
        raise ValidationError("Invalid song ID", context={"song_id": raw}) from None
    if abs(song_id) > MAX_DB_INT:
        raise ValidationError("Invalid song ID", context={"song_id": raw})
    return song_id


def _bind(model: type[BaseModel], data, message: str):
    try:
        return model.model_validate(data)
    except PydanticValidationError as exc:
        details = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'body'}: {err['msg']}" for err in exc.errors()
        )
        raise ValidationError(f"{message}: {details}") from exc


def _json_body() -> dict:
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValidationError("Invalid request body")
    return payload


@songs_bp.errorhandler(MusicLibraryError)
def _handle_music_library_error(exc: MusicLibraryError):
    if exc.http_status >= 500:
        logger.error("Request failed: %s", exc, extra={"error_code": exc.code, **exc.context})
    else:
        logger.warning("Request rejected: %s", exc, extra={"error_code": exc.code})
    return jsonify(exc.to_dict()), exc.http_status


@songs_bp.route('', methods=['POST'])
def create_song():
    payload = _bind(SongPayload, _json_body(), "Invalid request body")
    song = get_song_service().create_song(payload.to_song())
    return jsonify(song.to_api()), 201


@songs_bp.route('', methods=['GET'])
def list_songs():
    song_filter = _bind(SongFilter, request.args.to_dict(), "Invalid query parameters")
    songs = get_song_service().list_songs(song_filter)
    return jsonify([song.to_api() for song in songs]), 200


@songs_bp.route('/<song_id>', methods=['GET'])
def get_song(song_id: str):
    song = get_song_service().get_song(_parse_song_id(song_id))
    return jsonify(song.to_api()), 200


@songs_bp.route('/<song_id>/verses', methods=['GET'])
def get_song_verses(song_id: str):
    parsed_id = _parse_song_id(song_id)
    pagination = _bind(VersePagination, request.args.to_dict(), "Invalid query parameters")
    song = get_song_service().get_song_with_verses(parsed_id, pagination)
    return jsonify(song.to_api()), 200


@songs_bp.route('/<song_id>', methods=['PUT'])
def update_song(song_id: str):
    parsed_id = _parse_song_id(song_id)
    payload = _bind(SongPayload, _json_body(), "Invalid request body")
    song = get_song_service().update_song(payload.to_song(song_id=parsed_id))
    return jsonify(song.to_api()), 200


@songs_bp.route('/<song_id>', methods=['DELETE'])
def delete_song(song_id: str):
    get_song_service().delete_song(_parse_song_id(song_id))
    return '', 204


__all__ = ['songs_bp', 'get_song_service']
