#!/usr/bin/env python
"""
Pydantic DTOs for songs as they move between the HTTP layer, the service,
the metadata API and the database.

Field names are pythonic; aliases carry the JSON wire names the API has
always used (``group``, ``song``, ``releaseDate``).
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator, model_validator

# Largest value a signed 64-bit INTEGER column (and LIMIT/OFFSET) accepts
MAX_DB_INT = 2**63 - 1


class SongDTO(BaseModel):
    """A song as stored in the catalog."""

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[int] = None
    group_name: str = Field(alias="group")
    song_name: str = Field(alias="song")
    release_date: str = Field(default="", alias="releaseDate")
    text: str = ""
    link: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row) -> "SongDTO":
        return cls(
            id=row.id,
            group_name=row.group_name,
            song_name=row.song_name,
            release_date=row.release_date or "",
            text=row.text or "",
            link=row.link or "",
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    def to_api(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


class SongPayload(BaseModel):
    """Request body for creating or replacing a song.

    Group and song names are required; the remaining fields are optional and
    are discarded on create (they come from the metadata API instead).
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    group_name: str = Field(alias="group")
    song_name: str = Field(alias="song")
    release_date: str = Field(default="", alias="releaseDate")
    text: str = ""
    link: str = ""

    @field_validator("group_name", "song_name")
    @classmethod
    def _require_non_empty(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    def to_song(self, song_id: Optional[int] = None) -> SongDTO:
        return SongDTO(
            id=song_id,
            group_name=self.group_name,
            song_name=self.song_name,
            release_date=self.release_date,
            text=self.text,
            link=self.link,
        )


class SongFilter(BaseModel):
    """Listing filter; empty strings disable the matching predicate."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    group_name: str = Field(default="", alias="group")
    song_name: str = Field(default="", alias="song")
    release_date: str = ""
    page: int = Field(default=1, ge=1, le=MAX_DB_INT)
    page_size: int = Field(default=10, ge=1, le=MAX_DB_INT)

    @model_validator(mode="after")
    def _check_offset(self) -> "SongFilter":
        if self.offset > MAX_DB_INT:
            raise ValueError("page is too large for page_size")
        return self

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


class VersePagination(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    page: int = Field(default=1, ge=1, alias="verse_page")
    page_size: int = Field(default=4, ge=1, alias="verse_size")


class SongDetail(BaseModel):
    """Enrichment data returned by the external metadata API."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    release_date: StrictStr = Field(alias="releaseDate")
    text: StrictStr
    link: StrictStr


class SongWithVerses(SongDTO):
    """A song plus one page of its verses. Computed per request, never stored."""

    verses: List[str]
    total_verses: int = Field(ge=0)
    current_page: int


__all__ = [
    "SongDTO",
    "SongPayload",
    "SongFilter",
    "VersePagination",
    "SongDetail",
    "SongWithVerses",
    "MAX_DB_INT",
]
