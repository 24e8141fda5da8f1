from __future__ import annotations

import logging
from datetime import timedelta
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError

from music_library.database.db_manager import Song, db, utcnow
from music_library.errors import NotFoundError, StorageError
from music_library.models.dto import SongDTO, SongFilter


logger = logging.getLogger(__name__)

# sqlite3 raises a bare OverflowError for integers outside the 64-bit range
_DB_ERRORS = (SQLAlchemyError, OverflowError)


class SongRepository:
    """Sole reader/writer of the ``songs`` table.

    Every method runs a single statement against the session and commits (or
    rolls back) before returning. Rows never leave this class; callers get
    ``SongDTO`` copies.
    """

    def __init__(self, session=None):
        self._session = session

    @property
    def session(self):
        # Flask-SQLAlchemy's scoped session is bound to the active app context
        return self._session if self._session is not None else db.session

    def create(self, song: SongDTO) -> SongDTO:
        row = Song(
            group_name=song.group_name,
            song_name=song.song_name,
            release_date=song.release_date,
            text=song.text,
            link=song.link,
        )
        try:
            self.session.add(row)
            self.session.commit()
        except _DB_ERRORS as exc:
            self.session.rollback()
            raise StorageError(
                f"failed to insert song {song.song_name!r} by {song.group_name!r}: {exc}",
                operation="create",
                context={"group": song.group_name, "song": song.song_name},
            ) from exc
        return SongDTO.from_row(row)

    def update(self, song: SongDTO) -> SongDTO:
        row = self._get_row(song.id, operation="update")
        row.group_name = song.group_name
        row.song_name = song.song_name
        row.release_date = song.release_date
        row.text = song.text
        row.link = song.link
        # Set explicitly: onupdate does not fire when no column value changed
        row.updated_at = max(utcnow(), _just_after(row.updated_at))
        try:
            self.session.commit()
        except _DB_ERRORS as exc:
            self.session.rollback()
            raise StorageError(
                f"failed to update song {song.id}: {exc}",
                operation="update",
                context={"song_id": song.id},
            ) from exc
        return SongDTO.from_row(row)

    def delete(self, song_id: int) -> None:
        try:
            result = self.session.execute(delete(Song).where(Song.id == song_id))
            self.session.commit()
        except _DB_ERRORS as exc:
            self.session.rollback()
            raise StorageError(
                f"failed to delete song {song_id}: {exc}",
                operation="delete",
                context={"song_id": song_id},
            ) from exc
        if result.rowcount == 0:
            raise NotFoundError(
                f"song with id {song_id} not found",
                operation="delete",
                context={"song_id": song_id},
            )

    def get_by_id(self, song_id: int) -> SongDTO:
        return SongDTO.from_row(self._get_row(song_id, operation="get"))

    def list(self, song_filter: SongFilter) -> List[SongDTO]:
        stmt = select(Song)
        if song_filter.group_name:
            stmt = stmt.where(Song.group_name.icontains(song_filter.group_name, autoescape=True))
        if song_filter.song_name:
            stmt = stmt.where(Song.song_name.icontains(song_filter.song_name, autoescape=True))
        if song_filter.release_date:
            stmt = stmt.where(Song.release_date.contains(song_filter.release_date, autoescape=True))
        stmt = stmt.order_by(Song.id.asc()).limit(song_filter.page_size).offset(song_filter.offset)

        try:
            rows = self.session.execute(stmt).scalars().all()
        except _DB_ERRORS as exc:
            self.session.rollback()
            raise StorageError(
                f"failed to list songs: {exc}",
                operation="list",
                context={"filter": song_filter.model_dump()},
            ) from exc
        return [SongDTO.from_row(row) for row in rows]

    def ping(self) -> None:
        """Round-trip a trivial statement; used by the health endpoints."""
        try:
            self.session.execute(select(1))
        except _DB_ERRORS as exc:
            self.session.rollback()
            raise StorageError(f"database unreachable: {exc}", operation="ping") from exc

    def _get_row(self, song_id: Optional[int], *, operation: str) -> Song:
        if song_id is None:
            raise NotFoundError("song id is required", operation=operation)
        try:
            row = self.session.get(Song, song_id)
        except _DB_ERRORS as exc:
            self.session.rollback()
            raise StorageError(
                f"failed to load song {song_id}: {exc}",
                operation=operation,
                context={"song_id": song_id},
            ) from exc
        if row is None:
            raise NotFoundError(
                f"song with id {song_id} not found",
                operation=operation,
                context={"song_id": song_id},
            )
        return row


def _just_after(previous):
    if previous is None:
        return utcnow()
    return previous + timedelta(microseconds=1)


__all__ = ["SongRepository"]
