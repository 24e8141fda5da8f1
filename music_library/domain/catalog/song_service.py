"""Business-level orchestration for the song catalog.

``SongService`` is the only caller of the repository and the metadata
client. Apart from ``create_song`` (enrich, then persist) and
``get_song_with_verses`` (verse pagination) every operation delegates
straight to the repository, adding logging, metrics and error context.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from music_library.errors import MusicLibraryError, NotFoundError, PageOutOfRangeError
from music_library.models.dto import SongDTO, SongFilter, SongWithVerses, VersePagination
from music_library.observability.metrics import record_song_operation

from .music_info_client import MusicInfoClient
from .repository import SongRepository

VERSE_SEPARATOR = "\n\n"


def split_verses(text: Optional[str]) -> List[str]:
    """Split lyrics into verses on blank lines.

    Leading/trailing whitespace is trimmed first. Text that is empty after
    trimming has no verses at all.
    """
    normalized = (text or "").strip()
    if not normalized:
        return []
    return normalized.split(VERSE_SEPARATOR)


def paginate_verses(verses: List[str], page: int, page_size: int) -> Tuple[List[str], int]:
    """Return ``(verses on page, total verse count)``.

    Raises PageOutOfRangeError when the page starts at or past the end,
    which includes page 1 of an empty verse list.
    """
    total = len(verses)
    start = (page - 1) * page_size
    end = min(start + page_size, total)
    if start >= total:
        raise PageOutOfRangeError(
            "page number exceeds total verses",
            operation="paginate_verses",
            context={"page": page, "page_size": page_size, "total_verses": total},
        )
    return verses[start:end], total


class SongService:
    def __init__(self, repository: SongRepository, music_info_client: MusicInfoClient, logger=None):
        self.repository = repository
        self.music_info_client = music_info_client
        self.logger = logger or logging.getLogger(__name__)

    def create_song(self, song: SongDTO) -> SongDTO:
        self.logger.info(
            "Creating new song",
            extra={"group": song.group_name, "song": song.song_name},
        )
        try:
            detail = self.music_info_client.get_song_info(song.group_name, song.song_name)
        except MusicLibraryError as exc:
            self.logger.error(
                "Failed to get song info from API: %s",
                exc,
                extra={"group": song.group_name, "song": song.song_name},
            )
            record_song_operation("create", "enrichment_failed")
            raise exc.wrap("failed to get song info", group=song.group_name, song=song.song_name) from exc

        enriched = song.model_copy(
            update={
                "id": None,
                "release_date": detail.release_date,
                "text": detail.text,
                "link": detail.link,
            }
        )

        try:
            created = self.repository.create(enriched)
        except MusicLibraryError as exc:
            self.logger.error(
                "Failed to create song in database: %s",
                exc,
                extra={"group": song.group_name, "song": song.song_name},
            )
            record_song_operation("create", "failed")
            raise exc.wrap("failed to create song", group=song.group_name, song=song.song_name) from exc

        self.logger.info(
            "Successfully created song",
            extra={"song_id": created.id, "group": created.group_name, "song": created.song_name},
        )
        record_song_operation("create", "success")
        return created

    def update_song(self, song: SongDTO) -> SongDTO:
        self.logger.info(
            "Updating song",
            extra={"song_id": song.id, "group": song.group_name, "song": song.song_name},
        )
        try:
            updated = self.repository.update(song)
        except MusicLibraryError as exc:
            self.logger.error("Failed to update song: %s", exc, extra={"song_id": song.id})
            record_song_operation("update", "failed")
            raise exc.wrap("failed to update song", song_id=song.id) from exc

        self.logger.info("Successfully updated song", extra={"song_id": song.id})
        record_song_operation("update", "success")
        return updated

    def delete_song(self, song_id: int) -> None:
        self.logger.info("Deleting song", extra={"song_id": song_id})
        try:
            self.repository.delete(song_id)
        except MusicLibraryError as exc:
            self.logger.error("Failed to delete song: %s", exc, extra={"song_id": song_id})
            record_song_operation("delete", "failed")
            raise exc.wrap("failed to delete song", song_id=song_id) from exc

        self.logger.info("Successfully deleted song", extra={"song_id": song_id})
        record_song_operation("delete", "success")

    def get_song(self, song_id: int) -> SongDTO:
        self.logger.debug("Getting song by ID", extra={"song_id": song_id})
        try:
            return self.repository.get_by_id(song_id)
        except MusicLibraryError as exc:
            self.logger.error("Failed to get song: %s", exc, extra={"song_id": song_id})
            raise exc.wrap("failed to get song", song_id=song_id) from exc

    def list_songs(self, song_filter: SongFilter) -> List[SongDTO]:
        self.logger.debug("Listing songs with filter", extra={"filter": song_filter.model_dump()})
        try:
            return self.repository.list(song_filter)
        except MusicLibraryError as exc:
            self.logger.error(
                "Failed to list songs: %s",
                exc,
                extra={"filter": song_filter.model_dump()},
            )
            raise exc.wrap("failed to list songs") from exc

    def get_song_with_verses(self, song_id: int, pagination: Optional[VersePagination] = None) -> SongWithVerses:
        pagination = pagination or VersePagination()
        self.logger.debug(
            "Getting song with verses",
            extra={"song_id": song_id, "page": pagination.page, "page_size": pagination.page_size},
        )
        try:
            song = self.repository.get_by_id(song_id)
        except NotFoundError:
            self.logger.error("Failed to get song: not found", extra={"song_id": song_id})
            raise
        except MusicLibraryError as exc:
            self.logger.error("Failed to get song: %s", exc, extra={"song_id": song_id})
            raise exc.wrap("failed to get song", song_id=song_id) from exc

        try:
            page_verses, total = paginate_verses(split_verses(song.text), pagination.page, pagination.page_size)
        except PageOutOfRangeError as exc:
            self.logger.warning("Verse page out of range: %s", exc, extra={**exc.context, "song_id": song_id})
            raise exc.wrap("failed to get song verses", song_id=song_id) from exc

        return SongWithVerses(
            **song.model_dump(),
            verses=page_verses,
            total_verses=total,
            current_page=pagination.page,
        )


__all__ = ["SongService", "split_verses", "paginate_verses", "VERSE_SEPARATOR"]
