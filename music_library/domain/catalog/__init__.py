"""Catalog domain services (persistence gateway, metadata client, song service)."""

from .music_info_client import MusicInfoClient
from .repository import SongRepository
from .song_service import SongService, paginate_verses, split_verses

__all__ = ["MusicInfoClient", "SongRepository", "SongService", "paginate_verses", "split_verses"]
