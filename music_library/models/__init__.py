from .dto import SongDetail, SongDTO, SongFilter, SongPayload, SongWithVerses, VersePagination

__all__ = [
    "SongDetail",
    "SongDTO",
    "SongFilter",
    "SongPayload",
    "SongWithVerses",
    "VersePagination",
]
