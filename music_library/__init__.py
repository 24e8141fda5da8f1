"""Song catalog service: CRUD, metadata enrichment and verse pagination."""

__version__ = "1.0.0"
