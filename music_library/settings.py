#!/usr/bin/env python
"""
Typed view of the configuration the service components need.

``config.Config`` (or a Flask ``app.config`` mapping) stays the single
source of values; ``load_app_settings`` validates them once at startup so a
bad ``MUSIC_API_URL`` or timeout fails fast instead of on the first request.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AppSettings(BaseModel):
    """Settings consumed by ``create_app`` when wiring components."""

    model_config = ConfigDict(extra="ignore")

    database_url: str
    music_api_url: str
    music_api_timeout: Optional[float] = Field(default=None, gt=0)
    server_host: str = "0.0.0.0"
    server_port: int = Field(default=8080, ge=1, le=65535)
    debug: bool = False

    @field_validator("music_api_url")
    @classmethod
    def _validate_music_api_url(cls, value: str) -> str:
        value = (value or "").strip()
        if not value.startswith(("http://", "https://")):
            raise ValueError("MUSIC_API_URL must be an http(s) URL")
        return value.rstrip("/")


def _lookup(source: Any, key: str, default: Any = None) -> Any:
    if isinstance(source, Mapping):
        return source.get(key, default)
    return getattr(source, key, default)


def load_app_settings(source: Any = None) -> AppSettings:
    """Build AppSettings from a Config class or a Flask config mapping."""
    if source is None:
        from config import Config

        source = Config

    return AppSettings(
        database_url=_lookup(source, "SQLALCHEMY_DATABASE_URI"),
        music_api_url=_lookup(source, "MUSIC_API_URL", ""),
        music_api_timeout=_lookup(source, "MUSIC_API_TIMEOUT_SECONDS"),
        server_host=_lookup(source, "SERVER_HOST", "0.0.0.0"),
        server_port=_lookup(source, "SERVER_PORT", 8080),
        debug=bool(_lookup(source, "DEBUG", False)),
    )


__all__ = ["AppSettings", "load_app_settings"]
