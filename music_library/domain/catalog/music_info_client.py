import logging
import time
from typing import Optional

import requests
from pydantic import ValidationError as PydanticValidationError

from music_library.errors import DecodeError, NetworkError, UpstreamError
from music_library.models.dto import SongDetail
from music_library.observability.metrics import record_enrichment

logger = logging.getLogger(__name__)


class MusicInfoClient:
    """Client for the external song metadata API.

    Performs exactly one ``GET <base_url>/info?group=..&song=..`` per call.
    There is no retry, and no timeout unless one is configured.
    """

    INFO_PATH = "/info"

    def __init__(
        self,
        base_url: str,
        *,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
        app_logger: Optional[logging.Logger] = None,
    ):
        if not base_url:
            raise ValueError("base_url is required for MusicInfoClient")
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.logger = app_logger or logger

    @property
    def info_url(self) -> str:
        return f"{self.base_url}{self.INFO_PATH}"

    def get_song_info(self, group: str, song: str) -> SongDetail:
        params = {"group": group, "song": song}
        context = {"group": group, "song": song, "url": self.info_url}
        started = time.perf_counter()

        self.logger.debug("Requesting song info for %s - %s", group, song)
        try:
            resp = self.session.get(self.info_url, params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            record_enrichment("network_error", time.perf_counter() - started)
            raise NetworkError(
                f"failed to make request to {self.info_url}: {exc}",
                operation="get_song_info",
                context=context,
            ) from exc

        if resp.status_code != 200:
            record_enrichment("upstream_error", time.perf_counter() - started)
            raise UpstreamError(
                f"API returned non-200 status code: {resp.status_code}",
                operation="get_song_info",
                context={**context, "status_code": resp.status_code},
            )

        try:
            data = resp.json()
        except ValueError as exc:
            record_enrichment("decode_error", time.perf_counter() - started)
            raise DecodeError(
                f"failed to decode response: {exc}",
                operation="get_song_info",
                context=context,
            ) from exc

        if not isinstance(data, dict):
            record_enrichment("decode_error", time.perf_counter() - started)
            raise DecodeError(
                f"failed to decode response: expected an object, got {type(data).__name__}",
                operation="get_song_info",
                context=context,
            )
        try:
            detail = SongDetail.model_validate(data)
        except PydanticValidationError as exc:
            record_enrichment("decode_error", time.perf_counter() - started)
            raise DecodeError(
                f"failed to decode response: {exc.error_count()} invalid field(s)",
                operation="get_song_info",
                context=context,
            ) from exc

        record_enrichment("success", time.perf_counter() - started)
        return detail


__all__ = ["MusicInfoClient"]
