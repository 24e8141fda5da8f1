from __future__ import annotations

from typing import Optional

from flask import Blueprint, Response
from prometheus_client import Counter, Histogram, generate_latest

metrics_blueprint = Blueprint("metrics_bp", __name__)

CONTENT_TYPE_LATEST = "text/plain; version=0.0.4; charset=utf-8"

SONG_OPERATIONS = Counter(
    "music_library_song_operations_total",
    "Song service operations by operation name and outcome.",
    ["operation", "outcome"],
)
ENRICHMENT_REQUESTS = Counter(
    "music_library_enrichment_requests_total",
    "Calls made to the external metadata API by result.",
    ["result"],
)
ENRICHMENT_LATENCY = Histogram(
    "music_library_enrichment_seconds",
    "Latency of calls to the external metadata API.",
    buckets=(0.05, 0.1, 0.25, 0.5, 1, 2, 5, 10, float("inf")),
)


def record_song_operation(operation: str, outcome: str) -> None:
    SONG_OPERATIONS.labels(operation=operation, outcome=outcome).inc()


def record_enrichment(result: str, duration_seconds: Optional[float] = None) -> None:
    ENRICHMENT_REQUESTS.labels(result=result).inc()
    if duration_seconds is not None:
        ENRICHMENT_LATENCY.observe(duration_seconds)


@metrics_blueprint.route("/metrics")
def metrics_endpoint() -> Response:
    return Response(generate_latest(), mimetype=CONTENT_TYPE_LATEST)
