from __future__ import annotations

from flask import Blueprint, current_app, jsonify

from music_library.errors import StorageError

health_bp = Blueprint("health_bp", __name__)


def _check_database() -> str:
    service = current_app.extensions.get("song_service")
    if service is None:
        return "unavailable"
    try:
        service.repository.ping()
    except StorageError as exc:
        return f"error: {exc}"
    return "ok"


@health_bp.route("/healthz")
def healthz():
    checks = {"database": _check_database()}
    status = 200 if checks["database"] == "ok" else 503

    client = getattr(current_app.extensions.get("song_service"), "music_info_client", None)
    checks["music_api"] = getattr(client, "base_url", None) or "unconfigured"

    overall = "ok" if status == 200 else "degraded"
    return jsonify({"status": overall, "checks": checks}), status


@health_bp.route("/readyz")
def readyz():
    database = _check_database()
    ready = database == "ok"
    payload = {
        "status": "ready" if ready else "blocked",
        "database": database,
    }
    return jsonify(payload), 200 if ready else 503
