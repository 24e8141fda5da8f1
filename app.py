import os
import logging
from datetime import datetime
from typing import Any, Mapping, Optional
from uuid import uuid4

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from flask import Flask, g, jsonify, request
from flask_cors import CORS

from config import Config
from music_library.database import initialize_database
from music_library.domain.catalog import MusicInfoClient, SongRepository, SongService
from music_library.interfaces.http.routes import docs_bp, health_bp, songs_bp
from music_library.observability import configure_structured_logging, metrics_blueprint
from music_library.settings import load_app_settings


logger = logging.getLogger(__name__)


def configure_logging(log_dir: str) -> str:
    """
    Configure root logging with:
      - FileHandler (INFO+) to a new file per run: log-YYYY-MM-DD-HH-MM-SS
      - StreamHandler (WARNING+) to console when ENABLE_CONSOLE_LOGS is set
      - Werkzeug/Flask loggers routed to root

    Returns the path to the created log file.
    """
    os.makedirs(log_dir, exist_ok=True)

    timestamp = datetime.now().strftime("%Y-%m-%d-%H-%M-%S")
    log_path = os.path.join(log_dir, f"log-{timestamp}")

    root = logging.getLogger()
    root.setLevel(logging.INFO)

    # Preserve structured handlers; remove existing FileHandlers to avoid duplicates
    root.handlers = [h for h in root.handlers if not isinstance(h, logging.FileHandler)]

    formatter = logging.Formatter(
        fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    file_handler = logging.FileHandler(log_path, encoding='utf-8')
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(formatter)
    root.addHandler(file_handler)

    if Config.ENABLE_CONSOLE_LOGS:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.WARNING)
        console_handler.setFormatter(formatter)
        root.addHandler(console_handler)

    # Quiet Flask/Werkzeug own console handlers; let them propagate to root
    for name in ("werkzeug", "flask.app"):
        _l = logging.getLogger(name)
        _l.setLevel(logging.INFO)
        _l.handlers = []
        _l.propagate = True

    return log_path


def create_app(
    config_overrides: Optional[Mapping[str, Any]] = None,
    *,
    music_info_client: Optional[MusicInfoClient] = None,
) -> Flask:
    """Build the Flask app and wire the song catalog components.

    ``config_overrides`` is applied on top of ``Config``; tests use it to
    point at a throwaway database. ``music_info_client`` replaces the
    HTTP-backed metadata client.
    """
    app = Flask(__name__, instance_relative_config=False)
    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)

    settings = load_app_settings(app.config)
    app.extensions['settings'] = settings

    configure_structured_logging(app)

    @app.before_request
    def _assign_request_id():
        g.request_id = request.headers.get('X-Request-ID') or uuid4().hex

    @app.after_request
    def _inject_request_id(response):
        if getattr(g, 'request_id', None):
            response.headers.setdefault('X-Request-ID', g.request_id)
        return response

    allowed_origins = sorted({
        origin.strip()
        for origin in app.config.get('CORS_ALLOWED_ORIGINS', [])
        if origin and origin.strip() and origin.strip() != "*"
    })
    CORS(app, resources={r"/api/*": {"origins": allowed_origins}})

    initialize_database(app)

    # Build domain services to keep wiring at the app boundary
    if music_info_client is None:
        music_info_client = MusicInfoClient(
            settings.music_api_url,
            timeout=settings.music_api_timeout,
            app_logger=app.logger,
        )
    song_service = SongService(
        repository=SongRepository(),
        music_info_client=music_info_client,
        logger=app.logger,
    )
    app.extensions['song_service'] = song_service

    # --- Register Blueprints ---
    app.register_blueprint(songs_bp)
    app.register_blueprint(health_bp)
    app.register_blueprint(docs_bp)
    app.register_blueprint(metrics_blueprint)

    @app.errorhandler(404)
    def _not_found(_exc):
        return jsonify({'error': 'not_found', 'message': 'Resource not found'}), 404

    @app.errorhandler(405)
    def _method_not_allowed(_exc):
        return jsonify({'error': 'method_not_allowed', 'message': 'Method not allowed'}), 405

    @app.errorhandler(500)
    def _internal_error(_exc):
        return jsonify({'error': 'internal_error', 'message': 'Internal server error'}), 500

    app.logger.info(
        "Music library ready: database=%s, music_api=%s",
        settings.database_url,
        settings.music_api_url,
    )
    return app


def run_server(app: Flask) -> None:
    """Serve the app with the validated host, port and debug settings."""
    settings = app.extensions['settings']
    # Route app.logger through root handlers, keep levels consistent
    app.logger.handlers = []
    app.logger.setLevel(logging.INFO)
    app.logger.propagate = True
    logger.info("Starting Flask application on %s:%s...", settings.server_host, settings.server_port)
    app.run(debug=settings.debug, host=settings.server_host, port=settings.server_port, threaded=True)


if __name__ == '__main__':
    # Configure logging:
    # - In debug with reloader: only in the child process to avoid duplicate files
    # - In non-debug: always configure here
    debug_mode = bool(Config.DEBUG)
    if not debug_mode or os.environ.get('WERKZEUG_RUN_MAIN') == 'true':
        log_file_path = configure_logging(Config.LOG_DIR)
        logger.info("File logging initialized at %s", log_file_path)

    if not os.getenv('MUSIC_API_URL'):
        logger.warning("MUSIC_API_URL not set; using default %s", Config.MUSIC_API_URL)

    run_server(create_app())
