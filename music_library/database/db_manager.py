# music_library/database/db_manager.py
import logging
import os
from datetime import datetime, timezone

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy.engine import make_url

# Initialize the SQLAlchemy object
db = SQLAlchemy()
logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    """Naive UTC timestamp, the form stored in ``created_at``/``updated_at``."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Song(db.Model):
    __tablename__ = 'songs'

    id = db.Column(db.Integer, primary_key=True)
    group_name = db.Column(db.String(255), nullable=False, index=True)
    song_name = db.Column(db.String(255), nullable=False, index=True)
    release_date = db.Column(db.String(64), nullable=False, default='')
    text = db.Column(db.Text, nullable=False, default='')
    link = db.Column(db.String(500), nullable=False, default='')
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    def __repr__(self):
        return f'<Song {self.id}: {self.song_name} by {self.group_name}>'


def initialize_database(app):
    """
    Initializes the SQLAlchemy extension with the Flask app instance
    and creates the songs table if it doesn't already exist.
    """
    db.init_app(app)
    # Ensure the instance folder exists for SQLite database file
    instance_path = app.instance_path
    if not os.path.exists(instance_path):
        os.makedirs(instance_path)
        logger.info("Created instance folder: %s", instance_path)

    # Ensure the directory for the configured SQLite file exists
    uri = app.config.get('SQLALCHEMY_DATABASE_URI')
    if uri:
        url = make_url(uri)
        # Only handle file-based SQLite (not :memory:)
        if url.get_backend_name() == 'sqlite' and url.database and url.database != ':memory:':
            db_dir = os.path.dirname(url.database)
            if db_dir and not os.path.exists(db_dir):
                os.makedirs(db_dir, exist_ok=True)
                logger.info("Created SQLite DB directory: %s", db_dir)

    with app.app_context():
        db.create_all()
        logger.info("Database tables created or already exist.")


def drop_database(app) -> None:
    """Drops every table known to the metadata (used by ``manage.py drop_db``)."""
    with app.app_context():
        db.drop_all()
        logger.info("Database tables dropped.")
