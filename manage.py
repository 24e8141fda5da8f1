# manage.py
import sys

from app import create_app
from music_library.database import db, drop_database

USAGE = "Usage: python manage.py [create_db|drop_db]"


def create_db():
    """Creates the songs table (create_app already does this on startup)."""
    app = create_app()
    with app.app_context():
        db.create_all()
        print(f"Database tables created at {app.config['SQLALCHEMY_DATABASE_URI']}")


def drop_db():
    """Drops the songs table."""
    app = create_app()
    drop_database(app)
    print("Database tables dropped!")


COMMANDS = {
    'create_db': create_db,
    'drop_db': drop_db,
}


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        print(f"No command provided. {USAGE}")
        return 1
    command = COMMANDS.get(argv[0])
    if command is None:
        print(f"Unknown command: {argv[0]}")
        print(USAGE)
        return 1
    command()
    return 0


if __name__ == '__main__':
    sys.exit(main())
