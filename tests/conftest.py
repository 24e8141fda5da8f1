import os
import sys

import pytest

# Ensure project root is on sys.path so 'app', 'config' and 'music_library' import correctly
_TESTS_DIR = os.path.dirname(__file__)
_ROOT_DIR = os.path.abspath(os.path.join(_TESTS_DIR, os.pardir))
if _ROOT_DIR not in sys.path:
    sys.path.insert(0, _ROOT_DIR)

from tests.support import factories as test_factories
from tests.support import stubs as test_stubs


MUSIC_API_URL = "http://music-api.test"


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    """Keep a developer's .env/environment out of the tests."""
    monkeypatch.setenv("MUSIC_API_URL", MUSIC_API_URL)
    monkeypatch.delenv("MUSIC_API_TIMEOUT_SECONDS", raising=False)
    yield


@pytest.fixture
def music_info_stub():
    """Metadata client stub; tests set ``.detail`` or ``.error`` to shape it."""
    return test_stubs.MusicInfoClientStub(base_url=MUSIC_API_URL)


@pytest.fixture
def app(tmp_path, music_info_stub):
    import app as app_module

    db_path = tmp_path / "test.sqlite"
    application = app_module.create_app(
        {
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": f"sqlite:///{db_path.as_posix()}",
            "MUSIC_API_URL": MUSIC_API_URL,
        },
        music_info_client=music_info_stub,
    )
    yield application


@pytest.fixture
def app_context(app):
    with app.app_context():
        yield app


@pytest.fixture
def db_session(app_context):
    from music_library.database import db

    test_factories.set_session(db.session)
    try:
        yield db.session
    finally:
        db.session.rollback()
        db.session.remove()
        test_factories.reset_session()


@pytest.fixture
def factories(db_session):
    yield test_factories


@pytest.fixture
def repository(db_session):
    from music_library.domain.catalog import SongRepository

    return SongRepository(session=db_session)


@pytest.fixture
def client(app):
    return app.test_client()
