import os
import sys
import pytest

# Ensure the backend root (containing the `gridge` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from gridge import create_app, db, socketio


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    LEADERBOARD_LIMIT = 3
    EFFICIENCY_DECIMALS = 2
    LOG_LEVEL = 'DEBUG'
    CORS_ORIGINS = ['http://localhost:4200']


def _make_app(config_class):
    application = create_app(config_class)
    with application.app_context():
        # Ensure models are imported so tables are created
        import gridge.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def flask_app():
    yield from _make_app(TestConfig)


@pytest.fixture()
def file_app(tmp_path):
    """App on a file-backed SQLite database, for tests that use several threads."""
    config = type('FileTestConfig', (TestConfig,), {
        'SQLALCHEMY_DATABASE_URI': f"sqlite:///{tmp_path / 'gridge-test.db'}",
    })
    yield from _make_app(config)


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def lifecycle(flask_app):
    return flask_app.extensions['gridge']


@pytest.fixture()
def alice(lifecycle):
    return lifecycle.register_player('Alice')


@pytest.fixture()
def bob(lifecycle):
    return lifecycle.register_player('Bob')


@pytest.fixture()
def started_game(lifecycle, alice, bob):
    """A game created by Alice and joined by Bob; Alice moves first."""
    game = lifecycle.create_session(alice['id'])
    return lifecycle.join_session(game['id'], bob['id'])


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    if test_client.is_connected('/ws'):
        test_client.disconnect(namespace='/ws')
