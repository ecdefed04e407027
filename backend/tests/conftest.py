import os
import sys
import pytest

# Ensure the backend root (containing the `roletrando` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from config import Config
from roletrando import create_app, db, seed_words, socketio
from roletrando.services import get_services


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    TOTAL_ROUNDS = 4
    LOG_LEVEL = 'DEBUG'
    CORS_ORIGINS = ['http://localhost:5173']
    WORDS_SEED_FILE = Config.WORDS_SEED_FILE


class FixedRoulette:
    """Stands in for random.Random; every roulette draw returns `value`."""

    def __init__(self, value):
        self.value = value

    def choice(self, seq):
        return self.value


class ListSupply:
    """Word supply that hands out the given pairs in order."""

    def __init__(self, *pairs):
        self.pairs = list(pairs)
        self.calls = 0

    def next_word_tip(self):
        pair = self.pairs[self.calls % len(self.pairs)]
        self.calls += 1
        return pair


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import roletrando.models  # noqa: F401
        db.create_all()
        seed_words([('TESTE', 'exam word')])
        get_services().load()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    try:
        test_client.disconnect(namespace='/ws')
    except Exception:
        pass
