import os
import sys
import random
import pytest

# Ensure the backend root (containing the `charades` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from charades import create_app, db


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    LOG_LEVEL = 'DEBUG'
    DEFAULT_TURN_DURATION_SEC = 30
    DEFAULT_WINNING_SCORE = 30
    WORD_BATCH_SIZE = 100
    JOIN_CODE_LENGTH = 6
    AUTO_DRAW_NEXT_WORD = True
    RECYCLE_WORDS = False
    ENFORCE_TURN_DEADLINE = False
    TURN_DEADLINE_GRACE_SEC = 2


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import charades.models  # noqa: F401
        db.create_all()
    # Requests push their own app context, so Flask-Login state stays per request
    yield application
    with application.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def app_ctx(flask_app):
    """App context for driving the services directly."""
    with flask_app.app_context():
        yield flask_app
        db.session.remove()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def catalog(flask_app):
    """Seed a small word catalog and return it."""
    from charades.services.games.words import add_words
    seeded = ['apple', 'banana', 'cherry', 'dragon', 'eagle', 'falcon', 'guitar', 'hammer']
    with flask_app.app_context():
        add_words(seeded)
    return seeded


@pytest.fixture()
def guest(flask_app):
    """Factory: a logged-in test client for a fresh guest user."""
    def _make(username):
        c = flask_app.test_client()
        res = c.post('/api/auth/guest', json={'username': username})
        assert res.status_code == 201
        return c, res.get_json()
    return _make


@pytest.fixture()
def make_user(flask_app):
    from charades.models import User

    def _make(username, is_admin=False):
        with flask_app.app_context():
            user = User(username=username, is_admin=is_admin)
            db.session.add(user)
            db.session.commit()
            return user.id
    return _make


@pytest.fixture()
def rng():
    return random.Random(1234)


@pytest.fixture()
def file_app(tmp_path):
    """App on a file-backed SQLite database, one connection per thread."""
    class FileConfig(TestConfig):
        SQLALCHEMY_DATABASE_URI = f"sqlite:///{tmp_path / 'charades.db'}"
        SQLALCHEMY_ENGINE_OPTIONS = {'connect_args': {'check_same_thread': False, 'timeout': 30}}

    application = create_app(FileConfig)
    with application.app_context():
        import charades.models  # noqa: F401
        db.create_all()
    yield application
    with application.app_context():
        db.session.remove()
        db.drop_all()
        db.engine.dispose()
