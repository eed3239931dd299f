import os
import sys
import pytest

# Ensure the backend root (containing the `roshambo` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from roshambo import create_app, socketio, get_registry
from roshambo.services.game import GameSession, ManualScheduler


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    THINKING_DELAY_SEC = 1.0
    HISTORY_LIMIT = 10
    OPPONENT_SEED = 1234
    TIMER_HEARTBEAT_SEC = 0
    CORS_ORIGINS = ['http://localhost:5173']


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def registry(flask_app):
    return get_registry(flask_app)


@pytest.fixture()
def clock(registry):
    """The virtual clock the test app's sessions are scheduled on."""
    return registry.scheduler


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


@pytest.fixture()
def scheduler():
    return ManualScheduler()


@pytest.fixture()
def make_session(scheduler):
    """Build a session whose opponent plays the given choices in order."""
    def _make(*opponent_moves, **kwargs):
        moves = iter(opponent_moves)
        kwargs.setdefault('thinking_delay', 1.0)
        opponent = (lambda: next(moves)) if opponent_moves else None
        return GameSession(scheduler, opponent=opponent, **kwargs)
    return _make
