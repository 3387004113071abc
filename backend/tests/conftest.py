import os
import sys
import pytest

# Ensure the backend root (containing the `boardtimer` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from boardtimer import create_app, socketio


class FakeClock:
    """Synthetic millisecond clock advanced by hand."""

    def __init__(self, start=1_000_000):
        self.now = start

    def now_ms(self):
        return self.now

    def advance(self, ms):
        self.now += ms


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def flask_app(clock):
    class TestConfig:
        TESTING = True
        SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
        DEFAULT_NAME_PREFIX = 'Player'
        INITIAL_PLAYERS = 2
        DISPLAY_TICK_MS = 200
        ESCALATION_TICK_MS = 1000
        TIMER_CODE_LENGTH = 4
        TIMER_CLOCK = clock
        TIMER_RANDOM_SEED = 1234

    application = create_app(TestConfig)
    with application.app_context():
        yield application


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
