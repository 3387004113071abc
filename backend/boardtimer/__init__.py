from flask import Flask, current_app
from flask_cors import CORS
from flask_socketio import SocketIO
from config import Config

allowed_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:5174",
    "http://127.0.0.1:5174",
]
socketio = SocketIO(cors_allowed_origins=allowed_origins, async_mode=None)


def get_registry():
    """Return the timer registry bound to the current app."""
    return current_app.extensions['timer_registry']


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # One registry per app so independent apps (e.g. tests) never share timers
    from boardtimer.services.registry import TimerRegistry
    flask_app.extensions['timer_registry'] = TimerRegistry(
        clock=flask_app.config.get('TIMER_CLOCK'),
        seed=flask_app.config.get('TIMER_RANDOM_SEED'),
        name_prefix=flask_app.config.get('DEFAULT_NAME_PREFIX', 'Player'),
        initial_players=int(flask_app.config.get('INITIAL_PLAYERS', 2)),
        code_length=int(flask_app.config.get('TIMER_CODE_LENGTH', 4)),
    )

    # Import and register blueprints here
    from boardtimer.main import main
    flask_app.register_blueprint(main)

    from boardtimer.api.timers import timers
    # Mount timer routes under /api to match frontend API client
    flask_app.register_blueprint(timers, url_prefix='/api/timers')

    # Register Socket.IO event handlers
    from boardtimer.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    return flask_app
