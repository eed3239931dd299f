from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from config import Config

socketio = SocketIO(async_mode=None)

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    allowed_origins = flask_app.config.get('CORS_ORIGINS') or []
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    flask_app.extensions['roshambo'] = _build_registry(flask_app)

    # Import and register blueprints here
    from roshambo.main import main
    flask_app.register_blueprint(main)

    from roshambo.api.sessions import sessions
    flask_app.register_blueprint(sessions, url_prefix='/api/sessions')

    # Register Socket.IO event handlers
    from roshambo.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    from roshambo.cli import play_command
    flask_app.cli.add_command(play_command)

    return flask_app


def _build_registry(flask_app):
    from roshambo.services.game import BackgroundScheduler, ManualScheduler, SessionRegistry

    cfg = flask_app.config
    # Tests drive the clock by hand unless explicitly asked for real timers
    if cfg.get('TESTING') and not cfg.get('ENABLE_SCHEDULER_IN_TESTS'):
        scheduler = ManualScheduler()
    else:
        scheduler = BackgroundScheduler(
            socketio,
            heartbeat=int(cfg.get('TIMER_HEARTBEAT_SEC', 0)),
            logger=flask_app.logger,
        )

    def emit_state(code, snapshot):
        socketio.emit('state_update', {'session_code': code, 'state': snapshot},
                      to=f"session:{code}", namespace='/ws')

    return SessionRegistry(
        scheduler,
        thinking_delay=float(cfg.get('THINKING_DELAY_SEC', 1.0)),
        history_limit=int(cfg.get('HISTORY_LIMIT', 10)),
        seed=cfg.get('OPPONENT_SEED'),
        emitter=emit_state,
        logger=flask_app.logger,
        idle_timeout=float(cfg.get('SESSION_IDLE_TIMEOUT_SEC', 0) or 0),
    )


def get_registry(flask_app=None):
    from flask import current_app
    return (flask_app or current_app).extensions['roshambo']
