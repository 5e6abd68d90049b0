import random

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from config import Config

socketio = SocketIO(async_mode=None)


def create_app(config_class=Config):
    flask_app = Flask(__name__, static_folder=None)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    origins = flask_app.config.get('CORS_ORIGINS', '*')
    CORS(flask_app, origins=origins)
    socketio.init_app(flask_app, cors_allowed_origins=origins)

    from arena.routes import main
    flask_app.register_blueprint(main)

    # Composition root: one router per app owns all match state
    from arena.router import SocketIOFanout, build_router
    seed = flask_app.config.get('ARENA_SEED')
    rng = random.Random(seed) if seed is not None else None
    namespace = flask_app.config.get('SOCKETIO_NAMESPACE', '/')
    router = build_router(flask_app.config, SocketIOFanout(socketio, namespace), logger=flask_app.logger, rng=rng)
    flask_app.extensions['arena_router'] = router

    from arena.socketio_events import register_socketio_handlers
    register_socketio_handlers(namespace)

    ticker = None
    if router.clock is not None:
        from arena.services import ClockTicker
        ticker = ClockTicker(socketio, router.tick, interval=flask_app.config.get('CLOCK_TICK_SEC', 1),
                             logger=flask_app.logger)
        # Tests drive ticks explicitly
        if not flask_app.config.get('TESTING'):
            ticker.start()
    flask_app.extensions['arena_ticker'] = ticker

    flask_app.logger.info(
        f"[arena] clock={'off' if router.clock is None else router.clock.remaining} "
        f"teams={router.players.team_policy} increment={router.score_increment}"
    )
    return flask_app
