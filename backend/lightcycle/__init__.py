from flask import Flask, current_app
from flask_cors import CORS
from flask_socketio import SocketIO
import click
from config import Config

from lightcycle.grid import cells_across
from lightcycle.services.match import MatchState
from lightcycle.services.scheduler import TickScheduler, tick_period
from lightcycle.services.session import SessionController

socketio = SocketIO(async_mode=None)


def _allowed_origins(raw):
    if not raw or raw.strip() == '*':
        return '*'
    return [origin.strip() for origin in raw.split(',') if origin.strip()]


def _validate_geometry(config) -> None:
    width, height, cell = config['BOARD_WIDTH'], config['BOARD_HEIGHT'], config['CELL_SIZE']
    if min(width, height, cell) <= 0:
        raise ValueError(f"board geometry must be positive: {width}x{height} cell={cell}")
    if width % cell or height % cell:
        raise ValueError(f"board {width}x{height} is not a multiple of cell size {cell}")
    if config['TICKS_PER_SECOND'] <= 0:
        raise ValueError(f"tick rate must be positive: {config['TICKS_PER_SECOND']}")


def get_controller(flask_app=None) -> SessionController:
    return (flask_app or current_app).extensions['lightcycle']


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    _validate_geometry(flask_app.config)

    allowed_origins = _allowed_origins(flask_app.config.get('CORS_ORIGINS'))
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    match = MatchState(
        flask_app.config['BOARD_WIDTH'],
        flask_app.config['BOARD_HEIGHT'],
        flask_app.config['CELL_SIZE'],
        start_trail_capacity=flask_app.config.get('START_TRAIL_CAPACITY', 3),
    )
    controller = SessionController(match, logger=flask_app.logger)
    flask_app.extensions['lightcycle'] = controller

    from lightcycle.routes import main
    flask_app.register_blueprint(main)

    # Register Socket.IO event handlers and route controller output to them
    from lightcycle.socketio_events import register_socketio_handlers, socket_emitter
    namespace = flask_app.config.get('SOCKETIO_NAMESPACE', '/')
    register_socketio_handlers(namespace)
    controller.bind(socket_emitter(namespace))

    scheduler = TickScheduler(
        controller,
        tick_period(flask_app.config['TICKS_PER_SECOND']),
        flask_app.logger,
        heartbeat_sec=int(flask_app.config.get('TICK_HEARTBEAT_SEC', 0)),
    )
    flask_app.extensions['lightcycle_scheduler'] = scheduler
    # Tests drive ticks by hand
    if not flask_app.config.get('TESTING'):
        scheduler.start(socketio)

    @click.command('board')
    def board_command():
        """Prints the board geometry and tick cadence."""
        cfg = flask_app.config
        click.echo(
            f"board {cfg['BOARD_WIDTH']}x{cfg['BOARD_HEIGHT']} "
            f"cell={cfg['CELL_SIZE']} "
            f"cells={cells_across(cfg['BOARD_WIDTH'], cfg['CELL_SIZE'])}x{cells_across(cfg['BOARD_HEIGHT'], cfg['CELL_SIZE'])} "
            f"tick={scheduler.period * 1000:.0f}ms"
        )

    flask_app.cli.add_command(board_command)

    return flask_app
