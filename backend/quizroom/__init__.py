from flask import Flask, current_app
from flask_cors import CORS
from flask_socketio import SocketIO
import click
from quizroom.config import Config

socketio = SocketIO(async_mode=None)


def get_room_store():
    """The RoomStore owned by the current app."""
    return current_app.extensions['quizroom']


def create_app(config_class=Config, room_store=None):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    allowed_origins = flask_app.config.get('CORS_ORIGINS') or '*'
    if allowed_origins == ['*']:
        allowed_origins = '*'
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)
    namespace = flask_app.config.get('SOCKETIO_NAMESPACE', '/')

    # One registry per app, living as long as the process
    if room_store is None:
        from quizroom.broadcast import SocketIOGateway
        from quizroom.services.rooms.scheduler import BackgroundTaskScheduler
        from quizroom.services.rooms.store import RoomStore
        room_store = RoomStore(
            gateway=SocketIOGateway(socketio, namespace=namespace),
            scheduler=BackgroundTaskScheduler(
                socketio, heartbeat_sec=int(flask_app.config.get('TIMER_HEARTBEAT_SEC', 0))
            ),
            code_length=int(flask_app.config.get('ROOM_CODE_LENGTH', 8)),
        )
    flask_app.extensions['quizroom'] = room_store

    from quizroom.api.rooms import rooms
    flask_app.register_blueprint(rooms)

    # Register Socket.IO event handlers
    from quizroom.socketio_events import register_socketio_handlers
    register_socketio_handlers(namespace=namespace)

    @click.command('scoring-table')
    @click.option('--time-limit', type=int, required=True, help='Session length in seconds.')
    @click.option('--step', type=int, default=1, show_default=True, help='Elapsed-time step in seconds.')
    def scoring_table_command(time_limit, step):
        """Print the points a correct answer earns after each elapsed second."""
        from quizroom.services.rooms.scoring import score_answer
        if time_limit <= 0 or step <= 0:
            raise click.BadParameter('time-limit and step must be positive')
        click.echo('elapsed\tpoints')
        for elapsed in range(0, time_limit + 1, step):
            click.echo(f'{elapsed}\t{score_answer(0, time_limit, elapsed, True, True)}')

    flask_app.cli.add_command(scoring_table_command)

    return flask_app
