from flask import Flask, current_app
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()
socketio = SocketIO(async_mode=None)


def get_lifecycle():
    """The GameLifecycle attached to the running app."""
    return current_app.extensions['gridge']


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    allowed_origins = flask_app.config.get('CORS_ORIGINS', [])
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # The engine gets an explicit store handle bound to this app's session
    from gridge.services.games.lifecycle import GameLifecycle
    from gridge.services.games.store import SessionStore
    flask_app.extensions['gridge'] = GameLifecycle(
        SessionStore(db.session, logger=flask_app.logger),
        leaderboard_limit=int(flask_app.config.get('LEADERBOARD_LIMIT', 3)),
        efficiency_decimals=int(flask_app.config.get('EFFICIENCY_DECIMALS', 2)),
    )

    # Import and register blueprints here
    from gridge.main import main
    flask_app.register_blueprint(main)

    from gridge.api.games import games
    flask_app.register_blueprint(games, url_prefix='/api/games')

    from gridge.api.players import players
    flask_app.register_blueprint(players, url_prefix='/api')

    from gridge.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    @click.command('db-reset')
    def db_reset_command():
        """Drops, recreates, and seeds the database."""
        from gridge.models import Player
        with flask_app.app_context():
            db.drop_all()
            db.create_all()

            # Seed players
            for name in ['alice', 'bob', 'carol']:
                db.session.add(Player(name=name))

            db.session.commit()
            print('Database has been reset and seeded!')

    flask_app.cli.add_command(db_reset_command)

    from gridge.simulation import simulate_command
    flask_app.cli.add_command(simulate_command)

    return flask_app
