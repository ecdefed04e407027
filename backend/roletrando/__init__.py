from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()
# Handle each connection's events inline and in arrival order
socketio = SocketIO(async_mode=None, async_handlers=False)

def create_app(config_class=Config, ranking=None, words=None):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = flask_app.config.get('CORS_ORIGINS') or []

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # Shared ranking store and word bank, handed to every session
    from roletrando.services import init_services
    init_services(flask_app, ranking=ranking, words=words)

    from roletrando.main import main
    flask_app.register_blueprint(main)

    from roletrando.api.ranking import ranking_api
    flask_app.register_blueprint(ranking_api, url_prefix='/api/ranking')

    from roletrando.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    @click.command('seed-words')
    @click.argument('path', required=False)
    def seed_words_command(path):
        """Loads word/tip pairs from a JSON file into the database."""
        from roletrando.words import load_word_file
        added = seed_words(load_word_file(path or flask_app.config['WORDS_SEED_FILE']))
        print(f'{added} words added.')

    @click.command('db-reset')
    def db_reset_command():
        """Drops, recreates, and seeds the database."""
        from roletrando.words import load_word_file
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            added = seed_words(load_word_file(flask_app.config['WORDS_SEED_FILE']))
            print(f'Database has been reset and seeded with {added} words!')

    flask_app.cli.add_command(seed_words_command)
    flask_app.cli.add_command(db_reset_command)

    return flask_app


def seed_words(pairs):
    """Insert word/tip pairs not already stored. Returns how many were added."""
    from roletrando.models import Word
    known = {w.word for w in Word.query.all()}
    added = 0
    for word, tip in pairs:
        if word in known:
            continue
        db.session.add(Word(word=word, tip=tip))
        known.add(word)
        added += 1
    db.session.commit()
    return added
