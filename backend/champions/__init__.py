import logging

from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_bcrypt import Bcrypt
from flask_login import LoginManager
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
bcrypt = Bcrypt()
login_manager = LoginManager()
migrate = Migrate()
socketio = SocketIO(async_mode=None)

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(getattr(logging, str(flask_app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO))

    allowed_origins = flask_app.config.get('CORS_ORIGINS', [])
    db.init_app(flask_app)
    bcrypt.init_app(flask_app)
    login_manager.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from champions.identity import load_identity
    flask_app.before_request(load_identity)

    from champions.main import main
    flask_app.register_blueprint(main, url_prefix='/api')

    from champions.api.sessions import sessions
    from champions.api.words import words
    from champions.api.leaderboard import leaderboard
    from champions.api.word_lists import word_lists
    from champions.api.achievements import achievements
    from champions.api.challenges import challenges
    from champions.api.shop import shop
    from champions.api.reports import reports
    from champions.api.stats import stats
    flask_app.register_blueprint(sessions, url_prefix='/api/sessions')
    flask_app.register_blueprint(words, url_prefix='/api/words')
    flask_app.register_blueprint(leaderboard, url_prefix='/api/leaderboard')
    flask_app.register_blueprint(word_lists, url_prefix='/api/word-lists')
    flask_app.register_blueprint(achievements, url_prefix='/api/achievements')
    flask_app.register_blueprint(challenges, url_prefix='/api/challenges')
    flask_app.register_blueprint(shop, url_prefix='/api/user-items')
    flask_app.register_blueprint(reports, url_prefix='/api/flagged-words')
    flask_app.register_blueprint(stats, url_prefix='/api')

    from champions.errors import register_error_handlers
    register_error_handlers(flask_app)

    from champions.socketio_events import register_socketio_handlers
    register_socketio_handlers()

    # Flask-Login user loader
    from champions.models import User

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({'error': 'Authentication required'}), 401

    @click.command('db-reset')
    def db_reset_command():
        """Drops, recreates, and seeds the database."""
        from champions.models import User, Word, WordList
        with flask_app.app_context():
            db.drop_all()
            db.create_all()

            # Seed users
            users = ['testuser1', 'testuser2', 'testuser3']
            for u in users:
                user = User(username=u)
                user.set_password('password')
                db.session.add(user)
            db.session.flush()

            seed_words = {
                'easy': ['cat', 'dog', 'sun', 'hat', 'pig', 'run'],
                'medium': ['garden', 'pencil', 'window', 'rabbit', 'basket', 'yellow'],
                'hard': ['necessary', 'rhythm', 'separate', 'conscience', 'privilege', 'occurrence'],
            }
            for difficulty, entries in seed_words.items():
                for text in entries:
                    db.session.add(Word(word=text, difficulty=difficulty))

            owner = User.query.filter_by(username='testuser1').first()
            db.session.add(WordList(
                user_id=owner.id,
                name='Starter Words',
                words=seed_words['medium'],
                visibility='public',
                grade_level='2',
            ))

            db.session.commit()
            print('Database has been reset and seeded!')

    flask_app.cli.add_command(db_reset_command)

    return flask_app
