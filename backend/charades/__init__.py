from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from flask_cors import CORS
from flask_migrate import Migrate
import click
from config import Config

db = SQLAlchemy()
login_manager = LoginManager()
migrate = Migrate()
allowed_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:5174",
    "http://127.0.0.1:5174",
]

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    db.init_app(flask_app)
    login_manager.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Import and register blueprints here
    from charades.routes import main
    flask_app.register_blueprint(main)

    from charades.api.auth import auth
    flask_app.register_blueprint(auth, url_prefix='/api/auth')

    from charades.api.games import games
    flask_app.register_blueprint(games, url_prefix='/api/games')

    from charades.api.words import words
    flask_app.register_blueprint(words, url_prefix='/api/words')

    # Flask-Login user loader
    from charades.models import User

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({'error': 'Not authenticated'}), 401

    @click.command('db-reset')
    def db_reset_command():
        """Drops, recreates, and seeds the database."""
        from charades.models import User
        from charades.services.games.words import add_words, DEFAULT_WORDS
        with flask_app.app_context():
            db.drop_all()
            db.create_all()

            # Seed users
            users = ['testuser1', 'testuser2', 'testuser3']
            for u in users:
                db.session.add(User(username=u))
            db.session.add(User(username='admin', is_admin=True))
            db.session.commit()

            added = add_words(DEFAULT_WORDS)
            print(f'Database has been reset and seeded with {len(added)} words!')

    @click.command('seed-words')
    @click.argument('extra', nargs=-1)
    def seed_words_command(extra):
        """Adds the default word catalog plus any EXTRA words."""
        from charades.services.games.words import add_words, DEFAULT_WORDS
        with flask_app.app_context():
            added = add_words(list(DEFAULT_WORDS) + list(extra))
            print(f'Added {len(added)} new words.')

    flask_app.cli.add_command(db_reset_command)
    flask_app.cli.add_command(seed_words_command)

    return flask_app
