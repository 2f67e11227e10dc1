from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_bcrypt import Bcrypt
from flask_cors import CORS
from flask_migrate import Migrate
import click
from config import Config

db = SQLAlchemy()
bcrypt = Bcrypt()
migrate = Migrate()


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    db.init_app(flask_app)
    bcrypt.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, origins=flask_app.config.get('CORS_ORIGINS', '*'))

    # Import and register blueprints here
    from leaderboard.api.accounts import accounts
    flask_app.register_blueprint(accounts)

    from leaderboard.api.leaderboard import leaderboard
    flask_app.register_blueprint(leaderboard)

    @flask_app.errorhandler(404)
    def not_found(_exc):
        return jsonify({'error': 'Not found'}), 404

    @flask_app.errorhandler(405)
    def method_not_allowed(_exc):
        return jsonify({'error': 'Method not allowed'}), 405

    @click.command('db-reset')
    def db_reset_command():
        """Drops, recreates, and seeds the database."""
        from leaderboard.services.auth.credentials import create_player
        with flask_app.app_context():
            db.drop_all()
            db.create_all()

            # Seed players
            for username in ['testuser1', 'testuser2', 'testuser3']:
                create_player(username, 'password')

            print('Database has been reset and seeded!')

    flask_app.cli.add_command(db_reset_command)

    return flask_app
