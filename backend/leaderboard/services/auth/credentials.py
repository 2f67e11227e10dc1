import re
from typing import Optional

from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from leaderboard import db, bcrypt
from leaderboard.models import Player
from .tokens import generate_token

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 20
_USERNAME_RE = re.compile(r'^[A-Za-z0-9_]+$')


def is_valid_username(username) -> bool:
    return (
        isinstance(username, str)
        and USERNAME_MIN_LENGTH <= len(username) <= USERNAME_MAX_LENGTH
        and _USERNAME_RE.match(username) is not None
    )


def _encodable(value) -> bool:
    """Lone surrogates are valid JSON but cannot be bound as database strings."""
    if not isinstance(value, str):
        return False
    try:
        value.encode('utf-8')
    except UnicodeEncodeError:
        return False
    return True


def find_player(username) -> Optional[Player]:
    if not _encodable(username):
        return None
    try:
        return Player.query.filter_by(username=username).first()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("[storage] player lookup by name failed")
        return None


def find_player_by_id(player_id) -> Optional[Player]:
    if not _encodable(player_id):
        return None
    try:
        return db.session.get(Player, player_id)
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("[storage] player lookup by id failed")
        return None


def create_player(username, password) -> Optional[Player]:
    """Store a new account with a hashed password and a first access token."""
    if not is_valid_username(username) or not isinstance(password, str) or not password:
        return None
    try:
        password_hash = bcrypt.generate_password_hash(password).decode('utf-8')
    except ValueError:
        # bcrypt refuses some inputs (e.g. over 72 bytes)
        return None
    player = Player(username=username, password_hash=password_hash, access_token=generate_token())
    try:
        db.session.add(player)
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        current_app.logger.info(f"[register] username taken concurrently username={username}")
        return None
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("[storage] player creation failed")
        return None
    current_app.logger.info(f"[register] player={player.id} username={username}")
    return player


def check_password(player: Player, password) -> bool:
    if not isinstance(password, str) or not password:
        return False
    try:
        return bcrypt.check_password_hash(player.password_hash, password)
    except ValueError:
        return False
