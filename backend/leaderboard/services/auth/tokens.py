"""Access token generation, comparison and rotation.

Each account holds exactly one live token. Rotation replaces it in a single
conditional UPDATE so two requests racing on the same token cannot both
succeed.
"""
import hmac
import secrets
from typing import Optional

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from leaderboard import db
from leaderboard.models import Player


def generate_token() -> str:
    nbytes = int(current_app.config.get('ACCESS_TOKEN_BYTES', 24))
    return secrets.token_hex(nbytes)


def tokens_match(player: Player, presented) -> bool:
    if not isinstance(presented, str) or not player.access_token:
        return False
    try:
        presented_bytes = presented.encode('utf-8')
    except UnicodeEncodeError:
        return False
    return hmac.compare_digest(player.access_token.encode('utf-8'), presented_bytes)


def rotate_token(player: Player, expected: Optional[str] = None) -> Optional[str]:
    """Persist a fresh token for *player* and return it.

    With *expected* set, the write only lands if the stored token still
    equals it; otherwise (token already consumed) None is returned. Storage
    errors also return None.
    """
    player_id = player.id
    new_token = generate_token()
    query = Player.query.filter_by(id=player_id)
    if expected is not None:
        query = query.filter_by(access_token=expected)
    try:
        updated = query.update({'access_token': new_token}, synchronize_session=False)
        if not updated:
            db.session.rollback()
            current_app.logger.info(f"[rotate-conflict] player={player_id}")
            return None
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception(f"[storage] token rotation failed player={player_id}")
        return None
    return new_token
