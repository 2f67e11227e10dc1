import json
from typing import List, Optional

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from leaderboard import db
from leaderboard.models import Player
from .auth.credentials import find_player
from .pranks import is_pranked
from .results import ErrorKind, Outcome


def get_achievements(username) -> Optional[List[str]]:
    player = find_player(username)
    if player is None:
        return None
    return player.achievement_ids


def award_achievement(player: Player, achievement_id) -> Outcome:
    """Append *achievement_id* to the player's set unless already there.

    The write is conditional on the previously stored set, so concurrent
    awards cannot drop each other's entries.
    """
    if not isinstance(achievement_id, str) or not achievement_id:
        return Outcome.failure(ErrorKind.REJECTED)

    player_id, username = player.id, player.username
    previous = player.achievements
    achievements = player.achievement_ids
    if achievement_id in achievements:
        return Outcome.failure(ErrorKind.REJECTED)

    achievements.append(achievement_id)
    if is_pranked(username):
        achievements = []

    try:
        updated = Player.query.filter_by(id=player_id, achievements=previous).update(
            {'achievements': json.dumps(achievements)},
            synchronize_session=False,
        )
        if not updated:
            db.session.rollback()
            current_app.logger.info(f"[achievement] conflict player={player_id}")
            return Outcome.failure(ErrorKind.CONFLICT)
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("[storage] achievement write failed")
        return Outcome.failure(ErrorKind.STORAGE)

    current_app.logger.info(f"[achievement] player={player_id} awarded={achievement_id}")
    return Outcome.success(True)
