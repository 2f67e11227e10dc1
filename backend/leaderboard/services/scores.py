"""Score integrity rules and leaderboard queries.

A submission is accepted only as the opening value (0 or 1) or as exactly
one step above the stored score. Updates are compare-and-swap on the
expected current score, so two racing submissions cannot both apply the
same step.
"""
import time
from dataclasses import dataclass
from typing import List, Optional

from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from leaderboard import db
from leaderboard.models import Player, Score
from .auth.credentials import find_player
from .modes import GameMode, Timeframe
from .pranks import is_pranked
from .results import ErrorKind, Outcome

MAX_SCORE = 999_999
OPENING_SCORES = (0, 1)
PRANK_SCORE = -10
# Upper bound of the 32-bit Integer column
MAX_DEATH_COUNT = 2**31 - 1


def _now_ms() -> int:
    return int(time.time() * 1000)


def _as_int(value) -> int:
    if isinstance(value, bool):
        raise ValueError('booleans are not scores')
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError('fractional value')
        return int(value)
    return int(value)


@dataclass(frozen=True)
class ScoreNugget:
    score: int
    death_count: int

    @classmethod
    def from_payload(cls, data) -> Optional['ScoreNugget']:
        if not isinstance(data, dict) or 'score' not in data or 'deathCount' not in data:
            return None
        try:
            score = _as_int(data['score'])
            death_count = _as_int(data['deathCount'])
        except (TypeError, ValueError):
            return None
        if death_count < 0 or death_count > MAX_DEATH_COUNT:
            return None
        return cls(score=score, death_count=death_count)


def verify_score(current: Optional[Score], nugget: ScoreNugget, max_score: int = MAX_SCORE) -> bool:
    if nugget.score < 0 or nugget.score > max_score:
        return False
    if current is None:
        return nugget.score in OPENING_SCORES
    return nugget.score == current.score + 1


def get_player_score(player: Player, mode) -> Optional[Score]:
    game_mode = GameMode.parse(mode)
    if game_mode is None:
        return None
    try:
        return Score.query.filter_by(player_id=player.id, game_mode=game_mode.value).first()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("[storage] score lookup failed")
        return None


def set_score(player: Player, mode, nugget: ScoreNugget) -> Outcome:
    """Validate *nugget* against the stored record and insert or advance it."""
    player_id, username = player.id, player.username
    game_mode = GameMode.parse(mode)
    if game_mode is None:
        current_app.logger.info(f"[score-reject] player={player_id} unknown mode={mode!r}")
        return Outcome.failure(ErrorKind.REJECTED)

    try:
        current = Score.query.filter_by(player_id=player_id, game_mode=game_mode.value).first()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("[storage] score lookup failed")
        return Outcome.failure(ErrorKind.STORAGE)

    max_score = int(current_app.config.get('MAX_SCORE', MAX_SCORE))
    if not verify_score(current, nugget, max_score=max_score):
        current_app.logger.info(
            f"[score-reject] player={player_id} mode={game_mode.value} "
            f"current={current.score if current else None} submitted={nugget.score}"
        )
        return Outcome.failure(ErrorKind.REJECTED)

    now = _now_ms()
    try:
        if current is None:
            db.session.add(Score(
                player_id=player_id,
                game_mode=game_mode.value,
                score=nugget.score,
                death_count=nugget.death_count,
                timestamp=now,
            ))
        else:
            new_score = PRANK_SCORE if is_pranked(username) else nugget.score
            updated = Score.query.filter_by(id=current.id, score=current.score).update(
                {'score': new_score, 'death_count': nugget.death_count, 'timestamp': now},
                synchronize_session=False,
            )
            if not updated:
                db.session.rollback()
                current_app.logger.info(f"[score-conflict] player={player_id} mode={game_mode.value}")
                return Outcome.failure(ErrorKind.CONFLICT)
        db.session.commit()
    except IntegrityError:
        # Another request inserted the opening record first
        db.session.rollback()
        current_app.logger.info(f"[score-conflict] player={player_id} mode={game_mode.value} duplicate insert")
        return Outcome.failure(ErrorKind.CONFLICT)
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("[storage] score write failed")
        return Outcome.failure(ErrorKind.STORAGE)
    except OverflowError:
        db.session.rollback()
        current_app.logger.exception("[storage] score value out of column range")
        return Outcome.failure(ErrorKind.STORAGE)

    current_app.logger.info(f"[score-accept] player={player_id} mode={game_mode.value} score={nugget.score}")
    return Outcome.success(True)


def top_scores(mode, limit: int, timeframe=Timeframe.ALL, include_verified: bool = False) -> List[Score]:
    """Best records for *mode*, highest first; equal scores rank the earlier update first."""
    game_mode = GameMode.parse(mode)
    if game_mode is None or limit is None or limit <= 0:
        return []
    limit = min(limit, int(current_app.config.get('LEADERBOARD_MAX_LIMIT', 100)))

    query = Score.query.filter_by(game_mode=game_mode.value)
    if not include_verified:
        query = query.filter(Score.verified == 0)
    window = Timeframe.parse(timeframe).window_ms
    if window is not None:
        query = query.filter(Score.timestamp > _now_ms() - window)
    try:
        return query.order_by(Score.score.desc(), Score.timestamp.asc(), Score.id.asc()).limit(limit).all()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("[storage] leaderboard query failed")
        return []


def player_scores(username) -> List[Score]:
    player = find_player(username)
    if player is None:
        return []
    try:
        return player.scores.order_by(Score.game_mode.asc()).all()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("[storage] player scores query failed")
        return []
