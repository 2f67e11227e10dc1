from flask import Blueprint, current_app, jsonify, request

from leaderboard.services.achievements import award_achievement, get_achievements
from leaderboard.services.auth.pipeline import auth_request
from leaderboard.services.modes import Timeframe
from leaderboard.services.results import ErrorKind, Outcome
from leaderboard.services.scores import ScoreNugget, player_scores, set_score, top_scores

leaderboard = Blueprint('leaderboard', __name__)


@leaderboard.route('/scores', methods=['GET'])
def get_scores():
    mode = request.args.get('mode')
    limit = request.args.get('limit', current_app.config.get('LEADERBOARD_DEFAULT_LIMIT', 50), type=int)
    legit = request.args.get('legit', 0, type=int)
    timeframe = Timeframe.parse(request.args.get('timeframe'))

    scores = []
    if mode and limit:
        scores = top_scores(mode, limit, timeframe=timeframe, include_verified=bool(legit))
    return jsonify({'scores': [s.to_dict() for s in scores]})


@leaderboard.route('/score', methods=['POST'])
@auth_request
def submit_score(player, data):
    nugget = ScoreNugget.from_payload(data)
    if nugget is None or 'mode' not in data:
        return Outcome.failure(ErrorKind.REJECTED)
    return set_score(player, data['mode'], nugget)


@leaderboard.route('/playerScores', methods=['GET'])
def get_player_scores():
    username = request.args.get('username')
    scores = player_scores(username) if username else []
    return jsonify({'scores': [s.to_dict() for s in scores]})


@leaderboard.route('/playerAchievements', methods=['GET'])
def get_player_achievements():
    username = request.args.get('username')
    achievements = get_achievements(username) if username else None
    return jsonify({'achievements': achievements or []})


@leaderboard.route('/addAchievement', methods=['POST'])
@auth_request
def add_achievement(player, data):
    return award_achievement(player, data.get('achievement'))
