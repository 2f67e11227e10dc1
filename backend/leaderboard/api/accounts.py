from flask import Blueprint, current_app, jsonify, request

from leaderboard.services.auth.credentials import (
    USERNAME_MAX_LENGTH,
    check_password,
    create_player,
    find_player,
    is_valid_username,
)
from leaderboard.services.auth.pipeline import auth_request
from leaderboard.services.auth.tokens import rotate_token
from leaderboard.services.results import ErrorKind, Outcome

accounts = Blueprint('accounts', __name__)


def _credentials_response(successful, player_id='', access_token=''):
    return jsonify({
        'successful': successful,
        'id': player_id,
        'accessToken': access_token,
    })


@accounts.route('/usernameAvailable', methods=['GET'])
def username_available():
    username = request.args.get('username')
    available = is_valid_username(username) and find_player(username) is None
    return jsonify({'available': available})


@accounts.route('/userRegister', methods=['POST'])
def register():
    data = request.get_json(silent=True) or {}
    username = data.get('username')
    password = data.get('password')
    if not is_valid_username(username) or find_player(username) is not None:
        return _credentials_response(False)

    player = create_player(username, password)
    if player is None:
        return _credentials_response(False)
    return _credentials_response(True, player.id, player.access_token)


@accounts.route('/userLogin', methods=['POST'])
def login():
    data = request.get_json(silent=True) or {}
    username = data.get('username')
    password = data.get('password')
    if not isinstance(username, str) or len(username) > USERNAME_MAX_LENGTH:
        return _credentials_response(False)

    player = find_player(username)
    if player is None or not check_password(player, password):
        current_app.logger.info(f"[login] rejected username={username}")
        return _credentials_response(False)

    access_token = rotate_token(player)
    if access_token is None:
        return _credentials_response(False)
    current_app.logger.info(f"[login] player={player.id}")
    return _credentials_response(True, player.id, access_token)


@accounts.route('/userLogout', methods=['POST'])
@auth_request
def logout(player, data):
    # Burn the token the pipeline just issued so no live token leaves the server
    if rotate_token(player) is None:
        return Outcome.failure(ErrorKind.STORAGE)
    return Outcome.success(True)
