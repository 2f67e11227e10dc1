"""Authenticated request pipeline.

Every state-changing endpoint runs through here: resolve the account,
check the presented token, rotate it, then run the domain handler. The
response always carries the rotated token unless authentication itself
failed, so clients must adopt ``accessToken`` from every such response.

Wire format::

    request:  {"id": ..., "token": ..., "data": {...}}
    response: {"authError": bool, "authErrorString"?: str,
               "accessToken"?: str, "successful"?: bool, "data"?: any}
"""
from dataclasses import dataclass
from functools import wraps
from typing import Any, Callable, Optional

from flask import current_app, jsonify, request

from leaderboard.models import Player
from leaderboard.services.results import Outcome
from .credentials import find_player_by_id
from .tokens import rotate_token, tokens_match

Handler = Callable[[Player, dict], Outcome]

UUID_MISSING = 'uuid missing'
TOKEN_MISSING = 'token missing'
UUID_INVALID = 'uuid invalid'
TOKEN_INVALID = 'token invalid'
ROTATION_FAILED = 'token rotation failed'


class AuthError(Exception):
    """Authentication failed before any side effect took place."""


@dataclass
class AuthEnvelope:
    auth_error: bool
    auth_error_string: Optional[str] = None
    access_token: Optional[str] = None
    successful: Optional[bool] = None
    data: Any = None

    def to_dict(self) -> dict:
        if self.auth_error:
            return {'authError': True, 'authErrorString': self.auth_error_string}
        payload = {
            'authError': False,
            'accessToken': self.access_token,
            'successful': self.successful,
        }
        if self.successful:
            payload['data'] = self.data
        return payload


def _authenticate(account_id, presented_token) -> tuple:
    if account_id is None or account_id == '':
        raise AuthError(UUID_MISSING)
    if presented_token is None or presented_token == '':
        raise AuthError(TOKEN_MISSING)

    player = find_player_by_id(account_id)
    if player is None:
        raise AuthError(UUID_INVALID)
    if not tokens_match(player, presented_token):
        raise AuthError(TOKEN_INVALID)

    new_token = rotate_token(player, expected=presented_token)
    if new_token is None:
        # Either another request consumed the token first or the write failed;
        # tell them apart by whether the stored token still matches.
        current = find_player_by_id(account_id)
        if current is not None and tokens_match(current, presented_token):
            raise AuthError(ROTATION_FAILED)
        raise AuthError(TOKEN_INVALID)
    return player, new_token


def process_auth_request(account_id, presented_token, payload, handler: Handler) -> AuthEnvelope:
    try:
        player, new_token = _authenticate(account_id, presented_token)
    except AuthError as exc:
        current_app.logger.info(f"[auth-reject] reason={exc}")
        return AuthEnvelope(auth_error=True, auth_error_string=str(exc))

    data = payload if isinstance(payload, dict) else {}
    outcome = handler(player, data)
    return AuthEnvelope(
        auth_error=False,
        access_token=new_token,
        successful=outcome.ok,
        data=outcome.value if outcome.ok else None,
    )


def auth_request(handler: Handler):
    """Turn ``handler(player, data) -> Outcome`` into a JSON view behind the pipeline."""
    @wraps(handler)
    def view():
        body = request.get_json(silent=True)
        if not isinstance(body, dict):
            body = {}
        envelope = process_auth_request(body.get('id'), body.get('token'), body.get('data'), handler)
        return jsonify(envelope.to_dict())
    return view
