from flask import current_app


def is_pranked(username) -> bool:
    """Accounts listed in PRANKED_USERNAMES lose achievements and get scrambled scores."""
    return username in current_app.config.get('PRANKED_USERNAMES', ())
