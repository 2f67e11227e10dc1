from .pipeline import AuthEnvelope, AuthError, auth_request, process_auth_request
from .tokens import generate_token, rotate_token, tokens_match

__all__ = [
    'AuthEnvelope',
    'AuthError',
    'auth_request',
    'process_auth_request',
    'generate_token',
    'rotate_token',
    'tokens_match',
]
