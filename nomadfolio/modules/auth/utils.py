from functools import wraps

from flask import g, request

from ...core.config import get_config_value
from ...core.errors import AuthError
from ...core.logging_service import LoggingService
from .identity import get_identity_provider


def bearer_token():
    """Token from 'Authorization: Bearer <token>', or None"""
    header = request.headers.get('Authorization', '')
    parts = header.split(' ', 1)
    if len(parts) != 2 or parts[0].lower() != 'bearer' or not parts[1].strip():
        return None
    return parts[1].strip()


def current_user_from_request():
    """Resolve the caller via the identity provider, raising AuthError"""
    token = bearer_token()
    if not token or token == get_config_value('PUBLIC_ANON_KEY'):
        LoggingService.log_security_event('Request without user token', {'path': request.path})
        raise AuthError('Unauthorized')

    try:
        user = get_identity_provider().get_user(token)
    except AuthError:
        LoggingService.log_security_event('Rejected bearer token', {'path': request.path})
        raise
    return user


def require_user(f):
    """Decorator to require a valid bearer token; sets g.current_user"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        g.current_user = current_user_from_request()
        return f(*args, **kwargs)
    return decorated_function
