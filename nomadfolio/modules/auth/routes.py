"""
Auth Routes
===========

Account creation and sign-in against the configured identity provider.
"""

import logging

from flask import jsonify, request

from . import auth_bp
from ...core.config import get_config_value
from ...core.errors import APIError, InternalError, ValidationError
from ...core.kv_store import get_kv_store, profile_key
from ...core.logging_service import LoggingService
from ..profile.models import new_profile
from .identity import get_identity_provider
from .utils import require_user, bearer_token

logger = logging.getLogger(__name__)


def _json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    return data


def _string_fields(data, names, message):
    """Values for names ('' when absent); any non-string value is rejected"""
    values = [data.get(name) or '' for name in names]
    if not all(isinstance(value, str) for value in values):
        raise ValidationError(message)
    return values


@auth_bp.route('/signup', methods=['POST'])
def signup():
    """Create the owner account, then initialise its profile"""
    data = _json_body()
    email, password, name = _string_fields(
        data, ('email', 'password', 'name'), 'Email, password and name must be strings'
    )
    email, name = email.strip(), name.strip()

    if not all([email, password, name]):
        raise ValidationError('Email, password and name are required')

    try:
        user = get_identity_provider().create_user(email, password, name)

        store = get_kv_store()
        store.set(profile_key(user['id']), new_profile(
            user['id'], name, user.get('email', email), get_config_value('DEFAULT_BIO')
        ))

        LoggingService.log_user_action('auth', 'signup', user_id=user['id'])
        return jsonify({'success': True, 'user': user})
    except APIError as e:
        logger.info(f"Sign up rejected: {e.message}")
        raise
    except Exception as e:
        LoggingService.log_error_with_traceback('auth', e, {'operation': 'signup'})
        raise InternalError('Failed to sign up')


@auth_bp.route('/signin', methods=['POST'])
def signin():
    """Exchange email/password for an access token"""
    data = _json_body()
    email, password = _string_fields(data, ('email', 'password'), 'Email and password must be strings')
    email = email.strip()

    if not email or not password:
        raise ValidationError('Email and password are required')

    try:
        session = get_identity_provider().sign_in(email, password)
        LoggingService.log_user_action('auth', 'signin', user_id=session['user']['id'])
        return jsonify({'success': True, 'session': session})
    except APIError as e:
        LoggingService.log_security_event('Failed sign-in', {'email': email, 'reason': e.message})
        raise
    except Exception as e:
        LoggingService.log_error_with_traceback('auth', e, {'operation': 'signin'})
        raise InternalError('Failed to sign in')


@auth_bp.route('/signout', methods=['POST'])
@require_user
def signout():
    try:
        get_identity_provider().sign_out(bearer_token())
        return jsonify({'success': True})
    except APIError:
        raise
    except Exception as e:
        LoggingService.log_error_with_traceback('auth', e, {'operation': 'signout'})
        raise InternalError('Failed to sign out')
