from flask import g, jsonify, request

from . import profile_bp
from ...core.errors import APIError, InternalError
from ...core.kv_store import get_kv_store, profile_key
from ...core.logging_service import LoggingService
from ..auth.utils import require_user
from .models import clean_profile_updates, default_profile, merge_profile


@profile_bp.route('/profile', methods=['GET'])
@require_user
def get_profile():
    """Get the caller's profile"""
    try:
        profile = get_kv_store().get(profile_key(g.current_user['id']))
        return jsonify({'profile': profile or default_profile(g.current_user)})
    except APIError:
        raise
    except Exception as e:
        LoggingService.log_error_with_traceback('profile', e, {'operation': 'get_profile'})
        raise InternalError('Failed to get profile')


@profile_bp.route('/profile', methods=['PUT'])
@require_user
def update_profile():
    """Merge partial fields into the stored profile (last write wins)"""
    updates = clean_profile_updates(request.get_json(silent=True))
    user = g.current_user

    try:
        store = get_kv_store()
        key = profile_key(user['id'])
        profile = merge_profile(store.get(key), updates, user)
        store.set(key, profile)

        LoggingService.log_user_action('profile', 'update_profile', user_id=user['id'],
                                       details={'fields': sorted(updates)})
        return jsonify({'success': True, 'profile': profile})
    except APIError:
        raise
    except Exception as e:
        LoggingService.log_error_with_traceback('profile', e, {'operation': 'update_profile'})
        raise InternalError('Failed to update profile')
