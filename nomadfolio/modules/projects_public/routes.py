"""
Projects Public Routes
======================

GET /projects/public scans the whole projects: prefix, so every owner's
projects are listed. The site is a single-owner showcase; a second account
would have its projects exposed here too.
"""

from flask import jsonify

from . import projects_public_bp
from ...core.errors import InternalError
from ...core.kv_store import PUBLIC_PROJECTS_PREFIX, get_kv_store
from ...core.logging_service import LoggingService
from ..projects.models import newest_first


def get_public_projects_db():
    return newest_first(get_kv_store().get_by_prefix(PUBLIC_PROJECTS_PREFIX))


@projects_public_bp.route('/projects/public', methods=['GET'])
def get_public_projects():
    """Get all projects across all owners - public endpoint"""
    try:
        return jsonify({'projects': get_public_projects_db()})
    except Exception as e:
        LoggingService.log_error_with_traceback('projects_public', e)
        raise InternalError('Failed to get projects')
