"""
Projects Admin Routes
=====================

Every handler validates the caller's bearer token, then performs exactly one
key-value operation under projects:<ownerId>:.
"""

from flask import g, jsonify, request

from . import projects_bp
from ...core.errors import APIError, InternalError, NotFoundError
from ...core.kv_store import get_kv_store, owner_projects_prefix, project_key
from ...core.logging_service import LoggingService
from ..auth.utils import require_user
from .models import clean_project_fields, merge_project, new_project, newest_first


# ===== Store Helper Functions =====

def get_owner_projects_db(owner_id):
    return newest_first(get_kv_store().get_by_prefix(owner_projects_prefix(owner_id)))


def create_project_db(owner_id, fields):
    project = new_project(owner_id, fields)
    get_kv_store().set(project_key(owner_id, project['id']), project)
    return project


def update_project_db(owner_id, project_id, updates):
    """Merge updates into an existing project; None if it doesn't exist"""
    store = get_kv_store()
    key = project_key(owner_id, project_id)
    existing = store.get(key)
    if not existing:
        return None

    project = merge_project(existing, updates)
    store.set(key, project)
    return project


def delete_project_db(owner_id, project_id):
    get_kv_store().delete(project_key(owner_id, project_id))


# ===== Routes =====

@projects_bp.route('/projects', methods=['GET'])
@require_user
def get_projects():
    """Get all projects owned by the caller"""
    try:
        return jsonify({'projects': get_owner_projects_db(g.current_user['id'])})
    except APIError:
        raise
    except Exception as e:
        LoggingService.log_error_with_traceback('projects', e, {'operation': 'list_own'})
        raise InternalError('Failed to get projects')


@projects_bp.route('/projects', methods=['POST'])
@require_user
def create_project():
    """Create new project"""
    fields = clean_project_fields(request.get_json(silent=True))

    try:
        project = create_project_db(g.current_user['id'], fields)
        LoggingService.log_user_action('projects', 'create_project', user_id=g.current_user['id'],
                                       details={'project_id': project['id']})
        return jsonify({'success': True, 'project': project})
    except APIError:
        raise
    except Exception as e:
        LoggingService.log_error_with_traceback('projects', e, {'operation': 'create'})
        raise InternalError('Failed to create project')


@projects_bp.route('/projects/<project_id>', methods=['PUT'])
@require_user
def update_project(project_id):
    """Update project"""
    updates = clean_project_fields(request.get_json(silent=True), partial=True)

    try:
        project = update_project_db(g.current_user['id'], project_id, updates)
    except APIError:
        raise
    except Exception as e:
        LoggingService.log_error_with_traceback('projects', e, {'operation': 'update', 'project_id': project_id})
        raise InternalError('Failed to update project')

    if project is None:
        raise NotFoundError('Project not found')
    return jsonify({'success': True, 'project': project})


@projects_bp.route('/projects/<project_id>', methods=['DELETE'])
@require_user
def delete_project(project_id):
    """Delete project; deleting a missing id is a no-op"""
    try:
        delete_project_db(g.current_user['id'], project_id)
        return jsonify({'success': True})
    except APIError:
        raise
    except Exception as e:
        LoggingService.log_error_with_traceback('projects', e, {'operation': 'delete', 'project_id': project_id})
        raise InternalError('Failed to delete project')
