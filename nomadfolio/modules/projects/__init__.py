"""
Projects Admin Module
=====================

Owner-scoped project management for the portfolio.

Provides:
- GET /projects -- the caller's projects
- POST /projects -- create a project
- PUT /projects/<id> -- partial update
- DELETE /projects/<id> -- idempotent delete
"""

from flask import Blueprint

projects_bp = Blueprint('projects_admin', __name__)

from . import routes

__all__ = ['projects_bp']
