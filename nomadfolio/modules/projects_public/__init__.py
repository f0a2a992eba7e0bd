"""
Projects Public Module
======================

Unauthenticated portfolio listing.
"""

from flask import Blueprint

projects_public_bp = Blueprint('projects', __name__)

from . import routes

__all__ = ['projects_public_bp']
