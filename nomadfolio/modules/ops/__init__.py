"""
Ops Module
==========

Public /health endpoint for uptime monitors (no auth).
"""

from flask import Blueprint

ops_health_bp = Blueprint('ops_health', __name__)

from . import routes

__all__ = ['ops_health_bp']
