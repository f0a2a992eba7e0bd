"""
Profile Module
==============

The owner's name/bio shown on the public site.

Provides:
- GET /profile -- stored profile, or one derived from identity claims
- PUT /profile -- merge a partial profile
"""

from flask import Blueprint

profile_bp = Blueprint('profile', __name__)

from . import routes

__all__ = ['profile_bp']
