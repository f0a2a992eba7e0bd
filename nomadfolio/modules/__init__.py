"""
Nomadfolio Modules
==================

Flask blueprints making up the portfolio API.
"""

__all__ = ['auth', 'ops', 'profile', 'projects', 'projects_public']
