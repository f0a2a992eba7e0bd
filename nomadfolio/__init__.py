"""
Nomadfolio - Portfolio site backend
===================================

A single-owner portfolio API built on Flask:
- Public project showcase
- Owner account, bearer-token sessions and profile
- Project create/edit/delete backed by a key-value store
- Python client, search/tag filtering and admin-entry state for front ends

Usage:
    from flask import Flask
    from nomadfolio import Nomadfolio

    app = Flask(__name__)
    Nomadfolio(app)   # every route mounted under app.config['API_PREFIX']
"""

__version__ = '0.1.0'

import os
import re
import logging

from flask import Flask, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from .core.config import Config
from .core.errors import APIError, InternalError
from .core.logging_service import LoggingService

logger = logging.getLogger(__name__)

# Keys copied from Config into app.config unless the app already set them
_CONFIG_KEYS = [
    'SECRET_KEY', 'DB_DIR', 'KV_DB', 'KV_TABLE', 'LOGS_DB', 'LOGS_TABLE', 'API_PREFIX',
    'IDENTITY_PROVIDER', 'IDENTITY_TIMEOUT', 'SESSION_TTL_HOURS',
    'SUPABASE_URL', 'SUPABASE_ANON_KEY', 'SUPABASE_SERVICE_ROLE_KEY',
    'PUBLIC_ANON_KEY', 'DEFAULT_BIO',
]


def _under_prefix(path, prefix):
    """True for the prefix itself and anything below it, not /apix for /api"""
    if not prefix:
        return True
    return path == prefix or path.startswith(prefix + '/')


class Nomadfolio:
    """Flask extension registering the portfolio API modules"""

    def __init__(self, app=None, config=None):
        self._config = config or {}
        self._registered = []
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        app.config.update(self._config)
        self._apply_defaults(app)
        self._setup_database_dir(app)

        prefix = app.config['API_PREFIX'].rstrip('/')
        CORS(app, resources={rf"{re.escape(prefix)}(/.*)?$": {
            'origins': '*',
            'send_wildcard': True,
            'allow_headers': ['Content-Type', 'Authorization'],
            'methods': ['GET', 'POST', 'PUT', 'DELETE', 'OPTIONS'],
            'expose_headers': ['Content-Length'],
            'max_age': 600,
        }})

        self._register_modules(app, prefix)
        self._register_error_handlers(app, prefix)
        self._register_request_logging(app, prefix)

        app.extensions['nomadfolio'] = self
        logger.info(f"Nomadfolio registered {len(self._registered)} modules under {prefix or '/'}")

    def get_registered_modules(self):
        return list(self._registered)

    @staticmethod
    def _apply_defaults(app):
        # Database files follow a DB_DIR set on the app unless given explicitly
        db_dir = app.config.get('DB_DIR')
        if db_dir:
            app.config.setdefault('KV_DB', os.path.join(db_dir, 'kv_store.db'))
            app.config.setdefault('LOGS_DB', os.path.join(db_dir, 'app_logs.db'))

        for key in _CONFIG_KEYS:
            if app.config.get(key) is None:
                app.config[key] = getattr(Config, key)

    @staticmethod
    def _setup_database_dir(app):
        os.makedirs(app.config['DB_DIR'], exist_ok=True)

    def _register_modules(self, app, prefix):
        from .modules.ops import ops_health_bp
        from .modules.auth import auth_bp
        from .modules.profile import profile_bp
        from .modules.projects_public import projects_public_bp
        from .modules.projects import projects_bp

        modules = [
            ('ops', ops_health_bp),
            ('auth', auth_bp),
            ('profile', profile_bp),
            # Public listing first so /projects/public never reaches /projects/<id>
            ('projects_public', projects_public_bp),
            ('projects', projects_bp),
        ]
        for name, blueprint in modules:
            app.register_blueprint(blueprint, url_prefix=prefix or None)
            self._registered.append(name)

    @staticmethod
    def _register_error_handlers(app, prefix):

        @app.errorhandler(APIError)
        def handle_api_error(error):
            return jsonify(error.to_dict()), error.status_code

        @app.errorhandler(HTTPException)
        def handle_http_error(error):
            if not _under_prefix(request.path, prefix):
                return error
            return jsonify({'error': error.description or error.name}), error.code

        @app.errorhandler(Exception)
        def handle_unexpected_error(error):
            LoggingService.log_error_with_traceback('api', error, {'path': request.path})
            return jsonify(InternalError().to_dict()), 500

    @staticmethod
    def _register_request_logging(app, prefix):

        @app.after_request
        def log_request(response):
            if _under_prefix(request.path, prefix) and request.method != 'OPTIONS':
                LoggingService.log_api_call('api', request.path, request.method, response.status_code)
            return response


def create_app(config=None):
    """Application factory: a Flask app with every module registered"""
    app = Flask(__name__)
    Nomadfolio(app, config)
    return app


__all__ = ['Nomadfolio', 'create_app', '__version__']
