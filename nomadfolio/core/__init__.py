"""
Nomadfolio Core
===============

Core utilities shared by the API modules.
"""

from .config import Config, get_config_value
from .database import Database
from .errors import APIError, AuthError, ConflictError, InternalError, NotFoundError, ValidationError
from .kv_store import KVStore, get_kv_store
from .logging_service import LoggingService, logger

__all__ = [
    'Config', 'get_config_value', 'Database', 'KVStore', 'get_kv_store',
    'LoggingService', 'logger',
    'APIError', 'AuthError', 'ConflictError', 'InternalError', 'NotFoundError', 'ValidationError',
]
