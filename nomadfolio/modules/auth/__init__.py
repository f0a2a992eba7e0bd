"""
Nomadfolio Auth Module

Account creation and bearer-token sessions against the identity provider:
- POST /signup  -- create the owner account and its profile
- POST /signin  -- exchange email/password for an access token
- POST /signout -- revoke the caller's access token
"""

from flask import Blueprint

auth_bp = Blueprint('auth', __name__)

from . import routes
from .identity import LocalIdentityProvider, SupabaseIdentityProvider, get_identity_provider
from .utils import bearer_token, require_user

__all__ = [
    'auth_bp', 'LocalIdentityProvider', 'SupabaseIdentityProvider',
    'get_identity_provider', 'bearer_token', 'require_user',
]
