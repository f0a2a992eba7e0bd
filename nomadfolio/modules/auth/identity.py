"""
Identity Providers
==================

The auth service that issues and validates bearer tokens.

- LocalIdentityProvider: accounts kept in the key-value store, used for
  development, self-hosting and tests.
- SupabaseIdentityProvider: a hosted GoTrue auth server reached over HTTP.

Both return users shaped as {"id", "email", "user_metadata": {"name"}} and
sessions shaped as {"access_token", "token_type", "expires_at", "user"}.
"""

import re
import uuid
import secrets
import logging
from datetime import datetime, timedelta, timezone

import requests
from werkzeug.security import generate_password_hash, check_password_hash

from ...core.config import get_config_value
from ...core.errors import AuthError, ConflictError, InternalError, ValidationError

logger = logging.getLogger(__name__)

# Rejects consecutive dots, leading/trailing dots in local part
_VALID_EMAIL = re.compile(r'^[a-zA-Z0-9_%+-]+(\.[a-zA-Z0-9_%+-]+)*@[a-zA-Z0-9-]+(\.[a-zA-Z0-9-]+)*\.[a-zA-Z]{2,}$')

MIN_PASSWORD_LENGTH = 6


def _public_user(account):
    return {
        'id': account['id'],
        'email': account['email'],
        'user_metadata': {'name': account.get('name')},
        'created_at': account.get('created_at'),
    }


class LocalIdentityProvider:
    """Accounts under account:<email>, access tokens under token:<token>"""

    def __init__(self, store, session_ttl_hours=24):
        self.store = store
        self.session_ttl = timedelta(hours=session_ttl_hours)

    @staticmethod
    def _account_key(email):
        return f"account:{email.strip().lower()}"

    @staticmethod
    def _token_key(token):
        return f"token:{token}"

    def create_user(self, email, password, name):
        if not all(isinstance(v, str) for v in (email, password, name)):
            raise ValidationError('Email, password and name must be strings')
        email = email.strip().lower()
        if not _VALID_EMAIL.match(email):
            raise ValidationError('Unable to validate email address: invalid format')
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f'Password should be at least {MIN_PASSWORD_LENGTH} characters')

        if self.store.get(self._account_key(email)):
            raise ConflictError('A user with this email address has already been registered')

        account = {
            'id': str(uuid.uuid4()),
            'email': email,
            'name': name,
            'password_hash': generate_password_hash(password),
            'created_at': datetime.now(timezone.utc).isoformat(),
        }
        self.store.set(self._account_key(email), account)
        return _public_user(account)

    def sign_in(self, email, password):
        account = self.store.get(self._account_key(email or ''))
        if not account or not check_password_hash(account['password_hash'], password or ''):
            raise AuthError('Invalid login credentials')

        token = secrets.token_urlsafe(32)
        expires = datetime.now(timezone.utc) + self.session_ttl
        self.store.set(self._token_key(token), {
            'email': account['email'],
            'expires_at': expires.isoformat(),
        })
        return {
            'access_token': token,
            'token_type': 'bearer',
            'expires_at': int(expires.timestamp()),
            'user': _public_user(account),
        }

    def get_user(self, token):
        if not token:
            raise AuthError('Unauthorized')

        token_data = self.store.get(self._token_key(token))
        if not token_data:
            raise AuthError('Unauthorized')

        if datetime.fromisoformat(token_data['expires_at']) <= datetime.now(timezone.utc):
            self.store.delete(self._token_key(token))
            raise AuthError('Unauthorized')

        account = self.store.get(self._account_key(token_data['email']))
        if not account:
            raise AuthError('Unauthorized')
        return _public_user(account)

    def sign_out(self, token):
        self.store.delete(self._token_key(token))


class SupabaseIdentityProvider:
    """GoTrue REST client (admin calls use the service-role key)"""

    def __init__(self, url, anon_key, service_role_key, timeout=15):
        if not url:
            raise InternalError('Identity provider is not configured')
        self.base_url = url.rstrip('/') + '/auth/v1'
        self.anon_key = anon_key
        self.service_role_key = service_role_key
        self.timeout = timeout

    def _headers(self, bearer, apikey=None):
        return {
            'apikey': apikey or self.anon_key or '',
            'Authorization': f'Bearer {bearer}',
            'Content-Type': 'application/json',
        }

    @staticmethod
    def _error_message(resp):
        try:
            data = resp.json()
        except ValueError:
            return resp.text or f'HTTP {resp.status_code}'
        return data.get('msg') or data.get('message') or data.get('error_description') or data.get('error') or f'HTTP {resp.status_code}'

    def _request(self, method, path, **kwargs):
        try:
            return requests.request(method, f"{self.base_url}{path}", timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.error(f"Identity provider request failed: {e}")
            raise InternalError('Identity provider unavailable')

    def create_user(self, email, password, name):
        resp = self._request(
            'POST', '/admin/users',
            headers=self._headers(self.service_role_key, self.service_role_key),
            json={
                'email': email,
                'password': password,
                'user_metadata': {'name': name},
                # No email server is configured, so confirm immediately
                'email_confirm': True,
            },
        )
        if resp.ok:
            return resp.json()

        message = self._error_message(resp)
        if resp.status_code in (409, 422) and ('already' in message.lower() or 'exists' in message.lower()):
            raise ConflictError(message)
        if 400 <= resp.status_code < 500:
            raise ValidationError(message)
        logger.error(f"Identity provider create_user failed: {resp.status_code} {message}")
        raise InternalError('Failed to sign up')

    def sign_in(self, email, password):
        resp = self._request(
            'POST', '/token?grant_type=password',
            headers=self._headers(self.anon_key),
            json={'email': email, 'password': password},
        )
        if resp.ok:
            return resp.json()
        if 400 <= resp.status_code < 500:
            raise AuthError(self._error_message(resp))
        raise InternalError('Failed to sign in')

    def get_user(self, token):
        if not token:
            raise AuthError('Unauthorized')
        resp = self._request('GET', '/user', headers=self._headers(token))
        if resp.ok:
            user = resp.json()
            if user.get('id'):
                return user
            raise AuthError('Unauthorized')
        if 400 <= resp.status_code < 500:
            raise AuthError('Unauthorized')
        raise InternalError('Failed to validate token')

    def sign_out(self, token):
        resp = self._request('POST', '/logout', headers=self._headers(token))
        if not resp.ok and resp.status_code >= 500:
            raise InternalError('Failed to sign out')


def get_identity_provider():
    """Identity provider for the current app, built once per app"""
    from flask import current_app
    from ...core.kv_store import get_kv_store

    provider = current_app.extensions.get('nomadfolio_identity')
    if provider is not None:
        return provider

    kind = (get_config_value('IDENTITY_PROVIDER', 'local') or 'local').lower()
    if kind == 'supabase':
        provider = SupabaseIdentityProvider(
            get_config_value('SUPABASE_URL'),
            get_config_value('SUPABASE_ANON_KEY'),
            get_config_value('SUPABASE_SERVICE_ROLE_KEY'),
            timeout=int(get_config_value('IDENTITY_TIMEOUT', 15)),
        )
    elif kind == 'local':
        provider = LocalIdentityProvider(
            get_kv_store(),
            session_ttl_hours=int(get_config_value('SESSION_TTL_HOURS', 24)),
        )
    else:
        raise InternalError('Identity provider is not configured')

    current_app.extensions['nomadfolio_identity'] = provider
    return provider
