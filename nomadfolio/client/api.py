"""
Portfolio API Client
====================

Fetch wrappers for the portfolio API. Every request first resolves the
current session, then sends its access token as the bearer, falling back to
the public anonymous key. Non-2xx responses raise APIRequestError carrying
the server's error message when one is available.

No retries and no cancellation: a superseded request still completes.
"""

import asyncio
import logging

import requests

from .session import Session, SessionStore

logger = logging.getLogger(__name__)


class APIRequestError(Exception):
    """Non-2xx response from the portfolio API"""

    def __init__(self, status_code, message):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class PortfolioClient:

    def __init__(self, base_url, anon_key, session_store=None, timeout=30):
        self.base_url = base_url.rstrip('/')
        self.anon_key = anon_key
        self.session_store = session_store or SessionStore()
        self.timeout = timeout

    async def auth_headers(self):
        session = await self.session_store.get_session()
        token = session.access_token if session else self.anon_key
        return {
            'Content-Type': 'application/json',
            'Authorization': f'Bearer {token}',
        }

    def _send(self, method, url, headers, json):
        return requests.request(method, url, headers=headers, json=json, timeout=self.timeout)

    async def fetch_with_auth(self, path, method='GET', json=None):
        """Send an authorized request and return the decoded JSON body"""
        headers = await self.auth_headers()
        url = f"{self.base_url}/{path.lstrip('/')}"

        try:
            resp = await asyncio.to_thread(self._send, method, url, headers, json)
        except requests.RequestException as e:
            logger.error(f"{method} {url} failed: {e}")
            raise APIRequestError(0, f'Network error: {e}')

        try:
            data = resp.json()
        except ValueError:
            data = None

        if not 200 <= resp.status_code < 300:
            message = None
            if isinstance(data, dict):
                message = data.get('error')
            raise APIRequestError(resp.status_code, message or f'Request failed with status {resp.status_code}')

        return data

    # ===== Account =====

    async def signup(self, email, password, name):
        data = await self.fetch_with_auth('/signup', 'POST', {'email': email, 'password': password, 'name': name})
        return data['user']

    async def sign_in(self, email, password):
        data = await self.fetch_with_auth('/signin', 'POST', {'email': email, 'password': password})
        session = Session.from_response(data['session'])
        await self.session_store.save(session)
        return session

    async def sign_out(self):
        session = await self.session_store.get_session()
        if session is not None:
            try:
                await self.fetch_with_auth('/signout', 'POST')
            except APIRequestError as e:
                logger.info(f"Server sign-out failed, clearing local session anyway: {e.message}")
        await self.session_store.clear()

    async def is_authenticated(self):
        return await self.session_store.get_session() is not None

    # ===== Profile =====

    async def get_profile(self):
        return (await self.fetch_with_auth('/profile'))['profile']

    async def update_profile(self, updates):
        return (await self.fetch_with_auth('/profile', 'PUT', updates))['profile']

    # ===== Projects =====

    async def list_projects(self):
        return (await self.fetch_with_auth('/projects')).get('projects') or []

    async def list_public_projects(self):
        return (await self.fetch_with_auth('/projects/public')).get('projects') or []

    async def create_project(self, fields):
        return (await self.fetch_with_auth('/projects', 'POST', fields))['project']

    async def update_project(self, project_id, updates):
        return (await self.fetch_with_auth(f'/projects/{project_id}', 'PUT', updates))['project']

    async def delete_project(self, project_id):
        await self.fetch_with_auth(f'/projects/{project_id}', 'DELETE')
