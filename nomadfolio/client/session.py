"""
Client Session Store
====================

Persists the signed-in session as JSON on disk so a restarted client stays
signed in. Reads happen off the event loop; an expired session reads as None.
"""

import os
import json
import time
import asyncio
import logging
from dataclasses import asdict, dataclass, field
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_SESSION_PATH = os.path.join(os.path.expanduser('~'), '.nomadfolio', 'session.json')


@dataclass
class Session:
    """Bearer credentials returned by the sign-in endpoint."""

    access_token: str
    expires_at: Optional[int] = None
    user: dict = field(default_factory=dict)

    @classmethod
    def from_response(cls, data):
        return cls(
            access_token=data['access_token'],
            expires_at=data.get('expires_at'),
            user=data.get('user') or {},
        )

    def is_expired(self, now=None):
        if self.expires_at is None:
            return False
        return (now if now is not None else time.time()) >= self.expires_at


class SessionStore:
    """Current session backed by a JSON file (None path keeps it in memory)"""

    def __init__(self, path=DEFAULT_SESSION_PATH):
        self.path = path
        self._memory = None

    def _read(self):
        if self.path is None:
            return self._memory
        if not os.path.isfile(self.path):
            return None
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                return Session(**json.load(f))
        except (ValueError, TypeError) as e:
            logger.warning(f"Ignoring unreadable session file {self.path}: {e}")
            return None

    def _write(self, session):
        if self.path is None:
            self._memory = session
            return
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.path, 'w', encoding='utf-8') as f:
            json.dump(asdict(session), f)

    async def get_session(self) -> Optional[Session]:
        session = await asyncio.to_thread(self._read)
        if session is not None and session.is_expired():
            return None
        return session

    async def save(self, session: Session):
        await asyncio.to_thread(self._write, session)

    async def clear(self):
        if self.path is None:
            self._memory = None
            return
        if os.path.isfile(self.path):
            await asyncio.to_thread(os.remove, self.path)
