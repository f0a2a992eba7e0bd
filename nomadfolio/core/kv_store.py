"""
Key-Value Store
===============

JSON documents in a single SQLite table, addressed by string keys.

Key namespace:
- profile:<ownerId>
- projects:<ownerId>:<projectId>
- account:<email> / token:<token> (local identity provider)

Single-key writes are atomic; there are no cross-key transactions, so a
read-modify-write by two writers on the same key is last-write-wins.
"""

import json
import os
import logging

from .config import get_config_value
from .database import Database

logger = logging.getLogger(__name__)

PUBLIC_PROJECTS_PREFIX = 'projects:'


def profile_key(owner_id):
    return f"profile:{owner_id}"


def project_key(owner_id, project_id):
    return f"projects:{owner_id}:{project_id}"


def owner_projects_prefix(owner_id):
    return f"projects:{owner_id}:"


def _escape_like(prefix):
    """Escape LIKE wildcards so the prefix matches literally"""
    return prefix.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')


class KVStore:
    """Generic get/set/delete/prefix-scan over a SQLite file"""

    def __init__(self, db_path, table='kv_store'):
        self.db_path = db_path
        self.table = table
        self._initialized = False

    def init_db(self):
        """Create the backing table if it doesn't exist"""
        if self._initialized:
            return

        db_dir = os.path.dirname(self.db_path)
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)

        with Database.connect(self.db_path) as conn:
            cursor = conn.cursor()
            cursor.execute(f'''
                CREATE TABLE IF NOT EXISTS {self.table} (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
            ''')
            conn.commit()

        self._initialized = True
        logger.debug(f"Key-value store ready at {self.db_path}")

    def get(self, key):
        self.init_db()
        with Database.connect(self.db_path) as conn:
            cursor = conn.cursor()
            cursor.execute(f'SELECT value FROM {self.table} WHERE key = ?', (key,))
            row = cursor.fetchone()
        return json.loads(row[0]) if row else None

    def set(self, key, value):
        self.init_db()
        with Database.connect(self.db_path) as conn:
            cursor = conn.cursor()
            cursor.execute(
                f'INSERT OR REPLACE INTO {self.table} (key, value) VALUES (?, ?)',
                (key, json.dumps(value))
            )
            conn.commit()

    def delete(self, key):
        self.init_db()
        with Database.connect(self.db_path) as conn:
            cursor = conn.cursor()
            cursor.execute(f'DELETE FROM {self.table} WHERE key = ?', (key,))
            conn.commit()

    def get_by_prefix(self, prefix):
        """Return the values of every key starting with prefix, in key order"""
        self.init_db()
        with Database.connect(self.db_path) as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"SELECT value FROM {self.table} WHERE key LIKE ? ESCAPE '\\' ORDER BY key",
                (_escape_like(prefix) + '%',)
            )
            return [json.loads(row[0]) for row in cursor.fetchall()]

    def mget(self, keys):
        """Values for keys, None where a key is absent"""
        return [self.get(key) for key in keys]

    def mset(self, mapping):
        self.init_db()
        with Database.connect(self.db_path) as conn:
            cursor = conn.cursor()
            cursor.executemany(
                f'INSERT OR REPLACE INTO {self.table} (key, value) VALUES (?, ?)',
                [(key, json.dumps(value)) for key, value in mapping.items()]
            )
            conn.commit()

    def mdel(self, keys):
        self.init_db()
        with Database.connect(self.db_path) as conn:
            cursor = conn.cursor()
            cursor.executemany(f'DELETE FROM {self.table} WHERE key = ?', [(key,) for key in keys])
            conn.commit()


def get_kv_store():
    """Get the store bound to the current app (one per KV_DB path)"""
    from flask import current_app

    db_path = get_config_value('KV_DB')
    stores = current_app.extensions.setdefault('nomadfolio_kv', {})
    if db_path not in stores:
        stores[db_path] = KVStore(db_path, get_config_value('KV_TABLE', 'kv_store'))
    return stores[db_path]
