import sqlite3
from contextlib import closing, contextmanager


class Database:

    @staticmethod
    @contextmanager
    def connect(path):
        """Open a SQLite connection that commits on success and always closes"""
        with closing(sqlite3.connect(path, timeout=10)) as conn:
            with conn:
                yield conn
