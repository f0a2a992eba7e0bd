"""
Centralized logging service for the Nomadfolio backend.
Provides structured logging with database storage and easy integration.
"""

import os
import json
import logging
import traceback
from datetime import datetime, timedelta
from flask import request, has_request_context
from .database import Database
from .config import get_config_value

stdout_logger = logging.getLogger('nomadfolio')


class LoggingService:
    """Centralized logging service for application-wide logging"""

    _ready_tables = set()

    @staticmethod
    def _db_path():
        return get_config_value('LOGS_DB')

    @staticmethod
    def _table():
        return get_config_value('LOGS_TABLE', 'app_logs')

    @staticmethod
    def _ensure_logs_table(db_path, table):
        """Ensure the log table exists"""
        if (db_path, table) in LoggingService._ready_tables:
            return

        db_dir = os.path.dirname(db_path)
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)

        with Database.connect(db_path) as conn:
            cursor = conn.cursor()
            cursor.execute(f"""
                CREATE TABLE IF NOT EXISTS {table} (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    timestamp TEXT NOT NULL,
                    level TEXT NOT NULL,
                    source TEXT NOT NULL,
                    message TEXT NOT NULL,
                    details TEXT,
                    ip_address TEXT,
                    user_agent TEXT,
                    request_path TEXT,
                    user_id TEXT
                )
            """)

            # Create index for better performance
            cursor.execute(f"""
                CREATE INDEX IF NOT EXISTS idx_{table}_timestamp
                ON {table}(timestamp DESC)
            """)
            cursor.execute(f"""
                CREATE INDEX IF NOT EXISTS idx_{table}_level
                ON {table}(level)
            """)
            conn.commit()

        LoggingService._ready_tables.add((db_path, table))

    @staticmethod
    def _get_request_context():
        """Extract request context information"""
        if not has_request_context():
            return None, None, None

        ip_address = request.headers.get('X-Forwarded-For', request.remote_addr)
        if ip_address and ',' in ip_address:
            ip_address = ip_address.split(',')[0].strip()

        user_agent = request.headers.get('User-Agent', '')
        return ip_address, user_agent, request.path

    @staticmethod
    def log(level, source, message, details=None, user_id=None):
        """
        Log a message to the database

        Args:
            level (str): Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            source (str): Source component (auth, projects, profile, etc.)
            message (str): Main log message
            details (str/dict): Additional details (will be JSON-encoded if dict)
            user_id (str): Optional user identifier
        """
        level = level.upper()
        stdout_logger.log(getattr(logging, level, logging.INFO), f"[{source}] {message}")

        if isinstance(details, dict):
            details = json.dumps(details, indent=2)

        try:
            db_path = LoggingService._db_path()
            if not db_path:
                return
            table = LoggingService._table()
            LoggingService._ensure_logs_table(db_path, table)

            ip_address, user_agent, request_path = LoggingService._get_request_context()
            timestamp = datetime.now().isoformat()

            with Database.connect(db_path) as conn:
                cursor = conn.cursor()
                cursor.execute(f"""
                    INSERT INTO {table}
                    (timestamp, level, source, message, details, ip_address, user_agent, request_path, user_id)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """, (
                    timestamp, level, source, message, details,
                    ip_address, user_agent, request_path, user_id
                ))
                conn.commit()

        except Exception as e:
            # Fallback to console logging if database fails
            stdout_logger.warning(f"Logging service error: {e}")
            if details:
                stdout_logger.warning(f"Details: {details}")

    @staticmethod
    def debug(source, message, details=None, user_id=None):
        LoggingService.log('DEBUG', source, message, details, user_id)

    @staticmethod
    def info(source, message, details=None, user_id=None):
        LoggingService.log('INFO', source, message, details, user_id)

    @staticmethod
    def warning(source, message, details=None, user_id=None):
        LoggingService.log('WARNING', source, message, details, user_id)

    @staticmethod
    def error(source, message, details=None, user_id=None):
        LoggingService.log('ERROR', source, message, details, user_id)

    @staticmethod
    def critical(source, message, details=None, user_id=None):
        LoggingService.log('CRITICAL', source, message, details, user_id)

    @staticmethod
    def log_user_action(source, action, user_id=None, details=None):
        """Log user actions (signup, signin, profile edits, etc.)"""
        LoggingService.info(source, f"User action: {action}", details, user_id)

    @staticmethod
    def log_api_call(source, endpoint, method='GET', status_code=200, details=None):
        """Log API calls"""
        message = f"API {method} {endpoint} - Status: {status_code}"
        level = 'INFO' if 200 <= status_code < 400 else 'WARNING' if status_code < 500 else 'ERROR'
        LoggingService.log(level, source, message, details)

    @staticmethod
    def log_error_with_traceback(source, error, details=None):
        """Log error with full traceback"""
        error_details = {
            'error_type': type(error).__name__,
            'error_message': str(error),
            'traceback': traceback.format_exc()
        }
        if details:
            error_details['additional_details'] = details

        LoggingService.error(source, f"Exception occurred: {type(error).__name__}", error_details)

    @staticmethod
    def log_security_event(message, details=None):
        """Log security-related events (rejected tokens, failed sign-ins)"""
        LoggingService.warning('security', message, details)

    @staticmethod
    def get_recent_logs(limit=50, level=None):
        """Most recent log rows as dicts, newest first"""
        db_path = LoggingService._db_path()
        table = LoggingService._table()
        LoggingService._ensure_logs_table(db_path, table)

        query = f'SELECT timestamp, level, source, message, details, request_path, user_id FROM {table}'
        params = []
        if level:
            query += ' WHERE level = ?'
            params.append(level.upper())
        query += ' ORDER BY id DESC LIMIT ?'
        params.append(limit)

        with Database.connect(db_path) as conn:
            cursor = conn.cursor()
            cursor.execute(query, params)
            columns = ['timestamp', 'level', 'source', 'message', 'details', 'request_path', 'user_id']
            return [dict(zip(columns, row)) for row in cursor.fetchall()]

    @staticmethod
    def cleanup_old_logs(days_to_keep=30):
        """Clean up old log entries"""
        try:
            cutoff_iso = (datetime.now() - timedelta(days=days_to_keep)).isoformat()
            db_path = LoggingService._db_path()
            table = LoggingService._table()
            LoggingService._ensure_logs_table(db_path, table)

            with Database.connect(db_path) as conn:
                cursor = conn.cursor()
                cursor.execute(f"DELETE FROM {table} WHERE timestamp < ?", (cutoff_iso,))
                deleted_count = cursor.rowcount
                conn.commit()

            LoggingService.info('system', f"Cleaned up {deleted_count} old log entries")
            return deleted_count

        except Exception as e:
            LoggingService.error('system', f"Failed to cleanup old logs: {e}")
            return 0


# Convenience instance for easy importing
logger = LoggingService()
