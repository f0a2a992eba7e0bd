import os
from dotenv import load_dotenv

load_dotenv(override=True)

class Config:
    """
    Base configuration for the Nomadfolio backend.
    Deployments override these via environment variables or app.config.
    """
    # Flask settings
    SECRET_KEY = os.getenv('FLASK_SECRET_KEY')

    # Get DB_DIR from environment, or use a default if not set
    DB_DIR = os.getenv('DB_DIR', os.path.join(os.getcwd(), 'databases'))

    # Database paths - use environment variables or fallback to DB_DIR
    KV_DB = os.getenv('KV_DB', os.path.join(DB_DIR, "kv_store.db"))
    LOGS_DB = os.getenv('LOGS_DB', os.path.join(DB_DIR, "app_logs.db"))

    # Table names
    KV_TABLE = "kv_store"
    LOGS_TABLE = "app_logs"

    # Every route is mounted under this fixed deployment prefix
    API_PREFIX = os.getenv('API_PREFIX', '/api')

    # Identity provider: 'local' (accounts in the kv store) or 'supabase'
    IDENTITY_PROVIDER = os.getenv('IDENTITY_PROVIDER', 'local')
    IDENTITY_TIMEOUT = int(os.getenv('IDENTITY_TIMEOUT', '15'))
    SESSION_TTL_HOURS = int(os.getenv('SESSION_TTL_HOURS', '24'))

    SUPABASE_URL = os.getenv('SUPABASE_URL')
    SUPABASE_ANON_KEY = os.getenv('SUPABASE_ANON_KEY')
    SUPABASE_SERVICE_ROLE_KEY = os.getenv('SUPABASE_SERVICE_ROLE_KEY')

    # Bearer sent by clients that have no session yet
    PUBLIC_ANON_KEY = os.getenv('PUBLIC_ANON_KEY') or os.getenv('SUPABASE_ANON_KEY') or 'public-anon'

    # Profile placeholder written at signup
    DEFAULT_BIO = os.getenv('DEFAULT_BIO', "Roblox scripter and adventure seeker 🚀")

    DEBUG = os.getenv('FLASK_DEBUG') == '1'

    # Port for local server
    port = int(os.getenv('PORT', '5000'))


def get_config_value(key, default=None):
    """Get configuration value: Flask app config first, then Config, then env var"""
    try:
        from flask import current_app
        val = current_app.config.get(key)
        if val is not None:
            return val
    except RuntimeError:
        pass
    val = getattr(Config, key, None)
    if val is not None:
        return val
    return os.getenv(key, default)
