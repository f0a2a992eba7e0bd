"""
Shared fixtures: a fully initialised app on a throwaway database directory.
"""

import os
import shutil
import tempfile

import pytest
from flask import Flask

from nomadfolio import Nomadfolio

ANON_KEY = "test-anon-key"
API = "/api"


@pytest.fixture
def tmp_db_dir():
    """Create a temporary directory for test databases, cleaned up after."""
    d = tempfile.mkdtemp(prefix="nomadfolio-test-")
    yield d
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture
def app(tmp_db_dir):
    """Flask app with every Nomadfolio module registered on the local identity provider."""
    app = Flask(__name__)
    app.config["TESTING"] = True
    app.config["SECRET_KEY"] = "test-secret"
    app.config["DB_DIR"] = tmp_db_dir
    app.config["KV_DB"] = os.path.join(tmp_db_dir, "kv_store.db")
    app.config["LOGS_DB"] = os.path.join(tmp_db_dir, "app_logs.db")
    app.config["API_PREFIX"] = API
    app.config["IDENTITY_PROVIDER"] = "local"
    app.config["PUBLIC_ANON_KEY"] = ANON_KEY
    app.config["DEFAULT_BIO"] = "Roblox scripter and adventure seeker 🚀"
    Nomadfolio(app)
    return app


@pytest.fixture
def client(app):
    return app.test_client()


def signup_and_signin(client, email="a@x.com", password="pw1234", name="Ann"):
    """Create an account and return (user, auth headers)."""
    resp = client.post(f"{API}/signup", json={"email": email, "password": password, "name": name})
    assert resp.status_code == 200, resp.get_json()
    user = resp.get_json()["user"]

    resp = client.post(f"{API}/signin", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.get_json()
    token = resp.get_json()["session"]["access_token"]
    return user, {"Authorization": f"Bearer {token}"}


@pytest.fixture
def owner(client):
    """Signed-in owner: (user, headers)."""
    return signup_and_signin(client)
