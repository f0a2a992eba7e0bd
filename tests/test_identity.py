"""
Identity providers: the local store-backed one and the Supabase REST client
with requests mocked out.
"""

import os
from unittest.mock import MagicMock, patch

import pytest
import requests

from nomadfolio.core.errors import AuthError, ConflictError, InternalError, ValidationError
from nomadfolio.core.kv_store import KVStore
from nomadfolio.modules.auth.identity import LocalIdentityProvider, SupabaseIdentityProvider


# ===== Local provider =====

@pytest.fixture
def local(tmp_db_dir):
    return LocalIdentityProvider(KVStore(os.path.join(tmp_db_dir, "kv.db")))


def test_local_sign_in_and_get_user(local):
    created = local.create_user("Ann@X.com", "pw1234", "Ann")
    assert created["email"] == "ann@x.com"

    session = local.sign_in("ann@x.com", "pw1234")
    assert session["token_type"] == "bearer"
    assert local.get_user(session["access_token"])["id"] == created["id"]


def test_local_expired_token_is_rejected(tmp_db_dir):
    provider = LocalIdentityProvider(KVStore(os.path.join(tmp_db_dir, "kv.db")), session_ttl_hours=0)
    provider.create_user("a@x.com", "pw1234", "Ann")
    token = provider.sign_in("a@x.com", "pw1234")["access_token"]

    with pytest.raises(AuthError):
        provider.get_user(token)
    assert provider.store.get(f"token:{token}") is None


def test_local_sign_out(local):
    local.create_user("a@x.com", "pw1234", "Ann")
    token = local.sign_in("a@x.com", "pw1234")["access_token"]
    local.sign_out(token)
    with pytest.raises(AuthError):
        local.get_user(token)


def test_local_rejects_non_string_inputs(local):
    with pytest.raises(ValidationError):
        local.create_user("a@x.com", 1234567, "Ann")
    with pytest.raises(ValidationError):
        local.create_user(None, "pw1234", "Ann")


def test_local_password_is_hashed(local):
    local.create_user("a@x.com", "pw1234", "Ann")
    account = local.store.get("account:a@x.com")
    assert account["password_hash"] != "pw1234"


# ===== Supabase provider =====

def _response(status, body=None):
    resp = MagicMock()
    resp.status_code = status
    resp.ok = 200 <= status < 300
    if body is None:
        resp.json.side_effect = ValueError("no body")
        resp.text = ""
    else:
        resp.json.return_value = body
    return resp


@pytest.fixture
def supabase():
    return SupabaseIdentityProvider("https://proj.supabase.co/", "anon", "service", timeout=5)


@patch("nomadfolio.modules.auth.identity.requests.request")
def test_supabase_create_user_uses_admin_api(mock_request, supabase):
    mock_request.return_value = _response(200, {"id": "u1", "email": "a@x.com"})

    user = supabase.create_user("a@x.com", "pw", "Ann")

    assert user["id"] == "u1"
    method, url = mock_request.call_args[0]
    kwargs = mock_request.call_args[1]
    assert method == "POST"
    assert url == "https://proj.supabase.co/auth/v1/admin/users"
    assert kwargs["headers"]["Authorization"] == "Bearer service"
    assert kwargs["json"]["user_metadata"] == {"name": "Ann"}
    assert kwargs["json"]["email_confirm"] is True
    assert kwargs["timeout"] == 5


@patch("nomadfolio.modules.auth.identity.requests.request")
def test_supabase_existing_user_is_conflict(mock_request, supabase):
    mock_request.return_value = _response(422, {"msg": "A user with this email address has already been registered"})
    with pytest.raises(ConflictError) as exc:
        supabase.create_user("a@x.com", "pw", "Ann")
    assert exc.value.status_code == 409


@patch("nomadfolio.modules.auth.identity.requests.request")
def test_supabase_bad_input_is_validation_error(mock_request, supabase):
    mock_request.return_value = _response(400, {"msg": "Password should be at least 6 characters"})
    with pytest.raises(ValidationError) as exc:
        supabase.create_user("a@x.com", "pw", "Ann")
    assert "Password" in exc.value.message


@patch("nomadfolio.modules.auth.identity.requests.request")
def test_supabase_server_error_is_internal(mock_request, supabase):
    mock_request.return_value = _response(503)
    with pytest.raises(InternalError):
        supabase.create_user("a@x.com", "pw", "Ann")


@patch("nomadfolio.modules.auth.identity.requests.request")
def test_supabase_unreachable_is_internal(mock_request, supabase):
    mock_request.side_effect = requests.ConnectionError("refused")
    with pytest.raises(InternalError) as exc:
        supabase.get_user("tok")
    assert exc.value.message == "Identity provider unavailable"


@patch("nomadfolio.modules.auth.identity.requests.request")
def test_supabase_get_user_validates_token(mock_request, supabase):
    mock_request.return_value = _response(200, {"id": "u1", "email": "a@x.com"})
    assert supabase.get_user("tok")["id"] == "u1"
    assert mock_request.call_args[1]["headers"]["Authorization"] == "Bearer tok"

    mock_request.return_value = _response(401, {"msg": "invalid JWT"})
    with pytest.raises(AuthError):
        supabase.get_user("tok")


@patch("nomadfolio.modules.auth.identity.requests.request")
def test_supabase_sign_in_bad_credentials(mock_request, supabase):
    mock_request.return_value = _response(400, {"error_description": "Invalid login credentials"})
    with pytest.raises(AuthError) as exc:
        supabase.sign_in("a@x.com", "nope")
    assert exc.value.message == "Invalid login credentials"


def test_supabase_requires_url():
    with pytest.raises(InternalError):
        SupabaseIdentityProvider("", "anon", "service")
