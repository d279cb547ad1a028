"""
Unit tests for AuthGate
"""
from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest
from starlette.requests import Request

from playlist_auth.api.error import ClientError
from playlist_auth.api.utils.auth_gate import AuthGate
from playlist_auth.app.services.session_token_issuer import SessionTokenIssuer

COOKIE = "userToken"


def make_request(headers=None):
    raw_headers = [
        (name.lower().encode("latin-1"), value.encode("latin-1"))
        for name, value in (headers or {}).items()
    ]
    return Request({"type": "http", "method": "GET", "path": "/", "headers": raw_headers})


@pytest.fixture
def issuer():
    return SessionTokenIssuer(secret="test-secret")


@pytest.fixture
def gate(issuer):
    return AuthGate(issuer, COOKIE)


def test_bearer_header_authenticates(gate, issuer):
    user_id = uuid4()
    token = issuer.issue(user_id).token

    result = gate.authenticate(make_request({"Authorization": f"Bearer {token}"}))

    assert result.is_ok()
    assert result.value.user_id == user_id


def test_cookie_authenticates(gate, issuer):
    user_id = uuid4()
    token = issuer.issue(user_id).token

    result = gate.authenticate(make_request({"Cookie": f"{COOKIE}={token}"}))

    assert result.is_ok()
    assert result.value.user_id == user_id


def test_header_wins_over_cookie(gate, issuer):
    header_user, cookie_user = uuid4(), uuid4()
    request = make_request(
        {
            "Authorization": f"Bearer {issuer.issue(header_user).token}",
            "Cookie": f"{COOKIE}={issuer.issue(cookie_user).token}",
        }
    )

    result = gate.authenticate(request)

    assert result.value.user_id == header_user


def test_missing_token(gate):
    result = gate.authenticate(make_request())

    assert result.is_err()
    assert result.error.code == "UNAUTHENTICATED"


@pytest.mark.parametrize(
    "token_factory",
    [
        lambda issuer: "garbage",
        lambda issuer: SessionTokenIssuer(secret="other").issue(uuid4()).token,
        lambda issuer: issuer.issue(
            uuid4(), now=datetime.now(UTC) - timedelta(hours=48)
        ).token,
        lambda issuer: issuer.issue("not-a-uuid").token,
    ],
    ids=["malformed", "wrong-key", "expired", "non-uuid-subject"],
)
def test_every_failure_is_the_same_error(gate, issuer, token_factory):
    request = make_request({"Authorization": f"Bearer {token_factory(issuer)}"})

    result = gate.authenticate(request)

    assert result.is_err()
    assert result.error.code == "UNAUTHENTICATED"
    assert result.error.message == "Not authenticated"


def test_require_raises_401(gate):
    with pytest.raises(ClientError) as exc_info:
        gate.require(make_request())

    assert exc_info.value.status_code == 401
    assert exc_info.value.base_error.code == "UNAUTHENTICATED"
