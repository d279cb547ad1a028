"""
Unit tests for SessionTokenIssuer
"""
from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest
from jose import jwt

from playlist_auth.app.services.session_token_issuer import SessionTokenIssuer

SECRET = "test-secret"


@pytest.fixture
def issuer():
    return SessionTokenIssuer(secret=SECRET)


def test_verify_immediately_after_issue_returns_subject(issuer):
    user_id = uuid4()

    issued = issuer.issue(user_id)
    result = issuer.verify(issued.token)

    assert result.is_ok()
    assert result.value == str(user_id)


def test_token_expires_exactly_24_hours_after_issue(issuer):
    now = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)

    issued = issuer.issue(uuid4(), now=now)
    claims = jwt.get_unverified_claims(issued.token)

    assert issued.expires_at == now + timedelta(hours=24)
    assert claims["exp"] - claims["iat"] == 24 * 3600
    assert claims["exp"] == int(issued.expires_at.timestamp())


def test_verify_after_expiry_returns_expired(issuer):
    issued = issuer.issue(uuid4(), now=datetime.now(UTC) - timedelta(hours=25))

    result = issuer.verify(issued.token)

    assert result.is_err()
    assert result.error.code == "EXPIRED_TOKEN"


def test_token_signed_with_other_key_is_invalid_signature(issuer):
    other = SessionTokenIssuer(secret="another-secret")
    issued = other.issue(uuid4())

    result = issuer.verify(issued.token)

    assert result.is_err()
    assert result.error.code == "INVALID_SIGNATURE"


def test_tampered_payload_is_invalid_signature(issuer):
    issued = issuer.issue(uuid4())
    header, _, signature = issued.token.split(".")
    forged_payload = jwt.encode(
        {"sub": str(uuid4()), "exp": datetime.now(UTC) + timedelta(hours=1)},
        "irrelevant",
        algorithm="HS256",
    ).split(".")[1]

    result = issuer.verify(f"{header}.{forged_payload}.{signature}")

    assert result.is_err()
    assert result.error.code == "INVALID_SIGNATURE"


def test_other_algorithm_is_rejected(issuer):
    token = jwt.encode(
        {"sub": str(uuid4()), "exp": datetime.now(UTC) + timedelta(hours=1)},
        SECRET,
        algorithm="HS512",
    )

    result = issuer.verify(token)

    assert result.is_err()
    assert result.error.code == "INVALID_SIGNATURE"


@pytest.mark.parametrize("token", ["", "garbage", "a.b.c", "not.a-jwt"])
def test_unparseable_token_is_malformed(issuer, token):
    result = issuer.verify(token)

    assert result.is_err()
    assert result.error.code == "MALFORMED_TOKEN"


def test_token_without_subject_is_malformed(issuer):
    token = jwt.encode(
        {"exp": datetime.now(UTC) + timedelta(hours=1)}, SECRET, algorithm="HS256"
    )

    result = issuer.verify(token)

    assert result.is_err()
    assert result.error.code == "MALFORMED_TOKEN"


def test_token_without_expiry_is_malformed(issuer):
    token = jwt.encode({"sub": str(uuid4())}, SECRET, algorithm="HS256")

    result = issuer.verify(token)

    assert result.is_err()
    assert result.error.code == "MALFORMED_TOKEN"


def test_verify_is_repeatable(issuer):
    issued = issuer.issue(uuid4())

    first = issuer.verify(issued.token)
    second = issuer.verify(issued.token)

    assert first.value == second.value
