import pytest
from datetime import timedelta
from urllib.parse import parse_qs, urlparse

from httpx import AsyncClient
from sqlmodel import select

from playlist_auth.domain.base import utcnow
from playlist_auth.domain.entities import PasswordResetToken

NEW_PASSWORD = "N3w!Password"


async def request_reset_token(client: AsyncClient, mail_sender) -> str:
    await client.post("/auth/register", json={
        "username": "alice", "email": "a@x.com", "password": "Str0ng!Pass",
    })
    await client.post("/auth/request-password-reset", json={"identifier": "a@x.com"})
    link = mail_sender.sent[-1]["reset_link"]
    return parse_qs(urlparse(link).query)["token"][0]


def confirm_body(token: str, password: str = NEW_PASSWORD, repeat: str = None) -> dict:
    return {
        "token": token,
        "new_password": password,
        "new_password_repeat": password if repeat is None else repeat,
    }


@pytest.mark.asyncio
async def test_reset_then_reuse_is_rejected(client: AsyncClient, mail_sender):
    """Given alice requested a reset
    When she confirms with the mailed token
    Then the new password works and the old one does not
    And the same token cannot be used a second time
    """
    token = await request_reset_token(client, mail_sender)

    response = await client.post("/auth/confirm-password-reset", json=confirm_body(token))

    assert response.status_code == 200
    assert response.json()["status"] == "success"

    old = await client.post("/auth/login", json={"username": "alice", "password": "Str0ng!Pass"})
    new = await client.post("/auth/login", json={"username": "alice", "password": NEW_PASSWORD})
    assert old.status_code == 401
    assert new.status_code == 200

    reuse = await client.post(
        "/auth/confirm-password-reset", json=confirm_body(token, "An0ther!Pass")
    )
    assert reuse.status_code == 400
    assert reuse.json()["error"]["code"] == "INVALID_OR_EXPIRED_TOKEN"


@pytest.mark.asyncio
async def test_unknown_token(client: AsyncClient):
    response = await client.post("/auth/confirm-password-reset", json=confirm_body("made-up"))

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_OR_EXPIRED_TOKEN"


@pytest.mark.asyncio
async def test_expired_token_is_rejected_before_any_cleanup(
    client: AsyncClient, db_session, mail_sender
):
    token = await request_reset_token(client, mail_sender)
    record = (await db_session.exec(select(PasswordResetToken))).one()
    record.expires_at = utcnow() - timedelta(seconds=1)
    db_session.add(record)
    await db_session.commit()

    response = await client.post("/auth/confirm-password-reset", json=confirm_body(token))

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_OR_EXPIRED_TOKEN"
    login = await client.post("/auth/login", json={"username": "alice", "password": "Str0ng!Pass"})
    assert login.status_code == 200


@pytest.mark.asyncio
async def test_validation_failure_keeps_token_usable(client: AsyncClient, mail_sender):
    token = await request_reset_token(client, mail_sender)

    mismatch = await client.post(
        "/auth/confirm-password-reset", json=confirm_body(token, repeat="N3w!Passwor")
    )
    assert mismatch.status_code == 400
    assert mismatch.json()["error"]["code"] == "VALIDATION_FAILED"

    retry = await client.post("/auth/confirm-password-reset", json=confirm_body(token))
    assert retry.status_code == 200


@pytest.mark.asyncio
async def test_other_tokens_of_the_user_stay_valid(client: AsyncClient, mail_sender):
    first = await request_reset_token(client, mail_sender)
    await client.post("/auth/request-password-reset", json={"identifier": "alice"})
    second = parse_qs(urlparse(mail_sender.sent[-1]["reset_link"]).query)["token"][0]

    assert (await client.post("/auth/confirm-password-reset", json=confirm_body(first))).status_code == 200
    response = await client.post(
        "/auth/confirm-password-reset", json=confirm_body(second, "An0ther!Pass")
    )

    assert response.status_code == 200
