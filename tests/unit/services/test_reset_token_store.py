"""
Unit tests for ResetTokenStore

Repository is mocked; atomicity of the conditional delete is covered by the
integration tests against a real database.
"""
import hashlib
from datetime import datetime, timedelta
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from playlist_auth.app.services.reset_token_store import ResetTokenStore, hash_reset_token

NOW = datetime(2026, 3, 1, 9, 0, 0)


@pytest.fixture
def repository():
    repo = MagicMock()
    repo.create = AsyncMock(side_effect=lambda token: token)
    repo.delete_if_valid = AsyncMock(return_value=None)
    repo.delete_expired = AsyncMock(return_value=0)
    return repo


@pytest.fixture
def store(repository):
    return ResetTokenStore(repository, clock=lambda: NOW)


@pytest.mark.asyncio
async def test_issue_persists_hash_with_30_minute_window(store, repository):
    user_id = uuid4()

    token = await store.issue(user_id)

    repository.create.assert_called_once()
    record = repository.create.call_args.args[0]
    assert record.user_id == user_id
    assert record.token_hash == hashlib.sha256(token.encode()).hexdigest()
    assert record.token_hash != token
    assert record.created_at == NOW
    assert record.expires_at == NOW + timedelta(minutes=30)


@pytest.mark.asyncio
async def test_issue_generates_32_byte_random_tokens(store):
    first = await store.issue(uuid4())
    second = await store.issue(uuid4())

    # token_urlsafe(32) encodes 32 bytes as 43 characters
    assert len(first) == 43
    assert first != second


@pytest.mark.asyncio
async def test_consume_deletes_by_hash_at_current_time(store, repository):
    user_id = uuid4()
    repository.delete_if_valid.return_value = user_id

    result = await store.consume("plain-token")

    assert result.is_ok()
    assert result.value == user_id
    repository.delete_if_valid.assert_called_once_with(hash_reset_token("plain-token"), NOW)


@pytest.mark.asyncio
async def test_consume_fails_when_nothing_was_deleted(store, repository):
    repository.delete_if_valid.return_value = None

    result = await store.consume("plain-token")

    assert result.is_err()
    assert result.error.code == "TOKEN_ALREADY_USED_OR_EXPIRED"


@pytest.mark.asyncio
async def test_custom_ttl(repository):
    store = ResetTokenStore(repository, ttl=timedelta(minutes=5), clock=lambda: NOW)

    await store.issue(uuid4())

    record = repository.create.call_args.args[0]
    assert record.expires_at == NOW + timedelta(minutes=5)


@pytest.mark.asyncio
async def test_purge_expired_passes_current_time(store, repository):
    repository.delete_expired.return_value = 4

    purged = await store.purge_expired()

    assert purged == 4
    repository.delete_expired.assert_called_once_with(NOW)
