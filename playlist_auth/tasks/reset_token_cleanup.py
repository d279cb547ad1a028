"""RESET TOKEN CLEANUP TASKS

Removes password reset tokens whose window has closed. Storage hygiene only:
consume() rejects expired tokens whether or not this task has run.
"""

import asyncio
import logging

from sqlalchemy.exc import SQLAlchemyError

from playlist_auth.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from playlist_auth.app.services.reset_token_store import ResetTokenStore

logger = logging.getLogger(__name__)


async def cleanup_expired_reset_tokens(session_factory) -> int:
    """Delete expired reset tokens in one transaction"""
    logger.info("[TASK]: Starting cleanup of expired password reset tokens")

    async with session_factory() as session:
        async with SqlAlchemyUnitOfWork(session) as uow:
            store = ResetTokenStore(uow.password_reset_tokens)
            cleaned_count = await store.purge_expired()
            await uow.commit()

    logger.info(
        f"[TASK]: Successfully cleaned up {cleaned_count} expired password reset tokens"
    )
    return cleaned_count


async def run_reset_token_cleanup(session_factory, interval_seconds: float) -> None:
    """Run the cleanup forever, every `interval_seconds`, until cancelled"""
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            await cleanup_expired_reset_tokens(session_factory)
        except SQLAlchemyError as error:
            # Expired rows stay unusable until the next run deletes them
            logger.error(f"[TASK]: Error cleaning up expired password reset tokens: {error}")
        except Exception:
            logger.exception("[TASK]: Unexpected error cleaning up password reset tokens")
