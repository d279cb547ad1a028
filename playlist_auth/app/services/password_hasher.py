"""
Password Hasher

Salted one-way password digests using bcrypt.
"""

import hmac
import logging
from typing import NamedTuple

import bcrypt

logger = logging.getLogger(__name__)

# bcrypt silently ignores (or, in newer releases, rejects) input past 72 bytes
BCRYPT_MAX_PASSWORD_BYTES = 72


class HashingFailure(Exception):
    """The key derivation function or its randomness source failed"""


class PasswordDigest(NamedTuple):
    salt: str
    digest: str


class PasswordHasher:
    """
    Derives and verifies bcrypt password digests.

    The salt is kept alongside the digest so a credential can be recomputed
    from (password, salt) alone. A fresh salt is drawn on every hash() call.
    """

    def __init__(self, rounds: int = 12):
        self.rounds = rounds
        self._dummy_salt = None
        self._dummy_digest = None

    def hash(self, password: str) -> PasswordDigest:
        """
        Hash a password with a freshly generated salt.

        Raises:
            HashingFailure: salt generation or bcrypt failed
        """
        try:
            salt = bcrypt.gensalt(self.rounds)
            digest = bcrypt.hashpw(password.encode("utf-8"), salt)
        except (ValueError, TypeError, OSError) as exc:
            logger.error(f"Password hashing failed: {type(exc).__name__}")
            raise HashingFailure("Password hashing failed") from exc

        return PasswordDigest(salt=salt.decode("utf-8"), digest=digest.decode("utf-8"))

    def verify(self, password: str, salt: str, expected_digest: str) -> bool:
        """
        Recompute the digest for `password` under `salt` and compare it in
        constant time with `expected_digest`.

        Raises:
            HashingFailure: the stored salt is unusable or bcrypt failed
        """
        password_bytes = password.encode("utf-8")
        if len(password_bytes) > BCRYPT_MAX_PASSWORD_BYTES:
            # Never accepted at hash time, so it cannot match a stored digest
            return False

        try:
            candidate = bcrypt.hashpw(password_bytes, salt.encode("utf-8"))
        except (ValueError, TypeError) as exc:
            logger.error(f"Password verification failed: {type(exc).__name__}")
            raise HashingFailure("Password verification failed") from exc

        return hmac.compare_digest(candidate, expected_digest.encode("utf-8"))

    def dummy_verify(self, password: str) -> None:
        """Spend one verification on a throwaway credential (login timing)."""
        if self._dummy_digest is None:
            self._dummy_salt, self._dummy_digest = self.hash("dummy_password")
        self.verify(password, self._dummy_salt, self._dummy_digest)
