"""
Session Token Issuer

Stateless signed bearer tokens (JWT, HS256) carrying the user id.
"""

from datetime import UTC, datetime, timedelta
from typing import NamedTuple, Optional
from uuid import UUID

from jose import ExpiredSignatureError, JWTError, jwt
from jose.exceptions import JWTClaimsError

from playlist_auth.libs.result import Error, Result, Return

# Fixed per deployment; never taken from the token header
ALGORITHM = "HS256"


class IssuedToken(NamedTuple):
    token: str
    expires_at: datetime


class SessionTokenIssuer:
    """
    Mints and verifies session tokens.

    Business Rules:
    - Claims: sub (user id), iat, exp
    - Expiry is 24 hours after issuance by default
    - Verification is a pure function of the token and the secret
    - No server-side revocation: a token stays valid until exp
    """

    def __init__(self, secret: str, ttl: timedelta = timedelta(hours=24)):
        self.secret = secret
        self.ttl = ttl

    def issue(self, subject_id: UUID, now: Optional[datetime] = None) -> IssuedToken:
        """
        Generate a signed session token.

        Args:
            subject_id: User UUID placed in the `sub` claim
            now: Issuance time (defaults to current UTC time)

        Returns:
            IssuedToken with the JWT string and its absolute expiry
        """
        issued_at = now or datetime.now(UTC)
        expires_at = issued_at + self.ttl
        payload = {
            "sub": str(subject_id),
            "iat": issued_at,
            "exp": expires_at,
        }
        token = jwt.encode(payload, self.secret, algorithm=ALGORITHM)
        return IssuedToken(token=token, expires_at=expires_at)

    def verify(self, token: str) -> Result[str]:
        """
        Verify signature and expiry of a session token.

        Returns:
            Result with the subject id, or Error

        Errors:
            - MALFORMED_TOKEN: structure cannot be parsed or claims are missing
            - INVALID_SIGNATURE: tampered, signed under another key, or
              announcing a different algorithm
            - EXPIRED_TOKEN: past its exp claim
        """
        try:
            header = jwt.get_unverified_header(token)
            claims = jwt.get_unverified_claims(token)
        except JWTError:
            return Return.err(Error("MALFORMED_TOKEN", "Token cannot be parsed"))

        if header.get("alg") != ALGORITHM:
            return Return.err(
                Error("INVALID_SIGNATURE", "Token signed with unexpected algorithm")
            )

        if not isinstance(claims.get("sub"), str) or "exp" not in claims:
            return Return.err(Error("MALFORMED_TOKEN", "Token is missing required claims"))

        try:
            payload = jwt.decode(token, self.secret, algorithms=[ALGORITHM])
        except ExpiredSignatureError:
            return Return.err(Error("EXPIRED_TOKEN", "Token has expired"))
        except JWTClaimsError:
            return Return.err(Error("MALFORMED_TOKEN", "Token claims are invalid"))
        except JWTError:
            return Return.err(Error("INVALID_SIGNATURE", "Token signature is invalid"))

        return Return.ok(payload["sub"])
