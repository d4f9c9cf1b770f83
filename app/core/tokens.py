# tokens.py
# Issues and verifies the signed bearer tokens handed out at login.

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable
from uuid import UUID

from jose import JWTError, jwt

from app.core.errors import TokenExpired, TokenMalformed, TokenMissing

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:
    """
    Signs and checks JWT access tokens.

    The signing key is fixed for the lifetime of the process. Rotating it
    invalidates every token issued before the rotation.
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        expire_minutes: int = 60,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expires_delta = timedelta(minutes=expire_minutes)
        self.clock = clock

    def issue(self, user_id: UUID) -> str:
        """
        Creates a new token for the given user, valid from now until now + expiry.
        """
        issued_at = self.clock()
        to_encode = {
            "sub": str(user_id),
            "iat": issued_at,
            "exp": issued_at + self.expires_delta,
        }
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str | None) -> UUID:
        """
        Returns the user id a token was issued for.
        Raises TokenMissing, TokenExpired or TokenMalformed.
        """
        if not token:
            raise TokenMissing()

        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"verify_exp": False, "verify_iat": False},
            )
        except JWTError:
            logger.warning("Invalid Auth Token")
            raise TokenMalformed()

        exp = payload.get("exp")
        if not isinstance(exp, (int, float)):
            logger.warning("Auth token has no expiry")
            raise TokenMalformed()
        if self.clock() >= datetime.fromtimestamp(exp, tz=timezone.utc):
            logger.warning("Expired Auth Token")
            raise TokenExpired()

        subject = payload.get("sub")
        if subject is None:
            logger.warning("Auth token has no subject")
            raise TokenMalformed()
        try:
            return UUID(subject)
        except (ValueError, TypeError, AttributeError):
            logger.warning("Auth token subject is not a user id")
            raise TokenMalformed()
