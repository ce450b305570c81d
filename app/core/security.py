"""
Password hashing and bearer token signing.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import BaseModel, ValidationError

from app.core.errors import ConfigError

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class PasswordHasher:
    """bcrypt with a fixed work factor. Salt and cost live inside the hash."""

    def __init__(self, rounds: int = 10):
        self._context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, password: str, hashed: Optional[str]) -> bool:
        try:
            return self._context.verify(password, hashed)
        except (ValueError, TypeError) as e:
            # unknown or corrupt stored hash
            logger.warning(f"Stored password hash could not be verified: {e}")
            return False

    def verify_dummy(self, password: str) -> bool:
        """Spend the same bcrypt work as a real check when there is no user to check against."""
        self._context.dummy_verify()
        return False


class TokenClaims(BaseModel):
    sub: str
    email: str
    iat: int
    exp: int


class TokenService:
    """Issues and verifies HS256 bearer tokens.

    verify() returns None for every unusable token (malformed, tampered,
    wrong key, expired). Callers must not tell those cases apart.
    """

    def __init__(
        self,
        secret: str,
        *,
        algorithm: str = "HS256",
        ttl: timedelta = timedelta(days=7),
        clock: Optional[Clock] = None,
    ):
        if not secret:
            raise ConfigError("Token signing secret is not configured")
        self._secret = secret
        self._algorithm = algorithm
        self.ttl = ttl
        self._clock = clock or utc_now

    def issue(self, subject_id: str, email: str) -> str:
        now = self._clock()
        claims = TokenClaims(
            sub=str(subject_id),
            email=email,
            iat=int(now.timestamp()),
            exp=int((now + self.ttl).timestamp()),
        )
        return jwt.encode(claims.model_dump(), self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> Optional[TokenClaims]:
        try:
            # expiry is checked below against the injected clock
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"verify_exp": False},
            )
            claims = TokenClaims(**payload)
        except JWTError as e:
            logger.info(f"Token rejected: {e}")
            return None
        except ValidationError:
            logger.info("Token rejected: missing or malformed claims")
            return None

        if int(self._clock().timestamp()) >= claims.exp:
            logger.info("Token rejected: expired")
            return None
        return claims
