# feria/core/security.py
"""
Password hashing and session tokens.

Responsibilities
----------------
1. Password hashing / verification     (passlib bcrypt)
2. Session token issue / verify         (python-jose, HS256)

No other module should touch raw crypto directly.
"""

import logging
from datetime import datetime, timedelta, timezone
from functools import lru_cache

from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import ValidationError as SchemaValidationError

from feria.core.config import get_settings
from feria.schemas.auth import SessionClaims

logger = logging.getLogger(__name__)

settings = get_settings()

# ---------------------------------------------------------------------------
# 1.  bcrypt - password hashing
# ---------------------------------------------------------------------------
# The salt is embedded in the hash string (passlib convention).

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.PASSWORD_HASH_ROUNDS,
)


def hash_password(plain: str) -> str:
    """Hash a plaintext password with bcrypt and a fresh random salt."""
    return pwd_context.hash(plain)


def verify_password(plain: str, stored_hash: str) -> bool:
    """
    Check a plaintext password against a stored hash.

    Returns False on mismatch and on hashes passlib cannot identify.
    """
    try:
        return pwd_context.verify(plain, stored_hash)
    except (ValueError, TypeError):
        logger.warning("Stored password hash could not be verified")
        return False


# ---------------------------------------------------------------------------
# 2.  JWT - session tokens
# ---------------------------------------------------------------------------


class TokenService:
    """
    Issues and verifies signed, time-limited session tokens.

    The secret, algorithm and default lifetime are fixed at construction;
    nothing here reads the environment.
    """

    def __init__(self, secret_key: str, algorithm: str, ttl: timedelta):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.ttl = ttl

    def issue(
        self,
        claims: SessionClaims,
        ttl: timedelta | None = None,
        now: datetime | None = None,
    ) -> str:
        """
        Sign `claims` and embed `exp = now + ttl`.

        `now` defaults to the current UTC time; `ttl` to the service lifetime.
        """
        issued_at = now or datetime.now(timezone.utc)
        to_encode = claims.model_dump(by_alias=True)
        to_encode["exp"] = issued_at + (self.ttl if ttl is None else ttl)
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> SessionClaims | None:
        """
        Decode and verify a token.

        Returns None for any bad signature, malformed token, missing claim
        or expired token. The reason is deliberately not exposed.
        """
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
            return SessionClaims.model_validate(payload)
        except (JWTError, SchemaValidationError):
            return None


@lru_cache
def get_token_service() -> TokenService:
    """FastAPI dependency: the process-wide token service."""
    return TokenService(
        secret_key=settings.JWT_SECRET_KEY,
        algorithm=settings.JWT_ALGORITHM,
        ttl=timedelta(seconds=settings.SESSION_TTL_SECONDS),
    )
