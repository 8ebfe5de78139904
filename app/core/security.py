from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
import jwt
from passlib.context import CryptContext

from app.core.config import Settings
from app.errors import DomainValidationError

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ACCESS_TOKEN_TYPE = "access"

# bcrypt ignores everything past this many bytes of the password.
MAX_PASSWORD_BYTES = 72


def password_problem(password: str) -> str | None:
    """Return why ``password`` cannot be stored, or None if it can.

    Longer passwords would be silently truncated by bcrypt, and NUL
    characters are rejected by passlib and by PostgreSQL text columns.
    """
    if "\x00" in password:
        return "Password must not contain NUL characters"
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        return f"Password must be at most {MAX_PASSWORD_BYTES} bytes long"
    return None


def ensure_storable_password(password: str) -> None:
    """Raise DomainValidationError unless ``password`` can be hashed without loss."""
    problem = password_problem(password)
    if problem is not None:
        raise DomainValidationError(problem)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against a hashed password."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def gen_salt(kind: str, rounds: int | None = None) -> str:
    """Generate a crypt(3) salt the way pgcrypto's ``gen_salt`` does.

    Only the Blowfish (``bf``) scheme is supported. pgcrypto defaults to 6
    rounds for it.
    """
    if kind != "bf":
        raise ValueError(f"Unsupported salt type: {kind}")
    return bcrypt.gensalt(rounds=rounds or 6).decode("ascii")


def crypt(password: str, setting: str) -> str:
    """Hash ``password`` using the salt and rounds encoded in ``setting``.

    Mirrors pgcrypto's ``crypt``: passing a stored hash as ``setting``
    reproduces that hash iff the password matches.
    """
    return bcrypt.hashpw(password.encode("utf-8"), setting.encode("ascii")).decode("ascii")


@dataclass(frozen=True, slots=True)
class TokenService:
    """Issues and verifies signed, time-limited access tokens.

    Constructed once per process and shared by every request worker.
    """

    secret_key: str
    algorithm: str = "HS256"
    expires_delta: timedelta = timedelta(hours=72)

    @classmethod
    def from_settings(cls, settings: Settings) -> TokenService:
        return cls(
            secret_key=settings.secret_key,
            algorithm=settings.algorithm,
            expires_delta=timedelta(minutes=settings.access_token_expire_minutes),
        )

    def create_access_token(self, email: str, expires_delta: timedelta | None = None) -> str:
        """Create a JWT access token bound to the given email."""
        expire = datetime.now(timezone.utc) + (expires_delta or self.expires_delta)
        to_encode: dict[str, Any] = {
            "email": email,
            "exp": expire,
            "type": ACCESS_TOKEN_TYPE,
        }
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def decode_token(self, token: str) -> dict[str, Any] | None:
        """Decode and verify a JWT token."""
        try:
            return jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"require": ["exp"]},
            )
        except jwt.ExpiredSignatureError:
            return None
        except jwt.InvalidTokenError:
            return None

    def email_from_token(self, token: str) -> str | None:
        """Return the email bound to a valid access token, None otherwise."""
        payload = self.decode_token(token)
        if payload is None:
            return None

        # Validate token type - must be "access" token
        if payload.get("type") != ACCESS_TOKEN_TYPE:
            return None

        email = payload.get("email")
        if not isinstance(email, str) or not email:
            return None
        return email
