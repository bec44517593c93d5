"""Security utilities"""

import re
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from jose import jwt, JWTError
from passlib.context import CryptContext

from .config import settings
from .exceptions import InvalidTokenError


# Password context
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
OPAQUE_TOKEN_BYTES = 32
MIN_PASSWORD_LENGTH = 8


@dataclass(frozen=True)
class TokenClaims:
    user_id: str
    email: str


@dataclass(frozen=True)
class PasswordCheck:
    valid: bool
    message: Optional[str] = None


def get_password_hash(password: str) -> str:
    """Hash password"""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password"""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        # unknown or malformed digest
        return False


def create_access_token(user_id: str, email: str) -> str:
    """Create a signed access token carrying the user's id and email"""
    now = datetime.utcnow()
    to_encode = {
        "userId": str(user_id),
        "email": email,
        "iat": now,
        "exp": now + timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS),
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def verify_token(token: str) -> TokenClaims:
    """Verify token and return its claims.

    Raises InvalidTokenError when the signature does not match, the token has
    expired, or the expected claims are missing.
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise InvalidTokenError()

    user_id = payload.get("userId")
    email = payload.get("email")
    if not user_id or not email:
        raise InvalidTokenError()
    return TokenClaims(user_id=user_id, email=email)


def generate_opaque_token() -> str:
    """Random token for email verification and password reset links (64 hex chars)."""
    return secrets.token_hex(OPAQUE_TOKEN_BYTES)


def is_valid_email(email: str) -> bool:
    return bool(email) and EMAIL_PATTERN.match(email) is not None


def is_valid_password(password: str) -> PasswordCheck:
    """Check password strength; the first failing rule decides the message."""
    if len(password) < MIN_PASSWORD_LENGTH:
        return PasswordCheck(False, "Password must be at least 8 characters long")
    if not re.search(r"[A-Z]", password):
        return PasswordCheck(False, "Password must contain at least one uppercase letter")
    if not re.search(r"[a-z]", password):
        return PasswordCheck(False, "Password must contain at least one lowercase letter")
    if not re.search(r"[0-9]", password):
        return PasswordCheck(False, "Password must contain at least one number")
    return PasswordCheck(True)
