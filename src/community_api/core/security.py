"""JWT token handling and password hashing.

PyJWT signs access and refresh tokens; passlib/bcrypt hashes passwords.
Every token carries a ``type`` claim so a refresh token can never be
used as an access token and vice versa.
"""

from datetime import UTC, datetime, timedelta
from typing import Any, Literal

import jwt
from passlib.context import CryptContext

TokenType = Literal["access", "refresh"]

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    """Hash a plaintext password using bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash."""
    return pwd_context.verify(plain_password, hashed_password)


def _encode(claims: dict[str, Any], lifetime: timedelta, secret_key: str, algorithm: str) -> str:
    payload = {**claims, "exp": datetime.now(UTC) + lifetime}
    return jwt.encode(payload, secret_key, algorithm=algorithm)


def create_access_token(
    subject: str,
    role: str,
    secret_key: str,
    algorithm: str = "HS256",
    expires_minutes: int = 30,
) -> str:
    """Create a JWT access token.

    Args:
        subject: The token subject (username).
        role: The user's role at issue time.
        secret_key: Secret key for signing.
        algorithm: JWT signing algorithm.
        expires_minutes: Token lifetime in minutes.

    Returns:
        The encoded JWT string.
    """
    return _encode(
        {"sub": subject, "role": role, "type": "access"},
        timedelta(minutes=expires_minutes),
        secret_key,
        algorithm,
    )


def create_refresh_token(
    subject: str,
    secret_key: str,
    algorithm: str = "HS256",
    expires_days: int = 7,
) -> str:
    """Create a JWT refresh token for ``subject`` valid for ``expires_days``."""
    return _encode(
        {"sub": subject, "type": "refresh"},
        timedelta(days=expires_days),
        secret_key,
        algorithm,
    )


def decode_token(
    token: str,
    secret_key: str,
    algorithm: str = "HS256",
    *,
    expected_type: TokenType | None = None,
) -> dict[str, Any]:
    """Decode and validate a JWT token.

    Args:
        token: The JWT string to decode.
        secret_key: Secret key used for signing.
        algorithm: JWT signing algorithm.
        expected_type: When set, the ``type`` claim must match.

    Returns:
        The decoded token payload.

    Raises:
        jwt.ExpiredSignatureError: If the token has expired.
        jwt.InvalidTokenError: If the token is invalid or of the wrong type.
    """
    payload: dict[str, Any] = jwt.decode(token, secret_key, algorithms=[algorithm])
    if expected_type is not None and payload.get("type") != expected_type:
        msg = f"Expected a {expected_type} token"
        raise jwt.InvalidTokenError(msg)
    return payload
