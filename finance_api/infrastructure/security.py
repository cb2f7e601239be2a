"""Password hashing (bcrypt) and bearer token issuance (JWT)"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt

from finance_api.config import Settings
from finance_api.domain.exceptions import AuthenticationError


def hash_password(password: str, rounds: int) -> str:
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def create_access_token(
    user_id: str,
    email: str,
    config: Settings,
    expires_delta: timedelta | None = None,
) -> str:
    """Issue a signed token identifying the user (``jwt_expire_days`` by default)"""
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta if expires_delta is not None else timedelta(days=config.jwt_expire_days))
    claims = {"sub": str(user_id), "email": email, "iat": now, "exp": expire}
    return jwt.encode(claims, config.jwt_secret, algorithm=config.jwt_algorithm)


def decode_access_token(token: str, config: Settings) -> Dict[str, Any]:
    """
    Validate a bearer token and return its claims.

    Raises:
        AuthenticationError: expired, badly signed or malformed token
    """
    try:
        claims = jwt.decode(token, config.jwt_secret, algorithms=[config.jwt_algorithm])
    except ExpiredSignatureError as e:
        raise AuthenticationError("Invalid or expired token", reason="token_expired") from e
    except JWTError as e:
        raise AuthenticationError("Invalid or expired token", reason="token_invalid") from e

    if not claims.get("sub"):
        raise AuthenticationError("Invalid or expired token", reason="token_missing_subject")
    return claims
