"""Dependency injection for FastAPI endpoints"""

import uuid
from typing import Optional

from fastapi import Depends, Header, Request

from finance_api.config import Settings
from finance_api.domain.exceptions import AccessDeniedError, AuthenticationError
from finance_api.infrastructure.security import decode_access_token


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_settings(request: Request) -> Settings:
    """Settings the application was created with"""
    return request.app.state.settings


def get_current_user_id(
    authorization: Optional[str] = Header(None),
    app_settings: Settings = Depends(get_settings),
) -> uuid.UUID:
    """
    Resolve the caller from an ``Authorization: Bearer <token>`` header.

    Raises:
        AuthenticationError: header missing, malformed, or token rejected
    """
    if not authorization:
        raise AuthenticationError("Missing token", reason="token_missing")

    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer":
        raise AuthenticationError("Invalid token format", reason="token_format")

    claims = decode_access_token(parts[1], app_settings)
    try:
        return uuid.UUID(claims["sub"])
    except ValueError as e:
        raise AuthenticationError("Invalid or expired token", reason="token_subject") from e


def ensure_same_user(user_id: uuid.UUID, current_user_id: uuid.UUID) -> None:
    """Reject requests that name a user other than the authenticated one"""
    if user_id != current_user_id:
        raise AccessDeniedError("Not allowed to access another user's data", reason="user_mismatch")
