"""POST /v1/auth/register, POST /v1/auth/login - user registration and login"""

import uuid

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from finance_api.api.dependencies import get_current_user_id, get_request_id, get_settings
from finance_api.api.v1.schemas import AuthResponse, LoginRequest, RegisterRequest, UserResponse
from finance_api.config import Settings
from finance_api.domain.exceptions import AuthenticationError, ConflictError, NotFoundError
from finance_api.infrastructure.database.repositories import UserRepository
from finance_api.infrastructure.database.session import get_db
from finance_api.infrastructure.observability.logging import log_auth_event
from finance_api.infrastructure.observability.metrics import record_auth_attempt
from finance_api.infrastructure.security import create_access_token, hash_password, verify_password

router = APIRouter()


def normalize_email(email: str) -> str:
    return email.strip().lower()


@router.post("/auth/register", response_model=AuthResponse, status_code=201)
def register(
    body: RegisterRequest,
    request: Request,
    db: Session = Depends(get_db),
    app_settings: Settings = Depends(get_settings),
):
    """
    Create a user with a bcrypt-hashed password and return a bearer token.

    Raises:
        ConflictError: email already registered
    """
    request_id = get_request_id(request)
    email = normalize_email(body.email)
    user_repo = UserRepository(db)

    if user_repo.get_by_email(email):
        record_auth_attempt("register", success=False)
        log_auth_event(request_id, "register", "failure", reason="email_taken")
        raise ConflictError("Email already registered")

    user = user_repo.create(
        name=body.name,
        email=email,
        password_hash=hash_password(body.password, app_settings.bcrypt_rounds),
    )
    db.commit()

    record_auth_attempt("register", success=True)
    log_auth_event(request_id, "register", "success")

    return AuthResponse(
        id=str(user.id),
        name=user.name,
        email=user.email,
        token=create_access_token(str(user.id), user.email, app_settings),
    )


@router.post("/auth/login", response_model=AuthResponse)
def login(
    body: LoginRequest,
    request: Request,
    db: Session = Depends(get_db),
    app_settings: Settings = Depends(get_settings),
):
    """
    Exchange email and password for a bearer token.

    Unknown email and wrong password both answer 401 with the same message;
    the distinct reason is only logged.
    """
    request_id = get_request_id(request)
    user = UserRepository(db).get_by_email(normalize_email(body.email))

    if user is None:
        reason = "unknown_email"
    elif not verify_password(body.password, user.password_hash):
        reason = "wrong_password"
    else:
        reason = None

    if reason:
        record_auth_attempt("login", success=False)
        log_auth_event(request_id, "login", "failure", reason=reason)
        raise AuthenticationError("Invalid credentials", reason=reason)

    record_auth_attempt("login", success=True)
    log_auth_event(request_id, "login", "success")

    return AuthResponse(
        id=str(user.id),
        name=user.name,
        email=user.email,
        token=create_access_token(str(user.id), user.email, app_settings),
    )


@router.get("/auth/me", response_model=UserResponse)
def current_user(
    db: Session = Depends(get_db),
    current_user_id: uuid.UUID = Depends(get_current_user_id),
):
    user = UserRepository(db).get(current_user_id)
    if user is None:
        raise NotFoundError("User not found")
    return UserResponse(id=str(user.id), name=user.name, email=user.email)
