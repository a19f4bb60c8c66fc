"""
Authentication router.
Handles registration, login and the current user's profile.
"""

from fastapi import APIRouter, Depends, Request, status
from slowapi.util import get_remote_address
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shared.infrastructure.db import get_db, safe_commit
from shared.config.logging import auth_logger as logger, audit_auth_event, mask_email
from shared.config.settings import settings
from shared.security.auth import sign_user_token
from shared.security.password import hash_password, needs_rehash, verify_password
from shared.security.rate_limit import limiter, login_rate_limit
from shared.utils.exceptions import AuthenticationError, DuplicateEntityError
from shared.utils.schemas import (
    ApiResponse,
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    UpdateDetailsRequest,
    UpdatePasswordRequest,
    UserOutput,
)
from rest_api.models import User
from rest_api.routers._common import current_user
from rest_api.services.views import user_view


router = APIRouter(prefix="/api/auth", tags=["auth"])


def _normalize_email(email: str) -> str:
    return email.strip().lower()


def _auth_response(user: User) -> AuthResponse:
    return AuthResponse(
        token=sign_user_token(user.id, user.role, user.email, user.token_version),
        expires_in=settings.jwt_access_token_expire_minutes * 60,
        user=user_view(user),
    )


def _email_taken(db: Session, email: str, exclude_user_id: int | None = None) -> bool:
    query = select(User.id).where(User.email == email)
    if exclude_user_id is not None:
        query = query.where(User.id != exclude_user_id)
    return db.scalar(query) is not None


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(request: Request, body: RegisterRequest, db: Session = Depends(get_db)) -> AuthResponse:
    """
    Create a customer or shop owner account and return an access token.

    Admin accounts cannot be self-registered.
    """
    email = _normalize_email(body.email)
    if _email_taken(db, email):
        audit_auth_event("REGISTER", email=email, success=False, reason="email taken",
                         ip_address=get_remote_address(request))
        raise DuplicateEntityError("User with this email already exists")

    user = User(
        name=body.name.strip(),
        email=email,
        password=hash_password(body.password),
        role=body.role,
        phone=body.phone,
        address=body.address.model_dump(by_alias=True, exclude_none=True) if body.address else None,
    )
    db.add(user)
    try:
        safe_commit(db)
    except IntegrityError:
        raise DuplicateEntityError("User with this email already exists")

    audit_auth_event("REGISTER", user_id=user.id, email=user.email, role=user.role,
                     ip_address=get_remote_address(request))
    return _auth_response(user)


@router.post("/login", response_model=AuthResponse)
@limiter.limit(login_rate_limit)
def login(request: Request, body: LoginRequest, db: Session = Depends(get_db)) -> AuthResponse:
    """
    Authenticate with email and password.

    Rate limited per client IP. Wrong credentials and deactivated accounts
    both answer 401.
    """
    email = _normalize_email(body.email)
    ip_address = get_remote_address(request)
    user = db.scalar(select(User).where(User.email == email))

    if user is None or not verify_password(body.password, user.password):
        audit_auth_event("LOGIN", email=email, success=False, reason="invalid credentials",
                         ip_address=ip_address)
        raise AuthenticationError("Invalid credentials")

    if not user.is_active:
        audit_auth_event("LOGIN", user_id=user.id, email=email, success=False,
                         reason="account deactivated", ip_address=ip_address)
        raise AuthenticationError("Account is deactivated. Please contact support.", user_id=user.id)

    if needs_rehash(user.password):
        user.password = hash_password(body.password)
        safe_commit(db)

    audit_auth_event("LOGIN", user_id=user.id, email=user.email, ip_address=ip_address)
    return _auth_response(user)


@router.get("/me", response_model=ApiResponse[UserOutput])
def get_me(user: User = Depends(current_user)) -> ApiResponse[UserOutput]:
    """Return the authenticated user."""
    return ApiResponse(data=user_view(user))


@router.post("/logout", response_model=ApiResponse[None])
def logout(
    request: Request,
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
) -> ApiResponse[None]:
    """Revoke every token issued to the user so far."""
    user.token_version += 1
    safe_commit(db)
    audit_auth_event("LOGOUT", user_id=user.id, email=user.email, ip_address=get_remote_address(request))
    return ApiResponse(message="Logged out successfully")


@router.put("/update-details", response_model=ApiResponse[UserOutput])
def update_details(
    body: UpdateDetailsRequest,
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
) -> ApiResponse[UserOutput]:
    """Update name, email, phone or address of the authenticated user."""
    if body.email is not None:
        email = _normalize_email(body.email)
        if _email_taken(db, email, exclude_user_id=user.id):
            raise DuplicateEntityError("Email already exists", user_id=user.id)
        user.email = email
    if body.name is not None:
        user.name = body.name.strip()
    if body.phone is not None:
        user.phone = body.phone
    if body.address is not None:
        user.address = body.address.model_dump(by_alias=True, exclude_none=True)

    safe_commit(db)
    logger.info("User details updated", user_id=user.id, email=mask_email(user.email))
    return ApiResponse(data=user_view(user))


@router.put("/update-password", response_model=AuthResponse)
def update_password(
    request: Request,
    body: UpdatePasswordRequest,
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
) -> AuthResponse:
    """Change the password; the current one must be supplied.

    Older tokens stop working; the response carries a fresh one."""
    if not verify_password(body.current_password, user.password):
        audit_auth_event("PASSWORD_CHANGED", user_id=user.id, email=user.email, success=False,
                         reason="wrong current password", ip_address=get_remote_address(request))
        raise AuthenticationError("Current password is incorrect", user_id=user.id)

    user.password = hash_password(body.new_password)
    user.token_version += 1
    safe_commit(db)

    audit_auth_event("PASSWORD_CHANGED", user_id=user.id, email=user.email,
                     ip_address=get_remote_address(request))
    return _auth_response(user)
