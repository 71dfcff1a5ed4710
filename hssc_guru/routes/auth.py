"""Account and login endpoints."""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session as DbSession

from hssc_guru.config import ACCESS_TOKEN_EXPIRE_MINUTES
from hssc_guru.database import get_db
from hssc_guru.dependencies.auth import Credentials, get_current_user
from hssc_guru.models import (
    AccountResponse,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    TokenResponse,
)
from hssc_guru.models.db.user import User
from hssc_guru.services.auth_service import (
    check_password,
    decode_token,
    find_user,
    login_user,
    register_user,
    revoke_login,
)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _token(token: str) -> TokenResponse:
    return TokenResponse(access_token=token, expires_in=ACCESS_TOKEN_EXPIRE_MINUTES * 60)


def _revoke_bearer(credentials: Credentials, db: DbSession) -> None:
    claims = decode_token(credentials.credentials) if credentials else None
    if claims and claims.get("jti"):
        revoke_login(db, claims["jti"])


@router.post("/register", response_model=AccountResponse, status_code=status.HTTP_201_CREATED)
async def register(
    data: RegisterRequest,
    db: Annotated[DbSession, Depends(get_db)],
) -> User:
    """Create a candidate account."""
    try:
        return register_user(db, data.username, data.email, data.password, data.display_name)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.post("/login", response_model=TokenResponse)
async def login(
    data: LoginRequest,
    db: Annotated[DbSession, Depends(get_db)],
) -> TokenResponse:
    """Exchange username (or email) and password for a bearer token."""
    user = find_user(db, data.username)
    if user is None or not check_password(data.password, user.hashed_password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account disabled")
    return _token(login_user(db, user))


@router.post("/logout", response_model=MessageResponse)
async def logout(
    credentials: Credentials,
    db: Annotated[DbSession, Depends(get_db)],
) -> MessageResponse:
    """Revoke the login behind the presented token.

    A running quiz can no longer be submitted until the user logs in again.
    """
    _revoke_bearer(credentials, db)
    return MessageResponse(message="Logged out")


@router.get("/me", response_model=AccountResponse)
async def me(current_user: Annotated[User, Depends(get_current_user)]) -> User:
    return current_user


@router.post("/refresh", response_model=TokenResponse)
async def refresh(
    current_user: Annotated[User, Depends(get_current_user)],
    credentials: Credentials,
    db: Annotated[DbSession, Depends(get_db)],
) -> TokenResponse:
    """Swap a valid token for a fresh one."""
    _revoke_bearer(credentials, db)
    return _token(login_user(db, current_user))
