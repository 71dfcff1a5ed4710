"""Bearer-token user resolution."""
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session as DbSession

from hssc_guru.database import get_db
from hssc_guru.models.db.user import User
from hssc_guru.services.auth_service import decode_token, find_login, get_user, touch_login

bearer = HTTPBearer(auto_error=False)

Credentials = Annotated[HTTPAuthorizationCredentials | None, Depends(bearer)]


def resolve_user(
    credentials: HTTPAuthorizationCredentials | None,
    db: DbSession,
) -> tuple[User | None, str | None]:
    """Map a bearer token to its user.

    Returns:
        (user, None) on success, (None, reason) otherwise.
    """
    if credentials is None:
        return None, "Not authenticated"

    claims = decode_token(credentials.credentials)
    if claims is None or "sub" not in claims or "jti" not in claims:
        return None, "Invalid or expired token"

    login = find_login(db, claims["jti"])
    if login is None:
        return None, "Logged out or session expired"
    touch_login(db, login)

    user = get_user(db, int(claims["sub"]))
    if user is None or not user.is_active:
        return None, "Account unavailable"
    return user, None


async def get_current_user(
    credentials: Credentials,
    db: Annotated[DbSession, Depends(get_db)],
) -> User:
    """The logged-in user; 401 otherwise."""
    user, reason = resolve_user(credentials, db)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=reason,
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


async def get_optional_user(
    credentials: Credentials,
    db: Annotated[DbSession, Depends(get_db)],
) -> User | None:
    user, _ = resolve_user(credentials, db)
    return user
