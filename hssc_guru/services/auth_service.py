"""Accounts, password hashing and JWT login sessions."""
import uuid
from datetime import datetime, timedelta, timezone

import bcrypt
from jose import JWTError, jwt
from sqlalchemy import delete, or_, select
from sqlalchemy.orm import Session as DbSession

from hssc_guru.config import (
    ACCESS_TOKEN_EXPIRE_MINUTES,
    ALGORITHM,
    SECRET_KEY,
    SESSION_EXTEND_MINUTES,
)
from hssc_guru.models.db.user import LoginSession, User


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def check_password(password: str, hashed: str) -> bool:
    return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))


def issue_token(user_id: int) -> tuple[str, str, datetime]:
    """Sign an access token for user_id.

    Returns:
        Tuple of (token, jti, expires_at)
    """
    jti = uuid.uuid4().hex
    expires_at = datetime.now(timezone.utc) + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    token = jwt.encode(
        {"sub": str(user_id), "exp": expires_at, "jti": jti},
        SECRET_KEY,
        algorithm=ALGORITHM,
    )
    return token, jti, expires_at


def decode_token(token: str) -> dict | None:
    """Return the token claims, or None when the signature or expiry is bad."""
    try:
        return jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None


def get_user(db: DbSession, user_id: int) -> User | None:
    return db.get(User, user_id)


def find_user(db: DbSession, login: str) -> User | None:
    """Look a user up by username or email."""
    stmt = select(User).where(or_(User.username == login, User.email == login))
    return db.scalars(stmt).first()


def register_user(
    db: DbSession,
    username: str,
    email: str,
    password: str,
    display_name: str | None = None,
) -> User:
    """Create an account.

    Raises:
        ValueError: username or email is already taken.
    """
    taken = db.scalars(
        select(User).where(or_(User.username == username, User.email == email))
    ).first()
    if taken is not None:
        field = "Username" if taken.username == username else "Email"
        raise ValueError(f"{field} already registered")

    user = User(
        username=username,
        email=email,
        hashed_password=hash_password(password),
        display_name=display_name,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def login_user(db: DbSession, user: User) -> str:
    """Issue a token for user and record the login behind it."""
    token, jti, expires_at = issue_token(user.id)
    db.add(LoginSession(user_id=user.id, token_jti=jti, expires_at=expires_at))
    db.commit()
    return token


def _live_logins(now: datetime):
    return select(LoginSession).where(
        LoginSession.revoked.is_(False),
        LoginSession.expires_at > now,
    )


def find_login(db: DbSession, token_jti: str) -> LoginSession | None:
    """The unrevoked, unexpired login behind a token."""
    now = datetime.now(timezone.utc)
    return db.scalars(_live_logins(now).where(LoginSession.token_jti == token_jti)).first()


def has_active_session(db: DbSession, user_id: int) -> bool:
    """Whether the user still holds any live login."""
    now = datetime.now(timezone.utc)
    return db.scalars(_live_logins(now).where(LoginSession.user_id == user_id)).first() is not None


def touch_login(db: DbSession, login: LoginSession) -> None:
    """Slide the expiry of a login forward on activity."""
    now = datetime.now(timezone.utc)
    login.last_seen_at = now
    login.expires_at = now + timedelta(minutes=SESSION_EXTEND_MINUTES)
    db.commit()


def revoke_login(db: DbSession, token_jti: str) -> None:
    login = db.scalars(select(LoginSession).where(LoginSession.token_jti == token_jti)).first()
    if login is not None:
        login.revoked = True
        db.commit()


def purge_expired_logins(db: DbSession) -> int:
    """Delete logins past their expiry; returns how many went."""
    now = datetime.now(timezone.utc)
    result = db.execute(delete(LoginSession).where(LoginSession.expires_at < now))
    db.commit()
    return result.rowcount
