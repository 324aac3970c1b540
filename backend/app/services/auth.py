"""
Session-cookie authentication.

Sessions are opaque random tokens persisted in `auth_sessions` with a fixed
one-year lifetime. Expiry is enforced lazily: an expired row is removed the
next time someone presents its token; nothing sweeps them in the background.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Iterator, Optional

from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError
from sqlalchemy.orm import Session

from app.models import AuthSession, User
from app.repositories.auth_session_repo import AuthSessionRepository
from app.repositories.user_repo import UserRepository
from app.security import generate_session_token, hash_password, verify_password
from app.settings import get_settings

logger = logging.getLogger(__name__)

# substrings drivers use when the server can't be reached at all
CONNECTION_ERROR_MARKERS = (
    "connection refused",
    "could not connect",
    "connection failed",
    "connection reset",
    "connection timed out",
    "server closed the connection",
    "terminating connection",
    "unable to open database",
    "can't connect",
    "no route to host",
)


class DatabaseUnavailable(Exception):
    """The credential store could not be reached."""


@dataclass(frozen=True, slots=True)
class AuthContext:
    """Request-scoped identity handed to route handlers."""
    user: User
    session: AuthSession


def is_connection_error(exc: DBAPIError) -> bool:
    if getattr(exc, "connection_invalidated", False):
        return True
    message = str(exc.orig if exc.orig is not None else exc).lower()
    return any(marker in message for marker in CONNECTION_ERROR_MARKERS)


@contextmanager
def store_call() -> Iterator[None]:
    """Translate driver-level connectivity failures into DatabaseUnavailable."""
    try:
        yield
    except (OperationalError, InterfaceError) as exc:
        if is_connection_error(exc):
            logger.error("credential store unreachable: %s", exc.orig or exc)
            raise DatabaseUnavailable("Database connection failed") from exc
        raise


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_aware(dt: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone=True columns
    return dt if dt.tzinfo is not None else dt.replace(tzinfo=timezone.utc)


def create_session(db: Session, user_id: int) -> AuthSession:
    s = get_settings()
    token = generate_session_token(s.SESSION_TOKEN_LENGTH)
    expires_at = _utcnow() + timedelta(days=s.SESSION_TTL_DAYS)
    with store_call():
        return AuthSessionRepository(db).create(user_id, token=token, expires_at=expires_at)


def validate_session(db: Session, token: Optional[str]) -> Optional[AuthContext]:
    if not token:
        return None
    repo = AuthSessionRepository(db)
    with store_call():
        sess = repo.get_by_token(token)
        if sess is None:
            return None
        if _as_aware(sess.expires_at) < _utcnow():
            logger.info("reaping expired session id=%s user_id=%s", sess.id, sess.user_id)
            repo.delete(sess)
            return None
    return AuthContext(user=sess.user, session=sess)


def delete_session(db: Session, token: Optional[str]) -> None:
    if not token:
        return
    with store_call():
        AuthSessionRepository(db).delete_by_token(token)


def authenticate_user(db: Session, username: str, password: str) -> Optional[User]:
    # NOTE: the unknown-user path skips the bcrypt check, so it answers faster
    # than a wrong password does.
    with store_call():
        user = UserRepository(db).get_by_username(username)
    if user is None:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


def register_user(db: Session, *, username: str, password: str, name: str) -> User:
    """Raises ValueError("username_already_exists") on a duplicate username."""
    with store_call():
        return UserRepository(db).create(
            username=username,
            name=name,
            password_hash=hash_password(password),
        )
