# app/deps/auth.py
from typing import Optional
from fastapi import Depends
from fastapi.security import APIKeyCookie
from sqlalchemy.orm import Session

from app.db import get_db
from app.errors import AuthenticationError
from app.services.auth import AuthContext, validate_session
from app.settings import get_settings

# Exposes the cookie in Swagger; login/register set it
session_cookie = APIKeyCookie(name=get_settings().SESSION_COOKIE_NAME, auto_error=False)

def get_optional_auth(
    db: Session = Depends(get_db),
    token: Optional[str] = Depends(session_cookie),
) -> Optional[AuthContext]:
    return validate_session(db, token)

def require_auth(
    auth: Optional[AuthContext] = Depends(get_optional_auth),
) -> AuthContext:
    """
    Usage: def handler(auth: AuthContext = Depends(require_auth)): ...

    Missing, unknown and expired tokens all produce the same 401.
    Store failures are not caught here and end up as a 500.
    """
    if auth is None:
        raise AuthenticationError("Authentication required")
    return auth
