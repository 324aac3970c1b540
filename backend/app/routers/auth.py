import logging
from typing import Optional
from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session
from app.db import get_db
from app.deps.auth import require_auth, session_cookie
from app.errors import AuthenticationError, BackendUnavailable, ConflictError
from app.schemas.user import AuthResponse, MeResponse, UserLogin, UserRead, UserRegister
from app.services.auth import (
    AuthContext,
    DatabaseUnavailable,
    authenticate_user,
    create_session,
    delete_session,
    register_user,
)
from app.settings import get_settings

log = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

def _set_session_cookie(response: Response, token: str) -> None:
    s = get_settings()
    response.set_cookie(
        key=s.SESSION_COOKIE_NAME,
        value=token,
        max_age=s.session_max_age,
        path="/",
        httponly=True,
        samesite="lax",
        secure=s.is_production,
    )

def _clear_session_cookie(response: Response) -> None:
    s = get_settings()
    response.delete_cookie(
        key=s.SESSION_COOKIE_NAME,
        path="/",
        httponly=True,
        samesite="lax",
        secure=s.is_production,
    )

@router.post("/register", response_model=AuthResponse)
def register(payload: UserRegister, response: Response, db: Session = Depends(get_db)):
    try:
        user = register_user(db, username=payload.username, password=payload.password, name=payload.name)
        sess = create_session(db, user.id)
    except ValueError as e:
        if str(e) == "username_already_exists":
            raise ConflictError("Username already exists")
        raise
    except DatabaseUnavailable:
        # the user row is committed before the session is minted, so an outage
        # in between leaves the account behind and a retry answers 409
        raise BackendUnavailable()
    _set_session_cookie(response, sess.token)
    log.info("registered user_id=%s", user.id)
    return AuthResponse(user=UserRead.model_validate(user))

@router.post("/login", response_model=AuthResponse)
def login(payload: UserLogin, response: Response, db: Session = Depends(get_db)):
    try:
        user = authenticate_user(db, payload.username, payload.password)
        if user is None:
            raise AuthenticationError("Invalid username or password")
        sess = create_session(db, user.id)
    except DatabaseUnavailable:
        raise BackendUnavailable()
    _set_session_cookie(response, sess.token)
    return AuthResponse(user=UserRead.model_validate(user))

@router.post("/logout")
def logout(
    response: Response,
    db: Session = Depends(get_db),
    token: Optional[str] = Depends(session_cookie),
):
    """Always succeeds from the client's point of view; the cookie is cleared either way."""
    _clear_session_cookie(response)
    try:
        delete_session(db, token)
    except DatabaseUnavailable:
        log.warning("logout could not reach the session store; cookie cleared only")
        return {"success": True, "warning": "Session may not have been fully cleared"}
    return {"success": True}

@router.get("/me", response_model=MeResponse)
def me(auth: AuthContext = Depends(require_auth)):
    return MeResponse(user=UserRead.model_validate(auth.user))
