from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from auth.models import AccountResponse, CredentialsRequest, SessionTokenResponse, SignupRequest
from auth.utils import (
    create_token,
    get_current_user,
    hash_password,
    normalize_username,
    verify_password,
)
from config import settings
from db.database import StoreUnavailable, get_db
from db.models import User

router = APIRouter(prefix="/auth", tags=["auth"])


def _cookie_name() -> str:
    return (settings.AUTH_COOKIE_NAME or "goals_session").strip() or "goals_session"


def _set_session_cookie(response: Response, token: str) -> None:
    samesite = (settings.AUTH_COOKIE_SAMESITE or "lax").strip().lower()
    if samesite not in {"strict", "lax", "none"}:
        samesite = "lax"
    response.set_cookie(
        key=_cookie_name(),
        value=token,
        httponly=bool(settings.AUTH_COOKIE_HTTPONLY),
        secure=bool(settings.AUTH_COOKIE_SECURE),
        samesite=samesite,  # type: ignore[arg-type]
        domain=settings.AUTH_COOKIE_DOMAIN,
        path=settings.AUTH_COOKIE_PATH or "/",
        max_age=max(int(settings.JWT_EXPIRY_HOURS), 1) * 3600,
    )


def _clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        key=_cookie_name(),
        domain=settings.AUTH_COOKIE_DOMAIN,
        path=settings.AUTH_COOKIE_PATH or "/",
    )


def _require_store(db: Session | None) -> Session:
    if db is None:
        raise StoreUnavailable("Cannot access users: database not available")
    return db


@router.post("/register", response_model=SessionTokenResponse, status_code=status.HTTP_201_CREATED)
def register(req: SignupRequest, response: Response, db: Session | None = Depends(get_db)):
    db = _require_store(db)
    normalized_username = normalize_username(req.username)
    if len(normalized_username) < 3:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Username must be at least 3 characters")

    if db.query(User).filter(User.username_normalized == normalized_username).first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username already taken")

    user = User(
        username=req.username,
        username_normalized=normalized_username,
        password_hash=hash_password(req.password),
        display_name=req.display_name,
        role="user",
        token_version=0,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    token = create_token(user.id, role=user.role, token_version=user.token_version)
    _set_session_cookie(response, token)
    return SessionTokenResponse(access_token=token)


@router.post("/login", response_model=SessionTokenResponse)
def login(req: CredentialsRequest, response: Response, db: Session | None = Depends(get_db)):
    db = _require_store(db)
    user = db.query(User).filter(User.username_normalized == normalize_username(req.username)).first()
    if not user or not verify_password(req.password, user.password_hash):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    token = create_token(user.id, role=user.role, token_version=user.token_version)
    _set_session_cookie(response, token)
    return SessionTokenResponse(access_token=token)


@router.get("/me", response_model=AccountResponse)
def me(user: User = Depends(get_current_user)):
    # Callers authenticated from token claims alone have no account row to show.
    if user.username is None:
        raise StoreUnavailable("Cannot load account: database not available")
    return user


@router.post("/logout")
def logout(response: Response):
    _clear_session_cookie(response)
    return {"success": True}
