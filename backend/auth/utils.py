import logging
from datetime import datetime, timedelta, timezone

import bcrypt
import jwt
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.orm import Session

from config import settings
from db.database import get_db
from db.models import User

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def normalize_username(username: str) -> str:
    return " ".join((username or "").strip().split()).lower()


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def verify_password(password: str, hashed: str) -> bool:
    return bcrypt.checkpw(password.encode(), hashed.encode())


def create_token(user_id: int, role: str = "user", token_version: int = 0) -> str:
    payload = {
        "sub": str(user_id),
        "role": role,
        "tv": int(token_version or 0),
        "exp": datetime.now(timezone.utc) + timedelta(hours=settings.JWT_EXPIRY_HOURS),
        "iat": datetime.now(timezone.utc),
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> dict:
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token expired")
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")


def _token_from_request(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None,
) -> str | None:
    if credentials and credentials.credentials:
        return credentials.credentials
    cookie_name = (settings.AUTH_COOKIE_NAME or "").strip() or "goals_session"
    cookie_token = request.cookies.get(cookie_name)
    if cookie_token:
        return cookie_token
    return None


def _caller_from_claims(payload: dict) -> User:
    # Signed claims stand in for the user row while the store is unreachable.
    return User(
        id=int(payload.get("sub", 0)),
        role=str(payload.get("role") or "user"),
        token_version=int(payload.get("tv", 0)),
    )


def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session | None = Depends(get_db),
) -> User:
    token = _token_from_request(request, credentials)
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    token_payload = decode_token(token)
    user_id = int(token_payload.get("sub", 0))

    if db is None:
        logger.warning("Authenticating from token claims: database not available")
        user = _caller_from_claims(token_payload)
    else:
        try:
            user = db.query(User).filter(User.id == user_id).first()
        except (OperationalError, InterfaceError) as e:
            db.rollback()
            logger.warning(f"Authenticating from token claims after store failure: {e}")
            user = _caller_from_claims(token_payload)
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")
    token_version = int(token_payload.get("tv", 0))
    if token_version != int(user.token_version or 0):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Session invalidated. Please sign in again.")
    request.state.user_id = user.id
    return user
