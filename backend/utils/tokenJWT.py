# utils/tokenJWT.py
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from sqlalchemy.orm import Session

from config import Settings, get_settings
from database import get_db
from models.users import User
from utils.errors import Forbidden, InvalidCredential, Unauthenticated

# Missing headers are reported by get_current_user, not by the scheme
bearer_scheme = HTTPBearer(auto_error=False)


# Generate a new JWT access token
def create_access_token(data: dict, settings: Settings, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def token_for_user(user: User, settings: Settings) -> str:
    claims = {"sub": user.username, "id": user.id, "username": user.username, "role": user.role}
    return create_access_token(claims, settings)


# Verify signature and expiry, return the claims
def decode_access_token(token: str, settings: Settings) -> dict:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise InvalidCredential("Invalid or expired token")

    if not isinstance(payload.get("id"), int) or not payload.get("sub"):
        raise InvalidCredential("Invalid or expired token")
    return payload


# Retrieve the currently authenticated user based on the JWT token
def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> User:
    if credentials is None or not credentials.credentials:
        raise Unauthenticated("Access token is missing")

    payload = decode_access_token(credentials.credentials, settings)

    # The account may have been deleted after the token was issued
    user = db.get(User, payload["id"])
    if user is None or user.username != payload["sub"]:
        raise InvalidCredential("Invalid or expired token")
    return user


# Dependency factory for Role-Based Access Control
def role_required(*allowed_roles):
    def _checker(current_user: User = Depends(get_current_user)) -> User:
        if allowed_roles and current_user.role not in allowed_roles:
            raise Forbidden("Administrator rights required")
        return current_user
    return _checker


require_admin = role_required("admin")
