from jose import jwt
from datetime import datetime, timedelta
from typing import Optional
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlmodel import Session
from app.config import settings
from app.database import get_session
from app.errors import authentication_error, not_found
from app.models.user import User

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    to_encode = data.copy()

    expire = datetime.utcnow() + (
        expires_delta
        if expires_delta
        else timedelta(minutes=settings.access_token_expire_minutes)
    )

    to_encode.update({"exp": expire})

    encoded_jwt = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.algorithm
    )
    return encoded_jwt


def decode_access_token(token: str):
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.algorithm],
        )
        return payload
    except jwt.JWTError:
        return None


def get_current_user_id(token: Optional[str] = Depends(oauth2_scheme)) -> str:
    """Resolve the verified user id from the bearer token.

    The user row is not loaded here; callers that need it check it exists.
    """
    if not token:
        raise authentication_error("Missing or invalid token")

    payload = decode_access_token(token)

    if payload is None:
        raise authentication_error("Unauthorized or invalid token")

    user_id = payload.get("sub")

    if not user_id:
        raise authentication_error("Invalid token payload")

    return str(user_id)


def get_current_user(
    user_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_session)
) -> User:
    user = session.get(User, user_id)

    if user is None:
        raise not_found("User", user_id)

    return user
