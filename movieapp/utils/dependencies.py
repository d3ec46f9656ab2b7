from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from typing import Optional
import logging

from movieapp.database import get_db
from movieapp.utils.security import decode_token, TokenExpiredError
from movieapp.models.user import User

logger = logging.getLogger(__name__)

# auto_error is off so a missing header yields 401 rather than 403
security = HTTPBearer(auto_error=False)


def _unauthorized(headers: Optional[dict] = None) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid token",
        headers={"WWW-Authenticate": "Bearer", **(headers or {})},
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
) -> User:
    if credentials is None:
        logger.warning("Authentication challenge: missing bearer token")
        raise _unauthorized()

    try:
        payload = decode_token(credentials.credentials)
    except TokenExpiredError as e:
        logger.warning(f"Authentication failed: {e}")
        raise _unauthorized({"Token-Expired": "true"})

    if payload is None or payload.get("type") != "access":
        logger.warning("Authentication failed: token rejected")
        raise _unauthorized()

    sub = payload.get("sub")
    if not sub or not str(sub).isdigit():
        raise _unauthorized()

    user = db.query(User).filter(User.id == int(sub)).first()

    if not user or not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found or inactive")

    return user
