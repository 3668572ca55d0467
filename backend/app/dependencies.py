"""
FastAPI dependencies for authentication and role checks.
"""
import logging
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from .database import get_db
from .exceptions import AuthorizationError
from .services.auth_service import get_auth_service
from .models.user import User

logger = logging.getLogger(__name__)

# HTTP Bearer scheme for JWT tokens
security = HTTPBearer(auto_error=False)


def _user_from_credentials(
    credentials: Optional[HTTPAuthorizationCredentials], db: Session
) -> Optional[User]:
    if credentials is None:
        return None

    auth_service = get_auth_service()
    payload = auth_service.verify_access_token(credentials.credentials)
    if payload is None or payload.get("sub") is None:
        return None

    return auth_service.get_user_by_id(db, payload["sub"])


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
) -> User:
    """
    Dependency to get the current authenticated user.

    Raises:
        HTTPException 401: If token is missing, invalid, or user not found
        HTTPException 403: If the account is deactivated
    """
    user = _user_from_credentials(credentials, db)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is deactivated"
        )

    return user


async def get_current_user_optional(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
) -> Optional[User]:
    """Current user if a valid token is present, otherwise None."""
    user = _user_from_credentials(credentials, db)
    if user is None or not user.is_active:
        return None
    return user


def require_business_user(current_user: User = Depends(get_current_user)) -> User:
    if not current_user.is_business_user():
        raise AuthorizationError("Access restricted to business users")
    return current_user


def require_end_user(current_user: User = Depends(get_current_user)) -> User:
    if not current_user.is_end_user():
        raise AuthorizationError("Access restricted to end users")
    return current_user
