"""
Authentication router for registration, login, and token management.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..dependencies import get_current_user
from ..services.auth_service import get_auth_service
from ..models.user import User
from ..schemas.common import ApiResponse, ok
from ..schemas.auth import (
    UserRegister,
    UserLogin,
    TokenRefresh,
    Token,
    UserResponse,
    AuthResult,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


def _auth_result(user: User) -> AuthResult:
    access_token, refresh_token = get_auth_service().create_tokens(user)
    return AuthResult(
        access_token=access_token,
        refresh_token=refresh_token,
        user=UserResponse.model_validate(user),
    )


@router.post("/register", response_model=ApiResponse[AuthResult], status_code=status.HTTP_201_CREATED)
def register(
    user_data: UserRegister,
    db: Session = Depends(get_db)
):
    """
    Register a business or end-user account.

    Returns access and refresh tokens upon successful registration.
    """
    user = get_auth_service().create_user(
        db,
        email=user_data.email,
        password=user_data.password,
        name=user_data.name,
        user_type=user_data.user_type,
        phone=user_data.phone,
    )
    return ok(_auth_result(user), "User registered successfully")


@router.post("/login", response_model=ApiResponse[AuthResult])
def login(
    user_data: UserLogin,
    db: Session = Depends(get_db)
):
    """Login with email and password."""
    user = get_auth_service().authenticate_user(db, user_data.email, user_data.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password"
        )

    logger.info(f"User logged in: {user.id}")
    return ok(_auth_result(user), "Login successful")


@router.post("/refresh", response_model=ApiResponse[Token])
def refresh_token(
    token_data: TokenRefresh,
    db: Session = Depends(get_db)
):
    """Exchange a refresh token for a new token pair."""
    auth_service = get_auth_service()

    payload = auth_service.verify_refresh_token(token_data.refresh_token)
    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired refresh token"
        )

    user = auth_service.get_user_by_id(db, payload.get("sub"))
    if not user or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found or inactive"
        )

    access_token, new_refresh_token = auth_service.create_tokens(user)
    return ok(Token(access_token=access_token, refresh_token=new_refresh_token))


@router.get("/me", response_model=ApiResponse[UserResponse])
def get_current_user_info(current_user: User = Depends(get_current_user)):
    """Get current authenticated user's information."""
    return ok(UserResponse.model_validate(current_user))
