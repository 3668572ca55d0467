"""
Pydantic schemas for authentication endpoints.
"""
from typing import Optional, Literal
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field


# Request schemas
class UserRegister(BaseModel):
    """Schema for user registration."""
    email: EmailStr
    password: str = Field(..., min_length=8, description="Password must be at least 8 characters")
    name: str = Field(..., min_length=1, max_length=255)
    user_type: Literal["business", "end_user"] = "end_user"
    phone: Optional[str] = Field(None, max_length=20)


class UserLogin(BaseModel):
    """Schema for user login."""
    email: EmailStr
    password: str


class TokenRefresh(BaseModel):
    """Schema for token refresh."""
    refresh_token: str


# Response schemas
class Token(BaseModel):
    """Token response schema."""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class UserResponse(BaseModel):
    """User response schema."""
    id: str
    email: str
    name: Optional[str] = None
    user_type: str
    phone: Optional[str] = None
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class AuthResult(Token):
    """Tokens plus the authenticated user."""
    user: UserResponse
