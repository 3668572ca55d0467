"""
Social network link schemas.
"""
from datetime import datetime
from pydantic import BaseModel, Field


class SocialNetworkCreate(BaseModel):
    """Attach (or replace) the link for one platform."""
    platform: str = Field(..., min_length=1, max_length=20)
    url: str = Field(..., min_length=1, max_length=500)


class SocialUrlValidate(BaseModel):
    platform: str = Field(..., min_length=1, max_length=20)
    url: str = Field(..., min_length=1, max_length=500)


class SocialUrlValidation(BaseModel):
    platform: str
    url: str
    is_valid: bool


class SocialNetworkResponse(BaseModel):
    id: str
    platform: str
    url: str
    is_active: bool

    class Config:
        from_attributes = True


class UrlCheckResult(BaseModel):
    """Outcome of one reachability check."""
    platform: str
    url: str
    is_accessible: bool
    last_checked: datetime
