"""
BusinessProfile schemas for API validation.
"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, EmailStr, Field, model_validator

from .category import CategoryResponse
from .social_network import SocialNetworkResponse


class BusinessProfileBase(BaseModel):
    """Base schema for BusinessProfile."""
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    logo_path: Optional[str] = Field(None, max_length=500)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    address: Optional[str] = Field(None, max_length=500)
    phone: Optional[str] = Field(None, max_length=20)
    email: Optional[EmailStr] = None
    website: Optional[str] = Field(None, max_length=255)


class BusinessProfileCreate(BusinessProfileBase):
    """Schema for creating a new BusinessProfile."""
    category_ids: List[str] = []

    @model_validator(mode="after")
    def check_coordinates(self):
        if (self.latitude is None) != (self.longitude is None):
            raise ValueError("latitude and longitude must be provided together")
        return self


class BusinessProfileUpdate(BaseModel):
    """Partial update; omitted fields are left unchanged."""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    logo_path: Optional[str] = Field(None, max_length=500)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    address: Optional[str] = Field(None, max_length=500)
    phone: Optional[str] = Field(None, max_length=20)
    email: Optional[EmailStr] = None
    website: Optional[str] = Field(None, max_length=255)
    category_ids: Optional[List[str]] = None

    @model_validator(mode="after")
    def check_name_not_null(self):
        if "name" in self.model_fields_set and self.name is None:
            raise ValueError("name cannot be null")
        return self


class BusinessProfileResponse(BusinessProfileBase):
    """Schema for BusinessProfile API response."""
    id: str
    user_id: str
    slug: str
    email: Optional[str] = None
    is_active: bool
    categories: List[CategoryResponse] = []
    social_networks: List[SocialNetworkResponse] = []
    distance: Optional[float] = None  # km, only set by radius searches
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ProfileStats(BaseModel):
    followers_count: int
    categories_count: int
    social_networks_count: int


class BusinessProfileDetail(BaseModel):
    """Public profile page: the profile, its stats, and the viewer's follow state."""
    profile: BusinessProfileResponse
    stats: ProfileStats
    is_following: Optional[bool] = None
