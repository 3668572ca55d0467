"""
Social network links router, plus URL validation utilities.
"""
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..dependencies import require_business_user
from ..exceptions import NotFoundError
from ..models import SocialNetwork, User
from ..schemas.common import ApiResponse, ok
from ..schemas.social_network import (
    SocialNetworkCreate,
    SocialNetworkResponse,
    SocialUrlValidate,
    SocialUrlValidation,
    UrlCheckResult,
)
from ..services.profile_service import ProfileService
from ..services.social_network_service import SocialNetworkService

router = APIRouter(prefix="/api", tags=["social-networks"])


@router.get("/profiles/{profile_id}/social-networks", response_model=ApiResponse[List[SocialNetworkResponse]])
def list_social_networks(profile_id: str, db: Session = Depends(get_db)):
    profile = ProfileService(db).get_profile(profile_id)
    links = sorted(profile.social_networks, key=lambda link: link.platform)
    return ok([SocialNetworkResponse.model_validate(link) for link in links])


@router.post(
    "/profiles/{profile_id}/social-networks",
    response_model=ApiResponse[SocialNetworkResponse],
    status_code=status.HTTP_201_CREATED,
)
def attach_social_network(
    profile_id: str,
    link_data: SocialNetworkCreate,
    current_user: User = Depends(require_business_user),
    db: Session = Depends(get_db)
):
    """Add or replace the caller's link for a platform."""
    profile = ProfileService(db).get_owned_profile(current_user, profile_id)
    link = SocialNetworkService(db).attach(profile, link_data.platform, link_data.url)
    return ok(SocialNetworkResponse.model_validate(link), "Social network saved successfully")


@router.post("/profiles/{profile_id}/social-networks/verify", response_model=ApiResponse[List[UrlCheckResult]])
def verify_social_networks(
    profile_id: str,
    current_user: User = Depends(require_business_user),
    db: Session = Depends(get_db)
):
    """Check every link for reachability; unreachable links are deactivated."""
    profile = ProfileService(db).get_owned_profile(current_user, profile_id)
    results = SocialNetworkService(db).verify_urls(profile)
    return ok([UrlCheckResult(**result) for result in results])


@router.delete("/profiles/{profile_id}/social-networks/{platform}", response_model=ApiResponse)
def remove_social_network(
    profile_id: str,
    platform: str,
    current_user: User = Depends(require_business_user),
    db: Session = Depends(get_db)
):
    profile = ProfileService(db).get_owned_profile(current_user, profile_id)
    if not SocialNetworkService(db).remove(profile, platform):
        raise NotFoundError(f"No {platform} link on this profile")
    return ok(message="Social network removed successfully")


@router.patch("/social-networks/{link_id}/toggle", response_model=ApiResponse[SocialNetworkResponse])
def toggle_social_network(
    link_id: str,
    current_user: User = Depends(require_business_user),
    db: Session = Depends(get_db)
):
    link = db.query(SocialNetwork).filter(SocialNetwork.id == link_id).first()
    if not link:
        raise NotFoundError("Social network not found")
    ProfileService(db).get_owned_profile(current_user, link.business_profile_id)

    link = SocialNetworkService(db).toggle(link)
    return ok(SocialNetworkResponse.model_validate(link))


@router.get("/utils/social-platforms", response_model=ApiResponse[List[str]])
def supported_platforms(db: Session = Depends(get_db)):
    return ok(SocialNetworkService(db).supported_platforms())


@router.post("/utils/validate-social-url", response_model=ApiResponse[SocialUrlValidation])
def validate_social_url(payload: SocialUrlValidate, db: Session = Depends(get_db)):
    """Check a URL against a platform's pattern without saving anything."""
    is_valid = SocialNetworkService(db).is_valid(payload.platform, payload.url)
    return ok(SocialUrlValidation(platform=payload.platform, url=payload.url, is_valid=is_valid))
