from fastapi import APIRouter, Depends, HTTPException
from typing import List, Optional

from app_context import AppContext
from auth import hash_password
from deps import get_ctx, require_user
from models import Admin, Advertiser, Brand, Influencer, Role, User
from schemas import (
    AdminCreate,
    AdvertiserCreate,
    AdvertiserOut,
    BrandCreate,
    BrandOut,
    EngagementSampleIn,
    InfluencerCreate,
    InfluencerOut,
    InfluencerRef,
    ProfileOut,
    ScoredCampaignOut,
    SocialProfileIn,
    UserOut,
)

router = APIRouter()

# Users are dataclasses; FastAPI would asdict() them and lose `role` and the
# computed fields, so responses go through the schema explicitly.
OUT_SCHEMAS = {
    Role.INFLUENCER: InfluencerOut,
    Role.BRAND: BrandOut,
    Role.ADVERTISER: AdvertiserOut,
    Role.ADMIN: UserOut,
}

def _out(user: User) -> UserOut:
    return OUT_SCHEMAS[user.role].model_validate(user)

def _register(ctx: AppContext, user: User) -> UserOut:
    if ctx.users.username_exists(user.username):
        raise HTTPException(status_code=400, detail="Username already taken")
    if ctx.users.email_in_use(user.email):
        raise HTTPException(status_code=400, detail="Email already in use")
    user.password = hash_password(user.password)
    ctx.users.add_user(user)
    return _out(user)

@router.post("/influencers", response_model=InfluencerOut)
def create_influencer(payload: InfluencerCreate, ctx: AppContext = Depends(get_ctx)):
    inf = Influencer(**payload.model_dump(exclude={"social_profiles", "content_categories"}))
    for p in payload.social_profiles:
        inf.add_social_media(p.platform, p.handle, p.followers)
    for category in payload.content_categories:
        inf.add_content_category(category)
    return _register(ctx, inf)

@router.post("/brands", response_model=BrandOut)
def create_brand(payload: BrandCreate, ctx: AppContext = Depends(get_ctx)):
    return _register(ctx, Brand(**payload.model_dump()))

@router.post("/advertisers", response_model=AdvertiserOut)
def create_advertiser(payload: AdvertiserCreate, ctx: AppContext = Depends(get_ctx)):
    return _register(ctx, Advertiser(**payload.model_dump()))

@router.post("/admins", response_model=UserOut)
def create_admin(payload: AdminCreate, ctx: AppContext = Depends(get_ctx)):
    return _register(ctx, Admin(**payload.model_dump()))

@router.get("", response_model=List[UserOut])
def list_users(role: Optional[Role] = None, ctx: AppContext = Depends(get_ctx)):
    """
    Examples:
      /users
      /users?role=Influencer
    """
    users = ctx.users.get_all_users() if role is None else ctx.users.get_users_by_role(role)
    return [_out(u) for u in users]

@router.get("/influencers/search", response_model=List[InfluencerOut])
def search_influencers(
    niche: Optional[str] = None,
    min_followers: int = 0,
    max_rate: Optional[float] = None,
    ctx: AppContext = Depends(get_ctx),
):
    return [_out(i) for i in ctx.users.search_influencers(niche, min_followers, max_rate)]

@router.get("/{username}", response_model=ProfileOut)
def get_profile(username: str, ctx: AppContext = Depends(get_ctx)):
    user = require_user(ctx, username)
    return ProfileOut(username=user.username, role=user.role, summary=user.profile_summary())

@router.post("/{username}/social-profiles", response_model=InfluencerOut)
def add_social_profile(username: str, payload: SocialProfileIn, ctx: AppContext = Depends(get_ctx)):
    inf = require_user(ctx, username, Influencer)
    if not inf.update_social_media(payload.platform, payload.handle, payload.followers):
        inf.add_social_media(payload.platform, payload.handle, payload.followers)
    return _out(inf)

@router.post("/{username}/engagement")
def record_engagement(username: str, payload: EngagementSampleIn, ctx: AppContext = Depends(get_ctx)):
    inf = require_user(ctx, username, Influencer)
    profile = inf.social_profiles.get(payload.platform.lower())
    if profile is None:
        raise HTTPException(status_code=404, detail="Social profile not found")
    inf.calculate_engagement(payload.platform, payload.likes, payload.comments, payload.shares)
    return {"platform": profile.platform, "engagement_rate": profile.engagement_rate}

@router.post("/{username}/brands", response_model=AdvertiserOut)
def add_managed_brand(username: str, payload: InfluencerRef, ctx: AppContext = Depends(get_ctx)):
    advertiser = require_user(ctx, username, Advertiser)
    advertiser.add_brand(require_user(ctx, payload.username, Brand))
    return _out(advertiser)

@router.get("/{username}/notifications", response_model=List[str])
def list_notifications(username: str, ctx: AppContext = Depends(get_ctx)):
    require_user(ctx, username)
    return ctx.notifications.get_notifications_for_user(username)

@router.get("/{username}/recommended-campaigns", response_model=List[ScoredCampaignOut])
def recommended_campaigns(username: str, ctx: AppContext = Depends(get_ctx)):
    inf = require_user(ctx, username, Influencer)
    return [
        ScoredCampaignOut(
            campaign_id=m.campaign.id,
            name=m.campaign.name,
            score=m.score,
            breakdown=m.breakdown,
        )
        for m in ctx.recommendations.score_campaigns(inf)
    ]
