from fastapi import APIRouter, Depends
from typing import Any, Dict, List

from app_context import AppContext
from deps import get_ctx, require_campaign, require_user
from models import Advertiser, Brand, Influencer

router = APIRouter()

@router.get("/users")
def user_activity(ctx: AppContext = Depends(get_ctx)) -> Dict[str, Any]:
    return ctx.analytics.user_activity_report()

@router.get("/campaigns")
def campaign_performance_report(ctx: AppContext = Depends(get_ctx)) -> Dict[str, Any]:
    return ctx.analytics.campaign_performance_report()

@router.get("/financials")
def financials(ctx: AppContext = Depends(get_ctx)) -> Dict[str, Any]:
    return ctx.analytics.financial_report()

@router.get("/platform-value")
def platform_value(ctx: AppContext = Depends(get_ctx)) -> Dict[str, float]:
    return {"platform_value": ctx.analytics.calculate_platform_value()}

@router.get("/campaigns/{campaign_id}")
def campaign_performance(campaign_id: str, ctx: AppContext = Depends(get_ctx)) -> Dict[str, Any]:
    return ctx.analytics.campaign_performance(require_campaign(ctx, campaign_id))

@router.get("/influencers/{username}")
def influencer_analytics(username: str, ctx: AppContext = Depends(get_ctx)) -> Dict[str, Any]:
    return ctx.analytics.influencer_analytics(require_user(ctx, username, Influencer))

@router.get("/brands/{username}")
def brand_analytics(username: str, ctx: AppContext = Depends(get_ctx)) -> Dict[str, Any]:
    return ctx.analytics.brand_analytics(require_user(ctx, username, Brand))

@router.get("/brands/{username}/recommendations")
def brand_recommendations(username: str, ctx: AppContext = Depends(get_ctx)) -> List[str]:
    return ctx.analytics.brand_recommendations(require_user(ctx, username, Brand))

@router.get("/advertisers/{username}")
def advertiser_analytics(username: str, ctx: AppContext = Depends(get_ctx)) -> Dict[str, Any]:
    return ctx.analytics.advertiser_analytics(require_user(ctx, username, Advertiser))
