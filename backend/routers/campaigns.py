from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import PlainTextResponse
from typing import List, Optional

import workflows
from app_context import AppContext
from campaign import CampaignStatus
from deps import get_ctx, require_campaign, require_user
from models import Brand, Influencer
from schemas import (
    ActionResult,
    BudgetOut,
    BudgetRequest,
    CampaignCreate,
    CampaignMetricsOut,
    CampaignOut,
    ContentIn,
    ContractOut,
    EngagementIn,
    InfluencerRef,
    InfluencerStatusUpdate,
    PlatformOut,
    PlatformRequest,
    ScoredInfluencerOut,
)

router = APIRouter()

LIFECYCLE_ACTIONS = ("start", "pause", "resume", "end", "cancel")

@router.post("", response_model=CampaignOut)
def create_campaign(payload: CampaignCreate, ctx: AppContext = Depends(get_ctx)):
    brand = require_user(ctx, payload.brand_username, Brand)
    return workflows.create_campaign(
        ctx,
        brand,
        payload.name,
        payload.description,
        payload.budget,
        payload.start_date,
        payload.end_date,
    )

@router.get("", response_model=List[CampaignOut])
def list_campaigns(
    status: Optional[CampaignStatus] = None,
    brand: Optional[str] = None,
    name: Optional[str] = None,
    ctx: AppContext = Depends(get_ctx),
):
    """
    Examples:
      /campaigns?status=Active
      /campaigns?brand=fashionco
      /campaigns?name=summer
    """
    if status is not None:
        items = ctx.campaigns.get_campaigns_by_status(status)
    elif brand:
        items = ctx.campaigns.get_campaigns_for_brand(require_user(ctx, brand, Brand))
    elif name:
        items = ctx.campaigns.get_campaigns_by_name(name)
    else:
        items = ctx.campaigns.get_all_campaigns()
    return sorted(items, key=lambda c: c.name)

# ----------------------------
# Brand-level recommendations
# ----------------------------
@router.post("/budget-recommendation", response_model=BudgetOut)
def recommend_budget(payload: BudgetRequest, ctx: AppContext = Depends(get_ctx)):
    brand = require_user(ctx, payload.brand_username, Brand)
    amount = ctx.recommendations.recommend_campaign_budget(brand, payload.campaign_type, payload.target_count)
    return BudgetOut(brand_username=brand.username, recommended_budget=round(amount, 2))

@router.post("/platform-recommendation", response_model=PlatformOut)
def recommend_platforms(payload: PlatformRequest, ctx: AppContext = Depends(get_ctx)):
    brand = require_user(ctx, payload.brand_username, Brand)
    return PlatformOut(
        brand_username=brand.username,
        platforms=ctx.recommendations.recommend_platforms(brand, payload.audience),
    )

@router.get("/{campaign_id}", response_model=CampaignOut)
def get_campaign(campaign_id: str, ctx: AppContext = Depends(get_ctx)):
    return require_campaign(ctx, campaign_id)

# ----------------------------
# Influencer participation
# ----------------------------
@router.post("/{campaign_id}/invite", response_model=ActionResult)
def invite(campaign_id: str, payload: InfluencerRef, ctx: AppContext = Depends(get_ctx)):
    c = require_campaign(ctx, campaign_id)
    inf = require_user(ctx, payload.username, Influencer)
    changed = workflows.invite_influencer(ctx, c, inf)
    return ActionResult(changed=changed, status=c.get_influencer_status(inf))

@router.post("/{campaign_id}/invite-recommended", response_model=List[str])
def invite_recommended(campaign_id: str, count: int = 1, ctx: AppContext = Depends(get_ctx)):
    if count < 1 or count > 50:
        raise HTTPException(status_code=400, detail="count must be between 1 and 50")
    c = require_campaign(ctx, campaign_id)
    return [inf.username for inf in workflows.invite_recommended(ctx, c, count)]

@router.post("/{campaign_id}/accept", response_model=ActionResult)
def accept(campaign_id: str, payload: InfluencerRef, ctx: AppContext = Depends(get_ctx)):
    c = require_campaign(ctx, campaign_id)
    inf = require_user(ctx, payload.username, Influencer)
    if not c.is_invited(inf):
        raise HTTPException(status_code=400, detail="Influencer was not invited to this campaign")
    contract = workflows.accept_invitation(ctx, c, inf)
    return ActionResult(
        changed=contract is not None,
        status=c.get_influencer_status(inf),
        contract_id=contract.id if contract else None,
    )

@router.post("/{campaign_id}/place", response_model=ActionResult)
def place(campaign_id: str, payload: InfluencerRef, ctx: AppContext = Depends(get_ctx)):
    c = require_campaign(ctx, campaign_id)
    inf = require_user(ctx, payload.username, Influencer)
    contract = workflows.place_influencer(ctx, c, inf)
    return ActionResult(
        changed=True,
        status=c.get_influencer_status(inf),
        contract_id=contract.id if contract else None,
    )

@router.post("/{campaign_id}/remove", response_model=ActionResult)
def remove(campaign_id: str, payload: InfluencerRef, ctx: AppContext = Depends(get_ctx)):
    c = require_campaign(ctx, campaign_id)
    inf = require_user(ctx, payload.username, Influencer)
    changed = workflows.remove_influencer(ctx, c, inf)
    return ActionResult(changed=changed, status=c.get_influencer_status(inf))

@router.put("/{campaign_id}/status", response_model=ActionResult)
def update_status(campaign_id: str, payload: InfluencerStatusUpdate, ctx: AppContext = Depends(get_ctx)):
    c = require_campaign(ctx, campaign_id)
    inf = require_user(ctx, payload.username, Influencer)
    changed = c.update_influencer_status(inf, payload.status)
    return ActionResult(changed=changed, status=c.get_influencer_status(inf))

@router.post("/{campaign_id}/content", response_model=ActionResult)
def add_content(campaign_id: str, payload: ContentIn, ctx: AppContext = Depends(get_ctx)):
    c = require_campaign(ctx, campaign_id)
    inf = require_user(ctx, payload.username, Influencer)
    return ActionResult(changed=c.add_content_url(inf, payload.url))

@router.put("/{campaign_id}/engagement", response_model=ActionResult)
def update_engagement(campaign_id: str, payload: EngagementIn, ctx: AppContext = Depends(get_ctx)):
    c = require_campaign(ctx, campaign_id)
    inf = require_user(ctx, payload.username, Influencer)
    changed = c.update_engagement_metrics(inf, payload.likes, payload.comments, payload.shares)
    return ActionResult(changed=changed)

# ----------------------------
# Reporting
# ----------------------------
@router.get("/{campaign_id}/metrics", response_model=CampaignMetricsOut)
def metrics(campaign_id: str, ctx: AppContext = Depends(get_ctx)):
    return require_campaign(ctx, campaign_id).get_metrics()

@router.get("/{campaign_id}/report", response_class=PlainTextResponse)
def report(campaign_id: str, ctx: AppContext = Depends(get_ctx)):
    return require_campaign(ctx, campaign_id).generate_report()

@router.get("/{campaign_id}/recommendations", response_model=List[ScoredInfluencerOut])
def recommendations(campaign_id: str, ctx: AppContext = Depends(get_ctx)):
    c = require_campaign(ctx, campaign_id)
    return [
        ScoredInfluencerOut(
            username=m.influencer.username,
            niche=m.influencer.niche,
            rate=m.influencer.rate,
            score=m.score,
            breakdown=m.breakdown,
        )
        for m in ctx.recommendations.score_influencers(c)
    ]

@router.get("/{campaign_id}/contracts", response_model=List[ContractOut])
def campaign_contracts(campaign_id: str, ctx: AppContext = Depends(get_ctx)):
    c = require_campaign(ctx, campaign_id)
    return [ContractOut.from_contract(k) for k in ctx.contracts.get_contracts_for_campaign(c)]

# ----------------------------
# Lifecycle (declared last: `{action}` would shadow the routes above)
# ----------------------------
@router.post("/{campaign_id}/{action}", response_model=ActionResult)
def lifecycle(campaign_id: str, action: str, ctx: AppContext = Depends(get_ctx)):
    if action not in LIFECYCLE_ACTIONS:
        raise HTTPException(status_code=400, detail=f"action must be one of: {', '.join(LIFECYCLE_ACTIONS)}")
    c = require_campaign(ctx, campaign_id)

    if action == "end":
        before = c.status
        workflows.complete_campaign(ctx, c)
        changed = before is not c.status
    else:
        changed = getattr(c, action)()

    return ActionResult(changed=changed, status=c.status.value)
