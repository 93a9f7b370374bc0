# schemas.py
from pydantic import BaseModel, EmailStr, Field
from typing import Optional, Dict, Any, List
from datetime import datetime

from campaign import CampaignStatus
from contracts import Contract, ContractStatus, Payment, PaymentStatus
from models import Role

# ---------- Auth ----------
class LoginRequest(BaseModel):
    username: str
    password: str

class LoginOut(BaseModel):
    username: str
    role: Role

# ---------- Users ----------
class SocialProfileIn(BaseModel):
    platform: str
    handle: str
    followers: int = Field(default=0, ge=0)

class EngagementSampleIn(BaseModel):
    platform: str
    likes: int = Field(default=0, ge=0)
    comments: int = Field(default=0, ge=0)
    shares: int = Field(default=0, ge=0)

class UserCreate(BaseModel):
    username: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=1)

class InfluencerCreate(UserCreate):
    niche: Optional[str] = None
    bio: Optional[str] = None
    rate: float = Field(default=0.0, ge=0)
    social_profiles: List[SocialProfileIn] = []
    content_categories: List[str] = []

class BrandCreate(UserCreate):
    company_name: Optional[str] = None
    industry: Optional[str] = None
    website: Optional[str] = None
    description: Optional[str] = None
    budget: float = Field(default=0.0, ge=0)

class AdvertiserCreate(UserCreate):
    agency_name: Optional[str] = None
    contact_person: Optional[str] = None
    phone: Optional[str] = None
    commission: float = Field(default=10.0, ge=0, le=100)

class AdminCreate(UserCreate):
    pass

class UserOut(BaseModel):
    username: str
    email: str
    role: Role
    is_active: bool
    created_at: str
    last_login: Optional[str] = None

    class Config:
        from_attributes = True

class InfluencerOut(UserOut):
    niche: Optional[str] = None
    rate: float
    total_followers: int
    active_campaigns: List[str]
    past_campaigns: List[str]
    total_earnings: float

class BrandOut(UserOut):
    company_name: Optional[str] = None
    industry: Optional[str] = None
    budget: float
    active_campaigns: List[str]
    past_campaigns: List[str]
    total_spent: float

class AdvertiserOut(UserOut):
    agency_name: Optional[str] = None
    commission: float
    managed_brands: List[str]
    managed_campaigns: List[str]

class ProfileOut(BaseModel):
    username: str
    role: Role
    summary: str

# ---------- Campaigns ----------
class CampaignCreate(BaseModel):
    brand_username: str
    name: str = Field(min_length=1)
    description: str = ""
    budget: float = Field(default=0.0, ge=0)
    start_date: Optional[str] = None
    end_date: Optional[str] = None

class CampaignOut(BaseModel):
    id: str
    name: str
    brand_username: Optional[str] = None
    description: str
    budget: float
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    status: CampaignStatus
    invited_influencers: List[str]
    accepted_influencers: List[str]
    influencer_statuses: Dict[str, str]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class InfluencerRef(BaseModel):
    username: str

class InfluencerStatusUpdate(BaseModel):
    username: str
    status: str = Field(min_length=1)

class ContentIn(BaseModel):
    username: str
    url: str = Field(min_length=1)

class EngagementIn(BaseModel):
    username: str
    likes: int = Field(default=0, ge=0)
    comments: int = Field(default=0, ge=0)
    shares: int = Field(default=0, ge=0)

class CampaignMetricsOut(BaseModel):
    total_influencers: int
    total_posts: int
    total_engagement: int
    cost_per_engagement: float
    total_likes: int
    total_comments: int
    total_shares: int

class ActionResult(BaseModel):
    changed: bool
    status: Optional[str] = None
    contract_id: Optional[str] = None

# ---------- Recommendations ----------
class ScoredInfluencerOut(BaseModel):
    username: str
    niche: Optional[str] = None
    rate: float
    score: int
    breakdown: Dict[str, Any]

class ScoredCampaignOut(BaseModel):
    campaign_id: str
    name: str
    score: int
    breakdown: Dict[str, Any]

class BudgetRequest(BaseModel):
    brand_username: str
    campaign_type: str = ""
    target_count: int = Field(default=1, ge=1)

class BudgetOut(BaseModel):
    brand_username: str
    recommended_budget: float

class PlatformRequest(BaseModel):
    brand_username: str
    audience: str = ""

class PlatformOut(BaseModel):
    brand_username: str
    platforms: List[str]

# ---------- Contracts / payments ----------
class ContractOut(BaseModel):
    id: str
    campaign_id: str
    influencer_username: str
    brand_username: str
    payment_amount: float
    payment_terms: str
    deliverables: str
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    status: ContractStatus
    is_signed: bool

    @classmethod
    def from_contract(cls, c: Contract) -> "ContractOut":
        return cls(
            id=c.id,
            campaign_id=c.campaign.id,
            influencer_username=c.influencer.username,
            brand_username=c.brand.username,
            payment_amount=c.payment_amount,
            payment_terms=c.payment_terms,
            deliverables=c.deliverables,
            start_date=c.start_date,
            end_date=c.end_date,
            status=c.status,
            is_signed=c.is_signed,
        )

class TerminateRequest(BaseModel):
    reason: str = ""

class PayRequest(BaseModel):
    payment_method: str = Field(min_length=1)
    amount: Optional[float] = Field(default=None, gt=0)

class CancelRequest(BaseModel):
    reason: str = ""

class PaymentOut(BaseModel):
    id: str
    contract_id: str
    amount: float
    currency: str
    status: PaymentStatus
    payment_method: Optional[str] = None
    transaction_id: Optional[str] = None
    payment_date: Optional[datetime] = None

    @classmethod
    def from_payment(cls, p: Payment) -> "PaymentOut":
        return cls(
            id=p.id,
            contract_id=p.contract.id,
            amount=p.amount,
            currency=p.currency,
            status=p.status,
            payment_method=p.payment_method,
            transaction_id=p.transaction_id,
            payment_date=p.payment_date,
        )
