# analytics.py
"""
Read-only aggregates over the stores: per-entity analytics and the three
platform reports (user activity, campaign performance, financials).

Everything returns plain dicts ready for JSON. Nothing here mutates state.
"""
from __future__ import annotations

from collections import Counter
from datetime import datetime, timezone
from typing import Any, Dict, List

from campaign import Campaign
from models import Advertiser, Brand, Influencer
from repositories import CampaignService, UserService

TOP_N = 5
PLATFORM_COMMISSION_RATE = 0.10
# platform value = brand budgets * 0.2 + total followers * 0.01
BRAND_VALUE_WEIGHT = 0.2
FOLLOWER_VALUE_WEIGHT = 0.01


def _pct(part: int, whole: int) -> float:
    return round(part * 100.0 / whole, 1) if whole else 0.0


def _engagement_totals(metrics: Dict[str, int]) -> Dict[str, int]:
    likes = metrics.get("likes", 0)
    comments = metrics.get("comments", 0)
    shares = metrics.get("shares", 0)
    return {"likes": likes, "comments": comments, "shares": shares, "total": likes + comments + shares}


class AnalyticsService:
    def __init__(self, users: UserService, campaigns: CampaignService):
        self.users = users
        self.campaigns = campaigns

    def _campaigns_by_id(self, ids: List[str]) -> List[Campaign]:
        found = (self.campaigns.get_campaign_by_id(cid) for cid in ids)
        return [c for c in found if c is not None]

    # ---------- per entity ----------
    def campaign_performance(self, campaign: Campaign) -> Dict[str, Any]:
        influencers = []
        for username in campaign.accepted_influencers:
            influencers.append({
                "username": username,
                "content_urls": list(campaign.content_urls.get(username, [])),
                "engagement": _engagement_totals(campaign.engagement_metrics.get(username, {})),
            })
        return {
            "campaign_id": campaign.id,
            "name": campaign.name,
            "metrics": campaign.get_metrics(),
            "influencers": influencers,
        }

    def influencer_analytics(self, influencer: Influencer) -> Dict[str, Any]:
        active = []
        for c in self._campaigns_by_id(influencer.active_campaigns):
            active.append({
                "campaign_id": c.id,
                "name": c.name,
                "status": c.get_influencer_status(influencer),
                "engagement": _engagement_totals(c.get_engagement_metrics(influencer)),
            })
        return {
            "username": influencer.username,
            "total_followers": influencer.total_followers,
            "total_campaigns": influencer.total_campaigns,
            "total_earnings": influencer.total_earnings,
            "social_profiles": [str(p) for p in influencer.social_profiles.values()],
            "active_campaigns": active,
            "past_campaigns": [c.name for c in self._campaigns_by_id(influencer.past_campaigns)],
        }

    def brand_roi(self, brand: Brand) -> Dict[str, Any]:
        """
        Budget over engagement across all of the brand's campaigns. A real
        ROI needs conversion data, which the platform does not collect.
        """
        campaigns = self.campaigns.get_campaigns_for_brand(brand)
        invested = sum(c.budget for c in campaigns)
        engagement = sum(c.calculate_total_engagement() for c in campaigns)
        return {
            "campaign_count": len(campaigns),
            "total_investment": invested,
            "total_engagement": engagement,
            "average_cost_per_engagement": invested / engagement if engagement else None,
        }

    def brand_analytics(self, brand: Brand) -> Dict[str, Any]:
        active_campaigns = self._campaigns_by_id(brand.active_campaigns)
        budgets = {c.id: c.budget for c in active_campaigns}
        return {
            "brand": brand.display_name,
            "total_budget": brand.budget,
            "remaining_budget": brand.remaining_budget(budgets),
            "total_spent": brand.total_spent,
            "total_campaigns": brand.total_campaigns,
            "active_campaigns": [
                {
                    "campaign_id": c.id,
                    "name": c.name,
                    "status": c.status.value,
                    "budget": c.budget,
                    "influencers": len(c.accepted_influencers),
                    "total_engagement": c.calculate_total_engagement(),
                    "cost_per_engagement": c.calculate_cost_per_engagement() or None,
                }
                for c in active_campaigns
            ],
            "past_campaigns": [c.name for c in self._campaigns_by_id(brand.past_campaigns)],
            "roi": self.brand_roi(brand),
        }

    def advertiser_analytics(self, advertiser: Advertiser) -> Dict[str, Any]:
        brands = []
        for username in advertiser.managed_brands:
            b = self.users.get_user_by_username(username)
            if isinstance(b, Brand):
                brands.append({
                    "brand": b.display_name,
                    "budget": b.budget,
                    "active_campaigns": len(b.active_campaigns),
                })

        campaigns = self._campaigns_by_id(advertiser.managed_campaigns)
        share = advertiser.commission / 100
        return {
            "agency": advertiser.agency_name or advertiser.username,
            "total_clients": advertiser.total_clients,
            "commission": advertiser.commission,
            "estimated_revenue": advertiser.calculate_revenue({c.id: c.budget for c in campaigns}),
            "managed_brands": brands,
            "managed_campaigns": [
                {
                    "campaign_id": c.id,
                    "name": c.name,
                    "status": c.status.value,
                    "budget": c.budget,
                    "brand_username": c.brand_username,
                    "influencers": len(c.accepted_influencers),
                    "commission": c.budget * share,
                }
                for c in campaigns
            ],
        }

    # ---------- platform reports ----------
    def user_activity_report(self) -> Dict[str, Any]:
        users = self.users.get_all_users()
        total = len(users)
        active = sum(1 for u in users if u.is_active)
        distribution = Counter(u.role.value for u in users)

        return {
            "generated_at": datetime.now(timezone.utc).isoformat(),
            "total_users": total,
            "active_users": active,
            "active_pct": _pct(active, total),
            "distribution": {
                role: {"count": n, "pct": _pct(n, total)} for role, n in distribution.items()
            },
            "top_influencers": [
                {"username": i.username, "followers": i.total_followers}
                for i in self.users.get_top_influencers(TOP_N)
            ],
            "top_brands": [
                {"brand": b.display_name, "budget": b.budget}
                for b in self.users.get_top_brands(TOP_N)
            ],
        }

    def campaign_performance_report(self) -> Dict[str, Any]:
        campaigns = self.campaigns.get_all_campaigns()
        total = len(campaigns)
        statuses = Counter(c.status.value for c in campaigns)

        budget = sum(c.budget for c in campaigns)
        engagement = sum(c.calculate_total_engagement() for c in campaigns)
        posts = sum(c.get_metrics()["total_posts"] for c in campaigns)

        top = self.campaigns.get_top_performing_campaigns(TOP_N)
        return {
            "generated_at": datetime.now(timezone.utc).isoformat(),
            "total_campaigns": total,
            "status_distribution": {
                status: {"count": n, "pct": _pct(n, total)} for status, n in statuses.items()
            },
            "top_campaigns": [
                {
                    "campaign_id": c.id,
                    "name": c.name,
                    "total_engagement": c.calculate_total_engagement(),
                    "budget": c.budget,
                    "cost_per_engagement": c.calculate_cost_per_engagement() or None,
                    "influencers": len(c.accepted_influencers),
                }
                for c in top
            ],
            "total_budget": budget,
            "total_engagement": engagement,
            "total_posts": posts,
            "overall_cost_per_engagement": budget / engagement if engagement else None,
        }

    def financial_report(self) -> Dict[str, Any]:
        brands = self.users.get_all_brands()
        influencers = self.users.get_all_influencers()
        campaigns = self.campaigns.get_all_campaigns()

        spent = sum(b.total_spent for b in brands)
        return {
            "generated_at": datetime.now(timezone.utc).isoformat(),
            "total_brand_budgets": sum(b.budget for b in brands),
            "total_brand_spent": spent,
            "total_campaign_budgets": sum(c.budget for c in campaigns),
            "total_influencer_earnings": sum(i.total_earnings for i in influencers),
            "estimated_platform_revenue": spent * PLATFORM_COMMISSION_RATE,
            "top_spending_brands": [
                {"brand": b.display_name, "total_spent": b.total_spent}
                for b in sorted(brands, key=lambda b: b.total_spent, reverse=True)[:TOP_N]
            ],
            "top_earning_influencers": [
                {"username": i.username, "total_earnings": i.total_earnings}
                for i in sorted(influencers, key=lambda i: i.total_earnings, reverse=True)[:TOP_N]
            ],
            "most_expensive_campaigns": [
                {"campaign_id": c.id, "name": c.name, "budget": c.budget}
                for c in sorted(campaigns, key=lambda c: c.budget, reverse=True)[:TOP_N]
            ],
        }

    def calculate_platform_value(self) -> float:
        brand_value = sum(b.budget for b in self.users.get_all_brands())
        followers = sum(i.total_followers for i in self.users.get_all_influencers())
        return brand_value * BRAND_VALUE_WEIGHT + followers * FOLLOWER_VALUE_WEIGHT

    @staticmethod
    def brand_recommendations(brand: Brand) -> List[str]:
        return [
            "Consider increasing budget for higher engagement",
            f"Target influencers in {brand.industry or 'your industry'}",
            "Focus on platforms with highest ROI for your industry",
        ]
