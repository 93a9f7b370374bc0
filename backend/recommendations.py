# recommendations.py
from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from campaign import Campaign, CampaignStatus
from config import RECOMMENDATION_LIMIT, RECOMMENDATION_MIN_SCORE
from logging_config import get_logger
from models import Brand, Influencer
from repositories import CampaignService, UserService
from scoring import (
    DEFAULT_AVERAGE_RATE,
    BUDGET_BUFFER,
    JITTER_RANGE,
    campaign_type_multiplier,
    compute_match_score,
    platforms_for,
)

logger = get_logger("influencer_manager.recommendations", component="recommendations")


@dataclass
class ScoredMatch:
    influencer: Influencer
    campaign: Campaign
    score: int
    breakdown: Dict[str, Any]


class RecommendationService:
    """
    Ranks influencers for a campaign, or campaigns for an influencer, with
    the weighted heuristic in `scoring.compute_match_score`. A bounded random
    jitter is added to every score; pass a seeded `rng` for repeatable output.
    """

    def __init__(
        self,
        users: Optional[UserService] = None,
        campaigns: Optional[CampaignService] = None,
        rng: Optional[random.Random] = None,
        limit: int = RECOMMENDATION_LIMIT,
        min_score: int = RECOMMENDATION_MIN_SCORE,
    ):
        self.users = users
        self.campaigns = campaigns
        self.rng = rng or random.Random()
        self.limit = limit
        self.min_score = min_score

    def _brand_for(self, campaign: Campaign) -> Optional[Brand]:
        if self.users is None or not campaign.brand_username:
            return None
        owner = self.users.get_user_by_username(campaign.brand_username)
        return owner if isinstance(owner, Brand) else None

    def has_previous_collaboration(self, brand: Brand, influencer: Influencer) -> bool:
        if self.campaigns is None:
            return False
        for c in self.campaigns.get_campaigns_for_brand(brand):
            if c.status is CampaignStatus.COMPLETED and c.is_accepted(influencer):
                return True
        return False

    def score_match(self, influencer: Influencer, campaign: Campaign, brand: Optional[Brand] = None) -> ScoredMatch:
        brand = brand or self._brand_for(campaign)
        result = compute_match_score(
            industry=brand.industry if brand else None,
            niche=influencer.niche,
            rate=influencer.rate,
            budget=campaign.budget,
            followers=influencer.total_followers,
            prior_collaboration=bool(brand) and self.has_previous_collaboration(brand, influencer),
            jitter=self.rng.randrange(JITTER_RANGE),
        )
        return ScoredMatch(influencer, campaign, result["score"], result["breakdown"])

    def _rank(self, matches: List[ScoredMatch]) -> List[ScoredMatch]:
        eligible = [m for m in matches if m.score >= self.min_score]
        # each candidate is scored once; stable sort keeps insertion order on ties
        eligible.sort(key=lambda m: m.score, reverse=True)
        return eligible[: self.limit]

    def score_influencers(self, campaign: Optional[Campaign]) -> List[ScoredMatch]:
        if self.users is None or campaign is None:
            return []

        brand = self._brand_for(campaign)
        if brand is None:
            return []

        matches = [
            self.score_match(inf, campaign, brand)
            for inf in self.users.get_all_influencers()
            if not campaign.is_invited(inf)
        ]
        ranked = self._rank(matches)

        logger.info(
            "influencer_recommendations",
            extra={
                "campaign_id": campaign.id,
                "candidate_count": len(matches),
                "returned_count": len(ranked),
            },
        )
        return ranked

    def score_campaigns(self, influencer: Optional[Influencer]) -> List[ScoredMatch]:
        if self.campaigns is None or influencer is None:
            return []

        matches = []
        for campaign in self.campaigns.get_all_campaigns():
            if campaign.is_invited(influencer) or campaign.is_terminal:
                continue
            brand = self._brand_for(campaign)
            if brand is None:
                continue
            matches.append(self.score_match(influencer, campaign, brand))

        ranked = self._rank(matches)

        logger.info(
            "campaign_recommendations",
            extra={
                "username": influencer.username,
                "candidate_count": len(matches),
                "returned_count": len(ranked),
            },
        )
        return ranked

    def get_recommended_influencers(self, campaign: Optional[Campaign]) -> List[Influencer]:
        return [m.influencer for m in self.score_influencers(campaign)]

    def get_recommended_campaigns(self, influencer: Optional[Influencer]) -> List[Campaign]:
        return [m.campaign for m in self.score_campaigns(influencer)]

    def recommend_campaign_budget(self, brand: Brand, campaign_type: str, target_count: int) -> float:
        if self.users is None:
            return 0.0

        pool = self.users.get_influencers_by_niche(brand.industry) or self.users.get_all_influencers()
        if pool:
            average_rate = sum(i.rate for i in pool) / len(pool)
        else:
            average_rate = DEFAULT_AVERAGE_RATE

        return average_rate * target_count * campaign_type_multiplier(campaign_type) * BUDGET_BUFFER

    def recommend_platforms(self, brand: Brand, audience_description: Optional[str]) -> List[str]:
        return platforms_for(brand.industry, audience_description)
