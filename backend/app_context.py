# app_context.py
from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Optional

from analytics import AnalyticsService
from auth import AuthenticationManager
from config import PAYMENT_SUCCESS_RATE
from contracts import PaymentGateway
from notifications import NotificationService
from recommendations import RecommendationService
from repositories import CampaignService, ContractService, UserService


@dataclass
class AppContext:
    """Everything the workflows and routers operate on, built once per process."""

    users: UserService
    campaigns: CampaignService
    contracts: ContractService
    notifications: NotificationService
    recommendations: RecommendationService
    analytics: AnalyticsService
    auth: AuthenticationManager = field(default_factory=AuthenticationManager)
    gateway: PaymentGateway = field(default_factory=PaymentGateway)


def build_context(
    *,
    rng: Optional[random.Random] = None,
    notifications: Optional[NotificationService] = None,
    payment_success_rate: float = PAYMENT_SUCCESS_RATE,
) -> AppContext:
    rng = rng or random.Random()
    users = UserService()
    campaigns = CampaignService()

    return AppContext(
        users=users,
        campaigns=campaigns,
        contracts=ContractService(),
        notifications=notifications or NotificationService(),
        recommendations=RecommendationService(users, campaigns, rng=rng),
        analytics=AnalyticsService(users, campaigns),
        gateway=PaymentGateway(success_rate=payment_success_rate, rng=rng),
    )
