"""
Shared fixtures: a fully wired in-memory context with deterministic
randomness and a notification service that records deliveries instead of
logging them.
"""

import os

# config reads this at import time; 4 is the cheapest bcrypt work factor
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest

from app_context import build_context
from models import Brand, Influencer
from notifications import NotificationService


class FixedRng:
    """Stands in for random.Random: constant jitter and a constant gateway roll."""

    def __init__(self, jitter=0, roll=0.0):
        self.jitter = jitter
        self.roll = roll

    def randrange(self, stop):
        return self.jitter

    def random(self):
        return self.roll


@pytest.fixture
def delivered():
    return []


@pytest.fixture
def notifications(delivered):
    return NotificationService(poll_seconds=0.01, deliver=delivered.append)


@pytest.fixture
def ctx(notifications):
    return build_context(rng=FixedRng(), notifications=notifications, payment_success_rate=1.0)


@pytest.fixture
def fashion_brand(ctx):
    brand = Brand(
        username="fashionco",
        email="contact@fashionco.com",
        password="brand123",
        company_name="Fashion Co",
        industry="Fashion",
        budget=10_000.0,
    )
    ctx.users.add_user(brand)
    return brand


@pytest.fixture
def jane(ctx):
    inf = Influencer(
        username="janesmith",
        email="jane@influencer.com",
        password="pass123",
        niche="Fashion",
        rate=500.0,
    )
    inf.add_social_media("Instagram", "jane_style", 50_000)
    ctx.users.add_user(inf)
    return inf


@pytest.fixture
def campaign(ctx, fashion_brand):
    from workflows import create_campaign

    return create_campaign(
        ctx, fashion_brand, "Summer Collection", "Fashion product promotion",
        5_000.0, "2023-06-01", "2023-07-30",
    )
