# workflows.py
"""
Multi-entity operations the API (and any other front end) drives. Each step
writes to the entities directly; there is no rollback if a later step is
skipped, matching the single-writer model of the stores.
"""
from __future__ import annotations

from typing import List, Optional

from app_context import AppContext
from auth import hash_password
from campaign import Campaign
from contracts import Contract, ContractStatus, Payment, PaymentStatus
from logging_config import get_logger
from models import Admin, Brand, Influencer, User

logger = get_logger("influencer_manager.workflows", component="workflows")


def _owner_of(ctx: AppContext, campaign: Campaign) -> Optional[User]:
    if not campaign.brand_username:
        return None
    return ctx.users.get_user_by_username(campaign.brand_username)


def create_campaign(
    ctx: AppContext,
    brand: Brand,
    name: str,
    description: str = "",
    budget: float = 0.0,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
) -> Campaign:
    campaign = brand.create_campaign(name, description, budget, start_date, end_date)
    ctx.campaigns.add_campaign(campaign)
    logger.info(
        "campaign_created",
        extra={"campaign_id": campaign.id, "username": brand.username, "budget": campaign.budget},
    )
    return campaign


def invite_influencer(ctx: AppContext, campaign: Campaign, influencer: Influencer) -> bool:
    if not campaign.invite_influencer(influencer):
        return False

    ctx.notifications.add_notification(
        influencer.username, f"You've been invited to join the campaign: {campaign.name}"
    )
    logger.info("influencer_invited", extra={"campaign_id": campaign.id, "username": influencer.username})
    return True


def invite_recommended(ctx: AppContext, campaign: Campaign, count: int = 1) -> List[Influencer]:
    """Invite the top `count` recommended influencers."""
    invited = []
    for influencer in ctx.recommendations.get_recommended_influencers(campaign)[:count]:
        if invite_influencer(ctx, campaign, influencer):
            invited.append(influencer)
    return invited


def _open_contract(ctx: AppContext, campaign: Campaign, influencer: Influencer) -> Optional[Contract]:
    owner = _owner_of(ctx, campaign)
    if owner is None:
        logger.warning(
            "contract_skipped_no_owner",
            extra={"campaign_id": campaign.id, "username": influencer.username},
        )
        return None

    existing = ctx.contracts.find_contract(campaign, influencer)
    if existing is not None:
        return existing

    contract = Contract(campaign, influencer, owner)
    ctx.contracts.add_contract(contract)
    return contract


def accept_invitation(ctx: AppContext, campaign: Campaign, influencer: Influencer) -> Optional[Contract]:
    """Accept a pending invitation and draft the contract. None when there was nothing to accept."""
    if not campaign.accept_influencer(influencer):
        return None

    contract = _open_contract(ctx, campaign, influencer)
    if campaign.brand_username:
        ctx.notifications.add_notification(
            campaign.brand_username,
            f"{influencer.username} accepted your invitation to {campaign.name}",
        )
    logger.info("invitation_accepted", extra={"campaign_id": campaign.id, "username": influencer.username})
    return contract


def place_influencer(ctx: AppContext, campaign: Campaign, influencer: Influencer) -> Optional[Contract]:
    """Direct placement without an invitation round-trip."""
    campaign.add_influencer(influencer)
    ctx.notifications.add_notification(
        influencer.username, f"You've been added to the campaign: {campaign.name}"
    )
    return _open_contract(ctx, campaign, influencer)


def remove_influencer(ctx: AppContext, campaign: Campaign, influencer: Influencer) -> bool:
    if not campaign.remove_influencer(influencer):
        return False

    ctx.notifications.add_notification(
        influencer.username, f"You've been removed from the campaign: {campaign.name}"
    )
    logger.info("influencer_removed", extra={"campaign_id": campaign.id, "username": influencer.username})
    return True


def complete_campaign(ctx: AppContext, campaign: Campaign) -> List[Contract]:
    """End the campaign and complete every active contract under it."""
    campaign.end()

    completed = [c for c in ctx.contracts.get_contracts_for_campaign(campaign) if c.complete_contract()]
    ctx.notifications.send_bulk_notification(
        campaign.accepted_influencers, f"The campaign {campaign.name} has been completed"
    )
    logger.info(
        "campaign_completed",
        extra={"campaign_id": campaign.id, "completed_contracts": len(completed)},
    )
    return completed


def settle_contract(
    ctx: AppContext, contract: Contract, payment_method: str, amount: Optional[float] = None
) -> Optional[Payment]:
    """
    Create a payment for a signed contract and run it through the gateway.
    Returns None for an unsigned, terminated or already paid contract. A
    declined charge still returns the payment, in Failed state, for a manual
    retry.
    """
    if not contract.is_signed or contract.status is ContractStatus.TERMINATED:
        return None
    if any(p.status is PaymentStatus.COMPLETED for p in ctx.contracts.get_payments_for_contract(contract)):
        logger.info("contract_already_paid", extra={"contract_id": contract.id})
        return None

    payment = Payment(contract, amount)
    ctx.contracts.add_payment(payment)

    if payment.process_payment(payment_method, ctx.gateway):
        ctx.notifications.add_notification(
            contract.influencer.username,
            f"Payment of {payment.currency} {payment.amount:.2f} received for {contract.campaign.name}",
        )
    else:
        ctx.notifications.add_notification(
            contract.brand.username,
            f"Payment to {contract.influencer.username} for {contract.campaign.name} failed",
        )
    return payment


def load_demo_data(ctx: AppContext) -> None:
    """Seed the stores with a small sample marketplace."""
    ctx.users.add_user(
        Admin(username="admin", email="admin@platform.com", password=hash_password("password123"))
    )

    jane = Influencer(username="janesmith", email="jane@influencer.com", password=hash_password("pass123"),
                      niche="Fashion", rate=500.0)
    jane.add_social_media("Instagram", "jane_style", 50_000)
    jane.add_social_media("TikTok", "janesmithofficial", 75_000)
    ctx.users.add_user(jane)

    guru = Influencer(username="techguru", email="tech@influencer.com", password=hash_password("guru123"),
                      niche="Technology", rate=700.0)
    guru.add_social_media("YouTube", "TechWithGuru", 200_000)
    guru.add_social_media("Twitter", "TechGuru", 35_000)
    ctx.users.add_user(guru)

    fashionco = Brand(username="fashionco", email="contact@fashionco.com", password=hash_password("brand123"),
                      company_name="Fashion Co", industry="Clothing", budget=10_000.0)
    ctx.users.add_user(fashionco)

    techcorp = Brand(username="techcorp", email="marketing@techcorp.com", password=hash_password("tech456"),
                     company_name="Tech Corp", industry="Technology", budget=25_000.0)
    ctx.users.add_user(techcorp)

    summer = create_campaign(ctx, fashionco, "Summer Collection", "Fashion product promotion",
                             5_000.0, "2023-06-01", "2023-07-30")
    summer.add_influencer(jane)

    launch = create_campaign(ctx, techcorp, "Gadget Launch", "New smartphone promotion",
                             8_000.0, "2023-07-15", "2023-08-15")
    launch.add_influencer(guru)

    logger.info(
        "demo_data_loaded",
        extra={"user_count": ctx.users.user_count, "campaign_count": ctx.campaigns.campaign_count},
    )
