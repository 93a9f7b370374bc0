# deps.py
from typing import Type, TypeVar

from fastapi import HTTPException, Request

from app_context import AppContext
from campaign import Campaign
from contracts import Contract, Payment
from models import User

U = TypeVar("U", bound=User)


def get_ctx(request: Request) -> AppContext:
    return request.app.state.ctx


def require_user(ctx: AppContext, username: str, kind: Type[U] = User) -> U:
    user = ctx.users.get_user_by_username(username)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    if not isinstance(user, kind):
        raise HTTPException(status_code=400, detail=f"User is not registered as {kind.role.value}")
    return user


def require_campaign(ctx: AppContext, campaign_id: str) -> Campaign:
    campaign = ctx.campaigns.get_campaign_by_id(campaign_id)
    if campaign is None:
        raise HTTPException(status_code=404, detail="Campaign not found")
    return campaign


def require_contract(ctx: AppContext, contract_id: str) -> Contract:
    contract = ctx.contracts.get_contract(contract_id)
    if contract is None:
        raise HTTPException(status_code=404, detail="Contract not found")
    return contract


def require_payment(ctx: AppContext, payment_id: str) -> Payment:
    payment = ctx.contracts.get_payment(payment_id)
    if payment is None:
        raise HTTPException(status_code=404, detail="Payment not found")
    return payment
