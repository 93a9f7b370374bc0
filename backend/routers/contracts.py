from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import PlainTextResponse
from typing import List, Optional

import workflows
from app_context import AppContext
from deps import get_ctx, require_campaign, require_contract, require_user
from models import Influencer
from schemas import ActionResult, ContractOut, PaymentOut, PayRequest, TerminateRequest

router = APIRouter()

@router.get("", response_model=List[ContractOut])
def list_contracts(
    campaign_id: Optional[str] = None,
    influencer: Optional[str] = None,
    ctx: AppContext = Depends(get_ctx),
):
    if campaign_id:
        items = ctx.contracts.get_contracts_for_campaign(require_campaign(ctx, campaign_id))
    elif influencer:
        items = ctx.contracts.get_contracts_for_influencer(require_user(ctx, influencer, Influencer))
    else:
        items = ctx.contracts.get_all_contracts()
    return [ContractOut.from_contract(c) for c in items]

@router.get("/{contract_id}", response_model=ContractOut)
def get_contract(contract_id: str, ctx: AppContext = Depends(get_ctx)):
    return ContractOut.from_contract(require_contract(ctx, contract_id))

@router.post("/{contract_id}/sign", response_model=ActionResult)
def sign(contract_id: str, ctx: AppContext = Depends(get_ctx)):
    c = require_contract(ctx, contract_id)
    return ActionResult(changed=c.sign_contract(), status=c.status.value, contract_id=c.id)

@router.post("/{contract_id}/complete", response_model=ActionResult)
def complete(contract_id: str, ctx: AppContext = Depends(get_ctx)):
    c = require_contract(ctx, contract_id)
    return ActionResult(changed=c.complete_contract(), status=c.status.value, contract_id=c.id)

@router.post("/{contract_id}/terminate", response_model=ActionResult)
def terminate(contract_id: str, payload: TerminateRequest, ctx: AppContext = Depends(get_ctx)):
    c = require_contract(ctx, contract_id)
    return ActionResult(changed=c.terminate_contract(payload.reason), status=c.status.value, contract_id=c.id)

@router.get("/{contract_id}/document", response_class=PlainTextResponse)
def document(contract_id: str, ctx: AppContext = Depends(get_ctx)):
    return require_contract(ctx, contract_id).generate_contract_document()

@router.post("/{contract_id}/pay", response_model=PaymentOut)
def pay(contract_id: str, payload: PayRequest, ctx: AppContext = Depends(get_ctx)):
    """
    Charge the contract through the payment gateway. A declined charge is
    not an error: the payment comes back with status Failed and can be
    retried via /payments/{id}/retry.
    """
    c = require_contract(ctx, contract_id)
    payment = workflows.settle_contract(ctx, c, payload.payment_method, payload.amount)
    if payment is None:
        raise HTTPException(status_code=400, detail="Contract is unsigned, terminated or already paid")
    return PaymentOut.from_payment(payment)

@router.get("/{contract_id}/payments", response_model=List[PaymentOut])
def contract_payments(contract_id: str, ctx: AppContext = Depends(get_ctx)):
    c = require_contract(ctx, contract_id)
    return [PaymentOut.from_payment(p) for p in ctx.contracts.get_payments_for_contract(c)]
