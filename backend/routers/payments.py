from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from app_context import AppContext
from deps import get_ctx, require_payment
from schemas import ActionResult, CancelRequest, PaymentOut, PayRequest

router = APIRouter()

@router.get("/{payment_id}", response_model=PaymentOut)
def get_payment(payment_id: str, ctx: AppContext = Depends(get_ctx)):
    return PaymentOut.from_payment(require_payment(ctx, payment_id))

@router.post("/{payment_id}/retry", response_model=PaymentOut)
def retry(payment_id: str, payload: PayRequest, ctx: AppContext = Depends(get_ctx)):
    # only Pending/Failed payments are charged; anything else comes back unchanged
    p = require_payment(ctx, payment_id)
    p.process_payment(payload.payment_method, ctx.gateway)
    return PaymentOut.from_payment(p)

@router.post("/{payment_id}/cancel", response_model=ActionResult)
def cancel(payment_id: str, payload: CancelRequest, ctx: AppContext = Depends(get_ctx)):
    p = require_payment(ctx, payment_id)
    return ActionResult(changed=p.cancel_payment(payload.reason), status=p.status.value, contract_id=p.contract.id)

@router.get("/{payment_id}/receipt", response_class=PlainTextResponse)
def receipt(payment_id: str, ctx: AppContext = Depends(get_ctx)):
    return require_payment(ctx, payment_id).generate_receipt()
