# contracts.py
from __future__ import annotations

import random
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from campaign import Campaign
from config import DEFAULT_CURRENCY, PAYMENT_SUCCESS_RATE
from logging_config import get_logger
from models import Brand, Influencer, User

logger = get_logger("influencer_manager.contracts", component="contracts")

DEFAULT_PAYMENT_TERMS = "Payment will be processed within 30 days of campaign completion"
DEFAULT_DELIVERABLES = "Content creation and posting as per campaign requirements"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _party_name(user: User) -> str:
    if isinstance(user, Brand):
        return user.display_name
    return user.username


class ContractStatus(str, Enum):
    DRAFT = "Draft"
    ACTIVE = "Active"
    COMPLETED = "Completed"
    TERMINATED = "Terminated"


class PaymentStatus(str, Enum):
    PENDING = "Pending"
    PROCESSING = "Processing"
    COMPLETED = "Completed"
    FAILED = "Failed"
    CANCELLED = "Cancelled"


class Contract:
    """
    Agreement between a brand and an influencer for one campaign.

    The payment amount defaults to the influencer's rate at creation time and
    is not re-read afterwards. Signing is the only way out of Draft.
    """

    def __init__(
        self,
        campaign: Campaign,
        influencer: Influencer,
        brand: User,
        payment_amount: Optional[float] = None,
        payment_terms: Optional[str] = None,
        deliverables: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ):
        self.id = str(uuid.uuid4())
        self.campaign = campaign
        self.influencer = influencer
        self.brand = brand
        self.payment_amount = float(influencer.rate if payment_amount is None else payment_amount)
        self.payment_terms = payment_terms or DEFAULT_PAYMENT_TERMS
        self.deliverables = deliverables or DEFAULT_DELIVERABLES
        self.start_date = start_date if start_date is not None else campaign.start_date
        self.end_date = end_date if end_date is not None else campaign.end_date
        self.status = ContractStatus.DRAFT
        self.is_signed = False
        self.termination_reason: Optional[str] = None
        self.created_at = _utcnow()
        self.updated_at = self.created_at

    def __repr__(self) -> str:
        return f"Contract(id={self.id!r}, status={self.status.value!r})"

    def sign_contract(self) -> bool:
        if self.is_signed:
            return False
        self.is_signed = True
        self.status = ContractStatus.ACTIVE
        self.updated_at = _utcnow()
        logger.info("contract_signed", extra={"contract_id": self.id, "campaign_id": self.campaign.id})
        return True

    def terminate_contract(self, reason: str = "") -> bool:
        if self.status is not ContractStatus.ACTIVE:
            return False
        self.status = ContractStatus.TERMINATED
        self.termination_reason = reason or None
        self.updated_at = _utcnow()
        logger.info(
            "contract_terminated",
            extra={"contract_id": self.id, "campaign_id": self.campaign.id, "reason": reason},
        )
        return True

    def complete_contract(self) -> bool:
        if self.status is not ContractStatus.ACTIVE:
            return False
        self.status = ContractStatus.COMPLETED
        self.updated_at = _utcnow()
        logger.info("contract_completed", extra={"contract_id": self.id, "campaign_id": self.campaign.id})
        return True

    def generate_contract_document(self) -> str:
        return "\n".join([
            "CONTRACT AGREEMENT",
            "=================",
            "",
            f"Contract ID: {self.id}",
            f"Date Created: {self.created_at.isoformat()}",
            "",
            "PARTIES",
            "------",
            f"Brand: {_party_name(self.brand)}",
            f"Influencer: {self.influencer.username}",
            "",
            "CAMPAIGN DETAILS",
            "----------------",
            f"Campaign Name: {self.campaign.name}",
            f"Description: {self.campaign.description}",
            f"Duration: {self.start_date} to {self.end_date}",
            "",
            "TERMS",
            "-----",
            f"Deliverables: {self.deliverables}",
            "",
            f"Payment Amount: ${self.payment_amount:.2f}",
            f"Payment Terms: {self.payment_terms}",
            "",
            "SIGNATURES",
            "----------",
            "Brand Representative: ____________________",
            "",
            "Influencer: ____________________",
            "",
        ])


@dataclass
class PaymentGateway:
    """Stand-in for a real processor: approves a charge with fixed probability."""

    success_rate: float = PAYMENT_SUCCESS_RATE
    rng: random.Random = field(default_factory=random.Random)

    def charge(self, amount: float, currency: str, method: str) -> bool:
        return self.rng.random() < self.success_rate


class Payment:
    def __init__(
        self,
        contract: Contract,
        amount: Optional[float] = None,
        currency: str = DEFAULT_CURRENCY,
        payment_method: Optional[str] = None,
    ):
        self.id = str(uuid.uuid4())
        self.contract = contract
        self.campaign = contract.campaign
        self.influencer = contract.influencer
        self.brand = contract.brand
        self.amount = float(contract.payment_amount if amount is None else amount)
        self.currency = currency
        self.payment_method = payment_method
        self.status = PaymentStatus.PENDING
        self.transaction_id: Optional[str] = None
        self.payment_date: Optional[datetime] = None
        self.cancellation_reason: Optional[str] = None
        self.created_at = _utcnow()

    def __repr__(self) -> str:
        return f"Payment(id={self.id!r}, status={self.status.value!r}, amount={self.amount!r})"

    def process_payment(self, payment_method: str, gateway: Optional[PaymentGateway] = None) -> bool:
        """
        Charge through the (simulated) gateway.

        Allowed from Pending, or from Failed as a manual retry. A failed
        charge is a result state, not an exception, and schedules nothing.
        On success the influencer's earnings and the brand's spend are
        updated and the campaign moves to each party's past list.
        """
        if self.status not in (PaymentStatus.PENDING, PaymentStatus.FAILED):
            logger.debug("payment_process_ignored", extra={"payment_id": self.id, "status": self.status.value})
            return False

        gateway = gateway or PaymentGateway()
        self.payment_method = payment_method
        self.status = PaymentStatus.PROCESSING

        if not gateway.charge(self.amount, self.currency, payment_method):
            self.status = PaymentStatus.FAILED
            logger.info(
                "payment_failed",
                extra={"payment_id": self.id, "campaign_id": self.campaign.id, "amount": self.amount},
            )
            return False

        self.status = PaymentStatus.COMPLETED
        self.payment_date = _utcnow()
        self.transaction_id = "TX-" + uuid.uuid4().hex[:8].upper()

        self.influencer.complete_campaign(self.campaign.id, self.amount)
        if isinstance(self.brand, Brand):
            self.brand.complete_campaign(self.campaign.id, self.amount)

        logger.info(
            "payment_completed",
            extra={
                "payment_id": self.id,
                "campaign_id": self.campaign.id,
                "username": self.influencer.username,
                "amount": self.amount,
                "currency": self.currency,
                "transaction_id": self.transaction_id,
            },
        )
        return True

    def cancel_payment(self, reason: str = "") -> bool:
        if self.status is PaymentStatus.COMPLETED:
            return False
        self.status = PaymentStatus.CANCELLED
        self.cancellation_reason = reason or None
        logger.info("payment_cancelled", extra={"payment_id": self.id, "reason": reason})
        return True

    def generate_receipt(self) -> str:
        if self.status is not PaymentStatus.COMPLETED:
            return "Payment not completed yet. No receipt available."

        return "\n".join([
            "PAYMENT RECEIPT",
            "===============",
            "",
            f"Receipt ID: {self.id}",
            f"Transaction ID: {self.transaction_id}",
            f"Date: {self.payment_date.isoformat() if self.payment_date else ''}",
            "",
            "PAYMENT DETAILS",
            "---------------",
            f"Campaign: {self.campaign.name}",
            f"Brand: {_party_name(self.brand)}",
            f"Influencer: {self.influencer.username}",
            f"Amount: {self.currency} {self.amount:.2f}",
            f"Payment Method: {self.payment_method}",
            f"Status: {self.status.value}",
            "",
            "Thank you for using Influencer Manager Platform!",
            "",
        ])


def process_multiple_payments(
    payment_method: str, *payments: Payment, gateway: Optional[PaymentGateway] = None
) -> int:
    return sum(1 for p in payments if p.process_payment(payment_method, gateway))


def cancel_multiple_payments(reason: str, *payments: Payment) -> int:
    return sum(1 for p in payments if p.cancel_payment(reason))
