# repositories.py
"""
In-memory stores keyed by identity: users by username, campaigns, contracts
and payments by id. They hold the canonical entity objects; campaigns and
users refer to each other only by key. There is no locking and no
multi-entity transaction: one writer at a time is assumed.
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from campaign import Campaign, CampaignStatus
from contracts import Contract, Payment
from errors import DataProcessingError
from models import Admin, Advertiser, Brand, Influencer, Role, User


def _contains(haystack: Optional[str], needle: str) -> bool:
    return bool(haystack) and needle.lower() in haystack.lower()


class UserService:
    def __init__(self, initial_users: Optional[Iterable[User]] = None):
        self._users: Dict[str, User] = {}
        for user in initial_users or []:
            self.add_user(user)

    def add_user(self, user: Optional[User]) -> bool:
        if user is None or user.username in self._users:
            return False
        self._users[user.username] = user
        return True

    def get_user_by_username(self, username: str) -> Optional[User]:
        return self._users.get(username)

    def find_users_by_email(self, email: str) -> List[User]:
        return [u for u in self._users.values() if u.email == email]

    def delete_user(self, username: str) -> bool:
        return self._users.pop(username, None) is not None

    def update_user(self, username: str, email: Optional[str] = None, password: Optional[str] = None) -> bool:
        """`password` is stored as given; pass a hash from `auth.hash_password`."""
        user = self._users.get(username)
        if user is None:
            return False
        user.update_info(email, password)
        return True

    def get_all_users(self) -> List[User]:
        return list(self._users.values())

    def get_users_by_role(self, role: Role) -> List[User]:
        return [u for u in self._users.values() if u.role is role]

    def get_all_influencers(self) -> List[Influencer]:
        return self.get_users_by_role(Role.INFLUENCER)  # type: ignore[return-value]

    def get_all_brands(self) -> List[Brand]:
        return self.get_users_by_role(Role.BRAND)  # type: ignore[return-value]

    def get_all_advertisers(self) -> List[Advertiser]:
        return self.get_users_by_role(Role.ADVERTISER)  # type: ignore[return-value]

    def get_all_admins(self) -> List[Admin]:
        return self.get_users_by_role(Role.ADMIN)  # type: ignore[return-value]

    def search_influencers(
        self,
        niche: Optional[str] = None,
        min_followers: int = 0,
        max_rate: Optional[float] = None,
    ) -> List[Influencer]:
        results = []
        for inf in self.get_all_influencers():
            if niche and not _contains(inf.niche, niche):
                continue
            if min_followers > 0 and inf.total_followers < min_followers:
                continue
            if max_rate is not None and inf.rate > max_rate:
                continue
            results.append(inf)
        return results

    def get_influencers_by_niche(self, niche: Optional[str]) -> List[Influencer]:
        if not niche:
            return []
        return [i for i in self.get_all_influencers() if _contains(i.niche, niche)]

    def get_brands_by_industry(self, industry: Optional[str]) -> List[Brand]:
        if not industry:
            return []
        return [b for b in self.get_all_brands() if _contains(b.industry, industry)]

    def get_top_influencers(self, limit: int) -> List[Influencer]:
        ranked = sorted(self.get_all_influencers(), key=lambda i: i.total_followers, reverse=True)
        return ranked[:limit]

    def get_top_brands(self, limit: int) -> List[Brand]:
        ranked = sorted(self.get_all_brands(), key=lambda b: b.budget, reverse=True)
        return ranked[:limit]

    @property
    def user_count(self) -> int:
        return len(self._users)

    def username_exists(self, username: str) -> bool:
        return username in self._users

    def email_in_use(self, email: str) -> bool:
        return any(u.email == email for u in self._users.values())

    def set_all_users(self, users: Optional[Iterable[User]]) -> None:
        """Replace the whole store, e.g. after loading a persisted snapshot."""
        if users is None:
            raise DataProcessingError("User list cannot be null")

        # validate before clearing so a bad snapshot leaves the store untouched
        staged: Dict[str, User] = {}
        for user in users:
            if user is None or not user.username:
                raise DataProcessingError("User with empty username found")
            staged[user.username] = user

        self._users = staged


class CampaignService:
    def __init__(self, initial_campaigns: Optional[Iterable[Campaign]] = None):
        self._campaigns: Dict[str, Campaign] = {}
        for campaign in initial_campaigns or []:
            self.add_campaign(campaign)

    def add_campaign(self, campaign: Optional[Campaign]) -> bool:
        if campaign is None or campaign.id in self._campaigns:
            return False
        self._campaigns[campaign.id] = campaign
        return True

    def get_campaign_by_id(self, campaign_id: str) -> Optional[Campaign]:
        return self._campaigns.get(campaign_id)

    def delete_campaign(self, campaign_id: str) -> bool:
        return self._campaigns.pop(campaign_id, None) is not None

    def update_campaign(self, campaign: Optional[Campaign]) -> bool:
        if campaign is None or campaign.id not in self._campaigns:
            return False
        self._campaigns[campaign.id] = campaign
        return True

    def get_all_campaigns(self) -> List[Campaign]:
        return list(self._campaigns.values())

    def get_campaigns_for_brand(self, brand: Optional[User]) -> List[Campaign]:
        if brand is None:
            return []
        return [c for c in self._campaigns.values() if c.brand_username == brand.username]

    def get_campaigns_for_influencer(self, influencer: Optional[Influencer]) -> List[Campaign]:
        if influencer is None:
            return []
        return [c for c in self._campaigns.values() if c.is_accepted(influencer)]

    def get_campaign_offers_for_influencer(self, influencer: Optional[Influencer]) -> List[Campaign]:
        """Campaigns the influencer was invited to but has not accepted yet."""
        if influencer is None:
            return []
        return [
            c for c in self._campaigns.values()
            if c.is_invited(influencer) and not c.is_accepted(influencer)
        ]

    def get_campaigns_by_status(self, status) -> List[Campaign]:
        if not status:
            return []
        wanted = status.value if isinstance(status, CampaignStatus) else str(status)
        return [c for c in self._campaigns.values() if c.status.value.lower() == wanted.lower()]

    def get_active_campaigns(self) -> List[Campaign]:
        return self.get_campaigns_by_status(CampaignStatus.ACTIVE)

    def get_completed_campaigns(self) -> List[Campaign]:
        return self.get_campaigns_by_status(CampaignStatus.COMPLETED)

    def get_campaigns_in_date_range(self, start_date: Optional[str], end_date: Optional[str]) -> List[Campaign]:
        # YYYY-MM-DD strings compare correctly as text
        if not start_date or not end_date:
            return []
        return [
            c for c in self._campaigns.values()
            if c.start_date and c.end_date and c.start_date >= start_date and c.end_date <= end_date
        ]

    def get_campaigns_by_name(self, name: Optional[str]) -> List[Campaign]:
        if not name:
            return []
        return [c for c in self._campaigns.values() if _contains(c.name, name)]

    def get_campaigns_by_budget_range(self, min_budget: float, max_budget: float) -> List[Campaign]:
        return [c for c in self._campaigns.values() if min_budget <= c.budget <= max_budget]

    def get_campaigns_with_high_engagement(self, threshold: int) -> List[Campaign]:
        return [c for c in self._campaigns.values() if c.calculate_total_engagement() >= threshold]

    def get_top_performing_campaigns(self, limit: int) -> List[Campaign]:
        ranked = sorted(
            self._campaigns.values(), key=lambda c: c.calculate_total_engagement(), reverse=True
        )
        return ranked[:limit]

    @property
    def campaign_count(self) -> int:
        return len(self._campaigns)

    def clear_all_campaigns(self) -> None:
        self._campaigns.clear()

    def set_all_campaigns(self, campaigns: Optional[Iterable[Campaign]]) -> None:
        if campaigns is None:
            raise DataProcessingError("Campaign list cannot be null")

        staged: Dict[str, Campaign] = {}
        for campaign in campaigns:
            if campaign is None or not campaign.id:
                raise DataProcessingError("Campaign with empty ID found")
            staged[campaign.id] = campaign

        self._campaigns = staged


class ContractService:
    """Contracts and the payments settling them."""

    def __init__(self):
        self._contracts: Dict[str, Contract] = {}
        self._payments: Dict[str, Payment] = {}

    def add_contract(self, contract: Contract) -> bool:
        if contract.id in self._contracts:
            return False
        self._contracts[contract.id] = contract
        return True

    def get_contract(self, contract_id: str) -> Optional[Contract]:
        return self._contracts.get(contract_id)

    def get_all_contracts(self) -> List[Contract]:
        return list(self._contracts.values())

    def get_contracts_for_campaign(self, campaign: Campaign) -> List[Contract]:
        return [c for c in self._contracts.values() if c.campaign.id == campaign.id]

    def get_contracts_for_influencer(self, influencer: Influencer) -> List[Contract]:
        return [c for c in self._contracts.values() if c.influencer.username == influencer.username]

    def find_contract(self, campaign: Campaign, influencer: Influencer) -> Optional[Contract]:
        for contract in self._contracts.values():
            if contract.campaign.id == campaign.id and contract.influencer.username == influencer.username:
                return contract
        return None

    def add_payment(self, payment: Payment) -> bool:
        if payment.id in self._payments:
            return False
        self._payments[payment.id] = payment
        return True

    def get_payment(self, payment_id: str) -> Optional[Payment]:
        return self._payments.get(payment_id)

    def get_payments_for_contract(self, contract: Contract) -> List[Payment]:
        return [p for p in self._payments.values() if p.contract.id == contract.id]
