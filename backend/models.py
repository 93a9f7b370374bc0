# models.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, ClassVar, Dict, Iterable, List, Mapping, Optional

from campaign import Campaign


class Role(str, Enum):
    INFLUENCER = "Influencer"
    BRAND = "Brand"
    ADVERTISER = "Advertiser"
    ADMIN = "Admin"

    @property
    def joins_campaigns(self) -> bool:
        return self is Role.INFLUENCER

    @property
    def owns_campaigns(self) -> bool:
        return self is Role.BRAND

    @property
    def manages_brands(self) -> bool:
        return self is Role.ADVERTISER


def _today() -> str:
    return date.today().isoformat()


def _or_unset(value: Optional[str]) -> str:
    return value if value else "Not specified"


@dataclass(eq=False)
class User:
    """
    Base account. `username` is the only identity key: two User objects with
    the same username are the same entity regardless of their other fields.
    """

    role: ClassVar[Role]

    username: str
    email: str = ""
    password: str = field(default="", repr=False)  # bcrypt hash, see auth.hash_password
    is_active: bool = True
    created_at: str = field(default_factory=_today)
    last_login: Optional[str] = None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, User):
            return NotImplemented
        return self.username == other.username

    def __hash__(self) -> int:
        return hash(self.username)

    def update_last_login(self) -> None:
        self.last_login = _today()

    def update_info(self, email: Optional[str] = None, password: Optional[str] = None) -> None:
        if email:
            self.email = email
        if password:
            self.password = password

    def _account_lines(self) -> List[str]:
        return [
            f"Username: {self.username}",
            f"Email: {self.email}",
            f"Role: {self.role.value}",
            f"Account Status: {'Active' if self.is_active else 'Inactive'}",
            f"Creation Date: {self.created_at}",
            f"Last Login: {self.last_login or 'Never'}",
        ]

    def _role_lines(self) -> List[str]:
        return []

    def profile_summary(self) -> str:
        return "\n".join(self._account_lines() + self._role_lines())


@dataclass
class SocialMediaProfile:
    platform: str
    handle: str
    followers: int = 0
    engagement_rate: int = 0  # percent
    metrics: Dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return (
            f"{self.platform}: @{self.handle} "
            f"({self.followers} followers, {self.engagement_rate}% engagement)"
        )


@dataclass(eq=False)
class Influencer(User):
    role: ClassVar[Role] = Role.INFLUENCER

    niche: Optional[str] = None
    bio: Optional[str] = None
    rate: float = 0.0
    social_profiles: Dict[str, SocialMediaProfile] = field(default_factory=dict)
    content_categories: List[str] = field(default_factory=list)
    active_campaigns: List[str] = field(default_factory=list)  # campaign ids
    past_campaigns: List[str] = field(default_factory=list)
    total_campaigns: int = 0
    total_earnings: float = 0.0

    # ---------- social profiles (keyed by lowercased platform) ----------
    def add_social_media(self, platform: str, handle: str, followers: int) -> SocialMediaProfile:
        profile = SocialMediaProfile(platform=platform, handle=handle, followers=followers)
        self.social_profiles[platform.lower()] = profile
        return profile

    def update_social_media(self, platform: str, handle: str, followers: int) -> bool:
        profile = self.social_profiles.get(platform.lower())
        if profile is None:
            return False
        profile.handle = handle
        profile.followers = followers
        return True

    def remove_social_media(self, platform: str) -> bool:
        return self.social_profiles.pop(platform.lower(), None) is not None

    def get_handle(self, platform: str) -> Optional[str]:
        profile = self.social_profiles.get(platform.lower())
        return profile.handle if profile else None

    def get_follower_count(self, platform: str) -> int:
        profile = self.social_profiles.get(platform.lower())
        return profile.followers if profile else 0

    @property
    def total_followers(self) -> int:
        return sum(p.followers for p in self.social_profiles.values())

    def calculate_engagement(self, platform: str, likes: int, comments: int, shares: int) -> None:
        profile = self.social_profiles.get(platform.lower())
        if profile is None:
            return

        profile.metrics["likes"] = likes
        profile.metrics["comments"] = comments
        profile.metrics["shares"] = shares

        # comments weigh double, shares triple
        weighted = likes + comments * 2 + shares * 3
        if profile.followers > 0:
            profile.engagement_rate = int(weighted / profile.followers * 100)
        else:
            profile.engagement_rate = 0

    def add_content_category(self, category: str) -> None:
        if category not in self.content_categories:
            self.content_categories.append(category)

    # ---------- campaign bookkeeping ----------
    def add_campaign(self, campaign_id: str) -> None:
        if campaign_id not in self.active_campaigns:
            self.active_campaigns.append(campaign_id)
            self.total_campaigns += 1

    def complete_campaign(self, campaign_id: str, earnings: float) -> None:
        if campaign_id in self.active_campaigns:
            self.active_campaigns.remove(campaign_id)
            self.past_campaigns.append(campaign_id)
            self.total_earnings += earnings

    def _role_lines(self) -> List[str]:
        lines = [
            f"Niche: {_or_unset(self.niche)}",
            f"Bio: {_or_unset(self.bio)}",
            f"Rate: ${self.rate:.2f} per post",
            f"Total Followers: {self.total_followers}",
            f"Active Campaigns: {len(self.active_campaigns)}",
            f"Completed Campaigns: {len(self.past_campaigns)}",
            f"Total Earnings: ${self.total_earnings:.2f}",
            "",
            "Social Media Profiles:",
        ]
        lines.extend(str(p) for p in self.social_profiles.values())
        lines.append("")
        lines.append("Content Categories: " + ", ".join(self.content_categories))
        return lines


@dataclass(eq=False)
class Brand(User):
    role: ClassVar[Role] = Role.BRAND

    company_name: Optional[str] = None
    industry: Optional[str] = None
    website: Optional[str] = None
    description: Optional[str] = None
    budget: float = 0.0
    active_campaigns: List[str] = field(default_factory=list)
    past_campaigns: List[str] = field(default_factory=list)
    total_campaigns: int = 0
    total_spent: float = 0.0

    @property
    def display_name(self) -> str:
        return self.company_name or self.username

    def create_campaign(
        self,
        name: str,
        description: str = "",
        budget: float = 0.0,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> Campaign:
        campaign = Campaign(
            name=name,
            brand_username=self.username,
            description=description,
            budget=budget,
            start_date=start_date,
            end_date=end_date,
        )
        self.add_campaign(campaign.id)
        return campaign

    def add_campaign(self, campaign_id: str) -> None:
        if campaign_id not in self.active_campaigns:
            self.active_campaigns.append(campaign_id)
            self.total_campaigns += 1

    def complete_campaign(self, campaign_id: str, spent: float) -> None:
        if campaign_id in self.active_campaigns:
            self.active_campaigns.remove(campaign_id)
            self.past_campaigns.append(campaign_id)
            self.total_spent += spent

    def remaining_budget(self, budgets: Mapping[str, float]) -> float:
        """`budgets` maps campaign id -> campaign budget; unknown ids count as 0."""
        allocated = sum(budgets.get(cid, 0.0) for cid in self.active_campaigns)
        return self.budget - allocated

    def format_budget(self, decimal_places: int = 2) -> str:
        return f"{self.budget:.{decimal_places}f}"

    def _role_lines(self) -> List[str]:
        return [
            f"Company Name: {_or_unset(self.company_name)}",
            f"Industry: {_or_unset(self.industry)}",
            f"Website: {_or_unset(self.website)}",
            f"Description: {_or_unset(self.description)}",
            f"Total Budget: ${self.budget:.2f}",
            f"Active Campaigns: {len(self.active_campaigns)}",
            f"Completed Campaigns: {len(self.past_campaigns)}",
            f"Total Spent: ${self.total_spent:.2f}",
        ]


@dataclass(eq=False)
class Advertiser(User):
    role: ClassVar[Role] = Role.ADVERTISER

    agency_name: Optional[str] = None
    contact_person: Optional[str] = None
    phone: Optional[str] = None
    commission: float = 10.0  # percent of managed campaign budgets
    managed_brands: List[str] = field(default_factory=list)  # brand usernames
    managed_campaigns: List[str] = field(default_factory=list)  # campaign ids
    total_clients: int = 0

    def add_brand(self, brand: Brand) -> bool:
        if brand.username in self.managed_brands:
            return False
        self.managed_brands.append(brand.username)
        self.total_clients += 1
        return True

    def add_brands(self, *brands: Brand) -> int:
        return sum(1 for b in brands if self.add_brand(b))

    def remove_brand(self, brand: Brand) -> bool:
        if brand.username not in self.managed_brands:
            return False
        self.managed_brands.remove(brand.username)
        self.total_clients -= 1
        return True

    def add_campaign(self, campaign_id: str) -> bool:
        if campaign_id in self.managed_campaigns:
            return False
        self.managed_campaigns.append(campaign_id)
        return True

    def add_campaigns(self, *campaign_ids: str) -> int:
        return sum(1 for cid in campaign_ids if self.add_campaign(cid))

    def remove_campaign(self, campaign_id: str) -> bool:
        if campaign_id not in self.managed_campaigns:
            return False
        self.managed_campaigns.remove(campaign_id)
        return True

    def calculate_revenue(self, budgets: Mapping[str, float]) -> float:
        return sum(budgets.get(cid, 0.0) * (self.commission / 100) for cid in self.managed_campaigns)

    def create_campaign_for_brand(
        self,
        brand: Brand,
        name: str,
        description: str = "",
        budget: float = 0.0,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> Optional[Campaign]:
        if brand.username not in self.managed_brands:
            return None
        campaign = brand.create_campaign(name, description, budget, start_date, end_date)
        self.add_campaign(campaign.id)
        return campaign

    def _role_lines(self) -> List[str]:
        return [
            f"Agency Name: {_or_unset(self.agency_name)}",
            f"Contact Person: {_or_unset(self.contact_person)}",
            f"Phone: {_or_unset(self.phone)}",
            f"Managed Brands: {len(self.managed_brands)}",
            f"Total Clients: {self.total_clients}",
            f"Commission Rate: {self.commission}%",
        ]


@dataclass(eq=False)
class Admin(User):
    role: ClassVar[Role] = Role.ADMIN

    def _role_lines(self) -> List[str]:
        return ["Permissions: full platform administration"]


USER_TYPES: Dict[Role, type] = {
    Role.INFLUENCER: Influencer,
    Role.BRAND: Brand,
    Role.ADVERTISER: Advertiser,
    Role.ADMIN: Admin,
}


def users_with_role(users: Iterable[User], role: Role) -> List[User]:
    return [u for u in users if u.role is role]
