# campaign.py
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from logging_config import get_logger

if TYPE_CHECKING:
    from models import Influencer

logger = get_logger("influencer_manager.campaign", component="campaign")


class CampaignStatus(str, Enum):
    DRAFT = "Draft"
    SCHEDULED = "Scheduled"
    ACTIVE = "Active"
    PAUSED = "Paused"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


# per-influencer statuses inside a campaign
INVITED = "Invited"
ACCEPTED = "Accepted"
NOT_INVITED = "Not Invited"

ENGAGEMENT_KEYS = ("likes", "comments", "shares")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Campaign:
    """
    A brand's marketing campaign and the per-influencer tracking around it.

    Influencers are referenced by username and the owning brand by
    `brand_username`; the repositories own the canonical objects. Every
    effective mutation refreshes `updated_at`. Operations that do not apply
    (an invalid transition, an influencer that was never invited or accepted)
    are silent no-ops and return False where a result makes sense.
    """

    def __init__(
        self,
        name: str,
        brand_username: Optional[str] = None,
        description: str = "",
        budget: float = 0.0,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        campaign_id: Optional[str] = None,
    ):
        self.id = campaign_id or str(uuid.uuid4())
        self._name = name
        self._brand_username = brand_username
        self._description = description
        self._budget = float(budget)
        self._start_date = start_date
        self._end_date = end_date
        self._status = CampaignStatus.DRAFT

        self.invited_influencers: List[str] = []
        self.accepted_influencers: List[str] = []
        self.influencer_statuses: Dict[str, str] = {}
        self.content_urls: Dict[str, List[str]] = {}
        self.engagement_metrics: Dict[str, Dict[str, int]] = {}

        self.created_at = _utcnow()
        self.updated_at = self.created_at

    def __repr__(self) -> str:
        return f"Campaign(id={self.id!r}, name={self._name!r}, status={self._status.value!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Campaign):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def _touch(self) -> None:
        self.updated_at = _utcnow()

    # ---------- attributes (setters refresh updated_at) ----------
    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, value: str) -> None:
        self._name = value
        self._touch()

    @property
    def brand_username(self) -> Optional[str]:
        return self._brand_username

    @brand_username.setter
    def brand_username(self, value: Optional[str]) -> None:
        self._brand_username = value
        self._touch()

    @property
    def description(self) -> str:
        return self._description

    @description.setter
    def description(self, value: str) -> None:
        self._description = value
        self._touch()

    @property
    def budget(self) -> float:
        return self._budget

    @budget.setter
    def budget(self, value: float) -> None:
        self._budget = float(value)
        self._touch()

    @property
    def start_date(self) -> Optional[str]:
        return self._start_date

    @start_date.setter
    def start_date(self, value: Optional[str]) -> None:
        self._start_date = value
        self._touch()

    @property
    def end_date(self) -> Optional[str]:
        return self._end_date

    @end_date.setter
    def end_date(self, value: Optional[str]) -> None:
        self._end_date = value
        self._touch()

    @property
    def status(self) -> CampaignStatus:
        return self._status

    @status.setter
    def status(self, value: CampaignStatus) -> None:
        self._status = CampaignStatus(value)
        self._touch()

    @property
    def is_terminal(self) -> bool:
        return self._status in (CampaignStatus.COMPLETED, CampaignStatus.CANCELLED)

    # ---------- lifecycle ----------
    def _transition(self, action: str, allowed_from: Optional[tuple], target: CampaignStatus) -> bool:
        previous = self._status
        if allowed_from is not None and previous not in allowed_from:
            logger.debug(
                "campaign_transition_ignored",
                extra={"campaign_id": self.id, "action": action, "status": previous.value},
            )
            return False

        self._status = target
        self._touch()
        if previous is target:
            logger.debug(
                "campaign_transition_repeated",
                extra={"campaign_id": self.id, "action": action, "status": target.value},
            )
            return False

        logger.info(
            "campaign_transition",
            extra={
                "campaign_id": self.id,
                "action": action,
                "from_status": previous.value,
                "to_status": target.value,
            },
        )
        return True

    def start(self) -> bool:
        return self._transition(
            "start", (CampaignStatus.DRAFT, CampaignStatus.SCHEDULED), CampaignStatus.ACTIVE
        )

    def pause(self) -> bool:
        return self._transition("pause", (CampaignStatus.ACTIVE,), CampaignStatus.PAUSED)

    def resume(self) -> bool:
        return self._transition("resume", (CampaignStatus.PAUSED,), CampaignStatus.ACTIVE)

    def end(self) -> bool:
        # Unconditional, also from Cancelled
        return self._transition("end", None, CampaignStatus.COMPLETED)

    def cancel(self) -> bool:
        # Unconditional, also from Completed
        return self._transition("cancel", None, CampaignStatus.CANCELLED)

    # ---------- per-influencer workflow ----------
    def is_invited(self, influencer: "Influencer") -> bool:
        return influencer.username in self.invited_influencers

    def is_accepted(self, influencer: "Influencer") -> bool:
        return influencer.username in self.accepted_influencers

    def invite_influencer(self, influencer: "Influencer") -> bool:
        username = influencer.username
        if username in self.invited_influencers:
            return False

        self.invited_influencers.append(username)
        self.influencer_statuses[username] = INVITED
        self._touch()
        return True

    def accept_influencer(self, influencer: "Influencer") -> bool:
        username = influencer.username
        if username not in self.invited_influencers or username in self.accepted_influencers:
            return False

        self.accepted_influencers.append(username)
        self.influencer_statuses[username] = ACCEPTED
        # Second write, not atomic with the one above
        influencer.add_campaign(self.id)
        self._touch()
        return True

    def add_influencer(self, influencer: "Influencer") -> None:
        """Direct placement: invited and accepted in one step, no prior invite needed."""
        username = influencer.username
        if username not in self.invited_influencers:
            self.invited_influencers.append(username)
        if username not in self.accepted_influencers:
            self.accepted_influencers.append(username)
        self.influencer_statuses[username] = ACCEPTED
        influencer.add_campaign(self.id)
        self._touch()

    def remove_influencer(self, influencer: "Influencer") -> bool:
        username = influencer.username
        was_invited = username in self.invited_influencers

        if was_invited:
            self.invited_influencers.remove(username)
        if username in self.accepted_influencers:
            self.accepted_influencers.remove(username)
        self.influencer_statuses.pop(username, None)
        self.content_urls.pop(username, None)
        self.engagement_metrics.pop(username, None)

        if was_invited:
            self._touch()
        return was_invited

    def get_influencer_status(self, influencer: "Influencer") -> str:
        return self.influencer_statuses.get(influencer.username, NOT_INVITED)

    def update_influencer_status(self, influencer: "Influencer", status: str) -> bool:
        if influencer.username not in self.invited_influencers:
            return False
        self.influencer_statuses[influencer.username] = status
        self._touch()
        return True

    def add_content_url(self, influencer: "Influencer", url: str) -> bool:
        username = influencer.username
        if username not in self.accepted_influencers:
            return False
        self.content_urls.setdefault(username, []).append(url)
        self._touch()
        return True

    def get_content_urls(self, influencer: "Influencer") -> List[str]:
        return list(self.content_urls.get(influencer.username, []))

    def update_engagement_metrics(
        self, influencer: "Influencer", likes: int, comments: int, shares: int
    ) -> bool:
        username = influencer.username
        if username not in self.accepted_influencers:
            return False
        # replace, never accumulate
        self.engagement_metrics[username] = {"likes": likes, "comments": comments, "shares": shares}
        self._touch()
        return True

    def get_engagement_metrics(self, influencer: "Influencer") -> Dict[str, int]:
        return dict(self.engagement_metrics.get(influencer.username, {}))

    # ---------- derived metrics ----------
    def _total_metric(self, key: str) -> int:
        return sum(m.get(key, 0) for m in self.engagement_metrics.values())

    def _total_posts(self) -> int:
        return sum(len(urls) for urls in self.content_urls.values())

    def calculate_total_engagement(self) -> int:
        return sum(self._total_metric(k) for k in ENGAGEMENT_KEYS)

    def calculate_cost_per_engagement(self) -> float:
        total = self.calculate_total_engagement()
        if total > 0:
            return self._budget / total
        return 0.0

    def get_metrics(self) -> Dict[str, Any]:
        return {
            "total_influencers": len(self.accepted_influencers),
            "total_posts": self._total_posts(),
            "total_engagement": self.calculate_total_engagement(),
            "cost_per_engagement": self.calculate_cost_per_engagement(),
            "total_likes": self._total_metric("likes"),
            "total_comments": self._total_metric("comments"),
            "total_shares": self._total_metric("shares"),
        }

    def generate_report(self) -> str:
        metrics = self.get_metrics()
        lines = [
            f"Performance Report for Campaign: {self._name}",
            f"Status: {self._status.value}",
            f"Duration: {self._start_date} to {self._end_date}",
            f"Budget: ${self._budget:.2f}",
            "",
            "Overall Metrics:",
            f"- Total Influencers: {metrics['total_influencers']}",
            f"- Total Posts: {metrics['total_posts']}",
            f"- Total Engagement: {metrics['total_engagement']}",
            f"- Cost Per Engagement: ${metrics['cost_per_engagement']:.2f}",
            f"- Total Likes: {metrics['total_likes']}",
            f"- Total Comments: {metrics['total_comments']}",
            f"- Total Shares: {metrics['total_shares']}",
            "",
            "Influencer Performance:",
        ]

        for username in self.accepted_influencers:
            posts = len(self.content_urls.get(username, []))
            m = self.engagement_metrics.get(username, {})
            likes, comments, shares = (m.get(k, 0) for k in ENGAGEMENT_KEYS)
            lines.extend([
                f"- {username}:",
                f"  * Posts: {posts}",
                f"  * Likes: {likes}",
                f"  * Comments: {comments}",
                f"  * Shares: {shares}",
                f"  * Total Engagement: {likes + comments + shares}",
            ])

        return "\n".join(lines) + "\n"

    def format_budget(self, decimal_places: int = 2) -> str:
        return f"{self._budget:.{decimal_places}f}"

    def summary(self, brand_name: Optional[str] = None) -> str:
        return "\n".join([
            f"Campaign: {self._name}",
            f"ID: {self.id}",
            f"Brand: {brand_name or self._brand_username}",
            f"Description: {self._description}",
            f"Budget: ${self.format_budget()}",
            f"Duration: {self._start_date or 'TBD'} to {self._end_date or 'TBD'}",
            f"Status: {self._status.value}",
            f"Invited Influencers: {len(self.invited_influencers)}",
            f"Accepted Influencers: {len(self.accepted_influencers)}",
            f"Total Posts: {self._total_posts()}",
            f"Total Engagement: {self.calculate_total_engagement()}",
            f"Created: {self.created_at.isoformat()}",
            f"Last Updated: {self.updated_at.isoformat()}",
        ])
