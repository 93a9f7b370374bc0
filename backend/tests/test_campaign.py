"""
Tests for the campaign state machine and per-influencer tracking.
"""

import pytest

from campaign import ACCEPTED, INVITED, NOT_INVITED, Campaign, CampaignStatus
from models import Influencer


@pytest.fixture
def c():
    return Campaign("Launch", brand_username="techcorp", budget=1_000.0,
                    start_date="2024-01-01", end_date="2024-02-01")


@pytest.fixture
def alice():
    return Influencer(username="alice", email="alice@example.com", rate=100.0)


def test_new_campaign_is_draft_with_empty_tracking(c):
    """A new campaign starts in Draft with nothing invited or accepted."""
    assert c.status is CampaignStatus.DRAFT
    assert c.invited_influencers == []
    assert c.accepted_influencers == []
    assert c.created_at == c.updated_at
    assert c.id


def test_campaign_ids_are_unique():
    assert Campaign("a").id != Campaign("a").id


def test_start_pause_resume():
    """Draft -> Active -> Paused -> Active."""
    c = Campaign("x")
    assert c.start() is True
    assert c.status is CampaignStatus.ACTIVE
    assert c.pause() is True
    assert c.status is CampaignStatus.PAUSED
    assert c.resume() is True
    assert c.status is CampaignStatus.ACTIVE


def test_start_from_scheduled():
    c = Campaign("x")
    c.status = CampaignStatus.SCHEDULED
    assert c.start() is True
    assert c.status is CampaignStatus.ACTIVE


@pytest.mark.parametrize("action", ["pause", "resume"])
def test_invalid_transition_from_draft_is_silent_noop(c, action):
    """pause/resume from Draft leave the status and updated_at untouched."""
    before = c.updated_at
    assert getattr(c, action)() is False
    assert c.status is CampaignStatus.DRAFT
    assert c.updated_at == before


def test_start_is_ignored_when_already_active(c):
    c.start()
    assert c.start() is False
    assert c.status is CampaignStatus.ACTIVE


def test_end_from_draft_completes(c):
    assert c.end() is True
    assert c.status is CampaignStatus.COMPLETED
    assert c.is_terminal


def test_cancel_overwrites_completed(c):
    """cancel() and end() are unconditional, including between terminal states."""
    c.end()
    assert c.cancel() is True
    assert c.status is CampaignStatus.CANCELLED


def test_end_overwrites_cancelled(c):
    c.cancel()
    assert c.end() is True
    assert c.status is CampaignStatus.COMPLETED


@pytest.mark.parametrize("action", ["end", "cancel"])
def test_repeating_a_terminal_action_reports_no_change(c, action):
    assert getattr(c, action)() is True
    before = c.status
    assert getattr(c, action)() is False
    assert c.status is before


@pytest.mark.parametrize("finish", ["end", "cancel"])
@pytest.mark.parametrize("action", ["start", "pause", "resume"])
def test_terminal_campaign_cannot_restart(c, finish, action):
    getattr(c, finish)()
    before = c.status
    assert getattr(c, action)() is False
    assert c.status is before


def test_start_after_completion_stays_completed(c):
    c.end()
    assert c.start() is False
    assert c.status is CampaignStatus.COMPLETED


def test_setters_touch_updated_at(c):
    before = c.updated_at
    c.budget = 2_000
    assert c.budget == 2_000.0
    assert c.updated_at >= before


def test_invite_is_idempotent(c, alice):
    assert c.invite_influencer(alice) is True
    assert c.invite_influencer(alice) is False
    assert c.invited_influencers == ["alice"]
    assert c.get_influencer_status(alice) == INVITED


def test_accept_requires_invitation(c, alice):
    """Accepting without an invitation changes nothing."""
    assert c.accept_influencer(alice) is False
    assert c.accepted_influencers == []
    assert alice.active_campaigns == []


def test_accept_records_campaign_on_influencer(c, alice):
    c.invite_influencer(alice)
    assert c.accept_influencer(alice) is True
    assert c.accepted_influencers == ["alice"]
    assert c.get_influencer_status(alice) == ACCEPTED
    assert alice.active_campaigns == [c.id]
    assert alice.total_campaigns == 1

    # accepting twice does not duplicate
    assert c.accept_influencer(alice) is False
    assert c.accepted_influencers == ["alice"]
    assert alice.total_campaigns == 1


def test_add_influencer_places_directly(c, alice):
    c.add_influencer(alice)
    assert c.is_invited(alice)
    assert c.is_accepted(alice)
    assert alice.active_campaigns == [c.id]


def test_remove_influencer_clears_everything(c, alice):
    c.add_influencer(alice)
    c.add_content_url(alice, "https://example.com/p/1")
    c.update_engagement_metrics(alice, 10, 2, 1)

    assert c.remove_influencer(alice) is True
    assert not c.is_invited(alice)
    assert not c.is_accepted(alice)
    assert c.get_influencer_status(alice) == NOT_INVITED
    assert c.get_content_urls(alice) == []
    assert c.get_engagement_metrics(alice) == {}


def test_remove_unknown_influencer_returns_false(c, alice):
    assert c.remove_influencer(alice) is False


def test_update_status_requires_invitation(c, alice):
    assert c.update_influencer_status(alice, "Declined") is False
    c.invite_influencer(alice)
    assert c.update_influencer_status(alice, "Declined") is True
    assert c.get_influencer_status(alice) == "Declined"


def test_content_requires_acceptance(c, alice):
    c.invite_influencer(alice)
    assert c.add_content_url(alice, "https://example.com/p/1") is False
    c.accept_influencer(alice)
    assert c.add_content_url(alice, "https://example.com/p/1") is True
    assert c.add_content_url(alice, "https://example.com/p/2") is True
    assert c.get_content_urls(alice) == ["https://example.com/p/1", "https://example.com/p/2"]


def test_engagement_metrics_replace_not_accumulate(c, alice):
    c.add_influencer(alice)
    c.update_engagement_metrics(alice, 100, 10, 5)
    c.update_engagement_metrics(alice, 7, 0, 0)
    assert c.get_engagement_metrics(alice) == {"likes": 7, "comments": 0, "shares": 0}
    assert c.calculate_total_engagement() == 7


def test_engagement_for_non_accepted_is_rejected(c, alice):
    assert c.update_engagement_metrics(alice, 1, 1, 1) is False
    assert c.calculate_total_engagement() == 0


def test_metrics_and_cost_per_engagement(c, alice):
    bob = Influencer(username="bob")
    c.add_influencer(alice)
    c.add_influencer(bob)
    c.add_content_url(alice, "https://example.com/a")
    c.update_engagement_metrics(alice, 300, 100, 100)
    c.update_engagement_metrics(bob, 400, 50, 50)

    m = c.get_metrics()
    assert m == {
        "total_influencers": 2,
        "total_posts": 1,
        "total_engagement": 1_000,
        "cost_per_engagement": 1.0,
        "total_likes": 700,
        "total_comments": 150,
        "total_shares": 150,
    }


def test_cost_per_engagement_without_engagement_is_zero(c):
    assert c.calculate_cost_per_engagement() == 0.0


def test_generate_report_text(c, alice):
    c.add_influencer(alice)
    c.add_content_url(alice, "https://example.com/a")
    c.update_engagement_metrics(alice, 80, 15, 5)

    expected = (
        "Performance Report for Campaign: Launch\n"
        "Status: Draft\n"
        "Duration: 2024-01-01 to 2024-02-01\n"
        "Budget: $1000.00\n"
        "\n"
        "Overall Metrics:\n"
        "- Total Influencers: 1\n"
        "- Total Posts: 1\n"
        "- Total Engagement: 100\n"
        "- Cost Per Engagement: $10.00\n"
        "- Total Likes: 80\n"
        "- Total Comments: 15\n"
        "- Total Shares: 5\n"
        "\n"
        "Influencer Performance:\n"
        "- alice:\n"
        "  * Posts: 1\n"
        "  * Likes: 80\n"
        "  * Comments: 15\n"
        "  * Shares: 5\n"
        "  * Total Engagement: 100\n"
    )
    assert c.generate_report() == expected


def test_equality_is_by_id():
    a = Campaign("one", campaign_id="abc")
    b = Campaign("two", campaign_id="abc")
    assert a == b
    assert len({a, b}) == 1
