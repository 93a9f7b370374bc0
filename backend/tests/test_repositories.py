"""
Tests for the in-memory user, campaign and contract stores.
"""

import pytest

from campaign import Campaign, CampaignStatus
from contracts import Contract, Payment
from errors import DataProcessingError
from models import Admin, Advertiser, Brand, Influencer, Role
from repositories import CampaignService, ContractService, UserService


def _inf(username, niche=None, rate=0.0, followers=0):
    inf = Influencer(username=username, email=f"{username}@example.com", niche=niche, rate=rate)
    if followers:
        inf.add_social_media("YouTube", username, followers)
    return inf


@pytest.fixture
def users():
    return UserService([
        _inf("jane", "Fashion", 500.0, 125_000),
        _inf("guru", "Technology", 700.0, 235_000),
        _inf("chef", "Food & Cooking", 300.0, 8_000),
        Brand(username="fashionco", email="c@fashionco.com", industry="Clothing", budget=10_000.0),
        Brand(username="techcorp", email="m@techcorp.com", industry="Technology", budget=25_000.0),
        Advertiser(username="agency"),
        Admin(username="admin"),
    ])


def test_add_user_rejects_duplicates_and_none(users):
    assert users.add_user(_inf("jane")) is False
    assert users.add_user(None) is False
    assert users.user_count == 7


def test_lookup_update_delete(users):
    assert users.get_user_by_username("guru").niche == "Technology"
    assert users.get_user_by_username("nobody") is None

    assert users.update_user("guru", email="new@example.com") is True
    assert users.find_users_by_email("new@example.com")[0].username == "guru"
    assert users.update_user("nobody", email="x@example.com") is False

    assert users.delete_user("guru") is True
    assert users.delete_user("guru") is False
    assert not users.username_exists("guru")


def test_role_queries(users):
    assert [u.username for u in users.get_all_influencers()] == ["jane", "guru", "chef"]
    assert [u.username for u in users.get_all_brands()] == ["fashionco", "techcorp"]
    assert [u.username for u in users.get_all_advertisers()] == ["agency"]
    assert [u.username for u in users.get_users_by_role(Role.ADMIN)] == ["admin"]


def test_search_influencers_combines_filters(users):
    assert [i.username for i in users.search_influencers(niche="food")] == ["chef"]
    assert [i.username for i in users.search_influencers(min_followers=100_000)] == ["jane", "guru"]
    assert [i.username for i in users.search_influencers(min_followers=100_000, max_rate=600.0)] == ["jane"]
    assert len(users.search_influencers()) == 3


def test_niche_and_industry_lookups(users):
    assert [i.username for i in users.get_influencers_by_niche("TECH")] == ["guru"]
    assert users.get_influencers_by_niche(None) == []
    assert [b.username for b in users.get_brands_by_industry("cloth")] == ["fashionco"]


def test_top_lists(users):
    assert [i.username for i in users.get_top_influencers(2)] == ["guru", "jane"]
    assert [b.username for b in users.get_top_brands(1)] == ["techcorp"]


def test_email_in_use(users):
    assert users.email_in_use("c@fashionco.com")
    assert not users.email_in_use("nobody@example.com")


def test_set_all_users_validates_before_replacing(users):
    with pytest.raises(DataProcessingError, match="User list cannot be null"):
        users.set_all_users(None)

    with pytest.raises(DataProcessingError, match="User with empty username found"):
        users.set_all_users([_inf("ok"), _inf("")])
    assert users.user_count == 7

    users.set_all_users([_inf("only")])
    assert [u.username for u in users.get_all_users()] == ["only"]


@pytest.fixture
def campaigns():
    a = Campaign("Summer Collection", brand_username="fashionco", budget=5_000.0,
                 start_date="2023-06-01", end_date="2023-07-30", campaign_id="c1")
    b = Campaign("Gadget Launch", brand_username="techcorp", budget=8_000.0,
                 start_date="2023-07-15", end_date="2023-08-15", campaign_id="c2")
    c = Campaign("Winter Collection", brand_username="fashionco", budget=12_000.0,
                 start_date="2023-11-01", end_date="2024-01-15", campaign_id="c3")
    return CampaignService([a, b, c])


def test_campaign_crud(campaigns):
    assert campaigns.campaign_count == 3
    assert campaigns.add_campaign(Campaign("dup", campaign_id="c1")) is False
    assert campaigns.get_campaign_by_id("c2").name == "Gadget Launch"

    replacement = Campaign("Gadget Launch v2", campaign_id="c2")
    assert campaigns.update_campaign(replacement) is True
    assert campaigns.get_campaign_by_id("c2").name == "Gadget Launch v2"
    assert campaigns.update_campaign(Campaign("ghost", campaign_id="zz")) is False

    assert campaigns.delete_campaign("c2") is True
    assert campaigns.get_campaign_by_id("c2") is None


def test_campaigns_for_brand_and_influencer(campaigns):
    brand = Brand(username="fashionco")
    assert [c.id for c in campaigns.get_campaigns_for_brand(brand)] == ["c1", "c3"]
    assert campaigns.get_campaigns_for_brand(None) == []

    jane = _inf("jane")
    campaigns.get_campaign_by_id("c1").add_influencer(jane)
    campaigns.get_campaign_by_id("c3").invite_influencer(jane)
    assert [c.id for c in campaigns.get_campaigns_for_influencer(jane)] == ["c1"]
    assert [c.id for c in campaigns.get_campaign_offers_for_influencer(jane)] == ["c3"]


def test_campaigns_by_status_accepts_enum_or_text(campaigns):
    campaigns.get_campaign_by_id("c1").start()
    campaigns.get_campaign_by_id("c2").end()
    assert [c.id for c in campaigns.get_campaigns_by_status("active")] == ["c1"]
    assert [c.id for c in campaigns.get_active_campaigns()] == ["c1"]
    assert [c.id for c in campaigns.get_campaigns_by_status(CampaignStatus.COMPLETED)] == ["c2"]
    assert [c.id for c in campaigns.get_completed_campaigns()] == ["c2"]
    assert campaigns.get_campaigns_by_status("") == []


def test_campaign_range_and_name_queries(campaigns):
    assert [c.id for c in campaigns.get_campaigns_in_date_range("2023-06-01", "2023-08-31")] == ["c1", "c2"]
    assert campaigns.get_campaigns_in_date_range(None, "2023-08-31") == []
    assert [c.id for c in campaigns.get_campaigns_by_name("collection")] == ["c1", "c3"]
    assert [c.id for c in campaigns.get_campaigns_by_budget_range(5_000, 8_000)] == ["c1", "c2"]


def test_engagement_queries(campaigns):
    jane, guru = _inf("jane"), _inf("guru")
    c1, c2 = campaigns.get_campaign_by_id("c1"), campaigns.get_campaign_by_id("c2")
    c1.add_influencer(jane)
    c1.update_engagement_metrics(jane, 500, 50, 10)
    c2.add_influencer(guru)
    c2.update_engagement_metrics(guru, 1_000, 100, 40)

    assert [c.id for c in campaigns.get_campaigns_with_high_engagement(1_000)] == ["c2"]
    assert [c.id for c in campaigns.get_top_performing_campaigns(2)] == ["c2", "c1"]


def test_set_all_campaigns_and_clear(campaigns):
    with pytest.raises(DataProcessingError, match="Campaign list cannot be null"):
        campaigns.set_all_campaigns(None)

    with pytest.raises(DataProcessingError, match="Campaign with empty ID found"):
        campaigns.set_all_campaigns([Campaign("x"), None])
    assert campaigns.campaign_count == 3

    campaigns.set_all_campaigns([Campaign("fresh", campaign_id="n1")])
    assert [c.id for c in campaigns.get_all_campaigns()] == ["n1"]

    campaigns.clear_all_campaigns()
    assert campaigns.campaign_count == 0


def test_contract_store():
    brand = Brand(username="b")
    inf = _inf("i", rate=100.0)
    c1, c2 = Campaign("one", brand_username="b"), Campaign("two", brand_username="b")
    k1, k2 = Contract(c1, inf, brand), Contract(c2, inf, brand)

    store = ContractService()
    assert store.add_contract(k1) is True
    assert store.add_contract(k1) is False
    store.add_contract(k2)

    assert store.get_contract(k1.id) is k1
    assert store.get_contracts_for_campaign(c2) == [k2]
    assert store.get_contracts_for_influencer(inf) == [k1, k2]
    assert store.find_contract(c1, inf) is k1
    assert store.find_contract(c1, _inf("other")) is None

    p = Payment(k1)
    assert store.add_payment(p) is True
    assert store.get_payment(p.id) is p
    assert store.get_payments_for_contract(k1) == [p]
    assert store.get_payments_for_contract(k2) == []
