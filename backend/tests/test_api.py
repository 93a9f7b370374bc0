"""
Tests for the HTTP API. The app's context dependency is overridden with the
deterministic test context, so startup (demo data, worker thread) never runs.
"""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from auth import verify_password
from deps import get_ctx
from errors import DataProcessingError
from main import app


@pytest.fixture
def client(ctx):
    app.dependency_overrides[get_ctx] = lambda: ctx
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def seeded(client):
    client.post("/users/brands", json={
        "username": "fashionco", "email": "contact@fashionco.com", "password": "brand123",
        "company_name": "Fashion Co", "industry": "Fashion", "budget": 10_000,
    })
    client.post("/users/influencers", json={
        "username": "janesmith", "email": "jane@influencer.com", "password": "pass123",
        "niche": "Fashion", "rate": 500,
        "social_profiles": [{"platform": "Instagram", "handle": "jane_style", "followers": 50_000}],
    })
    r = client.post("/campaigns", json={
        "brand_username": "fashionco", "name": "Summer Collection", "budget": 5_000,
        "start_date": "2023-06-01", "end_date": "2023-07-30",
    })
    return r.json()["id"]


def test_health_echoes_request_id(client):
    r = client.get("/health", headers={"x-request-id": "abc-123"})
    assert r.status_code == 200
    assert r.json() == {"ok": True}
    assert r.headers["x-request-id"] == "abc-123"


def test_request_id_is_generated(client):
    assert client.get("/health").headers["x-request-id"]


def test_create_users_and_list_by_role(client, seeded):
    r = client.get("/users", params={"role": "Influencer"})
    assert r.status_code == 200
    assert [u["username"] for u in r.json()] == ["janesmith"]
    assert len(client.get("/users").json()) == 2


def test_influencer_payload(client, seeded):
    r = client.post("/users/influencers", json={
        "username": "techguru", "email": "tech@influencer.com", "password": "guru123",
        "niche": "Technology", "rate": 700, "content_categories": ["Reviews"],
    })
    assert r.status_code == 200
    body = r.json()
    assert body["role"] == "Influencer"
    assert body["total_followers"] == 0
    assert body["active_campaigns"] == []


def test_duplicate_username_is_rejected(client, seeded):
    r = client.post("/users/admins", json={
        "username": "janesmith", "email": "other@example.com", "password": "x",
    })
    assert r.status_code == 400
    assert r.json()["detail"] == "Username already taken"


def test_invalid_email_is_rejected(client):
    r = client.post("/users/admins", json={"username": "root", "email": "not-an-email", "password": "x"})
    assert r.status_code == 422


def test_profile_summary(client, seeded):
    r = client.get("/users/janesmith")
    assert r.status_code == 200
    assert "Niche: Fashion" in r.json()["summary"]
    assert client.get("/users/nobody").status_code == 404


def test_add_social_profile_and_engagement(client, seeded):
    r = client.post("/users/janesmith/social-profiles",
                    json={"platform": "TikTok", "handle": "janesmithofficial", "followers": 75_000})
    assert r.json()["total_followers"] == 125_000

    r = client.post("/users/janesmith/engagement",
                    json={"platform": "tiktok", "likes": 7_500, "comments": 0, "shares": 0})
    assert r.json() == {"platform": "TikTok", "engagement_rate": 10}

    r = client.post("/users/janesmith/engagement", json={"platform": "Twitch"})
    assert r.status_code == 404

    r = client.post("/users/fashionco/social-profiles", json={"platform": "X", "handle": "fc"})
    assert r.status_code == 400


def test_login(client, ctx, seeded):
    stored = ctx.users.get_user_by_username("janesmith").password
    assert stored != "pass123"
    assert verify_password("pass123", stored)

    r = client.post("/auth/login", json={"username": "janesmith", "password": "pass123"})
    assert r.status_code == 200
    assert r.json() == {"username": "janesmith", "role": "Influencer"}

    r = client.post("/auth/login", json={"username": "janesmith", "password": "nope"})
    assert r.status_code == 401
    assert r.json()["detail"] == "Invalid password"


def test_data_processing_error_maps_to_422(client, ctx, seeded):
    with patch.object(ctx.users, "search_influencers", side_effect=DataProcessingError("bad snapshot")):
        r = client.get("/users/influencers/search", params={"niche": "fashion"})
    assert r.status_code == 422
    assert r.json()["detail"] == "bad snapshot"


def test_campaign_crud(client, seeded):
    r = client.get(f"/campaigns/{seeded}")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "Draft"
    assert body["brand_username"] == "fashionco"

    assert client.get("/campaigns/nope").status_code == 404
    assert [c["id"] for c in client.get("/campaigns", params={"brand": "fashionco"}).json()] == [seeded]

    r = client.post("/campaigns", json={"brand_username": "janesmith", "name": "Bad"})
    assert r.status_code == 400


def test_lifecycle_actions(client, seeded):
    assert client.post(f"/campaigns/{seeded}/pause").json() == {
        "changed": False, "status": "Draft", "contract_id": None,
    }
    assert client.post(f"/campaigns/{seeded}/start").json()["status"] == "Active"
    assert client.get("/campaigns", params={"status": "Active"}).json()[0]["id"] == seeded
    assert client.post(f"/campaigns/{seeded}/explode").status_code == 400
    assert client.post(f"/campaigns/{seeded}/end").json() == {
        "changed": True, "status": "Completed", "contract_id": None,
    }
    assert client.post(f"/campaigns/{seeded}/end").json()["changed"] is False
    assert client.post(f"/campaigns/{seeded}/cancel").json()["changed"] is True
    assert client.post(f"/campaigns/{seeded}/cancel").json()["changed"] is False


def test_invite_accept_sign_pay(client, seeded):
    r = client.post(f"/campaigns/{seeded}/invite", json={"username": "janesmith"})
    assert r.json()["status"] == "Invited"
    assert client.get("/users/janesmith/notifications").json() == [
        "You've been invited to join the campaign: Summer Collection"
    ]

    r = client.post(f"/campaigns/{seeded}/accept", json={"username": "janesmith"})
    assert r.status_code == 200
    contract_id = r.json()["contract_id"]
    assert contract_id

    contract = client.get(f"/contracts/{contract_id}").json()
    assert contract["payment_amount"] == 500.0
    assert contract["status"] == "Draft"

    r = client.post(f"/contracts/{contract_id}/pay", json={"payment_method": "Credit Card"})
    assert r.status_code == 400

    assert client.post(f"/contracts/{contract_id}/sign").json()["status"] == "Active"
    r = client.post(f"/contracts/{contract_id}/pay", json={"payment_method": "Credit Card"})
    assert r.status_code == 200
    payment = r.json()
    assert payment["status"] == "Completed"
    assert payment["transaction_id"].startswith("TX-")

    r = client.post(f"/contracts/{contract_id}/pay", json={"payment_method": "Credit Card"})
    assert r.status_code == 400
    assert len(client.get(f"/contracts/{contract_id}/payments").json()) == 1

    receipt = client.get(f"/payments/{payment['id']}/receipt")
    assert receipt.text.startswith("PAYMENT RECEIPT")

    r = client.post(f"/payments/{payment['id']}/cancel", json={"reason": "oops"})
    assert r.json()["changed"] is False
    assert client.get(f"/contracts/{contract_id}/payments").json()[0]["id"] == payment["id"]

    doc = client.get(f"/contracts/{contract_id}/document")
    assert "Payment Amount: $500.00" in doc.text


def test_accept_without_invite_is_rejected(client, seeded):
    r = client.post(f"/campaigns/{seeded}/accept", json={"username": "janesmith"})
    assert r.status_code == 400


def test_content_engagement_and_report(client, seeded):
    client.post(f"/campaigns/{seeded}/place", json={"username": "janesmith"})
    client.post(f"/campaigns/{seeded}/content", json={"username": "janesmith", "url": "https://example.com/p/1"})
    client.put(f"/campaigns/{seeded}/engagement",
               json={"username": "janesmith", "likes": 400, "comments": 80, "shares": 20})

    m = client.get(f"/campaigns/{seeded}/metrics").json()
    assert m["total_posts"] == 1
    assert m["total_engagement"] == 500
    assert m["cost_per_engagement"] == 10.0

    report = client.get(f"/campaigns/{seeded}/report")
    assert report.headers["content-type"].startswith("text/plain")
    assert "- janesmith:" in report.text

    r = client.put(f"/campaigns/{seeded}/status", json={"username": "janesmith", "status": "Delivered"})
    assert r.json() == {"changed": True, "status": "Delivered", "contract_id": None}

    r = client.post(f"/campaigns/{seeded}/remove", json={"username": "janesmith"})
    assert r.json()["status"] == "Not Invited"


def test_recommendations(client, seeded):
    r = client.get(f"/campaigns/{seeded}/recommendations")
    assert r.status_code == 200
    [match] = r.json()
    assert match["username"] == "janesmith"
    assert match["score"] == 170

    invited = client.post(f"/campaigns/{seeded}/invite-recommended", params={"count": 5}).json()
    assert invited == ["janesmith"]
    assert client.get(f"/campaigns/{seeded}/recommendations").json() == []


def test_recommended_campaigns_for_influencer(client, seeded):
    [match] = client.get("/users/janesmith/recommended-campaigns").json()
    assert match["campaign_id"] == seeded
    assert match["score"] == 170


def test_budget_and_platform_recommendations(client, seeded):
    r = client.post("/campaigns/budget-recommendation",
                    json={"brand_username": "fashionco", "campaign_type": "awareness", "target_count": 2})
    assert r.json() == {"brand_username": "fashionco", "recommended_budget": 1_800.0}

    r = client.post("/campaigns/platform-recommendation",
                    json={"brand_username": "fashionco", "audience": "young adults"})
    assert r.json()["platforms"] == ["Instagram", "TikTok", "Pinterest", "Snapchat"]


def test_unknown_ids_are_404(client):
    assert client.get("/contracts/nope").status_code == 404
    assert client.get("/payments/nope").status_code == 404
    assert client.post("/campaigns/nope/start").status_code == 404


def test_analytics_routes(client, seeded):
    users = client.get("/analytics/users").json()
    assert users["total_users"] == 2

    assert client.get("/analytics/campaigns").json()["total_campaigns"] == 1
    assert client.get(f"/analytics/campaigns/{seeded}").json()["name"] == "Summer Collection"
    assert client.get("/analytics/financials").json()["total_brand_budgets"] == 10_000
    assert client.get("/analytics/platform-value").json() == {"platform_value": 2_500.0}

    brand = client.get("/analytics/brands/fashionco").json()
    assert brand["remaining_budget"] == 5_000
    assert client.get("/analytics/influencers/janesmith").json()["total_followers"] == 50_000
    assert len(client.get("/analytics/brands/fashionco/recommendations").json()) == 3


def test_analytics_checks_the_role(client, seeded):
    assert client.get("/analytics/brands/janesmith").status_code == 400
    assert client.get("/analytics/advertisers/nobody").status_code == 404
    assert client.get("/analytics/campaigns/nope").status_code == 404
