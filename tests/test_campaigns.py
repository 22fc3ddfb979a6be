"""
API tests for campaigns, applications and the brand's decisions on them.
"""

from database.models import CampaignParticipant

CAMPAIGNS_URL = "/api/v1/campaigns"


# ============================================================================
# CREATE
# ============================================================================

def test_brand_creates_draft_campaign(client, brand, make_campaign):
    campaign = make_campaign(brand, activate=False)

    assert campaign["status"] == "DRAFT"
    assert campaign["brandId"] == brand["id"]
    assert campaign["budget"] == 5000
    assert campaign["applicationsCount"] == 0


def test_influencer_cannot_create_campaign(client, influencer):
    response = client.post(CAMPAIGNS_URL, json={
        "title": "Nope",
        "description": "Influencers do not run campaigns",
        "budget": 100,
        "category": "Tech",
        "startDate": "2025-01-05",
        "endDate": "2025-01-10",
    }, headers=influencer["headers"])

    assert response.status_code == 403
    assert response.json()["success"] is False


def test_end_date_must_follow_start_date(client, brand):
    payload = {
        "title": "Dates",
        "description": "Date ordering",
        "budget": 1000,
        "category": "Food",
        "startDate": "2025-01-10",
        "endDate": "2025-01-05",
    }

    rejected = client.post(CAMPAIGNS_URL, json=payload, headers=brand["headers"])
    assert rejected.status_code == 400
    assert rejected.json()["error"] == "INVALID_DATE_RANGE"

    payload["startDate"], payload["endDate"] = "2025-01-05", "2025-01-10"
    accepted = client.post(CAMPAIGNS_URL, json=payload, headers=brand["headers"])
    assert accepted.status_code == 201


def test_create_rejects_unknown_fields(client, brand):
    response = client.post(CAMPAIGNS_URL, json={
        "title": "Extra",
        "description": "Unknown field",
        "budget": 1000,
        "category": "Food",
        "startDate": "2025-01-05",
        "endDate": "2025-01-10",
        "brandId": "someone-else",
    }, headers=brand["headers"])

    assert response.status_code == 400
    assert "brandId" in response.json()["errors"]


def test_create_requires_token(client, db):
    response = client.post(CAMPAIGNS_URL, json={})
    assert response.status_code == 401


# ============================================================================
# LIST & GET
# ============================================================================

def test_influencer_lists_only_active_campaigns(client, brand, influencer, make_campaign):
    active = make_campaign(brand, title="Active one")
    make_campaign(brand, activate=False, title="Draft one")

    response = client.get(CAMPAIGNS_URL, headers=influencer["headers"])

    assert response.status_code == 200
    data = response.json()["data"]
    assert [c["id"] for c in data["campaigns"]] == [active["id"]]
    assert data["pagination"] == {"page": 1, "limit": 10, "total": 1, "pages": 1}


def test_brand_lists_only_own_campaigns(client, register, make_campaign):
    first, second = register("BRAND"), register("BRAND")
    mine = make_campaign(first, activate=False)
    make_campaign(second)

    response = client.get(CAMPAIGNS_URL, headers=first["headers"])

    campaigns = response.json()["data"]["campaigns"]
    assert [c["id"] for c in campaigns] == [mine["id"]]
    assert campaigns[0]["status"] == "DRAFT"


def test_list_filters_and_pagination(client, brand, influencer, make_campaign):
    make_campaign(brand, title="Winter coats", category="Fashion", budget=200)
    make_campaign(brand, title="Gadget review", category="Tech", budget=9000)
    make_campaign(brand, title="Phone unboxing", category="Tech", budget=3000)

    def titles(**params):
        response = client.get(CAMPAIGNS_URL, params=params, headers=influencer["headers"])
        assert response.status_code == 200
        return sorted(c["title"] for c in response.json()["data"]["campaigns"])

    assert titles(category="tech") == ["Gadget review", "Phone unboxing"]
    assert titles(search="COATS") == ["Winter coats"]
    assert titles(minBudget=1000, maxBudget=5000) == ["Phone unboxing"]

    page = client.get(CAMPAIGNS_URL, params={"limit": 2, "page": 2}, headers=influencer["headers"]).json()["data"]
    assert len(page["campaigns"]) == 1
    assert page["pagination"] == {"page": 2, "limit": 2, "total": 3, "pages": 2}


def test_list_search_treats_wildcards_literally(client, brand, influencer, make_campaign):
    make_campaign(brand, title="100% cotton")
    make_campaign(brand, title="Cotton blend")

    response = client.get(CAMPAIGNS_URL, params={"search": "%"}, headers=influencer["headers"])

    assert [c["title"] for c in response.json()["data"]["campaigns"]] == ["100% cotton"]


def test_draft_campaign_hidden_from_influencer(client, brand, influencer, make_campaign):
    draft = make_campaign(brand, activate=False)

    response = client.get(f"{CAMPAIGNS_URL}/{draft['id']}", headers=influencer["headers"])

    assert response.status_code == 404
    assert response.json()["error"] == "CAMPAIGN_NOT_FOUND"


def test_owner_gets_campaign_detail(client, brand, make_campaign):
    draft = make_campaign(brand, activate=False)

    response = client.get(f"{CAMPAIGNS_URL}/{draft['id']}", headers=brand["headers"])

    campaign = response.json()["data"]["campaign"]
    assert response.status_code == 200
    assert campaign["isOwner"] is True
    assert campaign["brandEmail"] == brand["email"]
    assert campaign["userApplication"] is None


def test_applicant_still_sees_paused_campaign(client, brand, influencer, make_campaign):
    campaign = make_campaign(brand)
    client.post(f"{CAMPAIGNS_URL}/{campaign['id']}/apply", json={"proposedRate": 300}, headers=influencer["headers"])
    client.put(f"{CAMPAIGNS_URL}/{campaign['id']}", json={"status": "PAUSED"}, headers=brand["headers"])

    detail = client.get(f"{CAMPAIGNS_URL}/{campaign['id']}", headers=influencer["headers"])
    listing = client.get(CAMPAIGNS_URL, headers=influencer["headers"])

    assert detail.status_code == 200
    assert detail.json()["data"]["campaign"]["userApplication"]["status"] == "INVITED"
    assert listing.json()["data"]["campaigns"] == []


def test_get_missing_campaign(client, brand):
    response = client.get(f"{CAMPAIGNS_URL}/does-not-exist", headers=brand["headers"])
    assert response.status_code == 404


# ============================================================================
# UPDATE & DELETE
# ============================================================================

def test_only_owner_updates(client, register, make_campaign):
    owner, other = register("BRAND"), register("BRAND")
    campaign = make_campaign(owner)

    response = client.put(f"{CAMPAIGNS_URL}/{campaign['id']}", json={"title": "Hijacked"}, headers=other["headers"])

    assert response.status_code == 403


def test_update_changes_fields(client, brand, make_campaign):
    campaign = make_campaign(brand, activate=False)

    response = client.put(
        f"{CAMPAIGNS_URL}/{campaign['id']}",
        json={"title": "Renamed", "targetAudience": {"age": "18-24"}},
        headers=brand["headers"],
    )

    updated = response.json()["data"]["campaign"]
    assert response.status_code == 200
    assert updated["title"] == "Renamed"
    assert updated["targetAudience"] == {"age": "18-24"}
    assert updated["status"] == "DRAFT"


def test_update_rejects_budget_and_empty_patch(client, brand, make_campaign):
    campaign = make_campaign(brand, activate=False)
    url = f"{CAMPAIGNS_URL}/{campaign['id']}"

    budget = client.put(url, json={"budget": 1}, headers=brand["headers"])
    empty = client.put(url, json={}, headers=brand["headers"])

    assert budget.status_code == 400
    assert empty.status_code == 400
    assert empty.json()["error"] == "NO_FIELDS"


def test_update_clears_optional_fields_but_not_required_ones(client, brand, make_campaign):
    campaign = make_campaign(brand, activate=False)
    url = f"{CAMPAIGNS_URL}/{campaign['id']}"
    client.put(url, json={"requirements": "Two posts", "targetAudience": {"age": "18-24"}}, headers=brand["headers"])

    cleared = client.put(url, json={"requirements": None, "targetAudience": None}, headers=brand["headers"])
    required = client.put(url, json={"title": None, "startDate": None}, headers=brand["headers"])

    assert cleared.status_code == 200
    assert cleared.json()["data"]["campaign"]["requirements"] is None
    assert cleared.json()["data"]["campaign"]["targetAudience"] is None
    assert required.status_code == 400
    assert set(required.json()["errors"]) == {"title", "startDate"}


def test_update_single_date_checked_against_stored_one(client, brand, make_campaign):
    campaign = make_campaign(brand, activate=False, startDate="2025-03-01", endDate="2025-03-31")

    response = client.put(
        f"{CAMPAIGNS_URL}/{campaign['id']}",
        json={"endDate": "2025-02-01"},
        headers=brand["headers"],
    )

    assert response.status_code == 400
    assert response.json()["error"] == "INVALID_DATE_RANGE"


def test_delete_blocked_until_accepted_participants_released(client, db, brand, influencer, make_campaign):
    campaign = make_campaign(brand)
    url = f"{CAMPAIGNS_URL}/{campaign['id']}"
    application = client.post(f"{url}/apply", json={"proposedRate": 250}, headers=influencer["headers"])
    application_id = application.json()["data"]["application"]["id"]
    client.put(f"{url}/applications/{application_id}", json={"action": "ACCEPT"}, headers=brand["headers"])

    blocked = client.delete(url, headers=brand["headers"])
    assert blocked.status_code == 400
    assert blocked.json()["error"] == "CAMPAIGN_HAS_PARTICIPANTS"

    rejected = client.put(f"{url}/applications/{application_id}", json={"action": "REJECT"}, headers=brand["headers"])
    assert rejected.status_code == 200

    deleted = client.delete(url, headers=brand["headers"])
    assert deleted.status_code == 200
    assert client.get(url, headers=brand["headers"]).status_code == 404

    db.expire_all()
    assert db.query(CampaignParticipant).filter(CampaignParticipant.campaign_id == campaign["id"]).count() == 0


def test_delete_by_non_owner_forbidden(client, register, make_campaign):
    owner, other = register("BRAND"), register("BRAND")
    campaign = make_campaign(owner, activate=False)

    response = client.delete(f"{CAMPAIGNS_URL}/{campaign['id']}", headers=other["headers"])

    assert response.status_code == 403


def test_delete_missing_campaign(client, brand):
    response = client.delete(f"{CAMPAIGNS_URL}/does-not-exist", headers=brand["headers"])
    assert response.status_code == 404


# ============================================================================
# APPLICATIONS
# ============================================================================

def test_influencer_applies_once(client, brand, influencer, make_campaign):
    campaign = make_campaign(brand)
    url = f"{CAMPAIGNS_URL}/{campaign['id']}/apply"

    first = client.post(url, json={"proposedRate": 400}, headers=influencer["headers"])
    second = client.post(url, json={"proposedRate": 450}, headers=influencer["headers"])

    assert first.status_code == 201
    application = first.json()["data"]["application"]
    assert application["status"] == "INVITED"
    assert application["proposedRate"] == 400
    assert second.status_code == 409
    assert second.json()["error"] == "ALREADY_APPLIED"


def test_apply_without_body(client, brand, influencer, make_campaign):
    campaign = make_campaign(brand)

    response = client.post(f"{CAMPAIGNS_URL}/{campaign['id']}/apply", headers=influencer["headers"])

    assert response.status_code == 201
    assert response.json()["data"]["application"]["proposedRate"] is None


def test_brand_cannot_apply(client, register, make_campaign):
    owner, other = register("BRAND"), register("BRAND")
    campaign = make_campaign(owner)

    response = client.post(f"{CAMPAIGNS_URL}/{campaign['id']}/apply", headers=other["headers"])

    assert response.status_code == 403


def test_cannot_apply_to_draft(client, brand, influencer, make_campaign):
    campaign = make_campaign(brand, activate=False)

    response = client.post(f"{CAMPAIGNS_URL}/{campaign['id']}/apply", headers=influencer["headers"])

    assert response.status_code == 400
    assert response.json()["error"] == "CAMPAIGN_NOT_ACTIVE"


def test_cannot_apply_to_expired_campaign(client, brand, influencer, make_campaign):
    campaign = make_campaign(brand, startDate="2020-01-01", endDate="2020-01-31")

    response = client.post(f"{CAMPAIGNS_URL}/{campaign['id']}/apply", headers=influencer["headers"])

    assert response.status_code == 400
    assert response.json()["error"] == "CAMPAIGN_EXPIRED"


def test_apply_to_missing_campaign(client, influencer):
    response = client.post(f"{CAMPAIGNS_URL}/does-not-exist/apply", headers=influencer["headers"])
    assert response.status_code == 404


def test_owner_lists_applications_with_influencer_summary(client, brand, influencer, register, make_campaign):
    campaign = make_campaign(brand)
    second = register("INFLUENCER")
    client.post(f"{CAMPAIGNS_URL}/{campaign['id']}/apply", headers=influencer["headers"])
    client.post(f"{CAMPAIGNS_URL}/{campaign['id']}/apply", headers=second["headers"])

    response = client.get(f"{CAMPAIGNS_URL}/{campaign['id']}/applications", headers=brand["headers"])

    assert response.status_code == 200
    applications = response.json()["data"]["applications"]
    assert {a["influencerId"] for a in applications} == {influencer["id"], second["id"]}
    handles = {a["influencer"]["instagramHandle"] for a in applications}
    assert "test_creator" in handles


def test_applications_hidden_from_other_brands(client, register, make_campaign):
    owner, other = register("BRAND"), register("BRAND")
    campaign = make_campaign(owner)

    response = client.get(f"{CAMPAIGNS_URL}/{campaign['id']}/applications", headers=other["headers"])

    assert response.status_code == 403


def test_influencer_cannot_review_applications(client, brand, influencer, make_campaign):
    campaign = make_campaign(brand)
    url = f"{CAMPAIGNS_URL}/{campaign['id']}/applications"

    listing = client.get(url, headers=influencer["headers"])
    decision = client.put(f"{url}/some-application", json={"action": "ACCEPT"}, headers=influencer["headers"])

    assert listing.status_code == 403
    assert decision.status_code == 403


def test_accept_uses_override_rate_and_cannot_repeat(client, brand, influencer, make_campaign):
    campaign = make_campaign(brand)
    url = f"{CAMPAIGNS_URL}/{campaign['id']}"
    applied = client.post(f"{url}/apply", json={"proposedRate": 500}, headers=influencer["headers"])
    application_id = applied.json()["data"]["application"]["id"]

    accepted = client.put(
        f"{url}/applications/{application_id}",
        json={"action": "ACCEPT", "proposedRate": 650},
        headers=brand["headers"],
    )
    assert accepted.status_code == 200
    application = accepted.json()["data"]["application"]
    assert application["status"] == "ACCEPTED"
    assert application["agreedRate"] == 650
    assert application["acceptedAt"] is not None

    again = client.put(f"{url}/applications/{application_id}", json={"action": "ACCEPT"}, headers=brand["headers"])
    assert again.status_code == 400
    assert again.json()["error"] == "APPLICATION_ALREADY_DECIDED"

    detail = client.get(url, headers=brand["headers"]).json()["data"]["campaign"]
    assert detail["acceptedCount"] == 1
    assert detail["applicationsCount"] == 1


def test_accept_defaults_to_proposed_rate(client, brand, influencer, make_campaign):
    campaign = make_campaign(brand)
    url = f"{CAMPAIGNS_URL}/{campaign['id']}"
    applied = client.post(f"{url}/apply", json={"proposedRate": 500}, headers=influencer["headers"])
    application_id = applied.json()["data"]["application"]["id"]

    accepted = client.put(f"{url}/applications/{application_id}", json={"action": "ACCEPT"}, headers=brand["headers"])

    assert accepted.json()["data"]["application"]["agreedRate"] == 500


def test_rejection_is_final(client, brand, influencer, make_campaign):
    campaign = make_campaign(brand)
    url = f"{CAMPAIGNS_URL}/{campaign['id']}"
    applied = client.post(f"{url}/apply", headers=influencer["headers"])
    application_id = applied.json()["data"]["application"]["id"]

    client.put(f"{url}/applications/{application_id}", json={"action": "REJECT"}, headers=brand["headers"])
    response = client.put(f"{url}/applications/{application_id}", json={"action": "ACCEPT"}, headers=brand["headers"])

    assert response.status_code == 400
    assert response.json()["error"] == "APPLICATION_ALREADY_DECIDED"


def test_decision_requires_matching_campaign(client, brand, influencer, make_campaign):
    first = make_campaign(brand, title="First")
    second = make_campaign(brand, title="Second")
    applied = client.post(f"{CAMPAIGNS_URL}/{first['id']}/apply", headers=influencer["headers"])
    application_id = applied.json()["data"]["application"]["id"]

    response = client.put(
        f"{CAMPAIGNS_URL}/{second['id']}/applications/{application_id}",
        json={"action": "ACCEPT"},
        headers=brand["headers"],
    )

    assert response.status_code == 404
    assert response.json()["error"] == "APPLICATION_NOT_FOUND"


def test_decision_rejects_unknown_action(client, brand, influencer, make_campaign):
    campaign = make_campaign(brand)
    applied = client.post(f"{CAMPAIGNS_URL}/{campaign['id']}/apply", headers=influencer["headers"])
    application_id = applied.json()["data"]["application"]["id"]

    response = client.put(
        f"{CAMPAIGNS_URL}/{campaign['id']}/applications/{application_id}",
        json={"action": "MAYBE"},
        headers=brand["headers"],
    )

    assert response.status_code == 400
    assert "action" in response.json()["errors"]

