"""
Tests for the HTTP API (`api/main.py` and `api/routers/`).

Uses FastAPI's TestClient; no external services are involved.
"""

from __future__ import annotations

import csv
from io import StringIO

import pytest
from fastapi.testclient import TestClient

from api.main import app


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


LEAD_RECORDS = [
    {"Email": "a@b.com", "Score": "85", "Intent": "hot", "Budget Match": "Yes", "Source": "Facebook"},
    {"lead_name": "Bola", "score": "90", "Status": "Closed Won", "Platform": "Rightmove", "Budget Match": "No"},
    {"Name": "Chidi", "Score": "n/a", "Intent": "low"},
]


def test_health(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_list_classifications(client: TestClient) -> None:
    response = client.get("/api/v1/classifications")

    assert response.status_code == 200
    body = response.json()
    assert [item["tier"] for item in body] == ["hot", "star", "lightning", "verified", "warning", "cold"]
    assert body[0]["sla"] == "Contact within 1 hour"


def test_normalize_leads(client: TestClient) -> None:
    response = client.post("/api/v1/leads/normalize", json={"records": LEAD_RECORDS})

    assert response.status_code == 200
    body = response.json()

    first, second, third = body["leads"]
    assert first["intent_score"] == 85
    assert first["quality_score"] == 70
    assert first["tier"] == "lightning"
    assert first["bucket"] == "quality"
    assert first["source"] == "meta_campaign"

    assert second["name"] == "Bola"
    assert second["tier"] == "hot"
    assert second["status"] == "closed"
    assert second["source"] == "rightmove"

    assert third["name"] == "Chidi"
    assert third["intent_score"] == 35
    assert third["quality_score"] == 50
    assert third["tier"] == "cold"

    stats = body["stats"]
    assert stats["total"] == 3
    assert stats["source_filter"] == "all"
    assert sum(bucket["count"] for bucket in stats["buckets"]) == 3
    assert stats["funnel"][0]["count"] == 3
    assert stats["funnel"][4]["count"] == 1


def test_lead_stats_with_source_filter(client: TestClient) -> None:
    response = client.post(
        "/api/v1/leads/stats",
        params={"source": "rightmove"},
        json={"records": LEAD_RECORDS},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 1
    assert body["source_filter"] == "rightmove"
    assert body["tier_counts"]["hot"] == 1


def test_lead_stats_invalid_source(client: TestClient) -> None:
    response = client.post(
        "/api/v1/leads/stats",
        params={"source": "tiktok"},
        json={"records": LEAD_RECORDS},
    )

    assert response.status_code == 400
    assert "Invalid source filter" in response.json()["detail"]


def test_normalize_rejects_non_list_records(client: TestClient) -> None:
    response = client.post("/api/v1/leads/normalize", json={"records": "nope"})
    assert response.status_code == 422


def test_export_leads_csv(client: TestClient) -> None:
    response = client.post("/api/v1/leads/export", json={"records": LEAD_RECORDS})

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "leads_export.csv" in response.headers["content-disposition"]

    rows = list(csv.reader(StringIO(response.text)))
    assert rows[0][0] == "Date Added"
    assert len(rows) == 4
    assert rows[2][1] == "Bola"


CAMPAIGN_RECORDS = [
    {"Campaign Name": "LSQ Nine Elms – Spring Push", "Spend": "900", "Leads": "20", "Platform": "Facebook"},
    {"Campaign Name": "LSQ Croydon Retarget", "Spend": "300", "Leads": "10", "Platform": "Instagram"},
    {"Campaign Name": "LSQ Croydon Retarget", "Spend": "999", "Leads": "1", "Platform": "Audience Network"},
    {"Campaign Name": "Internal Test", "Spend": "10", "Leads": "1", "Platform": "Facebook"},
]


def test_campaign_groups(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("EXCLUDED_DEVELOPMENTS", raising=False)
    monkeypatch.delenv("EXCLUDED_PLATFORMS", raising=False)

    response = client.post("/api/v1/campaigns/groups", json={"records": CAMPAIGN_RECORDS})

    assert response.status_code == 200
    body = response.json()
    assert [group["name"] for group in body["groups"]] == ["LSQ Nine Elms", "LSQ Croydon"]
    assert body["groups"][0]["avg_cpl"] == 45.0
    assert body["groups"][0]["rating"] == "acceptable"
    assert body["groups"][1]["total_spend"] == 300.0
    assert body["groups"][1]["rating"] == "good"
    assert body["summary"]["total_spend"] == 1200.0
    assert body["summary"]["total_leads"] == 30


def test_campaign_groups_respects_configured_exclusions(
    client: TestClient, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("EXCLUDED_DEVELOPMENTS", "LSQ Nine Elms")
    monkeypatch.setenv("EXCLUDED_PLATFORMS", "")

    response = client.post("/api/v1/campaigns/groups", json={"records": CAMPAIGN_RECORDS})

    body = response.json()
    assert [group["name"] for group in body["groups"]] == ["LSQ Croydon", "Internal Test"]
    assert body["groups"][0]["total_spend"] == 1299.0


def test_export_campaigns_csv(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("EXCLUDED_DEVELOPMENTS", raising=False)
    monkeypatch.delenv("EXCLUDED_PLATFORMS", raising=False)

    response = client.post("/api/v1/campaigns/export", json={"records": CAMPAIGN_RECORDS})

    assert response.status_code == 200
    rows = list(csv.reader(StringIO(response.text)))
    assert rows[0] == ["Development", "Campaign", "Platform", "Spend", "Leads", "CPL", "Status", "Start Date"]
    assert rows[1][:2] == ["LSQ Nine Elms", "LSQ Nine Elms – Spring Push"]
    assert len(rows) == 3
