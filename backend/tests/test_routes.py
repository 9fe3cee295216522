"""API routes — request/response shapes and error mapping.

The generation service is swapped for one backed by a scripted client via
dependency overrides; the lifespan (and real provider) never runs.
"""

import pytest
from fastapi.testclient import TestClient

from trenddit.main import create_app
from trenddit.services.dependencies import get_generation_service
from trenddit.services.errors import ErrorKind, GenerationError

from tests.fakes import api_key_error, make_service, rate_limit_error
from tests.test_generators import ANALYSIS, _need, _solution

COMPANY = {
    "name": "Acme Corp",
    "industry": "finance",
    "size": "small-medium",
    "techMaturity": "medium",
    "currentChallenges": ["Manual reconciliation"],
    "primaryGoals": ["Faster close"],
}
TREND = {
    "id": "trend_7",
    "title": "AI copilots for finance",
    "summary": "Finance teams adopt copilots for reconciliation.",
    "category": "economy",
    "impact_score": 8,
}


@pytest.fixture
def make_client():
    def _factory(responses):
        service, fake, _ = make_service(responses)
        app = create_app()
        app.dependency_overrides[get_generation_service] = lambda: service
        return TestClient(app), fake, service

    return _factory


def test_health():
    client = TestClient(create_app())
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"


def test_generation_health_reports_settings_without_secrets(make_client):
    client, _, _ = make_client([ANALYSIS])

    resp = client.get("/generation/health")

    assert resp.status_code == 200
    data = resp.json()
    assert data["settings"]["model"] == "test-model"
    assert "api_key" not in data["settings"]
    assert data["stats"] == {"tiers_served": {}, "transitions": {}, "failures": {}}


def test_analyze_trend(make_client):
    client, _, _ = make_client([ANALYSIS])

    resp = client.post("/trends/analyze", json={"title": "Agentic AI", "summary": "Agents everywhere."})

    assert resp.status_code == 200
    body = resp.json()
    assert body["analysis"]["impactScore"] == 10
    assert body["analysis"]["riskFactors"]
    assert body["degraded"] is False


@pytest.mark.parametrize(
    "error, status_code",
    [
        (api_key_error(), 503),
        (rate_limit_error(), 429),
        (GenerationError(ErrorKind.NETWORK_ERROR, "down"), 502),
        (GenerationError(ErrorKind.INVALID_REQUEST, "bad"), 400),
        ("not json", 502),
    ],
)
def test_analyze_trend_error_mapping(make_client, error, status_code):
    client, _, _ = make_client([error])

    resp = client.post("/trends/analyze", json={"title": "Agentic AI", "summary": "Agents everywhere."})

    assert resp.status_code == status_code
    detail = resp.json()["detail"]
    assert set(detail) == {"error", "message"}
    assert detail["message"]


def test_api_key_error_uses_user_facing_copy(make_client):
    client, _, service = make_client([api_key_error()])

    resp = client.post("/trends/analyze", json={"title": "Agentic AI", "summary": "Agents everywhere."})

    assert resp.json()["detail"] == {
        "error": "api_key_missing",
        "message": service.settings.messages.api_key_missing,
    }


def test_analyze_trend_validates_body(make_client):
    client, fake, _ = make_client([ANALYSIS])

    resp = client.post("/trends/analyze", json={"title": "", "summary": "x"})

    assert resp.status_code == 422
    assert fake.calls == []


def test_generate_needs(make_client):
    client, fake, _ = make_client([{"needs": [_need("Automate reconciliation"), _need("Close faster")]}])

    resp = client.post("/needs/generate", json={"trend": TREND, "companyContext": COMPANY, "maxNeeds": 3})

    assert resp.status_code == 200
    body = resp.json()
    assert body["count"] == 2
    assert body["needs"][0]["title"] == "Automate reconciliation"
    assert body["needs"][0]["id"].startswith("need_")
    assert body["needs"][0]["trendId"] == "trend_7"
    assert "Generate 3 specific" in fake.calls[0]["user"]


def test_generate_needs_bounds_max_needs(make_client):
    client, fake, _ = make_client([{"needs": [_need("x")]}])

    resp = client.post("/needs/generate", json={"trend": TREND, "companyContext": COMPANY, "maxNeeds": 25})

    assert resp.status_code == 422
    assert fake.calls == []


def test_generate_needs_surfaces_empty_result(make_client):
    client, _, _ = make_client([{"needs": []}])

    resp = client.post("/needs/generate", json={"trend": TREND, "companyContext": COMPANY})

    assert resp.status_code == 502
    assert resp.json()["detail"]["error"] == "empty_result"


def test_prioritize_needs(make_client):
    client, _, _ = make_client([])
    needs = [
        dict(_need("slow", impactScore=9, effortScore=9), id="n1"),
        dict(_need("fast", impactScore=8, effortScore=2), id="n2"),
    ]

    resp = client.post("/needs/prioritize", json={"needs": needs})

    assert resp.status_code == 200
    body = resp.json()
    assert [item["need"]["id"] for item in body["ranked"]] == ["n2", "n1"]
    assert body["matrix"]["high_impact_low_effort"] == ["n2"]


def test_generate_solutions_falls_back_to_synthetic(make_client):
    client, _, _ = make_client([api_key_error()])

    resp = client.post(
        "/solutions/generate",
        json={"need": {"id": "need_9", "title": "Automate reconciliation"}, "companyContext": COMPANY},
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["tier"] == "synthetic"
    assert body["degraded"] is True
    assert sorted(s["approach"] for s in body["solutions"]) == ["build", "buy", "partner"]
    assert body["solutions"][0]["estimatedCost"]["initial"] > 0
    assert body["solutions"][0]["roi"]["confidenceScore"] == 0.7


def test_generate_solutions_primary(make_client):
    client, _, service = make_client([{"solutions": [_solution("build"), _solution("buy"), _solution("partner")]}])

    resp = client.post(
        "/solutions/generate",
        json={
            "need": {"title": "Automate reconciliation", "description": "Manual today"},
            "companyContext": COMPANY,
            "preferences": {"preferredApproach": "partner", "riskTolerance": "medium"},
        },
    )

    assert resp.status_code == 200
    assert resp.json()["tier"] == "primary"
    assert service.stats()["tiers_served"] == {"solutions:primary": 1}
    build = resp.json()["solutions"][0]
    assert build["approach"] == "build"
    assert "vendor" not in build


def test_compare_and_roi(make_client):
    client, _, _ = make_client([])
    solutions = [dict(_solution("build"), id="s1"), dict(_solution("buy", matchScore=0.95), id="s2")]

    compare = client.post("/solutions/compare", json={"solutions": solutions, "criteria": ["roi"]})
    roi = client.post("/solutions/roi", json={"solution": solutions[0], "expectedRevenue": 120000})

    assert compare.status_code == 200
    assert compare.json()["winner"] in {"s1", "s2"}
    assert sum(compare.json()["weights"].values()) == pytest.approx(1.0, abs=1e-3)
    assert roi.status_code == 200
    assert roi.json()["solutionId"] == "s1"
    assert roi.json()["annualBenefit"] == 155000


def test_compare_rejects_unknown_criteria(make_client):
    client, _, _ = make_client([])

    resp = client.post("/solutions/compare", json={"solutions": [_solution("build")], "criteria": ["vibes"]})

    assert resp.status_code == 422
