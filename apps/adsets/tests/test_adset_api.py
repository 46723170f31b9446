from fastapi.testclient import TestClient

from adset_engine.adset_api import get_adset_service
from adset_engine.main import app
from adset_engine.platforms.exceptions import PlatformRejectionError, TokenNotFoundError
from adset_engine.services.adsets.service import AdSetService
from tests.conftest import RecordingGateway, StaticCredentials

BODY = {
    "account_id": "act_123456",
    "campaign_id": "120200000000000",
    "page_id": "100000000000001",
    "daily_budget": 500,
}


def _client(credentials=None, gateway=None) -> TestClient:
    service = AdSetService(credentials or StaticCredentials(), gateway or RecordingGateway())
    app.dependency_overrides[get_adset_service] = lambda: service
    return TestClient(app)


def teardown_function():
    app.dependency_overrides.clear()


def test_list_flows():
    client = _client()
    resp = client.get("/api/adsets/flows")
    assert resp.status_code == 200

    flows = {f["flow"]: f for f in resp.json()}
    assert set(flows) == {"awareness", "leads", "sales", "engagement", "app_promotion", "objective"}
    assert flows["leads"]["campaign_objective"] == "OUTCOME_LEADS"
    assert flows["leads"]["default_conversion_location"] == "instant_forms"
    assert flows["leads"]["conversion_locations"]["messenger"] == [
        "maximize_conversations",
        "cost_per_conversation",
    ]
    assert "REACH" in flows["awareness"]["valid_optimization_goals"]
    assert flows["objective"]["campaign_objective"] is None


def test_create_leads_ad_set():
    gateway = RecordingGateway()
    client = _client(gateway=gateway)

    resp = client.post("/api/adsets/leads", json=BODY)

    assert resp.status_code == 200
    data = resp.json()
    assert data["success"] is True
    assert data["adset_id"] == "120200000000001"
    assert data["payload"]["daily_budget"] == "50000"
    assert len(gateway.submissions) == 1


def test_preview_with_campaign_budget():
    gateway = RecordingGateway()
    client = _client(gateway=gateway)

    resp = client.post(
        "/api/adsets/sales/preview",
        params={"cbo_enabled": "true"},
        json={**BODY, "pixel_id": "998877"},
    )

    assert resp.status_code == 200
    data = resp.json()
    assert "daily_budget" not in data["payload"]
    assert data["configuration"]["budget_level"] == "campaign"
    assert gateway.submissions == []


def test_validation_failure_is_422():
    client = _client()
    resp = client.post(
        "/api/adsets/leads",
        json={**BODY, "conversion_location": "website", "performance_goal": "cost_per_lead"},
    )
    assert resp.status_code == 422
    detail = resp.json()["detail"]
    assert detail["error_type"] == "validation_error"
    assert detail["validation_errors"][0]["kind"] == "MissingConditionalField"
    assert detail["validation_errors"][0]["field"] == "pixel_id"


def test_non_finite_budget_is_422():
    gateway = RecordingGateway()
    client = _client(gateway=gateway)
    body = (
        '{"account_id": "act_123456", "campaign_id": "120200000000000", '
        '"page_id": "100000000000001", "daily_budget": Infinity}'
    )

    resp = client.post(
        "/api/adsets/leads/preview",
        content=body,
        headers={"Content-Type": "application/json"},
    )

    assert resp.status_code == 422
    detail = resp.json()["detail"]
    assert detail["error_type"] == "validation_error"
    assert detail["validation_errors"][0]["field"] == "daily_budget"
    assert gateway.lookups == []


def test_unknown_flow_is_rejected():
    client = _client()
    resp = client.post("/api/adsets/retargeting", json=BODY)
    assert resp.status_code == 422


def test_credential_failure_is_404():
    client = _client(credentials=StaticCredentials(error=TokenNotFoundError("No token")))
    resp = client.post("/api/adsets/leads", json=BODY)
    assert resp.status_code == 404
    assert resp.json()["detail"]["error_type"] == "credential_error"


def test_platform_rejection_is_502():
    gateway = RecordingGateway(
        create_error=PlatformRejectionError(
            "Ad set creation failed: Permissions error",
            details={"error": {"message": "Permissions error", "code": 200}},
            error_code=200,
        )
    )
    client = _client(gateway=gateway)

    resp = client.post("/api/adsets/leads", json=BODY)

    assert resp.status_code == 502
    detail = resp.json()["detail"]
    assert detail["error_type"] == "platform_error"
    assert detail["details"]["error"]["code"] == 200
    assert detail["hint"]
