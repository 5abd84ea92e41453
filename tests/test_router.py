import pytest
from fastapi.testclient import TestClient

from cma_engine.main import app
from cma_engine.routers import cma as cma_router
from cma_engine.services.observations_service import ObservationsUnavailable

integration = pytest.mark.integration


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def sample_payload(client):
    return client.get("/api/v1/cma/sample").json()


@integration
def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


@integration
def test_sample_uses_camel_case(sample_payload):
    assert sample_payload["projectedYearCount"] == 5
    assert sample_payload["historicalLedger"]["netSales"] == [50_000_000, 60_000_000]
    assert "net_sales" not in sample_payload["historicalLedger"]
    assert sample_payload["loanAssumptions"]["kind"] == "term-loan"
    assert sample_payload["growthAssumptions"]["revenueGrowthPercent"] == [15, 18, 20, 22, 25]


@integration
def test_generate_returns_every_table(client, sample_payload):
    response = client.post("/api/v1/cma/generate", json=sample_payload)

    assert response.status_code == 200
    body = response.json()
    for key in ("operatingStatement", "balanceSheet", "cashFlow", "ratioAnalysis",
                "fundFlow", "mpbf", "repaymentSchedule", "depreciationSchedule", "flags"):
        assert key in body
    assert body["operatingStatement"]["headers"][-1] == "Projected FY-5"
    assert body["operatingStatement"]["body"][0][0] == "Net Sales"


@integration
def test_generate_rejects_invalid_request(client, sample_payload):
    sample_payload["historicalLedger"]["netSales"] = [1, 2, 3]
    response = client.post("/api/v1/cma/generate", json=sample_payload)

    assert response.status_code == 422


@integration
def test_generate_rejects_short_growth_list(client, sample_payload):
    sample_payload["projectedYearCount"] = 6
    response = client.post("/api/v1/cma/generate", json=sample_payload)

    assert response.status_code == 422


@integration
def test_export_returns_workbook(client, sample_payload):
    response = client.post("/api/v1/cma/export", json=sample_payload)

    assert response.status_code == 200
    assert response.headers["content-type"].startswith(
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    )
    assert "CMA_Report.xlsx" in response.headers["content-disposition"]
    # xlsx is a zip archive
    assert response.content[:2] == b"PK"


@integration
def test_sample_round_trips_through_generate(client, sample_payload):
    response = client.post("/api/v1/cma/generate", json=sample_payload)

    assert response.status_code == 200
    assert response.json()["operatingStatement"]["body"][0][1] == "500.00"


@integration
def test_generate_rejects_excessive_tenor(client, sample_payload):
    sample_payload["loanAssumptions"]["repaymentYears"] = 10_000
    response = client.post("/api/v1/cma/generate", json=sample_payload)

    assert response.status_code == 422


@integration
def test_observations_returns_commentary(client, sample_payload, monkeypatch):
    seen = {}

    async def fake_observations(report, loan):
        seen["headers"] = report.operating_statement.headers
        seen["loan"] = loan.principal_amount
        return "DSCR comfortably above 1.5."

    monkeypatch.setattr(cma_router, "get_cma_observations", fake_observations)
    response = client.post("/api/v1/cma/observations", json=sample_payload)

    assert response.status_code == 200
    body = response.json()
    assert body["observations"] == "DSCR comfortably above 1.5."
    assert body["headers"][0] == "Audited FY-2"
    assert seen["loan"] == 5_000_000
    assert seen["headers"][-1] == "Projected FY-5"


@integration
def test_observations_without_api_key(client, sample_payload, monkeypatch):
    async def unavailable(report, loan):
        raise ObservationsUnavailable("CMA_GEMINI_API_KEY is not configured")

    monkeypatch.setattr(cma_router, "get_cma_observations", unavailable)
    response = client.post("/api/v1/cma/observations", json=sample_payload)

    assert response.status_code == 503
