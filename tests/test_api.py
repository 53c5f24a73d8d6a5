import pytest

from lifeplan.api import app
from lifeplan.engine import runner

SIMULATION_PAYLOAD = {
    "inputs": {
        "profile": {"currentAge": 35, "gender": "kvinna", "desiredRetirementAge": 65},
        "income": {"monthlySalary": 42000, "realSalaryGrowth": 0.01},
        "expenses": {"monthlyLiving": 24000},
        "assets": {"liquidSavings": 80000, "iskAccount": 220000},
        "pensions": {"generalPension": {"estimatedMonthlyAmount": 13000, "withdrawalStartAge": 65}},
    },
    "config": {"includePensions": True},
}


@pytest.fixture
def client(monkeypatch):
    monkeypatch.delenv("LIFEPLAN_TAX_YEAR", raising=False)
    monkeypatch.delenv("LIFEPLAN_PARAMETERS_FILE", raising=False)
    return app.test_client()


def test_healthcheck(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.get_json() == {"status": "ok"}
    assert response.headers["Access-Control-Allow-Origin"] == "*"


def test_defaults(client):
    body = client.get("/api/defaults").get_json()

    assert body["inputs"]["profile"]["current_age"] == 30
    assert body["config"]["include_pensions"] is False
    assert "itp1" in body["pensionTemplates"]


def test_parameters_by_year(client):
    assert client.get("/api/parameters").get_json()["year"] == 2025

    body = client.get("/api/parameters?year=2026").get_json()
    assert body["tax"]["flat_yield"]["tax_free_amount"] == 300000.0

    assert client.get("/api/parameters?year=1999").status_code == 404


def test_tax_endpoint(client):
    response = client.post("/api/tax", json={"grossSalary": 600000, "age": 40, "iskCapital": 250000})

    assert response.status_code == 200
    body = response.get_json()
    assert body["result"]["pension_fee"] == pytest.approx(42000.0)
    assert len(body["result"]["calculations"]) == 4
    assert body["summary"][-1]["description"] == "Total tax"


def test_tax_endpoint_rejects_bad_numbers(client):
    response = client.post("/api/tax", json={"grossSalary": "plenty", "age": 40})

    assert response.status_code == 400


def test_simulate(client):
    response = client.post("/api/simulate", json=SIMULATION_PAYLOAD)

    assert response.status_code == 200
    body = response.get_json()
    assert len(body["projections"]) == 51
    assert body["projections"][0]["Age"] == 35
    assert body["summary"]["expected_monthly_pension"] == pytest.approx(13000.0)
    assert body["errors"] == []
    assert "taxBreakdown" not in body


def test_simulate_milestones_and_transparency(client):
    payload = dict(SIMULATION_PAYLOAD, config={"enableTransparency": True})

    body = client.post("/api/simulate?every=10", json=payload).get_json()

    assert [row["Year"] for row in body["projections"]] == [0, 10, 20, 30, 40, 50]
    assert len(body["taxBreakdown"]) == len(body["projections"])
    assert body["taxBreakdown"][0][0]["category"] == "Income tax"


def test_simulate_rejects_malformed_payload(client):
    response = client.post("/api/simulate", json={"inputs": {"income": {}}})

    assert response.status_code == 400
    assert "error" in response.get_json()


def test_simulate_reports_validation_errors(client):
    payload = {
        "inputs": dict(SIMULATION_PAYLOAD["inputs"], profile={"currentAge": 70, "desiredRetirementAge": 65}),
    }

    response = client.post("/api/simulate", json=payload)

    assert response.status_code == 400
    body = response.get_json()
    assert "Retirement age must be higher than current age" in body["errors"]
    assert body["projections"] == []


def test_simulate_rejects_non_numeric_milestone_step(client):
    response = client.post("/api/simulate?every=abc", json=SIMULATION_PAYLOAD)

    assert response.status_code == 400
    assert "error" in response.get_json()


def test_simulate_unexpected_failure_is_server_error(client, monkeypatch):
    def explode(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(runner, "simulate_yearly", explode)

    response = client.post("/api/simulate", json=SIMULATION_PAYLOAD)

    assert response.status_code == 500
    assert response.get_json()["errors"] == [runner.GENERIC_ERROR]
