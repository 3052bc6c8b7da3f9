"""
Tests for the HTTP endpoints using FastAPI's TestClient.

The formula router is pointed at the in-memory catalog fixture so no
provider is contacted.
"""

import pytest
from fastapi.testclient import TestClient

import api.formula
import main
from main import app
from registry import CatalogRegistry


@pytest.fixture
def client(monkeypatch, service, catalog):
    monkeypatch.setattr(api.formula, 'calculation_service', service)
    monkeypatch.setattr(api.formula, 'registry', catalog)
    return TestClient(app)


# =============================================================================
# Startup and health
# =============================================================================

class TestStartup:

    def test_catalog_loaded_on_startup(self, monkeypatch):
        fresh = CatalogRegistry()
        monkeypatch.setattr(main, "registry", fresh)
        assert not fresh.loaded
        with TestClient(app) as client:
            assert client.get("/health").status_code == 200
            assert fresh.loaded
            assert fresh.get_indicator("unemployment") is not None


class TestHealth:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_status(self, client):
        body = client.get("/api/status").json()
        assert set(body["data_sources"]) == {
            'fred', 'world_bank', 'dbnomics', 'eurostat', 'universal_csv', 'manual'
        }
        assert "data" in body["cache"]
        assert "calculations" in body["catalog"]

    def test_sources(self, client):
        assert client.get("/api/sources").json()["sources"]["manual"] is True

    def test_cache_clear(self, client):
        response = client.post("/api/cache/clear")
        assert response.status_code == 200
        assert response.json()["status"] == "success"


# =============================================================================
# Formula endpoints
# =============================================================================

class TestFormulaEndpoints:

    def test_functions(self, client):
        functions = client.get("/api/formula/functions").json()["functions"]
        assert set(functions["basic"]) == {"SUM", "AVG", "MIN", "MAX", "COUNT"}
        assert functions["advanced"]["CORRELATION"]["arity"] == 2

    def test_formula_test_series(self, client):
        response = client.post("/api/formula/test", json={"formula": "MA(GDP, 2)"})
        assert response.status_code == 200
        body = response.json()
        assert body["result"]["type"] == "series"
        assert body["result"]["series"][0] == ["2020-04-01", 101.0]
        assert body["indicators_used"] == ["gdp"]

    def test_formula_test_with_range(self, client):
        response = client.post("/api/formula/test", json={
            "formula": "COUNT(GDP)", "start_date": "2020-04-01", "end_date": "2020-07-01",
        })
        assert response.json()["result"] == {"type": "scalar", "value": 2.0}

    def test_formula_test_error(self, client):
        response = client.post("/api/formula/test", json={"formula": "BOGUS(GDP)"})
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Unknown function: BOGUS"
        assert body["code"] == "unknown_function"

    def test_formula_test_requires_formula(self, client):
        assert client.post("/api/formula/test", json={}).status_code == 422

    def test_evaluate_with_supplied_data(self, client):
        response = client.post("/api/formula/evaluate", json={
            "formula": "MOMENTUM(PRICES, 1)",
            "data": {"PRICES": [["2024-01-01", 10], ["2024-02-01", 12.5]]},
        })
        assert response.status_code == 200
        assert response.json()["result"]["series"] == [["2024-02-01", 2.5]]

    def test_evaluate_returns_identifier_series(self, client):
        response = client.post("/api/formula/evaluate", json={
            "formula": "X", "data": {"x": [["2020-01-01", "1.5"], ["2020-02-01", None]]},
        })
        assert response.status_code == 200
        assert response.json()["result"]["series"] == [["2020-01-01", 1.5], ["2020-02-01", None]]

    @pytest.mark.parametrize("data", [
        {"x": [["2020-01-01", "abc"]]},
        {"x": "hello"},
        {"x": [1, 2, 3]},
        {"x": [["2020-01-01"]]},
        {"x": 5},
    ])
    def test_evaluate_rejects_malformed_data(self, client, data):
        response = client.post("/api/formula/evaluate", json={"formula": "X", "data": data})
        assert response.status_code == 422

    def test_evaluate_unknown_identifier(self, client):
        response = client.post("/api/formula/evaluate", json={"formula": "SUM(X)", "data": {}})
        assert response.status_code == 400
        assert response.json() == {
            "formula": "SUM(X)",
            "indicators_used": [],
            "error": "Indicator not found: x",
            "code": "unknown_identifier",
        }


# =============================================================================
# Saved calculations
# =============================================================================

class TestCalculationEndpoints:

    def test_list(self, client):
        slugs = [c["slug"] for c in client.get("/api/calculations").json()["calculations"]]
        assert slugs == ["gdp_avg", "gdp_ma", "bad_formula"]

    def test_run(self, client):
        body = client.get("/api/calculations/gdp_avg").json()
        assert body["calculation"]["name"] == "Average GDP"
        assert body["result"]["value"] == pytest.approx(102.0)

    def test_run_with_range(self, client):
        body = client.get("/api/calculations/gdp_avg", params={"start_date": "2020-07-01"}).json()
        assert body["result"]["value"] == pytest.approx(103.0)

    def test_unknown(self, client):
        response = client.get("/api/calculations/nope")
        assert response.status_code == 404
        assert response.json()["code"] == "not_found"

    def test_formula_error(self, client):
        response = client.get("/api/calculations/bad_formula")
        assert response.status_code == 400
        assert response.json()["code"] == "wrong_arity"
