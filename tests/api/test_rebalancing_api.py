"""
API tests for rebalancing endpoints.

Tests cover:
- Rebalance plan for underweight and overweight securities
- Unknown security (404)
- Manual trade simulation
"""

import pytest
from fastapi.testclient import TestClient


def approx(value: float) -> object:
    return pytest.approx(value, abs=1e-6)


class TestRebalancePlanAPI:
    """Tests for POST /rebalancing/{security_id}."""

    def test_underweight_plan(self, client: TestClient, sample_payload: dict):
        """
        GIVEN BND at 12.5% against a 20% target on an 8000 tracked total
        WHEN I request its rebalance plan
        THEN external funding buys 750 and internal reallocation moves 600 from SPY
        """
        response = client.post("/rebalancing/bnd", json=sample_payload)

        assert response.status_code == 200
        data = response.json()
        external = data["external_funding"]
        assert external["kind"] == "EXTERNAL_FUNDING"
        assert external["amount"] == approx(750)
        assert data["external_simulation"]["total_after"] == approx(8750)
        rows = {r["category"]: r for r in data["external_simulation"]["rows"]}
        assert rows["Bond"]["new_weight"] == approx(20)
        assert rows["Bond"]["new_level"] == "NONE"

        internal = data["internal_reallocation"]
        assert [(t["security_id"], t["side"]) for t in internal["trades"]] == [
            ("spy", "SELL"),
            ("bnd", "BUY"),
        ]
        assert internal["total_sell"] == approx(internal["total_buy"])

    def test_overweight_plan(self, client: TestClient, sample_payload: dict):
        data = client.post("/rebalancing/spy", json=sample_payload).json()

        assert data["external_funding"] is None
        assert data["external_simulation"] is None
        assert data["internal_reallocation"]["total_sell"] == approx(1000)

    def test_unknown_security_is_404(self, client: TestClient, sample_payload: dict):
        response = client.post("/rebalancing/zzz", json=sample_payload)

        assert response.status_code == 404
        assert response.json()["error"] == "NOT_FOUND"


class TestSimulationAPI:
    """Tests for POST /rebalancing/simulate."""

    def test_simulate_manual_trades(self, client: TestClient, sample_payload: dict):
        """
        GIVEN a buy of 1000 BND, a sell of 500 SPY and an unknown security
        WHEN I simulate them
        THEN the unknown row is skipped and the total grows by 500
        """
        sample_payload["trades"] = [
            {"security_id": "bnd", "side": "BUY", "amount": 1000},
            {"security_id": "spy", "side": "SELL", "amount": "500"},
            {"security_id": "zzz", "side": "BUY", "amount": 100},
        ]

        response = client.post("/rebalancing/simulate", json=sample_payload)

        assert response.status_code == 200
        data = response.json()
        assert data["scenario"]["kind"] == "MANUAL"
        assert len(data["scenario"]["trades"]) == 2
        assert data["scenario"]["portfolio_change"] == approx(500)
        assert data["simulation"]["total_after"] == approx(8500)

    def test_simulate_without_trades(self, client: TestClient, sample_payload: dict):
        data = client.post("/rebalancing/simulate", json=sample_payload).json()

        assert data["scenario"]["trades"] == []
        rows = {r["category"]: r for r in data["simulation"]["rows"]}
        assert rows["Equity"]["new_weight"] == approx(87.5)
