"""
Tests for calculation and scored calculator API endpoints.
"""

import pytest


class TestHealth:
    """Test service endpoints."""

    def test_health_check(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestCalculationsAPI:
    """Test calculation API endpoints."""

    def test_calculate_payment(self, client):
        """Test fixed payment endpoint."""
        response = client.post(
            "/api/calculate/payment",
            json={"principal": 10000, "annual_rate_percent": 12, "term_months": 12},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["payment"] == 888.49
        assert data["total_interest"] == pytest.approx(661.85, abs=0.01)

    def test_calculate_payment_validation(self, client):
        """Test request validation rejects a zero term."""
        response = client.post(
            "/api/calculate/payment",
            json={"principal": 10000, "annual_rate_percent": 12, "term_months": 0},
        )
        assert response.status_code == 422

    def test_calculate_payment_tiny_rate(self, client):
        response = client.post(
            "/api/calculate/payment",
            json={"principal": 10000, "annual_rate_percent": 1e-15, "term_months": 12},
        )
        assert response.status_code == 200
        assert response.json()["payment"] == 833.33

    def test_out_of_range_rates_rejected(self, client):
        response = client.post(
            "/api/calculate/schedule",
            json={"principal": 1000, "annual_rate_percent": 1e6, "term_months": 600},
        )
        assert response.status_code == 422

        response = client.post(
            "/api/calculate/future-value",
            json={"present_value": 1000, "annual_rate_percent": -5, "years": 10},
        )
        assert response.status_code == 422

    def test_calculate_amortization(self, client):
        """Test fixed-term amortization endpoint."""
        response = client.post(
            "/api/calculate/amortization",
            json={
                "principal": 100000,
                "annual_rate_percent": 6,
                "amortization_years": 5,
                "total_months": 60,
                "start_date": "2025-01-01",
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert len(data["schedule"]) == 60
        assert data["schedule"][0]["date"] == "2025-01-01"
        assert data["total_principal"] == pytest.approx(100000, abs=1)

    def test_calculate_schedule(self, client):
        """Test iterative schedule endpoint."""
        response = client.post(
            "/api/calculate/schedule",
            json={"principal": 10000, "annual_rate_percent": 12, "term_months": 12},
        )
        assert response.status_code == 200
        data = response.json()
        assert len(data["rows"]) == 12
        assert len(data["yearly"]) == 1
        assert data["amortized"] is True
        assert data["totals"]["total_interest"] == pytest.approx(661.85, abs=0.01)

    def test_calculate_schedule_capped(self, client):
        """A payment below the interest charge returns a capped result."""
        response = client.post(
            "/api/calculate/schedule",
            json={"principal": 10000, "annual_rate_percent": 12, "payment": 50},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["capped"] is True
        assert data["amortized"] is False
        assert len(data["rows"]) == 600
        assert data["totals"]["final_balance"] > 0

    def test_calculate_schedule_requires_term_or_payment(self, client):
        response = client.post(
            "/api/calculate/schedule",
            json={"principal": 10000, "annual_rate_percent": 12},
        )
        assert response.status_code == 400

    def test_calculate_schedule_with_options(self, client):
        """Test extra payments and rate changes together."""
        response = client.post(
            "/api/calculate/schedule",
            json={
                "principal": 100000,
                "annual_rate_percent": 6,
                "term_months": 360,
                "extra_payment": {"amount": 100, "frequency": "monthly"},
                "rate_changes": [{"period": 61, "annual_rate_percent": 8}],
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert data["rows"][60]["rate"] == pytest.approx(0.08)
        assert data["rows"][0]["extra_payment"] == 100
        assert len(data["rows"]) < 360

    def test_calculate_schedule_row_limit(self, client, settings_override):
        """Rows returned are limited by configuration."""
        settings_override(schedule_row_limit=12)
        response = client.post(
            "/api/calculate/schedule",
            json={"principal": 100000, "annual_rate_percent": 6, "term_months": 360},
        )
        assert response.status_code == 200
        data = response.json()
        assert len(data["rows"]) == 12
        assert data["totals"]["payoff_periods"] == 360

    def test_calculate_schedule_iteration_cap_setting(self, client, settings_override):
        settings_override(max_amortization_periods=120)
        response = client.post(
            "/api/calculate/schedule",
            json={"principal": 10000, "annual_rate_percent": 12, "payment": 50},
        )
        assert response.status_code == 200
        assert len(response.json()["rows"]) == 120

    def test_calculate_extra_payments(self, client):
        """Test extra payment comparison endpoint."""
        response = client.post(
            "/api/calculate/extra-payments",
            json={
                "principal": 200000,
                "annual_rate_percent": 6,
                "term_years": 30,
                "extra_payment": {"amount": 200},
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert data["interest_savings"] > 0
        assert data["periods_saved"] > 0
        assert data["baseline"]["payoff_periods"] == 360

    def test_calculate_arm(self, client):
        """Test ARM projection endpoint."""
        response = client.post(
            "/api/calculate/arm",
            json={
                "loan_amount": 300000,
                "initial_rate_percent": 3,
                "fixed_years": 5,
                "term_years": 30,
                "index_rate_percent": 5,
                "margin_percent": 2.75,
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert len(data["yearly"]) == 30
        assert data["rate_changes"][0] == {"period": 61, "rate_percent": 5.0}
        assert data["assessment"]["tier"] == "High"

    def test_calculate_arm_iteration_cap_setting(self, client, settings_override):
        settings_override(max_amortization_periods=120)
        response = client.post(
            "/api/calculate/arm",
            json={
                "loan_amount": 300000,
                "initial_rate_percent": 3,
                "fixed_years": 5,
                "term_years": 30,
                "index_rate_percent": 5,
                "margin_percent": 2.75,
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert data["totals"]["payoff_periods"] == 120
        assert data["totals"]["amortized"] is False

    def test_calculate_future_value(self, client):
        """Test future value endpoint for each calculation type."""
        response = client.post(
            "/api/calculate/future-value",
            json={"present_value": 1000, "annual_rate_percent": 5, "years": 10},
        )
        assert response.status_code == 200
        assert response.json()["future_value"] == 1628.89

        response = client.post(
            "/api/calculate/future-value",
            json={
                "calculation_type": "annuity",
                "payment": 100,
                "annual_rate_percent": 5,
                "years": 10,
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert data["future_value"] == 1257.79
        assert data["total_contributions"] == 1000

        response = client.post(
            "/api/calculate/future-value",
            json={
                "calculation_type": "growing-annuity",
                "payment": 100,
                "annual_rate_percent": 5,
                "growth_rate_percent": 5,
                "years": 10,
            },
        )
        assert response.status_code == 200
        assert response.json()["future_value"] == 1000

    def test_calculate_future_value_unknown_compounding(self, client):
        response = client.post(
            "/api/calculate/future-value",
            json={
                "present_value": 1000,
                "annual_rate_percent": 5,
                "years": 10,
                "compounding": "fortnightly",
            },
        )
        assert response.status_code == 400

    def test_calculate_annuity_payment(self, client):
        """Test annuity payment endpoint."""
        response = client.post(
            "/api/calculate/annuity-payment",
            json={"present_value": 10000, "annual_rate_percent": 12, "years": 1},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["payment"] == 888.49
        assert data["total_interest"] == pytest.approx(661.85, abs=0.01)


class TestScoresAPI:
    """Test scored calculator endpoints."""

    def test_list_scores(self, client):
        response = client.get("/api/scores")
        assert response.status_code == 200
        names = [entry["name"] for entry in response.json()]
        assert "bmi" in names
        assert "mlss" in names

    def test_run_bmi(self, client):
        response = client.post("/api/scores/bmi", json={"weight_kg": 70, "height_cm": 175})
        assert response.status_code == 200
        data = response.json()
        assert data["calculator"] == "bmi"
        assert data["interpretation"]["tier"] == "Normal weight"

    def test_unknown_calculator(self, client):
        response = client.post("/api/scores/horoscope", json={})
        assert response.status_code == 404

    def test_invalid_inputs(self, client):
        response = client.post(
            "/api/scores/sleep_efficiency",
            json={"total_sleep_hours": 9, "time_in_bed_hours": 8},
        )
        assert response.status_code == 422

    def test_missing_inputs(self, client):
        response = client.post("/api/scores/ltv", json={"loan_amount": 1000})
        assert response.status_code == 422

    def test_compute_error(self, client):
        response = client.post(
            "/api/scores/future_value_growth",
            json={"present_value": 1000, "annual_rate_percent": 5, "years": 10, "compounding": "weekly"},
        )
        assert response.status_code == 400
