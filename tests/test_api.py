"""
Tests for the HTTP routes.
"""
import pytest
from fastapi.testclient import TestClient

from main import app


@pytest.fixture
def client():
    return TestClient(app)


class TestHealthAndProfiles:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_profiles(self, client):
        body = client.get("/profiles").json()
        assert body["default"] == "durable"
        assert {p["key"] for p in body["profiles"]} == {"durable", "cola_calories"}


class TestProcessStreams:

    def test_process(self, client, constant_ride):
        response = client.post("/streams/process", json=constant_ride)
        assert response.status_code == 200
        body = response.json()
        assert body["durabilityScore"] == pytest.approx(100)
        assert body["pwHrDrift"] == pytest.approx(0)
        assert len(body["quartiles"]) == 4

    def test_hrr_query_params(self, client, constant_ride):
        response = client.post(
            "/streams/process",
            json=constant_ride,
            params={"heart_rate_max": 190, "heart_rate_rest": 60},
        )
        assert response.status_code == 200
        # 130 bpm is ~54% HRR, outside the 60-70% band
        assert response.json()["z2Early"] == pytest.approx(0)

    def test_insufficient_data(self, client, payload_factory):
        response = client.post("/streams/process", json=payload_factory(range(5), [200] * 5, [130] * 5))
        assert response.status_code == 422
        assert response.json() == {"detail": "Insufficient data"}

    @pytest.mark.parametrize("data", [7, 3.5, True, "abc"])
    def test_scalar_channel_data_is_rejected_cleanly(self, client, data):
        """a non-array data field yields the insufficient-data 422, not a server error"""
        payload = {
            "time": {"data": list(range(20))},
            "heartrate": {"data": data},
            "watts": {"data": [200] * 20},
        }
        response = client.post("/streams/process", json=payload)
        assert response.status_code == 422
        assert response.json() == {"detail": "Insufficient data"}


class TestReport:

    def test_report_with_history(self, client, constant_ride):
        history = [{"pw_hr_drift": 3.0, "rolling5_diff": -10.0}]
        response = client.post(
            "/streams/report",
            json={"streams": constant_ride, "history": history, "context": {"indoor": False}},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["profile"] == "durable"
        assert body["baseline"]["pwHrDrift"] == pytest.approx(3.0)
        assert body["baseline"]["hrCreep"] is None
        assert "Ride context: Outdoor" in body["text"]
        assert body["row"]["z2_early"] == pytest.approx(100)

    def test_report_profile_selection(self, client, constant_ride):
        response = client.post(
            "/streams/report",
            params={"profile": "cola_calories"},
            json={"streams": constant_ride, "activity": {"calories": 556}},
        )
        body = response.json()
        assert body["profile"] == "cola_calories"
        assert "4.0 × 12oz" in body["text"]
        assert body["baseline"] is None

    def test_report_old_history_is_ignored(self, client, constant_ride):
        history = [{"pw_hr_drift": 3.0, "activity_date": "2001-01-01T00:00:00Z"}]
        body = client.post("/streams/report", json={"streams": constant_ride, "history": history}).json()
        assert body["baseline"] is None

    def test_report_explicit_since_includes_old_history(self, client, constant_ride):
        history = [{"pw_hr_drift": 3.0, "activity_date": "2001-01-01T00:00:00Z"}]
        response = client.post(
            "/streams/report",
            params={"since": "2000-01-01T00:00:00Z"},
            json={"streams": constant_ride, "history": history},
        )
        assert response.status_code == 200
        assert response.json()["baseline"]["pwHrDrift"] == pytest.approx(3.0)

    def test_report_window_days(self, client, constant_ride):
        history = [{"pw_hr_drift": 3.0, "activity_date": "2001-01-01T00:00:00Z"}]
        body = client.post(
            "/streams/report",
            params={"window_days": 365 * 100},
            json={"streams": constant_ride, "history": history},
        ).json()
        assert body["baseline"]["pwHrDrift"] == pytest.approx(3.0)

    def test_report_invalid_window(self, client, constant_ride):
        response = client.post(
            "/streams/report", params={"window_days": 0}, json={"streams": constant_ride}
        )
        assert response.status_code == 400


class TestBaselineRoute:

    def test_baseline(self, client):
        rows = [{"pw_hr_drift": 2.0}, {"pw_hr_drift": 4.0, "z2_early": 55.0}]
        response = client.post("/baseline", json=rows)
        assert response.status_code == 200
        baseline = response.json()["baseline"]
        assert baseline["pwHrDrift"] == pytest.approx(3.0)
        assert baseline["z2Early"] == pytest.approx(55.0)

    def test_empty_history(self, client):
        assert client.post("/baseline", json=[]).json() == {"baseline": None}

    def test_explicit_since(self, client):
        rows = [
            {"pw_hr_drift": 2.0, "activity_date": "2024-01-10T00:00:00Z"},
            {"pw_hr_drift": 8.0, "activity_date": "2023-06-01T00:00:00Z"},
        ]
        response = client.post("/baseline", json=rows, params={"since": "2024-01-01T00:00:00Z"})
        assert response.json()["baseline"]["pwHrDrift"] == pytest.approx(2.0)

    def test_invalid_window(self, client):
        response = client.post("/baseline", json=[], params={"window_days": 0})
        assert response.status_code == 400
