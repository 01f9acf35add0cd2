"""Tests de los endpoints HTTP.

Ejecutar:
    pytest tests/test_api.py -v
"""

import pytest
from fastapi.testclient import TestClient

from env_monitor_services.api.main import create_app

from conftest import MINUTE_MS, NOW_MS, make_rows

SECOND_MS = 1000


@pytest.fixture
def client(engine, narrative):
    return TestClient(create_app(engine=engine, narrative=narrative))


def _devices():
    rows = make_rows([20.0, 20.0, 24.0], end_ms=NOW_MS - 10 * SECOND_MS)
    return [
        {"device_id": "dev1", "device_name": "Room 1", "rows": rows, "last_data_ms": rows[-1]["timestamp"]},
        {"device_id": "dev2", "device_name": "Room 2", "last_data_ms": NOW_MS - 50 * SECOND_MS},
    ]


class TestHealth:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_metrics_exposition(self, client):
        response = client.get("/metrics")
        assert response.status_code == 200
        assert "python_info" in response.text


class TestEvaluate:
    """POST /evaluate y POST /ack."""

    def test_evaluate_returns_single_modal(self, client):
        response = client.post("/evaluate", json={"devices": _devices(), "now_ms": NOW_MS})

        assert response.status_code == 200
        body = response.json()
        assert body["toast"] is None
        assert body["lang"] == "en"
        assert body["modal"]["level"] == "modal"
        assert body["modal"]["event_key"] == "dev1:Temperature:anomaly"
        assert "+4.0°C" in body["modal"]["text"]

    def test_ack_reevaluates_last_snapshot(self, client):
        client.post("/evaluate", json={"devices": _devices(), "now_ms": NOW_MS})

        response = client.post("/ack", json={"event_key": "dev1:Temperature:anomaly", "now_ms": NOW_MS + SECOND_MS})

        assert response.status_code == 200
        body = response.json()
        assert body["modal"] is None
        assert body["toast"]["event_key"] == "dev2:offline"

    def test_ack_before_any_evaluation(self, client):
        response = client.post("/ack", json={"event_key": "dev1:offline"})
        assert response.status_code == 200
        assert response.json()["modal"] is None

    def test_tunables_are_applied(self, client):
        payload = {
            "devices": [{"device_id": "dev2", "last_data_ms": NOW_MS - 50 * SECOND_MS}],
            "now_ms": NOW_MS,
            "alert_ms": 40 * SECOND_MS,
            "warn_ms": 10 * SECOND_MS,
            "lang_mode": "jp",
        }
        body = client.post("/evaluate", json=payload).json()

        assert body["lang"] == "jp"
        assert body["modal"]["text"] == "dev2：0分50秒データなし（送信失敗／オフラインの可能性が高い）。"

    @pytest.mark.parametrize(
        "payload",
        [
            {"devices": [{"device_id": ""}]},
            {"devices": [], "lang_mode": "fr"},
            {"devices": [], "warn_ms": -1},
        ],
    )
    def test_invalid_payload(self, client, payload):
        assert client.post("/evaluate", json=payload).status_code == 422

    def test_ack_requires_event_key(self, client):
        assert client.post("/ack", json={"event_key": ""}).status_code == 422


class TestEvents:
    """GET /events."""

    def test_events_snapshot(self, client):
        client.post("/evaluate", json={"devices": _devices(), "now_ms": NOW_MS})

        events = client.get("/events").json()["events"]

        assert events["dev2:offline"] == {
            "first_seen_ms": NOW_MS,
            "last_seen_ms": NOW_MS,
            "last_fired_stage": 1,
            "last_ack_ms": None,
        }
        assert events["dev1:Temperature:anomaly"]["last_fired_stage"] == 2

    def test_events_empty(self, client):
        assert client.get("/events").json() == {"events": {}}


class TestNarrative:
    """POST /narrative."""

    def test_no_rows(self, client):
        body = client.post("/narrative", json={"rows": [], "device_name": "Room 1", "now_ms": NOW_MS}).json()

        assert body == {
            "title": "AI Live Feed",
            "badge_level": "WARN",
            "message": "Room 1: No data in this view yet.",
            "lang": "en",
        }

    def test_day_peak(self, client):
        rows = make_rows([20.0, 21.0, 25.0, 22.0, 21.0, 20.5])
        body = client.post(
            "/narrative",
            json={"rows": rows, "view_mode": "day", "now_ms": NOW_MS, "device_name": "Lab"},
        ).json()

        assert body["title"] == "AI Day Summary"
        assert body["message"] == "Lab: Highest temperature was 25.0°C at 2023/11/15 07:10."

    def test_invalid_view_mode(self, client):
        assert client.post("/narrative", json={"rows": [], "view_mode": "week"}).status_code == 422
