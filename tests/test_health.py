from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from chat_relay.adapters.llm.base import HEALTHY, UNHEALTHY, UNREACHABLE


def test_liveness_text(client: TestClient) -> None:
    response = client.get("/")

    assert response.status_code == 200
    assert response.text == "AI backend is running"


def test_health_reports_upstream_healthy(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["services"] == {"openai": HEALTHY}
    datetime.fromisoformat(body["timestamp"])


@pytest.mark.parametrize("status", [UNHEALTHY, UNREACHABLE])
def test_health_degraded_when_upstream_down(client: TestClient, stub_llm, status) -> None:
    stub_llm.status = status

    body = client.get("/health").json()

    assert body["status"] == "degraded"
    assert body["services"]["openai"] == status


def test_openapi_has_tag_metadata(client: TestClient) -> None:
    schema = client.get("/openapi.json").json()

    tag_names = [t["name"] for t in schema["tags"]]
    assert tag_names.count("Chat") == 1
    assert "Health" in tag_names
    assert "/api/openai" in schema["paths"]
