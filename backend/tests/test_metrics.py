from __future__ import annotations

import pytest

from app.monitoring.registry import MetricsRegistry


def test_metrics_endpoint_reports_social_actions(client, login):
    alice = login("alice")
    bob = login("bob")
    client.post("/api/follows", json={"following_id": bob["user"]["id"]}, headers=alice["headers"])

    response = client.get("/metrics")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    body = response.text
    assert "# TYPE social_actions_total counter" in body
    assert 'social_actions_total{action="follow",outcome="created"}' in body
    assert "conversation_race_recoveries_total" in body
    assert "messages_marked_read_total" in body


def test_registry_rejects_unknown_labels():
    registry = MetricsRegistry()
    counter = registry.counter("demo_total", "Demo", label_names=("action",))

    with pytest.raises(ValueError):
        counter.inc(kind="x")
    with pytest.raises(ValueError):
        counter.inc(amount=-1, action="x")

    counter.inc(action="like")
    counter.inc(action="like", amount=2)
    assert counter.value(action="like") == 3
    assert 'demo_total{action="like"} 3' in registry.render()


def test_registry_refuses_duplicate_names():
    registry = MetricsRegistry()
    registry.counter("dup_total", "Dup")
    with pytest.raises(ValueError):
        registry.counter("dup_total", "Dup again")
