"""Tests for interval tasks and the app's housekeeping timers."""

import asyncio
from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

from chat_relay.core.app_factory import create_app
from chat_relay.core.config import AppSettings, LLMSettings, Settings
from chat_relay.core.scheduler import IntervalTask


def test_rejects_non_positive_interval() -> None:
    with pytest.raises(ValueError):
        IntervalTask("bad", 0, lambda: None)


def test_tick_swallows_callback_errors() -> None:
    callback = Mock(side_effect=RuntimeError("boom"))
    task = IntervalTask("flaky", 1.0, callback)

    task.tick()
    task.tick()

    assert callback.call_count == 2
    assert task.ticks == 2


@pytest.mark.asyncio
async def test_runs_callback_every_interval() -> None:
    callback = Mock()
    task = IntervalTask("fast", 0.01, callback)

    task.start()
    await asyncio.sleep(0.1)
    await task.stop()

    assert callback.call_count >= 2
    assert task.running is False


@pytest.mark.asyncio
async def test_start_is_idempotent_and_stop_is_safe() -> None:
    task = IntervalTask("once", 10.0, Mock())

    await task.stop()
    task.start()
    first = task._task
    task.start()

    assert task._task is first
    await task.stop()


def test_global_counter_reset_once_per_tick() -> None:
    from chat_relay.adapters.rate_limit.in_memory import InMemoryAdmissionGate

    gate = InMemoryAdmissionGate(global_limit=100)
    resets = Mock(side_effect=gate.reset_global)
    task = IntervalTask("global-reset", 60.0, resets)

    for i in range(50):
        gate.admit(f"client-{i}", now=0.0)
    task.tick()

    assert resets.call_count == 1
    assert gate.global_count == 0


def test_lifespan_starts_and_stops_housekeeping(stub_llm) -> None:
    cfg = Settings(
        llm=LLMSettings(api_key="k", mock_api=False),
        app=AppSettings(sweep_interval_seconds=3600, global_reset_interval_seconds=3600),
    )
    app = create_app(cfg, llm_client=stub_llm)
    tasks = app.state.housekeeping

    assert [t.name for t in tasks] == ["admission-sweep", "global-reset"]
    with TestClient(app) as client:
        assert all(t.running for t in tasks)
        assert client.get("/").status_code == 200

    assert not any(t.running for t in tasks)


def test_housekeeping_tick_resets_app_gate(client: TestClient, app) -> None:
    client.post("/ai", json={"prompt": "hi there"})
    gate = app.state.admission_gate
    assert gate.global_count == 1

    reset_task = next(t for t in app.state.housekeeping if t.name == "global-reset")
    reset_task.tick()

    assert gate.global_count == 0
