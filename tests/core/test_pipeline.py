"""Tests for the auxiliary data pipeline."""

from __future__ import annotations

import asyncio
from typing import Any

import httpx
import pytest

from gridflow.core.collaborators import LoggingNotifier
from gridflow.core.persistence import DataStore
from gridflow.core.pipeline import DataPipeline
from gridflow.core.transport import DataLoader


class FakeFetcher:
    """Serves payloads by locator; exceptions in the table are raised."""

    def __init__(self, payloads: dict[str, Any]) -> None:
        self.payloads = payloads
        self.fetched: list[str] = []

    async def __call__(self, locator: str) -> Any:
        self.fetched.append(locator)
        result = self.payloads[locator]
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture()
def fetcher() -> FakeFetcher:
    return FakeFetcher(
        {
            "http://test/default": [{"id": 1}],
            "http://test/states": {"ca": "California"},
            "http://test/down": httpx.ConnectError("connection refused"),
            "http://test/garbage": ValueError("Expecting value"),
        }
    )


def test_steps_run_in_order_with_default_locator(
    fetcher: FakeFetcher, notifier: LoggingNotifier
) -> None:
    pipeline = DataPipeline(fetcher, notifier, default_locator="http://test/default")
    received: list[tuple[str, Any]] = []
    pipeline.add_step("init", lambda payload: received.append(("rows", payload)))
    pipeline.add_step(
        "init", lambda payload: received.append(("states", payload)), "http://test/states"
    )

    asyncio.run(pipeline.execute("init"))

    assert fetcher.fetched == ["http://test/default", "http://test/states"]
    assert received == [("rows", [{"id": 1}]), ("states", {"ca": "California"})]
    assert notifier.messages == []


def test_duplicate_step_is_skipped(fetcher: FakeFetcher, notifier: LoggingNotifier) -> None:
    pipeline = DataPipeline(fetcher, notifier, default_locator="http://test/default")
    store = DataStore()

    result = pipeline.add_step("init", store.set_data).add_step("init", store.set_data)

    assert result is pipeline
    assert pipeline.count_steps("init") == 1
    asyncio.run(pipeline.execute("init"))
    assert store.data == [{"id": 1}]


def test_same_callback_may_serve_different_events(
    fetcher: FakeFetcher, notifier: LoggingNotifier
) -> None:
    pipeline = DataPipeline(fetcher, notifier, default_locator="http://test/default")
    store = DataStore()
    pipeline.add_step("init", store.set_data)
    pipeline.add_step("refresh", store.set_data)

    assert pipeline.has_pipeline("init")
    assert pipeline.has_pipeline("refresh")
    assert not pipeline.has_pipeline("other")
    assert pipeline.count_steps("other") == 0


@pytest.mark.parametrize(
    "locator, message",
    [
        ("http://test/down", "connection refused"),
        ("http://test/garbage", "Expecting value"),
    ],
)
def test_failure_stops_remaining_steps_and_notifies(
    fetcher: FakeFetcher, notifier: LoggingNotifier, locator: str, message: str
) -> None:
    pipeline = DataPipeline(fetcher, notifier)
    received: list[str] = []
    pipeline.add_step("init", lambda _: received.append("first"), "http://test/states")
    pipeline.add_step("init", lambda _: received.append("broken"), locator)
    pipeline.add_step("init", lambda _: received.append("never"), "http://test/default")

    asyncio.run(pipeline.execute("init"))

    assert received == ["first"]
    assert fetcher.fetched == ["http://test/states", locator]
    assert notifier.messages == [message]


def test_status_error_is_reported_as_status_and_reason(make_client, notifier) -> None:
    client = make_client(lambda request: httpx.Response(503))
    loader = DataLoader(notifier, client=client)
    pipeline = DataPipeline(loader.fetch_json, notifier)
    received: list[Any] = []
    pipeline.add_step("refresh", received.append, "http://test/rows")

    async def scenario() -> None:
        await pipeline.execute("refresh")
        await loader.aclose()

    asyncio.run(scenario())

    assert received == []
    assert notifier.messages == ["503: Service Unavailable"]


def test_execute_unknown_event_is_noop(fetcher: FakeFetcher, notifier: LoggingNotifier) -> None:
    pipeline = DataPipeline(fetcher, notifier)

    asyncio.run(pipeline.execute("init"))

    assert fetcher.fetched == []


def test_failing_callback_stops_remaining_steps_and_notifies(
    fetcher: FakeFetcher, notifier: LoggingNotifier
) -> None:
    pipeline = DataPipeline(fetcher, notifier, default_locator="http://test/default")
    received: list[str] = []

    def reject(payload: Any) -> None:
        raise TypeError("'dict' object is not a list")

    pipeline.add_step("init", reject, "http://test/states")
    pipeline.add_step("init", lambda _: received.append("never"))

    asyncio.run(pipeline.execute("init"))

    assert received == []
    assert fetcher.fetched == ["http://test/states"]
    assert notifier.messages == [
        "Unusable data from http://test/states: 'dict' object is not a list"
    ]
