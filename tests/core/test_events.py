"""Tests for the event bus."""

import asyncio

from gridflow.core.events import EventBus, Stage


def test_subscribers_run_in_stage_order() -> None:
    bus = EventBus()
    calls: list[str] = []
    bus.subscribe("render", lambda: calls.append("observe"), priority=Stage.OBSERVE)
    bus.subscribe("render", lambda: calls.append("filter"), priority=Stage.FILTER)
    bus.subscribe("render", lambda: calls.append("page"), priority=Stage.PAGE)
    bus.subscribe("render", lambda: calls.append("sort"), priority=Stage.SORT)

    asyncio.run(bus.trigger("render"))

    assert calls == ["filter", "sort", "page", "observe"]


def test_equal_priorities_keep_subscription_order() -> None:
    bus = EventBus()
    calls: list[int] = []
    for i in range(4):
        bus.subscribe("render", lambda i=i: calls.append(i), priority=5)

    asyncio.run(bus.trigger("render"))

    assert calls == [0, 1, 2, 3]
    assert [entry.priority for entry in bus.subscribers("render")] == [5, 5, 5, 5]


def test_trigger_passes_arguments() -> None:
    bus = EventBus()
    seen: list[tuple[int, str]] = []
    bus.subscribe("page", lambda number, label: seen.append((number, label)))

    asyncio.run(bus.trigger("page", 3, "three"))

    assert seen == [(3, "three")]


def test_trigger_without_subscribers_is_noop() -> None:
    bus = EventBus()

    assert asyncio.run(bus.trigger("missing")) is None
    assert not bus.has_subscribers("missing")


def test_async_subscriber_finishes_before_next_starts() -> None:
    bus = EventBus()
    calls: list[str] = []

    async def slow() -> None:
        await asyncio.sleep(0.01)
        calls.append("slow")

    bus.subscribe("render", slow, is_async=True, priority=1)
    bus.subscribe("render", lambda: calls.append("after"), priority=2)

    asyncio.run(bus.trigger("render"))

    assert calls == ["slow", "after"]


def test_awaitable_from_sync_subscriber_is_scheduled_not_awaited() -> None:
    bus = EventBus()
    calls: list[str] = []

    async def background() -> None:
        calls.append("background")

    bus.subscribe("render", lambda: background())
    bus.subscribe("render", lambda: calls.append("sync"))

    async def scenario() -> None:
        await bus.trigger("render")
        assert calls == ["sync"]
        await asyncio.sleep(0)
        assert calls == ["sync", "background"]

    asyncio.run(scenario())


def test_chain_folds_value_through_subscribers_in_order() -> None:
    bus = EventBus()
    bus.subscribe("remoteParams", lambda params: {**params, "page": 1}, priority=Stage.PAGE)
    bus.subscribe("remoteParams", lambda params: {**params, "state": "ca"}, priority=Stage.FILTER)
    bus.subscribe("numbers", lambda n: n + 1, priority=1)
    bus.subscribe("numbers", lambda n: n * 2, priority=2)

    params = bus.chain("remoteParams", {"tenant": 7})

    assert params == {"tenant": 7, "state": "ca", "page": 1}
    assert list(params) == ["tenant", "state", "page"]
    assert bus.chain("numbers", 3) == 8


def test_chain_without_subscribers_returns_none() -> None:
    assert EventBus().chain("remoteParams", {"a": 1}) is None


def test_unsubscribe_removes_handler_by_identity() -> None:
    bus = EventBus()
    calls: list[str] = []

    def first() -> None:
        calls.append("first")

    def second() -> None:
        calls.append("second")

    bus.subscribe("render", first)
    bus.subscribe("render", second)
    bus.unsubscribe("render", first)
    bus.unsubscribe("other", first)

    asyncio.run(bus.trigger("render"))

    assert calls == ["second"]


def test_nested_trigger_of_same_event_runs_inline() -> None:
    bus = EventBus()
    levels: list[int] = []

    async def handler(level: int) -> None:
        levels.append(level)
        if level < 2:
            await bus.trigger("render", level + 1)

    bus.subscribe("render", handler, is_async=True)

    asyncio.run(bus.trigger("render", 0))

    assert levels == [0, 1, 2]


def test_concurrent_triggers_of_same_event_are_serialized() -> None:
    bus = EventBus()
    calls: list[str] = []

    async def handler(tag: str) -> None:
        calls.append(f"start {tag}")
        await asyncio.sleep(0)
        calls.append(f"end {tag}")

    bus.subscribe("render", handler, is_async=True)

    async def scenario() -> None:
        await asyncio.gather(bus.trigger("render", "a"), bus.trigger("render", "b"))

    asyncio.run(scenario())

    assert calls == ["start a", "end a", "start b", "end b"]
