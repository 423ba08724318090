"""Named-event bus used to sequence grid modules around a render cycle."""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Callable
from contextvars import ContextVar
from dataclasses import dataclass
from enum import IntEnum
from typing import Any

from gridflow.core.utils import get_logger

logger = get_logger(__name__)

Handler = Callable[..., Any]

# Events currently being triggered by the running task chain.
_active_events: ContextVar[frozenset[str]] = ContextVar(
    "gridflow_active_events", default=frozenset()
)


class Stage(IntEnum):
    """
    Ordered slots a module can occupy within one render cycle.

    Filtering must see the full snapshot, sorting must only see rows that
    survived filtering, paging/row drawing slices the sorted rows and
    observers read what was drawn.
    """

    FILTER = 10
    SORT = 20
    PAGE = 30
    OBSERVE = 40

    def __str__(self) -> str:  # pragma: no cover - trivial wrapper
        return self.name.lower()


@dataclass(frozen=True, slots=True)
class Subscription:
    """A handler registered for an event."""

    handler: Handler
    priority: int = 0
    is_async: bool = False


class EventBus:
    """
    Publish/subscribe hub with priority ordering.

    Subscribers run in ascending priority; equal priorities keep their
    subscription order. ``trigger`` awaits async subscribers one at a time so
    that later subscribers observe the effects of earlier ones, while
    ``chain`` folds a value through every subscriber synchronously.
    """

    def __init__(self) -> None:
        self._events: dict[str, list[Subscription]] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        self._background: set[asyncio.Future[Any]] = set()

    def subscribe(
        self,
        event: str,
        handler: Handler,
        is_async: bool = False,
        priority: int | Stage = 0,
    ) -> Subscription:
        """Register *handler* for *event* and return the stored subscription."""
        subscription = Subscription(handler=handler, priority=int(priority), is_async=is_async)
        entries = self._events.setdefault(event, [])
        entries.append(subscription)
        # list.sort is stable, so equal priorities stay in insertion order
        entries.sort(key=lambda entry: entry.priority)
        logger.debug(
            "Subscribed %s to %s at priority %d",
            getattr(handler, "__qualname__", repr(handler)),
            event,
            subscription.priority,
        )
        return subscription

    def unsubscribe(self, event: str, handler: Handler) -> None:
        """Remove every subscription of *handler* (compared by identity) from *event*."""
        entries = self._events.get(event)
        if not entries:
            return
        self._events[event] = [entry for entry in entries if entry.handler is not handler]

    def subscribers(self, event: str) -> tuple[Subscription, ...]:
        """Return the subscriptions for *event* in invocation order."""
        return tuple(self._events.get(event, ()))

    def has_subscribers(self, event: str) -> bool:
        return bool(self._events.get(event))

    async def trigger(self, event: str, *args: Any) -> None:
        """
        Invoke every subscriber of *event* in stored order.

        Async subscribers are awaited before the next subscriber starts.
        Concurrent top-level triggers of the same event are queued behind
        each other; a handler that re-triggers its own event runs inline.
        """
        if not self._events.get(event):
            return

        active = _active_events.get()
        if event in active:
            await self._dispatch(event, args)
            return

        lock = self._locks.setdefault(event, asyncio.Lock())
        async with lock:
            token = _active_events.set(active | {event})
            try:
                await self._dispatch(event, args)
            finally:
                _active_events.reset(token)

    async def _dispatch(self, event: str, args: tuple[Any, ...]) -> None:
        for entry in list(self._events.get(event, ())):
            result = entry.handler(*args)
            if not inspect.isawaitable(result):
                continue
            if entry.is_async:
                await result
            else:
                self._schedule(result)

    def _schedule(self, awaitable: Awaitable[Any]) -> None:
        # Fire-and-forget awaitables from handlers subscribed as synchronous.
        future = asyncio.ensure_future(awaitable)
        self._background.add(future)
        future.add_done_callback(self._background.discard)

    def chain(self, event: str, initial_value: Any) -> Any:
        """
        Thread *initial_value* through every subscriber of *event*.

        Each subscriber receives the previous subscriber's return value.
        Returns None when the event has no subscribers.
        """
        entries = self._events.get(event)
        if not entries:
            return None

        value = initial_value
        for entry in list(entries):
            value = entry.handler(value)
        return value

    def __repr__(self) -> str:
        """String representation."""
        counts = {event: len(entries) for event, entries in self._events.items()}
        return f"EventBus({counts})"
