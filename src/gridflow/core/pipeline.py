"""Sequential retrieval of remote auxiliary data, grouped by event."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

import httpx

from gridflow.core.collaborators import Notifier
from gridflow.core.utils import get_logger

logger = get_logger(__name__)

Fetcher = Callable[[str], Awaitable[Any]]
StepCallback = Callable[[Any], Any]


@dataclass(frozen=True, slots=True)
class PipelineStep:
    """A resource to fetch and the callback that receives its payload."""

    locator: str
    callback: StepCallback


class DataPipeline:
    """
    Named, ordered lists of fetch steps.

    Steps for an event run one after another: each locator is fetched and
    the decoded payload handed to its callback before the next fetch
    starts. The first failure stops the remaining steps of that event and is
    reported through the notifier; nothing is retried.
    """

    def __init__(self, fetch: Fetcher, notifier: Notifier, default_locator: str = "") -> None:
        """
        Initialize a pipeline.

        Args:
            fetch: Coroutine function returning the decoded payload of a locator
            notifier: User-visible channel for failures
            default_locator: Locator used by steps registered without one
        """
        self._fetch = fetch
        self.notifier = notifier
        self.default_locator = default_locator
        self._events: dict[str, list[PipelineStep]] = {}

    def add_step(self, event: str, callback: StepCallback, locator: str = "") -> "DataPipeline":
        """
        Append a step to *event*.

        Args:
            event: Event name the step belongs to
            callback: Receives the decoded payload
            locator: Resource to fetch; falls back to the default locator

        Returns:
            Self for chaining
        """
        steps = self._events.setdefault(event, [])
        if any(step.callback == callback for step in steps):
            logger.warning("Skipping duplicate pipeline step for event %s", event)
            return self

        steps.append(PipelineStep(locator=locator or self.default_locator, callback=callback))
        logger.debug("Added pipeline step %d for event %s", len(steps), event)
        return self

    async def execute(self, event: str) -> None:
        """Run every step registered for *event* in order."""
        steps = self._events.get(event)
        if not steps:
            return

        logger.info("Executing %d pipeline steps for %s", len(steps), event)
        for i, step in enumerate(list(steps), 1):
            try:
                payload = await self._fetch(step.locator)
            except httpx.HTTPStatusError as exc:
                response = exc.response
                message = f"{response.status_code}: {response.reason_phrase}"
            except (httpx.HTTPError, httpx.InvalidURL, ValueError) as exc:
                message = str(exc) or type(exc).__name__
            else:
                try:
                    step.callback(payload)
                except (TypeError, ValueError, KeyError) as exc:
                    message = f"Unusable data from {step.locator}: {exc}"
                else:
                    continue

            logger.error(
                "Pipeline step %d/%d for %s failed (%s); skipping the rest",
                i,
                len(steps),
                event,
                message,
            )
            self.notifier.notify(message)
            break

    def has_pipeline(self, event: str) -> bool:
        return bool(self._events.get(event))

    def count_steps(self, event: str) -> int:
        return len(self._events.get(event, ()))

    def __repr__(self) -> str:
        """String representation."""
        counts = {event: len(steps) for event, steps in self._events.items()}
        return f"DataPipeline({counts})"
