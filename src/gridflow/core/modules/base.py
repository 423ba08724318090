"""Base class for grid feature modules."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, ClassVar

from gridflow.core.events import Stage

if TYPE_CHECKING:  # pragma: no cover - import for type checking only
    from gridflow.core.context import GridContext


class GridModule(ABC):
    """
    A feature plugged into a grid's event bus.

    A module owns one stage of the render cycle. ``initialize`` subscribes
    its handlers, either to ``render`` for local processing or to
    ``remoteParams`` when a server filters, sorts and pages the data.
    """

    name: ClassVar[str] = ""
    stage: ClassVar[Stage] = Stage.OBSERVE

    def __init__(self, context: GridContext) -> None:
        self.context = context
        self.settings = context.settings

    @property
    def remote(self) -> bool:
        return self.settings.remote_processing

    @abstractmethod
    def initialize(self) -> None:
        """Subscribe the module's handlers."""
        raise NotImplementedError

    def remote_params(self, params: dict[str, Any]) -> dict[str, Any]:
        """Contribute this module's query parameters when processing remotely."""
        return params

    def __repr__(self) -> str:
        """String representation."""
        return f"{self.__class__.__name__}(stage={self.stage.name.lower()})"
