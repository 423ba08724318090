"""Registry of grid feature modules and plugin discovery."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from importlib import metadata
from typing import TYPE_CHECKING, cast

from gridflow.core.events import Stage
from gridflow.core.modules.base import GridModule
from gridflow.core.utils import get_logger

if TYPE_CHECKING:  # pragma: no cover - import for type checking only
    from gridflow.core.context import GridContext

logger = get_logger(__name__)

ALLOWED_MODULE_TAGS = frozenset({"local", "remote", "ui"})


def _iter_entry_points(group: str) -> Iterator[metadata.EntryPoint]:
    eps = metadata.entry_points()
    if hasattr(eps, "select"):
        selected = eps.select(group=group)
        return iter(selected)

    if isinstance(eps, dict):
        legacy = eps.get(group, ())
    else:
        legacy = ()

    return iter(cast(Iterable[metadata.EntryPoint], legacy))


@dataclass(frozen=True, slots=True)
class ModuleSpec:
    """Descriptor for a registered grid module."""

    name: str
    cls: type[GridModule]
    tags: frozenset[str] = field(default_factory=frozenset)
    description: str | None = None

    @property
    def stage(self) -> Stage:
        return self.cls.stage


class ModuleRegistry:
    """In-memory registry for grid modules."""

    entry_point_group = "gridflow.modules"

    def __init__(self) -> None:
        self._registry: dict[str, ModuleSpec] = {}

    def register(
        self,
        name: str,
        module_cls: type[GridModule],
        *,
        tags: Iterable[str] | None = None,
        description: str | None = None,
    ) -> ModuleSpec:
        """Register a module class under *name* and return the spec."""
        if name in self._registry:
            raise ValueError(f"Module already registered: {name}")
        if not issubclass(module_cls, GridModule):
            raise TypeError("Only GridModule subclasses can be registered")

        normalised_tags = frozenset(tags or ())
        invalid_tags = normalised_tags - ALLOWED_MODULE_TAGS
        if invalid_tags:
            raise ValueError(f"Unsupported module tags: {sorted(invalid_tags)}")

        spec = ModuleSpec(
            name=name,
            cls=module_cls,
            tags=normalised_tags,
            description=description,
        )
        self._registry[name] = spec
        logger.debug("Registered module %s at stage %s", name, module_cls.stage.name)
        return spec

    def decorator(
        self,
        name: str,
        *,
        tags: Iterable[str] | None = None,
        description: str | None = None,
    ) -> Callable[[type[GridModule]], type[GridModule]]:
        """Decorator for registering a GridModule subclass."""

        def wrapper(module_cls: type[GridModule]) -> type[GridModule]:
            self.register(name, module_cls, tags=tags, description=description)
            return module_cls

        return wrapper

    def load_entry_points(self) -> None:
        """Discover and register external modules via Python entry points."""

        for ep in _iter_entry_points(self.entry_point_group):
            try:
                loader = ep.load()
            except Exception as exc:  # pragma: no cover - broken plugin
                logger.error("Failed to load entry point %s: %s", ep.name, exc)
                continue

            if callable(loader):
                loader(self)
            else:  # pragma: no cover - broken plugin
                logger.warning("Entry point %s did not return a callable; skipping", ep.name)

    def get(self, name: str) -> ModuleSpec:
        """Return the module specification for *name* or raise KeyError."""
        return self._registry[name]

    def __contains__(self, name: object) -> bool:
        return name in self._registry

    def list(self, *, tag: str | None = None) -> list[ModuleSpec]:
        """List registered module specs in stage order, optionally filtered by *tag*."""
        specs = sorted(self._registry.values(), key=lambda spec: spec.stage)
        if tag is None:
            return specs
        return [spec for spec in specs if tag in spec.tags]

    def create(self, name: str, context: GridContext) -> GridModule:
        """Instantiate the module identified by *name* for *context*."""
        spec = self.get(name)
        instance = spec.cls(context)
        logger.debug("Instantiated module %s", name)
        return instance


def default_registry() -> ModuleRegistry:
    """Registry holding the built-in modules plus any installed plugins."""
    from gridflow.core.modules.registration import register_builtin_modules

    registry = ModuleRegistry()
    register_builtin_modules(registry)
    registry.load_entry_points()
    return registry
