"""
TriggerRegistry: maps visibility names to trigger classes.

The built-in ``"public"`` and ``"private"`` triggers register themselves on
import. Additional variants are discovered lazily from the
``symbiosis.triggers`` entry-point group (defined in ``pyproject.toml``).

Example:
    trigger_class = TriggerRegistry.get("private")
    trigger = trigger_for("public", closure, widget, direction=KOI)
"""

from __future__ import annotations

import logging
from importlib.metadata import entry_points
from typing import TYPE_CHECKING, Any, Callable

from symbiosis.direction import IOK

if TYPE_CHECKING:
    from symbiosis.closure import Closure
    from symbiosis.direction import Direction
    from symbiosis.events import EventCallback
    from symbiosis.trigger.base import Trigger

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "symbiosis.triggers"


class TriggerRegistry:
    """
    Registry mapping visibility names to Trigger subclasses.

    Explicit registrations win over entry points of the same name.
    """

    _triggers: dict[str, type[Trigger]] = {}
    _loaded: bool = False

    @classmethod
    def register(cls, name: str) -> Callable[[type[Trigger]], type[Trigger]]:
        """Class decorator registering a trigger class under *name*."""

        def decorator(trigger_class: type[Trigger]) -> type[Trigger]:
            cls._triggers[name] = trigger_class
            return trigger_class

        return decorator

    @classmethod
    def _ensure_loaded(cls) -> None:
        """Load all trigger entry points (once)."""
        if cls._loaded:
            return
        cls._loaded = True
        for ep in entry_points(group=ENTRY_POINT_GROUP):
            if ep.name in cls._triggers:
                continue
            try:
                cls._triggers[ep.name] = ep.load()
            except Exception:  # noqa: BLE001
                logger.warning("Failed to load trigger entry point %r", ep.name, exc_info=True)

    @classmethod
    def get(cls, name: str) -> type[Trigger] | None:
        """Get the trigger class for a visibility name, or None."""
        cls._ensure_loaded()
        return cls._triggers.get(name)

    @classmethod
    def types(cls) -> list[str]:
        """List all registered visibility names."""
        cls._ensure_loaded()
        return list(cls._triggers.keys())


def trigger_for(
    visibility: str,
    closure: Closure | Callable[..., Any] | None,
    *inner_contexts: Any,
    direction: Direction | str = IOK,
    kernel: Any = None,
    on_event: EventCallback | None = None,
) -> Trigger:
    """
    Build a trigger of the registered variant *visibility*.

    Raises:
        ValueError: If *visibility* is not registered.
        MissingClosureError: If *closure* is None.
        InvalidDirectionError: If *direction* is not a legal direction.
    """
    trigger_class = TriggerRegistry.get(visibility)
    if trigger_class is None:
        raise ValueError(
            f"Unknown trigger visibility: {visibility!r}. "
            f"Available: {TriggerRegistry.types()}"
        )
    return trigger_class(
        closure, *inner_contexts, direction=direction, kernel=kernel, on_event=on_event
    )
