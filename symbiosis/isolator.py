"""
Isolator: one closure, evaluated lazily against many context sets.

The isolator captures the closure (and its outer context) once, together
with a default direction, and builds a fresh trigger per call.

Example:
    render = Isolator(lambda scope: scope.title(), direction=symbiosis.OIK)
    render.evaluate(page)
    render.evaluate(other_page, direction=symbiosis.IOK)

    @isolate(direction=symbiosis.KOI)
    def describe(scope):
        return scope.describe()

    describe(widget)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable

from symbiosis.closure import Closure
from symbiosis.direction import IOK, Direction, coerce_direction
from symbiosis.errors import MissingClosureError
from symbiosis.trigger import TriggerRegistry, trigger_for

if TYPE_CHECKING:
    from symbiosis.events import EventCallback
    from symbiosis.trigger import PrivateTrigger, PublicTrigger, Trigger

logger = logging.getLogger(__name__)


class Isolator:
    """
    Reusable wrapper around one closure and one default direction.

    Calling the isolator directly runs it with its default visibility
    (``"public"`` unless configured otherwise).
    """

    def __init__(
        self,
        closure: Closure | Callable[..., Any] | None = None,
        *,
        direction: Direction | str = IOK,
        visibility: str = "public",
        kernel: Any = None,
        on_event: EventCallback | None = None,
    ) -> None:
        """
        Initialize the isolator.

        Args:
            closure: The deferred computation; its outer context is captured now.
            direction: Default direction for every call.
            visibility: Default trigger variant used by ``__call__``.
            kernel: Kernel context override.
            on_event: Optional resolution event callback.

        Raises:
            MissingClosureError: If *closure* is None.
            InvalidDirectionError: If *direction* is not legal.
            ValueError: If *visibility* is not a registered trigger variant.
        """
        if closure is None:
            raise MissingClosureError()
        if TriggerRegistry.get(visibility) is None:
            raise ValueError(
                f"Unknown trigger visibility: {visibility!r}. "
                f"Available: {TriggerRegistry.types()}"
            )
        self._closure = Closure.wrap(closure)
        self._default_direction = coerce_direction(direction)
        self._visibility = visibility
        self._kernel = kernel
        self._on_event = on_event

    @classmethod
    def from_config(
        cls,
        closure: Closure | Callable[..., Any] | None,
        profile: str | None = None,
        start_dir: Path | None = None,
        on_event: EventCallback | None = None,
    ) -> Isolator:
        """
        Build an isolator from ``.symbiosis.toml`` settings.

        Uses built-in defaults when no config file exists.
        """
        from symbiosis.config import resolve_settings

        resolved = resolve_settings(profile, start_dir)
        logger.debug(
            "Isolator from config (profile=%s, direction=%s, visibility=%s)",
            resolved.profile_name,
            resolved.direction.name,
            resolved.visibility,
        )
        return cls(
            closure,
            direction=resolved.direction,
            visibility=resolved.visibility,
            kernel=resolved.kernel,
            on_event=on_event,
        )

    @property
    def closure(self) -> Closure:
        return self._closure

    @property
    def default_direction(self) -> Direction:
        return self._default_direction

    @property
    def visibility(self) -> str:
        return self._visibility

    # ------------------------------------------------------------------
    # Trigger factories
    # ------------------------------------------------------------------

    def trigger(
        self,
        *inner_contexts: Any,
        direction: Direction | str | None = None,
        visibility: str | None = None,
    ) -> Trigger:
        """Build a fresh trigger for the stored closure."""
        return trigger_for(
            visibility or self._visibility,
            self._closure,
            *inner_contexts,
            direction=self._default_direction if direction is None else direction,
            kernel=self._kernel,
            on_event=self._on_event,
        )

    def public_trigger(
        self, *inner_contexts: Any, direction: Direction | str | None = None
    ) -> PublicTrigger:
        return self.trigger(*inner_contexts, direction=direction, visibility="public")  # type: ignore[return-value]

    def private_trigger(
        self, *inner_contexts: Any, direction: Direction | str | None = None
    ) -> PrivateTrigger:
        return self.trigger(*inner_contexts, direction=direction, visibility="private")  # type: ignore[return-value]

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def evaluate(
        self, *inner_contexts: Any, direction: Direction | str | None = None
    ) -> Any:
        """Run the closure against the contexts (public members only)."""
        return self.public_trigger(*inner_contexts, direction=direction).run()

    def evaluate_private(
        self, *inner_contexts: Any, direction: Direction | str | None = None
    ) -> Any:
        """Run the closure against the contexts (public and restricted members)."""
        return self.private_trigger(*inner_contexts, direction=direction).run()

    def public_method(
        self, name: str, *inner_contexts: Any, direction: Direction | str | None = None
    ) -> Callable[..., Any]:
        """Return the public member *name* bound to the winning context."""
        return self.public_trigger(*inner_contexts, direction=direction).method_handle(name)

    def private_method(
        self, name: str, *inner_contexts: Any, direction: Direction | str | None = None
    ) -> Callable[..., Any]:
        """Return the member *name* (public or restricted) bound to the winning context."""
        return self.private_trigger(*inner_contexts, direction=direction).method_handle(name)

    def __call__(
        self, *inner_contexts: Any, direction: Direction | str | None = None
    ) -> Any:
        return self.trigger(*inner_contexts, direction=direction).run()

    def __repr__(self) -> str:
        return (
            f"Isolator({self._closure.fn!r}, direction={self._default_direction.name}, "
            f"visibility={self._visibility!r})"
        )


def isolate(
    closure: Callable[..., Any] | None = None,
    *,
    direction: Direction | str = IOK,
    visibility: str = "public",
    kernel: Any = None,
) -> Any:
    """
    Decorator turning a function into an :class:`Isolator`.

    Supports both ``@isolate`` and ``@isolate(direction=KOI)``.
    """

    def decorator(fn: Callable[..., Any]) -> Isolator:
        return Isolator(fn, direction=direction, visibility=visibility, kernel=kernel)

    if closure is not None:
        return decorator(closure)
    return decorator
