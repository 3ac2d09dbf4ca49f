"""
Context mixin: give any class the ability to evaluate closures in itself.

Example:
    class Form(symbiosis.context_mixin(symbiosis.OIK)):
        def field(self, name):
            ...

    form = Form()
    form.evaluate(lambda scope: scope.field("email"))
    form.evaluate_private(body, direction=symbiosis.IOK)

Every method forwards to :class:`~symbiosis.executor.Executor` with the
adopting object as the single inner context.
"""

from __future__ import annotations

from typing import Any, Callable

from symbiosis.direction import IOK, Direction, coerce_direction
from symbiosis.executor import Executor


def context_mixin(direction: Direction | str = IOK) -> type:
    """
    Build a mixin class bound to a default *direction*.

    Raises:
        InvalidDirectionError: If *direction* is not legal.
    """
    default_direction = coerce_direction(direction)

    def _direction(override: Direction | str | None) -> Direction | str:
        return default_direction if override is None else override

    class ContextMixin:
        __slots__ = ()

        def evaluate(
            self,
            closure: Callable[..., Any] | None = None,
            direction: Direction | str | None = None,
        ) -> Any:
            return Executor.evaluate(closure, self, direction=_direction(direction))

        def evaluate_private(
            self,
            closure: Callable[..., Any] | None = None,
            direction: Direction | str | None = None,
        ) -> Any:
            return Executor.evaluate_private(closure, self, direction=_direction(direction))

        def public_method(
            self,
            name: str,
            closure: Callable[..., Any] | None = None,
            direction: Direction | str | None = None,
        ) -> Callable[..., Any]:
            return Executor.public_method(name, closure, self, direction=_direction(direction))

        def private_method(
            self,
            name: str,
            closure: Callable[..., Any] | None = None,
            direction: Direction | str | None = None,
        ) -> Callable[..., Any]:
            return Executor.private_method(name, closure, self, direction=_direction(direction))

    ContextMixin.__name__ = ContextMixin.__qualname__ = f"Context[{default_direction.name}]"
    ContextMixin.default_direction = default_direction  # type: ignore[attr-defined]
    return ContextMixin


Context = context_mixin()
