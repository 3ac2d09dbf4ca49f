"""
Closure: a deferred computation paired with its outer context.

Python closures do not carry their defining ``self`` implicitly, so the
outer context is either given explicitly or inferred once, when the
closure is wrapped:

1. an explicit ``outer`` argument;
2. the ``__self__`` of a bound method;
3. a free variable named ``self`` captured by the function;
4. the module the function was defined in;
5. an empty namespace.

Example:
    class Page:
        name = "home"

        def title(self):
            return "Home"

        def render(self, widget):
            def body(scope):
                # `self` is a free variable here, so it becomes the outer context
                return f"{self.name}: {scope.label()}"

            return symbiosis.evaluate(body, widget)

    # Or pair explicitly:
    symbiosis.evaluate(Closure(lambda scope: scope.title(), outer=page), widget)
"""

from __future__ import annotations

import functools
import sys
import types
from dataclasses import dataclass, field
from typing import Any, Callable

from symbiosis.errors import MissingClosureError


class _Unset:
    def __repr__(self) -> str:
        return "<unset>"


UNSET: Any = _Unset()


def infer_outer(fn: Callable[..., Any]) -> Any:
    """
    Infer the lexical ``self`` of *fn* (see module docstring for order).

    ``functools.partial`` objects are unwrapped to the function they call.
    """
    while isinstance(fn, functools.partial):
        fn = fn.func

    bound_self = getattr(fn, "__self__", None)
    if bound_self is not None and not isinstance(bound_self, types.ModuleType):
        return bound_self

    code = getattr(fn, "__code__", None)
    cells = getattr(fn, "__closure__", None)
    if code is not None and cells:
        for var_name, cell in zip(code.co_freevars, cells):
            if var_name == "self":
                try:
                    return cell.cell_contents
                except ValueError:
                    # Empty cell: `self` not yet bound in the enclosing scope
                    break

    module = sys.modules.get(getattr(fn, "__module__", None) or "")
    if module is not None:
        return module

    return types.SimpleNamespace()


@dataclass(frozen=True)
class Closure:
    """
    A callable plus the object it should treat as its outer context.

    Attributes:
        fn: The deferred computation, called as ``fn(scope)``.
        outer: The outer context. Inferred from *fn* when omitted.
    """

    fn: Callable[..., Any]
    outer: Any = field(default=UNSET)

    def __post_init__(self) -> None:
        if self.fn is None:
            raise MissingClosureError()
        if not callable(self.fn):
            raise TypeError(f"closure must be callable, got {type(self.fn).__name__}")
        if self.outer is UNSET:
            object.__setattr__(self, "outer", infer_outer(self.fn))

    @classmethod
    def wrap(cls, value: Closure | Callable[..., Any] | None) -> Closure:
        """
        Return *value* as a Closure, capturing its outer context now.

        Raises:
            MissingClosureError: If *value* is None.
        """
        if value is None:
            raise MissingClosureError()
        if isinstance(value, Closure):
            return value
        return cls(value)

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        return self.fn(*args, **kwargs)
