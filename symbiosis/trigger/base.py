"""
Trigger: replays a closure against an ordered set of contexts.

A trigger holds three context groups:

- inner contexts: caller-supplied objects, checked in the order given;
- the outer context: the lexical ``self`` of the closure;
- the kernel context: the process-wide fallback namespace.

Every name the closure looks up on its scope is resolved by scanning
``direction.flatten(...)`` left to right and stopping at the first context
that can answer it. Which contexts "can answer" is decided by the variant's
introspector (see PublicTrigger and PrivateTrigger).

Lifecycle: constructed, used for one evaluation or one lookup, discarded.
Resolution is never cached, so a member removed from the winning context
falls through to the next context on the next lookup.
"""

from __future__ import annotations

import contextvars
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, ClassVar

from symbiosis.closure import Closure
from symbiosis.direction import IOK, ContextGroup, Direction, coerce_direction
from symbiosis.errors import UnresolvedMemberError
from symbiosis.events import EventCallback, EventEmitter
from symbiosis.introspection import MISSING, describe_context, visible_names
from symbiosis.kernel import default_kernel

if TYPE_CHECKING:
    from symbiosis.introspection import Introspector

logger = logging.getLogger(__name__)

_ACTIVE_SCOPE: contextvars.ContextVar[Scope] = contextvars.ContextVar("symbiosis_scope")


@dataclass(frozen=True)
class TraceStep:
    """
    One entry of a resolution trace (see :meth:`Trigger.explain`).

    Attributes:
        position: Index in the flattened context list.
        group: The context group the entry came from.
        context: The context object itself.
        matched: Whether the context can answer the name.
        winner: Whether this is the context resolution would pick.
    """

    position: int
    group: ContextGroup
    context: Any
    matched: bool
    winner: bool = False

    @property
    def label(self) -> str:
        return describe_context(self.context)


class Trigger(ABC):
    """
    Abstract resolver binding one closure to one context set and direction.

    Subclasses provide the visibility rule through :attr:`introspector`.
    """

    visibility: ClassVar[str] = ""

    def __init__(
        self,
        closure: Closure | Callable[..., Any] | None,
        *inner_contexts: Any,
        direction: Direction | str = IOK,
        kernel: Any = None,
        on_event: EventCallback | None = None,
    ) -> None:
        """
        Initialize the trigger.

        Args:
            closure: The deferred computation, called as ``closure(scope)``.
                Its outer context is captured here, not at run time.
            *inner_contexts: Objects checked in the INNER slot, in order.
            direction: One of the six legal directions (default IOK).
            kernel: The kernel context. Defaults to :func:`default_kernel`.
            on_event: Optional callback receiving resolution events.

        Raises:
            MissingClosureError: If *closure* is None.
            InvalidDirectionError: If *direction* is not a legal direction.
        """
        self._closure = Closure.wrap(closure)
        self._direction = coerce_direction(direction)
        self._inner_contexts = tuple(inner_contexts)
        self._outer_context = self._closure.outer
        self._kernel_context = default_kernel() if kernel is None else kernel
        self._events = EventEmitter(on_event)

        logger.debug(
            "Created %s (direction=%s, inner=%d)",
            type(self).__name__,
            self._direction.name,
            len(self._inner_contexts),
        )

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    @abstractmethod
    def introspector(self) -> Introspector:
        """Strategy deciding whether a context can answer a name."""
        ...

    @property
    def closure(self) -> Closure:
        return self._closure

    @property
    def direction(self) -> Direction:
        return self._direction

    @property
    def inner_contexts(self) -> tuple[Any, ...]:
        return self._inner_contexts

    @property
    def outer_context(self) -> Any:
        return self._outer_context

    @property
    def kernel_context(self) -> Any:
        return self._kernel_context

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def arranged_contexts(self) -> list[tuple[ContextGroup, Any]]:
        """Flattened contexts tagged with the group each came from."""
        return self._direction.arrange(
            self._inner_contexts, self._outer_context, self._kernel_context
        )

    def flattened_contexts(self) -> list[Any]:
        """All contexts in direction order."""
        return [context for _, context in self.arranged_contexts()]

    def _matched(self, name: str, group: ContextGroup, position: int, context: Any) -> None:
        logger.debug(
            "Resolved %r to %s context #%d (%s)",
            name,
            group.value,
            position,
            type(context).__qualname__,
        )
        self._events.resolved(name, context, group.value, position)

    def _unresolved(self, name: str) -> UnresolvedMemberError:
        self._events.unresolved(
            name, direction=self._direction.name, visibility=self.visibility
        )
        return UnresolvedMemberError(name, self._direction.name, self.visibility)

    def resolve(self, name: str) -> Any:
        """
        Return the first context, in direction order, that can answer *name*.

        Members found in a context's tables are not evaluated.

        Raises:
            UnresolvedMemberError: If no context matches.
        """
        for position, (group, context) in enumerate(self.arranged_contexts()):
            if self.introspector.responds_to(context, name):
                self._matched(name, group, position, context)
                return context
        raise self._unresolved(name)

    def _resolve_member(self, name: str) -> tuple[Any, Any]:
        """
        Return ``(context, member)`` for the first context answering *name*.

        Each candidate is asked once, so a property getter on the winning
        context runs exactly once and its errors propagate unchanged.
        """
        for position, (group, context) in enumerate(self.arranged_contexts()):
            found = self.introspector.lookup(context, name)
            if found is not MISSING:
                self._matched(name, group, position, context)
                return context, found
        raise self._unresolved(name)

    def responds_to(self, name: str) -> bool:
        """True if some context can answer *name*."""
        try:
            self.resolve(name)
        except UnresolvedMemberError:
            return False
        return True

    def member(self, name: str) -> Any:
        """Return the resolved member (bound method or plain value)."""
        _, found = self._resolve_member(name)
        return found

    def method_handle(self, name: str) -> Callable[..., Any]:
        """
        Resolve *name* and return a callable bound to the winning context.

        The binding is fixed now; later changes to the contexts do not
        affect the returned handle.

        Raises:
            UnresolvedMemberError: If no context matches.
            TypeError: If the resolved member is not callable.
        """
        _, handle = self._resolve_member(name)
        if not callable(handle):
            raise TypeError(
                f"{name!r} resolved to a non-callable {type(handle).__name__}"
            )
        return handle

    def call(self, name: str, *args: Any, **kwargs: Any) -> Any:
        """Resolve *name* and invoke it on the winning context."""
        return self.method_handle(name)(*args, **kwargs)

    def explain(self, name: str) -> list[TraceStep]:
        """
        Report how *name* resolves against every flattened context.

        Unlike :meth:`resolve`, the scan does not stop at the first match.
        """
        steps: list[TraceStep] = []
        found = False
        for position, (group, context) in enumerate(self.arranged_contexts()):
            matched = self.introspector.responds_to(context, name)
            steps.append(
                TraceStep(
                    position=position,
                    group=group,
                    context=context,
                    matched=matched,
                    winner=matched and not found,
                )
            )
            found = found or matched
        return steps

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def run(self) -> Any:
        """
        Call the closure with a :class:`Scope` routed through this trigger.

        Returns:
            Whatever the closure returns. Errors raised by the closure or by
            resolved members propagate unchanged.
        """
        scope = Scope(self)
        token = _ACTIVE_SCOPE.set(scope)
        try:
            result = self._closure(scope)
        finally:
            _ACTIVE_SCOPE.reset(token)
        self._events.evaluated(direction=self._direction.name, visibility=self.visibility)
        return result

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(direction={self._direction.name}, "
            f"inner={len(self._inner_contexts)})"
        )


class Scope:
    """
    The ambient scope handed to a closure.

    Attribute lookups are resolved through the owning trigger; the scope
    itself defines no public members, so it never shadows a context.
    Scopes are read-only.

    Example:
        def body(scope):
            return scope.greet("world")   # same as trigger.call("greet", "world")
    """

    __slots__ = ("__trigger",)

    def __init__(self, trigger: Trigger) -> None:
        object.__setattr__(self, "_Scope__trigger", trigger)

    def __getattr__(self, name: str) -> Any:
        return self.__trigger.member(name)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"scope is read-only; cannot set {name!r}")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"scope is read-only; cannot delete {name!r}")

    def __dir__(self) -> list[str]:
        trigger = self.__trigger
        include_restricted = trigger.introspector.include_restricted
        names: set[str] = set()
        for context in trigger.flattened_contexts():
            names |= visible_names(context, include_restricted)
        return sorted(names)

    def __repr__(self) -> str:
        trigger = self.__trigger
        return f"<Scope {trigger.visibility} {trigger.direction.name}>"


def trigger_of(scope: Scope) -> Trigger:
    """Return the trigger behind *scope*."""
    return object.__getattribute__(scope, "_Scope__trigger")


def current_scope() -> Scope:
    """
    Return the scope of the innermost running evaluation.

    Raises:
        LookupError: If called outside an evaluation.
    """
    return _ACTIVE_SCOPE.get()
