"""
Executor: stateless entry point for evaluating closures in many contexts.

Each operation builds a fresh trigger, uses it once and drops it; nothing
survives a call.

Example:
    import symbiosis

    class Greeter:
        def greet(self):
            return "hello"

    symbiosis.evaluate(lambda scope: scope.greet(), Greeter())            # "hello"
    handle = symbiosis.public_method("greet", lambda scope: None, Greeter())
    handle()                                                              # "hello"
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable

from symbiosis.direction import IOK
from symbiosis.trigger import trigger_for

if TYPE_CHECKING:
    from symbiosis.closure import Closure
    from symbiosis.direction import Direction
    from symbiosis.events import EventCallback
    from symbiosis.trigger import PrivateTrigger, PublicTrigger


class Executor:
    """
    Factory for triggers and mediator for running them.

    All methods take the closure first, then any number of inner contexts,
    then keyword options:

    - direction: one of the six directions (default IOK)
    - kernel: kernel context override (default ``builtins``)
    - on_event: optional resolution event callback
    """

    @classmethod
    def public_trigger(
        cls,
        closure: Closure | Callable[..., Any] | None,
        *inner_contexts: Any,
        direction: Direction | str = IOK,
        kernel: Any = None,
        on_event: EventCallback | None = None,
    ) -> PublicTrigger:
        """Build a PublicTrigger without running it."""
        return trigger_for(
            "public",
            closure,
            *inner_contexts,
            direction=direction,
            kernel=kernel,
            on_event=on_event,
        )  # type: ignore[return-value]

    @classmethod
    def private_trigger(
        cls,
        closure: Closure | Callable[..., Any] | None,
        *inner_contexts: Any,
        direction: Direction | str = IOK,
        kernel: Any = None,
        on_event: EventCallback | None = None,
    ) -> PrivateTrigger:
        """Build a PrivateTrigger without running it."""
        return trigger_for(
            "private",
            closure,
            *inner_contexts,
            direction=direction,
            kernel=kernel,
            on_event=on_event,
        )  # type: ignore[return-value]

    @classmethod
    def evaluate(
        cls,
        closure: Closure | Callable[..., Any] | None,
        *inner_contexts: Any,
        direction: Direction | str = IOK,
        kernel: Any = None,
        on_event: EventCallback | None = None,
    ) -> Any:
        """
        Run *closure* against the contexts, considering public members only.

        Returns:
            The closure's return value.

        Raises:
            MissingClosureError: If *closure* is None.
            InvalidDirectionError: If *direction* is not legal.
            UnresolvedMemberError: If the closure looks up a name no context
                can answer.
        """
        trigger = cls.public_trigger(
            closure, *inner_contexts, direction=direction, kernel=kernel, on_event=on_event
        )
        return trigger.run()

    @classmethod
    def evaluate_private(
        cls,
        closure: Closure | Callable[..., Any] | None,
        *inner_contexts: Any,
        direction: Direction | str = IOK,
        kernel: Any = None,
        on_event: EventCallback | None = None,
    ) -> Any:
        """Like :meth:`evaluate`, but restricted members are reachable too."""
        trigger = cls.private_trigger(
            closure, *inner_contexts, direction=direction, kernel=kernel, on_event=on_event
        )
        return trigger.run()

    @classmethod
    def public_method(
        cls,
        name: str,
        closure: Closure | Callable[..., Any] | None,
        *inner_contexts: Any,
        direction: Direction | str = IOK,
        kernel: Any = None,
        on_event: EventCallback | None = None,
    ) -> Callable[..., Any]:
        """
        Return the public member *name* bound to the winning context.

        The closure is never invoked; it only supplies the outer context.
        """
        trigger = cls.public_trigger(
            closure, *inner_contexts, direction=direction, kernel=kernel, on_event=on_event
        )
        return trigger.method_handle(name)

    @classmethod
    def private_method(
        cls,
        name: str,
        closure: Closure | Callable[..., Any] | None,
        *inner_contexts: Any,
        direction: Direction | str = IOK,
        kernel: Any = None,
        on_event: EventCallback | None = None,
    ) -> Callable[..., Any]:
        """Like :meth:`public_method`, but restricted members are reachable too."""
        trigger = cls.private_trigger(
            closure, *inner_contexts, direction=direction, kernel=kernel, on_event=on_event
        )
        return trigger.method_handle(name)


evaluate = Executor.evaluate
evaluate_private = Executor.evaluate_private
public_method = Executor.public_method
private_method = Executor.private_method
