"""
symbiosis: evaluate a closure as if it were written against other objects.

A closure is replayed against an ordered set of contexts: caller-supplied
inner contexts, the closure's own outer context, and the kernel
(``builtins``). A Direction picks the order of those three groups; the first
context that can answer a name wins.

Example:
    import symbiosis

    class Html:
        def tag(self, name, text):
            return f"<{name}>{text}</{name}>"

    class Page:
        def title(self):
            return "Home"

        def render(self):
            def body(scope):
                return scope.tag("h1", self.title())

            return symbiosis.evaluate(body, Html())

    Page().render()  # "<h1>Home</h1>"

    # Reuse one closure against many contexts
    isolator = symbiosis.Isolator(lambda scope: scope.tag("p", "hi"))
    isolator.evaluate(Html(), direction=symbiosis.KIO)

    # Grab a bound callable instead of running the closure
    tag = symbiosis.public_method("tag", lambda scope: None, Html())
    tag("em", "x")
"""

__version__ = "0.1.0"

# Closures
from symbiosis.closure import Closure

# Config
from symbiosis.config import ProjectConfig, ResolvedConfig, resolve_settings

# Context mixin
from symbiosis.context import Context, context_mixin

# Directions
from symbiosis.direction import (
    DIRECTIONS,
    IKO,
    INNER,
    IOK,
    KERNEL,
    KIO,
    KOI,
    OIK,
    OKI,
    OUTER,
    ContextGroup,
    Direction,
    coerce_direction,
)

# Errors
from symbiosis.errors import (
    InvalidDirectionError,
    MissingClosureError,
    SymbiosisError,
    UnresolvedMemberError,
)

# Events
from symbiosis.events import Event, EventCallback, EventKind

# Executor
from symbiosis.executor import (
    Executor,
    evaluate,
    evaluate_private,
    private_method,
    public_method,
)

# Introspection
from symbiosis.introspection import restricted

# Isolator
from symbiosis.isolator import Isolator, isolate

# Kernel
from symbiosis.kernel import default_kernel

# Triggers
from symbiosis.trigger import (
    PrivateTrigger,
    PublicTrigger,
    Scope,
    TraceStep,
    Trigger,
    TriggerRegistry,
    current_scope,
    trigger_for,
)

__all__ = [
    # Version
    "__version__",
    # Directions
    "Direction",
    "ContextGroup",
    "INNER",
    "OUTER",
    "KERNEL",
    "IOK",
    "OIK",
    "OKI",
    "IKO",
    "KOI",
    "KIO",
    "DIRECTIONS",
    "coerce_direction",
    # Errors
    "SymbiosisError",
    "MissingClosureError",
    "InvalidDirectionError",
    "UnresolvedMemberError",
    # Closures
    "Closure",
    # Triggers
    "Trigger",
    "PublicTrigger",
    "PrivateTrigger",
    "Scope",
    "TraceStep",
    "TriggerRegistry",
    "trigger_for",
    "current_scope",
    # Executor
    "Executor",
    "evaluate",
    "evaluate_private",
    "public_method",
    "private_method",
    # Isolator
    "Isolator",
    "isolate",
    # Context mixin
    "Context",
    "context_mixin",
    # Introspection
    "restricted",
    # Kernel
    "default_kernel",
    # Events
    "Event",
    "EventKind",
    "EventCallback",
    # Config
    "ProjectConfig",
    "ResolvedConfig",
    "resolve_settings",
]
