"""
Error taxonomy for symbiosis.

All library errors derive from SymbiosisError and additionally from the
builtin exception a caller would naturally expect:

- MissingClosureError: a trigger or isolator was built without a closure
- InvalidDirectionError: a direction outside the six legal permutations
- UnresolvedMemberError: no context in the ordered list could answer a name

Errors raised inside a closure, or inside a resolved context's own member,
are never wrapped; they propagate unchanged.
"""

from __future__ import annotations

from typing import Any


class SymbiosisError(Exception):
    """Base class for all symbiosis errors."""


class MissingClosureError(SymbiosisError, ValueError):
    """Raised when a trigger or isolator is constructed without a closure."""

    def __init__(self, message: str = "You should provide a closure") -> None:
        super().__init__(message)


class InvalidDirectionError(SymbiosisError, ValueError):
    """
    Raised when a direction is not one of IOK, OIK, OKI, IKO, KOI, KIO.

    Attributes:
        direction: The rejected value, as supplied.
    """

    def __init__(self, direction: Any) -> None:
        self.direction = direction
        super().__init__(
            f"Incompatible context direction {direction!r}. "
            "You should use one of: IOK, OIK, OKI, IKO, KOI, KIO."
        )


class UnresolvedMemberError(SymbiosisError, AttributeError):
    """
    Raised when no context is able to answer the requested name.

    Subclasses AttributeError so that ``hasattr``/``getattr`` on a scope
    behave as for any other object, while remaining distinguishable from an
    AttributeError raised by a context's own code.

    Attributes:
        name: The member name that could not be resolved.
        direction: Name of the direction used for the scan (e.g. "IOK").
        visibility: "public" or "private".
    """

    def __init__(
        self,
        name: str,
        direction: str | None = None,
        visibility: str | None = None,
    ) -> None:
        message = f"No one is able to respond to {name!r}"
        if direction is not None:
            message += f" (direction={direction}"
            if visibility is not None:
                message += f", visibility={visibility}"
            message += ")"
        super().__init__(message)
        self.name = name
        self.direction = direction
        self.visibility = visibility
