"""
Directions: the priority order of the three context groups.

A Direction is pure data, an ordered triple over {INNER, OUTER, KERNEL}.
Six permutations are legal and are exported as named constants::

    IOK  inner contexts => outer context => kernel context
    OIK  outer context  => inner contexts => kernel context
    OKI  outer context  => kernel context => inner contexts
    IKO  inner contexts => kernel context => outer context
    KOI  kernel context => outer context  => inner contexts
    KIO  kernel context => inner contexts => outer context

Directions are compared by value. Malformed directions can be built (they
are only data) but are rejected by coerce_direction(), which triggers and
isolators call at construction time.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from symbiosis.errors import InvalidDirectionError


class ContextGroup(str, Enum):
    """The three logically distinct namespaces a trigger scans."""

    INNER = "inner"
    OUTER = "outer"
    KERNEL = "kernel"

    @property
    def letter(self) -> str:
        """One-letter code used in direction names."""
        return self.value[0].upper()


INNER = ContextGroup.INNER
OUTER = ContextGroup.OUTER
KERNEL = ContextGroup.KERNEL

_BY_LETTER = {group.letter: group for group in ContextGroup}


@dataclass(frozen=True)
class Direction:
    """
    An ordered sequence of context groups.

    Attributes:
        groups: The groups, highest priority first.
    """

    groups: tuple[ContextGroup, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "groups", tuple(self.groups))

    @classmethod
    def parse(cls, name: str) -> Direction:
        """
        Build a direction from its letter name (e.g. ``"KOI"``).

        Raises:
            InvalidDirectionError: If a letter is not one of I, O, K.
        """
        try:
            return cls(tuple(_BY_LETTER[letter] for letter in name.upper()))
        except KeyError:
            raise InvalidDirectionError(name) from None

    @property
    def name(self) -> str:
        return "".join(group.letter for group in self.groups)

    @property
    def is_valid(self) -> bool:
        """True when every group appears exactly once."""
        return len(self.groups) == 3 and set(self.groups) == set(ContextGroup)

    def arrange(
        self,
        inner: Sequence[Any],
        outer: Any,
        kernel: Any,
    ) -> list[tuple[ContextGroup, Any]]:
        """
        Order the context groups by this direction, tagging each entry.

        Inner contexts keep their supplied order and contribute 0..N entries;
        outer and kernel contribute exactly one entry each.
        """
        arranged: list[tuple[ContextGroup, Any]] = []
        for group in self.groups:
            if group is ContextGroup.INNER:
                arranged.extend((group, context) for context in inner)
            elif group is ContextGroup.OUTER:
                arranged.append((group, outer))
            else:
                arranged.append((group, kernel))
        return arranged

    def flatten(self, inner: Sequence[Any], outer: Any, kernel: Any) -> list[Any]:
        """Return the contexts in direction order (see :meth:`arrange`)."""
        return [context for _, context in self.arrange(inner, outer, kernel)]

    def __iter__(self):
        return iter(self.groups)

    def __len__(self) -> int:
        return len(self.groups)

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"Direction({self.name})"


IOK = Direction((INNER, OUTER, KERNEL))
OIK = Direction((OUTER, INNER, KERNEL))
OKI = Direction((OUTER, KERNEL, INNER))
IKO = Direction((INNER, KERNEL, OUTER))
KOI = Direction((KERNEL, OUTER, INNER))
KIO = Direction((KERNEL, INNER, OUTER))

DIRECTIONS: tuple[Direction, ...] = (IOK, OIK, OKI, IKO, KOI, KIO)


def coerce_direction(value: Any) -> Direction:
    """
    Validate *value* and return the matching legal Direction.

    Accepts a Direction, a letter name such as ``"oik"``, or any sequence of
    ContextGroup members (or their string values).

    Raises:
        InvalidDirectionError: If *value* is not one of the six permutations.
    """
    if isinstance(value, Direction):
        candidate = value
    elif isinstance(value, str):
        candidate = Direction.parse(value)
    elif isinstance(value, Sequence):
        try:
            candidate = Direction(tuple(ContextGroup(item) for item in value))
        except ValueError:
            raise InvalidDirectionError(value) from None
    else:
        raise InvalidDirectionError(value)

    if candidate not in DIRECTIONS:
        raise InvalidDirectionError(value)
    return candidate
