"""
Events system: hooks for observing name resolution.

Ordering guarantees:
- Synchronous emission: events are emitted inline (callback blocks the lookup)
- Best-effort delivery: if a callback raises, the exception is logged and
  resolution continues
- Per-trigger ordering: resolved/unresolved events precede the evaluated
  event of the same run
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable

logger = logging.getLogger(__name__)


class EventKind(str, Enum):
    """Types of events emitted by triggers."""

    RESOLVED = "resolved"
    UNRESOLVED = "unresolved"
    EVALUATED = "evaluated"


@dataclass(frozen=True)
class Event:
    """
    An event emitted during resolution or evaluation.

    Attributes:
        kind: The type of event.
        name: The member name involved (None for evaluated events).
        timestamp: When the event occurred.
        payload: Event-specific data.
    """

    kind: EventKind
    name: str | None
    timestamp: datetime
    payload: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def resolved(
        cls, name: str, context: Any, group: str, position: int, **extra: Any
    ) -> Event:
        """Create a resolved event."""
        return cls(
            kind=EventKind.RESOLVED,
            name=name,
            timestamp=datetime.now(),
            payload={"context": context, "group": group, "position": position, **extra},
        )

    @classmethod
    def unresolved(cls, name: str, **extra: Any) -> Event:
        """Create an unresolved event."""
        return cls(
            kind=EventKind.UNRESOLVED,
            name=name,
            timestamp=datetime.now(),
            payload=extra,
        )

    @classmethod
    def evaluated(cls, **extra: Any) -> Event:
        """Create an evaluated event."""
        return cls(
            kind=EventKind.EVALUATED,
            name=None,
            timestamp=datetime.now(),
            payload=extra,
        )


# Type alias for event callbacks
EventCallback = Callable[[Event], None]


def emit_event(callback: EventCallback | None, event: Event) -> None:
    """
    Emit an event to a callback, with best-effort delivery.

    If the callback raises an exception, it is logged but resolution
    continues, so a broken handler never changes which context wins.

    Args:
        callback: The event callback (may be None).
        event: The event to emit.
    """
    if callback is None:
        return

    try:
        callback(event)
    except Exception as e:
        logger.warning(f"Event callback failed for {event.kind}: {e}")


class EventEmitter:
    """
    Helper class for emitting events.

    Wraps a callback and provides convenience methods for each event kind.
    """

    def __init__(self, callback: EventCallback | None = None) -> None:
        self._callback = callback

    @property
    def enabled(self) -> bool:
        return self._callback is not None

    def emit(self, event: Event) -> None:
        """Emit an event."""
        emit_event(self._callback, event)

    def resolved(
        self, name: str, context: Any, group: str, position: int, **extra: Any
    ) -> None:
        self.emit(Event.resolved(name, context, group, position, **extra))

    def unresolved(self, name: str, **extra: Any) -> None:
        self.emit(Event.unresolved(name, **extra))

    def evaluated(self, **extra: Any) -> None:
        self.emit(Event.evaluated(**extra))
