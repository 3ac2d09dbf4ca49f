"""
PrivateTrigger: resolves public and restricted members alike.

Contexts whose attribute protocol is unsupported (``__getattr__`` or
``__getattribute__`` raising TypeError, LookupError or NotImplementedError)
are inspected by walking their member tables instead; method handles for
such contexts are bound from those tables directly.
"""

from __future__ import annotations

from symbiosis.introspection import (
    DynamicIntrospector,
    FallbackIntrospector,
    StaticIntrospector,
)
from symbiosis.trigger.base import Trigger
from symbiosis.trigger.registry import TriggerRegistry


@TriggerRegistry.register("private")
class PrivateTrigger(Trigger):
    """A trigger that considers both public and restricted members."""

    visibility = "private"
    introspector = FallbackIntrospector(
        DynamicIntrospector(include_restricted=True),
        StaticIntrospector(include_restricted=True),
    )
