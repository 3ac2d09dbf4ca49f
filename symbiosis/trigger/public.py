"""
PublicTrigger: resolves names through each context's public surface only.

Restricted members (leading underscore, or marked with ``@restricted``) are
never reachable through a public trigger.
"""

from __future__ import annotations

from symbiosis.introspection import DynamicIntrospector
from symbiosis.trigger.base import Trigger
from symbiosis.trigger.registry import TriggerRegistry


@TriggerRegistry.register("public")
class PublicTrigger(Trigger):
    """A trigger that considers only public members of its contexts."""

    visibility = "public"
    introspector = DynamicIntrospector(include_restricted=False)
