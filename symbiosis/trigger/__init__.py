"""
Trigger module: per-evaluation name resolution.

Provides:

- Trigger: Abstract resolver over inner, outer and kernel contexts
- PublicTrigger: Resolves public members only
- PrivateTrigger: Resolves public and restricted members
- Scope: The proxy a closure receives; lookups route through its trigger
- TraceStep: One entry of a resolution trace
- TriggerRegistry: Registry mapping visibility names to trigger classes
- trigger_for: Factory for registered trigger variants
- current_scope / trigger_of: Accessors for the running evaluation
"""

from symbiosis.trigger.base import Scope, TraceStep, Trigger, current_scope, trigger_of
from symbiosis.trigger.private import PrivateTrigger  # triggers auto-registration
from symbiosis.trigger.public import PublicTrigger  # triggers auto-registration
from symbiosis.trigger.registry import TriggerRegistry, trigger_for

__all__ = [
    "Trigger",
    "PublicTrigger",
    "PrivateTrigger",
    "Scope",
    "TraceStep",
    "TriggerRegistry",
    "trigger_for",
    "current_scope",
    "trigger_of",
]
