"""
The kernel context: the process-wide fallback namespace.

By default this is the ``builtins`` module, so ``len``, ``print`` and
friends are always reachable from a scope. Triggers receive the kernel by
injection (``kernel=``) and never write to it; external code may still
extend it.
"""

from __future__ import annotations

import builtins
from typing import Any

from symbiosis._refs import import_object

DEFAULT_KERNEL_REF = "builtins"


def default_kernel() -> Any:
    """Return the process-wide kernel context."""
    return builtins


def load_kernel(ref: str | None) -> Any:
    """
    Load a kernel context from a reference string.

    Args:
        ref: ``'module'`` or ``'module:attr'``; None or ``"builtins"`` yields
            the default kernel.
    """
    if ref is None or ref == DEFAULT_KERNEL_REF:
        return default_kernel()
    return import_object(ref)
