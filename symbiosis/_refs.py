"""
Object references (internal).

Resolves ``'module.path'`` and ``'module.path:attr.attr'`` strings to live
objects. Used by the configuration layer (kernel selection) and the CLI.
"""

from __future__ import annotations

import importlib
from typing import Any


def import_object(ref: str) -> Any:
    """
    Import an object by reference.

    Args:
        ref: ``'module.path'`` for a module, or ``'module.path:name'`` for an
            attribute of it (dotted names walk nested attributes).

    Returns:
        The imported module or attribute.

    Raises:
        ValueError: If *ref* is empty or malformed.
        ImportError: If the module cannot be imported.
        AttributeError: If the attribute cannot be found.

    Example:
        >>> import_object("builtins")
        <module 'builtins' (built-in)>
        >>> import_object("os.path:join")
        <function join ...>
    """
    if not ref:
        raise ValueError("Empty reference string")

    if ":" not in ref:
        return importlib.import_module(ref)

    module_name, attr_path = ref.rsplit(":", 1)
    if not module_name or not attr_path:
        raise ValueError(f"Invalid reference format: {ref}. Expected 'module:attr'")

    obj: Any = importlib.import_module(module_name)
    for part in attr_path.split("."):
        obj = getattr(obj, part)
    return obj
