"""
Introspection strategies: can a context answer a name, and with what?

Triggers never look at contexts directly. They ask an Introspector, which
keeps the scanning algorithm independent of how membership is decided:

- DynamicIntrospector: the standard attribute protocol (getattr),
  honouring ``__getattr__`` hooks.
- StaticIntrospector: walks member tables directly (instance ``__dict__``
  and the MRO), binding descriptors by hand. Works on objects whose
  attribute protocol is unsupported or hostile.
- FallbackIntrospector: tries one strategy and falls back to another when a
  context does not support the first one's protocol.

Visibility:
    A member is *restricted* when its name starts with an underscore or
    when it is marked with :func:`restricted`. Public lookups refuse
    restricted members; private lookups accept them.
"""

from __future__ import annotations

import inspect
import logging
import types
from collections.abc import Mapping
from typing import Any, Protocol, TypeVar, runtime_checkable

logger = logging.getLogger(__name__)

RESTRICTED_ATTR = "__symbiosis_restricted__"

# Raised by contexts whose attribute protocol cannot be used for lookups
UNSUPPORTED_PROTOCOL_ERRORS: tuple[type[BaseException], ...] = (
    TypeError,
    LookupError,
    NotImplementedError,
)

T = TypeVar("T")

# Returned by Introspector.lookup when a context cannot answer a name
MISSING = object()


def restricted(member: T) -> T:
    """
    Mark a member as implementation-restricted (private).

    Works on plain functions, staticmethod, classmethod and property
    objects. Restricted members are only reachable through private
    triggers.

    Example:
        class Widget:
            @restricted
            def info(self):
                return "internal"
    """
    target: Any = member
    if isinstance(member, (staticmethod, classmethod)):
        target = member.__func__
    elif isinstance(member, property):
        target = member.fget
        if target is None:
            raise TypeError("cannot restrict a property without a getter")
    setattr(target, RESTRICTED_ATTR, True)
    return member


def is_restricted_name(name: str) -> bool:
    """Names with a leading underscore are restricted by convention."""
    return name.startswith("_")


def is_marked_restricted(raw: Any) -> bool:
    """True if a raw (unbound) member carries the restricted marker."""
    if raw is None or raw is MISSING:
        return False
    if isinstance(raw, (staticmethod, classmethod)):
        raw = raw.__func__
    elif isinstance(raw, property):
        raw = raw.fget
    return bool(getattr(raw, RESTRICTED_ATTR, False))


def describe_context(context: Any) -> str:
    """Short human-readable label for a context (used in traces)."""
    if issubclass(type(context), types.ModuleType):
        return f"<module {context.__name__}>"
    try:
        text = repr(context)
    except Exception:  # noqa: BLE001
        logger.debug("repr() failed for context of type %r", type(context), exc_info=True)
        text = object.__repr__(context)
    if len(text) > 80:
        text = text[:77] + "..."
    return text


@runtime_checkable
class Introspector(Protocol):
    """
    Protocol for membership strategies.

    Implementations must be side-effect free with respect to the context,
    apart from whatever the context's own attribute hooks do.
    ``responds_to`` avoids evaluating members wherever the member tables
    can answer; ``lookup`` evaluates the member exactly once.
    """

    include_restricted: bool

    def responds_to(self, context: Any, name: str) -> bool:
        """Return True if *context* can answer *name*."""
        ...

    def lookup(self, context: Any, name: str) -> Any:
        """Return the (bound) member *name* of *context*, or MISSING."""
        ...

    def member(self, context: Any, name: str) -> Any:
        """Return the (bound) member *name* of *context*."""
        ...


def _unset_slot(raw: Any, context: Any) -> bool:
    """True for a ``__slots__`` member the instance never assigned."""
    if not isinstance(raw, types.MemberDescriptorType) or _is_class(context):
        return False
    try:
        raw.__get__(context, type(context))
    except AttributeError:
        return True
    return False


class DynamicIntrospector:
    """
    Lookup through the standard attribute protocol.

    Membership is decided from the member tables (``inspect.getattr_static``)
    so that a getter is never run just to find out whether it exists. Only
    names the tables do not hold are tried through the attribute protocol,
    which is where ``__getattr__`` hooks answer.
    """

    def __init__(self, include_restricted: bool = False) -> None:
        self.include_restricted = include_restricted

    def responds_to(self, context: Any, name: str) -> bool:
        if not self.include_restricted and is_restricted_name(name):
            return False
        raw = inspect.getattr_static(context, name, MISSING)
        if raw is MISSING:
            return hasattr(context, name)
        if _unset_slot(raw, context):
            return False
        return self.include_restricted or not is_marked_restricted(raw)

    def lookup(self, context: Any, name: str) -> Any:
        if not self.include_restricted and is_restricted_name(name):
            return MISSING
        raw = inspect.getattr_static(context, name, MISSING)
        if raw is MISSING:
            try:
                return getattr(context, name)
            except AttributeError:
                return MISSING
        if _unset_slot(raw, context):
            return MISSING
        if not self.include_restricted and is_marked_restricted(raw):
            return MISSING
        # The member exists: whatever its getter raises belongs to the caller
        return getattr(context, name)

    def member(self, context: Any, name: str) -> Any:
        return getattr(context, name)

    def __repr__(self) -> str:
        return f"DynamicIntrospector(include_restricted={self.include_restricted})"


def _instance_dict(context: Any) -> Mapping[str, Any] | None:
    try:
        namespace = object.__getattribute__(context, "__dict__")
    except (AttributeError, TypeError):
        return None
    return namespace if isinstance(namespace, Mapping) else None


def _is_class(context: Any) -> bool:
    # isinstance() would consult __class__ through the context's own hooks
    return issubclass(type(context), type)


def _type_chain(context: Any) -> tuple[type, ...]:
    # A class context is its own first member table; its metaclass follows
    if _is_class(context):
        return context.__mro__ + type(context).__mro__
    return type(context).__mro__


def _is_data_descriptor(raw: Any) -> bool:
    kind = type(raw)
    return hasattr(kind, "__get__") and (
        hasattr(kind, "__set__") or hasattr(kind, "__delete__")
    )


def _bind(raw: Any, context: Any) -> Any:
    getter = getattr(type(raw), "__get__", None)
    if getter is None:
        return raw
    if _is_class(context):
        return getter(raw, None, context)
    return getter(raw, context, type(context))


def _python_hook(kind: type, hook: str) -> bool:
    for klass in kind.__mro__:
        if hook in klass.__dict__:
            return isinstance(klass.__dict__[hook], types.FunctionType)
    return False


def overrides_attribute_protocol(context: Any, name: str) -> bool:
    """
    True if looking up *name* on *context* goes through Python-level hooks.

    A ``__getattribute__`` override sits in front of every lookup. A
    ``__getattr__`` hook is only consulted for names the member tables do
    not hold.
    """
    kind = type(context)
    if _python_hook(kind, "__getattribute__"):
        return True
    return _python_hook(kind, "__getattr__") and (
        inspect.getattr_static(context, name, MISSING) is MISSING
    )


class StaticIntrospector:
    """
    Lookup by walking member tables, bypassing ``__getattribute__``.

    Order follows Python's attribute rules: data descriptors on the type,
    then the instance ``__dict__``, then other type attributes.
    """

    def __init__(self, include_restricted: bool = True) -> None:
        self.include_restricted = include_restricted

    def _find_type_attr(self, context: Any, name: str) -> Any:
        for klass in _type_chain(context):
            namespace = klass.__dict__
            if name in namespace:
                return namespace[name]
        return MISSING

    def _lookup(self, context: Any, name: str) -> tuple[Any, bool]:
        """Return (raw member, needs_binding) or (MISSING, False)."""
        type_attr = self._find_type_attr(context, name)
        if type_attr is not MISSING and _is_data_descriptor(type_attr):
            return type_attr, True
        instance_dict = _instance_dict(context)
        if instance_dict is not None and not _is_class(context):
            if name in instance_dict:
                return instance_dict[name], False
        if type_attr is not MISSING:
            return type_attr, True
        return MISSING, False

    def _visible(self, context: Any, name: str) -> tuple[Any, bool]:
        if not self.include_restricted and is_restricted_name(name):
            return MISSING, False
        raw, needs_binding = self._lookup(context, name)
        if raw is MISSING or _unset_slot(raw, context):
            return MISSING, False
        if not self.include_restricted and is_marked_restricted(raw):
            return MISSING, False
        return raw, needs_binding

    def responds_to(self, context: Any, name: str) -> bool:
        raw, _ = self._visible(context, name)
        return raw is not MISSING

    def lookup(self, context: Any, name: str) -> Any:
        raw, needs_binding = self._visible(context, name)
        if raw is MISSING:
            return MISSING
        return _bind(raw, context) if needs_binding else raw

    def member(self, context: Any, name: str) -> Any:
        raw, needs_binding = self._lookup(context, name)
        if raw is MISSING:
            raise AttributeError(name)
        return _bind(raw, context) if needs_binding else raw

    def names(self, context: Any) -> set[str]:
        """All member names found in the context's tables."""
        found: set[str] = set()
        instance_dict = _instance_dict(context)
        if instance_dict is not None:
            found.update(key for key in instance_dict if isinstance(key, str))
        for klass in _type_chain(context):
            found.update(klass.__dict__)
        return found

    def __repr__(self) -> str:
        return f"StaticIntrospector(include_restricted={self.include_restricted})"


class FallbackIntrospector:
    """
    Use *primary*; retry with *fallback* for contexts that do not support
    the primary protocol.

    Only failures of the context's own attribute hooks (see
    :func:`overrides_attribute_protocol`) raising one of
    UNSUPPORTED_PROTOCOL_ERRORS trigger the retry. An error raised by a
    member that was found, such as a property getter, propagates.
    """

    def __init__(self, primary: Introspector, fallback: Introspector) -> None:
        self.primary = primary
        self.fallback = fallback
        self.include_restricted = primary.include_restricted

    def _attempt(self, operation: str, context: Any, name: str) -> Any:
        try:
            return getattr(self.primary, operation)(context, name)
        except UNSUPPORTED_PROTOCOL_ERRORS as e:
            if not overrides_attribute_protocol(context, name):
                raise
            logger.debug(
                "Falling back to %r for %s(%r) on %s: %s",
                self.fallback,
                operation,
                name,
                type(context).__qualname__,
                e,
            )
            return getattr(self.fallback, operation)(context, name)

    def responds_to(self, context: Any, name: str) -> bool:
        return self._attempt("responds_to", context, name)

    def lookup(self, context: Any, name: str) -> Any:
        return self._attempt("lookup", context, name)

    def member(self, context: Any, name: str) -> Any:
        return self._attempt("member", context, name)

    def __repr__(self) -> str:
        return f"FallbackIntrospector({self.primary!r}, {self.fallback!r})"


def visible_names(context: Any, include_restricted: bool) -> set[str]:
    """Names *context* exposes under the given visibility (for ``dir()``)."""
    try:
        names = set(dir(context))
    except UNSUPPORTED_PROTOCOL_ERRORS:
        names = StaticIntrospector().names(context)
    if include_restricted:
        return names
    return {name for name in names if not is_restricted_name(name)}
