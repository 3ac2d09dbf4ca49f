"""Unit tests for TriggerRegistry and trigger_for()."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from symbiosis.closure import Closure
from symbiosis.direction import KOI
from symbiosis.introspection import StaticIntrospector
from symbiosis.trigger import PrivateTrigger, PublicTrigger, Trigger, TriggerRegistry, trigger_for
from symbiosis.trigger import registry as registry_module


class StaticTrigger(Trigger):
    """Trigger variant that only looks at member tables."""

    visibility = "static"
    introspector = StaticIntrospector(include_restricted=False)


@pytest.fixture
def static_registered(monkeypatch):
    monkeypatch.setitem(TriggerRegistry._triggers, "static", StaticTrigger)
    return StaticTrigger


class TestTriggerRegistry:
    """Tests for TriggerRegistry."""

    def test_builtin_variants(self):
        """Public and private triggers register themselves."""
        assert TriggerRegistry.get("public") is PublicTrigger
        assert TriggerRegistry.get("private") is PrivateTrigger

    def test_types_lists_registered(self):
        types = TriggerRegistry.types()
        assert "public" in types
        assert "private" in types

    def test_get_unknown_returns_none(self):
        """Test that getting an unknown visibility returns None."""
        assert TriggerRegistry.get("nonexistent_visibility_xyz") is None

    def test_register_decorator(self, monkeypatch):
        """register() returns the class unchanged and records it."""
        monkeypatch.setattr(TriggerRegistry, "_triggers", dict(TriggerRegistry._triggers))

        decorated = TriggerRegistry.register("static")(StaticTrigger)

        assert decorated is StaticTrigger
        assert TriggerRegistry.get("static") is StaticTrigger

    def test_entry_points_loaded_once(self, monkeypatch):
        """Entry points are scanned lazily, a single time."""
        monkeypatch.setattr(TriggerRegistry, "_loaded", False)
        fake_entry_points = MagicMock(return_value=[])

        with patch.object(registry_module, "entry_points", fake_entry_points):
            TriggerRegistry.types()
            TriggerRegistry.get("public")

        fake_entry_points.assert_called_once_with(group="symbiosis.triggers")

    def test_explicit_registration_wins_over_entry_point(self, monkeypatch):
        monkeypatch.setattr(TriggerRegistry, "_loaded", False)
        ep = MagicMock()
        ep.name = "public"

        with patch.object(registry_module, "entry_points", return_value=[ep]):
            assert TriggerRegistry.get("public") is PublicTrigger

        ep.load.assert_not_called()

    def test_entry_point_load_failure_is_logged(self, monkeypatch, caplog):
        monkeypatch.setattr(TriggerRegistry, "_loaded", False)
        monkeypatch.setattr(TriggerRegistry, "_triggers", dict(TriggerRegistry._triggers))
        ep = MagicMock()
        ep.name = "broken"
        ep.load.side_effect = ImportError("no such module")

        with patch.object(registry_module, "entry_points", return_value=[ep]):
            assert TriggerRegistry.get("broken") is None

        assert "broken" in caplog.text


class TestTriggerFor:
    """Tests for trigger_for()."""

    def test_builds_registered_variant(self):
        trigger = trigger_for("private", lambda scope: None, direction="KOI")
        assert isinstance(trigger, PrivateTrigger)
        assert trigger.direction == KOI

    def test_forwards_contexts_and_kernel(self):
        inner = SimpleNamespace(a=1)
        kernel = SimpleNamespace(b=2)
        trigger = trigger_for("public", lambda scope: None, inner, kernel=kernel)
        assert trigger.inner_contexts == (inner,)
        assert trigger.kernel_context is kernel

    def test_unknown_visibility(self):
        with pytest.raises(ValueError, match="Unknown trigger visibility"):
            trigger_for("protected", lambda scope: None)

    def test_custom_variant(self, static_registered):
        """A registered variant is usable through trigger_for()."""
        context = SimpleNamespace(value=7)
        closure = Closure(lambda scope: scope.value, outer=None)

        trigger = trigger_for("static", closure, context, kernel=SimpleNamespace())

        assert isinstance(trigger, static_registered)
        assert trigger.run() == 7
