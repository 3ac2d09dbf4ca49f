"""Tests for visibility rules and introspection strategies."""

from __future__ import annotations

import json

import pytest

from symbiosis.introspection import (
    MISSING,
    DynamicIntrospector,
    FallbackIntrospector,
    Introspector,
    StaticIntrospector,
    describe_context,
    is_marked_restricted,
    is_restricted_name,
    restricted,
    visible_names,
)


class Widget:
    kind = "widget"

    def __init__(self):
        self.size = 3

    def render(self):
        return "rendered"

    @restricted
    def info(self):
        return "widget-info"

    def _secret(self):
        return "widget-secret"

    @property
    def area(self):
        return self.size * self.size

    @staticmethod
    def build():
        return "built"

    @classmethod
    def create(cls):
        return cls


class Opaque:
    """A context whose attribute protocol refuses every lookup."""

    def __getattribute__(self, name):
        raise NotImplementedError("no attribute protocol here")

    def info(self):
        return "opaque-info"

    def _hidden(self):
        return "opaque-hidden"


class Record:
    """Answers any key of its data mapping; raises KeyError otherwise."""

    def __init__(self, data):
        self._data = data

    def __getattr__(self, name):
        return self._data[name]


class BrokenRepr:
    def __repr__(self):
        raise RuntimeError("no repr")


class Slotted:
    __slots__ = ("value",)

    def __init__(self, value):
        self.value = value


class TestRestricted:
    def test_marks_function(self):
        assert is_marked_restricted(Widget.__dict__["info"])
        assert not is_marked_restricted(Widget.__dict__["render"])

    def test_returns_member_unchanged(self):
        def fn():
            return 1

        assert restricted(fn) is fn

    def test_staticmethod(self):
        member = restricted(staticmethod(lambda: 1))
        assert isinstance(member, staticmethod)
        assert is_marked_restricted(member)

    def test_classmethod(self):
        member = restricted(classmethod(lambda cls: cls))
        assert is_marked_restricted(member)

    def test_property(self):
        member = restricted(property(lambda self: 1))
        assert is_marked_restricted(member)

    def test_property_without_getter(self):
        with pytest.raises(TypeError):
            restricted(property())

    def test_plain_values_are_not_marked(self):
        assert not is_marked_restricted(None)
        assert not is_marked_restricted(42)

    def test_restricted_names(self):
        assert is_restricted_name("_secret")
        assert is_restricted_name("__dunder__")
        assert not is_restricted_name("render")


class TestDynamicIntrospector:
    def test_protocol(self):
        assert isinstance(DynamicIntrospector(), Introspector)

    def test_public_lookup(self):
        introspector = DynamicIntrospector(include_restricted=False)
        widget = Widget()
        assert introspector.responds_to(widget, "render")
        assert introspector.responds_to(widget, "size")
        assert introspector.responds_to(widget, "area")
        assert not introspector.responds_to(widget, "missing")

    def test_public_refuses_restricted(self):
        introspector = DynamicIntrospector(include_restricted=False)
        widget = Widget()
        assert not introspector.responds_to(widget, "_secret")
        assert not introspector.responds_to(widget, "info")

    def test_private_accepts_restricted(self):
        introspector = DynamicIntrospector(include_restricted=True)
        widget = Widget()
        assert introspector.responds_to(widget, "_secret")
        assert introspector.responds_to(widget, "info")
        assert introspector.member(widget, "info")() == "widget-info"

    def test_getattr_hook_is_honoured(self):
        introspector = DynamicIntrospector(include_restricted=False)
        record = Record({"title": "Report"})
        assert introspector.responds_to(record, "title")
        assert introspector.member(record, "title") == "Report"

    def test_unsupported_protocol_propagates(self):
        introspector = DynamicIntrospector(include_restricted=False)
        with pytest.raises(KeyError):
            introspector.responds_to(Record({}), "missing")
        with pytest.raises(NotImplementedError):
            introspector.lookup(Opaque(), "info")

    def test_membership_read_from_member_tables(self):
        """A member found in the tables counts even if its hooks refuse access."""
        introspector = DynamicIntrospector(include_restricted=False)
        assert introspector.responds_to(Opaque(), "info")

    def test_getter_not_run_by_responds_to(self):
        hits = []

        class Tracked:
            @property
            def value(self):
                hits.append(1)
                return 1

        assert DynamicIntrospector().responds_to(Tracked(), "value")
        assert hits == []

    def test_getter_attribute_error_is_not_a_miss(self):
        class Broken:
            @property
            def value(self):
                raise AttributeError("boom inside getter")

        introspector = DynamicIntrospector()
        assert introspector.responds_to(Broken(), "value")
        with pytest.raises(AttributeError, match="boom inside getter"):
            introspector.lookup(Broken(), "value")

    def test_lookup(self):
        introspector = DynamicIntrospector(include_restricted=False)
        widget = Widget()
        assert introspector.lookup(widget, "area") == 9
        assert introspector.lookup(Record({"title": "Report"}), "title") == "Report"
        assert introspector.lookup(widget, "missing") is MISSING
        assert introspector.lookup(widget, "info") is MISSING
        assert introspector.lookup(widget, "_secret") is MISSING

    def test_unset_slot_is_missing(self):
        empty = Slotted.__new__(Slotted)
        introspector = DynamicIntrospector()
        assert not introspector.responds_to(empty, "value")
        assert introspector.lookup(empty, "value") is MISSING


class TestStaticIntrospector:
    def test_instance_attribute(self):
        assert StaticIntrospector().member(Widget(), "size") == 3

    def test_method_is_bound(self):
        widget = Widget()
        method = StaticIntrospector().member(widget, "render")
        assert method.__self__ is widget
        assert method() == "rendered"

    def test_property_is_evaluated(self):
        assert StaticIntrospector().member(Widget(), "area") == 9

    def test_staticmethod_and_classmethod(self):
        introspector = StaticIntrospector()
        widget = Widget()
        assert introspector.member(widget, "build")() == "built"
        assert introspector.member(widget, "create")() is Widget

    def test_instance_dict_shadows_plain_class_attribute(self):
        widget = Widget()
        widget.__dict__["kind"] = "custom"
        assert StaticIntrospector().member(widget, "kind") == "custom"

    def test_data_descriptor_beats_instance_dict(self):
        widget = Widget()
        widget.__dict__["area"] = "shadow"
        assert StaticIntrospector().member(widget, "area") == 9

    def test_class_context(self):
        introspector = StaticIntrospector()
        assert introspector.member(Widget, "create")() is Widget
        assert introspector.member(Widget, "render") is Widget.__dict__["render"]
        assert introspector.member(Widget, "kind") == "widget"

    def test_module_context(self):
        assert StaticIntrospector().member(json, "dumps") is json.dumps

    def test_slots(self):
        assert StaticIntrospector().member(Slotted(5), "value") == 5

    def test_missing(self):
        introspector = StaticIntrospector()
        assert not introspector.responds_to(Widget(), "missing")
        with pytest.raises(AttributeError):
            introspector.member(Widget(), "missing")

    def test_visibility(self):
        public = StaticIntrospector(include_restricted=False)
        private = StaticIntrospector(include_restricted=True)
        widget = Widget()
        assert not public.responds_to(widget, "info")
        assert not public.responds_to(widget, "_secret")
        assert private.responds_to(widget, "info")
        assert private.responds_to(widget, "_secret")

    def test_bypasses_getattribute(self):
        introspector = StaticIntrospector()
        opaque = Opaque()
        assert introspector.responds_to(opaque, "info")
        assert introspector.member(opaque, "info")() == "opaque-info"

    def test_lookup_honours_visibility(self):
        public = StaticIntrospector(include_restricted=False)
        widget = Widget()
        assert public.lookup(widget, "area") == 9
        assert public.lookup(widget, "info") is MISSING
        assert public.lookup(widget, "_secret") is MISSING
        assert public.lookup(Slotted.__new__(Slotted), "value") is MISSING

    def test_names(self):
        names = StaticIntrospector().names(Widget())
        assert {"size", "render", "info", "_secret", "area"} <= names


class TestFallbackIntrospector:
    @pytest.fixture
    def introspector(self):
        return FallbackIntrospector(
            DynamicIntrospector(include_restricted=True),
            StaticIntrospector(include_restricted=True),
        )

    def test_inherits_visibility_from_primary(self, introspector):
        assert introspector.include_restricted is True

    def test_primary_used_when_supported(self, introspector):
        record = Record({"title": "Report"})
        assert introspector.responds_to(record, "title")
        assert introspector.member(record, "title") == "Report"

    def test_lookup_error_falls_back(self, introspector):
        assert not introspector.responds_to(Record({}), "missing")

    def test_not_implemented_falls_back(self, introspector):
        opaque = Opaque()
        assert introspector.responds_to(opaque, "_hidden")
        assert introspector.member(opaque, "_hidden")() == "opaque-hidden"

    def test_other_errors_propagate(self, introspector):
        class Broken:
            @property
            def value(self):
                raise RuntimeError("getter failed")

        with pytest.raises(RuntimeError):
            introspector.member(Broken(), "value")

    def test_getter_lookup_error_does_not_fall_back(self, introspector):
        hits = []

        class Keyed:
            @property
            def value(self):
                hits.append(1)
                raise KeyError("value")

        with pytest.raises(KeyError):
            introspector.lookup(Keyed(), "value")
        assert hits == [1]

    def test_lookup_falls_back_on_refused_access(self, introspector):
        assert introspector.lookup(Opaque(), "info")() == "opaque-info"
        assert introspector.lookup(Opaque(), "absent") is MISSING
        assert introspector.lookup(Record({}), "absent") is MISSING


class TestHelpers:
    def test_describe_module(self):
        assert describe_context(json) == "<module json>"

    def test_describe_truncates_long_repr(self):
        class Verbose:
            def __repr__(self):
                return "x" * 200

        label = describe_context(Verbose())
        assert len(label) == 80
        assert label.endswith("...")

    def test_describe_survives_broken_repr(self):
        assert "BrokenRepr" in describe_context(BrokenRepr())

    def test_visible_names_public(self):
        names = visible_names(Widget(), include_restricted=False)
        assert "render" in names
        assert "_secret" not in names

    def test_visible_names_private(self):
        assert "_secret" in visible_names(Widget(), include_restricted=True)

