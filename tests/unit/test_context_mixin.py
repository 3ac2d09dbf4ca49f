"""Tests for the Context mixin."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import patch

import pytest

from symbiosis.closure import Closure
from symbiosis.context import Context, context_mixin
from symbiosis.direction import INNER, IOK, KOI, OIK, OUTER
from symbiosis.errors import InvalidDirectionError, MissingClosureError, UnresolvedMemberError
from symbiosis.executor import Executor
from symbiosis.introspection import restricted


class Form(context_mixin(OIK)):
    def field(self):
        return "form-field"

    @restricted
    def token(self):
        return "form-token"


class Plain(Context):
    def field(self):
        return "plain-field"


@pytest.fixture
def outer():
    return SimpleNamespace(field=lambda: "outer-field")


class TestMixinFactory:
    def test_default_direction(self):
        assert Context.default_direction == IOK
        assert Form.default_direction == OIK

    def test_class_name(self):
        assert context_mixin(KOI).__name__ == "Context[KOI]"

    def test_invalid_direction_rejected_eagerly(self):
        with pytest.raises(InvalidDirectionError):
            context_mixin([INNER, INNER, OUTER])

    def test_name_accepted(self):
        assert context_mixin("kio").default_direction.name == "KIO"

    def test_adds_no_instance_state(self):
        assert context_mixin().__slots__ == ()


class TestForwarding:
    """The mixin delegates to Executor with ``self`` as the inner context."""

    def test_evaluate(self):
        form = Form()
        body = lambda scope: None  # noqa: E731
        with patch.object(Executor, "evaluate", return_value="ok") as evaluate:
            assert form.evaluate(body) == "ok"
        evaluate.assert_called_once_with(body, form, direction=OIK)

    def test_evaluate_private_with_override(self):
        form = Form()
        body = lambda scope: None  # noqa: E731
        with patch.object(Executor, "evaluate_private") as evaluate_private:
            form.evaluate_private(body, direction=KOI)
        evaluate_private.assert_called_once_with(body, form, direction=KOI)

    def test_public_method(self):
        form = Form()
        body = lambda scope: None  # noqa: E731
        with patch.object(Executor, "public_method") as public_method:
            form.public_method("field", body)
        public_method.assert_called_once_with("field", body, form, direction=OIK)

    def test_private_method(self):
        form = Form()
        with patch.object(Executor, "private_method") as private_method:
            form.private_method("token", None, direction="IOK")
        private_method.assert_called_once_with("token", None, form, direction="IOK")


class TestEvaluation:
    def test_outer_wins_by_default(self, outer):
        closure = Closure(lambda scope: scope.field(), outer=outer)
        assert Form().evaluate(closure) == "outer-field"

    def test_direction_override(self, outer):
        closure = Closure(lambda scope: scope.field(), outer=outer)
        assert Form().evaluate(closure, direction=IOK) == "form-field"

    def test_default_context_is_inner_first(self, outer):
        closure = Closure(lambda scope: scope.field(), outer=outer)
        assert Plain().evaluate(closure) == "plain-field"

    def test_evaluate_private(self, outer):
        closure = Closure(lambda scope: scope.token(), outer=outer)
        with pytest.raises(UnresolvedMemberError):
            Form().evaluate(closure)
        assert Form().evaluate_private(closure) == "form-token"

    def test_method_handles(self, outer):
        closure = Closure(lambda scope: None, outer=outer)
        form = Form()
        assert form.public_method("field", closure)() == "outer-field"
        assert form.public_method("field", closure, direction=IOK)() == "form-field"
        assert form.private_method("token", closure)() == "form-token"

    def test_missing_closure(self):
        with pytest.raises(MissingClosureError):
            Form().evaluate()

    def test_invalid_direction(self, outer):
        closure = Closure(lambda scope: None, outer=outer)
        with pytest.raises(InvalidDirectionError):
            Form().evaluate(closure, direction="XYZ")
