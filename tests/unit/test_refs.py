"""Tests for object references and kernel loading."""

from __future__ import annotations

import builtins
import json
import os.path

import pytest

from symbiosis._refs import import_object
from symbiosis.kernel import default_kernel, load_kernel


class TestImportObject:
    def test_module(self):
        assert import_object("json") is json

    def test_attribute(self):
        assert import_object("os.path:join") is os.path.join

    def test_nested_attribute(self):
        assert import_object("json:decoder.JSONDecoder") is json.decoder.JSONDecoder

    def test_empty(self):
        with pytest.raises(ValueError, match="Empty reference"):
            import_object("")

    @pytest.mark.parametrize("ref", [":attr", "json:"])
    def test_malformed(self, ref):
        with pytest.raises(ValueError, match="Invalid reference format"):
            import_object(ref)

    def test_missing_module(self):
        with pytest.raises(ImportError):
            import_object("no_such_module_xyz")

    def test_missing_attribute(self):
        with pytest.raises(AttributeError):
            import_object("json:no_such_attr")


class TestKernel:
    def test_default_kernel_is_builtins(self):
        assert default_kernel() is builtins

    def test_load_default(self):
        assert load_kernel(None) is builtins
        assert load_kernel("builtins") is builtins

    def test_load_reference(self):
        assert load_kernel("json") is json
