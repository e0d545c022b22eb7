"""Tests for wren.__init__ — the lazy registry backs the whole public API."""

import importlib

import pytest

import wren


@pytest.mark.parametrize("name", wren.__all__)
def test_public_name_resolves_to_its_module(name: str) -> None:
    module = importlib.import_module(wren._LAZY_IMPORTS[name])
    assert getattr(wren, name) is getattr(module, name)


class TestRegistry:
    def test_every_public_name_registered(self) -> None:
        missing = set(wren.__all__) - set(wren._LAZY_IMPORTS)
        assert not missing, f"Add to _LAZY_IMPORTS in wren/__init__.py: {sorted(missing)}"

    def test_no_private_extras(self) -> None:
        extras = set(wren._LAZY_IMPORTS) - set(wren.__all__)
        assert not extras, f"Registered but not exported in __all__: {sorted(extras)}"

    def test_form_is_the_builder_function(self) -> None:
        assert callable(wren.form)
        assert wren.form.__module__ == "wren.forms"

    def test_unknown_name(self) -> None:
        with pytest.raises(AttributeError, match="no attribute"):
            wren.__getattr__("ThisDoesNotExist")
