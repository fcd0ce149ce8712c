"""Basic tests for querybind."""

import querybind


def test_version():
    """Test that version is defined."""
    assert querybind.__version__ == "0.1.0"


def test_public_api():
    """Every name in __all__ is importable from the package."""
    for name in querybind.__all__:
        assert hasattr(querybind, name), name


def test_module_level_functions_share_binder():
    assert querybind.get_default_binder() is querybind.get_default_binder()
