"""Test basic package functionality."""

import odata_simple_client


def test_version():
    """Test that package version is defined."""
    assert hasattr(odata_simple_client, "__version__")
    assert odata_simple_client.__version__ == "0.1.0"


def test_public_names_are_exported():
    """Everything listed in __all__ is importable from the package root."""
    for name in odata_simple_client.__all__:
        assert hasattr(odata_simple_client, name), name
