"""Test package structure and imports."""

import sys
from pathlib import Path

# Add src to path for testing
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))


def test_package_imports() -> None:
    """Test that storefill package can be imported."""
    import storefill

    assert storefill.__version__ == "0.1.0"


def test_lazy_resolve_export() -> None:
    """Test the top-level resolve is the async API function."""
    import storefill
    from storefill.api import resolve

    assert storefill.resolve is resolve


def test_main_module_imports() -> None:
    """Test that main module can be imported without error."""
    from storefill.__main__ import main

    assert callable(main)
