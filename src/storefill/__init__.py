"""storefill - resolve placeholder images of generated storefronts against an image library."""

__version__ = "0.1.0"
__all__ = ["resolve"]


def __getattr__(name: str):  # type: ignore[no-untyped-def]
    if name == "resolve":
        from .api import resolve

        return resolve
    raise AttributeError(f"module 'storefill' has no attribute {name!r}")
