"""Image library access for storefill."""

from .loader import AssetLibrary
from .models import Alignment, Category, LibraryImage

__all__ = ["Alignment", "AssetLibrary", "Category", "LibraryImage"]
