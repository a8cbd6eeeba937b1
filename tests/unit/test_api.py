"""Unit tests for the high-level resolve API."""

import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

# Add src to path for testing
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))
sys.path.insert(0, str(Path(__file__).parent.parent))

from storefill.api import resolve
from storefill.library.loader import AssetLibrary
from test_helpers import StaticEmbeddingProvider, make_image, placeholder, write_library


class TestResolveParameterHandling:
    """Test resolve parameter processing logic."""

    @pytest.mark.asyncio
    @patch("storefill.api.build_resolver")
    async def test_path_library_is_wrapped(self, mock_build_resolver: MagicMock) -> None:
        """Test a library path becomes an AssetLibrary."""
        mock_build_resolver.return_value.resolve = AsyncMock(return_value={"ok": True})

        result = await resolve({}, library="/srv/library.json")

        assert result == {"ok": True}
        library = mock_build_resolver.call_args.kwargs["library"]
        assert isinstance(library, AssetLibrary)
        assert library.path == Path("/srv/library.json")

    @pytest.mark.asyncio
    @patch("storefill.api.build_resolver")
    async def test_overrides_replace_config(self, mock_build_resolver: MagicMock) -> None:
        """Test threshold and fallback_url override the loaded configuration."""
        mock_build_resolver.return_value.resolve = AsyncMock(return_value={})

        await resolve({}, threshold=0.7, fallback_url="https://cdn.example.com/x.png")

        config = mock_build_resolver.call_args.args[0]
        assert config.matching.threshold == 0.7
        assert config.fallback.url == "https://cdn.example.com/x.png"
        assert mock_build_resolver.call_args.kwargs["library"] is None

    @pytest.mark.asyncio
    async def test_invalid_threshold(self) -> None:
        """Test an out-of-range threshold is rejected."""
        with pytest.raises(ValueError, match="threshold must be between"):
            await resolve({}, provider=StaticEmbeddingProvider(), threshold=2.0)


class TestResolveEndToEnd:
    """Test resolve against a real library file."""

    @pytest.mark.asyncio
    async def test_resolve_document(self, tmp_path) -> None:
        """Test placeholders are replaced in the returned document."""
        image = make_image("/images/library/products/teapot.jpg", similarity=0.8)
        library = write_library(tmp_path / "library.json", [image])
        document = {"products": [{"image": placeholder("teapot")}]}

        result = await resolve(
            document, library=library, provider=StaticEmbeddingProvider()
        )

        assert result is document
        assert document["products"][0]["image"] == image.url

    @pytest.mark.asyncio
    async def test_fallback_url_override_used(self, tmp_path) -> None:
        """Test unmatched slots receive the overridden fallback URL."""
        image = make_image("/images/library/products/teapot.jpg", similarity=0.1)
        library = write_library(tmp_path / "library.json", [image])
        document = {"products": [{"image": placeholder("bicycle")}]}

        await resolve(
            document,
            library=library,
            provider=StaticEmbeddingProvider(),
            fallback_url="https://cdn.example.com/none.png",
        )

        assert document["products"][0]["image"] == "https://cdn.example.com/none.png"
