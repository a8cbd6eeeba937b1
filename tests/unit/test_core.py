"""Unit tests for resolver construction and file resolution."""

import asyncio
import json
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

# Add src to path for testing
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))
sys.path.insert(0, str(Path(__file__).parent.parent))

from storefill.config import load_config
from storefill.core import build_resolver, resolve_file
from storefill.embeddings.generator import SentenceTransformerProvider
from storefill.embeddings.models import LOCAL_EMBEDDING_MODEL, OPENAI_EMBEDDING_MODEL
from storefill.embeddings.openai_embeddings import OpenAIEmbeddingProvider
from storefill.library.loader import AssetLibrary
from test_helpers import StaticEmbeddingProvider, make_image, placeholder


class TestBuildResolver:
    """Test wiring the resolver from configuration."""

    def test_env_provider_switch_uses_provider_default_model(
        self, tmp_path, monkeypatch
    ) -> None:
        """Test a provider chosen by env var embeds with its own default model."""
        monkeypatch.setenv("HF_HOME", str(tmp_path))
        monkeypatch.setenv("STOREFILL_EMBEDDING_PROVIDER", "sentence-transformers")

        resolver = build_resolver(load_config())

        provider = resolver.matcher.provider
        assert isinstance(provider, SentenceTransformerProvider)
        assert provider.model_name == LOCAL_EMBEDDING_MODEL

    def test_default_provider_uses_openai_default_model(self, monkeypatch) -> None:
        """Test the default configuration embeds with the library's model."""
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")

        provider = build_resolver(load_config()).matcher.provider

        assert isinstance(provider, OpenAIEmbeddingProvider)
        assert provider.model_name == OPENAI_EMBEDDING_MODEL

    def test_config_values_applied(self) -> None:
        """Test threshold, timeout and concurrency come from configuration."""
        config = load_config()

        resolver = build_resolver(config, provider=StaticEmbeddingProvider())

        assert resolver.threshold == config.matching.threshold
        assert resolver.matcher.timeout == config.embeddings.timeout
        assert resolver.max_concurrency == config.resolver.max_concurrency
        assert resolver.fallback.url == config.fallback.url


class TestResolveFile:
    """Test resolving a document file."""

    @pytest.mark.asyncio
    async def test_file_io_runs_in_worker_threads(self, tmp_path) -> None:
        """Test reading and writing the document stay off the event loop."""
        image = make_image("/images/library/products/mug.jpg")
        resolver = build_resolver(
            load_config(),
            library=AssetLibrary.from_images([image]),
            provider=StaticEmbeddingProvider(),
        )
        source = tmp_path / "store.json"
        source.write_text(json.dumps({"products": [{"image": placeholder("mug")}]}))
        destination = tmp_path / "out" / "store.json"

        with patch(
            "storefill.core.asyncio.to_thread", wraps=asyncio.to_thread
        ) as mock_to_thread:
            document, stats = await resolve_file(resolver, source, destination)

        offloaded = {call.args[0].__name__ for call in mock_to_thread.call_args_list}
        assert {"read_text", "write_text"} <= offloaded
        assert stats.matched == 1
        assert json.loads(destination.read_text()) == document
        assert document["products"][0]["image"] == image.url

    @pytest.mark.asyncio
    async def test_invalid_json(self, tmp_path) -> None:
        """Test a non-JSON input raises ValueError."""
        source = tmp_path / "store.json"
        source.write_text("{nope")
        resolver = build_resolver(
            load_config(),
            library=AssetLibrary.from_images([]),
            provider=StaticEmbeddingProvider(),
        )

        with pytest.raises(ValueError, match="Input is not valid JSON"):
            await resolve_file(resolver, source, None)
