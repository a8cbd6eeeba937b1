"""Embedding providers for placeholder descriptions.

This module provides a registry pattern for managing embedding providers,
allowing runtime selection of the backend that matches the library.
"""

from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from .base import EmbeddingProvider

from .generator import SentenceTransformerProvider
from .openai_embeddings import OpenAIEmbeddingProvider

__all__ = ["EmbeddingRegistry"]


class EmbeddingRegistry:
    """Registry for managing embedding providers by name."""

    _providers: ClassVar[dict[str, type["EmbeddingProvider"]]] = {}

    @classmethod
    def register(cls, name: str, provider_class: type["EmbeddingProvider"]) -> None:
        """Register an embedding provider.

        Args:
            name: Name to register the provider under
            provider_class: Provider class that implements EmbeddingProvider
        """
        cls._providers[name] = provider_class

    @classmethod
    def get(cls, name: str) -> type["EmbeddingProvider"]:
        """Get a provider class by name.

        Raises:
            KeyError: If provider name not found
        """
        if name not in cls._providers:
            available = ", ".join(cls._providers.keys()) if cls._providers else "none"
            raise KeyError(
                f"Embedding provider '{name}' not found. Available providers: {available}"
            )
        return cls._providers[name]

    @classmethod
    def available(cls) -> list[str]:
        """Return registered provider names."""
        return sorted(cls._providers)


# Register providers
EmbeddingRegistry.register("openai", OpenAIEmbeddingProvider)
EmbeddingRegistry.register("sentence-transformers", SentenceTransformerProvider)
