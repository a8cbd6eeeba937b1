"""Abstract base class for embedding providers.

This module defines the interface the resolver consumes to turn placeholder
descriptions into query vectors. A provider must use the same model that
produced the stored library embeddings; vectors from different models are not
comparable and nothing at runtime can detect the mix-up.
"""

from abc import ABC, abstractmethod

from .models import Embedding


class EmbeddingProvider(ABC):
    """Abstract base class for text embedding providers."""

    @abstractmethod
    async def embed(self, text: str) -> Embedding:
        """Convert one text into a fixed-length vector.

        Args:
            text: The text to embed

        Returns:
            1-D numpy array

        Raises:
            EmbeddingFailure: If the embedding could not be produced
        """
        pass
