"""Local text embedding generation using sentence-transformers."""

import asyncio
from typing import TYPE_CHECKING

from ..errors import EmbeddingFailure
from .base import EmbeddingProvider
from .models import LOCAL_EMBEDDING_MODEL, Embedding, EmbeddingBatch

if TYPE_CHECKING:
    from sentence_transformers import SentenceTransformer


class SentenceTransformerProvider(EmbeddingProvider):
    """Generate description embeddings locally with sentence-transformers.

    Only useful for libraries whose stored embeddings were produced with the
    same local model. Embeddings are normalized so cosine similarity reduces to
    a dot product, although the matcher does not rely on that.
    """

    def __init__(self, model_name: str = LOCAL_EMBEDDING_MODEL, device: str | None = None):
        """Initialize the provider with the specified model.

        Args:
            model_name: Name of sentence-transformers model to use
            device: Torch device ("cpu", "cuda", "mps"); None lets the library pick
        """
        self.model_name = model_name
        self.device = device
        self._model: "SentenceTransformer | None" = None  # Lazy load the model
        self.dimension: int | None = None

    @property
    def model(self) -> "SentenceTransformer":
        """Lazy-load the model only when actually needed."""
        if self._model is None:
            # Import here to avoid loading torch at module import time
            from sentence_transformers import SentenceTransformer

            self._model = SentenceTransformer(self.model_name, device=self.device)
            self.dimension = self._model.get_sentence_embedding_dimension()
        return self._model

    def generate(self, texts: list[str]) -> EmbeddingBatch:
        """Generate embeddings for one or more texts.

        Args:
            texts: List of text strings to embed

        Returns:
            Numpy array of embeddings with shape (len(texts), dimension)

        Raises:
            ValueError: If texts is empty
        """
        if not texts:
            raise ValueError("Cannot generate embeddings for empty text list")

        embeddings = self.model.encode(
            texts,
            convert_to_numpy=True,
            normalize_embeddings=True,
        )

        # Ensure correct shape
        if len(texts) == 1:
            embeddings = embeddings.reshape(1, -1)

        return embeddings

    async def embed(self, text: str) -> Embedding:
        """Embed one description in a worker thread.

        Raises:
            EmbeddingFailure: If the model fails to load or encode
        """
        try:
            batch = await asyncio.to_thread(self.generate, [text])
        except Exception as e:
            raise EmbeddingFailure(
                f"Local embedding with {self.model_name} failed: {e}", None, e
            ) from e
        return batch[0]
