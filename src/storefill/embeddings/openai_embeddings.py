"""OpenAI embedding provider implementation."""

import os

import numpy as np
import openai
from openai import AsyncOpenAI

from ..errors import EmbeddingAuthError, EmbeddingFailure
from .base import EmbeddingProvider
from .models import OPENAI_EMBEDDING_MODEL, Embedding


class OpenAIEmbeddingProvider(EmbeddingProvider):
    """Embed descriptions with the OpenAI embeddings API.

    The default model matches the one the library indexing job uses.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model_name: str = OPENAI_EMBEDDING_MODEL,
        max_retries: int = 2,
    ) -> None:
        """Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key. If not provided, reads from
                    OPENAI_API_KEY environment variable.
            model_name: Embedding model name
            max_retries: Retries performed by the OpenAI client itself

        Raises:
            EmbeddingAuthError: If API key is not provided.
        """
        self._api_key = api_key or os.getenv("OPENAI_API_KEY")
        if not self._api_key:
            raise EmbeddingAuthError(
                "OpenAI API key not found. Set OPENAI_API_KEY environment "
                "variable or provide api_key parameter."
            )

        self.model_name = model_name
        self._client = AsyncOpenAI(api_key=self._api_key, max_retries=max_retries)

    async def embed(self, text: str) -> Embedding:
        """Embed one description.

        Raises:
            EmbeddingAuthError: If authentication fails
            EmbeddingFailure: If the API call fails or returns no vector
        """
        if not text or not text.strip():
            raise ValueError("Text cannot be empty")

        try:
            response = await self._client.embeddings.create(
                model=self.model_name, input=text.strip()
            )
        except (openai.AuthenticationError, openai.PermissionDeniedError) as e:
            raise EmbeddingAuthError(
                f"Authentication failed: {e}", e.status_code, e
            ) from e
        except openai.RateLimitError as e:
            raise EmbeddingFailure(f"Rate limit exceeded: {e}", 429, e) from e
        except openai.APIStatusError as e:
            raise EmbeddingFailure(
                f"Embedding API error: {e}", e.status_code, e
            ) from e
        except openai.APIError as e:
            raise EmbeddingFailure(f"Embedding API call failed: {e}", None, e) from e

        if not response.data or not response.data[0].embedding:
            raise EmbeddingFailure("No embedding data received from API")

        return np.asarray(response.data[0].embedding, dtype=np.float64)
