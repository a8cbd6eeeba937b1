"""Embedding models and constants for semantic matching."""

from typing import TypeAlias

import numpy as np

# The library indexing job embeds descriptions with this model, so queries
# have to use it too.
OPENAI_EMBEDDING_MODEL = "text-embedding-3-small"

# Local model for libraries indexed with sentence-transformers
LOCAL_EMBEDDING_MODEL = "all-mpnet-base-v2"

# Type aliases for clarity
Embedding: TypeAlias = np.ndarray  # Shape: (dim,)
EmbeddingBatch: TypeAlias = np.ndarray  # Shape: (n, dim)
