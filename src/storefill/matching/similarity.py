"""Cosine similarity search over library images with alignment and threshold gating."""

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

import numpy as np

from ..embeddings.base import EmbeddingProvider
from ..embeddings.models import Embedding
from ..errors import EmbeddingFailure
from ..library.models import Alignment, LibraryImage

logger = logging.getLogger(__name__)


class MatchTier(Enum):
    """Which attempt produced a match result."""

    THRESHOLD = "threshold"
    BEST_EFFORT = "best_effort"
    FALLBACK = "fallback"


class FallbackReason(Enum):
    """Why a slot ended on the fallback URL."""

    MALFORMED_PLACEHOLDER = "malformed_placeholder"
    EMBEDDING_FAILED = "embedding_failed"
    NO_CANDIDATE = "no_candidate"


@dataclass(frozen=True)
class MatchOptions:
    """Constraints for one matching attempt.

    Attributes:
        alignment: Only consider images whose path encodes this side
        threshold: Minimum cosine similarity when apply_threshold is set
        apply_threshold: Whether candidates below threshold are discarded
    """

    alignment: Alignment | None = None
    threshold: float | None = None
    apply_threshold: bool = False

    def __post_init__(self) -> None:
        """Validate threshold settings."""
        if self.threshold is not None and not 0.0 <= self.threshold <= 1.0:
            raise ValueError(
                f"Threshold must be between 0.0 and 1.0, got {self.threshold}"
            )
        if self.apply_threshold and self.threshold is None:
            raise ValueError("apply_threshold requires a threshold")


@dataclass(frozen=True)
class MatchResult:
    """Outcome of resolving one placeholder."""

    image: LibraryImage | None
    score: float | None
    tier: MatchTier
    reason: FallbackReason | None = None

    @property
    def matched(self) -> bool:
        return self.image is not None


def cosine_similarity(a: Embedding, b: Embedding) -> float | None:
    """Calculate cosine similarity between two vectors.

    Returns:
        Similarity in [-1, 1], or None when it is undefined (empty vectors,
        different dimensionality, zero or non-finite norm)
    """
    if a.size == 0 or b.size == 0 or a.shape != b.shape:
        return None

    norm = float(np.linalg.norm(a)) * float(np.linalg.norm(b))
    if not np.isfinite(norm) or norm == 0.0:
        return None

    return float(np.dot(a, b)) / norm


def eligible_candidates(
    candidates: Sequence[LibraryImage], alignment: Alignment | None
) -> list[LibraryImage]:
    """Filter candidates down to usable images on the requested side."""
    return [
        image
        for image in candidates
        if image.usable and (alignment is None or image.has_alignment(alignment))
    ]


def select_best(
    query: Embedding, candidates: Sequence[LibraryImage], options: MatchOptions
) -> tuple[LibraryImage, float] | None:
    """Pick the most similar candidate that survives filtering.

    Ties keep the first candidate in input order.

    Args:
        query: Query vector
        candidates: Images to search, in priority order
        options: Alignment filter and threshold gating

    Returns:
        Tuple of (image, similarity) or None if nothing qualified
    """
    query = np.asarray(query, dtype=np.float64).ravel()

    best: LibraryImage | None = None
    best_score = -np.inf

    for image in eligible_candidates(candidates, options.alignment):
        score = cosine_similarity(query, image.embedding)
        if score is None:
            logger.debug(f"Skipping {image.path}: similarity undefined for query")
            continue

        if options.apply_threshold and score < options.threshold:
            continue

        if score > best_score:
            best, best_score = image, score

    if best is None:
        return None
    return best, float(best_score)


class SimilarityMatcher:
    """Embeds descriptions and searches library images for the closest one.

    Example:
        matcher = SimilarityMatcher(OpenAIEmbeddingProvider(), timeout=10.0)
        image = await matcher.find_best_match(
            "red sneaker", library.by_category(Category.PRODUCT),
            MatchOptions(threshold=0.45, apply_threshold=True),
        )
    """

    def __init__(self, provider: EmbeddingProvider, timeout: float | None = 10.0):
        """Initialize matcher.

        Args:
            provider: Embedding provider matching the library's model
            timeout: Seconds allowed per embedding call (None for no limit)
        """
        if timeout is not None and timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout}")

        self.provider = provider
        self.timeout = timeout

    async def embed(self, description: str) -> Embedding:
        """Obtain the query vector for a description.

        Raises:
            EmbeddingFailure: On provider error, timeout or empty vector
        """
        try:
            async with asyncio.timeout(self.timeout):
                vector = await self.provider.embed(description)
        except TimeoutError as e:
            raise EmbeddingFailure(
                f"Embedding timed out after {self.timeout}s", None, e
            ) from e
        except EmbeddingFailure:
            raise
        except Exception as e:
            raise EmbeddingFailure(f"Embedding failed: {e}", None, e) from e

        vector = np.asarray(vector, dtype=np.float64).ravel()
        if vector.size == 0:
            raise EmbeddingFailure("Embedding provider returned an empty vector")
        return vector

    async def find_best_match(
        self,
        description: str,
        candidates: Sequence[LibraryImage],
        options: MatchOptions | None = None,
    ) -> LibraryImage | None:
        """Find the library image best matching a description in one attempt.

        For callers matching a single description outside a document;
        PlaceholderResolver embeds once and runs its tiers with select_best.
        No embedding call is made when the description is empty or no
        candidate survives the alignment filter.

        Raises:
            EmbeddingFailure: If the description could not be embedded
        """
        options = options or MatchOptions()
        if not description or not description.strip():
            return None

        pool = eligible_candidates(candidates, options.alignment)
        if not pool:
            return None

        query = await self.embed(description)
        best = select_best(query, pool, options)
        return best[0] if best else None
