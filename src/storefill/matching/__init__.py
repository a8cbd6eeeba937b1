"""Similarity matching of descriptions against library images."""

from .similarity import (
    FallbackReason,
    MatchOptions,
    MatchResult,
    MatchTier,
    SimilarityMatcher,
    cosine_similarity,
    select_best,
)

__all__ = [
    "FallbackReason",
    "MatchOptions",
    "MatchResult",
    "MatchTier",
    "SimilarityMatcher",
    "cosine_similarity",
    "select_best",
]
