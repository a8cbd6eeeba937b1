"""Fallback image policy for placeholders that cannot be matched."""

from dataclasses import dataclass

from ..matching.similarity import FallbackReason, MatchResult, MatchTier

DEFAULT_FALLBACK_URL = "https://placehold.co/1200x800/png?text=Image+coming+soon"


@dataclass(frozen=True)
class FallbackPolicy:
    """Constant degraded image applied when matching gives up.

    Used when a placeholder is malformed, its description cannot be embedded,
    or no candidate survives every fallback tier. Terminal: nothing is retried
    after it.
    """

    url: str = DEFAULT_FALLBACK_URL

    def __post_init__(self) -> None:
        """Validate fallback URL."""
        if not self.url or not self.url.strip():
            raise ValueError("fallback url cannot be empty")

    def apply(self, reason: FallbackReason) -> MatchResult:
        """Produce the terminal fallback result."""
        return MatchResult(image=None, score=None, tier=MatchTier.FALLBACK, reason=reason)
