"""Placeholder resolution for storefront documents."""

from .document import StorefrontDocument, parse_document
from .fallback import DEFAULT_FALLBACK_URL, FallbackPolicy
from .pipeline import DEFAULT_THRESHOLD, PlaceholderResolver
from .placeholders import DEFAULT_SCHEME, build_placeholder, parse_placeholder
from .stats import ResolutionStats, StatisticsAggregator

__all__ = [
    "DEFAULT_FALLBACK_URL",
    "DEFAULT_SCHEME",
    "DEFAULT_THRESHOLD",
    "FallbackPolicy",
    "PlaceholderResolver",
    "ResolutionStats",
    "StatisticsAggregator",
    "StorefrontDocument",
    "build_placeholder",
    "parse_document",
    "parse_placeholder",
]
