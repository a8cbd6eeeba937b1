"""Placeholder resolution pipeline for storefill.

Coordinates AssetLibrary, SimilarityMatcher, FallbackPolicy and
StatisticsAggregator to replace every placeholder image of a storefront
document with a library URL or the fallback URL.
"""

import asyncio
import logging
from typing import Any

from ..errors import EmbeddingFailure, MalformedPlaceholder
from ..library.loader import AssetLibrary
from ..library.models import Category, LibraryImage
from ..matching.similarity import (
    FallbackReason,
    MatchOptions,
    MatchResult,
    MatchTier,
    SimilarityMatcher,
    eligible_candidates,
    select_best,
)
from .document import ImageSlot, parse_document
from .fallback import FallbackPolicy
from .placeholders import DEFAULT_SCHEME, parse_placeholder
from .stats import ResolutionStats, StatisticsAggregator

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 0.45
DEFAULT_MAX_CONCURRENCY = 8


class PlaceholderResolver:
    """Replaces placeholder images of storefront documents with library images.

    Product slots match against product images with the similarity threshold
    enforced. Hero slots match against hero images on the slide's side, first
    with the threshold and then without it; the side is never crossed. Anything
    left over gets the fallback URL.

    Example:
        resolver = PlaceholderResolver(
            library=AssetLibrary("data/lib/image-library.json"),
            matcher=SimilarityMatcher(OpenAIEmbeddingProvider()),
            fallback=FallbackPolicy(),
        )
        document, stats = await resolver.resolve_with_stats(document)
        # stats.total == 3, stats.matched == 2, stats.fallback == 1
    """

    def __init__(
        self,
        library: AssetLibrary,
        matcher: SimilarityMatcher,
        fallback: FallbackPolicy | None = None,
        threshold: float = DEFAULT_THRESHOLD,
        scheme: str = DEFAULT_SCHEME,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    ) -> None:
        """Initialize resolver with its collaborators.

        Args:
            library: Image library (loaded lazily on first document with placeholders)
            matcher: Similarity matcher wrapping the embedding provider
            fallback: Fallback policy (default fallback URL if omitted)
            threshold: Minimum cosine similarity for thresholded tiers (0.0-1.0)
            scheme: Placeholder scheme, without "://"
            max_concurrency: Maximum placeholders resolved at the same time

        Raises:
            ValueError: If threshold or max_concurrency is out of range
        """
        if not 0.0 <= threshold <= 1.0:
            raise ValueError(f"threshold must be between 0.0 and 1.0, got {threshold}")
        if max_concurrency < 1:
            raise ValueError(f"max_concurrency must be at least 1, got {max_concurrency}")

        self.library = library
        self.matcher = matcher
        self.fallback = fallback or FallbackPolicy()
        self.threshold = threshold
        self.scheme = scheme
        self.max_concurrency = max_concurrency
        self.totals = StatisticsAggregator()

    async def resolve(self, document: Any) -> Any:
        """Resolve all placeholders of a document in place and return it."""
        resolved, _ = await self.resolve_with_stats(document)
        return resolved

    async def resolve_with_stats(self, document: Any) -> tuple[Any, ResolutionStats]:
        """Resolve all placeholders of a document in place.

        Never raises for document shape, library or embedding problems; those
        degrade individual slots. Cancellation propagates to every in-flight
        embedding call and leaves the document partially resolved.

        Returns:
            Tuple of (the same document object, counters for this document)
        """
        stats = StatisticsAggregator()
        parsed = parse_document(document)

        for issue in parsed.issues:
            logger.warning(f"Skipping unrecognized document node {issue}")
            stats.record_skipped()

        slots = [
            slot
            for slot in parsed.image_slots()
            if parse_placeholder(slot.ref.value, self.scheme) is not None
        ]
        stats.record_placeholders(len(slots))

        if slots:
            images = await asyncio.to_thread(self.library.load)
            if not images:
                logger.warning(
                    f"Image library unavailable; leaving {len(slots)} placeholders unresolved"
                )
                stats.record_unresolved(len(slots))
            else:
                await self._resolve_slots(slots, stats)

        snapshot = stats.snapshot()
        self.totals.merge(snapshot)
        logger.info(
            f"Resolved document: {snapshot.total} placeholders, "
            f"{snapshot.matched} matched, {snapshot.fallback} fallback, "
            f"{snapshot.unresolved} unresolved, {snapshot.skipped} nodes skipped"
        )
        return document, snapshot

    async def _resolve_slots(
        self, slots: list[ImageSlot], stats: StatisticsAggregator
    ) -> None:
        limit = asyncio.Semaphore(self.max_concurrency)

        async def worker(slot: ImageSlot) -> None:
            async with limit:
                result = await self.match_slot(slot)

            if result.matched:
                slot.ref.assign(result.image.url)
                stats.record_match()
            else:
                slot.ref.assign(self.fallback.url)
                stats.record_fallback()

        async with asyncio.TaskGroup() as group:
            for slot in slots:
                group.create_task(worker(slot))

    async def match_slot(self, slot: ImageSlot) -> MatchResult:
        """Choose the image for one placeholder slot without writing it."""
        placeholder = parse_placeholder(slot.ref.value, self.scheme)
        try:
            description = placeholder.require_description()
        except MalformedPlaceholder as e:
            logger.warning(f"{slot.location}: {e}")
            return self.fallback.apply(FallbackReason.MALFORMED_PLACEHOLDER)

        candidates = eligible_candidates(
            self.library.by_category(slot.category), slot.alignment
        )
        if not candidates:
            logger.debug(
                f"{slot.location}: no {slot.category.value} images"
                + (f" aligned {slot.alignment.value}" if slot.alignment else "")
            )
            return self.fallback.apply(FallbackReason.NO_CANDIDATE)

        try:
            query = await self.matcher.embed(description)
        except EmbeddingFailure as e:
            logger.warning(f"{slot.location}: could not embed '{description[:50]}': {e}")
            return self.fallback.apply(FallbackReason.EMBEDDING_FAILED)

        result = self._search(query, candidates, slot)
        if result is None:
            logger.debug(f"{slot.location}: no candidate for '{description[:50]}'")
            return self.fallback.apply(FallbackReason.NO_CANDIDATE)

        logger.debug(
            f"{slot.location}: '{description[:50]}' -> {result.image.path} "
            f"(similarity {result.score:.3f}, tier {result.tier.value})"
        )
        return result

    def _search(
        self, query: Any, candidates: list[LibraryImage], slot: ImageSlot
    ) -> MatchResult | None:
        strict = MatchOptions(
            alignment=slot.alignment, threshold=self.threshold, apply_threshold=True
        )
        best = select_best(query, candidates, strict)
        if best is not None:
            return MatchResult(image=best[0], score=best[1], tier=MatchTier.THRESHOLD)

        if slot.category is not Category.HERO:
            return None

        # Weak match on the same side beats the fallback image
        best = select_best(query, candidates, MatchOptions(alignment=slot.alignment))
        if best is not None:
            return MatchResult(image=best[0], score=best[1], tier=MatchTier.BEST_EFFORT)
        return None
