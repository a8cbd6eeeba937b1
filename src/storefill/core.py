"""Core functionality for storefill - builds the resolver from configuration and runs it."""

import asyncio
import json
import logging
import sys
from collections import Counter
from pathlib import Path
from typing import Any

from .config import StorefillConfig
from .embeddings import EmbeddingRegistry
from .embeddings.base import EmbeddingProvider
from .embeddings.models import LOCAL_EMBEDDING_MODEL
from .library.loader import AssetLibrary
from .library.models import Alignment, Category
from .matching.similarity import SimilarityMatcher
from .models_manager import configure_offline_mode
from .resolver.fallback import FallbackPolicy
from .resolver.pipeline import PlaceholderResolver
from .resolver.stats import ResolutionStats

logger = logging.getLogger(__name__)


def create_provider(name: str, model: str | None = None) -> EmbeddingProvider:
    """Instantiate a registered embedding provider.

    Raises:
        KeyError: If provider not found
        EmbeddingAuthError: If the provider has no credentials
    """
    provider_class = EmbeddingRegistry.get(name)

    if name == "sentence-transformers":
        available, error_msg = configure_offline_mode(model or LOCAL_EMBEDDING_MODEL)
        if not available:
            logger.warning(error_msg)

    return provider_class(model_name=model) if model else provider_class()


def build_resolver(
    config: StorefillConfig,
    library: AssetLibrary | None = None,
    provider: EmbeddingProvider | None = None,
) -> PlaceholderResolver:
    """Wire up a PlaceholderResolver from configuration.

    Args:
        config: Loaded configuration
        library: Pre-built library (defaults to config.library.path)
        provider: Pre-built embedding provider (defaults to config.embeddings)
    """
    if provider is None:
        provider = create_provider(config.embeddings.provider, config.embeddings.model)

    return PlaceholderResolver(
        library=library or AssetLibrary(config.library.path),
        matcher=SimilarityMatcher(provider, timeout=config.embeddings.timeout),
        fallback=FallbackPolicy(config.fallback.url),
        threshold=config.matching.threshold,
        scheme=config.placeholder.scheme,
        max_concurrency=config.resolver.max_concurrency,
    )


async def resolve_file(
    resolver: PlaceholderResolver, source: Path | None, destination: Path | None
) -> tuple[Any, ResolutionStats]:
    """Resolve a JSON document file.

    Args:
        resolver: Configured resolver
        source: Input JSON file; None reads the document from stdin
        destination: Output file; None leaves writing to the caller

    Raises:
        OSError: If reading or writing fails
        ValueError: If the input is not valid JSON
    """
    if source is None:
        text = await asyncio.to_thread(sys.stdin.read)
    else:
        text = await asyncio.to_thread(source.read_text, encoding="utf-8")

    try:
        document = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Input is not valid JSON: {e}") from e

    document, stats = await resolver.resolve_with_stats(document)

    if destination is not None:
        destination.parent.mkdir(parents=True, exist_ok=True)
        await asyncio.to_thread(
            destination.write_text,
            json.dumps(document, indent=2, ensure_ascii=False) + "\n",
        )
        logger.debug(f"Wrote resolved document to {destination}")

    return document, stats


def summarize_library(library: AssetLibrary) -> dict[str, Any]:
    """Count library images per partition and side, for diagnostics."""
    images = library.load()
    partitions: Counter[str] = Counter()
    for image in images:
        category = image.category
        if category is None:
            partitions["uncategorized"] += 1
        elif category is Category.HERO:
            side = next(
                (a.value for a in Alignment if image.has_alignment(a)), "unaligned"
            )
            partitions[f"hero/{side}"] += 1
        else:
            partitions[category.value] += 1

    return {
        "path": str(library.path),
        "total": len(images),
        "unusable": sum(1 for image in images if not image.usable),
        "partitions": dict(sorted(partitions.items())),
        "error": str(library.load_error) if library.load_error else None,
    }
