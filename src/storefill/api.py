"""High-level API for storefill library usage."""

from dataclasses import replace
from pathlib import Path
from typing import Any

from .config import load_config
from .core import build_resolver
from .embeddings.base import EmbeddingProvider
from .library.loader import AssetLibrary


async def resolve(
    document: Any,
    library: AssetLibrary | str | Path | None = None,
    provider: EmbeddingProvider | None = None,
    threshold: float | None = None,
    fallback_url: str | None = None,
) -> Any:
    """Replace placeholder images of a storefront document.

    Builds a one-off resolver from the loaded configuration; services handling
    many documents should keep a resolver from core.build_resolver instead so
    the library is read only once.

    Args:
        document: Parsed storefront document, modified in place
        library: AssetLibrary or path to the library JSON (config if omitted)
        provider: Embedding provider (configured provider if omitted)
        threshold: Similarity threshold override (0.0-1.0)
        fallback_url: Fallback image URL override

    Returns:
        The same document with placeholders replaced

    Raises:
        EmbeddingAuthError: If the configured provider has no credentials
        KeyError: If the configured provider is not registered
        ValueError: If threshold is out of range
    """
    config = load_config()
    if threshold is not None:
        config = replace(config, matching=replace(config.matching, threshold=threshold))
    if fallback_url is not None:
        config = replace(config, fallback=replace(config.fallback, url=fallback_url))

    if library is not None and not isinstance(library, AssetLibrary):
        library = AssetLibrary(library)

    resolver = build_resolver(config, library=library, provider=provider)
    return await resolver.resolve(document)
