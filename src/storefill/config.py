"""Configuration management for storefill.

Loads configuration from ~/.config/storefill/config.toml (or $STOREFILL_CONFIG).
Priority chain: CLI flags > env vars > config file > built-in defaults.
"""

import os
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path

CONFIG_DIR = Path.home() / ".config" / "storefill"
CONFIG_PATH = CONFIG_DIR / "config.toml"

DEFAULT_CONFIG = """\
# storefill configuration

[library]
# JSON array produced by the image indexing job
path = "data/lib/image-library.json"

[matching]
# Minimum cosine similarity for a confident match (0.0-1.0)
threshold = 0.45

[fallback]
# Image used when no library image fits a placeholder
url = "https://placehold.co/1200x800/png?text=Image+coming+soon"

[placeholder]
# Placeholder images look like <scheme>://img?description=...
scheme = "placeholder"

[embeddings]
# Provider: "openai" or "sentence-transformers". Must be the provider and
# model the library embeddings were built with.
provider = "openai"

# Leave unset to use the provider's default model
# ("text-embedding-3-small" for openai, "all-mpnet-base-v2" for
# sentence-transformers)
# model = "text-embedding-3-small"

# Seconds allowed per embedding call
timeout = 10.0

[resolver]
# Placeholders resolved concurrently per document
max_concurrency = 8

# API keys are read from environment variables, not this file:
#   OPENAI_API_KEY  - openai provider
"""


@dataclass(frozen=True)
class LibraryConfig:
    """Image library location."""

    path: Path


@dataclass(frozen=True)
class MatchingConfig:
    """Similarity matching configuration."""

    threshold: float


@dataclass(frozen=True)
class FallbackConfig:
    """Fallback image configuration."""

    url: str


@dataclass(frozen=True)
class PlaceholderConfig:
    """Placeholder detection configuration."""

    scheme: str


@dataclass(frozen=True)
class EmbeddingConfig:
    """Embedding provider configuration."""

    provider: str
    model: str | None
    timeout: float


@dataclass(frozen=True)
class ResolverConfig:
    """Resolution concurrency configuration."""

    max_concurrency: int


@dataclass(frozen=True)
class StorefillConfig:
    """Top-level storefill configuration."""

    library: LibraryConfig
    matching: MatchingConfig
    fallback: FallbackConfig
    placeholder: PlaceholderConfig
    embeddings: EmbeddingConfig
    resolver: ResolverConfig


_cached_config: StorefillConfig | None = None


def get_config_path() -> Path:
    """Config file location, honoring $STOREFILL_CONFIG."""
    override = os.getenv("STOREFILL_CONFIG")
    return Path(override) if override else CONFIG_PATH


def generate_config(path: Path | None = None) -> Path:
    """Write the default config file and return its path."""
    path = path or get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(DEFAULT_CONFIG)
    return path


def reset_config_cache() -> None:
    """Forget the loaded configuration (used by tests)."""
    global _cached_config
    _cached_config = None


def _fail(message: str, path: Path) -> None:
    print(message, file=sys.stderr)
    print(f"Edit {path} or delete it to use defaults.", file=sys.stderr)
    raise SystemExit(1)


def load_config() -> StorefillConfig:
    """Load configuration from config file with env var overrides.

    A missing config file is not an error: built-in defaults apply.

    Returns:
        Loaded and validated StorefillConfig.

    Raises:
        SystemExit: If the config file or an override is invalid.
    """
    global _cached_config
    if _cached_config is not None:
        return _cached_config

    path = get_config_path()
    data = tomllib.loads(DEFAULT_CONFIG)

    if path.exists():
        try:
            with open(path, "rb") as f:
                user = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            _fail(f"Cannot read config {path}: {e}", path)
        for section, values in user.items():
            if isinstance(values, dict):
                data.setdefault(section, {}).update(values)

    library = data["library"]
    matching = data["matching"]
    fallback = data["fallback"]
    placeholder = data["placeholder"]
    embeddings = data["embeddings"]
    resolver = data["resolver"]

    # Env vars override config file values
    try:
        threshold = float(os.getenv("STOREFILL_THRESHOLD", matching["threshold"]))
        timeout = float(os.getenv("STOREFILL_EMBEDDING_TIMEOUT", embeddings["timeout"]))
        max_concurrency = int(
            os.getenv("STOREFILL_MAX_CONCURRENCY", resolver["max_concurrency"])
        )
    except (TypeError, ValueError) as e:
        _fail(f"Invalid numeric config value: {e}", path)

    fallback_url = os.getenv("STOREFILL_FALLBACK_URL", fallback["url"])

    problems = []
    if not isinstance(fallback_url, str) or not fallback_url.strip():
        problems.append("fallback.url cannot be empty")
    if not 0.0 <= threshold <= 1.0:
        problems.append(f"matching.threshold must be between 0.0 and 1.0, got {threshold}")
    if timeout <= 0:
        problems.append(f"embeddings.timeout must be positive, got {timeout}")
    if max_concurrency < 1:
        problems.append(f"resolver.max_concurrency must be at least 1, got {max_concurrency}")
    if problems:
        _fail("Invalid config values: " + "; ".join(problems), path)

    _cached_config = StorefillConfig(
        library=LibraryConfig(
            path=Path(os.getenv("STOREFILL_LIBRARY_PATH", library["path"])).expanduser(),
        ),
        matching=MatchingConfig(threshold=threshold),
        fallback=FallbackConfig(url=fallback_url),
        placeholder=PlaceholderConfig(
            scheme=os.getenv("STOREFILL_SCHEME", placeholder["scheme"]),
        ),
        embeddings=EmbeddingConfig(
            provider=os.getenv("STOREFILL_EMBEDDING_PROVIDER", embeddings["provider"]),
            model=os.getenv("STOREFILL_EMBEDDING_MODEL", embeddings.get("model")) or None,
            timeout=timeout,
        ),
        resolver=ResolverConfig(max_concurrency=max_concurrency),
    )

    return _cached_config
