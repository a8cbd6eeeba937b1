"""Typer CLI definition for storefill."""

import asyncio
import json
import logging
from dataclasses import replace
from pathlib import Path

import typer

from .config import generate_config, get_config_path, load_config
from .core import build_resolver, create_provider, resolve_file, summarize_library
from .embeddings.models import LOCAL_EMBEDDING_MODEL
from .errors import EmbeddingAuthError
from .library.loader import AssetLibrary
from .models_manager import download_models

app = typer.Typer(help="Resolve placeholder images of generated storefronts")


def _configure_logging(debug: bool) -> None:
    if debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )
    else:
        logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")


def _fail(message: str, error: Exception, debug: bool) -> None:
    if debug:
        typer.echo(f"Debug - {message}: {error!r}", err=True)
    else:
        typer.echo(f"Error: {message}: {error}", err=True)
    raise typer.Exit(1)


@app.command()
def resolve(
    source: str = typer.Argument(..., help="Storefront JSON document, or - for stdin"),
    output: Path | None = typer.Option(
        None, "-o", "--output", help="Write resolved document here instead of stdout"
    ),
    library: Path | None = typer.Option(
        None, "-l", "--library", help="Image library JSON (from config if omitted)"
    ),
    threshold: float | None = typer.Option(
        None, "-t", "--threshold", help="Similarity threshold for matches (0.0-1.0)"
    ),
    provider: str | None = typer.Option(
        None, "-p", "--provider", help="Embedding provider (from config if omitted)"
    ),
    model: str | None = typer.Option(
        None, "-m", "--model", help="Embedding model (provider default if omitted)"
    ),
    debug: bool = typer.Option(
        False, "--debug", help="Show verbose error messages and match decisions"
    ),
) -> None:
    """Replace placeholder images in a storefront document."""
    _configure_logging(debug)
    config = load_config()

    if threshold is not None:
        if not 0.0 <= threshold <= 1.0:
            typer.echo("Error: --threshold must be between 0.0 and 1.0", err=True)
            raise typer.Exit(1)
        config = replace(config, matching=replace(config.matching, threshold=threshold))
    if library is not None:
        config = replace(config, library=replace(config.library, path=library))

    # A different provider without an explicit model uses that provider's default
    provider_name = provider or config.embeddings.provider
    model_name = model or (config.embeddings.model if provider is None else None)

    try:
        embedding_provider = create_provider(provider_name, model_name)
    except KeyError as e:
        _fail("Unknown embedding provider", e, debug)
    except EmbeddingAuthError as e:
        _fail("Embedding provider not configured", e, debug)

    resolver = build_resolver(config, provider=embedding_provider)
    input_path = None if source == "-" else Path(source)

    try:
        document, stats = asyncio.run(resolve_file(resolver, input_path, output))
    except FileNotFoundError as e:
        _fail(f"File not found: {source}", e, debug)
    except ValueError as e:
        _fail("Invalid document", e, debug)
    except OSError as e:
        _fail("File system error", e, debug)

    if output is None:
        typer.echo(json.dumps(document, indent=2, ensure_ascii=False))

    typer.echo(
        f"{stats.total} placeholders: {stats.matched} matched, "
        f"{stats.fallback} fallback, {stats.unresolved} unresolved"
        + (f", {stats.skipped} nodes skipped" if stats.skipped else ""),
        err=True,
    )
    if stats.unresolved:
        typer.echo(
            f"Warning: image library unavailable ({config.library.path})", err=True
        )


@app.command("library")
def library_info(
    library: Path | None = typer.Option(
        None, "-l", "--library", help="Image library JSON (from config if omitted)"
    ),
    debug: bool = typer.Option(False, "--debug", help="Show verbose loading messages"),
) -> None:
    """Summarize the image library: images per partition and unusable entries."""
    _configure_logging(debug)
    path = library or load_config().library.path
    summary = summarize_library(AssetLibrary(path))

    if summary["error"]:
        typer.echo(f"Error: {summary['error']}", err=True)
        raise typer.Exit(1)

    typer.echo(f"=== Image library: {summary['path']} ===")
    typer.echo(f"Images: {summary['total']}")
    for partition, count in summary["partitions"].items():
        typer.echo(f"  {partition}: {count}")
    if summary["unusable"]:
        typer.echo(f"Unusable embeddings: {summary['unusable']}")


@app.command("download-models")
def download_models_command(
    model: str = typer.Option(
        LOCAL_EMBEDDING_MODEL, "-m", "--model", help="sentence-transformers model"
    ),
) -> None:
    """Download the local embedding model for the sentence-transformers provider."""
    download_models(model)


@app.command("init-config")
def init_config(
    force: bool = typer.Option(False, "--force", help="Overwrite an existing config"),
) -> None:
    """Write the default config file."""
    path = get_config_path()
    if path.exists() and not force:
        typer.echo(f"Config already exists at {path} (use --force to overwrite)")
        raise typer.Exit(1)
    typer.echo(f"Wrote {generate_config(path)}")
