"""Hugging Face cache handling for the sentence-transformers provider.

Only libraries indexed with a local model need this; the openai provider
downloads nothing.
"""

import os
import sys
from pathlib import Path

from .embeddings.models import LOCAL_EMBEDDING_MODEL

_OFFLINE_VARS = ("HF_HUB_OFFLINE", "TRANSFORMERS_OFFLINE")
_WEIGHT_FILES = {"pytorch_model.bin", "config.json"}


def _hub_name(model_name: str) -> str:
    # Bare names resolve under the sentence-transformers organisation
    return model_name if "/" in model_name else f"sentence-transformers/{model_name}"


def get_model_cache_dir() -> Path:
    """Hub cache directory, honoring $HF_HOME."""
    return Path(os.environ.get("HF_HOME", Path.home() / ".cache/huggingface")) / "hub"


def check_model_cached(model_name: str = LOCAL_EMBEDDING_MODEL) -> bool:
    """Whether weights for ``model_name`` are present in the hub cache."""
    repo_dir = get_model_cache_dir() / f"models--{_hub_name(model_name).replace('/', '--')}"
    if not repo_dir.is_dir():
        return False

    return any(
        _WEIGHT_FILES.intersection(files) or any(f.endswith(".safetensors") for f in files)
        for _root, _dirs, files in os.walk(repo_dir)
    )


def download_models(model_name: str = LOCAL_EMBEDDING_MODEL) -> None:
    """Fetch a sentence-transformers model into the hub cache.

    Raises:
        SystemExit: If the model could not be fetched
    """
    hub_name = _hub_name(model_name)
    print(f"Fetching {hub_name} for the sentence-transformers provider...")

    for name in _OFFLINE_VARS:
        os.environ.pop(name, None)

    try:
        from sentence_transformers import SentenceTransformer

        model = SentenceTransformer(hub_name)
    except Exception as e:
        print(f"✗ Failed to download model: {e}", file=sys.stderr)
        print(
            "Libraries indexed with the openai provider do not need a local model.",
            file=sys.stderr,
        )
        raise SystemExit(1) from e

    print(
        f"✓ {hub_name} ready (dimension: {model.get_sentence_embedding_dimension()}) "
        f"in {get_model_cache_dir()}"
    )


def configure_offline_mode(model_name: str = LOCAL_EMBEDDING_MODEL) -> tuple[bool, str | None]:
    """Switch Hugging Face to offline mode when the model is already cached.

    Returns:
        Tuple of (model_available, hint for fetching it when missing)
    """
    if not check_model_cached(model_name):
        return False, (
            f"Embedding model {_hub_name(model_name)} is not cached. Fetch it with:\n"
            f"  storefill download-models --model {model_name}\n"
        )

    for name in _OFFLINE_VARS:
        os.environ[name] = "1"
    return True, None
