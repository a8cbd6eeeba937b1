"""Data models for the pre-embedded image library."""

from dataclasses import dataclass
from enum import Enum
from typing import Any

import numpy as np

from ..embeddings.models import Embedding

_HERO_SEGMENTS = {"hero", "heroes"}
_PRODUCT_SEGMENTS = {"product", "products"}


class Category(Enum):
    """Library partition an image belongs to."""

    PRODUCT = "product"
    HERO = "hero"


class Alignment(Enum):
    """Side of a hero slide the content box sits on."""

    LEFT = "left"
    RIGHT = "right"

    @classmethod
    def parse(cls, value: Any) -> "Alignment":
        """Parse a ``boxAlignment`` value; anything but "right" means left."""
        if isinstance(value, str) and value.strip().lower() == cls.RIGHT.value:
            return cls.RIGHT
        return cls.LEFT


def _as_embedding(value: Any) -> Embedding:
    """Convert a raw JSON embedding into a read-only 1-D float array.

    Anything that is not a flat list of numbers becomes an empty array so the
    record stays in the library but never takes part in matching.
    """
    try:
        embedding = np.array(value if value is not None else [], dtype=np.float64)
    except (TypeError, ValueError):
        embedding = np.empty(0, dtype=np.float64)

    if embedding.ndim != 1:
        embedding = np.empty(0, dtype=np.float64)

    embedding.setflags(write=False)
    return embedding


@dataclass(frozen=True, eq=False)
class LibraryImage:
    """One image of the library with its precomputed description embedding.

    Attributes:
        path: Library-relative asset identifier, e.g. "/images/library/hero/beach-left.jpg"
        url: Public URL substituted into resolved documents
        description: Text the embedding was computed from
        short_name: Human label, diagnostic only
        embedding: Read-only 1-D vector of the description
    """

    path: str
    url: str
    description: str
    short_name: str
    embedding: Embedding

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "LibraryImage":
        """Build an image from one entry of the library JSON file.

        Raises:
            ValueError: If ``path`` or ``url`` is missing or not a string
        """
        path = record.get("path")
        url = record.get("url")
        if not isinstance(path, str) or not path:
            raise ValueError("library record has no path")
        if not isinstance(url, str) or not url:
            raise ValueError(f"library record {path} has no url")

        return cls(
            path=path,
            url=url,
            description=str(record.get("description") or ""),
            short_name=str(record.get("shortName") or ""),
            embedding=_as_embedding(record.get("embedding")),
        )

    @property
    def category(self) -> Category | None:
        """Partition derived from the directory segments of ``path``."""
        segments = [s.lower() for s in self.path.split("/")[:-1] if s]
        if any(s in _HERO_SEGMENTS for s in segments):
            return Category.HERO
        if any(s in _PRODUCT_SEGMENTS for s in segments):
            return Category.PRODUCT
        return None

    @property
    def usable(self) -> bool:
        """Whether the embedding can take part in cosine similarity."""
        if self.embedding.size == 0:
            return False
        norm = float(np.linalg.norm(self.embedding))
        return bool(np.isfinite(norm)) and norm > 0.0

    def has_alignment(self, alignment: Alignment) -> bool:
        """Check the filename convention ``-left.`` / ``-right.``."""
        return f"-{alignment.value}." in self.path.lower()
