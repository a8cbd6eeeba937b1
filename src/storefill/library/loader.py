"""Lazily loaded, process-lifetime cache of the image library."""

import json
import logging
import threading
from collections.abc import Iterable
from pathlib import Path

from ..errors import LibraryUnavailable
from .models import Category, LibraryImage

logger = logging.getLogger(__name__)


class AssetLibrary:
    """Read-only image library backed by the JSON file of the indexing job.

    The file is read on the first call to load() and never again for the
    lifetime of the instance. Concurrent first calls perform a single read.

    Example:
        library = AssetLibrary(Path("data/lib/image-library.json"))
        heroes = library.by_category(Category.HERO)
    """

    def __init__(self, path: Path | str):
        """Initialize library without touching the file.

        Args:
            path: Location of the library JSON array
        """
        self.path = Path(path)
        self.load_error: LibraryUnavailable | None = None
        self._images: tuple[LibraryImage, ...] | None = None
        self._lock = threading.Lock()

    @classmethod
    def from_images(cls, images: Iterable[LibraryImage]) -> "AssetLibrary":
        """Create an already-loaded library from in-memory images."""
        library = cls(Path("<memory>"))
        library._images = tuple(images)
        return library

    @property
    def ready(self) -> bool:
        """Whether the library has been loaded (successfully or not)."""
        return self._images is not None

    def load(self) -> tuple[LibraryImage, ...]:
        """Return all library images, reading the file on first use.

        Never raises: a missing or malformed file yields an empty library and
        sets load_error.
        """
        images = self._images
        if images is not None:
            return images

        with self._lock:
            if self._images is None:
                self._images = self._read()
            return self._images

    def by_category(self, category: Category) -> list[LibraryImage]:
        """Return images belonging to one partition, in library order."""
        return [image for image in self.load() if image.category is category]

    def _read(self) -> tuple[LibraryImage, ...]:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except OSError as e:
            return self._unavailable(f"Cannot read image library {self.path}: {e}", e)
        except UnicodeDecodeError as e:
            return self._unavailable(f"Image library {self.path} is not valid UTF-8: {e}", e)
        except json.JSONDecodeError as e:
            return self._unavailable(f"Image library {self.path} is not valid JSON: {e}", e)

        if not isinstance(data, list):
            return self._unavailable(
                f"Image library {self.path} must be a JSON array, got {type(data).__name__}"
            )

        images = []
        dropped = 0
        for record in data:
            if not isinstance(record, dict):
                dropped += 1
                continue
            try:
                images.append(LibraryImage.from_record(record))
            except ValueError as e:
                logger.debug(f"Dropping library record: {e}")
                dropped += 1

        if dropped:
            logger.warning(f"Dropped {dropped} malformed records from {self.path}")

        unusable = [image.path for image in images if not image.usable]
        if unusable:
            logger.warning(
                f"{len(unusable)} library images have missing or zero embeddings "
                f"and will never be matched: {', '.join(unusable[:5])}"
                + (" ..." if len(unusable) > 5 else "")
            )

        if not images:
            return self._unavailable(f"Image library {self.path} contains no images")

        logger.info(f"Loaded {len(images)} library images from {self.path}")
        return tuple(images)

    def _unavailable(
        self, message: str, error: Exception | None = None
    ) -> tuple[LibraryImage, ...]:
        self.load_error = LibraryUnavailable(message, error)
        logger.warning(message)
        return ()
