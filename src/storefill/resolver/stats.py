"""Placeholder resolution counters."""

import threading
from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class ResolutionStats:
    """Snapshot of resolution counters.

    Attributes:
        total: Placeholders encountered
        matched: Placeholders replaced by a library image
        fallback: Placeholders replaced by the fallback URL
        unresolved: Placeholders left untouched (library unavailable)
        skipped: Document nodes skipped because their shape was not recognized
    """

    total: int = 0
    matched: int = 0
    fallback: int = 0
    unresolved: int = 0
    skipped: int = 0

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


class StatisticsAggregator:
    """Thread-safe counters for observability; never consulted by matching."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counts = {name: 0 for name in ResolutionStats.__dataclass_fields__}

    def _add(self, name: str, amount: int = 1) -> None:
        with self._lock:
            self._counts[name] += amount

    def record_placeholders(self, count: int) -> None:
        self._add("total", count)

    def record_match(self) -> None:
        self._add("matched")

    def record_fallback(self) -> None:
        self._add("fallback")

    def record_unresolved(self, count: int = 1) -> None:
        self._add("unresolved", count)

    def record_skipped(self) -> None:
        self._add("skipped")

    def merge(self, stats: ResolutionStats) -> None:
        """Fold a document's counters into these totals."""
        with self._lock:
            for name, value in stats.as_dict().items():
                self._counts[name] += value

    def snapshot(self) -> ResolutionStats:
        with self._lock:
            return ResolutionStats(**self._counts)
