"""Placeholder image URL detection and construction."""

from dataclasses import dataclass
from typing import Any
from urllib.parse import parse_qs, urlencode, urlsplit

from ..errors import MalformedPlaceholder

DEFAULT_SCHEME = "placeholder"


@dataclass(frozen=True)
class Placeholder:
    """A placeholder string found in a document.

    Attributes:
        raw: The original string value
        description: Decoded query text, None when missing or unparseable
    """

    raw: str
    description: str | None

    @property
    def malformed(self) -> bool:
        return self.description is None

    def require_description(self) -> str:
        """Return the description or raise MalformedPlaceholder."""
        if self.malformed:
            raise MalformedPlaceholder(
                f"Placeholder has no usable description: {self.raw[:80]}", self.raw
            )
        return self.description


def is_placeholder(value: Any, scheme: str = DEFAULT_SCHEME) -> bool:
    """Check whether a value uses the placeholder scheme."""
    return isinstance(value, str) and value.startswith(f"{scheme}://")


def parse_placeholder(value: Any, scheme: str = DEFAULT_SCHEME) -> Placeholder | None:
    """Parse a document value as a placeholder.

    Args:
        value: Any JSON value
        scheme: Sentinel scheme, without "://"

    Returns:
        Placeholder for scheme-matching strings (possibly malformed), None for
        every other value including ordinary URLs
    """
    if not is_placeholder(value, scheme):
        return None

    try:
        query = urlsplit(value).query
        params = parse_qs(query, keep_blank_values=True, errors="strict")
    except (ValueError, UnicodeDecodeError):
        return Placeholder(raw=value, description=None)

    descriptions = params.get("description") or [""]
    description = descriptions[0].strip()
    return Placeholder(raw=value, description=description or None)


def build_placeholder(
    description: str, scheme: str = DEFAULT_SCHEME, host: str = "img"
) -> str:
    """Build a placeholder URL carrying a description."""
    return f"{scheme}://{host}?{urlencode({'description': description})}"
