"""Custom storefill exceptions."""


class StorefillError(Exception):
    """Base exception for placeholder resolution errors."""

    def __init__(
        self, message: str, original_error: Exception | None = None
    ) -> None:
        super().__init__(message)
        self.original_error = original_error


class LibraryUnavailable(StorefillError):
    """Exception describing an image library that could not be loaded.

    This typically occurs when:
    - The library file does not exist or cannot be read
    - The file is not valid JSON or not a JSON array
    - The file parsed but contained no usable records
    """

    pass


class EmbeddingFailure(StorefillError):
    """Exception raised when a text could not be embedded.

    This typically occurs when:
    - The embedding API is unavailable or rate limited
    - The request timed out
    - The model returned an empty or malformed vector
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message, original_error)
        self.status_code = status_code


class EmbeddingAuthError(EmbeddingFailure):
    """Exception raised when the embedding provider rejects our credentials."""

    pass


class MalformedPlaceholder(StorefillError):
    """Exception for a placeholder whose description is missing or unparseable."""

    def __init__(self, message: str, value: str) -> None:
        super().__init__(message)
        self.value = value


class SchemaMismatch(StorefillError):
    """Exception for a document node that matches neither known slot shape."""

    def __init__(self, message: str, location: str) -> None:
        super().__init__(message)
        self.location = location
