"""Custom exception hierarchy for the archive scraper.

All application exceptions inherit from :class:`ArchiveScraperError`, which
carries an optional ``provider_name`` so error handlers can identify which
external source (e.g. "jarchive") caused the failure.

The hierarchy is organized by layer:

    ArchiveScraperError  (base -- catch-all for any scraper error)
    +-- InvalidDocumentError  (bad call-time arguments to the extractor)
    +-- ArchiveFetchError     (network retrieval of a page failed)
    +-- CatalogError          (catalog or game JSON could not be written)
    +-- ConfigurationError    (startup / missing config)

The transcript extractor itself never raises on markup irregularities; only
:class:`InvalidDocumentError` escapes it.  Orchestration code catches
:class:`ArchiveFetchError` per game or per season and keeps going.
"""


class ArchiveScraperError(Exception):
    """Base exception for all archive scraper errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name``.  ``__str__`` prefixes the provider name in brackets
    for structured log output, e.g. ``[jarchive] HTTP 503 for /showgame.php``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Extraction errors
# ---------------------------------------------------------------------------

class InvalidDocumentError(ArchiveScraperError):
    """Raised when the extractor is called without a usable document or id."""

    def __init__(
        self,
        message: str = "A parsed transcript document is required",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Retrieval / persistence errors
# ---------------------------------------------------------------------------

class ArchiveFetchError(ArchiveScraperError):
    """Raised when a page cannot be retrieved from the archive.

    The scrape services catch this per game / per season so one bad page
    never aborts a batch.
    """

    def __init__(
        self,
        message: str = "Archive page could not be fetched",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class CatalogError(ArchiveScraperError):
    """Raised when the episode catalog or a game JSON file cannot be written."""

    def __init__(
        self,
        message: str = "Episode catalog operation failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ConfigurationError(ArchiveScraperError):
    """Raised when configuration is invalid or missing at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
