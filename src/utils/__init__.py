"""Utility modules for the archive scraper.

Available utility modules (re-exported here for convenience):

- **errors** -- Domain-specific exception hierarchy rooted at
  ArchiveScraperError; retrieval, catalog and argument failures each have
  their own subclass so callers can handle them granularly.
- **concurrency** -- asyncio semaphore throttling used to bound how many
  game pages are fetched in parallel.
- **logging** -- structlog setup with a dual-renderer pattern: coloured
  console output in development, structured JSON in production.
"""

# -- Domain exception hierarchy --------------------------------------------
from src.utils.errors import (
    ArchiveFetchError,
    ArchiveScraperError,
    CatalogError,
    ConfigurationError,
    InvalidDocumentError,
)

# -- Async concurrency helpers ---------------------------------------------
from src.utils.concurrency import throttled_gather

# -- Structured logging setup ----------------------------------------------
from src.utils.logging import configure_logging, get_logger

__all__ = [
    "ArchiveFetchError",
    "ArchiveScraperError",
    "CatalogError",
    "ConfigurationError",
    "InvalidDocumentError",
    "configure_logging",
    "get_logger",
    "throttled_gather",
]
