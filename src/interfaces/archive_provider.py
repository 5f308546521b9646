"""Abstract base class for transcript-archive retrieval providers.

Defines the contract the scrape services use to obtain parsed pages.  The
transcript extractor never talks to the network; it receives the documents
these providers return.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from bs4 import BeautifulSoup


class IArchiveProvider(ABC):
    """Contract for services that fetch and parse archive pages."""

    @abstractmethod
    async def fetch_document(self, path: str) -> BeautifulSoup:
        """Fetch *path* (relative to the archive root, or absolute) and parse it.

        Raises
        ------
        src.utils.errors.ArchiveFetchError
            If the request times out, fails, or returns an error status.
        """

    @abstractmethod
    async def fetch_game(self, game_id: int) -> BeautifulSoup:
        """Fetch the transcript page for *game_id*."""

    @abstractmethod
    async def fetch_season_list(self) -> BeautifulSoup:
        """Fetch the page listing every season."""

    @abstractmethod
    async def fetch_season(self, season_href: str) -> BeautifulSoup:
        """Fetch one season's episode listing (e.g. ``showseason.php?season=40``)."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier used in logs and error messages."""

    async def close(self) -> None:
        """Release network resources.  The default holds none."""
