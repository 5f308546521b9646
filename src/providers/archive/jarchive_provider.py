"""J-Archive retrieval provider using httpx and BeautifulSoup.

Fetches ``showgame.php``, ``listseasons.php`` and ``showseason.php`` pages
and returns them parsed.  Requests are throttled to a minimum interval so
that bounded-parallel game scraping still reaches the archive at a
respectful rate.  Failures are raised as :class:`ArchiveFetchError` so the
scrape services can skip the page and continue.
"""

from __future__ import annotations

import asyncio
import time

import httpx
from bs4 import BeautifulSoup

from src.interfaces.archive_provider import IArchiveProvider
from src.utils.errors import ArchiveFetchError
from src.utils.logging import get_logger

_BASE_URL = "https://j-archive.com"
_DEFAULT_TIMEOUT = 15.0
_DEFAULT_SCRAPE_DELAY = 2.0
_DEFAULT_HEADERS = {
    "User-Agent": "jarchive-scraper/0.1 (+https://github.com/jarchive-scraper)",
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
}

GAME_PATH = "showgame.php?game_id={game_id}"
SEASON_LIST_PATH = "listseasons.php"


class JArchiveProvider(IArchiveProvider):
    """Archive provider backed by ``httpx.AsyncClient``.

    Parameters
    ----------
    http_client:
        Injected client (tests pass a mock).  When omitted the provider
        creates and owns one, and :meth:`close` shuts it down.
    base_url:
        Archive root; relative paths are resolved against it.
    scrape_delay:
        Minimum seconds between two requests, shared by all concurrent
        callers of this provider.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        base_url: str = _BASE_URL,
        scrape_delay: float = _DEFAULT_SCRAPE_DELAY,
        timeout: float = _DEFAULT_TIMEOUT,
    ) -> None:
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            headers=_DEFAULT_HEADERS,
            follow_redirects=True,
        )
        self._base_url = base_url.rstrip("/")
        self._scrape_delay = scrape_delay
        self._last_request_time: float = 0.0
        self._throttle_lock = asyncio.Lock()
        self._logger = get_logger(__name__)

    # -- Private helpers -------------------------------------------------------

    async def _throttle(self) -> None:
        """Enforce minimum delay between requests."""
        async with self._throttle_lock:
            now = time.monotonic()
            elapsed = now - self._last_request_time
            if self._last_request_time > 0 and elapsed < self._scrape_delay:
                await asyncio.sleep(self._scrape_delay - elapsed)
            self._last_request_time = time.monotonic()

    def _resolve(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        return f"{self._base_url}/{path.lstrip('/')}"

    # -- IArchiveProvider implementation --------------------------------------

    async def fetch_document(self, path: str) -> BeautifulSoup:
        url = self._resolve(path)
        await self._throttle()
        try:
            response = await self._http.get(url)
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            raise ArchiveFetchError(
                message=f"Timeout fetching {url}: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        except httpx.HTTPStatusError as exc:
            raise ArchiveFetchError(
                message=f"HTTP {exc.response.status_code} for {url}",
                provider_name=self.get_provider_name(),
            ) from exc
        except httpx.HTTPError as exc:
            raise ArchiveFetchError(
                message=f"HTTP error fetching {url}: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        self._logger.debug("archive_page_fetched", url=url, size=len(response.text))
        return BeautifulSoup(response.text, "html.parser")

    async def fetch_game(self, game_id: int) -> BeautifulSoup:
        return await self.fetch_document(GAME_PATH.format(game_id=game_id))

    async def fetch_season_list(self) -> BeautifulSoup:
        return await self.fetch_document(SEASON_LIST_PATH)

    async def fetch_season(self, season_href: str) -> BeautifulSoup:
        return await self.fetch_document(season_href)

    def get_provider_name(self) -> str:
        return "jarchive"

    async def close(self) -> None:
        """Close the HTTP client if this provider created it."""
        if self._owns_client:
            await self._http.aclose()
