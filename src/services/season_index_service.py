"""Maintains the season-by-season episode catalog (``games_list.json``).

Discovers season listing pages, extracts one :class:`EpisodeListing` per
episode, merges them into the persisted catalog and writes it back.  The
catalog is the input for game scraping: it says which game ids exist and
which season each belongs to.

Incremental behaviour: seasons before the catalog's last season are not
re-fetched, and the last season is always re-fetched because it may have
gained episodes since the previous run.  Merging is keyed by ``game_id``
with last-write-wins, followed by a stable sort on ``show_number``.

Usage via CLI::

    python -m src.cli.scrape_archive update-index
"""

from __future__ import annotations

import json
import re
from datetime import date
from pathlib import Path
from typing import Callable

import structlog
from bs4 import BeautifulSoup
from pydantic import ValidationError

from src.interfaces.archive_provider import IArchiveProvider
from src.models.game import EpisodeListing, SeasonIndex
from src.utils.errors import ArchiveFetchError, CatalogError

logger = structlog.get_logger(logger_name=__name__)

_CATALOG_PATH = "data/games_list.json"
_FIRST_SEASON = 1

_SEASON_HREF_PREFIX = "showseason"
_SEASON_TOKEN_RE = re.compile(r"season=([^&#]+)")
_GAME_ID_RE = re.compile(r"game_id=(\d+)")
_SHOW_NUMBER_RE = re.compile(r"#(\d+)")
_AIR_DATE_RE = re.compile(r"aired\s*(\d{4}-\d{2}-\d{2})")


# ---------------------------------------------------------------------------
# Page parsing
# ---------------------------------------------------------------------------


def parse_season_links(document: BeautifulSoup) -> list[str]:
    """Return every ``showseason.php`` href on the season list page, in page order."""
    links: list[str] = []
    for anchor in document.select("td a[href]"):
        href = anchor.get("href", "")
        if href.startswith(_SEASON_HREF_PREFIX):
            links.append(href)
    return links


def season_token(season_href: str) -> str | None:
    """The raw ``season=`` value of a season link, e.g. ``"40"`` or ``"cwcpi"``."""
    match = _SEASON_TOKEN_RE.search(season_href)
    return match.group(1) if match else None


def _season_value(token: str) -> int | str:
    return int(token) if token.isdigit() else token


def filter_season_links(links: list[str], last_season: int) -> list[str]:
    """Keep numbered seasons from *last_season* onwards.

    Special seasons (non-numeric tokens such as tournaments) are dropped, as
    are seasons already fully covered by the catalog.
    """
    kept: list[str] = []
    for link in links:
        token = season_token(link)
        if token is None or not token.isdigit():
            continue
        if int(token) < last_season:
            continue
        kept.append(link)
    return kept


def parse_season_page(document: BeautifulSoup, season_href: str) -> list[EpisodeListing]:
    """Extract one listing per episode anchor on a season page.

    Anchors whose text lacks a show number or air date, or whose href lacks
    a game id, are skipped.
    """
    token = season_token(season_href)
    season: int | str = _season_value(token) if token is not None else ""

    listings: list[EpisodeListing] = []
    for anchor in document.select("td a[href]"):
        href = anchor.get("href", "")
        if "showgame.php" not in href:
            continue
        text = anchor.get_text()
        game_id_match = _GAME_ID_RE.search(href)
        show_match = _SHOW_NUMBER_RE.search(text)
        date_match = _AIR_DATE_RE.search(text)
        if not (game_id_match and show_match and date_match):
            continue
        try:
            air_date = date.fromisoformat(date_match.group(1))
        except ValueError:
            continue
        listings.append(
            EpisodeListing(
                game_id=int(game_id_match.group(1)),
                show_number=int(show_match.group(1)),
                air_date=air_date,
                season=season,
            )
        )
    return listings


def merge_listings(
    existing: list[EpisodeListing], new: list[EpisodeListing]
) -> list[EpisodeListing]:
    """Merge by ``game_id`` (later entries win) and sort by ``show_number``."""
    by_id: dict[int, EpisodeListing] = {}
    for listing in [*existing, *new]:
        by_id[listing.game_id] = listing
    return sorted(by_id.values(), key=lambda e: e.show_number)


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class SeasonIndexService:
    """Builds and incrementally refreshes the persisted episode catalog.

    Parameters
    ----------
    provider:
        The :class:`IArchiveProvider` handling HTTP requests.
    catalog_path:
        JSON file holding the catalog (default: ``data/games_list.json``).
    """

    def __init__(
        self,
        provider: IArchiveProvider,
        catalog_path: str = _CATALOG_PATH,
    ) -> None:
        self._provider = provider
        self._catalog_path = Path(catalog_path)
        self._logger = logger

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def update(
        self,
        on_progress: Callable[[str, int], None] | None = None,
    ) -> list[EpisodeListing]:
        """Re-scrape seasons from the last catalogued one onwards and save.

        Seasons are fetched one at a time.  A season that fails to fetch is
        logged and skipped; the rest of the run continues.

        Parameters
        ----------
        on_progress:
            Callback ``(season_href, episodes_found)`` after each season.

        Returns
        -------
        list[EpisodeListing]
            The merged, sorted catalog as written to disk.
        """
        existing = self.load_catalog()
        last_season = self._resume_season(existing)

        season_list = await self._provider.fetch_season_list()
        links = filter_season_links(parse_season_links(season_list), last_season)
        self._logger.info(
            "season_index_update_start",
            catalogued=len(existing),
            last_season=last_season,
            seasons_to_fetch=len(links),
        )

        scraped: list[EpisodeListing] = []
        for link in links:
            try:
                document = await self._provider.fetch_season(link)
            except ArchiveFetchError as exc:
                self._logger.error("season_fetch_failed", season=link, error=str(exc))
                continue

            listings = parse_season_page(document, link)
            scraped.extend(listings)
            if on_progress:
                on_progress(link, len(listings))
            self._logger.info("season_scraped", season=link, episodes=len(listings))

        merged = merge_listings(existing, scraped)
        self.save_catalog(merged)
        return merged

    def load_index(self) -> SeasonIndex:
        """Return the persisted catalog wrapped in a :class:`SeasonIndex`."""
        return SeasonIndex(episodes=self.load_catalog())

    def load_catalog(self) -> list[EpisodeListing]:
        """Load the persisted catalog; a missing or unreadable file yields ``[]``."""
        if not self._catalog_path.exists():
            return []
        try:
            raw = json.loads(self._catalog_path.read_text(encoding="utf-8"))
            return [EpisodeListing.model_validate(item) for item in raw]
        except (json.JSONDecodeError, ValidationError, TypeError, OSError) as exc:
            self._logger.warning(
                "catalog_load_failed",
                path=str(self._catalog_path),
                error=str(exc),
            )
            return []

    def save_catalog(self, listings: list[EpisodeListing]) -> None:
        """Write *listings* to the catalog file as pretty-printed JSON."""
        data = [listing.model_dump(mode="json") for listing in listings]
        try:
            self._catalog_path.parent.mkdir(parents=True, exist_ok=True)
            self._catalog_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        except OSError as exc:
            raise CatalogError(
                message=f"Could not write catalog {self._catalog_path}: {exc}"
            ) from exc
        self._logger.info("catalog_saved", path=str(self._catalog_path), episodes=len(data))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _resume_season(existing: list[EpisodeListing]) -> int:
        if not existing:
            return _FIRST_SEASON
        last = existing[-1].season
        return last if isinstance(last, int) else _FIRST_SEASON

