"""Fetches game transcripts, extracts them and stores one JSON file per game.

This is the orchestration layer around the pure transcript extractor:
retrieval goes through an :class:`IArchiveProvider`, extraction through
:func:`extract_game`, persistence is ``<games_dir>/game_<id>.json``.

Batches run with bounded parallelism (``max_concurrency``) and are
resume-safe: games that already have a JSON file are skipped unless
``skip_existing=False``.  A game that fails to fetch is logged and recorded
in the returned :class:`ScrapeSummary`; it never aborts the batch.
"""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

import structlog
from pydantic import ValidationError

from src.interfaces.archive_provider import IArchiveProvider
from src.models.game import GameRecord
from src.services.transcript_extractor import extract_game
from src.utils.concurrency import throttled_gather
from src.utils.errors import ArchiveScraperError, CatalogError

logger = structlog.get_logger(logger_name=__name__)

_GAMES_DIR = "data/games"
_DEFAULT_MAX_CONCURRENCY = 2


@dataclass
class ScrapeSummary:
    """Outcome of a batch scrape, by game id."""

    scraped: list[int] = field(default_factory=list)
    skipped: list[int] = field(default_factory=list)
    failed: list[int] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.scraped) + len(self.skipped) + len(self.failed)


def game_to_json(record: GameRecord) -> str:
    """Serialize a record to the on-disk JSON document."""
    return json.dumps(record.model_dump(mode="json"), indent=2, ensure_ascii=False)


class GameScrapeService:
    """Scrapes game transcripts into per-game JSON files.

    Parameters
    ----------
    provider:
        The :class:`IArchiveProvider` handling HTTP requests.
    games_dir:
        Directory for ``game_<id>.json`` files (default: ``data/games/``).
    max_concurrency:
        Maximum number of games fetched at the same time.
    """

    def __init__(
        self,
        provider: IArchiveProvider,
        games_dir: str = _GAMES_DIR,
        max_concurrency: int = _DEFAULT_MAX_CONCURRENCY,
    ) -> None:
        self._provider = provider
        self._games_dir = Path(games_dir)
        self._max_concurrency = max(1, max_concurrency)
        self._logger = logger

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def scrape_game(self, game_id: int) -> GameRecord:
        """Fetch, extract and save one game.

        Raises
        ------
        ArchiveFetchError
            If the transcript page could not be retrieved.
        """
        document = await self._provider.fetch_game(game_id)
        record = extract_game(document, game_id)
        self.save_game(record)
        self._logger.info(
            "game_scraped",
            game_id=game_id,
            title=record.title,
            clues=record.clue_count,
            next_game_id=record.next_game_id,
        )
        return record

    async def scrape_games(
        self,
        game_ids: list[int],
        skip_existing: bool = True,
        on_progress: Callable[[int, bool], None] | None = None,
    ) -> ScrapeSummary:
        """Scrape many games with bounded parallelism.

        Parameters
        ----------
        game_ids:
            Games to scrape, in the order they should be attempted.
        skip_existing:
            Leave games that already have a JSON file untouched.
        on_progress:
            Callback ``(game_id, succeeded)`` after each attempted game.
        """
        summary = ScrapeSummary()
        pending: list[int] = []
        for game_id in game_ids:
            if skip_existing and self.has_game(game_id):
                summary.skipped.append(game_id)
            else:
                pending.append(game_id)

        if summary.skipped:
            self._logger.info("games_already_scraped", count=len(summary.skipped))

        semaphore = asyncio.Semaphore(self._max_concurrency)
        results = await throttled_gather(
            [self.scrape_game(game_id) for game_id in pending],
            semaphore=semaphore,
            return_exceptions=True,
        )

        for game_id, result in zip(pending, results):
            if isinstance(result, ArchiveScraperError):
                self._logger.error("game_scrape_failed", game_id=game_id, error=str(result))
                summary.failed.append(game_id)
            elif isinstance(result, BaseException):
                # Anything else is a programming error; surface it.
                raise result
            else:
                summary.scraped.append(game_id)
            if on_progress:
                on_progress(game_id, game_id in summary.scraped)

        self._logger.info(
            "game_batch_complete",
            scraped=len(summary.scraped),
            skipped=len(summary.skipped),
            failed=len(summary.failed),
        )
        return summary

    async def scrape_chain(self, start_game_id: int, limit: int) -> list[GameRecord]:
        """Follow ``next_game_id`` links from *start_game_id*, up to *limit* games.

        Stops early when a game has no next link or a fetch fails.  Games
        are fetched sequentially because each id comes from the previous page.
        """
        records: list[GameRecord] = []
        game_id: int | None = start_game_id
        seen: set[int] = set()
        while game_id is not None and len(records) < limit and game_id not in seen:
            seen.add(game_id)
            try:
                record = await self.scrape_game(game_id)
            except ArchiveScraperError as exc:
                self._logger.error("game_chain_stopped", game_id=game_id, error=str(exc))
                break
            records.append(record)
            game_id = record.next_game_id
        return records

    # ------------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------------

    def game_path(self, game_id: int) -> Path:
        return self._games_dir / f"game_{game_id}.json"

    def has_game(self, game_id: int) -> bool:
        return self.game_path(game_id).exists()

    def save_game(self, record: GameRecord) -> Path:
        path = self.game_path(record.current_game_id)
        try:
            self._games_dir.mkdir(parents=True, exist_ok=True)
            path.write_text(game_to_json(record), encoding="utf-8")
        except OSError as exc:
            raise CatalogError(message=f"Could not write {path}: {exc}") from exc
        return path

    def load_game(self, game_id: int) -> GameRecord | None:
        """Load a previously saved game, or ``None`` if missing or unreadable."""
        path = self.game_path(game_id)
        if not path.exists():
            return None
        try:
            return GameRecord.model_validate_json(path.read_text(encoding="utf-8"))
        except (ValidationError, OSError) as exc:
            self._logger.warning("game_load_failed", game_id=game_id, error=str(exc))
            return None

    def scraped_game_ids(self) -> list[int]:
        """Ids of all games with a saved JSON file, ascending."""
        ids: list[int] = []
        for path in self._games_dir.glob("game_*.json"):
            suffix = path.stem.removeprefix("game_")
            if suffix.isdigit():
                ids.append(int(suffix))
        return sorted(ids)
