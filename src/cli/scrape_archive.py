"""CLI for building the episode catalog and scraping game transcripts.

Usage::

    # Refresh the season catalog (data/games_list.json)
    python -m src.cli.scrape_archive update-index

    # Scrape one game, optionally following "[next game >>]" links
    python -m src.cli.scrape_archive game --id 7000
    python -m src.cli.scrape_archive game --id 7000 --follow 10

    # Scrape every catalogued game of a season (skips games already saved)
    python -m src.cli.scrape_archive games --season 40
    python -m src.cli.scrape_archive games --ids 7000 7001 --force

    # Extract a transcript saved to disk and print the JSON record
    python -m src.cli.scrape_archive parse --file showgame.html --id 7000

    # Show catalog and scrape coverage
    python -m src.cli.scrape_archive status

Settings (base URL, delay, concurrency, storage paths) come from
``config/config.yaml`` (or ``--config PATH``), overridden by environment
variables / ``.env``; see ``src/config/loader.py``.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from bs4 import BeautifulSoup

from src.config.loader import DEFAULT_CONFIG_PATH, load_settings
from src.config.settings import Settings
from src.utils.logging import configure_logging


# ---------------------------------------------------------------------------
# Service construction
# ---------------------------------------------------------------------------


def _build_provider(app_settings: Settings, delay: float | None = None):
    from src.providers.archive.jarchive_provider import JArchiveProvider

    return JArchiveProvider(
        base_url=app_settings.archive_base_url,
        scrape_delay=app_settings.scrape_delay if delay is None else delay,
        timeout=app_settings.request_timeout,
    )


# ---------------------------------------------------------------------------
# Subcommand handlers
# ---------------------------------------------------------------------------


async def _handle_update_index(args: argparse.Namespace, app_settings: Settings) -> int:
    """Refresh the season catalog."""
    from src.services.season_index_service import SeasonIndexService

    provider = _build_provider(app_settings, args.delay)
    service = SeasonIndexService(provider=provider, catalog_path=app_settings.catalog_path)

    def on_progress(season_href: str, count: int) -> None:
        print(f"  Scraped {season_href} ({count} games)")

    try:
        listings = await service.update(on_progress=on_progress)
    finally:
        await provider.close()

    print(f"Done! Saved {len(listings):,} games to {app_settings.catalog_path}")
    return 0


async def _handle_game(args: argparse.Namespace, app_settings: Settings) -> int:
    """Scrape one game, or a chain of games via next-game links."""
    from src.services.game_scrape_service import GameScrapeService

    provider = _build_provider(app_settings, args.delay)
    service = GameScrapeService(provider=provider, games_dir=app_settings.games_dir)

    try:
        records = await service.scrape_chain(args.id, limit=max(1, args.follow + 1))
    finally:
        await provider.close()

    if not records:
        print(f"Error: could not scrape game {args.id}.", file=sys.stderr)
        return 1

    for record in records:
        final = "revealed" if record.final_round else "not revealed"
        print(
            f"  game {record.current_game_id}: {record.title} "
            f"({record.clue_count} clues, final {final})"
        )
    return 0


async def _handle_games(args: argparse.Namespace, app_settings: Settings) -> int:
    """Scrape a batch of games from the catalog or an explicit id list."""
    from src.services.game_scrape_service import GameScrapeService
    from src.services.season_index_service import SeasonIndexService

    if args.ids:
        game_ids = list(args.ids)
    else:
        provider = _build_provider(app_settings)
        index = SeasonIndexService(
            provider=provider, catalog_path=app_settings.catalog_path
        ).load_index()
        await provider.close()
        game_ids = index.game_ids(season=args.season)
        if not game_ids:
            print("No catalogued games match. Run update-index first.", file=sys.stderr)
            return 1

    provider = _build_provider(app_settings, args.delay)
    service = GameScrapeService(
        provider=provider,
        games_dir=app_settings.games_dir,
        max_concurrency=args.concurrency or app_settings.max_concurrency,
    )

    def on_progress(game_id: int, succeeded: bool) -> None:
        print(f"  game {game_id}: {'ok' if succeeded else 'FAILED'}")

    print(f"Scraping {len(game_ids):,} game(s)")
    try:
        summary = await service.scrape_games(
            game_ids, skip_existing=not args.force, on_progress=on_progress
        )
    finally:
        await provider.close()

    print(
        f"Scraped {len(summary.scraped):,}, skipped {len(summary.skipped):,}, "
        f"failed {len(summary.failed):,}"
    )
    return 1 if summary.failed else 0


def _handle_parse(args: argparse.Namespace) -> int:
    """Extract a saved transcript page and print its JSON record."""
    from src.services.game_scrape_service import game_to_json
    from src.services.transcript_extractor import extract_game

    path = Path(args.file)
    if not path.exists():
        print(f"Error: file not found: {path}", file=sys.stderr)
        return 1

    document = BeautifulSoup(path.read_text(encoding="utf-8"), "html.parser")
    record = extract_game(document, args.id)
    print(game_to_json(record))
    return 0


async def _handle_status(app_settings: Settings) -> int:
    """Show catalog size per season and how many games are saved."""
    from src.services.game_scrape_service import GameScrapeService
    from src.services.season_index_service import SeasonIndexService

    # Only file I/O is needed; the provider is never asked to fetch.
    provider = _build_provider(app_settings)
    try:
        listings = SeasonIndexService(
            provider=provider, catalog_path=app_settings.catalog_path
        ).load_catalog()
        scraped = set(
            GameScrapeService(
                provider=provider, games_dir=app_settings.games_dir
            ).scraped_game_ids()
        )
    finally:
        await provider.close()

    per_season: dict[str, list[int]] = {}
    for listing in listings:
        per_season.setdefault(str(listing.season), []).append(listing.game_id)

    print("Archive Scrape Status")
    print("=" * 40)
    print(f"{'Season':<10} {'Games':>10} {'Scraped':>10}")
    print("-" * 40)
    for season, ids in per_season.items():
        done = sum(1 for game_id in ids if game_id in scraped)
        print(f"{season:<10} {len(ids):>10,} {done:>10,}")
    print("-" * 40)
    print(f"{'TOTAL':<10} {len(listings):>10,} {len(scraped):>10,}")
    return 0


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the archive scrape CLI."""
    parser = argparse.ArgumentParser(
        prog="python -m src.cli.scrape_archive",
        description="Build the J-Archive episode catalog and scrape game transcripts.",
    )
    parser.add_argument("--json-logs", action="store_true", help="Emit JSON log lines")
    parser.add_argument(
        "--config",
        default=DEFAULT_CONFIG_PATH,
        help="YAML config file (environment variables take precedence)",
    )
    subparsers = parser.add_subparsers(dest="command", help="Archive scrape commands")

    # -- update-index --
    index_parser = subparsers.add_parser(
        "update-index", help="Refresh the season-by-season episode catalog"
    )
    index_parser.add_argument(
        "--delay", type=float, default=None, help="Seconds between requests"
    )

    # -- game --
    game_parser = subparsers.add_parser("game", help="Scrape a single game")
    game_parser.add_argument("--id", type=int, required=True, help="Archive game id")
    game_parser.add_argument(
        "--follow",
        type=int,
        default=0,
        help="Also scrape this many following games via next-game links",
    )
    game_parser.add_argument(
        "--delay", type=float, default=None, help="Seconds between requests"
    )

    # -- games --
    games_parser = subparsers.add_parser("games", help="Scrape many games")
    games_group = games_parser.add_mutually_exclusive_group()
    games_group.add_argument("--season", help="Only games of this catalogued season")
    games_group.add_argument("--ids", type=int, nargs="+", help="Explicit game ids")
    games_parser.add_argument(
        "--force", action="store_true", help="Re-scrape games already saved"
    )
    games_parser.add_argument(
        "--concurrency", type=int, default=None, help="Games fetched in parallel"
    )
    games_parser.add_argument(
        "--delay", type=float, default=None, help="Seconds between requests"
    )

    # -- parse --
    parse_parser = subparsers.add_parser(
        "parse", help="Extract a transcript saved on disk and print JSON"
    )
    parse_parser.add_argument("--file", required=True, help="Path to a showgame.php page")
    parse_parser.add_argument("--id", type=int, required=True, help="Game id of the page")

    # -- status --
    subparsers.add_parser("status", help="Show catalog and scrape coverage")

    return parser


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the archive scrape tool."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    app_settings = load_settings(args.config)
    configure_logging(app_settings.log_level, json_output=args.json_logs)

    if args.command == "status":
        exit_code = asyncio.run(_handle_status(app_settings))
    elif args.command == "parse":
        exit_code = _handle_parse(args)
    elif args.command == "update-index":
        exit_code = asyncio.run(_handle_update_index(args, app_settings))
    elif args.command == "game":
        exit_code = asyncio.run(_handle_game(args, app_settings))
    elif args.command == "games":
        exit_code = asyncio.run(_handle_games(args, app_settings))
    else:
        parser.print_help()
        exit_code = 1

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
