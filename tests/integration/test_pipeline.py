"""End-to-end test of the scrape pipeline with an in-memory archive.

Season list -> season pages -> catalog -> game pages -> per-game JSON,
driven through the real services with only the provider replaced.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from src.models.game import DOUBLE_JEOPARDY_ROUND, JEOPARDY_ROUND
from src.services.game_scrape_service import GameScrapeService
from src.services.season_index_service import SeasonIndexService
from tests.conftest import (
    ROUND_ONE_VALUES,
    ROUND_TWO_VALUES,
    clue_cell,
    final_section,
    game_page,
    parse,
    round_section,
    season_list_page,
    season_page,
    standard_round,
)


def _partial_board() -> str:
    """Round one with a daily double, an unrevealed clue and an empty cell."""
    rows = [
        [
            clue_cell("Capital of Peru", "$200", "Lima", "clue_J_1_1"),
            clue_cell("Largest planet", "$200", "Jupiter", "clue_J_2_1"),
        ],
        [
            clue_cell("Capital of Chile", None, "Santiago", "clue_J_1_2", daily_double_wager="$1,500"),
            clue_cell(None),
        ],
        [
            clue_cell("Capital of Bhutan", "$600", None, "clue_J_1_3"),
            clue_cell("Red planet", "$600", "Mars", "clue_J_2_3"),
        ],
    ]
    return round_section("jeopardy_round", ["CAPITALS", "PLANETS"], rows)


@pytest.fixture()
def archive(mock_provider: MagicMock) -> MagicMock:
    seasons = {
        "showseason.php?season=2": parse(season_page([(201, 2001, "1986-09-08")])),
        "showseason.php?season=1": parse(
            season_page([(101, 1001, "1984-09-10"), (102, 1002, "1984-09-11")])
        ),
    }
    games = {
        101: parse(
            game_page(
                title="Show #1001",
                sections=[
                    standard_round("jeopardy_round", ["HISTORY", "SCIENCE"], ROUND_ONE_VALUES),
                    standard_round(
                        "double_jeopardy_round", ["OPERA", "SPORTS"], ROUND_TWO_VALUES, prefix="DJ"
                    ),
                    final_section("AUTHORS", "He wrote Ulysses", "Joyce"),
                ],
                next_game_id=102,
            )
        ),
        102: parse(
            game_page(
                title="Show #1002",
                sections=[_partial_board(), final_section("RIVERS", "It flows north", None)],
                next_game_id=201,
            )
        ),
        201: parse(game_page(title="Show #2001")),
    }

    mock_provider.fetch_season_list.return_value = parse(season_list_page(["2", "1", "cwcpi"]))
    mock_provider.fetch_season.side_effect = lambda href: seasons[href]
    mock_provider.fetch_game.side_effect = lambda game_id: games[game_id]
    return mock_provider


@pytest.mark.asyncio
async def test_catalog_then_season_scrape(archive: MagicMock, tmp_path: Path) -> None:
    index_service = SeasonIndexService(archive, catalog_path=str(tmp_path / "games_list.json"))
    catalog = await index_service.update()
    assert [e.show_number for e in catalog] == [1001, 1002, 2001]

    game_ids = index_service.load_index().game_ids(season=1)
    assert game_ids == [101, 102]

    scrape_service = GameScrapeService(archive, games_dir=str(tmp_path / "games"))
    summary = await scrape_service.scrape_games(game_ids)
    assert summary.scraped == [101, 102]

    full = scrape_service.load_game(101)
    assert full.next_game_id == 102
    assert full.clue_count == 20
    assert full.categories(DOUBLE_JEOPARDY_ROUND) == ["OPERA", "SPORTS"]
    assert full.final_round["AUTHORS"].response == "Joyce"

    partial = scrape_service.load_game(102)
    capitals = partial.rounds.get(JEOPARDY_ROUND)["CAPITALS"]
    planets = partial.rounds.get(JEOPARDY_ROUND)["PLANETS"]

    daily_double = capitals[1]
    assert daily_double.is_concealed_value is True
    assert daily_double.value == "$400"
    assert daily_double.response == "Santiago"

    assert capitals[2].response is None
    assert capitals[2].value == "$600"
    assert [c.row for c in planets] == [0, 2]
    assert partial.final_round == {}

    # A second run finds everything already on disk.
    rerun = await scrape_service.scrape_games(game_ids)
    assert rerun.skipped == [101, 102]
    assert archive.fetch_game.await_count == 2


@pytest.mark.asyncio
async def test_chain_crosses_seasons(archive: MagicMock, tmp_path: Path) -> None:
    scrape_service = GameScrapeService(archive, games_dir=str(tmp_path / "games"))
    records = await scrape_service.scrape_chain(101, limit=10)

    assert [r.current_game_id for r in records] == [101, 102, 201]
    assert records[-1].title == "Show #2001"
    assert records[-1].clue_count == 0
    assert scrape_service.scraped_game_ids() == [101, 102, 201]
