"""Shared pytest fixtures and transcript-page builders for the test suite.

The builders emit markup shaped like J-Archive's ``showgame.php`` and
``showseason.php`` pages: a category header row followed by clue rows per
timed round, responses held in ``onmouseover`` handlers, and a separate
final-round section.
"""

from __future__ import annotations

import html
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
from bs4 import BeautifulSoup

from src.interfaces.archive_provider import IArchiveProvider
from src.utils.logging import configure_logging

# ---------------------------------------------------------------------------
# Page builders
# ---------------------------------------------------------------------------

ROUND_ONE_VALUES = ["$200", "$400", "$600", "$800", "$1000"]
ROUND_TWO_VALUES = ["$400", "$800", "$1200", "$1600", "$2000"]


def _toggle_handler(clue_id: str, response: str) -> str:
    em = f'<em class="correct_response">{response}</em>'
    return html.escape(f"toggle('{clue_id}', '{clue_id}_stuck', '{em}')", quote=True)


def clue_cell(
    text: str | None,
    value: str | None = "$200",
    response: str | None = "Answer",
    clue_id: str = "clue_J_1_1",
    daily_double_wager: str | None = None,
) -> str:
    """One ``td.clue`` cell.

    ``text=None`` renders an empty placeholder cell; ``response=None``
    renders a cell without the onmouseover reveal handler.
    """
    if text is None:
        return '<td class="clue"></td>'

    if daily_double_wager is not None:
        value_html = f'<td class="clue_value_daily_double">DD: {daily_double_wager}</td>'
    elif value is not None:
        value_html = f'<td class="clue_value">{value}</td>'
    else:
        value_html = ""

    handler = ""
    if response is not None:
        handler = f' onmouseover="{_toggle_handler(clue_id, response)}"'

    return (
        '<td class="clue"><table><tr><td>'
        f'<div{handler}><table class="clue_header"><tr>{value_html}'
        '<td class="clue_order_number">1</td></tr></table></div>'
        "</td></tr><tr>"
        f'<td id="{clue_id}" class="clue_text">{text}</td>'
        "</tr></table></td>"
    )


def round_section(round_id: str, categories: list[str], rows: list[list[str]]) -> str:
    """A timed-round section: header row of categories, then clue rows."""
    header = "".join(
        '<td class="category"><table>'
        f'<tr><td class="category_name">{name}</td></tr>'
        '<tr><td class="category_comments"></td></tr>'
        "</table></td>"
        for name in categories
    )
    body = "".join(f"<tr>{''.join(cells)}</tr>" for cells in rows)
    return (
        f'<div id="{round_id}"><h2>Round</h2>'
        f'<table class="round"><tr>{header}</tr>{body}</table></div>'
    )


def standard_round(
    round_id: str,
    categories: list[str],
    values: list[str],
    prefix: str = "J",
) -> str:
    """A fully played board: every cell printed and revealed."""
    rows = []
    for row, value in enumerate(values):
        cells = []
        for column, category in enumerate(categories):
            cells.append(
                clue_cell(
                    text=f"{category} clue {row}",
                    value=value,
                    response=f"{category} answer {row}",
                    clue_id=f"clue_{prefix}_{column + 1}_{row + 1}",
                )
            )
        rows.append(cells)
    return round_section(round_id, categories, rows)


def final_section(
    category: str,
    text: str,
    response: str | None = "Final answer",
) -> str:
    """The final round; ``response=None`` renders it unrevealed."""
    handler = ""
    if response is not None:
        handler = f' onmouseover="{_toggle_handler("clue_FJ", response)}"'
    return (
        '<div id="final_jeopardy_round"><h2>Final Round</h2>'
        '<table class="final_round"><tr><td class="category">'
        f'<div{handler}><table><tr><td class="category_name">{category}</td></tr>'
        '<tr><td class="category_comments"></td></tr></table></div>'
        "</td></tr><tr><td class=\"clue\"><table><tr>"
        f'<td id="clue_FJ" class="clue_text">{text}</td>'
        "</tr></table></td></tr></table></div>"
    )


def game_page(
    title: str = "Show #7000 - Monday, March 2, 2015",
    sections: list[str] | None = None,
    next_game_id: int | None = None,
) -> str:
    """A complete ``showgame.php`` page."""
    nav = '<td><a href="showgame.php?game_id=4773">[&lt;&lt; previous game]</a></td>'
    if next_game_id is not None:
        nav += f'<td><a href="showgame.php?game_id={next_game_id}">[next game &gt;&gt;]</a></td>'
    return (
        "<html><head><title>J! Archive</title></head><body><div id=\"content\">"
        f'<div id="game_title"><h1>{title}</h1></div>'
        f'<table id="contestants_table"><tr>{nav}</tr></table>'
        f"{''.join(sections or [])}"
        "</div></body></html>"
    )


def season_list_page(tokens: list[str]) -> str:
    rows = "".join(
        f'<tr><td><a href="showseason.php?season={token}">Season {token}</a></td></tr>'
        for token in tokens
    )
    return f"<html><body><table>{rows}</table></body></html>"


def season_page(episodes: list[tuple[int, int, str]]) -> str:
    """Season listing; each episode is ``(game_id, show_number, air_date)``."""
    rows = "".join(
        "<tr><td>"
        f'<a href="showgame.php?game_id={game_id}">#{show},&nbsp;aired&nbsp;{aired}</a>'
        "</td></tr>"
        for game_id, show, aired in episodes
    )
    return f"<html><body><table>{rows}</table></body></html>"


def parse(markup: str) -> BeautifulSoup:
    return BeautifulSoup(markup, "html.parser")


ROUND_ONE_CATEGORIES = [
    "WORLD CAPITALS",
    "POTENT POTABLES",
    "SCIENCE",
    "\"B\" MOVIES",
    "U.S. HISTORY",
    "WORDPLAY",
]
ROUND_TWO_CATEGORIES = [
    "OPERA",
    "ANATOMY",
    "LITERATURE",
    "SPORTS",
    "SCIENCE",
    "RHYME TIME",
]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session", autouse=True)
def _session_logging() -> None:
    """Configure structlog once, against the session-wide stderr."""
    configure_logging("WARNING", cache_loggers=False)


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def full_game_document() -> BeautifulSoup:
    """A fully played, fully revealed game with a next-game link."""
    return parse(
        game_page(
            sections=[
                standard_round("jeopardy_round", ROUND_ONE_CATEGORIES, ROUND_ONE_VALUES),
                standard_round(
                    "double_jeopardy_round", ROUND_TWO_CATEGORIES, ROUND_TWO_VALUES, prefix="DJ"
                ),
                final_section("FAMOUS NAMES", "He wrote the Origin of Species", "Darwin"),
            ],
            next_game_id=1300,
        )
    )


@pytest.fixture
def mock_provider() -> MagicMock:
    """An IArchiveProvider double with async fetch methods."""
    provider = MagicMock(spec=IArchiveProvider)
    provider.fetch_document = AsyncMock()
    provider.fetch_game = AsyncMock()
    provider.fetch_season_list = AsyncMock()
    provider.fetch_season = AsyncMock()
    provider.get_provider_name = MagicMock(return_value="mock_archive")
    provider.close = AsyncMock()
    return provider
