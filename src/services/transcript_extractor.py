"""Extract a structured ``GameRecord`` from one J-Archive game transcript.

A ``showgame.php`` page lays each timed round out as a table: the first row
holds the category names, every following row holds one clue cell per
column.  The final round is a separate section with a single category.

Extraction runs per timed round in two passes:

1. **Layout pass** -- collect every ``td.category_name`` of the round into a
   :class:`RoundLayout` (column -> category).
2. **Clue pass** -- walk the clue rows, numbering them from 0, and fold each
   row into ``Clue`` records.  The fold carries the row's last printed value
   so that concealed-value clues (Daily Doubles, whose printed text is the
   wager rather than the board value) can be resolved once the whole row
   has been seen.

Everything here is a pure function of the passed-in document: no I/O and no
module-level mutable state, so games can be extracted concurrently.  Markup
irregularities never raise; they produce empty or absent fields and, where
useful, a warning log line.  Only invalid call arguments raise
:class:`InvalidDocumentError`.
"""

from __future__ import annotations

import re
from urllib.parse import parse_qs, urlparse

import structlog
from bs4 import BeautifulSoup, Tag

from src.models.game import (
    DOUBLE_JEOPARDY_ROUND,
    FINAL_JEOPARDY_ROUND,
    JEOPARDY_ROUND,
    TIMED_ROUNDS,
    Clue,
    FinalClue,
    GameRecord,
    GameRounds,
    RoundLayout,
)
from src.services.clue_decoder import decode_clue_text
from src.utils.errors import InvalidDocumentError

logger = structlog.get_logger(logger_name=__name__)

NEXT_GAME_MARKER = "[next game >>]"

# Standard board values by row.  Only consulted when a row printed no value
# at all; tournament or pre-2001 schedules are not detected.
_ROW_VALUE_SCHEDULES: dict[str, tuple[int, ...]] = {
    JEOPARDY_ROUND: (200, 400, 600, 800, 1000),
    DOUBLE_JEOPARDY_ROUND: (400, 800, 1200, 1600, 2000),
}

# Current markup keeps the response in a hidden cell with an id like
# ``clue_J_1_1_r`` / ``clue_FJ_r`` instead of an onmouseover handler.
_RESPONSE_CELL_ID_RE = re.compile(r"^clue_\w+_r$")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def extract_game(document: BeautifulSoup, game_id: int) -> GameRecord:
    """Build a :class:`GameRecord` from a parsed transcript page.

    Parameters
    ----------
    document:
        The parsed ``showgame.php`` page.
    game_id:
        Archive id the page was fetched for; stored as ``current_game_id``.

    Raises
    ------
    InvalidDocumentError
        If *document* is not a parsed BeautifulSoup tree or *game_id* is not
        a non-negative integer.
    """
    if not isinstance(document, Tag):
        raise InvalidDocumentError(
            f"Expected a parsed BeautifulSoup document, got {type(document).__name__}"
        )
    if isinstance(game_id, bool) or not isinstance(game_id, int) or game_id < 0:
        raise InvalidDocumentError(f"Invalid game id: {game_id!r}")

    rounds = GameRounds(
        **{name: _extract_round(document, name, game_id) for name in TIMED_ROUNDS}
    )
    record = GameRecord(
        title=_extract_title(document),
        current_game_id=game_id,
        next_game_id=_extract_next_game_id(document),
        rounds=rounds,
        final_round=_extract_final_round(document),
    )

    logger.debug(
        "game_extracted",
        game_id=game_id,
        clues=record.clue_count,
        final_revealed=bool(record.final_round),
    )
    return record


extract = extract_game


def standard_row_value(round_name: str, row: int) -> str | None:
    """Return the standard board value for *row* of *round_name*, e.g. ``"$200"``."""
    schedule = _ROW_VALUE_SCHEDULES.get(round_name)
    if schedule is None or not 0 <= row < len(schedule):
        return None
    return f"${schedule[row]}"


def parse_next_game_id(href: str | None) -> int | None:
    """Pull the ``game_id`` query parameter out of a ``showgame.php`` link."""
    if not href:
        return None
    values = parse_qs(urlparse(href).query).get("game_id")
    if not values:
        return None
    try:
        return int(values[0])
    except ValueError:
        return None


# ---------------------------------------------------------------------------
# Timed rounds
# ---------------------------------------------------------------------------


def _extract_round(document: Tag, round_name: str, game_id: int) -> dict[str, list[Clue]]:
    section = document.find(id=round_name)
    if not isinstance(section, Tag):
        return {}

    rows = _round_rows(section)
    layout = _build_layout(rows)

    categories: dict[str, list[Clue]] = {name: [] for name in layout.categories}
    clue_rows = [row for row in rows if row.select("td.clue")]

    for row_index, row in enumerate(clue_rows):
        cells = row.select("td.clue")
        if len(cells) != len(layout):
            logger.warning(
                "round_layout_mismatch",
                game_id=game_id,
                round=round_name,
                row=row_index,
                categories=len(layout),
                clue_cells=len(cells),
            )

        for clue in _extract_row(cells, round_name, row_index):
            category = layout.category_at(clue.column)
            categories.setdefault(category if category is not None else "", []).append(clue)

    return categories


def _round_rows(section: Tag) -> list[Tag]:
    if section.name == "table" and "round" in section.get("class", []):
        table = section
    else:
        table = section.select_one("table.round")
    if table is None:
        return []
    body = table.find("tbody", recursive=False)
    container = body if isinstance(body, Tag) else table
    return container.find_all("tr", recursive=False)


def _build_layout(rows: list[Tag]) -> RoundLayout:
    layout = RoundLayout()
    for row in rows:
        for cell in row.select("td.category_name"):
            layout.append(_text(cell))
    return layout


def _extract_row(cells: list[Tag], round_name: str, row_index: int) -> list[Clue]:
    """Fold one row of clue cells into clues, resolving concealed values last."""
    pending: list[dict] = []
    last_value: str | None = None

    for column, cell in enumerate(cells):
        entry, last_value = _read_clue_cell(cell, column, row_index, last_value)
        if entry is not None:
            pending.append(entry)

    fallback = last_value or standard_row_value(round_name, row_index)
    clues: list[Clue] = []
    for entry in pending:
        if entry["is_concealed_value"]:
            entry["value"] = fallback
        clues.append(Clue(**entry))
    return clues


def _read_clue_cell(
    cell: Tag, column: int, row_index: int, last_value: str | None
) -> tuple[dict | None, str | None]:
    """Read one clue cell; returns the clue fields (or None) and the updated row value."""
    text_cell = _clue_text_cell(cell)
    raw_clue = text_cell.decode_contents() if text_cell is not None else ""
    if not raw_clue.strip():
        return None, last_value

    value = _text(cell.select_one("td.clue_value")) or None
    if value is not None:
        last_value = value

    decoded = decode_clue_text(raw_clue)
    holder = _reveal_holder(cell)
    entry = {
        "text": decoded.text.strip(),
        "response": _response_text(holder, cell) if holder is not None else None,
        "value": value,
        "is_concealed_value": value is None,
        "image_ref": decoded.image_ref,
        "video_ref": decoded.video_ref,
        "row": row_index,
        "column": column,
    }
    return entry, last_value


# ---------------------------------------------------------------------------
# Title, navigation, final round
# ---------------------------------------------------------------------------


def _extract_title(document: Tag) -> str:
    heading = document.select_one("#game_title h1") or document.select_one("#game_title")
    return _text(heading)


def _extract_next_game_id(document: Tag) -> int | None:
    for anchor in document.select("a[href]"):
        if NEXT_GAME_MARKER in anchor.get_text():
            return parse_next_game_id(anchor.get("href"))
    return None


def _extract_final_round(document: Tag) -> dict[str, FinalClue]:
    section = document.find(id=FINAL_JEOPARDY_ROUND)
    if not isinstance(section, Tag):
        return {}

    category_section = section.select_one(".category")
    holder = _reveal_holder(category_section) if category_section is not None else None
    if holder is None:
        holder = section.find(id=_RESPONSE_CELL_ID_RE)
    if holder is None:
        return {}

    category = _text(section.select_one("td.category_name"))
    text_cell = _clue_text_cell(section)
    decoded = decode_clue_text(text_cell.decode_contents() if text_cell is not None else None)

    return {
        category: FinalClue(
            category=category,
            text=decoded.text.strip(),
            response=_response_text(holder, section),
            image_ref=decoded.image_ref,
            video_ref=decoded.video_ref,
        )
    }


# ---------------------------------------------------------------------------
# Markup helpers
# ---------------------------------------------------------------------------


def _text(tag: Tag | None) -> str:
    return tag.get_text().strip() if tag is not None else ""


def _clue_text_cell(scope: Tag) -> Tag | None:
    for cell in scope.select("td.clue_text"):
        if not _RESPONSE_CELL_ID_RE.match(cell.get("id", "")):
            return cell
    return None


def _reveal_holder(scope: Tag) -> Tag | None:
    """Return the element whose presence marks the response as revealed."""
    if scope.has_attr("onmouseover"):
        return scope
    holder = scope.find(attrs={"onmouseover": True})
    if holder is None:
        holder = scope.find(id=_RESPONSE_CELL_ID_RE)
    return holder if isinstance(holder, Tag) else None


def _response_text(holder: Tag, scope: Tag) -> str | None:
    correct = scope.select_one("em.correct_response")
    if correct is None and holder.has_attr("onmouseover"):
        script = holder["onmouseover"].replace("\\'", "'").replace('\\"', '"')
        correct = BeautifulSoup(script, "html.parser").select_one("em.correct_response")
    if correct is None:
        return None
    return correct.get_text().strip() or None
