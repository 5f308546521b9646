"""Unit tests for the game and catalog Pydantic models."""

from __future__ import annotations

from datetime import date

import pytest
from pydantic import ValidationError

from src.models.game import (
    DOUBLE_JEOPARDY_ROUND,
    JEOPARDY_ROUND,
    Clue,
    EpisodeListing,
    FinalClue,
    GameRecord,
    GameRounds,
    RoundLayout,
    SeasonIndex,
)


def _clue(**overrides) -> Clue:
    defaults = {"text": "clue", "value": "$200", "row": 0, "column": 0}
    defaults.update(overrides)
    return Clue(**defaults)


# ======================================================================
# Clue / FinalClue
# ======================================================================


class TestClue:
    def test_defaults(self) -> None:
        clue = _clue()
        assert clue.response is None
        assert clue.is_concealed_value is False
        assert clue.image_ref is None
        assert clue.video_ref is None

    def test_frozen(self) -> None:
        clue = _clue()
        with pytest.raises(ValidationError):
            clue.text = "changed"  # type: ignore[misc]

    def test_negative_row_rejected(self) -> None:
        with pytest.raises(ValidationError):
            _clue(row=-1)


class TestFinalClue:
    def test_minimal(self) -> None:
        final = FinalClue(category="HISTORY", text="A clue")
        assert final.response is None


# ======================================================================
# GameRecord
# ======================================================================


class TestGameRecord:
    def test_empty_record(self) -> None:
        record = GameRecord(current_game_id=1)
        assert record.title == ""
        assert record.next_game_id is None
        assert record.final_round == {}
        assert record.clue_count == 0
        assert record.categories(JEOPARDY_ROUND) == []

    def test_categories_and_count(self) -> None:
        rounds = GameRounds(
            jeopardy_round={"B": [_clue()], "A": [_clue(row=1), _clue(row=2)]},
            double_jeopardy_round={"C": [_clue(value="$400")]},
        )
        record = GameRecord(current_game_id=1, rounds=rounds)
        assert record.categories(JEOPARDY_ROUND) == ["B", "A"]
        assert record.categories(DOUBLE_JEOPARDY_ROUND) == ["C"]
        assert record.categories("final_jeopardy_round") == []
        assert record.clue_count == 4

    def test_json_round_trip(self) -> None:
        record = GameRecord(
            title="Show #1",
            current_game_id=1,
            next_game_id=2,
            rounds=GameRounds(jeopardy_round={"A": [_clue(response="R")]}),
            final_round={"F": FinalClue(category="F", text="t", response="r")},
        )
        assert GameRecord.model_validate_json(record.model_dump_json()) == record


# ======================================================================
# RoundLayout
# ======================================================================


class TestRoundLayout:
    def test_category_at(self) -> None:
        layout = RoundLayout(["A", "B"])
        layout.append("C")
        assert layout.category_at(2) == "C"
        assert layout.category_at(3) is None
        assert layout.category_at(-1) is None
        assert len(layout) == 3

    def test_categories_is_a_copy(self) -> None:
        layout = RoundLayout(["A"])
        layout.categories.append("B")
        assert layout.categories == ["A"]


# ======================================================================
# Catalog models
# ======================================================================


class TestEpisodeListing:
    def test_numeric_and_special_seasons(self) -> None:
        numbered = EpisodeListing(game_id=1, show_number=1, air_date=date(1984, 9, 10), season=1)
        special = EpisodeListing(
            game_id=2, show_number=2, air_date=date(2000, 1, 1), season="cwcpi"
        )
        assert numbered.season == 1
        assert special.season == "cwcpi"

    def test_json_dump_uses_iso_date(self) -> None:
        listing = EpisodeListing(game_id=7, show_number=70, air_date=date(2015, 3, 2), season=31)
        assert listing.model_dump(mode="json") == {
            "game_id": 7,
            "show_number": 70,
            "air_date": "2015-03-02",
            "season": 31,
        }


class TestSeasonIndex:
    def test_last_season(self) -> None:
        index = SeasonIndex(
            episodes=[
                EpisodeListing(game_id=1, show_number=1, air_date=date(2020, 1, 1), season=36),
                EpisodeListing(game_id=2, show_number=2, air_date=date(2020, 9, 1), season=37),
            ]
        )
        assert index.last_season == 37
        assert index.game_ids() == [1, 2]
        assert index.game_ids(season="37") == [2]

    def test_empty(self) -> None:
        assert SeasonIndex().last_season is None
