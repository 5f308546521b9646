"""Pydantic v2 models for games extracted from J-Archive transcripts.

All persisted models use frozen config (immutable): a ``GameRecord`` is
assembled once per extraction call and never mutated afterwards.
``RoundLayout`` is the one mutable helper; it only lives for the duration
of a single round's extraction and is never serialized.
"""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict, Field

JEOPARDY_ROUND = "jeopardy_round"
DOUBLE_JEOPARDY_ROUND = "double_jeopardy_round"
FINAL_JEOPARDY_ROUND = "final_jeopardy_round"

TIMED_ROUNDS: tuple[str, ...] = (JEOPARDY_ROUND, DOUBLE_JEOPARDY_ROUND)


class DecodedClueText(BaseModel):
    """Plain clue text plus any media link concealed in the clue markup."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(default="", description="Human-readable clue prompt.")
    image_ref: str | None = Field(default=None, description="Linked image asset, if any.")
    video_ref: str | None = Field(default=None, description="Linked video asset, if any.")


class Clue(BaseModel):
    """A single clue from one of the two timed rounds."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(description="Decoded clue prompt.")
    response: str | None = Field(
        default=None,
        description="Correct response; None when it was never revealed on the transcript.",
    )
    value: str | None = Field(
        default=None,
        description="Point value text as printed (e.g. '$400'), or inferred for concealed values.",
    )
    is_concealed_value: bool = Field(
        default=False,
        description="True when the value was not printed and had to be inferred.",
    )
    image_ref: str | None = Field(default=None)
    video_ref: str | None = Field(default=None)
    row: int = Field(ge=0, description="0-indexed clue row within the round.")
    column: int = Field(ge=0, description="0-indexed position within the row.")


class FinalClue(BaseModel):
    """The single clue of the final round."""

    model_config = ConfigDict(frozen=True)

    category: str
    text: str
    response: str | None = None
    image_ref: str | None = None
    video_ref: str | None = None


class GameRounds(BaseModel):
    """Both timed rounds, each mapping category name to its clues in row order."""

    model_config = ConfigDict(frozen=True)

    jeopardy_round: dict[str, list[Clue]] = Field(default_factory=dict)
    double_jeopardy_round: dict[str, list[Clue]] = Field(default_factory=dict)

    def get(self, round_name: str) -> dict[str, list[Clue]]:
        """Return the category map for *round_name* (empty for unknown names)."""
        if round_name not in TIMED_ROUNDS:
            return {}
        return getattr(self, round_name)


class GameRecord(BaseModel):
    """Everything extracted from one ``showgame.php`` transcript."""

    model_config = ConfigDict(frozen=True)

    title: str = Field(default="", description="Episode title from the page header.")
    current_game_id: int = Field(description="Archive game id this record was extracted from.")
    next_game_id: int | None = Field(
        default=None, description="Game id linked by the '[next game >>]' anchor."
    )
    rounds: GameRounds = Field(default_factory=GameRounds)
    final_round: dict[str, FinalClue] = Field(
        default_factory=dict,
        description="Zero or one entry keyed by final category; empty when not revealed.",
    )

    def categories(self, round_name: str) -> list[str]:
        """Category names of a timed round in discovery order."""
        return list(self.rounds.get(round_name).keys())

    @property
    def clue_count(self) -> int:
        """Total number of timed-round clues."""
        return sum(
            len(clues)
            for round_name in TIMED_ROUNDS
            for clues in self.rounds.get(round_name).values()
        )


class RoundLayout:
    """Ordered category names of one round, indexed by column."""

    def __init__(self, categories: list[str] | None = None) -> None:
        self._categories: list[str] = list(categories or [])

    def append(self, category: str) -> None:
        self._categories.append(category)

    def category_at(self, column: int) -> str | None:
        if 0 <= column < len(self._categories):
            return self._categories[column]
        return None

    @property
    def categories(self) -> list[str]:
        return list(self._categories)

    def __len__(self) -> int:
        return len(self._categories)


# ─── Season catalog ───


class EpisodeListing(BaseModel):
    """One episode row from a season listing page."""

    model_config = ConfigDict(frozen=True)

    game_id: int = Field(description="Archive game id (catalog key).")
    show_number: int = Field(description="Broadcast show number (catalog sort key).")
    air_date: date
    season: int | str = Field(
        description="Season number, or the raw season token for special seasons."
    )


class SeasonIndex(BaseModel):
    """The persisted episode catalog, sorted by show number."""

    model_config = ConfigDict(frozen=True)

    episodes: list[EpisodeListing] = Field(default_factory=list)

    @property
    def last_season(self) -> int | str | None:
        """Season of the last catalog entry, or None for an empty catalog."""
        if not self.episodes:
            return None
        return self.episodes[-1].season

    def game_ids(self, season: int | str | None = None) -> list[int]:
        """Game ids in catalog order, optionally limited to one season."""
        return [
            e.game_id
            for e in self.episodes
            if season is None or str(e.season) == str(season)
        ]
