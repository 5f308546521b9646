"""Domain models. Re-exports all public model classes.

Other parts of the codebase can import directly from ``src.models``
(e.g. ``from src.models import GameRecord``) instead of the submodule.

    - game.py: Transcript records (GameRecord, Clue, FinalClue), the
      ephemeral RoundLayout, and the season catalog (EpisodeListing,
      SeasonIndex).

If you add a new model class, remember to add it to ``__all__`` too.
"""

from __future__ import annotations

from src.models.game import (
    DOUBLE_JEOPARDY_ROUND,
    FINAL_JEOPARDY_ROUND,
    JEOPARDY_ROUND,
    TIMED_ROUNDS,
    Clue,
    DecodedClueText,
    EpisodeListing,
    FinalClue,
    GameRecord,
    GameRounds,
    RoundLayout,
    SeasonIndex,
)

__all__ = [
    "DOUBLE_JEOPARDY_ROUND",
    "FINAL_JEOPARDY_ROUND",
    "JEOPARDY_ROUND",
    "TIMED_ROUNDS",
    "Clue",
    "DecodedClueText",
    "EpisodeListing",
    "FinalClue",
    "GameRecord",
    "GameRounds",
    "RoundLayout",
    "SeasonIndex",
]
