"""Contract between the generic scoring engine and a game format."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..config import DEFAULT_TOTAL_HOLES

Row = Dict[str, Any]
Scores = Dict[str, Any]


@dataclass
class HoleContext:
    """Everything a format needs to build one hole record."""

    game_id: str
    hole_number: int
    total_holes: int
    par: int
    stroke_index: Optional[int]
    scores: Scores
    game: Row
    previous_holes: List[Row] = field(default_factory=list)
    course_holes: List[Row] = field(default_factory=list)


@dataclass
class GameUpdateContext:
    game: Row
    hole_number: int
    total_holes: int
    scores: Scores
    all_holes: List[Row]
    record: Row


class FormatRules(ABC):
    """Binds the engine to one format's tables, score shape and scoring rules."""

    format_id: str = ""
    game_table: str = ""
    holes_table: str = ""
    summary_slug: str = ""

    def parse_game(self, row: Row) -> Row:
        return dict(row)

    def parse_hole(self, row: Row) -> Row:
        return dict(row)

    def hole_number(self, hole: Row) -> int:
        return int(hole["hole_number"])

    def total_holes(self, game: Row) -> int:
        return int(game.get("holes_played") or DEFAULT_TOTAL_HOLES)

    def course_id(self, game: Row) -> Optional[str]:
        return game.get("course_id") or None

    def summary_route(self, game_id: str) -> str:
        return f"/{self.summary_slug}/{game_id}/summary"

    @abstractmethod
    def build_hole_record(self, ctx: HoleContext) -> Row:
        """Return the complete hole row to persist."""

    def derive_game_update(self, ctx: GameUpdateContext) -> Optional[Row]:
        """Return game fields that change after a save, or ``None``."""
        return None

    def is_game_finished(
        self, game: Row, hole_number: int, total_holes: int, record: Row
    ) -> bool:
        return hole_number >= total_holes

    def should_save_on_navigate(self, game: Row, scores: Scores) -> bool:
        return True

    @abstractmethod
    def extract_scores(self, hole: Row, game: Row) -> Scores:
        """Turn a stored hole back into editable input values."""

    @abstractmethod
    def create_empty_scores(self, game: Row) -> Scores:
        """Input values for a hole nobody has scored yet."""

    @staticmethod
    def base_record(ctx: HoleContext) -> Row:
        return {
            "game_id": ctx.game_id,
            "hole_number": ctx.hole_number,
            "par": ctx.par,
            "stroke_index": ctx.stroke_index,
        }

    @staticmethod
    def played_score(value: Any) -> Optional[int]:
        """Entered score, or ``None`` for blank/zero input."""
        if value is None or value == "" or isinstance(value, bool):
            return None
        value = FormatRules.as_int(value)
        return value if value > 0 else None

    @staticmethod
    def as_int(value: Any, default: int = 0) -> int:
        """Whole number from score input; structured values raise ``ValueError``."""
        if value is None or value == "":
            return default
        if isinstance(value, bool) or not isinstance(value, (int, float, str)):
            raise ValueError(f"expected a number, got {value!r}")
        try:
            return int(value)
        except ValueError:
            raise ValueError(f"expected a number, got {value!r}") from None

    @staticmethod
    def all_holes_played(ctx: GameUpdateContext) -> bool:
        return len(ctx.all_holes) >= ctx.total_holes


def leader(names: List[str], totals: List[int]) -> Optional[str]:
    """Name with the outright highest total, ``None`` when shared."""
    if not totals:
        return None
    best = max(totals)
    leaders = [name for name, total in zip(names, totals) if total == best]
    return leaders[0] if len(leaders) == 1 else None
