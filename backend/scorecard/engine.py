"""Format-agnostic hole-by-hole scoring engine.

One :class:`GameScoringEngine` drives a single game for a single viewing
session. It owns the current-hole pointer and the unsaved scores, talks to
storage through :class:`~scorecard.storage.GameStore` and leaves every
format-specific decision to a :class:`~scorecard.formats.FormatRules`.

Storage failures never escape an engine operation: they are logged, passed to
the notifier and the operation returns ``False`` with the in-memory state
left as it was before the call.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Tuple

from .config import DEFAULT_PAR, GAME_LIST_ROUTE
from .exceptions import GameNotFound, InvalidHoleNumber, StorageError
from .formats.base import FormatRules, GameUpdateContext, HoleContext, Row, Scores
from .services.notifications import LoggingNotifier, Notifier
from .storage import CourseHoleProvider, GameStore

logger = logging.getLogger(__name__)

Navigator = Callable[[str], None]


def _log_navigation(path: str) -> None:
    logger.debug("navigate to %s", path)


@dataclass
class ScoringState:
    game: Optional[Row] = None
    holes: List[Row] = field(default_factory=list)
    course_holes: List[Row] = field(default_factory=list)
    current_hole: int = 1
    loading: bool = False
    saving: bool = False
    scores: Scores = field(default_factory=dict)
    par: int = DEFAULT_PAR
    stroke_index: Optional[int] = None
    load_error: Optional[str] = None
    finished_route: Optional[str] = None


def default_course_holes(total_holes: int) -> List[Row]:
    """Par 4 holes without a stroke index, used when a course has no data."""
    return [
        {"hole_number": n, "par": DEFAULT_PAR, "stroke_index": None}
        for n in range(1, total_holes + 1)
    ]


class GameScoringEngine:
    def __init__(
        self,
        rules: FormatRules,
        store: Optional[GameStore] = None,
        courses: Optional[CourseHoleProvider] = None,
        navigate: Optional[Navigator] = None,
        notifier: Optional[Notifier] = None,
    ) -> None:
        self.rules = rules
        self.store = store or GameStore()
        self.courses = courses or CourseHoleProvider()
        self.navigate = navigate or _log_navigation
        self.notifier = notifier or LoggingNotifier()
        self.state = ScoringState()
        self.game_id: Optional[str] = None

    # -- derived state ---------------------------------------------------

    @property
    def total_holes(self) -> int:
        if self.state.game is None:
            return 0
        return self.rules.total_holes(self.state.game)

    @property
    def saved_hole_count(self) -> int:
        return len(self.state.holes)

    @property
    def furthest_hole(self) -> int:
        """Highest hole the pointer may reach: the first unplayed one."""
        return min(self.saved_hole_count + 1, self.total_holes)

    @property
    def is_ready(self) -> bool:
        return self.state.game is not None and not self.state.loading

    def saved_hole(self, hole_number: int) -> Optional[Row]:
        for hole in self.state.holes:
            if self.rules.hole_number(hole) == hole_number:
                return hole
        return None

    def course_hole(self, hole_number: int) -> Optional[Row]:
        for hole in self.state.course_holes:
            if hole.get("hole_number") == hole_number:
                return hole
        return None

    def _par_and_stroke_index(self, hole_number: int) -> Tuple[int, Optional[int]]:
        course = self.course_hole(hole_number) or {}
        return course.get("par") or DEFAULT_PAR, course.get("stroke_index")

    # -- loading ---------------------------------------------------------

    async def load(self, game_id: str) -> bool:
        """Read the game, its course and its saved holes; point at the first unplayed hole."""

        state = self.state
        rules = self.rules
        state.loading = True
        state.load_error = None
        try:
            row = await self.store.fetch_game(rules.game_table, game_id)
            if row is None:
                raise GameNotFound(game_id)
            game = rules.parse_game(row)
            holes = [
                rules.parse_hole(hole)
                for hole in await self.store.fetch_holes(rules.holes_table, game_id)
            ]
            course_holes = await self._load_course_holes(game)
        except (GameNotFound, StorageError) as exc:
            if isinstance(exc, StorageError):
                logger.exception("Failed to load %s game %s", rules.format_id, game_id)
            else:
                logger.warning("%s game %s not found", rules.format_id, game_id)
            state.load_error = str(exc)
            self.notifier.notify("Error loading game", str(exc))
            return False
        finally:
            state.loading = False

        self.game_id = game_id
        state.game = game
        state.holes = holes
        state.course_holes = course_holes
        state.finished_route = None
        state.current_hole = min(len(holes) + 1, rules.total_holes(game))
        self.load_hole_data(state.current_hole)
        logger.info(
            "Loaded %s game %s at hole %s (%s saved)",
            rules.format_id,
            game_id,
            state.current_hole,
            len(holes),
        )
        return True

    async def _load_course_holes(self, game: Row) -> List[Row]:
        course_id = self.rules.course_id(game)
        try:
            course_holes = await self.courses.fetch_course_holes(course_id)
        except StorageError:
            logger.warning("Course %s unavailable; using default holes", course_id, exc_info=True)
            course_holes = []
        if not course_holes:
            return default_course_holes(self.rules.total_holes(game))
        return course_holes

    async def refetch(self) -> bool:
        if self.game_id is None:
            return False
        return await self.load(self.game_id)

    def load_hole_data(self, hole_number: int) -> None:
        """Show ``hole_number``: its par/stroke index and either its saved or empty scores."""

        state = self.state
        if state.game is None:
            return
        state.par, state.stroke_index = self._par_and_stroke_index(hole_number)
        existing = self.saved_hole(hole_number)
        if existing is not None:
            state.scores = self.rules.extract_scores(existing, state.game)
        else:
            state.scores = self.rules.create_empty_scores(state.game)

    def update_score(self, key: str, value: Any) -> None:
        self.state.scores[key] = value

    # -- saving ----------------------------------------------------------

    async def _write_hole(
        self, hole_number: int, scores: Scores, par: int, stroke_index: Optional[int]
    ) -> Tuple[Row, List[Row], Row]:
        """Upsert one hole, re-read the holes and apply the game-level update.

        Returns the record, the persisted holes and the merged game row. The
        engine state is not touched so a failure part way leaves it intact.
        """

        rules = self.rules
        game = self.state.game
        game_id = self.game_id
        total = rules.total_holes(game)

        # Stored holes decide insert vs update, so retrying after a save that
        # failed past the upsert updates the row instead of duplicating it.
        stored = [
            rules.parse_hole(hole)
            for hole in await self.store.fetch_holes(rules.holes_table, game_id)
        ]
        existing = next((h for h in stored if rules.hole_number(h) == hole_number), None)

        record = rules.build_hole_record(
            HoleContext(
                game_id=game_id,
                hole_number=hole_number,
                total_holes=total,
                par=par,
                stroke_index=stroke_index,
                scores=dict(scores),
                game=game,
                previous_holes=[h for h in stored if rules.hole_number(h) < hole_number],
                course_holes=self.state.course_holes,
            )
        )
        if existing is not None:
            await self.store.update_hole(rules.holes_table, existing["id"], record)
        else:
            await self.store.insert_hole(rules.holes_table, record)

        holes = [
            rules.parse_hole(hole)
            for hole in await self.store.fetch_holes(rules.holes_table, game_id)
        ]

        update = rules.derive_game_update(
            GameUpdateContext(
                game=game,
                hole_number=hole_number,
                total_holes=total,
                scores=dict(scores),
                all_holes=holes,
                record=record,
            )
        )
        if update:
            await self.store.update_game(rules.game_table, game_id, update)
            game = {**game, **update}
        return record, holes, game

    def _report_save_error(self, hole_number: int, exc: Exception) -> None:
        if isinstance(exc, StorageError):
            logger.exception("Failed to save hole %s of game %s", hole_number, self.game_id)
        else:
            logger.warning("Rejected scores for hole %s of game %s: %s", hole_number, self.game_id, exc)
        self.notifier.notify("Error saving hole", str(exc))

    def _begin_save(self) -> bool:
        if self.state.saving:
            logger.warning("Save already in progress for game %s", self.game_id)
            self.notifier.notify("Save in progress", "Wait for the current save to finish.")
            return False
        self.state.saving = True
        return True

    async def save_hole(self) -> bool:
        """Persist the current hole, then finish the game or advance to the next hole."""

        state = self.state
        if state.game is None:
            return False
        if not self._begin_save():
            return False

        hole_number = state.current_hole
        was_on_latest = self.saved_hole(hole_number) is None
        try:
            try:
                record, holes, game = await self._write_hole(
                    hole_number, state.scores, state.par, state.stroke_index
                )
            except (StorageError, ValueError) as exc:
                self._report_save_error(hole_number, exc)
                return False

            state.holes = holes
            state.game = game
            total = self.rules.total_holes(game)

            if self.rules.is_game_finished(game, hole_number, total, record):
                self._finish(hole_number)
                return True

            if was_on_latest and hole_number < total:
                state.current_hole = hole_number + 1
                self.load_hole_data(state.current_hole)
            return True
        finally:
            state.saving = False

    def _finish(self, hole_number: int) -> None:
        route = self.rules.summary_route(self.game_id)
        self.state.finished_route = route
        logger.info("%s game %s finished on hole %s", self.rules.format_id, self.game_id, hole_number)
        self.navigate(route)

    async def _autosave_viewed_hole(self) -> bool:
        """Save edits to the viewed hole if it was saved before and the format wants it.

        Returns ``False`` when the pointer should stay put: the save failed, or
        the edit finished the game and the engine left for the summary.
        """

        state = self.state
        hole_number = state.current_hole
        if self.saved_hole(hole_number) is None:
            return True
        if not self.rules.should_save_on_navigate(state.game, state.scores):
            return True
        if not self._begin_save():
            return False
        was_finished = bool(state.game.get("is_finished"))
        try:
            record, holes, game = await self._write_hole(
                hole_number, state.scores, state.par, state.stroke_index
            )
        except (StorageError, ValueError) as exc:
            self._report_save_error(hole_number, exc)
            return False
        finally:
            state.saving = False
        state.holes = holes
        state.game = game
        if not was_finished and self.rules.is_game_finished(
            game, hole_number, self.rules.total_holes(game), record
        ):
            self._finish(hole_number)
            return False
        return True

    # -- navigation ------------------------------------------------------

    async def navigate_hole(self, direction: str) -> bool:
        """Move the pointer one hole; ``"next"`` stops at the first unplayed hole."""

        state = self.state
        if state.game is None:
            return False

        if direction == "prev":
            if state.current_hole <= 1:
                return False
            target = state.current_hole - 1
        elif direction == "next":
            target = state.current_hole + 1
            if target > self.furthest_hole:
                return False
            if not await self._autosave_viewed_hole():
                return False
        else:
            raise ValueError(f"unknown direction {direction!r}")

        self.load_hole_data(target)
        state.current_hole = target
        return True

    async def select_hole(self, hole_number: int) -> bool:
        state = self.state
        if state.game is None:
            return False
        if hole_number < 1 or hole_number > self.furthest_hole:
            raise InvalidHoleNumber(hole_number, self.furthest_hole)
        if hole_number == state.current_hole:
            return True
        if not await self._autosave_viewed_hole():
            return False
        self.load_hole_data(hole_number)
        state.current_hole = hole_number
        return True

    def go_to_summary(self) -> bool:
        if self.game_id is None:
            return False
        self.navigate(self.rules.summary_route(self.game_id))
        return True

    async def delete_game(self) -> bool:
        """Delete the game with its holes and leave for the game list."""

        if self.state.game is None:
            return False
        try:
            await self.store.delete_game(
                self.rules.game_table, self.rules.holes_table, self.game_id
            )
        except StorageError as exc:
            logger.exception("Failed to delete %s game %s", self.rules.format_id, self.game_id)
            self.notifier.notify("Error deleting game", str(exc))
            return False

        logger.info("Deleted %s game %s", self.rules.format_id, self.game_id)
        self.state = ScoringState()
        self.navigate(GAME_LIST_ROUTE)
        return True
