from __future__ import annotations

from typing import Optional

from ..scoring import handicap, match_play
from .base import FormatRules, GameUpdateContext, HoleContext, Row, Scores


class MatchPlayRules(FormatRules):
    """Two players, hole by hole; the match can end before the last hole."""

    format_id = "match_play"
    game_table = "match_play_games"
    holes_table = "match_play_holes"
    summary_slug = "match-play"

    def create_empty_scores(self, game: Row) -> Scores:
        return {
            "player1": 0,
            "player2": 0,
            "player1_mulligan": False,
            "player2_mulligan": False,
        }

    def extract_scores(self, hole: Row, game: Row) -> Scores:
        return {
            "player1": hole.get("player_1_gross_score") or 0,
            "player2": hole.get("player_2_gross_score") or 0,
            "player1_mulligan": bool(hole.get("player_1_mulligan")),
            "player2_mulligan": bool(hole.get("player_2_mulligan")),
        }

    def build_hole_record(self, ctx: HoleContext) -> Row:
        game = ctx.game
        gross_1 = self.played_score(ctx.scores.get("player1"))
        gross_2 = self.played_score(ctx.scores.get("player2"))
        if gross_1 is None or gross_2 is None:
            raise ValueError("both players need a score")

        strokes_1 = strokes_2 = 0
        if game.get("use_handicaps"):
            strokes_1, strokes_2 = handicap.match_strokes(
                game.get("player_1_handicap"),
                game.get("player_2_handicap"),
                ctx.stroke_index,
                ctx.total_holes,
            )
        net_1 = gross_1 - strokes_1
        net_2 = gross_2 - strokes_2

        result = match_play.calculate_hole_result(net_1, net_2)
        previous_status = match_play.match_status(
            h.get("hole_result") or 0 for h in ctx.previous_holes
        )

        record = self.base_record(ctx)
        record.update(
            player_1_gross_score=gross_1,
            player_1_net_score=net_1,
            player_2_gross_score=gross_2,
            player_2_net_score=net_2,
            player_1_mulligan=bool(ctx.scores.get("player1_mulligan")),
            player_2_mulligan=bool(ctx.scores.get("player2_mulligan")),
            hole_result=result,
            match_status_after=previous_status + result,
            holes_remaining_after=ctx.total_holes - ctx.hole_number,
        )
        return record

    def derive_game_update(self, ctx: GameUpdateContext) -> Optional[Row]:
        status = match_play.match_status(h.get("hole_result") or 0 for h in ctx.all_holes)
        remaining = max(ctx.total_holes - len(ctx.all_holes), 0)
        update = {
            "match_status": status,
            "holes_remaining": remaining,
            "is_finished": False,
            "winner_player": None,
            "final_result": None,
        }
        if match_play.is_match_finished(status, remaining):
            final = match_play.get_final_result(
                status, remaining, ctx.game["player_1"], ctx.game["player_2"]
            )
            update.update(
                is_finished=True,
                winner_player=final["winner"],
                final_result=final["result"],
            )
        return update

    def is_game_finished(
        self, game: Row, hole_number: int, total_holes: int, record: Row
    ) -> bool:
        # Status is recomputed over every hole, so an edit to an earlier hole
        # can decide the match too.
        return bool(game.get("is_finished"))
