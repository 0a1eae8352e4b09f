from __future__ import annotations

from typing import List, Optional

from ..scoring import wolf
from .base import FormatRules, GameUpdateContext, HoleContext, Row, Scores, leader


class WolfRules(FormatRules):
    """Three to six players; scores are keyed ``player_1`` .. ``player_n``.

    A hole is only auto-saved on navigation once the wolf has made a choice,
    otherwise a half-entered hole would be scored as a lone wolf.
    """

    format_id = "wolf"
    game_table = "wolf_games"
    holes_table = "wolf_holes"
    summary_slug = "wolf"

    @staticmethod
    def _players(game: Row) -> List[str]:
        return list(game.get("players") or [])

    def create_empty_scores(self, game: Row) -> Scores:
        scores = {f"player_{n}": 0 for n in range(1, len(self._players(game)) + 1)}
        scores.update(wolf_choice=None, partner_player=None, multiplier=1)
        return scores

    def extract_scores(self, hole: Row, game: Row) -> Scores:
        scores = self.create_empty_scores(game)
        for n, score in enumerate(hole.get("scores") or [], start=1):
            scores[f"player_{n}"] = score or 0
        scores.update(
            wolf_choice=hole.get("wolf_choice"),
            partner_player=hole.get("partner_player"),
            multiplier=hole.get("multiplier") or 1,
        )
        return scores

    def should_save_on_navigate(self, game: Row, scores: Scores) -> bool:
        return bool(scores.get("wolf_choice"))

    def build_hole_record(self, ctx: HoleContext) -> Row:
        game = ctx.game
        player_count = len(self._players(game))
        if player_count < 3:
            raise ValueError("wolf needs at least three players")

        scores = [self.played_score(ctx.scores.get(f"player_{n}")) for n in range(1, player_count + 1)]
        wolf_player = wolf.get_wolf_player_for_hole(
            ctx.hole_number, player_count, game.get("wolf_position") or "last"
        )
        partner = ctx.scores.get("partner_player")
        choice = ctx.scores.get("wolf_choice") or ("partner" if partner else "lone")
        if choice == "lone":
            partner = None

        multiplier = self.as_int(ctx.scores.get("multiplier"), 1) or 1
        if not game.get("double_enabled"):
            multiplier = 1

        result = wolf.calculate_wolf_hole_score(
            scores,
            wolf_player,
            choice,
            partner,
            {
                "lone_wolf_win_points": game.get("lone_wolf_win_points") or 0,
                "lone_wolf_loss_points": game.get("lone_wolf_loss_points") or 0,
                "team_win_points": game.get("team_win_points") or 0,
            },
        )
        points = [p * multiplier for p in result["player_points"]]

        previous = [0] * player_count
        for hole in ctx.previous_holes:
            previous = wolf.add_points(previous, hole.get("hole_points") or [])

        record = self.base_record(ctx)
        record.update(
            wolf_player=wolf_player,
            wolf_choice=choice,
            partner_player=partner,
            multiplier=multiplier,
            scores=scores,
            hole_points=points,
            running_totals=wolf.add_points(previous, points),
            winning_side=result["winning_side"],
        )
        return record

    def derive_game_update(self, ctx: GameUpdateContext) -> Optional[Row]:
        players = self._players(ctx.game)
        totals = [0] * len(players)
        for hole in ctx.all_holes:
            totals = wolf.add_points(totals, hole.get("hole_points") or [])

        update = {"player_points": totals}
        if self.all_holes_played(ctx):
            update["is_finished"] = True
            update["winner_player"] = leader(players, totals)
        return update
