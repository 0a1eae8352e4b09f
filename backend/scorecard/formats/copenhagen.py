from __future__ import annotations

from typing import Optional

from ..scoring import copenhagen, handicap
from .base import FormatRules, GameUpdateContext, HoleContext, Row, Scores, leader

PLAYERS = (1, 2, 3)


class CopenhagenRules(FormatRules):
    """Three players share six points per hole.

    Points are ranked on net scores; with handicaps off net equals gross.
    """

    format_id = "copenhagen"
    game_table = "copenhagen_games"
    holes_table = "copenhagen_holes"
    summary_slug = "copenhagen"

    def create_empty_scores(self, game: Row) -> Scores:
        return {f"player{n}": 0 for n in PLAYERS}

    def extract_scores(self, hole: Row, game: Row) -> Scores:
        return {f"player{n}": hole.get(f"player_{n}_gross_score") or 0 for n in PLAYERS}

    def build_hole_record(self, ctx: HoleContext) -> Row:
        game = ctx.game
        gross = [self.played_score(ctx.scores.get(f"player{n}")) for n in PLAYERS]
        if any(score is None for score in gross):
            raise ValueError("all three players need a score")
        net = []
        for n, score in zip(PLAYERS, gross):
            strokes = 0
            if game.get("use_handicaps"):
                # Unknown stroke index is treated as the hardest hole.
                strokes = handicap.copenhagen_strokes(
                    game.get(f"player_{n}_handicap"), ctx.stroke_index or 1
                )
            net.append(score - strokes)

        result = copenhagen.calculate_copenhagen_points(net, ctx.par)
        totals = copenhagen.running_totals(ctx.previous_holes, result["points"])

        record = self.base_record(ctx)
        for index, n in enumerate(PLAYERS):
            record[f"player_{n}_gross_score"] = gross[index]
            record[f"player_{n}_net_score"] = net[index]
            record[f"player_{n}_hole_points"] = result["points"][index]
            record[f"player_{n}_running_total"] = totals[index]
        record["is_sweep"] = result["is_sweep"]
        record["sweep_winner"] = result["sweep_winner"]
        return record

    def derive_game_update(self, ctx: GameUpdateContext) -> Optional[Row]:
        totals = [
            sum(h.get(f"player_{n}_hole_points") or 0 for h in ctx.all_holes)
            for n in PLAYERS
        ]
        update = {f"player_{n}_total_points": totals[i] for i, n in enumerate(PLAYERS)}
        if self.all_holes_played(ctx):
            names = [ctx.game.get(f"player_{n}") for n in PLAYERS]
            update["is_finished"] = True
            update["winner_player"] = leader(names, totals)
        return update
