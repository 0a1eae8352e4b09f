from __future__ import annotations

from typing import List, Optional

from ..scoring import best_ball, handicap, match_play
from .base import FormatRules, GameUpdateContext, HoleContext, Row, Scores

TEAMS = ("a", "b")


class BestBallRules(FormatRules):
    """Two teams in match play, each hole decided by the team's best score.

    Input scores are keyed by player id across both teams.
    """

    format_id = "best_ball"
    game_table = "best_ball_games"
    holes_table = "best_ball_holes"
    summary_slug = "best-ball"

    @staticmethod
    def _players(game: Row, team: str) -> List[Row]:
        return list(game.get(f"team_{team}_players") or [])

    def create_empty_scores(self, game: Row) -> Scores:
        return {p["id"]: 0 for team in TEAMS for p in self._players(game, team)}

    def extract_scores(self, hole: Row, game: Row) -> Scores:
        scores = self.create_empty_scores(game)
        for team in TEAMS:
            for entry in hole.get(f"team_{team}_scores") or []:
                scores[entry["player_id"]] = entry.get("gross_score") or 0
        return scores

    def _team_scores(self, ctx: HoleContext, team: str) -> List[Row]:
        use_handicaps = bool(ctx.game.get("use_handicaps"))
        entries = []
        for player in self._players(ctx.game, team):
            gross = self.played_score(ctx.scores.get(player["id"]))
            strokes = (
                handicap.tiered_strokes(player.get("handicap"), ctx.stroke_index)
                if use_handicaps
                else 0
            )
            entries.append(
                {
                    "player_id": player["id"],
                    "player_name": player.get("name"),
                    "gross_score": gross,
                    "net_score": gross - strokes if gross is not None else None,
                    "handicap_strokes": strokes,
                }
            )
        return entries

    def build_hole_record(self, ctx: HoleContext) -> Row:
        use_handicaps = bool(ctx.game.get("use_handicaps"))
        record = self.base_record(ctx)
        counting = {}

        for team in TEAMS:
            entries = self._team_scores(ctx, team)
            gross = best_ball.calculate_best_ball(entries, use_handicaps=False)
            net = best_ball.calculate_best_ball(entries, use_handicaps=True)
            chosen = net if use_handicaps else gross
            counting[team] = chosen["best_score"]
            previous_total = sum(
                (h.get(f"team_{team}_best_net") if use_handicaps else h.get(f"team_{team}_best_gross")) or 0
                for h in ctx.previous_holes
            )
            record.update(
                {
                    f"team_{team}_scores": entries,
                    f"team_{team}_best_gross": gross["best_score"],
                    f"team_{team}_best_net": net["best_score"],
                    f"team_{team}_counting_player": chosen["counting_player"],
                    f"team_{team}_running_total": previous_total + (chosen["best_score"] or 0),
                }
            )

        result = best_ball.calculate_hole_result(counting["a"], counting["b"])
        previous_status = sum(h.get("hole_result") or 0 for h in ctx.previous_holes)
        record.update(
            hole_result=result,
            match_status_after=previous_status + result,
            holes_remaining_after=ctx.total_holes - ctx.hole_number,
        )
        return record

    def derive_game_update(self, ctx: GameUpdateContext) -> Optional[Row]:
        game = ctx.game
        use_handicaps = bool(game.get("use_handicaps"))
        totals = {}
        for team in TEAMS:
            column = f"team_{team}_best_net" if use_handicaps else f"team_{team}_best_gross"
            totals[team] = sum(h.get(column) or 0 for h in ctx.all_holes)

        status = sum(h.get("hole_result") or 0 for h in ctx.all_holes)
        remaining = max(ctx.total_holes - len(ctx.all_holes), 0)
        update = {
            "team_a_total": totals["a"],
            "team_b_total": totals["b"],
            "match_status": status,
            "holes_remaining": remaining,
            "is_finished": False,
            "winner_team": None,
            "final_result": None,
        }
        if match_play.is_match_finished(status, remaining):
            final = match_play.get_final_result(
                status,
                remaining,
                game.get("team_a_name") or "Team A",
                game.get("team_b_name") or "Team B",
            )
            update.update(
                is_finished=True,
                winner_team="A" if status > 0 else "B" if status < 0 else "TIE",
                final_result=final["result"],
            )
        return update

    def is_game_finished(
        self, game: Row, hole_number: int, total_holes: int, record: Row
    ) -> bool:
        return bool(game.get("is_finished"))
