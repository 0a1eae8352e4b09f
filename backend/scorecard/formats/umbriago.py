from __future__ import annotations

from typing import Optional

from ..scoring import umbriago
from .base import FormatRules, GameUpdateContext, HoleContext, Row, Scores

SCORE_KEYS = ("team_a_player_1", "team_a_player_2", "team_b_player_1", "team_b_player_2")
MULTIPLIERS = (1, 2, 4)


class UmbriagoRules(FormatRules):
    format_id = "umbriago"
    game_table = "umbriago_games"
    holes_table = "umbriago_holes"
    summary_slug = "umbriago"

    def create_empty_scores(self, game: Row) -> Scores:
        scores = {key: 0 for key in SCORE_KEYS}
        scores.update(
            closest_to_pin_winner=None,
            multiplier=1,
            double_called_by=None,
            double_back_called=False,
        )
        return scores

    def extract_scores(self, hole: Row, game: Row) -> Scores:
        scores = {key: hole.get(f"{key}_score") or 0 for key in SCORE_KEYS}
        scores.update(
            closest_to_pin_winner=hole.get("closest_to_pin_winner"),
            multiplier=hole.get("multiplier") or 1,
            double_called_by=hole.get("double_called_by"),
            double_back_called=bool(hole.get("double_back_called")),
        )
        return scores

    def build_hole_record(self, ctx: HoleContext) -> Row:
        hole_scores = {key: self.played_score(ctx.scores.get(key)) for key in SCORE_KEYS}
        hole_scores["par"] = ctx.par

        multiplier = self.as_int(ctx.scores.get("multiplier"), 1) or 1
        if multiplier not in MULTIPLIERS:
            raise ValueError(f"multiplier must be one of {MULTIPLIERS}")

        birdies = umbriago.calculate_birdie_counts(hole_scores)
        categories = {
            "team_low_winner": umbriago.calculate_team_low(hole_scores),
            "individual_low_winner": umbriago.calculate_individual_low(hole_scores),
            "closest_to_pin_winner": ctx.scores.get("closest_to_pin_winner"),
            "birdie_counts": birdies,
        }
        points = umbriago.calculate_hole_points(categories, multiplier, hole_scores)

        birdie_winner = None
        if birdies["A"] != birdies["B"]:
            birdie_winner = "A" if birdies["A"] > birdies["B"] else "B"

        previous_a = sum(h.get("team_a_hole_points") or 0 for h in ctx.previous_holes)
        previous_b = sum(h.get("team_b_hole_points") or 0 for h in ctx.previous_holes)

        record = self.base_record(ctx)
        record.update({f"{key}_score": hole_scores[key] for key in SCORE_KEYS})
        record.update(
            team_low_winner=categories["team_low_winner"],
            individual_low_winner=categories["individual_low_winner"],
            closest_to_pin_winner=categories["closest_to_pin_winner"],
            birdie_eagle_winner=birdie_winner,
            team_a_birdies=birdies["A"],
            team_b_birdies=birdies["B"],
            multiplier=multiplier,
            double_called_by=ctx.scores.get("double_called_by"),
            double_back_called=bool(ctx.scores.get("double_back_called")),
            is_umbriago=points["is_umbriago"],
            team_a_hole_points=points["team_a_points"],
            team_b_hole_points=points["team_b_points"],
            team_a_running_total=previous_a + points["team_a_points"],
            team_b_running_total=previous_b + points["team_b_points"],
        )
        return record

    def derive_game_update(self, ctx: GameUpdateContext) -> Optional[Row]:
        totals = umbriago.apply_rolls(ctx.all_holes, ctx.game.get("roll_history") or [])
        total_a, total_b = totals["A"], totals["B"]
        update = {"team_a_total_points": total_a, "team_b_total_points": total_b}

        if self.all_holes_played(ctx):
            game = ctx.game
            # Every roll doubles the stake.
            stake = (game.get("stake_per_point") or 0) * 2 ** len(game.get("roll_history") or [])
            payout = umbriago.calculate_payout(
                total_a, total_b, stake, game.get("payout_mode") or "difference"
            )
            update.update(
                is_finished=True,
                winning_team=payout["winner"],
                final_payout=payout["payout"],
            )
        return update

    def roll(self, game: Row, team: str, hole_number: int) -> Row:
        """Game fields for ``team`` calling a roll on ``hole_number``.

        Raises ``ValueError`` once the team has used all of its rolls.
        """
        if team not in umbriago.TEAMS:
            raise ValueError(f"unknown team {team!r}")
        history = list(game.get("roll_history") or [])
        used = sum(1 for entry in history if entry.get("team") == team)
        if used >= (game.get("rolls_per_team") or 0):
            raise ValueError("no rolls remaining")

        before_a = game.get("team_a_total_points") or 0
        before_b = game.get("team_b_total_points") or 0
        after_a, after_b = before_a // 2, before_b // 2
        history.append(
            {
                "team": team,
                "hole": hole_number,
                "points_before": before_a if team == "A" else before_b,
                "points_after": after_a if team == "A" else after_b,
            }
        )
        return {
            "roll_history": history,
            "team_a_total_points": after_a,
            "team_b_total_points": after_b,
        }
