from __future__ import annotations

from typing import List, Optional

from ..scoring import scramble
from .base import FormatRules, GameUpdateContext, HoleContext, Row, Scores


class ScrambleRules(FormatRules):
    format_id = "scramble"
    game_table = "scramble_games"
    holes_table = "scramble_holes"
    summary_slug = "scramble"

    @staticmethod
    def _teams(game: Row) -> List[Row]:
        return list(game.get("teams") or [])

    def create_empty_scores(self, game: Row) -> Scores:
        return {team["id"]: 0 for team in self._teams(game)}

    def extract_scores(self, hole: Row, game: Row) -> Scores:
        scores = self.create_empty_scores(game)
        for team_id, score in (hole.get("team_scores") or {}).items():
            scores[team_id] = score or 0
        return scores

    def build_hole_record(self, ctx: HoleContext) -> Row:
        record = self.base_record(ctx)
        # None means the team did not hole out.
        record["team_scores"] = {
            team["id"]: self.played_score(ctx.scores.get(team["id"]))
            for team in self._teams(ctx.game)
        }
        return record

    def derive_game_update(self, ctx: GameUpdateContext) -> Optional[Row]:
        if not self.all_holes_played(ctx):
            return None
        return {
            "is_finished": True,
            "winning_team": scramble.winning_team(self._teams(ctx.game), ctx.all_holes),
        }
