from __future__ import annotations

from typing import List, Optional

from ..scoring import handicap, skins
from .base import FormatRules, GameUpdateContext, HoleContext, Row, Scores


class SkinsRules(FormatRules):
    """Any number of players; input scores are keyed by player name."""

    format_id = "skins"
    game_table = "skins_games"
    holes_table = "skins_holes"
    summary_slug = "skins"

    @staticmethod
    def _players(game: Row) -> List[Row]:
        return list(game.get("players") or [])

    def create_empty_scores(self, game: Row) -> Scores:
        return {p["name"]: 0 for p in self._players(game)}

    def extract_scores(self, hole: Row, game: Row) -> Scores:
        scores = self.create_empty_scores(game)
        for name, score in (hole.get("player_scores") or {}).items():
            scores[name] = score.get("gross") or 0
        return scores

    def build_hole_record(self, ctx: HoleContext) -> Row:
        game = ctx.game
        use_handicaps = bool(game.get("use_handicaps"))

        player_scores = {}
        for player in self._players(game):
            gross = self.played_score(ctx.scores.get(player["name"]))
            if gross is None:
                continue
            net = gross
            if use_handicaps:
                net = handicap.net_score(
                    gross, player.get("handicap"), ctx.stroke_index, ctx.total_holes
                )
            player_scores[player["name"]] = {"gross": gross, "net": net}

        available = skins.skins_available(ctx.hole_number, ctx.previous_holes)
        result = skins.calculate_skins_hole_result(
            player_scores,
            use_net=use_handicaps and game.get("handicap_mode", "net") == "net",
            carryover_enabled=bool(game.get("carryover_enabled")),
            available=available,
        )

        record = self.base_record(ctx)
        record.update(
            player_scores=player_scores,
            skins_available=available,
            winner_player=result["winner_player"],
            is_carryover=result["is_carryover"],
        )
        return record

    def derive_game_update(self, ctx: GameUpdateContext) -> Optional[Row]:
        if not self.all_holes_played(ctx):
            return None
        board = skins.calculate_skins_leaderboard(
            self._players(ctx.game), ctx.all_holes, ctx.game.get("skin_value") or 0
        )
        return {"is_finished": True, "winner_player": skins.skins_winner(board)}
