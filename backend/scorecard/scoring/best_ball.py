"""Best ball: each team's lowest score on a hole counts."""
from typing import Dict, Iterable, Mapping


def calculate_best_ball(scores: Iterable[Mapping], use_handicaps: bool) -> Dict:
    """Return the team's counting score and the player who made it.

    The first player to post the lowest score is the counting player.
    """
    key = "net_score" if use_handicaps else "gross_score"
    best = None
    for score in scores:
        value = score.get(key)
        if value is None:
            continue
        if best is None or value < best[key]:
            best = score

    if best is None:
        return {"best_score": None, "counting_player": None}
    return {"best_score": best[key], "counting_player": best.get("player_name")}


def calculate_hole_result(team_a_best, team_b_best) -> int:
    """1 if team A wins the hole, -1 if team B wins, 0 if halved or incomplete."""
    if team_a_best is None or team_b_best is None:
        return 0
    if team_a_best < team_b_best:
        return 1
    if team_b_best < team_a_best:
        return -1
    return 0
