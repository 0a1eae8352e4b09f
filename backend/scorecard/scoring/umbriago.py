"""Umbriago: two teams of two competing for four categories per hole."""
import math
from typing import Dict, List, Optional

TEAMS = ("A", "B")
UMBRIAGO_POINTS_PER_STROKE = 8


def _team_scores(scores: Dict, team: str):
    side = team.lower()
    return scores.get(f"team_{side}_player_1"), scores.get(f"team_{side}_player_2")


def calculate_team_low(scores: Dict) -> Optional[str]:
    """Lower combined score wins; a team with a player who did not finish cannot."""
    a1, a2 = _team_scores(scores, "A")
    b1, b2 = _team_scores(scores, "B")
    a_missing = a1 is None or a2 is None
    b_missing = b1 is None or b2 is None

    if a_missing and b_missing:
        return None
    if a_missing:
        return "B"
    if b_missing:
        return "A"

    a_total, b_total = a1 + a2, b1 + b2
    if a_total < b_total:
        return "A"
    if b_total < a_total:
        return "B"
    return None


def calculate_individual_low(scores: Dict) -> Optional[str]:
    entries = []
    for team in TEAMS:
        for score in _team_scores(scores, team):
            if score is not None and score > 0:
                entries.append((team, score))
    if not entries:
        return None

    lowest = min(score for _, score in entries)
    teams = {team for team, score in entries if score == lowest}
    if len(teams) == 1:
        return teams.pop()
    return None


def calculate_birdie_counts(scores: Dict) -> Dict[str, int]:
    """One point per score under par, counted per team."""
    par = scores["par"]
    counts = {}
    for team in TEAMS:
        counts[team] = sum(
            1 for score in _team_scores(scores, team) if score is not None and score < par
        )
    return counts


def _under_par(scores: Dict, team: str) -> int:
    par = scores["par"]
    return sum(max(0, par - s) for s in _team_scores(scores, team) if s is not None)


def calculate_hole_points(categories: Dict, multiplier: int, scores: Dict) -> Dict:
    """Total a hole's category wins, applying an umbriago sweep and the multiplier.

    A team that wins team low, individual low and closest to pin and has at
    least one birdie scores an umbriago: eight points per net stroke under
    par, and the other team scores nothing.
    """
    birdies = categories["birdie_counts"]
    points = {team: birdies.get(team, 0) for team in TEAMS}
    for key in ("team_low_winner", "individual_low_winner", "closest_to_pin_winner"):
        winner = categories.get(key)
        if winner in points:
            points[winner] += 1

    umbriago_team = None
    for team in TEAMS:
        if (
            categories.get("team_low_winner") == team
            and categories.get("individual_low_winner") == team
            and categories.get("closest_to_pin_winner") == team
            and birdies.get(team, 0) > 0
        ):
            umbriago_team = team

    if umbriago_team:
        other = "B" if umbriago_team == "A" else "A"
        net_under = _under_par(scores, umbriago_team) - _under_par(scores, other)
        points = {umbriago_team: net_under * UMBRIAGO_POINTS_PER_STROKE, other: 0}

    return {
        "team_a_points": points["A"] * multiplier,
        "team_b_points": points["B"] * multiplier,
        "is_umbriago": umbriago_team is not None,
    }


def calculate_payout(
    team_a_points: int, team_b_points: int, stake_per_point: float, payout_mode: str
) -> Dict:
    if team_a_points == team_b_points:
        return {"winner": "TIE", "payout": 0.0}

    winner = "A" if team_a_points > team_b_points else "B"
    if payout_mode == "difference":
        payout = abs(team_a_points - team_b_points) * stake_per_point
    else:
        payout = max(team_a_points, team_b_points) * stake_per_point
    return {"winner": winner, "payout": payout}


def calculate_roll(current_difference: int, current_stake: float) -> Dict:
    """A roll halves the point difference (rounding up) and doubles the stake."""
    return {
        "new_difference": math.ceil(abs(current_difference) / 2),
        "new_stake": current_stake * 2,
    }


def apply_rolls(holes: List[Dict], roll_history: List[Dict]) -> Dict[str, int]:
    """Replay hole points in order, halving both totals at every roll.

    A roll called on hole N halves the totals standing before that hole's
    points are added.
    """
    totals = {"A": 0, "B": 0}
    rolls_by_hole: Dict[int, int] = {}
    for roll in roll_history:
        hole = int(roll.get("hole") or 0)
        rolls_by_hole[hole] = rolls_by_hole.get(hole, 0) + 1

    def _halve(times: int) -> None:
        for _ in range(times):
            totals["A"] //= 2
            totals["B"] //= 2

    played = set()
    for hole in sorted(holes, key=lambda h: h["hole_number"]):
        number = hole["hole_number"]
        played.add(number)
        _halve(rolls_by_hole.get(number, 0))
        totals["A"] += hole.get("team_a_hole_points") or 0
        totals["B"] += hole.get("team_b_hole_points") or 0

    # rolls called on a hole that has not been saved yet
    _halve(sum(n for hole, n in rolls_by_hole.items() if hole not in played))
    return totals
