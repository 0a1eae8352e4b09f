"""Scramble: one team score per hole, lowest total wins."""
from typing import Dict, Iterable, List, Mapping, Optional


def team_total(holes: Iterable[Mapping], team_id: str) -> int:
    return sum((hole.get("team_scores") or {}).get(team_id) or 0 for hole in holes)


def team_to_par(holes: Iterable[Mapping], team_id: str) -> str:
    total_score = 0
    total_par = 0
    for hole in holes:
        score = (hole.get("team_scores") or {}).get(team_id)
        if score and score > 0:
            total_score += score
            total_par += hole["par"]

    diff = total_score - total_par
    if total_score == 0 or diff == 0:
        return "E"
    return f"+{diff}" if diff > 0 else str(diff)


def winning_team(teams: List[Mapping], holes: List[Mapping]) -> Optional[str]:
    """Name of the team with the lowest positive total; first listed wins ties."""
    winner = None
    lowest = None
    for team in teams:
        total = team_total(holes, team["id"])
        if total > 0 and (lowest is None or total < lowest):
            lowest = total
            winner = team["name"]
    return winner


def team_totals(teams: List[Mapping], holes: List[Mapping]) -> Dict[str, int]:
    return {team["id"]: team_total(holes, team["id"]) for team in teams}
