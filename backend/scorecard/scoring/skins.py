"""Skins: lowest unique score takes the hole's skins, ties may carry over."""
from typing import Dict, Iterable, List, Mapping, Optional


def skins_available(hole_number: int, previous_holes: Iterable[Mapping]) -> int:
    """One skin for this hole plus one per consecutive carried-over hole before it."""
    by_number = {h["hole_number"]: h for h in previous_holes}
    available = 1
    number = hole_number - 1
    while number >= 1:
        hole = by_number.get(number)
        if not hole or not hole.get("is_carryover"):
            break
        available += 1
        number -= 1
    return available


def calculate_skins_hole_result(
    player_scores: Mapping[str, Mapping[str, int]],
    use_net: bool,
    carryover_enabled: bool,
    available: int,
) -> Dict:
    """Decide the hole's winner among players who posted a score.

    ``player_scores`` maps player name to ``{"gross": ..., "net": ...}``.
    """
    key = "net" if use_net else "gross"
    scored = {
        name: score[key]
        for name, score in player_scores.items()
        if score and score.get("gross")
    }
    if not scored:
        return {"winner_player": None, "is_carryover": carryover_enabled, "skins_won": 0}

    lowest = min(scored.values())
    leaders = [name for name, value in scored.items() if value == lowest]
    if len(leaders) == 1:
        return {"winner_player": leaders[0], "is_carryover": False, "skins_won": available}

    return {"winner_player": None, "is_carryover": carryover_enabled, "skins_won": 0}


def calculate_skins_leaderboard(
    players: Iterable[Mapping], holes: Iterable[Mapping], skin_value: float
) -> List[Dict]:
    board: Dict[str, Dict] = {}
    for player in players:
        board[player["name"]] = {
            "player_name": player["name"],
            "group_name": player.get("group_name"),
            "skins_won": 0,
            "holes_won": [],
        }

    for hole in holes:
        winner = hole.get("winner_player")
        if winner and winner in board:
            board[winner]["skins_won"] += hole.get("skins_available") or 0
            board[winner]["holes_won"].append(hole["hole_number"])

    entries = []
    for entry in board.values():
        entry["total_value"] = entry["skins_won"] * skin_value
        entries.append(entry)
    return sorted(entries, key=lambda e: e["skins_won"], reverse=True)


def skins_winner(leaderboard: List[Dict]) -> Optional[str]:
    """Outright leader by skins won; ``None`` when nobody won or the top is shared."""
    if not leaderboard or leaderboard[0]["skins_won"] == 0:
        return None
    if len(leaderboard) > 1 and leaderboard[1]["skins_won"] == leaderboard[0]["skins_won"]:
        return None
    return leaderboard[0]["player_name"]
