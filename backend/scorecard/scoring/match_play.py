"""Match play hole results and match status."""
from typing import Dict, Iterable, Optional


def calculate_hole_result(player_1_score: int, player_2_score: int) -> int:
    """Return 1 if player 1 wins the hole, -1 if player 2 wins, 0 if halved."""
    if player_1_score < player_2_score:
        return 1
    if player_2_score < player_1_score:
        return -1
    return 0


def match_status(hole_results: Iterable[int]) -> int:
    return sum(hole_results)


def is_match_finished(status: int, holes_remaining: int) -> bool:
    """A match is over once the lead can no longer be caught, or no holes remain."""
    return abs(status) > holes_remaining or holes_remaining <= 0


def get_final_result(
    status: int, holes_remaining: int, player_1_name: str, player_2_name: str
) -> Dict[str, Optional[str]]:
    if status == 0:
        return {"winner": None, "result": "All Square"}

    winner = player_1_name if status > 0 else player_2_name
    lead = abs(status)
    if holes_remaining <= 0:
        return {"winner": winner, "result": f"{lead} Up"}
    return {"winner": winner, "result": f"{lead} & {holes_remaining}"}


def format_match_status(status: int, player_1_name: str, player_2_name: str) -> str:
    if status == 0:
        return "All Square"
    leader = player_1_name if status > 0 else player_2_name
    return f"{leader} {abs(status)} Up"


def format_match_status_with_holes(
    status: int, holes_remaining: int, player_1_name: str, player_2_name: str
) -> str:
    text = format_match_status(status, player_1_name, player_2_name)
    if holes_remaining > 0:
        return f"{text}, {holes_remaining} to play"
    return text
