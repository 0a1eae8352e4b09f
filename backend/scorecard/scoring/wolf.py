"""Wolf: a rotating wolf plays alone or picks a partner each hole."""
from typing import Dict, List, Mapping, Optional, Sequence


def get_wolf_player_for_hole(hole_number: int, player_count: int, wolf_position: str = "last") -> int:
    """Return the 1-based wolf for a hole.

    With ``last`` the final player in the tee order is wolf on hole 1 and the
    role then moves to player 1, 2, ...; with ``first`` player 1 starts.
    """
    if wolf_position == "last":
        return ((hole_number - 2 + player_count) % player_count) + 1
    return ((hole_number - 1) % player_count) + 1


def calculate_wolf_hole_score(
    scores: Sequence[Optional[int]],
    wolf_player: int,
    wolf_choice: str,
    partner_player: Optional[int],
    settings: Mapping[str, int],
) -> Dict:
    player_count = len(scores)
    points = [0] * player_count
    wolf_index = wolf_player - 1
    wolf_score = scores[wolf_index]
    if wolf_score is None:
        return {"winning_side": "tie", "player_points": points}

    if wolf_choice == "lone":
        wolf_side = {wolf_index}
        wolf_best = wolf_score
    else:
        partner_index = (partner_player or 1) - 1
        wolf_side = {wolf_index, partner_index}
        partner_score = scores[partner_index]
        wolf_best = min(wolf_score, partner_score) if partner_score is not None else wolf_score

    opponents = [i for i in range(player_count) if i not in wolf_side]
    opponent_scores = [scores[i] for i in opponents if scores[i] is not None]
    if not opponent_scores:
        # Nobody left to beat the wolf side.
        opponents_best = float("inf")
    else:
        opponents_best = min(opponent_scores)

    if wolf_best < opponents_best:
        winning_side = "wolf"
    elif opponents_best < wolf_best:
        winning_side = "opponents"
    else:
        return {"winning_side": "tie", "player_points": points}

    if wolf_choice == "lone":
        if winning_side == "wolf":
            points[wolf_index] = settings["lone_wolf_win_points"]
        else:
            for i in opponents:
                points[i] = settings["lone_wolf_loss_points"]
    else:
        winners = wolf_side if winning_side == "wolf" else opponents
        for i in winners:
            points[i] = settings["team_win_points"]

    return {"winning_side": winning_side, "player_points": points}


def add_points(totals: Sequence[int], points: Sequence[int]) -> List[int]:
    size = max(len(totals), len(points))
    padded_totals = list(totals) + [0] * (size - len(totals))
    padded_points = list(points) + [0] * (size - len(points))
    return [t + p for t, p in zip(padded_totals, padded_points)]
