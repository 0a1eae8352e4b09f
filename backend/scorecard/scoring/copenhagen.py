"""Copenhagen (six point) scoring for three players."""
from typing import Dict, List, Mapping, Sequence

POINTS_PER_HOLE = 6


def calculate_copenhagen_points(scores: Sequence[int], par: int) -> Dict:
    """Distribute six points between three players.

    ``scores`` is ordered by player number. Normal split is 4-2-0, a tie for
    low is 3-3-0, a tie for high is 4-1-1 and a three way tie is 2-2-2. A
    birdie or better that beats both opponents by two or more sweeps 6-0-0.
    """
    if len(scores) != 3:
        raise ValueError("copenhagen needs exactly three scores")

    ranked = sorted(range(3), key=lambda i: scores[i])
    lowest, middle, highest = (scores[i] for i in ranked)
    points = [0, 0, 0]

    if lowest <= par - 1 and middle - lowest >= 2 and highest - lowest >= 2:
        points[ranked[0]] = 6
        return {"points": points, "is_sweep": True, "sweep_winner": ranked[0] + 1}

    if lowest == middle == highest:
        points = [2, 2, 2]
    elif lowest == middle:
        points[ranked[0]] = 3
        points[ranked[1]] = 3
    elif middle == highest:
        points[ranked[0]] = 4
        points[ranked[1]] = 1
        points[ranked[2]] = 1
    else:
        points[ranked[0]] = 4
        points[ranked[1]] = 2
    return {"points": points, "is_sweep": False, "sweep_winner": None}


def running_totals(previous_holes: List[Mapping], hole_points: Sequence[int]) -> List[int]:
    totals = []
    for index, points in enumerate(hole_points, start=1):
        earlier = sum(h.get(f"player_{index}_hole_points") or 0 for h in previous_holes)
        totals.append(earlier + points)
    return totals


def normalize_points(points: Sequence[int]) -> List[int]:
    """Subtract the lowest total so the trailing player shows zero (10-5-5 -> 5-0-0)."""
    floor = min(points)
    return [p - floor for p in points]
