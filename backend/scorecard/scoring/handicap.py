"""Handicap stroke allocation by stroke index.

Each format allocates strokes slightly differently; the variants below keep
those differences explicit rather than sharing one approximation.
"""
import math
from typing import Optional, Tuple


def strokes_on_hole(
    handicap: Optional[float], stroke_index: Optional[int], total_holes: int = 18
) -> int:
    """Strokes received on a hole, wrapping once the handicap exceeds the hole count.

    A plus handicap (stored negative) gives one stroke back on every hole whose
    stroke index is at or below its magnitude.
    """
    if not handicap or stroke_index is None:
        return 0
    abs_handicap = abs(handicap)
    if handicap < 0:
        return -1 if stroke_index <= abs_handicap else 0

    holes = total_holes or 18
    strokes = int(abs_handicap // holes)
    if stroke_index <= abs_handicap % holes:
        strokes += 1
    return strokes


def net_score(
    gross: int, handicap: Optional[float], stroke_index: Optional[int], total_holes: int = 18
) -> int:
    return gross - strokes_on_hole(handicap, stroke_index, total_holes)


def copenhagen_strokes(
    handicap: Optional[float], stroke_index: Optional[int], holes_played: int = 18
) -> int:
    if handicap is None or stroke_index is None:
        return 0
    if handicap < 0:
        return -1 if stroke_index <= abs(handicap) else 0

    strokes = 0
    if handicap >= stroke_index:
        strokes = 1
    if handicap >= stroke_index + holes_played:
        strokes = 2
    if handicap >= stroke_index + holes_played * 2:
        strokes = 3
    return strokes


def tiered_strokes(handicap: Optional[float], stroke_index: Optional[int]) -> int:
    """Best ball allocation: one pass over 18 holes, repeated above 18 and 36."""
    if not handicap or stroke_index is None:
        return 0
    rounded = int(math.floor(handicap + 0.5))
    if rounded <= 0:
        return 0
    strokes = 1 if rounded >= stroke_index else 0
    if rounded > 18 and rounded - 18 >= stroke_index:
        strokes += 1
    if rounded > 36 and rounded - 36 >= stroke_index:
        strokes += 1
    return strokes


def match_strokes(
    player_1_handicap: Optional[float],
    player_2_handicap: Optional[float],
    stroke_index: Optional[int],
    total_holes: int = 18,
) -> Tuple[int, int]:
    """Strokes given on a hole in a two-player match.

    The higher handicap receives the difference, distributed lowest stroke
    index first and wrapping past ``total_holes``.
    """
    if stroke_index is None:
        return 0, 0
    h1 = player_1_handicap or 0
    h2 = player_2_handicap or 0
    diff = math.ceil(abs(h1 - h2))
    if diff == 0:
        return 0, 0
    holes = total_holes or 18
    strokes = diff // holes + (1 if stroke_index <= diff % holes else 0)
    if h1 > h2:
        return strokes, 0
    return 0, strokes
