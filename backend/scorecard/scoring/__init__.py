"""Pure scoring algorithms for the supported game formats."""

from . import best_ball, copenhagen, handicap, match_play, scramble, skins, umbriago, wolf

__all__ = [
    "best_ball",
    "copenhagen",
    "handicap",
    "match_play",
    "scramble",
    "skins",
    "umbriago",
    "wolf",
]
