"""Per-format rules plugged into the generic scoring engine."""

from ..exceptions import UnknownFormat
from .base import FormatRules, GameUpdateContext, HoleContext
from .best_ball import BestBallRules
from .copenhagen import CopenhagenRules
from .match_play import MatchPlayRules
from .scramble import ScrambleRules
from .skins import SkinsRules
from .umbriago import UmbriagoRules
from .wolf import WolfRules

FORMAT_RULES: dict[str, FormatRules] = {
    rules.format_id: rules
    for rules in (
        MatchPlayRules(),
        BestBallRules(),
        SkinsRules(),
        CopenhagenRules(),
        UmbriagoRules(),
        WolfRules(),
        ScrambleRules(),
    )
}


def get_rules(format_id: str) -> FormatRules:
    try:
        return FORMAT_RULES[format_id]
    except KeyError:
        raise UnknownFormat(format_id) from None


__all__ = [
    "FORMAT_RULES",
    "FormatRules",
    "GameUpdateContext",
    "HoleContext",
    "get_rules",
    "BestBallRules",
    "CopenhagenRules",
    "MatchPlayRules",
    "ScrambleRules",
    "SkinsRules",
    "UmbriagoRules",
    "WolfRules",
]
