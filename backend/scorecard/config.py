import os

def _canon_prefix(val):
    """
    Normalize API prefix to always be exactly like '/api':
      - defaults to '/api' when unset/empty
      - ensures a single leading slash
      - removes any trailing slash (except for root)
    """
    val = (val or "/api").strip()
    if not val.startswith("/"):
        val = "/" + val
    if len(val) > 1 and val.endswith("/"):
        val = val[:-1]
    return val


def _positive_float(raw, default):
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return default
    return value if value >= 0 else default


API_PREFIX = _canon_prefix(os.getenv("API_PREFIX"))

# Where the presentation layer goes after a game is deleted.
GAME_LIST_ROUTE = os.getenv("GAME_LIST_ROUTE") or "/rounds-play"

COURSE_CACHE_TTL_SECONDS = _positive_float(
    os.getenv("COURSE_CACHE_TTL_SECONDS"), 300.0
)

DEFAULT_PAR = 4
DEFAULT_TOTAL_HOLES = 18

# Scoring sessions untouched for this long are dropped by the HTTP adapter;
# 0 keeps them until closed.
SESSION_IDLE_TTL_SECONDS = _positive_float(
    os.getenv("SESSION_IDLE_TTL_SECONDS"), 1800.0
)
