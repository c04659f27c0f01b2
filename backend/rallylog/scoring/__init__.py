"""Per-sport rules used when reading a score stream.

Each sport module exposes the same attributes:

- ``NAME``: display name
- ``CLUTCH_THRESHOLD``: both sides at or above this score is a clutch point
- ``USES_SETS``: boundaries are sets ("Set N") rather than games ("Game N")
- ``HAS_BREAK_POINTS``: the receiving side can hold break points
- ``RETURN_LABEL``: label for the opponent-serve ratio
- ``format_score(p1, p2)``: score as shown to the player
"""

import importlib
import logging
from types import ModuleType
from typing import Optional

from . import padel, pickleball, tennis

logger = logging.getLogger(__name__)

__all__ = [
    "padel",
    "pickleball",
    "tennis",
    "SPORTS",
    "DEFAULT_SPORT",
    "normalize_sport",
    "lookup",
    "resolve",
]

SPORTS: tuple[str, ...] = ("padel", "pickleball", "tennis")
DEFAULT_SPORT = "tennis"


def normalize_sport(sport: Optional[str]) -> str:
    """Map "Pickleball", " table-tennis " etc. to a module-style id."""
    value = (sport or "").strip().lower()
    return value.replace("-", "_").replace(" ", "_")


def lookup(sport: Optional[str]) -> Optional[ModuleType]:
    sport_id = normalize_sport(sport)
    if sport_id not in SPORTS:
        return None
    return importlib.import_module(f"{__name__}.{sport_id}")


def resolve(sport: Optional[str]) -> ModuleType:
    """Like :func:`lookup` but falls back to tennis-style rules."""
    rules = lookup(sport)
    if rules is None:
        logger.debug("No rules for sport %r; using %s rules", sport, DEFAULT_SPORT)
        rules = importlib.import_module(f"{__name__}.{DEFAULT_SPORT}")
    return rules
