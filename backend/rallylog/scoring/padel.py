"""Padel rules.
Scored like tennis; at 40-40 a golden point decides the game when enabled."""

from . import tennis

NAME = "Padel"
CLUTCH_THRESHOLD = tennis.CLUTCH_THRESHOLD
USES_SETS = True
HAS_BREAK_POINTS = True
RETURN_LABEL = tennis.RETURN_LABEL


def format_score(p1: int, p2: int, golden_point: bool = True) -> str:
    if golden_point and p1 == p2 and p1 >= 3 and p1 < tennis.TIEBREAK_SCORE:
        return "GOLDEN"
    return tennis.format_score(p1, p2)


is_break_point = tennis.is_break_point
