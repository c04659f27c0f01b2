"""Pickleball rules.

Rally scoring to 11, win by 2. Only the serving side scores under traditional
rules, so losing a rally on serve hands the ball over (a side-out) and the
receiving side's ratio is reported as return defense.
"""

NAME = "Pickleball"
POINTS_TO = 11
WIN_BY = 2
CLUTCH_THRESHOLD = POINTS_TO - 1
USES_SETS = False
HAS_BREAK_POINTS = False
RETURN_LABEL = "Return defense rate"


def format_score(p1: int, p2: int) -> str:
    return f"{p1}-{p2}"

