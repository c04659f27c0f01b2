"""Tennis rules.
Points within a game are counted 0/15/30/40 with deuce and advantage."""

NAME = "Tennis"
CLUTCH_THRESHOLD = 3
USES_SETS = True
HAS_BREAK_POINTS = True
RETURN_LABEL = "Return win rate"

TENNIS_POINTS = ("0", "15", "30", "40")
# Scores this high only happen in a tiebreak.
TIEBREAK_SCORE = 5


def _call(points: int) -> str:
    return TENNIS_POINTS[points] if points < len(TENNIS_POINTS) else str(points)


def format_score(p1: int, p2: int) -> str:
    if p1 >= TIEBREAK_SCORE or p2 >= TIEBREAK_SCORE:
        return f"{p1}-{p2}"
    # 4-0, 4-1, 4-2: the snapshot that closes out the game
    if max(p1, p2) >= 4 and abs(p1 - p2) >= 2:
        return "GAME"
    if p1 >= 3 and p2 >= 3:
        if p1 == p2:
            return "DEUCE"
        return "AD-40" if p1 > p2 else "40-AD"
    return f"{_call(p1)}-{_call(p2)}"


def is_break_point(p1: int, p2: int, opponent_serving: bool) -> bool:
    """You are one point from winning the game on the opponent's serve."""
    return opponent_serving and p1 >= 3 and p1 > p2
