from __future__ import annotations

from collections import deque
from typing import Dict, Iterable, Optional, Sequence, Tuple

from ..schemas import Winner


def win_rate(won: int, total: int) -> float:
    """Return ``won / total`` in ``[0, 1]``; ``0.0`` when ``total`` is zero."""
    return won / total if total else 0.0


def win_percentage(won: int, total: int) -> int:
    """Return ``won / total * 100`` rounded to an int; ``0`` when ``total`` is zero."""
    return int(round(win_rate(won, total) * 100))


def rolling_win_percentage(results: Sequence[bool], span: int) -> list[float]:
    """Return rolling win percentage for a sequence of results.

    Args:
        results: Sequence where ``True`` represents a point won and ``False`` a point lost.
        span: Size of the rolling window.
    """
    if span <= 0:
        raise ValueError("span must be positive")
    wins = 0
    window: deque[bool] = deque()
    percentages: list[float] = []
    for r in results:
        window.append(r)
        if r:
            wins += 1
        if len(window) > span:
            old = window.popleft()
            if old:
                wins -= 1
        percentages.append(wins / len(window))
    return percentages


def compute_streaks(winners: Sequence[Winner]) -> Dict[str, int]:
    """Longest run of consecutive points for each side.

    Points with no known winner end the current run and count for nobody.
    """
    longest = {Winner.YOU: 0, Winner.OPPONENT: 0}
    owner: Optional[Winner] = None
    run = 0
    for w in winners:
        if w is Winner.NONE:
            owner, run = None, 0
            continue
        if w is owner:
            run += 1
        else:
            owner, run = w, 1
        longest[w] = max(longest[w], run)
    return {
        "you": longest[Winner.YOU],
        "opponent": longest[Winner.OPPONENT],
    }


def count_lead_changes(scores: Iterable[Tuple[int, int]]) -> int:
    """Count how often the leader flips.

    Tied scores are skipped: they neither count as a change nor clear the
    last leader, so 3-2, 3-3, 3-4 is one change.
    """
    changes = 0
    last_leader = 0
    for p1, p2 in scores:
        diff = p1 - p2
        if diff == 0:
            continue
        leader = 1 if diff > 0 else -1
        if last_leader and leader != last_leader:
            changes += 1
        last_leader = leader
    return changes


def biggest_leads(scores: Iterable[Tuple[int, int]]) -> Dict[str, int]:
    you = opponent = 0
    for p1, p2 in scores:
        lead = p1 - p2
        if lead > 0:
            you = max(you, lead)
        elif lead < 0:
            opponent = max(opponent, -lead)
    return {"you": you, "opponent": opponent}
