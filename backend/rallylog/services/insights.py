"""Serve, momentum and clutch statistics for one match.

Everything here is derived from the same score stream and serve rotation used
for the point-by-point view, recomputed on demand. All functions are total:
empty input gives zeroed statistics and every ratio is guarded.
"""
from __future__ import annotations

import logging
from types import ModuleType
from typing import Optional, Sequence

from .. import scoring
from ..schemas import (
    ClutchInsights,
    KeyMoment,
    MatchInsights,
    MatchStory,
    MomentumInsights,
    ScoreEvent,
    ServeInsights,
    Side,
    Winner,
)
from .reconstruction import ServeTurn, infer_winners, serve_turns
from .stats import (
    biggest_leads,
    compute_streaks,
    count_lead_changes,
    rolling_win_percentage,
    win_percentage,
    win_rate,
)

logger = logging.getLogger(__name__)

ROLLING_SPAN = 5
MIN_HIGHLIGHT_RUN = 3
MIN_COMEBACK = 3


def _score_before(events: Sequence[ScoreEvent], index: int) -> tuple[int, int]:
    """Score line the point at ``index`` was played from.

    A snapshot lower than its predecessor on either side means a new game
    started, so the point was played from 0-0.
    """
    if index == 0:
        return 0, 0
    prev, cur = events[index - 1], events[index]
    if cur.player1_score < prev.player1_score or cur.player2_score < prev.player2_score:
        return 0, 0
    return prev.score


def serve_insights(
    winners: Sequence[Winner],
    turns: Sequence[ServeTurn],
    *,
    is_doubles: bool,
    rules: ModuleType,
) -> ServeInsights:
    """Split points by who held serve when they were played.

    In doubles, slot 1 on your side is you and slot 2 is your partner.
    """
    you = you_won = partner = partner_won = opp = opp_won = 0
    for winner, turn in zip(winners, turns):
        served = turn.before
        you_scored = winner is Winner.YOU
        if served.side is Side.YOU:
            if is_doubles and served.slot == 2:
                partner += 1
                partner_won += you_scored
            else:
                you += 1
                you_won += you_scored
        else:
            opp += 1
            opp_won += you_scored

    return ServeInsights(
        you_served_points=you,
        you_served_points_won=you_won,
        partner_served_points=partner,
        partner_served_points_won=partner_won,
        opponent_served_points=opp,
        opponent_served_points_won=opp_won,
        your_serve_win_rate=win_rate(you_won, you),
        partner_serve_win_rate=win_rate(partner_won, partner),
        return_rate=win_rate(opp_won, opp),
        return_label=rules.RETURN_LABEL,
        your_serve_win_pct=win_percentage(you_won, you),
        partner_serve_win_pct=win_percentage(partner_won, partner),
        return_pct=win_percentage(opp_won, opp),
    )


def _momentum_summary(you_run: int, opp_run: int, lead_changes: int, is_win: bool) -> str:
    if you_run >= 5:
        tail = (
            "This momentum carried you to victory."
            if is_win
            else "Despite this run, you couldn't close it out."
        )
        return f"You dominated with a {you_run}-point scoring run. {tail}"
    if opp_run >= 5:
        tail = (
            "You recovered well to secure the win."
            if is_win
            else "This shift in momentum proved decisive."
        )
        return f"Your opponent had a strong {opp_run}-point run. {tail}"
    if lead_changes >= 4:
        tail = (
            "You showed resilience to pull ahead."
            if is_win
            else "The back-and-forth ultimately went their way."
        )
        return f"A closely contested match with {lead_changes} lead changes. {tail}"
    if is_win:
        return "You controlled the pace throughout, maintaining pressure on your opponent."
    return "Your opponent maintained control for most of the match."


def _momentum_advantage(you_run: int, opp_run: int, lead_changes: int) -> str:
    if you_run > opp_run + 2:
        return f"You dominated momentum with a {you_run}-point run"
    if opp_run > you_run + 2:
        return f"Opponent had momentum with a {opp_run}-point run"
    if lead_changes > 5:
        return f"Back-and-forth battle with {lead_changes} lead changes"
    return "Evenly contested match"


def momentum_insights(
    events: Sequence[ScoreEvent], winners: Sequence[Winner], *, is_win: bool
) -> MomentumInsights:
    scores = [e.score for e in events]
    streaks = compute_streaks(winners)
    leads = biggest_leads(scores)
    changes = count_lead_changes(scores)
    return MomentumInsights(
        your_max_streak=streaks["you"],
        opponent_max_streak=streaks["opponent"],
        lead_changes=changes,
        your_biggest_lead=leads["you"],
        opponent_biggest_lead=leads["opponent"],
        rolling_win_pct=rolling_win_percentage(
            [w is Winner.YOU for w in winners], ROLLING_SPAN
        ),
        summary=_momentum_summary(streaks["you"], streaks["opponent"], changes, is_win),
        advantage=_momentum_advantage(streaks["you"], streaks["opponent"], changes),
    )


def is_clutch_point(p1: int, p2: int, threshold: int) -> bool:
    """Check the score line after the point: both sides at or above ``threshold``."""
    return p1 >= threshold and p2 >= threshold


def clutch_insights(
    events: Sequence[ScoreEvent],
    winners: Sequence[Winner],
    turns: Sequence[ServeTurn],
    *,
    rules: ModuleType,
) -> ClutchInsights:
    """Game points (both sides at the sport's late-game threshold) and break points."""
    played = won = bp_played = bp_won = 0
    for index, (event, winner, turn) in enumerate(zip(events, winners, turns)):
        you_scored = winner is Winner.YOU
        if is_clutch_point(event.player1_score, event.player2_score, rules.CLUTCH_THRESHOLD):
            played += 1
            won += you_scored
        if rules.HAS_BREAK_POINTS:
            p1, p2 = _score_before(events, index)
            if rules.is_break_point(p1, p2, turn.before.side is Side.OPPONENT):
                bp_played += 1
                bp_won += you_scored

    return ClutchInsights(
        game_points_played=played,
        game_points_won=won,
        clutch_rate=win_rate(won, played),
        clutch_pct=win_percentage(won, played),
        break_points_played=bp_played,
        break_points_converted=bp_won,
        break_point_conversion_rate=win_rate(bp_won, bp_played),
    )


def _label(event: ScoreEvent) -> str:
    return f"{event.player1_score}-{event.player2_score}"


def _best_run(winners: Sequence[Winner], side: Winner) -> tuple[int, int]:
    """Return ``(length, end_index)`` of the first longest run for ``side``."""
    best = best_end = run = 0
    for index, w in enumerate(winners):
        if w is side:
            run += 1
            if run > best:
                best, best_end = run, index
        else:
            run = 0
    return best, best_end


def key_moments(
    events: Sequence[ScoreEvent],
    winners: Sequence[Winner],
    turns: Sequence[ServeTurn],
    *,
    is_win: bool,
    rules: ModuleType,
) -> list[KeyMoment]:
    moments: list[KeyMoment] = []

    run, end = _best_run(winners, Winner.YOU)
    if run >= MIN_HIGHLIGHT_RUN:
        moments.append(
            KeyMoment(
                title=f"{run}-Point Run",
                description=f"Scored {run} consecutive points",
                score=_label(events[end]),
            )
        )

    max_deficit = 0
    comeback: Optional[ScoreEvent] = None
    for event in events:
        max_deficit = max(max_deficit, event.player2_score - event.player1_score)
        if (
            comeback is None
            and max_deficit >= MIN_COMEBACK
            and event.player1_score > event.player2_score
        ):
            comeback = event
    if comeback is not None:
        moments.append(
            KeyMoment(
                title="Comeback",
                description=f"Overcame a {max_deficit}-point deficit",
                score=_label(comeback),
            )
        )

    pressure = rules.CLUTCH_THRESHOLD - 1
    for event, winner in zip(reversed(events), reversed(winners)):
        if (
            winner is Winner.YOU
            and event.player1_score >= pressure
            and event.player2_score >= pressure
        ):
            moments.append(
                KeyMoment(
                    title="Clutch Point",
                    description=(
                        "Scored under pressure at "
                        f"{max(event.player1_score - 1, 0)}-{event.player2_score}"
                    ),
                    score=_label(event),
                )
            )
            break

    for event, winner, turn in zip(events, winners, turns):
        shot = (event.shot_type or "").lower()
        if (
            winner is Winner.YOU
            and turn.before.side is Side.YOU
            and ("serve" in shot or "ace" in shot)
        ):
            moments.append(
                KeyMoment(
                    title="Service Winner",
                    description="Won point directly on serve",
                    score=_label(event),
                )
            )
            break

    if not is_win:
        opp_run, opp_end = _best_run(winners, Winner.OPPONENT)
        if opp_run >= MIN_HIGHLIGHT_RUN:
            moments.append(
                KeyMoment(
                    title="Opponent's Run",
                    description=f"They scored {opp_run} in a row",
                    score=_label(events[opp_end]),
                    is_positive=False,
                )
            )

    return moments


def match_story(
    events: Sequence[ScoreEvent], *, is_win: bool, lead_changes: int
) -> Optional[MatchStory]:
    """Pick a headline describing how the match unfolded."""
    if not events:
        return None

    max_lead = max(abs(e.player1_score - e.player2_score) for e in events)
    in_lead = sum(
        1
        for e in events
        if (e.player1_score > e.player2_score if is_win else e.player2_score > e.player1_score)
    )
    share_in_lead = win_percentage(in_lead, len(events))
    comeback = 0
    for e in events:
        if is_win and e.player2_score > e.player1_score:
            comeback = max(comeback, e.player2_score - e.player1_score)
        elif not is_win and e.player1_score > e.player2_score:
            comeback = max(comeback, e.player1_score - e.player2_score)
    never_trailed = is_win and all(e.player2_score <= e.player1_score for e in events)

    if never_trailed:
        return MatchStory(
            headline="Wire-to-Wire Victory!",
            description="You dominated from start to finish, never letting your opponent take the lead.",
        )
    if comeback >= 5:
        if is_win:
            return MatchStory(
                headline="Epic Comeback!",
                description=f"You were down {comeback} points but fought back to claim victory!",
            )
        return MatchStory(
            headline="Couldn't Hold On",
            description=f"You had a {comeback}-point lead but your opponent mounted an incredible comeback.",
        )
    if is_win and max_lead >= 7 and share_in_lead >= 80:
        return MatchStory(
            headline="Dominant Performance!",
            description=f"You controlled the game from start to finish with a commanding {max_lead}-point lead.",
        )
    if max_lead <= 3:
        if is_win:
            return MatchStory(
                headline="Nail-Biter Victory!",
                description="Every point mattered in this incredibly close match.",
            )
        return MatchStory(
            headline="So Close!",
            description="A hard-fought battle that could have gone either way.",
        )
    if lead_changes >= 5:
        if is_win:
            return MatchStory(
                headline="Battle of Wills!",
                description=f"Back and forth {lead_changes} times, but you had the final say!",
            )
        return MatchStory(
            headline="Tough Battle",
            description=f"The lead changed {lead_changes} times in this intense match.",
        )
    if is_win:
        return MatchStory(headline="Nice Win!", description="A solid performance to secure the victory.")
    return MatchStory(
        headline="Better Luck Next Time",
        description="Keep practicing and you'll get them next time!",
    )


def aggregate(
    events: Sequence[ScoreEvent],
    is_doubles: bool = False,
    sport_type: str = "pickleball",
    is_win: Optional[bool] = None,
) -> MatchInsights:
    """Compute serve, momentum and clutch insights for one match.

    ``is_win`` defaults to whoever leads on the final snapshot.
    """
    events = list(events)
    rules = scoring.resolve(sport_type)
    winners = infer_winners(events)
    turns = [turn for _, turn in serve_turns(events, winners)]
    if is_win is None:
        is_win = bool(events) and events[-1].player1_score > events[-1].player2_score

    momentum = momentum_insights(events, winners, is_win=is_win)
    points_won = sum(1 for w in winners if w is Winner.YOU)
    logger.debug(
        "Aggregating %d events (sport=%r, doubles=%s)", len(events), sport_type, is_doubles
    )
    return MatchInsights(
        sport_type=scoring.normalize_sport(sport_type),
        is_doubles=is_doubles,
        is_win=is_win,
        total_points=len(events),
        points_won=points_won,
        point_win_pct=win_percentage(points_won, len(events)),
        serve=serve_insights(winners, turns, is_doubles=is_doubles, rules=rules),
        momentum=momentum,
        clutch=clutch_insights(events, winners, turns, rules=rules),
        key_moments=key_moments(events, winners, turns, is_win=is_win, rules=rules),
        story=match_story(events, is_win=is_win, lead_changes=momentum.lead_changes),
    )
