"""Point-by-point reconstruction from a flat list of score snapshots.

The watch only records the running score after each point plus a loose text
hint about who scored. Who served, from which slot, and when the serve changed
hands are inferred here with a small, explicit state machine so the rules can
be tested without any UI around them.
"""
from __future__ import annotations

import logging
from typing import Callable, Iterator, NamedTuple, Optional, Sequence

from .. import scoring
from ..schemas import (
    MatchBoundary,
    PointGroup,
    ReconstructedPoint,
    ScoreEvent,
    ServerState,
    Side,
    Winner,
)
from .grouping import distribute_evenly, build_groups

logger = logging.getLogger(__name__)

_YOU_HINTS = ("you", "player1")
_OPPONENT_HINTS = ("opponent", "player2")


def winner_from_hint(hint: Optional[str]) -> Winner:
    """Read the producer's free-text scorer hint.

    Producers disagree on spelling ("You", "player1", "Opponent", ...), so
    this is a case-insensitive substring match.
    """
    text = (hint or "").lower()
    if any(token in text for token in _YOU_HINTS):
        return Winner.YOU
    if any(token in text for token in _OPPONENT_HINTS):
        return Winner.OPPONENT
    return Winner.NONE


def infer_winner(event: ScoreEvent, previous: Optional[ScoreEvent] = None) -> Winner:
    """Return who won ``event`` by comparing it to the previous snapshot."""
    prev_p1, prev_p2 = previous.score if previous is not None else (0, 0)
    if event.player1_score > prev_p1:
        return Winner.YOU
    if event.player2_score > prev_p2:
        return Winner.OPPONENT
    return winner_from_hint(event.scoring_player_hint)


def infer_winners(events: Sequence[ScoreEvent]) -> list[Winner]:
    winners: list[Winner] = []
    previous: Optional[ScoreEvent] = None
    for event in events:
        winners.append(infer_winner(event, previous))
        previous = event
    return winners


def _as_side(winner: Winner) -> Optional[Side]:
    if winner is Winner.YOU:
        return Side.YOU
    if winner is Winner.OPPONENT:
        return Side.OPPONENT
    return None


def seed_server(first_event: ScoreEvent, first_winner: Winner) -> ServerState:
    """Guess who served the opening point.

    A point won straight off the serve means the winner was serving. Any other
    win is treated as a side-out, i.e. the loser had the serve.
    """
    side = _as_side(first_winner)
    if side is None:
        return ServerState(side=Side.YOU, slot=1)
    if not first_event.is_serve_point:
        side = side.other
    return ServerState(side=side, slot=1)


class ServeTurn(NamedTuple):
    before: ServerState
    after: ServerState
    is_side_out: bool


class ServeRotation:
    """Two-server-per-side rotation driven only by point winners.

    - server's side wins: same side, slot toggles 1 <-> 2
    - other side wins: serve moves to the winner at slot 1
    - unknown winner: slot toggles

    Only an opponent -> you handover is flagged as a side-out.
    """

    def __init__(self, seed: ServerState) -> None:
        self.state = seed

    def advance(self, winner: Winner) -> ServeTurn:
        before = self.state
        side = _as_side(winner)
        side_out = False
        if side is None or side is before.side:
            after = ServerState(side=before.side, slot=2 if before.slot == 1 else 1)
        else:
            after = ServerState(side=side, slot=1)
            side_out = before.side is Side.OPPONENT and side is Side.YOU
        self.state = after
        return ServeTurn(before, after, side_out)


def serve_turns(
    events: Sequence[ScoreEvent], winners: Optional[Sequence[Winner]] = None
) -> Iterator[tuple[Winner, ServeTurn]]:
    """Yield ``(winner, turn)`` for every event in order.

    The first event only seeds the rotation: its ``before`` and ``after``
    states are both the seed and it is never a side-out.
    """
    if not events:
        return
    if winners is None:
        winners = infer_winners(events)
    seed = seed_server(events[0], winners[0])
    rotation = ServeRotation(seed)
    yield winners[0], ServeTurn(seed, seed, False)
    for winner in winners[1:]:
        yield winner, rotation.advance(winner)


def reconstruct_points(
    events: Sequence[ScoreEvent], sport: Optional[str] = None
) -> list[ReconstructedPoint]:
    """Annotate every event with its winner, server and side-out flag."""
    rules = scoring.resolve(sport)
    points: list[ReconstructedPoint] = []
    for index, (event, (winner, turn)) in enumerate(
        zip(events, serve_turns(events)), start=1
    ):
        server = turn.after
        points.append(
            ReconstructedPoint(
                sequence_number=index,
                score_label=f"{event.player1_score}-{event.player2_score}",
                display_score=rules.format_score(event.player1_score, event.player2_score),
                winner=winner,
                server=server.label,
                server_side=server.side,
                server_slot=server.slot,
                is_side_out=turn.is_side_out,
                timestamp=event.timestamp,
                player1_score=event.player1_score,
                player2_score=event.player2_score,
                shot_type=event.shot_type,
            )
        )
    return points


Distributor = Callable[[Sequence[ReconstructedPoint], int], list[list[ReconstructedPoint]]]


def reconstruct(
    events: Sequence[ScoreEvent],
    boundaries: Optional[Sequence[MatchBoundary]] = None,
    sport: Optional[str] = None,
    distribute: Distributor = distribute_evenly,
) -> list[PointGroup]:
    """Reconstruct the match and bucket the points into sets/games.

    The whole event list is reconstructed first so serve state carries across
    buckets; ``distribute`` then decides which points land in which bucket.
    """
    points = reconstruct_points(events, sport)
    rules = scoring.resolve(sport)
    groups = build_groups(points, boundaries, distribute, uses_sets=rules.USES_SETS)
    logger.debug(
        "Reconstructed %d points into %d group(s) for sport=%r",
        len(points),
        len(groups),
        sport,
    )
    return groups
