"""Bucketing of reconstructed points into sets or games.

The event stream carries no set/game markers, so any split is an
approximation. The strategies here are plain functions with the signature
``(points, group_count) -> list of chunks`` so a caller that does know the real
boundaries can pass its own.
"""
from __future__ import annotations

import logging
import math
from typing import Callable, Optional, Sequence

from ..schemas import MatchBoundary, PointGroup, ReconstructedPoint

logger = logging.getLogger(__name__)


def distribute_evenly(
    points: Sequence[ReconstructedPoint], group_count: int
) -> list[list[ReconstructedPoint]]:
    """Split ``points`` into ``group_count`` contiguous chunks.

    Chunks hold ``ceil(len(points) / group_count)`` points; the last chunk
    takes whatever is left and trailing chunks may be empty. A non-positive
    count is treated as one chunk.
    """
    if group_count <= 0:
        logger.debug("group_count=%d is not positive; using a single group", group_count)
        group_count = 1
    size = math.ceil(len(points) / group_count)
    chunks = [list(points[i * size : (i + 1) * size]) for i in range(group_count - 1)]
    chunks.append(list(points[(group_count - 1) * size :]))
    return chunks


def split_on_score_reset(
    points: Sequence[ReconstructedPoint], group_count: int = 0
) -> list[list[ReconstructedPoint]]:
    """Split wherever the running score starts over.

    Scores never go down within a game, so a new game starts when the next
    snapshot is 0-0 or either score drops.
    ``group_count`` is ignored; the score stream decides the number of chunks.
    """
    chunks: list[list[ReconstructedPoint]] = []
    current: list[ReconstructedPoint] = []
    for index, point in enumerate(points):
        current.append(point)
        if index + 1 == len(points):
            break
        nxt = points[index + 1]
        resets = (nxt.player1_score == 0 and nxt.player2_score == 0) or (
            nxt.player1_score < point.player1_score
            or nxt.player2_score < point.player2_score
        )
        if resets:
            chunks.append(current)
            current = []
    if current or not chunks:
        chunks.append(current)
    return chunks


def _final_score(chunk: Sequence[ReconstructedPoint]) -> tuple[int, int]:
    if not chunk:
        return 0, 0
    return chunk[-1].player1_score, chunk[-1].player2_score


def build_groups(
    points: Sequence[ReconstructedPoint],
    boundaries: Optional[Sequence[MatchBoundary]] = None,
    distribute: Callable[
        [Sequence[ReconstructedPoint], int], list[list[ReconstructedPoint]]
    ] = distribute_evenly,
    *,
    uses_sets: bool = False,
) -> list[PointGroup]:
    """Wrap distributed chunks into titled :class:`PointGroup` objects.

    With boundaries, groups are titled "Set N" (or "Game N" for sports scored
    in games) and carry the boundary score; exactly one group per boundary is
    returned, with any extra chunks folded into the last group. Without
    boundaries groups are "Game N" and carry the last point's score.
    """
    boundaries = list(boundaries or [])
    if not boundaries:
        chunks = distribute(points, 1) or [[]]
        return [
            PointGroup(
                title=f"Game {i}",
                player1_games=_final_score(chunk)[0],
                player2_games=_final_score(chunk)[1],
                points=chunk,
            )
            for i, chunk in enumerate(chunks, start=1)
        ]

    label = "Set" if uses_sets else "Game"
    count = len(boundaries)
    chunks = distribute(points, count)
    if len(chunks) > count:
        logger.debug(
            "distributor returned %d chunks for %d boundaries; merging the tail",
            len(chunks),
            count,
        )
        tail = [p for chunk in chunks[count - 1 :] for p in chunk]
        chunks = chunks[: count - 1] + [tail]
    chunks = chunks + [[] for _ in range(count - len(chunks))]

    return [
        PointGroup(
            title=f"{label} {i}",
            player1_games=b.player1_games,
            player2_games=b.player2_games,
            tiebreak_player1=b.tiebreak_player1,
            tiebreak_player2=b.tiebreak_player2,
            points=chunk,
        )
        for i, (b, chunk) in enumerate(zip(boundaries, chunks), start=1)
    ]
