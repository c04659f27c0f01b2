"""Internal application services (pure helpers, no I/O)."""

from .grouping import build_groups, distribute_evenly, split_on_score_reset
from .insights import aggregate
from .reconstruction import (
    ServeRotation,
    infer_winner,
    reconstruct,
    reconstruct_points,
    serve_turns,
)
from .stats import (
    rolling_win_percentage,
    compute_streaks,
    count_lead_changes,
    win_percentage,
    win_rate,
)

__all__ = [
    "aggregate",
    "build_groups",
    "distribute_evenly",
    "split_on_score_reset",
    "ServeRotation",
    "infer_winner",
    "reconstruct",
    "reconstruct_points",
    "serve_turns",
    "rolling_win_percentage",
    "compute_streaks",
    "count_lead_changes",
    "win_percentage",
    "win_rate",
]
