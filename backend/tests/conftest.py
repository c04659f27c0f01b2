import os
import sys

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

# Keep app imports free of deployment settings during tests.
os.environ.setdefault("ALLOWED_ORIGINS", "")
os.environ.pop("SENTRY_DSN", None)

from rallylog.schemas import ScoreEvent  # noqa: E402


def events_from_winners(winners, *, first_is_serve=True):
    """Build cumulative score events from a string such as ``"YYOY"``.

    ``Y`` is a point for you, ``O`` a point for the opponent.
    """
    p1 = p2 = 0
    events = []
    for i, w in enumerate(winners):
        if w == "Y":
            p1 += 1
            hint = "you"
        else:
            p2 += 1
            hint = "opponent"
        events.append(
            ScoreEvent(
                timestamp=float(i * 10),
                player1_score=p1,
                player2_score=p2,
                scoring_player_hint=hint,
                is_serve_point=first_is_serve and i == 0,
            )
        )
    return events


@pytest.fixture()
def make_events():
    return events_from_winners


@pytest.fixture()
def scenario_a():
    return [
        ScoreEvent.model_validate((1, 0, "you", True)),
        ScoreEvent.model_validate((2, 0, "you", False)),
        ScoreEvent.model_validate((2, 1, "opponent", False)),
    ]
