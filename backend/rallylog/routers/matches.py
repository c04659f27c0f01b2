# backend/rallylog/routers/matches.py
import logging

from fastapi import APIRouter

from .. import scoring
from ..exceptions import UnknownSport
from ..schemas import InsightsRequest, MatchInsights, PointGroup, PointsRequest
from ..services import aggregate, reconstruct

logger = logging.getLogger(__name__)

# Resource-only prefix; versioning is added in main.py
router = APIRouter(prefix="/matches", tags=["matches"])


def _require_sport(sport: str) -> str:
    if scoring.lookup(sport) is None:
        raise UnknownSport(sport)
    return scoring.normalize_sport(sport)


# POST /api/v0/matches/points
@router.post("/points", response_model=list[PointGroup])
def point_breakdown(body: PointsRequest) -> list[PointGroup]:
    sport = _require_sport(body.sport)
    groups = reconstruct(body.events, body.boundaries, sport=sport)
    logger.info(
        "point breakdown: sport=%s events=%d groups=%d",
        sport,
        len(body.events),
        len(groups),
    )
    return groups


# POST /api/v0/matches/insights
@router.post("/insights", response_model=MatchInsights)
def match_insights(body: InsightsRequest) -> MatchInsights:
    sport = _require_sport(body.sport)
    return aggregate(
        body.events,
        is_doubles=body.is_doubles,
        sport_type=sport,
        is_win=body.is_win,
    )
