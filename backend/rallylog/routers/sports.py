from __future__ import annotations

from fastapi import APIRouter

from .. import scoring
from ..schemas import SportOut

router = APIRouter(prefix="/sports", tags=["sports"])


# GET /api/v0/sports
@router.get("", response_model=list[SportOut])
def list_sports() -> list[SportOut]:
    catalog = []
    for sport_id in scoring.SPORTS:
        rules = scoring.lookup(sport_id)
        catalog.append(
            SportOut(
                id=sport_id,
                name=rules.NAME,
                clutch_threshold=rules.CLUTCH_THRESHOLD,
            )
        )
    # Return a deterministic ordering for consumers
    return sorted(catalog, key=lambda s: (s.name.lower(), s.id))
