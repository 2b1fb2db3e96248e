from __future__ import annotations

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from src.api.dependencies import get_bd_service
from src.api.params import MONTH_PATTERN
from src.core.config import get_settings
from src.schemas.leaderboard import LeaderboardFilters, LeaderboardResponse
from src.services.bd_service import BdService
from src.shared.response import ResponseEnvelope, build_meta

router = APIRouter(prefix="/leaderboard", tags=["leaderboard"])


def get_leaderboard_filters(
    manager_ids: Optional[List[int]] = Query(default=None, alias="managerIds"),
    month: Optional[str] = Query(default=None, pattern=MONTH_PATTERN),
    start_date: Optional[date] = Query(default=None, alias="startDate"),
    from_date: Optional[date] = Query(default=None, alias="from"),
    end_date: Optional[date] = Query(default=None, alias="endDate"),
    to_date: Optional[date] = Query(default=None, alias="to"),
) -> LeaderboardFilters:
    return LeaderboardFilters(
        manager_ids=manager_ids,
        month=month,
        start_date=start_date or from_date,
        end_date=end_date or to_date,
    )


@router.get("")
def leaderboard(
    filters: LeaderboardFilters = Depends(get_leaderboard_filters),
    service: BdService = Depends(get_bd_service),
) -> ResponseEnvelope[LeaderboardResponse]:
    data = service.get_leaderboard(filters)
    meta = build_meta(
        source="team_managers,bd_sheets,bd_targets",
        as_of=service.window.today(),
        start_date=data.start_date,
        end_date=data.end_date,
        timezone=get_settings().report_timezone,
    )
    return ResponseEnvelope(data=data, meta=meta)
