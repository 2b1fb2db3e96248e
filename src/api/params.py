from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import Query

from src.schemas.reports import ReportWindowFilters

MONTH_PATTERN = r"^\d{4}-\d{2}$"


def get_report_window_filters(
    team_manager_id: Optional[int] = Query(default=None, alias="teamManagerId", ge=1),
    manager_id: Optional[int] = Query(default=None, alias="managerId", ge=1),
    month: Optional[str] = Query(default=None, pattern=MONTH_PATTERN),
    start_date: Optional[date] = Query(default=None, alias="startDate"),
    from_date: Optional[date] = Query(default=None, alias="from"),
    end_date: Optional[date] = Query(default=None, alias="endDate"),
    to_date: Optional[date] = Query(default=None, alias="to"),
) -> ReportWindowFilters:
    # Older clients send managerId and from/to; both spellings stay accepted.
    return ReportWindowFilters(
        manager_id=team_manager_id if team_manager_id is not None else manager_id,
        month=month,
        start_date=start_date or from_date,
        end_date=end_date or to_date,
    )
