from __future__ import annotations

from fastapi import APIRouter, Depends

from src.api.dependencies import get_bd_service
from src.api.params import get_report_window_filters
from src.core.config import get_settings
from src.schemas.reports import BdDashboardResponse, ReportWindowFilters
from src.services.bd_service import BdService
from src.shared.response import ResponseEnvelope, build_meta

router = APIRouter(prefix="/bd-dashboard", tags=["bd-dashboard"])


@router.get("")
def bd_dashboard(
    filters: ReportWindowFilters = Depends(get_report_window_filters),
    service: BdService = Depends(get_bd_service),
) -> ResponseEnvelope[BdDashboardResponse]:
    data = service.get_dashboard(filters)
    meta = build_meta(
        source="bd_targets,bd_sheets,paid_accounts",
        as_of=service.window.today(),
        start_date=data.start_date,
        end_date=data.end_date,
        timezone=get_settings().report_timezone,
    )
    return ResponseEnvelope(data=data, meta=meta)
