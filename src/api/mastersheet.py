from __future__ import annotations

from fastapi import APIRouter, Depends

from src.api.dependencies import get_analysis_service
from src.api.params import get_report_window_filters
from src.core.config import get_settings
from src.schemas.reports import MasterSheetResponse, ReportWindowFilters
from src.services.analysis_service import AnalysisService
from src.shared.response import ResponseEnvelope, build_meta

router = APIRouter(prefix="/mastersheet", tags=["mastersheet"])


@router.get("/metrics")
def master_sheet_metrics(
    filters: ReportWindowFilters = Depends(get_report_window_filters),
    service: AnalysisService = Depends(get_analysis_service),
) -> ResponseEnvelope[MasterSheetResponse]:
    data = service.get_master_sheet_metrics(filters)
    meta = build_meta(
        source="my_targets,co_sheets",
        as_of=service.window.today(),
        start_date=data.start_date,
        end_date=data.end_date,
        timezone=get_settings().report_timezone,
    )
    return ResponseEnvelope(data=data, meta=meta)
