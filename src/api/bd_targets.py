from __future__ import annotations

from fastapi import APIRouter, Depends

from src.api.dependencies import get_bd_service
from src.api.params import get_report_window_filters
from src.core.config import get_settings
from src.schemas.reports import BdTargetSheetResponse, BdTargetUpsertRequest, ReportWindowFilters
from src.services.bd_service import BdService
from src.shared.response import Meta, ResponseEnvelope, build_meta

router = APIRouter(prefix="/bd-targets", tags=["bd-targets"])


def _meta(data: BdTargetSheetResponse, service: BdService) -> Meta:
    return build_meta(
        source="bd_targets",
        as_of=service.window.today(),
        start_date=data.start_date,
        end_date=data.end_date,
        timezone=get_settings().report_timezone,
    )


@router.get("")
def bd_target_sheet(
    filters: ReportWindowFilters = Depends(get_report_window_filters),
    service: BdService = Depends(get_bd_service),
) -> ResponseEnvelope[BdTargetSheetResponse]:
    data = service.get_target_sheet(filters)
    return ResponseEnvelope(data=data, meta=_meta(data, service))


@router.post("")
def save_bd_targets(
    payload: BdTargetUpsertRequest,
    service: BdService = Depends(get_bd_service),
) -> ResponseEnvelope[BdTargetSheetResponse]:
    data = service.save_targets(payload)
    return ResponseEnvelope(data=data, meta=_meta(data, service))
