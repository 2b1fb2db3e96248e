from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from src.api.dependencies import get_calculator_service
from src.api.params import get_report_window_filters
from src.core.config import get_settings
from src.schemas.calculator import (
    DeductionResponse,
    IncentiveResponse,
    SlabConfigResponse,
    SlabUpdateRequest,
)
from src.schemas.reports import ReportWindowFilters
from src.services.calculator_service import CalculatorService
from src.shared.response import ResponseEnvelope, build_meta

router = APIRouter(prefix="/calculator", tags=["calculator"])


@router.get("/incentive")
def incentive(
    filters: ReportWindowFilters = Depends(get_report_window_filters),
    service: CalculatorService = Depends(get_calculator_service),
) -> ResponseEnvelope[IncentiveResponse]:
    data = service.calculate_incentive(filters)
    meta = build_meta(
        source="bd_sheets,manager_ranges",
        as_of=service.window.today(),
        start_date=data.start_date,
        end_date=data.end_date,
        timezone=get_settings().report_timezone,
    )
    return ResponseEnvelope(data=data, meta=meta)


@router.get("/deduction")
def deduction(
    filters: ReportWindowFilters = Depends(get_report_window_filters),
    service: CalculatorService = Depends(get_calculator_service),
) -> ResponseEnvelope[DeductionResponse]:
    data = service.calculate_deduction(filters)
    meta = build_meta(
        source="bd_targets,bd_sheets,manager_ranges",
        as_of=service.window.today(),
        start_date=data.start_date,
        end_date=data.end_date,
        timezone=get_settings().report_timezone,
    )
    return ResponseEnvelope(data=data, meta=meta)


@router.get("/slabs")
def get_slabs(
    team_manager_id: Optional[int] = Query(default=None, alias="teamManagerId", ge=1),
    manager_id: Optional[int] = Query(default=None, alias="managerId", ge=1),
    service: CalculatorService = Depends(get_calculator_service),
) -> ResponseEnvelope[SlabConfigResponse]:
    data = service.get_slabs(team_manager_id if team_manager_id is not None else manager_id)
    meta = build_meta(source="manager_ranges", as_of=service.window.today())
    return ResponseEnvelope(data=data, meta=meta)


@router.put("/slabs")
def update_slabs(
    payload: SlabUpdateRequest,
    service: CalculatorService = Depends(get_calculator_service),
) -> ResponseEnvelope[SlabConfigResponse]:
    data = service.update_slabs(payload)
    meta = build_meta(source="manager_ranges", as_of=service.window.today())
    return ResponseEnvelope(data=data, meta=meta)
