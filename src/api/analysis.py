from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from src.api.dependencies import get_analysis_service
from src.api.params import get_report_window_filters
from src.core.config import get_settings
from src.schemas.reports import (
    CallStatsResponse,
    DailyAnalysisResponse,
    DailyResumeEfficiencyResponse,
    JdStatsResponse,
    ReportWindowFilters,
    ResumeAnalysisResponse,
    ResumeBreakdownResponse,
)
from src.services.analysis_service import AnalysisService
from src.shared.response import ResponseEnvelope, build_meta

router = APIRouter(prefix="/analysis", tags=["analysis"])


def _envelope(data, service: AnalysisService, source: str) -> ResponseEnvelope:
    return ResponseEnvelope(
        data=data,
        meta=build_meta(
            source=source,
            as_of=service.window.today(),
            start_date=data.start_date,
            end_date=data.end_date,
            timezone=get_settings().report_timezone,
        ),
    )


@router.get("/daily")
def daily_analysis(
    filters: ReportWindowFilters = Depends(get_report_window_filters),
    service: AnalysisService = Depends(get_analysis_service),
) -> ResponseEnvelope[DailyAnalysisResponse]:
    data = service.get_daily_analysis(filters)
    return _envelope(data, service, "my_targets,co_sheets")


@router.get("/calls")
def call_stats(
    filters: ReportWindowFilters = Depends(get_report_window_filters),
    service: AnalysisService = Depends(get_analysis_service),
) -> ResponseEnvelope[CallStatsResponse]:
    data = service.get_call_stats(filters)
    return _envelope(data, service, "my_targets,co_sheets")


@router.get("/jds")
def jd_stats(
    filters: ReportWindowFilters = Depends(get_report_window_filters),
    service: AnalysisService = Depends(get_analysis_service),
) -> ResponseEnvelope[JdStatsResponse]:
    data = service.get_jd_stats(filters)
    return _envelope(data, service, "my_targets,co_sheets")


@router.get("/resumes")
def resume_analysis(
    filters: ReportWindowFilters = Depends(get_report_window_filters),
    service: AnalysisService = Depends(get_analysis_service),
) -> ResponseEnvelope[ResumeAnalysisResponse]:
    data = service.get_resume_analysis(filters)
    return _envelope(data, service, "my_targets,co_sheets")


@router.get("/resumes/daily")
def daily_resume_efficiency(
    filters: ReportWindowFilters = Depends(get_report_window_filters),
    service: AnalysisService = Depends(get_analysis_service),
) -> ResponseEnvelope[DailyResumeEfficiencyResponse]:
    data = service.get_daily_resume_efficiency(filters)
    return _envelope(data, service, "my_targets,co_sheets")


@router.get("/resumes/breakdown")
def resume_breakdown(
    period: str = Query(default="daily", pattern="^(daily|monthly)$"),
    filters: ReportWindowFilters = Depends(get_report_window_filters),
    service: AnalysisService = Depends(get_analysis_service),
) -> ResponseEnvelope[ResumeBreakdownResponse]:
    data = service.get_resume_breakdown(filters, period)
    return _envelope(data, service, "co_sheets")
