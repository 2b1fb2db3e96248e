from __future__ import annotations

from functools import lru_cache

from src.core.config import get_report_timezone
from src.repositories.events_repository import EventsRepository
from src.repositories.managers_repository import ManagersRepository
from src.repositories.slabs_repository import SlabsRepository
from src.repositories.targets_repository import TargetsRepository
from src.services.analysis_service import AnalysisService
from src.services.bd_service import BdService
from src.services.calculator_service import CalculatorService
from src.services.report_window import ReportWindow


@lru_cache
def get_managers_repository() -> ManagersRepository:
    return ManagersRepository()


@lru_cache
def get_targets_repository() -> TargetsRepository:
    return TargetsRepository()


@lru_cache
def get_events_repository() -> EventsRepository:
    return EventsRepository(tz=get_report_timezone())


@lru_cache
def get_slabs_repository() -> SlabsRepository:
    return SlabsRepository()


def get_report_window() -> ReportWindow:
    return ReportWindow(tz=get_report_timezone())


def get_analysis_service() -> AnalysisService:
    return AnalysisService(
        targets_repository=get_targets_repository(),
        events_repository=get_events_repository(),
        managers_repository=get_managers_repository(),
        window=get_report_window(),
    )


def get_bd_service() -> BdService:
    return BdService(
        targets_repository=get_targets_repository(),
        events_repository=get_events_repository(),
        managers_repository=get_managers_repository(),
        window=get_report_window(),
    )


def get_calculator_service() -> CalculatorService:
    return CalculatorService(
        slabs_repository=get_slabs_repository(),
        targets_repository=get_targets_repository(),
        events_repository=get_events_repository(),
        managers_repository=get_managers_repository(),
        window=get_report_window(),
    )
