from __future__ import annotations

import os

os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-role-key")

from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Dict, List, Optional, Sequence
from zoneinfo import ZoneInfo

import pytest
from fastapi.testclient import TestClient

from src.api.dependencies import get_analysis_service, get_bd_service, get_calculator_service
from src.main import create_app
from src.models.events import (
    CallEvent,
    FollowUpEvent,
    InternRecord,
    JdSentEvent,
    PaidAccountEvent,
    ResumeEvent,
)
from src.models.managers import ManagerRecord, SlabConfigRecord
from src.models.targets import BD_TARGET_QUOTA_FIELDS, BdTargetRecord, TargetRecord
from src.services.analysis_service import AnalysisService
from src.services.bd_service import BdService
from src.services.calculator_service import CalculatorService
from src.services.report_window import ReportWindow
from src.shared.time import DateRange

IST = ZoneInfo("Asia/Kolkata")
FIXED_NOW = datetime(2025, 3, 15, 6, 30, tzinfo=timezone.utc)


def _in_scope(manager_id: Optional[int], manager_ids: Optional[Sequence[int]]) -> bool:
    return manager_ids is None or manager_id in manager_ids


class StubManagersRepository:
    def __init__(self, managers: Optional[List[ManagerRecord]] = None) -> None:
        self.managers: Dict[int, ManagerRecord] = {manager.id: manager for manager in managers or []}

    def get_manager(self, manager_id: int) -> Optional[ManagerRecord]:
        return self.managers.get(manager_id)

    def list_managers(self, manager_ids: Optional[Sequence[int]] = None) -> List[ManagerRecord]:
        return [manager for manager in self.managers.values() if _in_scope(manager.id, manager_ids)]


class StubTargetsRepository:
    def __init__(self) -> None:
        self.targets: List[TargetRecord] = []
        self.bd_targets: List[BdTargetRecord] = []
        self.upserts: List[List[dict]] = []

    def list_targets(self, manager_ids: Optional[Sequence[int]], window: DateRange) -> List[TargetRecord]:
        return [
            target
            for target in self.targets
            if _in_scope(target.manager_id, manager_ids) and window.contains(target.target_date)
        ]

    def list_bd_targets(self, manager_ids: Optional[Sequence[int]], window: DateRange) -> List[BdTargetRecord]:
        return [
            target
            for target in self.bd_targets
            if _in_scope(target.manager_id, manager_ids) and window.contains(target.target_date)
        ]

    def upsert_bd_targets(self, manager_id: int, rows: Sequence[dict]) -> List[BdTargetRecord]:
        self.upserts.append(list(rows))
        written: List[BdTargetRecord] = []
        for row in rows:
            existing = next(
                (
                    target
                    for target in self.bd_targets
                    if target.manager_id == manager_id and target.target_date == row["date"]
                ),
                None,
            )
            values = {column: row[column] for column in BD_TARGET_QUOTA_FIELDS if row.get(column) is not None}
            if existing is None:
                record = BdTargetRecord(manager_id=manager_id, target_date=row["date"], **values)
                self.bd_targets.append(record)
            else:
                record = existing.model_copy(update=values)
                self.bd_targets[self.bd_targets.index(existing)] = record
            written.append(record)
        return written


class StubEventsRepository:
    def __init__(self) -> None:
        self.calls: List[CallEvent] = []
        self.jds: List[JdSentEvent] = []
        self.resumes: List[ResumeEvent] = []
        self.follow_ups: List[FollowUpEvent] = []
        self.paid_accounts: List[PaidAccountEvent] = []
        self.interns: List[InternRecord] = []
        self.fail_with: Optional[Exception] = None

    def _filter(self, events, manager_ids, window):
        if self.fail_with is not None:
            raise self.fail_with
        return [
            event
            for event in events
            if _in_scope(event.manager_id, manager_ids) and window.contains(event.event_date)
        ]

    def list_call_events(self, manager_ids, window: DateRange) -> List[CallEvent]:
        return self._filter(self.calls, manager_ids, window)

    def list_jd_sent_events(self, manager_ids, window: DateRange) -> List[JdSentEvent]:
        return self._filter(self.jds, manager_ids, window)

    def list_resume_events(self, manager_ids, window: DateRange, follow_up_by: Optional[str] = None):
        events = self._filter(self.resumes, manager_ids, window)
        if follow_up_by:
            events = [event for event in events if event.follow_up_by == follow_up_by]
        return events

    def list_follow_up_events(self, follow_up_by: str, window: DateRange) -> List[FollowUpEvent]:
        events = self._filter(self.follow_ups, None, window)
        return [event for event in events if event.follow_up_by == follow_up_by]

    def list_paid_account_events(self, manager_ids, window: DateRange) -> List[PaidAccountEvent]:
        return self._filter(self.paid_accounts, manager_ids, window)

    def list_intern_records(self, manager_ids, window: DateRange) -> List[InternRecord]:
        return self._filter(self.interns, manager_ids, window)


class StubSlabsRepository:
    def __init__(self) -> None:
        self.configs: Dict[int, SlabConfigRecord] = {}

    def get_slab_config(self, manager_id: int) -> Optional[SlabConfigRecord]:
        return self.configs.get(manager_id)

    def save_slab_config(self, manager_id: int, incentive_amounts, deduction_amounts) -> SlabConfigRecord:
        record = SlabConfigRecord(
            manager_id=manager_id,
            incentive_amounts=incentive_amounts,
            deduction_amounts=deduction_amounts,
        )
        self.configs[manager_id] = record
        return record


@pytest.fixture()
def repositories() -> SimpleNamespace:
    return SimpleNamespace(
        managers=StubManagersRepository(
            [
                ManagerRecord(id=1, name="Asha", email="asha@example.com"),
                ManagerRecord(id=2, name="Ravi"),
                ManagerRecord(id=3, name="Meera"),
            ]
        ),
        targets=StubTargetsRepository(),
        events=StubEventsRepository(),
        slabs=StubSlabsRepository(),
    )


@pytest.fixture()
def report_window() -> ReportWindow:
    return ReportWindow(tz=IST, clock=lambda: FIXED_NOW)


@pytest.fixture()
def analysis_service(repositories, report_window) -> AnalysisService:
    return AnalysisService(
        targets_repository=repositories.targets,
        events_repository=repositories.events,
        managers_repository=repositories.managers,
        window=report_window,
    )


@pytest.fixture()
def bd_service(repositories, report_window) -> BdService:
    return BdService(
        targets_repository=repositories.targets,
        events_repository=repositories.events,
        managers_repository=repositories.managers,
        window=report_window,
    )


@pytest.fixture()
def calculator_service(repositories, report_window) -> CalculatorService:
    return CalculatorService(
        slabs_repository=repositories.slabs,
        targets_repository=repositories.targets,
        events_repository=repositories.events,
        managers_repository=repositories.managers,
        window=report_window,
    )


@pytest.fixture()
def client(analysis_service, bd_service, calculator_service) -> TestClient:
    app = create_app()
    app.dependency_overrides[get_analysis_service] = lambda: analysis_service
    app.dependency_overrides[get_bd_service] = lambda: bd_service
    app.dependency_overrides[get_calculator_service] = lambda: calculator_service
    return TestClient(app, raise_server_exceptions=False)
