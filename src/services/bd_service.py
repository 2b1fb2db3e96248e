from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date
from typing import Any, Dict, List, Optional

from src.analytics.achievements import combine, count_paid_accounts, summarize_interns
from src.analytics.day_merger import Ratio, ReportLayout, merge_days
from src.analytics.leaderboard import build_entry, rank_entries
from src.analytics.totals import sum_period
from src.core.errors import BadRequestError
from src.models.targets import BD_TARGET_QUOTA_FIELDS
from src.repositories.events_repository import EventsRepository
from src.repositories.managers_repository import ManagersRepository
from src.repositories.targets_repository import TargetsRepository
from src.schemas.leaderboard import LeaderboardEntry, LeaderboardFilters, LeaderboardResponse
from src.schemas.reports import (
    BdDashboardResponse,
    BdTargetSheetResponse,
    BdTargetUpsertRequest,
    ReportWindowFilters,
)
from src.services.report_window import ReportWindow, require_manager
from src.shared.time import DateRange, enumerate_days, month_label, resolve_range

logger = logging.getLogger(__name__)

BD_TARGET_SHEET_LAYOUT = ReportLayout(quotas=tuple((field, field) for field in BD_TARGET_QUOTA_FIELDS))
BD_DASHBOARD_LAYOUT = ReportLayout(
    quotas=(
        ("target_interns_allocated", "interns_allocated"),
        ("target_interns_active", "interns_active"),
        ("target_accounts", "accounts"),
    ),
    achieved=("interns_allocated", "interns_active", "accounts", "business_task_amount"),
    ratios=(
        Ratio("allocation_percent", achieved="interns_allocated", quota="target_interns_allocated"),
        Ratio("activation_percent", achieved="interns_active", quota="target_interns_active"),
        Ratio("accounts_percent", achieved="accounts", quota="target_accounts"),
    ),
)


class BdService:
    def __init__(
        self,
        targets_repository: TargetsRepository,
        events_repository: EventsRepository,
        managers_repository: ManagersRepository,
        window: ReportWindow,
    ) -> None:
        self.targets_repository = targets_repository
        self.events_repository = events_repository
        self.managers_repository = managers_repository
        self.window = window

    def get_target_sheet(self, filters: ReportWindowFilters) -> BdTargetSheetResponse:
        manager = require_manager(self.managers_repository, filters.manager_id)
        window = self.window.resolve(filters.month, filters.start_date, filters.end_date)
        return self._target_sheet(manager.id, window)

    def save_targets(self, request: BdTargetUpsertRequest) -> BdTargetSheetResponse:
        manager = require_manager(self.managers_repository, request.manager_id)
        if not request.targets:
            raise BadRequestError("targets must contain at least one day")
        window = self._upsert_window(request)

        # A repeated date in one request keeps the later entry.
        rows_by_date: Dict[date, Dict[str, Any]] = {}
        for target in request.targets:
            if not window.contains(target.date):
                raise BadRequestError(
                    f"Target date {target.date.isoformat()} is outside "
                    f"{window.start_date.isoformat()}..{window.end_date.isoformat()}"
                )
            rows_by_date[target.date] = target.model_dump(include={"date", *BD_TARGET_QUOTA_FIELDS})

        written = self.targets_repository.upsert_bd_targets(manager.id, list(rows_by_date.values()))
        logger.info("Upserted %s BD target row(s) for manager %s", len(written), manager.id)
        return self._target_sheet(manager.id, window)

    def get_dashboard(self, filters: ReportWindowFilters) -> BdDashboardResponse:
        manager = require_manager(self.managers_repository, filters.manager_id)
        window = self.window.resolve(filters.month, filters.start_date, filters.end_date)

        targets = self.targets_repository.list_bd_targets([manager.id], window)
        interns = self.events_repository.list_intern_records([manager.id], window)
        paid_accounts = self.events_repository.list_paid_account_events([manager.id], window)

        achievements = combine(summarize_interns(interns), count_paid_accounts(paid_accounts))
        days = merge_days(
            enumerate_days(window.start_date, window.end_date),
            targets,
            achievements,
            BD_DASHBOARD_LAYOUT,
        )
        return BdDashboardResponse(
            manager_id=manager.id,
            month=month_label(window.start_date),
            start_date=window.start_date,
            end_date=window.end_date,
            days=days,
            totals=sum_period(days, BD_DASHBOARD_LAYOUT),
        )

    def get_leaderboard(self, filters: LeaderboardFilters) -> LeaderboardResponse:
        window = self.window.resolve(filters.month, filters.start_date, filters.end_date)
        managers = self.managers_repository.list_managers(filters.manager_ids)
        # Without an explicit id list every manager is read in one pass.
        scope: Optional[List[int]] = (
            [manager.id for manager in managers] if filters.manager_ids is not None else None
        )

        allocated: Dict[int, int] = defaultdict(int)
        achieved: Dict[int, int] = defaultdict(int)
        for record in self.events_repository.list_intern_records(scope, window):
            allocated[record.manager_id] += 1
            if record.is_active:
                achieved[record.manager_id] += 1

        targets: Dict[int, int] = defaultdict(int)
        for target in self.targets_repository.list_bd_targets(scope, window):
            targets[target.manager_id] += target.interns_active

        entries: List[LeaderboardEntry] = [
            build_entry(
                manager_id=manager.id,
                name=manager.name,
                allocated=allocated[manager.id],
                achieved=achieved[manager.id],
                target=targets[manager.id],
            )
            for manager in managers
        ]
        return LeaderboardResponse(
            start_date=window.start_date,
            end_date=window.end_date,
            rankings=rank_entries(entries),
        )

    def _target_sheet(self, manager_id: int, window: DateRange) -> BdTargetSheetResponse:
        targets = self.targets_repository.list_bd_targets([manager_id], window)
        days = merge_days(
            enumerate_days(window.start_date, window.end_date),
            targets,
            {},
            BD_TARGET_SHEET_LAYOUT,
        )
        return BdTargetSheetResponse(
            manager_id=manager_id,
            start_date=window.start_date,
            end_date=window.end_date,
            days=days,
            totals=sum_period(days, BD_TARGET_SHEET_LAYOUT),
        )

    def _upsert_window(self, request: BdTargetUpsertRequest) -> DateRange:
        if request.month or (request.start_date and request.end_date):
            return self.window.resolve(request.month, request.start_date, request.end_date)
        # Without an explicit window the refreshed sheet spans the submitted dates.
        dates = [target.date for target in request.targets]
        return resolve_range(start_date=min(dates), end_date=max(dates), tz=self.window.tz, today=self.window.today())
