from __future__ import annotations

from collections import Counter
from typing import Dict, List

from src.analytics.achievements import (
    CALL_OUTCOME_FIELDS,
    combine,
    count_call_outcomes,
    count_jd_sent,
    sum_resumes,
)
from src.analytics.day_merger import Ratio, ReportLayout, merge_days
from src.analytics.metrics import percentage, remaining
from src.analytics.totals import sum_period
from src.core.errors import BadRequestError
from src.models.events import PENDING_FOLLOW_UP_RESPONSES, FollowUpResponse
from src.models.targets import TARGET_QUOTA_FIELDS
from src.repositories.events_repository import EventsRepository
from src.repositories.managers_repository import ManagersRepository
from src.repositories.targets_repository import TargetsRepository
from src.schemas.reports import (
    CallOutcomeCounts,
    CallOutcomeShares,
    CallStatsResponse,
    DailyAnalysisResponse,
    DailyResumeEfficiencyResponse,
    FollowUpBreakdown,
    JdStatsResponse,
    MasterSheetResponse,
    ReportWindowFilters,
    ResumeAnalysisResponse,
    ResumeBreakdownResponse,
    ResumeBreakdownRow,
    ResumeCategoryCounts,
)
from src.services.report_window import ReportWindow, require_manager
from src.shared.time import enumerate_days, enumerate_months, month_label

DAILY_ANALYSIS_LAYOUT = ReportLayout(
    quotas=(("planned_calls", "calls"), ("planned_jds", "jds")),
    achieved=CALL_OUTCOME_FIELDS + ("jd_sent",),
    derived=(("achieved_calls", CALL_OUTCOME_FIELDS),),
    ratios=(
        Ratio("achievement_percent", achieved="achieved_calls", quota="planned_calls"),
        Ratio("jd_achievement_percent", achieved="jd_sent", quota="planned_jds"),
    ),
)
MASTER_SHEET_LAYOUT = ReportLayout(quotas=tuple((field, field) for field in TARGET_QUOTA_FIELDS))
DAILY_RESUME_LAYOUT = ReportLayout(
    quotas=(("resume_target", "resume_target"),),
    achieved=("total_resumes", "resumes_received"),
    ratios=(Ratio("efficiency", achieved="resumes_received", quota="resume_target"),),
)
RESUME_GRANULARITIES = ("daily", "monthly")


class AnalysisService:
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

    def get_daily_analysis(self, filters: ReportWindowFilters) -> DailyAnalysisResponse:
        manager = require_manager(self.managers_repository, filters.manager_id)
        window = self.window.resolve(filters.month, filters.start_date, filters.end_date)

        targets = self.targets_repository.list_targets([manager.id], window)
        calls = self.events_repository.list_call_events([manager.id], window)
        jds = self.events_repository.list_jd_sent_events([manager.id], window)

        achievements = combine(count_call_outcomes(calls), count_jd_sent(jds))
        days = merge_days(
            enumerate_days(window.start_date, window.end_date),
            targets,
            achievements,
            DAILY_ANALYSIS_LAYOUT,
        )
        return DailyAnalysisResponse(
            manager_id=manager.id,
            month=month_label(window.start_date),
            start_date=window.start_date,
            end_date=window.end_date,
            days=days,
            totals=sum_period(days, DAILY_ANALYSIS_LAYOUT),
        )

    def get_call_stats(self, filters: ReportWindowFilters) -> CallStatsResponse:
        manager = require_manager(self.managers_repository, filters.manager_id)
        window = self.window.resolve(filters.month, filters.start_date, filters.end_date)

        targets = self.targets_repository.list_targets([manager.id], window)
        calls = self.events_repository.list_call_events([manager.id], window)

        outcome_counts = Counter(event.outcome.name.lower() for event in calls if event.outcome is not None)
        total_calls = len(calls)
        achieved_calls = sum(outcome_counts.values())
        target_calls = sum(target.calls for target in targets)
        return CallStatsResponse(
            manager_id=manager.id,
            month=month_label(window.start_date),
            start_date=window.start_date,
            end_date=window.end_date,
            total_calls=total_calls,
            target_calls=target_calls,
            achieved_calls=achieved_calls,
            remaining_calls=remaining(target_calls, achieved_calls),
            achievement_percent=percentage(achieved_calls, target_calls),
            counts=CallOutcomeCounts(**{field: outcome_counts[field] for field in CALL_OUTCOME_FIELDS}),
            shares=CallOutcomeShares(
                **{field: percentage(outcome_counts[field], total_calls) for field in CALL_OUTCOME_FIELDS}
            ),
        )

    def get_jd_stats(self, filters: ReportWindowFilters) -> JdStatsResponse:
        manager = require_manager(self.managers_repository, filters.manager_id)
        window = self.window.resolve(filters.month, filters.start_date, filters.end_date)

        targets = self.targets_repository.list_targets([manager.id], window)
        sent_by_manager = len(self.events_repository.list_jd_sent_events([manager.id], window))
        sent_by_all = len(self.events_repository.list_jd_sent_events(None, window))
        jd_target = sum(target.jds for target in targets)
        return JdStatsResponse(
            manager_id=manager.id,
            month=month_label(window.start_date),
            start_date=window.start_date,
            end_date=window.end_date,
            jd_target=jd_target,
            jd_sent_by_manager=sent_by_manager,
            jd_sent_by_all_managers=sent_by_all,
            remaining_jds=remaining(jd_target, sent_by_manager),
            achievement_percent=percentage(sent_by_manager, jd_target),
        )

    def get_resume_analysis(self, filters: ReportWindowFilters) -> ResumeAnalysisResponse:
        manager = require_manager(self.managers_repository, filters.manager_id)
        window = self.window.resolve(filters.month, filters.start_date, filters.end_date)

        # Follow-ups and resumes are owned by name on the sheet, not by manager id.
        follow_ups = self.events_repository.list_follow_up_events(manager.name, window)
        resumes = self.events_repository.list_resume_events(None, window, follow_up_by=manager.name)
        targets = self.targets_repository.list_targets([manager.id], window)

        breakdown: Dict[str, int] = {response.name.lower(): 0 for response in PENDING_FOLLOW_UP_RESPONSES}
        for event in follow_ups:
            if event.follow_up_response in PENDING_FOLLOW_UP_RESPONSES:
                breakdown[event.follow_up_response.name.lower()] += 1
        achieved_follow_ups = sum(breakdown.values())
        achieved_resumes = sum(
            event.count
            for event in resumes
            if event.follow_up_response is FollowUpResponse.RESUMES_RECEIVED
        )
        follow_up_target = sum(target.follow_ups for target in targets)
        resume_target = sum(target.resume_target for target in targets)
        return ResumeAnalysisResponse(
            manager_id=manager.id,
            follow_up_by=manager.name,
            start_date=window.start_date,
            end_date=window.end_date,
            total_follow_up_target=follow_up_target,
            achieved_follow_ups=achieved_follow_ups,
            follow_up_efficiency=percentage(achieved_follow_ups, follow_up_target),
            total_resume_target=resume_target,
            achieved_resumes=achieved_resumes,
            resume_efficiency=percentage(achieved_resumes, resume_target),
            breakdown=FollowUpBreakdown(**breakdown),
        )

    def get_daily_resume_efficiency(self, filters: ReportWindowFilters) -> DailyResumeEfficiencyResponse:
        manager = require_manager(self.managers_repository, filters.manager_id)
        window = self.window.resolve(filters.month, filters.start_date, filters.end_date)

        targets = self.targets_repository.list_targets([manager.id], window)
        resumes = self.events_repository.list_resume_events([manager.id], window)
        days = merge_days(
            enumerate_days(window.start_date, window.end_date),
            targets,
            sum_resumes(resumes),
            DAILY_RESUME_LAYOUT,
        )
        return DailyResumeEfficiencyResponse(
            manager_id=manager.id,
            start_date=window.start_date,
            end_date=window.end_date,
            days=days,
            totals=sum_period(days, DAILY_RESUME_LAYOUT),
        )

    def get_resume_breakdown(self, filters: ReportWindowFilters, granularity: str) -> ResumeBreakdownResponse:
        if granularity not in RESUME_GRANULARITIES:
            raise BadRequestError("period must be daily or monthly")
        manager = require_manager(self.managers_repository, filters.manager_id)
        window = self.window.resolve(filters.month, filters.start_date, filters.end_date)
        resumes = self.events_repository.list_resume_events([manager.id], window)

        if granularity == "daily":
            periods = [day.iso for day in enumerate_days(window.start_date, window.end_date)]
        else:
            periods = enumerate_months(window.start_date, window.end_date)
        categories: Dict[str, Counter] = {period: Counter() for period in periods}
        totals_by_period: Dict[str, int] = {period: 0 for period in periods}
        owners: Dict[str, str] = {}
        for event in resumes:
            period = event.event_date.isoformat()
            if granularity == "monthly":
                period = period[:7]
            if period not in categories:
                continue
            totals_by_period[period] += event.count
            if event.follow_up_response is not None:
                categories[period][event.follow_up_response.name.lower()] += event.count
            if event.follow_up_by:
                owners[period] = event.follow_up_by

        rows: List[ResumeBreakdownRow] = [
            ResumeBreakdownRow(
                period=period,
                follow_up_by=owners.get(period),
                total_resumes=totals_by_period[period],
                categories=ResumeCategoryCounts(**categories[period]),
            )
            for period in periods
        ]
        overall = sum(categories.values(), Counter())
        return ResumeBreakdownResponse(
            manager_id=manager.id,
            granularity=granularity,
            start_date=window.start_date,
            end_date=window.end_date,
            rows=rows,
            total_resumes=sum(totals_by_period.values()),
            totals=ResumeCategoryCounts(**overall),
        )

    def get_master_sheet_metrics(self, filters: ReportWindowFilters) -> MasterSheetResponse:
        manager = require_manager(self.managers_repository, filters.manager_id)
        window = self.window.resolve(filters.month, filters.start_date, filters.end_date)

        targets = self.targets_repository.list_targets([manager.id], window)
        calls = self.events_repository.list_call_events([manager.id], window)
        resumes = self.events_repository.list_resume_events([manager.id], window)

        days = merge_days(
            enumerate_days(window.start_date, window.end_date),
            targets,
            {},
            MASTER_SHEET_LAYOUT,
        )
        return MasterSheetResponse(
            manager_id=manager.id,
            start_date=window.start_date,
            end_date=window.end_date,
            jd_sent_count=sum(1 for event in calls if event.is_send_jd),
            call_response_count=sum(1 for event in calls if event.has_response),
            resume_received_sum=sum(
                event.count
                for event in resumes
                if event.follow_up_response is FollowUpResponse.RESUMES_RECEIVED
            ),
            days=days,
            totals=sum_period(days, MASTER_SHEET_LAYOUT),
        )
