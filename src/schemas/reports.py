from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional, Union

from pydantic import ConfigDict, Field, model_serializer
from pydantic.alias_generators import to_camel

from src.shared.base import BaseSchema, FrozenSchema

Number = Union[int, Decimal]


def _flatten(base: Dict[str, Any], values: Dict[str, Number], percentages: Dict[str, Decimal]) -> Dict[str, Any]:
    flat = dict(base)
    for key, value in values.items():
        flat[to_camel(key)] = value
    for key, value in percentages.items():
        flat[to_camel(key)] = value
    return flat


class DayReport(FrozenSchema):
    """Merged view of one calendar day; JSON output flattens both maps."""

    date: date
    day: str
    values: Dict[str, Number]
    percentages: Dict[str, Decimal] = {}

    @model_serializer(when_used="json")
    def _serialize_flat(self) -> Dict[str, Any]:
        return _flatten({"date": self.date.isoformat(), "day": self.day}, self.values, self.percentages)


class PeriodTotals(FrozenSchema):
    values: Dict[str, Number]
    percentages: Dict[str, Decimal] = {}

    @model_serializer(when_used="json")
    def _serialize_flat(self) -> Dict[str, Any]:
        return _flatten({}, self.values, self.percentages)


class ReportWindowFilters(BaseSchema):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    manager_id: Optional[int] = Field(default=None, ge=1)
    month: Optional[str] = Field(default=None, pattern=r"^\d{4}-\d{2}$")
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class DailyAnalysisResponse(BaseSchema):
    manager_id: int
    month: str
    start_date: date
    end_date: date
    days: List[DayReport]
    totals: PeriodTotals


class CallOutcomeCounts(BaseSchema):
    connected: int = 0
    not_answered: int = 0
    busy: int = 0
    switch_off: int = 0
    invalid: int = 0


class CallOutcomeShares(BaseSchema):
    connected: Decimal = Decimal("0")
    not_answered: Decimal = Decimal("0")
    busy: Decimal = Decimal("0")
    switch_off: Decimal = Decimal("0")
    invalid: Decimal = Decimal("0")


class CallStatsResponse(BaseSchema):
    manager_id: int
    month: str
    start_date: date
    end_date: date
    total_calls: int
    target_calls: int
    achieved_calls: int
    remaining_calls: int
    achievement_percent: Decimal
    counts: CallOutcomeCounts
    shares: CallOutcomeShares


class JdStatsResponse(BaseSchema):
    manager_id: int
    month: str
    start_date: date
    end_date: date
    jd_target: int
    jd_sent_by_manager: int
    jd_sent_by_all_managers: int
    remaining_jds: int
    achievement_percent: Decimal


class FollowUpBreakdown(BaseSchema):
    sending_in_1_2_days: int = 0
    delayed: int = 0
    no_response: int = 0
    unprofessional: int = 0


class ResumeAnalysisResponse(BaseSchema):
    manager_id: int
    follow_up_by: str
    start_date: date
    end_date: date
    total_follow_up_target: int
    achieved_follow_ups: int
    follow_up_efficiency: Decimal
    total_resume_target: int
    achieved_resumes: int
    resume_efficiency: Decimal
    breakdown: FollowUpBreakdown


class DailyResumeEfficiencyResponse(BaseSchema):
    manager_id: int
    start_date: date
    end_date: date
    days: List[DayReport]
    totals: PeriodTotals


class ResumeCategoryCounts(BaseSchema):
    resumes_received: int = 0
    sending_in_1_2_days: int = 0
    delayed: int = 0
    no_response: int = 0
    unprofessional: int = 0


class ResumeBreakdownRow(BaseSchema):
    period: str
    follow_up_by: Optional[str] = None
    total_resumes: int = 0
    categories: ResumeCategoryCounts


class ResumeBreakdownResponse(BaseSchema):
    manager_id: int
    granularity: str
    start_date: date
    end_date: date
    rows: List[ResumeBreakdownRow]
    total_resumes: int
    totals: ResumeCategoryCounts


class MasterSheetResponse(BaseSchema):
    manager_id: int
    start_date: date
    end_date: date
    jd_sent_count: int
    call_response_count: int
    resume_received_sum: int
    days: List[DayReport]
    totals: PeriodTotals


class BdTargetSheetResponse(BaseSchema):
    manager_id: int
    start_date: date
    end_date: date
    days: List[DayReport]
    totals: PeriodTotals


class BdTargetInput(BaseSchema):
    date: date
    interns_allocated: Optional[int] = Field(default=None, ge=0)
    interns_active: Optional[int] = Field(default=None, ge=0)
    accounts: Optional[int] = Field(default=None, ge=0)


class BdTargetUpsertRequest(BaseSchema):
    manager_id: Optional[int] = Field(default=None, ge=1)
    month: Optional[str] = Field(default=None, pattern=r"^\d{4}-\d{2}$")
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    targets: List[BdTargetInput] = []


class BdDashboardResponse(BaseSchema):
    manager_id: int
    month: str
    start_date: date
    end_date: date
    days: List[DayReport]
    totals: PeriodTotals
