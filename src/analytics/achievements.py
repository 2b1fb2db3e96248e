from __future__ import annotations

from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, Mapping, Set, Union

from src.models.events import (
    CallEvent,
    CallOutcome,
    FollowUpResponse,
    InternRecord,
    JdSentEvent,
    PaidAccountEvent,
    ResumeEvent,
)

Number = Union[int, Decimal]
DailyCounts = Dict[date, Dict[str, Number]]

CALL_OUTCOME_FIELDS = tuple(outcome.name.lower() for outcome in CallOutcome)
RESUME_RESPONSE_FIELDS = tuple(response.name.lower() for response in FollowUpResponse)


def _bucket() -> DailyCounts:
    return defaultdict(lambda: defaultdict(int))


def count_call_outcomes(events: Iterable[CallEvent]) -> DailyCounts:
    counts = _bucket()
    for event in events:
        day = counts[event.event_date]
        day["total_calls"] += 1
        if event.outcome is not None:
            day[event.outcome.name.lower()] += 1
    return counts


def count_jd_sent(events: Iterable[JdSentEvent]) -> DailyCounts:
    counts = _bucket()
    for event in events:
        counts[event.event_date]["jd_sent"] += 1
    return counts


def sum_resumes(events: Iterable[ResumeEvent]) -> DailyCounts:
    """Sum of resume ``count`` per day and per follow-up category."""
    counts = _bucket()
    for event in events:
        day = counts[event.event_date]
        day["total_resumes"] += event.count
        if event.follow_up_response is not None:
            day[event.follow_up_response.name.lower()] += event.count
    return counts


def count_paid_accounts(events: Iterable[PaidAccountEvent]) -> DailyCounts:
    users_by_day: Dict[date, Set[str]] = defaultdict(set)
    for event in events:
        users_by_day[event.event_date].add(event.user_id)
    counts = _bucket()
    for day, users in users_by_day.items():
        counts[day]["accounts"] = len(users)
    return counts


def summarize_interns(records: Iterable[InternRecord], active_only_amounts: bool = False) -> DailyCounts:
    counts = _bucket()
    for record in records:
        day = counts[record.event_date]
        day["interns_allocated"] += 1
        if record.is_active:
            day["interns_active"] += 1
        if record.is_active or not active_only_amounts:
            day["business_task_amount"] += record.business_task_amount
    return counts


def combine(*sources: Mapping[date, Mapping[str, Number]]) -> DailyCounts:
    combined = _bucket()
    for source in sources:
        for day, values in source.items():
            for key, value in values.items():
                combined[day][key] += value
    return combined


def period_total(counts: Mapping[date, Mapping[str, Number]], key: str) -> Number:
    return sum((values.get(key, 0) for values in counts.values()), 0)
