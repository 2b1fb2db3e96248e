from __future__ import annotations

from datetime import date
from decimal import Decimal

from src.analytics.achievements import count_call_outcomes
from src.analytics.day_merger import Ratio, ReportLayout, compute_percentages, merge_days
from src.analytics.metrics import percentage
from src.analytics.totals import sum_period
from src.models.events import CallEvent, CallOutcome
from src.models.targets import TargetRecord
from src.services.analysis_service import DAILY_ANALYSIS_LAYOUT
from src.shared.time import enumerate_days

CALLS_LAYOUT = ReportLayout(
    quotas=(("planned_calls", "calls"),),
    achieved=("connected", "busy"),
    derived=(("achieved_calls", ("connected", "busy")),),
    ratios=(Ratio("achievement_percent", achieved="achieved_calls", quota="planned_calls"),),
)


def _calls(day: date, outcome: CallOutcome, times: int):
    return [CallEvent(manager_id=1, event_date=day, outcome=outcome, raw_response=outcome.value)] * times


def _scenario():
    days = enumerate_days(date(2025, 3, 1), date(2025, 3, 3))
    targets = [TargetRecord(manager_id=1, target_date=day.date, calls=10) for day in days]
    events = (
        _calls(date(2025, 3, 1), CallOutcome.CONNECTED, 5)
        + _calls(date(2025, 3, 3), CallOutcome.CONNECTED, 3)
        + _calls(date(2025, 3, 3), CallOutcome.BUSY, 2)
    )
    return days, targets, count_call_outcomes(events)


def test_three_day_call_scenario():
    days, targets, achievements = _scenario()
    reports = merge_days(days, targets, achievements, CALLS_LAYOUT)

    assert [report.values["achieved_calls"] for report in reports] == [5, 0, 5]
    assert [report.percentages["achievement_percent"] for report in reports] == [
        Decimal("50.00"),
        Decimal("0.00"),
        Decimal("50.00"),
    ]

    totals = sum_period(reports, CALLS_LAYOUT)
    assert totals.values["achieved_calls"] == 10
    assert totals.values["planned_calls"] == 30
    assert totals.percentages["achievement_percent"] == Decimal("33.33")


def test_merge_is_pure():
    days, targets, achievements = _scenario()
    first = merge_days(days, targets, achievements, CALLS_LAYOUT)
    second = merge_days(days, targets, achievements, CALLS_LAYOUT)
    assert first == second
    assert sum_period(first, CALLS_LAYOUT) == sum_period(second, CALLS_LAYOUT)


def test_missing_target_and_events_zero_fill_every_day():
    days = enumerate_days(date(2025, 2, 1), date(2025, 2, 28))
    reports = merge_days(days, [], {}, DAILY_ANALYSIS_LAYOUT)

    assert len(reports) == 28
    for report in reports:
        assert set(report.values) == set(DAILY_ANALYSIS_LAYOUT.fields)
        assert all(value == 0 for value in report.values.values())
        assert report.percentages == {
            "achievement_percent": Decimal("0.00"),
            "jd_achievement_percent": Decimal("0.00"),
        }


def test_percentage_is_zero_without_quota_even_when_achieved():
    assert percentage(7, 0) == Decimal("0.00")
    assert percentage(7, -3) == Decimal("0.00")
    assert compute_percentages({"done": 4, "quota": 0}, (Ratio("pct", "done", "quota"),)) == {
        "pct": Decimal("0.00")
    }


def test_percentage_rounds_half_up_and_can_exceed_hundred():
    assert percentage(1, 8) == Decimal("12.50")
    assert percentage(2, 3) == Decimal("66.67")
    assert percentage(15, 10) == Decimal("150.00")


def test_later_target_row_wins_for_repeated_date():
    days = enumerate_days(date(2025, 3, 1), date(2025, 3, 1))
    targets = [
        TargetRecord(manager_id=1, target_date=date(2025, 3, 1), calls=4),
        TargetRecord(manager_id=1, target_date=date(2025, 3, 1), calls=8),
    ]
    reports = merge_days(days, targets, {}, CALLS_LAYOUT)
    assert reports[0].values["planned_calls"] == 8


def test_day_report_json_is_flat_camel_case():
    days, targets, achievements = _scenario()
    report = merge_days(days, targets, achievements, CALLS_LAYOUT)[0]
    payload = report.model_dump(mode="json")
    assert payload["date"] == "2025-03-01"
    assert payload["day"] == "Saturday"
    assert payload["plannedCalls"] == 10
    assert payload["achievedCalls"] == 5
    assert Decimal(payload["achievementPercent"]) == Decimal("50.00")
