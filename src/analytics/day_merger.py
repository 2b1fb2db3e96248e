from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Tuple, Union

from src.analytics.metrics import percentage
from src.schemas.reports import DayReport
from src.shared.time import CalendarDay

Number = Union[int, Decimal]


@dataclass(frozen=True)
class Ratio:
    name: str
    achieved: str
    quota: str


@dataclass(frozen=True)
class ReportLayout:
    """Which target columns, achieved counts and ratios a report carries."""

    quotas: Tuple[Tuple[str, str], ...] = ()
    achieved: Tuple[str, ...] = ()
    derived: Tuple[Tuple[str, Tuple[str, ...]], ...] = ()
    ratios: Tuple[Ratio, ...] = ()

    @property
    def fields(self) -> Tuple[str, ...]:
        return (
            tuple(name for name, _ in self.quotas)
            + self.achieved
            + tuple(name for name, _ in self.derived)
        )


def index_targets_by_date(targets: Iterable[Any]) -> Dict[date, Any]:
    # Targets are unique per (manager, date); a repeated date keeps the later row.
    return {target.target_date: target for target in targets}


def compute_percentages(values: Mapping[str, Number], ratios: Sequence[Ratio]) -> Dict[str, Decimal]:
    return {
        ratio.name: percentage(values.get(ratio.achieved, 0), values.get(ratio.quota, 0))
        for ratio in ratios
    }


def merge_days(
    days: Sequence[CalendarDay],
    targets: Iterable[Any],
    achievements: Mapping[date, Mapping[str, Number]],
    layout: ReportLayout,
) -> List[DayReport]:
    targets_by_date = index_targets_by_date(targets)
    reports: List[DayReport] = []
    for day in days:
        target = targets_by_date.get(day.date)
        achieved = achievements.get(day.date, {})
        values: Dict[str, Number] = {}
        for field_name, attribute in layout.quotas:
            values[field_name] = (getattr(target, attribute, 0) or 0) if target is not None else 0
        for field_name in layout.achieved:
            values[field_name] = achieved.get(field_name, 0)
        for field_name, parts in layout.derived:
            values[field_name] = sum((values[part] for part in parts), 0)
        reports.append(
            DayReport(
                date=day.date,
                day=day.weekday,
                values=values,
                percentages=compute_percentages(values, layout.ratios),
            )
        )
    return reports
