from __future__ import annotations

from decimal import Decimal
from typing import Dict, Iterable, Union

from src.analytics.day_merger import ReportLayout, compute_percentages
from src.schemas.reports import DayReport, PeriodTotals

Number = Union[int, Decimal]


def sum_period(day_reports: Iterable[DayReport], layout: ReportLayout) -> PeriodTotals:
    """Field-by-field sums; percentages come from the summed pairs, never averaged."""
    values: Dict[str, Number] = {field_name: 0 for field_name in layout.fields}
    for report in day_reports:
        for key, value in report.values.items():
            values[key] = values.get(key, 0) + value
    return PeriodTotals(values=values, percentages=compute_percentages(values, layout.ratios))
