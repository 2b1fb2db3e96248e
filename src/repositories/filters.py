from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from src.shared.time import DateRange

Filters = List[Tuple[str, str]]


def manager_filter(manager_ids: Optional[Sequence[int]], column: str = "team_manager_id") -> Filters:
    if manager_ids is None:
        return []
    unique_ids = sorted({int(manager_id) for manager_id in manager_ids})
    if len(unique_ids) == 1:
        return [(column, f"eq.{unique_ids[0]}")]
    return [(column, f"in.({','.join(str(manager_id) for manager_id in unique_ids)})")]


def date_window(column: str, window: DateRange) -> Filters:
    return [
        (column, f"gte.{window.start_date.isoformat()}"),
        (column, f"lte.{window.end_date.isoformat()}"),
    ]


def timestamp_window(column: str, window: DateRange) -> Filters:
    return [
        (column, f"gte.{window.start.isoformat()}"),
        (column, f"lte.{window.end.isoformat()}"),
    ]
