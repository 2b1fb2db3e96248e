from __future__ import annotations

import logging
from datetime import tzinfo
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional, Sequence

from src.core.config import get_report_timezone, get_settings
from src.core.supabase import SupabaseClient
from src.models.events import (
    ActiveStatus,
    CallEvent,
    CallOutcome,
    FollowUpEvent,
    FollowUpResponse,
    InternRecord,
    JdSentEvent,
    PaidAccountEvent,
    ResumeEvent,
)
from src.repositories.filters import Filters, date_window, manager_filter, timestamp_window
from src.shared.time import DateRange, to_local_date

logger = logging.getLogger(__name__)


class EventsRepository:
    """Append-only achievement facts, normalised to local calendar dates."""

    def __init__(self, tz: Optional[tzinfo] = None) -> None:
        self.client = SupabaseClient()
        self.tz = tz or get_report_timezone()
        self.page_size = get_settings().query_page_size

    def list_call_events(self, manager_ids: Optional[Sequence[int]], window: DateRange) -> List[CallEvent]:
        rows = self._select(
            table="co_sheets",
            select="team_manager_id,date_of_connect,call_response,detailed_response",
            filters=manager_filter(manager_ids) + timestamp_window("date_of_connect", window),
            order="date_of_connect.asc,id.asc",
            manager_ids=manager_ids,
        )
        events: List[CallEvent] = []
        for row in rows:
            event_date = to_local_date(row.get("date_of_connect"), self.tz)
            if event_date is None:
                continue
            events.append(
                CallEvent(
                    manager_id=row["team_manager_id"],
                    event_date=event_date,
                    outcome=CallOutcome.parse(row.get("call_response")),
                    raw_response=row.get("call_response"),
                    detailed_response=row.get("detailed_response"),
                )
            )
        return events

    def list_jd_sent_events(self, manager_ids: Optional[Sequence[int]], window: DateRange) -> List[JdSentEvent]:
        rows = self._select(
            table="co_sheets",
            select="team_manager_id,jd_sent_at",
            filters=manager_filter(manager_ids) + timestamp_window("jd_sent_at", window),
            order="jd_sent_at.asc,id.asc",
            manager_ids=manager_ids,
        )
        events: List[JdSentEvent] = []
        for row in rows:
            event_date = to_local_date(row.get("jd_sent_at"), self.tz)
            if event_date is not None:
                events.append(JdSentEvent(manager_id=row.get("team_manager_id"), event_date=event_date))
        return events

    def list_resume_events(
        self,
        manager_ids: Optional[Sequence[int]],
        window: DateRange,
        follow_up_by: Optional[str] = None,
    ) -> List[ResumeEvent]:
        filters = manager_filter(manager_ids) + timestamp_window("resume_date", window)
        if follow_up_by:
            filters.append(("follow_up_by", f"eq.{follow_up_by}"))
        rows = self._select(
            table="co_sheets",
            select="team_manager_id,resume_date,resume_count,follow_up_by,follow_up_response",
            filters=filters,
            order="resume_date.asc,id.asc",
            manager_ids=manager_ids,
        )
        events: List[ResumeEvent] = []
        for row in rows:
            event_date = to_local_date(row.get("resume_date"), self.tz)
            if event_date is None:
                continue
            events.append(
                ResumeEvent(
                    manager_id=row.get("team_manager_id"),
                    event_date=event_date,
                    count=int(row.get("resume_count") or 0),
                    follow_up_by=row.get("follow_up_by"),
                    follow_up_response=FollowUpResponse.parse(row.get("follow_up_response")),
                )
            )
        return events

    def list_follow_up_events(self, follow_up_by: str, window: DateRange) -> List[FollowUpEvent]:
        rows = self._select(
            table="co_sheets",
            select="team_manager_id,follow_up_date,follow_up_by,follow_up_response",
            filters=[("follow_up_by", f"eq.{follow_up_by}")] + timestamp_window("follow_up_date", window),
            order="follow_up_date.asc,id.asc",
        )
        events: List[FollowUpEvent] = []
        for row in rows:
            event_date = to_local_date(row.get("follow_up_date"), self.tz)
            if event_date is None:
                continue
            events.append(
                FollowUpEvent(
                    manager_id=row.get("team_manager_id"),
                    event_date=event_date,
                    follow_up_by=row.get("follow_up_by"),
                    follow_up_response=FollowUpResponse.parse(row.get("follow_up_response")),
                )
            )
        return events

    def list_paid_account_events(
        self, manager_ids: Optional[Sequence[int]], window: DateRange
    ) -> List[PaidAccountEvent]:
        rows = self._select(
            table="paid_accounts",
            select="team_manager_id,user_id,paid_at",
            filters=manager_filter(manager_ids) + timestamp_window("paid_at", window),
            order="paid_at.asc,id.asc",
            manager_ids=manager_ids,
        )
        events: List[PaidAccountEvent] = []
        for row in rows:
            event_date = to_local_date(row.get("paid_at"), self.tz)
            if event_date is None or row.get("user_id") is None:
                continue
            events.append(
                PaidAccountEvent(
                    manager_id=row["team_manager_id"],
                    event_date=event_date,
                    user_id=str(row["user_id"]),
                )
            )
        return events

    def list_intern_records(self, manager_ids: Optional[Sequence[int]], window: DateRange) -> List[InternRecord]:
        rows = self._select(
            table="bd_sheets",
            select="team_manager_id,start_date,active_status,business_task",
            filters=manager_filter(manager_ids) + date_window("start_date", window),
            order="start_date.asc,id.asc",
            manager_ids=manager_ids,
        )
        records: List[InternRecord] = []
        for row in rows:
            event_date = to_local_date(row.get("start_date"), self.tz)
            if event_date is None or row.get("team_manager_id") is None:
                continue
            records.append(
                InternRecord(
                    manager_id=row["team_manager_id"],
                    event_date=event_date,
                    active_status=ActiveStatus.parse(row.get("active_status")),
                    business_task_amount=self._to_decimal(row.get("business_task"), row),
                )
            )
        return records

    def _select(
        self,
        table: str,
        select: str,
        filters: Filters,
        order: str,
        manager_ids: Optional[Sequence[int]] = None,
    ) -> List[Dict[str, Any]]:
        if manager_ids is not None and not manager_ids:
            return []
        return self.client.select_all(
            table=table, select=select, filters=filters, order=order, page_size=self.page_size
        )

    @staticmethod
    def _to_decimal(value: Any, row: Dict[str, Any]) -> Decimal:
        if value is None or value == "":
            return Decimal("0")
        try:
            amount = Decimal(str(value))
        except InvalidOperation:
            amount = None
        if amount is None or not amount.is_finite():
            logger.warning("Unreadable business_task %r counted as 0 row=%s", value, row)
            return Decimal("0")
        return amount
