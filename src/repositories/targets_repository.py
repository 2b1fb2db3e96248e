from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from src.core.config import get_settings
from src.core.supabase import SupabaseClient
from src.models.targets import BD_TARGET_QUOTA_FIELDS, TARGET_QUOTA_FIELDS, BdTargetRecord, TargetRecord
from src.repositories.filters import date_window, manager_filter
from src.shared.time import DateRange

TARGET_CONFLICT_KEY = "team_manager_id,target_date"


class TargetsRepository:
    def __init__(self) -> None:
        self.client = SupabaseClient()
        self.page_size = get_settings().query_page_size

    def list_targets(self, manager_ids: Optional[Sequence[int]], window: DateRange) -> List[TargetRecord]:
        if manager_ids is not None and not manager_ids:
            return []
        rows = self.client.select_all(
            table="my_targets",
            select="team_manager_id,target_date," + ",".join(TARGET_QUOTA_FIELDS),
            filters=manager_filter(manager_ids) + date_window("target_date", window),
            page_size=self.page_size,
            order="target_date.asc,team_manager_id.asc",
        )
        return [TargetRecord.model_validate(row) for row in rows]

    def list_bd_targets(self, manager_ids: Optional[Sequence[int]], window: DateRange) -> List[BdTargetRecord]:
        if manager_ids is not None and not manager_ids:
            return []
        rows = self.client.select_all(
            table="bd_targets",
            select="team_manager_id,target_date," + ",".join(BD_TARGET_QUOTA_FIELDS),
            filters=manager_filter(manager_ids) + date_window("target_date", window),
            page_size=self.page_size,
            order="target_date.asc,team_manager_id.asc",
        )
        return [BdTargetRecord.model_validate(row) for row in rows]

    def upsert_bd_targets(
        self, manager_id: int, rows: Sequence[Mapping[str, Any]]
    ) -> List[BdTargetRecord]:
        """Write BD targets with one upsert per column set.

        Columns missing from an incoming row are not sent, so their stored value is
        kept on conflict and the column default applies on insert.
        """
        batches: Dict[Tuple[str, ...], List[Dict[str, Any]]] = defaultdict(list)
        for row in rows:
            target_date: date = row["date"]
            payload: Dict[str, Any] = {
                "team_manager_id": manager_id,
                "target_date": target_date.isoformat(),
            }
            for column in BD_TARGET_QUOTA_FIELDS:
                if row.get(column) is not None:
                    payload[column] = row[column]
            batches[tuple(sorted(payload))].append(payload)

        written: List[BdTargetRecord] = []
        for payload in batches.values():
            inserted = self.client.upsert(table="bd_targets", payload=payload, on_conflict=TARGET_CONFLICT_KEY)
            written.extend(BdTargetRecord.model_validate(row) for row in inserted)
        return written
