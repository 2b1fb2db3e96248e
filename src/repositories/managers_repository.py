from __future__ import annotations

from typing import List, Optional, Sequence

from src.core.config import get_settings
from src.core.supabase import SupabaseClient
from src.models.managers import ManagerRecord
from src.repositories.filters import manager_filter


class ManagersRepository:
    def __init__(self) -> None:
        self.client = SupabaseClient()

    def get_manager(self, manager_id: int) -> Optional[ManagerRecord]:
        rows = self.client.select(
            table="team_managers",
            select="id,name,email",
            filters=[("id", f"eq.{manager_id}")],
            limit=1,
        )
        return ManagerRecord.model_validate(rows[0]) if rows else None

    def list_managers(self, manager_ids: Optional[Sequence[int]] = None) -> List[ManagerRecord]:
        if manager_ids is not None and not manager_ids:
            return []
        rows = self.client.select_all(
            table="team_managers",
            select="id,name,email",
            filters=manager_filter(manager_ids, column="id"),
            page_size=get_settings().query_page_size,
            order="name.asc,id.asc",
        )
        return [ManagerRecord.model_validate(row) for row in rows]
