from __future__ import annotations

from typing import Dict, Optional

from src.core.supabase import SupabaseClient
from src.models.managers import SlabConfigRecord


class SlabsRepository:
    def __init__(self) -> None:
        self.client = SupabaseClient()

    def get_slab_config(self, manager_id: int) -> Optional[SlabConfigRecord]:
        rows = self.client.select(
            table="manager_ranges",
            select="team_manager_id,incentive_amounts,deduction_amounts",
            filters=[("team_manager_id", f"eq.{manager_id}")],
            limit=1,
        )
        if not rows:
            return None
        return self._to_record(rows[0])

    def save_slab_config(
        self,
        manager_id: int,
        incentive_amounts: Dict[str, int],
        deduction_amounts: Dict[str, int],
    ) -> SlabConfigRecord:
        rows = self.client.upsert(
            table="manager_ranges",
            payload=[
                {
                    "team_manager_id": manager_id,
                    "incentive_amounts": incentive_amounts,
                    "deduction_amounts": deduction_amounts,
                }
            ],
            on_conflict="team_manager_id",
        )
        if not rows:
            return SlabConfigRecord(
                manager_id=manager_id,
                incentive_amounts=incentive_amounts,
                deduction_amounts=deduction_amounts,
            )
        return self._to_record(rows[0])

    @staticmethod
    def _to_record(row: Dict) -> SlabConfigRecord:
        return SlabConfigRecord(
            manager_id=row["team_manager_id"],
            incentive_amounts=row.get("incentive_amounts") or {},
            deduction_amounts=row.get("deduction_amounts") or {},
        )
