from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import List, Optional

from pydantic import ConfigDict, Field

from src.shared.base import BaseSchema, FrozenSchema


class LeaderboardFilters(BaseSchema):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    manager_ids: Optional[List[int]] = None
    month: Optional[str] = Field(default=None, pattern=r"^\d{4}-\d{2}$")
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class LeaderboardEntry(FrozenSchema):
    manager_id: int
    name: str
    allocated: int
    achieved: int
    target: int
    efficiency: Decimal
    rank: int = 0


class LeaderboardResponse(BaseSchema):
    start_date: date
    end_date: date
    rankings: List[LeaderboardEntry]
