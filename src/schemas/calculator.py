from __future__ import annotations

from datetime import date
from typing import Dict, Optional

from pydantic import Field

from src.shared.base import BaseSchema, FrozenSchema


class SlabResolution(FrozenSchema):
    range_label: str
    amount: int


class IncentiveResponse(BaseSchema):
    manager_id: int
    start_date: date
    end_date: date
    active_interns: int
    slab: str
    per_intern_amount: int
    total_incentive: int


class DeductionResponse(BaseSchema):
    manager_id: int
    start_date: date
    end_date: date
    target_interns: int
    active_interns: int
    shortfall: int
    slab: Optional[str] = None
    per_intern_amount: int = 0
    total_deduction: int = 0


class SlabConfigResponse(BaseSchema):
    manager_id: int
    incentive_amounts: Dict[str, int]
    deduction_amounts: Dict[str, int]


class SlabUpdateRequest(BaseSchema):
    manager_id: Optional[int] = Field(default=None, ge=1)
    incentive_amounts: Optional[Dict[str, Optional[int]]] = None
    deduction_amounts: Optional[Dict[str, Optional[int]]] = None
