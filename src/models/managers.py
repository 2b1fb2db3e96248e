from __future__ import annotations

from typing import Dict, Optional

from pydantic import BaseModel


class ManagerRecord(BaseModel):
    id: int
    name: str
    email: Optional[str] = None


class SlabConfigRecord(BaseModel):
    manager_id: int
    incentive_amounts: Dict[str, Optional[int]] = {}
    deduction_amounts: Dict[str, Optional[int]] = {}
