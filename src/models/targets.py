from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict, Field

TARGET_QUOTA_FIELDS = (
    "jds",
    "calls",
    "follow_ups",
    "resume_target",
    "college_target",
    "interviews_target",
    "resumes_received_target",
)
BD_TARGET_QUOTA_FIELDS = ("interns_allocated", "interns_active", "accounts")


class TargetRecord(BaseModel):
    """One row of ``my_targets``; unique per (manager, target_date)."""

    model_config = ConfigDict(populate_by_name=True)

    manager_id: int = Field(alias="team_manager_id")
    target_date: date
    jds: int = 0
    calls: int = 0
    follow_ups: int = 0
    resume_target: int = 0
    college_target: int = 0
    interviews_target: int = 0
    resumes_received_target: int = 0


class BdTargetRecord(BaseModel):
    """One row of ``bd_targets``; unique per (manager, target_date)."""

    model_config = ConfigDict(populate_by_name=True)

    manager_id: int = Field(alias="team_manager_id")
    target_date: date
    interns_allocated: int = 0
    interns_active: int = 0
    accounts: int = 0
