from __future__ import annotations

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel


def _normalize(value: Optional[str]) -> str:
    return (value or "").strip().lower()


class CallOutcome(str, Enum):
    CONNECTED = "connected"
    NOT_ANSWERED = "not answered"
    BUSY = "busy"
    SWITCH_OFF = "switch off"
    INVALID = "invalid"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["CallOutcome"]:
        try:
            return cls(_normalize(value))
        except ValueError:
            return None


class FollowUpResponse(str, Enum):
    RESUMES_RECEIVED = "resumes received"
    SENDING_IN_1_2_DAYS = "sending in 1-2 days"
    DELAYED = "delayed"
    NO_RESPONSE = "no response"
    UNPROFESSIONAL = "unprofessional"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["FollowUpResponse"]:
        normalized = _normalize(value)
        # Older sheets stored the misspelt label.
        if normalized == "resumes recieved":
            return cls.RESUMES_RECEIVED
        try:
            return cls(normalized)
        except ValueError:
            return None


PENDING_FOLLOW_UP_RESPONSES = (
    FollowUpResponse.SENDING_IN_1_2_DAYS,
    FollowUpResponse.DELAYED,
    FollowUpResponse.NO_RESPONSE,
    FollowUpResponse.UNPROFESSIONAL,
)


class ActiveStatus(str, Enum):
    ACTIVE = "active"
    NOT_ACTIVE = "not active"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["ActiveStatus"]:
        try:
            return cls(_normalize(value))
        except ValueError:
            return None


class CallEvent(BaseModel):
    manager_id: int
    event_date: date
    outcome: Optional[CallOutcome] = None
    raw_response: Optional[str] = None
    detailed_response: Optional[str] = None

    @property
    def has_response(self) -> bool:
        return bool((self.raw_response or "").strip())

    @property
    def is_send_jd(self) -> bool:
        return _normalize(self.detailed_response) == "send jd"


class JdSentEvent(BaseModel):
    manager_id: Optional[int] = None
    event_date: date


class ResumeEvent(BaseModel):
    manager_id: Optional[int] = None
    event_date: date
    count: int = 0
    follow_up_by: Optional[str] = None
    follow_up_response: Optional[FollowUpResponse] = None


class FollowUpEvent(BaseModel):
    manager_id: Optional[int] = None
    event_date: date
    follow_up_by: Optional[str] = None
    follow_up_response: Optional[FollowUpResponse] = None


class PaidAccountEvent(BaseModel):
    manager_id: int
    event_date: date
    user_id: str


class InternRecord(BaseModel):
    manager_id: int
    event_date: date
    active_status: Optional[ActiveStatus] = None
    business_task_amount: Decimal = Decimal("0")

    @property
    def is_active(self) -> bool:
        return self.active_status is ActiveStatus.ACTIVE
