from __future__ import annotations

from datetime import date
from typing import Generic, Optional, TypeVar

from src.shared.base import BaseSchema


T = TypeVar("T")


class Meta(BaseSchema):
    as_of_date: str
    source: str
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    timezone: Optional[str] = None
    calculation_version: str = "v1"


class ResponseEnvelope(BaseSchema, Generic[T]):
    success: bool = True
    data: T
    meta: Optional[Meta] = None


def build_meta(
    source: str,
    as_of: date,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    timezone: Optional[str] = None,
) -> Meta:
    return Meta(
        as_of_date=as_of.isoformat(),
        source=source,
        start_date=start_date,
        end_date=end_date,
        timezone=timezone,
    )
