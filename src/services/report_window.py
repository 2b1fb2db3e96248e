from __future__ import annotations

from datetime import date, tzinfo
from typing import Optional

from src.core.errors import BadRequestError, NotFoundError
from src.models.managers import ManagerRecord
from src.repositories.managers_repository import ManagersRepository
from src.shared.time import Clock, DateRange, local_today, resolve_range


class ReportWindow:
    """Resolves request windows against an explicit zone and clock."""

    def __init__(self, tz: tzinfo, clock: Optional[Clock] = None) -> None:
        self.tz = tz
        self.clock = clock

    def today(self) -> date:
        return local_today(self.tz, self.clock)

    def resolve(
        self,
        month: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> DateRange:
        return resolve_range(month, start_date, end_date, tz=self.tz, today=self.today())


def require_manager_id(manager_id: Optional[int]) -> int:
    if manager_id is None:
        raise BadRequestError("teamManagerId is required")
    return manager_id


def require_manager(repository: ManagersRepository, manager_id: Optional[int]) -> ManagerRecord:
    manager = repository.get_manager(require_manager_id(manager_id))
    if manager is None:
        raise NotFoundError(f"Team manager {manager_id} not found")
    return manager
