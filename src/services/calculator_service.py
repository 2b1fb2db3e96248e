from __future__ import annotations

import logging
from typing import Optional

from src.analytics.slabs import DEDUCTION_RANGES, INCENTIVE_RANGES, merge_slab_amounts, resolve_slab
from src.core.errors import NotFoundError
from src.repositories.events_repository import EventsRepository
from src.repositories.managers_repository import ManagersRepository
from src.repositories.slabs_repository import SlabsRepository
from src.repositories.targets_repository import TargetsRepository
from src.schemas.calculator import (
    DeductionResponse,
    IncentiveResponse,
    SlabConfigResponse,
    SlabUpdateRequest,
)
from src.schemas.reports import ReportWindowFilters
from src.services.report_window import ReportWindow, require_manager

logger = logging.getLogger(__name__)


class CalculatorService:
    def __init__(
        self,
        slabs_repository: SlabsRepository,
        targets_repository: TargetsRepository,
        events_repository: EventsRepository,
        managers_repository: ManagersRepository,
        window: ReportWindow,
    ) -> None:
        self.slabs_repository = slabs_repository
        self.targets_repository = targets_repository
        self.events_repository = events_repository
        self.managers_repository = managers_repository
        self.window = window

    def calculate_incentive(self, filters: ReportWindowFilters) -> IncentiveResponse:
        manager = require_manager(self.managers_repository, filters.manager_id)
        window = self.window.resolve(filters.month, filters.start_date, filters.end_date)

        config = self.slabs_repository.get_slab_config(manager.id)
        if config is None or not config.incentive_amounts:
            raise NotFoundError("No incentive slabs found for this manager")

        interns = self.events_repository.list_intern_records([manager.id], window)
        active_interns = sum(1 for record in interns if record.is_active)
        slab = resolve_slab(active_interns, config.incentive_amounts, INCENTIVE_RANGES)
        return IncentiveResponse(
            manager_id=manager.id,
            start_date=window.start_date,
            end_date=window.end_date,
            active_interns=active_interns,
            slab=slab.range_label,
            per_intern_amount=slab.amount,
            total_incentive=active_interns * slab.amount,
        )

    def calculate_deduction(self, filters: ReportWindowFilters) -> DeductionResponse:
        manager = require_manager(self.managers_repository, filters.manager_id)
        window = self.window.resolve(filters.month, filters.start_date, filters.end_date)

        targets = self.targets_repository.list_bd_targets([manager.id], window)
        interns = self.events_repository.list_intern_records([manager.id], window)
        target_interns = sum(target.interns_active for target in targets)
        active_interns = sum(1 for record in interns if record.is_active)
        shortfall = max(target_interns - active_interns, 0)

        response = DeductionResponse(
            manager_id=manager.id,
            start_date=window.start_date,
            end_date=window.end_date,
            target_interns=target_interns,
            active_interns=active_interns,
            shortfall=shortfall,
        )
        if shortfall == 0:
            return response

        config = self.slabs_repository.get_slab_config(manager.id)
        if config is None or not config.deduction_amounts:
            raise NotFoundError("No deduction slabs found for this manager")
        slab = resolve_slab(shortfall, config.deduction_amounts, DEDUCTION_RANGES)
        return response.model_copy(
            update={
                "slab": slab.range_label,
                "per_intern_amount": slab.amount,
                "total_deduction": shortfall * slab.amount,
            }
        )

    def get_slabs(self, manager_id: Optional[int]) -> SlabConfigResponse:
        manager = require_manager(self.managers_repository, manager_id)
        config = self.slabs_repository.get_slab_config(manager.id)
        if config is None:
            return SlabConfigResponse(manager_id=manager.id, incentive_amounts={}, deduction_amounts={})
        return SlabConfigResponse(
            manager_id=manager.id,
            incentive_amounts=merge_slab_amounts(config.incentive_amounts, {}, INCENTIVE_RANGES),
            deduction_amounts=merge_slab_amounts(config.deduction_amounts, {}, DEDUCTION_RANGES),
        )

    def update_slabs(self, request: SlabUpdateRequest) -> SlabConfigResponse:
        manager = require_manager(self.managers_repository, request.manager_id)
        # Read, merge, write back: concurrent partial updates are last-write-wins.
        config = self.slabs_repository.get_slab_config(manager.id)
        stored_incentive = config.incentive_amounts if config is not None else {}
        stored_deduction = config.deduction_amounts if config is not None else {}

        incentive = merge_slab_amounts(stored_incentive, request.incentive_amounts or {}, INCENTIVE_RANGES)
        deduction = merge_slab_amounts(stored_deduction, request.deduction_amounts or {}, DEDUCTION_RANGES)
        saved = self.slabs_repository.save_slab_config(manager.id, incentive, deduction)
        logger.info("Saved slab amounts for manager %s", manager.id)
        return SlabConfigResponse(
            manager_id=saved.manager_id,
            incentive_amounts={label: amount for label, amount in saved.incentive_amounts.items() if amount is not None},
            deduction_amounts={label: amount for label, amount in saved.deduction_amounts.items() if amount is not None},
        )
