from __future__ import annotations

from datetime import date

import pytest

from src.core.errors import BadRequestError, NoMatchingSlabError, NotFoundError, SlabNotConfiguredError
from src.models.events import ActiveStatus, InternRecord
from src.models.managers import SlabConfigRecord
from src.models.targets import BdTargetRecord
from src.schemas.calculator import SlabUpdateRequest
from src.schemas.reports import ReportWindowFilters

MARCH = ReportWindowFilters(manager_id=1, month="2025-03")


def _active_interns(repositories, count: int) -> None:
    repositories.events.interns.extend(
        [InternRecord(manager_id=1, event_date=date(2025, 3, 5), active_status=ActiveStatus.ACTIVE)] * count
    )


def _configure(repositories, incentive=None, deduction=None) -> None:
    repositories.slabs.configs[1] = SlabConfigRecord(
        manager_id=1, incentive_amounts=incentive or {}, deduction_amounts=deduction or {}
    )


def test_incentive_multiplies_count_by_slab_amount(calculator_service, repositories):
    _configure(repositories, incentive={"1-10": 100, "11-20": 200})
    _active_interns(repositories, 11)
    result = calculator_service.calculate_incentive(MARCH)
    assert result.active_interns == 11
    assert result.slab == "11-20"
    assert result.per_intern_amount == 200
    assert result.total_incentive == 2200


def test_incentive_without_active_interns_has_no_slab(calculator_service, repositories):
    _configure(repositories, incentive={"1-10": 100})
    with pytest.raises(NoMatchingSlabError):
        calculator_service.calculate_incentive(MARCH)


def test_incentive_requires_slab_config(calculator_service, repositories):
    _active_interns(repositories, 3)
    with pytest.raises(NotFoundError):
        calculator_service.calculate_incentive(MARCH)


def test_incentive_with_unset_amount(calculator_service, repositories):
    _configure(repositories, incentive={"1-10": 100, "11-20": None})
    _active_interns(repositories, 15)
    with pytest.raises(SlabNotConfiguredError):
        calculator_service.calculate_incentive(MARCH)


def test_deduction_on_shortfall(calculator_service, repositories):
    _configure(repositories, deduction={"1-5": 50, "6-10": 80})
    repositories.targets.bd_targets.append(
        BdTargetRecord(manager_id=1, target_date=date(2025, 3, 1), interns_active=10)
    )
    _active_interns(repositories, 3)
    result = calculator_service.calculate_deduction(MARCH)
    assert result.target_interns == 10
    assert result.shortfall == 7
    assert result.slab == "6-10"
    assert result.total_deduction == 560


def test_no_shortfall_means_no_deduction(calculator_service, repositories):
    repositories.targets.bd_targets.append(
        BdTargetRecord(manager_id=1, target_date=date(2025, 3, 1), interns_active=2)
    )
    _active_interns(repositories, 4)
    result = calculator_service.calculate_deduction(MARCH)
    assert result.shortfall == 0
    assert result.slab is None
    assert result.total_deduction == 0


def test_update_slabs_merges_partial_amounts(calculator_service, repositories):
    _configure(repositories, incentive={"1-10": 100}, deduction={"1-5": 50})
    updated = calculator_service.update_slabs(
        SlabUpdateRequest(manager_id=1, incentive_amounts={"11-20": 150, "1-10": None})
    )
    assert updated.incentive_amounts == {"1-10": 100, "11-20": 150}
    assert updated.deduction_amounts == {"1-5": 50}
    assert repositories.slabs.configs[1].incentive_amounts == {"1-10": 100, "11-20": 150}


def test_successive_partial_slab_updates_keep_each_other(calculator_service, repositories):
    calculator_service.update_slabs(SlabUpdateRequest(manager_id=1, incentive_amounts={"1-10": 100}))
    calculator_service.update_slabs(SlabUpdateRequest(manager_id=1, incentive_amounts={"11-20": 150}))
    calculator_service.update_slabs(SlabUpdateRequest(manager_id=1, deduction_amounts={"1-5": 50}))

    stored = repositories.slabs.configs[1]
    assert stored.incentive_amounts == {"1-10": 100, "11-20": 150}
    assert stored.deduction_amounts == {"1-5": 50}


def test_update_slabs_rejects_unknown_ranges(calculator_service):
    with pytest.raises(BadRequestError):
        calculator_service.update_slabs(SlabUpdateRequest(manager_id=1, deduction_amounts={"1-10": 5}))


def test_get_slabs_for_unconfigured_manager(calculator_service):
    slabs = calculator_service.get_slabs(2)
    assert slabs.incentive_amounts == {}
    assert slabs.deduction_amounts == {}
    with pytest.raises(NotFoundError):
        calculator_service.get_slabs(42)
