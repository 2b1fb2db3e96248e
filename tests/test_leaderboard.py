from __future__ import annotations

from decimal import Decimal

from src.analytics.leaderboard import build_entry, rank_entries
from src.schemas.leaderboard import LeaderboardEntry


def _entry(name: str, efficiency: str, achieved: int, allocated: int = 0) -> LeaderboardEntry:
    return LeaderboardEntry(
        manager_id=ord(name),
        name=name,
        allocated=allocated,
        achieved=achieved,
        target=0,
        efficiency=Decimal(efficiency),
    )


def test_efficiency_then_achieved_ordering():
    ranked = rank_entries([_entry("A", "80", 50), _entry("B", "80", 60), _entry("C", "90", 10)])
    assert [entry.name for entry in ranked] == ["C", "B", "A"]
    assert [entry.rank for entry in ranked] == [1, 2, 3]


def test_allocated_breaks_remaining_ties_and_full_ties_keep_order():
    ranked = rank_entries(
        [
            _entry("A", "50", 5, allocated=10),
            _entry("B", "50", 5, allocated=12),
            _entry("C", "50", 5, allocated=10),
        ]
    )
    assert [entry.name for entry in ranked] == ["B", "A", "C"]
    assert [entry.rank for entry in ranked] == [1, 2, 3]


def test_build_entry_computes_efficiency():
    entry = build_entry(manager_id=1, name="Asha", allocated=12, achieved=9, target=12)
    assert entry.efficiency == Decimal("75.00")
    assert build_entry(manager_id=2, name="Ravi", allocated=4, achieved=4, target=0).efficiency == Decimal("0.00")
