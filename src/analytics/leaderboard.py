from __future__ import annotations

from typing import Iterable, List

from src.analytics.metrics import percentage
from src.schemas.leaderboard import LeaderboardEntry


def build_entry(manager_id: int, name: str, allocated: int, achieved: int, target: int) -> LeaderboardEntry:
    return LeaderboardEntry(
        manager_id=manager_id,
        name=name,
        allocated=allocated,
        achieved=achieved,
        target=target,
        efficiency=percentage(achieved, target),
    )


def rank_entries(entries: Iterable[LeaderboardEntry]) -> List[LeaderboardEntry]:
    # Efficiency, then achieved, then allocated; full ties keep input order and
    # still take consecutive positions.
    ordered = sorted(entries, key=lambda entry: (-entry.efficiency, -entry.achieved, -entry.allocated))
    return [entry.model_copy(update={"rank": index}) for index, entry in enumerate(ordered, start=1)]
