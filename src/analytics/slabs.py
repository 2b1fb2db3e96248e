from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Sequence, Tuple

from src.core.errors import BadRequestError, NoMatchingSlabError, SlabNotConfiguredError
from src.schemas.calculator import SlabResolution


@dataclass(frozen=True)
class SlabRange:
    label: str
    minimum: int
    maximum: Optional[int] = None

    def contains(self, count: int) -> bool:
        if count < self.minimum:
            return False
        return self.maximum is None or count <= self.maximum


INCENTIVE_RANGES: Tuple[SlabRange, ...] = (
    SlabRange("1-10", 1, 10),
    SlabRange("11-20", 11, 20),
    SlabRange("21-30", 21, 30),
    SlabRange("31-40", 31, 40),
    SlabRange("41-45", 41, 45),
    SlabRange("46+", 46),
)

DEDUCTION_RANGES: Tuple[SlabRange, ...] = tuple(
    SlabRange(f"{low}-{low + 4}", low, low + 4) for low in range(1, 76, 5)
) + (SlabRange("76+", 76),)


def parse_range_label(label: str) -> SlabRange:
    text = label.strip()
    try:
        if text.endswith("+"):
            return SlabRange(text, int(text[:-1]))
        low, high = text.split("-", 1)
        return SlabRange(text, int(low), int(high))
    except ValueError as exc:
        raise BadRequestError(f"Unsupported slab range {label!r}") from exc


def ranges_from_labels(labels: Sequence[str]) -> Tuple[SlabRange, ...]:
    return tuple(sorted((parse_range_label(label) for label in labels), key=lambda item: item.minimum))


def resolve_slab(
    achieved_count: int,
    amounts: Mapping[str, Optional[int]],
    ranges: Optional[Sequence[SlabRange]] = None,
) -> SlabResolution:
    """First range with ``minimum <= count <= maximum`` wins.

    Without an explicit range table the ranges are read from the amount labels.
    """
    table = ranges if ranges is not None else ranges_from_labels(list(amounts))
    for slab in table:
        if not slab.contains(achieved_count):
            continue
        amount = amounts.get(slab.label)
        if amount is None:
            raise SlabNotConfiguredError(slab.label)
        return SlabResolution(range_label=slab.label, amount=amount)
    raise NoMatchingSlabError(achieved_count)


def merge_slab_amounts(
    existing: Mapping[str, Optional[int]],
    incoming: Mapping[str, Optional[int]],
    ranges: Sequence[SlabRange],
) -> Dict[str, int]:
    """Overlay explicitly supplied amounts on the stored table.

    Keys absent from ``incoming`` (or sent as null) keep their stored value.
    """
    allowed = {slab.label for slab in ranges}
    unknown = sorted(set(incoming) - allowed)
    if unknown:
        raise BadRequestError(f"Unknown slab range(s): {', '.join(unknown)}")
    merged = {label: amount for label, amount in existing.items() if label in allowed and amount is not None}
    for label, amount in incoming.items():
        if amount is None:
            continue
        if amount < 0:
            raise BadRequestError(f"Slab amount for {label} must not be negative")
        merged[label] = amount
    return {slab.label: merged[slab.label] for slab in ranges if slab.label in merged}
