from __future__ import annotations

from types import MappingProxyType

DAY_NAMES: tuple[str, ...] = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

# Weekly frequency -> training days (Monday=1 .. Sunday=7). Every other day is a rest day.
TRAINING_DAYS_BY_FREQUENCY: MappingProxyType[int, tuple[int, ...]] = MappingProxyType(
    {
        1: (3,),
        2: (1, 4),
        3: (1, 3, 5),
        4: (1, 2, 4, 5),
        5: (1, 2, 3, 5, 6),
        6: (1, 2, 3, 4, 5, 6),
        7: (1, 2, 3, 4, 5, 6, 7),
    }
)

SPLITS: tuple[tuple[int, str], ...] = (
    (3, "Full Body"),
    (4, "Upper/Lower"),
    (6, "Push/Pull/Legs"),
    (7, "Push/Pull/Legs with an active recovery day"),
)


def split_for_frequency(frequency: int) -> str:
    for max_days, split in SPLITS:
        if frequency <= max_days:
            return split
    return SPLITS[-1][1]


def training_days(frequency: int) -> tuple[int, ...]:
    return TRAINING_DAYS_BY_FREQUENCY[max(1, min(frequency, 7))]
