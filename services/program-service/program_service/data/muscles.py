from __future__ import annotations

from types import MappingProxyType

from ..schemas.analysis import MuscleGroup

# Weekly set landmarks (MEV, MAV, MRV) for a lifter with a neutral volume tolerance.
BASE_VOLUME_LANDMARKS: MappingProxyType[MuscleGroup, tuple[int, int, int]] = MappingProxyType(
    {
        MuscleGroup.CHEST: (8, 18, 26),
        MuscleGroup.BACK: (10, 20, 30),
        MuscleGroup.SHOULDERS: (8, 16, 24),
        MuscleGroup.ARMS: (6, 14, 22),
        MuscleGroup.QUADS: (8, 16, 24),
        MuscleGroup.HAMSTRINGS: (6, 12, 18),
        MuscleGroup.GLUTES: (6, 12, 18),
        MuscleGroup.CALVES: (8, 16, 25),
        MuscleGroup.ABS: (0, 16, 25),
    }
)

MEV_FLOOR = 4
MRV_CEILING = 30

# Share of an exercise's sets credited to its secondary muscle groups.
SECONDARY_SET_CREDIT = 0.5
