from __future__ import annotations

import math

from ..data.muscles import BASE_VOLUME_LANDMARKS, MEV_FLOOR, MRV_CEILING
from ..schemas.analysis import MuscleGroup, VolumeLandmark
from ..schemas.profile import EnrichedProfile


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def scale_landmark(base: tuple[int, int, int], tolerance: float) -> VolumeLandmark:
    base_mev, base_mav, base_mrv = base
    mev = min(max(round_half_up(base_mev * tolerance), MEV_FLOOR), MRV_CEILING)
    mrv = min(max(round_half_up(base_mrv * tolerance), mev), MRV_CEILING)
    mav = min(max(round_half_up(base_mav * tolerance), mev), mrv)
    return VolumeLandmark(mev=mev, mav=mav, mrv=mrv)


def calculate_volume_landmarks(enriched: EnrichedProfile) -> dict[MuscleGroup, VolumeLandmark]:
    """Weekly MEV/MAV/MRV for every tracked muscle group, scaled by volume tolerance."""
    return {
        muscle: scale_landmark(base, enriched.volume_tolerance)
        for muscle, base in BASE_VOLUME_LANDMARKS.items()
    }
