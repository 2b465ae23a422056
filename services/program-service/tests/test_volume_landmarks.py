from program_service.data.muscles import MEV_FLOOR, MRV_CEILING
from program_service.schemas.analysis import MuscleGroup, VolumeLandmark
from program_service.schemas.profile import UserProfile
from program_service.services.profile_enrichment import enrich_profile
from program_service.services.volume_landmarks import calculate_volume_landmarks, round_half_up, scale_landmark


def _enriched(**overrides):
    data = dict(primary_goal="Muscle Gain", experience_level="Intermediate")
    data.update(overrides)
    return enrich_profile(UserProfile(**data))


def test_landmarks_cover_every_muscle_group():
    landmarks = calculate_volume_landmarks(_enriched())
    assert set(landmarks) == set(MuscleGroup)


def test_landmarks_are_ordered_and_bounded():
    profiles = [
        _enriched(experience_level="Beginner", training_frequency_days=1, session_duration_minutes=20, reported_stress_level=10, age=60),
        _enriched(experience_level="Advanced", training_frequency_days=6, session_duration_minutes=120, reported_stress_level=0),
    ]
    for enriched in profiles:
        for landmark in calculate_volume_landmarks(enriched).values():
            assert MEV_FLOOR <= landmark.mev <= landmark.mav <= landmark.mrv <= MRV_CEILING


def test_identical_profiles_produce_identical_landmarks():
    answers = dict(
        primary_goal="Strength Gain",
        experience_level="Advanced",
        training_frequency_days=5,
        session_duration_minutes=75,
        reported_stress_level=3,
        age=41,
        injuries_limitations="cranky left shoulder",
    )

    def derive(profile):
        landmarks = calculate_volume_landmarks(enrich_profile(profile))
        return {group.value: landmark.model_dump_json() for group, landmark in landmarks.items()}

    first, second = derive(UserProfile(**answers)), derive(UserProfile(**answers))
    assert first == second
    assert set(first) == {group.value for group in MuscleGroup}


def test_higher_tolerance_never_lowers_landmarks():
    low = calculate_volume_landmarks(_enriched(experience_level="Beginner"))
    high = calculate_volume_landmarks(_enriched(experience_level="Advanced"))
    for group in MuscleGroup:
        assert high[group].mrv >= low[group].mrv


def test_scale_landmark_clamps_extremes():
    assert scale_landmark((0, 16, 25), 1.0) == VolumeLandmark(mev=MEV_FLOOR, mav=16, mrv=25)
    assert scale_landmark((10, 20, 30), 2.0).mrv == MRV_CEILING


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(2.49) == 2
