import pytest

from program_service.exceptions import ProfileIncomplete
from program_service.schemas.profile import ExperienceLevel, PrimaryGoal, UserProfile
from program_service.services.profile_enrichment import (
    DEFAULT_STRESS_LEVEL,
    enrich_profile,
    estimate_recovery_capacity,
    infer_injury_flags,
    volume_tolerance,
)


def test_onboarding_answers_are_normalized():
    profile = UserProfile(
        primary_goal="strength gain (powerlifting)",
        experience_level="advanced (3+ years)",
        session_duration_minutes="75+ minutes",
        squat_e1rm=0,
        bench_e1rm="not sure",
    )
    assert profile.primary_goal == PrimaryGoal.STRENGTH_GAIN
    assert profile.experience_level == ExperienceLevel.ADVANCED
    assert profile.session_duration_minutes == 90
    assert profile.squat_e1rm is None
    assert profile.bench_e1rm is None
    assert profile.lift_estimates() == {}


def test_missing_goal_and_experience_raise_profile_incomplete():
    with pytest.raises(ProfileIncomplete) as excinfo:
        enrich_profile(UserProfile())
    assert excinfo.value.missing_fields == ["primary_goal", "experience_level"]


def test_missing_experience_alone_is_reported():
    with pytest.raises(ProfileIncomplete) as excinfo:
        enrich_profile(UserProfile(primary_goal="Muscle Gain"))
    assert excinfo.value.missing_fields == ["experience_level"]


def test_enriched_profile_carries_goal_and_experience():
    enriched = enrich_profile(UserProfile(primary_goal="strength gain (powerlifting)", experience_level="Beginner"))
    assert enriched.goal == PrimaryGoal.STRENGTH_GAIN
    assert enriched.experience == ExperienceLevel.BEGINNER


def test_training_age_by_experience():
    ages = [
        enrich_profile(UserProfile(primary_goal="General Fitness", experience_level=level)).training_age_years
        for level in ExperienceLevel
    ]
    assert ages == sorted(ages)
    assert ages[0] < 1 <= ages[1] < ages[2]


def test_enriched_attributes_stay_in_range():
    for frequency in range(1, 8):
        for minutes in (20, 45, 60, 90, 120):
            profile = UserProfile(
                primary_goal="Muscle Gain",
                experience_level="Beginner",
                training_frequency_days=frequency,
                session_duration_minutes=minutes,
                age=55,
                injuries_limitations="bad knee, lower back pain and a shoulder impingement",
            )
            enriched = enrich_profile(profile)
            assert 0 <= enriched.recovery_capacity <= 10
            assert enriched.volume_tolerance > 0


def test_stress_defaults_unless_reported():
    base = dict(primary_goal="Muscle Gain", experience_level="Intermediate")
    assert enrich_profile(UserProfile(**base)).stress_level == DEFAULT_STRESS_LEVEL
    assert enrich_profile(UserProfile(**base, reported_stress_level=8)).stress_level == 8


def test_injury_flags_are_inferred_from_free_text():
    flags = infer_injury_flags("Had knee surgery, also a herniated disc")
    assert [flag.area for flag in flags] == ["Knees", "Lower Back"]
    assert "Deep Squats" in flags[0].contraindications
    assert infer_injury_flags("none") == ()
    assert infer_injury_flags(None) == ()


@pytest.mark.parametrize(
    ("text", "areas"),
    [
        ("mild knee discomfort", ["Knees"]),
        ("no injuries, open to feedback", []),
        ("minor setback, carrying a heavy backpack", []),
        ("sore knees and a tweaked lower back", ["Knees", "Lower Back"]),
        ("old shoulders issue", ["Shoulders"]),
        ("two bulging discs", ["Lower Back"]),
    ],
)
def test_injury_keywords_match_whole_words(text, areas):
    assert [flag.area for flag in infer_injury_flags(text)] == areas


def test_recovery_capacity_drops_with_age_and_injuries():
    profile = UserProfile(primary_goal="Muscle Gain", experience_level="Intermediate", training_frequency_days=4)
    older = profile.model_copy(update={"age": 52})
    baseline = estimate_recovery_capacity(profile, ())
    assert estimate_recovery_capacity(older, ()) < baseline
    assert estimate_recovery_capacity(profile, infer_injury_flags("knee")) == baseline - 1


def test_volume_tolerance_grows_with_training_age_and_shrinks_with_stress():
    assert volume_tolerance(3.0, 6, 5) > volume_tolerance(0.25, 6, 5)
    assert volume_tolerance(1.25, 6, 9) < volume_tolerance(1.25, 6, 3)
