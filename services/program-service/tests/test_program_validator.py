import pytest

from program_service.schemas.analysis import MuscleGroup, VolumeLandmark, WeakPointResult
from program_service.schemas.program import RelaxedTrainingProgram, TrainingProgram, TrainingWeek
from program_service.schemas.validation import Invalid, Valid, ValidationTier
from program_service.services.program_validator import ProgramConstraints, validate_program, weekly_muscle_volume
from program_service.services.weak_points import default_weak_point_result


def _constraints(**overrides):
    data = dict(
        training_frequency=3,
        landmarks={
            MuscleGroup.CHEST: VolumeLandmark(mev=4, mav=8, mrv=20),
            MuscleGroup.BACK: VolumeLandmark(mev=4, mav=8, mrv=20),
            MuscleGroup.QUADS: VolumeLandmark(mev=4, mav=8, mrv=20),
        },
        weak_points=default_weak_point_result(),
        rpe_ceiling=10,
    )
    data.update(overrides)
    return ProgramConstraints(**data)


def test_compliant_program_passes_strict(program_payload):
    result = validate_program(program_payload(), _constraints())
    assert isinstance(result, Valid)
    assert result.is_valid
    assert result.tier == ValidationTier.STRICT
    assert isinstance(result.program, TrainingProgram)
    assert result.violations == ()


def test_weekly_volume_credits_secondary_muscles_at_half(program_payload):
    week = TrainingWeek.model_validate(program_payload()["phases"][0]["weeks"][0])
    totals = weekly_muscle_volume(week)
    assert totals[MuscleGroup.QUADS] == 9
    assert totals[MuscleGroup.CHEST] == 9
    assert totals[MuscleGroup.BACK] == 9
    # bench press and barbell row each credit 2 sets (half of 3, rounded up) per day
    assert totals[MuscleGroup.ARMS] == 12
    assert totals[MuscleGroup.CALVES] == 0


def test_volume_above_mrv_is_accepted_as_relaxed_with_caveat(program_payload, exercise):
    payload = program_payload(exercises=[exercise("Back Squat"), exercise("Bench Press", sets=8), exercise("Barbell Row")])
    result = validate_program(payload, _constraints())
    assert isinstance(result, Valid)
    assert result.tier == ValidationTier.RELAXED
    assert isinstance(result.program, RelaxedTrainingProgram)
    assert any("chest receives 24 sets, above MRV 20" in caveat for caveat in result.violations)


def test_training_frequency_mismatch(program_payload):
    result = validate_program(program_payload(), _constraints(training_frequency=4))
    assert result.tier == ValidationTier.RELAXED
    assert "week 1: 3 training days, expected 4" in result.violations


def test_first_exercise_must_be_a_compound(program_payload, exercise):
    payload = program_payload(
        exercises=[exercise("Lateral Raise"), exercise("Back Squat"), exercise("Bench Press"), exercise("Barbell Row")]
    )
    result = validate_program(payload, _constraints())
    assert result.tier == ValidationTier.RELAXED
    assert any("not a compound anchor lift" in caveat for caveat in result.violations)


def test_every_training_day_needs_an_rpe_target(program_payload, exercise):
    payload = program_payload(
        exercises=[exercise("Back Squat", rpe=None), exercise("Bench Press", rpe=None), exercise("Barbell Row", rpe=None)]
    )
    result = validate_program(payload, _constraints())
    assert result.tier == ValidationTier.RELAXED
    assert "week 1 day 1: no RPE target prescribed" in result.violations


def test_rpe_above_ceiling(program_payload, exercise):
    payload = program_payload(exercises=[exercise("Back Squat", rpe="8-9"), exercise("Bench Press"), exercise("Barbell Row")])
    result = validate_program(payload, _constraints(rpe_ceiling=8))
    assert result.tier == ValidationTier.RELAXED
    assert any("exceeds ceiling 8" in caveat for caveat in result.violations)


def test_deload_weeks_may_drop_below_mev(program_payload):
    payload = program_payload(weeks_per_phase=(1, 1), phase_names=["Strength Block", "Deload"])
    landmarks = {MuscleGroup.CHEST: VolumeLandmark(mev=10, mav=12, mrv=20)}
    result = validate_program(payload, _constraints(landmarks=landmarks))
    assert result.tier == ValidationTier.RELAXED
    assert "week 1: chest receives 9 sets, below MEV 10" in result.violations
    assert not any(caveat.startswith("week 2") for caveat in result.violations)


@pytest.mark.parametrize(
    ("exercise_name", "covered"),
    [("Romanian Deadlift", True), ("Leg Press", False)],
)
def test_weak_points_need_a_corrective_exercise(program_payload, exercise, exercise_name, covered):
    weak_points = WeakPointResult(
        primary_weak_points=["Posterior Chain Weakness"],
        corrective_exercises=["Romanian Deadlifts", "Good Mornings"],
    )
    payload = program_payload(
        exercises=[exercise("Back Squat"), exercise("Bench Press"), exercise("Barbell Row"), exercise(exercise_name)]
    )
    result = validate_program(payload, _constraints(weak_points=weak_points))
    message = "weak point 'Posterior Chain Weakness' has no corrective exercise in the program"
    assert (message not in result.violations) is covered
    assert (result.tier == ValidationTier.STRICT) is covered


def test_strict_schema_errors_fall_back_to_relaxed(program_payload):
    payload = program_payload()
    payload["phases"][0]["weeks"][0]["days"][0]["exercises"][0]["sets"] = "3"
    payload["phases"][0]["weeks"][0]["days"][0]["focus"] = "Bodybuilding"
    result = validate_program(payload, _constraints())
    assert result.tier == ValidationTier.RELAXED
    assert any(caveat.startswith("strict schema") for caveat in result.violations)


def test_rest_day_with_exercises_breaks_strict_schema(program_payload, exercise):
    payload = program_payload()
    payload["phases"][0]["weeks"][0]["days"][1]["exercises"] = [exercise("Plank")]
    result = validate_program(payload, _constraints())
    assert result.tier == ValidationTier.RELAXED


def test_unusable_payload_is_invalid():
    result = validate_program({"programName": "Only a name"}, _constraints())
    assert isinstance(result, Invalid)
    assert result.is_valid is False
    assert result.tier is None
    assert any("relaxed schema" in violation for violation in result.violations)
