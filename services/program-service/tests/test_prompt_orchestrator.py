import asyncio

import pytest

from program_service.data.exercises import COMPOUND_LIFTS
from program_service.exceptions import GenerationFailure, ValidationFailure
from program_service.prompts import TIER_SECTIONS, build_program_prompt
from program_service.schemas.analysis import MuscleGroup, VolumeLandmark
from program_service.schemas.generation import GenerationTier
from program_service.services.exercise_catalog import is_compound
from program_service.services.program_generation import build_generation_context
from program_service.services.program_validator import ProgramConstraints
from program_service.services.prompt_orchestrator import MAX_ATTEMPTS, PromptOrchestrator
from program_service.services.weak_points import default_weak_point_result


@pytest.fixture()
def context(intermediate_profile, history_store):
    return asyncio.run(
        build_generation_context(intermediate_profile, user_id="user-1", history_store=history_store(), history_limit=2)
    )


@pytest.fixture()
def constraints():
    return ProgramConstraints(
        training_frequency=3,
        landmarks={MuscleGroup.CHEST: VolumeLandmark(mev=4, mav=8, mrv=20)},
        weak_points=default_weak_point_result(),
    )


class SlowFirstBackend:
    def __init__(self, payload):
        self.payload = payload
        self.calls = 0

    async def generate(self, prompt, options):
        self.calls += 1
        if self.calls == 1:
            await asyncio.sleep(5)
        return self.payload


def test_always_failing_backend_stops_after_three_attempts(context, constraints, scripted_backend):
    backend = scripted_backend(RuntimeError("model overloaded"))
    orchestrator = PromptOrchestrator(backend)

    with pytest.raises(GenerationFailure) as excinfo:
        asyncio.run(orchestrator.run(context, constraints))

    assert MAX_ATTEMPTS == 3
    assert backend.calls == 3
    assert excinfo.value.attempts == 3
    assert "model overloaded" in excinfo.value.last_error


def test_tiers_shrink_the_prompt(context, constraints, scripted_backend):
    backend = scripted_backend(RuntimeError("boom"))
    with pytest.raises(GenerationFailure):
        asyncio.run(PromptOrchestrator(backend).run(context, constraints))

    full, simplified, basic = backend.prompts
    assert len(full) > len(simplified) > len(basic)
    assert "Derived training attributes" in full
    assert "Derived training attributes" not in simplified
    assert "Weak point analysis" not in basic


def test_success_on_second_attempt(context, constraints, scripted_backend, program_payload):
    backend = scripted_backend(RuntimeError("quota"), program_payload())
    outcome = asyncio.run(PromptOrchestrator(backend).run(context, constraints))

    assert backend.calls == 2
    assert outcome.attempts == 2
    assert outcome.tier == GenerationTier.SIMPLIFIED
    assert outcome.validation.is_valid
    assert [record.error is None for record in outcome.history] == [False, True]


def test_first_attempt_success_uses_full_tier(context, constraints, scripted_backend, program_payload):
    backend = scripted_backend(program_payload())
    outcome = asyncio.run(PromptOrchestrator(backend).run(context, constraints))
    assert backend.calls == 1
    assert outcome.tier == GenerationTier.FULL


def test_empty_payload_advances_the_tier(context, constraints, scripted_backend, program_payload):
    backend = scripted_backend({}, program_payload())
    outcome = asyncio.run(PromptOrchestrator(backend).run(context, constraints))
    assert backend.calls == 2
    assert outcome.tier == GenerationTier.SIMPLIFIED


def test_rejected_program_does_not_retry(context, constraints, scripted_backend):
    backend = scripted_backend({"programName": "Incomplete"})
    with pytest.raises(ValidationFailure) as excinfo:
        asyncio.run(PromptOrchestrator(backend).run(context, constraints))
    assert backend.calls == 1
    assert excinfo.value.attempts == 1
    assert excinfo.value.violations


def test_attempt_timeout_advances_the_tier(context, constraints, program_payload):
    backend = SlowFirstBackend(program_payload())
    outcome = asyncio.run(PromptOrchestrator(backend, attempt_timeout=0.05).run(context, constraints))
    assert backend.calls == 2
    assert outcome.tier == GenerationTier.SIMPLIFIED
    assert "timed out" in outcome.history[0].error


def test_failed_tier_has_no_prompt(context):
    assert GenerationTier.FAILED not in TIER_SECTIONS
    with pytest.raises(ValueError):
        build_program_prompt(tier=GenerationTier.FAILED, context=context)


def test_full_prompt_carries_the_derived_context(context):
    prompt = build_program_prompt(tier=GenerationTier.FULL, context=context)
    assert "Weekly set landmarks" in prompt
    assert "Periodization model: hypertrophy-focused" in prompt
    assert "Push/Pull Imbalance" in prompt
    assert "Monday (1), Wednesday (3), Friday (5)" in prompt


@pytest.mark.parametrize("tier", [GenerationTier.FULL, GenerationTier.SIMPLIFIED, GenerationTier.BASIC])
def test_prompt_names_only_lifts_the_validator_accepts_as_anchors(context, tier):
    prompt = build_program_prompt(tier=tier, context=context)
    anchor_rule = next(line for line in prompt.splitlines() if "anchor lift" in line)
    for lift in COMPOUND_LIFTS:
        assert lift in anchor_rule
        assert is_compound(lift)
    assert "variation" not in anchor_rule
