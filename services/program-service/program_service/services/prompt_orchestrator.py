"""Tiered generation ladder: FULL -> SIMPLIFIED -> BASIC -> FAILED.

Only a hard backend failure (exception, timeout or a response without a JSON
object) advances the tier. A payload that reaches the validator ends the ladder
either way: accepted programs are returned and rejected ones raise
``ValidationFailure``.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import structlog

from ..exceptions import GenerationFailure, ValidationFailure
from ..logging_config import bind_generation_context, clear_generation_context
from ..metrics import PROGRAM_GENERATION_ATTEMPTS_TOTAL, PROGRAM_GENERATION_FAILURES_TOTAL
from ..prompts import build_program_prompt
from ..schemas.generation import GenerationContext, GenerationOptions, GenerationTier
from ..schemas.validation import Invalid, Valid, ValidationResult
from .genai_backend import ProgramBackend
from .program_validator import ProgramConstraints, validate_program

logger = structlog.get_logger(__name__)

TIER_TRANSITIONS: dict[GenerationTier, GenerationTier] = {
    GenerationTier.FULL: GenerationTier.SIMPLIFIED,
    GenerationTier.SIMPLIFIED: GenerationTier.BASIC,
    GenerationTier.BASIC: GenerationTier.FAILED,
}

MAX_ATTEMPTS = len(TIER_TRANSITIONS)


@dataclass
class AttemptRecord:
    tier: GenerationTier
    error: str | None = None


@dataclass
class OrchestrationOutcome:
    validation: Valid
    tier: GenerationTier
    attempts: int
    history: list[AttemptRecord] = field(default_factory=list)


class PromptOrchestrator:
    def __init__(
        self,
        backend: ProgramBackend,
        *,
        options: GenerationOptions | None = None,
        attempt_timeout: float | None = None,
        validator: Callable[[dict[str, Any], ProgramConstraints], ValidationResult] = validate_program,
    ):
        self._backend = backend
        self._options = options or GenerationOptions()
        self._attempt_timeout = attempt_timeout
        self._validator = validator

    async def _invoke(self, prompt: str) -> dict[str, Any]:
        call = self._backend.generate(prompt, self._options)
        if self._attempt_timeout:
            payload = await asyncio.wait_for(call, timeout=self._attempt_timeout)
        else:
            payload = await call
        if not isinstance(payload, dict) or not payload:
            raise ValueError("backend returned no structured payload")
        return payload

    async def run(self, context: GenerationContext, constraints: ProgramConstraints) -> OrchestrationOutcome:
        tier = GenerationTier.FULL
        history: list[AttemptRecord] = []
        last_error = "no attempt made"

        while tier != GenerationTier.FAILED:
            bind_generation_context(generation_tier=tier.value)
            prompt = build_program_prompt(tier=tier, context=context)
            try:
                payload = await self._invoke(prompt)
            except TimeoutError:
                last_error = f"attempt timed out after {self._attempt_timeout}s"
            except Exception as exc:
                last_error = f"{type(exc).__name__}: {exc}"
            else:
                history.append(AttemptRecord(tier=tier))
                result = self._validator(payload, constraints)
                if isinstance(result, Invalid):
                    PROGRAM_GENERATION_ATTEMPTS_TOTAL.labels(tier=tier.value, outcome="invalid").inc()
                    PROGRAM_GENERATION_FAILURES_TOTAL.labels(reason="validation").inc()
                    logger.error("generated_program_rejected", tier=tier.value, attempts=len(history))
                    clear_generation_context("generation_tier")
                    raise ValidationFailure(result.violations, attempts=len(history))
                PROGRAM_GENERATION_ATTEMPTS_TOTAL.labels(tier=tier.value, outcome="success").inc()
                logger.info(
                    "generation_attempt_succeeded",
                    tier=tier.value,
                    attempts=len(history),
                    validation_tier=result.tier.value,
                )
                clear_generation_context("generation_tier")
                return OrchestrationOutcome(validation=result, tier=tier, attempts=len(history), history=history)

            history.append(AttemptRecord(tier=tier, error=last_error))
            PROGRAM_GENERATION_ATTEMPTS_TOTAL.labels(tier=tier.value, outcome="backend_error").inc()
            logger.warning("generation_attempt_failed", tier=tier.value, attempt=len(history), error=last_error)
            tier = TIER_TRANSITIONS[tier]

        clear_generation_context("generation_tier")
        PROGRAM_GENERATION_FAILURES_TOTAL.labels(reason="backend").inc()
        logger.error("program_generation_failed", attempts=len(history), last_error=last_error)
        raise GenerationFailure(last_error, attempts=len(history))
