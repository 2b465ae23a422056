from __future__ import annotations

from collections.abc import Sequence


class ProgramGenerationError(Exception):
    code = "program_generation_error"


class ProfileIncomplete(ProgramGenerationError):
    code = "profile_incomplete"

    def __init__(self, missing_fields: Sequence[str]):
        self.missing_fields = list(missing_fields)
        super().__init__(f"Profile is missing required fields: {', '.join(self.missing_fields)}")


class GenerationFailure(ProgramGenerationError):
    code = "generation_failed"

    def __init__(self, last_error: str, attempts: int):
        self.last_error = last_error
        self.attempts = attempts
        super().__init__(f"Program generation failed after {attempts} attempts: {last_error}")


class ValidationFailure(ProgramGenerationError):
    code = "validation_failed"

    def __init__(self, violations: Sequence[str], attempts: int):
        self.violations = list(violations)
        self.attempts = attempts
        preview = "; ".join(self.violations[:5])
        super().__init__(f"Generated program was rejected by both schema tiers: {preview}")


class PersistenceFailure(ProgramGenerationError):
    code = "persistence_failed"

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Failed to persist generated program: {reason}")
