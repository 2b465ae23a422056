from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar

from .program import AnyTrainingProgram


class ValidationTier(str, Enum):
    STRICT = "strict"
    RELAXED = "relaxed"


@dataclass(frozen=True)
class Valid:
    """Accepted program. ``violations`` holds the caveats recorded when only the relaxed tier matched."""

    tier: ValidationTier
    program: AnyTrainingProgram
    violations: tuple[str, ...] = ()

    is_valid: ClassVar[bool] = True


@dataclass(frozen=True)
class Invalid:
    violations: tuple[str, ...]

    is_valid: ClassVar[bool] = False
    tier: ClassVar[None] = None


ValidationResult = Valid | Invalid
