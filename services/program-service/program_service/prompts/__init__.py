from .program_generation import TIER_SECTIONS, build_program_prompt

__all__ = [
    "TIER_SECTIONS",
    "build_program_prompt",
]
