from prometheus_client import Counter

TRAINING_PROGRAMS_GENERATED_TOTAL = Counter(
    "training_programs_generated_total",
    "Number of training programs generated and validated",
    ["tier", "validation_tier"],
)

PROGRAM_GENERATION_ATTEMPTS_TOTAL = Counter(
    "program_generation_attempts_total",
    "Generative backend attempts by complexity tier and outcome",
    ["tier", "outcome"],
)

PROGRAM_GENERATION_FAILURES_TOTAL = Counter(
    "program_generation_failures_total",
    "Terminal program generation failures",
    ["reason"],
)
