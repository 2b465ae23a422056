"""Strength-ratio and heuristic weak point analysis.

Findings come from two declarative sources evaluated in a fixed order:

1. ``RATIO_STANDARDS`` (deadlift:squat, bench:squat, overhead_press:bench), each
   producing a ``StrengthRatioIssue`` when the lifter's ratio is below minimum.
2. ``HEURISTIC_RULES`` below, in declaration order: push/pull balance, core
   stability, hypertrophy specialization, then the knee, back and shoulder
   injury rules.

Findings are ranked by priority (lowest number first). The sort is stable, so
equal priorities keep the evaluation order above.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

import structlog

from ..data.injuries import INJURY_PATTERNS
from ..data.strength_standards import (
    CORE_STABILITY_SQUAT_KG,
    CORRECTIVE_PROTOCOLS,
    DEFAULT_WEAK_POINT,
    HIGH_SEVERITY_FACTOR,
    RATIO_STANDARDS,
    REASSESSMENT_WEEKS_DEFAULT,
    REASSESSMENT_WEEKS_HIGH,
    REASSESSMENT_WEEKS_MODERATE,
    RatioStandard,
)
from ..schemas.analysis import Severity, StrengthRatioIssue, WeakPointResult
from ..schemas.profile import LBS_PER_KG, ExperienceLevel, PrimaryGoal, UserProfile, WeightUnit

logger = structlog.get_logger(__name__)

INJURY_PRIORITY = 1
HIGH_RATIO_PRIORITY = 2
MODERATE_RATIO_PRIORITY = 3
BALANCE_PRIORITY = 4
SPECIALIZATION_PRIORITY = 5

MIN_LIFTS_FOR_ANALYSIS = 2

_INJURY_AREAS = {entry.area: entry.pattern for entry in INJURY_PATTERNS}


@dataclass(frozen=True)
class AnalysisContext:
    lifts: dict[str, float]
    experience: ExperienceLevel | None
    goal: PrimaryGoal | None
    injuries: str
    weight_unit: WeightUnit

    def lift_kg(self, name: str) -> float | None:
        value = self.lifts.get(name)
        if value is None:
            return None
        return value / LBS_PER_KG if self.weight_unit == WeightUnit.LBS else value

    def reports_injury(self, area: str) -> bool:
        return bool(self.injuries) and bool(_INJURY_AREAS[area].search(self.injuries))


@dataclass(frozen=True)
class HeuristicRule:
    predicate: Callable[[AnalysisContext], bool]
    priority: int
    weak_point: str


@dataclass(frozen=True)
class Finding:
    weak_point: str
    priority: int
    issue: StrengthRatioIssue | None = None


def _advanced_heavy_squatter(ctx: AnalysisContext) -> bool:
    squat_kg = ctx.lift_kg("squat")
    return ctx.experience == ExperienceLevel.ADVANCED and squat_kg is not None and squat_kg > CORE_STABILITY_SQUAT_KG


HEURISTIC_RULES: tuple[HeuristicRule, ...] = (
    HeuristicRule(
        predicate=lambda ctx: "bench" in ctx.lifts and not ctx.reports_injury("Shoulders"),
        priority=BALANCE_PRIORITY,
        weak_point="Push/Pull Imbalance",
    ),
    HeuristicRule(predicate=_advanced_heavy_squatter, priority=BALANCE_PRIORITY, weak_point="Core Stability"),
    HeuristicRule(
        predicate=lambda ctx: ctx.goal == PrimaryGoal.MUSCLE_GAIN,
        priority=SPECIALIZATION_PRIORITY,
        weak_point="Hypertrophy Specialization",
    ),
    HeuristicRule(
        predicate=lambda ctx: ctx.reports_injury("Knees"),
        priority=INJURY_PRIORITY,
        weak_point="Hip/Knee Stability",
    ),
    HeuristicRule(
        predicate=lambda ctx: ctx.reports_injury("Lower Back"),
        priority=INJURY_PRIORITY,
        weak_point="Spinal Stability",
    ),
    HeuristicRule(
        predicate=lambda ctx: ctx.reports_injury("Shoulders"),
        priority=INJURY_PRIORITY,
        weak_point="Shoulder Stability",
    ),
)


def _evaluate_ratio(standard: RatioStandard, ctx: AnalysisContext) -> Finding | None:
    numerator = ctx.lifts.get(standard.numerator)
    denominator = ctx.lifts.get(standard.denominator)
    if not numerator or not denominator:
        return None
    ratio = numerator / denominator
    if ratio >= standard.minimum:
        return None

    severity = Severity.HIGH if ratio < standard.minimum * HIGH_SEVERITY_FACTOR else Severity.MODERATE
    issue = StrengthRatioIssue(
        ratio_name=standard.name,
        user_ratio=round(ratio, 2),
        minimum_ratio=standard.minimum,
        severity=severity,
        explanation=(
            f"Your {standard.name} ratio of {ratio:.2f} is below the {standard.minimum:.2f} minimum, "
            f"suggesting {standard.weak_point.lower()}."
        ),
    )
    priority = HIGH_RATIO_PRIORITY if severity == Severity.HIGH else MODERATE_RATIO_PRIORITY
    return Finding(weak_point=standard.weak_point, priority=priority, issue=issue)


def collect_findings(ctx: AnalysisContext) -> list[Finding]:
    findings: list[Finding] = []
    for standard in RATIO_STANDARDS:
        finding = _evaluate_ratio(standard, ctx)
        if finding is not None:
            findings.append(finding)
    for rule in HEURISTIC_RULES:
        if rule.predicate(ctx):
            findings.append(Finding(weak_point=rule.weak_point, priority=rule.priority))
    return sorted(findings, key=lambda finding: finding.priority)


def reassessment_period(issues: list[StrengthRatioIssue]) -> int:
    severities = {issue.severity for issue in issues}
    if Severity.HIGH in severities:
        return REASSESSMENT_WEEKS_HIGH
    if Severity.MODERATE in severities:
        return REASSESSMENT_WEEKS_MODERATE
    return REASSESSMENT_WEEKS_DEFAULT


def default_weak_point_result() -> WeakPointResult:
    return WeakPointResult(
        issues=[],
        primary_weak_points=[DEFAULT_WEAK_POINT],
        corrective_exercises=list(CORRECTIVE_PROTOCOLS[DEFAULT_WEAK_POINT]),
        reassessment_period_weeks=REASSESSMENT_WEEKS_DEFAULT,
        is_default=True,
    )


def analyze_weak_points(
    *,
    squat: float | None = None,
    bench: float | None = None,
    deadlift: float | None = None,
    overhead_press: float | None = None,
    experience: ExperienceLevel | None = None,
    goal: PrimaryGoal | None = None,
    injuries: str | None = None,
    weight_unit: WeightUnit = WeightUnit.KG,
) -> WeakPointResult:
    lifts = {
        name: float(value)
        for name, value in (("squat", squat), ("bench", bench), ("deadlift", deadlift), ("overhead_press", overhead_press))
        if value is not None and value > 0
    }
    if len(lifts) < MIN_LIFTS_FOR_ANALYSIS:
        logger.debug("weak_point_analysis_insufficient_data", lifts=sorted(lifts))
        return default_weak_point_result()

    ctx = AnalysisContext(
        lifts=lifts,
        experience=experience,
        goal=goal,
        injuries=injuries or "",
        weight_unit=weight_unit,
    )
    findings = collect_findings(ctx)
    if not findings:
        return default_weak_point_result()

    weak_points = list(dict.fromkeys(finding.weak_point for finding in findings))
    corrective = list(
        dict.fromkeys(exercise for weak_point in weak_points for exercise in CORRECTIVE_PROTOCOLS[weak_point])
    )
    issues = [finding.issue for finding in findings if finding.issue is not None]

    return WeakPointResult(
        issues=issues,
        primary_weak_points=weak_points,
        corrective_exercises=corrective,
        reassessment_period_weeks=reassessment_period(issues),
        is_default=False,
    )


def analyze_profile_weak_points(profile: UserProfile) -> WeakPointResult:
    return analyze_weak_points(
        squat=profile.squat_e1rm,
        bench=profile.bench_e1rm,
        deadlift=profile.deadlift_e1rm,
        overhead_press=profile.overhead_press_e1rm,
        experience=profile.experience_level,
        goal=profile.primary_goal,
        injuries=profile.injuries_limitations,
        weight_unit=profile.weight_unit,
    )
