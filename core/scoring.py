"""
Interview scoring.

Two separate computations over the same per-question scores:

* ``summarize`` is the authoritative aggregate persisted on the interview.
  Per-skill means are rounded half-up to integers, then the overall score is
  the rounded mean of the non-null skill scores (rounding happens twice).
* ``preview`` is the live estimate shown while an interview is being scored.
  Skill means stay unrounded, a skill with no contributing question shows 0,
  and the overall is the mean of the non-zero skill values to one decimal.

They can disagree (e.g. a genuine 0 score drops out of the preview overall)
and must not be merged.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional, Sequence

from database.models.interviews import Recommendation


MIN_SCORE = 0
MAX_SCORE = 5

SKILLS = ("technical", "problem_solving", "communication")

# Checked top-down; anything below the last threshold is a pass.
RECOMMENDATION_THRESHOLDS: tuple[tuple[int, Recommendation], ...] = (
    (5, Recommendation.STRONG_HIRE),
    (4, Recommendation.HIRE),
    (3, Recommendation.CONSIDER),
)


@dataclass(frozen=True)
class ScoredItem:
    """One interview question as the scoring engine sees it."""

    score: Optional[int]
    skipped: bool = False
    evaluates_technical: bool = False
    evaluates_problem_solving: bool = False
    evaluates_communication: bool = False

    @property
    def counts(self) -> bool:
        return self.score is not None and not self.skipped

    def evaluates(self, skill: str) -> bool:
        return bool(getattr(self, f"evaluates_{skill}"))


@dataclass(frozen=True)
class ScoreSummary:
    technical_score: Optional[int]
    problem_solving_score: Optional[int]
    communication_score: Optional[int]
    overall_score: Optional[int]
    recommendation: Optional[Recommendation]

    def as_dict(self) -> dict:
        return {
            "technical_score": self.technical_score,
            "problem_solving_score": self.problem_solving_score,
            "communication_score": self.communication_score,
            "overall_score": self.overall_score,
            "recommendation": self.recommendation,
        }


@dataclass(frozen=True)
class ScorePreview:
    technical_score: float
    problem_solving_score: float
    communication_score: float
    overall_score: float
    scored_count: int
    skipped_count: int


def round_half_up(value: float | Decimal) -> int:
    """Round to the nearest integer with .5 going up (2.5 -> 3, not 2)."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _round_one_decimal(value: float) -> float:
    return float(Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def _mean(values: Sequence[int | float]) -> float:
    return sum(values) / len(values)


def recommendation_for(overall: Optional[int]) -> Optional[Recommendation]:
    if overall is None:
        return None
    for threshold, recommendation in RECOMMENDATION_THRESHOLDS:
        if overall >= threshold:
            return recommendation
    return Recommendation.PASS


def _skill_scores(items: Sequence[ScoredItem], skill: str) -> list[int]:
    return [item.score for item in items if item.evaluates(skill)]


def summarize(items: Iterable[ScoredItem]) -> Optional[ScoreSummary]:
    """
    Compute the persisted interview aggregate.

    Returns None when no item is both scored and not skipped; callers treat
    that as "leave the interview unchanged".
    """
    scored = [item for item in items if item.counts]
    if not scored:
        return None

    per_skill: dict[str, Optional[int]] = {}
    for skill in SKILLS:
        values = _skill_scores(scored, skill)
        # None means no attempted question covered the skill; 0 is a real score
        per_skill[skill] = round_half_up(_mean(values)) if values else None

    present = [v for v in per_skill.values() if v is not None]
    overall = round_half_up(_mean(present)) if present else None

    return ScoreSummary(
        technical_score=per_skill["technical"],
        problem_solving_score=per_skill["problem_solving"],
        communication_score=per_skill["communication"],
        overall_score=overall,
        recommendation=recommendation_for(overall),
    )


def preview(items: Iterable[ScoredItem]) -> ScorePreview:
    """Live estimate while scoring; never persisted."""
    items = list(items)
    scored = [item for item in items if item.counts]

    displayed: dict[str, float] = {}
    for skill in SKILLS:
        values = _skill_scores(scored, skill)
        displayed[skill] = _mean(values) if values else 0

    non_zero = [v for v in displayed.values() if v]
    overall = _round_one_decimal(_mean(non_zero)) if non_zero else 0

    return ScorePreview(
        technical_score=displayed["technical"],
        problem_solving_score=displayed["problem_solving"],
        communication_score=displayed["communication"],
        overall_score=overall,
        scored_count=len(scored),
        skipped_count=sum(1 for item in items if item.skipped),
    )
