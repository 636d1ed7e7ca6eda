from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from mdp_survey.models.question import ASSESSMENT_AREAS
from mdp_survey.repositories.evaluation_repository import EvaluationRecord
from mdp_survey.services.aggregation import cohort_averages
from mdp_survey.services.formatting import round_half_up

SIGNIFICANCE_THRESHOLD = 0.30


def is_significant(delta: float) -> bool:
    # Scores carry two decimals; compare at that precision so 4.30 - 4.00 counts.
    return round_half_up(abs(delta)) >= SIGNIFICANCE_THRESHOLD


def delta_direction(delta: float) -> str:
    if not is_significant(delta):
        return "neutral"
    return "positive" if delta >= 0 else "negative"


@dataclass(frozen=True)
class ScoreDelta:
    a: float
    b: float
    delta: float

    @property
    def significant(self) -> bool:
        return is_significant(self.delta)

    @property
    def direction(self) -> str:
        return delta_direction(self.delta)


@dataclass(frozen=True)
class AreaDelta(ScoreDelta):
    cohort: float = 0.0


@dataclass(frozen=True)
class BestRotation:
    rotation: int
    score: float


@dataclass(frozen=True)
class Comparison:
    overall: ScoreDelta
    best_rotation_a: BestRotation
    best_rotation_b: BestRotation
    by_area: dict[str, AreaDelta]

    def significant_areas(self) -> dict[str, AreaDelta]:
        return {area: row for area, row in self.by_area.items() if row.significant}


def _empty_comparison() -> Comparison:
    return Comparison(
        overall=ScoreDelta(a=0.0, b=0.0, delta=0.0),
        best_rotation_a=BestRotation(rotation=0, score=0.0),
        best_rotation_b=BestRotation(rotation=0, score=0.0),
        by_area={area: AreaDelta(a=0.0, b=0.0, delta=0.0, cohort=0.0) for area in ASSESSMENT_AREAS},
    )


def _latest(rows: Sequence[EvaluationRecord]) -> EvaluationRecord:
    return max(reversed(rows), key=lambda item: item.submitted)


def _best(rows: Sequence[EvaluationRecord]) -> BestRotation:
    best = rows[0]
    for item in rows[1:]:
        if item.overall > best.overall:
            best = item
    return BestRotation(rotation=best.rotation, score=best.overall)


def compare(records: Sequence[EvaluationRecord], mdp_a: str, mdp_b: str) -> Comparison:
    """Head-to-head view of two participants within ``records``.

    Deltas are always ``a - b``. When either side has no evaluations the
    result is all zeros rather than an error.
    """
    rows_a = [item for item in records if item.mdp_name == mdp_a]
    rows_b = [item for item in records if item.mdp_name == mdp_b]
    if not rows_a or not rows_b:
        return _empty_comparison()

    latest_a = _latest(rows_a)
    latest_b = _latest(rows_b)
    cohort = cohort_averages(records).by_area
    by_area: dict[str, AreaDelta] = {}
    for area in ASSESSMENT_AREAS:
        score_a = latest_a.scores.get(area) or 0.0
        score_b = latest_b.scores.get(area) or 0.0
        by_area[area] = AreaDelta(
            a=score_a,
            b=score_b,
            delta=score_a - score_b,
            cohort=cohort.get(area) or 0.0,
        )
    return Comparison(
        overall=ScoreDelta(
            a=latest_a.overall,
            b=latest_b.overall,
            delta=latest_a.overall - latest_b.overall,
        ),
        best_rotation_a=_best(rows_a),
        best_rotation_b=_best(rows_b),
        by_area=by_area,
    )
