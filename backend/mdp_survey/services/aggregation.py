"""Cohort-level views over an already filtered set of evaluations.

All functions here are pure: they take a snapshot of records and never touch
the repository.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Sequence

from mdp_survey.models.question import ASSESSMENT_AREAS
from mdp_survey.repositories.evaluation_repository import EvaluationRecord


@dataclass(frozen=True)
class CohortAverages:
    overall: float
    by_area: dict[str, float]
    by_rotation: dict[int, float]


@dataclass(frozen=True)
class TopPerformer:
    names: list[str]
    score: float
    is_tied: bool

    @property
    def name(self) -> str:
        if self.is_tied:
            return f"{len(self.names)} Associates Tied"
        return self.names[0] if self.names else ""


@dataclass(frozen=True)
class AreaExtrema:
    strength: str | None
    development: str | None


@dataclass(frozen=True)
class ParticipantSummary:
    mdp_name: str
    rotation_count: int
    average_overall: float
    functions: list[str]
    last_submitted: str
    standing: int
    rotations: list[EvaluationRecord] = field(default_factory=list)


@dataclass(frozen=True)
class CohortStats:
    total_responses: int
    unique_participants: int
    latest_rotation: int | None
    average_overall: float


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def cohort_averages(records: Sequence[EvaluationRecord]) -> CohortAverages:
    if not records:
        return CohortAverages(overall=0.0, by_area={}, by_rotation={})
    overall = _mean([item.overall for item in records])
    by_area: dict[str, float] = {}
    for area in ASSESSMENT_AREAS:
        scores = [item.scores[area] for item in records if item.scores.get(area) is not None]
        by_area[area] = _mean(scores)
    grouped: dict[int, list[float]] = {}
    for item in records:
        grouped.setdefault(item.rotation, []).append(item.overall)
    by_rotation = {rotation: _mean(grouped[rotation]) for rotation in sorted(grouped)}
    return CohortAverages(overall=overall, by_area=by_area, by_rotation=by_rotation)


def latest_by_participant(records: Sequence[EvaluationRecord]) -> dict[str, EvaluationRecord]:
    latest: dict[str, EvaluationRecord] = {}
    for item in records:
        current = latest.get(item.mdp_name)
        if current is None or item.submitted > current.submitted:
            latest[item.mdp_name] = item
    return latest


def top_performer(records: Sequence[EvaluationRecord]) -> TopPerformer:
    """Highest latest score per participant; exact ties are all reported."""
    if not records:
        return TopPerformer(names=[], score=0.0, is_tied=False)
    performers = list(latest_by_participant(records).values())
    best = max(item.overall for item in performers)
    names = [item.mdp_name for item in performers if item.overall == best]
    return TopPerformer(names=names, score=best, is_tied=len(names) > 1)


def area_extrema(by_area: Mapping[str, float]) -> AreaExtrema:
    areas = [area for area in ASSESSMENT_AREAS if area in by_area]
    if not areas:
        return AreaExtrema(strength=None, development=None)
    strength = areas[0]
    development = areas[0]
    for area in areas[1:]:
        if by_area[area] > by_area[strength]:
            strength = area
        if by_area[area] < by_area[development]:
            development = area
    return AreaExtrema(strength=strength, development=development)


def participant_rollup(records: Sequence[EvaluationRecord]) -> list[ParticipantSummary]:
    groups: dict[str, list[EvaluationRecord]] = {}
    for item in records:
        groups.setdefault(item.mdp_name, []).append(item)
    summaries = []
    for mdp_name, rows in groups.items():
        ordered = sorted(rows, key=lambda item: item.submitted)
        functions: list[str] = []
        for item in rows:
            if item.function_name not in functions:
                functions.append(item.function_name)
        summaries.append(
            (
                mdp_name,
                ordered,
                functions,
                _mean([item.overall for item in rows]),
            )
        )
    # sorted() is stable, so equal averages keep first-seen order.
    summaries.sort(key=lambda entry: -entry[3])
    return [
        ParticipantSummary(
            mdp_name=mdp_name,
            rotation_count=len(ordered),
            average_overall=average,
            functions=functions,
            last_submitted=max(ordered, key=lambda item: item.submitted).submitted_at,
            standing=index,
            rotations=ordered,
        )
        for index, (mdp_name, ordered, functions, average) in enumerate(summaries, start=1)
    ]


def cohort_stats(records: Sequence[EvaluationRecord]) -> CohortStats:
    return CohortStats(
        total_responses=len(records),
        unique_participants=len({item.mdp_name for item in records}),
        latest_rotation=max((item.rotation for item in records), default=None),
        average_overall=_mean([item.overall for item in records]),
    )


@dataclass(frozen=True)
class ParticipantView:
    mdp_name: str
    rotations: list[EvaluationRecord]
    latest: EvaluationRecord
    top_rotation: EvaluationRecord
    extrema: AreaExtrema


def participant_view(records: Sequence[EvaluationRecord], mdp_name: str) -> ParticipantView | None:
    rows = [item for item in records if item.mdp_name == mdp_name]
    if not rows:
        return None
    latest = max(reversed(rows), key=lambda item: item.submitted)
    ordered = sorted(rows, key=lambda item: item.rotation)
    top = ordered[0]
    for item in ordered[1:]:
        if item.overall > top.overall:
            top = item
    return ParticipantView(
        mdp_name=mdp_name,
        rotations=ordered,
        latest=latest,
        top_rotation=top,
        extrema=area_extrema(latest.scores),
    )
