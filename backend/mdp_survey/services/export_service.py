from __future__ import annotations

import csv
import io
from typing import Any, Sequence

from mdp_survey.models.question import (
    ASSESSMENT_AREAS,
    COMMUNICATION,
    INITIATIVE,
    JOB_KNOWLEDGE,
    QUALITY_OF_WORK,
    question_ids,
)
from mdp_survey.repositories.evaluation_repository import EvaluationRecord
from mdp_survey.services.aggregation import participant_rollup
from mdp_survey.services.formatting import format_name, to_fixed

QUESTION_COLUMNS = [f"Q{index}" for index in range(1, 11)]

RESPONSE_HEADERS = [
    "MDP Name",
    "Function",
    "Manager",
    "Rotation",
    "Overall Score",
    "Job Knowledge",
    "Quality of Work",
    "Communication",
    "Initiative",
    "Submitted Date",
    *QUESTION_COLUMNS,
]

COHORT_HEADERS = [
    "MDP Name",
    "Functions",
    "Rotation Count",
    "Average Score",
    "Last Submitted",
    "Standing",
]

INDIVIDUAL_HEADERS = [
    "Rotation",
    "Function",
    "Job Knowledge",
    "Quality of Work",
    "Communication",
    "Initiative",
    "Overall",
    "Manager",
    "Submitted",
]


def to_csv(rows: Sequence[Sequence[Any]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerows(rows)
    return buffer.getvalue()


def _date(record_timestamp: str) -> str:
    return record_timestamp[:10]


def _datetime(record_timestamp: str) -> str:
    return record_timestamp[:19].replace("T", " ")


def _ordered_ratings(record: EvaluationRecord) -> list[Any]:
    ids = question_ids(record.function_name) or sorted(
        record.responses, key=lambda key: int(key[1:]) if key[1:].isdigit() else 0
    )
    return [record.responses.get(question_id, "") for question_id in ids]


def responses_csv(records: Sequence[EvaluationRecord]) -> str:
    if not records:
        return ""
    rows: list[list[Any]] = [RESPONSE_HEADERS]
    for record in records:
        rows.append(
            [
                format_name(record.mdp_name),
                record.function_name,
                record.manager,
                record.rotation,
                to_fixed(record.overall),
                to_fixed(record.job_knowledge),
                to_fixed(record.quality_of_work),
                to_fixed(record.communication),
                to_fixed(record.initiative),
                _datetime(record.submitted_at),
                *_ordered_ratings(record),
            ]
        )
    return to_csv(rows)


def cohort_csv(records: Sequence[EvaluationRecord]) -> str:
    rows: list[list[Any]] = [COHORT_HEADERS]
    for summary in participant_rollup(records):
        rows.append(
            [
                format_name(summary.mdp_name),
                "; ".join(summary.functions),
                summary.rotation_count,
                to_fixed(summary.average_overall),
                _date(summary.last_submitted),
                f"#{summary.standing}",
            ]
        )
    return to_csv(rows)


def _mean(values: list[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def comparison_csv(records: Sequence[EvaluationRecord], mdp_a: str, mdp_b: str) -> str:
    rows_a = [item for item in records if item.mdp_name == mdp_a]
    rows_b = [item for item in records if item.mdp_name == mdp_b]
    average_a = _mean([item.overall for item in rows_a])
    average_b = _mean([item.overall for item in rows_b])
    rows: list[list[Any]] = [
        ["Metric", format_name(mdp_a), format_name(mdp_b), "Difference"],
        ["Overall Average", to_fixed(average_a), to_fixed(average_b), to_fixed(average_a - average_b)],
        ["Rotation Count", len(rows_a), len(rows_b), len(rows_a) - len(rows_b)],
    ]
    for area in ASSESSMENT_AREAS:
        area_a = _mean([item.scores[area] for item in rows_a])
        area_b = _mean([item.scores[area] for item in rows_b])
        rows.append([area, to_fixed(area_a), to_fixed(area_b), to_fixed(area_a - area_b)])
    return to_csv(rows)


def individual_csv(records: Sequence[EvaluationRecord], mdp_name: str) -> str:
    rows: list[list[Any]] = [INDIVIDUAL_HEADERS]
    for item in records:
        if item.mdp_name != mdp_name:
            continue
        scores = item.scores
        rows.append(
            [
                f"Rotation {item.rotation}",
                item.function_name,
                to_fixed(scores[JOB_KNOWLEDGE], 1),
                to_fixed(scores[QUALITY_OF_WORK], 1),
                to_fixed(scores[COMMUNICATION], 1),
                to_fixed(scores[INITIATIVE], 1),
                to_fixed(item.overall),
                item.manager,
                _date(item.submitted_at),
            ]
        )
    return to_csv(rows)


def export_filename(view: str, *, mdp_a: str = "", mdp_b: str = "", mdp_name: str = "") -> str:
    if view == "compare":
        return f"MDP_Comparison_{mdp_a}_vs_{mdp_b}.csv"
    if view == "individual":
        return f"MDP_Individual_{mdp_name}.csv"
    return "MDP_Cohort_Performance.csv"
