from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse, Response

from mdp_survey.api.deps.filters import evaluation_filter
from mdp_survey.models.question import ASSESSMENT_AREAS
from mdp_survey.repositories.evaluation_repository import EvaluationRecord
from mdp_survey.services import aggregation
from mdp_survey.services.comparison import AreaDelta, BestRotation, ScoreDelta, compare
from mdp_survey.services.evaluation_service import EvaluationService
from mdp_survey.services.export_service import (
    cohort_csv,
    comparison_csv,
    export_filename,
    individual_csv,
)
from mdp_survey.services.filters import EvaluationFilter, filter_options
from mdp_survey.services.formatting import format_name, score_band
from mdp_survey.telemetry.otel import start_span

router = APIRouter(prefix="/analytics", tags=["analytics"])


def _service() -> EvaluationService:
    return EvaluationService()


async def _filtered(service: EvaluationService, filters: EvaluationFilter) -> list[EvaluationRecord]:
    return filters.apply(await service.list_evaluations())


def _area_response(area: str | None, scores: dict[str, float]) -> dict[str, Any] | None:
    if area is None:
        return None
    return {"area": area, "score": scores[area], "band": score_band(scores[area])}


def _summary_response(summary: aggregation.ParticipantSummary) -> dict[str, Any]:
    return {
        "mdpName": summary.mdp_name,
        "displayName": format_name(summary.mdp_name),
        "functions": summary.functions,
        "rotationCount": summary.rotation_count,
        "averageScore": summary.average_overall,
        "band": score_band(summary.average_overall),
        "standing": summary.standing,
        "lastSubmitted": summary.last_submitted,
    }


def _rotation_response(record: EvaluationRecord, *, is_top: bool = False) -> dict[str, Any]:
    return {
        "id": record.id,
        "rotation": record.rotation,
        "functionName": record.function_name,
        "manager": record.manager,
        "scores": record.scores,
        "overall": record.overall,
        "band": score_band(record.overall),
        "submittedAt": record.submitted_at,
        "isTopRotation": is_top,
    }


def _delta_response(row: ScoreDelta) -> dict[str, Any]:
    payload = {
        "a": row.a,
        "b": row.b,
        "delta": row.delta,
        "significant": row.significant,
        "direction": row.direction,
    }
    if isinstance(row, AreaDelta):
        payload["cohort"] = row.cohort
    return payload


def _best_response(best: BestRotation) -> dict[str, Any]:
    return {"rotation": best.rotation, "score": best.score}


@router.get("/cohort")
async def get_cohort(
    filters: EvaluationFilter = Depends(evaluation_filter),
    service: EvaluationService = Depends(_service),
):
    records = await _filtered(service, filters)
    with start_span("analytics.cohort", {"responses": len(records)}):
        averages = aggregation.cohort_averages(records)
        top = aggregation.top_performer(records)
        extrema = aggregation.area_extrema(averages.by_area)
        stats = aggregation.cohort_stats(records)
        rollup = aggregation.participant_rollup(records)
    return {
        "stats": {
            "totalResponses": stats.total_responses,
            "uniqueParticipants": stats.unique_participants,
            "latestRotation": stats.latest_rotation,
            "averageScore": stats.average_overall,
        },
        "averages": {
            "overall": averages.overall,
            "byArea": averages.by_area,
            "byRotation": averages.by_rotation,
        },
        "topPerformer": {
            "names": top.names,
            "displayName": top.name if top.is_tied else format_name(top.name),
            "displayNames": [format_name(name) for name in top.names],
            "score": top.score,
            "isTied": top.is_tied,
        },
        "strengthArea": _area_response(extrema.strength, averages.by_area),
        "developmentArea": _area_response(extrema.development, averages.by_area),
        "participants": [_summary_response(summary) for summary in rollup],
    }


@router.get("/filters")
async def get_filter_options(service: EvaluationService = Depends(_service)):
    records = await _filtered(service, EvaluationFilter())
    options = filter_options(records)
    options["participants"] = [
        {"mdpName": name, "displayName": format_name(name)} for name in options["mdpNames"]
    ]
    return options


@router.get("/compare")
async def get_comparison(
    mdp_a: str = Query(..., alias="a", min_length=1),
    mdp_b: str = Query(..., alias="b", min_length=1),
    significant_only: bool = Query(False, alias="significantOnly"),
    filters: EvaluationFilter = Depends(evaluation_filter),
    service: EvaluationService = Depends(_service),
):
    if mdp_a == mdp_b:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Select two different associates to compare.", "kind": "validation"},
        )
    records = await _filtered(service, filters)
    with start_span("analytics.compare", {"responses": len(records)}):
        result = compare(records, mdp_a, mdp_b)
    rows = result.significant_areas() if significant_only else result.by_area
    return {
        "a": {"mdpName": mdp_a, "displayName": format_name(mdp_a)},
        "b": {"mdpName": mdp_b, "displayName": format_name(mdp_b)},
        "overall": _delta_response(result.overall),
        "bestRotation": {
            "a": _best_response(result.best_rotation_a),
            "b": _best_response(result.best_rotation_b),
        },
        "byArea": {area: _delta_response(rows[area]) for area in ASSESSMENT_AREAS if area in rows},
    }


@router.get("/participants/{mdp_name}")
async def get_participant(
    mdp_name: str,
    filters: EvaluationFilter = Depends(evaluation_filter),
    service: EvaluationService = Depends(_service),
):
    records = await _filtered(service, filters)
    view = aggregation.participant_view(records, mdp_name)
    if view is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Participant not found")
    latest_scores = view.latest.scores
    return {
        "mdpName": view.mdp_name,
        "displayName": format_name(view.mdp_name),
        "latest": _rotation_response(view.latest),
        "topRotation": {"rotation": view.top_rotation.rotation, "score": view.top_rotation.overall},
        "strengthArea": _area_response(view.extrema.strength, latest_scores),
        "developmentArea": _area_response(view.extrema.development, latest_scores),
        "rotations": [
            _rotation_response(record, is_top=record.rotation == view.top_rotation.rotation)
            for record in view.rotations
        ],
    }


@router.get("/export.csv")
async def export_view(
    view: str = Query("cohort", pattern="^(cohort|compare|individual)$"),
    mdp_a: str | None = Query(None, alias="a"),
    mdp_b: str | None = Query(None, alias="b"),
    mdp_name: str | None = Query(None, alias="mdpName"),
    filters: EvaluationFilter = Depends(evaluation_filter),
    service: EvaluationService = Depends(_service),
):
    records = await _filtered(service, filters)
    if view == "compare":
        if not mdp_a or not mdp_b:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="a and b are required")
        content = comparison_csv(records, mdp_a, mdp_b)
    elif view == "individual":
        if not mdp_name:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="mdpName is required")
        content = individual_csv(records, mdp_name)
    else:
        content = cohort_csv(records)
    filename = export_filename(view, mdp_a=mdp_a or "", mdp_b=mdp_b or "", mdp_name=mdp_name or "")
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
