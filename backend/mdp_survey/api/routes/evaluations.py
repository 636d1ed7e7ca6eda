from __future__ import annotations

from dataclasses import replace
from typing import Any

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import Response

from mdp_survey.api.deps.filters import evaluation_filter
from mdp_survey.models.evaluation import EvaluationCreate
from mdp_survey.repositories.evaluation_repository import EvaluationRecord, evaluation_to_payload
from mdp_survey.services.evaluation_service import EvaluationService
from mdp_survey.services.export_service import responses_csv
from mdp_survey.services.filters import EvaluationFilter
from mdp_survey.services.formatting import format_name

router = APIRouter(prefix="/evaluations", tags=["evaluations"])


def _service() -> EvaluationService:
    return EvaluationService()


def _evaluation_response(record: EvaluationRecord) -> dict[str, Any]:
    return evaluation_to_payload(record)


@router.get("")
async def list_evaluations(service: EvaluationService = Depends(_service)):
    records = await service.list_evaluations()
    return [_evaluation_response(record) for record in records]


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_evaluation(
    payload: EvaluationCreate,
    service: EvaluationService = Depends(_service),
):
    record = await service.submit(payload)
    return _evaluation_response(record)


@router.delete("/{evaluation_id}")
async def delete_evaluation(
    evaluation_id: str,
    service: EvaluationService = Depends(_service),
):
    # Unknown ids are a no-op.
    await service.delete(evaluation_id)
    return {"success": True}


@router.get("/next-rotation")
async def get_next_rotation(
    mdp_name: str = Query(..., alias="mdpName", min_length=1),
    service: EvaluationService = Depends(_service),
):
    preview = await service.preview_rotation(mdp_name)
    return {
        "mdpName": preview.mdp_name,
        "displayName": format_name(preview.mdp_name),
        "nextRotation": preview.next_rotation,
        "completedFunctions": preview.completed_functions,
        "availableFunctions": preview.available_functions,
    }


@router.get("/export.csv")
async def export_evaluations(
    filters: EvaluationFilter = Depends(evaluation_filter),
    service: EvaluationService = Depends(_service),
):
    records = await service.list_evaluations()
    scoped = replace(filters, search_scope="all")
    return Response(
        content=responses_csv(scoped.apply(records)),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="Survey_Responses.csv"'},
    )
