from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException, status

from mdp_survey.models.question import (
    AREA_WEIGHTS,
    ASSESSMENT_AREAS,
    FUNCTIONS,
    RATING_LABELS,
    Question,
    questions_for,
)

router = APIRouter(prefix="/questions", tags=["questions"])


def _question_response(question: Question) -> dict[str, Any]:
    return {
        "id": question.id,
        "text": question.text,
        "area": question.area,
        "weight": question.weight,
    }


@router.get("")
def list_functions() -> dict[str, Any]:
    return {
        "functions": list(FUNCTIONS),
        "areas": [{"name": area, "weight": AREA_WEIGHTS[area]} for area in ASSESSMENT_AREAS],
        "ratingLabels": list(RATING_LABELS),
    }


@router.get("/{function_name}")
def get_questions(function_name: str) -> dict[str, Any]:
    questions = questions_for(function_name)
    if questions is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Unknown function")
    return {
        "functionName": function_name,
        "questions": [_question_response(question) for question in questions],
    }
