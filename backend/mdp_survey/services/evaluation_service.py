from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

from mdp_survey.config import load_settings
from mdp_survey.errors import SurveyError, ValidationError
from mdp_survey.models.evaluation import EvaluationCreate
from mdp_survey.models.question import AREA_FIELDS, FUNCTIONS, questions_for
from mdp_survey.repositories.evaluation_repository import EvaluationRecord, EvaluationRepository
from mdp_survey.services.formatting import normalize_manager
from mdp_survey.services.rotation import assign_rotation, completed_functions, next_rotation
from mdp_survey.services.scoring import calculate_scores
from mdp_survey.tasks import notification_runner
from mdp_survey.telemetry.otel import start_span
from mdp_survey.telemetry.tracing import emit_event, emit_metric

logger = logging.getLogger(__name__)

ANONYMOUS = "Anonymous"
UNSPECIFIED_MANAGER = "Not specified"


@dataclass(frozen=True)
class RotationPreview:
    mdp_name: str
    next_rotation: int
    completed_functions: list[str]
    available_functions: list[str]


def _repo() -> EvaluationRepository:
    return EvaluationRepository(load_settings().data_file)


def _history(records: list[EvaluationRecord], mdp_name: str) -> list[EvaluationRecord]:
    history = [item for item in records if item.mdp_name == mdp_name]
    history.sort(key=lambda item: item.submitted)
    return history


class EvaluationService:
    def __init__(
        self,
        repo: EvaluationRepository | None = None,
        *,
        notify: Callable[[EvaluationRecord], None] | None = None,
    ) -> None:
        self.repo = repo or _repo()
        self._notify = notify or notification_runner.enqueue

    async def list_evaluations(self) -> list[EvaluationRecord]:
        with start_span("evaluation.store", {"operation": "list"}):
            return await self.repo.list_evaluations()

    async def submit(self, data: EvaluationCreate) -> EvaluationRecord:
        mdp_name = data.mdpName.strip() or ANONYMOUS
        try:
            questions = questions_for(data.functionName)
            if questions is None:
                raise ValidationError(
                    f"Unknown function '{data.functionName}'. Expected one of: {', '.join(FUNCTIONS)}"
                )
            with start_span("evaluation.score", {"functionName": data.functionName}):
                result = calculate_scores(data.responses, questions)
            manager = normalize_manager(data.manager) or UNSPECIFIED_MANAGER

            def build(records: list[EvaluationRecord]) -> dict[str, Any]:
                history = _history(records, mdp_name)
                rotation = assign_rotation(mdp_name, data.functionName, history)
                payload: dict[str, Any] = {
                    "mdpName": mdp_name,
                    "functionName": data.functionName,
                    "manager": manager,
                    "rotation": rotation,
                    "responses": {question.id: data.responses[question.id] for question in questions},
                }
                for area, score in result.area_scores.items():
                    payload[AREA_FIELDS[area]] = score
                payload["overall"] = result.overall
                payload["emailResponse"] = data.emailResponse
                payload["respondentEmail"] = data.respondentEmail
                return payload

            with start_span("evaluation.store", {"operation": "append", "mdpName": mdp_name}):
                record = await self.repo.append_with(build)
        except SurveyError as exc:
            logger.info("Evaluation rejected mdp=%s kind=%s error=%s", mdp_name, exc.kind, exc)
            emit_event(
                "evaluation.rejected",
                participant=mdp_name,
                attributes={"kind": exc.kind, "functionName": data.functionName},
            )
            raise

        emit_event(
            "evaluation.submitted",
            participant=record.mdp_name,
            evaluation_id=record.id,
            attributes={"rotation": record.rotation, "functionName": record.function_name},
        )
        emit_metric(
            "evaluation.overall",
            record.overall,
            participant=record.mdp_name,
            evaluation_id=record.id,
        )
        self._notify(record)
        return record

    async def delete(self, evaluation_id: str) -> bool:
        with start_span("evaluation.store", {"operation": "delete", "evaluationId": evaluation_id}):
            removed = await self.repo.remove(evaluation_id)
        if removed:
            emit_event("evaluation.deleted", evaluation_id=evaluation_id)
        else:
            logger.info("Delete of unknown evaluation ignored evaluation_id=%s", evaluation_id)
        return removed

    async def preview_rotation(self, mdp_name: str) -> RotationPreview:
        mdp_name = mdp_name.strip() or ANONYMOUS
        history = _history(await self.repo.list_evaluations(), mdp_name)
        completed = completed_functions(history)
        return RotationPreview(
            mdp_name=mdp_name,
            next_rotation=next_rotation(history),
            completed_functions=completed,
            available_functions=[name for name in FUNCTIONS if name not in completed],
        )
