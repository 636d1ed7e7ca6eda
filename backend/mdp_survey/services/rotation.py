from __future__ import annotations

from typing import Sequence

from mdp_survey.errors import DuplicateFunctionError, DuplicateRotationError
from mdp_survey.repositories.evaluation_repository import EvaluationRecord


def next_rotation(history: Sequence[EvaluationRecord]) -> int:
    return len(history) + 1


def assign_rotation(
    mdp_name: str, function_name: str, history: Sequence[EvaluationRecord]
) -> int:
    """Return the rotation for a new submission or raise before anything is stored.

    ``history`` holds every prior evaluation for ``mdp_name``, oldest first.
    """
    rotation = next_rotation(history)
    if any(item.rotation == rotation for item in history):
        raise DuplicateRotationError(
            f"Rotation {rotation} already exists for {mdp_name}. "
            "Only one survey per rotation allowed."
        )
    if any(item.function_name == function_name for item in history):
        raise DuplicateFunctionError(
            f"{mdp_name} has already completed the {function_name} function. "
            "Please select a different function."
        )
    return rotation


def completed_functions(history: Sequence[EvaluationRecord]) -> list[str]:
    seen: list[str] = []
    for item in history:
        if item.function_name not in seen:
            seen.append(item.function_name)
    return seen
