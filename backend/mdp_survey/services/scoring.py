from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from mdp_survey.errors import ValidationError
from mdp_survey.models.question import AREA_WEIGHTS, ASSESSMENT_AREAS, Question
from mdp_survey.services.formatting import round_half_up

MIN_RATING = 1
MAX_RATING = 5


@dataclass(frozen=True)
class ScoreResult:
    area_scores: dict[str, float]
    overall: float


def validate_responses(responses: Mapping[str, Any], questions: Sequence[Question]) -> dict[str, int]:
    expected = [question.id for question in questions]
    missing = [question_id for question_id in expected if question_id not in responses]
    if missing:
        raise ValidationError(f"Missing ratings for questions: {', '.join(missing)}")
    unexpected = sorted(set(responses) - set(expected))
    if unexpected:
        raise ValidationError(f"Unknown questions in response: {', '.join(unexpected)}")
    ratings: dict[str, int] = {}
    for question_id in expected:
        rating = responses[question_id]
        if isinstance(rating, bool) or not isinstance(rating, int):
            raise ValidationError(f"Rating for {question_id} must be an integer")
        if rating < MIN_RATING or rating > MAX_RATING:
            raise ValidationError(
                f"Rating for {question_id} must be between {MIN_RATING} and {MAX_RATING}"
            )
        ratings[question_id] = rating
    return ratings


def area_score(ratings: Mapping[str, int], area: str, questions: Sequence[Question]) -> float:
    area_questions = [question for question in questions if question.area == area]
    if not area_questions:
        return 0.0
    total = sum(ratings[question.id] for question in area_questions)
    return round_half_up(total / len(area_questions))


def overall_score(area_scores: Mapping[str, float]) -> float:
    # A zero area score means the area had no questions, not a rating of zero.
    weighted_total = 0.0
    total_weight = 0.0
    for area in ASSESSMENT_AREAS:
        score = area_scores.get(area, 0.0)
        if score > 0:
            weighted_total += score * AREA_WEIGHTS[area]
            total_weight += AREA_WEIGHTS[area]
    if total_weight <= 0:
        return 0.0
    return round_half_up(weighted_total / total_weight)


def calculate_scores(responses: Mapping[str, Any], questions: Sequence[Question]) -> ScoreResult:
    ratings = validate_responses(responses, questions)
    scores = {area: area_score(ratings, area, questions) for area in ASSESSMENT_AREAS}
    return ScoreResult(area_scores=scores, overall=overall_score(scores))
