from fastapi import Query

from mdp_survey.services.filters import EvaluationFilter


def evaluation_filter(
    function_name: str | None = Query(None, alias="function"),
    manager: str | None = Query(None),
    rotation: int | None = Query(None, ge=1),
    search: str | None = Query(None),
) -> EvaluationFilter:
    return EvaluationFilter(
        function_name=function_name or None,
        manager=manager or None,
        rotation=rotation,
        search=search or None,
    )
