from fastapi import APIRouter

from mdp_survey.api.routes.analytics import router as analytics_router
from mdp_survey.api.routes.evaluations import router as evaluations_router
from mdp_survey.api.routes.questions import router as questions_router

api_router = APIRouter()
api_router.include_router(evaluations_router)
api_router.include_router(analytics_router)
api_router.include_router(questions_router)


@api_router.get("/healthz")
def healthcheck() -> dict[str, str]:
    return {"status": "ok"}
