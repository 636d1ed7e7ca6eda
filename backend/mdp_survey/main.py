from __future__ import annotations

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from mdp_survey.api.router import api_router
from mdp_survey.errors import NotFoundError, PersistenceError, SurveyError

logger = logging.getLogger(__name__)

CORS_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:3001",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:3001",
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.lifespan_started = True
    yield
    app.state.lifespan_shutdown = True


def _status_for(exc: SurveyError) -> int:
    if isinstance(exc, PersistenceError):
        return status.HTTP_500_INTERNAL_SERVER_ERROR
    if isinstance(exc, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    return status.HTTP_400_BAD_REQUEST


async def survey_error_handler(request: Request, exc: SurveyError) -> JSONResponse:
    if isinstance(exc, PersistenceError):
        logger.error("Storage failure path=%s error=%s", request.url.path, exc)
    return JSONResponse(status_code=_status_for(exc), content=exc.to_payload())


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        message = error.get("msg", "Invalid value")
        messages.append(f"{location}: {message}" if location else message)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "; ".join(messages) or "Invalid request", "kind": "validation"},
    )


app = FastAPI(lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_exception_handler(SurveyError, survey_error_handler)
app.add_exception_handler(RequestValidationError, request_validation_handler)
app.include_router(api_router, prefix="/api")
