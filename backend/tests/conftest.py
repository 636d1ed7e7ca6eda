from __future__ import annotations

import httpx
import pytest
import pytest_asyncio

from mdp_survey.main import app
from mdp_survey.models.question import question_ids
from mdp_survey.repositories.evaluation_repository import EvaluationRecord


@pytest.fixture(autouse=True)
def _set_env(monkeypatch, tmp_path):
    monkeypatch.setenv("SURVEY_DATA_FILE", str(tmp_path / "evaluations.json"))
    monkeypatch.delenv("MAIL_API_BASE", raising=False)
    monkeypatch.delenv("MAIL_API_KEY", raising=False)
    monkeypatch.delenv("MAIL_SENDER", raising=False)


@pytest.fixture
def data_file(tmp_path):
    return tmp_path / "evaluations.json"


@pytest_asyncio.fixture
async def client():
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture
def ratings():
    def _ratings(function_name: str = "Planning", value: int = 4) -> dict[str, int]:
        return {question_id: value for question_id in question_ids(function_name)}

    return _ratings


@pytest.fixture
def make_record():
    counter = {"value": 0}

    def _make(
        mdp_name: str = "Jane Doe",
        *,
        rotation: int = 1,
        function_name: str = "Planning",
        overall: float = 4.0,
        scores: tuple[float, float, float, float] | None = None,
        submitted_at: str | None = None,
        manager: str = "Pat Lee",
    ) -> EvaluationRecord:
        counter["value"] += 1
        job, quality, communication, initiative = scores or (overall, overall, overall, overall)
        return EvaluationRecord(
            id=f"eval-{counter['value']}",
            mdp_name=mdp_name,
            function_name=function_name,
            manager=manager,
            rotation=rotation,
            responses={},
            job_knowledge=job,
            quality_of_work=quality,
            communication=communication,
            initiative=initiative,
            overall=overall,
            submitted_at=submitted_at or f"2025-01-{counter['value']:02d}T09:00:00.000Z",
        )

    return _make
