from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
import time
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable

from mdp_survey.errors import NotFoundError, PersistenceError
from mdp_survey.models.question import AREA_FIELDS, ASSESSMENT_AREAS

logger = logging.getLogger(__name__)

_WRITE_LOCKS: dict[Path, asyncio.Lock] = {}


@dataclass(frozen=True)
class EvaluationRecord:
    id: str
    mdp_name: str
    function_name: str
    manager: str
    rotation: int
    responses: dict[str, int]
    job_knowledge: float
    quality_of_work: float
    communication: float
    initiative: float
    overall: float
    submitted_at: str
    email_response: bool = False
    respondent_email: str | None = None

    @property
    def scores(self) -> dict[str, float]:
        values = (self.job_knowledge, self.quality_of_work, self.communication, self.initiative)
        return dict(zip(ASSESSMENT_AREAS, values))

    @property
    def submitted(self) -> datetime:
        return parse_timestamp(self.submitted_at)


def parse_timestamp(value: str) -> datetime:
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return datetime.min.replace(tzinfo=timezone.utc)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_timestamp(value: datetime) -> str:
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"


def _normalize_rotation(raw: Any) -> int:
    # Older records stored the rotation as "Rotation 2".
    if isinstance(raw, str):
        raw = raw.replace("Rotation", "").strip()
    try:
        return int(raw)
    except (TypeError, ValueError):
        return 0


def _normalize_score(raw: Any) -> float:
    try:
        return float(raw or 0)
    except (TypeError, ValueError):
        return 0.0


def _normalize_text(raw: Any, default: str = "") -> str:
    return raw if isinstance(raw, str) else default


def _normalize_responses(raw: Any) -> dict[str, int]:
    if not isinstance(raw, dict):
        return {}
    responses: dict[str, int] = {}
    for key, value in raw.items():
        try:
            responses[str(key)] = int(value)
        except (TypeError, ValueError):
            continue
    return responses


def evaluation_from_payload(payload: dict[str, Any]) -> EvaluationRecord:
    return EvaluationRecord(
        id=str(payload.get("id", "")),
        mdp_name=_normalize_text(payload.get("mdpName")),
        function_name=_normalize_text(payload.get("functionName")),
        manager=_normalize_text(payload.get("manager")),
        rotation=_normalize_rotation(payload.get("rotation")),
        responses=_normalize_responses(payload.get("responses")),
        job_knowledge=_normalize_score(payload.get(AREA_FIELDS[ASSESSMENT_AREAS[0]])),
        quality_of_work=_normalize_score(payload.get(AREA_FIELDS[ASSESSMENT_AREAS[1]])),
        communication=_normalize_score(payload.get(AREA_FIELDS[ASSESSMENT_AREAS[2]])),
        initiative=_normalize_score(payload.get(AREA_FIELDS[ASSESSMENT_AREAS[3]])),
        overall=_normalize_score(payload.get("overall")),
        submitted_at=_normalize_text(payload.get("submittedAt")),
        email_response=bool(payload.get("emailResponse", False)),
        respondent_email=_normalize_text(payload.get("respondentEmail")) or None,
    )


def evaluation_to_payload(record: EvaluationRecord) -> dict[str, Any]:
    return {
        "id": record.id,
        "mdpName": record.mdp_name,
        "functionName": record.function_name,
        "manager": record.manager,
        "rotation": record.rotation,
        "responses": dict(record.responses),
        "jobKnowledge": record.job_knowledge,
        "qualityOfWork": record.quality_of_work,
        "communication": record.communication,
        "initiative": record.initiative,
        "overall": record.overall,
        "submittedAt": record.submitted_at,
        "emailResponse": record.email_response,
        "respondentEmail": record.respondent_email,
    }


def _new_id() -> str:
    return f"{int(time.time() * 1000)}{uuid.uuid4().hex[:6]}"


def _write_lock(path: Path) -> asyncio.Lock:
    key = path.resolve()
    lock = _WRITE_LOCKS.get(key)
    if lock is None:
        lock = asyncio.Lock()
        _WRITE_LOCKS[key] = lock
    return lock


class EvaluationRepository:
    """Append-only evaluation collection kept as one JSON array on disk.

    Every write replaces the whole file through a temp file and ``os.replace``,
    so readers see either the previous array or the new one. Writers in this
    process are serialized per file.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = Path(path)
        self._lock = _write_lock(self._path)

    @property
    def path(self) -> Path:
        return self._path

    async def list_evaluations(self) -> list[EvaluationRecord]:
        payloads = await asyncio.to_thread(self._read)
        return [evaluation_from_payload(item) for item in payloads]

    async def list_for_participant(self, mdp_name: str) -> list[EvaluationRecord]:
        records = [item for item in await self.list_evaluations() if item.mdp_name == mdp_name]
        records.sort(key=lambda item: item.submitted)
        return records

    async def append(self, payload: dict[str, Any]) -> EvaluationRecord:
        return await self.append_with(lambda _records: payload)

    async def append_with(
        self, build: Callable[[list[EvaluationRecord]], dict[str, Any]]
    ) -> EvaluationRecord:
        """Read, build and write under the write lock.

        ``build`` receives the current records and returns the new payload; if it
        raises, nothing is written.
        """
        async with self._lock:
            payloads = await asyncio.to_thread(self._read)
            payload = build([evaluation_from_payload(item) for item in payloads])
            record = dict(payload)
            record["id"] = _new_id()
            record["submittedAt"] = format_timestamp(datetime.now(timezone.utc))
            await asyncio.to_thread(self._write, payloads + [record])
        return evaluation_from_payload(record)

    async def remove(self, evaluation_id: str) -> bool:
        try:
            await self.delete_evaluation(evaluation_id)
        except NotFoundError:
            return False
        return True

    async def delete_evaluation(self, evaluation_id: str) -> None:
        async with self._lock:
            payloads = await asyncio.to_thread(self._read)
            remaining = [item for item in payloads if str(item.get("id")) != evaluation_id]
            if len(remaining) == len(payloads):
                raise NotFoundError(f"Evaluation {evaluation_id} not found")
            await asyncio.to_thread(self._write, remaining)

    def _read(self) -> list[dict[str, Any]]:
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        except OSError as exc:
            raise PersistenceError(f"Failed to read {self._path}: {exc}") from exc
        if not text.strip():
            return []
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise PersistenceError(f"Invalid JSON in {self._path}: {exc}") from exc
        if not isinstance(data, list):
            raise PersistenceError(f"Expected a list in {self._path}")
        return [item for item in data if isinstance(item, dict)]

    def _write(self, payloads: list[dict[str, Any]]) -> None:
        tmp_name: str | None = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(payloads, handle, indent=2)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self._path)
        except OSError as exc:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            logger.error("Failed to write evaluations path=%s error=%s", self._path, exc)
            raise PersistenceError("Failed to save data") from exc
