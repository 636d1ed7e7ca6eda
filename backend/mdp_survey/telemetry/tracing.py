from __future__ import annotations

from datetime import datetime, timezone
import json
import logging
from typing import Any

logger = logging.getLogger("mdp_survey.telemetry")


def _telemetry_payload(
    kind: str,
    name: str,
    participant: str | None,
    evaluation_id: str | None,
    attributes: dict[str, Any] | None,
) -> dict[str, Any]:
    return {
        "type": kind,
        "name": name,
        "mdpName": participant,
        "evaluationId": evaluation_id,
        "attributes": dict(attributes or {}),
        "emittedAt": datetime.now(timezone.utc).isoformat(),
    }


def _log(payload: dict[str, Any]) -> dict[str, Any]:
    logger.info(json.dumps(payload, sort_keys=True, default=str))
    return payload


def emit_event(
    name: str,
    *,
    participant: str | None = None,
    evaluation_id: str | None = None,
    attributes: dict[str, Any] | None = None,
) -> dict[str, Any]:
    return _log(_telemetry_payload("event", name, participant, evaluation_id, attributes))


def emit_metric(
    name: str,
    value: float,
    *,
    participant: str | None = None,
    evaluation_id: str | None = None,
    attributes: dict[str, Any] | None = None,
) -> dict[str, Any]:
    payload = _telemetry_payload("metric", name, participant, evaluation_id, attributes)
    payload["value"] = value
    return _log(payload)
