from __future__ import annotations

from contextlib import contextmanager
import logging
import time
from typing import Any

logger = logging.getLogger("mdp_survey.telemetry.spans")


@contextmanager
def start_span(name: str, attributes: dict[str, Any] | None = None):
    span = {"name": name, "attributes": attributes or {}}
    started = time.perf_counter()
    try:
        yield span
    finally:
        logger.debug(
            "span name=%s duration_ms=%.2f attributes=%s",
            name,
            (time.perf_counter() - started) * 1000,
            span["attributes"],
        )
