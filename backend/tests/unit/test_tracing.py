import json
import logging

from mdp_survey.telemetry.otel import start_span
from mdp_survey.telemetry.tracing import emit_event, emit_metric


def _last_payload(caplog):
    assert caplog.records
    return json.loads(caplog.records[-1].message)


def test_emit_event_includes_participant_and_evaluation(caplog):
    caplog.set_level("INFO")

    emit_event(
        "evaluation.submitted",
        participant="Jane Doe",
        evaluation_id="eval-1",
        attributes={"rotation": 2},
    )

    payload = _last_payload(caplog)
    assert payload["type"] == "event"
    assert payload["name"] == "evaluation.submitted"
    assert payload["mdpName"] == "Jane Doe"
    assert payload["evaluationId"] == "eval-1"
    assert payload["attributes"] == {"rotation": 2}


def test_emit_metric_includes_value_and_ids(caplog):
    caplog.set_level("INFO")

    emit_metric("evaluation.overall", 4.25, participant="Jane Doe", evaluation_id="eval-2")

    payload = _last_payload(caplog)
    assert payload["type"] == "metric"
    assert payload["value"] == 4.25
    assert payload["evaluationId"] == "eval-2"
    assert payload["attributes"] == {}


def test_span_logs_duration_even_on_error(caplog):
    caplog.set_level(logging.DEBUG, logger="mdp_survey.telemetry.spans")

    try:
        with start_span("evaluation.store", {"operation": "append"}) as span:
            span["attributes"]["mdpName"] = "Jane Doe"
            raise RuntimeError("boom")
    except RuntimeError:
        pass

    message = caplog.records[-1].getMessage()
    assert "name=evaluation.store" in message
    assert "mdpName" in message
