from __future__ import annotations

import asyncio
import logging

from mdp_survey.clients.mailer import MailerClient
from mdp_survey.config import load_settings
from mdp_survey.repositories.evaluation_repository import EvaluationRecord, parse_timestamp
from mdp_survey.telemetry.otel import start_span
from mdp_survey.telemetry.tracing import emit_event

logger = logging.getLogger(__name__)

_PENDING: set[asyncio.Task] = set()


def _mailer() -> MailerClient | None:
    settings = load_settings()
    if not settings.notifications_enabled:
        return None
    return MailerClient(
        base_url=settings.mail_api_base,
        api_key=settings.mail_api_key,
        sender=settings.mail_sender,
    )


def build_summary(record: EvaluationRecord) -> tuple[str, str]:
    submitted = parse_timestamp(record.submitted_at).strftime("%Y-%m-%d %H:%M UTC")
    subject = f"MDP Performance Evaluation - {record.mdp_name}"
    text = "\n".join(
        [
            "MDP Performance Evaluation Summary",
            "",
            f"MDP: {record.mdp_name}",
            f"Function: {record.function_name}",
            f"Manager: {record.manager}",
            f"Rotation: {record.rotation}",
            f"Submitted: {submitted}",
            "",
            "PERFORMANCE SCORES:",
            f"- Job Knowledge: {record.job_knowledge}/5",
            f"- Quality of Work: {record.quality_of_work}/5",
            f"- Communication & Teamwork: {record.communication}/5",
            f"- Initiative & Productivity: {record.initiative}/5",
            f"- Overall Score: {record.overall}/5",
            "",
            "Thank you for completing the MDP Performance Evaluation!",
        ]
    )
    return subject, text


def enqueue(record: EvaluationRecord) -> None:
    if not record.email_response or not record.respondent_email:
        return
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        logger.warning("No running event loop; notification skipped evaluation_id=%s", record.id)
        return
    task = loop.create_task(deliver(record))
    _PENDING.add(task)
    task.add_done_callback(_PENDING.discard)


async def deliver(record: EvaluationRecord) -> bool:
    """Send the summary email once. Failures are logged, never raised or retried."""
    try:
        client = _mailer()
    except Exception as exc:
        logger.warning("Notification disabled by configuration error: %s", exc)
        return False
    if client is None:
        logger.info("Mail relay not configured; notification skipped evaluation_id=%s", record.id)
        return False
    subject, text = build_summary(record)
    try:
        with start_span("notification.send", {"evaluationId": record.id}):
            await client.send_message(to=record.respondent_email, subject=subject, text=text)
    except Exception as exc:
        logger.warning(
            "Notification failed evaluation_id=%s to=%s error=%s",
            record.id,
            record.respondent_email,
            exc,
        )
        emit_event(
            "notification.failed",
            participant=record.mdp_name,
            evaluation_id=record.id,
            attributes={"error": str(exc)},
        )
        return False
    finally:
        await client.close()
    logger.info("Notification sent evaluation_id=%s to=%s", record.id, record.respondent_email)
    emit_event("notification.sent", participant=record.mdp_name, evaluation_id=record.id)
    return True
