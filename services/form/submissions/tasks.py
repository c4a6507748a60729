"""Background tasks for response collection."""
from __future__ import annotations

import logging
from typing import Any, Dict

from celery import shared_task
from django.db import transaction

from .models import Answer, FormResponse, ResponseSubmission

logger = logging.getLogger(__name__)


def _record_response(submission: ResponseSubmission, payload: Dict[str, Any]) -> FormResponse:
    """Write the response and one answer row per question in a single transaction."""

    with transaction.atomic():
        response = FormResponse.objects.create(
            form_id=submission.form_id,
            user_email=payload.get("user_email", ""),
        )
        Answer.objects.bulk_create(
            Answer(response=response, question_id=int(question_id), value=value)
            for question_id, value in payload.get("answers", {}).items()
        )
    return response


@shared_task(bind=True, max_retries=3, default_retry_delay=5)
def process_response_submission(self, submission_id: str) -> None:
    """Persist a response asynchronously to absorb bursty traffic."""

    submission: ResponseSubmission | None = None
    try:
        with transaction.atomic():
            submission = (
                ResponseSubmission.objects.select_for_update().get(id=submission_id)
            )
            if submission.status == ResponseSubmission.COMPLETED:
                logger.info("Submission %s already completed", submission_id)
                return
            if submission.status == ResponseSubmission.PROCESSING:
                logger.info("Submission %s already processing", submission_id)
                return
            submission.mark_processing()

        response = _record_response(submission, dict(submission.request_payload))
        submission.mark_completed(response)
        logger.info("Response %s recorded from submission %s", response.id, submission_id)
    except ResponseSubmission.DoesNotExist:
        logger.warning("Submission %s does not exist", submission_id)
    except Exception as exc:  # pragma: no cover - retries exercised in production
        logger.exception("Processing submission %s failed", submission_id)
        if submission is not None:
            if self.request.retries >= self.max_retries:
                submission.mark_failed(str(exc))
                return
            submission.status = ResponseSubmission.PENDING
            submission.save(update_fields=["status", "updated_at"])
        raise self.retry(exc=exc, countdown=min(60, 2 ** self.request.retries))
