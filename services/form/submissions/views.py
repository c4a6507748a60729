"""API views for collecting and reviewing responses."""
from __future__ import annotations

import logging
import uuid
from typing import Any, Dict

from django.db import transaction
from django.db.models import Count, Min, Q
from django.utils import timezone
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response

from .models import FormResponse, ResponseSubmission
from .serializers import (
    FormResponseSerializer,
    FormResponseSummarySerializer,
    ResponseSubmissionRequestSerializer,
    ResponseSubmissionSerializer,
)
from .tasks import process_response_submission

logger = logging.getLogger(__name__)

OPEN_STATUSES = (ResponseSubmission.PENDING, ResponseSubmission.PROCESSING)


class FormResponseViewSet(viewsets.ReadOnlyModelViewSet):
    """Responses newest first; ``?form=<slug>`` narrows to one form."""

    queryset = (
        FormResponse.objects.select_related("form")
        .prefetch_related("answers__question__options")
        .all()
    )
    lookup_value_regex = r"\d+"

    def get_queryset(self):  # type: ignore[override]
        queryset = super().get_queryset()
        slug = self.request.query_params.get("form")
        if slug:
            queryset = queryset.filter(form__slug=slug)
        return queryset

    def get_serializer_class(self):  # type: ignore[override]
        if self.action == "list":
            return FormResponseSummarySerializer
        return FormResponseSerializer

    @action(detail=False, methods=["get"], url_path="queue-metrics")
    def queue_metrics(self, request: Request) -> Response:
        """Submission counts per status and the age of the oldest open one."""

        stats: Dict[str, Any] = ResponseSubmission.objects.aggregate(
            **{
                value: Count("id", filter=Q(status=value))
                for value, _ in ResponseSubmission.STATUS_CHOICES
            },
            oldest_open=Min("created_at", filter=Q(status__in=OPEN_STATUSES)),
        )
        oldest_open = stats.pop("oldest_open")
        wait_seconds = 0
        if oldest_open is not None:
            wait_seconds = max(int((timezone.now() - oldest_open).total_seconds()), 0)
        return Response({**stats, "oldestPendingSeconds": wait_seconds})


def _enqueue(submission: ResponseSubmission) -> None:
    """Hand the submission to the worker once the surrounding transaction commits."""

    submission_id = str(submission.id)
    transaction.on_commit(lambda: process_response_submission.delay(submission_id))


class ResponseSubmissionViewSet(
    mixins.CreateModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    queryset = ResponseSubmission.objects.select_related("form", "response").all()
    serializer_class = ResponseSubmissionSerializer
    lookup_field = "id"
    lookup_value_regex = r"[0-9a-f\-]+"

    def create(self, request: Request, *args, **kwargs):  # type: ignore[override]
        payload_serializer = ResponseSubmissionRequestSerializer(data=request.data)
        payload_serializer.is_valid(raise_exception=True)
        data = payload_serializer.validated_data
        payload = payload_serializer.to_payload()
        client_reference = data.get("client_reference")

        with transaction.atomic():
            submission = None
            if client_reference is not None:
                submission = (
                    ResponseSubmission.objects.select_for_update()
                    .filter(client_reference=client_reference)
                    .first()
                )

            if submission is None:
                submission = ResponseSubmission.objects.create(
                    client_reference=client_reference or uuid.uuid4(),
                    form=data["form"],
                    request_payload=payload,
                )
                _enqueue(submission)
                return Response(
                    self.get_serializer(submission).data, status=status.HTTP_202_ACCEPTED
                )

            if submission.status == ResponseSubmission.FAILED:
                logger.info("Requeueing failed submission %s", submission.id)
                submission.status = ResponseSubmission.PENDING
                submission.error_message = ""
                submission.response = None
                submission.completed_at = None
                submission.request_payload = payload
                submission.save(
                    update_fields=[
                        "status",
                        "error_message",
                        "response",
                        "completed_at",
                        "request_payload",
                        "updated_at",
                    ]
                )
            if submission.status in OPEN_STATUSES:
                _enqueue(submission)

        if submission.status == ResponseSubmission.COMPLETED:
            return Response(self.get_serializer(submission).data, status=status.HTTP_200_OK)
        return Response(self.get_serializer(submission).data, status=status.HTTP_202_ACCEPTED)
