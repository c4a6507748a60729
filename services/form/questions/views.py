"""API views for the question bank."""
from __future__ import annotations

import logging

from django.db.models import ProtectedError
from rest_framework import viewsets
from rest_framework.filters import OrderingFilter, SearchFilter

from form_service.exceptions import Conflict

from .models import Question
from .serializers import QuestionSerializer

logger = logging.getLogger(__name__)


class QuestionViewSet(viewsets.ModelViewSet):
    queryset = Question.objects.prefetch_related("options").all()
    serializer_class = QuestionSerializer
    filter_backends = [SearchFilter, OrderingFilter]
    search_fields = ["label", "question_type"]
    ordering_fields = ["sort_order", "created_at", "label"]
    ordering = ["sort_order", "created_at"]

    def perform_destroy(self, instance: Question) -> None:
        try:
            instance.delete()
        except ProtectedError as exc:
            logger.info("Refused to delete question %s: still referenced", instance.pk)
            raise Conflict("Question is used by a form or a stored response.") from exc
