"""Database models for collected responses."""
from __future__ import annotations

import uuid

from django.db import models
from django.utils import timezone


class FormResponse(models.Model):
    """One respondent's completed submission of a form."""

    form = models.ForeignKey("forms.Form", related_name="responses", on_delete=models.CASCADE)
    user_email = models.EmailField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:
        return f"Response {self.pk} to {self.form_id}"


class Answer(models.Model):
    """The value given for one question; lists are kept as JSON arrays."""

    response = models.ForeignKey(FormResponse, related_name="answers", on_delete=models.CASCADE)
    question = models.ForeignKey(
        "questions.Question", related_name="answers", on_delete=models.PROTECT
    )
    value = models.JSONField(null=True, blank=True)

    class Meta:
        ordering = ["id"]
        unique_together = ("response", "question")

    def __str__(self) -> str:
        return f"{self.question_id}: {self.value!r}"


class ResponseSubmission(models.Model):
    """Queue-backed submission used to record responses under load."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    STATUS_CHOICES = [
        (PENDING, "Pending"),
        (PROCESSING, "Processing"),
        (COMPLETED, "Completed"),
        (FAILED, "Failed"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    client_reference = models.UUIDField(default=uuid.uuid4, unique=True, editable=False)
    status = models.CharField(max_length=32, choices=STATUS_CHOICES, default=PENDING)
    form = models.ForeignKey(
        "forms.Form", related_name="submissions", on_delete=models.CASCADE
    )
    response = models.ForeignKey(
        FormResponse,
        on_delete=models.SET_NULL,
        related_name="submissions",
        null=True,
        blank=True,
    )
    request_payload = models.JSONField(default=dict)
    error_message = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="submissions_status_idx"),
            models.Index(fields=["client_reference"], name="submissions_client_ref_idx"),
        ]

    def mark_processing(self) -> None:
        self.status = self.PROCESSING
        self.save(update_fields=["status", "updated_at"])

    def mark_completed(self, response: FormResponse) -> None:
        self.response = response
        self.status = self.COMPLETED
        self.completed_at = timezone.now()
        self.error_message = ""
        self.save(update_fields=["response", "status", "completed_at", "error_message", "updated_at"])

    def mark_failed(self, message: str) -> None:
        self.status = self.FAILED
        self.error_message = message
        self.completed_at = timezone.now()
        self.save(update_fields=["status", "error_message", "completed_at", "updated_at"])
