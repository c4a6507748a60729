"""Database models for the question bank."""
from __future__ import annotations

from django.db import models


class Question(models.Model):
    """A reusable question definition that forms place on their grid."""

    TEXT = "text"
    TEXTAREA = "textarea"
    RADIO = "radio"
    CHECKBOX = "checkbox"
    SELECT = "select"
    NUMBER = "number"
    DATE = "date"
    FILE = "file"

    QUESTION_TYPES = [
        (TEXT, "Single-line text"),
        (TEXTAREA, "Multi-line text"),
        (RADIO, "Single choice"),
        (CHECKBOX, "Multiple choice"),
        (SELECT, "Dropdown"),
        (NUMBER, "Number"),
        (DATE, "Date"),
        (FILE, "File"),
    ]

    CHOICE_TYPES = frozenset({RADIO, CHECKBOX, SELECT})

    label = models.CharField(max_length=255)
    question_type = models.CharField(max_length=32, choices=QUESTION_TYPES)
    required = models.BooleanField(default=False)
    help_text = models.TextField(blank=True)
    file_multiple = models.BooleanField(null=True, blank=True)
    sort_order = models.IntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["sort_order", "created_at", "id"]

    def __str__(self) -> str:
        return f"{self.label} ({self.question_type})"

    @property
    def has_options(self) -> bool:
        return self.question_type in self.CHOICE_TYPES


class Option(models.Model):
    """A label/value pair offered by a choice question."""

    question = models.ForeignKey(Question, related_name="options", on_delete=models.CASCADE)
    label = models.CharField(max_length=255)
    value = models.CharField(max_length=255)
    sort_order = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["sort_order", "id"]

    def __str__(self) -> str:
        return self.label
