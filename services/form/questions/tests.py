"""Smoke tests for the question bank API."""
from __future__ import annotations

from django.test import TestCase
from django.urls import reverse
from rest_framework.test import APIClient

from forms.models import Form, FormCell

from .models import Question


class QuestionApiTests(TestCase):
    def setUp(self) -> None:
        self.client = APIClient()

    def test_health(self) -> None:
        response = self.client.get(reverse("form-health"))
        self.assertEqual(response.status_code, 200)

    def test_create_choice_question_with_options(self) -> None:
        response = self.client.post(
            reverse("question-list"),
            {
                "label": "Favourite colour",
                "question_type": "select",
                "options": ["Red", {"label": "Dark blue", "value": "navy"}],
            },
            format="json",
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(
            [(option["label"], option["value"]) for option in response.data["options"]],
            [("Red", "Red"), ("Dark blue", "navy")],
        )
        self.assertIsNone(response.data["file_multiple"])

    def test_choice_question_requires_options(self) -> None:
        response = self.client.post(
            reverse("question-list"),
            {"label": "Pick one", "question_type": "radio"},
            format="json",
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn("options", response.data)

    def test_text_question_rejects_options(self) -> None:
        response = self.client.post(
            reverse("question-list"),
            {"label": "Name", "question_type": "text", "options": ["a"]},
            format="json",
        )
        self.assertEqual(response.status_code, 400)

    def test_file_question_keeps_multiple_flag(self) -> None:
        response = self.client.post(
            reverse("question-list"),
            {"label": "Attachments", "question_type": "file", "file_multiple": True},
            format="json",
        )
        self.assertEqual(response.status_code, 201)
        self.assertTrue(response.data["file_multiple"])

    def test_update_replaces_options(self) -> None:
        created = self.client.post(
            reverse("question-list"),
            {"label": "Size", "question_type": "radio", "options": ["S", "M"]},
            format="json",
        )
        response = self.client.patch(
            reverse("question-detail", args=[created.data["id"]]),
            {"options": ["L"]},
            format="json",
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual([option["value"] for option in response.data["options"]], ["L"])

    def test_placed_question_cannot_be_deleted(self) -> None:
        question = Question.objects.create(label="Name", question_type=Question.TEXT)
        form = Form.objects.create(slug="intake", title="Intake")
        FormCell.objects.create(form=form, question=question, row=1, col=1, span=12)

        response = self.client.delete(reverse("question-detail", args=[question.id]))
        self.assertEqual(response.status_code, 409)
        self.assertTrue(Question.objects.filter(pk=question.pk).exists())

        form.delete()
        response = self.client.delete(reverse("question-detail", args=[question.id]))
        self.assertEqual(response.status_code, 204)
