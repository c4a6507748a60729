"""Tests for the demo seeding command."""
from __future__ import annotations

from io import StringIO

from django.core.management import call_command
from django.test import TestCase

from forms.layout import is_valid_layout
from forms.models import Form
from questions.models import Question


class SeedDemoTests(TestCase):
    def test_seeds_a_valid_demo_form(self) -> None:
        out = StringIO()
        call_command("seed_demo", stdout=out)

        form = Form.objects.get(slug="demo")
        self.assertEqual(form.title, "Customer Feedback")
        self.assertTrue(is_valid_layout(form.grid()))
        self.assertEqual(
            [(cell.row, cell.col, cell.span) for cell in form.grid()],
            [(1, 1, 6), (1, 2, 6), (2, 1, 12), (3, 1, 12), (4, 1, 12), (5, 1, 12)],
        )
        self.assertIn("/forms/demo", out.getvalue())

    def test_reseeding_replaces_previous_data(self) -> None:
        call_command("seed_demo", stdout=StringIO())
        call_command("seed_demo", stdout=StringIO())
        self.assertEqual(Form.objects.count(), 1)
        self.assertEqual(Question.objects.count(), 6)
