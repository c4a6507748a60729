"""Load the demo "Customer Feedback" form."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Tuple

from django.core.management.base import BaseCommand
from django.db import transaction

from forms.layout import WidthClass, pack, validate_layout
from forms.models import Form, FormCell
from questions.models import Option, Question
from submissions.models import Answer, FormResponse, ResponseSubmission

logger = logging.getLogger(__name__)

DEMO_SLUG = "demo"

DEMO_QUESTIONS: List[Tuple[Dict[str, Any], List[Tuple[str, str]], WidthClass]] = [
    ({"label": "Your Name", "question_type": Question.TEXT, "required": True}, [], WidthClass.HALF),
    ({"label": "Email", "question_type": Question.TEXT}, [], WidthClass.HALF),
    (
        {"label": "How satisfied are you?", "question_type": Question.RADIO, "required": True},
        [
            ("Very satisfied", "5"),
            ("Satisfied", "4"),
            ("Neutral", "3"),
            ("Dissatisfied", "2"),
            ("Very dissatisfied", "1"),
        ],
        WidthClass.FULL,
    ),
    (
        {"label": "Topics you care about", "question_type": Question.CHECKBOX},
        [("Speed", "speed"), ("Design", "design"), ("Features", "features")],
        WidthClass.FULL,
    ),
    ({"label": "Anything else?", "question_type": Question.TEXTAREA}, [], WidthClass.FULL),
    ({"label": "Visit date", "question_type": Question.DATE}, [], WidthClass.FULL),
]


class Command(BaseCommand):
    help = "Wipe form data and seed the demo feedback form at /forms/demo."

    def handle(self, *args: Any, **options: Any) -> None:
        with transaction.atomic():
            # Children first so protected foreign keys do not block the wipe.
            Answer.objects.all().delete()
            ResponseSubmission.objects.all().delete()
            FormResponse.objects.all().delete()
            FormCell.objects.all().delete()
            Option.objects.all().delete()
            Question.objects.all().delete()
            Form.objects.all().delete()

            form = Form.objects.create(
                slug=DEMO_SLUG,
                title="Customer Feedback",
                description="Tell us about your experience.",
            )

            placements = []
            for sort_order, (fields, options, width) in enumerate(DEMO_QUESTIONS):
                question = Question.objects.create(sort_order=sort_order, **fields)
                Option.objects.bulk_create(
                    Option(question=question, label=label, value=value, sort_order=index)
                    for index, (label, value) in enumerate(options)
                )
                placements.append((question.pk, width))

            cells = validate_layout(pack(placements))
            form.replace_layout(cells)

        logger.info("Seeded form %s with %d cells", form.slug, len(cells))
        self.stdout.write(self.style.SUCCESS(f"Seeded form at /forms/{DEMO_SLUG}"))
