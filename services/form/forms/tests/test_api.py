"""API tests for forms and their grid layouts."""
from __future__ import annotations

from django.test import TestCase
from django.urls import reverse
from rest_framework.test import APIClient

from forms.models import Form, FormCell
from questions.models import Option, Question


class FormApiTests(TestCase):
    def setUp(self) -> None:
        self.client = APIClient()
        self.name = Question.objects.create(label="Name", question_type=Question.TEXT, required=True)
        self.email = Question.objects.create(label="Email", question_type=Question.TEXT)
        self.rating = Question.objects.create(label="Rating", question_type=Question.RADIO)
        Option.objects.create(question=self.rating, label="Good", value="good", sort_order=0)
        Option.objects.create(question=self.rating, label="Bad", value="bad", sort_order=1)

    def _create(self, **overrides):
        payload = {
            "title": "Customer Feedback",
            "instances": [
                {"question": self.rating.id},
                {"question": self.name.id, "width": "half"},
                {"question": self.email.id, "width": "half"},
            ],
        }
        payload.update(overrides)
        payload = {key: value for key, value in payload.items() if value is not None}
        return self.client.post(reverse("form-list"), payload, format="json")

    def test_create_form_from_instances_packs_grid(self) -> None:
        response = self._create()
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["slug"], "customer-feedback")
        self.assertEqual(
            [(item["question"], item["row"], item["col"], item["span"]) for item in response.data["items"]],
            [
                (self.rating.id, 1, 1, 12),
                (self.name.id, 2, 1, 6),
                (self.email.id, 2, 2, 6),
            ],
        )
        self.assertEqual(FormCell.objects.filter(form__slug="customer-feedback").count(), 3)

    def test_create_form_from_items(self) -> None:
        response = self.client.post(
            reverse("form-list"),
            {
                "title": "Intake",
                "slug": "Intake Form!",
                "items": [
                    {"question": self.name.id, "row": 1, "col": 1, "span": 4},
                    {"question": self.email.id, "row": 1, "col": 2, "span": 8},
                ],
            },
            format="json",
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["slug"], "intake-form")
        self.assertEqual([item["span"] for item in response.data["items"]], [4, 8])

    def test_duplicate_title_gets_suffixed_slug(self) -> None:
        self.assertEqual(self._create().data["slug"], "customer-feedback")
        self.assertEqual(self._create().data["slug"], "customer-feedback-2")
        self.assertEqual(self._create().data["slug"], "customer-feedback-3")

    def test_reserved_slug_is_never_assigned(self) -> None:
        response = self._create(title="Preview")
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["slug"], "preview-2")

    def test_empty_layout_is_rejected(self) -> None:
        response = self.client.post(reverse("form-list"), {"title": "Blank"}, format="json")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["layout"]["kind"], "EmptyLayout")
        self.assertFalse(Form.objects.exists())

    def test_invalid_row_is_rejected(self) -> None:
        response = self._create(
            instances=None,
            items=[{"question": self.name.id, "row": 1, "col": 1, "span": 6}],
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["layout"]["kind"], "InvalidRowLayout")
        self.assertEqual(str(response.data["layout"]["context"]["signature"]), "6")

    def test_duplicate_slot_is_rejected(self) -> None:
        response = self.client.post(
            reverse("form-list"),
            {
                "title": "Clash",
                "items": [
                    {"question": self.name.id, "row": 1, "col": 1, "span": 6},
                    {"question": self.email.id, "row": 1, "col": 1, "span": 6},
                ],
            },
            format="json",
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["layout"]["kind"], "DuplicateSlot")

    def test_bad_cell_field_is_rejected(self) -> None:
        response = self.client.post(
            reverse("form-list"),
            {"title": "Bad", "items": [{"question": self.name.id, "row": 0, "col": 1, "span": 12}]},
            format="json",
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["layout"]["kind"], "InvalidCellField")

    def test_unknown_question_is_rejected(self) -> None:
        response = self.client.post(
            reverse("form-list"),
            {"title": "Ghost", "items": [{"question": 9999, "row": 1, "col": 1, "span": 12}]},
            format="json",
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn("items", response.data)

        response = self._create(instances=[{"question": 9999}])
        self.assertEqual(response.status_code, 400)
        self.assertIn("instances", response.data)

    def test_non_integer_question_ids_are_rejected(self) -> None:
        for question in (self.name.id + 0.9, True):
            with self.subTest(question=question):
                response = self.client.post(
                    reverse("form-list"),
                    {"title": "Odd", "items": [{"question": question, "row": 1, "col": 1, "span": 12}]},
                    format="json",
                )
                self.assertEqual(response.status_code, 400)
                self.assertEqual(response.data["layout"]["kind"], "InvalidCellField")

        response = self.client.post(
            reverse("form-list"),
            {"title": "Odd", "items": [{"question": "1e0", "row": 1, "col": 1, "span": 12}]},
            format="json",
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn("items", response.data)
        self.assertFalse(Form.objects.exists())

    def test_numeric_string_question_id_is_accepted(self) -> None:
        response = self.client.post(
            reverse("form-list"),
            {"title": "Text ids", "items": [{"question": str(self.name.id), "row": 1, "col": 1, "span": 12}]},
            format="json",
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["items"][0]["question"], self.name.id)

    def test_null_description_is_stored_blank(self) -> None:
        response = self.client.post(
            reverse("form-list"),
            {"title": "Customer Feedback", "description": None, "instances": [{"question": self.name.id}]},
            format="json",
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["description"], "")

        response = self.client.put(
            reverse("form-detail", args=[response.data["slug"]]),
            {
                "title": "Customer Feedback",
                "description": None,
                "instances": [{"question": self.name.id}],
            },
            format="json",
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["description"], "")

    def test_long_title_slug_fits_column(self) -> None:
        title = "a" * 255
        first = self._create(title=title)
        second = self._create(title=title)
        self.assertEqual(first.status_code, 201)
        self.assertEqual(second.status_code, 201)
        self.assertEqual(len(first.data["slug"]), 255)
        self.assertEqual(second.data["slug"], "a" * 253 + "-2")

    def test_items_and_instances_together_are_rejected(self) -> None:
        response = self._create(items=[{"question": self.name.id, "row": 1, "col": 1, "span": 12}])
        self.assertEqual(response.status_code, 400)

    def test_update_replaces_layout_and_keeps_slug(self) -> None:
        slug = self._create().data["slug"]
        response = self.client.patch(
            reverse("form-detail", args=[slug]),
            {"title": "Renamed", "instances": [{"question": self.name.id}]},
            format="json",
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["slug"], slug)
        self.assertEqual(response.data["title"], "Renamed")
        self.assertEqual(
            [(item["question"], item["span"]) for item in response.data["items"]],
            [(self.name.id, 12)],
        )

    def test_partial_update_without_layout_keeps_grid(self) -> None:
        slug = self._create().data["slug"]
        response = self.client.patch(
            reverse("form-detail", args=[slug]), {"description": "Updated"}, format="json"
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.data["items"]), 3)

    def test_rejected_update_leaves_layout_untouched(self) -> None:
        slug = self._create().data["slug"]
        response = self.client.patch(
            reverse("form-detail", args=[slug]),
            {"items": [{"question": self.name.id, "row": 1, "col": 1, "span": 8}]},
            format="json",
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(FormCell.objects.filter(form__slug=slug).count(), 3)

    def test_slug_conflict_returns_409(self) -> None:
        self._create(title="First")
        slug = self._create(title="Second").data["slug"]
        response = self.client.patch(
            reverse("form-detail", args=[slug]), {"slug": "first"}, format="json"
        )
        self.assertEqual(response.status_code, 409)

        response = self.client.patch(
            reverse("form-detail", args=[slug]), {"slug": "Brand New"}, format="json"
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["slug"], "brand-new")

    def test_delete_form_removes_cells(self) -> None:
        slug = self._create().data["slug"]
        response = self.client.delete(reverse("form-detail", args=[slug]))
        self.assertEqual(response.status_code, 204)
        self.assertFalse(FormCell.objects.exists())
        self.assertEqual(Question.objects.count(), 3)

    def test_editor_rebuilds_instances(self) -> None:
        slug = self._create().data["slug"]
        response = self.client.get(reverse("form-editor", args=[slug]))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            [(item["question"], item["width"], item["span"]) for item in response.data["instances"]],
            [
                (self.rating.id, "full", 12),
                (self.name.id, "half", 6),
                (self.email.id, "half", 6),
            ],
        )
        self.assertTrue(all(item["instance_id"].startswith("inst_") for item in response.data["instances"]))

    def test_published_groups_cells_into_rows(self) -> None:
        slug = self._create().data["slug"]
        response = self.client.get(reverse("form-published", args=[slug]))
        self.assertEqual(response.status_code, 200)
        rows = response.data["rows"]
        self.assertEqual([row["signature"] for row in rows], ["12", "6,6"])
        first = rows[0]["cells"][0]
        self.assertEqual(first["column_class"], "col-md-12")
        self.assertEqual(first["question"]["label"], "Rating")
        self.assertEqual([option["value"] for option in first["question"]["options"]], ["good", "bad"])

    def test_preview_packs_without_saving(self) -> None:
        response = self.client.post(
            reverse("form-preview"),
            {
                "instances": [
                    {"question": self.name.id, "width": "one_third"},
                    {"question": self.email.id, "width": "two_thirds"},
                    {"question": self.rating.id},
                ]
            },
            format="json",
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["rows"], ["4,8", "12"])
        self.assertFalse(Form.objects.exists())

    def test_preview_reports_layout_errors(self) -> None:
        response = self.client.post(
            reverse("form-preview"),
            {"instances": [{"question": self.name.id, "width": "half"}]},
            format="json",
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["layout"]["kind"], "InvalidRowLayout")

    def test_search_forms(self) -> None:
        self._create(title="Onboarding")
        self._create(title="Offboarding")
        response = self.client.get(reverse("form-list"), {"search": "Onboard"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual([form["title"] for form in response.data], ["Onboarding"])
