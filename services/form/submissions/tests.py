"""Smoke tests for response collection."""
from __future__ import annotations

import uuid
from unittest import mock

from django.test import SimpleTestCase, TestCase
from django.urls import reverse
from rest_framework.test import APIClient

from forms.layout import WidthClass, pack
from forms.models import Form
from questions.models import Option, Question

from .answers import EMPTY_DISPLAY, MAX_FILE_BYTES, AnswerError, clean_answer, display_value
from .models import FormResponse, ResponseSubmission
from .tasks import process_response_submission


def _run_inline(submission_id: str):
    return process_response_submission.apply(args=[submission_id])


class ResponseApiTests(TestCase):
    def setUp(self) -> None:
        self.client = APIClient()
        self.name = Question.objects.create(label="Name", question_type=Question.TEXT, required=True)
        self.rating = Question.objects.create(
            label="Rating", question_type=Question.RADIO, required=True
        )
        Option.objects.create(question=self.rating, label="Good", value="good", sort_order=0)
        Option.objects.create(question=self.rating, label="Bad", value="bad", sort_order=1)
        self.topics = Question.objects.create(label="Topics", question_type=Question.CHECKBOX)
        Option.objects.create(question=self.topics, label="Speed", value="speed", sort_order=0)
        Option.objects.create(question=self.topics, label="Design", value="design", sort_order=1)
        self.attachment = Question.objects.create(label="CV", question_type=Question.FILE)
        self.visit = Question.objects.create(label="Visit", question_type=Question.DATE)

        self.form = Form.objects.create(slug="feedback", title="Feedback")
        self.form.replace_layout(
            pack(
                [
                    (self.name.id, WidthClass.HALF),
                    (self.rating.id, WidthClass.HALF),
                    (self.topics.id, WidthClass.FULL),
                    (self.attachment.id, WidthClass.FULL),
                    (self.visit.id, WidthClass.FULL),
                ]
            )
        )

        patcher = mock.patch("submissions.views.process_response_submission")
        self.task = patcher.start()
        self.task.delay.side_effect = _run_inline
        self.addCleanup(patcher.stop)

    def _answers(self, **overrides):
        answers = {
            str(self.name.id): "Ada",
            str(self.rating.id): "good",
            str(self.topics.id): ["speed", "design"],
            str(self.attachment.id): [{"name": "cv.pdf", "size": 2048, "type": "application/pdf"}],
            str(self.visit.id): "2024-05-01",
        }
        answers.update(overrides)
        return answers

    def _submit(self, answers=None, **extra):
        payload = {"form": "feedback", "answers": answers if answers is not None else self._answers()}
        payload.update(extra)
        with self.captureOnCommitCallbacks(execute=True):
            return self.client.post(reverse("response-submission-list"), payload, format="json")

    def test_submit_response_via_queue(self) -> None:
        response = self._submit(user_email="ada@example.com")
        self.assertEqual(response.status_code, 202)
        self.task.delay.assert_called_once_with(str(response.data["id"]))

        detail = self.client.get(reverse("response-submission-detail", args=[response.data["id"]]))
        self.assertEqual(detail.status_code, 200)
        self.assertEqual(detail.data["status"], ResponseSubmission.COMPLETED)
        self.assertIsNotNone(detail.data["response"])

        response_id = detail.data["response"]["id"]
        stored = self.client.get(reverse("response-detail", args=[response_id]))
        self.assertEqual(stored.status_code, 200)
        self.assertEqual(stored.data["user_email"], "ada@example.com")
        displays = {item["question"]: item["display"] for item in stored.data["answers"]}
        self.assertEqual(displays[self.rating.id], "Good")
        self.assertEqual(displays[self.topics.id], "Speed, Design")
        self.assertEqual(displays[self.attachment.id], "cv.pdf")
        self.assertEqual(displays[self.visit.id], "2024-05-01")

    def test_submission_is_enqueued_after_commit(self) -> None:
        payload = {"form": "feedback", "answers": self._answers()}
        with self.captureOnCommitCallbacks() as callbacks:
            response = self.client.post(reverse("response-submission-list"), payload, format="json")
            self.task.delay.assert_not_called()
        self.assertEqual(response.status_code, 202)
        self.assertEqual(len(callbacks), 1)

        callbacks[0]()
        self.task.delay.assert_called_once_with(str(response.data["id"]))
        self.assertEqual(
            ResponseSubmission.objects.get(id=response.data["id"]).status,
            ResponseSubmission.COMPLETED,
        )

    def test_unanswered_optional_questions_are_stored_empty(self) -> None:
        answers = {str(self.name.id): "Ada", str(self.rating.id): "bad"}
        self._submit(answers)
        stored = FormResponse.objects.get()
        values = {answer.question_id: answer.value for answer in stored.answers.all()}
        self.assertEqual(values[self.topics.id], [])
        self.assertEqual(values[self.visit.id], "")

    def test_required_answers_are_enforced(self) -> None:
        response = self._submit({str(self.rating.id): "good"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["answers"][str(self.name.id)], "Required")
        self.task.delay.assert_not_called()
        self.assertFalse(ResponseSubmission.objects.exists())

    def test_answers_are_checked_against_the_form(self) -> None:
        response = self._submit(
            self._answers(
                **{
                    str(self.rating.id): "meh",
                    str(self.topics.id): ["colour"],
                    str(self.visit.id): "01/05/2024",
                    "9999": "stray",
                }
            )
        )
        self.assertEqual(response.status_code, 400)
        errors = response.data["answers"]
        self.assertEqual(
            set(errors),
            {str(self.rating.id), str(self.topics.id), str(self.visit.id), "9999"},
        )

    def test_file_rules(self) -> None:
        bad_type = self._submit(
            self._answers(**{str(self.attachment.id): [{"name": "run.exe", "size": 10}]})
        )
        self.assertEqual(bad_type.status_code, 400)

        two_files = self._submit(
            self._answers(
                **{str(self.attachment.id): [{"name": "a.pdf", "size": 1}, {"name": "b.pdf", "size": 1}]}
            )
        )
        self.assertEqual(two_files.status_code, 400)

    def test_unknown_form_is_rejected(self) -> None:
        response = self.client.post(
            reverse("response-submission-list"), {"form": "missing", "answers": {}}, format="json"
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn("form", response.data)

    def test_client_reference_is_idempotent(self) -> None:
        reference = str(uuid.uuid4())
        first = self._submit(client_reference=reference)
        second = self._submit(client_reference=reference)
        self.assertEqual(first.status_code, 202)
        self.assertEqual(second.status_code, 200)
        self.assertEqual(first.data["id"], second.data["id"])
        self.assertEqual(FormResponse.objects.count(), 1)

    def test_failed_submission_is_requeued(self) -> None:
        reference = uuid.uuid4()
        submission = ResponseSubmission.objects.create(
            client_reference=reference,
            form=self.form,
            status=ResponseSubmission.FAILED,
            error_message="database unavailable",
        )
        response = self._submit(client_reference=str(reference))
        self.assertEqual(response.status_code, 202)
        submission.refresh_from_db()
        self.assertEqual(submission.status, ResponseSubmission.COMPLETED)
        self.assertEqual(submission.error_message, "")

    def test_list_responses_by_form(self) -> None:
        other = Form.objects.create(slug="other", title="Other")
        other.replace_layout(pack([(self.visit.id, WidthClass.FULL)]))
        self._submit()
        self._submit({str(self.visit.id): "2024-01-01"}, form="other")

        response = self.client.get(reverse("response-list"), {"form": "feedback"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]["form"], "feedback")
        self.assertEqual(response.data[0]["answer_count"], 5)

        self.assertEqual(len(self.client.get(reverse("response-list")).data), 2)

    def test_queue_metrics_endpoint(self) -> None:
        ResponseSubmission.objects.create(form=self.form)
        ResponseSubmission.objects.create(form=self.form, status=ResponseSubmission.FAILED)
        response = self.client.get(reverse("response-queue-metrics"))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["pending"], 1)
        self.assertEqual(response.data["processing"], 0)
        self.assertEqual(response.data["completed"], 0)
        self.assertEqual(response.data["failed"], 1)
        self.assertIn("oldestPendingSeconds", response.data)

    def test_task_ignores_missing_submission(self) -> None:
        result = process_response_submission.apply(args=[str(uuid.uuid4())])
        self.assertTrue(result.successful())


class AnswerRuleTests(SimpleTestCase):
    def _question(self, question_type: str, **fields) -> Question:
        return Question(label="Q", question_type=question_type, **fields)

    def test_number_answers(self) -> None:
        question = self._question(Question.NUMBER)
        self.assertEqual(clean_answer(question, " 42.5 "), "42.5")
        with self.assertRaises(AnswerError):
            clean_answer(question, "lots")

    def test_oversized_file(self) -> None:
        question = self._question(Question.FILE, file_multiple=True)
        with self.assertRaises(AnswerError):
            clean_answer(question, [{"name": "scan.png", "size": MAX_FILE_BYTES + 1}])
        files = clean_answer(question, [{"name": "a.PNG", "size": 1}, {"name": "b.docx"}])
        self.assertEqual([item["name"] for item in files], ["a.PNG", "b.docx"])

    def test_required_text(self) -> None:
        question = self._question(Question.TEXT, required=True)
        with self.assertRaises(AnswerError):
            clean_answer(question, "   ")

    def test_empty_display(self) -> None:
        self.assertEqual(display_value(self._question(Question.TEXTAREA), ""), EMPTY_DISPLAY)
        self.assertEqual(display_value(self._question(Question.FILE), None), EMPTY_DISPLAY)
