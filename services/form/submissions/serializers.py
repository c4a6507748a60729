"""Serializers for response collection."""
from __future__ import annotations

from typing import Any, Dict, List

from rest_framework import serializers

from forms.models import Form
from questions.models import Question

from .answers import clean_answers, display_value
from .models import Answer, FormResponse, ResponseSubmission


class AnswerSerializer(serializers.ModelSerializer):
    label = serializers.CharField(source="question.label", read_only=True)
    question_type = serializers.CharField(source="question.question_type", read_only=True)
    display = serializers.SerializerMethodField()

    class Meta:
        model = Answer
        fields = ["id", "question", "label", "question_type", "value", "display"]

    def get_display(self, obj: Answer) -> str:
        return display_value(obj.question, obj.value)


class FormResponseSerializer(serializers.ModelSerializer):
    form = serializers.SlugRelatedField(slug_field="slug", read_only=True)
    answers = AnswerSerializer(many=True, read_only=True)

    class Meta:
        model = FormResponse
        fields = ["id", "form", "user_email", "created_at", "answers"]


class FormResponseSummarySerializer(serializers.ModelSerializer):
    form = serializers.SlugRelatedField(slug_field="slug", read_only=True)
    answer_count = serializers.IntegerField(source="answers.count", read_only=True)

    class Meta:
        model = FormResponse
        fields = ["id", "form", "user_email", "created_at", "answer_count"]


class ResponseSubmissionSerializer(serializers.ModelSerializer):
    form = serializers.SlugRelatedField(slug_field="slug", read_only=True)
    response = FormResponseSerializer(read_only=True)

    class Meta:
        model = ResponseSubmission
        fields = [
            "id",
            "client_reference",
            "status",
            "form",
            "response",
            "error_message",
            "created_at",
            "updated_at",
            "completed_at",
        ]


class ResponseSubmissionRequestSerializer(serializers.Serializer):
    form = serializers.SlugRelatedField(slug_field="slug", queryset=Form.objects.all())
    answers = serializers.DictField(child=serializers.JSONField(allow_null=True))
    user_email = serializers.EmailField(required=False, allow_blank=True, default="")
    client_reference = serializers.UUIDField(required=False)

    def validate(self, attrs: Dict[str, Any]) -> Dict[str, Any]:  # type: ignore[override]
        form: Form = attrs["form"]
        questions = _questions_on(form)
        answers, errors = clean_answers(questions, attrs["answers"])
        if errors:
            raise serializers.ValidationError({"answers": errors})
        attrs["answers"] = answers
        return attrs

    def to_payload(self) -> Dict[str, Any]:
        """JSON-safe copy of the request for the submission queue."""

        data = self.validated_data
        return {
            "form_id": data["form"].pk,
            "user_email": data.get("user_email", ""),
            "answers": data["answers"],
        }


def _questions_on(form: Form) -> List[Question]:
    """Distinct questions placed on ``form``, in grid order."""

    seen = set()
    questions: List[Question] = []
    for cell in form.cells.select_related("question").prefetch_related("question__options"):
        if cell.question_id not in seen:
            seen.add(cell.question_id)
            questions.append(cell.question)
    return questions
