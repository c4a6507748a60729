"""Serializers for the question bank."""
from __future__ import annotations

from typing import Any, Dict, List

from django.db import transaction
from rest_framework import serializers

from .models import Option, Question


class OptionField(serializers.Field):
    """Accept either a bare string (label == value) or a ``{label, value}`` object."""

    default_error_messages = {
        "invalid": "Option must be a string or an object with a label.",
        "blank": "Option label may not be blank.",
    }

    def to_internal_value(self, data: Any) -> Dict[str, str]:
        if isinstance(data, str):
            label = value = data.strip()
        elif isinstance(data, dict) and "label" in data:
            label = str(data["label"]).strip()
            value = str(data.get("value") or label).strip()
        else:
            self.fail("invalid")
        if not label:
            self.fail("blank")
        return {"label": label, "value": value}

    def to_representation(self, value: Option) -> Dict[str, Any]:
        return {"id": value.id, "label": value.label, "value": value.value}


class QuestionSerializer(serializers.ModelSerializer):
    options = serializers.ListField(child=OptionField(), required=False, write_only=True)

    class Meta:
        model = Question
        fields = [
            "id",
            "label",
            "question_type",
            "required",
            "help_text",
            "file_multiple",
            "sort_order",
            "options",
            "created_at",
            "updated_at",
        ]

    def to_representation(self, instance: Question) -> Dict[str, Any]:  # type: ignore[override]
        data = super().to_representation(instance)
        data["options"] = [OptionField().to_representation(option) for option in instance.options.all()]
        return data

    def validate(self, attrs: Dict[str, Any]) -> Dict[str, Any]:  # type: ignore[override]
        question_type = attrs.get("question_type") or getattr(self.instance, "question_type", None)
        options = attrs.get("options")
        if question_type in Question.CHOICE_TYPES:
            has_existing = self.instance is not None and self.instance.options.exists()
            if options is None and not has_existing:
                raise serializers.ValidationError({"options": "options[] required for this type."})
            if options is not None and not options:
                raise serializers.ValidationError({"options": "At least one option is required."})
        elif options:
            raise serializers.ValidationError({"options": "Only choice questions take options."})
        if question_type != Question.FILE:
            attrs["file_multiple"] = None
        return attrs

    @staticmethod
    def _replace_options(question: Question, options: List[Dict[str, str]]) -> None:
        question.options.all().delete()
        Option.objects.bulk_create(
            Option(question=question, sort_order=index, **option)
            for index, option in enumerate(options)
        )

    def create(self, validated_data):  # type: ignore[override]
        options = validated_data.pop("options", [])
        with transaction.atomic():
            question = Question.objects.create(**validated_data)
            self._replace_options(question, options)
        return question

    def update(self, instance, validated_data):  # type: ignore[override]
        options = validated_data.pop("options", None)
        with transaction.atomic():
            for attr, value in validated_data.items():
                setattr(instance, attr, value)
            instance.save()

            if instance.question_type not in Question.CHOICE_TYPES:
                instance.options.all().delete()
            elif options is not None:
                self._replace_options(instance, options)
        return instance
