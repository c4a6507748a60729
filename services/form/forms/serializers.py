"""Serializers for the form service."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from django.db import transaction
from rest_framework import serializers

from form_service.exceptions import Conflict
from questions.models import Question
from questions.serializers import QuestionSerializer

from .layout import (
    GridCell,
    LayoutError,
    WidthClass,
    column_class,
    pack,
    row_signature,
    to_instances,
    validate_layout,
)
from .layout.grid import WIDTH_CHOICES
from .models import RESERVED_SLUGS, Form, FormCell, slugify

logger = logging.getLogger(__name__)


def cell_payload(cell: FormCell) -> Dict[str, Any]:
    return {
        "id": cell.id,
        "question": cell.question_id,
        "row": cell.row,
        "col": cell.col,
        "span": cell.span,
        "order": cell.order,
    }


def grid_payload(cells: List[GridCell]) -> List[Dict[str, Any]]:
    return [
        {"question": cell.question_id, "row": cell.row, "col": cell.col, "span": cell.span}
        for cell in cells
    ]


class InstanceSerializer(serializers.Serializer):
    question = serializers.PrimaryKeyRelatedField(queryset=Question.objects.all())
    width = serializers.ChoiceField(choices=WIDTH_CHOICES, default=WidthClass.FULL.value)


class EditorInstanceSerializer(serializers.Serializer):
    instance_id = serializers.CharField()
    question = serializers.IntegerField(source="question_id")
    width = serializers.CharField(source="width.value")
    span = serializers.IntegerField()


class LayoutInputMixin:
    """Turns ``items`` (grid cells) or ``instances`` (packed) into a validated grid."""

    def resolve_layout(self, attrs: Dict[str, Any]) -> Optional[List[GridCell]]:
        items = attrs.pop("items", None)
        instances = attrs.pop("instances", None)
        if items is not None and instances is not None:
            raise serializers.ValidationError("Send either items or instances, not both.")
        if items is None and instances is None:
            return None

        if instances is not None:
            raw: List[Any] = pack(
                (entry["question"].pk, WidthClass(entry["width"])) for entry in instances
            )
        else:
            raw = items

        try:
            cells = validate_layout(raw)
        except LayoutError as exc:
            logger.info("Rejected layout: %s %s", exc.kind, exc.context)
            raise serializers.ValidationError({"layout": exc.as_dict()}) from exc

        self._check_questions_exist(cells)
        return cells

    @staticmethod
    def _check_questions_exist(cells: List[GridCell]) -> None:
        ids = set()
        for cell in cells:
            question_id = cell.question_id
            if isinstance(question_id, str) and question_id.isdigit():
                question_id = int(question_id)
            if not isinstance(question_id, int) or isinstance(question_id, bool):
                raise serializers.ValidationError({"items": f"Unknown question {cell.question_id!r}."})
            ids.add(question_id)
        found = set(Question.objects.filter(pk__in=ids).values_list("pk", flat=True))
        missing = sorted(ids - found)
        if missing:
            raise serializers.ValidationError(
                {"items": f"One or more question ids do not exist: {missing}."}
            )


class LayoutPreviewSerializer(LayoutInputMixin, serializers.Serializer):
    items = serializers.ListField(child=serializers.JSONField(), required=False)
    instances = InstanceSerializer(many=True, required=False)

    def validate(self, attrs: Dict[str, Any]) -> Dict[str, Any]:  # type: ignore[override]
        cells = self.resolve_layout(attrs)
        if cells is None:
            raise serializers.ValidationError("items or instances required.")
        attrs["cells"] = cells
        return attrs


class FormSerializer(LayoutInputMixin, serializers.ModelSerializer):
    slug = serializers.CharField(max_length=255, required=False, allow_blank=True)
    items = serializers.ListField(child=serializers.JSONField(), required=False, write_only=True)
    instances = InstanceSerializer(many=True, required=False, write_only=True)

    class Meta:
        model = Form
        fields = [
            "id",
            "slug",
            "title",
            "description",
            "sort_order",
            "items",
            "instances",
            "created_at",
            "updated_at",
        ]
        extra_kwargs = {"description": {"allow_null": True, "required": False}}

    def to_representation(self, instance: Form) -> Dict[str, Any]:  # type: ignore[override]
        data = super().to_representation(instance)
        data["items"] = [cell_payload(cell) for cell in instance.cells.all()]
        return data

    def validate(self, attrs: Dict[str, Any]) -> Dict[str, Any]:  # type: ignore[override]
        if "description" in attrs and attrs["description"] is None:
            attrs["description"] = ""
        cells = self.resolve_layout(attrs)
        if cells is None and not self.partial:
            cells = self.resolve_layout({"items": []})
        attrs["cells"] = cells
        return attrs

    def create(self, validated_data):  # type: ignore[override]
        cells = validated_data.pop("cells")
        requested = validated_data.pop("slug", "") or validated_data["title"]
        with transaction.atomic():
            validated_data["slug"] = Form.unique_slug(slugify(requested))
            form = Form.objects.create(**validated_data)
            form.replace_layout(cells)
        logger.info("Created form %s with %d cells", form.slug, len(cells))
        return form

    def update(self, instance, validated_data):  # type: ignore[override]
        cells = validated_data.pop("cells", None)
        requested = validated_data.pop("slug", "")
        with transaction.atomic():
            if requested:
                slug = slugify(requested) or "form"
                if slug in RESERVED_SLUGS or Form.objects.exclude(pk=instance.pk).filter(slug=slug).exists():
                    raise Conflict("slug already exists")
                instance.slug = slug
            for attr, value in validated_data.items():
                setattr(instance, attr, value)
            instance.save()

            if cells is not None:
                instance.replace_layout(cells)
        logger.info("Updated form %s", instance.slug)
        return instance


class PublishedFormSerializer(serializers.ModelSerializer):
    """Read-only definition of a form as respondents see it."""

    class Meta:
        model = Form
        fields = ["id", "slug", "title", "description"]

    def to_representation(self, instance: Form) -> Dict[str, Any]:  # type: ignore[override]
        data = super().to_representation(instance)
        rows: Dict[int, List[Dict[str, Any]]] = {}
        for cell in instance.cells.select_related("question").prefetch_related("question__options"):
            rows.setdefault(cell.row, []).append(
                {
                    "row": cell.row,
                    "col": cell.col,
                    "span": cell.span,
                    "column_class": column_class(cell.span),
                    "question": QuestionSerializer(cell.question).data,
                }
            )
        data["rows"] = [
            {
                "row": row,
                "signature": row_signature(item["span"] for item in rows[row]),
                "cells": rows[row],
            }
            for row in sorted(rows)
        ]
        return data


def editor_payload(form: Form) -> Dict[str, Any]:
    instances = to_instances(form.grid())
    return {
        "slug": form.slug,
        "title": form.title,
        "instances": EditorInstanceSerializer(instances, many=True).data,
    }


def preview_payload(cells: List[GridCell]) -> Dict[str, Any]:
    signatures: Dict[int, List[int]] = {}
    for cell in cells:
        signatures.setdefault(cell.row, []).append(cell.span)
    return {
        "items": grid_payload(cells),
        "rows": [row_signature(signatures[row]) for row in sorted(signatures)],
    }

