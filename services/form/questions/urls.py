"""Route registration for the question bank."""
from __future__ import annotations

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import QuestionViewSet

router = DefaultRouter()
router.register("questions", QuestionViewSet, basename="question")

urlpatterns = [
    path("", include(router.urls)),
]
