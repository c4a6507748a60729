"""Route registration for response collection."""
from __future__ import annotations

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import FormResponseViewSet, ResponseSubmissionViewSet

router = DefaultRouter()
router.register(
    "responses/submissions",
    ResponseSubmissionViewSet,
    basename="response-submission",
)
router.register("responses", FormResponseViewSet, basename="response")

urlpatterns = [
    path("", include(router.urls)),
]
