"""URL configuration for the form service."""
from django.urls import include, path

from .views import health

urlpatterns = [
    path("api/healthz/", health, name="form-health"),
    path("api/", include("questions.urls")),
    path("api/", include("forms.urls")),
    path("api/", include("submissions.urls")),
]
