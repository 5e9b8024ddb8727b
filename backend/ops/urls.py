"""Health endpoints, mounted at /_health/ outside the JWT-protected API."""
from django.urls import path

from ops import health

app_name = "ops"

urlpatterns = [
    path("live", health.LivenessView.as_view(), name="live"),
    path("ready", health.ReadinessView.as_view(), name="ready"),
    path("full", health.FullHealthView.as_view(), name="full"),
]
