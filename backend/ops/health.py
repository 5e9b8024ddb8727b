"""
Health endpoints.

- /_health/live  - process is up
- /_health/ready - default database answers
- /_health/full  - every registered check (database, broker, upload storage)

Each check returns {"status": "healthy" | "unhealthy" | "skipped", ...}.
"""
import logging
import time
from typing import Any, Callable, Dict

import redis
from django.conf import settings
from django.core.files.base import ContentFile
from django.core.files.storage import default_storage
from django.db import connections
from django.http import JsonResponse
from django.views import View

logger = logging.getLogger(__name__)

STORAGE_PROBE = "health/probe.txt"


def _timed(check: Callable[[], Dict[str, Any]]) -> Dict[str, Any]:
    start = time.monotonic()
    try:
        result = check()
    except Exception as e:
        logger.warning(f"Health check {check.__name__} failed: {e}")
        result = {"status": "unhealthy", "error": str(e)}
    result.setdefault("duration_ms", round((time.monotonic() - start) * 1000, 2))
    return result


def check_database() -> Dict[str, Any]:
    databases = {}
    for alias in settings.DATABASES:
        with connections[alias].cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
        databases[alias] = "healthy"
    return {"status": "healthy", "databases": databases}


def check_broker() -> Dict[str, Any]:
    """Ping the Redis broker that carries the monthly invoice task."""
    url = getattr(settings, "CELERY_BROKER_URL", "")
    if not url:
        return {"status": "skipped", "reason": "No broker configured"}
    redis.from_url(url, socket_connect_timeout=2).ping()
    return {"status": "healthy"}


def check_storage() -> Dict[str, Any]:
    """Logos and archived invoice PDFs must be writable."""
    name = default_storage.save(STORAGE_PROBE, ContentFile(b"ok"))
    default_storage.delete(name)
    return {"status": "healthy", "backend": type(default_storage).__name__}


CHECKS: Dict[str, Callable[[], Dict[str, Any]]] = {
    "database": check_database,
    "broker": check_broker,
    "storage": check_storage,
}


def run_checks() -> Dict[str, Any]:
    results = {name: _timed(check) for name, check in CHECKS.items()}
    healthy = all(r["status"] in ("healthy", "skipped") for r in results.values())
    return {
        "status": "healthy" if healthy else "unhealthy",
        "checks": results,
        "environment": "development" if settings.DEBUG else "production",
    }


class LivenessView(View):
    def get(self, request):
        return JsonResponse({"status": "alive"})


class ReadinessView(View):
    def get(self, request):
        database = _timed(check_database)
        ready = database["status"] == "healthy"
        return JsonResponse(
            {"status": "ready" if ready else "not_ready", "database": database},
            status=200 if ready else 503,
        )


class FullHealthView(View):
    """Internal only; exposes backend names and error messages."""

    def get(self, request):
        report = run_checks()
        return JsonResponse(report, status=200 if report["status"] == "healthy" else 503)
