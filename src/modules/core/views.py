"""Liveness endpoint used by the load balancer and uptime checks."""

import time
from typing import Any, Dict

import structlog
from django.db import DatabaseError, connections
from django.http import HttpRequest, JsonResponse
from django.utils import timezone

logger = structlog.get_logger(__name__)

SERVICE_NAME = "farmaya-delivery"


def _probe_database(alias: str = "default") -> Dict[str, Any]:
    started = time.monotonic()
    try:
        with connections[alias].cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
    except DatabaseError as exc:
        logger.error("health.database_down", alias=alias, error=str(exc))
        return {"status": "down"}
    return {
        "status": "up",
        "vendor": connections[alias].vendor,
        "response_time_ms": round((time.monotonic() - started) * 1000, 2),
    }


def health_check(request: HttpRequest) -> JsonResponse:
    """GET /health (public, no authentication)."""
    services = {"database": _probe_database()}
    healthy = all(check["status"] == "up" for check in services.values())
    state = "healthy" if healthy else "unhealthy"

    logger.info("health.checked", status=state)
    return JsonResponse(
        {
            "service": SERVICE_NAME,
            "status": state,
            "timestamp": timezone.now().isoformat(),
            "services": services,
        },
        status=200 if healthy else 503,
    )
