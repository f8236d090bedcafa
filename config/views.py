"""Project-level views."""

import structlog
from django.db import DatabaseError, connection  # type: ignore
from django.http import JsonResponse  # type: ignore
from django.views.decorators.http import require_http_methods  # type: ignore

logger = structlog.get_logger(__name__)


@require_http_methods(["GET"])
def healthz(request):
    """Health check for load balancers and container orchestrators."""
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
    except DatabaseError as exc:
        logger.error("healthz.fail", error=str(exc))
        return JsonResponse({"status": "unhealthy", "error": str(exc)}, status=503)
    logger.info("healthz.ok", database="connected")
    return JsonResponse({"status": "healthy", "database": "connected"}, status=200)
