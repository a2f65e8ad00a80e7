"""
Health check endpoints for Kubernetes probes.
"""
from asgiref.sync import async_to_sync
from django.http import JsonResponse
from django.db import connection
from django.conf import settings
import logging

logger = logging.getLogger(__name__)


def healthz(request):
    """
    Liveness probe - checks if the application is alive.
    Should return 200 if the app is running, regardless of dependencies.
    """
    return JsonResponse({
        "status": "healthy",
        "service": "rnseanomaly",
    })


def _scorer_available() -> bool:
    from rnseanomaly.config.utils import get_scorer

    async def _check():
        scorer = get_scorer()
        try:
            return await scorer.health_check()
        finally:
            close = getattr(scorer, "close", None)
            if close is not None:
                await close()

    return async_to_sync(_check)()


def readiness(request):
    """
    Readiness probe - checks if the application is ready to serve traffic.
    Checks database connectivity and other critical dependencies.

    A missing scorer does not make the service unready: history and download
    still work, and uploads report a degraded-service error.
    """
    checks = {
        "database": False,
        "redis": False,
        "scorer": False,
    }

    # Check database connection
    try:
        connection.ensure_connection()
        checks["database"] = True
    except Exception as e:
        logger.warning(f"Database check failed: {e}")

    # Check Redis connection (only needed for background rescoring)
    try:
        from redis import Redis
        redis_client = Redis.from_url(settings.REDIS_URL, socket_connect_timeout=2)
        redis_client.ping()
        checks["redis"] = True
    except Exception as e:
        logger.warning(f"Redis check failed: {e}")

    try:
        checks["scorer"] = _scorer_available()
    except Exception as e:
        logger.warning(f"Scorer check failed: {e}")

    # Ready if database is accessible
    is_ready = checks["database"]

    status_code = 200 if is_ready else 503

    return JsonResponse({
        "status": "ready" if is_ready else "not ready",
        "checks": checks,
    }, status=status_code)


def startup(request):
    """
    Startup probe - checks if the application has started successfully.
    Similar to readiness but only checked once at startup.
    """
    checks = {
        "database": False,
        "migrations": False,
    }

    # Check database connection
    try:
        connection.ensure_connection()
        checks["database"] = True
    except Exception as e:
        logger.warning(f"Database check failed: {e}")

    # Check if migrations are applied
    try:
        from django.db.migrations.executor import MigrationExecutor
        executor = MigrationExecutor(connection)
        plan = executor.migration_plan(executor.loader.graph.leaf_nodes())
        checks["migrations"] = len(plan) == 0
    except Exception as e:
        logger.warning(f"Migration check failed: {e}")

    is_ready = checks["database"] and checks["migrations"]
    status_code = 200 if is_ready else 503

    return JsonResponse({
        "status": "started" if is_ready else "starting",
        "checks": checks,
    }, status=status_code)
