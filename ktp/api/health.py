"""Health check endpoints for container liveness and readiness probes."""

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework import status
from django.apps import apps
from django.conf import settings
from django.db import DatabaseError, connection
import logging
import os

from ktp.models import Kelurahan

logger = logging.getLogger(__name__)


def _check_database():
    try:
        connection.ensure_connection()
        return "ok"
    except DatabaseError as e:
        logger.error(f"Database health check failed: {str(e)}")
        return "error"


def _check_uploads():
    """Supporting documents are written below MEDIA_ROOT."""
    media_root = settings.MEDIA_ROOT
    if not os.path.isdir(media_root):
        logger.error(f"Upload directory {media_root} does not exist")
        return "error"
    if not os.access(media_root, os.W_OK):
        logger.error(f"Upload directory {media_root} is not writable")
        return "error"
    return "ok"


def _check_assets():
    manifest = apps.get_app_config("ktp").asset_manifest
    if not manifest.is_dev:
        return "ok"
    # The Vite dev server only stands in for built assets while debugging
    return "dev" if settings.DEBUG else "missing"


def _check_kelurahan():
    try:
        return "ok" if Kelurahan.objects.exists() else "empty"
    except DatabaseError as e:
        logger.error(f"Kelurahan readiness check failed: {str(e)}")
        return "error"


def _respond(checks, healthy_label, unhealthy_label, accepted=("ok",)):
    healthy = all(value in accepted for value in checks.values())
    body = {"status": healthy_label if healthy else unhealthy_label, "checks": checks}
    if healthy:
        return Response(body, status=status.HTTP_200_OK)
    return Response(body, status=status.HTTP_503_SERVICE_UNAVAILABLE)


@api_view(["GET"])
@permission_classes([AllowAny])
def health_check(request):
    """
    Liveness: the database answers and uploaded documents can be stored.

    Returns:
        200 OK: Service is healthy
        503 Service Unavailable: Database or upload directory is unusable
    """
    checks = {"database": _check_database(), "uploads": _check_uploads()}
    return _respond(checks, "healthy", "unhealthy")


@api_view(["GET"])
@permission_classes([AllowAny])
def readiness_check(request):
    """
    Readiness: pages can be rendered with built assets and citizens have
    at least one kelurahan to register under.
    """
    checks = {"assets": _check_assets(), "kelurahan": _check_kelurahan()}
    return _respond(checks, "ready", "not_ready", accepted=("ok", "dev"))
