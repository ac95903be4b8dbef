"""Error pages and inline error fragments."""

import logging

from django.shortcuts import render

from ktp.htmx import is_htmx

logger = logging.getLogger(__name__)


def render_not_found(request, message="Data tidak ditemukan"):
    """Full 404 page, or an inline fragment for htmx requests."""
    template = "ktp/partials/not_found.html" if is_htmx(request) else "ktp/errors/404.html"
    return render(request, template, {"message": message}, status=404)


def not_found(request, exception=None):
    return render_not_found(request, "Halaman yang Anda cari tidak ditemukan")


def server_error(request):
    return render(request, "ktp/errors/500.html", status=500)


def csrf_failure(request, reason=""):
    logger.warning(f"CSRF check failed for {request.method} {request.path}: {reason}")
    if is_htmx(request):
        return render(
            request,
            "ktp/partials/alert.html",
            {"level": "error", "message": "Sesi formulir kedaluwarsa. Muat ulang halaman."},
            status=403,
        )
    return render(request, "ktp/errors/403.html", status=403)
