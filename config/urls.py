"""
URL configuration for the SIMPEL-KTP portal.
"""

from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from django.conf.urls.static import static
from ktp.api.health import health_check, readiness_check

urlpatterns = [
    path("django-admin/", admin.site.urls),
    path("api/v1/", include("ktp.api.urls")),
    path("api/health/", health_check, name="health_check"),
    path("api/ready/", readiness_check, name="readiness_check"),
    path("", include("ktp.urls")),
]

# Uploaded documents are served by the web server in production
if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)

handler404 = "ktp.views.errors.not_found"
handler500 = "ktp.views.errors.server_error"
