"""Citizen dashboard and status tracker."""

from django.shortcuts import redirect, render
from django.views.decorators.http import require_GET

from ktp.middleware import warga_required
from ktp.services.permohonan_service import PermohonanService


@require_GET
@warga_required
def dashboard(request):
    data = PermohonanService().get_dashboard(request.actor.user_id)
    return render(request, "ktp/warga/dashboard.html", data)


@require_GET
@warga_required
def lacak_status(request):
    """
    Status tracker of one of the citizen's own applications.

    Without a booking code the latest application is shown; citizens with
    no application at all are sent back to the dashboard.
    """
    kode = request.GET.get("kode", "").strip()
    result = PermohonanService().get_tracking(request.actor.user_id, kode)

    if not result["success"]:
        if result.get("empty"):
            return redirect("/dashboard")
        return render(
            request,
            "ktp/warga/lacak_status.html",
            {"kode": kode, "message": result["message"]},
            status=404,
        )

    return render(request, "ktp/warga/lacak_status.html", dict(result["data"], kode=kode))
