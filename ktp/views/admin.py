"""Officer panel: dashboard, roster, applications and session calendar."""

import logging
from datetime import date

from django.http import HttpResponse
from django.shortcuts import redirect, render
from django.views.decorators.http import require_GET, require_POST

from ktp.forms import JadwalForm, UpdateStatusForm
from ktp.htmx import hx_redirect, hx_reswap, hx_target, hx_trigger, is_htmx
from ktp.middleware import petugas_required
from ktp.models import Permohonan
from ktp.services.admin_service import AdminService
from ktp.services.jadwal_service import JadwalService
from ktp.services.results import ERROR_INTERNAL, ERROR_NOT_FOUND
from ktp.services.status_service import StatusService
from ktp.views.errors import render_not_found

logger = logging.getLogger(__name__)


def _alert(request, message, status=400, level="error"):
    return render(
        request, "ktp/partials/alert.html", {"message": message, "level": level}, status=status
    )


def _first_error(form) -> str:
    for errors in form.errors.values():
        if errors:
            return errors[0]
    return "Data tidak valid"


def _parse_date(value):
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError):
        return None


@require_GET
@petugas_required
def dashboard(request):
    actor = request.actor
    service = AdminService()
    context = {
        "stats": service.get_dashboard_stats(actor),
        "recent": service.get_recent_permohonan(actor),
        "jadwal_today": JadwalService().list_today(actor),
    }
    return render(request, "ktp/admin/dashboard.html", context)


@require_GET
@petugas_required
def penduduk(request):
    service = AdminService()
    data = service.list_penduduk(
        request.actor, search=request.GET.get("search", ""), page=request.GET.get("page")
    )
    data["stats"] = service.get_penduduk_stats(request.actor)
    return render(request, "ktp/admin/penduduk.html", data)


@require_GET
@petugas_required
def permohonan_list(request):
    data = AdminService().list_permohonan(
        request.actor,
        search=request.GET.get("search", ""),
        status=request.GET.get("status", ""),
        page=request.GET.get("page"),
    )
    data["status_choices"] = Permohonan.STATUS_CHOICES
    if is_htmx(request) and hx_target(request) == "permohonan-table":
        return render(request, "ktp/admin/partials/permohonan_table.html", data)
    return render(request, "ktp/admin/permohonan_list.html", data)


@require_GET
@petugas_required
def permohonan_detail(request, permohonan_id):
    result = AdminService().get_permohonan_detail(request.actor, permohonan_id)
    if not result["success"]:
        return render_not_found(request, result["message"])
    return render(request, "ktp/admin/permohonan_detail.html", result)


@require_GET
@petugas_required
def permohonan_status_form(request, permohonan_id):
    result = StatusService().get_status_form(request.actor, permohonan_id)
    if not result["success"]:
        return render_not_found(request, result["message"])

    form = UpdateStatusForm(initial={"permohonan_id": result["permohonan"].id})
    return render(request, "ktp/admin/partials/status_form.html", dict(result, form=form))


@require_POST
@petugas_required
def update_status(request):
    form = UpdateStatusForm(request.POST)
    if not form.is_valid():
        return _alert(request, _first_error(form))

    result = StatusService().update_status(
        request.actor,
        form.cleaned_data["permohonan_id"],
        form.cleaned_data["status"],
        form.cleaned_data["catatan"],
    )
    if not result["success"]:
        if result["error"] == ERROR_NOT_FOUND:
            return render_not_found(request, result["message"])
        status = 500 if result["error"] == ERROR_INTERNAL else 400
        return _alert(request, result["message"], status=status)

    if not is_htmx(request):
        return redirect(f"/admin/permohonan/{form.cleaned_data['permohonan_id']}")

    response = HttpResponse()
    hx_trigger(response, {"closeDialog": "status-dialog", "refreshPermohonan": True})
    return hx_reswap(response, "none")


@require_GET
@petugas_required
def jadwal(request):
    """
    Weekly session calendar.

    ``ref_date`` (YYYY-MM-DD) picks the week, ``week=prev|next`` moves it.
    htmx navigation targeting the calendar body only gets the partial.
    """
    data = JadwalService().list_week(
        request.actor,
        ref_date=_parse_date(request.GET.get("ref_date")),
        direction=request.GET.get("week", ""),
    )
    data["form"] = JadwalForm()
    if is_htmx(request) and hx_target(request) == "jadwal-content":
        return render(request, "ktp/admin/partials/jadwal_content.html", data)
    return render(request, "ktp/admin/jadwal.html", data)


@require_POST
@petugas_required
def jadwal_create(request):
    form = JadwalForm(request.POST)
    if not form.is_valid():
        return _alert(request, _first_error(form))

    result = JadwalService().create_jadwal(
        request.actor,
        form.cleaned_data["tanggal"],
        form.cleaned_data["jam_mulai"],
        form.cleaned_data["jam_selesai"],
        form.cleaned_data["kuota_maksimal"],
    )
    if not result["success"]:
        status = 500 if result["error"] == ERROR_INTERNAL else 400
        return _alert(request, result["message"], status=status)

    if not is_htmx(request):
        return redirect("/admin/jadwal")

    response = HttpResponse()
    hx_trigger(response, {"closeDialog": "create-jadwal-dialog", "refreshJadwal": True})
    return hx_redirect(response, "/admin/jadwal")


@require_POST
@petugas_required
def jadwal_generate(request):
    result = JadwalService().generate_jadwal(request.actor.kelurahan_id)
    if not result["success"]:
        return _alert(request, result["message"], status=500)

    if not is_htmx(request):
        return redirect("/admin/jadwal")
    return hx_redirect(HttpResponse(), "/admin/jadwal")


@require_GET
@petugas_required
def jadwal_antrian(request, jadwal_id):
    result = JadwalService().get_antrian(request.actor, jadwal_id)
    if not result["success"]:
        return render_not_found(request, result["message"])
    return render(request, "ktp/admin/partials/antrian.html", result)
