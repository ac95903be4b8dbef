"""The four application forms, slot options and the confirmation page."""

import logging

from django.http import Http404
from django.shortcuts import redirect, render
from django.views.decorators.http import require_GET, require_http_methods

from ktp.forms import PERMOHONAN_FORMS
from ktp.middleware import warga_required
from ktp.services.permohonan_service import PermohonanService
from ktp.services.results import ERROR_CONFLICT, ERROR_VALIDATION

logger = logging.getLogger(__name__)


def _parse_location(value):
    """Location filter: empty for all, 0 for the district office, else a kelurahan id."""
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


@require_http_methods(["GET", "POST"])
@warga_required
def permohonan_form(request, type_code):
    form_class = PERMOHONAN_FORMS.get(type_code)
    if form_class is None:
        raise Http404("Jenis permohonan tidak dikenal")

    service = PermohonanService()
    nik = request.actor.user_id
    lokasi = _parse_location(request.GET.get("lokasi"))
    jadwal_options = service.get_available_jadwal(kelurahan_id=lokasi)

    if request.method == "POST":
        form = form_class(request.POST, request.FILES)
        if form.is_valid():
            result = service.create_permohonan(
                nik,
                form.cleaned_data["jadwal_sesi_id"],
                form_class.JENIS,
                documents=form.documents(),
                keterangan=form.keterangan(),
            )
            if result["success"]:
                permohonan = result["permohonan"]
                return redirect(f"/permohonan/sukses?id={permohonan.id}&type={form_class.TYPE_CODE}")

            if result["error"] == ERROR_VALIDATION and result.get("field") in form.fields:
                form.add_error(result["field"], result["message"])
            else:
                # Conflicts and failures are general, not tied to a field
                form.add_error(None, result["message"])
                if result["error"] == ERROR_CONFLICT:
                    jadwal_options = service.get_available_jadwal(kelurahan_id=lokasi)
    else:
        form = form_class()

    context = {
        "form": form,
        "profile": service.get_form_data(nik),
        "jadwal_options": jadwal_options,
        "locations": service.get_locations(),
        "lokasi": lokasi,
        "type_code": form_class.TYPE_CODE,
        "title": form_class.TITLE,
    }
    return render(request, "ktp/permohonan/form.html", context)


@require_GET
@warga_required
def jadwal_options(request):
    """Slot <option> list for the location filter of the forms."""
    lokasi = _parse_location(request.GET.get("lokasi"))
    options = PermohonanService().get_available_jadwal(kelurahan_id=lokasi)
    return render(request, "ktp/partials/jadwal_options.html", {"jadwal_options": options})


@require_GET
@warga_required
def sukses(request):
    permohonan_id = request.GET.get("id", "")
    type_code = request.GET.get("type", "")
    if not permohonan_id:
        return redirect("/dashboard")

    result = PermohonanService().get_success_data(request.actor.user_id, permohonan_id, type_code)
    if not result["success"]:
        return redirect("/dashboard")
    return render(request, "ktp/permohonan/sukses.html", result["data"])
