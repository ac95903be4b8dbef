"""Login, registration and logout for citizens and officers."""

import logging

from django.conf import settings
from django.http import HttpResponse
from django.shortcuts import redirect, render
from django.views.decorators.http import require_GET, require_POST

from ktp.forms import LoginPetugasForm, LoginWargaForm, RegisterForm
from ktp.htmx import hx_redirect, is_htmx
from ktp.middleware import redirect_if_authenticated
from ktp.models import Kelurahan
from ktp.services.auth_service import AuthService
from ktp.services.results import (
    ERROR_CONFLICT,
    ERROR_INTERNAL,
    ERROR_NO_PASSWORD,
    MESSAGE_INTERNAL,
)
from ktp.session import clear_session, set_petugas_session, set_warga_session

logger = logging.getLogger(__name__)

MESSAGE_INVALID_WARGA = "NIK atau password salah"
MESSAGE_INVALID_PETUGAS = "NIP atau password salah"


def _first_error(form) -> str:
    for errors in form.errors.values():
        if errors:
            return errors[0]
    return "Gagal memproses form"


def _auth_result(request, page_template, context, message, success=False, redirect_to=None):
    """
    Answer an auth form post.

    htmx posts get the message fragment, plus HX-Redirect on success. Plain
    form posts are redirected on success and re-render the page otherwise.
    """
    if is_htmx(request):
        response = render(
            request, "ktp/partials/auth_message.html", {"message": message, "success": success}
        )
        if success and redirect_to:
            hx_redirect(response, redirect_to)
        return response

    if success and redirect_to:
        return redirect(redirect_to)
    context = dict(context, message=message, success=success)
    return render(request, page_template, context)


def _register_context(form=None):
    return {
        "form": form or RegisterForm(),
        "kelurahan_list": Kelurahan.objects.order_by("nama_kelurahan"),
    }


@require_GET
@redirect_if_authenticated
def login_page(request):
    return render(request, "ktp/auth/login.html", {"form": LoginWargaForm()})


@require_GET
@redirect_if_authenticated
def login_petugas_page(request):
    return render(request, "ktp/auth/login_petugas.html", {"form": LoginPetugasForm()})


@require_GET
@redirect_if_authenticated
def register_page(request):
    return render(request, "ktp/auth/register.html", _register_context())


@require_POST
def login_warga(request):
    form = LoginWargaForm(request.POST)
    page = "ktp/auth/login.html"
    if not form.is_valid():
        return _auth_result(request, page, {"form": form}, _first_error(form))

    result = AuthService().login_warga(form.cleaned_data["nik"], form.cleaned_data["password"])
    if not result["success"]:
        message = MESSAGE_INVALID_WARGA
        if result["error"] == ERROR_NO_PASSWORD and settings.AUTH_REVEAL_NO_PASSWORD:
            message = result["message"]
        elif result["error"] == ERROR_INTERNAL:
            message = MESSAGE_INTERNAL
        return _auth_result(request, page, {"form": form}, message)

    set_warga_session(request, result["penduduk"], form.cleaned_data["remember"])
    return _auth_result(
        request, page, {}, "Login berhasil! Mengalihkan...", success=True, redirect_to="/dashboard"
    )


@require_POST
def login_petugas(request):
    form = LoginPetugasForm(request.POST)
    page = "ktp/auth/login_petugas.html"
    if not form.is_valid():
        return _auth_result(request, page, {"form": form}, _first_error(form))

    result = AuthService().login_petugas(form.cleaned_data["nip"], form.cleaned_data["password"])
    if not result["success"]:
        message = MESSAGE_INVALID_PETUGAS
        if result["error"] == ERROR_INTERNAL:
            message = MESSAGE_INTERNAL
        return _auth_result(request, page, {"form": form}, message)

    set_petugas_session(request, result["petugas"], form.cleaned_data["remember"])
    return _auth_result(
        request,
        page,
        {},
        "Login berhasil! Mengalihkan ke dashboard...",
        success=True,
        redirect_to="/admin",
    )


@require_POST
def register(request):
    form = RegisterForm(request.POST)
    page = "ktp/auth/register.html"
    if not form.is_valid():
        return _auth_result(request, page, _register_context(form), _first_error(form))

    result = AuthService().register_warga(form.cleaned_data)
    if not result["success"]:
        if result["error"] == ERROR_CONFLICT and result.get("field"):
            form.add_error(result["field"], result["message"])
        return _auth_result(request, page, _register_context(form), result["message"])

    # Registration logs the new citizen in
    set_warga_session(request, result["penduduk"], remember=False)
    return _auth_result(
        request, page, {}, "Pendaftaran berhasil! Mengalihkan...", success=True, redirect_to="/dashboard"
    )


@require_POST
def logout(request):
    actor = request.actor
    clear_session(request)
    if actor is not None:
        logger.info(f"{actor.user_type} {actor.user_id} logged out")

    if is_htmx(request):
        return hx_redirect(HttpResponse(), "/")
    return redirect("/")
