"""Request middleware and access-control decorators."""

from functools import wraps

from django.conf import settings
from django.http import HttpResponse
from django.shortcuts import redirect

from ktp.htmx import is_htmx, hx_redirect
from ktp.session import get_actor, refresh_petugas

LOGIN_URL_WARGA = "/login"
LOGIN_URL_PETUGAS = "/petugas/login"


class SecurityHeadersMiddleware:
    """Add HSTS and Content-Security-Policy headers to every response."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        response = self.get_response(request)
        response.setdefault("Content-Security-Policy", settings.CONTENT_SECURITY_POLICY)
        response.setdefault("Strict-Transport-Security", "max-age=63072000; includeSubDomains")
        return response


class ActorMiddleware:
    """
    Resolve the session actor once and attach it as ``request.actor``.

    Officers are re-read from the database so their kelurahan scope always
    matches the current assignment.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        actor = get_actor(request)
        if actor is not None and actor.is_petugas:
            actor = refresh_petugas(request, actor)
        request.actor = actor
        return self.get_response(request)


def _login_redirect(request, login_url):
    if is_htmx(request):
        return hx_redirect(HttpResponse(status=401), login_url)
    return redirect(login_url)


def warga_required(view_func):
    """Only citizens may access the view; others go to the citizen login."""

    @wraps(view_func)
    def _wrapped(request, *args, **kwargs):
        actor = getattr(request, "actor", None)
        if actor is None or not actor.is_warga:
            return _login_redirect(request, LOGIN_URL_WARGA)
        return view_func(request, *args, **kwargs)

    return _wrapped


def petugas_required(view_func):
    """Only officers may access the view; others go to the officer login."""

    @wraps(view_func)
    def _wrapped(request, *args, **kwargs):
        actor = getattr(request, "actor", None)
        if actor is None or not actor.is_petugas:
            return _login_redirect(request, LOGIN_URL_PETUGAS)
        return view_func(request, *args, **kwargs)

    return _wrapped


def redirect_if_authenticated(view_func):
    """Send logged-in users from login/register pages to their dashboard."""

    @wraps(view_func)
    def _wrapped(request, *args, **kwargs):
        actor = getattr(request, "actor", None)
        if actor is not None:
            return redirect(actor.home_url)
        return view_func(request, *args, **kwargs)

    return _wrapped
