"""
Unit tests for session handling, the actor middleware and access decorators.
"""

import pytest
from django.http import HttpResponse
from django.test import Client, RequestFactory
from ktp.middleware import (
    ActorMiddleware,
    petugas_required,
    redirect_if_authenticated,
    warga_required,
)
from ktp.models import Petugas
from ktp.session import (
    KEY_KELURAHAN_ID,
    KEY_USER_ID,
    SESSION_AGE,
    USER_TYPE_PETUGAS,
    USER_TYPE_WARGA,
    Actor,
    get_actor,
)

from conftest import WARGA_PASSWORD


class FakeSession(dict):
    def flush(self):
        self.clear()


def _request(session=None, htmx=False):
    headers = {"HTTP_HX_REQUEST": "true"} if htmx else {}
    request = RequestFactory().get("/", **headers)
    request.session = FakeSession(session or {})
    return request


def _ok(request):
    return HttpResponse("ok")


class TestActor:
    """Test cases for the session actor."""

    def test_no_session_data(self):
        assert get_actor(_request()) is None

    def test_unknown_user_type(self):
        assert get_actor(_request({KEY_USER_ID: "x", "user_type": "tamu"})) is None

    def test_warga(self):
        actor = get_actor(
            _request({KEY_USER_ID: "3172010101800001", "user_type": USER_TYPE_WARGA, "user_name": "Andi"})
        )

        assert actor.is_warga
        assert not actor.is_kecamatan
        assert actor.home_url == "/dashboard"

    def test_kecamatan_officer(self):
        actor = Actor(user_id="1", user_type=USER_TYPE_PETUGAS, name="Budi", role="ADMIN_KECAMATAN")

        assert actor.is_kecamatan
        assert actor.role_display == "Admin Kecamatan"
        assert actor.home_url == "/admin"

    def test_kelurahan_officer(self):
        actor = Actor(user_id="1", user_type=USER_TYPE_PETUGAS, name="Siti", kelurahan_id=3)

        assert not actor.is_kecamatan

    def test_middleware_attaches_actor(self):
        request = _request({KEY_USER_ID: "3172010101800001", "user_type": USER_TYPE_WARGA})

        ActorMiddleware(_ok)(request)

        assert request.actor.user_id == "3172010101800001"
        assert request.actor.is_warga


@pytest.mark.django_db
class TestOfficerRefresh:
    """Test cases for re-reading officer scope on every request."""

    def _officer_request(self, petugas, kelurahan_id):
        return _request(
            {
                KEY_USER_ID: str(petugas.id),
                "user_type": USER_TYPE_PETUGAS,
                "user_name": petugas.nama_petugas,
                "user_role": petugas.role,
                KEY_KELURAHAN_ID: kelurahan_id,
            }
        )

    def test_unchanged_officer_keeps_session(self, petugas_kelurahan):
        request = self._officer_request(petugas_kelurahan, petugas_kelurahan.kelurahan_id)

        ActorMiddleware(_ok)(request)

        assert request.actor.kelurahan_id == petugas_kelurahan.kelurahan_id
        assert request.actor.name == "Siti Rahayu"

    def test_reassigned_officer_gets_new_scope(self, petugas_kelurahan, kelurahan, kelurahan_lain):
        request = self._officer_request(petugas_kelurahan, kelurahan.id)
        petugas_kelurahan.kelurahan = kelurahan_lain
        petugas_kelurahan.save()

        ActorMiddleware(_ok)(request)

        assert request.actor.kelurahan_id == kelurahan_lain.id
        assert request.session[KEY_KELURAHAN_ID] == kelurahan_lain.id

    def test_promoted_officer_becomes_district_level(self, petugas_kelurahan, kelurahan):
        request = self._officer_request(petugas_kelurahan, kelurahan.id)
        petugas_kelurahan.kelurahan = None
        petugas_kelurahan.role = Petugas.ROLE_ADMIN_KECAMATAN
        petugas_kelurahan.save()

        ActorMiddleware(_ok)(request)

        assert request.actor.is_kecamatan
        assert request.actor.role == Petugas.ROLE_ADMIN_KECAMATAN

    def test_removed_officer_is_logged_out(self, petugas_client, petugas_kelurahan):
        petugas_kelurahan.delete()

        response = petugas_client.get("/admin")

        assert response.status_code == 302
        assert response["Location"] == "/petugas/login"
        assert KEY_USER_ID not in petugas_client.session

    def test_malformed_officer_id_is_anonymous(self, db):
        request = _request({KEY_USER_ID: "1", "user_type": USER_TYPE_PETUGAS})

        ActorMiddleware(_ok)(request)

        assert request.actor is None


class TestDecorators:
    """Test cases for the access-control decorators."""

    def _with_actor(self, actor, htmx=False):
        request = _request(htmx=htmx)
        request.actor = actor
        return request

    def test_warga_required_allows_citizen(self):
        actor = Actor(user_id="3172010101800001", user_type=USER_TYPE_WARGA, name="Andi")

        response = warga_required(_ok)(self._with_actor(actor))

        assert response.content == b"ok"

    def test_warga_required_rejects_officer(self):
        actor = Actor(user_id="1", user_type=USER_TYPE_PETUGAS, name="Budi")

        response = warga_required(_ok)(self._with_actor(actor))

        assert response.status_code == 302
        assert response["Location"] == "/login"

    def test_petugas_required_htmx(self):
        response = petugas_required(_ok)(self._with_actor(None, htmx=True))

        assert response.status_code == 401
        assert response["HX-Redirect"] == "/petugas/login"

    def test_redirect_if_authenticated(self):
        actor = Actor(user_id="1", user_type=USER_TYPE_PETUGAS, name="Budi")

        response = redirect_if_authenticated(_ok)(self._with_actor(actor))

        assert response["Location"] == "/admin"

    def test_redirect_if_authenticated_anonymous(self):
        assert redirect_if_authenticated(_ok)(self._with_actor(None)).content == b"ok"


@pytest.mark.django_db
class TestSessionLifetime:
    """Test cases for session expiry set at login."""

    def test_default_expiry(self, warga_client):
        assert warga_client.session.get_expiry_age() == SESSION_AGE

    def test_session_key_rotated_on_login(self, penduduk):
        client = Client()
        client.get("/login")
        client.cookies["simpel-ktp-session"] = "sessionlama"

        client.post("/auth/login", {"nik": penduduk.nik, "password": WARGA_PASSWORD})

        assert client.cookies["simpel-ktp-session"].value != "sessionlama"
