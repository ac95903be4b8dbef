"""
Unit tests for AuthService - citizen and officer authentication and registration.
"""

import pytest
from django.contrib.auth.hashers import check_password
from django.db import DatabaseError
from ktp.models import Penduduk
from ktp.services.auth_service import AuthService
from ktp.services.results import (
    ERROR_CONFLICT,
    ERROR_INTERNAL,
    ERROR_INVALID_CREDENTIALS,
    ERROR_NO_PASSWORD,
)

from conftest import PETUGAS_PASSWORD, WARGA_NIK, WARGA_PASSWORD


@pytest.mark.django_db
class TestLoginWarga:
    """Test cases for citizen login."""

    def setup_method(self):
        self.service = AuthService()

    def test_login_success(self, penduduk):
        result = self.service.login_warga(WARGA_NIK, WARGA_PASSWORD)

        assert result["success"] is True
        assert result["penduduk"].nik == WARGA_NIK

    def test_login_wrong_password(self, penduduk):
        result = self.service.login_warga(WARGA_NIK, "salah12345")

        assert result["success"] is False
        assert result["error"] == ERROR_INVALID_CREDENTIALS
        assert result["message"] == "NIK atau password salah"

    def test_login_unknown_nik_same_message(self, db):
        result = self.service.login_warga("3172019999999999", WARGA_PASSWORD)

        assert result["error"] == ERROR_INVALID_CREDENTIALS
        assert result["message"] == "NIK atau password salah"

    def test_login_without_password_set(self, create_penduduk):
        create_penduduk(password=None)

        result = self.service.login_warga(WARGA_NIK, WARGA_PASSWORD)

        assert result["success"] is False
        assert result["error"] == ERROR_NO_PASSWORD

    def test_login_database_error(self, db, mocker):
        mocker.patch(
            "ktp.services.auth_service.Penduduk.objects.filter",
            side_effect=DatabaseError("connection lost"),
        )

        result = self.service.login_warga(WARGA_NIK, WARGA_PASSWORD)

        assert result["error"] == ERROR_INTERNAL
        assert "connection lost" not in result["message"]


@pytest.mark.django_db
class TestLoginPetugas:
    """Test cases for officer login."""

    def setup_method(self):
        self.service = AuthService()

    def test_login_kecamatan_officer(self, petugas_kecamatan):
        result = self.service.login_petugas(petugas_kecamatan.nip, PETUGAS_PASSWORD)

        assert result["success"] is True
        assert result["petugas"].kelurahan_id is None

    def test_login_kelurahan_officer(self, petugas_kelurahan, kelurahan):
        result = self.service.login_petugas(petugas_kelurahan.nip, PETUGAS_PASSWORD)

        assert result["success"] is True
        assert result["petugas"].kelurahan_id == kelurahan.id

    def test_login_wrong_password(self, petugas_kelurahan):
        result = self.service.login_petugas(petugas_kelurahan.nip, "bukanpassword")

        assert result["success"] is False
        assert result["message"] == "NIP atau password salah"

    def test_login_unknown_nip(self, db):
        result = self.service.login_petugas("199999999999999999", PETUGAS_PASSWORD)

        assert result["error"] == ERROR_INVALID_CREDENTIALS


@pytest.mark.django_db
class TestRegisterWarga:
    """Test cases for citizen self-registration."""

    def setup_method(self):
        self.service = AuthService()

    def _data(self, kelurahan, **overrides):
        data = {
            "nik": "3172015505950002",
            "nama_lengkap": "Rina Marlina",
            "email": "rina@example.com",
            "password": "passwordku",
            "jenis_kelamin": Penduduk.PEREMPUAN,
            "tanggal_lahir": None,
            "alamat": "Jl. Ancol Barat 5",
            "no_hp": "081298765432",
            "kelurahan": kelurahan,
        }
        data.update(overrides)
        return data

    def test_register_success_hashes_password(self, kelurahan):
        result = self.service.register_warga(self._data(kelurahan))

        assert result["success"] is True
        penduduk = Penduduk.objects.get(nik="3172015505950002")
        assert penduduk.password_hash != "passwordku"
        assert check_password("passwordku", penduduk.password_hash)
        assert penduduk.kelurahan == kelurahan

    def test_register_duplicate_nik(self, penduduk, kelurahan):
        result = self.service.register_warga(self._data(kelurahan, nik=WARGA_NIK))

        assert result["success"] is False
        assert result["error"] == ERROR_CONFLICT
        assert result["field"] == "nik"

    def test_register_duplicate_email(self, create_penduduk, kelurahan):
        create_penduduk(email="rina@example.com")

        result = self.service.register_warga(self._data(kelurahan, email="RINA@example.com"))

        assert result["error"] == ERROR_CONFLICT
        assert result["field"] == "email"

    def test_register_without_email(self, kelurahan):
        result = self.service.register_warga(self._data(kelurahan, email=""))

        assert result["success"] is True
        assert result["penduduk"].email is None
