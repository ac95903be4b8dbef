"""
Tests for the seed_data and generate_jadwal management commands.
"""

from io import StringIO

import pytest
from django.contrib.auth.hashers import check_password
from django.core.management import call_command
from django.core.management.base import CommandError
from ktp.models import JadwalSesi, Kelurahan, Petugas


@pytest.mark.django_db
class TestSeedData:
    """Test cases for reference data seeding."""

    def test_seeds_kelurahan_and_officers(self):
        out = StringIO()

        call_command("seed_data", stdout=out)

        assert set(Kelurahan.objects.values_list("kode_area", flat=True)) == {"PMB", "PMT", "ACL"}
        assert Petugas.objects.count() == 4
        kecamatan = Petugas.objects.get(username="admin.kecamatan")
        assert kecamatan.role == Petugas.ROLE_ADMIN_KECAMATAN
        assert kecamatan.kelurahan is None
        assert check_password("admin123", kecamatan.password_hash)
        ancol = Petugas.objects.get(username="admin.ancol")
        assert ancol.kelurahan.kode_area == "ACL"
        assert "Seeding completed" in out.getvalue()

    def test_rerun_is_idempotent(self):
        call_command("seed_data", stdout=StringIO())
        call_command("seed_data", stdout=StringIO())

        assert Kelurahan.objects.count() == 3
        assert Petugas.objects.count() == 4

    def test_reset_refused_without_debug(self, settings):
        settings.DEBUG = False
        call_command("seed_data", stdout=StringIO())

        with pytest.raises(CommandError):
            call_command("seed_data", "--reset", stdout=StringIO())

        assert Petugas.objects.count() == 4

    def test_reset_with_force(self, settings, jadwal):
        settings.DEBUG = False

        call_command("seed_data", "--reset", "--force", stdout=StringIO())

        assert not JadwalSesi.objects.exists()
        assert Kelurahan.objects.count() == 3


@pytest.mark.django_db
class TestGenerateJadwalCommand:
    """Test cases for the session generator command."""

    def test_generate_for_kelurahan(self, kelurahan):
        out = StringIO()

        call_command("generate_jadwal", "--kelurahan", "pmb", "--days", "7", stdout=out)

        assert JadwalSesi.objects.filter(lokasi_kelurahan=kelurahan).count() == 10
        assert "Pademangan Barat" in out.getvalue()

    def test_generate_for_district_office(self, db):
        call_command("generate_jadwal", "--days", "7", "--kuota", "30", stdout=StringIO())

        sessions = JadwalSesi.objects.filter(lokasi_kelurahan__isnull=True)
        assert sessions.count() == 10
        assert set(sessions.values_list("kuota_maksimal", flat=True)) == {30}

    def test_unknown_kelurahan(self, db):
        with pytest.raises(CommandError):
            call_command("generate_jadwal", "--kelurahan", "XYZ", stdout=StringIO())
