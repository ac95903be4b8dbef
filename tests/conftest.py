"""
Pytest configuration and shared fixtures for the test suite.
"""

import io
import struct
import zlib
from datetime import time, timedelta

import pytest
from django.contrib.auth.hashers import make_password
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import Client
from django.utils import timezone
from PIL import Image
from ktp.models import JadwalSesi, Kelurahan, Penduduk, Permohonan, Petugas
from ktp.session import USER_TYPE_PETUGAS, USER_TYPE_WARGA, Actor

WARGA_NIK = "3172010101800001"
WARGA_PASSWORD = "rahasia123"
PETUGAS_PASSWORD = "admin123"


@pytest.fixture
def next_weekday():
    """First Monday-Friday date after today, so bookings are never in the past."""
    day = timezone.localdate() + timedelta(days=1)
    while day.weekday() >= 5:
        day += timedelta(days=1)
    return day


@pytest.fixture
def kelurahan(db):
    return Kelurahan.objects.create(nama_kelurahan="Pademangan Barat", kode_area="PMB")


@pytest.fixture
def kelurahan_lain(db):
    return Kelurahan.objects.create(nama_kelurahan="Ancol", kode_area="ACL")


@pytest.fixture
def create_penduduk(db, kelurahan):
    """Factory fixture to create a citizen with a password."""

    def _create_penduduk(nik=WARGA_NIK, password=WARGA_PASSWORD, **kwargs):
        data = {
            "nama_lengkap": "Andi Wijaya",
            "jenis_kelamin": Penduduk.LAKI_LAKI,
            "alamat": "Jl. Pademangan II No. 10",
            "no_hp": "081234567890",
            "kelurahan": kelurahan,
            "password_hash": make_password(password) if password else None,
        }
        data.update(kwargs)
        return Penduduk.objects.create(nik=nik, **data)

    return _create_penduduk


@pytest.fixture
def penduduk(create_penduduk):
    return create_penduduk()


@pytest.fixture
def petugas_kecamatan(db):
    return Petugas.objects.create(
        nip="198501152010011001",
        nama_petugas="Budi Santoso",
        username="admin.kecamatan",
        password_hash=make_password(PETUGAS_PASSWORD),
        role=Petugas.ROLE_ADMIN_KECAMATAN,
    )


@pytest.fixture
def petugas_kelurahan(db, kelurahan):
    return Petugas.objects.create(
        nip="199003202015012001",
        nama_petugas="Siti Rahayu",
        username="admin.pademanganbarat",
        password_hash=make_password(PETUGAS_PASSWORD),
        role=Petugas.ROLE_ADMIN_KELURAHAN,
        kelurahan=kelurahan,
    )


@pytest.fixture
def create_jadwal(db, next_weekday):
    """Factory fixture to create an appointment session."""

    def _create_jadwal(lokasi=None, **kwargs):
        data = {
            "tanggal": next_weekday,
            "jam_mulai": time(9, 0),
            "jam_selesai": time(12, 0),
            "kuota_maksimal": 50,
            "kuota_terisi": 0,
        }
        data.update(kwargs)
        return JadwalSesi.objects.create(lokasi_kelurahan=lokasi, **data)

    return _create_jadwal


@pytest.fixture
def jadwal(create_jadwal, kelurahan):
    return create_jadwal(lokasi=kelurahan)


@pytest.fixture
def create_permohonan(db):
    """Factory fixture to create an application directly, bypassing booking."""

    def _create_permohonan(penduduk, jadwal, **kwargs):
        data = {
            "jenis_permohonan": Permohonan.JENIS_BARU,
            "status_terkini": Permohonan.STATUS_TERDAFTAR,
            "nomor_antrian": 1,
        }
        data.update(kwargs)
        return Permohonan.objects.create(penduduk=penduduk, jadwal_sesi=jadwal, **data)

    return _create_permohonan


@pytest.fixture
def warga_actor(penduduk):
    return Actor(user_id=penduduk.nik, user_type=USER_TYPE_WARGA, name=penduduk.nama_lengkap)


@pytest.fixture
def kecamatan_actor(petugas_kecamatan):
    return Actor(
        user_id=str(petugas_kecamatan.id),
        user_type=USER_TYPE_PETUGAS,
        name=petugas_kecamatan.nama_petugas,
        role=petugas_kecamatan.role,
    )


@pytest.fixture
def kelurahan_actor(petugas_kelurahan):
    return Actor(
        user_id=str(petugas_kelurahan.id),
        user_type=USER_TYPE_PETUGAS,
        name=petugas_kelurahan.nama_petugas,
        role=petugas_kelurahan.role,
        kelurahan_id=petugas_kelurahan.kelurahan_id,
    )


@pytest.fixture
def warga_client(penduduk):
    """Client logged in as the default citizen through the login form."""
    client = Client()
    response = client.post("/auth/login", {"nik": penduduk.nik, "password": WARGA_PASSWORD})
    assert response.status_code == 302
    return client


@pytest.fixture
def petugas_client(petugas_kelurahan):
    """Client logged in as the kelurahan officer."""
    client = Client()
    response = client.post(
        "/auth/login/petugas", {"nip": petugas_kelurahan.nip, "password": PETUGAS_PASSWORD}
    )
    assert response.status_code == 302
    return client


@pytest.fixture
def kecamatan_client(petugas_kecamatan):
    client = Client()
    response = client.post(
        "/auth/login/petugas", {"nip": petugas_kecamatan.nip, "password": PETUGAS_PASSWORD}
    )
    assert response.status_code == 302
    return client


def make_image(name="dokumen.png", image_format="PNG", size=(32, 32)):
    buffer = io.BytesIO()
    Image.new("RGB", size, color=(200, 30, 30)).save(buffer, format=image_format)
    content_type = "image/png" if image_format == "PNG" else "image/jpeg"
    return SimpleUploadedFile(name, buffer.getvalue(), content_type=content_type)


def make_pdf(name="dokumen.pdf"):
    content = b"%PDF-1.4\n1 0 obj\n<< /Type /Catalog >>\nendobj\ntrailer\n<< /Root 1 0 R >>\n%%EOF\n"
    return SimpleUploadedFile(name, content, content_type="application/pdf")


def _png_chunk(tag, data=b""):
    return (
        struct.pack(">I", len(data))
        + tag
        + data
        + struct.pack(">I", zlib.crc32(tag + data) & 0xFFFFFFFF)
    )


def make_oversized_png(name="kk.png", width=100000, height=100000):
    """Tiny PNG whose header declares dimensions far beyond the Pillow pixel limit."""
    header = struct.pack(">IIBBBBB", width, height, 8, 2, 0, 0, 0)
    content = (
        b"\x89PNG\r\n\x1a\n" + _png_chunk(b"IHDR", header) + _png_chunk(b"IDAT") + _png_chunk(b"IEND")
    )
    return SimpleUploadedFile(name, content, content_type="image/png")


@pytest.fixture
def png_file():
    return make_image()


@pytest.fixture
def jpeg_file():
    return make_image("ktp.jpg", "JPEG")


@pytest.fixture
def pdf_file():
    return make_pdf()


@pytest.fixture
def image_factory():
    return make_image
