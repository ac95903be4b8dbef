"""
Unit tests for UploadService and the upload fields of the application forms.
"""

import pytest
from conftest import make_oversized_png
from django.core.files.uploadedfile import SimpleUploadedFile
from ktp.forms import PermohonanBaruForm, PermohonanRusakForm
from ktp.models import JadwalSesi
from ktp.services.upload_service import (
    KIND_JPEG,
    KIND_PDF,
    KIND_PNG,
    MESSAGE_UNSUPPORTED,
    UploadService,
)


class TestSniffKind:
    """Test cases for content detection."""

    def setup_method(self):
        self.service = UploadService()

    def test_pdf(self, pdf_file):
        assert self.service.sniff_kind(pdf_file) == KIND_PDF

    def test_png(self, png_file):
        assert self.service.sniff_kind(png_file) == KIND_PNG

    def test_jpeg(self, jpeg_file):
        assert self.service.sniff_kind(jpeg_file) == KIND_JPEG

    def test_text_is_unknown(self):
        uploaded = SimpleUploadedFile("catatan.txt", b"bukan dokumen")

        assert self.service.sniff_kind(uploaded) is None

    def test_gif_is_not_accepted(self, image_factory):
        assert self.service.sniff_kind(image_factory("anim.gif", "GIF")) is None

    def test_oversized_image_is_unknown(self):
        assert self.service.sniff_kind(make_oversized_png()) is None

    def test_position_restored(self, png_file):
        self.service.sniff_kind(png_file)

        assert png_file.tell() == 0


class TestValidate:
    """Test cases for single-file validation."""

    def setup_method(self):
        self.service = UploadService()

    def test_valid_files(self, pdf_file, png_file, jpeg_file):
        assert self.service.validate(pdf_file) is None
        assert self.service.validate(png_file) is None
        assert self.service.validate(jpeg_file) is None

    def test_jpeg_extension_variants(self, image_factory):
        assert self.service.validate(image_factory("foto.JPEG", "JPEG")) is None

    def test_too_large(self, pdf_file):
        assert self.service.validate(pdf_file, max_size=10) == "Ukuran file maksimal 0MB"

    def test_size_limit_message(self, settings):
        settings.UPLOAD_MAX_FILE_SIZE = 2 * 1024 * 1024
        uploaded = SimpleUploadedFile("besar.pdf", b"%PDF-" + b"0" * (2 * 1024 * 1024))

        assert self.service.validate(uploaded) == "Ukuran file maksimal 2MB"

    def test_empty_file(self):
        assert self.service.validate(SimpleUploadedFile("kosong.pdf", b"")) == "File kosong"

    def test_unsupported_content(self):
        uploaded = SimpleUploadedFile("skrip.pdf", b"#!/bin/sh\necho hi\n")

        assert self.service.validate(uploaded) == MESSAGE_UNSUPPORTED

    def test_oversized_image_rejected(self):
        assert self.service.validate(make_oversized_png()) == MESSAGE_UNSUPPORTED

    def test_extension_mismatch(self, image_factory):
        disguised = image_factory("dokumen.pdf", "PNG")

        assert self.service.validate(disguised) == "Ekstensi file tidak sesuai dengan isi file"

    def test_total_size(self, pdf_file, png_file):
        assert self.service.validate_total([pdf_file, None, png_file], max_total=10) is not None
        assert self.service.validate_total([pdf_file, png_file]) is None


@pytest.mark.django_db
class TestPermohonanFormUploads:
    """Test cases for upload handling inside the application forms."""

    def test_valid_new_card_form(self, jadwal, pdf_file):
        form = PermohonanBaruForm(
            {"jadwal_sesi_id": str(jadwal.id)},
            {"kartu_keluarga": pdf_file},
        )

        assert form.is_valid(), form.errors
        assert form.documents() == [("KK", pdf_file)]
        assert form.keterangan() == {}

    def test_missing_document(self, jadwal):
        form = PermohonanBaruForm({"jadwal_sesi_id": str(jadwal.id)}, {})

        assert not form.is_valid()
        assert form.errors["kartu_keluarga"] == ["File Kartu Keluarga wajib diunggah"]

    def test_missing_jadwal(self, pdf_file):
        form = PermohonanBaruForm({}, {"kartu_keluarga": pdf_file})

        assert not form.is_valid()
        assert form.errors["jadwal_sesi_id"] == ["Pilih jadwal kedatangan"]

    def test_malformed_jadwal_id(self, pdf_file):
        form = PermohonanBaruForm({"jadwal_sesi_id": "bukan-uuid"}, {"kartu_keluarga": pdf_file})

        assert not form.is_valid()
        assert form.errors["jadwal_sesi_id"] == ["Pilih jadwal kedatangan"]

    def test_full_session_passes_form_validation(self, create_jadwal, pdf_file):
        jadwal = create_jadwal(kuota_terisi=50, kuota_maksimal=50, status_sesi=JadwalSesi.STATUS_PENUH)
        form = PermohonanBaruForm({"jadwal_sesi_id": str(jadwal.id)}, {"kartu_keluarga": pdf_file})

        assert form.is_valid(), form.errors
        assert form.cleaned_data["jadwal_sesi_id"] == jadwal.id

    def test_two_file_total_limit(self, settings, jadwal, pdf_file, png_file):
        settings.UPLOAD_MAX_TOTAL_SIZE = 50
        form = PermohonanRusakForm(
            {"jadwal_sesi_id": str(jadwal.id), "deskripsi_kerusakan": "Terbelah dua"},
            {"ktp_rusak": png_file, "kartu_keluarga": pdf_file},
        )

        assert not form.is_valid()
        assert form.non_field_errors() == ["Total ukuran file maksimal 0MB"]
