import os
import uuid

from django.db import models
from django.utils import timezone
from .jadwal import JadwalSesi
from .penduduk import Penduduk
from .petugas import Petugas


def dokumen_upload_path(instance, filename):
    """uploads/<nik>/<KIND>_<nik>_<timestamp><ext>; the timestamp keeps concurrent uploads apart."""
    nik = instance.permohonan.penduduk_id
    ext = os.path.splitext(filename)[1].lower()
    stamp = timezone.now().strftime("%Y%m%d%H%M%S%f")
    return f"uploads/{nik}/{instance.jenis_dokumen}_{nik}_{stamp}{ext}"


class Permohonan(models.Model):
    """
    Identity card application tied to one citizen and one appointment session.

    Status moves along TERDAFTAR -> VERIFIKASI -> PROSES -> SIAP_AMBIL -> SELESAI,
    with DITOLAK as the rejection branch. Every officer transition is recorded
    in RiwayatStatus.
    """

    JENIS_BARU = "BARU"
    JENIS_HILANG = "HILANG"
    JENIS_RUSAK = "RUSAK"
    JENIS_UPDATE = "UPDATE"

    JENIS_CHOICES = [
        (JENIS_BARU, "KTP Baru"),
        (JENIS_HILANG, "KTP Hilang"),
        (JENIS_RUSAK, "KTP Rusak"),
        (JENIS_UPDATE, "Perubahan Data KTP"),
    ]

    STATUS_TERDAFTAR = "TERDAFTAR"
    STATUS_VERIFIKASI = "VERIFIKASI"
    STATUS_PROSES = "PROSES"
    STATUS_SIAP_AMBIL = "SIAP_AMBIL"
    STATUS_SELESAI = "SELESAI"
    STATUS_DITOLAK = "DITOLAK"

    STATUS_CHOICES = [
        (STATUS_TERDAFTAR, "Terdaftar"),  # Just submitted
        (STATUS_VERIFIKASI, "Verifikasi"),  # Documents under verification
        (STATUS_PROSES, "Proses"),  # Card being printed
        (STATUS_SIAP_AMBIL, "Siap Ambil"),  # Ready for pickup
        (STATUS_SELESAI, "Selesai"),  # Picked up
        (STATUS_DITOLAK, "Ditolak"),  # Rejected
    ]

    # A citizen may hold at most one application in these statuses
    ACTIVE_STATUSES = (STATUS_VERIFIKASI, STATUS_PROSES, STATUS_SIAP_AMBIL)

    # Statuses an officer may set; TERDAFTAR is only assigned on creation
    OFFICER_STATUSES = (
        STATUS_VERIFIKASI,
        STATUS_PROSES,
        STATUS_SIAP_AMBIL,
        STATUS_SELESAI,
        STATUS_DITOLAK,
    )

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    kode_booking = models.CharField(max_length=12, unique=True, editable=False)
    penduduk = models.ForeignKey(
        Penduduk, on_delete=models.PROTECT, related_name="permohonan", db_column="nik"
    )
    jadwal_sesi = models.ForeignKey(
        JadwalSesi, on_delete=models.PROTECT, related_name="permohonan"
    )
    jenis_permohonan = models.CharField(max_length=10, choices=JENIS_CHOICES)
    status_terkini = models.CharField(
        max_length=12, choices=STATUS_CHOICES, default=STATUS_TERDAFTAR, db_index=True
    )
    nomor_antrian = models.PositiveSmallIntegerField(blank=True, null=True)
    keterangan = models.JSONField(
        default=dict, blank=True, help_text="Kind-specific form details"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "permohonan"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status_terkini", "created_at"], name="permohonan_status_created_idx"),
            models.Index(fields=["penduduk", "status_terkini"], name="permohonan_nik_status_idx"),
        ]
        verbose_name = "Permohonan"
        verbose_name_plural = "Permohonan"

    def __str__(self):
        return f"{self.kode_booking} - {self.get_jenis_permohonan_display()} ({self.status_terkini})"


class RiwayatStatus(models.Model):
    """Append-only status history entry of an application."""

    permohonan = models.ForeignKey(
        Permohonan, on_delete=models.CASCADE, related_name="riwayat_status"
    )
    petugas = models.ForeignKey(
        Petugas,
        on_delete=models.SET_NULL,
        related_name="riwayat_status",
        blank=True,
        null=True,
        help_text="Empty when the change was made by the system",
    )
    status_baru = models.CharField(max_length=12, choices=Permohonan.STATUS_CHOICES)
    catatan_proses = models.TextField(blank=True, default="")
    waktu_proses = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "riwayat_status"
        ordering = ["waktu_proses", "id"]
        verbose_name = "Riwayat Status"
        verbose_name_plural = "Riwayat Status"

    def __str__(self):
        return f"{self.permohonan_id} -> {self.status_baru}"

    @property
    def nama_petugas(self) -> str:
        return self.petugas.nama_petugas if self.petugas_id else "Sistem"


class DokumenSyarat(models.Model):
    """Supporting document uploaded with an application."""

    JENIS_KK = "KK"
    JENIS_SURAT_POLISI = "SURAT_POLISI"
    JENIS_KTP_RUSAK = "KTP_RUSAK"
    JENIS_KTP = "KTP"

    JENIS_CHOICES = [
        (JENIS_KK, "Kartu Keluarga"),
        (JENIS_SURAT_POLISI, "Surat Keterangan Polisi"),
        (JENIS_KTP_RUSAK, "Foto KTP Rusak"),
        (JENIS_KTP, "Foto KTP Lama"),
    ]

    permohonan = models.ForeignKey(
        Permohonan, on_delete=models.CASCADE, related_name="dokumen"
    )
    jenis_dokumen = models.CharField(max_length=15, choices=JENIS_CHOICES)
    file = models.FileField(upload_to=dokumen_upload_path, max_length=500)
    uploaded_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "dokumen_syarat"
        ordering = ["uploaded_at", "id"]
        verbose_name = "Dokumen Syarat"
        verbose_name_plural = "Dokumen Syarat"

    def __str__(self):
        return f"{self.get_jenis_dokumen_display()} - {self.permohonan_id}"
