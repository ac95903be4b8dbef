import uuid

from django.conf import settings
from django.db import models
from django.db.models import F, Q
from .kelurahan import Kelurahan


class JadwalSesi(models.Model):
    """
    Bookable appointment session with a capacity quota.

    A session without a kelurahan is held at the district office.
    """

    STATUS_BUKA = "BUKA"
    STATUS_PENUH = "PENUH"
    STATUS_ISTIRAHAT = "ISTIRAHAT"

    STATUS_CHOICES = [
        (STATUS_BUKA, "Buka"),  # Accepting bookings
        (STATUS_PENUH, "Penuh"),  # Quota exhausted
        (STATUS_ISTIRAHAT, "Istirahat"),  # Closed by an officer
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    lokasi_kelurahan = models.ForeignKey(
        Kelurahan,
        on_delete=models.PROTECT,
        related_name="jadwal_sesi",
        blank=True,
        null=True,
        help_text="Empty for sessions at the district office",
    )
    tanggal = models.DateField(db_index=True)
    jam_mulai = models.TimeField()
    jam_selesai = models.TimeField()
    kuota_maksimal = models.PositiveSmallIntegerField(default=50)
    kuota_terisi = models.PositiveSmallIntegerField(default=0)
    status_sesi = models.CharField(
        max_length=10, choices=STATUS_CHOICES, default=STATUS_BUKA, db_index=True
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "jadwal_sesi"
        ordering = ["tanggal", "jam_mulai"]
        constraints = [
            models.CheckConstraint(
                condition=Q(kuota_terisi__lte=F("kuota_maksimal")),
                name="jadwal_sesi_kuota_terisi_lte_maksimal",
            ),
            models.CheckConstraint(
                condition=Q(jam_selesai__gt=F("jam_mulai")),
                name="jadwal_sesi_jam_selesai_after_mulai",
            ),
            models.UniqueConstraint(
                fields=["lokasi_kelurahan", "tanggal", "jam_mulai"],
                name="jadwal_sesi_unique_kelurahan_slot",
            ),
            # NULLs are distinct in unique indexes, so the district office
            # needs its own partial constraint
            models.UniqueConstraint(
                fields=["tanggal", "jam_mulai"],
                condition=Q(lokasi_kelurahan__isnull=True),
                name="jadwal_sesi_unique_kecamatan_slot",
            ),
        ]
        verbose_name = "Jadwal Sesi"
        verbose_name_plural = "Jadwal Sesi"

    def __str__(self):
        return f"{self.tanggal} {self.jam_mulai:%H:%M}-{self.jam_selesai:%H:%M} ({self.nama_lokasi})"

    @property
    def nama_lokasi(self) -> str:
        if self.lokasi_kelurahan_id is None:
            return settings.DISTRICT_OFFICE_NAME
        return self.lokasi_kelurahan.nama_kelurahan

    @property
    def kuota_sisa(self) -> int:
        return max(self.kuota_maksimal - self.kuota_terisi, 0)

    @property
    def is_bookable(self) -> bool:
        return self.status_sesi == self.STATUS_BUKA and self.kuota_terisi < self.kuota_maksimal
