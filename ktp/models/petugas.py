import uuid

from django.db import models
from .kelurahan import Kelurahan


class Petugas(models.Model):
    """
    Officer processing applications.

    An officer without a kelurahan works at the district (kecamatan) level
    and sees every sub-district's records.
    """

    ROLE_ADMIN_KECAMATAN = "ADMIN_KECAMATAN"
    ROLE_ADMIN_KELURAHAN = "ADMIN_KELURAHAN"

    ROLE_CHOICES = [
        (ROLE_ADMIN_KECAMATAN, "Admin Kecamatan"),
        (ROLE_ADMIN_KELURAHAN, "Admin Kelurahan"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    nip = models.CharField(max_length=18, unique=True, help_text="18-digit employee number")
    nama_petugas = models.CharField(max_length=255)
    username = models.CharField(max_length=100, unique=True)
    password_hash = models.CharField(max_length=255)
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_ADMIN_KELURAHAN)
    kelurahan = models.ForeignKey(
        Kelurahan,
        on_delete=models.PROTECT,
        related_name="petugas",
        blank=True,
        null=True,
        help_text="Empty for district-level officers",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "petugas"
        ordering = ["nama_petugas"]
        verbose_name = "Petugas"
        verbose_name_plural = "Petugas"

    def __str__(self):
        return f"{self.nama_petugas} ({self.get_role_display()})"

    @property
    def is_kecamatan(self) -> bool:
        return self.kelurahan_id is None
