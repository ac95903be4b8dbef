from datetime import date

from django.db import models
from .kelurahan import Kelurahan


class Penduduk(models.Model):
    """Citizen (warga) identified by a 16-digit NIK."""

    LAKI_LAKI = "LAKI_LAKI"
    PEREMPUAN = "PEREMPUAN"

    JENIS_KELAMIN_CHOICES = [
        (LAKI_LAKI, "Laki-laki"),
        (PEREMPUAN, "Perempuan"),
    ]

    # Minimum age for holding an identity card
    USIA_WAJIB_KTP = 17

    nik = models.CharField(max_length=16, primary_key=True)
    nama_lengkap = models.CharField(max_length=255)
    jenis_kelamin = models.CharField(max_length=10, choices=JENIS_KELAMIN_CHOICES)
    tanggal_lahir = models.DateField(blank=True, null=True)
    alamat = models.TextField(blank=True, null=True)
    no_hp = models.CharField(max_length=20, blank=True, null=True)
    email = models.EmailField(blank=True, null=True, unique=True)
    kelurahan = models.ForeignKey(
        Kelurahan,
        on_delete=models.PROTECT,
        related_name="penduduk",
        blank=True,
        null=True,
        help_text="Home sub-district",
    )
    password_hash = models.CharField(
        max_length=255,
        blank=True,
        null=True,
        help_text="Unset for administratively seeded citizens; blocks login",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "penduduk"
        ordering = ["nama_lengkap"]
        indexes = [
            models.Index(fields=["nama_lengkap"], name="penduduk_nama_idx"),
        ]
        verbose_name = "Penduduk"
        verbose_name_plural = "Penduduk"

    def __str__(self):
        return f"{self.nama_lengkap} ({self.nik})"

    @property
    def has_password(self) -> bool:
        return bool(self.password_hash)

    @classmethod
    def batas_lahir_wajib_ktp(cls, today: date) -> date:
        """Latest birth date that makes a citizen old enough for an identity card."""
        try:
            return today.replace(year=today.year - cls.USIA_WAJIB_KTP)
        except ValueError:
            # 29 February
            return today.replace(year=today.year - cls.USIA_WAJIB_KTP, day=28)
