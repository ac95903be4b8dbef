from django.db import models


class Kelurahan(models.Model):
    """Sub-district (kelurahan): the smallest administrative scope of an officer."""

    id = models.SmallAutoField(primary_key=True)
    nama_kelurahan = models.CharField(max_length=100)
    kode_area = models.CharField(max_length=10, unique=True, help_text="Short area code, e.g. PMB")

    class Meta:
        db_table = "kelurahan"
        ordering = ["nama_kelurahan"]
        verbose_name = "Kelurahan"
        verbose_name_plural = "Kelurahan"

    def __str__(self):
        return f"{self.nama_kelurahan} ({self.kode_area})"
