"""
Django management command to seed reference data.

Creates the kelurahan of Kecamatan Pademangan and one officer account per
administrative scope. Existing rows are left untouched, so the command can
be re-run safely.

Usage:
    python manage.py seed_data
    python manage.py seed_data --reset [--force]
"""

import logging

from django.conf import settings
from django.contrib.auth.hashers import make_password
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from ktp.models import (
    DokumenSyarat,
    JadwalSesi,
    Kelurahan,
    Penduduk,
    Permohonan,
    Petugas,
    RiwayatStatus,
)

logger = logging.getLogger(__name__)

KELURAHAN = [
    ("Pademangan Barat", "PMB"),
    ("Pademangan Timur", "PMT"),
    ("Ancol", "ACL"),
]

DEFAULT_PASSWORD = "admin123"

# (nip, nama, username, kode_area or None for district level)
PETUGAS = [
    ("198501152010011001", "Budi Santoso", "admin.kecamatan", None),
    ("199003202015012001", "Siti Rahayu", "admin.pademanganbarat", "PMB"),
    ("198807112012011002", "Ahmad Hidayat", "admin.pademangantimur", "PMT"),
    ("199205182018012003", "Dewi Lestari", "admin.ancol", "ACL"),
]


class Command(BaseCommand):
    help = "Seed kelurahan and officer accounts"

    def add_arguments(self, parser):
        parser.add_argument(
            "--reset",
            action="store_true",
            help="Delete applications, sessions, citizens, officers and kelurahan first (destructive)",
        )
        parser.add_argument(
            "--force",
            action="store_true",
            help="Allow --reset when DEBUG is off",
        )

    def handle(self, *args, **options):
        if options["reset"]:
            if not settings.DEBUG and not options["force"]:
                raise CommandError(
                    "Refusing to reset the database with DEBUG off. Use --force to override."
                )
            self._reset()

        self.stdout.write("Seeding kelurahan...")
        kelurahan_by_kode = {}
        for nama, kode in KELURAHAN:
            kelurahan, created = Kelurahan.objects.get_or_create(
                kode_area=kode, defaults={"nama_kelurahan": nama}
            )
            kelurahan_by_kode[kode] = kelurahan
            verb = "Created" if created else "Exists"
            self.stdout.write(f"  {verb}: {kelurahan.nama_kelurahan} ({kode}, id {kelurahan.id})")

        self.stdout.write("Seeding petugas...")
        for nip, nama, username, kode in PETUGAS:
            if Petugas.objects.filter(username=username).exists():
                self.stdout.write(f"  Exists: {username}")
                continue

            kelurahan = kelurahan_by_kode[kode] if kode else None
            petugas = Petugas.objects.create(
                nip=nip,
                nama_petugas=nama,
                username=username,
                password_hash=make_password(DEFAULT_PASSWORD),
                role=Petugas.ROLE_ADMIN_KELURAHAN if kelurahan else Petugas.ROLE_ADMIN_KECAMATAN,
                kelurahan=kelurahan,
            )
            self.stdout.write(f"  Created: {petugas.nama_petugas} ({username}) - {petugas.role}")

        logger.info("Seed data applied")
        self.stdout.write(self.style.SUCCESS("Seeding completed"))
        self.stdout.write("Login credentials (NIP / password):")
        for nip, nama, username, kode in PETUGAS:
            self.stdout.write(f"  {nip}  {DEFAULT_PASSWORD}  {username}")

    @transaction.atomic
    def _reset(self):
        self.stdout.write(self.style.WARNING("Resetting seed tables..."))
        # Children first; the foreign keys are PROTECT
        for model in (
            RiwayatStatus,
            DokumenSyarat,
            Permohonan,
            JadwalSesi,
            Penduduk,
            Petugas,
            Kelurahan,
        ):
            deleted, _ = model.objects.all().delete()
            self.stdout.write(f"  Deleted {deleted} {model._meta.verbose_name_plural}")
        logger.warning("Seed tables reset")
