"""
Django management command to generate appointment sessions.

Creates the two weekday sessions for the coming days at one kelurahan or,
without --kelurahan, at the district office. Existing sessions are kept.

Usage:
    python manage.py generate_jadwal [--kelurahan PMB] [--days 30] [--kuota 50]
"""

from django.core.management.base import BaseCommand, CommandError
from ktp.models import Kelurahan
from ktp.services.jadwal_service import JadwalService


class Command(BaseCommand):
    help = "Generate weekday appointment sessions"

    def add_arguments(self, parser):
        parser.add_argument("--kelurahan", help="Kode area of the kelurahan, e.g. PMB")
        parser.add_argument("--days", type=int, default=None, help="Number of calendar days")
        parser.add_argument("--kuota", type=int, default=None, help="Quota per session")

    def handle(self, *args, **options):
        kelurahan_id = None
        lokasi = "kantor kecamatan"
        if options["kelurahan"]:
            kelurahan = Kelurahan.objects.filter(kode_area=options["kelurahan"].upper()).first()
            if kelurahan is None:
                raise CommandError(f"Kelurahan {options['kelurahan']} not found")
            kelurahan_id = kelurahan.id
            lokasi = kelurahan.nama_kelurahan

        if options["days"] is not None and options["days"] <= 0:
            raise CommandError("--days must be positive")

        result = JadwalService().generate_jadwal(
            kelurahan_id, days=options["days"], kuota=options["kuota"]
        )
        if not result["success"]:
            raise CommandError(result["message"])

        self.stdout.write(
            self.style.SUCCESS(
                f"{result['created']} jadwal created for {lokasi} "
                f"({result['skipped']} already existed)"
            )
        )
