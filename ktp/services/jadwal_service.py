import logging
import uuid
from datetime import date, time, timedelta
from typing import Optional

from django.conf import settings
from django.db import DatabaseError, IntegrityError, transaction
from django.utils import timezone
from ktp.models import JadwalSesi, Permohonan
from ktp.services.results import (
    ERROR_CONFLICT,
    ERROR_INTERNAL,
    ERROR_NOT_FOUND,
    ERROR_VALIDATION,
    MESSAGE_INTERNAL,
    failure,
)
from ktp.services.scope import jadwal_scope, permohonan_scope

logger = logging.getLogger(__name__)

# Two fixed sessions per weekday for batch generation
BATCH_SESSIONS = [
    (time(9, 0), time(12, 0)),
    (time(13, 0), time(15, 0)),
]

DAY_NAMES = ["Senin", "Selasa", "Rabu", "Kamis", "Jumat", "Sabtu", "Minggu"]


def week_bounds(ref_date: date, direction: str = ""):
    """Monday and Sunday of the week around ref_date, shifted by 'prev' or 'next'."""
    if direction == "prev":
        ref_date -= timedelta(days=7)
    elif direction == "next":
        ref_date += timedelta(days=7)
    monday = ref_date - timedelta(days=ref_date.weekday())
    return monday, monday + timedelta(days=6)


class JadwalService:
    """Service class for officer management of appointment sessions."""

    def list_week(self, actor, ref_date: Optional[date] = None, direction: str = "") -> dict:
        """
        Officer calendar: every session of one Monday-Sunday week in scope.

        Full and closed sessions are included; the calendar shows them all.
        """
        ref_date = ref_date or timezone.localdate()
        start, end = week_bounds(ref_date, direction)

        sessions = (
            JadwalSesi.objects.select_related("lokasi_kelurahan")
            .filter(jadwal_scope(actor), tanggal__range=(start, end))
            .order_by("tanggal", "jam_mulai")
        )

        days = []
        by_date = {}
        for offset in range(7):
            day = start + timedelta(days=offset)
            entry = {"tanggal": day, "nama_hari": DAY_NAMES[offset], "sesi": []}
            by_date[day] = entry
            days.append(entry)
        for jadwal in sessions:
            by_date[jadwal.tanggal]["sesi"].append(jadwal)

        return {
            "week_start": start,
            "week_end": end,
            "ref_date": start,
            "days": days,
            "total_sesi": sum(len(day["sesi"]) for day in days),
        }

    def list_today(self, actor, today: Optional[date] = None) -> list:
        today = today or timezone.localdate()
        return list(
            JadwalSesi.objects.select_related("lokasi_kelurahan")
            .filter(jadwal_scope(actor), tanggal=today)
            .order_by("jam_mulai")
        )

    def create_jadwal(
        self,
        actor,
        tanggal: date,
        jam_mulai: time,
        jam_selesai: time,
        kuota_maksimal: Optional[int] = None,
    ) -> dict:
        """
        Create one session at the officer's kelurahan, or the district office.

        Args:
            actor: Acting officer
            tanggal: Session date
            jam_mulai: Start time
            jam_selesai: End time, after jam_mulai
            kuota_maksimal: Capacity; JADWAL_DEFAULT_KUOTA when empty or not positive

        Returns:
            dict: 'success' and 'jadwal', or ERROR_CONFLICT when the location
            already has a session starting at that time
        """
        if jam_selesai <= jam_mulai:
            return failure(
                ERROR_VALIDATION, "Jam selesai harus setelah jam mulai", field="jam_selesai"
            )
        if not kuota_maksimal or kuota_maksimal <= 0:
            kuota_maksimal = settings.JADWAL_DEFAULT_KUOTA

        exists = JadwalSesi.objects.filter(
            lokasi_kelurahan_id=actor.kelurahan_id, tanggal=tanggal, jam_mulai=jam_mulai
        ).exists()
        if exists:
            return failure(ERROR_CONFLICT, "Jadwal pada tanggal dan jam tersebut sudah ada")

        try:
            with transaction.atomic():
                jadwal = JadwalSesi.objects.create(
                    lokasi_kelurahan_id=actor.kelurahan_id,
                    tanggal=tanggal,
                    jam_mulai=jam_mulai,
                    jam_selesai=jam_selesai,
                    kuota_maksimal=kuota_maksimal,
                )
        except IntegrityError as e:
            logger.warning(f"Duplicate jadwal {tanggal} {jam_mulai} by {actor.user_id}: {e}")
            return failure(ERROR_CONFLICT, "Jadwal pada tanggal dan jam tersebut sudah ada")
        except DatabaseError as e:
            logger.error(f"Error creating jadwal {tanggal} {jam_mulai}: {e}")
            return failure(ERROR_INTERNAL, MESSAGE_INTERNAL)

        logger.info(f"Jadwal {jadwal.id} created by petugas {actor.user_id}: {jadwal}")
        return {"success": True, "message": "Jadwal berhasil dibuat", "jadwal": jadwal}

    def generate_jadwal(
        self,
        kelurahan_id: Optional[int],
        start: Optional[date] = None,
        days: Optional[int] = None,
        kuota: Optional[int] = None,
    ) -> dict:
        """
        Batch-create the weekday sessions of the coming days.

        Starts tomorrow by default and covers JADWAL_GENERATE_DAYS calendar
        days. Saturdays and Sundays are skipped. Sessions that already exist
        for the same location, date and start time are left alone, so the
        generator can be re-run safely.

        Args:
            kelurahan_id: Target kelurahan, None for the district office
            start: First date to consider
            days: Number of calendar days to cover
            kuota: Capacity of each session

        Returns:
            dict: 'success', 'created' and 'skipped' counts
        """
        start = start or timezone.localdate() + timedelta(days=1)
        days = days or settings.JADWAL_GENERATE_DAYS
        kuota = kuota or settings.JADWAL_DEFAULT_KUOTA
        end = start + timedelta(days=days - 1)

        existing = set(
            JadwalSesi.objects.filter(
                lokasi_kelurahan_id=kelurahan_id, tanggal__range=(start, end)
            ).values_list("tanggal", "jam_mulai")
        )

        to_create = []
        skipped = 0
        for offset in range(days):
            day = start + timedelta(days=offset)
            if day.weekday() >= 5:
                continue
            for jam_mulai, jam_selesai in BATCH_SESSIONS:
                if (day, jam_mulai) in existing:
                    skipped += 1
                    continue
                to_create.append(
                    JadwalSesi(
                        lokasi_kelurahan_id=kelurahan_id,
                        tanggal=day,
                        jam_mulai=jam_mulai,
                        jam_selesai=jam_selesai,
                        kuota_maksimal=kuota,
                    )
                )

        try:
            with transaction.atomic():
                # Rows a concurrent run inserted meanwhile are dropped, so count ours by pk
                JadwalSesi.objects.bulk_create(to_create, ignore_conflicts=True)
                created = JadwalSesi.objects.filter(pk__in=[s.pk for s in to_create]).count()
        except DatabaseError as e:
            logger.error(f"Error generating jadwal for kelurahan {kelurahan_id}: {e}")
            return failure(ERROR_INTERNAL, "Gagal membuat jadwal otomatis")

        skipped += len(to_create) - created

        logger.info(
            f"Generated {created} jadwal for kelurahan {kelurahan_id} "
            f"({start} to {end}, {skipped} already existed)"
        )
        return {
            "success": True,
            "message": f"{created} jadwal berhasil dibuat",
            "created": created,
            "skipped": skipped,
        }

    def get_antrian(self, actor, jadwal_id) -> dict:
        """Queue of one session in the officer's scope, ordered by queue number."""
        try:
            jadwal_uuid = uuid.UUID(str(jadwal_id))
        except ValueError:
            return failure(ERROR_NOT_FOUND, "Jadwal tidak ditemukan")

        jadwal = (
            JadwalSesi.objects.select_related("lokasi_kelurahan")
            .filter(jadwal_scope(actor), pk=jadwal_uuid)
            .first()
        )
        if jadwal is None:
            return failure(ERROR_NOT_FOUND, "Jadwal tidak ditemukan")

        antrian = (
            Permohonan.objects.select_related("penduduk")
            .filter(permohonan_scope(actor), jadwal_sesi=jadwal)
            .order_by("nomor_antrian", "created_at")
        )
        return {"success": True, "jadwal": jadwal, "antrian": list(antrian)}
