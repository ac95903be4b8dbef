import logging
import uuid
from datetime import date
from typing import Iterable, Optional, Tuple

from django.conf import settings
from django.core.files.storage import default_storage
from django.db import DatabaseError, transaction
from django.db.models import Count, F, Q
from django.utils import timezone
from ktp.formatting import (
    TYPE_CODES,
    add_one_month,
    format_application_type,
    format_jam,
    format_tanggal,
)
from ktp.models import DokumenSyarat, JadwalSesi, Kelurahan, Penduduk, Permohonan
from ktp.services.results import (
    ERROR_CONFLICT,
    ERROR_INTERNAL,
    ERROR_NOT_FOUND,
    ERROR_VALIDATION,
    failure,
)
from ktp.services.status_service import calculate_stages, determine_next_steps

logger = logging.getLogger(__name__)

# Location option meaning "district office" in the slot picker
KECAMATAN_LOCATION_ID = 0


class ActivePermohonanExists(Exception):
    """The citizen already has an application in progress."""


class QuotaUnavailable(Exception):
    """The chosen session is full, closed or in the past."""


class PermohonanService:
    """Service class for citizen-facing application operations."""

    def get_form_data(self, nik: str) -> dict:
        """Profile data used to pre-fill the application forms."""
        penduduk = Penduduk.objects.select_related("kelurahan").filter(nik=nik).first()
        if penduduk is None:
            return {"nik": nik}

        return {
            "nik": penduduk.nik,
            "nama_lengkap": penduduk.nama_lengkap,
            "jenis_kelamin": penduduk.get_jenis_kelamin_display(),
            "alamat": penduduk.alamat or "",
            "no_hp": penduduk.no_hp or "",
            "email": penduduk.email or "",
            "nama_kelurahan": penduduk.kelurahan.nama_kelurahan if penduduk.kelurahan else "",
        }

    def get_available_jadwal(
        self, kelurahan_id: Optional[int] = None, today: Optional[date] = None
    ) -> list:
        """
        List bookable sessions from today through the same day next month.

        Args:
            kelurahan_id: None for every location, KECAMATAN_LOCATION_ID for
                the district office only, otherwise one kelurahan
            today: Reference date, defaults to the local date

        Returns:
            list: Option dicts (id, label, kuota_sisa, status_sesi, ...) for
            open sessions with remaining quota only
        """
        today = today or timezone.localdate()
        queryset = (
            JadwalSesi.objects.select_related("lokasi_kelurahan")
            .filter(
                tanggal__gte=today,
                tanggal__lte=add_one_month(today),
                status_sesi=JadwalSesi.STATUS_BUKA,
                kuota_terisi__lt=F("kuota_maksimal"),
            )
            .order_by("tanggal", "jam_mulai")
        )
        if kelurahan_id == KECAMATAN_LOCATION_ID:
            queryset = queryset.filter(lokasi_kelurahan__isnull=True)
        elif kelurahan_id is not None:
            queryset = queryset.filter(lokasi_kelurahan_id=kelurahan_id)

        options = []
        for jadwal in queryset:
            options.append(
                {
                    "id": str(jadwal.id),
                    "label": (
                        f"{format_tanggal(jadwal.tanggal)} - {format_jam(jadwal.jam_mulai)} "
                        f"({jadwal.nama_lokasi}, sisa {jadwal.kuota_sisa} kuota)"
                    ),
                    "tanggal": jadwal.tanggal,
                    "jam_mulai": format_jam(jadwal.jam_mulai),
                    "jam_selesai": format_jam(jadwal.jam_selesai),
                    "nama_lokasi": jadwal.nama_lokasi,
                    "kuota_sisa": jadwal.kuota_sisa,
                    "status_sesi": jadwal.status_sesi,
                }
            )
        return options

    def get_locations(self) -> list:
        """District office followed by every kelurahan, for the location filter."""
        options = [{"id": KECAMATAN_LOCATION_ID, "label": settings.DISTRICT_OFFICE_NAME}]
        for kelurahan in Kelurahan.objects.order_by("nama_kelurahan"):
            options.append({"id": kelurahan.id, "label": kelurahan.nama_kelurahan})
        return options

    def create_permohonan(
        self,
        nik: str,
        jadwal_id,
        jenis_permohonan: str,
        documents: Iterable[Tuple[str, object]] = (),
        keterangan: Optional[dict] = None,
    ) -> dict:
        """
        Book a session and create an application with its documents.

        The active-application check, the quota increment, the application
        row and the document rows are written in one transaction. The quota
        is claimed with a conditional UPDATE so concurrent bookings can never
        push a session over its maximum.

        Args:
            nik: Owning citizen
            jadwal_id: Chosen session UUID
            jenis_permohonan: BARU, HILANG, RUSAK or UPDATE
            documents: (jenis_dokumen, uploaded file) pairs
            keterangan: Kind-specific form details

        Returns:
            dict: 'success' and 'permohonan' on success; ERROR_CONFLICT when the
            citizen has an active application or the session has no quota left
        """
        if jenis_permohonan not in dict(Permohonan.JENIS_CHOICES):
            jenis_permohonan = TYPE_CODES.get(jenis_permohonan, "")
        if not jenis_permohonan:
            return failure(ERROR_VALIDATION, "Jenis permohonan tidak valid")

        try:
            jadwal_uuid = uuid.UUID(str(jadwal_id))
        except ValueError:
            return failure(ERROR_VALIDATION, "Pilih jadwal kedatangan", field="jadwal_sesi_id")

        stored_files = []
        try:
            with transaction.atomic():
                # Row lock serialises concurrent submissions by the same citizen
                penduduk = Penduduk.objects.select_for_update().get(nik=nik)

                has_active = Permohonan.objects.filter(
                    penduduk=penduduk, status_terkini__in=Permohonan.ACTIVE_STATUSES
                ).exists()
                if has_active:
                    raise ActivePermohonanExists()

                nomor_antrian = self._claim_quota(jadwal_uuid)

                permohonan = Permohonan.objects.create(
                    penduduk=penduduk,
                    jadwal_sesi_id=jadwal_uuid,
                    jenis_permohonan=jenis_permohonan,
                    nomor_antrian=nomor_antrian,
                    keterangan=keterangan or {},
                )

                for jenis_dokumen, uploaded in documents:
                    dokumen = DokumenSyarat(permohonan=permohonan, jenis_dokumen=jenis_dokumen)
                    dokumen.file.save(uploaded.name, uploaded, save=False)
                    stored_files.append(dokumen.file.name)
                    dokumen.save()

        except Penduduk.DoesNotExist:
            return failure(ERROR_NOT_FOUND, "Data penduduk tidak ditemukan")
        except ActivePermohonanExists:
            logger.info(f"Rejected permohonan for {nik}: active application exists")
            return failure(
                ERROR_CONFLICT,
                "Anda masih memiliki permohonan yang sedang berjalan "
                "(Status: Verifikasi/Proses/Siap Ambil)",
            )
        except QuotaUnavailable:
            logger.info(f"Rejected permohonan for {nik}: jadwal {jadwal_uuid} unavailable")
            return failure(
                ERROR_CONFLICT,
                "Jadwal yang dipilih sudah penuh atau tidak tersedia. Silakan pilih jadwal lain.",
            )
        except (DatabaseError, OSError) as e:
            logger.error(f"Error creating permohonan for {nik}: {e}")
            self._discard_files(stored_files)
            return failure(ERROR_INTERNAL, "Gagal membuat permohonan. Silakan coba lagi.")

        logger.info(
            f"Created permohonan {permohonan.kode_booking} ({jenis_permohonan}) for {nik}, "
            f"jadwal {jadwal_uuid} antrian {nomor_antrian}"
        )
        return {"success": True, "permohonan": permohonan}

    def _claim_quota(self, jadwal_id: uuid.UUID) -> int:
        """Take one seat of the session and return it as the queue number."""
        claimed = JadwalSesi.objects.filter(
            pk=jadwal_id,
            status_sesi=JadwalSesi.STATUS_BUKA,
            tanggal__gte=timezone.localdate(),
            kuota_terisi__lt=F("kuota_maksimal"),
        ).update(kuota_terisi=F("kuota_terisi") + 1)
        if not claimed:
            raise QuotaUnavailable()

        jadwal = JadwalSesi.objects.get(pk=jadwal_id)
        if jadwal.kuota_terisi >= jadwal.kuota_maksimal:
            JadwalSesi.objects.filter(pk=jadwal_id).update(status_sesi=JadwalSesi.STATUS_PENUH)
        return jadwal.kuota_terisi

    def _discard_files(self, names):
        for name in names:
            try:
                default_storage.delete(name)
            except OSError as e:
                logger.warning(f"Could not remove orphaned upload {name}: {e}")

    def get_success_data(self, nik: str, permohonan_id: str, type_code: str) -> dict:
        """Confirmation details of a citizen's own application."""
        try:
            permohonan_uuid = uuid.UUID(str(permohonan_id))
        except ValueError:
            return failure(ERROR_NOT_FOUND, "Permohonan tidak ditemukan")

        permohonan = (
            Permohonan.objects.select_related("jadwal_sesi__lokasi_kelurahan")
            .filter(pk=permohonan_uuid, penduduk_id=nik)
            .first()
        )
        if permohonan is None:
            return failure(ERROR_NOT_FOUND, "Permohonan tidak ditemukan")

        jadwal = permohonan.jadwal_sesi
        return {
            "success": True,
            "data": {
                "permohonan_id": str(permohonan.id),
                "kode_booking": permohonan.kode_booking,
                "application_type": format_application_type(type_code),
                "jadwal_tanggal": format_tanggal(jadwal.tanggal),
                "jadwal_jam": f"{format_jam(jadwal.jam_mulai)} - {format_jam(jadwal.jam_selesai)}",
                "nama_lokasi": jadwal.nama_lokasi,
                "nomor_antrian": permohonan.nomor_antrian,
            },
        }

    def get_dashboard(self, nik: str, limit: int = 5) -> dict:
        """Status counts and the most recent applications of a citizen."""
        queryset = Permohonan.objects.filter(penduduk_id=nik)
        stats = queryset.aggregate(
            total=Count("id"),
            verifikasi=Count("id", filter=Q(status_terkini=Permohonan.STATUS_VERIFIKASI)),
            proses=Count("id", filter=Q(status_terkini=Permohonan.STATUS_PROSES)),
            siap_ambil=Count("id", filter=Q(status_terkini=Permohonan.STATUS_SIAP_AMBIL)),
            selesai=Count("id", filter=Q(status_terkini=Permohonan.STATUS_SELESAI)),
            ditolak=Count("id", filter=Q(status_terkini=Permohonan.STATUS_DITOLAK)),
        )
        recent = queryset.select_related("jadwal_sesi__lokasi_kelurahan").order_by("-created_at")[
            :limit
        ]
        return {"stats": stats, "recent": list(recent)}

    def get_tracking(self, nik: str, kode_booking: str = "") -> dict:
        """
        Status tracker of one of the citizen's applications.

        Looks up the booking code among the citizen's own applications, or
        falls back to the latest application when no code is given.
        """
        queryset = Permohonan.objects.select_related("jadwal_sesi__lokasi_kelurahan").filter(
            penduduk_id=nik
        )
        if kode_booking:
            permohonan = queryset.filter(kode_booking=kode_booking.strip().upper()).first()
            if permohonan is None:
                return failure(ERROR_NOT_FOUND, "Permohonan tidak ditemukan")
        else:
            permohonan = queryset.order_by("-created_at").first()
            if permohonan is None:
                return failure(ERROR_NOT_FOUND, "Belum ada permohonan", empty=True)

        stages, current_idx = calculate_stages(permohonan)
        return {
            "success": True,
            "data": {
                "permohonan": permohonan,
                "kode_booking": permohonan.kode_booking,
                "jenis_permohonan": permohonan.get_jenis_permohonan_display(),
                "tanggal_daftar": timezone.localtime(permohonan.created_at),
                "stages": stages,
                "current_stage_idx": current_idx,
                "next_steps": determine_next_steps(permohonan),
            },
        }
