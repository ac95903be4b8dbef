import logging
import uuid
from datetime import date
from typing import Optional

from django.conf import settings
from django.core.paginator import Paginator
from django.db.models import Count, Q
from django.utils import timezone
from ktp.models import Penduduk, Permohonan
from ktp.services.results import ERROR_NOT_FOUND, failure
from ktp.services.scope import penduduk_scope, permohonan_scope

logger = logging.getLogger(__name__)


class AdminService:
    """Read-side queries of the officer panel, always within the officer's scope."""

    def get_dashboard_stats(self, actor) -> dict:
        return (
            Permohonan.objects.filter(permohonan_scope(actor)).aggregate(
                total=Count("id"),
                terdaftar=Count("id", filter=Q(status_terkini=Permohonan.STATUS_TERDAFTAR)),
                verifikasi=Count("id", filter=Q(status_terkini=Permohonan.STATUS_VERIFIKASI)),
                proses=Count("id", filter=Q(status_terkini=Permohonan.STATUS_PROSES)),
                siap_ambil=Count("id", filter=Q(status_terkini=Permohonan.STATUS_SIAP_AMBIL)),
                selesai=Count("id", filter=Q(status_terkini=Permohonan.STATUS_SELESAI)),
                ditolak=Count("id", filter=Q(status_terkini=Permohonan.STATUS_DITOLAK)),
            )
        )

    def get_recent_permohonan(self, actor, limit: int = 5) -> list:
        return list(
            Permohonan.objects.select_related("penduduk", "jadwal_sesi__lokasi_kelurahan")
            .filter(permohonan_scope(actor))
            .order_by("-created_at")[:limit]
        )

    def list_permohonan(
        self, actor, search: str = "", status: str = "", page: Optional[int] = 1
    ) -> dict:
        """
        Paginated application list for the officer.

        Args:
            actor: Acting officer
            search: Matches booking code, NIK or citizen name
            status: Exact current status, ignored when not a known status
            page: 1-based page number; out-of-range pages clamp to the last page

        Returns:
            dict: 'page' (a Paginator page), 'search' and 'status'
        """
        queryset = (
            Permohonan.objects.select_related("penduduk", "jadwal_sesi__lokasi_kelurahan")
            .filter(permohonan_scope(actor))
            .order_by("-created_at")
        )

        search = (search or "").strip()
        if search:
            queryset = queryset.filter(
                Q(kode_booking__icontains=search)
                | Q(penduduk__nik__icontains=search)
                | Q(penduduk__nama_lengkap__icontains=search)
            )

        if status in dict(Permohonan.STATUS_CHOICES):
            queryset = queryset.filter(status_terkini=status)
        else:
            status = ""

        paginator = Paginator(queryset, settings.ADMIN_PAGE_SIZE)
        return {"page": paginator.get_page(page), "search": search, "status": status}

    def get_permohonan_detail(self, actor, permohonan_id) -> dict:
        """Application with its history and documents, or ERROR_NOT_FOUND when out of scope."""
        try:
            permohonan_uuid = uuid.UUID(str(permohonan_id))
        except ValueError:
            return failure(ERROR_NOT_FOUND, "Permohonan tidak ditemukan")

        permohonan = (
            Permohonan.objects.select_related(
                "penduduk__kelurahan", "jadwal_sesi__lokasi_kelurahan"
            )
            .filter(permohonan_scope(actor), pk=permohonan_uuid)
            .first()
        )
        if permohonan is None:
            return failure(ERROR_NOT_FOUND, "Permohonan tidak ditemukan")

        return {
            "success": True,
            "permohonan": permohonan,
            "riwayat": list(permohonan.riwayat_status.select_related("petugas")),
            "dokumen": list(permohonan.dokumen.all()),
        }

    def list_penduduk(self, actor, search: str = "", page: Optional[int] = 1) -> dict:
        queryset = Penduduk.objects.select_related("kelurahan").filter(penduduk_scope(actor))

        search = (search or "").strip()
        if search:
            queryset = queryset.filter(Q(nik__icontains=search) | Q(nama_lengkap__icontains=search))

        paginator = Paginator(queryset.order_by("nama_lengkap"), settings.ADMIN_PAGE_SIZE)
        return {"page": paginator.get_page(page), "search": search}

    def get_penduduk_stats(self, actor, today: Optional[date] = None) -> dict:
        """Roster counts: total, by sex, and citizens old enough for an identity card."""
        today = today or timezone.localdate()
        return Penduduk.objects.filter(penduduk_scope(actor)).aggregate(
            total=Count("nik"),
            laki_laki=Count("nik", filter=Q(jenis_kelamin=Penduduk.LAKI_LAKI)),
            perempuan=Count("nik", filter=Q(jenis_kelamin=Penduduk.PEREMPUAN)),
            wajib_ktp=Count(
                "nik", filter=Q(tanggal_lahir__lte=Penduduk.batas_lahir_wajib_ktp(today))
            ),
        )
