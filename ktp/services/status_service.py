import logging
import uuid
from typing import Optional

from django.db import DatabaseError, transaction
from django.utils import timezone
from ktp.formatting import format_status
from ktp.models import Permohonan, RiwayatStatus
from ktp.services.results import (
    ERROR_INTERNAL,
    ERROR_NOT_FOUND,
    ERROR_VALIDATION,
    MESSAGE_INTERNAL,
    failure,
)
from ktp.services.scope import permohonan_scope

logger = logging.getLogger(__name__)

STAGE_PENDING = "pending"
STAGE_IN_PROGRESS = "in_progress"
STAGE_COMPLETED = "completed"
STAGE_BLOCKED = "blocked"

# Tracker stages shown to citizens, in pipeline order
STAGES = [
    ("Pengajuan", Permohonan.STATUS_TERDAFTAR),
    ("Verifikasi", Permohonan.STATUS_VERIFIKASI),
    ("Proses", Permohonan.STATUS_PROSES),
    ("Siap Ambil", Permohonan.STATUS_SIAP_AMBIL),
    ("Selesai", Permohonan.STATUS_SELESAI),
]

STAGE_INDEX = {status: idx for idx, (_, status) in enumerate(STAGES)}

NEXT_STEPS = {
    Permohonan.STATUS_TERDAFTAR: {
        "title": "Datang Sesuai Jadwal",
        "description": "Bawa dokumen asli dan datang ke lokasi sesuai jadwal kedatangan Anda.",
    },
    Permohonan.STATUS_VERIFIKASI: {
        "title": "Tunggu Verifikasi",
        "description": "Petugas sedang memeriksa dokumen Anda. Proses ini memakan waktu 1-3 hari kerja.",
    },
    Permohonan.STATUS_PROSES: {
        "title": "KTP Sedang Dicetak",
        "description": "Dokumen Anda sudah terverifikasi. KTP sedang dalam proses pencetakan.",
    },
    Permohonan.STATUS_SIAP_AMBIL: {
        "title": "Ambil KTP",
        "description": "KTP Anda sudah siap. Silakan ambil di lokasi pelayanan dengan membawa bukti booking.",
    },
    Permohonan.STATUS_SELESAI: {
        "title": "Permohonan Selesai",
        "description": "KTP sudah diterima. Terima kasih telah menggunakan layanan kami.",
    },
    Permohonan.STATUS_DITOLAK: {
        "title": "Ajukan Ulang",
        "description": "Permohonan Anda ditolak. Periksa catatan petugas lalu ajukan permohonan baru.",
        "url": "/permohonan/baru",
    },
}


def calculate_stages(permohonan: Permohonan):
    """
    Build the citizen-facing tracker for an application.

    Returns:
        tuple: (list of stage dicts with name/state/waktu/catatan, index of the
        current stage)
    """
    history = {}
    for entry in permohonan.riwayat_status.all():
        # Later entries win when a status was set more than once
        history[entry.status_baru] = entry

    status = permohonan.status_terkini
    rejected = status == Permohonan.STATUS_DITOLAK
    current_idx = STAGE_INDEX[Permohonan.STATUS_VERIFIKASI] if rejected else STAGE_INDEX.get(status, 0)

    stages = []
    for idx, (name, stage_status) in enumerate(STAGES):
        entry = history.get(stage_status)
        stage = {
            "name": name,
            "state": STAGE_PENDING,
            "waktu": entry.waktu_proses if entry else None,
            "catatan": entry.catatan_proses if entry else "",
        }
        if idx == 0:
            stage["waktu"] = permohonan.created_at

        if rejected and idx == current_idx:
            rejection = history.get(Permohonan.STATUS_DITOLAK)
            stage["state"] = STAGE_BLOCKED
            stage["waktu"] = rejection.waktu_proses if rejection else None
            stage["catatan"] = (rejection.catatan_proses if rejection else "") or "Permohonan ditolak."
        elif idx < current_idx:
            stage["state"] = STAGE_COMPLETED
        elif idx == current_idx:
            # The final stage is done once reached
            stage["state"] = STAGE_COMPLETED if stage_status == Permohonan.STATUS_SELESAI else STAGE_IN_PROGRESS
        stages.append(stage)

    return stages, current_idx


def determine_next_steps(permohonan: Permohonan) -> Optional[dict]:
    return NEXT_STEPS.get(permohonan.status_terkini)


class StatusService:
    """Service class for officer status transitions."""

    def update_status(self, actor, permohonan_id, new_status: str, catatan: str = "") -> dict:
        """
        Move an application to a new status and record the change.

        The current-status update is filtered by the officer's scope, so an
        application outside it behaves exactly like a missing one. The update
        and the history entry are written in one transaction.

        Args:
            actor: Acting officer
            permohonan_id: Application UUID
            new_status: One of Permohonan.OFFICER_STATUSES
            catatan: Optional free-text note

        Returns:
            dict: 'success' and 'riwayat' on success; 'error' is ERROR_VALIDATION,
            ERROR_NOT_FOUND or ERROR_INTERNAL otherwise
        """
        if new_status not in Permohonan.OFFICER_STATUSES:
            return failure(ERROR_VALIDATION, "Status tidak valid", field="status")

        try:
            permohonan_uuid = uuid.UUID(str(permohonan_id))
        except ValueError:
            return failure(ERROR_VALIDATION, "ID permohonan tidak valid")

        try:
            with transaction.atomic():
                updated = Permohonan.objects.filter(
                    permohonan_scope(actor), pk=permohonan_uuid
                ).update(status_terkini=new_status, updated_at=timezone.now())
                if not updated:
                    logger.warning(
                        f"Status update by {actor.user_id} refused: permohonan {permohonan_uuid} "
                        "not found or out of scope"
                    )
                    return failure(ERROR_NOT_FOUND, "Permohonan tidak ditemukan")

                riwayat = RiwayatStatus.objects.create(
                    permohonan_id=permohonan_uuid,
                    petugas_id=actor.user_id,
                    status_baru=new_status,
                    catatan_proses=(catatan or "").strip(),
                )
        except DatabaseError as e:
            logger.error(f"Error updating status of permohonan {permohonan_uuid}: {e}")
            return failure(ERROR_INTERNAL, MESSAGE_INTERNAL)

        logger.info(
            f"Permohonan {permohonan_uuid} set to {new_status} by petugas {actor.user_id}"
        )
        return {
            "success": True,
            "message": f"Status berhasil diubah menjadi {format_status(new_status)}",
            "riwayat": riwayat,
        }

    def get_status_form(self, actor, permohonan_id) -> dict:
        """Application data for the status dialog, within the officer's scope."""
        try:
            permohonan_uuid = uuid.UUID(str(permohonan_id))
        except ValueError:
            return failure(ERROR_NOT_FOUND, "Permohonan tidak ditemukan")

        permohonan = (
            Permohonan.objects.select_related("penduduk", "jadwal_sesi__lokasi_kelurahan")
            .filter(permohonan_scope(actor), pk=permohonan_uuid)
            .first()
        )
        if permohonan is None:
            return failure(ERROR_NOT_FOUND, "Permohonan tidak ditemukan")

        return {
            "success": True,
            "permohonan": permohonan,
            "status_choices": [
                (value, label)
                for value, label in Permohonan.STATUS_CHOICES
                if value in Permohonan.OFFICER_STATUSES
            ],
        }
