"""Display formatting shared by services and templates."""

import calendar
from datetime import date, time
from typing import Optional

# URL type codes of the application forms
TYPE_CODES = {
    "baru": "BARU",
    "hilang": "HILANG",
    "rusak": "RUSAK",
    "ubah": "UPDATE",
}

TYPE_LABELS = {
    "baru": "KTP Baru",
    "hilang": "KTP Hilang",
    "rusak": "KTP Rusak",
    "ubah": "Perubahan Data KTP",
}

STATUS_LABELS = {
    "TERDAFTAR": "Terdaftar",
    "VERIFIKASI": "Verifikasi",
    "PROSES": "Proses",
    "SIAP_AMBIL": "Siap Ambil",
    "SELESAI": "Selesai",
    "DITOLAK": "Ditolak",
}


def format_application_type(type_code: str) -> str:
    return TYPE_LABELS.get(type_code, type_code)


def format_tanggal(value: Optional[date], fmt: str = "%d %b %Y") -> str:
    if value is None:
        return "-"
    return value.strftime(fmt)


def format_jam(value: Optional[time]) -> str:
    if value is None:
        return "-"
    return value.strftime("%H:%M")


def format_status(status: Optional[str]) -> str:
    if not status:
        return "-"
    return STATUS_LABELS.get(status, status)


def add_one_month(value: date) -> date:
    """Same day next month, clamped to the month's last day."""
    year = value.year + value.month // 12
    month = value.month % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)
