from .kelurahan import Kelurahan
from .penduduk import Penduduk
from .petugas import Petugas
from .jadwal import JadwalSesi
from .permohonan import Permohonan, RiwayatStatus, DokumenSyarat

__all__ = [
    "Kelurahan",
    "Penduduk",
    "Petugas",
    "JadwalSesi",
    "Permohonan",
    "RiwayatStatus",
    "DokumenSyarat",
]
