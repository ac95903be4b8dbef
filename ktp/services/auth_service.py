import logging

from django.contrib.auth.hashers import check_password, make_password
from django.db import DatabaseError, IntegrityError
from ktp.models import Penduduk, Petugas
from ktp.services.results import (
    ERROR_CONFLICT,
    ERROR_INTERNAL,
    ERROR_INVALID_CREDENTIALS,
    ERROR_NO_PASSWORD,
    MESSAGE_INTERNAL,
    failure,
)

logger = logging.getLogger(__name__)


class AuthService:
    """Service class for citizen and officer authentication."""

    def login_warga(self, nik: str, password: str) -> dict:
        """
        Authenticate a citizen by NIK and password.

        Args:
            nik: 16-digit national ID number
            password: Plain-text password

        Returns:
            dict: 'success' and 'penduduk' on success, otherwise 'error' is
            ERROR_INVALID_CREDENTIALS, ERROR_NO_PASSWORD or ERROR_INTERNAL
        """
        try:
            penduduk = Penduduk.objects.filter(nik=nik).first()
        except DatabaseError as e:
            logger.error(f"Error loading penduduk {nik} for login: {e}")
            return failure(ERROR_INTERNAL, MESSAGE_INTERNAL)

        if penduduk is None:
            # Hash anyway so unknown NIKs take as long as wrong passwords
            make_password(password)
            logger.info("Warga login failed: unknown NIK")
            return failure(ERROR_INVALID_CREDENTIALS, "NIK atau password salah")

        if not penduduk.has_password:
            make_password(password)
            logger.info(f"Warga login refused: no password set for {nik}")
            return failure(
                ERROR_NO_PASSWORD, "Akun belum memiliki password. Silakan hubungi petugas."
            )

        if not check_password(password, penduduk.password_hash):
            logger.info(f"Warga login failed: wrong password for {nik}")
            return failure(ERROR_INVALID_CREDENTIALS, "NIK atau password salah")

        logger.info(f"Warga {nik} logged in")
        return {"success": True, "penduduk": penduduk}

    def login_petugas(self, nip: str, password: str) -> dict:
        """
        Authenticate an officer by NIP and password.

        Args:
            nip: 18-digit employee number
            password: Plain-text password

        Returns:
            dict: 'success' and 'petugas' on success, otherwise 'error'
        """
        try:
            petugas = Petugas.objects.select_related("kelurahan").filter(nip=nip).first()
        except DatabaseError as e:
            logger.error(f"Error loading petugas {nip} for login: {e}")
            return failure(ERROR_INTERNAL, MESSAGE_INTERNAL)

        if petugas is None:
            make_password(password)
            logger.info("Petugas login failed: unknown NIP")
            return failure(ERROR_INVALID_CREDENTIALS, "NIP atau password salah")

        if not check_password(password, petugas.password_hash):
            logger.info(f"Petugas login failed: wrong password for {nip}")
            return failure(ERROR_INVALID_CREDENTIALS, "NIP atau password salah")

        logger.info(f"Petugas {petugas.username} logged in ({petugas.role})")
        return {"success": True, "petugas": petugas}

    def register_warga(self, data: dict) -> dict:
        """
        Create a citizen account.

        Args:
            data: Cleaned registration data (nik, nama_lengkap, email, password,
                alamat, no_hp, jenis_kelamin, kelurahan, tanggal_lahir)

        Returns:
            dict: 'success' and 'penduduk' on success, ERROR_CONFLICT when the
            NIK or email is already registered
        """
        nik = data["nik"]
        email = data.get("email") or None

        if Penduduk.objects.filter(nik=nik).exists():
            return failure(ERROR_CONFLICT, "NIK sudah terdaftar", field="nik")
        if email and Penduduk.objects.filter(email__iexact=email).exists():
            return failure(ERROR_CONFLICT, "Email sudah terdaftar", field="email")

        try:
            penduduk = Penduduk.objects.create(
                nik=nik,
                nama_lengkap=data["nama_lengkap"],
                jenis_kelamin=data["jenis_kelamin"],
                tanggal_lahir=data.get("tanggal_lahir"),
                alamat=data.get("alamat") or None,
                no_hp=data.get("no_hp") or None,
                email=email,
                kelurahan=data["kelurahan"],
                password_hash=make_password(data["password"]),
            )
        except IntegrityError as e:
            # Lost a race against a concurrent registration
            logger.warning(f"Registration conflict for NIK {nik}: {e}")
            return failure(ERROR_CONFLICT, "NIK atau email sudah terdaftar")
        except DatabaseError as e:
            logger.error(f"Error registering penduduk {nik}: {e}")
            return failure(ERROR_INTERNAL, "Gagal mendaftarkan akun. Silakan coba lagi.")

        logger.info(f"Registered warga {nik}")
        return {"success": True, "penduduk": penduduk}
