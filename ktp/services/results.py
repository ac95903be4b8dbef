"""
Error categories returned by the services.

Services return dictionaries with ``success`` and ``message`` and, on
failure, an ``error`` code from this module so handlers can tell the
categories apart without parsing messages.
"""

ERROR_VALIDATION = "validation"
ERROR_NOT_FOUND = "not_found"
ERROR_CONFLICT = "conflict"
ERROR_INVALID_CREDENTIALS = "invalid_credentials"
ERROR_NO_PASSWORD = "no_password"
ERROR_INTERNAL = "internal"

MESSAGE_INTERNAL = "Terjadi kesalahan, silakan coba lagi"


def failure(error: str, message: str, **extra) -> dict:
    return {"success": False, "error": error, "message": message, **extra}
