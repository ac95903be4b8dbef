import logging
import string

from django.db.models.signals import pre_save
from django.dispatch import receiver
from django.utils.crypto import get_random_string
from ktp.models import Permohonan

logger = logging.getLogger(__name__)

KODE_BOOKING_CHARS = string.ascii_uppercase + string.digits
KODE_BOOKING_LENGTH = 8


def generate_kode_booking() -> str:
    """Short human-readable booking code, e.g. KTP-7Q2M9XKA."""
    while True:
        kode = f"KTP-{get_random_string(KODE_BOOKING_LENGTH, KODE_BOOKING_CHARS)}"
        if not Permohonan.objects.filter(kode_booking=kode).exists():
            return kode


@receiver(pre_save, sender=Permohonan)
def permohonan_pre_save(sender, instance, **kwargs):
    """Assign a booking code to applications saved without one."""
    if not instance.kode_booking:
        instance.kode_booking = generate_kode_booking()
        logger.debug(f"Assigned booking code {instance.kode_booking} to permohonan {instance.id}")
