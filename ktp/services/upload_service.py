import logging
import os
from typing import Iterable, Optional

from django.conf import settings
from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

KIND_PDF = "pdf"
KIND_JPEG = "jpeg"
KIND_PNG = "png"

# Accepted file extensions per sniffed content kind
EXTENSIONS = {
    KIND_PDF: (".pdf",),
    KIND_JPEG: (".jpg", ".jpeg"),
    KIND_PNG: (".png",),
}

PIL_FORMATS = {"JPEG": KIND_JPEG, "PNG": KIND_PNG}

PDF_SIGNATURE = b"%PDF-"

MESSAGE_UNSUPPORTED = "Format file tidak didukung. Gunakan PDF, JPG, atau PNG"


def _megabytes(size: int) -> int:
    return size // (1024 * 1024)


class UploadService:
    """Validation of uploaded supporting documents."""

    def sniff_kind(self, uploaded) -> Optional[str]:
        """
        Detect the real content kind of an upload.

        PDFs are recognised by their header signature, images by Pillow.
        The file position is restored afterwards.
        """
        uploaded.seek(0)
        try:
            if uploaded.read(len(PDF_SIGNATURE)) == PDF_SIGNATURE:
                return KIND_PDF

            uploaded.seek(0)
            try:
                with Image.open(uploaded) as image:
                    image_format = image.format
                    image.verify()
            except (
                UnidentifiedImageError,
                Image.DecompressionBombError,
                OSError,
                SyntaxError,
                ValueError,
            ) as e:
                logger.info(f"Upload {uploaded.name} is not a readable image: {e}")
                return None
            return PIL_FORMATS.get(image_format)
        finally:
            uploaded.seek(0)

    def validate(self, uploaded, max_size: Optional[int] = None) -> Optional[str]:
        """
        Check size, content kind and extension of one upload.

        Returns:
            str: Error message for the form field, or None when acceptable
        """
        max_size = max_size or settings.UPLOAD_MAX_FILE_SIZE
        if uploaded.size > max_size:
            return f"Ukuran file maksimal {_megabytes(max_size)}MB"
        if uploaded.size == 0:
            return "File kosong"

        kind = self.sniff_kind(uploaded)
        if kind is None:
            return MESSAGE_UNSUPPORTED

        ext = os.path.splitext(uploaded.name)[1].lower()
        if ext not in EXTENSIONS[kind]:
            logger.warning(f"Rejected upload {uploaded.name}: extension does not match {kind} content")
            return "Ekstensi file tidak sesuai dengan isi file"
        return None

    def validate_total(self, files: Iterable, max_total: Optional[int] = None) -> Optional[str]:
        max_total = max_total or settings.UPLOAD_MAX_TOTAL_SIZE
        total = sum(f.size for f in files if f is not None)
        if total > max_total:
            return f"Total ukuran file maksimal {_megabytes(max_total)}MB"
        return None
