from django import forms
from django.conf import settings
from django.utils import timezone

from ktp.models import DokumenSyarat, Kelurahan, Penduduk, Permohonan
from ktp.services.upload_service import UploadService

NIK_LENGTH = 16
NIP_LENGTH = 18
PASSWORD_MIN_LENGTH = 8


def _is_digits(value: str, length: int) -> bool:
    return len(value) == length and value.isdigit()


class LoginWargaForm(forms.Form):
    """Citizen login by NIK"""

    nik = forms.CharField(max_length=NIK_LENGTH, required=False)
    password = forms.CharField(widget=forms.PasswordInput, required=False, strip=False)
    remember = forms.BooleanField(required=False)

    def clean(self):
        cleaned_data = super().clean()
        nik = (cleaned_data.get("nik") or "").strip()
        password = cleaned_data.get("password") or ""

        if not nik or not password:
            raise forms.ValidationError("NIK dan password harus diisi")
        if not _is_digits(nik, NIK_LENGTH):
            raise forms.ValidationError("NIK harus 16 digit")

        cleaned_data["nik"] = nik
        return cleaned_data


class LoginPetugasForm(forms.Form):
    """Officer login by NIP"""

    nip = forms.CharField(max_length=NIP_LENGTH, required=False)
    password = forms.CharField(widget=forms.PasswordInput, required=False, strip=False)
    remember = forms.BooleanField(required=False)

    def clean(self):
        cleaned_data = super().clean()
        nip = (cleaned_data.get("nip") or "").strip()
        password = cleaned_data.get("password") or ""

        if not nip or not password:
            raise forms.ValidationError("NIP dan password harus diisi")
        if not _is_digits(nip, NIP_LENGTH):
            raise forms.ValidationError("NIP harus 18 digit")

        cleaned_data["nip"] = nip
        return cleaned_data


class RegisterForm(forms.Form):
    """Citizen self-registration"""

    nik = forms.CharField(
        max_length=NIK_LENGTH, error_messages={"required": "NIK wajib diisi"}
    )
    nama_lengkap = forms.CharField(
        max_length=255, error_messages={"required": "Nama lengkap wajib diisi"}
    )
    email = forms.EmailField(
        required=False, error_messages={"invalid": "Format email tidak valid"}
    )
    password = forms.CharField(
        widget=forms.PasswordInput,
        strip=False,
        min_length=PASSWORD_MIN_LENGTH,
        error_messages={
            "required": "Password wajib diisi",
            "min_length": "Password minimal 8 karakter",
        },
    )
    jenis_kelamin = forms.ChoiceField(
        choices=Penduduk.JENIS_KELAMIN_CHOICES,
        error_messages={
            "required": "Jenis kelamin wajib dipilih",
            "invalid_choice": "Jenis kelamin tidak valid",
        },
    )
    tanggal_lahir = forms.DateField(
        required=False,
        widget=forms.DateInput(attrs={"type": "date"}),
        error_messages={"invalid": "Format tanggal tidak valid"},
    )
    alamat = forms.CharField(widget=forms.Textarea(attrs={"rows": 3}), required=False)
    no_hp = forms.CharField(max_length=20, required=False)
    kelurahan = forms.ModelChoiceField(
        queryset=Kelurahan.objects.order_by("nama_kelurahan"),
        error_messages={
            "required": "Kelurahan wajib dipilih",
            "invalid_choice": "Kelurahan tidak valid",
        },
    )

    def clean_nik(self):
        nik = self.cleaned_data["nik"].strip()
        if not _is_digits(nik, NIK_LENGTH):
            raise forms.ValidationError("NIK harus 16 digit")
        return nik

    def clean_email(self):
        return (self.cleaned_data.get("email") or "").strip().lower()

    def clean_tanggal_lahir(self):
        tanggal_lahir = self.cleaned_data.get("tanggal_lahir")
        if tanggal_lahir and tanggal_lahir > timezone.localdate():
            raise forms.ValidationError("Tanggal lahir tidak valid")
        return tanggal_lahir


class UpdateStatusForm(forms.Form):
    """Officer status transition of one application"""

    permohonan_id = forms.UUIDField(
        error_messages={
            "required": "ID permohonan wajib diisi",
            "invalid": "ID permohonan tidak valid",
        }
    )
    status = forms.ChoiceField(
        choices=[
            (value, label)
            for value, label in Permohonan.STATUS_CHOICES
            if value in Permohonan.OFFICER_STATUSES
        ],
        error_messages={
            "required": "Status wajib dipilih",
            "invalid_choice": "Status tidak valid",
        },
    )
    catatan = forms.CharField(widget=forms.Textarea(attrs={"rows": 3}), required=False)


class JadwalForm(forms.Form):
    """Manual creation of one appointment session"""

    tanggal = forms.DateField(
        widget=forms.DateInput(attrs={"type": "date"}),
        error_messages={"required": "Tanggal wajib diisi", "invalid": "Format tanggal tidak valid"},
    )
    jam_mulai = forms.TimeField(
        widget=forms.TimeInput(attrs={"type": "time"}),
        error_messages={"required": "Jam mulai wajib diisi", "invalid": "Format jam tidak valid"},
    )
    jam_selesai = forms.TimeField(
        widget=forms.TimeInput(attrs={"type": "time"}),
        error_messages={"required": "Jam selesai wajib diisi", "invalid": "Format jam tidak valid"},
    )
    kuota_maksimal = forms.IntegerField(required=False, max_value=500)

    def clean_tanggal(self):
        tanggal = self.cleaned_data["tanggal"]
        if tanggal < timezone.localdate():
            raise forms.ValidationError("Tanggal tidak boleh di masa lalu")
        return tanggal

    def clean(self):
        cleaned_data = super().clean()
        jam_mulai = cleaned_data.get("jam_mulai")
        jam_selesai = cleaned_data.get("jam_selesai")
        if jam_mulai and jam_selesai and jam_selesai <= jam_mulai:
            self.add_error("jam_selesai", "Jam selesai harus setelah jam mulai")
        return cleaned_data


class DokumenField(forms.FileField):
    """Upload field that checks size, real content type and extension."""

    def __init__(self, *args, max_size=None, **kwargs):
        self.max_size = max_size
        super().__init__(*args, **kwargs)

    def clean(self, data, initial=None):
        uploaded = super().clean(data, initial)
        if uploaded:
            error = UploadService().validate(uploaded, self.max_size)
            if error:
                raise forms.ValidationError(error)
        return uploaded


def _dokumen_field(label, required_message):
    return DokumenField(
        label=label,
        error_messages={"required": required_message, "empty": required_message},
        widget=forms.FileInput(attrs={"accept": ".pdf,.jpg,.jpeg,.png"}),
    )


class PermohonanForm(forms.Form):
    """
    Base of the four application forms.

    Subclasses name the application kind, the upload fields with their
    document kinds, and the free-text fields stored as details.
    """

    JENIS = None
    TYPE_CODE = None
    TITLE = ""
    # (form field, DokumenSyarat kind)
    DOCUMENTS = ()
    KETERANGAN_FIELDS = ()

    # Availability is checked when the seat is claimed, not here
    jadwal_sesi_id = forms.UUIDField(
        error_messages={
            "required": "Pilih jadwal kedatangan",
            "invalid": "Pilih jadwal kedatangan",
        }
    )

    @property
    def is_multi_file(self) -> bool:
        return len(self.DOCUMENTS) > 1

    @property
    def max_total_size(self) -> int:
        if self.is_multi_file:
            return settings.UPLOAD_MAX_TOTAL_SIZE
        return settings.UPLOAD_MAX_FILE_SIZE

    def clean(self):
        cleaned_data = super().clean()
        uploads = [cleaned_data.get(name) for name, _ in self.DOCUMENTS]
        error = UploadService().validate_total(uploads, self.max_total_size)
        if error:
            raise forms.ValidationError(error)
        return cleaned_data

    def documents(self):
        """(document kind, uploaded file) pairs of the valid form."""
        return [
            (jenis, self.cleaned_data[name])
            for name, jenis in self.DOCUMENTS
            if self.cleaned_data.get(name)
        ]

    def keterangan(self) -> dict:
        details = {}
        for name in self.KETERANGAN_FIELDS:
            value = self.cleaned_data.get(name)
            if hasattr(value, "isoformat"):
                value = value.isoformat()
            details[name] = value
        return details


class PermohonanBaruForm(PermohonanForm):
    JENIS = Permohonan.JENIS_BARU
    TYPE_CODE = "baru"
    TITLE = "Permohonan KTP Baru"
    DOCUMENTS = (("kartu_keluarga", DokumenSyarat.JENIS_KK),)

    kartu_keluarga = _dokumen_field("Kartu Keluarga", "File Kartu Keluarga wajib diunggah")


class PermohonanHilangForm(PermohonanForm):
    JENIS = Permohonan.JENIS_HILANG
    TYPE_CODE = "hilang"
    TITLE = "Permohonan KTP Hilang"
    DOCUMENTS = (("surat_polisi", DokumenSyarat.JENIS_SURAT_POLISI),)
    KETERANGAN_FIELDS = ("nomor_laporan", "tanggal_kejadian")

    nomor_laporan = forms.CharField(
        label="Nomor Laporan Polisi",
        max_length=100,
        error_messages={"required": "Nomor laporan polisi wajib diisi"},
    )
    tanggal_kejadian = forms.DateField(
        label="Tanggal Kejadian",
        widget=forms.DateInput(attrs={"type": "date"}),
        error_messages={
            "required": "Tanggal kejadian wajib diisi",
            "invalid": "Format tanggal tidak valid",
        },
    )
    surat_polisi = _dokumen_field(
        "Surat Keterangan Polisi", "File Surat Keterangan Polisi wajib diunggah"
    )

    def clean_tanggal_kejadian(self):
        tanggal = self.cleaned_data["tanggal_kejadian"]
        if tanggal > timezone.localdate():
            raise forms.ValidationError("Tanggal kejadian tidak boleh di masa depan")
        return tanggal


class PermohonanRusakForm(PermohonanForm):
    JENIS = Permohonan.JENIS_RUSAK
    TYPE_CODE = "rusak"
    TITLE = "Permohonan KTP Rusak"
    DOCUMENTS = (
        ("ktp_rusak", DokumenSyarat.JENIS_KTP_RUSAK),
        ("kartu_keluarga", DokumenSyarat.JENIS_KK),
    )
    KETERANGAN_FIELDS = ("deskripsi_kerusakan",)

    deskripsi_kerusakan = forms.CharField(
        label="Deskripsi Kerusakan",
        widget=forms.Textarea(attrs={"rows": 3}),
        max_length=1000,
        error_messages={"required": "Deskripsi kerusakan wajib diisi"},
    )
    ktp_rusak = _dokumen_field("Foto KTP Rusak", "Foto KTP rusak wajib diunggah")
    kartu_keluarga = _dokumen_field("Kartu Keluarga", "File Kartu Keluarga wajib diunggah")


class PermohonanUbahForm(PermohonanForm):
    JENIS = Permohonan.JENIS_UPDATE
    TYPE_CODE = "ubah"
    TITLE = "Perubahan Data KTP"
    DOCUMENTS = (
        ("ktp_lama", DokumenSyarat.JENIS_KTP),
        ("kartu_keluarga", DokumenSyarat.JENIS_KK),
    )
    KETERANGAN_FIELDS = ("alasan_perubahan",)

    alasan_perubahan = forms.CharField(
        label="Alasan Perubahan",
        widget=forms.Textarea(attrs={"rows": 3}),
        max_length=1000,
        error_messages={"required": "Alasan perubahan wajib diisi"},
    )
    ktp_lama = _dokumen_field("Foto KTP Lama", "Foto KTP lama wajib diunggah")
    kartu_keluarga = _dokumen_field("Kartu Keluarga", "File Kartu Keluarga wajib diunggah")


PERMOHONAN_FORMS = {
    form.TYPE_CODE: form
    for form in (PermohonanBaruForm, PermohonanHilangForm, PermohonanRusakForm, PermohonanUbahForm)
}
