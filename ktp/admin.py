from django import forms
from django.contrib import admin
from django.contrib.auth.hashers import make_password
from ktp.models import (
    DokumenSyarat,
    JadwalSesi,
    Kelurahan,
    Penduduk,
    Permohonan,
    Petugas,
    RiwayatStatus,
)


class PasswordAdminForm(forms.ModelForm):
    """Sets password_hash from a plain password; blank keeps the current one."""

    password_baru = forms.CharField(
        label="Password baru",
        widget=forms.PasswordInput,
        required=False,
        min_length=8,
        strip=False,
    )

    def save(self, commit=True):
        instance = super().save(commit=False)
        password = self.cleaned_data.get("password_baru")
        if password:
            instance.password_hash = make_password(password)
        if commit:
            instance.save()
        return instance


class PetugasAdminForm(PasswordAdminForm):
    class Meta:
        model = Petugas
        exclude = ("password_hash",)

    def clean(self):
        cleaned_data = super().clean()
        if self.instance._state.adding and not cleaned_data.get("password_baru"):
            self.add_error("password_baru", "Password wajib diisi untuk petugas baru")
        return cleaned_data


class PendudukAdminForm(PasswordAdminForm):
    class Meta:
        model = Penduduk
        exclude = ("password_hash",)


@admin.register(Kelurahan)
class KelurahanAdmin(admin.ModelAdmin):
    list_display = ("nama_kelurahan", "kode_area")
    search_fields = ("nama_kelurahan", "kode_area")


@admin.register(Petugas)
class PetugasAdmin(admin.ModelAdmin):
    form = PetugasAdminForm
    list_display = ("nama_petugas", "nip", "username", "role", "kelurahan", "created_at")
    list_filter = ("role", "kelurahan")
    search_fields = ("nip", "nama_petugas", "username")
    readonly_fields = ("created_at",)


@admin.register(Penduduk)
class PendudukAdmin(admin.ModelAdmin):
    form = PendudukAdminForm
    list_display = ("nik", "nama_lengkap", "jenis_kelamin", "kelurahan", "has_password", "created_at")
    list_filter = ("jenis_kelamin", "kelurahan")
    search_fields = ("nik", "nama_lengkap", "email")
    readonly_fields = ("created_at", "updated_at")

    def get_readonly_fields(self, request, obj=None):
        # NIK is immutable once created
        if obj is not None:
            return self.readonly_fields + ("nik",)
        return self.readonly_fields

    @admin.display(boolean=True, description="Password")
    def has_password(self, obj):
        return obj.has_password


@admin.register(JadwalSesi)
class JadwalSesiAdmin(admin.ModelAdmin):
    list_display = (
        "tanggal",
        "jam_mulai",
        "jam_selesai",
        "lokasi_kelurahan",
        "kuota_terisi",
        "kuota_maksimal",
        "status_sesi",
    )
    list_filter = ("status_sesi", "lokasi_kelurahan", "tanggal")
    date_hierarchy = "tanggal"
    readonly_fields = ("kuota_terisi", "created_at")


class RiwayatStatusInline(admin.TabularInline):
    model = RiwayatStatus
    extra = 0
    can_delete = False
    readonly_fields = ("status_baru", "catatan_proses", "petugas", "waktu_proses")

    def has_add_permission(self, request, obj=None):
        return False


class DokumenSyaratInline(admin.TabularInline):
    model = DokumenSyarat
    extra = 0
    can_delete = False
    readonly_fields = ("jenis_dokumen", "file", "uploaded_at")

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Permohonan)
class PermohonanAdmin(admin.ModelAdmin):
    list_display = (
        "kode_booking",
        "penduduk",
        "jenis_permohonan",
        "status_terkini",
        "nomor_antrian",
        "created_at",
    )
    list_filter = ("status_terkini", "jenis_permohonan", "created_at")
    search_fields = ("kode_booking", "penduduk__nik", "penduduk__nama_lengkap")
    # Status changes go through the officer panel so history is recorded
    readonly_fields = (
        "kode_booking",
        "penduduk",
        "jadwal_sesi",
        "status_terkini",
        "nomor_antrian",
        "created_at",
        "updated_at",
    )
    inlines = [RiwayatStatusInline, DokumenSyaratInline]
    fieldsets = (
        ("Pemohon", {"fields": ("kode_booking", "penduduk", "jenis_permohonan")}),
        ("Jadwal", {"fields": ("jadwal_sesi", "nomor_antrian")}),
        ("Status", {"fields": ("status_terkini", "created_at", "updated_at")}),
        ("Keterangan", {"fields": ("keterangan",), "classes": ("collapse",)}),
    )

    def has_add_permission(self, request):
        return False
