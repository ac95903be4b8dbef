import uuid

import django.db.models.deletion
import ktp.models.permohonan
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Kelurahan",
            fields=[
                ("id", models.SmallAutoField(primary_key=True, serialize=False)),
                ("nama_kelurahan", models.CharField(max_length=100)),
                (
                    "kode_area",
                    models.CharField(
                        help_text="Short area code, e.g. PMB", max_length=10, unique=True
                    ),
                ),
            ],
            options={
                "verbose_name": "Kelurahan",
                "verbose_name_plural": "Kelurahan",
                "db_table": "kelurahan",
                "ordering": ["nama_kelurahan"],
            },
        ),
        migrations.CreateModel(
            name="Penduduk",
            fields=[
                ("nik", models.CharField(max_length=16, primary_key=True, serialize=False)),
                ("nama_lengkap", models.CharField(max_length=255)),
                (
                    "jenis_kelamin",
                    models.CharField(
                        choices=[("LAKI_LAKI", "Laki-laki"), ("PEREMPUAN", "Perempuan")],
                        max_length=10,
                    ),
                ),
                ("tanggal_lahir", models.DateField(blank=True, null=True)),
                ("alamat", models.TextField(blank=True, null=True)),
                ("no_hp", models.CharField(blank=True, max_length=20, null=True)),
                ("email", models.EmailField(blank=True, max_length=254, null=True, unique=True)),
                (
                    "password_hash",
                    models.CharField(
                        blank=True,
                        help_text="Unset for administratively seeded citizens; blocks login",
                        max_length=255,
                        null=True,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "kelurahan",
                    models.ForeignKey(
                        blank=True,
                        help_text="Home sub-district",
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="penduduk",
                        to="ktp.kelurahan",
                    ),
                ),
            ],
            options={
                "verbose_name": "Penduduk",
                "verbose_name_plural": "Penduduk",
                "db_table": "penduduk",
                "ordering": ["nama_lengkap"],
                "indexes": [
                    models.Index(fields=["nama_lengkap"], name="penduduk_nama_idx")
                ],
            },
        ),
        migrations.CreateModel(
            name="Petugas",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4, editable=False, primary_key=True, serialize=False
                    ),
                ),
                (
                    "nip",
                    models.CharField(
                        help_text="18-digit employee number", max_length=18, unique=True
                    ),
                ),
                ("nama_petugas", models.CharField(max_length=255)),
                ("username", models.CharField(max_length=100, unique=True)),
                ("password_hash", models.CharField(max_length=255)),
                (
                    "role",
                    models.CharField(
                        choices=[
                            ("ADMIN_KECAMATAN", "Admin Kecamatan"),
                            ("ADMIN_KELURAHAN", "Admin Kelurahan"),
                        ],
                        default="ADMIN_KELURAHAN",
                        max_length=20,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "kelurahan",
                    models.ForeignKey(
                        blank=True,
                        help_text="Empty for district-level officers",
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="petugas",
                        to="ktp.kelurahan",
                    ),
                ),
            ],
            options={
                "verbose_name": "Petugas",
                "verbose_name_plural": "Petugas",
                "db_table": "petugas",
                "ordering": ["nama_petugas"],
            },
        ),
        migrations.CreateModel(
            name="JadwalSesi",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4, editable=False, primary_key=True, serialize=False
                    ),
                ),
                ("tanggal", models.DateField(db_index=True)),
                ("jam_mulai", models.TimeField()),
                ("jam_selesai", models.TimeField()),
                ("kuota_maksimal", models.PositiveSmallIntegerField(default=50)),
                ("kuota_terisi", models.PositiveSmallIntegerField(default=0)),
                (
                    "status_sesi",
                    models.CharField(
                        choices=[
                            ("BUKA", "Buka"),
                            ("PENUH", "Penuh"),
                            ("ISTIRAHAT", "Istirahat"),
                        ],
                        db_index=True,
                        default="BUKA",
                        max_length=10,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "lokasi_kelurahan",
                    models.ForeignKey(
                        blank=True,
                        help_text="Empty for sessions at the district office",
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="jadwal_sesi",
                        to="ktp.kelurahan",
                    ),
                ),
            ],
            options={
                "verbose_name": "Jadwal Sesi",
                "verbose_name_plural": "Jadwal Sesi",
                "db_table": "jadwal_sesi",
                "ordering": ["tanggal", "jam_mulai"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("kuota_terisi__lte", models.F("kuota_maksimal"))),
                        name="jadwal_sesi_kuota_terisi_lte_maksimal",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("jam_selesai__gt", models.F("jam_mulai"))),
                        name="jadwal_sesi_jam_selesai_after_mulai",
                    ),
                    models.UniqueConstraint(
                        fields=("lokasi_kelurahan", "tanggal", "jam_mulai"),
                        name="jadwal_sesi_unique_kelurahan_slot",
                    ),
                    models.UniqueConstraint(
                        condition=models.Q(("lokasi_kelurahan__isnull", True)),
                        fields=("tanggal", "jam_mulai"),
                        name="jadwal_sesi_unique_kecamatan_slot",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Permohonan",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4, editable=False, primary_key=True, serialize=False
                    ),
                ),
                ("kode_booking", models.CharField(editable=False, max_length=12, unique=True)),
                (
                    "jenis_permohonan",
                    models.CharField(
                        choices=[
                            ("BARU", "KTP Baru"),
                            ("HILANG", "KTP Hilang"),
                            ("RUSAK", "KTP Rusak"),
                            ("UPDATE", "Perubahan Data KTP"),
                        ],
                        max_length=10,
                    ),
                ),
                (
                    "status_terkini",
                    models.CharField(
                        choices=[
                            ("TERDAFTAR", "Terdaftar"),
                            ("VERIFIKASI", "Verifikasi"),
                            ("PROSES", "Proses"),
                            ("SIAP_AMBIL", "Siap Ambil"),
                            ("SELESAI", "Selesai"),
                            ("DITOLAK", "Ditolak"),
                        ],
                        db_index=True,
                        default="TERDAFTAR",
                        max_length=12,
                    ),
                ),
                ("nomor_antrian", models.PositiveSmallIntegerField(blank=True, null=True)),
                (
                    "keterangan",
                    models.JSONField(
                        blank=True, default=dict, help_text="Kind-specific form details"
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "jadwal_sesi",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="permohonan",
                        to="ktp.jadwalsesi",
                    ),
                ),
                (
                    "penduduk",
                    models.ForeignKey(
                        db_column="nik",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="permohonan",
                        to="ktp.penduduk",
                    ),
                ),
            ],
            options={
                "verbose_name": "Permohonan",
                "verbose_name_plural": "Permohonan",
                "db_table": "permohonan",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["status_terkini", "created_at"], name="permohonan_status_created_idx"
                    ),
                    models.Index(
                        fields=["penduduk", "status_terkini"], name="permohonan_nik_status_idx"
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="RiwayatStatus",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                (
                    "status_baru",
                    models.CharField(
                        choices=[
                            ("TERDAFTAR", "Terdaftar"),
                            ("VERIFIKASI", "Verifikasi"),
                            ("PROSES", "Proses"),
                            ("SIAP_AMBIL", "Siap Ambil"),
                            ("SELESAI", "Selesai"),
                            ("DITOLAK", "Ditolak"),
                        ],
                        max_length=12,
                    ),
                ),
                ("catatan_proses", models.TextField(blank=True, default="")),
                ("waktu_proses", models.DateTimeField(auto_now_add=True)),
                (
                    "permohonan",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="riwayat_status",
                        to="ktp.permohonan",
                    ),
                ),
                (
                    "petugas",
                    models.ForeignKey(
                        blank=True,
                        help_text="Empty when the change was made by the system",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="riwayat_status",
                        to="ktp.petugas",
                    ),
                ),
            ],
            options={
                "verbose_name": "Riwayat Status",
                "verbose_name_plural": "Riwayat Status",
                "db_table": "riwayat_status",
                "ordering": ["waktu_proses", "id"],
            },
        ),
        migrations.CreateModel(
            name="DokumenSyarat",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                (
                    "jenis_dokumen",
                    models.CharField(
                        choices=[
                            ("KK", "Kartu Keluarga"),
                            ("SURAT_POLISI", "Surat Keterangan Polisi"),
                            ("KTP_RUSAK", "Foto KTP Rusak"),
                            ("KTP", "Foto KTP Lama"),
                        ],
                        max_length=15,
                    ),
                ),
                (
                    "file",
                    models.FileField(
                        max_length=500, upload_to=ktp.models.permohonan.dokumen_upload_path
                    ),
                ),
                ("uploaded_at", models.DateTimeField(auto_now_add=True)),
                (
                    "permohonan",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="dokumen",
                        to="ktp.permohonan",
                    ),
                ),
            ],
            options={
                "verbose_name": "Dokumen Syarat",
                "verbose_name_plural": "Dokumen Syarat",
                "db_table": "dokumen_syarat",
                "ordering": ["uploaded_at", "id"],
            },
        ),
    ]
