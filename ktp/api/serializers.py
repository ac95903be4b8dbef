from rest_framework import serializers
from ktp.models import Kelurahan


class KelurahanSerializer(serializers.ModelSerializer):
    """Serializer for Kelurahan reference data."""

    namaKelurahan = serializers.CharField(source="nama_kelurahan", read_only=True)
    kodeArea = serializers.CharField(source="kode_area", read_only=True)

    class Meta:
        model = Kelurahan
        fields = ["id", "namaKelurahan", "kodeArea"]


class JadwalOptionSerializer(serializers.Serializer):
    """Serializer for a bookable session option."""

    id = serializers.CharField()
    label = serializers.CharField()
    tanggal = serializers.DateField()
    jamMulai = serializers.CharField(source="jam_mulai")
    jamSelesai = serializers.CharField(source="jam_selesai")
    namaLokasi = serializers.CharField(source="nama_lokasi")
    kuotaSisa = serializers.IntegerField(source="kuota_sisa")
    statusSesi = serializers.CharField(source="status_sesi")
