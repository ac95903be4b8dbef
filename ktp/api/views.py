from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from ktp.api.serializers import JadwalOptionSerializer, KelurahanSerializer
from ktp.models import Kelurahan
from ktp.services.permohonan_service import PermohonanService
import logging

logger = logging.getLogger(__name__)


class JadwalTersediaView(APIView):
    """
    Bookable appointment sessions from today through next month.

    GET /api/v1/jadwal/tersedia/?kelurahan_id=<id>

    kelurahan_id is optional; 0 selects the district office.

    Response:
    {
        "jadwal": [
            {
                "id": "4b0f...",
                "label": "02 Jan 2026 - 09:00 (Ancol, sisa 12 kuota)",
                "tanggal": "2026-01-02",
                "jamMulai": "09:00",
                "jamSelesai": "12:00",
                "namaLokasi": "Ancol",
                "kuotaSisa": 12,
                "statusSesi": "BUKA"
            }
        ],
        "count": 1
    }
    """

    def get(self, request):
        raw_kelurahan = request.query_params.get("kelurahan_id", "").strip()
        kelurahan_id = None
        if raw_kelurahan:
            if not raw_kelurahan.isdigit():
                return Response(
                    {"message": "kelurahan_id must be a number"},
                    status=status.HTTP_400_BAD_REQUEST,
                )
            kelurahan_id = int(raw_kelurahan)

        options = PermohonanService().get_available_jadwal(kelurahan_id=kelurahan_id)
        serializer = JadwalOptionSerializer(options, many=True)
        return Response(
            {"jadwal": serializer.data, "count": len(options)}, status=status.HTTP_200_OK
        )


class KelurahanListView(APIView):
    """
    Reference list of kelurahan.

    GET /api/v1/kelurahan/
    """

    def get(self, request):
        serializer = KelurahanSerializer(Kelurahan.objects.order_by("nama_kelurahan"), many=True)
        return Response(
            {"kelurahan": serializer.data, "count": len(serializer.data)},
            status=status.HTTP_200_OK,
        )
