from django.urls import path
from ktp.api.views import JadwalTersediaView, KelurahanListView

urlpatterns = [
    path("jadwal/tersedia/", JadwalTersediaView.as_view(), name="jadwal-tersedia"),
    path("kelurahan/", KelurahanListView.as_view(), name="kelurahan-list"),
]
