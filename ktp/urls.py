from django.urls import path

from ktp.views import admin, auth, home, permohonan, warga

urlpatterns = [
    path("", home.home, name="home"),
    # Auth pages and actions
    path("login", auth.login_page, name="login"),
    path("petugas/login", auth.login_petugas_page, name="login-petugas"),
    path("register", auth.register_page, name="register"),
    path("auth/login", auth.login_warga, name="auth-login"),
    path("auth/login/petugas", auth.login_petugas, name="auth-login-petugas"),
    path("auth/register", auth.register, name="auth-register"),
    path("auth/logout", auth.logout, name="auth-logout"),
    # Citizen
    path("dashboard", warga.dashboard, name="dashboard"),
    path("lacak-status", warga.lacak_status, name="lacak-status"),
    path("permohonan/sukses", permohonan.sukses, name="permohonan-sukses"),
    path("permohonan/jadwal-options", permohonan.jadwal_options, name="permohonan-jadwal-options"),
    path("permohonan/<str:type_code>", permohonan.permohonan_form, name="permohonan-form"),
    # Officer
    path("admin", admin.dashboard, name="admin-dashboard"),
    path("admin/penduduk", admin.penduduk, name="admin-penduduk"),
    path("admin/permohonan", admin.permohonan_list, name="admin-permohonan"),
    path("admin/permohonan/update-status", admin.update_status, name="admin-update-status"),
    path("admin/permohonan/<str:permohonan_id>", admin.permohonan_detail, name="admin-permohonan-detail"),
    path(
        "admin/permohonan/<str:permohonan_id>/status",
        admin.permohonan_status_form,
        name="admin-permohonan-status",
    ),
    path("admin/jadwal", admin.jadwal, name="admin-jadwal"),
    path("admin/jadwal/create", admin.jadwal_create, name="admin-jadwal-create"),
    path("admin/jadwal/generate", admin.jadwal_generate, name="admin-jadwal-generate"),
    path("admin/jadwal/<str:jadwal_id>/antrian", admin.jadwal_antrian, name="admin-jadwal-antrian"),
]
