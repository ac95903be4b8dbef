from django.apps import AppConfig
from django.conf import settings


class KtpConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "ktp"
    verbose_name = "Layanan KTP"

    def ready(self):
        """Load the asset manifest once and connect signal handlers."""
        from ktp.assets import AssetManifest
        import ktp.signals  # noqa

        self.asset_manifest = AssetManifest.load(
            settings.VITE_MANIFEST_PATH, settings.VITE_DEV_SERVER_URL
        )
