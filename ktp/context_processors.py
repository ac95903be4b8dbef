from django.apps import apps


def portal(request):
    """Expose the request actor and the asset manifest to templates."""
    return {
        "actor": getattr(request, "actor", None),
        "assets": apps.get_app_config("ktp").asset_manifest,
    }
