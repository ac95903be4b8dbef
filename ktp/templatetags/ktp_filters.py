from django import template

from ktp.formatting import format_jam, format_status, format_tanggal

register = template.Library()

STATUS_BADGES = {
    "TERDAFTAR": "badge-slate",
    "VERIFIKASI": "badge-amber",
    "PROSES": "badge-blue",
    "SIAP_AMBIL": "badge-green",
    "SELESAI": "badge-emerald",
    "DITOLAK": "badge-red",
    "BUKA": "badge-green",
    "PENUH": "badge-red",
    "ISTIRAHAT": "badge-slate",
}


@register.simple_tag
def vite_asset(manifest, source):
    """URL of a built asset, e.g. {% vite_asset assets "assets/js/main.js" %}"""
    return manifest.url(source)


@register.filter
def status_label(value):
    return format_status(value)


@register.filter
def status_badge(value):
    """CSS class of a status badge"""
    return STATUS_BADGES.get(value, "badge-slate")


@register.filter
def tanggal(value, fmt="%d %b %Y"):
    return format_tanggal(value, fmt)


@register.filter
def jam(value):
    return format_jam(value)


@register.filter
def get_item(mapping, key):
    try:
        return mapping.get(key, "")
    except AttributeError:
        return ""
