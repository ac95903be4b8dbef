"""
Unit tests for display formatting helpers and template filters.
"""

from datetime import date, time

import pytest
from ktp.assets import AssetManifest
from ktp.formatting import (
    add_one_month,
    format_application_type,
    format_jam,
    format_status,
    format_tanggal,
)
from ktp.templatetags.ktp_filters import get_item, status_badge


class TestFormatting:
    """Test cases for the formatting helpers."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (date(2026, 1, 15), date(2026, 2, 15)),
            (date(2026, 1, 31), date(2026, 2, 28)),
            (date(2026, 12, 10), date(2027, 1, 10)),
            (date(2028, 1, 30), date(2028, 2, 29)),
        ],
    )
    def test_add_one_month(self, value, expected):
        assert add_one_month(value) == expected

    def test_application_type(self):
        assert format_application_type("ubah") == "Perubahan Data KTP"
        assert format_application_type("lainnya") == "lainnya"

    def test_status(self):
        assert format_status("SIAP_AMBIL") == "Siap Ambil"
        assert format_status("") == "-"

    def test_dates_and_times(self):
        assert format_tanggal(date(2026, 3, 9)) == "09 Mar 2026"
        assert format_tanggal(None) == "-"
        assert format_jam(time(9, 5)) == "09:05"

    def test_filters(self):
        assert status_badge("DITOLAK") == "badge-red"
        assert status_badge("???") == "badge-slate"
        assert get_item({"a": 1}, "a") == 1
        assert get_item(None, "a") == ""


class TestAssetManifest:
    """Test cases for Vite manifest resolution."""

    def test_missing_manifest_uses_dev_server(self, tmp_path):
        manifest = AssetManifest.load(tmp_path / "manifest.json", "http://localhost:5173/")

        assert manifest.is_dev
        assert manifest.url("assets/js/main.js") == "http://localhost:5173/assets/js/main.js"

    def test_built_manifest(self, tmp_path):
        path = tmp_path / "manifest.json"
        path.write_text('{"assets/js/main.js": {"file": "assets/main-4f2a.js"}}')

        manifest = AssetManifest.load(path, "http://localhost:5173")

        assert not manifest.is_dev
        assert manifest.url("assets/js/main.js") == "/static/assets/main-4f2a.js"
        assert manifest.url("assets/css/main.css") == "/static/assets/css/main.css"

    def test_invalid_manifest(self, tmp_path):
        path = tmp_path / "manifest.json"
        path.write_text("{bukan json")

        with pytest.raises(RuntimeError):
            AssetManifest.load(path, "http://localhost:5173")
