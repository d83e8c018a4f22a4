import os

import pytest

from shootbook.config import AppConfig, clean_path
from shootbook.models.invoice import Invoice
from shootbook.services.export_service import DocumentExporter, find_wkhtmltopdf, invoice_filename, report_filename


def test_filenames():
    assert invoice_filename(Invoice(invoice_number="0003", customer_names="Kasun / Dilini")) == "Invoice-0003 (Kasun _ Dilini).pdf"
    assert invoice_filename(Invoice(invoice_number="0004"), "html") == "Invoice-0004 (Client).html"
    assert report_filename(2024, 3) == "Report-March-2024.pdf"

def test_export_html(tmp_path):
    exporter = DocumentExporter(tmp_path / "exports")
    path = exporter.export_html("<p>hi</p>", "doc.html")
    assert path == tmp_path / "exports" / "doc.html"
    assert path.read_text(encoding="utf-8") == "<p>hi</p>"
    other = exporter.export_html("x", "b.html", out_dir=tmp_path / "elsewhere")
    assert other.parent == tmp_path / "elsewhere"

def test_find_wkhtmltopdf_prefers_configured_path(tmp_path):
    exe = tmp_path / "wkhtmltopdf"
    exe.write_text("")
    assert find_wkhtmltopdf(f'"{exe}"') == os.path.normpath(str(exe))

def test_clean_path():
    assert clean_path(None) == ""
    assert clean_path(" 'some/dir/' ") == os.path.normpath("some/dir")

def test_config_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("SHOOTBOOK_DATA_DIR", str(tmp_path / "d"))
    monkeypatch.setenv("SHOOTBOOK_LOG_LEVEL", "debug")
    monkeypatch.delenv("SHOOTBOOK_CALENDAR", raising=False)
    monkeypatch.delenv("WKHTMLTOPDF_PATH", raising=False)
    monkeypatch.setenv("WKHTMLTOPDF", "/opt/wk/bin/wkhtmltopdf")
    cfg = AppConfig.from_env()
    assert cfg.data_dir == tmp_path / "d"
    assert cfg.calendar_path == tmp_path / "d" / "reminders.ics"
    assert cfg.log_level == "DEBUG"
    assert cfg.wkhtmltopdf_path == os.path.normpath("/opt/wk/bin/wkhtmltopdf")

@pytest.mark.parametrize("value", ["", None])
def test_find_wkhtmltopdf_without_configuration(value, monkeypatch):
    monkeypatch.setattr("shootbook.services.export_service.which", lambda name: None)
    monkeypatch.setattr("shootbook.services.export_service.WINDOWS_CANDIDATES", [])
    assert find_wkhtmltopdf(value) is None
