from __future__ import annotations

import logging
import re
from pathlib import Path
from shutil import which
from typing import Optional, Union

import pdfkit  # utilisé si wkhtmltopdf dispo

from shootbook.config import clean_path
from shootbook.errors import ExportError
from shootbook.models.invoice import Invoice
from shootbook.services.formatting import get_month_name

logger = logging.getLogger(__name__)

WINDOWS_CANDIDATES = [
    r"C:\Program Files\wkhtmltopdf\bin\wkhtmltopdf.exe",
    r"C:\Program Files (x86)\wkhtmltopdf\bin\wkhtmltopdf.exe",
]


def _slug(text: str) -> str:
    text = (text or "").strip()
    text = re.sub(r'[\\/:*?"<>|\n\r\t]', "_", text)
    text = re.sub(r"\s+", " ", text)
    return text or "Client"

def invoice_filename(inv: Invoice, ext: str = "pdf") -> str:
    return f"Invoice-{inv.invoice_number or inv.id} ({_slug(inv.customer_names)}).{ext}"

def report_filename(year: int, month: int, ext: str = "pdf") -> str:
    return f"Report-{get_month_name(month)}-{year}.{ext}"


def find_wkhtmltopdf(configured: Optional[str] = None) -> Optional[str]:
    """
    Localise wkhtmltopdf :
    - chemin configuré (AppConfig.wkhtmltopdf_path)
    - PATH
    - chemins Windows connus
    """
    if configured:
        path = clean_path(configured)
        if Path(path).is_file():
            return path
    found = which("wkhtmltopdf")
    if found:
        return clean_path(found)
    for c in WINDOWS_CANDIDATES:
        if Path(c).is_file():
            return c
    return None


def _render_pdf_with_weasyprint(html: str, out_path: Path) -> None:
    """Fallback WeasyPrint (si wkhtmltopdf absent)."""
    try:
        from weasyprint import HTML
    except Exception as e:  # import natif (cairo/pango) pouvant échouer de plusieurs façons
        raise ExportError(
            "Aucun wkhtmltopdf trouvé et WeasyPrint n'est pas utilisable. "
            "Installe WeasyPrint ou configure wkhtmltopdf (WKHTMLTOPDF_PATH).\n"
            f"Détails: {e}"
        ) from e
    HTML(string=html).write_pdf(str(out_path))


class DocumentExporter:
    """Collaborateur impression/partage : écrit le HTML rendu en .html ou en .pdf."""

    def __init__(self, exports_dir: Union[str, Path], wkhtmltopdf_path: Optional[str] = None) -> None:
        self.exports_dir = Path(exports_dir)
        self.wkhtmltopdf_path = wkhtmltopdf_path

    def _target(self, filename: str, out_dir: Optional[Union[str, Path]]) -> Path:
        d = Path(out_dir) if out_dir else self.exports_dir
        d.mkdir(parents=True, exist_ok=True)
        return d / filename

    def export_html(self, html: str, filename: str, out_dir: Optional[Union[str, Path]] = None) -> Path:
        out_path = self._target(filename, out_dir)
        out_path.write_text(html, encoding="utf-8")
        return out_path

    def export_pdf(self, html: str, filename: str, out_dir: Optional[Union[str, Path]] = None) -> Path:
        """
        Essaie wkhtmltopdf (pdfkit) en priorité, sinon fallback WeasyPrint.
        """
        out_path = self._target(filename, out_dir)

        # 1) wkhtmltopdf d'abord
        wkhtml = find_wkhtmltopdf(self.wkhtmltopdf_path)
        if wkhtml:
            try:
                config = pdfkit.configuration(wkhtmltopdf=wkhtml)
                options = {
                    "enable-local-file-access": None,
                    "quiet": "",
                    "encoding": "UTF-8",
                }
                pdfkit.from_string(html, str(out_path), options=options, configuration=config)
                return out_path
            except OSError as e:
                logger.warning("Échec wkhtmltopdf (%s). Fallback WeasyPrint...", e)

        # 2) Fallback WeasyPrint
        _render_pdf_with_weasyprint(html, out_path)
        return out_path
