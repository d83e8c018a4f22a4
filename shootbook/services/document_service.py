from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from jinja2 import Environment, FileSystemLoader, select_autoescape

from shootbook.models.invoice import Invoice
from shootbook.models.report import InvoiceStats, MonthlyStats
from shootbook.models.settings import (
    DEFAULT_INVOICE_STYLE,
    INVOICE_STYLES,
    BrandingProfile,
    InvoiceColorScheme,
)
from shootbook.models.shoot import ShootEntry
from shootbook.services.formatting import format_currency, format_date, get_month_name, parse_money
from shootbook.services.queries import get_net_profit, get_type_breakdown

# --- Chemins de base ---
PACKAGE_DIR = Path(__file__).resolve().parents[1]  # shootbook/
TEMPLATES_DIR = PACKAGE_DIR / "templates" / "pdf"

# pastilles du rapport mensuel
TYPE_COLORS: Dict[str, str] = {
    "Wedding": "#1B4332",
    "Pre-shoot": "#C8A951",
    "Casual": "#6B6560",
    "Commercial": "#2C1810",
}
DEFAULT_TYPE_COLOR = "#999"

_env: Optional[Environment] = None


def _environment() -> Environment:
    global _env
    if _env is None:
        _env = Environment(
            loader=FileSystemLoader(str(TEMPLATES_DIR)),
            autoescape=select_autoescape(["html", "xml"]),
        )
        _env.filters["currency"] = format_currency
        _env.filters["fdate"] = format_date
    return _env


def _item_rows(invoice: Invoice) -> List[Dict[str, str]]:
    return [{"description": it.description or "", "qty": it.quantity or "---"} for it in invoice.items]


def generate_invoice_html(
    invoice: Invoice,
    branding: Optional[BrandingProfile] = None,
    colors: Optional[InvoiceColorScheme] = None,
    style: str = DEFAULT_INVOICE_STYLE,
) -> str:
    """
    Rend la facture en HTML autonome (CSS embarqué, logo en data URI).
    Les cinq styles partagent les mêmes valeurs calculées ; un style inconnu -> 'elegant'.
    """
    if style not in INVOICE_STYLES:
        style = DEFAULT_INVOICE_STYLE
    total = invoice.total()
    advance = invoice.advance()
    ctx: Dict[str, Any] = {
        "inv": invoice,
        "b": branding or BrandingProfile(),
        "c": colors or InvoiceColorScheme(),
        "items": _item_rows(invoice),
        "total": format_currency(total),
        "advance": format_currency(advance),
        "balance": format_currency(total - advance),
        "invoice_date": format_date(invoice.invoice_date),
        "event_date": format_date(invoice.event_date),
        "style_name": style.capitalize(),
    }
    return _environment().get_template(f"invoice_{style}.html").render(**ctx)


def generate_monthly_report_html(
    shoots: Sequence[ShootEntry],
    stats: MonthlyStats,
    year: int,
    month: int,
    branding: Optional[BrandingProfile] = None,
    invoice_stats: Optional[InvoiceStats] = None,
    total_expenses: float = 0.0,
) -> str:
    """Rapport du mois (1-12) : cartes de synthèse, ventilation par type, liste des séances, bénéfice net."""
    inv_stats = invoice_stats or InvoiceStats()
    net = get_net_profit(stats, inv_stats, total_expenses)
    rows = [
        {
            "date": format_date(s.shoot_date),
            "name": s.client_name or s.shoot_location,
            "type": s.shoot_type,
            "color": TYPE_COLORS.get(s.shoot_type, "#555"),
            "location": s.shoot_location,
            "price": format_currency(parse_money(s.price)),
        }
        for s in shoots
    ]
    breakdown = [
        {
            "type": b.shoot_type,
            "color": TYPE_COLORS.get(b.shoot_type, DEFAULT_TYPE_COLOR),
            "count": b.count,
            "income": format_currency(b.income),
        }
        for b in get_type_breakdown(shoots)
    ]
    ctx: Dict[str, Any] = {
        "b": branding or BrandingProfile(),
        "month_label": f"{get_month_name(month)} {year}",
        "stats": stats,
        "inv_stats": inv_stats,
        "total_expenses": total_expenses,
        "net_profit": net,
        "breakdown": breakdown,
        "rows": rows,
    }
    return _environment().get_template("monthly_report.html").render(**ctx)
