import pytest

from shootbook.models.invoice import Invoice, InvoiceItem, create_default_items
from shootbook.models.report import InvoiceStats
from shootbook.models.settings import INVOICE_STYLES, BrandingProfile, InvoiceColorScheme
from shootbook.models.shoot import ShootEntry
from shootbook.services.document_service import generate_invoice_html, generate_monthly_report_html
from shootbook.services.queries import get_monthly_stats


def _invoice(**kw):
    base = dict(
        invoice_number="0042",
        invoice_date="2024-03-01",
        customer_names="Kasun & Dilini",
        event_date="15/03/2024",
        event_location="Galle Face",
        phone_number="0771234567 / 0719876543",
        items=create_default_items(),
        full_price="150000",
        advance_payment="50000",
    )
    base.update(kw)
    return Invoice(**base)


@pytest.mark.parametrize("style", INVOICE_STYLES)
def test_every_style_shows_amounts(style):
    html = generate_invoice_html(_invoice(), BrandingProfile(business_name="LENS"), InvoiceColorScheme(), style)
    assert "150,000.00" in html
    assert "50,000.00" in html
    assert "100,000.00" in html
    assert "0042" in html
    assert "15.Mar.2024" in html
    assert "LENS" in html
    assert "Pen Drive" in html

def test_customer_text_is_escaped():
    html = generate_invoice_html(_invoice(customer_names="<script>alert(1)</script>"))
    assert "<script>alert(1)</script>" not in html
    assert "&lt;script&gt;" in html

def test_unknown_style_falls_back():
    inv = _invoice()
    assert generate_invoice_html(inv, style="neon") == generate_invoice_html(inv, style="elegant")

def test_colors_are_applied():
    html = generate_invoice_html(_invoice(), colors=InvoiceColorScheme(primary="#123456"), style="modern")
    assert "#123456" in html

def test_empty_quantity_shows_placeholder():
    html = generate_invoice_html(_invoice(items=[InvoiceItem(description="Album", quantity="")]), style="minimal")
    assert "---" in html

def test_logo_embedded_when_set():
    logo = "data:image/png;base64,AAAA"
    html = generate_invoice_html(_invoice(), BrandingProfile(logo_uri=logo), style="classic")
    assert logo in html

def test_monthly_report():
    shoots = [
        ShootEntry(client_name="Nimali", shoot_date="2024-03-05", shoot_type="Wedding", price="100000", shoot_location="Kandy"),
        ShootEntry(client_name="", shoot_date="2024-03-09", shoot_type="Casual", price="20000", shoot_location="Ella"),
    ]
    stats = get_monthly_stats(shoots)
    inv_stats = InvoiceStats(total_invoices=1, total_revenue=50000, total_advance=10000, total_pending=40000)
    html = generate_monthly_report_html(shoots, stats, 2024, 3, BrandingProfile(), inv_stats, 5000.0)
    assert "March 2024" in html
    assert "120,000.00" in html
    assert "Invoice Income" in html
    assert "Expenses" in html
    # 120000 + 50000 - 5000
    assert "165,000.00" in html
    assert "Ella" in html
    assert "05.Mar.2024" in html

def test_monthly_report_hides_empty_sections():
    html = generate_monthly_report_html([], get_monthly_stats([]), 2024, 2)
    assert "February 2024" in html
    assert "Invoice Income" not in html
    assert "Expenses" not in html
    assert "Net Profit" in html
