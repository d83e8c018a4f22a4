from __future__ import annotations

import math
import re
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Optional

MONTH_ABBR = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]
MONTH_NAMES = ["January", "February", "March", "April", "May", "June",
               "July", "August", "September", "October", "November", "December"]

_NUMBER_PREFIX = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")
_DMY = re.compile(r"(\d{1,2})[/\-](\d{1,2})[/\-](\d{4})")
CENT = Decimal("0.01")

# heure par défaut d'une date saisie en JJ/MM/AAAA
DMY_DEFAULT_HOUR = 9


# ---------- Montants ---------- #

def parse_money(value: Any) -> float:
    """
    Conversion "souple" d'un montant saisi -> float.

    Seul le nombre en tête de chaîne est lu ("1500abc" -> 1500.0, "1,500" -> 1.0).
    Vide, None ou non numérique -> 0.0 : jamais d'exception.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        f = float(value)
        return f if math.isfinite(f) else 0.0
    m = _NUMBER_PREFIX.match(str(value))
    if not m:
        return 0.0
    try:
        f = float(m.group(1))
    except ValueError:
        return 0.0
    return f if math.isfinite(f) else 0.0

def format_currency(amount: Any) -> str:
    """2 décimales, séparateur de milliers : 1234.5 -> '1,234.50'."""
    # arrondi commercial : 0.125 -> 0.13
    value = Decimal(str(parse_money(amount))).quantize(CENT, rounding=ROUND_HALF_UP)
    if value == 0:
        value = Decimal("0.00")  # pas de "-0.00"
    return f"{value:,.2f}"


# ---------- Dates ---------- #

def parse_date(value: Any) -> Optional[datetime]:
    """
    Date saisie -> datetime local (naïf).

    - JJ/MM/AAAA ou JJ-MM-AAAA -> 09:00
    - AAAA-MM-JJ -> minuit
    - ISO avec heure ; si fuseau présent, converti en heure locale
    Sinon None.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.astimezone().replace(tzinfo=None) if value.tzinfo else value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)

    s = str(value).strip()
    m = _DMY.search(s)
    if m:
        try:
            return datetime(int(m.group(3)), int(m.group(2)), int(m.group(1)), DMY_DEFAULT_HOUR, 0, 0)
        except ValueError:
            return None
    try:
        dt = datetime.fromisoformat(s)
    except ValueError:
        return None
    if dt.tzinfo is not None:
        dt = dt.astimezone().replace(tzinfo=None)
    return dt

def parse_day(value: Any) -> Optional[date]:
    dt = parse_date(value)
    return dt.date() if dt else None

def format_date(value: Any) -> str:
    """'2024-03-05' -> '05.Mar.2024' ; une saisie illisible est renvoyée telle quelle."""
    if value is None or value == "":
        return ""
    dt = parse_date(value)
    if dt is None:
        return str(value)
    return f"{dt.day:02d}.{MONTH_ABBR[dt.month - 1]}.{dt.year}"

def get_month_name(month: int) -> str:
    """Mois 1-12 -> nom anglais complet."""
    m = int(month)
    if not 1 <= m <= 12:
        raise ValueError(f"Month must be 1-12, got {month}")
    return MONTH_NAMES[m - 1]
