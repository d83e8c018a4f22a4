"""
Vues dérivées sur les collections : recherche, filtres par mois, statistiques,
décompte des jours, agenda. Fonctions pures, aucune lecture du stockage.

Les filtres par mois décomposent les dates en heure locale (mois 1-12).
"""
from __future__ import annotations

import math
from datetime import date, datetime
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence, TypeVar, Union

from shootbook.models.booking import BookingEvent
from shootbook.models.expense import Expense
from shootbook.models.invoice import Invoice
from shootbook.models.report import InvoiceStats, MonthlyStats, TypeBreakdown
from shootbook.models.shoot import ShootEntry, UpcomingShoot
from shootbook.services.formatting import parse_day, parse_money

R = TypeVar("R")


# ---------- Recherche ---------- #

def _search(records: Sequence[R], query: str, fields: Callable[[R], Iterable[str]]) -> Sequence[R]:
    q = (query or "").strip().casefold()
    if not q:
        return records
    return [r for r in records if any(q in (f or "").casefold() for f in fields(r))]

def search_invoices(invoices: Sequence[Invoice], query: str) -> Sequence[Invoice]:
    return _search(invoices, query, lambda inv: (
        inv.customer_names, inv.invoice_number, inv.event_location, inv.phone_number,
    ))

def search_shoots(shoots: Sequence[ShootEntry], query: str) -> Sequence[ShootEntry]:
    return _search(shoots, query, lambda s: (
        s.client_name, s.shoot_location, s.salon_name, s.model_name,
        s.shoot_type, s.phone_number, s.notes,
    ))


# ---------- Filtres par mois ---------- #

def _in_month(value: str, year: int, month: int) -> bool:
    d = parse_day(value)
    return d is not None and d.year == year and d.month == month

def get_shoots_by_month(shoots: Iterable[ShootEntry], year: int, month: int) -> List[ShootEntry]:
    return [s for s in shoots if _in_month(s.shoot_date, year, month)]

def get_expenses_by_month(expenses: Iterable[Expense], year: int, month: int) -> List[Expense]:
    return [e for e in expenses if _in_month(e.date, year, month)]

def get_invoices_by_month(invoices: Iterable[Invoice], year: int, month: int) -> List[Invoice]:
    # rattachées au mois de l'évènement
    return [i for i in invoices if _in_month(i.event_date, year, month)]


# ---------- Statistiques ---------- #

def get_monthly_stats(shoots: Sequence[ShootEntry]) -> MonthlyStats:
    total_shoots = len(shoots)
    total_income = sum(parse_money(s.price) for s in shoots)
    avg = total_income / total_shoots if total_shoots > 0 else 0.0
    return MonthlyStats(total_shoots=total_shoots, total_income=total_income, avg_per_shoot=avg)

def get_invoice_stats(invoices: Sequence[Invoice]) -> InvoiceStats:
    revenue = sum(inv.total() for inv in invoices)
    advance = sum(inv.advance() for inv in invoices)
    return InvoiceStats(
        total_invoices=len(invoices),
        total_revenue=revenue,
        total_advance=advance,
        total_pending=revenue - advance,
    )

def get_total_expenses(expenses: Iterable[Expense]) -> float:
    return sum(parse_money(e.amount) for e in expenses)

def get_net_profit(stats: MonthlyStats, invoice_stats: InvoiceStats, total_expenses: float) -> float:
    return stats.total_income + invoice_stats.total_revenue - total_expenses

def get_type_breakdown(shoots: Iterable[ShootEntry]) -> List[TypeBreakdown]:
    """Nombre et recette par type, dans l'ordre de première apparition."""
    out: Dict[str, TypeBreakdown] = {}
    for s in shoots:
        row = out.setdefault(s.shoot_type, TypeBreakdown(shoot_type=s.shoot_type))
        row.count += 1
        row.income += parse_money(s.price)
    return list(out.values())

def get_total(invoice: Invoice) -> float:
    return invoice.total()

def calculate_balance(total: float, advance: str) -> float:
    return total - parse_money(advance)


# ---------- Échéances ---------- #

def _today(today: Optional[date]) -> date:
    if today is None:
        return date.today()
    return today.date() if isinstance(today, datetime) else today

def get_days_until(date_str: str, today: Optional[date] = None) -> Optional[int]:
    """Jours entre aujourd'hui et la date (minuit local) ; négatif = en retard, None si illisible."""
    target = parse_day(date_str)
    if target is None:
        return None
    # différence de dates calendaires : pas d'effet heure d'été
    return (target - _today(today)).days

def get_days_until_label(date_str: str, today: Optional[date] = None) -> str:
    days = get_days_until(date_str, today)
    if days is None:
        return ""
    if days < 0:
        return "Overdue"
    if days == 0:
        return "Today"
    if days == 1:
        return "Tomorrow"
    if days <= 7:
        return f"{days} days"
    if days <= 30:
        return f"{math.ceil(days / 7)} weeks"
    return f"{math.ceil(days / 30)} months"

def get_upcoming_shoots_from_today(shoots: Iterable[UpcomingShoot], today: Optional[date] = None) -> List[UpcomingShoot]:
    t = _today(today)
    out: List[UpcomingShoot] = []
    for s in shoots:
        d = parse_day(s.shoot_date)
        if d is not None and d >= t and not s.completed:
            out.append(s)
    return out

def get_overdue_shoots(shoots: Iterable[UpcomingShoot], today: Optional[date] = None) -> List[UpcomingShoot]:
    t = _today(today)
    out: List[UpcomingShoot] = []
    for s in shoots:
        d = parse_day(s.shoot_date)
        if d is not None and d < t and not s.completed:
            out.append(s)
    return out


# ---------- Agenda ---------- #

def get_booking_events(invoices: Iterable[Invoice], upcoming: Iterable[UpcomingShoot]) -> List[BookingEvent]:
    """Factures ayant une date d'évènement puis réservations, dans l'ordre reçu."""
    events: List[BookingEvent] = []
    for inv in invoices:
        if not inv.event_date:
            continue
        events.append(BookingEvent(
            id=f"inv-{inv.id}",
            date=inv.event_date,
            title=inv.customer_names or "Invoice Event",
            location=inv.event_location or "",
            type="invoice",
            price=inv.full_price,
            phone=inv.phone_number,
        ))
    for s in upcoming:
        events.append(BookingEvent(
            id=f"up-{s.id}",
            date=s.shoot_date,
            title=s.client_name or "Upcoming Shoot",
            location=s.shoot_location or "",
            type="upcoming",
            shoot_type=s.shoot_type,
            price=s.package_price,
            time=s.shoot_time,
            completed=s.completed,
            phone=s.contact_number,
        ))
    return events

def _day_key(value: str) -> str:
    # AAAA-MM-JJ ; une date illisible garde sa partie avant le 'T'
    d = parse_day(value)
    return d.isoformat() if d is not None else (value or "").split("T")[0]

def get_events_by_date(events: Iterable[BookingEvent]) -> Dict[str, List[BookingEvent]]:
    out: Dict[str, List[BookingEvent]] = {}
    for ev in events:
        out.setdefault(_day_key(ev.date), []).append(ev)
    return out

def get_events_on(events_by_date: Mapping[str, List[BookingEvent]], day: Union[date, str]) -> List[BookingEvent]:
    if isinstance(day, datetime):
        day = day.date()
    key = day.isoformat() if isinstance(day, date) else _day_key(day)
    return list(events_by_date.get(key, []))
