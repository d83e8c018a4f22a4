from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, List, Mapping, Optional, Tuple, TypeVar, Union

from shootbook.errors import NotificationPermissionError
from shootbook.models.expense import Expense
from shootbook.models.invoice import Invoice
from shootbook.models.report import InvoiceStats, MonthlyStats
from shootbook.models.settings import ReminderSettings
from shootbook.models.shoot import ShootEntry, UpcomingShoot
from shootbook.services import queries
from shootbook.services.document_service import generate_invoice_html, generate_monthly_report_html
from shootbook.services.expense_service import ExpenseService
from shootbook.services.invoice_service import InvoiceService
from shootbook.services.reminder_service import ReminderService, reminder_key
from shootbook.services.settings_service import SettingsService
from shootbook.services.shoot_service import ShootService, UpcomingShootService

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class MonthlySummary:
    year: int
    month: int
    shoots: List[ShootEntry] = field(default_factory=list)
    stats: MonthlyStats = field(default_factory=MonthlyStats)
    invoices: List[Invoice] = field(default_factory=list)
    invoice_stats: InvoiceStats = field(default_factory=InvoiceStats)
    expenses: List[Expense] = field(default_factory=list)
    total_expenses: float = 0.0
    net_profit: float = 0.0


class WorkflowService:
    """
    Enchaîne une action utilisateur sur les différents services :
    enregistrement -> rappel, réservation terminée -> séance au journal, etc.
    Un rappel qui échoue n'empêche jamais l'enregistrement.
    """

    def __init__(
        self,
        invoices: InvoiceService,
        shoots: ShootService,
        upcoming: UpcomingShootService,
        expenses: ExpenseService,
        reminders: ReminderService,
        settings: SettingsService,
    ):
        self.invoices = invoices
        self.shoots = shoots
        self.upcoming = upcoming
        self.expenses = expenses
        self.reminders = reminders
        self.settings = settings

    def _quietly(self, what: str, fn: Callable[[], T]) -> Optional[T]:
        try:
            return fn()
        except Exception as e:  # rappel = fonction secondaire, l'enregistrement prime
            logger.warning("Rappel non traité (%s): %s", what, e)
            return None

    # l'ancien rappel est toujours retiré avant de reprogrammer
    def _refresh_invoice_reminder(self, inv: Invoice) -> Optional[str]:
        self.reminders.cancel_reminder(reminder_key("invoice", inv.id))
        return self.reminders.schedule_invoice_reminder(inv)

    def _refresh_shoot_reminder(self, shoot: UpcomingShoot) -> Optional[str]:
        self.reminders.cancel_reminder(reminder_key("shoot", shoot.id))
        if shoot.completed:
            return None
        return self.reminders.schedule_shoot_reminder(shoot)

    # ----------- Factures -----------
    def create_invoice(self, fields: Union[Invoice, Mapping[str, Any]]) -> Invoice:
        data = fields.model_dump() if isinstance(fields, Invoice) else dict(fields)
        if not data.get("invoice_number"):
            data["invoice_number"] = self.invoices.next_invoice_number()
        inv = self.invoices.save_invoice(data)
        self._quietly(f"invoice {inv.id}", lambda: self.reminders.schedule_invoice_reminder(inv))
        return inv

    def update_invoice(self, invoice_id: str, updates: Mapping[str, Any]) -> Optional[Invoice]:
        inv = self.invoices.update_invoice(invoice_id, updates)
        if inv is not None:
            self._quietly(f"invoice {inv.id}", lambda: self._refresh_invoice_reminder(inv))
        return inv

    def delete_invoice(self, invoice_id: str) -> bool:
        deleted = self.invoices.delete_invoice(invoice_id)
        if deleted:
            self._quietly(f"invoice {invoice_id}", lambda: self.reminders.cancel_reminder(reminder_key("invoice", invoice_id)))
        return deleted

    # ----------- Réservations -----------
    def schedule_shoot(self, fields: Union[UpcomingShoot, Mapping[str, Any]]) -> UpcomingShoot:
        data = fields.model_dump() if isinstance(fields, UpcomingShoot) else dict(fields)
        data["completed"] = False
        shoot = self.upcoming.save_upcoming(data)
        self._quietly(f"shoot {shoot.id}", lambda: self.reminders.schedule_shoot_reminder(shoot))
        return shoot

    def update_upcoming(self, shoot_id: str, updates: Mapping[str, Any]) -> Optional[UpcomingShoot]:
        shoot = self.upcoming.update_upcoming(shoot_id, updates)
        if shoot is not None:
            self._quietly(f"shoot {shoot.id}", lambda: self._refresh_shoot_reminder(shoot))
        return shoot

    def toggle_complete(self, shoot_id: str) -> Tuple[Optional[UpcomingShoot], Optional[ShootEntry]]:
        """
        Terminée : annule le rappel et copie la réservation dans le journal des séances.
        Ré-ouverte : reprogramme le rappel (la séance déjà copiée reste au journal).
        """
        current = self.upcoming.get_upcoming(shoot_id)
        if current is None:
            return None, None
        marking_complete = not current.completed
        shoot = self.upcoming.update_upcoming(shoot_id, {"completed": marking_complete})
        if shoot is None:
            return None, None

        if not marking_complete:
            self._quietly(f"shoot {shoot.id}", lambda: self.reminders.schedule_shoot_reminder(shoot))
            return shoot, None

        self._quietly(f"shoot {shoot.id}", lambda: self.reminders.cancel_reminder(reminder_key("shoot", shoot.id)))
        entry = self.shoots.save_shoot(shoot.to_shoot_entry())
        logger.info("Réservation %s terminée -> séance %s", shoot.id, entry.id)
        return shoot, entry

    def delete_upcoming(self, shoot_id: str) -> bool:
        deleted = self.upcoming.delete_upcoming(shoot_id)
        if deleted:
            self._quietly(f"shoot {shoot_id}", lambda: self.reminders.cancel_reminder(reminder_key("shoot", shoot_id)))
        return deleted

    # ----------- Réglages des rappels -----------
    def change_reminder_settings(self, new: ReminderSettings) -> ReminderSettings:
        """
        Activer un type de rappel demande la permission ; refus -> NotificationPermissionError
        et les anciens réglages restent en place. Sinon sauvegarde puis reconstruction complète ;
        un échec de la reconstruction est journalisé, les réglages restent enregistrés.
        """
        old = self.settings.reminders
        turning_on = (new.shoot_reminders and not old.shoot_reminders) or (
            new.invoice_reminders and not old.invoice_reminders
        )
        if turning_on and not self.reminders.ensure_permission():
            raise NotificationPermissionError(
                "Notifications are disabled. Enable them in the system settings to receive reminders."
            )
        self.settings.save_reminder_settings(new)
        self._quietly("resync", self.resync_reminders)
        return new

    def resync_reminders(self) -> int:
        return self.reminders.reschedule_all(self.upcoming.list_upcoming(), self.invoices.list_invoices())

    # ----------- Synthèse / documents -----------
    def monthly_summary(self, year: int, month: int) -> MonthlySummary:
        shoots = queries.get_shoots_by_month(self.shoots.list_shoots(), year, month)
        invoices = queries.get_invoices_by_month(self.invoices.list_invoices(), year, month)
        expenses = queries.get_expenses_by_month(self.expenses.list_expenses(), year, month)
        stats = queries.get_monthly_stats(shoots)
        inv_stats = queries.get_invoice_stats(invoices)
        total_expenses = queries.get_total_expenses(expenses)
        return MonthlySummary(
            year=year,
            month=month,
            shoots=shoots,
            stats=stats,
            invoices=invoices,
            invoice_stats=inv_stats,
            expenses=expenses,
            total_expenses=total_expenses,
            net_profit=queries.get_net_profit(stats, inv_stats, total_expenses),
        )

    def render_monthly_report(self, year: int, month: int) -> str:
        s = self.monthly_summary(year, month)
        return generate_monthly_report_html(
            s.shoots, s.stats, year, month, self.settings.branding, s.invoice_stats, s.total_expenses,
        )

    def render_invoice(self, invoice_id: str) -> Optional[str]:
        inv = self.invoices.get_invoice(invoice_id)
        if inv is None:
            return None
        return generate_invoice_html(inv, self.settings.branding, self.settings.invoice_colors, self.settings.invoice_style)
