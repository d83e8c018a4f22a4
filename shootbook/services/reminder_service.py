"""
Rappels de séances et d'évènements facturés.

Un rappel est identifié par sa clé ("shoot_<id>" / "invoice_<id>") ; le handle
rendu par le Notifier est conservé dans une table annexe (ReminderHandleTable)
pour pouvoir l'annuler plus tard. Une date illisible ou un déclenchement déjà
passé ne programme rien et ne lève rien.
"""
from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Callable, Iterable, List, Optional

from shootbook.models.invoice import Invoice
from shootbook.models.settings import ReminderSettings, timing_description, timing_offset
from shootbook.models.shoot import UpcomingShoot
from shootbook.services.formatting import parse_date
from shootbook.services.notifiers import Notifier
from shootbook.services.settings_service import SettingsService
from shootbook.storage.kv_store import KeyValueStore

logger = logging.getLogger(__name__)

HANDLE_PREFIX = "reminder-handle:"
INVOICE_REMINDER_HOUR = 8

_TIME_12H = re.compile(r"(\d{1,2}):(\d{2})\s*(AM|PM)", re.IGNORECASE)


def reminder_key(kind: str, record_id: str) -> str:
    return f"{kind}_{record_id}"


# ---------- Calcul des déclenchements ---------- #

def parse_time(value: str) -> Optional[tuple]:
    """'7:30 PM' -> (19, 30) ; 12 AM -> 0 h, 12 PM -> 12 h. Sinon None."""
    if not value:
        return None
    m = _TIME_12H.search(value)
    if not m:
        return None
    hours, minutes = int(m.group(1)), int(m.group(2))
    period = m.group(3).upper()
    if period == "PM" and hours != 12:
        hours += 12
    if period == "AM" and hours == 12:
        hours = 0
    if hours > 23 or minutes > 59:
        return None
    return hours, minutes

def compute_shoot_trigger(shoot_date: str, shoot_time: str, timing: str) -> Optional[datetime]:
    target = parse_date(shoot_date)
    if target is None:
        return None
    t = parse_time(shoot_time)
    if t:
        target = target.replace(hour=t[0], minute=t[1], second=0, microsecond=0)
    return target - timing_offset(timing)

def compute_invoice_trigger(event_date: str, timing: str) -> Optional[datetime]:
    target = parse_date(event_date)
    if target is None:
        return None
    target = target.replace(hour=INVOICE_REMINDER_HOUR, minute=0, second=0, microsecond=0)
    return target - timing_offset(timing)


# ---------- Table annexe clé -> handle ---------- #

class ReminderHandleTable:
    """Association explicite clé de rappel -> handle du Notifier, une entrée du store par clé."""

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    def get(self, key: str) -> Optional[str]:
        return self.store.get_item(HANDLE_PREFIX + key)

    def set(self, key: str, handle: str) -> None:
        self.store.set_item(HANDLE_PREFIX + key, handle)

    def remove(self, key: str) -> None:
        self.store.remove_item(HANDLE_PREFIX + key)

    def keys(self) -> List[str]:
        return [k[len(HANDLE_PREFIX):] for k in self.store.keys() if k.startswith(HANDLE_PREFIX)]

    def clear(self) -> None:
        for key in self.keys():
            self.remove(key)


# ---------- Service ---------- #

class ReminderService:
    def __init__(
        self,
        store: KeyValueStore,
        notifier: Notifier,
        settings: SettingsService,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.notifier = notifier
        self.settings = settings
        self.handles = ReminderHandleTable(store)
        self.clock = clock

    @property
    def current(self) -> ReminderSettings:
        return self.settings.reminders

    def ensure_permission(self) -> bool:
        return bool(self.notifier.request_permission())

    def _schedule(self, key: str, trigger: Optional[datetime], title: str, body: str, data: dict) -> Optional[str]:
        if trigger is None:
            logger.debug("Rappel %s ignoré: date illisible", key)
            return None
        if trigger <= self.clock():
            logger.debug("Rappel %s ignoré: déclenchement passé (%s)", key, trigger)
            return None
        self.cancel_reminder(key)
        handle = self.notifier.schedule(title, body, trigger, data)
        self.handles.set(key, handle)
        logger.debug("Rappel %s programmé pour %s", key, trigger)
        return handle

    def schedule_shoot_reminder(self, shoot: UpcomingShoot) -> Optional[str]:
        s = self.current
        if not s.shoot_reminders:
            logger.debug("Rappels de séances désactivés")
            return None
        trigger = compute_shoot_trigger(shoot.shoot_date, shoot.shoot_time, s.reminder_timing)
        title = f"{shoot.shoot_type} Shoot - {timing_description(s.reminder_timing)}"
        body = shoot.client_name + (f" at {shoot.shoot_location}" if shoot.shoot_location else "")
        return self._schedule(
            reminder_key("shoot", shoot.id), trigger, title, body,
            {"type": "shoot", "shoot_id": shoot.id},
        )

    def schedule_invoice_reminder(self, invoice: Invoice) -> Optional[str]:
        s = self.current
        if not s.invoice_reminders:
            logger.debug("Rappels de factures désactivés")
            return None
        trigger = compute_invoice_trigger(invoice.event_date, s.reminder_timing)
        title = f"Invoice #{invoice.invoice_number} Event - {timing_description(s.reminder_timing)}"
        body = invoice.customer_names + (f" at {invoice.event_location}" if invoice.event_location else "")
        return self._schedule(
            reminder_key("invoice", invoice.id), trigger, title, body,
            {"type": "invoice", "invoice_id": invoice.id},
        )

    def cancel_reminder(self, key: str) -> None:
        """Sans handle enregistré : déjà annulé ou déjà déclenché, rien à faire."""
        handle = self.handles.get(key)
        if not handle:
            return
        self.notifier.cancel(handle)
        self.handles.remove(key)

    def _try_schedule(self, key: str, fn: Callable[[], Optional[str]]) -> bool:
        try:
            return fn() is not None
        except Exception as e:  # un enregistrement en échec n'arrête pas les autres
            logger.warning("Rappel %s non reprogrammé: %s", key, e)
            return False

    def reschedule_all(self, upcoming: Iterable[UpcomingShoot], invoices: Iterable[Invoice]) -> int:
        """Reconstruction complète : tout est annulé puis reprogrammé selon les réglages courants."""
        self.notifier.cancel_all()
        self.handles.clear()
        s = self.current
        count = 0
        if s.shoot_reminders:
            for shoot in upcoming:
                if shoot.completed:
                    continue
                if self._try_schedule(reminder_key("shoot", shoot.id), lambda: self.schedule_shoot_reminder(shoot)):
                    count += 1
        if s.invoice_reminders:
            for inv in invoices:
                if self._try_schedule(reminder_key("invoice", inv.id), lambda: self.schedule_invoice_reminder(inv)):
                    count += 1
        logger.info("Rappels reprogrammés: %d", count)
        return count
