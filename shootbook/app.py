from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from shootbook.config import AppConfig, configure_logging
from shootbook.models.invoice import Invoice
from shootbook.services.expense_service import ExpenseService
from shootbook.services.export_service import DocumentExporter, invoice_filename, report_filename
from shootbook.services.invoice_service import InvoiceService
from shootbook.services.notifiers import IcsNotifier, Notifier
from shootbook.services.reminder_service import ReminderService
from shootbook.services.settings_service import SettingsService
from shootbook.services.shoot_service import ShootService, UpcomingShootService
from shootbook.services.workflow_service import WorkflowService
from shootbook.storage.kv_store import JsonFileStore, KeyValueStore

logger = logging.getLogger(__name__)


@dataclass
class App:
    """Tous les services câblés sur un même store."""
    config: AppConfig
    store: KeyValueStore
    settings: SettingsService
    invoices: InvoiceService
    shoots: ShootService
    upcoming: UpcomingShootService
    expenses: ExpenseService
    reminders: ReminderService
    workflow: WorkflowService
    exporter: DocumentExporter

    def export_invoice_pdf(self, invoice_id: str, out_dir: Optional[Path] = None) -> Optional[Path]:
        html = self.workflow.render_invoice(invoice_id)
        inv: Optional[Invoice] = self.invoices.get_invoice(invoice_id)
        if html is None or inv is None:
            return None
        path = self.exporter.export_pdf(html, invoice_filename(inv), out_dir)
        logger.info("Facture exportée: %s", path)
        return path

    def export_monthly_report_pdf(self, year: int, month: int, out_dir: Optional[Path] = None) -> Path:
        html = self.workflow.render_monthly_report(year, month)
        path = self.exporter.export_pdf(html, report_filename(year, month), out_dir)
        logger.info("Rapport exporté: %s", path)
        return path


def build_app(
    config: Optional[AppConfig] = None,
    *,
    store: Optional[KeyValueStore] = None,
    notifier: Optional[Notifier] = None,
    clock: Callable[[], datetime] = datetime.now,
) -> App:
    config = config or AppConfig.from_env()
    configure_logging(config.log_level)

    store = store if store is not None else JsonFileStore(config.data_dir)
    notifier = notifier if notifier is not None else IcsNotifier(config.calendar_path)

    settings = SettingsService(store)
    invoices = InvoiceService(store)
    shoots = ShootService(store)
    upcoming = UpcomingShootService(store)
    expenses = ExpenseService(store)
    reminders = ReminderService(store, notifier, settings, clock=clock)
    workflow = WorkflowService(invoices, shoots, upcoming, expenses, reminders, settings)
    exporter = DocumentExporter(config.exports_dir, config.wkhtmltopdf_path)

    logger.debug("Données: %s | exports: %s", config.data_dir, config.exports_dir)
    return App(
        config=config,
        store=store,
        settings=settings,
        invoices=invoices,
        shoots=shoots,
        upcoming=upcoming,
        expenses=expenses,
        reminders=reminders,
        workflow=workflow,
        exporter=exporter,
    )
