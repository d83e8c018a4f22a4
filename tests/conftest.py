from datetime import datetime

import pytest

from shootbook.services.expense_service import ExpenseService
from shootbook.services.invoice_service import InvoiceService
from shootbook.services.notifiers import InMemoryNotifier
from shootbook.services.reminder_service import ReminderService
from shootbook.services.settings_service import SettingsService
from shootbook.services.shoot_service import ShootService, UpcomingShootService
from shootbook.services.workflow_service import WorkflowService
from shootbook.storage.kv_store import MemoryStore

NOW = datetime(2030, 6, 1, 12, 0)


@pytest.fixture
def store():
    return MemoryStore()

@pytest.fixture
def notifier():
    return InMemoryNotifier()

@pytest.fixture
def clock():
    return lambda: NOW

@pytest.fixture
def settings(store):
    return SettingsService(store)

@pytest.fixture
def reminders(store, notifier, settings, clock):
    return ReminderService(store, notifier, settings, clock=clock)

@pytest.fixture
def workflow(store, reminders, settings):
    return WorkflowService(
        InvoiceService(store),
        ShootService(store),
        UpcomingShootService(store),
        ExpenseService(store),
        reminders,
        settings,
    )
