from datetime import datetime

from shootbook.models.invoice import Invoice
from shootbook.models.settings import ReminderSettings
from shootbook.models.shoot import UpcomingShoot
from shootbook.services.reminder_service import (
    HANDLE_PREFIX,
    compute_invoice_trigger,
    compute_shoot_trigger,
    parse_time,
    reminder_key,
)


def test_parse_time():
    assert parse_time("7:30 PM") == (19, 30)
    assert parse_time("12:00 AM") == (0, 0)
    assert parse_time("12:15 pm") == (12, 15)
    assert parse_time("") is None
    assert parse_time("evening") is None

def test_triggers():
    assert compute_shoot_trigger("2030-06-10", "7:30 PM", "1d") == datetime(2030, 6, 9, 19, 30)
    assert compute_shoot_trigger("10/06/2030", "", "3h") == datetime(2030, 6, 10, 6, 0)
    assert compute_shoot_trigger("??", "7:30 PM", "1d") is None
    assert compute_invoice_trigger("15/06/2030", "2d") == datetime(2030, 6, 13, 8, 0)

def test_schedule_shoot_reminder(reminders, notifier, store):
    shoot = UpcomingShoot(id="s1", client_name="Nimali", shoot_type="Bridal",
                          shoot_date="2030-06-10", shoot_time="7:30 PM", shoot_location="Kandy")
    handle = reminders.schedule_shoot_reminder(shoot)
    assert handle is not None
    n = notifier.scheduled[handle]
    assert n.title == "Bridal Shoot - 1 day before"
    assert n.body == "Nimali at Kandy"
    assert n.trigger_at == datetime(2030, 6, 9, 19, 30)
    assert n.data == {"type": "shoot", "shoot_id": "s1"}
    assert store.get_item(HANDLE_PREFIX + "shoot_s1") == handle

def test_rescheduling_replaces_previous(reminders, notifier):
    shoot = UpcomingShoot(id="s1", shoot_date="2030-06-10")
    reminders.schedule_shoot_reminder(shoot)
    reminders.schedule_shoot_reminder(shoot.model_copy(update={"shoot_date": "2030-06-20"}))
    assert len(notifier.pending()) == 1
    assert notifier.pending()[0].trigger_at == datetime(2030, 6, 19)

def test_past_trigger_schedules_nothing(reminders, notifier, store):
    shoot = UpcomingShoot(id="s2", shoot_date="2030-06-01")
    assert reminders.schedule_shoot_reminder(shoot) is None
    assert notifier.scheduled == {}
    assert store.get_item(HANDLE_PREFIX + "shoot_s2") is None

def test_unparseable_date_schedules_nothing(reminders, notifier):
    assert reminders.schedule_invoice_reminder(Invoice(id="i1", event_date="next week")) is None
    assert notifier.scheduled == {}

def test_invoice_reminder_title(reminders, notifier):
    inv = Invoice(id="i1", invoice_number="0007", customer_names="Kasun", event_date="2030-07-01")
    handle = reminders.schedule_invoice_reminder(inv)
    n = notifier.scheduled[handle]
    assert n.title == "Invoice #0007 Event - 1 day before"
    assert n.body == "Kasun"
    assert n.trigger_at == datetime(2030, 6, 30, 8, 0)

def test_cancel_is_idempotent(reminders, notifier):
    reminders.schedule_shoot_reminder(UpcomingShoot(id="s1", shoot_date="2030-06-10"))
    key = reminder_key("shoot", "s1")
    reminders.cancel_reminder(key)
    reminders.cancel_reminder(key)
    reminders.cancel_reminder("shoot_unknown")
    assert notifier.scheduled == {}
    assert reminders.handles.keys() == []

def test_disabled_flags(reminders, settings, notifier):
    settings.save_reminder_settings(ReminderSettings(shoot_reminders=False, invoice_reminders=False))
    assert reminders.schedule_shoot_reminder(UpcomingShoot(id="s1", shoot_date="2030-06-10")) is None
    assert reminders.schedule_invoice_reminder(Invoice(id="i1", event_date="2030-06-10")) is None
    assert notifier.scheduled == {}

def test_reschedule_all(reminders, settings, notifier):
    upcoming = [
        UpcomingShoot(id="a", shoot_date="2030-06-10"),
        UpcomingShoot(id="b", shoot_date="2030-06-11", completed=True),
        UpcomingShoot(id="c", shoot_date="2020-01-01"),
    ]
    invoices = [Invoice(id="i", event_date="2030-06-15")]
    reminders.schedule_shoot_reminder(UpcomingShoot(id="stale", shoot_date="2030-08-01"))

    assert reminders.reschedule_all(upcoming, invoices) == 2
    assert sorted(reminders.handles.keys()) == ["invoice_i", "shoot_a"]
    assert len(notifier.scheduled) == 2

    settings.save_reminder_settings(ReminderSettings(invoice_reminders=False, reminder_timing="2d"))
    assert reminders.reschedule_all(upcoming, invoices) == 1
    assert notifier.pending()[0].trigger_at == datetime(2030, 6, 8)

def test_reschedule_all_skips_failing_record(reminders, notifier, monkeypatch):
    real_schedule = notifier.schedule
    def flaky(title, body, trigger_at, data):
        if data.get("shoot_id") == "bad":
            raise RuntimeError("platform down")
        return real_schedule(title, body, trigger_at, data)
    monkeypatch.setattr(notifier, "schedule", flaky)

    upcoming = [UpcomingShoot(id="bad", shoot_date="2030-06-10"), UpcomingShoot(id="ok", shoot_date="2030-06-11")]
    invoices = [Invoice(id="i", event_date="2030-06-15")]
    assert reminders.reschedule_all(upcoming, invoices) == 2
    assert sorted(reminders.handles.keys()) == ["invoice_i", "shoot_ok"]
