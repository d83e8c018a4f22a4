from datetime import datetime

from shootbook.app import build_app
from shootbook.config import AppConfig
from shootbook.services.notifiers import IcsNotifier, InMemoryNotifier
from shootbook.storage.kv_store import JsonFileStore, MemoryStore

NOW = datetime(2030, 6, 1, 12, 0)


def test_build_app_defaults_to_files(tmp_path):
    app = build_app(AppConfig(data_dir=tmp_path / "data", exports_dir=tmp_path / "out"))
    assert isinstance(app.store, JsonFileStore)
    assert isinstance(app.reminders.notifier, IcsNotifier)
    assert app.reminders.notifier.path == tmp_path / "data" / "reminders.ics"

    inv = app.workflow.create_invoice({"customer_names": "Kasun", "full_price": "1000"})
    assert (tmp_path / "data" / "invoices.json").exists()
    assert build_app(AppConfig(data_dir=tmp_path / "data")).invoices.get_invoice(inv.id) is not None

def test_build_app_with_injected_backends(tmp_path):
    notifier = InMemoryNotifier()
    app = build_app(AppConfig(data_dir=tmp_path, exports_dir=tmp_path / "out"),
                    store=MemoryStore(), notifier=notifier, clock=lambda: NOW)
    app.workflow.schedule_shoot({"client_name": "A", "shoot_date": "2030-06-10"})
    assert len(notifier.scheduled) == 1
    assert not (tmp_path / "upcoming-shoots.json").exists()
