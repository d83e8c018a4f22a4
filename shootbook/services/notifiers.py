from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Union

from shootbook.errors import StorageError

logger = logging.getLogger(__name__)


@dataclass
class ScheduledNotification:
    handle: str
    title: str
    body: str
    trigger_at: datetime
    data: Dict[str, Any] = field(default_factory=dict)


class Notifier(Protocol):
    """API de notifications de la plateforme : (titre, corps, date, données) -> handle opaque."""

    def request_permission(self) -> bool: ...

    def schedule(self, title: str, body: str, trigger_at: datetime, data: Dict[str, Any]) -> str: ...

    def cancel(self, handle: str) -> None: ...

    def cancel_all(self) -> None: ...


class InMemoryNotifier:
    """Notifications gardées en mémoire (tests, exécution sans plateforme)."""

    def __init__(self, permission_granted: bool = True) -> None:
        self.permission_granted = permission_granted
        self.scheduled: Dict[str, ScheduledNotification] = {}

    def request_permission(self) -> bool:
        return self.permission_granted

    def schedule(self, title: str, body: str, trigger_at: datetime, data: Dict[str, Any]) -> str:
        handle = uuid.uuid4().hex
        self.scheduled[handle] = ScheduledNotification(handle, title, body, trigger_at, dict(data))
        return handle

    def cancel(self, handle: str) -> None:
        self.scheduled.pop(handle, None)

    def cancel_all(self) -> None:
        self.scheduled.clear()

    def pending(self) -> List[ScheduledNotification]:
        return sorted(self.scheduled.values(), key=lambda n: n.trigger_at)


class IcsNotifier:
    """
    Rappels exportés dans un fichier iCalendar (un évènement + alarme par rappel),
    importable dans n'importe quel agenda. Le fichier est réécrit à chaque changement.
    """

    UID_SUFFIX = "@shootbook"

    def __init__(self, path: Union[str, Path], duration: timedelta = timedelta(minutes=15)) -> None:
        self.path = Path(path)
        self.duration = duration
        self.scheduled: Dict[str, ScheduledNotification] = {}
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._load()

    def _load(self) -> None:
        if not self.path.exists():
            return
        from ics import Calendar
        try:
            cal = Calendar(self.path.read_text(encoding="utf-8"))
        except Exception as e:  # ics lève des erreurs de parsing variées
            logger.warning("Calendrier %s illisible (%s), repart à vide", self.path, e)
            return
        for ev in cal.events:
            handle = (ev.uid or "").replace(self.UID_SUFFIX, "")
            if not handle or ev.begin is None:
                continue
            trigger = ev.begin.to("local").datetime.replace(tzinfo=None)
            self.scheduled[handle] = ScheduledNotification(handle, ev.name or "", ev.description or "", trigger)

    def _write(self) -> None:
        from ics import Calendar, Event
        from ics.alarm import DisplayAlarm

        cal = Calendar()
        for n in self.scheduled.values():
            ev = Event(
                name=n.title,
                begin=n.trigger_at.astimezone(),  # heure locale -> aware
                duration=self.duration,
                description=n.body,
                uid=f"{n.handle}{self.UID_SUFFIX}",
            )
            ev.alarms.append(DisplayAlarm(trigger=n.trigger_at.astimezone(), display_text=n.title))
            cal.events.add(ev)
        try:
            self.path.write_text(cal.serialize(), encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Cannot write calendar {self.path}: {e}") from e

    def request_permission(self) -> bool:
        return True

    def schedule(self, title: str, body: str, trigger_at: datetime, data: Dict[str, Any]) -> str:
        handle = uuid.uuid4().hex
        self.scheduled[handle] = ScheduledNotification(handle, title, body, trigger_at, dict(data))
        self._write()
        return handle

    def cancel(self, handle: str) -> None:
        if self.scheduled.pop(handle, None) is not None:
            self._write()

    def cancel_all(self) -> None:
        self.scheduled.clear()
        self._write()

    def get(self, handle: str) -> Optional[ScheduledNotification]:
        return self.scheduled.get(handle)
