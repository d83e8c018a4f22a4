from __future__ import annotations

from typing import Any, List, Mapping, Optional, Union

from shootbook.models.shoot import ShootEntry, UpcomingShoot
from shootbook.services.formatting import parse_date
from shootbook.services.record_service import RecordService, date_sort_key

SHOOTS_KEY = "shoots"
UPCOMING_KEY = "upcoming-shoots"


class ShootService(RecordService[ShootEntry]):
    """Journal des séances réalisées, de la plus récente à la plus ancienne."""
    model = ShootEntry
    storage_key = SHOOTS_KEY
    entity_name = "shoot"

    def _sort(self, records: List[ShootEntry]) -> List[ShootEntry]:
        return sorted(records, key=lambda s: date_sort_key(s.shoot_date), reverse=True)

    def list_shoots(self) -> List[ShootEntry]:
        return self._list()

    def get_shoot(self, shoot_id: str) -> Optional[ShootEntry]:
        return self._get(shoot_id)

    def save_shoot(self, fields: Union[ShootEntry, Mapping[str, Any]]) -> ShootEntry:
        return self._save(fields)

    def update_shoot(self, shoot_id: str, updates: Mapping[str, Any]) -> Optional[ShootEntry]:
        return self._update(shoot_id, updates)

    def delete_shoot(self, shoot_id: str) -> bool:
        return self._delete(shoot_id)


class UpcomingShootService(RecordService[UpcomingShoot]):
    """Réservations, de la plus proche à la plus lointaine."""
    model = UpcomingShoot
    storage_key = UPCOMING_KEY
    entity_name = "upcoming shoot"

    def _sort(self, records: List[UpcomingShoot]) -> List[UpcomingShoot]:
        # dates illisibles en fin de liste
        return sorted(records, key=lambda s: (parse_date(s.shoot_date) is None, date_sort_key(s.shoot_date)))

    def list_upcoming(self) -> List[UpcomingShoot]:
        return self._list()

    def get_upcoming(self, shoot_id: str) -> Optional[UpcomingShoot]:
        return self._get(shoot_id)

    def save_upcoming(self, fields: Union[UpcomingShoot, Mapping[str, Any]]) -> UpcomingShoot:
        return self._save(fields)

    def update_upcoming(self, shoot_id: str, updates: Mapping[str, Any]) -> Optional[UpcomingShoot]:
        return self._update(shoot_id, updates)

    def delete_upcoming(self, shoot_id: str) -> bool:
        return self._delete(shoot_id)

    def list_pending(self) -> List[UpcomingShoot]:
        return self._find(lambda s: not s.completed)

    def list_completed(self) -> List[UpcomingShoot]:
        return self._find(lambda s: s.completed)
