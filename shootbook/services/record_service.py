from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Dict, Generic, List, Mapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from shootbook.models.common import gen_id, utcnow
from shootbook.services.formatting import parse_date
from shootbook.storage.json_repo import JsonRepository
from shootbook.storage.kv_store import KeyValueStore

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

# champs gérés par le store, jamais repris de la saisie
_GENERATED = ("id", "created_at", "updated_at")


def date_sort_key(value: Any) -> datetime:
    """Clé de tri ; les dates illisibles passent après les autres (tri décroissant)."""
    dt = parse_date(value)
    return dt if dt is not None else datetime.min

def timestamp_sort_key(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value.replace(tzinfo=None) if value.tzinfo else value
    return date_sort_key(value)


class RecordService(Generic[M]):
    """
    CRUD commun aux quatre collections (factures, shoots, réservations, dépenses).
    Les sous-classes fixent le modèle, la clé de stockage et l'ordre de tri.
    """

    model: Type[M]
    storage_key: str
    entity_name: str = "record"

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store
        self.repo: JsonRepository[M] = JsonRepository(store, self.storage_key, entity_name=self.entity_name)

    # ----------- tri ----------- #

    def _sort(self, records: List[M]) -> List[M]:
        return records

    # ----------- hydratation ----------- #

    def _hydrate(self, d: Mapping[str, Any]) -> Optional[M]:
        try:
            return self.model.model_validate(d)
        except ValidationError as e:
            # On ignore les entrées invalides pour ne pas masquer le reste
            logger.warning("%s %s ignoré: %s", self.entity_name, d.get("id"), e.errors()[:1])
            return None

    @staticmethod
    def _fields(fields: Union[BaseModel, Mapping[str, Any]]) -> Dict[str, Any]:
        if isinstance(fields, BaseModel):
            return fields.model_dump()
        return dict(fields)

    # ----------- CRUD ----------- #

    def _list(self) -> List[M]:
        out: List[M] = []
        for d in self.repo.list_all():
            rec = self._hydrate(d)
            if rec is not None:
                out.append(rec)
        return self._sort(out)

    def _get(self, obj_id: str) -> Optional[M]:
        d = self.repo.get_by_id(obj_id)
        return self._hydrate(d) if d else None

    def _save(self, fields: Union[BaseModel, Mapping[str, Any]]) -> M:
        payload = {k: v for k, v in self._fields(fields).items() if k not in _GENERATED}
        now = utcnow()
        payload["id"] = gen_id()
        payload["created_at"] = now
        if "updated_at" in self.model.model_fields:
            payload["updated_at"] = now
        rec = self.model.model_validate(payload)
        self.repo.add(rec)
        logger.info("%s %s créé", self.entity_name, rec.id)
        return rec

    def _update(self, obj_id: str, partial: Union[BaseModel, Mapping[str, Any]]) -> Optional[M]:
        existing = self._get(obj_id)
        if existing is None:
            return None
        changes = {k: v for k, v in self._fields(partial).items() if k not in _GENERATED}
        merged = {**existing.model_dump(), **changes}
        if "updated_at" in self.model.model_fields:
            merged["updated_at"] = utcnow()
        rec = self.model.model_validate(merged)
        self.repo.update(rec)
        return rec

    def _delete(self, obj_id: str) -> bool:
        deleted = self.repo.delete(obj_id)
        if deleted:
            logger.info("%s %s supprimé", self.entity_name, obj_id)
        return deleted

    def _find(self, predicate: Callable[[M], bool]) -> List[M]:
        return [r for r in self._list() if predicate(r)]
