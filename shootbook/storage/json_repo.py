from __future__ import annotations

import json
import logging
from datetime import date, datetime
from typing import Any, Callable, Dict, Generic, Iterable, List, Mapping, Optional, TypeVar, Union

from pydantic import BaseModel

from shootbook.models.common import gen_id
from shootbook.storage.kv_store import KeyValueStore

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Union[BaseModel, Mapping[str, Any]])


def _json_default(o: Any) -> Any:
    if isinstance(o, (date, datetime)):
        return o.isoformat()
    return str(o)


class JsonRepository(Generic[T]):
    """
    Collection JSON (tableau) stockée sous une seule clé du KeyValueStore.
    Chaque mutation relit toute la collection puis la réécrit entièrement :
    le dernier écrivain gagne, un seul écrivain est supposé.
    """

    def __init__(self, store: KeyValueStore, storage_key: str, entity_name: str = "entity", key: str = "id") -> None:
        self.store = store
        self.storage_key = storage_key
        self.entity_name = entity_name
        self.key = key

    # ---------------- I/O bas niveau ---------------- #

    def _read_raw(self) -> List[Dict[str, Any]]:
        raw = self.store.get_item(self.storage_key)
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Collection '%s' illisible, traitée comme vide", self.storage_key)
            return []
        return [d for d in data if isinstance(d, dict)] if isinstance(data, list) else []

    def _write_raw(self, data: Iterable[Mapping[str, Any]]) -> None:
        self.store.set_item(self.storage_key, json.dumps(list(data), ensure_ascii=False, default=_json_default))

    # ---------------- Helpers ---------------- #

    @staticmethod
    def _to_dict(item: T) -> Dict[str, Any]:
        if isinstance(item, BaseModel):
            return item.model_dump(mode="json")
        if isinstance(item, Mapping):
            return dict(item)
        return dict(item.__dict__)  # type: ignore[arg-type]

    # ---------------- CRUD ---------------- #

    def list_all(self) -> List[Dict[str, Any]]:
        return self._read_raw()

    def get_by_id(self, obj_id: Any) -> Optional[Dict[str, Any]]:
        k = self.key
        for it in self._read_raw():
            if str(it.get(k)) == str(obj_id):
                return it
        return None

    def add(self, item: T) -> Dict[str, Any]:
        record = self._to_dict(item)
        k = self.key
        if not record.get(k):
            record[k] = gen_id()
        data = self._read_raw()
        if any(str(d.get(k)) == str(record[k]) for d in data):
            raise ValueError(f"{self.entity_name} with {k}={record[k]} already exists")
        data.append(record)
        self._write_raw(data)
        return record

    def update(self, item: T) -> Dict[str, Any]:
        record = self._to_dict(item)
        k = self.key
        obj_id = record.get(k)
        if not obj_id:
            raise ValueError(f"Cannot update {self.entity_name} without '{k}'")
        data = self._read_raw()
        for idx, existing in enumerate(data):
            if str(existing.get(k)) == str(obj_id):
                merged = {**existing, **record}
                data[idx] = merged
                self._write_raw(data)
                return merged
        raise KeyError(f"{self.entity_name} with {k}={obj_id} not found")

    def delete(self, obj_id: Any) -> bool:
        k = self.key
        data = self._read_raw()
        new_data = [d for d in data if str(d.get(k)) != str(obj_id)]
        changed = len(new_data) != len(data)
        if changed:
            self._write_raw(new_data)
        return changed

    # ---------------- Recherches ---------------- #

    def find_one(self, predicate: Callable[[Dict[str, Any]], bool]) -> Optional[Dict[str, Any]]:
        for r in self._read_raw():
            if predicate(r):
                return r
        return None
