from __future__ import annotations

import json
import logging
from typing import Any, List, Mapping, Optional, Union

from shootbook.models.invoice import Invoice
from shootbook.services.record_service import RecordService, timestamp_sort_key

logger = logging.getLogger(__name__)

INVOICES_KEY = "invoices"
COUNTER_KEY = "invoice-counter"


class InvoiceService(RecordService[Invoice]):
    model = Invoice
    storage_key = INVOICES_KEY
    entity_name = "invoice"

    def _sort(self, records: List[Invoice]) -> List[Invoice]:
        # plus récentes d'abord
        return sorted(records, key=lambda inv: timestamp_sort_key(inv.created_at), reverse=True)

    # ----------- CRUD/list -----------
    def list_invoices(self) -> List[Invoice]:
        return self._list()

    def get_invoice(self, invoice_id: str) -> Optional[Invoice]:
        return self._get(invoice_id)

    def save_invoice(self, fields: Union[Invoice, Mapping[str, Any]]) -> Invoice:
        return self._save(fields)

    def update_invoice(self, invoice_id: str, updates: Mapping[str, Any]) -> Optional[Invoice]:
        return self._update(invoice_id, updates)

    def delete_invoice(self, invoice_id: str) -> bool:
        return self._delete(invoice_id)

    # ----------- numérotation -----------
    def _read_counter(self) -> int:
        raw = self.store.get_item(COUNTER_KEY)
        if not raw:
            return 0
        try:
            return int(json.loads(raw))
        except (ValueError, TypeError):
            logger.warning("Compteur de factures illisible (%r), repart de zéro", raw)
            return 0

    def next_invoice_number(self) -> str:
        """Incrémente le compteur persistant : '0001', '0002', ..."""
        seq = self._read_counter() + 1
        self.store.set_item(COUNTER_KEY, json.dumps(seq))
        return f"{seq:04d}"
