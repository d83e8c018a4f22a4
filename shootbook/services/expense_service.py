from __future__ import annotations

from typing import Any, List, Mapping, Optional, Union

from shootbook.models.expense import Expense
from shootbook.services.record_service import RecordService, timestamp_sort_key

EXPENSES_KEY = "expenses"


class ExpenseService(RecordService[Expense]):
    model = Expense
    storage_key = EXPENSES_KEY
    entity_name = "expense"

    def _sort(self, records: List[Expense]) -> List[Expense]:
        return sorted(records, key=lambda e: timestamp_sort_key(e.created_at), reverse=True)

    def list_expenses(self) -> List[Expense]:
        return self._list()

    def get_expense(self, expense_id: str) -> Optional[Expense]:
        return self._get(expense_id)

    def save_expense(self, fields: Union[Expense, Mapping[str, Any]]) -> Expense:
        return self._save(fields)

    def update_expense(self, expense_id: str, updates: Mapping[str, Any]) -> Optional[Expense]:
        return self._update(expense_id, updates)

    def delete_expense(self, expense_id: str) -> bool:
        return self._delete(expense_id)
