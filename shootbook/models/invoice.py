from __future__ import annotations
from pydantic import BaseModel, Field
from typing import List
from .common import TimeStamped, gen_id
from shootbook.services.formatting import parse_money

PHONE_SEPARATOR = " / "

class InvoiceItem(BaseModel):
    id: str = Field(default_factory=gen_id)
    description: str = ""
    quantity: str = ""  # texte affiché tel quel ("1", "100", "---")

class Invoice(TimeStamped):
    id: str = Field(default_factory=gen_id)
    invoice_number: str = ""
    invoice_date: str = ""
    customer_names: str = ""
    event_date: str = ""
    event_location: str = ""
    phone_number: str = ""

    items: List[InvoiceItem] = Field(default_factory=list)
    full_price: str = ""
    advance_payment: str = ""

    class Config:
        extra = "ignore"

    # helpers
    def total(self) -> float:
        return parse_money(self.full_price)

    def advance(self) -> float:
        return parse_money(self.advance_payment)

    def balance(self) -> float:
        return self.total() - self.advance()

    def phone_numbers(self) -> List[str]:
        return split_phone_numbers(self.phone_number)


def split_phone_numbers(value: str) -> List[str]:
    if not value:
        return []
    return [p.strip() for p in value.split(PHONE_SEPARATOR.strip()) if p.strip()]

def join_phone_numbers(numbers: List[str]) -> str:
    return PHONE_SEPARATOR.join(n.strip() for n in numbers if n and n.strip())


DEFAULT_ITEMS = [
    ("Wedding Day Photoshoot", "1"),
    ("Function Coverage", "1"),
    ("16x24 Framed Enlargement", "2"),
    ("Thank card", "100"),
    ("12x30 Magazine Album", "1"),
    ("Pen Drive", "---"),
]

def create_default_items() -> List[InvoiceItem]:
    return [InvoiceItem(description=d, quantity=q) for d, q in DEFAULT_ITEMS]
