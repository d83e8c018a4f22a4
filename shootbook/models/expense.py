from __future__ import annotations
from pydantic import BaseModel, Field
from datetime import datetime
from .common import gen_id, utcnow

class Expense(BaseModel):
    id: str = Field(default_factory=gen_id)
    description: str = ""
    amount: str = ""  # saisi tel quel, converti via parse_money
    date: str = ""
    created_at: datetime = Field(default_factory=utcnow)

    class Config:
        extra = "ignore"
