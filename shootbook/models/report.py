from __future__ import annotations
from pydantic import BaseModel

class MonthlyStats(BaseModel):
    total_shoots: int = 0
    total_income: float = 0.0
    avg_per_shoot: float = 0.0

class InvoiceStats(BaseModel):
    total_invoices: int = 0
    total_revenue: float = 0.0
    total_advance: float = 0.0
    total_pending: float = 0.0

class TypeBreakdown(BaseModel):
    shoot_type: str
    count: int = 0
    income: float = 0.0
