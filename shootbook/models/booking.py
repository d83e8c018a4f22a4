from __future__ import annotations
from pydantic import BaseModel
from typing import Literal, Optional

BookingKind = Literal["invoice", "upcoming"]


class BookingEvent(BaseModel):
    """Entrée de l'agenda : évènement facturé ou réservation, vue en lecture seule."""
    id: str  # "inv-<id>" / "up-<id>"
    date: str
    title: str
    location: str = ""
    type: BookingKind
    shoot_type: Optional[str] = None
    price: str = ""
    time: str = ""
    completed: bool = False
    phone: str = ""
