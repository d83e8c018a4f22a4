from __future__ import annotations
from pydantic import Field, model_validator
from typing import Any, Literal, get_args
from .common import TimeStamped, gen_id

ShootType = Literal["Bridal", "Wedding", "Birthday", "Pre-shoot", "Events", "Casual", "Commercial"]
SHOOT_TYPES = list(get_args(ShootType))

_OPTIONAL_TEXT = ("shoot_time", "salon_name", "model_name", "advance_paid", "phone_number", "notes")


class ShootEntry(TimeStamped):
    """Séance réalisée (journal des shoots)."""
    id: str = Field(default_factory=gen_id)
    client_name: str = ""
    shoot_date: str = ""
    shoot_time: str = ""
    shoot_location: str = ""
    salon_name: str = ""
    model_name: str = ""
    shoot_type: ShootType = "Wedding"
    price: str = ""
    advance_paid: str = ""
    phone_number: str = ""
    notes: str = ""

    class Config:
        extra = "ignore"

    @model_validator(mode="before")
    @classmethod
    def _legacy_defaults(cls, data: Any) -> Any:
        # anciennes lignes : pas de client_name (seul model_name), champs à null
        if not isinstance(data, dict):
            return data
        d = dict(data)
        for k in _OPTIONAL_TEXT:
            if d.get(k) is None:
                d[k] = ""
        if not d.get("client_name"):
            d["client_name"] = d.get("model_name") or ""
        return d


class UpcomingShoot(TimeStamped):
    """Réservation à venir ; `completed` passe à True une fois la séance faite."""
    id: str = Field(default_factory=gen_id)
    client_name: str = ""
    shoot_date: str = ""
    shoot_time: str = ""
    shoot_location: str = ""
    salon_name: str = ""
    model_name: str = ""
    shoot_type: ShootType = "Wedding"
    contact_number: str = ""
    package_price: str = ""
    advance_paid: str = ""
    notes: str = ""
    completed: bool = False

    class Config:
        extra = "ignore"

    @model_validator(mode="before")
    @classmethod
    def _legacy_defaults(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        d = dict(data)
        for k in ("salon_name", "model_name", "shoot_time", "notes", "contact_number", "advance_paid"):
            if d.get(k) is None:
                d[k] = ""
        return d

    def to_shoot_entry(self) -> ShootEntry:
        """Copie par valeur (pas de lien retour vers la réservation)."""
        return ShootEntry(
            client_name=self.client_name,
            shoot_date=self.shoot_date,
            shoot_time=self.shoot_time or "",
            shoot_location=self.shoot_location,
            salon_name=self.salon_name or "",
            model_name=self.model_name or "",
            shoot_type=self.shoot_type,
            price=self.package_price or "0",
            advance_paid=self.advance_paid or "",
            phone_number=self.contact_number or "",
            notes=self.notes or "",
        )
