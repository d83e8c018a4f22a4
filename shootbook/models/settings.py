from __future__ import annotations
from datetime import timedelta
from typing import Dict, List, Literal, get_args
from pydantic import BaseModel

ReminderTiming = Literal["1h", "3h", "1d", "2d"]
InvoiceStyle = Literal["elegant", "modern", "minimal", "bold", "classic"]
ThemeMode = Literal["light", "dark"]

INVOICE_STYLES: List[str] = list(get_args(InvoiceStyle))
DEFAULT_INVOICE_STYLE: InvoiceStyle = "elegant"
DEFAULT_THEME_MODE: ThemeMode = "light"

# (décalage, libellé court, description utilisée dans le titre des rappels)
TIMING_OPTIONS: Dict[str, tuple] = {
    "1h": (timedelta(hours=1), "1 Hour", "1 hour before"),
    "3h": (timedelta(hours=3), "3 Hours", "3 hours before"),
    "1d": (timedelta(days=1), "1 Day", "1 day before"),
    "2d": (timedelta(days=2), "2 Days", "2 days before"),
}

def timing_offset(timing: str) -> timedelta:
    return TIMING_OPTIONS.get(timing, TIMING_OPTIONS["1d"])[0]

def timing_description(timing: str) -> str:
    opt = TIMING_OPTIONS.get(timing)
    return opt[2] if opt else "soon"


class ReminderSettings(BaseModel):
    shoot_reminders: bool = True
    invoice_reminders: bool = True
    reminder_timing: ReminderTiming = "1d"

    class Config:
        extra = "ignore"


class BrandingProfile(BaseModel):
    business_name: str = "MY STUDIO"
    business_sub: str = "PHOTOGRAPHY"
    owner_name: str = ""
    contact_phone: str = ""
    contact_email: str = ""
    bank_account: str = ""
    bank_holder: str = ""
    bank_name: str = ""
    bank_branch: str = ""
    logo_uri: str = ""  # data URI base64 ou URL

    class Config:
        extra = "ignore"


class InvoiceColorScheme(BaseModel):
    primary: str = "#2C1810"
    gold: str = "#C8A951"
    dark_green: str = "#1B4332"
    label: str = "Classic"

    class Config:
        extra = "ignore"


INVOICE_COLOR_PRESETS: List[InvoiceColorScheme] = [
    InvoiceColorScheme(primary="#2C1810", gold="#C8A951", dark_green="#1B4332", label="Classic"),
    InvoiceColorScheme(primary="#1A1A2E", gold="#E94560", dark_green="#16213E", label="Midnight"),
    InvoiceColorScheme(primary="#2D3436", gold="#00B894", dark_green="#0984E3", label="Ocean"),
    InvoiceColorScheme(primary="#2C3E50", gold="#F39C12", dark_green="#27AE60", label="Autumn"),
    InvoiceColorScheme(primary="#4A0E4E", gold="#F0A500", dark_green="#3A0CA3", label="Royal"),
    InvoiceColorScheme(primary="#1B1B1B", gold="#FFD700", dark_green="#333333", label="Noir Gold"),
]

def color_preset(label: str) -> InvoiceColorScheme:
    for p in INVOICE_COLOR_PRESETS:
        if p.label.casefold() == (label or "").casefold():
            return p.model_copy()
    raise KeyError(f"Unknown color preset: {label}")
