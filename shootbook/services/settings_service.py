from __future__ import annotations

import json
import logging
from typing import Any, Mapping, Type, TypeVar

from pydantic import BaseModel, ValidationError

from shootbook.models.settings import (
    DEFAULT_INVOICE_STYLE,
    DEFAULT_THEME_MODE,
    INVOICE_STYLES,
    BrandingProfile,
    InvoiceColorScheme,
    ReminderSettings,
)
from shootbook.storage.kv_store import KeyValueStore

logger = logging.getLogger(__name__)

THEME_MODE_KEY = "theme-mode"
INVOICE_COLOR_KEY = "invoice-color-scheme"
INVOICE_STYLE_KEY = "invoice-style"
BRANDING_KEY = "branding-settings"
REMINDER_SETTINGS_KEY = "reminder-settings"

S = TypeVar("S", bound=BaseModel)


class SettingsService:
    """
    Préférences utilisateur : chargées une fois, réécrites à chaque changement.
    Valeur absente ou illisible -> valeurs par défaut.
    """

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store
        self.reminders: ReminderSettings = self._load_model(REMINDER_SETTINGS_KEY, ReminderSettings)
        self.branding: BrandingProfile = self._load_model(BRANDING_KEY, BrandingProfile)
        self.invoice_colors: InvoiceColorScheme = self._load_model(INVOICE_COLOR_KEY, InvoiceColorScheme)
        self.invoice_style: str = self._load_choice(INVOICE_STYLE_KEY, INVOICE_STYLES, DEFAULT_INVOICE_STYLE)
        self.theme_mode: str = self._load_choice(THEME_MODE_KEY, ["light", "dark"], DEFAULT_THEME_MODE)

    # ---------- lecture ---------- #

    def _load_json(self, key: str) -> Any:
        raw = self.store.get_item(key)
        if not raw:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Réglage '%s' illisible, valeurs par défaut", key)
            return None

    def _load_model(self, key: str, cls: Type[S]) -> S:
        data = self._load_json(key)
        if not isinstance(data, dict):
            return cls()
        try:
            # fusion avec les valeurs par défaut
            return cls.model_validate({**cls().model_dump(), **data})
        except ValidationError:
            logger.warning("Réglage '%s' invalide, valeurs par défaut", key)
            return cls()

    def _load_choice(self, key: str, allowed, default: str) -> str:
        value = self._load_json(key)
        return value if value in allowed else default

    def _save(self, key: str, value: Any) -> None:
        if isinstance(value, BaseModel):
            value = value.model_dump()
        self.store.set_item(key, json.dumps(value, ensure_ascii=False))

    # ---------- rappels ---------- #

    def save_reminder_settings(self, settings: ReminderSettings) -> ReminderSettings:
        self._save(REMINDER_SETTINGS_KEY, settings)
        self.reminders = settings
        return settings

    # ---------- identité visuelle ---------- #

    def update_branding(self, updates: Mapping[str, Any]) -> BrandingProfile:
        branding = BrandingProfile.model_validate({**self.branding.model_dump(), **dict(updates)})
        self._save(BRANDING_KEY, branding)
        self.branding = branding
        return branding

    def reset_branding(self) -> BrandingProfile:
        self.store.remove_item(BRANDING_KEY)
        self.branding = BrandingProfile()
        return self.branding

    def set_invoice_colors(self, colors: InvoiceColorScheme) -> InvoiceColorScheme:
        self._save(INVOICE_COLOR_KEY, colors)
        self.invoice_colors = colors
        return colors

    def set_invoice_style(self, style: str) -> str:
        if style not in INVOICE_STYLES:
            raise ValueError(f"Unknown invoice style: {style}")
        self._save(INVOICE_STYLE_KEY, style)
        self.invoice_style = style
        return style

    def set_theme_mode(self, mode: str) -> str:
        if mode not in ("light", "dark"):
            raise ValueError(f"Unknown theme mode: {mode}")
        self._save(THEME_MODE_KEY, mode)
        self.theme_mode = mode
        return mode

    def toggle_theme(self) -> str:
        return self.set_theme_mode("light" if self.theme_mode == "dark" else "dark")
