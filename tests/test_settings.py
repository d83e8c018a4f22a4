import json

import pytest

from shootbook.models.settings import ReminderSettings, color_preset, timing_description, timing_offset
from shootbook.services.settings_service import (
    BRANDING_KEY,
    INVOICE_STYLE_KEY,
    REMINDER_SETTINGS_KEY,
    SettingsService,
)


def test_defaults(settings):
    assert settings.reminders == ReminderSettings()
    assert settings.branding.business_name == "MY STUDIO"
    assert settings.invoice_colors.label == "Classic"
    assert settings.invoice_style == "elegant"
    assert settings.theme_mode == "light"

def test_saved_values_survive_reload(store, settings):
    settings.save_reminder_settings(ReminderSettings(shoot_reminders=False, reminder_timing="3h"))
    settings.update_branding({"business_name": "LENS & LIGHT", "contact_phone": "077 123 4567"})
    settings.set_invoice_colors(color_preset("ocean"))
    settings.set_invoice_style("bold")
    settings.toggle_theme()

    reloaded = SettingsService(store)
    assert reloaded.reminders.shoot_reminders is False
    assert reloaded.reminders.reminder_timing == "3h"
    assert reloaded.branding.business_name == "LENS & LIGHT"
    assert reloaded.branding.business_sub == "PHOTOGRAPHY"
    assert reloaded.invoice_colors.label == "Ocean"
    assert reloaded.invoice_style == "bold"
    assert reloaded.theme_mode == "dark"

def test_reset_branding(store, settings):
    settings.update_branding({"business_name": "X"})
    settings.reset_branding()
    assert store.get_item(BRANDING_KEY) is None
    assert SettingsService(store).branding.business_name == "MY STUDIO"

def test_corrupt_values_fall_back_to_defaults(store):
    store.set_item(REMINDER_SETTINGS_KEY, "{broken")
    store.set_item(INVOICE_STYLE_KEY, json.dumps("fancy"))
    store.set_item(BRANDING_KEY, json.dumps({"business_name": "Partial"}))
    s = SettingsService(store)
    assert s.reminders == ReminderSettings()
    assert s.invoice_style == "elegant"
    assert s.branding.business_name == "Partial"

def test_unknown_choices_rejected(settings):
    with pytest.raises(ValueError):
        settings.set_invoice_style("fancy")
    with pytest.raises(ValueError):
        settings.set_theme_mode("sepia")
    with pytest.raises(KeyError):
        color_preset("Neon")

def test_timing_helpers():
    assert timing_offset("3h").total_seconds() == 3 * 3600
    assert timing_description("2d") == "2 days before"
    assert timing_description("weird") == "soon"
