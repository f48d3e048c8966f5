from fintrack.config import (
    DEFAULT_CONFIG,
    AppConfig,
    NotificationSettings,
    config_to_dict,
    merge_config,
    update_section,
)


def test_defaults():
    assert DEFAULT_CONFIG.currency == "USD"
    assert DEFAULT_CONFIG.notifications.reminder_days == 7
    assert DEFAULT_CONFIG.quotes.change_frequency == "weekly"
    assert DEFAULT_CONFIG.data.data_retention_days == 0


def test_merge_overrides_known_fields_only():
    merged = merge_config(DEFAULT_CONFIG, {
        "currency": "EUR",
        "notifications": {"reminderDays": 3},
        "somethingElse": 1,
    })

    assert merged.currency == "EUR"
    assert merged.notifications.reminder_days == 3
    assert merged.notifications.enabled is True
    assert merged.quotes == DEFAULT_CONFIG.quotes


def test_merge_keeps_base_for_wrong_types():
    merged = merge_config(DEFAULT_CONFIG, {
        "currency": 5,
        "showQuickStats": "yes",
        "notifications": {"reminderDays": True, "enabled": 0},
        "quotes": "not a section",
    })
    assert merged == DEFAULT_CONFIG


def test_merge_converts_lists_to_tuples():
    merged = merge_config(DEFAULT_CONFIG, {"transactions": {"defaultTags": ["A", "B"]}})
    assert merged.transactions.default_tags == ("A", "B")


def test_merge_onto_non_default_base():
    base = AppConfig(currency="GBP", notifications=NotificationSettings(reminder_days=30))
    merged = merge_config(base, {"dateFormat": "YYYY-MM-DD"})

    assert merged.currency == "GBP"
    assert merged.notifications.reminder_days == 30
    assert merged.date_format == "YYYY-MM-DD"


def test_config_dict_round_trip():
    config = update_section(DEFAULT_CONFIG, "quotes", custom_quotes_only=True, change_frequency="daily")
    config = update_section(config, "number_format", decimal_places=0)

    assert merge_config(DEFAULT_CONFIG, config_to_dict(config)) == config


def test_config_dict_uses_camel_case():
    d = config_to_dict(DEFAULT_CONFIG)
    assert d["numberFormat"]["decimalPlaces"] == 2
    assert d["data"]["dataRetentionDays"] == 0
    assert d["transactions"]["defaultCategories"][0] == "Food & Dining"


def test_update_section_returns_a_copy():
    updated = update_section(DEFAULT_CONFIG, "notifications", enabled=False)

    assert updated.notifications.enabled is False
    assert DEFAULT_CONFIG.notifications.enabled is True
