"""Typed application settings.

Every recognised option is declared here with its default. Persisted and
imported configs use the camelCase keys of the stored JSON document and are
merged into a base config section by section with ``merge_config``; keys the
app does not know about are dropped, and values of the wrong type keep the
base value.
"""

import logging
from dataclasses import dataclass, replace
from typing import Any, Mapping

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NumberFormat:
    decimal_places: int = 2
    thousands_separator: str = ","


@dataclass(frozen=True)
class NotificationSettings:
    enabled: bool = True
    overspending_alerts: bool = True
    goal_deadline_reminders: bool = True
    weekly_reports: bool = False
    goal_achievements: bool = True
    reminder_days: int = 7


@dataclass(frozen=True)
class QuoteSettings:
    enable_custom_quotes: bool = True
    custom_quotes_only: bool = False
    show_quote_source: bool = True
    change_frequency: str = "weekly"   # daily | weekly | monthly


@dataclass(frozen=True)
class GoalSettings:
    default_deadline_days: int = 365
    progress_notification_threshold: int = 75
    auto_complete_goals: bool = False
    show_progress_percentage: bool = True


@dataclass(frozen=True)
class TransactionSettings:
    default_categories: tuple[str, ...] = (
        "Food & Dining",
        "Transportation",
        "Shopping",
        "Bills & Utilities",
    )
    auto_save: bool = True
    confirm_delete: bool = True
    show_descriptions: bool = True
    default_tags: tuple[str, ...] = ("Essential", "Non-essential")


@dataclass(frozen=True)
class DataSettings:
    auto_backup: bool = False
    backup_frequency: str = "weekly"
    data_retention_days: int = 0       # 0 keeps everything
    export_format: str = "csv"


@dataclass(frozen=True)
class PrivacySettings:
    share_usage_data: bool = False
    enable_analytics: bool = False
    data_encryption: bool = False


@dataclass(frozen=True)
class AppConfig:
    currency: str = "USD"
    date_format: str = "MM/DD/YYYY"
    number_format: NumberFormat = NumberFormat()
    default_transaction_type: str = "expense"
    language: str = "en"
    theme: str = "light"
    chart_animations: bool = True
    default_chart_period: str = "month"
    dashboard_layout: str = "detailed"
    show_quick_stats: bool = True
    notifications: NotificationSettings = NotificationSettings()
    quotes: QuoteSettings = QuoteSettings()
    goals: GoalSettings = GoalSettings()
    transactions: TransactionSettings = TransactionSettings()
    data: DataSettings = DataSettings()
    privacy: PrivacySettings = PrivacySettings()


DEFAULT_CONFIG = AppConfig()


def _pick(raw: Mapping[str, Any], key: str, current: Any) -> Any:
    """Return raw[key] when present and of the same kind as ``current``."""
    if key not in raw:
        return current
    value = raw[key]
    if isinstance(current, bool):
        ok = isinstance(value, bool)
    elif isinstance(current, int):
        ok = isinstance(value, int) and not isinstance(value, bool)
    elif isinstance(current, str):
        ok = isinstance(value, str)
    elif isinstance(current, tuple):
        ok = isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value)
        if ok:
            value = tuple(value)
    else:
        ok = False
    if not ok:
        logger.warning("Ignoring config value %r for %s: expected %s", value, key, type(current).__name__)
        return current
    return value


def _section(raw: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = raw.get(key)
    return value if isinstance(value, Mapping) else {}


def _merge_number_format(base: NumberFormat, raw: Mapping[str, Any]) -> NumberFormat:
    return NumberFormat(
        decimal_places=_pick(raw, "decimalPlaces", base.decimal_places),
        thousands_separator=_pick(raw, "thousandsSeparator", base.thousands_separator),
    )


def _merge_notifications(base: NotificationSettings, raw: Mapping[str, Any]) -> NotificationSettings:
    return NotificationSettings(
        enabled=_pick(raw, "enabled", base.enabled),
        overspending_alerts=_pick(raw, "overspendingAlerts", base.overspending_alerts),
        goal_deadline_reminders=_pick(raw, "goalDeadlineReminders", base.goal_deadline_reminders),
        weekly_reports=_pick(raw, "weeklyReports", base.weekly_reports),
        goal_achievements=_pick(raw, "goalAchievements", base.goal_achievements),
        reminder_days=_pick(raw, "reminderDays", base.reminder_days),
    )


def _merge_quotes(base: QuoteSettings, raw: Mapping[str, Any]) -> QuoteSettings:
    return QuoteSettings(
        enable_custom_quotes=_pick(raw, "enableCustomQuotes", base.enable_custom_quotes),
        custom_quotes_only=_pick(raw, "customQuotesOnly", base.custom_quotes_only),
        show_quote_source=_pick(raw, "showQuoteSource", base.show_quote_source),
        change_frequency=_pick(raw, "changeFrequency", base.change_frequency),
    )


def _merge_goals(base: GoalSettings, raw: Mapping[str, Any]) -> GoalSettings:
    return GoalSettings(
        default_deadline_days=_pick(raw, "defaultDeadlineDays", base.default_deadline_days),
        progress_notification_threshold=_pick(
            raw, "progressNotificationThreshold", base.progress_notification_threshold
        ),
        auto_complete_goals=_pick(raw, "autoCompleteGoals", base.auto_complete_goals),
        show_progress_percentage=_pick(raw, "showProgressPercentage", base.show_progress_percentage),
    )


def _merge_transactions(base: TransactionSettings, raw: Mapping[str, Any]) -> TransactionSettings:
    return TransactionSettings(
        default_categories=_pick(raw, "defaultCategories", base.default_categories),
        auto_save=_pick(raw, "autoSave", base.auto_save),
        confirm_delete=_pick(raw, "confirmDelete", base.confirm_delete),
        show_descriptions=_pick(raw, "showDescriptions", base.show_descriptions),
        default_tags=_pick(raw, "defaultTags", base.default_tags),
    )


def _merge_data(base: DataSettings, raw: Mapping[str, Any]) -> DataSettings:
    return DataSettings(
        auto_backup=_pick(raw, "autoBackup", base.auto_backup),
        backup_frequency=_pick(raw, "backupFrequency", base.backup_frequency),
        data_retention_days=_pick(raw, "dataRetentionDays", base.data_retention_days),
        export_format=_pick(raw, "exportFormat", base.export_format),
    )


def _merge_privacy(base: PrivacySettings, raw: Mapping[str, Any]) -> PrivacySettings:
    return PrivacySettings(
        share_usage_data=_pick(raw, "shareUsageData", base.share_usage_data),
        enable_analytics=_pick(raw, "enableAnalytics", base.enable_analytics),
        data_encryption=_pick(raw, "dataEncryption", base.data_encryption),
    )


def merge_config(base: AppConfig, raw: Mapping[str, Any]) -> AppConfig:
    """Overlay a camelCase config mapping onto ``base``, one field at a time."""
    return AppConfig(
        currency=_pick(raw, "currency", base.currency),
        date_format=_pick(raw, "dateFormat", base.date_format),
        number_format=_merge_number_format(base.number_format, _section(raw, "numberFormat")),
        default_transaction_type=_pick(raw, "defaultTransactionType", base.default_transaction_type),
        language=_pick(raw, "language", base.language),
        theme=_pick(raw, "theme", base.theme),
        chart_animations=_pick(raw, "chartAnimations", base.chart_animations),
        default_chart_period=_pick(raw, "defaultChartPeriod", base.default_chart_period),
        dashboard_layout=_pick(raw, "dashboardLayout", base.dashboard_layout),
        show_quick_stats=_pick(raw, "showQuickStats", base.show_quick_stats),
        notifications=_merge_notifications(base.notifications, _section(raw, "notifications")),
        quotes=_merge_quotes(base.quotes, _section(raw, "quotes")),
        goals=_merge_goals(base.goals, _section(raw, "goals")),
        transactions=_merge_transactions(base.transactions, _section(raw, "transactions")),
        data=_merge_data(base.data, _section(raw, "data")),
        privacy=_merge_privacy(base.privacy, _section(raw, "privacy")),
    )


def config_to_dict(config: AppConfig) -> dict:
    return {
        "currency": config.currency,
        "dateFormat": config.date_format,
        "numberFormat": {
            "decimalPlaces": config.number_format.decimal_places,
            "thousandsSeparator": config.number_format.thousands_separator,
        },
        "defaultTransactionType": config.default_transaction_type,
        "language": config.language,
        "theme": config.theme,
        "chartAnimations": config.chart_animations,
        "defaultChartPeriod": config.default_chart_period,
        "dashboardLayout": config.dashboard_layout,
        "showQuickStats": config.show_quick_stats,
        "notifications": {
            "enabled": config.notifications.enabled,
            "overspendingAlerts": config.notifications.overspending_alerts,
            "goalDeadlineReminders": config.notifications.goal_deadline_reminders,
            "weeklyReports": config.notifications.weekly_reports,
            "goalAchievements": config.notifications.goal_achievements,
            "reminderDays": config.notifications.reminder_days,
        },
        "quotes": {
            "enableCustomQuotes": config.quotes.enable_custom_quotes,
            "customQuotesOnly": config.quotes.custom_quotes_only,
            "showQuoteSource": config.quotes.show_quote_source,
            "changeFrequency": config.quotes.change_frequency,
        },
        "goals": {
            "defaultDeadlineDays": config.goals.default_deadline_days,
            "progressNotificationThreshold": config.goals.progress_notification_threshold,
            "autoCompleteGoals": config.goals.auto_complete_goals,
            "showProgressPercentage": config.goals.show_progress_percentage,
        },
        "transactions": {
            "defaultCategories": list(config.transactions.default_categories),
            "autoSave": config.transactions.auto_save,
            "confirmDelete": config.transactions.confirm_delete,
            "showDescriptions": config.transactions.show_descriptions,
            "defaultTags": list(config.transactions.default_tags),
        },
        "data": {
            "autoBackup": config.data.auto_backup,
            "backupFrequency": config.data.backup_frequency,
            "dataRetentionDays": config.data.data_retention_days,
            "exportFormat": config.data.export_format,
        },
        "privacy": {
            "shareUsageData": config.privacy.share_usage_data,
            "enableAnalytics": config.privacy.enable_analytics,
            "dataEncryption": config.privacy.data_encryption,
        },
    }


def update_section(config: AppConfig, section: str, **changes) -> AppConfig:
    """Replace fields of one nested section, e.g. update_section(cfg, "quotes", custom_quotes_only=True)."""
    current = getattr(config, section)
    return replace(config, **{section: replace(current, **changes)})
