from datetime import datetime

from fintrack.aggregates import parse_date
from fintrack.config import AppConfig, DEFAULT_CONFIG

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "CAD": "C$",
    "AUD": "A$",
}

DATE_FORMATS = {
    "MM/DD/YYYY": "%m/%d/%Y",
    "DD/MM/YYYY": "%d/%m/%Y",
    "YYYY-MM-DD": "%Y-%m-%d",
    "DD MMM YYYY": "%d %b %Y",
}


def format_amount(value: float, config: AppConfig = DEFAULT_CONFIG, signed: bool = False) -> str:
    places = config.number_format.decimal_places
    body = f"{abs(value):,.{places}f}".replace(",", "\0")
    body = body.replace("\0", config.number_format.thousands_separator)
    symbol = CURRENCY_SYMBOLS.get(config.currency, config.currency + " ")
    sign = "-" if value < 0 else ("+" if signed and value > 0 else "")
    return f"{sign}{symbol}{body}"


def format_date(value: str, config: AppConfig = DEFAULT_CONFIG) -> str:
    try:
        d = parse_date(value)
    except ValueError:
        return value
    return d.strftime(DATE_FORMATS.get(config.date_format, "%Y-%m-%d"))


def relative_date(value: str, now: datetime, config: AppConfig = DEFAULT_CONFIG) -> str:
    try:
        d = parse_date(value)
    except ValueError:
        return value
    diff = (now.date() - d).days
    if diff == 0:
        return "Today"
    if diff == 1:
        return "Yesterday"
    if 1 < diff < 7:
        return f"{diff} days ago"
    return format_date(value, config)

