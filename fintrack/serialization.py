"""Conversion between domain records and the camelCase JSON wire format.

The same shapes are used for persisted blobs, JSON export and import.
"""

import logging
import math
from typing import Any, Callable, Iterable, Optional, TypeVar

from fintrack.domain import CustomQuote, Goal, Transaction

logger = logging.getLogger(__name__)

T = TypeVar("T")


def transaction_to_dict(t: Transaction) -> dict:
    d = {"id": t.id, "type": t.type, "amount": t.amount, "date": t.date}
    if t.source is not None:
        d["source"] = t.source
    if t.category is not None:
        d["category"] = t.category
    if t.description is not None:
        d["description"] = t.description
    d["tags"] = list(t.tags)
    return d


def goal_to_dict(g: Goal) -> dict:
    return {
        "id": g.id,
        "title": g.title,
        "targetAmount": g.target_amount,
        "currentAmount": g.current_amount,
        "deadline": g.deadline,
    }


def quote_to_dict(q: CustomQuote) -> dict:
    return {"id": q.id, "text": q.text, "author": q.author, "dateAdded": q.date_added}


def _number(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"expected a number, got {value!r}")
    if not math.isfinite(value):
        raise ValueError(f"expected a finite number, got {value!r}")
    return value


def _optional_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def transaction_from_dict(d: dict) -> Transaction:
    if d["type"] not in ("income", "expense"):
        raise ValueError(f"unknown transaction type {d['type']!r}")
    return Transaction(
        id=str(d["id"]),
        type=d["type"],
        amount=_number(d["amount"]),
        date=str(d["date"]),
        source=_optional_str(d.get("source")),
        category=_optional_str(d.get("category")),
        description=_optional_str(d.get("description")),
        tags=tuple(str(tag) for tag in d.get("tags") or ()),
    )


def goal_from_dict(d: dict) -> Goal:
    return Goal(
        id=str(d["id"]),
        title=str(d["title"]),
        target_amount=_number(d["targetAmount"]),
        current_amount=_number(d.get("currentAmount", 0)),
        deadline=str(d["deadline"]),
    )


def quote_from_dict(d: dict) -> CustomQuote:
    return CustomQuote(
        id=str(d["id"]),
        text=str(d["text"]),
        author=str(d.get("author") or "Unknown"),
        date_added=str(d.get("dateAdded", "")),
    )


def records_from_list(raw: Iterable[Any], parse: Callable[[dict], T], label: str) -> tuple[T, ...]:
    """Parse every record in ``raw``, skipping the ones that do not fit."""
    records = []
    for item in raw:
        try:
            if not isinstance(item, dict):
                raise TypeError(f"expected an object, got {type(item).__name__}")
            records.append(parse(item))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Skipping invalid %s %r: %s", label, item, e)
    return tuple(records)


def transactions_from_list(raw: Iterable[Any]) -> tuple[Transaction, ...]:
    return records_from_list(raw, transaction_from_dict, "transaction")


def goals_from_list(raw: Iterable[Any]) -> tuple[Goal, ...]:
    return records_from_list(raw, goal_from_dict, "goal")


def quotes_from_list(raw: Iterable[Any]) -> tuple[CustomQuote, ...]:
    return records_from_list(raw, quote_from_dict, "custom quote")
