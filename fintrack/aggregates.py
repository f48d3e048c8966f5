"""Derived figures over the transaction and goal lists.

Everything here is a pure function of its arguments; ``now`` is always passed
in so results can be reproduced.
"""

import math
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from functools import lru_cache
from types import MappingProxyType
from typing import Iterable, Literal, Mapping, NamedTuple, Optional, Tuple

import pandas as pd

from fintrack.domain import Goal, Transaction

Window = Literal["week", "month", "year", "all"]

DEFAULT_CATEGORY = "Other"
RECENT_LIMIT = 5
UNUSUAL_LOOKBACK_DAYS = 30


@dataclass(frozen=True)
class Summary:
    total_income: float
    total_expenses: float
    current_balance: float
    expenses_by_category: Mapping[str, float]

    @property
    def is_overspending(self) -> bool:
        return self.total_expenses > self.total_income


class CategoryShare(NamedTuple):
    category: str
    amount: float
    percentage: float


class QuickStats(NamedTuple):
    expense_categories: int
    income_count: int
    last_30_days_count: int


def parse_date(value: str) -> date:
    return date.fromisoformat(value[:10])


def _at_midnight(value: str) -> Optional[datetime]:
    try:
        return datetime.combine(parse_date(value), time.min)
    except ValueError:
        return None


def total_income(trans: Iterable[Transaction]) -> float:
    return sum(t.amount for t in trans if t.type == "income")


def total_expenses(trans: Iterable[Transaction]) -> float:
    return sum(t.amount for t in trans if t.type == "expense")


def current_balance(trans: Iterable[Transaction]) -> float:
    trans = tuple(trans)
    return total_income(trans) - total_expenses(trans)


def expenses_by_category(trans: Iterable[Transaction]) -> dict[str, float]:
    totals: dict[str, float] = defaultdict(float)
    for t in trans:
        if t.type == "expense":
            totals[t.category or DEFAULT_CATEGORY] += t.amount
    return dict(totals)


@lru_cache(maxsize=32)
def summarize(trans: Tuple[Transaction, ...]) -> Summary:
    income = total_income(trans)
    expenses = total_expenses(trans)
    return Summary(
        total_income=income,
        total_expenses=expenses,
        current_balance=income - expenses,
        expenses_by_category=MappingProxyType(expenses_by_category(trans)),
    )


def window_cutoff(window: Window, now: datetime) -> Optional[datetime]:
    if window == "week":
        return now - timedelta(days=7)
    # DateOffset clamps to the last day of a shorter month (Mar 31 -> Feb 29)
    if window == "month":
        return (pd.Timestamp(now) - pd.DateOffset(months=1)).normalize().to_pydatetime()
    if window == "year":
        return (pd.Timestamp(now) - pd.DateOffset(years=1)).normalize().to_pydatetime()
    return None


def filter_by_window(
    trans: Iterable[Transaction], window: Window, now: datetime
) -> Tuple[Transaction, ...]:
    cutoff = window_cutoff(window, now)
    if cutoff is None:
        return tuple(trans)
    kept = []
    for t in trans:
        when = _at_midnight(t.date)
        if when is not None and when >= cutoff:
            kept.append(t)
    return tuple(kept)


def recent_transactions(
    trans: Iterable[Transaction], limit: int = RECENT_LIMIT
) -> Tuple[Transaction, ...]:
    return tuple(sorted(trans, key=lambda t: t.date, reverse=True)[:limit])


def goal_progress(goal: Goal) -> float:
    if goal.target_amount <= 0:
        return 100.0
    return goal.current_amount / goal.target_amount * 100


def days_until(deadline: str, now: datetime) -> int:
    """Whole days left until the deadline, rounded up; negative once it has passed."""
    delta = datetime.combine(parse_date(deadline), time.min) - now
    return math.ceil(delta.total_seconds() / 86400)


def goal_status(goal: Goal, now: datetime) -> str:
    progress = goal_progress(goal)
    if progress >= 100:
        return "completed"
    deadline = _at_midnight(goal.deadline)
    if deadline is not None and deadline < now:
        return "overdue"
    if progress >= 75:
        return "almost there"
    if progress >= 50:
        return "on track"
    return "just started"


def average_expense(trans: Iterable[Transaction]) -> float:
    amounts = [t.amount for t in trans if t.type == "expense"]
    if not amounts:
        return 0.0
    return sum(amounts) / len(amounts)


def _since(trans: Iterable[Transaction], days: int, now: datetime) -> Tuple[Transaction, ...]:
    cutoff = now - timedelta(days=days)
    return tuple(t for t in trans if (when := _at_midnight(t.date)) is not None and when >= cutoff)


def unusual_expenses(
    trans: Iterable[Transaction], now: datetime, limit: int = 3
) -> Tuple[Transaction, ...]:
    """Recent expenses larger than twice the average recent expense."""
    recent = tuple(t for t in _since(trans, UNUSUAL_LOOKBACK_DAYS, now) if t.type == "expense")
    avg = average_expense(recent)
    large = sorted((t for t in recent if t.amount > avg * 2), key=lambda t: t.amount, reverse=True)
    return tuple(large[:limit])


def top_categories(breakdown: Mapping[str, float], k: int = 3) -> list[CategoryShare]:
    total = sum(breakdown.values())
    ordered = sorted(breakdown.items(), key=lambda item: item[1], reverse=True)
    return [
        CategoryShare(category, amount, amount / total * 100 if total else 0.0)
        for category, amount in ordered[: max(0, k)]
    ]


def quick_stats(trans: Iterable[Transaction], now: datetime) -> QuickStats:
    trans = tuple(trans)
    return QuickStats(
        expense_categories=len(expenses_by_category(trans)),
        income_count=sum(1 for t in trans if t.type == "income"),
        last_30_days_count=len(_since(trans, UNUSUAL_LOOKBACK_DAYS, now)),
    )
