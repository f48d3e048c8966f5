from dataclasses import replace
from datetime import datetime, timedelta
from typing import Iterable, Optional, Tuple

from fintrack.domain import CustomQuote, Goal, Transaction


def new_id(existing: Iterable[str], now: Optional[datetime] = None) -> str:
    """Millisecond timestamp id, bumped past any id already taken."""
    now = now or datetime.now()
    taken = set(existing)
    candidate = int(now.timestamp() * 1000)
    while str(candidate) in taken:
        candidate += 1
    return str(candidate)


def add_transaction(
    trans: Tuple[Transaction, ...], t: Transaction
) -> Tuple[Transaction, ...]:
    return trans + (t,)


def update_transaction(
    trans: Tuple[Transaction, ...], updated: Transaction
) -> Tuple[Transaction, ...]:
    return tuple(updated if t.id == updated.id else t for t in trans)


def delete_transaction(
    trans: Tuple[Transaction, ...], tid: str
) -> Tuple[Transaction, ...]:
    return tuple(t for t in trans if t.id != tid)


def clamp_amount(goal: Goal, amount: float) -> float:
    return min(goal.target_amount, max(0, amount))


def add_goal(goals: Tuple[Goal, ...], g: Goal) -> Tuple[Goal, ...]:
    return goals + (g,)


def update_goal(
    goals: Tuple[Goal, ...], gid: str, current_amount: float
) -> Tuple[Goal, ...]:
    return tuple(
        replace(g, current_amount=clamp_amount(g, current_amount)) if g.id == gid else g
        for g in goals
    )


def add_funds(goals: Tuple[Goal, ...], gid: str, amount: float) -> Tuple[Goal, ...]:
    return tuple(
        replace(g, current_amount=clamp_amount(g, g.current_amount + amount)) if g.id == gid else g
        for g in goals
    )


def add_custom_quote(
    quotes: Tuple[CustomQuote, ...], q: CustomQuote
) -> Tuple[CustomQuote, ...]:
    return quotes + (replace(q, text=q.text.strip(), author=q.author.strip() or "Unknown"),)


def update_custom_quote(
    quotes: Tuple[CustomQuote, ...], qid: str, text: str, author: str
) -> Tuple[CustomQuote, ...]:
    return tuple(
        replace(q, text=text.strip(), author=author.strip() or "Unknown") if q.id == qid else q
        for q in quotes
    )


def delete_custom_quote(
    quotes: Tuple[CustomQuote, ...], qid: str
) -> Tuple[CustomQuote, ...]:
    return tuple(q for q in quotes if q.id != qid)


def apply_retention(
    trans: Tuple[Transaction, ...], retention_days: int, now: datetime
) -> Tuple[Transaction, ...]:
    if retention_days <= 0:
        return trans
    cutoff = (now - timedelta(days=retention_days)).date().isoformat()
    return tuple(t for t in trans if t.date[:10] >= cutoff)
