from dataclasses import dataclass, field
from typing import Literal, Optional

from fintrack.config import AppConfig, DEFAULT_CONFIG

TransactionType = Literal["income", "expense"]
Severity = Literal["high", "medium"]


@dataclass(frozen=True)
class Transaction:
    id: str
    type: TransactionType
    amount: float
    date: str                          # ISO date, e.g. "2025-09-01"
    source: Optional[str] = None       # income only
    category: Optional[str] = None     # expense only
    description: Optional[str] = None
    tags: tuple[str, ...] = ()


@dataclass(frozen=True)
class Goal:
    id: str
    title: str
    target_amount: float
    current_amount: float
    deadline: str


@dataclass(frozen=True)
class CustomQuote:
    id: str
    text: str
    author: str
    date_added: str


@dataclass(frozen=True)
class Notification:
    type: str
    message: str
    severity: Severity


@dataclass(frozen=True)
class WeeklyQuote:
    quote: str
    week_number: int
    is_custom: bool


# Snapshot of everything the user owns; replaced wholesale on every change
@dataclass(frozen=True)
class FinanceState:
    transactions: tuple[Transaction, ...] = ()
    goals: tuple[Goal, ...] = ()
    custom_quotes: tuple[CustomQuote, ...] = ()
    config: AppConfig = field(default=DEFAULT_CONFIG)
