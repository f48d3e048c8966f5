import json
import math
from abc import ABC, abstractmethod
from datetime import date
from typing import Any, Callable, Generic, Iterable, TypeVar

from fintrack.domain import CustomQuote, Goal, Transaction

T = TypeVar('T')
U = TypeVar('U')
E = TypeVar('E')


class Maybe(Generic[T], ABC):

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def is_some(self) -> bool:
        pass

    def is_none(self) -> bool:
        return not self.is_some()


class Some(Maybe[T]):

    def __init__(self, value: T):
        self._value = value

    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        return Some(f(self._value))

    def get_or_else(self, default: T) -> T:
        return self._value

    def is_some(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"Some({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Some) and self._value == other._value


class Nothing(Maybe[T]):

    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        return Nothing()

    def get_or_else(self, default: T) -> T:
        return default

    def is_some(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "Nothing()"

    def __eq__(self, other) -> bool:
        return isinstance(other, Nothing)


class Either(Generic[E, T], ABC):

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        pass

    @abstractmethod
    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def is_right(self) -> bool:
        pass

    def is_left(self) -> bool:
        return not self.is_right()

    @abstractmethod
    def get_error(self) -> E:
        pass


class Right(Either[E, T]):

    def __init__(self, value: T):
        self._value = value

    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        return Right(f(self._value))

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return f(self._value)

    def get_or_else(self, default: T) -> T:
        return self._value

    def is_right(self) -> bool:
        return True

    def get_error(self) -> E:
        raise ValueError("Cannot get error from Right")

    def __repr__(self) -> str:
        return f"Right({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Right) and self._value == other._value


class Left(Either[E, T]):

    def __init__(self, error: E):
        self._error = error

    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        return Left(self._error)

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return Left(self._error)

    def get_or_else(self, default: T) -> T:
        return default

    def is_right(self) -> bool:
        return False

    def get_error(self) -> E:
        return self._error

    def __repr__(self) -> str:
        return f"Left({self._error!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Left) and self._error == other._error


def find_by_id(items: Iterable[T], item_id: str) -> Maybe[T]:
    for item in items:
        if getattr(item, "id", None) == item_id:
            return Some(item)
    return Nothing()


def parse_json(text: str) -> Either[str, Any]:
    try:
        return Right(json.loads(text))
    except (TypeError, ValueError) as e:
        return Left(f"invalid JSON: {e}")


def _valid_amount(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
        and value > 0
    )


def _valid_date(value: Any) -> bool:
    try:
        date.fromisoformat(str(value)[:10])
    except ValueError:
        return False
    return True


def validate_transaction(t: Transaction) -> Either[dict, Transaction]:
    if t.type not in ("income", "expense"):
        return Left({
            "error": "invalid_type",
            "message": f"Transaction type must be income or expense, got {t.type!r}",
        })
    if not _valid_amount(t.amount):
        return Left({
            "error": "invalid_amount",
            "message": f"Amount must be a positive number, got {t.amount!r}",
            "amount": t.amount,
        })
    if not _valid_date(t.date):
        return Left({
            "error": "invalid_date",
            "message": f"Date must be YYYY-MM-DD, got {t.date!r}",
        })
    if t.type == "income" and not (t.source or "").strip():
        return Left({"error": "missing_source", "message": "Income needs a source"})
    if t.type == "expense" and not (t.category or "").strip():
        return Left({"error": "missing_category", "message": "Expense needs a category"})
    return Right(t)


def validate_goal(g: Goal) -> Either[dict, Goal]:
    if not g.title.strip():
        return Left({"error": "missing_title", "message": "Goal needs a title"})
    if not _valid_amount(g.target_amount):
        return Left({
            "error": "invalid_amount",
            "message": f"Target must be a positive number, got {g.target_amount!r}",
            "amount": g.target_amount,
        })
    if not _valid_date(g.deadline):
        return Left({
            "error": "invalid_date",
            "message": f"Deadline must be YYYY-MM-DD, got {g.deadline!r}",
        })
    return Right(g)


def validate_quote(q: CustomQuote) -> Either[dict, CustomQuote]:
    if not q.text.strip():
        return Left({"error": "missing_text", "message": "Quote text is required"})
    return Right(q)
