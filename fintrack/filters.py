from typing import Callable, Iterable, Literal, Tuple

from fintrack.domain import Transaction

SortField = Literal["date", "amount", "type"]
SortOrder = Literal["asc", "desc"]


def by_type(t_type: str) -> Callable[[Transaction], bool]:
    def _filter(t: Transaction) -> bool:
        return t_type == "all" or t.type == t_type

    return _filter


def by_search(term: str) -> Callable[[Transaction], bool]:
    needle = term.lower()

    def _filter(t: Transaction) -> bool:
        fields = [t.source, t.category, t.description, *t.tags]
        return any(needle in f.lower() for f in fields if f)

    return _filter


def sort_transactions(
    trans: Iterable[Transaction], field: SortField = "date", order: SortOrder = "desc"
) -> Tuple[Transaction, ...]:
    keys: dict[str, Callable[[Transaction], object]] = {
        "date": lambda t: t.date,
        "amount": lambda t: t.amount,
        "type": lambda t: t.type,
    }
    return tuple(sorted(trans, key=keys.get(field, keys["date"]), reverse=order == "desc"))


def transaction_view(
    trans: Iterable[Transaction],
    search: str = "",
    t_type: str = "all",
    field: SortField = "date",
    order: SortOrder = "desc",
) -> Tuple[Transaction, ...]:
    """The transactions list page: search, type filter, then sort."""
    matching = (t for t in trans if by_type(t_type)(t))
    if search:
        matching = filter(by_search(search), matching)
    return sort_transactions(matching, field, order)
