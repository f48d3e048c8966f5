"""File export (CSV / JSON), full backups and backup import."""

import json
import logging
from datetime import datetime
from typing import Any, Iterable, Literal, NamedTuple, Optional

import pandas as pd

from fintrack.aggregates import Window, filter_by_window, goal_progress, summarize
from fintrack.config import DEFAULT_CONFIG, config_to_dict, merge_config
from fintrack.domain import FinanceState, Goal, Transaction
from fintrack.functional import Either, Left, Right, parse_json
from fintrack.serialization import (
    goal_to_dict,
    goals_from_list,
    quote_to_dict,
    quotes_from_list,
    transaction_to_dict,
    transactions_from_list,
)

logger = logging.getLogger(__name__)

DataType = Literal["transactions", "goals", "summary"]
ExportFormat = Literal["csv", "json"]

LIST_SEPARATOR = "; "
MIME_TYPES = {"csv": "text/csv", "json": "application/json"}
IMPORT_ERROR = "Failed to import data. Please check the file format."


class ExportFile(NamedTuple):
    filename: str
    content: str
    mime: str


class DataStats(NamedTuple):
    transactions: int
    goals: int
    custom_quotes: int
    size_kb: int


def transaction_rows(trans: Iterable[Transaction]) -> list[dict]:
    return [
        {
            "id": t.id,
            "type": t.type,
            "amount": t.amount,
            "date": t.date,
            "source": t.source or "",
            "category": t.category or "",
            "description": t.description or "",
            "tags": list(t.tags),
        }
        for t in trans
    ]


def goal_rows(goals: Iterable[Goal]) -> list[dict]:
    return [
        {
            "id": g.id,
            "title": g.title,
            "targetAmount": g.target_amount,
            "currentAmount": g.current_amount,
            "deadline": g.deadline,
            "progress": f"{goal_progress(g):.2f}%",
        }
        for g in goals
    ]


def summary_rows(trans: Iterable[Transaction], period: str) -> list[dict]:
    trans = tuple(trans)
    summary = summarize(trans)
    rows = [
        {"metric": "Total Income", "value": summary.total_income, "period": period},
        {"metric": "Total Expenses", "value": summary.total_expenses, "period": period},
        {"metric": "Net Balance", "value": summary.current_balance, "period": period},
        {"metric": "Transaction Count", "value": len(trans), "period": period},
    ]
    rows.extend(
        {"metric": f"Expenses - {category}", "value": amount, "period": period}
        for category, amount in summary.expenses_by_category.items()
    )
    return rows


def _csv_cell(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return LIST_SEPARATOR.join(map(str, value))
    # mixed int/float columns come back as float64; whole numbers print without ".0"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return value


def to_csv(rows: list[dict]) -> str:
    df = pd.DataFrame(rows)
    for column in df.columns:
        df[column] = df[column].astype(object).map(_csv_cell)
    return df.to_csv(index=False, lineterminator="\n")


def to_json(rows: Any) -> str:
    return json.dumps(rows, indent=2)


def export_data(
    state: FinanceState,
    data_type: DataType,
    fmt: ExportFormat,
    window: Window,
    now: datetime,
) -> Optional[ExportFile]:
    """Build the download for one data type; None when there is nothing to export."""
    stamp = now.date().isoformat()
    if data_type == "transactions":
        rows = transaction_rows(filter_by_window(state.transactions, window, now))
        filename = f"transactions_{window}_{stamp}.{fmt}"
    elif data_type == "goals":
        rows = goal_rows(state.goals)
        filename = f"goals_{stamp}.{fmt}"
    elif data_type == "summary":
        rows = summary_rows(filter_by_window(state.transactions, window, now), window)
        filename = f"financial_summary_{window}_{stamp}.{fmt}"
    else:
        raise ValueError(f"unknown data type {data_type!r}")

    if not rows:
        logger.info("Nothing to export for %s/%s", data_type, window)
        return None
    content = to_csv(rows) if fmt == "csv" else to_json(rows)
    return ExportFile(filename, content, MIME_TYPES[fmt])


def backup_document(state: FinanceState, now: datetime) -> dict:
    return {
        "transactions": [transaction_to_dict(t) for t in state.transactions],
        "goals": [goal_to_dict(g) for g in state.goals],
        "customQuotes": [quote_to_dict(q) for q in state.custom_quotes],
        "config": config_to_dict(state.config),
        "exportDate": now.isoformat(),
    }


def backup(state: FinanceState, now: datetime) -> ExportFile:
    return ExportFile(
        f"finance-app-backup-{now.date().isoformat()}.json",
        to_json(backup_document(state, now)),
        MIME_TYPES["json"],
    )


def parse_import(text: str) -> Either[str, dict]:
    """Read a backup document.

    Returns the collections it carries, keyed by ``transactions``, ``goals``,
    ``custom_quotes`` and ``config``; keys absent from the document are absent
    from the result.
    """
    def collect(data: Any) -> Either[str, dict]:
        if not isinstance(data, dict):
            return Left(f"expected a JSON object, got {type(data).__name__}")
        found: dict[str, Any] = {}
        if isinstance(data.get("transactions"), list):
            found["transactions"] = transactions_from_list(data["transactions"])
        if isinstance(data.get("goals"), list):
            found["goals"] = goals_from_list(data["goals"])
        if isinstance(data.get("customQuotes"), list):
            found["custom_quotes"] = quotes_from_list(data["customQuotes"])
        if isinstance(data.get("config"), dict):
            found["config"] = merge_config(DEFAULT_CONFIG, data["config"])
        return Right(found)

    return parse_json(text).bind(collect)


def data_stats(state: FinanceState) -> DataStats:
    payload = json.dumps({
        "transactions": [transaction_to_dict(t) for t in state.transactions],
        "goals": [goal_to_dict(g) for g in state.goals],
        "customQuotes": [quote_to_dict(q) for q in state.custom_quotes],
    })
    return DataStats(
        transactions=len(state.transactions),
        goals=len(state.goals),
        custom_quotes=len(state.custom_quotes),
        size_kb=round(len(payload.encode("utf-8")) / 1024),
    )
