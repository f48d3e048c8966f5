from datetime import datetime
from typing import Iterable, Literal

import numpy as np
import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from fintrack.aggregates import Window, expenses_by_category, filter_by_window
from fintrack.domain import Transaction

Period = Literal["week", "month", "year"]

PERIOD_FORMATS = {"week": "%Y-%m-%d", "month": "%Y-%m", "year": "%Y"}


def expense_breakdown_frame(
    trans: Iterable[Transaction], window: Window, now: datetime
) -> pd.DataFrame:
    breakdown = expenses_by_category(filter_by_window(trans, window, now))
    df = pd.DataFrame(list(breakdown.items()), columns=["category", "amount"])
    return df.sort_values("amount", ascending=False, kind="stable").reset_index(drop=True)


def period_labels(period: Period, now: datetime) -> list[str]:
    today = pd.Timestamp(now).normalize()
    if period == "week":
        stamps = pd.date_range(end=today, periods=7, freq="D")
    elif period == "month":
        stamps = pd.date_range(end=today.replace(day=1), periods=12, freq="MS")
    elif period == "year":
        stamps = pd.date_range(end=today.replace(month=1, day=1), periods=5, freq="YS")
    else:
        raise ValueError(f"unknown period {period!r}")
    return [s.strftime(PERIOD_FORMATS[period]) for s in stamps]


def income_vs_expense_frame(
    trans: Iterable[Transaction], period: Period, now: datetime
) -> pd.DataFrame:
    """Income, expenses and net per period for the chart's time axis."""
    labels = period_labels(period, now)
    rows = [{"date": t.date, "type": t.type, "amount": t.amount} for t in trans]
    df = pd.DataFrame(rows, columns=["date", "type", "amount"])
    df["date"] = pd.to_datetime(df["date"].str[:10], errors="coerce", format="%Y-%m-%d")
    df = df.dropna(subset=["date"])

    if df.empty:
        income = pd.Series(np.zeros(len(labels)), index=labels)
        expenses = pd.Series(np.zeros(len(labels)), index=labels)
    else:
        df["period"] = df["date"].dt.strftime(PERIOD_FORMATS[period])
        table = (
            df.pivot_table(index="period", columns="type", values="amount", aggfunc="sum", fill_value=0.0)
            .reindex(index=labels, columns=["income", "expense"], fill_value=0.0)
        )
        income, expenses = table["income"], table["expense"]

    out = pd.DataFrame({
        "period": labels,
        "income": income.to_numpy(dtype=float),
        "expenses": expenses.to_numpy(dtype=float),
    })
    out["net"] = out["income"] - out["expenses"]
    return out


def expense_figure(frame: pd.DataFrame, kind: Literal["pie", "bar"] = "pie") -> go.Figure:
    if kind == "bar":
        fig = px.bar(frame, x="category", y="amount", title="Expenses by Category", template="plotly_dark")
    else:
        fig = px.pie(frame, values="amount", names="category", title="Expenses by Category")
    fig.update_layout(margin=dict(t=40, b=10, l=10, r=10))
    return fig


def income_expense_figure(frame: pd.DataFrame) -> go.Figure:
    fig = go.Figure()
    fig.add_trace(go.Bar(x=frame["period"], y=frame["income"], name="Income"))
    fig.add_trace(go.Bar(x=frame["period"], y=frame["expenses"], name="Expenses"))
    fig.add_trace(go.Scatter(x=frame["period"], y=frame["net"], mode="lines+markers", name="Net"))
    fig.update_layout(barmode="group", template="plotly_dark", margin=dict(t=30, b=10, l=10, r=10))
    return fig
