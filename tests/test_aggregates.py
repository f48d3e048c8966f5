from datetime import datetime

import pytest

from fintrack.aggregates import (
    average_expense,
    current_balance,
    days_until,
    expenses_by_category,
    filter_by_window,
    goal_progress,
    goal_status,
    quick_stats,
    recent_transactions,
    summarize,
    top_categories,
    total_expenses,
    total_income,
    unusual_expenses,
    window_cutoff,
)
from fintrack.domain import Goal, Transaction

NOW = datetime(2024, 6, 15, 12, 0)


def make_tx(tid, t_type, amount, date, category=None, source=None):
    if t_type == "income" and source is None:
        source = "Salary"
    if t_type == "expense" and category is None:
        category = "Food"
    return Transaction(tid, t_type, amount, date, source=source, category=category)


def make_goal(target, current, deadline, gid="g1"):
    return Goal(gid, "Vacation", target, current, deadline)


def test_scenario_overspending_totals():
    trans = (
        make_tx("t1", "income", 1000, "2024-01-01"),
        make_tx("t2", "expense", 1200, "2024-01-05", category="Food"),
    )
    s = summarize(trans)

    assert s.total_income == 1000
    assert s.total_expenses == 1200
    assert s.current_balance == -200
    assert s.is_overspending


def test_balance_is_income_minus_expenses():
    trans = (
        make_tx("t1", "income", 250.5, "2024-01-01"),
        make_tx("t2", "income", 100, "2024-01-02"),
        make_tx("t3", "expense", 75.25, "2024-01-03"),
    )
    assert current_balance(trans) == pytest.approx(total_income(trans) - total_expenses(trans))
    assert current_balance(trans) == pytest.approx(275.25)


def test_category_breakdown_sums_to_total_expenses():
    trans = (
        make_tx("t1", "expense", 10, "2024-01-01", category="Food"),
        make_tx("t2", "expense", 20, "2024-01-02", category="Transport"),
        make_tx("t3", "expense", 5, "2024-01-03", category="Food"),
        make_tx("t4", "income", 999, "2024-01-04"),
    )
    breakdown = expenses_by_category(trans)

    assert breakdown == {"Food": 15, "Transport": 20}
    assert sum(breakdown.values()) == total_expenses(trans)


def test_expense_without_category_counts_as_other():
    trans = (Transaction("t1", "expense", 40, "2024-01-01"),)
    assert expenses_by_category(trans) == {"Other": 40}


def test_empty_summary():
    s = summarize(())
    assert s.total_income == 0
    assert s.total_expenses == 0
    assert s.current_balance == 0
    assert dict(s.expenses_by_category) == {}
    assert not s.is_overspending


def test_summary_breakdown_is_read_only():
    s = summarize((make_tx("t1", "expense", 10, "2024-01-01"),))
    with pytest.raises(TypeError):
        s.expenses_by_category["Food"] = 0


def test_summarize_is_cached_for_same_tuple():
    trans = (make_tx("t1", "income", 10, "2024-01-01"),)
    assert summarize(trans) is summarize(trans)


def test_week_window_keeps_last_seven_days():
    trans = (
        make_tx("t1", "expense", 1, "2024-06-15"),
        make_tx("t2", "expense", 1, "2024-06-09"),
        make_tx("t3", "expense", 1, "2024-06-08"),
    )
    kept = filter_by_window(trans, "week", NOW)
    assert [t.id for t in kept] == ["t1", "t2"]


def test_month_and_year_windows_start_at_midnight():
    assert window_cutoff("month", NOW) == datetime(2024, 5, 15)
    assert window_cutoff("year", NOW) == datetime(2023, 6, 15)
    assert window_cutoff("all", NOW) is None


def test_month_window_clamps_to_end_of_shorter_month():
    assert window_cutoff("month", datetime(2024, 3, 31, 9, 30)) == datetime(2024, 2, 29)


def test_month_window_includes_cutoff_day():
    trans = (
        make_tx("t1", "expense", 1, "2024-05-15"),
        make_tx("t2", "expense", 1, "2024-05-14"),
    )
    assert [t.id for t in filter_by_window(trans, "month", NOW)] == ["t1"]


def test_all_window_keeps_everything_even_bad_dates():
    trans = (make_tx("t1", "expense", 1, "not-a-date"),)
    assert filter_by_window(trans, "all", NOW) == trans
    assert filter_by_window(trans, "year", NOW) == ()


def test_recent_transactions_newest_first_limited_to_five():
    trans = tuple(make_tx(f"t{i}", "expense", i + 1, f"2024-06-0{i + 1}") for i in range(7))
    recent = recent_transactions(trans)

    assert len(recent) == 5
    assert [t.id for t in recent] == ["t6", "t5", "t4", "t3", "t2"]


def test_goal_progress():
    assert goal_progress(make_goal(1000, 250, "2025-01-01")) == 25.0
    assert goal_progress(make_goal(500, 500, "2025-01-01")) == 100.0


def test_goal_progress_zero_target_is_complete():
    assert goal_progress(make_goal(0, 0, "2025-01-01")) == 100.0


def test_days_until_yesterday_is_minus_one():
    assert days_until("2024-06-14", NOW) == -1


def test_days_until_rounds_up():
    assert days_until("2024-06-16", NOW) == 1
    assert days_until("2024-06-22", NOW) == 7
    assert days_until("2024-06-15", datetime(2024, 6, 15)) == 0


def test_days_until_rejects_bad_date():
    with pytest.raises(ValueError):
        days_until("someday", NOW)


def test_goal_status():
    assert goal_status(make_goal(100, 100, "2024-01-01"), NOW) == "completed"
    assert goal_status(make_goal(100, 10, "2024-01-01"), NOW) == "overdue"
    assert goal_status(make_goal(100, 80, "2025-01-01"), NOW) == "almost there"
    assert goal_status(make_goal(100, 50, "2025-01-01"), NOW) == "on track"
    assert goal_status(make_goal(100, 10, "2025-01-01"), NOW) == "just started"


def test_average_expense_handles_no_expenses():
    assert average_expense(()) == 0.0
    assert average_expense((make_tx("t1", "income", 10, "2024-01-01"),)) == 0.0


def test_unusual_expenses_are_over_twice_the_recent_average():
    trans = (
        make_tx("t1", "expense", 10, "2024-06-10"),
        make_tx("t2", "expense", 10, "2024-06-11"),
        make_tx("t3", "expense", 10, "2024-06-12"),
        make_tx("t4", "expense", 100, "2024-06-13"),
        make_tx("t5", "expense", 5000, "2024-01-01"),  # outside the 30 day lookback
    )
    # recent average = 130 / 4 = 32.5
    assert [t.id for t in unusual_expenses(trans, NOW)] == ["t4"]


def test_unusual_expenses_empty():
    assert unusual_expenses((), NOW) == ()


def test_top_categories():
    shares = top_categories({"Food": 50, "Rent": 30, "Fun": 15, "Misc": 5}, 3)

    assert [s.category for s in shares] == ["Food", "Rent", "Fun"]
    assert shares[0].percentage == pytest.approx(50.0)
    assert len(shares) == 3


def test_top_categories_zero_total_has_zero_percentage():
    shares = top_categories({"Food": 0}, 3)
    assert shares[0].percentage == 0.0
    assert top_categories({}, 3) == []


def test_quick_stats():
    trans = (
        make_tx("t1", "income", 10, "2024-06-01"),
        make_tx("t2", "expense", 10, "2024-06-02", category="Food"),
        make_tx("t3", "expense", 10, "2024-01-02", category="Rent"),
    )
    stats = quick_stats(trans, NOW)

    assert stats.expense_categories == 2
    assert stats.income_count == 1
    assert stats.last_30_days_count == 2
