from datetime import datetime

from fintrack.domain import CustomQuote, Goal, Transaction
from fintrack.transforms import (
    add_custom_quote,
    add_funds,
    add_goal,
    add_transaction,
    apply_retention,
    clamp_amount,
    delete_custom_quote,
    delete_transaction,
    new_id,
    update_custom_quote,
    update_goal,
    update_transaction,
)

NOW = datetime(2024, 6, 15, 12, 0)


def make_tx(tid, amount=10, date="2024-06-01"):
    return Transaction(tid, "expense", amount, date, category="Food")


def test_add_transaction_returns_new_tuple():
    trans = (make_tx("t1"),)
    new_trans = add_transaction(trans, make_tx("t2"))

    assert len(new_trans) == 2
    assert len(trans) == 1


def test_update_and_delete_transaction():
    trans = (make_tx("t1"), make_tx("t2"))
    updated = update_transaction(trans, make_tx("t2", amount=99))

    assert updated[1].amount == 99
    assert trans[1].amount == 10
    assert [t.id for t in delete_transaction(updated, "t1")] == ["t2"]


def test_new_id_skips_taken_ids():
    first = new_id((), NOW)
    second = new_id((first,), NOW)

    assert second == str(int(first) + 1)


def test_clamp_amount():
    goal = Goal("g1", "Car", 100, 0, "2025-01-01")
    assert clamp_amount(goal, -5) == 0
    assert clamp_amount(goal, 50) == 50
    assert clamp_amount(goal, 500) == 100


def test_update_goal_clamps():
    goals = add_goal((), Goal("g1", "Car", 100, 0, "2025-01-01"))

    assert update_goal(goals, "g1", 150)[0].current_amount == 100
    assert update_goal(goals, "g1", -10)[0].current_amount == 0
    assert goals[0].current_amount == 0


def test_add_funds_accumulates_and_clamps():
    goals = (Goal("g1", "Car", 100, 40, "2025-01-01"),)

    assert add_funds(goals, "g1", 30)[0].current_amount == 70
    assert add_funds(goals, "g1", 500)[0].current_amount == 100
    assert add_funds(goals, "g1", -100)[0].current_amount == 0


def test_unknown_goal_id_changes_nothing():
    goals = (Goal("g1", "Car", 100, 40, "2025-01-01"),)
    assert update_goal(goals, "missing", 10) == goals


def test_custom_quote_author_defaults_to_unknown():
    quotes = add_custom_quote((), CustomQuote("q1", "  Keep going ", "  ", "2024-01-01"))

    assert quotes[0].text == "Keep going"
    assert quotes[0].author == "Unknown"


def test_update_and_delete_custom_quote():
    quotes = (CustomQuote("q1", "Old", "Me", "2024-01-01"),)
    updated = update_custom_quote(quotes, "q1", "New", "You")

    assert (updated[0].text, updated[0].author) == ("New", "You")
    assert delete_custom_quote(updated, "q1") == ()


def test_retention_zero_keeps_everything():
    trans = (make_tx("t1", date="2000-01-01"),)
    assert apply_retention(trans, 0, NOW) == trans


def test_retention_drops_old_transactions():
    trans = (make_tx("t1", date="2024-06-01"), make_tx("t2", date="2023-01-01"))
    assert [t.id for t in apply_retention(trans, 365, NOW)] == ["t1"]
