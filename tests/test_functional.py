import math

from fintrack.domain import CustomQuote, Goal, Transaction
from fintrack.functional import (
    Left,
    Nothing,
    Right,
    Some,
    find_by_id,
    parse_json,
    validate_goal,
    validate_quote,
    validate_transaction,
)


def test_find_by_id():
    items = (Goal("g1", "Car", 100, 0, "2025-01-01"),)

    assert find_by_id(items, "g1").is_some()
    assert find_by_id(items, "nope") == Nothing()
    assert find_by_id(items, "nope").get_or_else("default") == "default"


def test_maybe_map():
    assert Some(2).map(lambda x: x * 3) == Some(6)
    assert Nothing().map(lambda x: x * 3) == Nothing()


def test_either_bind_short_circuits():
    assert Right(2).bind(lambda x: Right(x + 1)) == Right(3)
    assert Left("bad").bind(lambda x: Right(x + 1)) == Left("bad")
    assert Left("bad").get_error() == "bad"


def test_parse_json():
    assert parse_json('{"a": 1}') == Right({"a": 1})
    assert parse_json("{oops").is_left()


def test_valid_transactions():
    income = Transaction("t1", "income", 100, "2024-01-01", source="Salary")
    expense = Transaction("t2", "expense", 5.5, "2024-01-01", category="Food")

    assert validate_transaction(income) == Right(income)
    assert validate_transaction(expense) == Right(expense)


def test_invalid_transactions():
    cases = {
        "invalid_type": Transaction("t", "refund", 10, "2024-01-01"),
        "invalid_amount": Transaction("t", "expense", 0, "2024-01-01", category="Food"),
        "invalid_date": Transaction("t", "expense", 10, "yesterday", category="Food"),
        "missing_source": Transaction("t", "income", 10, "2024-01-01"),
        "missing_category": Transaction("t", "expense", 10, "2024-01-01", category="  "),
    }
    for error, t in cases.items():
        result = validate_transaction(t)
        assert result.is_left()
        assert result.get_error()["error"] == error


def test_non_finite_amounts_rejected():
    for amount in (math.nan, math.inf, -5, True):
        t = Transaction("t", "expense", amount, "2024-01-01", category="Food")
        assert validate_transaction(t).get_error()["error"] == "invalid_amount"


def test_validate_goal():
    assert validate_goal(Goal("g", "Car", 100, 0, "2025-01-01")).is_right()
    assert validate_goal(Goal("g", " ", 100, 0, "2025-01-01")).get_error()["error"] == "missing_title"
    assert validate_goal(Goal("g", "Car", 0, 0, "2025-01-01")).get_error()["error"] == "invalid_amount"
    assert validate_goal(Goal("g", "Car", 10, 0, "later")).get_error()["error"] == "invalid_date"


def test_validate_quote():
    assert validate_quote(CustomQuote("q", "", "Me", "2024-01-01")).is_left()
    assert validate_quote(CustomQuote("q", "Hi", "Me", "2024-01-01")).is_right()
