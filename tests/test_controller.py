import json
from dataclasses import replace
from datetime import datetime

from fintrack.config import DEFAULT_CONFIG, update_section
from fintrack.controller import FinanceController, create_controller
from fintrack.events import DATA_IMPORTED, EventBus
from fintrack.export import backup
from fintrack.persistence import GOALS, KEYS, TRANSACTIONS, load_state
from fintrack.storage import MemoryStore

NOW = datetime(2024, 6, 15, 12, 0)


def clock():
    return NOW


def make_controller():
    store = MemoryStore(clock)
    return create_controller(store, clock), store


def test_add_transaction_persists():
    ctl, store = make_controller()
    ctl.add_transaction("expense", 25, "2024-06-10", category="Food", tags=["Essential"])

    assert len(ctl.state.transactions) == 1
    assert ctl.state.transactions[0].tags == ("Essential",)
    assert load_state(store).transactions == ctl.state.transactions


def test_invalid_transaction_is_a_no_op():
    ctl, store = make_controller()
    before = ctl.state

    assert ctl.add_transaction("expense", -5, "2024-06-10", category="Food") is before
    assert ctl.add_transaction("income", 5, "2024-06-10") is before
    assert store.get(KEYS[TRANSACTIONS]) is None


def test_ids_are_unique_within_one_clock_tick():
    ctl, _ = make_controller()
    ctl.add_transaction("income", 1, "2024-06-10", source="Gift")
    ctl.add_transaction("income", 2, "2024-06-10", source="Gift")

    ids = [t.id for t in ctl.state.transactions]
    assert len(set(ids)) == 2


def test_update_and_delete_transaction():
    ctl, _ = make_controller()
    ctl.add_transaction("expense", 25, "2024-06-10", category="Food")
    t = ctl.state.transactions[0]

    ctl.update_transaction(replace(t, amount=30))
    assert ctl.state.transactions[0].amount == 30

    ctl.delete_transaction(t.id)
    assert ctl.state.transactions == ()


def test_unknown_ids_are_ignored():
    ctl, _ = make_controller()
    before = ctl.state

    assert ctl.delete_transaction("missing") is before
    assert ctl.update_goal("missing", 10) is before
    assert ctl.add_funds("missing", 10) is before
    assert ctl.delete_custom_quote("missing") is before


def test_goal_progress_is_clamped():
    ctl, _ = make_controller()
    ctl.add_goal("Car", 1000, "2025-01-01")
    gid = ctl.state.goals[0].id

    ctl.update_goal(gid, 5000)
    assert ctl.state.goals[0].current_amount == 1000

    ctl.update_goal(gid, 100)
    ctl.add_funds(gid, 50)
    assert ctl.state.goals[0].current_amount == 150


def test_invalid_goal_rejected():
    ctl, _ = make_controller()
    ctl.add_goal("  ", 1000, "2025-01-01")
    ctl.add_goal("Car", 0, "2025-01-01")

    assert ctl.state.goals == ()


def test_custom_quotes():
    ctl, _ = make_controller()
    ctl.add_custom_quote("  Stay the course  ")
    ctl.add_custom_quote("   ")

    assert len(ctl.state.custom_quotes) == 1
    q = ctl.state.custom_quotes[0]
    assert (q.text, q.author) == ("Stay the course", "Unknown")

    ctl.update_custom_quote(q.id, "Stay", "Jack")
    assert ctl.state.custom_quotes[0].author == "Jack"


def test_state_survives_restart():
    ctl, store = make_controller()
    ctl.add_transaction("income", 100, "2024-06-10", source="Salary")
    ctl.add_goal("Car", 1000, "2025-01-01")
    ctl.update_config(update_section(DEFAULT_CONFIG, "quotes", change_frequency="daily"))

    again = create_controller(store, clock)
    assert again.state == ctl.state


def test_notifications_and_summary():
    ctl, _ = make_controller()
    ctl.add_transaction("income", 1000, "2024-01-01", source="Salary")
    ctl.add_transaction("expense", 1200, "2024-01-05", category="Food")

    assert ctl.summary().current_balance == -200
    assert [n.type for n in ctl.notifications()] == ["overspending"]


def test_weekly_quote_comes_from_builtins():
    ctl, _ = make_controller()
    quote = ctl.weekly_quote()

    assert quote is not None
    assert not quote.is_custom


def test_import_replaces_collections():
    source, _ = make_controller()
    source.add_transaction("income", 100, "2024-06-10", source="Salary")
    source.add_goal("Car", 1000, "2025-01-01")
    text = backup(source.state, NOW).content

    ctl, store = make_controller()
    ctl.add_transaction("expense", 5, "2024-06-10", category="Food")
    imported = []
    ctl.bus.subscribe(DATA_IMPORTED, lambda event, payload: imported.append(payload["changed"]) or {})
    result = ctl.import_data(text)

    assert result.is_right()
    assert ctl.state == source.state
    assert load_state(store) == source.state
    assert set(imported[0]) == {"transactions", "goals", "custom_quotes", "config"}


def test_import_keeps_collections_missing_from_file():
    ctl, _ = make_controller()
    ctl.add_goal("Car", 1000, "2025-01-01")
    ctl.import_data(json.dumps({"transactions": []}))

    assert len(ctl.state.goals) == 1


def test_bad_import_leaves_state_alone():
    ctl, _ = make_controller()
    ctl.add_goal("Car", 1000, "2025-01-01")
    before = ctl.state

    assert ctl.import_data("{broken").is_left()
    assert ctl.import_data("[1, 2]").is_left()
    assert ctl.state is before


def test_clear_data():
    ctl, store = make_controller()
    ctl.add_goal("Car", 1000, "2025-01-01")
    ctl.clear_data()

    assert ctl.state.goals == ()
    assert store.get(KEYS[GOALS]) is None


def test_retention_applied_on_start():
    ctl, store = make_controller()
    ctl.add_transaction("expense", 5, "2020-01-01", category="Food")
    ctl.add_transaction("expense", 5, "2024-06-01", category="Food")
    ctl.update_config(update_section(ctl.state.config, "data", data_retention_days=365))

    again = create_controller(store, clock)
    assert [t.date for t in again.state.transactions] == ["2024-06-01"]


def test_controller_without_store_still_works():
    ctl = FinanceController(EventBus(), clock=clock)
    ctl.add_goal("Car", 1000, "2025-01-01")

    assert len(ctl.state.goals) == 1


def test_startup_survives_unknown_schema_version():
    store = MemoryStore(clock)
    store.set(KEYS[GOALS], json.dumps({"schemaVersion": -1, "data": []}))

    assert create_controller(store, clock).state.goals == ()


def test_import_skips_non_finite_amounts():
    ctl, store = make_controller()
    text = (
        '{"transactions": ['
        '{"id": "t1", "type": "income", "amount": NaN, "date": "2024-06-01", "source": "Salary"},'
        '{"id": "t2", "type": "expense", "amount": Infinity, "date": "2024-06-02", "category": "Food"},'
        '{"id": "t3", "type": "expense", "amount": 20, "date": "2024-06-03", "category": "Food"}'
        ']}'
    )

    assert ctl.import_data(text).is_right()
    assert [t.id for t in ctl.state.transactions] == ["t3"]
    assert ctl.summary().current_balance == -20
    assert "NaN" not in store.get(KEYS[TRANSACTIONS])
