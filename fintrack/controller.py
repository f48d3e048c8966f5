import logging
import math
from dataclasses import replace
from datetime import datetime
from typing import Callable, Iterable, Optional, Tuple

from fintrack import transforms
from fintrack.aggregates import Summary, summarize
from fintrack.config import DEFAULT_CONFIG, AppConfig
from fintrack.domain import (
    CustomQuote,
    FinanceState,
    Goal,
    Notification,
    Transaction,
    TransactionType,
    WeeklyQuote,
)
from fintrack.events import DATA_CLEARED, DATA_IMPORTED, STATE_CHANGED, EventBus
from fintrack.export import parse_import
from fintrack.functional import (
    Either,
    Left,
    Right,
    find_by_id,
    validate_goal,
    validate_quote,
    validate_transaction,
)
from fintrack.notifications import derive_notifications
from fintrack.persistence import (
    CONFIG,
    CUSTOM_QUOTES,
    GOALS,
    TRANSACTIONS,
    PersistenceSubscriber,
    load_state,
)
from fintrack.quotes import WEEKLY_MOTIVATIONS, weekly_quote
from fintrack.storage import KeyValueStore

logger = logging.getLogger(__name__)


class FinanceController:
    """Single owner of the finance state.

    Every command builds a new FinanceState, stores it, and publishes
    STATE_CHANGED with the names of the collections it touched. Commands
    that receive invalid input log the reason and return the current state
    unchanged.
    """

    def __init__(self, bus: EventBus, state: Optional[FinanceState] = None,
                 clock: Callable[[], datetime] = datetime.now):
        self.bus = bus
        self.state = state or FinanceState()
        self.clock = clock

    def restore(self, state: FinanceState) -> FinanceState:
        """Replace the state without publishing (initial load)."""
        self.state = state
        return state

    def _commit(self, state: FinanceState, *changed: str) -> FinanceState:
        self.state = state
        self.bus.publish(STATE_CHANGED, {"state": state, "changed": changed})
        return state

    def _reject(self, what: str, error: dict) -> FinanceState:
        logger.warning("Rejected %s: %s", what, error.get("message", error))
        return self.state

    def _new_id(self, items: Iterable) -> str:
        return transforms.new_id((item.id for item in items), self.clock())

    # ---- transactions

    def add_transaction(
        self,
        t_type: TransactionType,
        amount: float,
        date: str,
        source: Optional[str] = None,
        category: Optional[str] = None,
        description: Optional[str] = None,
        tags: Iterable[str] = (),
    ) -> FinanceState:
        t = Transaction(
            id=self._new_id(self.state.transactions),
            type=t_type,
            amount=amount,
            date=date,
            source=source or None,
            category=category or None,
            description=description or None,
            tags=tuple(tags),
        )
        checked = validate_transaction(t)
        if checked.is_left():
            return self._reject("transaction", checked.get_error())
        trans = transforms.add_transaction(self.state.transactions, t)
        return self._commit(replace(self.state, transactions=trans), TRANSACTIONS)

    def update_transaction(self, updated: Transaction) -> FinanceState:
        if find_by_id(self.state.transactions, updated.id).is_none():
            return self.state
        checked = validate_transaction(updated)
        if checked.is_left():
            return self._reject("transaction update", checked.get_error())
        trans = transforms.update_transaction(self.state.transactions, updated)
        return self._commit(replace(self.state, transactions=trans), TRANSACTIONS)

    def delete_transaction(self, tid: str) -> FinanceState:
        if find_by_id(self.state.transactions, tid).is_none():
            return self.state
        trans = transforms.delete_transaction(self.state.transactions, tid)
        return self._commit(replace(self.state, transactions=trans), TRANSACTIONS)

    # ---- goals

    def add_goal(self, title: str, target_amount: float, deadline: str,
                 current_amount: float = 0) -> FinanceState:
        g = Goal(
            id=self._new_id(self.state.goals),
            title=title.strip(),
            target_amount=target_amount,
            current_amount=current_amount,
            deadline=deadline,
        )
        checked = validate_goal(g)
        if checked.is_left():
            return self._reject("goal", checked.get_error())
        return self._commit(replace(self.state, goals=transforms.add_goal(self.state.goals, g)), GOALS)

    def update_goal(self, gid: str, current_amount: float) -> FinanceState:
        if find_by_id(self.state.goals, gid).is_none() or not math.isfinite(current_amount):
            return self.state
        goals = transforms.update_goal(self.state.goals, gid, current_amount)
        return self._commit(replace(self.state, goals=goals), GOALS)

    def add_funds(self, gid: str, amount: float) -> FinanceState:
        if find_by_id(self.state.goals, gid).is_none() or not math.isfinite(amount):
            return self.state
        goals = transforms.add_funds(self.state.goals, gid, amount)
        return self._commit(replace(self.state, goals=goals), GOALS)

    # ---- custom quotes

    def add_custom_quote(self, text: str, author: str = "") -> FinanceState:
        q = CustomQuote(
            id=self._new_id(self.state.custom_quotes),
            text=text,
            author=author,
            date_added=self.clock().isoformat(),
        )
        checked = validate_quote(q)
        if checked.is_left():
            return self._reject("custom quote", checked.get_error())
        quotes = transforms.add_custom_quote(self.state.custom_quotes, q)
        return self._commit(replace(self.state, custom_quotes=quotes), CUSTOM_QUOTES)

    def update_custom_quote(self, qid: str, text: str, author: str = "") -> FinanceState:
        if find_by_id(self.state.custom_quotes, qid).is_none() or not text.strip():
            return self.state
        quotes = transforms.update_custom_quote(self.state.custom_quotes, qid, text, author)
        return self._commit(replace(self.state, custom_quotes=quotes), CUSTOM_QUOTES)

    def delete_custom_quote(self, qid: str) -> FinanceState:
        if find_by_id(self.state.custom_quotes, qid).is_none():
            return self.state
        quotes = transforms.delete_custom_quote(self.state.custom_quotes, qid)
        return self._commit(replace(self.state, custom_quotes=quotes), CUSTOM_QUOTES)

    # ---- settings and data management

    def update_config(self, config: AppConfig) -> FinanceState:
        return self._commit(replace(self.state, config=config), CONFIG)

    def reset_config(self) -> FinanceState:
        return self.update_config(DEFAULT_CONFIG)

    def apply_retention(self) -> FinanceState:
        days = self.state.config.data.data_retention_days
        trans = transforms.apply_retention(self.state.transactions, days, self.clock())
        if len(trans) == len(self.state.transactions):
            return self.state
        logger.info("Retention dropped %d transactions", len(self.state.transactions) - len(trans))
        return self._commit(replace(self.state, transactions=trans), TRANSACTIONS)

    def import_data(self, text: str) -> Either[str, FinanceState]:
        """Replace every collection present in the backup; leave the rest alone."""
        parsed = parse_import(text)
        if parsed.is_left():
            logger.error("Import failed: %s", parsed.get_error())
            return Left(parsed.get_error())
        found = parsed.get_or_else({})
        if not found:
            return Right(self.state)
        state = self._commit(replace(self.state, **found), *found)
        self.bus.publish(DATA_IMPORTED, {"state": state, "changed": tuple(found)})
        logger.info("Imported %s", ", ".join(found))
        return Right(state)

    def clear_data(self) -> FinanceState:
        self.state = FinanceState()
        self.bus.publish(DATA_CLEARED, {"state": self.state})
        return self.state

    # ---- derived views

    def summary(self) -> Summary:
        return summarize(self.state.transactions)

    def notifications(self) -> Tuple[Notification, ...]:
        return derive_notifications(
            self.summary(), self.state.goals, self.clock(), self.state.config.notifications
        )

    def weekly_quote(self) -> Optional[WeeklyQuote]:
        return weekly_quote(
            self.clock(), WEEKLY_MOTIVATIONS, self.state.custom_quotes, self.state.config.quotes
        )


def create_controller(store: KeyValueStore,
                      clock: Callable[[], datetime] = datetime.now) -> FinanceController:
    """Load the saved state and wire the store up as a persistence subscriber."""
    bus = EventBus()
    subscriber = PersistenceSubscriber(store)
    bus.subscribe(STATE_CHANGED, subscriber.on_state_changed)
    bus.subscribe(DATA_CLEARED, subscriber.on_data_cleared)

    controller = FinanceController(bus, clock=clock)
    controller.restore(load_state(store))
    subscriber.mark_loaded()
    controller.apply_retention()
    return controller
