"""Saving and restoring the finance state through a KeyValueStore.

Each collection is its own versioned blob::

    {"schemaVersion": 1, "data": [...]}

Blobs written before versioning existed are bare JSON arrays (or a bare
object for the config) and are read as version 0, then migrated forward.
"""

import json
import logging
from typing import Any, Callable, Iterable

from fintrack.config import DEFAULT_CONFIG, config_to_dict, merge_config
from fintrack.domain import FinanceState
from fintrack.events import Event
from fintrack.functional import Either, Left, Right, parse_json
from fintrack.serialization import (
    goal_to_dict,
    goals_from_list,
    quote_to_dict,
    quotes_from_list,
    transaction_to_dict,
    transactions_from_list,
)
from fintrack.storage import DEFAULT_TTL_DAYS, KeyValueStore

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1

TRANSACTIONS = "transactions"
GOALS = "goals"
CUSTOM_QUOTES = "custom_quotes"
CONFIG = "config"
COLLECTIONS = (TRANSACTIONS, GOALS, CUSTOM_QUOTES, CONFIG)

KEYS = {
    TRANSACTIONS: "finance-transactions",
    GOALS: "finance-goals",
    CUSTOM_QUOTES: "finance-custom-quotes",
    CONFIG: "finance-app-config",
}


def _records_only(data: Any) -> list:
    if not isinstance(data, list):
        raise ValueError(f"expected a list, got {type(data).__name__}")
    return [item for item in data if isinstance(item, dict)]


def _migrate_0_to_1(collection: str, data: Any) -> Any:
    if collection == CONFIG:
        if not isinstance(data, dict):
            raise ValueError(f"expected an object, got {type(data).__name__}")
        return data
    records = _records_only(data)
    if collection == TRANSACTIONS:
        records = [{**r, "tags": r.get("tags") or []} for r in records]
    return records


MIGRATIONS: dict[int, Callable[[str, Any], Any]] = {
    0: _migrate_0_to_1,
}


def migrate(collection: str, version: int, data: Any) -> Any:
    """Upgrade ``data`` one schema step at a time up to SCHEMA_VERSION."""
    if version > SCHEMA_VERSION:
        logger.warning(
            "%s was saved with schema %d, newer than %d; reading it as-is",
            collection, version, SCHEMA_VERSION,
        )
        return data
    while version < SCHEMA_VERSION:
        data = MIGRATIONS[version](collection, data)
        version += 1
    return data


def encode_blob(collection: str, state: FinanceState) -> str:
    if collection == TRANSACTIONS:
        data = [transaction_to_dict(t) for t in state.transactions]
    elif collection == GOALS:
        data = [goal_to_dict(g) for g in state.goals]
    elif collection == CUSTOM_QUOTES:
        data = [quote_to_dict(q) for q in state.custom_quotes]
    elif collection == CONFIG:
        data = config_to_dict(state.config)
    else:
        raise KeyError(collection)
    return json.dumps({"schemaVersion": SCHEMA_VERSION, "data": data})


def decode_blob(collection: str, text: str) -> Either[str, Any]:
    def unwrap(parsed: Any) -> Either[str, Any]:
        if isinstance(parsed, dict) and "schemaVersion" in parsed:
            version, data = parsed.get("schemaVersion"), parsed.get("data")
            if not isinstance(version, int) or isinstance(version, bool) or version < 0:
                return Left(f"bad schemaVersion {version!r}")
        else:
            version, data = 0, parsed
        try:
            return Right(migrate(collection, version, data))
        except (KeyError, ValueError) as e:
            return Left(f"cannot migrate {collection}: {e}")

    return parse_json(text).bind(unwrap)


def load_state(store: KeyValueStore) -> FinanceState:
    """Read every collection; anything missing or unreadable falls back to empty/default."""
    loaded: dict[str, Any] = {}
    for collection in COLLECTIONS:
        text = store.get(KEYS[collection])
        if text is None:
            continue
        result = decode_blob(collection, text)
        if result.is_left():
            logger.error("Failed to parse %s from store: %s", collection, result.get_error())
            continue
        data = result.get_or_else(None)
        expected = dict if collection == CONFIG else list
        if not isinstance(data, expected):
            logger.error("Ignoring stored %s: expected %s, got %s", collection, expected.__name__, type(data).__name__)
            continue
        loaded[collection] = data

    state = FinanceState(
        transactions=transactions_from_list(loaded.get(TRANSACTIONS, [])),
        goals=goals_from_list(loaded.get(GOALS, [])),
        custom_quotes=quotes_from_list(loaded.get(CUSTOM_QUOTES, [])),
        config=merge_config(DEFAULT_CONFIG, loaded.get(CONFIG, {})),
    )
    logger.info(
        "Loaded %d transactions, %d goals, %d custom quotes",
        len(state.transactions), len(state.goals), len(state.custom_quotes),
    )
    return state


def save_collections(
    store: KeyValueStore,
    state: FinanceState,
    collections: Iterable[str] = COLLECTIONS,
    ttl_days: int = DEFAULT_TTL_DAYS,
) -> None:
    for collection in collections:
        store.set(KEYS[collection], encode_blob(collection, state), ttl_days)


def clear_store(store: KeyValueStore) -> None:
    for key in KEYS.values():
        store.delete(key)


class PersistenceSubscriber:
    """Event handler that writes changed collections back to the store.

    Events published before ``mark_loaded`` are ignored so that the empty
    initial state never overwrites data that has not been read yet.
    """

    def __init__(self, store: KeyValueStore, ttl_days: int = DEFAULT_TTL_DAYS):
        self.store = store
        self.ttl_days = ttl_days
        self.loaded = False

    def mark_loaded(self) -> None:
        self.loaded = True

    def on_state_changed(self, event: Event, payload: dict) -> dict:
        if not self.loaded:
            return {"skipped": True}
        changed = tuple(payload.get("changed", COLLECTIONS))
        save_collections(self.store, payload["state"], changed, self.ttl_days)
        logger.debug("Saved %s", ", ".join(changed))
        return {"saved": changed}

    def on_data_cleared(self, event: Event, payload: dict) -> dict:
        clear_store(self.store)
        logger.info("Cleared all stored data")
        return {"cleared": True}
