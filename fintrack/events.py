from datetime import datetime
from typing import Callable, Dict, List, NamedTuple

__all__ = ['STATE_CHANGED', 'DATA_IMPORTED', 'DATA_CLEARED', 'Event', 'EventBus']


class Event(NamedTuple):
    name: str
    ts: str
    payload: dict


Handler = Callable[[Event, dict], dict]


class EventBus:
    def __init__(self):
        self._subscribers: Dict[str, List[Handler]] = {}

    def subscribe(self, name: str, handler: Handler) -> None:
        self._subscribers.setdefault(name, []).append(handler)

    def publish(self, name: str, payload: dict) -> List[dict]:
        if name not in self._subscribers:
            return []

        event = Event(
            name=name,
            ts=datetime.now().isoformat(),
            payload=payload
        )

        return [handler(event, payload) for handler in list(self._subscribers[name])]

    def unsubscribe(self, name: str, handler: Handler) -> None:
        if handler in self._subscribers.get(name, []):
            self._subscribers[name].remove(handler)


# payload: {"state": FinanceState, "changed": tuple of collection names}
STATE_CHANGED = "STATE_CHANGED"
DATA_IMPORTED = "DATA_IMPORTED"
DATA_CLEARED = "DATA_CLEARED"
