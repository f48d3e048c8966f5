from fintrack.events import STATE_CHANGED, Event, EventBus


def test_publish_calls_subscribers_in_order():
    bus = EventBus()
    seen = []

    def first(event: Event, payload: dict) -> dict:
        seen.append(("first", event.name, payload["n"]))
        return {"ok": 1}

    def second(event: Event, payload: dict) -> dict:
        seen.append(("second", event.name, payload["n"]))
        return {"ok": 2}

    bus.subscribe(STATE_CHANGED, first)
    bus.subscribe(STATE_CHANGED, second)
    results = bus.publish(STATE_CHANGED, {"n": 7})

    assert results == [{"ok": 1}, {"ok": 2}]
    assert seen == [("first", STATE_CHANGED, 7), ("second", STATE_CHANGED, 7)]


def test_publish_without_subscribers():
    assert EventBus().publish("NOBODY", {}) == []


def test_unsubscribe():
    bus = EventBus()

    def handler(event, payload):
        return {"called": True}

    bus.subscribe(STATE_CHANGED, handler)
    bus.unsubscribe(STATE_CHANGED, handler)
    bus.unsubscribe(STATE_CHANGED, handler)

    assert bus.publish(STATE_CHANGED, {}) == []
