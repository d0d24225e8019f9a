import json
import logging
from decimal import Decimal

from bountycounter.events.bus import EventBus
from bountycounter.events.schema import BountyUpdated, EntitySnapshot, TrackingStarted, Undocking
from bountycounter.ledger import TrackedEntity


def snap(**kw):
    ent = TrackedEntity(name="Alice", source_path="/logs/a.txt", read_offset=10, **kw)
    return EntitySnapshot.of(ent)


def test_notification_models():
    n = BountyUpdated(entity=snap(lifetime_total=Decimal("1500.00"), session_total=Decimal("2000")), increment=Decimal("1500.00"))
    assert n.event_type == "bounty_updated"
    assert n.ts > 0
    js = json.loads(n.model_dump_json())
    assert js["entity"]["name"] == "Alice"
    assert Decimal(js["increment"]) == Decimal("1500.00")
    assert TrackingStarted(entity=snap()).event_type == "tracking_started"
    assert Undocking(entity=snap()).event_type == "undocking"


def test_publish_in_order_and_unsubscribe():
    bus = EventBus()
    got = []
    a = bus.subscribe(lambda n: got.append(("a", n.event_type)))
    bus.subscribe(lambda n: got.append(("b", n.event_type)))
    bus.publish(TrackingStarted(entity=snap()))
    bus.unsubscribe(a)
    bus.publish(Undocking(entity=snap()))
    assert got == [("a", "tracking_started"), ("b", "tracking_started"), ("b", "undocking")]


def test_publish_logs_json_and_survives_bad_subscriber(caplog):
    bus = EventBus()
    got = []

    def bad(note):
        raise ValueError("nope")

    bus.subscribe(bad)
    bus.subscribe(got.append)
    with caplog.at_level(logging.INFO, logger="bountycounter.events"):
        bus.publish(TrackingStarted(entity=snap()))
    assert len(got) == 1
    assert any('"tracking_started"' in r.getMessage() for r in caplog.records)
    assert any(r.levelno == logging.ERROR for r in caplog.records)
