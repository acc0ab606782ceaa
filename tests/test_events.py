from rudolf.blockchain.core.events import Event, EventBus
from rudolf.protocol.types.common import EventType


def test_subscribe_and_emit():
    bus = EventBus()
    received = []
    bus.subscribe("Transfer", lambda **data: received.append(data))

    bus.emit("Transfer", sender="a", recipient="b", amount=1)
    bus.emit("Approval", owner="a", spender="b", amount=1)

    assert received == [{"sender": "a", "recipient": "b", "amount": 1}]


def test_enum_and_string_keys_are_equivalent():
    bus = EventBus()
    received = []
    bus.subscribe(EventType.SNAPSHOT, lambda **data: received.append(data["snapshot_id"]))
    bus.emit("Snapshot", snapshot_id=3)
    assert received == [3]


def test_wildcard_receives_event_type():
    bus = EventBus()
    received = []
    bus.subscribe("*", lambda **data: received.append(data))
    bus.publish([
        Event(event_type=EventType.SNAPSHOT, data={"snapshot_id": 1}),
        Event(event_type=EventType.XMAS_AIRDROP, data={"year": 2021, "amount": 5}),
    ])
    assert received == [
        {"event_type": "Snapshot", "snapshot_id": 1},
        {"event_type": "XmasAirdrop", "year": 2021, "amount": 5},
    ]


def test_failing_subscriber_does_not_break_delivery():
    bus = EventBus()
    received = []

    def broken(**data):
        raise RuntimeError("boom")

    bus.subscribe("Paused", broken)
    bus.subscribe("Paused", lambda **data: received.append(data["account"]))
    bus.emit("Paused", account="owner")
    assert received == ["owner"]


def test_unsubscribe_and_clear():
    bus = EventBus()
    received = []
    callback = lambda **data: received.append(data)

    bus.subscribe("Transfer", callback)
    bus.unsubscribe("Transfer", callback)
    bus.unsubscribe("Transfer", callback)
    bus.emit("Transfer", amount=1)
    assert received == []

    bus.subscribe("Transfer", callback)
    bus.subscribe("Approval", callback)
    bus.clear("Transfer")
    assert "Transfer" not in bus.listeners
    bus.clear()
    assert bus.listeners == {}
