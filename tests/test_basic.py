"""
Basic smoke tests for world-vacancy core components.
"""

from world_vacancy import Event, EventBus, EventFilter


def test_event_creation():
    """Test basic Event dataclass creation."""
    event = Event(type="player.joined", source="server", zone="world", entity_id="steve")

    assert event.type == "player.joined"
    assert event.zone == "world"
    assert event.payload == {}
    assert event.timestamp is not None


def test_event_bus_publish_subscribe():
    """Test EventBus basic publish/subscribe."""
    bus = EventBus()
    received = []

    bus.subscribe(received.append)
    bus.publish(Event(type="player.joined", source="server", zone="world"))

    assert len(received) == 1
    assert received[0].type == "player.joined"


def test_event_filter_by_type():
    """Test EventFilter filtering by event type."""
    bus = EventBus()
    received = []

    bus.subscribe(received.append, EventFilter(event_type="player.quit"))
    bus.publish(Event(type="player.joined", source="server", zone="world"))
    bus.publish(Event(type="player.quit", source="server", zone="world"))

    assert [e.type for e in received] == ["player.quit"]


def test_event_filter_by_zone_matches_transfer_source():
    """A zone filter also matches transfers out of that zone."""
    zone_filter = EventFilter(zone="world_nether")

    into = Event(type="player.changed_zone", source="server", zone="world_nether")
    out_of = Event(
        type="player.changed_zone",
        source="server",
        zone="world",
        payload={"from_zone": "world_nether"},
    )
    elsewhere = Event(type="player.joined", source="server", zone="world")

    assert zone_filter.matches(into)
    assert zone_filter.matches(out_of)
    assert not zone_filter.matches(elsewhere)


def test_event_bus_error_handling():
    """Test that handler errors don't crash the bus."""
    bus = EventBus()
    received = []

    def bad_handler(event):
        raise RuntimeError("Intentional error")

    bus.subscribe(bad_handler)
    bus.subscribe(received.append)

    bus.publish(Event(type="player.quit", source="server"))

    assert len(received) == 1


def test_event_bus_unsubscribe():
    """Test removing a handler."""
    bus = EventBus()
    received = []

    def handler(event):
        received.append(event)

    bus.subscribe(handler)
    bus.unsubscribe(handler)
    bus.publish(Event(type="player.quit", source="server"))

    assert received == []


def test_event_bus_unsubscribe_during_publish():
    """A handler removing itself does not skip the handlers after it."""
    bus = EventBus()
    received = []

    def one_shot(event):
        received.append("one_shot")
        bus.unsubscribe(one_shot)

    bus.subscribe(one_shot)
    bus.subscribe(lambda event: received.append("steady"))

    bus.publish(Event(type="player.joined", source="server"))
    bus.publish(Event(type="player.joined", source="server"))

    assert received == ["one_shot", "steady", "steady"]


def test_event_bus_subscribe_during_publish():
    """A handler added while publishing starts with the next event."""
    bus = EventBus()
    late = []

    def subscriber(event):
        if not late:
            bus.subscribe(late.append)

    bus.subscribe(subscriber)

    first = Event(type="player.joined", source="server")
    second = Event(type="player.quit", source="server")
    bus.publish(first)
    assert late == []

    bus.publish(second)
    assert late == [second]
