"""Tests for server adapters and command rendering."""

import pytest

from world_vacancy.modules.vacancy import (
    Command,
    ConsoleServerAdapter,
    MockServerAdapter,
    OccupancyTracker,
    format_console_command,
)


class RecordingConsoleAdapter(ConsoleServerAdapter):
    """Console adapter that records dispatched lines."""

    def __init__(self, command_prefix="viewdistancetweaks"):
        super().__init__(command_prefix)
        self.lines = []

    def list_occupants(self, zone):
        return frozenset()

    def dispatch_console(self, line):
        self.lines.append(line)


class TestFormatConsoleCommand:
    def test_reload(self):
        assert format_console_command(Command.reload()) == "viewdistancetweaks reload"

    def test_view_distance(self):
        line = format_console_command(Command.set_view_distance("world_nether", 4))
        assert line == "viewdistancetweaks viewdistance 4 world_nether"

    def test_sim_distance_with_prefix(self):
        line = format_console_command(Command.set_sim_distance("world_nether", 3), prefix="vdt")
        assert line == "vdt simulationdistance 3 world_nether"

    def test_unknown_command(self):
        with pytest.raises(ValueError):
            format_console_command(Command("explode"))

    def test_missing_arguments(self):
        with pytest.raises(ValueError):
            format_console_command(Command("set-view-distance", "world"))


def test_console_adapter_dispatches_rendered_lines():
    adapter = RecordingConsoleAdapter()

    adapter.execute_command(Command.reload())
    adapter.execute_command(Command.set_view_distance("world", 6))

    assert adapter.lines == [
        "viewdistancetweaks reload",
        "viewdistancetweaks viewdistance 6 world",
    ]
    assert adapter.is_subsystem_available() is True


class TestMockServerAdapter:
    def test_place_move_remove(self):
        adapter = MockServerAdapter(["world", "world_nether"])

        adapter.place("steve", "world")
        assert adapter.list_occupants("world") == {"steve"}

        adapter.move("steve", "world_nether")
        assert adapter.list_occupants("world") == set()
        assert adapter.list_occupants("world_nether") == {"steve"}

        adapter.remove("steve")
        assert adapter.list_occupants("world_nether") == set()

    def test_unknown_zone_is_none(self):
        adapter = MockServerAdapter(["world"])

        assert adapter.list_occupants("world_the_end") is None

    def test_place_into_unloaded_zone_fails(self):
        adapter = MockServerAdapter()

        with pytest.raises(ValueError):
            adapter.place("steve", "world")

    def test_records_commands(self):
        adapter = MockServerAdapter()
        adapter.execute_command(Command.reload())

        assert adapter.get_commands() == [Command.reload()]
        adapter.clear_commands()
        assert adapter.get_commands() == []


class TestOccupancyTracker:
    def test_counts_are_live(self):
        adapter = MockServerAdapter(["world"])
        tracker = OccupancyTracker(adapter)

        assert tracker.current_occupant_count("world") == 0
        adapter.place("steve", "world")
        assert tracker.current_occupant_count("world") == 1
        assert adapter.query_count("world") == 2

    def test_absent_zone_distinct_from_empty(self):
        adapter = MockServerAdapter(["world"])
        tracker = OccupancyTracker(adapter)

        assert tracker.snapshot(["world", "gone"]) == {"world": 0, "gone": None}

    def test_notifications_reach_listeners(self):
        tracker = OccupancyTracker(MockServerAdapter())
        seen = []
        tracker.add_listener(seen.append)

        tracker.on_occupancy_changed("world")
        tracker.on_occupancy_changed("world")

        assert seen == ["world", "world"]
        assert tracker.notifications == {"world": 2}
