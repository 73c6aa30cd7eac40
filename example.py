#!/usr/bin/env python3
"""
Quick example demonstrating world-vacancy basic usage.

Run with: PYTHONPATH=src python3 example.py
"""

from world_vacancy import Event, EventBus, ManualSequencer
from world_vacancy.modules.vacancy import (
    MockServerAdapter,
    VacancyModule,
    format_console_command,
)

print("=" * 60)
print("world-vacancy Example")
print("=" * 60)

# 1. Host components
print("\n1. Creating host components...")
bus = EventBus()
sequencer = ManualSequencer()
server = MockServerAdapter(["world", "world_nether"])
server.place("steve", "world")
server.place("alex", "world_nether")
print("   ✓ EventBus, ManualSequencer and MockServerAdapter created")

# 2. Vacancy module
print("\n2. Attaching vacancy module...")
vacancy = VacancyModule(
    {
        "cooldown-seconds": 10,
        "worlds": {"world_nether": {"view-distance": 4, "simulation-distance": 3}},
    },
    sequencer,
)
vacancy.attach(bus, server)
vacancy.start()
print(f"   ✓ world_nether: {vacancy.get_zone_state('world_nether')['status']}")

# 3. Alex leaves the nether
print("\n3. alex travels to the overworld...")
server.move("alex", "world")
bus.publish(
    Event(
        type="player.changed_zone",
        source="server",
        zone="world",
        entity_id="alex",
        payload={"from_zone": "world_nether"},
    )
)
sequencer.advance(1)
print(f"   ✓ world_nether: {vacancy.get_zone_state('world_nether')['status']}")

# 4. Cooldown elapses
print("\n4. Waiting out the cooldown...")
sequencer.advance(10)
for command in server.get_commands():
    print(f"   > {format_console_command(command)}")
print(f"   ✓ world_nether: {vacancy.get_zone_state('world_nether')['status']}")

# 5. Alex comes back
print("\n5. alex returns to the nether...")
server.clear_commands()
server.move("alex", "world_nether")
bus.publish(
    Event(
        type="player.changed_zone",
        source="server",
        zone="world_nether",
        entity_id="alex",
        payload={"from_zone": "world"},
    )
)
sequencer.advance(1)
for command in server.get_commands():
    print(f"   > {format_console_command(command)}")
print(f"   ✓ world_nether: {vacancy.get_zone_state('world_nether')['status']}")

print("\n" + "=" * 60)
print("Done")
print("=" * 60)
