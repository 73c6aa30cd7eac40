#!/usr/bin/env python3
"""
Asyncio Host Demo

Runs the vacancy module on a real event loop with a console adapter that
prints the commands it would dispatch:
- AsyncioSequencer (real monotonic time)
- ConsoleServerAdapter rendering console lines
- Short cooldown so the demo finishes in a few seconds

Run with: PYTHONPATH=src python3 examples/asyncio-host.py
"""

import asyncio
import logging

from world_vacancy import AsyncioSequencer, Event, EventBus
from world_vacancy.modules.vacancy import ConsoleServerAdapter, VacancyModule


class PrintingServer(ConsoleServerAdapter):
    """Tiny in-memory server that prints console commands."""

    def __init__(self) -> None:
        super().__init__()
        self.worlds = {"world": {"steve"}, "world_nether": {"alex"}}

    def list_occupants(self, zone):
        occupants = self.worlds.get(zone)
        return None if occupants is None else frozenset(occupants)

    def dispatch_console(self, line: str) -> None:
        print(f"   > {line}")

    def move(self, player: str, zone: str) -> None:
        for occupants in self.worlds.values():
            occupants.discard(player)
        self.worlds[zone].add(player)


async def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(name)s - %(levelname)s - %(message)s")

    bus = EventBus()
    server = PrintingServer()
    vacancy = VacancyModule(
        {
            "cooldown-seconds": 2,
            "settle-delay": 0.2,
            "worlds": {
                "world_nether": {"view-distance": 4, "simulation-distance": 3},
                "world_the_end": {"view-distance": 2, "simulation-distance": 2},
            },
        },
        AsyncioSequencer(asyncio.get_running_loop()),
    )
    vacancy.attach(bus, server)
    vacancy.start()

    print("\n1. alex leaves the nether")
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
    await asyncio.sleep(3)
    print(f"   world_nether: {vacancy.get_zone_state('world_nether')['status']}")

    print("\n2. alex comes back")
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
    await asyncio.sleep(1)
    print(f"   world_nether: {vacancy.get_zone_state('world_nether')['status']}")


if __name__ == "__main__":
    asyncio.run(main())
