from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from zoneworld.schemas.events import CharacterMoved, PopulationUpdate
from zoneworld.services.broadcaster import Broadcaster
from zoneworld.services.character_store import CharacterStore
from zoneworld.services.population import get_population_by_zone
from zoneworld.services.zone_registry import ZoneRegistry, random_position

logger = logging.getLogger("zoneworld.migration")


@dataclass
class MigrationReport:
    moved: List[int] = field(default_factory=list)
    population: Dict[str, int] = field(default_factory=dict)
    failed: List[int] = field(default_factory=list)
    skipped: bool = False


class MigrationScheduler:
    """Owns the periodic migration loop.

    Every ``interval_s`` seconds each character has a ``probability`` chance
    of drawing a new zone uniformly from all zones (its own included). A
    character that draws a different zone is placed at a random point inside
    it and a ``character_moved`` event goes out right away; one
    ``population_update`` closes the tick.

    Ticks are single-flight and hold the store lock for their whole duration,
    so they never overlap each other or a creation request.
    """

    def __init__(
        self,
        store: CharacterStore,
        registry: ZoneRegistry,
        broadcaster: Broadcaster,
        interval_s: float = 5.0,
        probability: float = 0.1,
        rng: Optional[random.Random] = None,
    ):
        if interval_s <= 0:
            raise ValueError("interval_s must be positive")
        if not 0.0 <= probability <= 1.0:
            raise ValueError("probability must be within [0, 1]")

        self.store = store
        self.registry = registry
        self.broadcaster = broadcaster
        self.interval_s = interval_s
        self.probability = probability
        self.rng = rng or random.Random()

        self._task: Optional[asyncio.Task] = None
        self._stop_flag: Optional[asyncio.Event] = None
        self._tick_in_progress = False
        self.ticks = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return  # already running
        self._stop_flag = asyncio.Event()
        self._task = asyncio.create_task(self._loop(self._stop_flag))
        logger.info(
            "Migration loop started (every %.1fs, p=%.2f)", self.interval_s, self.probability
        )

    async def stop(self) -> None:
        if self._stop_flag is not None:
            self._stop_flag.set()
        if self._task is not None:
            await asyncio.gather(self._task, return_exceptions=True)
        self._task = None
        self._stop_flag = None

    async def _loop(self, stop_flag: asyncio.Event) -> None:
        while not stop_flag.is_set():
            try:
                await asyncio.wait_for(stop_flag.wait(), timeout=self.interval_s)
                break
            except asyncio.TimeoutError:
                pass

            try:
                await self.tick()
            except Exception as e:
                # A broken tick must not kill the loop; the next one may succeed
                logger.exception("Migration tick crashed: %s", e)

        logger.info("Migration loop ended after %d tick(s)", self.ticks)

    async def tick(self) -> MigrationReport:
        if self._tick_in_progress:
            logger.warning("Previous migration tick still running; skipping this one")
            return MigrationReport(skipped=True)

        self._tick_in_progress = True
        try:
            async with self.store.lock:
                report = await self._migrate()
            self.ticks += 1
            return report
        finally:
            self._tick_in_progress = False

    async def _migrate(self) -> MigrationReport:
        report = MigrationReport()
        characters = self.store.get_characters()
        zones = self.registry.get_zones()

        for character in characters:
            if self.rng.random() >= self.probability or not zones:
                continue
            destination = self.rng.choice(zones)
            if destination.name == character.current_zone:
                continue

            x, y = random_position(destination, self.rng)
            try:
                updated = self.store.update_character(
                    character.id, {"current_zone": destination.name, "x": x, "y": y}
                )
            except Exception as e:
                logger.exception("Failed to migrate character %s: %s", character.id, e)
                report.failed.append(character.id)
                continue

            if updated is None:
                logger.info("Character %s vanished before it could migrate", character.id)
                continue

            report.moved.append(updated.id)
            logger.debug("Character %s: %s -> %s", updated.id, character.current_zone, destination.name)
            await self._broadcast(CharacterMoved(character=updated))

        report.population = get_population_by_zone(self.store, self.registry)
        await self._broadcast(PopulationUpdate(population=report.population))

        if report.moved:
            logger.info("Migration tick moved %d character(s)", len(report.moved))
        return report

    async def _broadcast(self, event) -> None:
        try:
            await self.broadcaster.broadcast(event)
        except Exception as e:
            logger.exception("Broadcast of %s failed: %s", event.type, e)
