from __future__ import annotations

import random
from typing import Dict, List, Optional, Tuple

from zoneworld.schemas.zone import Zone, ZoneCreate


# SHRINE deliberately overlaps the four quadrants
DEFAULT_ZONES: List[Dict[str, float]] = [
    {"name": "FOREST", "x": 0, "y": 0, "width": 300, "height": 300},
    {"name": "PLAZA", "x": 300, "y": 0, "width": 300, "height": 300},
    {"name": "COAST", "x": 0, "y": 300, "width": 300, "height": 300},
    {"name": "MEADOW", "x": 300, "y": 300, "width": 300, "height": 300},
    {"name": "SHRINE", "x": 150, "y": 150, "width": 200, "height": 200},
]


class ZoneRegistry:
    """Named rectangular regions of the world map.

    Zones are created once while bootstrapping and only read afterwards.
    Membership of a character is whatever zone it was assigned to; it is
    never derived from coordinates, so overlapping zones are fine.
    """

    def __init__(self):
        self._zones: Dict[str, Zone] = {}
        self._next_id = 1

    @classmethod
    def with_default_zones(cls) -> "ZoneRegistry":
        registry = cls()
        for data in DEFAULT_ZONES:
            registry.create_zone(ZoneCreate(**data))
        return registry

    def create_zone(self, data: ZoneCreate) -> Zone:
        if data.name in self._zones:
            raise ValueError(f"zone {data.name!r} already exists")
        zone = Zone(id=self._next_id, **data.model_dump())
        self._next_id += 1
        self._zones[zone.name] = zone
        return zone

    def get_zones(self) -> List[Zone]:
        return list(self._zones.values())

    def get_zone(self, name: str) -> Optional[Zone]:
        return self._zones.get(name)


def random_position(zone: Zone, rng: random.Random) -> Tuple[float, float]:
    """Uniform point inside the zone rectangle."""
    return (
        zone.x + rng.uniform(0, zone.width),
        zone.y + rng.uniform(0, zone.height),
    )
