from __future__ import annotations

from typing import Dict

from zoneworld.services.character_store import CharacterStore
from zoneworld.services.zone_registry import ZoneRegistry


def get_population_by_zone(store: CharacterStore, registry: ZoneRegistry) -> Dict[str, int]:
    """Occupancy per zone name, always recomputed from the store.

    Every registered zone is present (possibly 0). A character whose
    ``current_zone`` is not registered is still counted, under its own key.
    """
    population: Dict[str, int] = {zone.name: 0 for zone in registry.get_zones()}
    for character in store.get_characters():
        population[character.current_zone] = population.get(character.current_zone, 0) + 1
    return population
