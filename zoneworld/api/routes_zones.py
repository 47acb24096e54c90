from __future__ import annotations

from typing import Dict, List

from fastapi import APIRouter, Depends

from zoneworld.deps import get_registry, get_store
from zoneworld.schemas.zone import Zone
from zoneworld.services.character_store import CharacterStore
from zoneworld.services.population import get_population_by_zone
from zoneworld.services.zone_registry import ZoneRegistry

router = APIRouter(prefix="/api")


@router.get("/zones", response_model=List[Zone])
async def list_zones(registry: ZoneRegistry = Depends(get_registry)):
    return registry.get_zones()


@router.get("/population", response_model=Dict[str, int])
async def population(
    store: CharacterStore = Depends(get_store),
    registry: ZoneRegistry = Depends(get_registry),
):
    """Characters per zone; every zone is listed, empty ones with 0."""
    return get_population_by_zone(store, registry)
