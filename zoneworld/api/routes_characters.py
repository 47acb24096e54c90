from __future__ import annotations

import logging
import random
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from zoneworld.deps import get_broadcaster, get_registry, get_rng, get_store
from zoneworld.schemas.character import Character, CharacterCreate, CharacterUpdate, NewCharacter
from zoneworld.schemas.events import CharacterCreated, CharacterMoved, CharactersUpdate, PopulationUpdate
from zoneworld.services.broadcaster import Broadcaster
from zoneworld.services.character_store import CharacterStore
from zoneworld.services.population import get_population_by_zone
from zoneworld.services.zone_registry import ZoneRegistry, random_position

logger = logging.getLogger("zoneworld.api.characters")
router = APIRouter(prefix="/api")


@router.get("/characters", response_model=List[Character])
async def list_characters(store: CharacterStore = Depends(get_store)):
    return store.get_characters()


@router.get("/characters/{character_id}", response_model=Character)
async def get_character(character_id: int, store: CharacterStore = Depends(get_store)):
    character = store.get_character(character_id)
    if not character:
        raise HTTPException(status_code=404, detail="Character not found")
    return character


@router.post("/characters", response_model=Character, status_code=201)
async def create_character(
    payload: CharacterCreate,
    store: CharacterStore = Depends(get_store),
    registry: ZoneRegistry = Depends(get_registry),
    broadcaster: Broadcaster = Depends(get_broadcaster),
    rng: random.Random = Depends(get_rng),
):
    async with store.lock:
        zone = registry.get_zone(payload.current_zone)
        if zone is None:
            zones = registry.get_zones()
            if not zones:
                raise HTTPException(status_code=503, detail="No zones registered")
            zone = zones[0]
            logger.info("Unknown starting zone %r, placing in %s", payload.current_zone, zone.name)

        x, y = random_position(zone, rng)
        data = NewCharacter(**payload.model_dump(exclude={"current_zone"}), current_zone=zone.name, x=x, y=y)
        character = store.create_character(data)
        logger.info("Character %s created by %s in %s", character.id, character.creator, zone.name)

        await broadcaster.broadcast(CharacterCreated(character=character))
        await broadcaster.broadcast(PopulationUpdate(population=get_population_by_zone(store, registry)))

    return character


@router.patch("/characters/{character_id}", response_model=Character)
async def update_character(
    character_id: int,
    payload: CharacterUpdate,
    store: CharacterStore = Depends(get_store),
    registry: ZoneRegistry = Depends(get_registry),
    broadcaster: Broadcaster = Depends(get_broadcaster),
    rng: random.Random = Depends(get_rng),
):
    """Administrative update; repositions inside the new zone when no x/y is given."""
    fields = payload.model_dump(exclude_unset=True)

    async with store.lock:
        existing = store.get_character(character_id)
        if not existing:
            raise HTTPException(status_code=404, detail="Character not found")

        # Explicit nulls carry no meaning for required fields
        fields = {k: v for k, v in fields.items() if v is not None or k == "name"}

        new_zone = fields.get("current_zone")
        if new_zone is not None and registry.get_zone(new_zone) is None:
            raise HTTPException(status_code=400, detail=f"Unknown zone: {new_zone}")

        zone = registry.get_zone(fields.get("current_zone", existing.current_zone))
        if zone is not None:
            if "x" not in fields and "y" not in fields:
                if new_zone is not None and new_zone != existing.current_zone:
                    fields["x"], fields["y"] = random_position(zone, rng)
            elif not zone.contains(fields.get("x", existing.x), fields.get("y", existing.y)):
                raise HTTPException(status_code=400, detail=f"Position is outside zone {zone.name}")

        character = store.update_character(character_id, fields)
        if not character:
            raise HTTPException(status_code=404, detail="Character not found")

        moved = (character.current_zone, character.x, character.y) != (existing.current_zone, existing.x, existing.y)
        if moved:
            await broadcaster.broadcast(CharacterMoved(character=character))
            await broadcaster.broadcast(PopulationUpdate(population=get_population_by_zone(store, registry)))
        else:
            await broadcaster.broadcast(CharactersUpdate(characters=store.get_characters()))

    return character
