from __future__ import annotations

from typing import Annotated, Dict, List, Literal, Union

from pydantic import BaseModel, Field

from zoneworld.schemas.character import Character


class CharacterCreated(BaseModel):
    type: Literal["character_created"] = "character_created"
    character: Character


class CharacterMoved(BaseModel):
    type: Literal["character_moved"] = "character_moved"
    character: Character


class CharactersUpdate(BaseModel):
    type: Literal["characters_update"] = "characters_update"
    characters: List[Character]


class PopulationUpdate(BaseModel):
    type: Literal["population_update"] = "population_update"
    population: Dict[str, int]


# Server -> client messages on /ws
WorldEvent = Annotated[
    Union[CharacterCreated, CharacterMoved, CharactersUpdate, PopulationUpdate],
    Field(discriminator="type"),
]


def serialize_event(event: BaseModel) -> str:
    """JSON text as sent on the wire (camelCase character fields)."""
    return event.model_dump_json(by_alias=True)
