from __future__ import annotations

import datetime as dt
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


Shape = Literal["circle", "square", "triangle", "diamond"]
Size = Literal["small", "medium", "large"]

HEX_COLOR = r"^#(?:[0-9a-fA-F]{3}){1,2}$"


class _CamelModel(BaseModel):
    # Wire format is camelCase (currentZone, createdAt); Python side stays snake_case
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CharacterCreate(_CamelModel):
    """Client input for POST /api/characters.

    Any client-supplied position is ignored; the server places the character.
    """

    name: Optional[str] = Field(None, max_length=16)
    creator: str = Field(..., min_length=1, max_length=20)
    shape: Shape
    color: str = Field(..., pattern=HEX_COLOR)
    size: Size
    current_zone: str = Field(..., min_length=1, description="Requested starting zone name")


class NewCharacter(CharacterCreate):
    """Validated input plus the server-assigned position, ready for the store."""

    x: float
    y: float


class CharacterUpdate(_CamelModel):
    name: Optional[str] = Field(None, max_length=16)
    creator: Optional[str] = Field(None, min_length=1, max_length=20)
    shape: Optional[Shape] = None
    color: Optional[str] = Field(None, pattern=HEX_COLOR)
    size: Optional[Size] = None
    current_zone: Optional[str] = Field(None, min_length=1)
    x: Optional[float] = None
    y: Optional[float] = None


class Character(_CamelModel):
    id: int
    name: Optional[str] = None
    creator: str
    shape: Shape
    color: str
    size: Size
    x: float
    y: float
    current_zone: str
    created_at: dt.datetime
