from __future__ import annotations

import asyncio
import datetime as dt
import logging
from typing import Any, Dict, List, Mapping, Optional

from zoneworld.schemas.character import Character, NewCharacter

logger = logging.getLogger("zoneworld.store")

_IMMUTABLE_FIELDS = frozenset({"id", "created_at"})


class CharacterStore:
    """In-memory character records keyed by sequential integer id.

    Nothing is persisted; a restart starts from an empty store and id 1.

    Every method is synchronous, so a single call can never interleave with
    another task on the event loop. Callers doing read-compute-write across
    awaits (creation requests, admin updates, migration ticks) hold ``lock``.
    """

    def __init__(self):
        self._characters: Dict[int, Character] = {}
        self._next_id = 1
        self.lock = asyncio.Lock()

    def create_character(self, data: NewCharacter) -> Character:
        character = Character(
            id=self._next_id,
            created_at=dt.datetime.now(dt.timezone.utc),
            **data.model_dump(),
        )
        self._next_id += 1
        self._characters[character.id] = character
        logger.debug("Created character %s in %s", character.id, character.current_zone)
        return character.model_copy()

    def get_character(self, character_id: int) -> Optional[Character]:
        character = self._characters.get(character_id)
        return character.model_copy() if character else None

    def get_characters(self) -> List[Character]:
        # dict preserves insertion order
        return [c.model_copy() for c in self._characters.values()]

    def update_character(self, character_id: int, fields: Mapping[str, Any]) -> Optional[Character]:
        """Merge ``fields`` into the record; None when the id is unknown."""
        unknown = set(fields) - set(Character.model_fields)
        if unknown:
            raise ValueError(f"unknown character fields: {', '.join(sorted(unknown))}")
        frozen = set(fields) & _IMMUTABLE_FIELDS
        if frozen:
            raise ValueError(f"immutable character fields: {', '.join(sorted(frozen))}")

        character = self._characters.get(character_id)
        if character is None:
            return None

        updated = character.model_copy(update=dict(fields))
        self._characters[character_id] = updated
        return updated.model_copy()

    def delete_character(self, character_id: int) -> bool:
        return self._characters.pop(character_id, None) is not None
