"""Test fixtures: isolated worlds (store + registry + broadcaster) and a FastAPI TestClient."""

from __future__ import annotations

import random
from typing import List

import pytest
from fastapi.testclient import TestClient

from zoneworld.config import Settings
from zoneworld.main import create_app
from zoneworld.schemas.character import NewCharacter
from zoneworld.schemas.events import CharactersUpdate, PopulationUpdate
from zoneworld.services.broadcaster import Broadcaster
from zoneworld.services.character_store import CharacterStore
from zoneworld.services.population import get_population_by_zone
from zoneworld.services.zone_registry import ZoneRegistry


class FakeSubscriber:
    """Records every frame; can pretend to be closed or broken."""

    def __init__(self, is_open: bool = True, fail: bool = False):
        self.is_open = is_open
        self.fail = fail
        self.sent: List[str] = []

    async def send_text(self, data: str) -> None:
        if self.fail:
            raise RuntimeError("connection reset")
        self.sent.append(data)


def make_character(zone: str = "FOREST", creator: str = "Ann", **overrides) -> NewCharacter:
    data = {
        "creator": creator,
        "shape": "circle",
        "color": "#000000",
        "size": "medium",
        "current_zone": zone,
        "x": 10.0,
        "y": 10.0,
    }
    data.update(overrides)
    return NewCharacter(**data)


@pytest.fixture
def store() -> CharacterStore:
    return CharacterStore()


@pytest.fixture
def registry() -> ZoneRegistry:
    return ZoneRegistry.with_default_zones()


@pytest.fixture
def broadcaster(store: CharacterStore, registry: ZoneRegistry) -> Broadcaster:
    def snapshot():
        return [
            CharactersUpdate(characters=store.get_characters()),
            PopulationUpdate(population=get_population_by_zone(store, registry)),
        ]

    return Broadcaster(snapshot)


@pytest.fixture
def test_settings() -> Settings:
    return Settings(_env_file=None, migration_enabled=False, random_seed=1234)


@pytest.fixture
def app(test_settings: Settings):
    return create_app(test_settings, rng=random.Random(1234))


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c
