from __future__ import annotations

import random

from fastapi import Request

from zoneworld.services.broadcaster import Broadcaster
from zoneworld.services.character_store import CharacterStore
from zoneworld.services.zone_registry import ZoneRegistry


# Components are built once by create_app() and hung off app.state


def get_store(request: Request) -> CharacterStore:
    return request.app.state.store


def get_registry(request: Request) -> ZoneRegistry:
    return request.app.state.registry


def get_broadcaster(request: Request) -> Broadcaster:
    return request.app.state.broadcaster


def get_rng(request: Request) -> random.Random:
    return request.app.state.rng
