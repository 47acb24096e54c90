"""WebSocket fan-out through the real /ws endpoint."""

import time

from fastapi.testclient import TestClient

ANN = {"creator": "Ann", "shape": "circle", "color": "#000000", "size": "medium", "currentZone": "FOREST"}


def test_ws_initial_state(client: TestClient):
    client.post("/api/characters", json=ANN)

    with client.websocket_connect("/ws") as ws:
        first = ws.receive_json()
        second = ws.receive_json()

    assert first["type"] == "characters_update"
    assert [c["id"] for c in first["characters"]] == [1]
    assert second == {
        "type": "population_update",
        "population": {"FOREST": 1, "PLAZA": 0, "COAST": 0, "MEADOW": 0, "SHRINE": 0},
    }


def test_ws_receives_creation_events(client: TestClient):
    with client.websocket_connect("/ws") as ws:
        assert ws.receive_json()["type"] == "characters_update"
        assert ws.receive_json()["type"] == "population_update"

        created = client.post("/api/characters", json={**ANN, "currentZone": "SHRINE"}).json()

        event = ws.receive_json()
        assert event == {"type": "character_created", "character": created}
        population = ws.receive_json()
        assert population["type"] == "population_update"
        assert population["population"]["SHRINE"] == 1


def test_ws_receives_admin_moves(client: TestClient):
    created = client.post("/api/characters", json=ANN).json()

    with client.websocket_connect("/ws") as ws:
        ws.receive_json()
        ws.receive_json()

        client.patch(f"/api/characters/{created['id']}", json={"currentZone": "COAST"})

        moved = ws.receive_json()
        assert moved["type"] == "character_moved"
        assert moved["character"]["currentZone"] == "COAST"
        assert ws.receive_json()["population"]["COAST"] == 1


def test_ws_all_subscribers_get_broadcasts(client: TestClient):
    with client.websocket_connect("/ws") as a, client.websocket_connect("/ws") as b:
        for ws in (a, b):
            ws.receive_json()
            ws.receive_json()

        client.post("/api/characters", json=ANN)

        for ws in (a, b):
            assert ws.receive_json()["type"] == "character_created"
            assert ws.receive_json()["type"] == "population_update"


def test_ws_disconnect_unsubscribes(client: TestClient):
    with client.websocket_connect("/ws") as ws:
        ws.receive_json()
        ws.receive_json()
        assert client.get("/health").json()["subscribers"] == 1

    for _ in range(100):
        if client.get("/health").json()["subscribers"] == 0:
            break
        time.sleep(0.01)
    assert client.get("/health").json()["subscribers"] == 0


def test_ws_cosmetic_update_is_not_a_move(client: TestClient):
    created = client.post("/api/characters", json=ANN).json()

    with client.websocket_connect("/ws") as ws:
        ws.receive_json()
        ws.receive_json()

        client.patch(f"/api/characters/{created['id']}", json={"name": "Pip", "color": "#ff0000"})

        event = ws.receive_json()
        assert event["type"] == "characters_update"
        assert event["characters"][0]["name"] == "Pip"
        assert event["characters"][0]["currentZone"] == "FOREST"

        # a real move afterwards still arrives as character_moved
        client.patch(f"/api/characters/{created['id']}", json={"currentZone": "MEADOW"})
        assert ws.receive_json()["type"] == "character_moved"
