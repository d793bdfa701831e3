"""
Testy API (FastAPI TestClient).

Każdy test dostaje świeżą sesję na arena1 z seedem 42.
"""

import pytest
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from fastapi.testclient import TestClient

from api.main import app
from api.session_state import reset_session


@pytest.fixture
def client():
    reset_session(map_key="arena1", seed=42)
    with TestClient(app) as client:
        yield client


def place(client, hex_id, character_id, team="ally"):
    return client.post("/api/grid/place", json={"hex_id": hex_id, "character_id": character_id, "team": team})


# ═══════════════════════════════════════════════════════════════════════════
# TEST: PODSTAWY
# ═══════════════════════════════════════════════════════════════════════════

def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "map": "arena1"}


def test_get_grid(client):
    data = client.get("/api/grid").json()
    assert data["map"] == "arena1"
    assert len(data["tiles"]) == 45
    assert data["team_sizes"]["enemy"] == {"max": 5, "count": 0}


# ═══════════════════════════════════════════════════════════════════════════
# TEST: MAPY
# ═══════════════════════════════════════════════════════════════════════════

def test_list_maps_marks_active(client):
    maps = client.get("/api/maps").json()
    active = [m["key"] for m in maps if m["active"]]
    assert active == ["arena1"]


def test_switch_map(client):
    place(client, 3, 66)
    
    response = client.post("/api/maps/arena2")
    
    assert response.json() == {"success": True, "map": "arena2"}
    assert client.get("/api/health").json()["map"] == "arena2"
    assert all(t["character_id"] is None for t in client.get("/api/grid").json()["tiles"])


def test_switch_unknown_map_404(client):
    assert client.post("/api/maps/nowhere").status_code == 404


# ═══════════════════════════════════════════════════════════════════════════
# TEST: OPERACJE NA SIATCE
# ═══════════════════════════════════════════════════════════════════════════

def test_place_and_remove(client):
    assert place(client, 3, 66).json() == {"success": True, "hex_id": 3, "character_id": 66}
    assert place(client, 30, 100).json()["success"] is False
    
    assert client.post("/api/grid/remove", json={"hex_id": 3}).json()["success"] is True


def test_place_unknown_hex_404(client):
    response = place(client, 99, 66)
    assert response.status_code == 404
    assert response.json()["error"] == "HexNotFoundError"


def test_place_invalid_team_422(client):
    assert place(client, 3, 66, team="neutral").status_code == 422


def test_auto_place(client):
    data = client.post("/api/grid/auto-place", json={"character_id": 58, "team": "enemy"}).json()
    assert data["success"] is True
    assert data["hex_id"] in (30, 33, 34, 36, 37, 38, 39, 40, 41, 42, 43, 44, 45)


def test_move_and_swap(client):
    place(client, 3, 66)
    place(client, 40, 200, "enemy")
    
    move = client.post("/api/grid/move", json={"from_hex_id": 3, "to_hex_id": 4}).json()
    assert move["success"] is True
    
    swap = client.post("/api/grid/swap", json={"from_hex_id": 4, "to_hex_id": 40}).json()
    assert swap["success"] is True
    
    tiles = {t["hex_id"]: t for t in client.get("/api/grid").json()["tiles"]}
    assert (tiles[40]["character_id"], tiles[40]["team"]) == (66, "enemy")
    assert (tiles[4]["character_id"], tiles[4]["team"]) == (200, "ally")


def test_clear(client):
    place(client, 1, 50)
    assert client.post("/api/grid/clear").json() == {"success": True}
    assert client.get("/api/grid").json()["companions"] == {}


def test_team_size(client):
    response = client.put("/api/grid/team-size", json={"team": "ally", "size": 7})
    assert response.json() == {"success": True, "team": "ally", "max_team_size": 7}
    
    response = client.put("/api/grid/team-size", json={"team": "ally", "size": 0})
    assert response.json()["success"] is False
    assert response.json()["max_team_size"] == 7


# ═══════════════════════════════════════════════════════════════════════════
# TEST: UMIEJĘTNOŚCI
# ═══════════════════════════════════════════════════════════════════════════

def test_skills_catalog(client):
    skills = client.get("/api/skills").json()
    assert [s["character_id"] for s in skills] == sorted(s["character_id"] for s in skills)
    assert {"id": "bonnie", "character_id": 66}.items() <= next(s for s in skills if s["id"] == "bonnie").items()


def test_skill_targets_versioned(client):
    before = client.get("/api/skills/targets").json()["version"]
    place(client, 40, 200, "enemy")
    place(client, 3, 66)
    
    data = client.get("/api/skills/targets").json()
    assert data["version"] > before
    assert data["targets"]["66-ally"]["target_hex_id"] == 40


def test_skill_modifiers(client):
    place(client, 1, 50)
    data = client.get("/api/skills/modifiers").json()
    assert data["color_modifiers"]["50-ally"] == "#ffffff"
    assert data["color_modifiers"]["10050-ally"] == "#c83232"
    assert data["tile_color_modifiers"] == {}


# ═══════════════════════════════════════════════════════════════════════════
# TEST: PATHFINDING I DZIENNIK
# ═══════════════════════════════════════════════════════════════════════════

def test_closest_targets(client):
    place(client, 16, 100)
    place(client, 30, 200, "enemy")
    
    allies = client.get("/api/pathfinding/closest").json()
    assert allies["targets"]["16"]["enemy_hex_id"] == 30
    
    enemies = client.get("/api/pathfinding/closest", params={"team": "enemy"}).json()
    assert enemies["targets"]["30"]["ally_hex_id"] == 16


def test_path(client):
    data = client.get("/api/pathfinding/path", params={"from_hex_id": 1, "to_hex_id": 45}).json()
    assert data["distance"] == 8
    assert data["path"][0] == 1 and data["path"][-1] == 45


def test_path_unknown_hex_404(client):
    response = client.get("/api/pathfinding/path", params={"from_hex_id": 1, "to_hex_id": 99})
    assert response.status_code == 404


def test_debug_paths_and_cache(client):
    place(client, 16, 100)
    place(client, 30, 200, "enemy")
    
    paths = client.get("/api/pathfinding/debug").json()["paths"]
    assert len(paths) == 2
    
    data = client.delete("/api/pathfinding/cache").json()
    assert data["success"] is True
    assert "path_cache_size" in data["cleared"]


def test_journal(client):
    place(client, 3, 66)
    data = client.get("/api/journal").json()
    assert data["metadata"]["map"] == "arena1"
    assert [e["type"] for e in data["events"]] == ["SESSION_START", "CHARACTER_PLACE"]
