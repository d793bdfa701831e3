"""
Testy dla PlanningSession i dziennika operacji.
"""

import json
import pytest
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from hexplan import PlanningSession
from hexplan.core.config_loader import ConfigLoader
from hexplan.core.errors import HexNotFoundError
from hexplan.core.state import State, Team
from hexplan.events import EventLogger, EventType


# ═══════════════════════════════════════════════════════════════════════════
# FIXTURES
# ═══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def loader():
    return ConfigLoader()


@pytest.fixture
def session(loader):
    """Sesja na arena1 z seedem 42."""
    return PlanningSession.from_config(loader, map_key="arena1", seed=42)


def event_types(session):
    return [e.event_type for e in session.journal.events]


# ═══════════════════════════════════════════════════════════════════════════
# TEST: TWORZENIE I MAPY
# ═══════════════════════════════════════════════════════════════════════════

def test_from_config_uses_defaults(loader):
    session = PlanningSession.from_config(loader)
    assert session.map_preset.key == "arena1"
    assert session.seed == 42
    assert session.layout.name == "full_grid"
    assert session.grid.get_tile_by_id(1).state == State.AVAILABLE_ALLY


def test_from_config_unknown_map(loader):
    with pytest.raises(KeyError):
        PlanningSession.from_config(loader, map_key="nowhere")


def test_switch_map_resets_session(session):
    session.place_character(3, 66, Team.ALLY)
    
    session.switch_map("arena2")
    
    assert session.map_preset.key == "arena2"
    assert session.grid.get_character_count() == 0
    assert session.skill_manager.get_active_skills() == {}
    assert session.grid.get_tile_by_id(9).state == State.BLOCKED
    assert event_types(session) == [EventType.SESSION_START, EventType.MAP_SWITCH]


def test_switch_to_unknown_map_keeps_session(session):
    session.place_character(3, 66, Team.ALLY)
    with pytest.raises(KeyError):
        session.switch_map("nowhere")
    assert session.grid.get_character(3) == 66


def test_get_maps(session):
    keys = [m["key"] for m in session.get_maps()]
    assert keys[0] == "arena1"
    assert "sp_s5" in keys


# ═══════════════════════════════════════════════════════════════════════════
# TEST: OPERACJE
# ═══════════════════════════════════════════════════════════════════════════

def test_place_and_remove_are_journaled(session):
    assert session.place_character(3, 66, Team.ALLY)
    assert not session.place_character(30, 66, Team.ALLY)
    assert session.remove_character(3)
    
    events = session.journal.events
    assert [e.event_type for e in events[1:]] == [
        EventType.CHARACTER_PLACE, EventType.CHARACTER_PLACE, EventType.CHARACTER_REMOVE,
    ]
    assert [e.success for e in events[1:]] == [True, False, True]
    assert events[3].character_id == 66
    assert events[3].team == Team.ALLY


def test_auto_place_is_reproducible(loader):
    placements = []
    for _ in range(2):
        session = PlanningSession.from_config(loader, map_key="arena1", seed=7)
        hexes = [session.auto_place_character(cid, Team.ENEMY) for cid in (89, 58, 46)]
        placements.append((hexes, session.grid.get_character_placements()))
    
    assert placements[0] == placements[1]
    assert None not in placements[0][0]


def test_auto_place_failure_returns_none(session):
    assert session.auto_place_character(66, Team.ALLY) is not None
    assert session.auto_place_character(66, Team.ALLY) is None
    assert session.journal.get_failed_events()[0].event_type == EventType.CHARACTER_AUTO_PLACE


def test_move_defaults_to_occupant(session):
    session.place_character(3, 66, Team.ALLY)
    
    assert session.move_character(3, 4)
    assert session.grid.get_character(4) == 66
    assert not session.move_character(3, 5)
    
    move = session.journal.get_events_by_type(EventType.CHARACTER_MOVE)[0]
    assert (move.hex_id, move.to_hex_id, move.character_id) == (3, 4, 66)


def test_swap_and_clear(session):
    session.place_character(3, 66, Team.ALLY)
    session.place_character(40, 200, Team.ENEMY)
    
    assert session.swap_characters(3, 40)
    assert session.grid.get_character_team(40) == Team.ENEMY
    assert session.skill_manager.has_active_skill(66, Team.ENEMY)
    
    assert session.clear_all_characters()
    assert session.grid.get_character_count() == 0
    assert session.journal.get_events_by_type(EventType.GRID_CLEAR)[0].data == {"removed": 2}


def test_set_max_team_size(session):
    for hex_id, cid in ((1, 100), (2, 101), (3, 102)):
        session.place_character(hex_id, cid, Team.ALLY)
    
    assert not session.set_max_team_size(Team.ALLY, 2)
    assert session.set_max_team_size(Team.ALLY, 3)
    assert not session.place_character(4, 103, Team.ALLY)
    assert session.get_state()["team_sizes"]["ally"] == {"max": 3, "count": 3}


# ═══════════════════════════════════════════════════════════════════════════
# TEST: ZASIĘGI I PATHFINDING
# ═══════════════════════════════════════════════════════════════════════════

def test_character_ranges(session):
    assert session.get_character_range(66) == 4
    assert session.get_character_range(10089) == 3
    assert session.get_character_range(20089) == 3
    assert session.get_character_range(10068) == 1
    assert session.get_character_range(10050) == 1
    assert session.get_character_range(999) == 1


def test_ranges_of_placed_characters(session):
    session.place_character(3, 89, Team.ALLY)
    ranges = session.get_character_ranges()
    assert ranges[89] == 4
    assert ranges[10089] == 3
    assert ranges[20089] == 3


def test_closest_maps(session):
    session.place_character(3, 66, Team.ALLY)
    session.place_character(40, 200, Team.ENEMY)
    
    enemies = session.get_closest_enemy_map()
    allies = session.get_closest_ally_map()
    
    assert enemies[3].enemy_hex_id == 40
    assert allies[40].ally_hex_id == 3
    # Bonnie (zasięg 4) dochodzi szybciej niż postać z zasięgiem 1
    assert enemies[3].distance < allies[40].distance


def test_find_path(session):
    path = session.find_path(1, 45)
    assert path[0] == 1 and path[-1] == 45
    assert len(path) == 9
    
    with pytest.raises(HexNotFoundError):
        session.find_path(1, 99)


def test_find_path_is_cached(session):
    session.clear_cache()
    first = session.find_path(1, 45)
    
    assert session.find_path(1, 45) == first
    assert session.clear_cache()["path_cache_size"] == 1


def test_debug_paths_and_cache(session):
    session.place_character(16, 100, Team.ALLY)
    session.place_character(30, 200, Team.ENEMY)
    session.get_closest_enemy_map()
    
    paths = session.get_debug_paths()
    assert {p["team"] for p in paths} == {"ally", "enemy"}
    
    stats = session.clear_cache()
    assert stats["closest_enemy_cache_size"] == 1
    assert session.clear_cache()["closest_enemy_cache_size"] == 0


# ═══════════════════════════════════════════════════════════════════════════
# TEST: STAN I DZIENNIK
# ═══════════════════════════════════════════════════════════════════════════

def test_get_state(session):
    session.place_character(1, 50, Team.ALLY)
    state = session.get_state()
    
    assert state["map"] == "arena1"
    assert state["seed"] == 42
    assert len(state["tiles"]) == 45
    assert state["companions"] == {"50-ally": [10050]}
    assert state["team_sizes"]["ally"] == {"max": 6, "count": 2}
    
    tile = next(t for t in state["tiles"] if t["hex_id"] == 1)
    assert tile == {
        "hex_id": 1, "q": -3, "r": 4, "s": -1,
        "state": "OCCUPIED_ALLY", "character_id": 50, "team": "ally",
    }


def test_save_journal(session, tmp_path):
    session.place_character(3, 66, Team.ALLY)
    path = tmp_path / "out" / "journal.json"
    
    session.save_journal(str(path))
    
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["metadata"]["seed"] == 42
    assert data["metadata"]["map"] == "arena1"
    assert data["events"][1] == {
        "seq": 1, "type": "CHARACTER_PLACE", "success": True,
        "hex_id": 3, "character_id": 66, "team": "ally",
    }


def test_event_logger_queries():
    journal = EventLogger(seed=1, map_key="arena1")
    journal.log_event(EventType.CHARACTER_PLACE, hex_id=1, character_id=66, team=Team.ALLY)
    journal.log_event(EventType.CHARACTER_PLACE, False, hex_id=30, character_id=66, team=Team.ALLY)
    journal.log_event(EventType.CACHE_CLEAR, path_cache_size=0)
    
    assert journal.get_event_count() == 3
    assert len(journal.get_events_for_character(66)) == 2
    assert [e.seq for e in journal.get_failed_events()] == [1]
    assert json.loads(journal.to_json())["events"][2]["data"] == {"path_cache_size": 0}
    
    journal.clear()
    assert journal.get_event_count() == 0


def test_repr(session):
    assert repr(session) == "PlanningSession(map='arena1', seed=42, characters=0)"
