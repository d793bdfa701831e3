"""
Testy dla siatki planowania.

Testuje:
- Budowę siatki z presetu i mapy
- Rozstawianie, zdejmowanie i przenoszenie postaci
- Limity drużyn i auto-rozstawienie
- Niezmiennik postać <-> drużyna <-> stan kafelka
"""

import pytest
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from hexplan.core.hex_grid import Grid, MapPreset, COMPANION_ID_OFFSET
from hexplan.core.layout import TEST_GRID, FULL_GRID
from hexplan.core.state import State, Team
from hexplan.core.rng import GameRNG
from hexplan.core.errors import HexNotFoundError


# ═══════════════════════════════════════════════════════════════════════════
# FIXTURES
# ═══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def test_map():
    """Kafelki 1-3 sojusznicze, 4-5 wrogie, 6 zablokowany."""
    return MapPreset(
        key="test",
        id=0,
        name="Test",
        grid=[
            (State.AVAILABLE_ALLY, [1, 2, 3]),
            (State.AVAILABLE_ENEMY, [4, 5]),
            (State.BLOCKED, [6]),
        ],
    )


@pytest.fixture
def grid(test_map):
    return Grid(TEST_GRID, test_map)


def assert_tiles_consistent(grid: Grid) -> None:
    """Postać i drużyna są ustawione razem, a stan zgadza się z drużyną."""
    for tile in grid.get_all_tiles():
        assert (tile.character_id is None) == (tile.team is None)
        if tile.team == Team.ALLY:
            assert tile.state == State.OCCUPIED_ALLY
        elif tile.team == Team.ENEMY:
            assert tile.state == State.OCCUPIED_ENEMY
        else:
            assert tile.state not in (State.OCCUPIED_ALLY, State.OCCUPIED_ENEMY)


# ═══════════════════════════════════════════════════════════════════════════
# TEST: BUDOWA
# ═══════════════════════════════════════════════════════════════════════════

def test_grid_applies_map_states(grid):
    assert grid.get_tile_by_id(1).state == State.AVAILABLE_ALLY
    assert grid.get_tile_by_id(4).state == State.AVAILABLE_ENEMY
    assert grid.get_tile_by_id(6).state == State.BLOCKED
    assert grid.get_tile_by_id(7).state == State.DEFAULT


def test_tiles_carry_ids(grid):
    assert len(grid.get_all_tiles()) == 14
    assert grid.get_hex_by_id(7).id == 7
    assert grid.get_tile(grid.get_hex_by_id(13)).hex.id == 13


def test_unknown_hex_id_raises(grid):
    with pytest.raises(HexNotFoundError):
        grid.get_hex_by_id(99)
    with pytest.raises(LookupError):
        grid.get_character(99)


def test_find_tile_outside_grid_is_none(grid):
    far = grid.get_hex_by_id(7).neighbor(0).neighbor(0)
    assert grid.find_tile(far) is None


def test_set_state_rejects_unknown_value(grid):
    assert not grid.set_state(grid.get_hex_by_id(7), 42)
    assert grid.set_state(grid.get_hex_by_id(7), State.BLOCKED_BREAKABLE)


def test_map_preset_from_dict():
    preset = MapPreset.from_dict("x", {"id": 3, "name": "X", "tiles": {"BLOCKED": [1], "AVAILABLE_ALLY": None}})
    assert preset.id == 3
    assert preset.grid == [(State.BLOCKED, [1]), (State.AVAILABLE_ALLY, [])]


# ═══════════════════════════════════════════════════════════════════════════
# TEST: ROZSTAWIANIE
# ═══════════════════════════════════════════════════════════════════════════

def test_place_move_example(grid):
    assert grid.place_character(1, 100, Team.ALLY)
    assert grid.get_tile_by_id(1).state == State.OCCUPIED_ALLY
    
    assert not grid.place_character(6, 200, Team.ALLY)
    
    assert grid.move_character(1, 2, 100)
    assert grid.get_tile_by_id(1).state == State.AVAILABLE_ALLY
    assert grid.get_tile_by_id(2).state == State.OCCUPIED_ALLY
    assert_tiles_consistent(grid)


def test_place_on_opposing_tile_fails(grid):
    assert not grid.place_character(4, 100, Team.ALLY)
    assert not grid.has_character(4)


@pytest.mark.parametrize("bad_id", [0, -5, True, "100", 1.5])
def test_place_rejects_invalid_character_id(grid, bad_id):
    assert not grid.place_character(1, bad_id, Team.ALLY)


def test_same_character_twice_in_team_fails(grid):
    assert grid.place_character(1, 100, Team.ALLY)
    assert not grid.place_character(2, 100, Team.ALLY)
    assert grid.place_character(4, 100, Team.ENEMY)


def test_place_replaces_same_team_occupant(grid):
    assert grid.place_character(1, 100, Team.ALLY)
    assert grid.can_place_character_on_tile(1, Team.ALLY)
    
    assert grid.place_character(1, 101, Team.ALLY)
    
    assert grid.get_character(1) == 101
    assert grid.get_tile_by_id(1).state == State.OCCUPIED_ALLY
    assert grid.get_team_characters(Team.ALLY) == {101}
    assert grid.find_character_hex(100, Team.ALLY) is None
    assert_tiles_consistent(grid)


def test_place_on_occupied_opposing_tile_fails(grid):
    assert grid.place_character(4, 200, Team.ENEMY)
    assert not grid.can_place_character_on_tile(4, Team.ALLY)
    
    assert not grid.place_character(4, 100, Team.ALLY)
    
    assert grid.get_character(4) == 200
    assert grid.get_character_team(4) == Team.ENEMY
    assert grid.get_team_characters(Team.ALLY) == set()
    assert_tiles_consistent(grid)


def test_place_then_remove_restores_state(grid):
    assert grid.place_character(4, 200, Team.ENEMY)
    assert grid.remove_character(4)
    
    assert grid.get_tile_by_id(4).state == State.AVAILABLE_ENEMY
    assert grid.get_team_characters(Team.ENEMY) == set()
    assert_tiles_consistent(grid)


def test_remove_empty_tile_returns_false(grid):
    assert not grid.remove_character(1)


def test_team_size_limit(grid):
    assert grid.set_max_team_size(Team.ALLY, 2)
    assert grid.place_character(1, 100, Team.ALLY)
    assert grid.place_character(2, 101, Team.ALLY)
    assert not grid.place_character(3, 102, Team.ALLY)
    assert grid.get_available_for_team(Team.ALLY) == 0


@pytest.mark.parametrize("size", [0, -1, 15, True])
def test_set_max_team_size_rejects_invalid(grid, size):
    assert not grid.set_max_team_size(Team.ALLY, size)
    assert grid.get_max_team_size(Team.ALLY) == 5


def test_placement_queries(grid):
    grid.place_character(1, 100, Team.ALLY)
    grid.place_character(5, 200, Team.ENEMY)
    
    assert grid.get_character_count() == 2
    assert grid.get_character_placements() == {1: 100, 5: 200}
    assert grid.find_character_hex(200, Team.ENEMY) == 5
    assert grid.find_character_hex(200, Team.ALLY) is None
    assert [t.hex.id for t in grid.get_all_available_tiles_for_team(Team.ALLY)] == [3, 2]


def test_clear_all_characters(grid):
    grid.place_character(1, 100, Team.ALLY)
    grid.place_character(4, 200, Team.ENEMY)
    
    assert grid.clear_all_characters()
    assert grid.get_character_count() == 0
    assert grid.get_team_characters(Team.ALLY) == set()
    assert grid.get_tile_by_id(4).state == State.AVAILABLE_ENEMY
    assert_tiles_consistent(grid)


# ═══════════════════════════════════════════════════════════════════════════
# TEST: PRZENOSZENIE
# ═══════════════════════════════════════════════════════════════════════════

def test_move_to_same_tile_fails(grid):
    grid.place_character(1, 100, Team.ALLY)
    assert not grid.move_character(1, 1, 100)


def test_move_wrong_character_fails(grid):
    grid.place_character(1, 100, Team.ALLY)
    assert not grid.move_character(1, 2, 999)


def test_move_to_blocked_tile_fails(grid):
    grid.place_character(1, 100, Team.ALLY)
    assert not grid.move_character(1, 6, 100)
    assert grid.get_character(1) == 100


def test_move_across_teams_changes_team(grid):
    grid.place_character(1, 100, Team.ALLY)
    assert grid.move_character(1, 4, 100)
    assert grid.get_character_team(4) == Team.ENEMY
    assert 100 in grid.get_team_characters(Team.ENEMY)
    assert 100 not in grid.get_team_characters(Team.ALLY)


def test_failed_move_leaves_character_at_source(grid):
    grid.set_max_team_size(Team.ENEMY, 1)
    grid.place_character(4, 200, Team.ENEMY)
    grid.place_character(1, 100, Team.ALLY)
    
    assert not grid.move_character(1, 5, 100)
    
    assert grid.get_character(1) == 100
    assert grid.get_character_team(1) == Team.ALLY
    assert not grid.has_character(5)
    assert_tiles_consistent(grid)


# ═══════════════════════════════════════════════════════════════════════════
# TEST: AUTO-ROZSTAWIENIE
# ═══════════════════════════════════════════════════════════════════════════

def test_auto_place_is_deterministic_for_seed(test_map):
    placements = []
    for _ in range(2):
        grid = Grid(TEST_GRID, test_map, rng=GameRNG(7))
        assert grid.auto_place_character(100, Team.ALLY)
        placements.append(grid.find_character_hex(100, Team.ALLY))
    
    assert placements[0] == placements[1]
    assert placements[0] in (1, 2, 3)


def test_game_rng_repeats_sequence_for_seed():
    a, b = GameRNG(11), GameRNG(11)
    assert [a.randint(0, 9) for _ in range(5)] == [b.randint(0, 9) for _ in range(5)]
    assert repr(a) == "GameRNG(seed=11)"


def test_auto_place_without_free_tiles_fails(grid):
    grid.place_character(4, 200, Team.ENEMY)
    grid.place_character(5, 201, Team.ENEMY)
    assert not grid.auto_place_character(202, Team.ENEMY)


# ═══════════════════════════════════════════════════════════════════════════
# TEST: COMPANIONY
# ═══════════════════════════════════════════════════════════════════════════

def test_companion_id_helpers():
    assert Grid.is_companion_id(50 + COMPANION_ID_OFFSET)
    assert not Grid.is_companion_id(50)
    assert Grid.get_main_character_id(20089) == 89
    assert Grid.get_main_character_id(66) == 66


def test_companion_links(grid):
    grid.add_companion_link(50, 10050, Team.ALLY)
    assert grid.get_companions(50, Team.ALLY) == {10050}
    assert grid.get_companions(50, Team.ENEMY) == set()
    assert grid.get_companion_links() == {"50-ally": [10050]}
    
    grid.remove_companion_link(50, 10050, Team.ALLY)
    assert grid.get_companion_links() == {}


def test_debug_print_uses_legend(grid):
    grid.place_character(1, 100, Team.ALLY)
    output = grid.debug_print()
    assert " 1A" in output
    assert " 6#" in output
    assert " 4e" in output
    assert len(output.splitlines()) == 7


def test_full_grid_default_team_size():
    grid = Grid(FULL_GRID)
    assert grid.get_max_team_size(Team.ALLY) == 5
    assert grid.default_team_size == 5
