"""
Testy dla presetów układu, rzędów diagonalnych i symetrii.
"""

import pytest
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from hexplan.core.layout import (
    FULL_GRID, FULL_GRID_FLAT, TEST_GRID, DIAGONAL_ROWS, GridPreset,
    get_layout, get_diagonal_row_number, are_hexes_in_same_diagonal_row, get_diagonal_row,
)
from hexplan.skills.symmetry import get_symmetrical_hex_id, is_on_middle_diagonal, SYMMETRY_MAP


# ═══════════════════════════════════════════════════════════════════════════
# TEST: PRESETY
# ═══════════════════════════════════════════════════════════════════════════

@pytest.mark.parametrize("preset", [FULL_GRID, FULL_GRID_FLAT])
def test_full_presets_have_45_unique_tiles(preset):
    ids = [hex_id for hex_id, _, _ in preset.iter_cells()]
    assert preset.tile_count == 45
    assert sorted(ids) == list(range(1, 46))


def test_test_grid_has_14_tiles():
    assert TEST_GRID.tile_count == 14


def test_middle_row_has_r_zero():
    cells = {hex_id: (q, r) for hex_id, q, r in FULL_GRID.iter_cells()}
    assert cells[23] == (0, 0)
    assert cells[1] == (-3, 4)
    assert cells[45] == (3, -4)


def test_get_layout_unknown_raises():
    with pytest.raises(ValueError, match="Unknown layout"):
        get_layout("hexagon")


def test_preset_row_mismatch_raises():
    with pytest.raises(ValueError):
        GridPreset(name="broken", hex=((1, 2), (3,)), q_offset=(0,))


def test_preset_from_dict():
    preset = GridPreset.from_dict("tiny", {"hex": [[1], [2, 3]], "q_offset": [0, -1]})
    assert preset.tile_count == 3
    assert preset.hex == ((1,), (2, 3))


# ═══════════════════════════════════════════════════════════════════════════
# TEST: RZĘDY DIAGONALNE
# ═══════════════════════════════════════════════════════════════════════════

def test_diagonal_rows_cover_full_grid():
    ids = sorted(hex_id for row in DIAGONAL_ROWS for hex_id in row)
    assert ids == list(range(1, 46))


def test_diagonal_row_number():
    assert get_diagonal_row_number(1) == 1
    assert get_diagonal_row_number(23) == 8
    assert get_diagonal_row_number(45) == 15
    assert get_diagonal_row_number(99) == -1


def test_same_diagonal_row():
    assert are_hexes_in_same_diagonal_row(22, 24)
    assert not are_hexes_in_same_diagonal_row(21, 22)


def test_unknown_hexes_are_not_in_same_row():
    assert not are_hexes_in_same_diagonal_row(99, 100)


def test_get_diagonal_row():
    assert get_diagonal_row(12) == [11, 12, 13, 14]
    assert get_diagonal_row(0) == []


# ═══════════════════════════════════════════════════════════════════════════
# TEST: SYMETRIA
# ═══════════════════════════════════════════════════════════════════════════

def test_symmetry_mirrors_rows_by_position():
    assert get_symmetrical_hex_id(1) == 44
    assert get_symmetrical_hex_id(2) == 45
    assert get_symmetrical_hex_id(5) == 43
    assert get_symmetrical_hex_id(20) == 27


def test_symmetry_is_involution():
    for hex_id, mirrored in SYMMETRY_MAP.items():
        assert SYMMETRY_MAP[mirrored] == hex_id


def test_middle_diagonal_maps_to_itself():
    for hex_id in (22, 23, 24):
        assert get_symmetrical_hex_id(hex_id) == hex_id
        assert is_on_middle_diagonal(hex_id)
    assert not is_on_middle_diagonal(1)


def test_unknown_hex_has_no_symmetry():
    assert get_symmetrical_hex_id(100) is None
