"""
Testy dla współrzędnych hex.

Testuje:
- Walidację współrzędnych cube
- Odległość i sąsiadów
- Id kafelka (poza porównaniem)
"""

import pytest
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from hexplan.core.hex_coord import Hex, HEX_DIRECTIONS
from hexplan.core.errors import InvalidHexError, PlannerError


# ═══════════════════════════════════════════════════════════════════════════
# TEST: KONSTRUKCJA
# ═══════════════════════════════════════════════════════════════════════════

def test_valid_cube_coordinates():
    h = Hex(1, -1, 0)
    assert h.cube == (1, -1, 0)


def test_invalid_cube_coordinates_raise():
    with pytest.raises(InvalidHexError):
        Hex(1, 1, 1)


def test_invalid_hex_error_is_value_error():
    """InvalidHexError łapie się jako ValueError i PlannerError."""
    with pytest.raises(ValueError):
        Hex(2, 0, 0)
    with pytest.raises(PlannerError):
        Hex(0, 0, 1)


def test_from_axial_computes_s():
    h = Hex.from_axial(2, -3, hex_id=7)
    assert h.s == 1
    assert h.id == 7


def test_id_not_part_of_equality():
    a = Hex(0, 0, 0, 5)
    b = Hex(0, 0, 0, 9)
    assert a == b
    assert hash(a) == hash(b)


def test_set_id():
    h = Hex(0, 0, 0)
    h.set_id(12)
    assert h.get_id() == 12


def test_key_format():
    assert Hex(-3, 4, -1).key() == "-3,4,-1"


# ═══════════════════════════════════════════════════════════════════════════
# TEST: ARYTMETYKA I ODLEGŁOŚĆ
# ═══════════════════════════════════════════════════════════════════════════

def test_add_subtract_scale():
    a = Hex(1, -1, 0)
    b = Hex(0, 1, -1)
    assert a + b == Hex(1, 0, -1)
    assert a - b == Hex(1, -2, 1)
    assert a * 3 == Hex(3, -3, 0)


def test_distance_to_self_is_zero():
    h = Hex(2, -5, 3)
    assert h.distance(h) == 0


def test_distance_example():
    assert Hex(0, 0, 0).distance(Hex(2, -1, -1)) == 2
    assert Hex(-3, 4, -1).distance(Hex(3, -4, 1)) == 8


@pytest.mark.parametrize("direction", range(6))
def test_neighbor_is_at_distance_one(direction):
    h = Hex(1, 2, -3)
    assert h.neighbor(direction).distance(h) == 1


def test_direction_wraps_modulo_six():
    assert Hex.direction(7) == Hex.direction(1)
    assert Hex.direction(-1) == Hex.direction(5)


def test_get_neighbors_order_matches_directions():
    center = Hex(0, 0, 0)
    neighbors = center.get_neighbors()
    assert len(neighbors) == 6
    for direction, (dq, dr, ds) in enumerate(HEX_DIRECTIONS):
        assert neighbors[direction] == Hex(dq, dr, ds)
