"""
Presety układu siatki i rzędy diagonalne.

Siatka jest opisana wierszami numerów kafelków (od góry) oraz
przesunięciem q pierwszego kafelka w każdym wierszu:

    r = indeks_wiersza - liczba_wierszy // 2
    q = q_offset[indeks_wiersza] + pozycja_w_wierszu

Dzięki temu środkowy wiersz ma r = 0, a numery kafelków (1..45) są
niezależne od współrzędnych - plansza może być obrócona (FULL_GRID_FLAT)
bez zmiany numeracji.

Rzędy diagonalne (DIAGONAL_ROWS) grupują kafelki pełnej planszy w linie
od lewej-góry do prawej-dołu. Rząd o indeksie 7 ([22, 23, 24]) to
środkowa przekątna - oś symetrii planszy.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Iterator, List, Tuple


@dataclass(frozen=True)
class GridPreset:
    """
    Opis kształtu siatki.
    
    Attributes:
        name (str): Nazwa presetu
        hex (Tuple[Tuple[int, ...], ...]): Numery kafelków per wiersz
        q_offset (Tuple[int, ...]): Początkowe q dla każdego wiersza
    """
    name: str
    hex: Tuple[Tuple[int, ...], ...]
    q_offset: Tuple[int, ...]
    
    def __post_init__(self) -> None:
        if len(self.hex) != len(self.q_offset):
            raise ValueError(
                f"Preset '{self.name}': {len(self.hex)} rows but "
                f"{len(self.q_offset)} q offsets"
            )
    
    def iter_cells(self) -> Iterator[Tuple[int, int, int]]:
        """
        Iteruje po kafelkach presetu.
        
        Yields:
            (hex_id, q, r) dla każdego kafelka, wiersz po wierszu
        """
        half = len(self.hex) // 2
        for row_index, row in enumerate(self.hex):
            r = row_index - half
            for i, hex_id in enumerate(row):
                yield hex_id, self.q_offset[row_index] + i, r
    
    @property
    def tile_count(self) -> int:
        return sum(len(row) for row in self.hex)
    
    @staticmethod
    def from_dict(name: str, data: Dict) -> GridPreset:
        """Tworzy preset z danych (np. YAML: {hex: [[...]], q_offset: [...]})."""
        return GridPreset(
            name=name,
            hex=tuple(tuple(row) for row in data["hex"]),
            q_offset=tuple(data["q_offset"]),
        )


# ═══════════════════════════════════════════════════════════════════════════
# WBUDOWANE PRESETY
# ═══════════════════════════════════════════════════════════════════════════

FULL_GRID = GridPreset(
    name="full_grid",
    hex=(
        (43, 45),
        (35, 38, 40, 42, 44),
        (28, 31, 34, 37, 39, 41),
        (21, 24, 27, 30, 33, 36),
        (14, 17, 20, 23, 26, 29, 32),
        (10, 13, 16, 19, 22, 25),
        (5, 7, 9, 12, 15, 18),
        (2, 4, 6, 8, 11),
        (1, 3),
    ),
    q_offset=(2, 0, -1, -2, -3, -3, -4, -4, -3),
)

FULL_GRID_FLAT = GridPreset(
    name="full_grid_flat",
    hex=(
        (44, 41),
        (45, 42, 39, 36, 32),
        (43, 40, 37, 33, 29, 25),
        (38, 34, 30, 26, 22, 18),
        (35, 31, 27, 23, 19, 15, 11),
        (28, 24, 20, 16, 12, 8),
        (21, 17, 13, 9, 6, 3),
        (14, 10, 7, 4, 1),
        (5, 2),
    ),
    q_offset=(1, -1, -2, -2, -3, -3, -3, -3, -2),
)

# Mała plansza testowa: pionowa kolumna z dwoma pasami
TEST_GRID = GridPreset(
    name="test_grid",
    hex=(
        (7,),
        (6, 8),
        (5, 9),
        (4, 10),
        (3, 11),
        (2, 12),
        (1, 13, 14),
    ),
    q_offset=(0, -1, -1, -2, -2, -3, -3),
)

LAYOUTS: Dict[str, GridPreset] = {
    FULL_GRID.name: FULL_GRID,
    FULL_GRID_FLAT.name: FULL_GRID_FLAT,
    TEST_GRID.name: TEST_GRID,
}


def get_layout(name: str) -> GridPreset:
    """
    Zwraca preset po nazwie.
    
    Raises:
        ValueError: Jeśli preset nie istnieje
    """
    if name not in LAYOUTS:
        raise ValueError(f"Unknown layout: {name}. Available: {list(LAYOUTS.keys())}")
    return LAYOUTS[name]


# ═══════════════════════════════════════════════════════════════════════════
# RZĘDY DIAGONALNE
# ═══════════════════════════════════════════════════════════════════════════

DIAGONAL_ROWS: Tuple[Tuple[int, ...], ...] = (
    (1, 2),
    (3, 4, 5),
    (6, 7),
    (8, 9, 10),
    (11, 12, 13, 14),
    (15, 16, 17),
    (18, 19, 20, 21),
    (22, 23, 24),       # środkowa przekątna
    (25, 26, 27, 28),
    (29, 30, 31),
    (32, 33, 34, 35),
    (36, 37, 38),
    (39, 40),
    (41, 42, 43),
    (44, 45),
)

MIDDLE_DIAGONAL_ROW = 7


def get_diagonal_row_number(hex_id: int) -> int:
    """
    Zwraca numer rzędu diagonalnego (liczony od 1).
    
    Returns:
        int: 1..15 albo -1 gdy kafelek nie należy do żadnego rzędu
    """
    for row_index, row in enumerate(DIAGONAL_ROWS):
        if hex_id in row:
            return row_index + 1
    return -1


def are_hexes_in_same_diagonal_row(hex_id_a: int, hex_id_b: int) -> bool:
    """Czy oba kafelki leżą w tym samym (znanym) rzędzie diagonalnym."""
    row_a = get_diagonal_row_number(hex_id_a)
    if row_a == -1:
        return False
    return row_a == get_diagonal_row_number(hex_id_b)


def get_diagonal_row(hex_id: int) -> List[int]:
    """Zwraca wszystkie kafelki rzędu, w którym leży hex_id (pusta lista gdy brak)."""
    row_number = get_diagonal_row_number(hex_id)
    if row_number == -1:
        return []
    return list(DIAGONAL_ROWS[row_number - 1])
