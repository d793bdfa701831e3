"""
Symetria planszy względem środkowej przekątnej.

Rząd diagonalny i odbija się na rząd 14 - i, kafelek na tej samej
pozycji (pierwszy na pierwszy, nie odwrócony). Środkowa przekątna
[22, 23, 24] odbija się sama na siebie.

    >>> get_symmetrical_hex_id(1)
    44
    >>> get_symmetrical_hex_id(23)
    23
"""

from __future__ import annotations
from typing import Dict, Optional

from ..core.layout import DIAGONAL_ROWS, MIDDLE_DIAGONAL_ROW


def _build_symmetry_map() -> Dict[int, int]:
    symmetry: Dict[int, int] = {}
    last = len(DIAGONAL_ROWS) - 1
    for row_index, row in enumerate(DIAGONAL_ROWS):
        mirrored = DIAGONAL_ROWS[last - row_index]
        for source_id, target_id in zip(row, mirrored):
            symmetry[source_id] = target_id
            symmetry[target_id] = source_id
    for hex_id in DIAGONAL_ROWS[MIDDLE_DIAGONAL_ROW]:
        symmetry[hex_id] = hex_id
    return symmetry


SYMMETRY_MAP: Dict[int, int] = _build_symmetry_map()


def get_symmetrical_hex_id(hex_id: int) -> Optional[int]:
    return SYMMETRY_MAP.get(hex_id)


def is_on_middle_diagonal(hex_id: int) -> bool:
    return SYMMETRY_MAP.get(hex_id) == hex_id
