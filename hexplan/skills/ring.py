"""
Przeszukiwanie pierścieniami: spirala, rząd diagonalny, skan pierścieni.

SPIRALA (spiral_search_from_tile):
═══════════════════════════════════════════════════════════════════

    Pierścienie od 0 (sam środek) do najdalszego kandydata.
    Kolejność w pierścieniu zależy od drużyny rzucającego:

        ALLY  - zgodnie z zegarem, od narożnika top-right
                (kierunki 0, 1, 2, 3, 4, 5 dla pierścienia 1)
        ENEMY - przeciwnie do zegara, zaczynając tuż za narożnikiem
                bottom-left i kończąc na nim
                (kierunki 2, 1, 0, 5, 4, 3 dla pierścienia 1)

    Zwraca pierwszy kafelek z postacią drużyny celów.

RZĄD (search_by_row):
═══════════════════════════════════════════════════════════════════

    Kandydaci z tego samego rzędu diagonalnego (bez rzucającego),
    najbliższy wygrywa. Remis: ALLY -> wyższe id, ENEMY -> niższe id.

SKAN PIERŚCIENI (ring_scan):
═══════════════════════════════════════════════════════════════════

    Pierścienie od 1. W pierścieniu kafelki sortowane po id:
        rosnąco gdy (rzucający ALLY) == (kierunek REARMOST)
        malejąco w pozostałych przypadkach

row_scan = search_by_row, a gdy nic nie znajdzie - ring_scan.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING, Iterator, List, Optional

from ..core.hex_coord import Hex
from ..core.layout import are_hexes_in_same_diagonal_row
from ..core.state import Team
from .skill import SkillContext, SkillTargetInfo
from .targeting import calculate_distances, get_candidates, get_team_characters

if TYPE_CHECKING:
    from ..core.hex_grid import Grid


class RowScanDirection(Enum):
    FRONTMOST = auto()
    REARMOST = auto()


@dataclass
class RowScanOptions:
    """
    Opcje skanu pierścieni.
    
    Attributes:
        direction: Kolejność id w pierścieniu
        exclude_companions: Pomiń companiony (id >= 10000)
        max_distance: Maksymalny promień skanu
    """
    direction: RowScanDirection = RowScanDirection.FRONTMOST
    exclude_companions: bool = False
    max_distance: Optional[int] = None


# ═══════════════════════════════════════════════════════════════════════════
# GEOMETRIA PIERŚCIENI
# ═══════════════════════════════════════════════════════════════════════════

def walk_ring(center: Hex, radius: int, team: Team) -> Iterator[Hex]:
    """
    Zwraca hexy pierścienia w kolejności obchodu drużyny.
    
    Args:
        center: Środek
        radius: Promień (0 = tylko środek)
        team: ALLY - zgodnie z zegarem, ENEMY - przeciwnie
    """
    if radius == 0:
        yield center
        return
    
    if team == Team.ALLY:
        current = center.add(Hex.direction(0).scale(radius))
        for side in range(6):
            for _ in range(radius):
                yield current
                current = current.neighbor(side + 2)
    else:
        current = center.add(Hex.direction(3).scale(radius))
        for side in range(6):
            for _ in range(radius):
                current = current.neighbor(1 - side)
                yield current


def _max_candidate_distance(grid: "Grid", center: Hex, hex_ids: List[int]) -> int:
    return max((center.distance(grid.get_hex_by_id(h)) for h in hex_ids), default=0)


# ═══════════════════════════════════════════════════════════════════════════
# WYSZUKIWANIA
# ═══════════════════════════════════════════════════════════════════════════

def spiral_search_from_tile(
    grid: "Grid",
    center_hex_id: int,
    target_team: Team,
    caster_team: Team,
) -> Optional[SkillTargetInfo]:
    """
    Szuka spiralą od kafelka (zwykle symetrycznego do rzucającego).
    
    Args:
        grid: Siatka
        center_hex_id: Środek spirali
        target_team: Drużyna celów
        caster_team: Drużyna rzucającego (kierunek obchodu)
        
    Returns:
        SkillTargetInfo z metadata {symmetrical_hex_id, is_symmetrical_target,
        examined_tiles} albo None
    """
    center = grid.get_hex_by_id(center_hex_id)
    candidates = get_team_characters(grid, target_team)
    if not candidates:
        return None
    
    by_hex = {c.hex_id: c.character_id for c in candidates}
    max_distance = _max_candidate_distance(grid, center, list(by_hex))
    examined: List[int] = []
    
    for radius in range(max_distance + 1):
        for ring_hex in walk_ring(center, radius, caster_team):
            tile = grid.find_tile(ring_hex)
            if tile is None:
                continue
            hex_id = tile.hex.id
            examined.append(hex_id)
            if hex_id in by_hex:
                return SkillTargetInfo(
                    target_hex_id=hex_id,
                    target_character_id=by_hex[hex_id],
                    metadata={
                        "symmetrical_hex_id": center_hex_id,
                        "is_symmetrical_target": False,
                        "examined_tiles": list(examined),
                    },
                )
    return None


def search_by_row(
    context: SkillContext,
    target_team: Team,
    exclude_companions: bool = False,
) -> Optional[SkillTargetInfo]:
    """Najbliższy kandydat w tym samym rzędzie diagonalnym co rzucający."""
    grid, hex_id = context.grid, context.hex_id

    candidates = get_candidates(grid, target_team, context.character_id)
    if exclude_companions:
        candidates = [c for c in candidates if not grid.is_companion_id(c.character_id)]
    same_row = [c for c in candidates if are_hexes_in_same_diagonal_row(hex_id, c.hex_id)]
    if not same_row:
        return None
    
    calculate_distances(same_row, [hex_id], grid)
    if context.team == Team.ALLY:
        same_row.sort(key=lambda c: (c.distances[hex_id], -c.hex_id))
    else:
        same_row.sort(key=lambda c: (c.distances[hex_id], c.hex_id))
    
    target = same_row[0]
    return SkillTargetInfo(
        target_hex_id=target.hex_id,
        target_character_id=target.character_id,
        metadata={
            "source_hex_id": hex_id,
            "distance": target.distances[hex_id],
            "is_row_target": True,
            "examined_tiles": [c.hex_id for c in same_row],
        },
    )


def ring_scan(
    context: SkillContext,
    target_team: Team,
    options: Optional[RowScanOptions] = None,
) -> Optional[SkillTargetInfo]:
    """
    Skanuje pierścienie wokół rzucającego, w pierścieniu po id kafelków.
    
    Returns:
        SkillTargetInfo z metadata {source_hex_id, distance,
        is_row_scan_target, examined_tiles} albo None
    """
    options = options or RowScanOptions()
    grid, hex_id = context.grid, context.hex_id
    center = grid.get_hex_by_id(hex_id)
    
    candidates = get_candidates(grid, target_team, context.character_id)
    if options.exclude_companions:
        candidates = [c for c in candidates if not grid.is_companion_id(c.character_id)]
    if not candidates:
        return None
    
    by_hex = {c.hex_id: c.character_id for c in candidates}
    max_distance = _max_candidate_distance(grid, center, list(by_hex))
    if options.max_distance is not None:
        max_distance = min(max_distance, options.max_distance)
    
    ascending = (context.team == Team.ALLY) == (options.direction == RowScanDirection.REARMOST)
    examined: List[int] = []
    
    for distance in range(1, max_distance + 1):
        ring_ids = sorted(
            (tile.hex.id for tile in grid.get_all_tiles() if center.distance(tile.hex) == distance),
            reverse=not ascending,
        )
        for tile_id in ring_ids:
            examined.append(tile_id)
            if tile_id in by_hex:
                return SkillTargetInfo(
                    target_hex_id=tile_id,
                    target_character_id=by_hex[tile_id],
                    metadata={
                        "source_hex_id": hex_id,
                        "distance": distance,
                        "is_row_scan_target": True,
                        "examined_tiles": list(examined),
                    },
                )
    return None


def row_scan(
    context: SkillContext,
    target_team: Team,
    options: Optional[RowScanOptions] = None,
) -> Optional[SkillTargetInfo]:
    """Cel z rzędu diagonalnego, a gdy go brak - skan pierścieni."""
    options = options or RowScanOptions()
    target = search_by_row(context, target_team, options.exclude_companions)
    if target is not None:
        return target
    return ring_scan(context, target_team, options)
