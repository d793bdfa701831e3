"""
Targeting umiejętności oparty na odległości i numeracji kafelków.

Numery kafelków rosną od tylnej linii sojuszników (1) do tylnej linii
wrogów (45). Stąd:

METODY:
═══════════════════════════════════════════════════════════════════

    CLOSEST    - najbliższy kandydat (odległość hex od punktu odniesienia)
    FURTHEST   - najdalszy kandydat
    FRONTMOST  - najbardziej wysunięty do przodu:
                   cel ENEMY -> najmniejsze id, cel ALLY -> największe id
                   (zawsze pomija samego siebie we własnej drużynie)
    REARMOST   - najbardziej z tyłu:
                   cel ENEMY -> największe id, cel ALLY -> najmniejsze id
                   (pomija siebie tylko z exclude_self)

REMISY (CLOSEST / FURTHEST):
═══════════════════════════════════════════════════════════════════

    Rzucający z ALLY wybiera niższe id, z ENEMY wyższe id
    (symetria obrotu planszy o 180°).

UŻYCIE:
    target = find_target(context, Team.ENEMY, TargetingMethod.FURTHEST)
    if target:
        context.skill_manager.set_skill_target(..., target)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, Dict, List, Optional

from ..core.state import Team
from .skill import SkillContext, SkillTargetInfo

if TYPE_CHECKING:
    from ..core.hex_grid import Grid


class TargetingMethod(Enum):
    CLOSEST = auto()
    FURTHEST = auto()
    FRONTMOST = auto()
    REARMOST = auto()


@dataclass
class TargetCandidate:
    """
    Postać-kandydat na cel.
    
    Attributes:
        hex_id: Kafelek kandydata
        character_id: Id postaci
        distances: Odległości od punktów odniesienia (hex_id -> dystans)
    """
    hex_id: int
    character_id: int
    distances: Dict[int, int] = field(default_factory=dict)


# ═══════════════════════════════════════════════════════════════════════════
# KANDYDACI
# ═══════════════════════════════════════════════════════════════════════════

def get_opposing_team(team: Team) -> Team:
    return team.opposite


def get_team_characters(grid: "Grid", team: Team) -> List[TargetCandidate]:
    """Wszystkie postacie drużyny jako kandydaci."""
    return [
        TargetCandidate(hex_id=tile.hex.id, character_id=tile.character_id)
        for tile in grid.get_tiles_with_characters()
        if tile.team == team
    ]


def get_opposing_characters(grid: "Grid", team: Team) -> List[TargetCandidate]:
    return get_team_characters(grid, team.opposite)


def get_candidates(
    grid: "Grid",
    target_team: Team,
    exclude_character_id: Optional[int] = None,
) -> List[TargetCandidate]:
    """Postacie drużyny, opcjonalnie bez jednej postaci (zwykle rzucającego)."""
    candidates = get_team_characters(grid, target_team)
    if exclude_character_id is not None:
        candidates = [c for c in candidates if c.character_id != exclude_character_id]
    return candidates


def calculate_distances(
    candidates: List[TargetCandidate],
    reference_hex_ids: List[int],
    grid: "Grid",
) -> None:
    """Uzupełnia candidate.distances dla każdego punktu odniesienia (w miejscu)."""
    for ref_id in reference_hex_ids:
        ref_hex = grid.get_hex_by_id(ref_id)
        for candidate in candidates:
            candidate.distances[ref_id] = ref_hex.distance(grid.get_hex_by_id(candidate.hex_id))


# ═══════════════════════════════════════════════════════════════════════════
# WYBÓR CELU
# ═══════════════════════════════════════════════════════════════════════════

def find_target(
    context: SkillContext,
    target_team: Team,
    method: TargetingMethod,
    exclude_self: bool = False,
    reference_hex_id: Optional[int] = None,
) -> Optional[SkillTargetInfo]:
    """
    Wybiera cel umiejętności.
    
    Args:
        context: Kontekst rzucającego
        target_team: Drużyna celów
        method: Metoda wyboru
        exclude_self: Pomiń rzucającego (CLOSEST/FURTHEST/REARMOST)
        reference_hex_id: Punkt odniesienia odległości (domyślnie kafelek rzucającego)
        
    Returns:
        SkillTargetInfo albo None, gdy brak kandydatów
        
    Example:
        >>> find_target(ctx, Team.ENEMY, TargetingMethod.CLOSEST)
        SkillTargetInfo(target_hex_id=40, target_character_id=200, metadata={...})
    """
    if method == TargetingMethod.REARMOST:
        return find_rearmost_target(context, target_team, exclude_self)
    if method == TargetingMethod.FRONTMOST:
        return find_frontmost_target(context, target_team)
    
    grid = context.grid
    ref_id = reference_hex_id if reference_hex_id is not None else context.hex_id
    
    candidates = get_candidates(
        grid, target_team, context.character_id if exclude_self else None
    )
    if not candidates:
        return None
    
    calculate_distances(candidates, [ref_id], grid)
    
    if method == TargetingMethod.FURTHEST:
        best_distance = max(c.distances[ref_id] for c in candidates)
    else:
        best_distance = min(c.distances[ref_id] for c in candidates)
    tied = [c for c in candidates if c.distances[ref_id] == best_distance]
    
    if context.team == Team.ALLY:
        winner = min(tied, key=lambda c: c.hex_id)
    else:
        winner = max(tied, key=lambda c: c.hex_id)
    
    return SkillTargetInfo(
        target_hex_id=winner.hex_id,
        target_character_id=winner.character_id,
        metadata={
            "source_hex_id": context.hex_id,
            "distance": winner.distances[ref_id],
            "examined_tiles": [c.hex_id for c in candidates],
        },
    )


def find_rearmost_target(
    context: SkillContext,
    target_team: Team,
    exclude_self: bool = False,
) -> Optional[SkillTargetInfo]:
    """
    Najbardziej wysunięty do tyłu kandydat drużyny celów.
    
    O wyborze decyduje drużyna CELU, nie rzucającego.
    """
    candidates = get_team_characters(context.grid, target_team)
    if exclude_self and target_team == context.team:
        candidates = [c for c in candidates if c.character_id != context.character_id]
    if not candidates:
        return None
    
    if target_team == Team.ENEMY:
        winner = max(candidates, key=lambda c: c.hex_id)
    else:
        winner = min(candidates, key=lambda c: c.hex_id)
    
    return SkillTargetInfo(
        target_hex_id=winner.hex_id,
        target_character_id=winner.character_id,
        metadata={
            "source_hex_id": context.hex_id,
            "examined_tiles": [c.hex_id for c in candidates],
            "is_rearmost_target": True,
        },
    )


def find_frontmost_target(context: SkillContext, target_team: Team) -> Optional[SkillTargetInfo]:
    """Najbardziej wysunięty do przodu kandydat (bez rzucającego)."""
    candidates = get_team_characters(context.grid, target_team)
    if target_team == context.team:
        candidates = [c for c in candidates if c.character_id != context.character_id]
    if not candidates:
        return None
    
    if target_team == Team.ENEMY:
        winner = min(candidates, key=lambda c: c.hex_id)
    else:
        winner = max(candidates, key=lambda c: c.hex_id)
    
    return SkillTargetInfo(
        target_hex_id=winner.hex_id,
        target_character_id=winner.character_id,
        metadata={
            "source_hex_id": context.hex_id,
            "examined_tiles": [c.hex_id for c in candidates],
            "is_frontmost_target": True,
        },
    )
