"""
Katalog umiejętności postaci - rejestrowany przy imporcie pakietu.

COMPANIONY:
═══════════════════════════════════════════════════════════════════

    phraesto (50)       1 companion (10050), limit drużyny +1
    elijah-lailah (68)  1 companion (10068), limit +1, zasięg companiona 1
    zanie (89)          2 wieżyczki (10089, 20089), limit +2, zasięg 3
    
    Companion trafia na LOSOWY wolny kafelek drużyny (RNG siatki).
    Brak miejsca rzuca SkillActivationError - manager zwraca False,
    a transakcja stawiania się wycofuje.
    Deaktywacja zdejmuje companiony, czyści powiązania i zmniejsza
    limit do max(domyślny, limit - n).

CELOWANIE:
═══════════════════════════════════════════════════════════════════

    bonnie (66)     najbardziej wysunięty do tyłu przeciwnik
    isabella (93)   najbardziej wysunięty do przodu sojusznik (bez siebie)
    vala (46)       najdalszy przeciwnik
    aliceth (91)    sojusznik z rzędu / skanu + najdalszy przeciwnik (strzałki)
    nara (58)       przeciwnik na kafelku symetrycznym, inaczej spirala od niego
    reinier (31)    sąsiedni sojusznik z przeciwnikiem na jego kafelku symetrycznym
    daimon (81)     sąsiedni sojusznik za plecami (kolejność priorytetu)
    
    Cel jest przeliczany w on_update po każdej zmianie siatki.
"""

from __future__ import annotations
import logging
from typing import Callable, List, Optional, Tuple

from ..core.errors import SkillActivationError
from ..core.hex_grid import COMPANION_ID_OFFSET
from ..core.state import Team
from .ring import row_scan, spiral_search_from_tile
from .skill import Skill, SkillContext, SkillTargetInfo, register_skill
from .symmetry import get_symmetrical_hex_id
from .targeting import TargetingMethod, find_target, get_candidates

logger = logging.getLogger(__name__)

TargetCalculator = Callable[[SkillContext], Optional[SkillTargetInfo]]


# ═══════════════════════════════════════════════════════════════════════════
# COMPANIONY
# ═══════════════════════════════════════════════════════════════════════════

def _companion_ids(character_id: int, count: int) -> List[int]:
    return [COMPANION_ID_OFFSET * (n + 1) + character_id for n in range(count)]


def _make_companion_callbacks(skill_id: str, count: int) -> Tuple[Callable, Callable]:
    """
    Tworzy (on_activate, on_deactivate) dla umiejętności z companionami.
    
    Args:
        skill_id: Id umiejętności (do odczytu kolorów z rejestru i logów)
        count: Liczba companionów
    """
    
    def on_activate(context: SkillContext) -> None:
        grid, team, character_id = context.grid, context.team, context.character_id
        skill = SKILLS[skill_id]
        
        available = list(grid.get_all_available_tiles_for_team(team))
        if len(available) < count:
            raise SkillActivationError(
                f"Not enough space for {count} companion(s) of {skill_id}",
                {"character_id": character_id, "team": team.value, "available": len(available)},
            )
        
        current_size = grid.get_max_team_size(team)
        if not grid.set_max_team_size(team, current_size + count):
            raise SkillActivationError(
                f"Failed to increase team size for {team.value}",
                {"character_id": character_id, "size": current_size + count},
            )
        
        placed: List[int] = []
        for companion_id in _companion_ids(character_id, count):
            tile = available.pop(grid.rng.randint(0, len(available) - 1))
            if not grid.place_character(tile.hex.id, companion_id, team, True):
                for placed_id in placed:
                    placed_hex = grid.find_character_hex(placed_id, team)
                    if placed_hex is not None:
                        grid.remove_character(placed_hex, True)
                    grid.remove_companion_link(character_id, placed_id, team)
                if not grid.set_max_team_size(team, current_size):
                    logger.warning("%s: failed to rollback team size for %s", skill_id, team.value)
                raise SkillActivationError(
                    f"Failed to place companion {companion_id}",
                    {"hex_id": tile.hex.id},
                )
            
            placed.append(companion_id)
            grid.add_companion_link(character_id, companion_id, team)
            if skill.companion_color_modifier:
                context.skill_manager.add_character_color_modifier(
                    companion_id, team, skill.companion_color_modifier
                )
            if skill.companion_image_modifier:
                context.skill_manager.add_character_image_modifier(
                    companion_id, team, skill.companion_image_modifier
                )
        
        if skill.color_modifier:
            context.skill_manager.add_character_color_modifier(character_id, team, skill.color_modifier)
    
    def on_deactivate(context: SkillContext) -> None:
        grid, team, character_id = context.grid, context.team, context.character_id
        manager = context.skill_manager
        
        manager.remove_character_color_modifier(character_id, team)
        for companion_id in sorted(grid.get_companions(character_id, team)):
            manager.remove_character_color_modifier(companion_id, team)
            manager.remove_character_image_modifier(companion_id, team)
            companion_hex = grid.find_character_hex(companion_id, team)
            if companion_hex is not None and not grid.remove_character(companion_hex, True):
                logger.warning(
                    "%s: failed to remove companion %d from hex %d", skill_id, companion_id, companion_hex
                )
        grid.clear_companion_links(character_id, team)
        
        restored = max(grid.default_team_size, grid.get_max_team_size(team) - count)
        if not grid.set_max_team_size(team, restored):
            logger.warning("%s: failed to restore team size for %s", skill_id, team.value)
    
    return on_activate, on_deactivate


# ═══════════════════════════════════════════════════════════════════════════
# CELOWANIE
# ═══════════════════════════════════════════════════════════════════════════

def _make_target_callbacks(calculate: TargetCalculator) -> Tuple[Callable, Callable, Callable]:
    """
    Tworzy (on_activate, on_deactivate, on_update) dla umiejętności z celem.
    
    Cel dostaje metadata["source_hex_id"] z bieżącego kafelka postaci.
    Brak celu przy odświeżeniu czyści poprzedni.
    """
    
    def refresh(context: SkillContext) -> None:
        target = calculate(context)
        if target is None:
            context.skill_manager.clear_skill_target(context.character_id, context.team)
            return
        target.metadata["source_hex_id"] = context.hex_id
        context.skill_manager.set_skill_target(context.character_id, context.team, target)
    
    def on_deactivate(context: SkillContext) -> None:
        context.skill_manager.clear_skill_target(context.character_id, context.team)
    
    return refresh, on_deactivate, refresh


def bonnie_target(context: SkillContext) -> Optional[SkillTargetInfo]:
    return find_target(context, context.team.opposite, TargetingMethod.REARMOST)


def isabella_target(context: SkillContext) -> Optional[SkillTargetInfo]:
    return find_target(context, context.team, TargetingMethod.FRONTMOST, exclude_self=True)


def vala_target(context: SkillContext) -> Optional[SkillTargetInfo]:
    return find_target(context, context.team.opposite, TargetingMethod.FURTHEST)


def aliceth_target(context: SkillContext) -> Optional[SkillTargetInfo]:
    """
    Podwójny cel: sojusznik (rząd, potem skan pierścieni) i najdalszy przeciwnik.
    
    Bez celu-sojusznika nie ma żadnego celu. Strzałki trafiają do
    metadata["arrows"] jako {from_hex_id, to_hex_id, type}.
    """
    ally_target = row_scan(context, context.team)
    if ally_target is None:
        return None
    enemy_target = find_target(context, context.team.opposite, TargetingMethod.FURTHEST)
    
    arrows = [{"from_hex_id": context.hex_id, "to_hex_id": ally_target.target_hex_id, "type": "ally"}]
    if enemy_target is not None:
        arrows.append(
            {"from_hex_id": context.hex_id, "to_hex_id": enemy_target.target_hex_id, "type": "enemy"}
        )
    
    metadata = dict(ally_target.metadata)
    metadata["arrows"] = arrows
    return SkillTargetInfo(
        target_hex_id=ally_target.target_hex_id,
        target_character_id=ally_target.target_character_id,
        metadata=metadata,
    )


def nara_target(context: SkillContext) -> Optional[SkillTargetInfo]:
    """Przeciwnik na kafelku symetrycznym, a gdy go brak - spirala od tego kafelka."""
    grid = context.grid
    opposing = context.team.opposite
    
    symmetrical_id = get_symmetrical_hex_id(context.hex_id)
    if symmetrical_id is None or not grid.has_hex_id(symmetrical_id):
        return None
    
    tile = grid.get_tile_by_id(symmetrical_id)
    if tile.character_id is not None and tile.team == opposing:
        return SkillTargetInfo(
            target_hex_id=symmetrical_id,
            target_character_id=tile.character_id,
            metadata={
                "symmetrical_hex_id": symmetrical_id,
                "is_symmetrical_target": True,
                "examined_tiles": [symmetrical_id],
            },
        )
    return spiral_search_from_tile(grid, symmetrical_id, opposing, context.team)


# ═══════════════════════════════════════════════════════════════════════════
# PODŚWIETLANIE KAFELKÓW
# ═══════════════════════════════════════════════════════════════════════════

# Kierunki sąsiadów: 0=top-right 1=right 2=bottom-right 3=bottom-left 4=left 5=top-left
REINIER_PRIORITY = {
    Team.ALLY: (3, 4, 2, 1, 5, 0),
    Team.ENEMY: (0, 5, 1, 2, 4, 3),
}


def reinier_target(context: SkillContext) -> Optional[SkillTargetInfo]:
    """
    Sąsiedni sojusznik o najwyższym priorytecie kierunku, o ile na jego
    kafelku symetrycznym stoi przeciwnik.
    """
    grid, team = context.grid, context.team
    center = grid.get_hex_by_id(context.hex_id)
    
    neighbors = center.get_neighbors()
    ally_hex_id = None
    for direction in REINIER_PRIORITY[team]:
        tile = grid.find_tile(neighbors[direction])
        if tile is not None and tile.character_id is not None and tile.team == team:
            ally_hex_id = tile.hex.id
            break
    if ally_hex_id is None:
        return None
    
    enemy_hex_id = get_symmetrical_hex_id(ally_hex_id)
    if enemy_hex_id is None or not grid.has_hex_id(enemy_hex_id):
        return None
    enemy_tile = grid.get_tile_by_id(enemy_hex_id)
    if enemy_tile.character_id is None or enemy_tile.team != team.opposite:
        return None
    
    return SkillTargetInfo(
        target_hex_id=ally_hex_id,
        target_character_id=None,
        metadata={"ally_hex_id": ally_hex_id, "enemy_hex_id": enemy_hex_id},
    )


def daimon_target(context: SkillContext) -> Optional[SkillTargetInfo]:
    """
    Sąsiedni sojusznik za plecami.
    
    "Za plecami" = niższe id dla ALLY, wyższe dla ENEMY. Priorytet:
    kafelek bezpośrednio z tyłu (skrajne id), potem z pozostałych dwóch
    wyższe id (ALLY) / niższe id (ENEMY).
    """
    grid, team, hex_id = context.grid, context.team, context.hex_id
    center = grid.get_hex_by_id(hex_id)
    
    behind = sorted(
        (
            tile.hex.id for tile in grid.get_all_tiles()
            if center.distance(tile.hex) == 1
            and (tile.hex.id < hex_id if team == Team.ALLY else tile.hex.id > hex_id)
        ),
        reverse=team == Team.ENEMY,
    )
    priority = behind[:1] + behind[1:][::-1]
    
    candidates = {c.hex_id: c for c in get_candidates(grid, team, context.character_id)}
    for tile_id in priority:
        candidate = candidates.get(tile_id)
        if candidate is not None:
            return SkillTargetInfo(
                target_hex_id=candidate.hex_id,
                target_character_id=candidate.character_id,
                metadata={"source_hex_id": hex_id, "distance": 1},
            )
    return None


def _highlighted_tiles(target: Optional[SkillTargetInfo]) -> List[int]:
    if target is None:
        return []
    if "ally_hex_id" in target.metadata:
        return [target.metadata["ally_hex_id"], target.metadata["enemy_hex_id"]]
    return [target.target_hex_id]


def _make_tile_callbacks(skill_id: str, calculate: TargetCalculator) -> Tuple[Callable, Callable, Callable]:
    """
    Jak _make_target_callbacks, ale cel podświetla kafelki kolorem
    umiejętności. Stare podświetlenia są zdejmowane przed przeliczeniem.
    """
    
    def clear_highlights(context: SkillContext) -> None:
        color = SKILLS[skill_id].tile_color_modifier
        previous = context.skill_manager.get_skill_target(context.character_id, context.team)
        for tile_id in _highlighted_tiles(previous):
            context.skill_manager.remove_tile_color_modifier(tile_id, color)
    
    def refresh(context: SkillContext) -> None:
        clear_highlights(context)
        target = calculate(context)
        if target is None:
            context.skill_manager.clear_skill_target(context.character_id, context.team)
            return
        context.skill_manager.set_skill_target(context.character_id, context.team, target)
        for tile_id in _highlighted_tiles(target):
            context.skill_manager.set_tile_color_modifier(tile_id, SKILLS[skill_id].tile_color_modifier)
    
    def on_deactivate(context: SkillContext) -> None:
        clear_highlights(context)
        context.skill_manager.clear_skill_target(context.character_id, context.team)
    
    return refresh, on_deactivate, refresh


# ═══════════════════════════════════════════════════════════════════════════
# REJESTRACJA
# ═══════════════════════════════════════════════════════════════════════════

def _companion_skill(skill_id: str, count: int, **fields) -> Skill:
    on_activate, on_deactivate = _make_companion_callbacks(skill_id, count)
    return Skill(id=skill_id, on_activate=on_activate, on_deactivate=on_deactivate, **fields)


def _target_skill(skill_id: str, calculate: TargetCalculator, **fields) -> Skill:
    on_activate, on_deactivate, on_update = _make_target_callbacks(calculate)
    return Skill(
        id=skill_id, on_activate=on_activate, on_deactivate=on_deactivate, on_update=on_update, **fields
    )


def _tile_skill(skill_id: str, calculate: TargetCalculator, **fields) -> Skill:
    on_activate, on_deactivate, on_update = _make_tile_callbacks(skill_id, calculate)
    return Skill(
        id=skill_id, on_activate=on_activate, on_deactivate=on_deactivate, on_update=on_update, **fields
    )


SKILLS = {
    skill.id: skill for skill in (
        _companion_skill(
            "phraesto", 1,
            character_id=50,
            name="Shadow Companion",
            description="Creates a shadow companion, increasing team capacity by 1. "
                        "If either Phraesto is removed, both are removed.",
            color_modifier="#ffffff",
            companion_color_modifier="#c83232",
        ),
        _companion_skill(
            "elijah-lailah", 1,
            character_id=68,
            name="Twins",
            description="Elijah and Lailah appear as separate units, increasing team capacity by 1. "
                        "Lailah has a range of 1.",
            color_modifier="#6ca3a0",
            companion_color_modifier="#cd7169",
            companion_range=1,
        ),
        _companion_skill(
            "zanie", 2,
            character_id=89,
            name="Turret",
            description="Places 2 turrets, increasing team capacity by 2. Each turret has a range of 3.",
            companion_image_modifier="zanie-turret",
            companion_range=3,
        ),
        _target_skill(
            "bonnie", bonnie_target,
            character_id=66,
            name="Decay's Reach",
            description="Targets the rearmost character on the opposing team.",
            targeting_color_modifier="#98be5d",
        ),
        _target_skill(
            "isabella", isabella_target,
            character_id=93,
            name="Grimoire Pact",
            description="Targets the frontmost ally character on the same team.",
            targeting_color_modifier="#6d9c86",
        ),
        _target_skill(
            "vala", vala_target,
            character_id=46,
            name="Assassin",
            description="Targets the opposing character furthest from Vala.",
            targeting_color_modifier="#7c3aed",
        ),
        _target_skill(
            "aliceth", aliceth_target,
            character_id=91,
            name="Guiding Light",
            description="Targets the closest ally in the same row, otherwise scans outward. "
                        "Also targets the furthest opposing character.",
            targeting_color_modifier="#ffa000",
        ),
        _target_skill(
            "nara", nara_target,
            character_id=58,
            name="Phantom Chains",
            description="Targets the opposing character on the symmetrical tile, "
                        "otherwise the closest one to that tile.",
            targeting_color_modifier="#98be5d",
        ),
        _tile_skill(
            "reinier", reinier_target,
            character_id=31,
            name="Dynamic Balance",
            description="Targets an adjacent ally whose symmetrical tile holds an enemy.",
            tile_color_modifier="#9925be",
        ),
        _tile_skill(
            "daimon", daimon_target,
            character_id=81,
            name="Buddy Barrier",
            description="Targets an ally on the adjacent tiles behind him.",
            tile_color_modifier="#6d9c86",
        ),
    )
}


def register_catalog() -> None:
    """Rejestruje wszystkie umiejętności katalogu (ponowne wywołanie nadpisuje)."""
    for skill in SKILLS.values():
        register_skill(skill)


register_catalog()
