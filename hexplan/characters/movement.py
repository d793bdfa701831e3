"""
Przenoszenie i zamiana postaci.

PRZENIESIENIE (execute_move_character):
═══════════════════════════════════════════════════════════════════

    Drużyna docelowa = drużyna kafelka docelowego.
    
    - ta sama drużyna albo postać bez umiejętności:
        perform_atomic_move  [zdejmij z from, postaw na to]
    - zmiana drużyny z umiejętnością:
        perform_cross_team_move
            1. zapamiętaj companiony + deaktywuj umiejętność
            2. przenieś
            3. aktywuj umiejętność w nowej drużynie
        rollback: postać wraca na from w starej drużynie,
        umiejętność i companiony wracają na swoje miejsca
    
    Companion nie może zmienić drużyny.

ZAMIANA (execute_swap_characters):
═══════════════════════════════════════════════════════════════════

    Postać z from trafia na to i odwrotnie. Każda przyjmuje drużynę
    kafelka, na który trafia.
    
    - ta sama drużyna albo żadna postać nie ma umiejętności:
        perform_atomic_swap
    - zamiana między drużynami:
        perform_cross_team_swap (deaktywacja, zamiana, aktywacja)
        odrzucana, jeśli postać trafiłaby do drużyny, w której już jest
"""

from __future__ import annotations
import logging
from typing import TYPE_CHECKING, List, Optional

from ..core.state import Team
from ..core.transaction import execute_transaction
from ..skills.skill import has_companion_skill, has_skill
from .companion import CompanionPosition, restore_companions, store_companion_positions
from .placement import refresh_skills

if TYPE_CHECKING:
    from ..core.hex_grid import Grid
    from ..skills.skill_manager import SkillManager

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════
# PRZENIESIENIE
# ═══════════════════════════════════════════════════════════════════════════

def perform_atomic_move(
    grid: "Grid",
    from_hex_id: int,
    to_hex_id: int,
    character_id: int,
    target_team: Team,
    original_team: Team,
) -> bool:
    """Transakcja [zdejmij z from, postaw na to] bez odświeżania umiejętności."""
    return execute_transaction(
        [
            lambda: grid.remove_character(from_hex_id, True),
            lambda: grid.place_character(to_hex_id, character_id, target_team, True),
        ],
        [lambda: grid.place_character(from_hex_id, character_id, original_team, True)],
    )


def perform_cross_team_move(
    grid: "Grid",
    skill_manager: "SkillManager",
    from_hex_id: int,
    to_hex_id: int,
    character_id: int,
    target_team: Team,
    original_team: Team,
) -> bool:
    """
    Przenosi postać z umiejętnością do drugiej drużyny.
    
    Umiejętność jest deaktywowana w starej drużynie i aktywowana w nowej.
    Porażka któregokolwiek kroku przywraca postać, jej umiejętność
    i companiony.
    """
    skill_was_deactivated = False
    companion_positions: List[CompanionPosition] = []
    
    def deactivate() -> bool:
        nonlocal skill_was_deactivated, companion_positions
        companion_positions = store_companion_positions(grid, character_id, original_team)
        skill_manager.deactivate_character_skill(character_id, from_hex_id, original_team, grid)
        skill_was_deactivated = True
        return True
    
    def move() -> bool:
        return perform_atomic_move(grid, from_hex_id, to_hex_id, character_id, target_team, original_team)
    
    def activate() -> bool:
        return skill_manager.activate_character_skill(character_id, to_hex_id, target_team, grid)
    
    def rollback() -> None:
        if grid.get_character(to_hex_id) == character_id:
            grid.remove_character(to_hex_id, True)
        if grid.get_character(from_hex_id) != character_id:
            grid.place_character(from_hex_id, character_id, original_team, True)
        if skill_was_deactivated and has_skill(character_id):
            skill_manager.activate_character_skill(character_id, from_hex_id, original_team, grid)
            if has_companion_skill(character_id):
                restore_companions(grid, skill_manager, character_id, companion_positions)
    
    return execute_transaction([deactivate, move, activate], [rollback])


def execute_move_character(
    grid: "Grid",
    skill_manager: "SkillManager",
    from_hex_id: int,
    to_hex_id: int,
    character_id: int,
) -> bool:
    """
    Przenosi postać z from na to.
    
    Returns:
        bool: False gdy from == to, na from stoi inna postać, kafelek
              docelowy nie należy do drużyny, companion zmieniałby
              drużynę albo transakcja się nie powiodła
    """
    if from_hex_id == to_hex_id:
        return False
    if grid.get_character(from_hex_id) != character_id:
        return False
    
    from_team = grid.get_character_team(from_hex_id)
    to_team = grid.get_team_from_tile_state(grid.get_tile_by_id(to_hex_id).state)
    if from_team is None or to_team is None:
        return False
    
    if grid.is_companion_id(character_id) and from_team != to_team:
        return False
    
    if from_team != to_team and has_skill(character_id):
        result = perform_cross_team_move(
            grid, skill_manager, from_hex_id, to_hex_id, character_id, to_team, from_team
        )
    else:
        result = perform_atomic_move(grid, from_hex_id, to_hex_id, character_id, to_team, from_team)
    
    if result:
        refresh_skills(grid)
    return result


# ═══════════════════════════════════════════════════════════════════════════
# ZAMIANA
# ═══════════════════════════════════════════════════════════════════════════

def would_create_duplicate(
    grid: "Grid",
    character_id: int,
    target_team: Team,
    exclude_hex_id: Optional[int] = None,
) -> bool:
    """Czy postać stoi już w drużynie docelowej (poza kafelkiem exclude_hex_id)."""
    for tile in grid.get_tiles_with_characters():
        if tile.hex.id == exclude_hex_id:
            continue
        if tile.character_id == character_id and tile.team == target_team:
            return True
    return False


def perform_atomic_swap(
    grid: "Grid",
    from_hex_id: int,
    to_hex_id: int,
    from_character_id: int,
    to_character_id: int,
    from_original_team: Team,
    to_original_team: Team,
    from_target_team: Team,
    to_target_team: Team,
) -> bool:
    """
    Transakcja zamiany bez odświeżania umiejętności.
    
    Na from trafia postać z to (w drużynie from_target_team),
    na to trafia postać z from (w drużynie to_target_team).
    """
    return execute_transaction(
        [
            lambda: grid.remove_character(from_hex_id, True),
            lambda: grid.remove_character(to_hex_id, True),
            lambda: grid.place_character(from_hex_id, to_character_id, from_target_team, True),
            lambda: grid.place_character(to_hex_id, from_character_id, to_target_team, True),
        ],
        [
            lambda: _restore_tile(grid, from_hex_id, from_character_id, from_original_team),
            lambda: _restore_tile(grid, to_hex_id, to_character_id, to_original_team),
        ],
    )


def _restore_tile(grid: "Grid", hex_id: int, character_id: int, team: Team) -> None:
    if grid.get_character(hex_id) == character_id and grid.get_character_team(hex_id) == team:
        return
    if grid.has_character(hex_id):
        grid.remove_character(hex_id, True)
    if not grid.place_character(hex_id, character_id, team, True):
        logger.warning("Failed to restore character %d on hex %d during rollback", character_id, hex_id)


def perform_cross_team_swap(
    grid: "Grid",
    skill_manager: "SkillManager",
    from_hex_id: int,
    to_hex_id: int,
    from_character_id: int,
    to_character_id: int,
    from_team: Team,
    to_team: Team,
) -> bool:
    """
    Zamienia postacie z różnych drużyn, przenosząc ich umiejętności.
    
    Rollback przywraca obie postacie, ich umiejętności i companiony.
    """
    if would_create_duplicate(grid, from_character_id, to_team, to_hex_id):
        return False
    if would_create_duplicate(grid, to_character_id, from_team, from_hex_id):
        return False
    
    from_had_skill = skill_manager.has_active_skill(from_character_id, from_team)
    to_had_skill = skill_manager.has_active_skill(to_character_id, to_team)
    skills_deactivated = False
    from_companions: List[CompanionPosition] = []
    to_companions: List[CompanionPosition] = []
    
    def deactivate() -> bool:
        nonlocal skills_deactivated, from_companions, to_companions
        if from_had_skill:
            from_companions = store_companion_positions(grid, from_character_id, from_team)
            skill_manager.deactivate_character_skill(from_character_id, from_hex_id, from_team, grid)
        if to_had_skill:
            to_companions = store_companion_positions(grid, to_character_id, to_team)
            skill_manager.deactivate_character_skill(to_character_id, to_hex_id, to_team, grid)
        skills_deactivated = True
        return True
    
    def swap() -> bool:
        return perform_atomic_swap(
            grid, from_hex_id, to_hex_id, from_character_id, to_character_id,
            from_team, to_team, from_team, to_team,
        )
    
    def activate() -> bool:
        if has_skill(from_character_id):
            if not skill_manager.activate_character_skill(from_character_id, to_hex_id, to_team, grid):
                return False
        if has_skill(to_character_id):
            if not skill_manager.activate_character_skill(to_character_id, from_hex_id, from_team, grid):
                return False
        return True
    
    def rollback() -> None:
        if has_skill(from_character_id):
            skill_manager.deactivate_character_skill(from_character_id, to_hex_id, to_team, grid)
        if has_skill(to_character_id):
            skill_manager.deactivate_character_skill(to_character_id, from_hex_id, from_team, grid)
        _restore_tile(grid, from_hex_id, from_character_id, from_team)
        _restore_tile(grid, to_hex_id, to_character_id, to_team)
        if not skills_deactivated:
            return
        if from_had_skill:
            skill_manager.activate_character_skill(from_character_id, from_hex_id, from_team, grid)
            restore_companions(grid, skill_manager, from_character_id, from_companions)
        if to_had_skill:
            skill_manager.activate_character_skill(to_character_id, to_hex_id, to_team, grid)
            restore_companions(grid, skill_manager, to_character_id, to_companions)
    
    return execute_transaction([deactivate, swap, activate], [rollback])


def execute_swap_characters(grid: "Grid", skill_manager: "SkillManager", from_hex_id: int, to_hex_id: int) -> bool:
    """
    Zamienia postacie stojące na dwóch kafelkach.
    
    Returns:
        bool: False gdy from == to, któryś kafelek jest pusty,
              companion zmieniałby drużynę albo zamiana się nie powiodła
    """
    if from_hex_id == to_hex_id:
        return False
    
    from_character_id = grid.get_character(from_hex_id)
    to_character_id = grid.get_character(to_hex_id)
    from_team = grid.get_character_team(from_hex_id)
    to_team = grid.get_character_team(to_hex_id)
    if from_character_id is None or to_character_id is None or from_team is None or to_team is None:
        return False
    
    if from_team != to_team and (
        grid.is_companion_id(from_character_id) or grid.is_companion_id(to_character_id)
    ):
        return False
    
    if from_team == to_team or not (has_skill(from_character_id) or has_skill(to_character_id)):
        if from_team != to_team and (
            would_create_duplicate(grid, from_character_id, to_team, to_hex_id)
            or would_create_duplicate(grid, to_character_id, from_team, from_hex_id)
        ):
            return False
        result = perform_atomic_swap(
            grid, from_hex_id, to_hex_id, from_character_id, to_character_id,
            from_team, to_team, from_team, to_team,
        )
    else:
        result = perform_cross_team_swap(
            grid, skill_manager, from_hex_id, to_hex_id,
            from_character_id, to_character_id, from_team, to_team,
        )
    
    if result:
        refresh_skills(grid)
    return result
