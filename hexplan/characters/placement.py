"""
Stawianie postaci z aktywacją umiejętności.

execute_place_character to jedna transakcja:
    1. deaktywacja umiejętności zastępowanej postaci (jeśli jest aktywna)
    2. grid.place_character (bez odświeżania)
    3. aktywacja umiejętności (jeśli postać ją ma)
Porażka kroku 3 (np. brak miejsca na companiona) zdejmuje postać
i przywraca zastąpioną postać z jej companionami.
"""

from __future__ import annotations
import logging
from typing import TYPE_CHECKING, List

from ..core.state import Team
from ..core.transaction import execute_transaction
from ..skills.skill import has_companion_skill, has_skill
from .companion import CompanionPosition, restore_companions, store_companion_positions

if TYPE_CHECKING:
    from ..core.hex_grid import Grid
    from ..skills.skill_manager import SkillManager

logger = logging.getLogger(__name__)


def refresh_skills(grid: "Grid") -> None:
    """Jedno odświeżenie aktywnych umiejętności po udanej operacji."""
    if grid.skill_manager is not None:
        grid.skill_manager.update_active_skills(grid)


def execute_place_character(
    grid: "Grid",
    skill_manager: "SkillManager",
    hex_id: int,
    character_id: int,
    team: Team = Team.ALLY,
) -> bool:
    """
    Stawia postać i aktywuje jej umiejętność.
    
    Companionów nie można stawiać ręcznie - tworzą je tylko umiejętności.
    Nie można też postawić postaci na kafelku companiona.
    
    Postać stojąca na kafelku z tej samej drużyny jest zastępowana: jej
    umiejętność jest najpierw deaktywowana (companiony schodzą z siatki,
    limit drużyny wraca), a porażka transakcji przywraca ją razem
    z companionami na ich kafelkach.
    
    Returns:
        bool: True jeśli postać stoi, a umiejętność (jeśli jest) działa
    """
    if grid.is_companion_id(character_id):
        return False
    
    occupant_id = grid.get_character(hex_id)
    if occupant_id is not None and grid.is_companion_id(occupant_id):
        return False
    replaces_skill = (
        occupant_id is not None
        and grid.get_character_team(hex_id) == team
        and skill_manager.has_active_skill(occupant_id, team)
    )
    
    placed = False
    occupant_deactivated = False
    companion_positions: List[CompanionPosition] = []
    
    def deactivate_occupant() -> bool:
        nonlocal occupant_deactivated, companion_positions
        if not replaces_skill:
            return True
        companion_positions = store_companion_positions(grid, occupant_id, team)
        skill_manager.deactivate_character_skill(occupant_id, hex_id, team, grid)
        occupant_deactivated = True
        return True
    
    def place() -> bool:
        nonlocal placed
        placed = grid.place_character(hex_id, character_id, team, True)
        return placed
    
    def activate() -> bool:
        if not has_skill(character_id):
            return True
        return skill_manager.activate_character_skill(character_id, hex_id, team, grid)
    
    def undo_place() -> None:
        if placed and grid.get_character(hex_id) == character_id:
            if not grid.remove_character(hex_id, True):
                logger.warning("Failed to rollback character placement at hex %d", hex_id)
    
    def restore_occupant() -> None:
        if not occupant_deactivated:
            return
        if grid.get_character(hex_id) != occupant_id:
            grid.place_character(hex_id, occupant_id, team, True)
        skill_manager.activate_character_skill(occupant_id, hex_id, team, grid)
        if has_companion_skill(occupant_id):
            restore_companions(grid, skill_manager, occupant_id, companion_positions)
    
    result = execute_transaction(
        [deactivate_occupant, place, activate],
        [undo_place, restore_occupant],
    )
    
    if result:
        refresh_skills(grid)
    return result


def execute_auto_place_character(
    grid: "Grid",
    skill_manager: "SkillManager",
    character_id: int,
    team: Team,
) -> bool:
    """
    Stawia postać na losowym wolnym kafelku drużyny i aktywuje umiejętność.
    
    Wybór kafelka jak w Grid.auto_place_character (sortowanie malejąco
    po id + RNG siatki).
    """
    if not grid.can_place_character(character_id, team):
        return False
    
    available = grid.get_all_available_tiles_for_team(team)
    if not available:
        return False
    
    available.sort(key=lambda t: t.hex.id, reverse=True)
    hex_id = available[grid.rng.randint(0, len(available) - 1)].hex.id
    
    if not grid.place_character(hex_id, character_id, team, True):
        return False
    
    if has_skill(character_id):
        if not skill_manager.activate_character_skill(character_id, hex_id, team, grid):
            if not grid.remove_character(hex_id, True):
                logger.warning(
                    "Failed to remove character %d from hex %d after skill activation failure",
                    character_id, hex_id,
                )
            return False
    
    refresh_skills(grid)
    return True
