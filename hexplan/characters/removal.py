"""
Zdejmowanie postaci z deaktywacją umiejętności.

Zdjęcie companiona zdejmuje jego właściciela (a deaktywacja umiejętności
właściciela zdejmuje wszystkie companiony).
"""

from __future__ import annotations
from typing import TYPE_CHECKING

from ..skills.skill import has_skill

if TYPE_CHECKING:
    from ..core.hex_grid import Grid
    from ..skills.skill_manager import SkillManager


def execute_remove_character(grid: "Grid", skill_manager: "SkillManager", hex_id: int) -> bool:
    """
    Zdejmuje postać z kafelka.
    
    Returns:
        bool: True także dla pustego kafelka (nie ma czego zdejmować)
    """
    character_id = grid.get_character(hex_id)
    team = grid.get_character_team(hex_id)
    if character_id is None or team is None:
        return True
    
    if grid.is_companion_id(character_id):
        main_hex_id = grid.find_character_hex(grid.get_main_character_id(character_id), team)
        if main_hex_id is not None:
            return execute_remove_character(grid, skill_manager, main_hex_id)
        return grid.remove_character(hex_id, True)
    
    # Deaktywacja może już zdjąć companiony
    if has_skill(character_id):
        skill_manager.deactivate_character_skill(character_id, hex_id, team, grid)
    
    removed = True
    if grid.has_character(hex_id):
        removed = grid.remove_character(hex_id, True)
    
    skill_manager.update_active_skills(grid)
    return removed


def execute_clear_all_characters(grid: "Grid", skill_manager: "SkillManager") -> bool:
    """Deaktywuje wszystkie umiejętności i czyści siatkę."""
    skill_manager.deactivate_all_skills(grid)
    return grid.clear_all_characters()
