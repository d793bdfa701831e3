"""
Pozycje companionów przy operacjach zmieniających drużynę.

Deaktywacja umiejętności z companionami zdejmuje je z siatki, a ponowna
aktywacja stawia je na LOSOWYCH kafelkach. Gdy operacja się wycofuje,
companiony mają wrócić dokładnie tam, gdzie stały - dlatego przed
deaktywacją zapamiętujemy ich pozycje, a w rollbacku przestawiamy.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, List

from ..core.state import Team
from ..skills.skill import get_character_skill

if TYPE_CHECKING:
    from ..core.hex_grid import Grid
    from ..skills.skill_manager import SkillManager

logger = logging.getLogger(__name__)


@dataclass
class CompanionPosition:
    companion_id: int
    hex_id: int
    team: Team
    main_char_id: int


def store_companion_positions(grid: "Grid", character_id: int, team: Team) -> List[CompanionPosition]:
    """Zapamiętuje kafelki companionów postaci (tylko tych, które stoją na siatce)."""
    positions = []
    for companion_id in sorted(grid.get_companions(character_id, team)):
        hex_id = grid.find_character_hex(companion_id, team)
        if hex_id is not None:
            positions.append(CompanionPosition(companion_id, hex_id, team, character_id))
    return positions


def restore_companions(
    grid: "Grid",
    skill_manager: "SkillManager",
    main_char_id: int,
    positions: List[CompanionPosition],
) -> None:
    """
    Przestawia companiony postaci na zapamiętane kafelki.
    
    Companion stojący gdzie indziej jest zdejmowany i stawiany na
    oryginalnym kafelku, po czym jego modyfikatory (kolor, obrazek)
    są dodawane ponownie.
    """
    skill = get_character_skill(main_char_id)
    
    # Najpierw zdejmujemy wszystkie, bo companiony mogą stać na swoich kafelkach nawzajem
    to_restore: List[CompanionPosition] = []
    for position in positions:
        if position.main_char_id != main_char_id:
            continue
        current_hex_id = grid.find_character_hex(position.companion_id, position.team)
        if current_hex_id is None or current_hex_id == position.hex_id:
            continue
        if not grid.remove_character(current_hex_id, True):
            logger.warning(
                "Failed to remove companion %d from hex %d during restoration",
                position.companion_id, current_hex_id,
            )
        to_restore.append(position)
    
    for position in to_restore:
        grid.place_character(position.hex_id, position.companion_id, position.team, True)
        
        if skill is not None and skill.companion_color_modifier:
            skill_manager.add_character_color_modifier(
                position.companion_id, position.team, skill.companion_color_modifier
            )
        if skill is not None and skill.companion_image_modifier:
            skill_manager.add_character_image_modifier(
                position.companion_id, position.team, skill.companion_image_modifier
            )
