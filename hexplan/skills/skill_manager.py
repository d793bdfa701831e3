"""
SkillManager - cykl życia aktywnych umiejętności i ich efekty wizualne.

Jeden manager na sesję. Przechowuje:
- aktywne umiejętności          "characterId-team" -> {character_id, hex_id, team}
- kolory ramek postaci           "characterId-team" -> kolor
- obrazki postaci (companiony)   "characterId-team" -> nazwa obrazka
- kolory kafelków                hex_id -> kolor
- cele umiejętności              "characterId-team" -> SkillTargetInfo
- licznik wersji (target_version) zwiększany przy każdej zmianie celów
  lub modyfikatorów - pozwala wykryć zmianę bez porównywania stanu

Cykl życia:
    activate_character_skill   -> on_activate   (wyjątek = porażka, False)
    deactivate_character_skill -> on_deactivate (zawsze wywoływane)
    update_active_skills       -> on_update     (po każdej zmianie siatki)
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, List, Optional

from ..core.state import Team
from .skill import SkillContext, SkillTargetInfo, get_character_skill

if TYPE_CHECKING:
    from ..core.hex_grid import Grid

logger = logging.getLogger(__name__)


@dataclass
class ActiveSkill:
    """Wpis aktywnej umiejętności."""
    character_id: int
    hex_id: int
    team: Team
    
    def to_dict(self) -> Dict:
        return {"character_id": self.character_id, "hex_id": self.hex_id, "team": self.team.value}


def skill_key(character_id: int, team: Team) -> str:
    """Klucz "characterId-team" (ta sama postać może być w obu drużynach)."""
    return f"{character_id}-{team.value}"


class SkillManager:
    """
    Zarządza aktywnymi umiejętnościami.
    
    Example:
        >>> manager = SkillManager()
        >>> grid.skill_manager = manager
        >>> manager.activate_character_skill(66, 1, Team.ALLY, grid)
        True
        >>> manager.has_active_skill(66, Team.ALLY)
        True
    """
    
    def __init__(self):
        self._active_skills: Dict[str, ActiveSkill] = {}
        self._character_color_modifiers: Dict[str, str] = {}
        self._character_image_modifiers: Dict[str, str] = {}
        self._tile_color_modifiers: Dict[int, str] = {}
        self._skill_targets: Dict[str, SkillTargetInfo] = {}
        self._target_version = 0
    
    def _context(self, grid: "Grid", hex_id: int, team: Team, character_id: int) -> SkillContext:
        return SkillContext(
            grid=grid,
            hex_id=hex_id,
            team=team,
            character_id=character_id,
            skill_manager=self,
        )
    
    # ─────────────────────────────────────────────────────────────────────────
    # STAN AKTYWNYCH UMIEJĘTNOŚCI
    # ─────────────────────────────────────────────────────────────────────────
    
    def has_active_skill(self, character_id: int, team: Optional[Team] = None) -> bool:
        """Czy umiejętność jest aktywna (w danej drużynie lub w dowolnej)."""
        if team is not None:
            return skill_key(character_id, team) in self._active_skills
        return any(info.character_id == character_id for info in self._active_skills.values())
    
    def get_active_skill_info(
        self, character_id: int, team: Optional[Team] = None
    ) -> Optional[ActiveSkill]:
        if team is not None:
            return self._active_skills.get(skill_key(character_id, team))
        for info in self._active_skills.values():
            if info.character_id == character_id:
                return info
        return None
    
    def get_active_skills(self) -> Dict[str, ActiveSkill]:
        return dict(self._active_skills)
    
    # ─────────────────────────────────────────────────────────────────────────
    # CYKL ŻYCIA
    # ─────────────────────────────────────────────────────────────────────────
    
    def activate_character_skill(
        self, character_id: int, hex_id: int, team: Team, grid: "Grid"
    ) -> bool:
        """
        Aktywuje umiejętność postaci.
        
        Jeśli umiejętność była już aktywna w tej drużynie, najpierw jest
        deaktywowana. Wyjątek z on_activate cofa wpis i daje False.
        
        Returns:
            bool: True gdy aktywowano lub postać nie ma umiejętności
        """
        skill = get_character_skill(character_id)
        if skill is None:
            return True
        
        key = skill_key(character_id, team)
        if key in self._active_skills:
            self.deactivate_character_skill(character_id, hex_id, team, grid)
        
        self._active_skills[key] = ActiveSkill(character_id, hex_id, team)
        
        try:
            skill.on_activate(self._context(grid, hex_id, team, character_id))
        except Exception as exc:
            self._active_skills.pop(key, None)
            logger.warning("Skill '%s' failed to activate on hex %d: %s", skill.id, hex_id, exc)
            return False
        return True
    
    def deactivate_character_skill(
        self, character_id: int, hex_id: int, team: Team, grid: "Grid"
    ) -> None:
        """Usuwa wpis i wywołuje on_deactivate (nawet gdy wpisu nie było)."""
        skill = get_character_skill(character_id)
        if skill is None:
            return
        
        self._active_skills.pop(skill_key(character_id, team), None)
        skill.on_deactivate(self._context(grid, hex_id, team, character_id))
    
    def deactivate_all_skills(self, grid: "Grid") -> None:
        for info in list(self._active_skills.values()):
            self.deactivate_character_skill(info.character_id, info.hex_id, info.team, grid)
    
    def update_active_skills(self, grid: "Grid") -> None:
        """
        Odświeża aktywne umiejętności po zmianie siatki.
        
        - postać zniknęła z siatki: wpis jest usuwany (bez on_deactivate)
        - postać się przesunęła: aktualizuje hex_id
        - wywołuje on_update, jeśli umiejętność go definiuje
        """
        for key, info in list(self._active_skills.items()):
            if key not in self._active_skills:
                continue
            current_hex_id = grid.find_character_hex(info.character_id, info.team)
            if current_hex_id is None:
                del self._active_skills[key]
                continue
            
            info.hex_id = current_hex_id
            skill = get_character_skill(info.character_id)
            if skill is not None and skill.on_update is not None:
                skill.on_update(self._context(grid, current_hex_id, info.team, info.character_id))
    
    # ─────────────────────────────────────────────────────────────────────────
    # KOLORY I OBRAZKI POSTACI
    # ─────────────────────────────────────────────────────────────────────────
    
    def add_character_color_modifier(self, character_id: int, team: Team, color: str) -> None:
        self._character_color_modifiers[skill_key(character_id, team)] = color
        self._target_version += 1
    
    def remove_character_color_modifier(self, character_id: int, team: Team) -> None:
        if self._character_color_modifiers.pop(skill_key(character_id, team), None) is not None:
            self._target_version += 1
    
    def clear_character_color_modifiers(self) -> None:
        self._character_color_modifiers.clear()
        self._target_version += 1
    
    def get_color_modifiers_by_character_and_team(self) -> Dict[str, str]:
        """
        Kolory ramek: "characterId-team" -> kolor.
        
        Najpierw kolory umiejętności aktywnych postaci, potem jawne
        modyfikatory postaci (companiony), które je nadpisują.
        """
        modifiers: Dict[str, str] = {}
        for key, info in self._active_skills.items():
            skill = get_character_skill(info.character_id)
            if skill is not None and skill.color_modifier:
                modifiers[key] = skill.color_modifier
        modifiers.update(self._character_color_modifiers)
        return modifiers
    
    def add_character_image_modifier(self, character_id: int, team: Team, image: str) -> None:
        self._character_image_modifiers[skill_key(character_id, team)] = image
        self._target_version += 1
    
    def remove_character_image_modifier(self, character_id: int, team: Team) -> None:
        if self._character_image_modifiers.pop(skill_key(character_id, team), None) is not None:
            self._target_version += 1
    
    def get_image_modifiers(self) -> Dict[str, str]:
        return dict(self._character_image_modifiers)
    
    # ─────────────────────────────────────────────────────────────────────────
    # KOLORY KAFELKÓW
    # ─────────────────────────────────────────────────────────────────────────
    
    def set_tile_color_modifier(self, hex_id: int, color: str) -> None:
        self._tile_color_modifiers[hex_id] = color
        self._target_version += 1
    
    def remove_tile_color_modifier(self, hex_id: int, color: Optional[str] = None) -> None:
        """
        Usuwa kolor kafelka.
        
        Args:
            hex_id: Kafelek
            color: Jeśli podany, usuwa tylko gdy kafelek ma dokładnie ten kolor
                   (inna umiejętność mogła go nadpisać)
        """
        current = self._tile_color_modifiers.get(hex_id)
        if current is None:
            return
        if color is not None and current != color:
            return
        del self._tile_color_modifiers[hex_id]
        self._target_version += 1
    
    def get_tile_color_modifiers(self) -> Dict[int, str]:
        return dict(self._tile_color_modifiers)
    
    # ─────────────────────────────────────────────────────────────────────────
    # CELE UMIEJĘTNOŚCI
    # ─────────────────────────────────────────────────────────────────────────
    
    def set_skill_target(self, character_id: int, team: Team, target: SkillTargetInfo) -> None:
        self._skill_targets[skill_key(character_id, team)] = target
        self._target_version += 1
    
    def get_skill_target(self, character_id: int, team: Team) -> Optional[SkillTargetInfo]:
        return self._skill_targets.get(skill_key(character_id, team))
    
    def clear_skill_target(self, character_id: int, team: Team) -> None:
        self._skill_targets.pop(skill_key(character_id, team), None)
        self._target_version += 1
    
    def get_all_skill_targets(self) -> Dict[str, SkillTargetInfo]:
        return dict(self._skill_targets)
    
    def get_target_version(self) -> int:
        return self._target_version
    
    def to_dict(self) -> Dict:
        """Snapshot stanu managera (dla API)."""
        return {
            "active_skills": {k: v.to_dict() for k, v in self._active_skills.items()},
            "color_modifiers": self.get_color_modifiers_by_character_and_team(),
            "image_modifiers": self.get_image_modifiers(),
            "tile_color_modifiers": self.get_tile_color_modifiers(),
            "targets": {k: t.to_dict() for k, t in self._skill_targets.items()},
            "target_version": self._target_version,
        }
