"""
Definicja umiejętności postaci i rejestr umiejętności.

Umiejętność to rekord z danymi (kolory, zasięg companiona) oraz
callbackami cyklu życia:

    on_activate(context)    - postać została postawiona
    on_deactivate(context)  - postać zdjęta / przeniesiona do innej drużyny
    on_update(context)      - cokolwiek na siatce się zmieniło (opcjonalny)

Nie ma hierarchii klas - rejestr mapuje character_id -> Skill,
a SkillManager wywołuje callbacki.

REJESTR:
═══════════════════════════════════════════════════════════════════

    register_skill(skill)          # dodaje (nadpisuje) wpis
    get_character_skill(66)        # Skill albo None
    has_skill(66)                  # bool
    has_companion_skill(50)        # czy skill wystawia companiony
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional

from ..core.state import Team

if TYPE_CHECKING:
    from ..core.hex_grid import Grid
    from .skill_manager import SkillManager


@dataclass
class SkillContext:
    """
    Kontekst przekazywany do callbacków umiejętności.
    
    Attributes:
        grid: Siatka
        hex_id: Kafelek postaci
        team: Drużyna postaci
        character_id: Id postaci
        skill_manager: Manager (modyfikatory, cele)
    """
    grid: "Grid"
    hex_id: int
    team: Team
    character_id: int
    skill_manager: "SkillManager"


@dataclass
class SkillTargetInfo:
    """
    Cel wskazany przez umiejętność.
    
    metadata może zawierać "arrows": [{from_hex_id, to_hex_id, type}]
    oraz dane diagnostyczne algorytmu (examined_tiles, distance...).
    """
    target_hex_id: Optional[int]
    target_character_id: Optional[int]
    metadata: Dict[str, Any] = field(default_factory=dict)
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "target_hex_id": self.target_hex_id,
            "target_character_id": self.target_character_id,
            "metadata": self.metadata,
        }


SkillCallback = Callable[[SkillContext], None]


def _noop(context: SkillContext) -> None:
    pass


@dataclass
class Skill:
    """
    Umiejętność postaci.
    
    Attributes:
        id (str): Identyfikator (np. "phraesto")
        character_id (int): Postać, do której należy
        name (str): Nazwa wyświetlana
        description (str): Opis
        color_modifier: Kolor ramki postaci z aktywną umiejętnością
        targeting_color_modifier: Kolor strzałki celu
        companion_color_modifier: Kolor ramki companiona
        companion_image_modifier: Obrazek companiona
        tile_color_modifier: Kolor podświetlanych kafelków
        companion_range: Zasięg ataku companiona
    """
    id: str
    character_id: int
    name: str
    description: str = ""
    on_activate: SkillCallback = _noop
    on_deactivate: SkillCallback = _noop
    on_update: Optional[SkillCallback] = None
    color_modifier: Optional[str] = None
    targeting_color_modifier: Optional[str] = None
    companion_color_modifier: Optional[str] = None
    companion_image_modifier: Optional[str] = None
    tile_color_modifier: Optional[str] = None
    companion_range: Optional[int] = None
    
    @property
    def has_companions(self) -> bool:
        return bool(self.companion_color_modifier or self.companion_image_modifier)
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "character_id": self.character_id,
            "name": self.name,
            "description": self.description,
            "color_modifier": self.color_modifier,
            "targeting_color_modifier": self.targeting_color_modifier,
            "companion_color_modifier": self.companion_color_modifier,
            "companion_image_modifier": self.companion_image_modifier,
            "tile_color_modifier": self.tile_color_modifier,
            "companion_range": self.companion_range,
        }


# ═══════════════════════════════════════════════════════════════════════════
# REJESTR
# ═══════════════════════════════════════════════════════════════════════════

SKILL_REGISTRY: Dict[int, Skill] = {}


def register_skill(skill: Skill) -> Skill:
    """Rejestruje umiejętność pod character_id (zwraca ją dla wygody)."""
    SKILL_REGISTRY[skill.character_id] = skill
    return skill


def unregister_skill(character_id: int) -> None:
    SKILL_REGISTRY.pop(character_id, None)


def get_character_skill(character_id: int) -> Optional[Skill]:
    return SKILL_REGISTRY.get(character_id)


def has_skill(character_id: int) -> bool:
    return character_id in SKILL_REGISTRY


def has_companion_skill(character_id: int) -> bool:
    """Czy umiejętność postaci wystawia companiony."""
    skill = SKILL_REGISTRY.get(character_id)
    return skill is not None and skill.has_companions


def all_skills() -> List[Skill]:
    return sorted(SKILL_REGISTRY.values(), key=lambda s: s.character_id)
