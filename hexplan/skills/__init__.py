"""
Skills module - umiejętności postaci i algorytmy celowania.

Zawiera:
- Skill / SkillContext / SkillTargetInfo: Rekord umiejętności i jej kontekst
- SkillManager: Cykl życia aktywnych umiejętności, modyfikatory, cele
- targeting: CLOSEST / FURTHEST / FRONTMOST / REARMOST
- ring: Spirala, rząd diagonalny, skan pierścieni
- symmetry: Kafelki symetryczne względem środkowej przekątnej
- catalog: Umiejętności konkretnych postaci (rejestrowane przy imporcie)
"""

from .skill import (
    Skill,
    SkillContext,
    SkillTargetInfo,
    SKILL_REGISTRY,
    register_skill,
    unregister_skill,
    get_character_skill,
    has_skill,
    has_companion_skill,
    all_skills,
)
from .skill_manager import SkillManager, ActiveSkill, skill_key
from .targeting import (
    TargetingMethod,
    TargetCandidate,
    find_target,
    find_rearmost_target,
    find_frontmost_target,
    get_candidates,
    get_opposing_team,
)
from .ring import RowScanDirection, RowScanOptions, spiral_search_from_tile, search_by_row, ring_scan, row_scan
from .symmetry import get_symmetrical_hex_id, is_on_middle_diagonal
from .catalog import SKILLS, register_catalog

__all__ = [
    "Skill", "SkillContext", "SkillTargetInfo", "SKILL_REGISTRY",
    "register_skill", "unregister_skill", "get_character_skill",
    "has_skill", "has_companion_skill", "all_skills",
    "SkillManager", "ActiveSkill", "skill_key",
    "TargetingMethod", "TargetCandidate", "find_target",
    "find_rearmost_target", "find_frontmost_target", "get_candidates", "get_opposing_team",
    "RowScanDirection", "RowScanOptions", "spiral_search_from_tile",
    "search_by_row", "ring_scan", "row_scan",
    "get_symmetrical_hex_id", "is_on_middle_diagonal",
    "SKILLS", "register_catalog",
]
