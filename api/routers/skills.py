"""
Skills router - katalog umiejętności, cele i modyfikatory wizualne.
"""

from fastapi import APIRouter
from typing import List, Dict, Any

from hexplan.skills import all_skills

from api.session_state import get_session


router = APIRouter()


@router.get("/skills")
async def get_skills() -> List[Dict[str, Any]]:
    """Wszystkie zarejestrowane umiejętności (po character_id)."""
    return [skill.to_dict() for skill in all_skills()]


@router.get("/skills/targets")
async def get_skill_targets() -> Dict[str, Any]:
    """
    Cele aktywnych umiejętności.
    
    Returns:
        {"version": int, "targets": {"characterId-team": target}}
    """
    manager = get_session().skill_manager
    return {
        "version": manager.get_target_version(),
        "targets": {key: target.to_dict() for key, target in manager.get_all_skill_targets().items()},
    }


@router.get("/skills/modifiers")
async def get_skill_modifiers() -> Dict[str, Any]:
    manager = get_session().skill_manager
    return {
        "color_modifiers": manager.get_color_modifiers_by_character_and_team(),
        "image_modifiers": manager.get_image_modifiers(),
        "tile_color_modifiers": manager.get_tile_color_modifiers(),
    }
