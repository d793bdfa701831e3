"""
Pathfinding router - najbliższe cele, ścieżki A* i cache.
"""

from fastapi import APIRouter
from typing import Dict, Any

from hexplan.core.state import Team

from api.session_state import get_session


router = APIRouter()


@router.get("/pathfinding/closest")
async def get_closest_targets(team: Team = Team.ALLY) -> Dict[str, Any]:
    """
    Mapa najbliższych celów dla postaci drużyny.
    
    Args:
        team: ally -> najbliżsi przeciwnicy, enemy -> najbliżsi sojusznicy
    """
    session = get_session()
    closest = session.get_closest_enemy_map() if team == Team.ALLY else session.get_closest_ally_map()
    return {
        "team": team.value,
        "targets": {str(hex_id): info.to_dict() for hex_id, info in closest.items()},
    }


@router.get("/pathfinding/path")
async def get_path(from_hex_id: int, to_hex_id: int) -> Dict[str, Any]:
    """Ścieżka A* (nieznany kafelek = 404)."""
    path = get_session().find_path(from_hex_id, to_hex_id)
    return {
        "from_hex_id": from_hex_id,
        "to_hex_id": to_hex_id,
        "path": path,
        "distance": len(path) - 1 if path is not None else None,
    }


@router.get("/pathfinding/debug")
async def get_debug_paths() -> Dict[str, Any]:
    return {"paths": get_session().get_debug_paths()}


@router.delete("/pathfinding/cache")
async def clear_cache() -> Dict[str, Any]:
    return {"success": True, "cleared": get_session().clear_cache()}
