"""
Maps router - lista map i przełączanie mapy.
"""

from fastapi import APIRouter, HTTPException
from typing import List, Dict, Any

from api.session_state import get_session


router = APIRouter()


@router.get("/maps")
async def get_maps() -> List[Dict[str, Any]]:
    """Lista {key, name, active} wszystkich map."""
    session = get_session()
    return [
        {**entry, "active": entry["key"] == session.map_preset.key}
        for entry in session.get_maps()
    ]


@router.post("/maps/{map_key}")
async def switch_map(map_key: str) -> Dict[str, Any]:
    """
    Przełącza mapę i resetuje sesję (siatka, umiejętności, dziennik).
    
    Raises:
        HTTPException 404: Nieznana mapa
    """
    session = get_session()
    try:
        session.switch_map(map_key)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Map '{map_key}' not found")
    return {"success": True, "map": map_key}
