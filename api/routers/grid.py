"""
Grid router - stan siatki i operacje na postaciach.

Operacje zwracają {"success": bool, ...}. Oczekiwana porażka (pełna
drużyna, zablokowany kafelek) to success=False z kodem 200,
nieznany kafelek to 404.
"""

from fastapi import APIRouter
from pydantic import BaseModel
from typing import Dict, Any, Optional

from hexplan.core.state import Team

from api.session_state import get_session


router = APIRouter()


# ═══════════════════════════════════════════════════════════════════════════
# REQUEST MODELS
# ═══════════════════════════════════════════════════════════════════════════

class PlaceRequest(BaseModel):
    """Postawienie postaci na kafelku."""
    hex_id: int
    character_id: int
    team: Team = Team.ALLY


class AutoPlaceRequest(BaseModel):
    """Postawienie postaci na losowym kafelku drużyny."""
    character_id: int
    team: Team = Team.ALLY


class RemoveRequest(BaseModel):
    hex_id: int


class MoveRequest(BaseModel):
    """Przeniesienie (character_id domyślnie = postać z from_hex_id)."""
    from_hex_id: int
    to_hex_id: int
    character_id: Optional[int] = None


class SwapRequest(BaseModel):
    from_hex_id: int
    to_hex_id: int


class TeamSizeRequest(BaseModel):
    team: Team
    size: int


# ═══════════════════════════════════════════════════════════════════════════
# ENDPOINTS
# ═══════════════════════════════════════════════════════════════════════════

@router.get("/grid")
async def get_grid() -> Dict[str, Any]:
    """
    Zwraca stan siatki.
    
    Returns:
        Dict z kafelkami, limitami drużyn i powiązaniami companionów
    """
    return get_session().get_state()


@router.post("/grid/place")
async def place_character(request: PlaceRequest) -> Dict[str, Any]:
    session = get_session()
    success = session.place_character(request.hex_id, request.character_id, request.team)
    return {"success": success, "hex_id": request.hex_id, "character_id": request.character_id}


@router.post("/grid/auto-place")
async def auto_place_character(request: AutoPlaceRequest) -> Dict[str, Any]:
    hex_id = get_session().auto_place_character(request.character_id, request.team)
    return {"success": hex_id is not None, "hex_id": hex_id, "character_id": request.character_id}


@router.post("/grid/remove")
async def remove_character(request: RemoveRequest) -> Dict[str, Any]:
    return {"success": get_session().remove_character(request.hex_id), "hex_id": request.hex_id}


@router.post("/grid/move")
async def move_character(request: MoveRequest) -> Dict[str, Any]:
    success = get_session().move_character(request.from_hex_id, request.to_hex_id, request.character_id)
    return {"success": success, "from_hex_id": request.from_hex_id, "to_hex_id": request.to_hex_id}


@router.post("/grid/swap")
async def swap_characters(request: SwapRequest) -> Dict[str, Any]:
    success = get_session().swap_characters(request.from_hex_id, request.to_hex_id)
    return {"success": success, "from_hex_id": request.from_hex_id, "to_hex_id": request.to_hex_id}


@router.post("/grid/clear")
async def clear_grid() -> Dict[str, Any]:
    return {"success": get_session().clear_all_characters()}


@router.put("/grid/team-size")
async def set_team_size(request: TeamSizeRequest) -> Dict[str, Any]:
    session = get_session()
    success = session.set_max_team_size(request.team, request.size)
    return {
        "success": success,
        "team": request.team.value,
        "max_team_size": session.grid.get_max_team_size(request.team),
    }
