"""
Journal router - dziennik operacji sesji.
"""

from fastapi import APIRouter
from typing import Dict, Any

from api.session_state import get_session


router = APIRouter()


@router.get("/journal")
async def get_journal() -> Dict[str, Any]:
    return get_session().journal.to_dict()
