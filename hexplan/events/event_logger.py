"""
Dziennik operacji planowania zapisywany do JSON.

Każda operacja sesji (rozstawienie, przeniesienie, zamiana, zmiana mapy
itd.) trafia do dziennika z numerem kolejnym, kafelkami, postacią,
drużyną i flagą powodzenia. Razem z seedem pozwala odtworzyć sesję.

TYPY ZDARZEŃ:
═══════════════════════════════════════════════════════════════════

    SESSION_START       Start sesji. Data: map, layout, seed
    MAP_SWITCH          Zmiana mapy (reset). Data: map
    CHARACTER_PLACE     Rozstawienie na kafelku
    CHARACTER_AUTO_PLACE  Rozstawienie na losowym kafelku
    CHARACTER_REMOVE    Zdjęcie z kafelka
    CHARACTER_MOVE      Przeniesienie (from_hex_id -> to_hex_id)
    CHARACTER_SWAP      Zamiana dwóch kafelków
    GRID_CLEAR          Zdjęcie wszystkich postaci
    TEAM_SIZE_CHANGE    Zmiana limitu drużyny. Data: size
    CACHE_CLEAR         Ręczne czyszczenie cache pathfindingu

FORMAT LOGU:
═══════════════════════════════════════════════════════════════════

{
    "metadata": {"version": "1.0", "seed": 42, "map": "arena1",
                 "layout": "full_grid", "timestamp": "..."},
    "events": [
        {"seq": 0, "type": "SESSION_START", "success": true, "data": {...}},
        {"seq": 1, "type": "CHARACTER_PLACE", "success": true,
         "hex_id": 3, "character_id": 66, "team": "ally"},
        ...
    ]
}
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, List, Optional
from datetime import datetime
import json
from pathlib import Path

from ..core.state import Team


class EventType(Enum):
    """Typ operacji planowania."""
    
    # Sesja
    SESSION_START = auto()
    MAP_SWITCH = auto()
    
    # Postacie
    CHARACTER_PLACE = auto()
    CHARACTER_AUTO_PLACE = auto()
    CHARACTER_REMOVE = auto()
    CHARACTER_MOVE = auto()
    CHARACTER_SWAP = auto()
    GRID_CLEAR = auto()
    
    # Ustawienia
    TEAM_SIZE_CHANGE = auto()
    CACHE_CLEAR = auto()


@dataclass
class PlanningEvent:
    """
    Pojedyncza operacja w dzienniku.
    
    Attributes:
        seq (int): Numer kolejny w dzienniku
        event_type (EventType): Typ operacji
        success (bool): Czy operacja się powiodła
        hex_id (Optional[int]): Kafelek (dla move/swap: źródłowy)
        to_hex_id (Optional[int]): Kafelek docelowy (move/swap)
        character_id (Optional[int]): Postać
        team (Optional[Team]): Drużyna
        data (Dict): Dodatkowe dane specyficzne dla typu
    """
    seq: int
    event_type: EventType
    success: bool = True
    hex_id: Optional[int] = None
    to_hex_id: Optional[int] = None
    character_id: Optional[int] = None
    team: Optional[Team] = None
    data: Dict[str, Any] = field(default_factory=dict)
    
    def to_dict(self) -> Dict[str, Any]:
        """Serializuje zdarzenie do słownika (pomija puste pola)."""
        result: Dict[str, Any] = {
            "seq": self.seq,
            "type": self.event_type.name,
            "success": self.success,
        }
        
        if self.hex_id is not None:
            result["hex_id"] = self.hex_id
        if self.to_hex_id is not None:
            result["to_hex_id"] = self.to_hex_id
        if self.character_id is not None:
            result["character_id"] = self.character_id
        if self.team is not None:
            result["team"] = self.team.value
        if self.data:
            result["data"] = self.data
        
        return result


class EventLogger:
    """
    Dziennik operacji sesji.
    
    Example:
        >>> journal = EventLogger(seed=42, map_key="arena1")
        >>> journal.log_event(EventType.CHARACTER_PLACE, hex_id=3, character_id=66, team=Team.ALLY)
        >>> journal.save("output/session_42.json")
    """
    
    def __init__(self, seed: int, map_key: Optional[str] = None, layout: Optional[str] = None):
        self.events: List[PlanningEvent] = []
        self.metadata: Dict[str, Any] = {
            "version": "1.0",
            "seed": seed,
            "map": map_key,
            "layout": layout,
            "timestamp": datetime.now().isoformat(),
        }
    
    # ─────────────────────────────────────────────────────────────────────────
    # LOGOWANIE
    # ─────────────────────────────────────────────────────────────────────────
    
    def log(self, event: PlanningEvent) -> None:
        self.events.append(event)
    
    def log_event(
        self,
        event_type: EventType,
        success: bool = True,
        hex_id: Optional[int] = None,
        to_hex_id: Optional[int] = None,
        character_id: Optional[int] = None,
        team: Optional[Team] = None,
        **data: Any,
    ) -> PlanningEvent:
        """
        Tworzy i loguje zdarzenie z kolejnym numerem.
        
        Returns:
            PlanningEvent: Utworzone zdarzenie
        """
        event = PlanningEvent(
            seq=len(self.events),
            event_type=event_type,
            success=success,
            hex_id=hex_id,
            to_hex_id=to_hex_id,
            character_id=character_id,
            team=team,
            data=dict(data),
        )
        self.log(event)
        return event
    
    def clear(self) -> None:
        self.events.clear()
    
    # ─────────────────────────────────────────────────────────────────────────
    # SERIALIZACJA
    # ─────────────────────────────────────────────────────────────────────────
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "metadata": self.metadata,
            "events": [e.to_dict() for e in self.events],
        }
    
    def save(self, filepath: str) -> None:
        """
        Zapisuje dziennik do pliku JSON (tworzy katalogi).
        
        Args:
            filepath: Ścieżka do pliku
        """
        path = Path(filepath)
        path.parent.mkdir(parents=True, exist_ok=True)
        
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)
    
    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)
    
    # ─────────────────────────────────────────────────────────────────────────
    # STATYSTYKI
    # ─────────────────────────────────────────────────────────────────────────
    
    def get_event_count(self) -> int:
        return len(self.events)
    
    def get_events_by_type(self, event_type: EventType) -> List[PlanningEvent]:
        return [e for e in self.events if e.event_type == event_type]
    
    def get_events_for_character(self, character_id: int) -> List[PlanningEvent]:
        return [e for e in self.events if e.character_id == character_id]
    
    def get_failed_events(self) -> List[PlanningEvent]:
        return [e for e in self.events if not e.success]
