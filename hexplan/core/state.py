"""
Stany kafelków i drużyny.

Kafelek siatki jest zawsze w jednym z siedmiu stanów. Stany AVAILABLE_*
oznaczają pole startowe danej drużyny, OCCUPIED_* - to samo pole z
postawioną postacią. Zdjęcie postaci przywraca odpowiedni AVAILABLE_*.

    Stan                  Wartość   Drużyna
    ──────────────────────────────────────────
    DEFAULT               0         -
    AVAILABLE_ALLY        1         ally
    AVAILABLE_ENEMY       2         enemy
    OCCUPIED_ALLY         3         ally
    OCCUPIED_ENEMY        4         enemy
    BLOCKED               5         - (przeszkoda)
    BLOCKED_BREAKABLE     6         - (przeszkoda do zniszczenia)
"""

from __future__ import annotations
from enum import Enum, IntEnum
from typing import Optional


class State(IntEnum):
    """Stan kafelka."""
    DEFAULT = 0
    AVAILABLE_ALLY = 1
    AVAILABLE_ENEMY = 2
    OCCUPIED_ALLY = 3
    OCCUPIED_ENEMY = 4
    BLOCKED = 5
    BLOCKED_BREAKABLE = 6
    
    @classmethod
    def is_valid(cls, value: object) -> bool:
        """Czy wartość jest jednym ze znanych stanów."""
        if isinstance(value, bool):
            return False
        try:
            cls(value)
        except (ValueError, TypeError):
            return False
        return True


class Team(str, Enum):
    """Drużyna postaci."""
    ALLY = "ally"
    ENEMY = "enemy"
    
    @property
    def opposite(self) -> Team:
        return Team.ENEMY if self is Team.ALLY else Team.ALLY


# ═══════════════════════════════════════════════════════════════════════════
# MAPOWANIA STAN <-> DRUŻYNA
# ═══════════════════════════════════════════════════════════════════════════

AVAILABLE_STATE = {
    Team.ALLY: State.AVAILABLE_ALLY,
    Team.ENEMY: State.AVAILABLE_ENEMY,
}

OCCUPIED_STATE = {
    Team.ALLY: State.OCCUPIED_ALLY,
    Team.ENEMY: State.OCCUPIED_ENEMY,
}

BLOCKING_STATES = frozenset({State.BLOCKED, State.BLOCKED_BREAKABLE})


def team_from_state(state: State) -> Optional[Team]:
    """
    Zwraca drużynę, do której należy stan kafelka.
    
    Args:
        state: Stan kafelka
        
    Returns:
        Team lub None dla DEFAULT/BLOCKED*
    """
    if state in (State.AVAILABLE_ALLY, State.OCCUPIED_ALLY):
        return Team.ALLY
    if state in (State.AVAILABLE_ENEMY, State.OCCUPIED_ENEMY):
        return Team.ENEMY
    return None


def available_state_for(state: State) -> State:
    """Stan po zdjęciu postaci (OCCUPIED_* -> AVAILABLE_*, reszta bez zmian)."""
    if state == State.OCCUPIED_ALLY:
        return State.AVAILABLE_ALLY
    if state == State.OCCUPIED_ENEMY:
        return State.AVAILABLE_ENEMY
    return state
