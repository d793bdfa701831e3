"""
Sesja planowania współdzielona przez routery.

Jeden proces API = jedna sesja. Routery pobierają ją przez get_session(),
testy podmieniają przez set_session() / reset_session().
"""

from typing import Optional

from hexplan.core.config_loader import ConfigLoader
from hexplan.session import PlanningSession


_loader = ConfigLoader()
_session: Optional[PlanningSession] = None


def get_session() -> PlanningSession:
    """Zwraca sesję (tworzy ją z defaults.yaml przy pierwszym użyciu)."""
    global _session
    if _session is None:
        _session = PlanningSession.from_config(_loader)
    return _session


def set_session(session: PlanningSession) -> None:
    global _session
    _session = session


def reset_session(map_key: Optional[str] = None, seed: Optional[int] = None) -> PlanningSession:
    """Tworzy nową sesję (nieznana mapa rzuca KeyError)."""
    global _session
    _session = PlanningSession.from_config(_loader, map_key=map_key, seed=seed)
    return _session
