"""
hexplan - planer rozstawienia drużyn na siatce hexagonalnej.

Zawiera:
- core: Hex, Grid, transakcje, pathfinding, konfiguracja YAML
- skills: Umiejętności postaci i algorytmy celowania
- characters: Operacje na postaciach z obsługą umiejętności
- events: Dziennik operacji
- PlanningSession: Sesja łącząca powyższe
"""

from .session import PlanningSession

__all__ = ["PlanningSession"]

__version__ = "1.0.0"
