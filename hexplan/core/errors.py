"""
Wyjątki silnika planowania.

Dwa poziomy błędów:
- oczekiwane porażki (zła kafelka, pełna drużyna, brak ścieżki) są
  zwracane jako False/None i NIE są wyjątkami,
- błędy programisty (nieistniejący hex, złe współrzędne cube) rzucają
  wyjątki z tej hierarchii.

PlannerError dziedziczy też po wbudowanych typach (LookupError, ValueError,
RuntimeError), więc istniejący kod łapiący KeyError/ValueError dalej działa.
"""

from __future__ import annotations
from typing import Any, Dict, Optional


class PlannerError(Exception):
    """
    Bazowy wyjątek silnika.
    
    Attributes:
        message (str): Czytelny opis błędu
        details (Dict): Dodatkowy kontekst (np. hex_id)
    """
    
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}
    
    def to_dict(self) -> Dict[str, Any]:
        """Serializuje błąd do odpowiedzi API."""
        return {
            "error": type(self).__name__,
            "message": self.message,
            "details": self.details,
        }


class InvalidHexError(PlannerError, ValueError):
    """Współrzędne cube nie sumują się do zera."""


class HexNotFoundError(PlannerError, LookupError):
    """Hex o podanym ID lub współrzędnych nie istnieje na siatce."""


class SkillActivationError(PlannerError, RuntimeError):
    """Umiejętność nie może się aktywować (np. brak miejsca na companiona)."""
