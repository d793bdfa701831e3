"""
Deterministyczny generator liczb losowych (RNG).

Planer losuje w dwóch miejscach:
- auto-rozstawienie postaci (losowy wolny kafelek drużyny),
- rozstawienie companionów przez umiejętności.

Ten sam seed musi dawać to samo rozstawienie - to pozwala na
powtarzalne testy i odtwarzanie sesji z dziennika.

Jak używać:
    - Każda sesja ma WŁASNĄ instancję GameRNG (przekazaną do Grid)
    - NIE używaj globalnego random - jest współdzielony

Przykład użycia:
    >>> rng = GameRNG(seed=12345)
    >>> rng.randint(0, 4) == GameRNG(seed=12345).randint(0, 4)
    True
"""

from __future__ import annotations
import random


class GameRNG:
    """
    Deterministyczny generator losowości dla sesji planowania.
    
    Attributes:
        seed (int): Ziarno użyte do inicjalizacji
        _rng (random.Random): Wewnętrzny generator
    """
    
    def __init__(self, seed: int):
        self.seed = seed
        self._rng = random.Random(seed)
    
    def randint(self, a: int, b: int) -> int:
        """
        Zwraca losową liczbę całkowitą z przedziału [a, b] (włącznie).
        
        Args:
            a: Dolna granica (włącznie)
            b: Górna granica (włącznie)
        """
        return self._rng.randint(a, b)
    
    def __repr__(self) -> str:
        return f"GameRNG(seed={self.seed})"
