"""
System współrzędnych hexagonalnych (Cube Coordinates).

Używamy Cube Coordinates (q, r, s) gdzie zawsze:
    q + r + s = 0

Każdy hex ma dodatkowo mutowalne `id` - stabilny numer kafelka widoczny
dla użytkownika (1..45 na pełnej planszy). Równość i hash zależą
WYŁĄCZNIE od współrzędnych, nie od id.

Układ sąsiadów (zgodnie z zegarem od "top-right"):
    Kierunek          (dq, dr, ds)
    ─────────────────────────────────
    0 top-right    ↗  (+1, -1,  0)
    1 right        →  (+1,  0, -1)
    2 bottom-right ↘  ( 0, +1, -1)
    3 bottom-left  ↙  (-1, +1,  0)
    4 left         ←  (-1,  0, +1)
    5 top-left     ↖  ( 0, -1, +1)

Indeks kierunku jest brany modulo 6 (także ujemne: -1 == 5).

Odległość między hexami:
    distance = (|dq| + |dr| + |ds|) / 2

Przykład użycia:
    >>> a = Hex(0, 0, 0)
    >>> b = Hex.from_axial(2, 1)
    >>> a.distance(b)
    3
    >>> a.neighbor(-1)
    Hex(q=0, r=-1, s=1, id=0)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Tuple

from .errors import InvalidHexError


# Kolejność: top-right, right, bottom-right, bottom-left, left, top-left
HEX_DIRECTIONS: List[Tuple[int, int, int]] = [
    (+1, -1, 0),   # 0 top-right
    (+1, 0, -1),   # 1 right
    (0, +1, -1),   # 2 bottom-right
    (-1, +1, 0),   # 3 bottom-left
    (-1, 0, +1),   # 4 left
    (0, -1, +1),   # 5 top-left
]


@dataclass(frozen=True)
class Hex:
    """
    Współrzędna hexagonalna w systemie cube (q, r, s).
    
    Współrzędne są niemutowalne (frozen=True), więc Hex może być kluczem
    w słowniku. Pole `id` jest wyłączone z porównań i hasha - można je
    ustawić później przez set_id().
    
    Attributes:
        q (int): Współrzędna q
        r (int): Współrzędna r
        s (int): Współrzędna s (= -q - r)
        id (int): Numer kafelka (0 = nieprzypisany)
        
    Raises:
        InvalidHexError: Jeśli q + r + s != 0
    """
    q: int
    r: int
    s: int
    id: int = field(default=0, compare=False)
    
    def __post_init__(self) -> None:
        if self.q + self.r + self.s != 0:
            raise InvalidHexError(
                f"q={self.q} + r={self.r} + s={self.s} must be 0",
                {"q": self.q, "r": self.r, "s": self.s},
            )
    
    # ─────────────────────────────────────────────────────────────────────────
    # KONSTRUKCJA / ID
    # ─────────────────────────────────────────────────────────────────────────
    
    @staticmethod
    def from_axial(q: int, r: int, hex_id: int = 0) -> Hex:
        """
        Tworzy Hex ze współrzędnych axial (s wyliczane).
        
        Args:
            q: Kolumna
            r: Wiersz
            hex_id: Opcjonalny numer kafelka
            
        Returns:
            Hex: Współrzędna cube
        """
        return Hex(q, r, -q - r, hex_id)
    
    def set_id(self, hex_id: int) -> None:
        """Ustawia numer kafelka (nie wpływa na równość)."""
        object.__setattr__(self, "id", hex_id)
    
    def get_id(self) -> int:
        return self.id
    
    def key(self) -> str:
        """Klucz tekstowy "q,r,s" używany przez siatkę."""
        return f"{self.q},{self.r},{self.s}"
    
    @property
    def cube(self) -> Tuple[int, int, int]:
        return (self.q, self.r, self.s)
    
    # ─────────────────────────────────────────────────────────────────────────
    # ARYTMETYKA
    # ─────────────────────────────────────────────────────────────────────────
    
    def add(self, other: Hex) -> Hex:
        """Dodawanie współrzędnych (wynik bez id)."""
        return Hex(self.q + other.q, self.r + other.r, self.s + other.s)
    
    def subtract(self, other: Hex) -> Hex:
        """Odejmowanie współrzędnych (wynik bez id)."""
        return Hex(self.q - other.q, self.r - other.r, self.s - other.s)
    
    def scale(self, k: int) -> Hex:
        """Mnożenie przez skalar."""
        return Hex(self.q * k, self.r * k, self.s * k)
    
    def __add__(self, other: Hex) -> Hex:
        return self.add(other)
    
    def __sub__(self, other: Hex) -> Hex:
        return self.subtract(other)
    
    def __mul__(self, k: int) -> Hex:
        return self.scale(k)
    
    # ─────────────────────────────────────────────────────────────────────────
    # ODLEGŁOŚĆ
    # ─────────────────────────────────────────────────────────────────────────
    
    def distance(self, other: Hex) -> int:
        """
        Oblicza odległość między dwoma hexami.
        
        Wzór (cube distance):
            distance = (|dq| + |dr| + |ds|) / 2
        
        Args:
            other: Drugi hex
            
        Returns:
            int: Odległość w liczbie kroków
            
        Example:
            >>> Hex(0, 0, 0).distance(Hex(2, -1, -1))
            2
        """
        dq = abs(self.q - other.q)
        dr = abs(self.r - other.r)
        ds = abs(self.s - other.s)
        return (dq + dr + ds) // 2
    
    # ─────────────────────────────────────────────────────────────────────────
    # SĄSIEDZI
    # ─────────────────────────────────────────────────────────────────────────
    
    @staticmethod
    def direction(direction: int) -> Hex:
        """
        Zwraca wektor kierunku.
        
        Args:
            direction: Indeks kierunku (modulo 6)
        """
        dq, dr, ds = HEX_DIRECTIONS[direction % 6]
        return Hex(dq, dr, ds)
    
    def neighbor(self, direction: int) -> Hex:
        """
        Zwraca sąsiada w określonym kierunku.
        
        Args:
            direction: Indeks kierunku, brany modulo 6
                0 = top-right, 1 = right, 2 = bottom-right,
                3 = bottom-left, 4 = left, 5 = top-left
                
        Returns:
            Hex: Sąsiad (bez id)
        """
        return self.add(Hex.direction(direction))
    
    def get_neighbors(self) -> List[Hex]:
        """
        Zwraca 6 sąsiadów w kolejności kierunków 0-5.
        
        Returns:
            List[Hex]: [top-right, right, bottom-right, bottom-left, left, top-left]
        """
        return [self.neighbor(d) for d in range(6)]
    
    # ─────────────────────────────────────────────────────────────────────────
    # REPREZENTACJA
    # ─────────────────────────────────────────────────────────────────────────
    
    def __str__(self) -> str:
        return self.key()
