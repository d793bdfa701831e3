"""
Cache LRU z opcjonalnym TTL oraz generatory kluczy cache.

MemoCache trzyma wartości w kolejności użycia. Gdy osiągnie max_size,
usuwa najdawniej używany wpis. TTL jest podawany w sekundach i liczony
zegarem monotonicznym (None = bez wygasania).

Klucze:
    generate_grid_cache_key  - stan rozstawienia: "hexId:charId:team:range|..."
    generate_path_cache_key  - "start-goal-range"
"""

from __future__ import annotations
import time
from collections import OrderedDict
from typing import Any, Dict, Generic, Hashable, Iterable, Optional, Tuple, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class MemoCache(Generic[K, V]):
    """
    Cache LRU.
    
    Attributes:
        max_size (int): Maksymalna liczba wpisów
        ttl (Optional[float]): Czas życia wpisu w sekundach
        
    Example:
        >>> cache = MemoCache(max_size=2)
        >>> cache.set("a", 1); cache.set("b", 2)
        >>> cache.get("a")
        1
        >>> cache.set("c", 3)   # wypycha "b" (najdawniej użyty)
        >>> cache.has("b")
        False
    """
    
    def __init__(self, max_size: int = 100, ttl: Optional[float] = None):
        self.max_size = max_size
        self.ttl = ttl
        self._entries: "OrderedDict[K, Tuple[V, float]]" = OrderedDict()
    
    def _is_expired(self, timestamp: float) -> bool:
        return self.ttl is not None and time.monotonic() - timestamp > self.ttl
    
    def get(self, key: K) -> Optional[V]:
        """Zwraca wartość i odświeża kolejność użycia. None gdy brak lub wygasł."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, timestamp = entry
        if self._is_expired(timestamp):
            self.delete(key)
            return None
        self._entries.move_to_end(key)
        return value
    
    def set(self, key: K, value: V) -> None:
        if key in self._entries:
            self.delete(key)
        if len(self._entries) >= self.max_size and self._entries:
            self._entries.popitem(last=False)
        self._entries[key] = (value, time.monotonic())
    
    def has(self, key: K) -> bool:
        """Czy klucz istnieje i nie wygasł (nie zmienia kolejności użycia)."""
        entry = self._entries.get(key)
        if entry is None:
            return False
        if self._is_expired(entry[1]):
            self.delete(key)
            return False
        return True
    
    def delete(self, key: K) -> bool:
        return self._entries.pop(key, None) is not None
    
    def clear(self) -> None:
        self._entries.clear()
    
    def size(self) -> int:
        return len(self._entries)
    
    def __len__(self) -> int:
        return len(self._entries)


# ═══════════════════════════════════════════════════════════════════════════
# KLUCZE CACHE
# ═══════════════════════════════════════════════════════════════════════════

def generate_grid_cache_key(tiles: Iterable[Any], character_ranges: Dict[int, int]) -> str:
    """
    Buduje klucz stanu rozstawienia.
    
    Uwzględnia tylko kafelki z postacią, posortowane po id kafelka.
    Brakujący zasięg postaci = 1.
    
    Args:
        tiles: Kafelki siatki (GridTile)
        character_ranges: Mapa character_id -> zasięg
        
    Returns:
        str: np. "1:100:ally:1|40:200:enemy:3"
    """
    parts = []
    for tile in sorted(tiles, key=lambda t: t.hex.id):
        if tile.character_id and tile.team is not None:
            char_range = character_ranges.get(tile.character_id, 1)
            parts.append(f"{tile.hex.id}:{tile.character_id}:{tile.team.value}:{char_range}")
    return "|".join(parts)


def generate_path_cache_key(start_hex_id: int, goal_hex_id: int, range_: int = 0) -> str:
    return f"{start_hex_id}-{goal_hex_id}-{range_}"
