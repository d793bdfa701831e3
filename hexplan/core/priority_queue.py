"""
Kolejka priorytetowa (min-heap) dla A*.

Opakowuje heapq. Elementy z tym samym priorytetem wychodzą w kolejności
dodania (licznik sekwencji w krotce), więc wynik A* jest powtarzalny.

Niższy priorytet = wcześniej z kolejki.
"""

from __future__ import annotations
import heapq
import itertools
from typing import Callable, Generic, List, Optional, TypeVar

T = TypeVar("T")


class PriorityQueue(Generic[T]):
    """
    Min-heap z możliwością zmiany priorytetu.
    
    Example:
        >>> pq = PriorityQueue()
        >>> pq.enqueue("b", 2)
        >>> pq.enqueue("a", 1)
        >>> pq.dequeue()
        'a'
    """
    
    def __init__(self):
        # Wpisy: [priority, seq, item]
        self._heap: List[list] = []
        self._counter = itertools.count()
    
    def __len__(self) -> int:
        return len(self._heap)
    
    def size(self) -> int:
        return len(self._heap)
    
    def is_empty(self) -> bool:
        return not self._heap
    
    def enqueue(self, item: T, priority: float) -> None:
        """Dodaje element. O(log n)."""
        heapq.heappush(self._heap, [priority, next(self._counter), item])
    
    def dequeue(self) -> Optional[T]:
        """
        Zdejmuje element o najniższym priorytecie.
        
        Returns:
            Element lub None gdy kolejka jest pusta
        """
        if not self._heap:
            return None
        return heapq.heappop(self._heap)[2]
    
    def peek(self) -> Optional[T]:
        """Zwraca element o najniższym priorytecie bez zdejmowania."""
        if not self._heap:
            return None
        return self._heap[0][2]
    
    def update_priority(
        self,
        item: T,
        new_priority: float,
        equals: Callable[[T, T], bool],
    ) -> None:
        """
        Zmienia priorytet istniejącego elementu albo go dodaje.
        
        Args:
            item: Element do aktualizacji
            new_priority: Nowy priorytet
            equals: Funkcja porównująca elementy
        """
        for entry in self._heap:
            if equals(entry[2], item):
                if entry[0] != new_priority:
                    entry[0] = new_priority
                    heapq.heapify(self._heap)
                return
        self.enqueue(item, new_priority)
    
    def contains(self, item: T, equals: Callable[[T, T], bool]) -> bool:
        return any(equals(entry[2], item) for entry in self._heap)
    
    def clear(self) -> None:
        self._heap.clear()
