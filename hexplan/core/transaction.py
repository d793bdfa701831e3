"""
Transakcje z rollbackiem i grupowanie czyszczenia cache.

Operacja na siatce (np. przeniesienie postaci) składa się z kilku kroków.
execute_transaction wykonuje je po kolei i zatrzymuje się na pierwszym,
który zwróci fałsz - wtedy uruchamia WSZYSTKIE akcje rollbacku (każdą raz).

Podczas transakcji kroki nie czyszczą cache pathfindingu od razu, tylko
zaznaczają, że trzeba to zrobić. Po zakończeniu (sukces lub rollback)
cache jest czyszczony co najwyżej raz.

Flaga grupowania jest płaska: transakcja zagnieżdżona kończąc się wyłącza
grupowanie także dla zewnętrznej. Wyjątek w kroku lub rollbacku propaguje,
ale flaga i tak jest zerowana.

Przykład:
    >>> execute_transaction(
    ...     [lambda: grid.remove_character(1, True),
    ...      lambda: grid.place_character(2, 100, Team.ALLY, True)],
    ...     [lambda: grid.place_character(1, 100, Team.ALLY, True)],
    ... )
    True
"""

from __future__ import annotations
import logging
from typing import TYPE_CHECKING, Any, Callable, Iterable, Optional, Sequence

from .pathfinding import clear_pathfinding_cache

if TYPE_CHECKING:
    from ..skills.skill_manager import SkillManager

logger = logging.getLogger(__name__)

_batching_cache_clears = False
_pending_cache_clears = False


def is_batching() -> bool:
    """Czy trwa transakcja (czyszczenie cache jest odłożone)."""
    return _batching_cache_clears


def execute_transaction(
    operations: Sequence[Optional[Callable[[], bool]]],
    rollback_operations: Iterable[Callable[[], Any]] = (),
) -> bool:
    """
    Wykonuje operacje atomowo.
    
    Args:
        operations: Kroki zwracające True przy sukcesie (None = pomiń)
        rollback_operations: Akcje wykonywane, gdy któryś krok zawiedzie
        
    Returns:
        bool: True jeśli wszystkie kroki się powiodły
    """
    global _batching_cache_clears, _pending_cache_clears
    
    _batching_cache_clears = True
    _pending_cache_clears = False
    
    failed_at = -1
    try:
        for index, operation in enumerate(operations):
            if operation is None:
                continue
            if not operation():
                failed_at = index
                break
        
        if failed_at >= 0:
            logger.debug("Transaction failed at step %d, rolling back", failed_at)
            for rollback in rollback_operations:
                rollback()
    finally:
        _batching_cache_clears = False
        if _pending_cache_clears:
            _pending_cache_clears = False
            clear_pathfinding_cache()
    
    return failed_at < 0


def handle_cache_invalidation(
    skip_cache: bool,
    skill_manager: Optional["SkillManager"],
    grid: Any,
) -> None:
    """
    Reaguje na zmianę rozstawienia.
    
    - skip_cache: nic nie rób (krok wewnątrz większej operacji)
    - trwa transakcja: tylko zaznacz, że cache trzeba wyczyścić
    - inaczej: wyczyść cache i odśwież aktywne umiejętności
    """
    global _pending_cache_clears
    
    if skip_cache:
        return
    if _batching_cache_clears:
        _pending_cache_clears = True
        return
    
    clear_pathfinding_cache()
    if skill_manager is not None:
        skill_manager.update_active_skills(grid)
