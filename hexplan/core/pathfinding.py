"""
Pathfinding na siatce hexagonalnej: A*, BFS zasięgu i wybór celu.

A* (find_path_a_star):
    f(n) = g(n) + h(n)
    - g(n): koszt od startu (każdy krok = 1)
    - h(n): odległość hex do celu (heurystyka dopuszczalna)
    Przeszukiwanie jest przerywane po 1000 odwiedzonych węzłach.

Efektywny dystans (calculate_effective_distance):
    Ile pól musi przejść postać o zasięgu `range`, żeby dosięgnąć celu.
    0 gdy cel już jest w zasięgu, inf gdy nie ma drogi.

Wybór najbliższego celu (find_closest_target):
    1. BFS po poziomach - minimalna liczba ruchów, po której jakikolwiek
       cel jest w zasięgu (maks. 20 ruchów)
    2. Remisy rozstrzyga apply_tie_breaking_rules:
       a. cel w tej samej kolumnie (to samo q) wygrywa
       b. ten sam rząd diagonalny: ally woli wyższe id, enemy niższe
       c. żaden w pionie: mniejsza odległość bezpośrednia, potem id jak w (b)

Funkcje przyjmują `get_tile(hex) -> GridTile | None` zamiast siatki,
dzięki czemu można liczyć na podzbiorze kafelków.

Cache:
    Moduł trzyma jedną instancję PathfindingCache. Siatka czyści ją przy
    każdej zmianie rozstawienia (patrz transaction.handle_cache_invalidation).
"""

from __future__ import annotations
import logging
import math
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Set

from .hex_coord import Hex
from .layout import are_hexes_in_same_diagonal_row
from .memoization import MemoCache, generate_grid_cache_key, generate_path_cache_key
from .priority_queue import PriorityQueue
from .state import BLOCKING_STATES, Team

logger = logging.getLogger(__name__)

GetTile = Callable[[Hex], Optional[Any]]
CanTraverse = Callable[[Any], bool]

MAX_NODES_EXPLORED = 1000
MAX_MOVEMENT_DISTANCE = 20


# ═══════════════════════════════════════════════════════════════════════════
# WYNIKI
# ═══════════════════════════════════════════════════════════════════════════

@dataclass
class DistanceResult:
    movement_distance: float
    can_reach: bool
    direct_distance: int


@dataclass
class RangedDistanceResult:
    movement_distance: float
    can_reach: bool
    reachable_targets: List[Hex] = field(default_factory=list)


@dataclass
class TargetResult:
    hex_id: int
    distance: float


@dataclass
class TargetInfo:
    """Najbliższy cel postaci - wpis mapy get_closest_target_map."""
    distance: float
    enemy_hex_id: Optional[int] = None
    ally_hex_id: Optional[int] = None
    
    @property
    def target_hex_id(self) -> Optional[int]:
        return self.enemy_hex_id if self.enemy_hex_id is not None else self.ally_hex_id
    
    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"distance": self.distance}
        if self.enemy_hex_id is not None:
            data["enemy_hex_id"] = self.enemy_hex_id
        if self.ally_hex_id is not None:
            data["ally_hex_id"] = self.ally_hex_id
        return data


@dataclass
class _AStarNode:
    hex: Hex
    g_cost: int
    h_cost: int
    f_cost: int
    parent: Optional["_AStarNode"] = None


# ═══════════════════════════════════════════════════════════════════════════
# CACHE
# ═══════════════════════════════════════════════════════════════════════════

class PathfindingCache:
    """
    Zestaw cache'y dla obliczeń pathfindingu.
    
    Rozmiary: ścieżki 500, efektywny dystans 500,
    mapy najbliższych wrogów / sojuszników po 100.
    """
    
    CACHE_TYPES = ("path", "effective_distance", "closest_enemy", "closest_ally")
    
    def __init__(self):
        self.path_cache: MemoCache[str, Optional[List[Hex]]] = MemoCache(500)
        self.effective_distance_cache: MemoCache[str, DistanceResult] = MemoCache(500)
        self.closest_enemy_cache: MemoCache[str, Dict[int, TargetInfo]] = MemoCache(100)
        self.closest_ally_cache: MemoCache[str, Dict[int, TargetInfo]] = MemoCache(100)
    
    def clear(self) -> None:
        self.path_cache.clear()
        self.effective_distance_cache.clear()
        self.closest_enemy_cache.clear()
        self.closest_ally_cache.clear()
    
    def clear_specific(self, cache_type: str) -> None:
        """
        Czyści jeden z cache'y.
        
        Args:
            cache_type: "path" | "effective_distance" | "closest_enemy" | "closest_ally"
            
        Raises:
            ValueError: Nieznany typ cache
        """
        if cache_type not in self.CACHE_TYPES:
            raise ValueError(f"Unknown cache type: {cache_type}. Available: {list(self.CACHE_TYPES)}")
        getattr(self, f"{cache_type}_cache").clear()
    
    def get_stats(self) -> Dict[str, int]:
        return {
            "path_cache_size": self.path_cache.size(),
            "effective_distance_cache_size": self.effective_distance_cache.size(),
            "closest_enemy_cache_size": self.closest_enemy_cache.size(),
            "closest_ally_cache_size": self.closest_ally_cache.size(),
        }


_default_cache = PathfindingCache()


def get_pathfinding_cache() -> PathfindingCache:
    return _default_cache


def clear_pathfinding_cache() -> None:
    """Czyści wszystkie cache pathfindingu."""
    _default_cache.clear()


def path_cache_key(start: Hex, goal: Hex, range_: int = 0) -> str:
    """
    Klucz cache ścieżki / efektywnego dystansu.
    
    Id kafelków zależą od układu siatki, a hexy spoza siatki mają id 0,
    więc klucz zawiera też współrzędne obu końców.
    
    Cache nie rozróżnia get_tile ani can_traverse - zakłada jedną siatkę
    z domyślną przechodniością. Siatka czyści go przy każdej zmianie.
    """
    return f"{generate_path_cache_key(start.id, goal.id, range_)}|{start.key()}|{goal.key()}"


# ═══════════════════════════════════════════════════════════════════════════
# A*
# ═══════════════════════════════════════════════════════════════════════════

def default_can_traverse(tile: Any) -> bool:
    """Przez kafelek można przejść, jeśli nie jest przeszkodą."""
    return tile.state not in BLOCKING_STATES


def find_path_a_star(
    start: Hex,
    goal: Hex,
    get_tile: GetTile,
    can_traverse: CanTraverse = default_can_traverse,
    caching_enabled: bool = False,
) -> Optional[List[Hex]]:
    """
    Znajduje najkrótszą ścieżkę algorytmem A*.
    
    Args:
        start: Hex startowy
        goal: Hex docelowy
        get_tile: Funkcja hex -> kafelek (None poza siatką)
        can_traverse: Czy po kafelku można przejść
        caching_enabled: Czy używać path_cache modułu (także dla "brak drogi")
    
    Returns:
        Lista hexów od start do goal włącznie albo None gdy brak drogi
        (lub przekroczono limit węzłów).
    
    Example:
        >>> path = find_path_a_star(a, b, grid.find_tile)
        >>> len(path) == a.distance(b) + 1   # na otwartym terenie
        True
    """
    if not caching_enabled:
        return _search_a_star(start, goal, get_tile, can_traverse)
    
    cache_key = path_cache_key(start, goal)
    if _default_cache.path_cache.has(cache_key):
        cached = _default_cache.path_cache.get(cache_key)
        return list(cached) if cached is not None else None
    
    path = _search_a_star(start, goal, get_tile, can_traverse)
    _default_cache.path_cache.set(cache_key, list(path) if path is not None else None)
    return path


def _search_a_star(
    start: Hex,
    goal: Hex,
    get_tile: GetTile,
    can_traverse: CanTraverse,
) -> Optional[List[Hex]]:
    open_set: PriorityQueue[_AStarNode] = PriorityQueue()
    closed_set: Set[str] = set()
    node_map: Dict[str, _AStarNode] = {}
    
    h = start.distance(goal)
    start_node = _AStarNode(hex=start, g_cost=0, h_cost=h, f_cost=h)
    open_set.enqueue(start_node, start_node.f_cost)
    node_map[start.key()] = start_node
    
    while not open_set.is_empty():
        current = open_set.dequeue()
        
        if len(node_map) > MAX_NODES_EXPLORED:
            logger.warning("A* search limit reached (%d nodes), aborting", MAX_NODES_EXPLORED)
            return None
        
        if current.hex == goal:
            path: List[Hex] = []
            node: Optional[_AStarNode] = current
            while node is not None:
                path.append(node.hex)
                node = node.parent
            path.reverse()
            return path
        
        closed_set.add(current.hex.key())
        
        for direction in range(6):
            neighbor_hex = current.hex.neighbor(direction)
            neighbor_key = neighbor_hex.key()
            
            if neighbor_key in closed_set:
                continue
            
            tile = get_tile(neighbor_hex)
            if tile is None or not can_traverse(tile):
                continue
            
            # Kafelek niesie id, surowy sąsiad nie
            neighbor_hex = tile.hex
            tentative_g = current.g_cost + 1
            h_cost = neighbor_hex.distance(goal)
            
            neighbor_node = node_map.get(neighbor_key)
            if neighbor_node is None:
                neighbor_node = _AStarNode(
                    hex=neighbor_hex,
                    g_cost=tentative_g,
                    h_cost=h_cost,
                    f_cost=tentative_g + h_cost,
                    parent=current,
                )
                node_map[neighbor_key] = neighbor_node
                open_set.enqueue(neighbor_node, neighbor_node.f_cost)
            elif tentative_g < neighbor_node.g_cost:
                neighbor_node.g_cost = tentative_g
                neighbor_node.f_cost = tentative_g + h_cost
                neighbor_node.parent = current
                open_set.update_priority(
                    neighbor_node, neighbor_node.f_cost, lambda a, b: a.hex == b.hex
                )
    
    return None


def find_path_distance(
    start: Hex,
    goal: Hex,
    get_tile: GetTile,
    can_traverse: CanTraverse = default_can_traverse,
) -> Optional[int]:
    """Liczba kroków najkrótszej ścieżki albo None."""
    path = find_path_a_star(start, goal, get_tile, can_traverse)
    return len(path) - 1 if path is not None else None


def calculate_effective_distance(
    start: Hex,
    goal: Hex,
    range_: int,
    get_tile: GetTile,
    can_traverse: CanTraverse = default_can_traverse,
    caching_enabled: bool = False,
) -> DistanceResult:
    """
    Oblicza, ile pól trzeba przejść, żeby cel był w zasięgu.
    
    Args:
        start: Pozycja postaci
        goal: Pozycja celu
        range_: Zasięg ataku postaci
        get_tile: Funkcja hex -> kafelek
        can_traverse: Czy po kafelku można przejść
        caching_enabled: Czy używać cache modułu
        
    Returns:
        DistanceResult:
            - direct <= range: movement 0, can_reach True
            - brak ścieżki: movement inf, can_reach False
            - inaczej: max(0, długość_ścieżki - range)
    """
    cache_key = path_cache_key(start, goal, range_)
    if caching_enabled:
        cached = _default_cache.effective_distance_cache.get(cache_key)
        if cached is not None:
            return cached
    
    direct_distance = start.distance(goal)
    
    if direct_distance <= range_:
        result = DistanceResult(0, True, direct_distance)
    else:
        path = find_path_a_star(start, goal, get_tile, can_traverse, caching_enabled)
        if path is None:
            result = DistanceResult(math.inf, False, direct_distance)
        else:
            path_length = len(path) - 1
            result = DistanceResult(max(0, path_length - range_), True, direct_distance)
    
    if caching_enabled:
        _default_cache.effective_distance_cache.set(cache_key, result)
    return result


def calculate_ranged_movement_distance(
    start: Hex,
    targets: List[Hex],
    range_: int,
    get_tile: GetTile,
    can_traverse: CanTraverse = default_can_traverse,
) -> RangedDistanceResult:
    """
    BFS: minimalna liczba ruchów, po której jakiś cel jest w zasięgu.
    
    Zwraca wszystkie cele osiągalne przy tej liczbie ruchów (do remisów).
    Przeszukiwanie kończy się po MAX_MOVEMENT_DISTANCE ruchach.
    """
    if not targets:
        return RangedDistanceResult(math.inf, False)
    
    immediate = [t for t in targets if start.distance(t) <= range_]
    if immediate:
        return RangedDistanceResult(0, True, immediate)
    
    visited: Set[str] = {start.key()}
    current_level: List[Hex] = [start]
    moves = 0
    
    while current_level and moves < MAX_MOVEMENT_DISTANCE:
        next_level: List[Hex] = []
        reachable: Dict[str, Hex] = {}
        
        for current in current_level:
            for direction in range(6):
                neighbor = current.neighbor(direction)
                key = neighbor.key()
                if key in visited:
                    continue
                tile = get_tile(neighbor)
                if tile is None or not can_traverse(tile):
                    continue
                visited.add(key)
                next_level.append(neighbor)
                for target in targets:
                    if neighbor.distance(target) <= range_:
                        reachable.setdefault(target.key(), target)
        
        if reachable:
            return RangedDistanceResult(moves + 1, True, list(reachable.values()))
        
        current_level = next_level
        moves += 1
    
    return RangedDistanceResult(math.inf, False)


# ═══════════════════════════════════════════════════════════════════════════
# WYBÓR CELU
# ═══════════════════════════════════════════════════════════════════════════

def is_vertically_aligned(source: Hex, target: Hex) -> bool:
    """Czy hexy leżą w tej samej kolumnie (to samo q)."""
    return source.q == target.q


def _prefers(candidate_id: int, best_id: int, source_team: Optional[Team]) -> bool:
    if source_team == Team.ENEMY:
        return candidate_id < best_id
    return candidate_id > best_id


def apply_tie_breaking_rules(
    candidates: List[Any],
    source_hex: Hex,
    source_team: Optional[Team] = None,
    current_best: Optional[Any] = None,
) -> Any:
    """
    Wybiera jeden kafelek spośród celów o tej samej liczbie ruchów.
    
    Raises:
        ValueError: Pusta lista kandydatów
    """
    if not candidates:
        raise ValueError("apply_tie_breaking_rules: no candidates provided")
    if len(candidates) == 1:
        return candidates[0]
    
    best = current_best if current_best is not None else candidates[0]
    start_index = 0 if current_best is not None else 1
    
    for candidate in candidates[start_index:]:
        candidate_vertical = is_vertically_aligned(source_hex, candidate.hex)
        best_vertical = is_vertically_aligned(source_hex, best.hex)
        
        if candidate_vertical and not best_vertical:
            best = candidate
        elif best_vertical and not candidate_vertical:
            continue
        elif are_hexes_in_same_diagonal_row(candidate.hex.id, best.hex.id):
            if _prefers(candidate.hex.id, best.hex.id, source_team):
                best = candidate
        elif not candidate_vertical and not best_vertical:
            candidate_distance = source_hex.distance(candidate.hex)
            best_distance = source_hex.distance(best.hex)
            if candidate_distance < best_distance:
                best = candidate
            elif candidate_distance == best_distance and _prefers(
                candidate.hex.id, best.hex.id, source_team
            ):
                best = candidate
    
    return best


def find_closest_target(
    source_tile: Any,
    target_tiles: List[Any],
    source_range: int,
    get_tile: GetTile,
    can_traverse: CanTraverse = default_can_traverse,
) -> Optional[TargetResult]:
    """
    Znajduje najbliższy osiągalny cel.
    
    Args:
        source_tile: Kafelek postaci szukającej celu
        target_tiles: Kafelki potencjalnych celów
        source_range: Zasięg postaci
        get_tile: Funkcja hex -> kafelek
        
    Returns:
        TargetResult(hex_id, distance=liczba ruchów) albo None
    """
    if not target_tiles:
        return None
    
    bfs = calculate_ranged_movement_distance(
        source_tile.hex,
        [t.hex for t in target_tiles],
        source_range,
        get_tile,
        can_traverse,
    )
    if not bfs.can_reach or not bfs.reachable_targets:
        return None
    
    reachable_keys = {h.key() for h in bfs.reachable_targets}
    candidates = [t for t in target_tiles if t.hex.key() in reachable_keys]
    if not candidates:
        return None
    
    best = apply_tie_breaking_rules(candidates, source_tile.hex, source_tile.team)
    return TargetResult(hex_id=best.hex.id, distance=bfs.movement_distance)


def get_closest_target_map(
    tiles_with_characters: List[Any],
    source_team: Team,
    target_team: Team,
    character_ranges: Optional[Dict[int, int]] = None,
    caching_enabled: bool = True,
    get_tile: Optional[GetTile] = None,
) -> Dict[int, TargetInfo]:
    """
    Mapa: id kafelka postaci z source_team -> najbliższy cel z target_team.
    
    Args:
        tiles_with_characters: Kafelki z postaciami (obie drużyny)
        source_team: Drużyna szukająca
        target_team: Drużyna celów
        character_ranges: character_id -> zasięg (domyślnie 1)
        caching_enabled: Czy używać cache modułu
        get_tile: Funkcja hex -> kafelek. Domyślnie szuka tylko wśród
            tiles_with_characters (pola puste są wtedy nieprzechodnie).
            
    Returns:
        Dict[int, TargetInfo]
    """
    ranges = character_ranges or {}
    cache = (
        _default_cache.closest_enemy_cache
        if source_team == Team.ALLY
        else _default_cache.closest_ally_cache
    )
    cache_key = generate_grid_cache_key(tiles_with_characters, ranges)
    
    if caching_enabled:
        cached = cache.get(cache_key)
        if cached is not None:
            return cached
    
    if get_tile is None:
        by_key = {t.hex.key(): t for t in tiles_with_characters}
        get_tile = lambda h: by_key.get(h.key())  # noqa: E731
    
    source_tiles = [t for t in tiles_with_characters if t.team == source_team]
    target_tiles = [t for t in tiles_with_characters if t.team == target_team]
    
    result: Dict[int, TargetInfo] = {}
    for source_tile in source_tiles:
        char_range = ranges.get(source_tile.character_id, 1) if source_tile.character_id else 1
        closest = find_closest_target(source_tile, target_tiles, char_range, get_tile)
        if closest is None:
            continue
        info = TargetInfo(distance=closest.distance)
        if target_team == Team.ENEMY:
            info.enemy_hex_id = closest.hex_id
        else:
            info.ally_hex_id = closest.hex_id
        result[source_tile.hex.id] = info
    
    if caching_enabled:
        cache.set(cache_key, result)
    return result


def get_debug_paths(grid: Any, character_ranges: Optional[Dict[int, int]] = None) -> List[Dict[str, Any]]:
    """
    Ścieżki A* od każdej postaci do jej najbliższego celu (obie drużyny).
    
    Returns:
        Lista {from_hex_id, to_hex_id, path: [hex_id...], team}
    """
    ranges = character_ranges or {}
    tiles = grid.get_tiles_with_characters()
    if not tiles:
        return []
    
    results: List[Dict[str, Any]] = []
    for source_team in (Team.ALLY, Team.ENEMY):
        source_tiles = [t for t in tiles if t.team == source_team]
        target_tiles = [t for t in tiles if t.team == source_team.opposite]
        for source_tile in source_tiles:
            closest = find_closest_target(
                source_tile,
                target_tiles,
                ranges.get(source_tile.character_id, 1),
                grid.find_tile,
            )
            if closest is None:
                continue
            target_tile = next(t for t in target_tiles if t.hex.id == closest.hex_id)
            path = find_path_a_star(source_tile.hex, target_tile.hex, grid.find_tile)
            if path is not None:
                results.append({
                    "from_hex_id": source_tile.hex.id,
                    "to_hex_id": closest.hex_id,
                    "path": [h.id for h in path],
                    "team": source_team.value,
                })
    return results
