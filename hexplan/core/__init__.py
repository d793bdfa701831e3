"""
Core module - podstawowe komponenty silnika planowania.

Zawiera:
- Hex: Współrzędne cube (q, r, s) z numerem kafelka
- State / Team: Stany kafelków i drużyny
- GridPreset / DIAGONAL_ROWS: Układy siatki i rzędy diagonalne
- Grid / GridTile / MapPreset: Siatka z rozstawieniem postaci
- transaction: Transakcje z rollbackiem i grupowaniem czyszczenia cache
- pathfinding: A*, BFS zasięgu, mapy najbliższych celów
- MemoCache / PriorityQueue: Struktury pomocnicze pathfindingu
- GameRNG: Deterministyczny generator losowości
- ConfigLoader: Wczytywanie konfiguracji YAML
"""

from .errors import PlannerError, HexNotFoundError, InvalidHexError, SkillActivationError
from .hex_coord import Hex, HEX_DIRECTIONS
from .state import State, Team
from .layout import GridPreset, FULL_GRID, FULL_GRID_FLAT, TEST_GRID, DIAGONAL_ROWS, get_layout
from .memoization import MemoCache, generate_grid_cache_key, generate_path_cache_key
from .priority_queue import PriorityQueue
from .pathfinding import (
    PathfindingCache,
    find_path_a_star,
    find_path_distance,
    calculate_effective_distance,
    calculate_ranged_movement_distance,
    find_closest_target,
    get_closest_target_map,
    get_debug_paths,
    clear_pathfinding_cache,
    default_can_traverse,
    path_cache_key,
)
from .transaction import execute_transaction, handle_cache_invalidation
from .rng import GameRNG
from .hex_grid import Grid, GridTile, MapPreset
from .config_loader import ConfigLoader

__all__ = [
    "PlannerError", "HexNotFoundError", "InvalidHexError", "SkillActivationError",
    "Hex", "HEX_DIRECTIONS", "State", "Team",
    "GridPreset", "FULL_GRID", "FULL_GRID_FLAT", "TEST_GRID", "DIAGONAL_ROWS", "get_layout",
    "MemoCache", "generate_grid_cache_key", "generate_path_cache_key", "PriorityQueue",
    "PathfindingCache", "find_path_a_star", "find_path_distance",
    "calculate_effective_distance", "calculate_ranged_movement_distance",
    "find_closest_target", "get_closest_target_map", "get_debug_paths",
    "clear_pathfinding_cache", "default_can_traverse", "path_cache_key",
    "execute_transaction", "handle_cache_invalidation",
    "GameRNG", "Grid", "GridTile", "MapPreset", "ConfigLoader",
]
