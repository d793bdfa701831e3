"""
Sesja planowania - jedna siatka, manager umiejętności, RNG i dziennik.

Sesja to punkt wejścia dla CLI i API. Każda operacja:
    1. deleguje do hexplan.characters (transakcje + umiejętności)
    2. zapisuje wynik w dzienniku (EventLogger)
    3. zwraca bool (oczekiwane porażki nie są wyjątkami)

ZASIĘGI:
═══════════════════════════════════════════════════════════════════

    Postać z characters.yaml       -> jej range
    Companion z companion_range    -> zasięg z umiejętności właściciela
    Companion bez companion_range  -> zasięg właściciela
    Nieznana postać                -> character_defaults.range (1)

DETERMINIZM:
═══════════════════════════════════════════════════════════════════

    Auto-rozstawienie i companiony losują przez GameRNG sesji.
    Ten sam seed + te same operacje = to samo rozstawienie.
    switch_map tworzy nową siatkę i NOWY RNG z tym samym seedem.

Przykład użycia:
    >>> session = PlanningSession.from_config(ConfigLoader())
    >>> session.place_character(3, 66, Team.ALLY)
    True
    >>> session.get_closest_enemy_map()
    {3: TargetInfo(enemy_hex_id=..., ...)}
    >>> session.save_journal("output/session.json")
"""

from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional

from .characters import (
    execute_auto_place_character,
    execute_clear_all_characters,
    execute_move_character,
    execute_place_character,
    execute_remove_character,
    execute_swap_characters,
)
from .core.config_loader import ConfigLoader
from .core.hex_grid import Grid, MapPreset
from .core.layout import GridPreset
from .core.pathfinding import (
    TargetInfo,
    clear_pathfinding_cache,
    find_path_a_star,
    get_closest_target_map,
    get_debug_paths,
    get_pathfinding_cache,
)
from .core.rng import GameRNG
from .core.state import Team
from .events.event_logger import EventLogger, EventType
from .skills import SkillManager, get_character_skill

logger = logging.getLogger(__name__)


class PlanningSession:
    """
    Stan jednej sesji planowania.
    
    Attributes:
        loader (ConfigLoader): Źródło map, układów i zasięgów postaci
        seed (int): Ziarno RNG
        caching_enabled (bool): Cache ścieżek i map najbliższych celów
        grid (Grid): Siatka
        skill_manager (SkillManager): Aktywne umiejętności
        journal (EventLogger): Dziennik operacji
    """
    
    def __init__(
        self,
        layout: GridPreset,
        map_preset: MapPreset,
        loader: Optional[ConfigLoader] = None,
        seed: int = 0,
        caching_enabled: bool = True,
        max_team_size: int = 5,
    ):
        self.loader = loader or ConfigLoader()
        self.layout = layout
        self.seed = seed
        self.caching_enabled = caching_enabled
        self.max_team_size = max_team_size
        self._character_ranges = self.loader.get_character_ranges()
        self._default_range = self.loader.get_character_defaults().get("range", 1)
        
        self._reset(map_preset)
    
    @classmethod
    def from_config(
        cls,
        loader: Optional[ConfigLoader] = None,
        map_key: Optional[str] = None,
        seed: Optional[int] = None,
    ) -> PlanningSession:
        """
        Tworzy sesję z defaults.yaml (argumenty nadpisują konfigurację).
        
        Raises:
            KeyError: Nieznana mapa
        """
        loader = loader or ConfigLoader()
        grid_config = loader.get_grid_config()
        session_config = loader.get_session_config()
        
        return cls(
            layout=loader.load_layout(),
            map_preset=loader.load_map(map_key),
            loader=loader,
            seed=seed if seed is not None else session_config.get("seed", 0),
            caching_enabled=session_config.get("caching", True),
            max_team_size=grid_config.get("max_team_size", 5),
        )
    
    def _reset(self, map_preset: MapPreset) -> None:
        self.map_preset = map_preset
        self.rng = GameRNG(self.seed)
        self.skill_manager = SkillManager()
        self.grid = Grid(self.layout, map_preset, rng=self.rng, max_team_size=self.max_team_size)
        self.grid.skill_manager = self.skill_manager
        self.journal = EventLogger(seed=self.seed, map_key=map_preset.key, layout=self.layout.name)
        clear_pathfinding_cache()
        self.journal.log_event(EventType.SESSION_START, map=map_preset.key, layout=self.layout.name)
    
    # ─────────────────────────────────────────────────────────────────────────
    # MAPY
    # ─────────────────────────────────────────────────────────────────────────
    
    def switch_map(self, map_key: str) -> None:
        """
        Przełącza mapę - nowa siatka, puste drużyny, nowy dziennik.
        
        Raises:
            KeyError: Nieznana mapa
        """
        map_preset = self.loader.load_map(map_key)
        self._reset(map_preset)
        self.journal.log_event(EventType.MAP_SWITCH, map=map_key)
        logger.info("Switched to map %s", map_key)
    
    def get_maps(self) -> List[Dict[str, str]]:
        return self.loader.get_map_names()
    
    # ─────────────────────────────────────────────────────────────────────────
    # OPERACJE NA POSTACIACH
    # ─────────────────────────────────────────────────────────────────────────
    
    def place_character(self, hex_id: int, character_id: int, team: Team = Team.ALLY) -> bool:
        success = execute_place_character(self.grid, self.skill_manager, hex_id, character_id, team)
        self.journal.log_event(
            EventType.CHARACTER_PLACE, success, hex_id=hex_id, character_id=character_id, team=team
        )
        return success
    
    def auto_place_character(self, character_id: int, team: Team = Team.ALLY) -> Optional[int]:
        """
        Stawia postać na losowym wolnym kafelku drużyny.
        
        Returns:
            Optional[int]: Id kafelka albo None przy porażce
        """
        success = execute_auto_place_character(self.grid, self.skill_manager, character_id, team)
        hex_id = self.grid.find_character_hex(character_id, team) if success else None
        self.journal.log_event(
            EventType.CHARACTER_AUTO_PLACE, success, hex_id=hex_id, character_id=character_id, team=team
        )
        return hex_id
    
    def remove_character(self, hex_id: int) -> bool:
        character_id = self.grid.get_character(hex_id)
        team = self.grid.get_character_team(hex_id)
        success = execute_remove_character(self.grid, self.skill_manager, hex_id)
        self.journal.log_event(
            EventType.CHARACTER_REMOVE, success, hex_id=hex_id, character_id=character_id, team=team
        )
        return success
    
    def move_character(self, from_hex_id: int, to_hex_id: int, character_id: Optional[int] = None) -> bool:
        """
        Przenosi postać (domyślnie tę, która stoi na from_hex_id).
        """
        if character_id is None:
            character_id = self.grid.get_character(from_hex_id)
        team = self.grid.get_character_team(from_hex_id)
        success = character_id is not None and execute_move_character(
            self.grid, self.skill_manager, from_hex_id, to_hex_id, character_id
        )
        self.journal.log_event(
            EventType.CHARACTER_MOVE, success,
            hex_id=from_hex_id, to_hex_id=to_hex_id, character_id=character_id, team=team,
        )
        return success
    
    def swap_characters(self, from_hex_id: int, to_hex_id: int) -> bool:
        character_id = self.grid.get_character(from_hex_id)
        success = execute_swap_characters(self.grid, self.skill_manager, from_hex_id, to_hex_id)
        self.journal.log_event(
            EventType.CHARACTER_SWAP, success,
            hex_id=from_hex_id, to_hex_id=to_hex_id, character_id=character_id,
        )
        return success
    
    def clear_all_characters(self) -> bool:
        count = self.grid.get_character_count()
        success = execute_clear_all_characters(self.grid, self.skill_manager)
        self.journal.log_event(EventType.GRID_CLEAR, success, removed=count)
        return success
    
    def set_max_team_size(self, team: Team, size: int) -> bool:
        """
        Zmienia limit drużyny.
        
        Returns:
            bool: False gdy limit jest niepoprawny albo mniejszy niż
                  liczba postaci już stojących w drużynie
        """
        success = (
            isinstance(size, int)
            and size >= len(self.grid.get_team_characters(team))
            and self.grid.set_max_team_size(team, size)
        )
        self.journal.log_event(EventType.TEAM_SIZE_CHANGE, bool(success), team=team, size=size)
        return bool(success)
    
    # ─────────────────────────────────────────────────────────────────────────
    # ZASIĘGI I PATHFINDING
    # ─────────────────────────────────────────────────────────────────────────
    
    def get_character_range(self, character_id: int) -> int:
        """Zasięg ataku postaci (companion: z umiejętności właściciela)."""
        if self.grid.is_companion_id(character_id):
            main_id = self.grid.get_main_character_id(character_id)
            skill = get_character_skill(main_id)
            if skill is not None and skill.companion_range is not None:
                return skill.companion_range
            return self._character_ranges.get(main_id, self._default_range)
        return self._character_ranges.get(character_id, self._default_range)
    
    def get_character_ranges(self) -> Dict[int, int]:
        """Zasięgi wszystkich postaci stojących na siatce."""
        return {
            tile.character_id: self.get_character_range(tile.character_id)
            for tile in self.grid.get_tiles_with_characters()
        }
    
    def get_closest_enemy_map(self) -> Dict[int, TargetInfo]:
        """Kafelek sojusznika -> najbliższy przeciwnik."""
        return get_closest_target_map(
            self.grid.get_tiles_with_characters(),
            Team.ALLY,
            Team.ENEMY,
            self.get_character_ranges(),
            self.caching_enabled,
            self.grid.find_tile,
        )
    
    def get_closest_ally_map(self) -> Dict[int, TargetInfo]:
        """Kafelek przeciwnika -> najbliższy sojusznik."""
        return get_closest_target_map(
            self.grid.get_tiles_with_characters(),
            Team.ENEMY,
            Team.ALLY,
            self.get_character_ranges(),
            self.caching_enabled,
            self.grid.find_tile,
        )
    
    def find_path(self, from_hex_id: int, to_hex_id: int) -> Optional[List[int]]:
        """
        Ścieżka A* między kafelkami (id kafelków, włącznie z końcami).
        
        Raises:
            HexNotFoundError: Nieznany kafelek
        """
        start = self.grid.get_hex_by_id(from_hex_id)
        goal = self.grid.get_hex_by_id(to_hex_id)
        path = find_path_a_star(start, goal, self.grid.find_tile, caching_enabled=self.caching_enabled)
        return [h.id for h in path] if path is not None else None
    
    def get_debug_paths(self) -> List[Dict[str, Any]]:
        return get_debug_paths(self.grid, self.get_character_ranges())
    
    def clear_cache(self) -> Dict[str, int]:
        """Czyści cache pathfindingu i zwraca statystyki sprzed czyszczenia."""
        stats = get_pathfinding_cache().get_stats()
        clear_pathfinding_cache()
        self.journal.log_event(EventType.CACHE_CLEAR, **stats)
        return stats
    
    # ─────────────────────────────────────────────────────────────────────────
    # STAN
    # ─────────────────────────────────────────────────────────────────────────
    
    def get_state(self) -> Dict[str, Any]:
        """Snapshot siatki dla API/CLI."""
        return {
            "map": self.map_preset.key,
            "layout": self.layout.name,
            "seed": self.seed,
            "tiles": [tile.to_dict() for tile in self.grid.get_all_tiles()],
            "team_sizes": {
                team.value: {
                    "max": self.grid.get_max_team_size(team),
                    "count": len(self.grid.get_team_characters(team)),
                }
                for team in Team
            },
            "companions": self.grid.get_companion_links(),
        }
    
    def get_skill_state(self) -> Dict[str, Any]:
        return self.skill_manager.to_dict()
    
    def save_journal(self, filepath: str) -> None:
        self.journal.save(filepath)
    
    def __repr__(self) -> str:
        return (
            f"PlanningSession(map={self.map_preset.key!r}, seed={self.seed}, "
            f"characters={self.grid.get_character_count()})"
        )
