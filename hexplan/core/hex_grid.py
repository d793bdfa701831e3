"""
Siatka planowania (Grid) - autorytatywny stan rozstawienia.

Grid zarządza:
- kafelkami (GridTile) zbudowanymi z presetu układu i presetu mapy,
- zbiorami postaci każdej drużyny i limitem rozmiaru drużyny,
- tabelą powiązań postać -> companiony,
- odświeżaniem cache i aktywnych umiejętności po każdej zmianie.

Niezmienniki kafelka:
    - character_id i team są albo oba ustawione, albo oba None
    - OCCUPIED_ALLY / OCCUPIED_ENEMY <=> jest postać tej drużyny
    - zdjęcie postaci przywraca AVAILABLE_* tej samej drużyny

Companiony:
    id companiona = id_postaci + 10000 (drugi: + 20000)
    id >= 10000 to companion, id_postaci = id % 10000
    Powiązania są trzymane pod kluczem "mainId-team".

Operacje zmieniające stan zwracają bool (oczekiwane porażki to False).
Nieznane id kafelka rzuca HexNotFoundError.

Przykład użycia:
    >>> grid = Grid(TEST_GRID, test_map)
    >>> grid.place_character(1, 100, Team.ALLY)
    True
    >>> grid.get_tile_by_id(1).state
    <State.OCCUPIED_ALLY: 3>
    >>> grid.move_character(1, 2, 100)
    True
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Optional, Set, Tuple

from .errors import HexNotFoundError
from .hex_coord import Hex
from .layout import FULL_GRID, GridPreset
from .rng import GameRNG
from .state import (
    AVAILABLE_STATE,
    OCCUPIED_STATE,
    State,
    Team,
    available_state_for,
    team_from_state,
)
from .transaction import execute_transaction, handle_cache_invalidation

if TYPE_CHECKING:
    from ..skills.skill_manager import SkillManager

logger = logging.getLogger(__name__)

COMPANION_ID_OFFSET = 10000
DEFAULT_MAX_TEAM_SIZE = 5


@dataclass
class GridTile:
    """
    Kafelek siatki.
    
    Attributes:
        hex (Hex): Współrzędne (z id kafelka)
        state (State): Stan kafelka
        character_id (Optional[int]): Postać na kafelku
        team (Optional[Team]): Drużyna postaci
    """
    hex: Hex
    state: State = State.DEFAULT
    character_id: Optional[int] = None
    team: Optional[Team] = None
    
    def to_dict(self) -> Dict:
        return {
            "hex_id": self.hex.id,
            "q": self.hex.q,
            "r": self.hex.r,
            "s": self.hex.s,
            "state": self.state.name,
            "character_id": self.character_id,
            "team": self.team.value if self.team else None,
        }


@dataclass
class MapPreset:
    """
    Preset mapy: które kafelki dostają jaki stan początkowy.
    
    Attributes:
        key (str): Klucz mapy (np. "arena1")
        id (int): Numer areny
        name (str): Nazwa wyświetlana
        grid (List[Tuple[State, List[int]]]): Pary (stan, id kafelków)
    """
    key: str
    id: int
    name: str
    grid: List[Tuple[State, List[int]]] = field(default_factory=list)
    
    @staticmethod
    def from_dict(key: str, data: Dict) -> MapPreset:
        """
        Tworzy preset z danych YAML.
        
        Format:
            {id: 1, name: "Arena I", tiles: {AVAILABLE_ALLY: [1, 2], BLOCKED: []}}
        """
        grid = [
            (State[state_name], list(hex_ids or []))
            for state_name, hex_ids in data.get("tiles", {}).items()
        ]
        return MapPreset(key=key, id=data.get("id", 0), name=data.get("name", key), grid=grid)


class Grid:
    """
    Siatka kafelków z postaciami.
    
    Attributes:
        grid_preset (GridPreset): Układ siatki
        map_preset (Optional[MapPreset]): Mapa użyta do inicjalizacji
        skill_manager (Optional[SkillManager]): Odświeżany po zmianach
        rng (GameRNG): Losowość auto-rozstawienia i companionów
    """
    
    def __init__(
        self,
        layout: GridPreset = FULL_GRID,
        map_preset: Optional[MapPreset] = None,
        rng: Optional[GameRNG] = None,
        max_team_size: int = DEFAULT_MAX_TEAM_SIZE,
    ):
        self.grid_preset = layout
        self.map_preset = map_preset
        self.rng = rng if rng is not None else GameRNG(0)
        self.skill_manager: Optional["SkillManager"] = None
        
        self._storage: Dict[str, GridTile] = {}
        self._by_id: Dict[int, GridTile] = {}
        self._team_characters: Dict[Team, Set[int]] = {Team.ALLY: set(), Team.ENEMY: set()}
        self._default_team_size = max_team_size
        self._max_team_sizes: Dict[Team, int] = {
            Team.ALLY: max_team_size,
            Team.ENEMY: max_team_size,
        }
        self._companion_links: Dict[str, Set[int]] = {}
        
        for hex_id, q, r in layout.iter_cells():
            tile = GridTile(hex=Hex.from_axial(q, r, hex_id))
            self._storage[tile.hex.key()] = tile
            self._by_id[hex_id] = tile
        
        if map_preset is not None:
            for state, hex_ids in map_preset.grid:
                for hex_id in hex_ids:
                    self.set_state(self.get_hex_by_id(hex_id), state)
    
    # ─────────────────────────────────────────────────────────────────────────
    # KAFELKI
    # ─────────────────────────────────────────────────────────────────────────
    
    def keys(self) -> List[Hex]:
        return [tile.hex for tile in self._storage.values()]
    
    def get_hex_by_id(self, hex_id: int) -> Hex:
        """
        Zwraca hex o podanym id.
        
        Raises:
            HexNotFoundError: Brak kafelka o takim id
        """
        tile = self._by_id.get(hex_id)
        if tile is None:
            raise HexNotFoundError(f"Hex with ID {hex_id} not found", {"hex_id": hex_id})
        return tile.hex
    
    def get_tile(self, hex: Hex) -> GridTile:
        """
        Zwraca kafelek po współrzędnych.
        
        Raises:
            HexNotFoundError: Współrzędne poza siatką
        """
        tile = self._storage.get(hex.key())
        if tile is None:
            raise HexNotFoundError(f"Tile with hex key {hex.key()} not found", {"key": hex.key()})
        return tile
    
    def find_tile(self, hex: Hex) -> Optional[GridTile]:
        """Jak get_tile, ale None poza siatką (dla pathfindingu)."""
        return self._storage.get(hex.key())
    
    def get_tile_by_id(self, hex_id: int) -> GridTile:
        return self.get_tile(self.get_hex_by_id(hex_id))
    
    def has_hex_id(self, hex_id: int) -> bool:
        return hex_id in self._by_id
    
    def get_all_tiles(self) -> List[GridTile]:
        return list(self._storage.values())
    
    def set_state(self, hex: Hex, state: State) -> bool:
        """
        Nadpisuje stan kafelka.
        
        Returns:
            bool: False dla nieznanej wartości stanu
        """
        if not State.is_valid(state):
            return False
        self.get_tile(hex).state = State(state)
        return True
    
    # ─────────────────────────────────────────────────────────────────────────
    # ZAPYTANIA O POSTACIE
    # ─────────────────────────────────────────────────────────────────────────
    
    def get_character(self, hex_id: int) -> Optional[int]:
        return self.get_tile_by_id(hex_id).character_id
    
    def has_character(self, hex_id: int) -> bool:
        return self.get_tile_by_id(hex_id).character_id is not None
    
    def get_character_team(self, hex_id: int) -> Optional[Team]:
        return self.get_tile_by_id(hex_id).team
    
    def get_character_count(self) -> int:
        return sum(1 for tile in self._storage.values() if tile.character_id)
    
    def get_character_placements(self) -> Dict[int, int]:
        """Mapa hex_id -> character_id."""
        return {
            tile.hex.id: tile.character_id
            for tile in self._storage.values()
            if tile.character_id
        }
    
    def get_tiles_with_characters(self) -> List[GridTile]:
        return [tile for tile in self._storage.values() if tile.character_id is not None]
    
    def find_character_hex(self, character_id: int, team: Team) -> Optional[int]:
        """Id kafelka, na którym stoi postać danej drużyny (None gdy brak)."""
        for tile in self._storage.values():
            if tile.character_id == character_id and tile.team == team:
                return tile.hex.id
        return None
    
    # ─────────────────────────────────────────────────────────────────────────
    # ROZSTAWIANIE
    # ─────────────────────────────────────────────────────────────────────────
    
    def place_character(
        self,
        hex_id: int,
        character_id: int,
        team: Team = Team.ALLY,
        skip_cache_invalidation: bool = False,
    ) -> bool:
        """
        Stawia postać na kafelku.
        
        Warunki:
            - character_id to dodatnia liczba całkowita
            - kafelek jest AVAILABLE_* lub OCCUPIED_* tej drużyny
            - drużyna ma wolne miejsce i nie zawiera już tej postaci
            
        Postać stojąca wcześniej na kafelku jest usuwana z drużyny.
        
        Args:
            hex_id: Id kafelka
            character_id: Id postaci
            team: Drużyna
            skip_cache_invalidation: True wewnątrz większej operacji
            
        Returns:
            bool: True jeśli postać została postawiona
        """
        if isinstance(character_id, bool) or not isinstance(character_id, int) or character_id <= 0:
            return False
        if not self.can_place_character_on_tile(hex_id, team):
            return False
        if not self.can_place_character(character_id, team):
            return False
        
        tile = self.get_tile_by_id(hex_id)
        if tile.character_id is not None:
            if tile.team is None:
                logger.error("Tile %d has character %d but no team", hex_id, tile.character_id)
                return False
            self._team_characters[tile.team].discard(tile.character_id)
        
        self._set_character_on_tile(tile, character_id, team)
        handle_cache_invalidation(skip_cache_invalidation, self.skill_manager, self)
        return True
    
    def remove_character(self, hex_id: int, skip_cache_invalidation: bool = False) -> bool:
        """
        Zdejmuje postać z kafelka.
        
        Returns:
            bool: False gdy kafelek jest pusty
        """
        tile = self.get_tile_by_id(hex_id)
        if tile.character_id is None:
            return False
        if tile.team is None:
            logger.error("Tile %d has character %d but no team", hex_id, tile.character_id)
            return False
        
        self._team_characters[tile.team].discard(tile.character_id)
        self._clear_character_from_tile(tile)
        handle_cache_invalidation(skip_cache_invalidation, self.skill_manager, self)
        return True
    
    def clear_all_characters(self) -> bool:
        """
        Zdejmuje wszystkie postacie w jednej transakcji.
        
        Rollback stawia każdą postać z powrotem. Po sukcesie aktywne
        umiejętności są odświeżane raz.
        """
        placements = [
            (tile.hex.id, tile.character_id, tile.team)
            for tile in self.get_tiles_with_characters()
        ]
        
        if not placements:
            handle_cache_invalidation(False, self.skill_manager, self)
            return True
        
        def clear_tiles() -> bool:
            for tile in self._storage.values():
                if tile.character_id is not None:
                    self._clear_character_from_tile(tile)
            for members in self._team_characters.values():
                members.clear()
            return True
        
        def restore_tiles() -> None:
            for hex_id, character_id, team in placements:
                self.place_character(hex_id, character_id, team, True)
        
        result = execute_transaction([clear_tiles], [restore_tiles])
        
        if result and self.skill_manager is not None:
            self.skill_manager.update_active_skills(self)
        return result
    
    def auto_place_character(self, character_id: int, team: Team) -> bool:
        """
        Stawia postać na losowym wolnym kafelku drużyny.
        
        Kafelki są sortowane malejąco po id, a indeks losowany z RNG
        siatki - ten sam seed daje to samo rozstawienie.
        """
        if not self.can_place_character(character_id, team):
            return False
        
        available = self.get_all_available_tiles_for_team(team)
        if not available:
            return False
        
        available.sort(key=lambda t: t.hex.id, reverse=True)
        selected = available[self.rng.randint(0, len(available) - 1)]
        return self.place_character(selected.hex.id, character_id, team)
    
    # ─────────────────────────────────────────────────────────────────────────
    # PRZENOSZENIE
    # ─────────────────────────────────────────────────────────────────────────
    
    def move_character(self, from_hex_id: int, to_hex_id: int, character_id: int) -> bool:
        """
        Przenosi postać na inny kafelek.
        
        Drużyna docelowa wynika ze stanu kafelka docelowego. Porażka
        zostawia postać na kafelku źródłowym z jej drużyną.
        
        Returns:
            bool: False gdy from == to, na from stoi inna postać,
                  kafelek docelowy nie należy do żadnej drużyny
                  albo rozstawienie się nie powiodło
        """
        if from_hex_id == to_hex_id:
            return False
        if self.get_character(from_hex_id) != character_id:
            return False
        
        original_team = self.get_character_team(from_hex_id)
        target_team = self.get_team_from_tile_state(self.get_tile_by_id(to_hex_id).state)
        if original_team is None or target_team is None:
            return False
        
        return self.perform_move(from_hex_id, to_hex_id, character_id, target_team, original_team)
    
    def perform_move(
        self,
        from_hex_id: int,
        to_hex_id: int,
        character_id: int,
        target_team: Team,
        original_team: Team,
    ) -> bool:
        """Transakcja [zdejmij z from, postaw na to] z rollbackiem na from."""
        result = execute_transaction(
            [
                lambda: self.remove_character(from_hex_id, True),
                lambda: self.place_character(to_hex_id, character_id, target_team, True),
            ],
            [lambda: self.place_character(from_hex_id, character_id, original_team, True)],
        )
        
        if result and self.skill_manager is not None:
            self.skill_manager.update_active_skills(self)
        return result
    
    # ─────────────────────────────────────────────────────────────────────────
    # DRUŻYNY
    # ─────────────────────────────────────────────────────────────────────────
    
    def get_max_team_size(self, team: Team) -> int:
        return self._max_team_sizes.get(team) or DEFAULT_MAX_TEAM_SIZE
    
    def set_max_team_size(self, team: Team, size: int) -> bool:
        """
        Ustawia limit drużyny.
        
        Returns:
            bool: False gdy size nie jest int, <= 0 lub większy niż liczba kafelków
        """
        if isinstance(size, bool) or not isinstance(size, int):
            return False
        if size <= 0 or size > len(self._storage):
            return False
        self._max_team_sizes[team] = size
        return True
    
    @property
    def default_team_size(self) -> int:
        return self._default_team_size
    
    def can_place_character(self, character_id: int, team: Team) -> bool:
        """Drużyna ma wolne miejsce i nie zawiera jeszcze tej postaci."""
        if self.get_available_for_team(team) <= 0:
            return False
        return character_id not in self._team_characters[team]
    
    def can_place_character_on_tile(self, hex_id: int, team: Team) -> bool:
        state = self.get_tile_by_id(hex_id).state
        return state in (AVAILABLE_STATE[team], OCCUPIED_STATE[team])
    
    def get_team_characters(self, team: Team) -> Set[int]:
        return self._team_characters[team]
    
    def get_available_for_team(self, team: Team) -> int:
        return self.get_max_team_size(team) - len(self._team_characters[team])
    
    def get_all_available_tiles_for_team(self, team: Team) -> List[GridTile]:
        """Puste kafelki, na których drużyna może postawić postać."""
        return [
            tile for tile in self._storage.values()
            if tile.character_id is None and tile.state in (AVAILABLE_STATE[team], OCCUPIED_STATE[team])
        ]
    
    @staticmethod
    def get_team_from_tile_state(state: State) -> Optional[Team]:
        return team_from_state(state)
    
    # ─────────────────────────────────────────────────────────────────────────
    # COMPANIONY
    # ─────────────────────────────────────────────────────────────────────────
    
    @staticmethod
    def is_companion_id(character_id: int) -> bool:
        return character_id >= COMPANION_ID_OFFSET
    
    @staticmethod
    def get_main_character_id(character_id: int) -> int:
        """Id postaci-właściciela companiona (id postaci zwraca bez zmian)."""
        if not Grid.is_companion_id(character_id):
            return character_id
        return character_id % COMPANION_ID_OFFSET
    
    @staticmethod
    def _companion_key(main_id: int, team: Team) -> str:
        return f"{main_id}-{team.value}"
    
    def get_companions(self, main_character_id: int, team: Team) -> Set[int]:
        return self._companion_links.get(self._companion_key(main_character_id, team), set())
    
    def add_companion_link(self, main_id: int, companion_id: int, team: Team) -> None:
        self._companion_links.setdefault(self._companion_key(main_id, team), set()).add(companion_id)
    
    def remove_companion_link(self, main_id: int, companion_id: int, team: Team) -> None:
        key = self._companion_key(main_id, team)
        companions = self._companion_links.get(key)
        if companions is None:
            return
        companions.discard(companion_id)
        if not companions:
            del self._companion_links[key]
    
    def clear_companion_links(self, main_character_id: int, team: Team) -> None:
        self._companion_links.pop(self._companion_key(main_character_id, team), None)
    
    def get_companion_links(self) -> Dict[str, List[int]]:
        return {key: sorted(ids) for key, ids in self._companion_links.items()}
    
    # ─────────────────────────────────────────────────────────────────────────
    # HELPERY
    # ─────────────────────────────────────────────────────────────────────────
    
    def _set_character_on_tile(self, tile: GridTile, character_id: int, team: Team) -> None:
        tile.character_id = character_id
        tile.team = team
        tile.state = OCCUPIED_STATE[team]
        self._team_characters[team].add(character_id)
    
    @staticmethod
    def _clear_character_from_tile(tile: GridTile) -> None:
        tile.character_id = None
        tile.team = None
        tile.state = available_state_for(tile.state)
    
    def debug_print(self) -> str:
        """
        Tekstowa wizualizacja siatki (wiersz po wierszu).
        
        Legenda:
            .  DEFAULT       a  AVAILABLE_ALLY    e  AVAILABLE_ENEMY
            A  OCCUPIED_ALLY E  OCCUPIED_ENEMY    #  BLOCKED   %  BLOCKED_BREAKABLE
        """
        symbols = {
            State.DEFAULT: ".",
            State.AVAILABLE_ALLY: "a",
            State.AVAILABLE_ENEMY: "e",
            State.OCCUPIED_ALLY: "A",
            State.OCCUPIED_ENEMY: "E",
            State.BLOCKED: "#",
            State.BLOCKED_BREAKABLE: "%",
        }
        width = max(len(row) for row in self.grid_preset.hex)
        lines = []
        for row in self.grid_preset.hex:
            cells = [f"{hex_id:>2}{symbols[self._by_id[hex_id].state]}" for hex_id in row]
            indent = "  " * (width - len(row))
            lines.append(indent + "  ".join(cells))
        return "\n".join(lines)
    
    def __repr__(self) -> str:
        return (
            f"Grid(layout={self.grid_preset.name}, "
            f"ally={len(self._team_characters[Team.ALLY])}/{self.get_max_team_size(Team.ALLY)}, "
            f"enemy={len(self._team_characters[Team.ENEMY])}/{self.get_max_team_size(Team.ENEMY)})"
        )
