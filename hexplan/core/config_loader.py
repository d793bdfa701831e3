"""
Loader konfiguracji planera z plików YAML.

Pliki w hexplan/data/:
- defaults.yaml: ustawienia siatki, sesji i wartości domyślne postaci
- maps.yaml: presety aren (stany kafelków)
- characters.yaml: postacie i ich zasięg ataku

Logika merge (uzupełniania defaults):
    1. Wczytaj character_defaults z defaults.yaml
    2. Nadpisz wartościami konkretnej postaci
    3. Dodaj pole "id"

Przykład:
    defaults.yaml:
        character_defaults:
            range: 1
            
    characters.yaml:
        66:
            name: Bonnie
            range: 4        # nadpisuje default
        81:
            name: Daimon    # range nie podane -> 1 z defaults

Użycie:
    >>> loader = ConfigLoader()
    >>> loader.load_character(66)["range"]
    4
    >>> loader.load_map("arena2").name
    'Arena II'
"""

from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
import copy
import yaml

from .hex_grid import MapPreset
from .layout import GridPreset, get_layout

DEFAULT_DATA_PATH = Path(__file__).resolve().parent.parent / "data"


class ConfigLoader:
    """
    Ładuje konfigurację z plików YAML z cache i merge defaults.
    
    Attributes:
        data_path (Path): Folder z plikami YAML
        overrides (Dict): Nadpisania defaults.yaml (np. z CLI)
        _defaults (Dict): Cache defaults.yaml
        _maps (Dict): Cache sekcji maps
        _characters (Dict): Cache sekcji characters
    """
    
    def __init__(
        self,
        data_path: Union[str, Path, None] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ):
        """
        Args:
            data_path: Folder z plikami YAML (domyślnie dane pakietu)
            overrides: Słownik scalany z defaults.yaml
        """
        self.data_path = Path(data_path) if data_path is not None else DEFAULT_DATA_PATH
        self.overrides = overrides or {}
        self._defaults: Optional[Dict] = None
        self._maps: Optional[Dict] = None
        self._characters: Optional[Dict] = None
    
    # ─────────────────────────────────────────────────────────────────────────
    # WCZYTYWANIE PLIKÓW
    # ─────────────────────────────────────────────────────────────────────────
    
    def _load_yaml(self, filename: str) -> Dict:
        """
        Wczytuje plik YAML.
        
        Raises:
            FileNotFoundError: Jeśli plik nie istnieje
        """
        filepath = self.data_path / filename
        with open(filepath, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f) or {}
    
    def get_defaults(self) -> Dict:
        """Zawartość defaults.yaml z nałożonymi overrides (cache)."""
        if self._defaults is None:
            self._defaults = self._deep_merge(self._load_yaml("defaults.yaml"), self.overrides)
        return self._defaults
    
    def get_grid_config(self) -> Dict:
        return self.get_defaults().get("grid", {})
    
    def get_session_config(self) -> Dict:
        return self.get_defaults().get("session", {})
    
    def get_character_defaults(self) -> Dict:
        return self.get_defaults().get("character_defaults", {})
    
    # ─────────────────────────────────────────────────────────────────────────
    # UKŁADY I MAPY
    # ─────────────────────────────────────────────────────────────────────────
    
    def load_layout(self, name: Optional[str] = None) -> GridPreset:
        """
        Zwraca preset układu (domyślnie grid.layout z defaults.yaml).
        
        Raises:
            ValueError: Nieznany układ
        """
        return get_layout(name or self.get_grid_config().get("layout", "full_grid"))
    
    def _get_all_maps_raw(self) -> Dict:
        if self._maps is None:
            self._maps = self._load_yaml("maps.yaml").get("maps", {})
        return self._maps
    
    def load_map(self, key: Optional[str] = None) -> MapPreset:
        """
        Wczytuje preset mapy.
        
        Args:
            key: Klucz mapy (domyślnie grid.map z defaults.yaml)
            
        Raises:
            KeyError: Jeśli mapa nie istnieje
        """
        key = key or self.get_grid_config().get("map", "arena1")
        maps = self._get_all_maps_raw()
        if key not in maps:
            raise KeyError(f"Map '{key}' not found in maps.yaml")
        return MapPreset.from_dict(key, maps[key])
    
    def get_map_names(self) -> List[Dict[str, str]]:
        """Lista {key, name} wszystkich map w kolejności z pliku."""
        return [
            {"key": key, "name": data.get("name", key)}
            for key, data in self._get_all_maps_raw().items()
        ]
    
    # ─────────────────────────────────────────────────────────────────────────
    # POSTACIE
    # ─────────────────────────────────────────────────────────────────────────
    
    def _get_all_characters_raw(self) -> Dict:
        if self._characters is None:
            data = self._load_yaml("characters.yaml").get("characters", {})
            self._characters = {int(cid): value or {} for cid, value in data.items()}
        return self._characters
    
    def load_character(self, character_id: int) -> Dict:
        """
        Wczytuje postać z uzupełnionymi defaults.
        
        Raises:
            KeyError: Jeśli postać nie istnieje
        """
        characters = self._get_all_characters_raw()
        if character_id not in characters:
            raise KeyError(f"Character '{character_id}' not found in characters.yaml")
        
        result = self._deep_merge(self.get_character_defaults(), characters[character_id])
        result["id"] = character_id
        return result
    
    def load_all_characters(self) -> Dict[int, Dict]:
        return {cid: self.load_character(cid) for cid in self._get_all_characters_raw()}
    
    def get_character_ranges(self) -> Dict[int, int]:
        """Mapa character_id -> zasięg ataku."""
        return {cid: data["range"] for cid, data in self.load_all_characters().items()}
    
    # ─────────────────────────────────────────────────────────────────────────
    # HELPERY
    # ─────────────────────────────────────────────────────────────────────────
    
    @staticmethod
    def _deep_merge(base: Dict, override: Dict) -> Dict:
        """
        Głęboko łączy dwa słowniki.
        
        Override nadpisuje wartości w base, zagnieżdżone słowniki są
        łączone rekurencyjnie.
        """
        result = copy.deepcopy(base)
        
        for key, value in override.items():
            if (
                key in result 
                and isinstance(result[key], dict) 
                and isinstance(value, dict)
            ):
                result[key] = ConfigLoader._deep_merge(result[key], value)
            else:
                result[key] = copy.deepcopy(value)
        
        return result
    
    def reload(self) -> None:
        """Czyści cache i wymusza ponowne wczytanie plików."""
        self._defaults = None
        self._maps = None
        self._characters = None
