#!/usr/bin/env python3
"""
Hex Planner - Entry Point
═══════════════════════════════════════════════════════════════════════════

Rozstawia przykładowe drużyny na wybranej mapie i pokazuje, co widzi
planer: siatkę, cele umiejętności i najbliższych przeciwników.

Użycie:
    python main.py                      # Mapa i seed z defaults.yaml
    python main.py --map arena3         # Konkretna mapa
    python main.py --seed 12345         # Konkretny seed
    python main.py --verbose            # Logi silnika (DEBUG)
    python main.py --save out.json      # Zapisz dziennik operacji

Wynik:
    - Wypisuje siatkę i cele na konsolę
    - Opcjonalnie zapisuje dziennik do JSON
"""

import argparse
import logging
import sys
from pathlib import Path

# Dodaj katalog projektu do path
sys.path.insert(0, str(Path(__file__).parent))

from hexplan.core.config_loader import ConfigLoader
from hexplan.core.state import Team
from hexplan.session import PlanningSession


ALLY_LINEUP = [50, 66, 91, 31, 81]
ENEMY_LINEUP = [89, 58, 46, 93]


def main():
    """Główna funkcja."""
    parser = argparse.ArgumentParser(
        description="Hex-grid team placement planner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--map",
        dest="map_key",
        default=None,
        help="Klucz mapy z maps.yaml (domyślnie: grid.map z defaults.yaml)"
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Ziarno losowości (domyślnie: session.seed z defaults.yaml)"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Szczegółowy output (logi DEBUG)"
    )
    parser.add_argument(
        "--save",
        default=None,
        help="Ścieżka pliku JSON na dziennik operacji"
    )
    
    args = parser.parse_args()
    
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    
    loader = ConfigLoader()
    try:
        session = PlanningSession.from_config(loader, map_key=args.map_key, seed=args.seed)
    except KeyError as e:
        print(f"❌ {e.args[0]}")
        print("Dostępne mapy: " + ", ".join(m["key"] for m in loader.get_map_names()))
        return 1
    
    print("=" * 60)
    print("HEX PLANNER")
    print("=" * 60)
    print(f"Mapa: {session.map_preset.name} ({session.map_preset.key})")
    print(f"Seed: {session.seed}")
    print()
    
    # ─────────────────────────────────────────────────────────────────────────
    # ROZSTAWIENIE
    # ─────────────────────────────────────────────────────────────────────────
    characters = loader.load_all_characters()
    
    for team, lineup in ((Team.ALLY, ALLY_LINEUP), (Team.ENEMY, ENEMY_LINEUP)):
        print(f"{team.value.capitalize()}:")
        for character_id in lineup:
            hex_id = session.auto_place_character(character_id, team)
            name = characters.get(character_id, {}).get("name", character_id)
            if hex_id is None:
                print(f"  - {name}: brak miejsca")
            else:
                print(f"  - {name} @ hex {hex_id}")
        print()
    
    print("-" * 60)
    print(session.grid.debug_print())
    print("-" * 60)
    print()
    
    # ─────────────────────────────────────────────────────────────────────────
    # CELE
    # ─────────────────────────────────────────────────────────────────────────
    print("Cele umiejętności:")
    targets = session.skill_manager.get_all_skill_targets()
    if not targets:
        print("  (brak)")
    for key, target in sorted(targets.items()):
        print(f"  - {key} -> hex {target.target_hex_id}")
    print()
    
    print("Najbliżsi przeciwnicy:")
    for hex_id, info in sorted(session.get_closest_enemy_map().items()):
        print(f"  - hex {hex_id} -> hex {info.enemy_hex_id} (ruch: {info.distance})")
    print()
    
    if args.save:
        session.save_journal(args.save)
        print(f"📄 Dziennik zapisany: {args.save}")
    
    if args.verbose:
        print()
        print("-" * 60)
        print("STATYSTYKI OPERACJI")
        print("-" * 60)
        
        from hexplan.events.event_logger import EventType
        
        for event_type in EventType:
            count = len(session.journal.get_events_by_type(event_type))
            if count > 0:
                print(f"  {event_type.name}: {count}")
    
    return 0


if __name__ == "__main__":
    sys.exit(main())
