"""
Operacje na postaciach z obsługą umiejętności.

Zawiera:
- placement: execute_place_character, execute_auto_place_character
- removal: execute_remove_character, execute_clear_all_characters
- movement: execute_move_character, execute_swap_characters
- companion: zapamiętywanie i przywracanie pozycji companionów
"""

from .companion import CompanionPosition, restore_companions, store_companion_positions
from .placement import execute_auto_place_character, execute_place_character, refresh_skills
from .removal import execute_clear_all_characters, execute_remove_character
from .movement import (
    execute_move_character,
    execute_swap_characters,
    perform_atomic_move,
    perform_atomic_swap,
    perform_cross_team_move,
    perform_cross_team_swap,
    would_create_duplicate,
)

__all__ = [
    "CompanionPosition",
    "store_companion_positions",
    "restore_companions",
    "execute_place_character",
    "execute_auto_place_character",
    "refresh_skills",
    "execute_remove_character",
    "execute_clear_all_characters",
    "execute_move_character",
    "execute_swap_characters",
    "perform_atomic_move",
    "perform_atomic_swap",
    "perform_cross_team_move",
    "perform_cross_team_swap",
    "would_create_duplicate",
]
