"""
Testy dla SkillManager i rejestru umiejętności.

Używa testowej umiejętności rejestrowanej w fixture, żeby sprawdzić
cykl życia niezależnie od katalogu.
"""

import pytest
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from hexplan.core.hex_grid import Grid, MapPreset
from hexplan.core.layout import TEST_GRID
from hexplan.core.state import State, Team
from hexplan.skills.skill import (
    Skill, SkillTargetInfo, register_skill, unregister_skill,
    get_character_skill, has_skill, has_companion_skill,
)
from hexplan.skills.skill_manager import SkillManager, skill_key

PROBE_ID = 777


# ═══════════════════════════════════════════════════════════════════════════
# FIXTURES
# ═══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def calls():
    return []


@pytest.fixture
def probe_skill(calls):
    """Umiejętność zapisująca wywołania callbacków."""
    skill = Skill(
        id="probe",
        character_id=PROBE_ID,
        name="Probe",
        on_activate=lambda ctx: calls.append(("activate", ctx.hex_id, ctx.team)),
        on_deactivate=lambda ctx: calls.append(("deactivate", ctx.hex_id, ctx.team)),
        on_update=lambda ctx: calls.append(("update", ctx.hex_id, ctx.team)),
        color_modifier="#123456",
    )
    register_skill(skill)
    yield skill
    unregister_skill(PROBE_ID)


@pytest.fixture
def failing_skill():
    def explode(ctx):
        raise RuntimeError("no room")
    
    skill = register_skill(Skill(id="failing", character_id=PROBE_ID + 1, name="Failing", on_activate=explode))
    yield skill
    unregister_skill(PROBE_ID + 1)


@pytest.fixture
def grid():
    preset = MapPreset(
        key="test", id=0, name="Test",
        grid=[(State.AVAILABLE_ALLY, [1, 2, 3]), (State.AVAILABLE_ENEMY, [4, 5])],
    )
    return Grid(TEST_GRID, preset)


@pytest.fixture
def manager(grid):
    manager = SkillManager()
    grid.skill_manager = manager
    return manager


# ═══════════════════════════════════════════════════════════════════════════
# TEST: REJESTR
# ═══════════════════════════════════════════════════════════════════════════

def test_registry_lookup(probe_skill):
    assert get_character_skill(PROBE_ID) is probe_skill
    assert has_skill(PROBE_ID)
    assert not has_companion_skill(PROBE_ID)


def test_unregistered_character():
    assert get_character_skill(123456) is None
    assert not has_skill(123456)


def test_skill_key():
    assert skill_key(66, Team.ENEMY) == "66-enemy"


# ═══════════════════════════════════════════════════════════════════════════
# TEST: CYKL ŻYCIA
# ═══════════════════════════════════════════════════════════════════════════

def test_activate_without_skill_is_noop_success(manager, grid):
    assert manager.activate_character_skill(123456, 1, Team.ALLY, grid)
    assert manager.get_active_skills() == {}


def test_activate_records_and_calls(probe_skill, manager, grid, calls):
    assert manager.activate_character_skill(PROBE_ID, 1, Team.ALLY, grid)
    
    assert manager.has_active_skill(PROBE_ID, Team.ALLY)
    assert not manager.has_active_skill(PROBE_ID, Team.ENEMY)
    assert manager.has_active_skill(PROBE_ID)
    assert manager.get_active_skill_info(PROBE_ID).hex_id == 1
    assert calls == [("activate", 1, Team.ALLY)]


def test_reactivation_deactivates_first(probe_skill, manager, grid, calls):
    manager.activate_character_skill(PROBE_ID, 1, Team.ALLY, grid)
    manager.activate_character_skill(PROBE_ID, 2, Team.ALLY, grid)
    
    assert [c[0] for c in calls] == ["activate", "deactivate", "activate"]
    assert len(manager.get_active_skills()) == 1
    assert manager.get_active_skill_info(PROBE_ID, Team.ALLY).hex_id == 2


def test_failed_activation_rolls_back_record(failing_skill, manager, grid):
    assert not manager.activate_character_skill(failing_skill.character_id, 1, Team.ALLY, grid)
    assert not manager.has_active_skill(failing_skill.character_id)


def test_deactivate_is_unconditional(probe_skill, manager, grid, calls):
    manager.deactivate_character_skill(PROBE_ID, 4, Team.ENEMY, grid)
    assert calls == [("deactivate", 4, Team.ENEMY)]


def test_deactivate_all(probe_skill, manager, grid, calls):
    manager.activate_character_skill(PROBE_ID, 1, Team.ALLY, grid)
    manager.activate_character_skill(PROBE_ID, 4, Team.ENEMY, grid)
    
    manager.deactivate_all_skills(grid)
    
    assert manager.get_active_skills() == {}
    assert calls.count(("deactivate", 1, Team.ALLY)) == 1
    assert calls.count(("deactivate", 4, Team.ENEMY)) == 1


# ═══════════════════════════════════════════════════════════════════════════
# TEST: ODŚWIEŻANIE
# ═══════════════════════════════════════════════════════════════════════════

def test_update_follows_character(probe_skill, manager, grid, calls):
    grid.place_character(1, PROBE_ID, Team.ALLY, True)
    manager.activate_character_skill(PROBE_ID, 1, Team.ALLY, grid)
    calls.clear()
    
    # move_character odświeża umiejętności przez skill_manager siatki
    assert grid.move_character(1, 3, PROBE_ID)
    
    assert manager.get_active_skill_info(PROBE_ID, Team.ALLY).hex_id == 3
    assert calls == [("update", 3, Team.ALLY)]


def test_update_drops_missing_character(probe_skill, manager, grid, calls):
    manager.activate_character_skill(PROBE_ID, 1, Team.ALLY, grid)
    calls.clear()
    
    manager.update_active_skills(grid)
    
    assert not manager.has_active_skill(PROBE_ID)
    assert calls == []


# ═══════════════════════════════════════════════════════════════════════════
# TEST: MODYFIKATORY I CELE
# ═══════════════════════════════════════════════════════════════════════════

def test_color_modifiers_include_active_skills(probe_skill, manager, grid):
    manager.activate_character_skill(PROBE_ID, 1, Team.ALLY, grid)
    manager.add_character_color_modifier(10050, Team.ALLY, "#c83232")
    
    assert manager.get_color_modifiers_by_character_and_team() == {
        f"{PROBE_ID}-ally": "#123456",
        "10050-ally": "#c83232",
    }


def test_tile_color_removed_only_when_matching(manager):
    manager.set_tile_color_modifier(5, "#aaaaaa")
    
    manager.remove_tile_color_modifier(5, "#bbbbbb")
    assert manager.get_tile_color_modifiers() == {5: "#aaaaaa"}
    
    manager.remove_tile_color_modifier(5, "#aaaaaa")
    assert manager.get_tile_color_modifiers() == {}


def test_target_version_increases(manager):
    version = manager.get_target_version()
    target = SkillTargetInfo(target_hex_id=4, target_character_id=200)
    
    manager.set_skill_target(66, Team.ALLY, target)
    assert manager.get_target_version() > version
    assert manager.get_skill_target(66, Team.ALLY) is target
    
    version = manager.get_target_version()
    manager.clear_skill_target(66, Team.ALLY)
    assert manager.get_target_version() > version
    assert manager.get_all_skill_targets() == {}


def test_image_modifiers(manager):
    manager.add_character_image_modifier(10089, Team.ENEMY, "zanie-turret")
    assert manager.get_image_modifiers() == {"10089-enemy": "zanie-turret"}
    
    manager.remove_character_image_modifier(10089, Team.ENEMY)
    assert manager.get_image_modifiers() == {}


def test_to_dict_snapshot(probe_skill, manager, grid):
    manager.activate_character_skill(PROBE_ID, 1, Team.ALLY, grid)
    snapshot = manager.to_dict()
    
    assert snapshot["active_skills"][f"{PROBE_ID}-ally"] == {
        "character_id": PROBE_ID, "hex_id": 1, "team": "ally",
    }
    assert snapshot["target_version"] == manager.get_target_version()
