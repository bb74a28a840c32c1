import random

import pytest

from delve.dungeon import DungeonConfig
from delve.errors import GenerationError
from delve.models import level_up_xp, spawn_item
from delve.services import stats
from delve.services.items import use_item
from delve.services.progression import StatChoice, apply_level_up, check_level_up, next_level
from delve.visibility import StaticVisibility


def test_below_threshold_no_level_up(entities, world):
    entities[0].fighter.xp = level_up_xp(1) - 1
    assert not check_level_up(entities, world)
    assert entities[0].level == 1
    assert world.pending_level_up is None


def test_threshold_exactly_levels_once(entities, world):
    threshold = level_up_xp(1)
    entities[0].fighter.xp = threshold
    assert check_level_up(entities, world)
    assert entities[0].level == 2
    assert world.pending_level_up == threshold
    # second check while pending does nothing
    assert not check_level_up(entities, world)
    assert entities[0].level == 2
    assert "You reached level 2!" in world.log.texts()


@pytest.mark.parametrize(
    "choice,field,delta",
    [(StatChoice.HP, "base_max_hp", 20), (StatChoice.POWER, "base_power", 1), (StatChoice.DEFENSE, "base_defense", 1)],
)
def test_apply_choice_spends_threshold(entities, world, choice, field, delta):
    fighter = entities[0].fighter
    threshold = level_up_xp(1)
    fighter.xp = threshold + 40
    before = getattr(fighter, field)
    check_level_up(entities, world)
    apply_level_up(choice, entities, world)
    assert getattr(fighter, field) == before + delta
    assert fighter.xp == 40
    assert world.pending_level_up is None


def test_hp_choice_also_raises_current_hp(entities, world):
    entities[0].fighter.hp = 10
    entities[0].fighter.xp = level_up_xp(1)
    check_level_up(entities, world)
    apply_level_up("hp", entities, world)
    assert entities[0].fighter.hp == 30


def test_apply_without_pending_raises(entities, world):
    with pytest.raises(ValueError):
        apply_level_up(StatChoice.POWER, entities, world)


def test_next_level_heals_half_and_reinitialises(entities, world):
    mail = spawn_item("chain-mail", 0, 0)
    world.inventory.append(mail)
    use_item(0, entities, world, StaticVisibility())
    entities[0].fighter.hp = 5
    vis = StaticVisibility()
    gen = next_level(entities, world, vis, random.Random(8))
    assert world.dungeon_level == 2
    assert entities[0].fighter.hp == 5 + stats.max_hp(0, entities, world) // 2
    assert vis.initialise_calls == 1
    assert world.grid is gen.grid
    assert entities[0].pos == gen.player_start
    assert entities[-1].stairs


def test_failed_descent_leaves_level_untouched(entities, world):
    world.config = DungeonConfig(max_attempts=0)
    old_grid = world.grid
    entities[0].fighter.hp = 5
    vis = StaticVisibility()
    with pytest.raises(GenerationError):
        next_level(entities, world, vis, random.Random(1))
    assert world.dungeon_level == 1
    assert world.grid is old_grid
    assert entities[0].fighter.hp == 5
    assert vis.initialise_calls == 0
