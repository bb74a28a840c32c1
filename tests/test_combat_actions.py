from delve.models import spawn_monster
from delve.models.entities import Fighter, DeathCallback
from delve.services.combat_service import MISS_CHANCE, attack, take_damage


def _orc(entities, x=6, y=5):
    entities.append(spawn_monster("orc", x, y))
    return len(entities) - 1


def test_power_minus_defense_hit_logs_message(entities, world, no_miss):
    fighter = entities[0].fighter
    fighter.base_power = 4
    fighter.base_defense = 1
    orc = _orc(entities)
    entities[orc].fighter.base_defense = 0
    damage = attack(0, orc, entities, world, no_miss)
    assert damage == 4
    assert entities[orc].fighter.hp == 9 - 4
    assert world.log.texts()[-1] == "player attacks orc for 4 hit points."


def test_forced_miss_overrides_arithmetic(entities, world, always_miss):
    orc = _orc(entities)
    damage = attack(0, orc, entities, world, always_miss)
    assert damage == -1
    assert entities[orc].fighter.hp == 9
    assert world.log.texts()[-1] == "player misses orc."


def test_zero_damage_has_no_effect(entities, world, no_miss):
    orc = _orc(entities)
    entities[orc].fighter.base_power = 2  # vs player defense 2
    damage = attack(orc, 0, entities, world, no_miss)
    assert damage == 0
    assert entities[0].fighter.hp == 30
    assert "no effect" in world.log.texts()[-1]


def test_kill_converts_remains_and_credits_xp(entities, world, no_miss):
    orc = _orc(entities)
    entities[orc].fighter.hp = 1
    attack(0, orc, entities, world, no_miss)
    remains = entities[orc]
    assert entities[0].fighter.xp == 35
    assert not remains.alive
    assert remains.glyph == "%"
    assert remains.blocks is False
    assert remains.fighter is None and remains.ai is None
    assert remains.name == "remains of orc"
    assert "orc is dead! You gain 35 experience points." in world.log.texts()


def test_take_damage_idempotent_on_dead_target(entities, world):
    orc = _orc(entities)
    # keep a fighter around after death to probe the guard
    entities[orc].fighter.on_death = DeathCallback.PLAYER
    first = take_damage(orc, 20, entities, world)
    hp_after_first = entities[orc].fighter.hp
    second = take_damage(orc, 5, entities, world)
    assert first == 35
    assert second is None
    assert entities[orc].fighter.hp == hp_after_first - 5
    assert world.log.texts().count("You died, see you another time!") == 1


def test_non_positive_damage_changes_nothing(entities, world):
    assert take_damage(0, 0, entities, world) is None
    assert take_damage(0, -3, entities, world) is None
    assert entities[0].fighter.hp == 30


def test_player_death_transform(entities, world, no_miss):
    orc = _orc(entities)
    entities[orc].fighter.base_power = 50
    attack(orc, 0, entities, world, no_miss)
    player = entities[0]
    assert not player.alive
    assert player.glyph == "%"
    assert player.fighter is not None


def test_self_attack_rejected(entities, world):
    try:
        attack(0, 0, entities, world)
    except ValueError:
        return
    raise AssertionError("expected ValueError")  # pragma: no cover


def test_miss_chance_constant():
    assert MISS_CHANCE == 0.1
    assert Fighter(1, 1, 0, 0, DeathCallback.MONSTER).xp == 0
