import random

import pytest

from delve.models import level_up_xp, spawn_item, spawn_monster
from delve.models.catalog import new_stairs
from delve.services import turns
from delve.services.turns import PlayerAction, Session, character_sheet, new_game, play_turn
from delve.visibility import OmniscientVisibility, StaticVisibility


def test_move_takes_turn_and_monsters_react(entities, world, visibility, no_miss):
    entities.append(spawn_monster("orc", 10, 5))
    action = play_turn({"kind": "move", "dx": 1, "dy": 0}, entities, world, visibility, no_miss)
    assert action is PlayerAction.TOOK_TURN
    assert entities[0].pos == (6, 5)
    assert entities[1].pos == (9, 5)


def test_bump_attack_takes_turn(entities, world, visibility, no_miss):
    entities.append(spawn_monster("orc", 6, 5))
    action = play_turn({"kind": "move", "dx": 1, "dy": 0}, entities, world, visibility, no_miss)
    assert action is PlayerAction.TOOK_TURN
    assert entities[1].fighter.hp == 9 - 5
    # orc was adjacent and answered
    assert entities[0].fighter.hp == 29


@pytest.mark.parametrize(
    "intent",
    [
        {"kind": "move", "dx": 1, "dy": 1},
        {"kind": "move", "dx": 0, "dy": 0},
        {"kind": "move", "dx": 2, "dy": 0},
        {"kind": "teleport"},
        {"kind": "use"},
        "move",
        None,
    ],
)
def test_invalid_intents_do_not_take_turn(entities, world, visibility, intent):
    assert play_turn(intent, entities, world, visibility) is PlayerAction.DIDNT_TAKE_TURN
    assert entities[0].pos == (5, 5)


def test_quit_always_exits(entities, world, visibility):
    entities[0].alive = False
    world.pending_level_up = 350
    assert play_turn({"kind": "quit"}, entities, world, visibility) is PlayerAction.EXIT


def test_dead_player_intents_ignored(entities, world, visibility):
    entities[0].alive = False
    assert play_turn({"kind": "move", "dx": 1, "dy": 0}, entities, world, visibility) is PlayerAction.DIDNT_TAKE_TURN
    assert entities[0].pos == (5, 5)


def test_pending_level_up_blocks_turns(entities, world, visibility):
    entities[0].fighter.xp = level_up_xp(1)
    entities.append(spawn_monster("orc", 12, 5))
    play_turn({"kind": "move", "dx": 0, "dy": 1}, entities, world, visibility, random.Random(3))
    assert world.pending_level_up == level_up_xp(1)
    pos = entities[0].pos
    assert play_turn({"kind": "move", "dx": 0, "dy": 1}, entities, world, visibility) is PlayerAction.DIDNT_TAKE_TURN
    assert entities[0].pos == pos


def test_item_actions_turn_economy(entities, world, visibility, no_miss):
    entities.append(spawn_item("healing-potion", 5, 5))
    assert play_turn({"kind": "pick_up"}, entities, world, visibility) is PlayerAction.DIDNT_TAKE_TURN
    assert [it.name for it in world.inventory] == ["healing potion"]
    entities[0].fighter.hp = 10
    assert play_turn({"kind": "use", "slot": 0}, entities, world, visibility) is PlayerAction.DIDNT_TAKE_TURN
    assert entities[0].fighter.hp == 14

    world.inventory.append(spawn_item("lightning-scroll", 0, 0))
    entities.append(spawn_monster("orc", 8, 5))
    assert play_turn({"kind": "use", "slot": 0}, entities, world, visibility, no_miss) is PlayerAction.TOOK_TURN

    world.inventory.append(spawn_item("sword", 0, 0))
    assert play_turn({"kind": "drop", "slot": 0}, entities, world, visibility) is PlayerAction.DIDNT_TAKE_TURN
    assert entities[-1].name == "sword"


def test_visibility_recomputed_only_after_moves(entities, world):
    vis = StaticVisibility()
    play_turn({"kind": "character_sheet"}, entities, world, vis)
    play_turn({"kind": "toggle_display"}, entities, world, vis)
    assert vis.recompute_calls == 1
    assert vis.origin == (5, 5) and vis.radius == turns.TORCH_RADIUS
    play_turn({"kind": "move", "dx": 1, "dy": 0}, entities, world, vis)
    play_turn({"kind": "character_sheet"}, entities, world, vis)
    assert vis.recompute_calls == 2
    assert vis.origin == (6, 5)


def test_visible_tiles_marked_explored(entities, world):
    vis = StaticVisibility([(5, 5), (5, 6)])
    play_turn({"kind": "character_sheet"}, entities, world, vis)
    assert world.grid[5][6].explored
    assert not world.grid[9][9].explored


def test_descend_only_on_stairs(entities, world, visibility):
    assert play_turn({"kind": "descend"}, entities, world, visibility) is PlayerAction.DIDNT_TAKE_TURN
    assert world.dungeon_level == 1
    entities.append(new_stairs(5, 5))
    play_turn({"kind": "descend"}, entities, world, visibility, random.Random(2))
    assert world.dungeon_level == 2
    assert len(world.grid) == world.config.width


def test_resolver_exception_degrades(entities, world, visibility, monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("kaboom")

    monkeypatch.setitem(turns.INTENT_HANDLERS, "move", boom)
    action = play_turn({"kind": "move", "dx": 1, "dy": 0}, entities, world, visibility)
    assert action is PlayerAction.DIDNT_TAKE_TURN
    assert world.log.texts()[-1] == "Something went wrong, nothing happens."


def test_character_sheet_reports_effective_stats(entities, world):
    world.inventory.append(spawn_item("chain-mail", 0, 0))
    world.inventory[0].equipment.equipped = True
    sheet = character_sheet(entities, world)
    assert sheet == {
        "level": 1,
        "xp": 0,
        "xp_to_level": 350,
        "hp": 30,
        "max_hp": 40,
        "power": 5,
        "defense": 4,
        "dungeon_level": 1,
    }


def test_new_game_welcomes_player():
    vis = OmniscientVisibility()
    entities, world = new_game(rng=random.Random(11), visibility=vis)
    assert entities[0].name == "player"
    assert entities[0].fighter.hp == 30
    assert world.dungeon_level == 1
    assert world.log.texts() == [turns.WELCOME_MESSAGE]
    assert vis.width == world.width


def test_session_tracks_display_and_level_choice():
    session = Session.new(seed=21)
    assert session.play({"kind": "toggle_display"}) is PlayerAction.DIDNT_TAKE_TURN
    assert session.fullscreen
    session.play({"kind": "character_sheet"})
    assert session.last_sheet["level"] == 1
    session.player.fighter.xp = level_up_xp(1)
    session.play({"kind": "pick_up"})
    assert session.world.pending_level_up is not None
    session.choose("defense")
    assert session.world.pending_level_up is None
    assert session.player.fighter.base_defense == 3


def test_session_save_and_load(save_url):
    session = Session.new(seed=8)
    session.save("s1", save_url)
    again = Session.load("s1", save_url)
    assert again is not None
    assert again.entities == session.entities
    assert Session.load("missing", save_url) is None
