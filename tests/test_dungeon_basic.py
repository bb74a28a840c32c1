import random
import unittest

from delve.dungeon import DungeonConfig, make_map
from delve.errors import GenerationError
from delve.models import PLAYER, new_player


class TestBasicDungeon(unittest.TestCase):
    def setUp(self):
        self.entities = [new_player()]
        self.level = make_map(self.entities, 1, DungeonConfig(seed=42))

    def test_rooms_exist(self):
        self.assertGreater(self.level.metrics["rooms"], 0)
        self.assertEqual(self.level.metrics["rooms"], len(self.level.rooms))

    def test_grid_dimensions(self):
        cfg = DungeonConfig()
        self.assertEqual(len(self.level.grid), cfg.width)
        self.assertTrue(all(len(col) == cfg.height for col in self.level.grid))

    def test_player_at_first_room_center(self):
        self.assertEqual(self.entities[PLAYER].pos, self.level.rooms[0].center)
        self.assertEqual(self.level.player_start, self.level.rooms[0].center)

    def test_stairs_last_at_last_room_center(self):
        stairs = self.entities[-1]
        self.assertTrue(stairs.stairs)
        self.assertEqual(stairs.name, "stairs")
        self.assertEqual(stairs.pos, self.level.rooms[-1].center)
        self.assertEqual(sum(1 for e in self.entities if e.stairs), 1)

    def test_room_interiors_carved_and_border_walled(self):
        for room in self.level.rooms:
            for x, y in room.cells():
                self.assertFalse(self.level.grid[x][y].blocked, f"room cell {(x, y)} still wall")
        # map border is never carved
        self.assertTrue(all(self.level.grid[0][y].blocked for y in range(len(self.level.grid[0]))))

    def test_metrics_counts_match_store(self):
        monsters = sum(1 for e in self.entities if e.ai is not None)
        items = sum(1 for e in self.entities if e.item is not None)
        self.assertEqual(self.level.metrics["monsters"], monsters)
        self.assertEqual(self.level.metrics["items"], items)


def test_zero_rooms_raises_and_keeps_store():
    player = new_player(3, 4)
    leftover = new_player(9, 9)
    entities = [player, leftover]
    try:
        make_map(entities, 1, DungeonConfig(max_attempts=0), random.Random(1))
    except GenerationError:
        pass
    else:  # pragma: no cover
        raise AssertionError("expected GenerationError")
    assert entities == [player, leftover]
    assert player.pos == (3, 4)


def test_map_too_small_for_rooms_raises_generation_error():
    player = new_player(3, 4)
    entities = [player]
    try:
        make_map(entities, 1, DungeonConfig(width=8, height=8, seed=1))
    except GenerationError as exc:
        assert "8x8" in str(exc)
    else:  # pragma: no cover
        raise AssertionError("expected GenerationError")
    assert entities == [player]
    assert player.pos == (3, 4)


def test_inverted_room_sizes_raise_generation_error():
    try:
        make_map([new_player()], 1, DungeonConfig(min_size=9, max_size=4, seed=1))
    except GenerationError:
        return
    raise AssertionError("expected GenerationError")  # pragma: no cover


def test_empty_store_rejected():
    try:
        make_map([], 1, DungeonConfig(seed=1))
    except ValueError:
        return
    raise AssertionError("expected ValueError")  # pragma: no cover


if __name__ == "__main__":
    unittest.main()
