from delve.models.xp import LEVEL_UP_BASE, LEVEL_UP_FACTOR, level_up_xp


def test_xp_lower_bound():
    assert level_up_xp(0) == level_up_xp(1)
    assert level_up_xp(-5) == level_up_xp(1)


def test_xp_known_values():
    assert level_up_xp(1) == 350
    assert level_up_xp(2) == 500
    assert level_up_xp(10) == 1700


def test_xp_linear_in_level():
    for lvl in range(1, 20):
        assert level_up_xp(lvl + 1) - level_up_xp(lvl) == LEVEL_UP_FACTOR
    assert level_up_xp(1) == LEVEL_UP_BASE + LEVEL_UP_FACTOR
