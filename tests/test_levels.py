import pytest

from blast.factories.levels import get_level_config


def test_first_levels_follow_the_table():
    first = get_level_config(1)
    assert (first.rows, first.cols, first.color_count, first.target_score) == (6, 5, 3, 500)
    second = get_level_config(2)
    assert (second.rows, second.cols, second.color_count, second.target_score) == (6, 5, 4, 1000)
    assert second.time_limit == 60


def test_table_difficulty_never_decreases():
    levels = [get_level_config(level) for level in range(1, 11)]
    assert [config.level for config in levels] == list(range(1, 11))
    for previous, current in zip(levels, levels[1:]):
        assert current.rows >= previous.rows
        assert current.cols >= previous.cols
        assert current.color_count >= previous.color_count
        assert current.target_score > previous.target_score
        assert current.time_limit >= previous.time_limit


def test_levels_past_the_table_are_extrapolated():
    config = get_level_config(14)
    assert config.level == 14
    assert config.rows == 12
    assert config.cols == 10
    assert config.color_count == 8
    assert config.target_score == 7000
    assert config.time_limit == 140


def test_extrapolation_is_capped():
    config = get_level_config(100)
    assert config.rows == 12
    assert config.cols == 10
    assert config.color_count == 8
    assert config.time_limit == 180
    assert config.target_score == 50000


@pytest.mark.parametrize("level", [0, -3])
def test_invalid_level_is_rejected(level):
    with pytest.raises(ValueError):
        get_level_config(level)
