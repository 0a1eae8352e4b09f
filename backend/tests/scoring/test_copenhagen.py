import pytest

from scorecard.scoring import copenhagen


@pytest.mark.parametrize(
    "scores, expected",
    [
        ([4, 5, 6], [4, 2, 0]),
        ([4, 4, 5], [3, 3, 0]),
        ([4, 5, 5], [4, 1, 1]),
        ([5, 5, 5], [2, 2, 2]),
        ([6, 4, 5], [0, 4, 2]),
    ],
)
def test_six_points_are_always_distributed(scores, expected):
    result = copenhagen.calculate_copenhagen_points(scores, par=4)
    assert result["points"] == expected
    assert sum(result["points"]) == copenhagen.POINTS_PER_HOLE
    assert result["is_sweep"] is False


def test_birdie_two_clear_sweeps_the_hole():
    result = copenhagen.calculate_copenhagen_points([5, 3, 6], par=4)
    assert result == {"points": [0, 6, 0], "is_sweep": True, "sweep_winner": 2}


def test_birdie_one_clear_is_not_a_sweep():
    result = copenhagen.calculate_copenhagen_points([3, 4, 6], par=4)
    assert result["is_sweep"] is False
    assert result["points"] == [4, 2, 0]


def test_requires_three_scores():
    with pytest.raises(ValueError):
        copenhagen.calculate_copenhagen_points([4, 5], par=4)


def test_running_totals_add_previous_hole_points():
    previous = [
        {"player_1_hole_points": 4, "player_2_hole_points": 2, "player_3_hole_points": 0},
        {"player_1_hole_points": 2, "player_2_hole_points": 2, "player_3_hole_points": 2},
    ]
    assert copenhagen.running_totals(previous, [0, 6, 0]) == [6, 10, 2]


def test_normalize_points():
    assert copenhagen.normalize_points([10, 5, 5]) == [5, 0, 0]
