from scorecard.scoring import wolf

SETTINGS = {"lone_wolf_win_points": 4, "lone_wolf_loss_points": 1, "team_win_points": 1}


def test_wolf_rotation_last_and_first():
    assert [wolf.get_wolf_player_for_hole(h, 4, "last") for h in range(1, 6)] == [4, 1, 2, 3, 4]
    assert [wolf.get_wolf_player_for_hole(h, 4, "first") for h in range(1, 6)] == [1, 2, 3, 4, 1]


def test_lone_wolf_win_and_loss():
    win = wolf.calculate_wolf_hole_score([4, 5, 5, 6], 1, "lone", None, SETTINGS)
    assert win == {"winning_side": "wolf", "player_points": [4, 0, 0, 0]}

    loss = wolf.calculate_wolf_hole_score([5, 4, 5, 6], 1, "lone", None, SETTINGS)
    assert loss == {"winning_side": "opponents", "player_points": [0, 1, 1, 1]}


def test_partner_side_shares_points():
    result = wolf.calculate_wolf_hole_score([4, 5, 5, 6], 4, "partner", 1, SETTINGS)
    assert result == {"winning_side": "wolf", "player_points": [1, 0, 0, 1]}


def test_tie_scores_nothing():
    result = wolf.calculate_wolf_hole_score([4, 4, 5, 5], 1, "lone", None, SETTINGS)
    assert result == {"winning_side": "tie", "player_points": [0, 0, 0, 0]}


def test_add_points_pads_shorter_list():
    assert wolf.add_points([1, 2], [0, 1, 3]) == [1, 3, 3]
