from scorecard.scoring import best_ball


def test_best_gross_and_counting_player():
    scores = [
        {"player_name": "Ann", "gross_score": 5, "net_score": 4},
        {"player_name": "Bo", "gross_score": 4, "net_score": 4},
        {"player_name": "Cy", "gross_score": None, "net_score": None},
    ]
    assert best_ball.calculate_best_ball(scores, use_handicaps=False) == {
        "best_score": 4,
        "counting_player": "Bo",
    }
    # first player to post the low net counts
    assert best_ball.calculate_best_ball(scores, use_handicaps=True) == {
        "best_score": 4,
        "counting_player": "Ann",
    }


def test_no_scores_posted():
    assert best_ball.calculate_best_ball([], use_handicaps=False) == {
        "best_score": None,
        "counting_player": None,
    }


def test_hole_result():
    assert best_ball.calculate_hole_result(3, 4) == 1
    assert best_ball.calculate_hole_result(5, 4) == -1
    assert best_ball.calculate_hole_result(4, 4) == 0
    assert best_ball.calculate_hole_result(None, 4) == 0
