from scorecard.scoring import skins


def _scores(**gross):
    return {name: {"gross": value, "net": value} for name, value in gross.items()}


def test_unique_low_wins_available_skins():
    result = skins.calculate_skins_hole_result(
        _scores(a=4, b=5, c=5), use_net=False, carryover_enabled=True, available=1
    )
    assert result == {"winner_player": "a", "is_carryover": False, "skins_won": 1}


def test_tie_carries_over_when_enabled():
    result = skins.calculate_skins_hole_result(
        _scores(a=4, b=4, c=5), use_net=False, carryover_enabled=True, available=1
    )
    assert result["winner_player"] is None
    assert result["is_carryover"] is True
    assert result["skins_won"] == 0


def test_tie_does_not_carry_when_disabled():
    result = skins.calculate_skins_hole_result(
        _scores(a=4, b=4), use_net=False, carryover_enabled=False, available=1
    )
    assert result == {"winner_player": None, "is_carryover": False, "skins_won": 0}


def test_players_without_a_score_are_ignored():
    scores = _scores(a=5, b=6)
    scores["c"] = {"gross": None, "net": None}
    result = skins.calculate_skins_hole_result(
        scores, use_net=False, carryover_enabled=True, available=1
    )
    assert result["winner_player"] == "a"


def test_net_scores_decide_when_requested():
    scores = {"a": {"gross": 4, "net": 4}, "b": {"gross": 5, "net": 3}}
    assert skins.calculate_skins_hole_result(scores, True, True, 1)["winner_player"] == "b"
    assert skins.calculate_skins_hole_result(scores, False, True, 1)["winner_player"] == "a"


def test_skins_available_counts_consecutive_carryovers():
    previous = [
        {"hole_number": 1, "is_carryover": False},
        {"hole_number": 2, "is_carryover": True},
        {"hole_number": 3, "is_carryover": True},
    ]
    assert skins.skins_available(4, previous) == 3
    assert skins.skins_available(3, previous[:2]) == 2
    assert skins.skins_available(2, previous[:1]) == 1
    assert skins.skins_available(1, []) == 1


def test_run_of_ties_pays_out_to_next_outright_winner():
    holes = []
    for number, scores in enumerate(
        [_scores(a=4, b=4), _scores(a=5, b=5), _scores(a=3, b=3), _scores(a=4, b=5)],
        start=1,
    ):
        available = skins.skins_available(number, holes)
        result = skins.calculate_skins_hole_result(scores, False, True, available)
        holes.append(
            {
                "hole_number": number,
                "is_carryover": result["is_carryover"],
                "skins_available": available,
                "winner_player": result["winner_player"],
            }
        )

    assert [h["winner_player"] for h in holes] == [None, None, None, "a"]
    assert holes[-1]["skins_available"] == 4


def test_leaderboard_sorted_and_valued():
    players = [{"name": "a"}, {"name": "b", "group_name": "early"}]
    holes = [
        {"hole_number": 1, "winner_player": "b", "skins_available": 1},
        {"hole_number": 2, "winner_player": None, "skins_available": 1},
        {"hole_number": 3, "winner_player": "b", "skins_available": 2},
        {"hole_number": 4, "winner_player": "a", "skins_available": 1},
    ]
    board = skins.calculate_skins_leaderboard(players, holes, skin_value=5)

    assert [e["player_name"] for e in board] == ["b", "a"]
    assert board[0]["skins_won"] == 3
    assert board[0]["holes_won"] == [1, 3]
    assert board[0]["total_value"] == 15
    assert board[0]["group_name"] == "early"
    assert skins.skins_winner(board) == "b"


def test_no_outright_skins_winner():
    board = [
        {"player_name": "a", "skins_won": 2},
        {"player_name": "b", "skins_won": 2},
    ]
    assert skins.skins_winner(board) is None
    assert skins.skins_winner([{"player_name": "a", "skins_won": 0}]) is None
