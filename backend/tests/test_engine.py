import os
import sys

import anyio
import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from scorecard import db
from scorecard.config import GAME_LIST_ROUTE
from scorecard.engine import GameScoringEngine
from scorecard.exceptions import InvalidHoleNumber, StorageError
from scorecard.formats import MatchPlayRules, SkinsRules, WolfRules
from scorecard.models import Course, CourseHole, MatchPlayHole
from scorecard.services.notifications import CollectingNotifier
from scorecard.storage import CourseHoleProvider, GameStore
from sqlalchemy import func, select


class FailingStore(GameStore):
    """Store whose game updates and deletes fail while ``failing`` is set."""

    def __init__(self) -> None:
        super().__init__()
        self.failing = True

    async def update_game(self, game_table, game_id, fields):
        if self.failing:
            raise StorageError("database is locked")
        await super().update_game(game_table, game_id, fields)

    async def delete_game(self, game_table, holes_table, game_id):
        if self.failing:
            raise StorageError("database is locked")
        await super().delete_game(game_table, holes_table, game_id)


class BlockingStore(GameStore):
    """Store whose inserts wait until the test releases them."""

    def __init__(self) -> None:
        super().__init__()
        self.release = anyio.Event()

    async def insert_hole(self, holes_table, record):
        await self.release.wait()
        return await super().insert_hole(holes_table, record)


class BrokenCourses(CourseHoleProvider):
    async def fetch_course_holes(self, course_id):
        raise StorageError("course service unavailable")


def _engine(rules, store=None, courses=None):
    navigations = []
    notifier = CollectingNotifier()
    engine = GameScoringEngine(
        rules,
        store=store or GameStore(),
        courses=courses or CourseHoleProvider(cache=None),
        navigate=navigations.append,
        notifier=notifier,
    )
    return engine, navigations, notifier


async def _match_game(**fields):
    values = {"player_1": "Alex", "player_2": "Sam", "holes_played": 18}
    values.update(fields)
    game = await GameStore().create_game("match_play_games", values)
    return game["id"]


async def _skins_game(**fields):
    values = {
        "players": [{"name": "Ann"}, {"name": "Bo"}, {"name": "Cy"}],
        "carryover_enabled": True,
        "holes_played": 18,
    }
    values.update(fields)
    game = await GameStore().create_game("skins_games", values)
    return game["id"]


async def _course(course_id, holes):
    async with db.get_session_factory()() as session:
        session.add(Course(id=course_id, name=course_id.title()))
        for number, (par, stroke_index) in enumerate(holes, start=1):
            session.add(
                CourseHole(
                    id=f"{course_id}-{number}",
                    course_id=course_id,
                    hole_number=number,
                    par=par,
                    stroke_index=stroke_index,
                )
            )
        await session.commit()


async def _match_hole_rows(game_id):
    async with db.get_session_factory()() as session:
        return (
            await session.execute(
                select(func.count()).select_from(MatchPlayHole).where(MatchPlayHole.game_id == game_id)
            )
        ).scalar_one()


async def _play(engine, player1, player2):
    engine.update_score("player1", player1)
    engine.update_score("player2", player2)
    return await engine.save_hole()


@pytest.mark.anyio
async def test_load_fresh_game_points_at_first_hole_with_default_course():
    game_id = await _match_game(course_id=None)
    engine, _, notifier = _engine(MatchPlayRules())

    assert await engine.load(game_id)

    state = engine.state
    assert state.current_hole == 1
    assert state.par == 4
    assert state.stroke_index is None
    assert len(state.course_holes) == 18
    assert state.scores == MatchPlayRules().create_empty_scores(state.game)
    assert state.loading is False
    assert notifier.messages == []


@pytest.mark.anyio
async def test_match_play_three_holes_accumulate_status():
    game_id = await _match_game()
    engine, navigations, _ = _engine(MatchPlayRules())
    await engine.load(game_id)

    for player1, player2 in [(4, 5), (3, 3), (5, 4)]:
        assert await _play(engine, player1, player2)

    holes = engine.state.holes
    assert [h["hole_result"] for h in holes] == [1, 0, -1]
    assert [h["match_status_after"] for h in holes] == [1, 1, 0]
    assert engine.state.current_hole == 4
    assert engine.state.game["match_status"] == 0
    assert engine.state.game["holes_remaining"] == 15
    assert not engine.state.game["is_finished"]
    assert navigations == []


@pytest.mark.anyio
async def test_match_play_finishes_as_soon_as_lead_is_unreachable():
    game_id = await _match_game()
    engine, navigations, _ = _engine(MatchPlayRules())
    await engine.load(game_id)

    for _ in range(4):
        await _play(engine, 3, 4)
    for _ in range(10):
        await _play(engine, 4, 4)

    # 4 up with 4 to play: dormie, not decided yet
    assert engine.state.current_hole == 15
    assert navigations == []

    assert await _play(engine, 4, 4)

    game = engine.state.game
    assert game["is_finished"] is True
    assert game["winner_player"] == "Alex"
    assert game["final_result"] == "4 & 3"
    assert navigations == [f"/match-play/{game_id}/summary"]
    assert engine.state.finished_route == navigations[0]
    assert engine.state.current_hole == 15

    stored = await GameStore().fetch_game("match_play_games", game_id)
    assert stored["is_finished"] is True
    assert stored["final_result"] == "4 & 3"


async def _three_up_dormie(engine):
    await _play(engine, 4, 4)
    for _ in range(3):
        await _play(engine, 3, 4)
    for _ in range(11):
        await _play(engine, 4, 4)
    assert engine.state.game["match_status"] == 3
    assert engine.state.game["is_finished"] is False
    assert engine.state.current_hole == 16


@pytest.mark.anyio
async def test_editing_earlier_hole_can_decide_the_match():
    game_id = await _match_game()
    engine, navigations, _ = _engine(MatchPlayRules())
    await engine.load(game_id)
    await _three_up_dormie(engine)
    assert navigations == []

    assert await engine.select_hole(1)
    assert await _play(engine, 3, 4)

    assert engine.state.game["final_result"] == "4 & 3"
    assert navigations == [f"/match-play/{game_id}/summary"]
    assert engine.state.finished_route == navigations[0]
    assert engine.state.current_hole == 1

    stored = await GameStore().fetch_game("match_play_games", game_id)
    assert stored["is_finished"] is True
    assert stored["winner_player"] == "Alex"


@pytest.mark.anyio
async def test_autosave_that_decides_the_match_leaves_for_summary():
    game_id = await _match_game()
    engine, navigations, _ = _engine(MatchPlayRules())
    await engine.load(game_id)
    await _three_up_dormie(engine)

    assert await engine.select_hole(1)
    engine.update_score("player1", 3)
    engine.update_score("player2", 4)

    assert not await engine.navigate_hole("next")
    assert navigations == [f"/match-play/{game_id}/summary"]
    assert engine.state.game["is_finished"] is True
    assert engine.state.current_hole == 1


@pytest.mark.anyio
async def test_blank_score_is_rejected_without_saving():
    game_id = await _match_game()
    engine, navigations, notifier = _engine(MatchPlayRules())
    await engine.load(game_id)

    engine.update_score("player1", 5)
    assert not await engine.save_hole()

    assert [(n.title, n.description) for n in notifier.drain()] == [
        ("Error saving hole", "both players need a score")
    ]
    assert engine.state.holes == []
    assert engine.state.current_hole == 1
    assert await _match_hole_rows(game_id) == 0
    assert navigations == []


@pytest.mark.anyio
async def test_structured_score_value_is_reported_not_raised():
    game_id = await _match_game()
    engine, _, notifier = _engine(MatchPlayRules())
    await engine.load(game_id)

    engine.update_score("player1", {"strokes": 4})
    engine.update_score("player2", 4)
    assert not await engine.save_hole()

    assert engine.state.saving is False
    assert [n.title for n in notifier.messages] == ["Error saving hole"]
    assert await _match_hole_rows(game_id) == 0


@pytest.mark.anyio
async def test_skins_carryover_builds_next_hole_stake():
    game_id = await _skins_game()
    engine, _, _ = _engine(SkinsRules())
    await engine.load(game_id)

    for name, score in {"Ann": 4, "Bo": 5, "Cy": 5}.items():
        engine.update_score(name, score)
    await engine.save_hole()
    first = engine.state.holes[0]
    assert first["winner_player"] == "Ann"
    assert first["skins_available"] == 1

    for name, score in {"Ann": 4, "Bo": 4, "Cy": 5}.items():
        engine.update_score(name, score)
    await engine.save_hole()
    second = engine.state.holes[1]
    assert second["winner_player"] is None
    assert second["is_carryover"] is True

    for name, score in {"Ann": 5, "Bo": 3, "Cy": 5}.items():
        engine.update_score(name, score)
    await engine.save_hole()
    third = engine.state.holes[2]
    assert third["skins_available"] == 2
    assert third["winner_player"] == "Bo"


@pytest.mark.anyio
async def test_saving_same_hole_twice_updates_instead_of_inserting():
    game_id = await _match_game()
    engine, _, _ = _engine(MatchPlayRules())
    await engine.load(game_id)
    await _play(engine, 4, 5)
    await _play(engine, 4, 4)

    assert await engine.navigate_hole("prev")
    assert engine.state.current_hole == 2
    assert await engine.save_hole()
    before = dict(engine.saved_hole(2))
    assert await engine.save_hole()

    assert engine.state.current_hole == 2
    assert engine.saved_hole(2)["id"] == before["id"]
    assert engine.saved_hole(2)["hole_result"] == before["hole_result"]
    assert await _match_hole_rows(game_id) == 2


@pytest.mark.anyio
async def test_load_hole_data_returns_saved_scores():
    game_id = await _match_game()
    engine, _, _ = _engine(MatchPlayRules())
    await engine.load(game_id)
    engine.update_score("player1_mulligan", True)
    await _play(engine, 5, 6)

    engine.load_hole_data(1)

    assert engine.state.scores == {
        "player1": 5,
        "player2": 6,
        "player1_mulligan": True,
        "player2_mulligan": False,
    }


@pytest.mark.anyio
async def test_navigation_boundaries_on_fresh_game():
    game_id = await _match_game()
    engine, _, _ = _engine(MatchPlayRules())
    await engine.load(game_id)

    assert not await engine.navigate_hole("prev")
    assert not await engine.navigate_hole("next")
    assert engine.state.current_hole == 1


@pytest.mark.anyio
async def test_next_is_noop_on_last_hole():
    game_id = await _match_game(holes_played=9)
    store = GameStore()
    for number in range(1, 10):
        await store.insert_hole(
            "match_play_holes", {"game_id": game_id, "hole_number": number, "par": 4}
        )
    engine, _, _ = _engine(MatchPlayRules(), store=store)
    await engine.load(game_id)

    assert engine.state.current_hole == 9
    assert not await engine.navigate_hole("next")
    assert engine.state.current_hole == 9


@pytest.mark.anyio
async def test_next_stops_at_first_unplayed_hole():
    game_id = await _match_game()
    engine, _, _ = _engine(MatchPlayRules())
    await engine.load(game_id)
    await _play(engine, 4, 4)

    assert await engine.navigate_hole("prev")
    assert engine.state.current_hole == 1
    assert await engine.navigate_hole("next")
    assert engine.state.current_hole == 2
    assert engine.state.scores["player1"] == 0
    assert not await engine.navigate_hole("next")
    assert engine.state.current_hole == 2


@pytest.mark.anyio
async def test_next_autosaves_edits_to_a_saved_hole():
    game_id = await _match_game()
    engine, _, _ = _engine(MatchPlayRules())
    await engine.load(game_id)
    await _play(engine, 4, 4)
    await _play(engine, 4, 4)

    await engine.navigate_hole("prev")
    await engine.navigate_hole("prev")
    engine.update_score("player1", 3)
    assert await engine.navigate_hole("next")

    assert engine.state.current_hole == 2
    assert engine.saved_hole(1)["player_1_gross_score"] == 3
    assert engine.saved_hole(1)["hole_result"] == 1
    assert engine.state.game["match_status"] == 1


@pytest.mark.anyio
async def test_prev_does_not_save():
    game_id = await _match_game()
    engine, _, _ = _engine(MatchPlayRules())
    await engine.load(game_id)
    await _play(engine, 4, 4)
    await _play(engine, 4, 4)
    await engine.navigate_hole("prev")

    engine.update_score("player1", 2)
    assert await engine.navigate_hole("prev")
    assert engine.saved_hole(2)["player_1_gross_score"] == 4


@pytest.mark.anyio
async def test_wolf_skips_autosave_until_choice_is_made():
    store = GameStore()
    game = await store.create_game(
        "wolf_games", {"players": ["Ann", "Bo", "Cy"], "holes_played": 18}
    )
    engine, _, _ = _engine(WolfRules(), store=store)
    await engine.load(game["id"])

    for key, value in {"player_1": 4, "player_2": 5, "player_3": 5, "wolf_choice": "lone"}.items():
        engine.update_score(key, value)
    await engine.save_hole()
    await engine.navigate_hole("prev")

    engine.update_score("player_1", 9)
    engine.update_score("wolf_choice", None)
    assert await engine.navigate_hole("next")
    assert engine.saved_hole(1)["scores"] == [4, 5, 5]


@pytest.mark.anyio
async def test_select_hole_limits_and_jumps():
    game_id = await _match_game()
    engine, _, _ = _engine(MatchPlayRules())
    await engine.load(game_id)
    await _play(engine, 4, 5)
    await _play(engine, 5, 4)

    assert await engine.select_hole(1)
    assert engine.state.current_hole == 1
    assert engine.state.scores["player1"] == 4
    assert await engine.select_hole(3)

    with pytest.raises(InvalidHoleNumber):
        await engine.select_hole(4)
    with pytest.raises(InvalidHoleNumber):
        await engine.select_hole(0)


@pytest.mark.anyio
async def test_failed_save_leaves_state_unchanged_and_retry_updates():
    game_id = await _match_game()
    store = FailingStore()
    engine, navigations, notifier = _engine(MatchPlayRules(), store=store)
    store.failing = False
    await engine.load(game_id)
    store.failing = True

    assert not await _play(engine, 4, 5)

    assert engine.state.holes == []
    assert engine.state.current_hole == 1
    assert engine.state.saving is False
    assert engine.state.scores["player1"] == 4
    assert [(n.title, n.description) for n in notifier.drain()] == [
        ("Error saving hole", "database is locked")
    ]

    store.failing = False
    assert await engine.save_hole()
    assert engine.state.current_hole == 2
    assert await _match_hole_rows(game_id) == 1
    assert navigations == []


@pytest.mark.anyio
async def test_save_while_saving_is_rejected():
    game_id = await _match_game()
    store = BlockingStore()
    engine, _, notifier = _engine(MatchPlayRules(), store=store)
    await engine.load(game_id)
    engine.update_score("player1", 4)
    engine.update_score("player2", 5)

    results = []

    async def first_save():
        results.append(await engine.save_hole())

    async with anyio.create_task_group() as tg:
        tg.start_soon(first_save)
        while not engine.state.saving:
            await anyio.sleep(0)
        assert not await engine.save_hole()
        store.release.set()

    assert results == [True]
    assert [n.title for n in notifier.messages] == ["Save in progress"]
    assert await _match_hole_rows(game_id) == 1


@pytest.mark.anyio
async def test_save_without_loaded_game_is_noop():
    engine, _, notifier = _engine(MatchPlayRules())
    assert not await engine.save_hole()
    assert not await engine.navigate_hole("next")
    assert not engine.go_to_summary()
    assert notifier.messages == []


@pytest.mark.anyio
async def test_delete_game_removes_rows_and_leaves():
    game_id = await _match_game()
    store = GameStore()
    engine, navigations, _ = _engine(MatchPlayRules(), store=store)
    await engine.load(game_id)
    await _play(engine, 4, 5)

    assert await engine.delete_game()

    assert navigations == [GAME_LIST_ROUTE]
    assert await store.fetch_game("match_play_games", game_id) is None
    assert await store.fetch_holes("match_play_holes", game_id) == []
    assert engine.state.game is None


@pytest.mark.anyio
async def test_delete_failure_is_reported():
    game_id = await _match_game()
    store = FailingStore()
    engine, navigations, notifier = _engine(MatchPlayRules(), store=store)
    await engine.load(game_id)

    assert not await engine.delete_game()

    assert navigations == []
    assert notifier.messages[0].title == "Error deleting game"
    assert engine.state.game is not None


@pytest.mark.anyio
async def test_missing_game_reports_load_error():
    engine, _, notifier = _engine(MatchPlayRules())

    assert not await engine.load("missing")

    assert engine.state.game is None
    assert engine.state.load_error == "game 'missing' not found"
    assert notifier.messages[0].title == "Error loading game"


@pytest.mark.anyio
async def test_course_data_drives_par_and_stroke_index():
    await _course("links", [(5, 3), (3, 17)] + [(4, n) for n in range(1, 17)])
    game_id = await _match_game(course_id="links")
    engine, _, _ = _engine(MatchPlayRules())
    await engine.load(game_id)

    assert (engine.state.par, engine.state.stroke_index) == (5, 3)
    await _play(engine, 5, 5)
    assert engine.saved_hole(1)["par"] == 5
    assert engine.saved_hole(1)["stroke_index"] == 3
    assert (engine.state.par, engine.state.stroke_index) == (3, 17)


@pytest.mark.anyio
async def test_unknown_course_falls_back_to_default_holes():
    game_id = await _match_game(course_id=None, holes_played=9)
    engine, _, notifier = _engine(MatchPlayRules(), courses=BrokenCourses(cache=None))

    assert await engine.load(game_id)

    assert [h["par"] for h in engine.state.course_holes] == [4] * 9
    assert engine.state.stroke_index is None
    assert notifier.messages == []


@pytest.mark.anyio
async def test_go_to_summary_and_refetch():
    game_id = await _match_game()
    store = GameStore()
    engine, navigations, _ = _engine(MatchPlayRules(), store=store)
    await engine.load(game_id)

    assert engine.go_to_summary()
    assert navigations == [f"/match-play/{game_id}/summary"]
    assert engine.state.finished_route is None

    await store.insert_hole(
        "match_play_holes", {"game_id": game_id, "hole_number": 1, "par": 4}
    )
    assert await engine.refetch()
    assert engine.saved_hole_count == 1
    assert engine.state.current_hole == 2
