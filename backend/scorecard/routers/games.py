"""HTTP adapter over the scoring engine.

Each ``POST /games/{format}/{game_id}/sessions`` loads one engine for one
viewing session. Sessions live in a :class:`SessionRegistry` kept on
``app.state``; action responses carry the navigation target and any error
notifications the engine produced while handling the request.
"""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from fastapi import APIRouter, Depends, Request, Response

from ..config import SESSION_IDLE_TTL_SECONDS
from ..engine import GameScoringEngine
from ..exceptions import SessionNotFound, StorageError, http_problem
from ..formats import UmbriagoRules, get_rules
from ..formats.base import FormatRules
from ..schemas import (
    ActionOut,
    GameCreate,
    GameOut,
    NavigateIn,
    NotificationOut,
    RollIn,
    ScoreUpdate,
    SessionStateOut,
)
from ..services.notifications import CollectingNotifier
from ..storage import CourseHoleProvider, GameStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/games", tags=["games"])


@dataclass
class ScoringSession:
    id: str
    engine: GameScoringEngine
    notifier: CollectingNotifier
    navigations: List[str] = field(default_factory=list)
    last_seen: float = 0.0


class SessionRegistry:
    """Engines for the game views currently open, keyed by session id.

    A session that goes unused for ``idle_ttl_seconds`` is dropped the next
    time the registry is touched.
    """

    def __init__(
        self,
        store: Optional[GameStore] = None,
        courses: Optional[CourseHoleProvider] = None,
        idle_ttl_seconds: float = SESSION_IDLE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.store = store or GameStore()
        self.courses = courses or CourseHoleProvider()
        self.idle_ttl_seconds = idle_ttl_seconds
        self._clock = clock
        self._sessions: Dict[str, ScoringSession] = {}

    def _expire(self, now: float) -> None:
        if self.idle_ttl_seconds <= 0:
            return
        cutoff = now - self.idle_ttl_seconds
        stale = [sid for sid, s in self._sessions.items() if s.last_seen <= cutoff]
        for session_id in stale:
            logger.info("Dropping idle scoring session %s", session_id)
            del self._sessions[session_id]

    def open(self, rules: FormatRules) -> ScoringSession:
        session_id = uuid.uuid4().hex
        notifier = CollectingNotifier()
        navigations: List[str] = []
        engine = GameScoringEngine(
            rules,
            store=self.store,
            courses=self.courses,
            navigate=navigations.append,
            notifier=notifier,
        )
        now = self._clock()
        self._expire(now)
        session = ScoringSession(session_id, engine, notifier, navigations, last_seen=now)
        self._sessions[session_id] = session
        return session

    def get(self, session_id: str) -> ScoringSession:
        now = self._clock()
        self._expire(now)
        try:
            session = self._sessions[session_id]
        except KeyError:
            raise SessionNotFound(session_id) from None
        session.last_seen = now
        return session

    def close(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)

    def __len__(self) -> int:
        return len(self._sessions)


def get_registry(request: Request) -> SessionRegistry:
    registry = getattr(request.app.state, "scoring_sessions", None)
    if registry is None:
        registry = SessionRegistry()
        request.app.state.scoring_sessions = registry
    return registry


def _state_out(session: ScoringSession) -> SessionStateOut:
    engine = session.engine
    state = engine.state
    return SessionStateOut(
        session_id=session.id,
        format=engine.rules.format_id,
        game_id=engine.game_id,
        game=state.game,
        holes=state.holes,
        current_hole=state.current_hole,
        total_holes=engine.total_holes,
        saved_holes=engine.saved_hole_count,
        par=state.par,
        stroke_index=state.stroke_index,
        scores=state.scores,
        loading=state.loading,
        saving=state.saving,
        load_error=state.load_error,
        finished_route=state.finished_route,
    )


def _action_out(session: ScoringSession, ok: bool) -> ActionOut:
    navigate_to = session.navigations[-1] if session.navigations else None
    session.navigations.clear()
    return ActionOut(
        ok=ok,
        navigate_to=navigate_to,
        notifications=[
            NotificationOut(title=n.title, description=n.description)
            for n in session.notifier.drain()
        ],
        state=_state_out(session),
    )


# Session routes are declared before the ``/{format}`` routes so that
# "sessions" is never taken for a format id.


# GET /api/v0/games/sessions/{session_id}
@router.get("/sessions/{session_id}", response_model=SessionStateOut)
async def get_session_state(
    session_id: str, registry: SessionRegistry = Depends(get_registry)
):
    return _state_out(registry.get(session_id))


@router.patch("/sessions/{session_id}/scores", response_model=SessionStateOut)
async def update_scores(
    session_id: str,
    body: ScoreUpdate,
    registry: SessionRegistry = Depends(get_registry),
):
    session = registry.get(session_id)
    for key, value in body.scores.items():
        session.engine.update_score(key, value)
    return _state_out(session)


@router.post("/sessions/{session_id}/save", response_model=ActionOut)
async def save_hole(session_id: str, registry: SessionRegistry = Depends(get_registry)):
    session = registry.get(session_id)
    ok = await session.engine.save_hole()
    return _action_out(session, ok)


@router.post("/sessions/{session_id}/navigate", response_model=ActionOut)
async def navigate_hole(
    session_id: str,
    body: NavigateIn,
    registry: SessionRegistry = Depends(get_registry),
):
    session = registry.get(session_id)
    ok = await session.engine.navigate_hole(body.direction)
    return _action_out(session, ok)


@router.post("/sessions/{session_id}/holes/{hole_number}", response_model=ActionOut)
async def select_hole(
    session_id: str,
    hole_number: int,
    registry: SessionRegistry = Depends(get_registry),
):
    session = registry.get(session_id)
    ok = await session.engine.select_hole(hole_number)
    return _action_out(session, ok)


@router.post("/sessions/{session_id}/summary", response_model=ActionOut)
async def go_to_summary(session_id: str, registry: SessionRegistry = Depends(get_registry)):
    session = registry.get(session_id)
    ok = session.engine.go_to_summary()
    return _action_out(session, ok)


@router.post("/sessions/{session_id}/refetch", response_model=ActionOut)
async def refetch(session_id: str, registry: SessionRegistry = Depends(get_registry)):
    session = registry.get(session_id)
    ok = await session.engine.refetch()
    return _action_out(session, ok)


@router.post("/sessions/{session_id}/roll", response_model=ActionOut)
async def call_roll(
    session_id: str,
    body: RollIn,
    registry: SessionRegistry = Depends(get_registry),
):
    """Umbriago only: halve both teams' points and play the current hole doubled."""

    session = registry.get(session_id)
    engine = session.engine
    if not isinstance(engine.rules, UmbriagoRules) or engine.state.game is None:
        raise http_problem(400, "rolls are only available in umbriago", "roll_not_supported")

    try:
        fields = engine.rules.roll(engine.state.game, body.team, engine.state.current_hole)
    except ValueError as exc:
        raise http_problem(400, str(exc), "roll_rejected") from exc

    try:
        await registry.store.update_game(engine.rules.game_table, engine.game_id, fields)
    except StorageError as exc:
        logger.exception("Failed to record roll for game %s", engine.game_id)
        session.notifier.notify("Error saving roll", str(exc))
        return _action_out(session, False)

    engine.state.game = {**engine.state.game, **fields}
    engine.update_score("multiplier", 2)
    return _action_out(session, True)


@router.delete("/sessions/{session_id}/game", response_model=ActionOut)
async def delete_game(session_id: str, registry: SessionRegistry = Depends(get_registry)):
    session = registry.get(session_id)
    ok = await session.engine.delete_game()
    out = _action_out(session, ok)
    if ok:
        registry.close(session_id)
    return out


@router.delete("/sessions/{session_id}", status_code=204)
async def close_session(session_id: str, registry: SessionRegistry = Depends(get_registry)):
    registry.get(session_id)
    registry.close(session_id)
    return Response(status_code=204)


# POST /api/v0/games/{format}
@router.post("/{format_id}", response_model=GameOut, status_code=201)
async def create_game(
    format_id: str,
    body: GameCreate,
    registry: SessionRegistry = Depends(get_registry),
):
    rules = get_rules(format_id)
    try:
        game = await registry.store.create_game(rules.game_table, body.to_fields())
    except StorageError as exc:
        raise http_problem(422, exc.detail, "invalid_game") from exc
    logger.info("Created %s game %s", rules.format_id, game["id"])
    return GameOut(id=game["id"], format=rules.format_id, game=game)


@router.post("/{format_id}/{game_id}/sessions", response_model=ActionOut, status_code=201)
async def open_session(
    format_id: str,
    game_id: str,
    registry: SessionRegistry = Depends(get_registry),
):
    rules = get_rules(format_id)
    session = registry.open(rules)
    if not await session.engine.load(game_id):
        registry.close(session.id)
        raise http_problem(
            404,
            session.engine.state.load_error or f"game '{game_id}' could not be loaded",
            "game_unavailable",
        )
    return _action_out(session, True)
