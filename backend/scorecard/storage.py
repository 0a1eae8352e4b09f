"""Row-oriented storage for games, holes and course reference data.

Rows cross this boundary as plain dictionaries keyed by column name, so the
scoring engine never touches ORM instances. Every SQLAlchemy failure is
re-raised as :class:`StorageError`.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Mapping

from sqlalchemy import delete, inspect as sa_inspect, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from .cache import TTLCache, course_holes_cache
from .db import Base, get_session_factory
from .db_errors import describe_error, is_missing_table_error
from .exceptions import StorageError
from .models import CourseHole

logger = logging.getLogger(__name__)

COURSE_HOLE_FIELDS = (
    "hole_number",
    "par",
    "stroke_index",
    "white_distance",
    "yellow_distance",
    "blue_distance",
    "red_distance",
    "black_distance",
    "gold_distance",
    "orange_distance",
    "silver_distance",
)


def _model_for_table(table_name: str):
    for mapper in Base.registry.mappers:
        if getattr(mapper.class_, "__tablename__", None) == table_name:
            return mapper.class_
    raise StorageError(f"unknown table '{table_name}'")


def _column_keys(model) -> set[str]:
    return {attr.key for attr in sa_inspect(model).column_attrs}


def _as_dict(obj) -> dict[str, Any]:
    return {attr.key: getattr(obj, attr.key) for attr in sa_inspect(obj).mapper.column_attrs}


def _checked_fields(model, fields: Mapping[str, Any]) -> dict[str, Any]:
    unknown = set(fields) - _column_keys(model)
    if unknown:
        raise StorageError(
            f"unknown column(s) for {model.__tablename__}: {', '.join(sorted(unknown))}"
        )
    return dict(fields)


class GameStore:
    """Generic access to a format's game resource and holes resource."""

    def __init__(self, session_factory: sessionmaker | None = None) -> None:
        self._session_factory = session_factory

    def _sessions(self) -> sessionmaker:
        return self._session_factory or get_session_factory()

    async def fetch_game(self, game_table: str, game_id: str) -> dict[str, Any] | None:
        model = _model_for_table(game_table)
        try:
            async with self._sessions()() as session:
                game = await session.get(model, game_id)
                return _as_dict(game) if game is not None else None
        except SQLAlchemyError as exc:
            raise StorageError(describe_error(exc)) from exc

    async def fetch_holes(self, holes_table: str, game_id: str) -> list[dict[str, Any]]:
        model = _model_for_table(holes_table)
        try:
            async with self._sessions()() as session:
                rows = (
                    await session.execute(
                        select(model)
                        .where(model.game_id == game_id)
                        .order_by(model.hole_number)
                    )
                ).scalars().all()
                return [_as_dict(row) for row in rows]
        except SQLAlchemyError as exc:
            raise StorageError(describe_error(exc)) from exc

    async def insert_hole(self, holes_table: str, record: Mapping[str, Any]) -> dict[str, Any]:
        model = _model_for_table(holes_table)
        fields = _checked_fields(model, record)
        fields.setdefault("id", uuid.uuid4().hex)
        try:
            async with self._sessions()() as session:
                row = model(**fields)
                session.add(row)
                await session.commit()
                await session.refresh(row)
                return _as_dict(row)
        except SQLAlchemyError as exc:
            raise StorageError(describe_error(exc)) from exc

    async def update_hole(
        self, holes_table: str, hole_id: str, record: Mapping[str, Any]
    ) -> None:
        model = _model_for_table(holes_table)
        fields = _checked_fields(model, record)
        fields.pop("id", None)
        await self._update_by_id(model, hole_id, fields)

    async def update_game(
        self, game_table: str, game_id: str, fields: Mapping[str, Any]
    ) -> None:
        model = _model_for_table(game_table)
        values = _checked_fields(model, fields)
        values.pop("id", None)
        await self._update_by_id(model, game_id, values)

    async def _update_by_id(self, model, row_id: str, values: dict[str, Any]) -> None:
        if not values:
            return
        try:
            async with self._sessions()() as session:
                result = await session.execute(
                    update(model).where(model.id == row_id).values(**values)
                )
                await session.commit()
        except SQLAlchemyError as exc:
            raise StorageError(describe_error(exc)) from exc
        if result.rowcount == 0:
            raise StorageError(f"{model.__tablename__} row '{row_id}' not found")

    async def delete_game(self, game_table: str, holes_table: str, game_id: str) -> None:
        """Delete a game's hole rows and the game row in a single transaction."""

        game_model = _model_for_table(game_table)
        hole_model = _model_for_table(holes_table)
        try:
            async with self._sessions()() as session:
                async with session.begin():
                    await session.execute(
                        delete(hole_model).where(hole_model.game_id == game_id)
                    )
                    await session.execute(
                        delete(game_model).where(game_model.id == game_id)
                    )
        except SQLAlchemyError as exc:
            raise StorageError(describe_error(exc)) from exc

    async def create_game(self, game_table: str, fields: Mapping[str, Any]) -> dict[str, Any]:
        model = _model_for_table(game_table)
        values = _checked_fields(model, fields)
        values.setdefault("id", uuid.uuid4().hex)
        try:
            async with self._sessions()() as session:
                game = model(**values)
                session.add(game)
                await session.commit()
                await session.refresh(game)
                return _as_dict(game)
        except SQLAlchemyError as exc:
            raise StorageError(describe_error(exc)) from exc


class CourseHoleProvider:
    """Read-only lookup of par, stroke index and tee distances per hole."""

    def __init__(
        self,
        session_factory: sessionmaker | None = None,
        cache: TTLCache | None = course_holes_cache,
    ) -> None:
        self._session_factory = session_factory
        self._cache = cache

    async def fetch_course_holes(self, course_id: str | None) -> list[dict[str, Any]]:
        if not course_id:
            return []
        if self._cache is None:
            return await self._load(course_id)
        return await self._cache.get_or_load(course_id, lambda: self._load(course_id))

    async def _load(self, course_id: str) -> list[dict[str, Any]]:
        session_factory = self._session_factory or get_session_factory()
        try:
            async with session_factory() as session:
                rows = (
                    await session.execute(
                        select(CourseHole)
                        .where(CourseHole.course_id == course_id)
                        .order_by(CourseHole.hole_number)
                    )
                ).scalars().all()
        except SQLAlchemyError as exc:
            if is_missing_table_error(exc, "course_hole"):
                logger.warning("course_hole table unavailable; using default holes")
                return []
            raise StorageError(describe_error(exc)) from exc
        return [{field: getattr(row, field) for field in COURSE_HOLE_FIELDS} for row in rows]
