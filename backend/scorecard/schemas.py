from typing import Any, Dict, List, Literal, Optional, Union
from datetime import datetime
from pydantic import BaseModel, Field, StrictBool, StrictInt, StrictStr, field_validator, ConfigDict

# Score inputs are flat: strokes, flags, player ids or blanks.
ScoreValue = Union[StrictBool, StrictInt, StrictStr, None]

# Fields the engine owns; a setup request cannot preset them.
RESERVED_GAME_FIELDS = frozenset({"id", "is_finished", "created_at"})


class GameCreate(BaseModel):
    course_id: Optional[str] = None
    course_name: Optional[str] = Field(default=None, max_length=200)
    holes_played: Literal[9, 18] = 18
    date_played: Optional[datetime] = None
    user_id: Optional[str] = None
    settings: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(extra="forbid")

    @field_validator("course_id", "course_name", mode="before")
    @classmethod
    def _blank_to_none(cls, value):
        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value

    @field_validator("settings")
    @classmethod
    def _validate_settings(cls, value: Dict[str, Any]) -> Dict[str, Any]:
        reserved = RESERVED_GAME_FIELDS.intersection(value)
        if reserved:
            raise ValueError(f"settings cannot set {', '.join(sorted(reserved))}")
        return value

    def to_fields(self) -> Dict[str, Any]:
        fields = dict(self.settings)
        fields.update(
            course_id=self.course_id,
            course_name=self.course_name,
            holes_played=self.holes_played,
            date_played=self.date_played,
            user_id=self.user_id,
        )
        return fields


class GameOut(BaseModel):
    id: str
    format: str
    game: Dict[str, Any]


class ScoreUpdate(BaseModel):
    scores: Dict[str, ScoreValue] = Field(..., min_length=1)

    model_config = ConfigDict(extra="forbid")


class NavigateIn(BaseModel):
    direction: Literal["prev", "next"]


class RollIn(BaseModel):
    team: Literal["A", "B"]


class NotificationOut(BaseModel):
    title: str
    description: Optional[str] = None


class SessionStateOut(BaseModel):
    session_id: str
    format: str
    game_id: Optional[str] = None
    game: Optional[Dict[str, Any]] = None
    holes: List[Dict[str, Any]] = Field(default_factory=list)
    current_hole: int
    total_holes: int
    saved_holes: int
    par: int
    stroke_index: Optional[int] = None
    scores: Dict[str, Any] = Field(default_factory=dict)
    loading: bool = False
    saving: bool = False
    load_error: Optional[str] = None
    finished_route: Optional[str] = None


class ActionOut(BaseModel):
    ok: bool
    navigate_to: Optional[str] = None
    notifications: List[NotificationOut] = Field(default_factory=list)
    state: SessionStateOut
