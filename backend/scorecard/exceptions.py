from fastapi import HTTPException
from pydantic import BaseModel
from typing import Optional


class ProblemDetail(BaseModel):
    """RFC 7807 compliant error response."""

    type: str = "about:blank"
    title: str
    detail: Optional[str] = None
    status: int
    instance: Optional[str] = None
    code: str


class DomainException(Exception):
    """Base class for domain-specific exceptions."""

    def __init__(
        self,
        status_code: int,
        title: str,
        *,
        code: str,
        detail: str | None = None,
        type_: str = "about:blank",
    ) -> None:
        super().__init__(detail or title)
        self.status_code = status_code
        self.title = title
        self.detail = detail
        self.type = type_
        self.code = code


class GameNotFound(DomainException):
    def __init__(self, game_id: str) -> None:
        super().__init__(
            status_code=404,
            title="Game not found",
            detail=f"game '{game_id}' not found",
            code="game_not_found",
        )


class UnknownFormat(DomainException):
    def __init__(self, format_id: str) -> None:
        super().__init__(
            status_code=404,
            title="Unknown game format",
            detail=f"game format '{format_id}' is not supported",
            code="unknown_format",
        )


class SessionNotFound(DomainException):
    def __init__(self, session_id: str) -> None:
        super().__init__(
            status_code=404,
            title="Scoring session not found",
            detail=f"scoring session '{session_id}' not found",
            code="session_not_found",
        )


class InvalidHoleNumber(DomainException):
    def __init__(self, hole_number: int, total_holes: int) -> None:
        super().__init__(
            status_code=400,
            title="Invalid hole number",
            detail=f"hole {hole_number} is outside 1..{total_holes}",
            code="invalid_hole_number",
        )


class StorageError(Exception):
    """Raised by the storage layer when a read or write fails."""

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


def http_problem(
    status_code: int,
    detail: str,
    code: str,
    *,
    headers: Optional[dict[str, str]] = None,
) -> HTTPException:
    """Create an HTTPException with an attached problem code."""

    exc = HTTPException(status_code=status_code, detail=detail, headers=headers)
    setattr(exc, "code", code)
    return exc
