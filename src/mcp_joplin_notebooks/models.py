"""Records read from the Joplin Data API and results returned by operations."""

from __future__ import annotations

from enum import Enum
from typing import Any, TypeVar

from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from .errors import ErrorKind, NotebookError, UnexpectedResponseShape

RecordT = TypeVar("RecordT", bound=BaseModel)


class Kind(str, Enum):
    FOLDER = "folder"
    NOTE = "note"

    @property
    def path(self) -> str:
        return f"/{self.value}s"


class FolderRecord(BaseModel):
    id: str
    title: str = ""
    parent_id: str = ""
    created_time: int | None = None
    updated_time: int | None = None

    @field_validator("title", "parent_id", mode="before")
    @classmethod
    def _none_as_empty(cls, value: str | None) -> str:
        return value or ""


class NoteRecord(BaseModel):
    id: str
    title: str = ""
    body: str | None = None
    parent_id: str = ""
    is_todo: bool = False
    todo_completed: int = 0
    todo_due: int = 0
    created_time: int | None = None
    updated_time: int | None = None

    @field_validator("title", "parent_id", mode="before")
    @classmethod
    def _none_as_empty(cls, value: str | None) -> str:
        return value or ""

    @field_validator("todo_completed", "todo_due", mode="before")
    @classmethod
    def _none_as_zero(cls, value: int | None) -> int:
        return value or 0


class FolderNode(BaseModel):
    id: str
    title: str | None = None
    children: list[FolderNode] = Field(default_factory=list)


class OperationError(BaseModel):
    """A failure reported by an operation instead of being raised."""

    kind: ErrorKind
    message: str
    identifier: str | None = None
    hint: str | None = None

    @classmethod
    def from_exception(cls, exc: NotebookError) -> OperationError:
        return cls(kind=exc.kind, message=exc.message, identifier=exc.identifier, hint=exc.hint)


class Outcome(BaseModel):
    """Result of one operation: rendered text on success, an error otherwise."""

    text: str | None = None
    error: OperationError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, text: str) -> Outcome:
        return cls(text=text)

    @classmethod
    def failure(cls, exc: NotebookError) -> Outcome:
        return cls(error=OperationError.from_exception(exc))


def parse_record(model: type[RecordT], raw: Any, action: str) -> RecordT:
    """Validate one item returned by Joplin.

    A payload that is not an object, has no id, or carries fields of the wrong
    type is reported as :class:`UnexpectedResponseShape`.
    """
    message = f"Unexpected response format from Joplin API when {action}."
    if not isinstance(raw, dict) or not raw.get("id"):
        raise UnexpectedResponseShape(message)
    try:
        return model.model_validate(raw)
    except PydanticValidationError as exc:
        raise UnexpectedResponseShape(message, identifier=str(raw["id"])) from exc
