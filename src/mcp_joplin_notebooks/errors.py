"""Domain errors."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Closed set of failure kinds reported by the notebook operations."""

    VALIDATION = "validation_error"
    NOT_FOUND = "not_found"
    CIRCULAR_REFERENCE = "circular_reference"
    BACKEND_UNAVAILABLE = "backend_unavailable"
    BACKEND_ERROR = "backend_error"
    UNEXPECTED_RESPONSE_SHAPE = "unexpected_response_shape"


class NotebookError(Exception):
    """Base class for every failure an operation can report."""

    kind: ErrorKind = ErrorKind.BACKEND_ERROR

    def __init__(
        self,
        message: str,
        *,
        identifier: str | None = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.identifier = identifier
        self.hint = hint


class ValidationError(NotebookError):
    """Malformed or missing input, detected before any network call."""

    kind = ErrorKind.VALIDATION


class NotFound(NotebookError):
    """A referenced note or folder does not exist in the backend."""

    kind = ErrorKind.NOT_FOUND


class ParentNotFound(NotFound):
    """A folder on the ancestor chain of a relocation target is missing."""

    def __init__(self, parent_id: str) -> None:
        super().__init__(
            f'Parent folder with ID "{parent_id}" not found.',
            identifier=parent_id,
            hint="Use list_notebooks to see available folders.",
        )


class CircularReference(NotebookError):
    """A relocation would make a folder its own ancestor."""

    kind = ErrorKind.CIRCULAR_REFERENCE


class BackendUnavailable(NotebookError):
    """The Joplin Data API could not be reached or timed out."""

    kind = ErrorKind.BACKEND_UNAVAILABLE


class BackendError(NotebookError):
    """The Joplin Data API was reached but rejected the request."""

    kind = ErrorKind.BACKEND_ERROR


class UnexpectedResponseShape(NotebookError):
    """A success response whose payload lacks required fields."""

    kind = ErrorKind.UNEXPECTED_RESPONSE_SHAPE


class JoplinApiError(BackendError):
    """Raised when the Joplin Data API returns a non-success response."""

    def __init__(self, *, status_code: int, method: str, url: str, response_text: str) -> None:
        self.status_code = status_code
        self.method = method
        self.url = url
        self.response_text = response_text
        super().__init__(
            f"Joplin API error {status_code} for {method} {_redact_token(url)}: {response_text}"
        )


def _redact_token(url: str) -> str:
    # The API token travels as a query parameter; keep it out of messages and logs.
    head, sep, query = url.partition("?")
    if not sep:
        return url
    parts = [
        "token=***" if part.startswith("token=") else part for part in query.split("&")
    ]
    return f"{head}?{'&'.join(parts)}"
