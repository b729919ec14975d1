"""
Failure classification for the SwapMatch API.

Every failure the service knows how to explain is raised as a `KnownError`
subclass. The application installs a single exception handler that turns
these into a JSON body of the form::

    {"failure": {"kind": ..., "message": ..., "detail": ..., "suggestion": ...}}

Anything else propagates as an unclassified server error.

Response types:
- NotFound: A referenced user, album, card or match does not exist
- ServiceUnavailable: The storage layer could not answer
- InvalidInput: The request is well-formed but violates a constraint
"""

from enum import Enum

from pydantic import BaseModel, Field


class FailureKind(str, Enum):
    """Classification of failure types."""

    # Input validation failures
    INVALID_INPUT = "invalid_input"

    # Resource failures
    NOT_FOUND = "not_found"

    # Service failures
    SERVICE_UNAVAILABLE = "service_unavailable"

    # Unknown
    UNKNOWN = "unknown"


class FailureDetail(BaseModel):
    """Detailed information about a failure."""

    kind: FailureKind = Field(
        ...,
        description="Classification of the failure",
    )
    message: str = Field(
        ...,
        description="User-appropriate explanation of what went wrong",
    )
    detail: str | None = Field(
        default=None,
        description="Additional technical detail (optional)",
    )
    suggestion: str | None = Field(
        default=None,
        description="Suggested action for the user",
    )


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the system knows exactly what went wrong.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
        status_code: int = 400,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.suggestion = suggestion
        self.status_code = status_code
        super().__init__(message)

    def to_detail(self) -> FailureDetail:
        """Convert to a serializable FailureDetail."""
        return FailureDetail(
            kind=self.kind,
            message=self.message,
            detail=self.detail,
            suggestion=self.suggestion,
        )


class NotFoundError(KnownError):
    """A referenced resource does not exist."""

    def __init__(self, resource: str, identifier: object):
        self.resource = resource
        self.identifier = identifier
        super().__init__(
            kind=FailureKind.NOT_FOUND,
            message=f"{resource} {identifier} not found",
            status_code=404,
        )


class RequestorNotFoundError(NotFoundError):
    """
    The user asking for matches does not exist.

    Only raised when strict requestor lookup is enabled. By default an
    unknown requestor simply has no matches.
    """

    def __init__(self, user_id: int):
        self.user_id = user_id
        super().__init__("User", user_id)


class DirectoryUnavailableError(KnownError):
    """
    The user directory could not answer.

    Raised in place of storage errors so callers can never mistake an outage
    for an empty match list.
    """

    def __init__(self, detail: str | None = None):
        super().__init__(
            kind=FailureKind.SERVICE_UNAVAILABLE,
            message="User directory is temporarily unavailable.",
            detail=detail,
            suggestion="Please try again in a few moments.",
            status_code=503,
        )
