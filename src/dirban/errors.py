"""Error taxonomy for dirban.

Every error carries the HTTP status the web layer answers with, so the
API, the client and the CLI all speak the same vocabulary.
"""


class DirbanError(Exception):
    """Base class for all dirban errors."""

    status = 500

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class NotFound(DirbanError):
    """A board, card, description or file does not exist."""

    status = 404


class ValidationError(DirbanError):
    """Input is missing required fields or has invalid values."""

    status = 400


class PathTraversal(DirbanError):
    """A resolved path escapes the root it must stay inside."""

    status = 403


class Conflict(DirbanError):
    """The entity being created already exists."""

    status = 409


class ParseError(DirbanError):
    """A JSON or YAML document on disk could not be parsed."""


class WriteFailure(DirbanError):
    """Writing to or removing from disk failed."""


ERRORS_BY_STATUS = {
    NotFound.status: NotFound,
    ValidationError.status: ValidationError,
    PathTraversal.status: PathTraversal,
    Conflict.status: Conflict,
}


def error_for_status(status: int, message: str) -> DirbanError:
    """Build the error matching an HTTP status code."""
    cls = ERRORS_BY_STATUS.get(status, DirbanError)
    err = cls(message)
    if cls is DirbanError:
        err.status = status
    return err
