"""Domain errors, each carrying the HTTP status it maps to."""

from typing import List, TYPE_CHECKING

from litestar.exceptions import ClientException, NotFoundException, ValidationException

if TYPE_CHECKING:
    from feedback_collector.validation import FieldError


class FieldValidationError(ValidationException):
    """One or more request fields failed validation (400)."""
    
    def __init__(self, errors: List["FieldError"]) -> None:
        self.errors = list(errors)
        super().__init__(
            detail="Validation failed",
            extra=[error.to_dict() for error in self.errors],
        )


class InvalidFeedbackTypeError(ClientException):
    """Submitted type names no active feedback type (400)."""
    
    def __init__(self) -> None:
        super().__init__(detail="Invalid or inactive feedback type")


class ConflictError(ClientException):
    """A unique name is already taken (400)."""


class NotFoundOrForbidden(NotFoundException):
    """Resource is missing or owned by someone else; the two are not distinguished (404)."""
