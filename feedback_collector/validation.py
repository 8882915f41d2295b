"""Per-endpoint validator chains.

A validator is a callable taking the raw payload and returning a
``FieldError`` or ``None``. Chains are evaluated in full so the client gets
every failing field at once.
"""

import re
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Sequence

from email_validator import EmailNotValidError, validate_email

from feedback_collector.exceptions import FieldValidationError

HEX_COLOR_RE = re.compile(r"^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str
    
    def to_dict(self) -> dict:
        return {"field": self.field, "message": self.message}


Payload = Mapping[str, Any]
Validator = Callable[[Payload], Optional[FieldError]]


def _text(payload: Payload, field: str) -> str:
    value = payload.get(field)
    if value is None:
        return ""
    if not isinstance(value, str):
        value = str(value)
    return value.strip()


def required(field: str, message: str) -> Validator:
    def check(payload: Payload) -> Optional[FieldError]:
        if not _text(payload, field):
            return FieldError(field, message)
        return None
    return check


def min_length(field: str, length: int, message: str) -> Validator:
    def check(payload: Payload) -> Optional[FieldError]:
        value = payload.get(field)
        if not isinstance(value, str) or len(value.strip()) < length:
            return FieldError(field, message)
        return None
    return check


def optional_min_length(field: str, length: int, message: str) -> Validator:
    """Blank or missing passes; anything else must be at least ``length`` chars."""
    def check(payload: Payload) -> Optional[FieldError]:
        value = _text(payload, field)
        if value and len(value) < length:
            return FieldError(field, message)
        return None
    return check


def email(field: str, message: str) -> Validator:
    def check(payload: Payload) -> Optional[FieldError]:
        value = _text(payload, field)
        if not value:
            return FieldError(field, message)
        try:
            validate_email(value, check_deliverability=False, test_environment=True)
        except EmailNotValidError:
            return FieldError(field, message)
        return None
    return check


def optional_email(field: str, message: str) -> Validator:
    strict = email(field, message)
    
    def check(payload: Payload) -> Optional[FieldError]:
        if not _text(payload, field):
            return None
        return strict(payload)
    return check


def int_range(field: str, low: int, high: int, message: str) -> Validator:
    def check(payload: Payload) -> Optional[FieldError]:
        value = payload.get(field)
        # bool is an int subclass; reject it explicitly
        if isinstance(value, bool):
            return FieldError(field, message)
        if isinstance(value, str) and re.fullmatch(r"\s*-?\d+\s*", value):
            value = int(value)
        if not isinstance(value, int) or not low <= value <= high:
            return FieldError(field, message)
        return None
    return check


def optional_hex_color(field: str, message: str) -> Validator:
    def check(payload: Payload) -> Optional[FieldError]:
        value = _text(payload, field)
        if value and not HEX_COLOR_RE.match(value):
            return FieldError(field, message)
        return None
    return check


def one_of_present(fields: Sequence[str], message: str) -> Validator:
    """At least one of ``fields`` is non-blank; the error names the first."""
    def check(payload: Payload) -> Optional[FieldError]:
        if any(_text(payload, f) for f in fields):
            return None
        return FieldError(fields[0], message)
    return check


def run_chain(payload: Any, chain: Sequence[Validator]) -> None:
    """Evaluate every validator and raise with all failures, in chain order."""
    if not isinstance(payload, Mapping):
        raise FieldValidationError([FieldError("body", "Request body must be a JSON object")])
    errors = [error for error in (validator(payload) for validator in chain) if error]
    if errors:
        raise FieldValidationError(errors)


# --- Chains ---

FEEDBACK_SUBMISSION: Sequence[Validator] = (
    optional_min_length("name", 2, "Name must be at least 2 characters if provided"),
    optional_email("email", "Please provide a valid email if provided"),
    required("type", "Feedback type is required"),
    min_length("message", 10, "Message must be at least 10 characters"),
    int_range("rating", 1, 5, "Rating must be between 1 and 5"),
)

FEEDBACK_TYPE_FORM: Sequence[Validator] = (
    min_length("name", 2, "Name must be at least 2 characters"),
    optional_hex_color("color", "Color must be a valid hex color"),
)

REGISTRATION: Sequence[Validator] = (
    min_length("username", 3, "Username must be at least 3 characters"),
    email("email", "Please provide a valid email"),
    min_length("password", 6, "Password must be at least 6 characters"),
)

LOGIN: Sequence[Validator] = (
    one_of_present(("email", "username"), "Email or username is required"),
    required("password", "Password is required"),
)
