"""Authorization tag grammar.

A DDM authorization tag must:
  - begin with ``#DDM_See_`` (case-insensitive)
  - be at most 64 characters long
  - have at least one character after the prefix
  - contain no spaces
  - use only A-Z, a-z, 0-9 and the symbols ``_ . - # $ % &``

Validation never raises: every input, including ``None`` and non-strings,
resolves to exactly one outcome so live form validation cannot crash.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any

AUTH_TAG_PREFIX = "#DDM_See_"
AUTH_TAG_MAX_LENGTH = 64

# fullmatch: ``$`` alone would accept a trailing newline
_ALLOWED_CHARS = re.compile(r"[A-Za-z0-9_.\-#$%&]+")


class TagViolation(Enum):
    """Violation kinds, declared in the order they are checked."""

    REQUIRED = "tag is required"
    TOO_LONG = f"must be at most {AUTH_TAG_MAX_LENGTH} characters"
    CONTAINS_SPACE = "cannot contain spaces"
    MISSING_PREFIX = "must start with the required prefix (case-insensitive)"
    EMPTY_SUFFIX = "must include characters after the required prefix"
    INVALID_CHARACTERS = "allowed characters: A-Z, a-z, 0-9, and _ . - # $ % &"

    @property
    def message(self) -> str:
        return self.value


@dataclass(frozen=True)
class ValidationResult:
    """``Valid`` when *violation* is ``None``, otherwise ``Invalid(violation)``."""

    violation: TagViolation | None = None

    @property
    def is_valid(self) -> bool:
        return self.violation is None

    @property
    def error(self) -> str | None:
        return self.violation.message if self.violation is not None else None


VALID = ValidationResult()


def _has_prefix(tag: str) -> bool:
    return tag[: len(AUTH_TAG_PREFIX)].lower() == AUTH_TAG_PREFIX.lower()


def validate_authorization_tag(tag: str | None) -> ValidationResult:
    """Classify *tag*, reporting only the first rule it breaks."""
    if not isinstance(tag, str) or not tag:
        return ValidationResult(TagViolation.REQUIRED)
    if len(tag) > AUTH_TAG_MAX_LENGTH:
        return ValidationResult(TagViolation.TOO_LONG)
    if " " in tag:
        return ValidationResult(TagViolation.CONTAINS_SPACE)
    if not _has_prefix(tag):
        return ValidationResult(TagViolation.MISSING_PREFIX)
    if len(tag) <= len(AUTH_TAG_PREFIX):
        return ValidationResult(TagViolation.EMPTY_SUFFIX)
    if not _ALLOWED_CHARS.fullmatch(tag):
        return ValidationResult(TagViolation.INVALID_CHARACTERS)
    return VALID


def is_valid_authorization_tag(tag: str | None) -> bool:
    return validate_authorization_tag(tag).is_valid


def authorization_tag_validation_error(tag: str | None) -> str | None:
    """Return the message for the first violated rule, or ``None``."""
    return validate_authorization_tag(tag).error


def coerce_form_value(value: Any) -> str:
    """Turn an absent or non-string form value into ``""``."""
    return value if isinstance(value, str) else ""
