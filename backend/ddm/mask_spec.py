"""Mask kinds and their mapping onto the backend's configure-field request.

The console offers four kinds of mask; the backend expects a masking type
plus a short-form masking value:

    DEFAULT  -> FULL,    "D:"
    NULL     -> FULL,    "N:"
    LITERAL  -> FULL,    "L:<value>"
    PARTIAL  -> PARTIAL, "P:<start>,<maskChar>,<count>"
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum


class MaskKind(str, Enum):
    DEFAULT = "DEFAULT"
    NULL = "NULL"
    LITERAL = "LITERAL"
    PARTIAL = "PARTIAL"


class MaskingType(str, Enum):
    FULL = "FULL"
    PARTIAL = "PARTIAL"
    CONDITIONAL = "CONDITIONAL"


MASK_KIND_LABELS: dict[MaskKind, str] = {
    MaskKind.DEFAULT: "Default (D:)",
    MaskKind.NULL: "Null (N:)",
    MaskKind.LITERAL: "Literal (L:value)",
    MaskKind.PARTIAL: "Partial (P:start,maskChar,count)",
}

PARTIAL_FIELD_TYPE = "CHARACTER"

_PARTIAL_FORMAT = re.compile(r"\d+,[^,],\d+")

LITERAL_REQUIRED = "Literal mask requires a value (e.g., MASKED)"
PARTIAL_REQUIRED = "Partial mask requires a format (e.g., 0,X,4)"
PARTIAL_FORMAT = "Partial mask must be start,maskChar,count (e.g., 0,X,4)"
PARTIAL_FIELD_TYPE_ONLY = "Partial masks are only supported for CHARACTER fields"


@dataclass(frozen=True)
class MaskingRequestSpec:
    masking_type: MaskingType
    masking_value: str


def mask_kind_error(kind: MaskKind, value: str | None = None) -> str | None:
    """Return why *value* is unusable for *kind*, or ``None``."""
    if kind is MaskKind.LITERAL:
        if not value or not value.strip():
            return LITERAL_REQUIRED
    elif kind is MaskKind.PARTIAL:
        if not value or not value.strip():
            return PARTIAL_REQUIRED
        if not _PARTIAL_FORMAT.fullmatch(value):
            return PARTIAL_FORMAT
    return None


def field_type_error(kind: MaskKind, field_type: str | None) -> str | None:
    """Partial masks apply to CHARACTER fields only; unknown types pass."""
    if kind is not MaskKind.PARTIAL or not field_type:
        return None
    if field_type.upper() != PARTIAL_FIELD_TYPE:
        return PARTIAL_FIELD_TYPE_ONLY
    return None


def build_masking_spec(kind: MaskKind, value: str | None = None) -> MaskingRequestSpec:
    """Map a mask kind and its user value onto the backend's request pair.

    Raises ``ValueError`` with the user-facing message when *value* does
    not suit *kind*.
    """
    error = mask_kind_error(kind, value)
    if error:
        raise ValueError(error)

    if kind is MaskKind.DEFAULT:
        return MaskingRequestSpec(MaskingType.FULL, "D:")
    if kind is MaskKind.NULL:
        return MaskingRequestSpec(MaskingType.FULL, "N:")
    if kind is MaskKind.LITERAL:
        return MaskingRequestSpec(MaskingType.FULL, f"L:{value}")
    return MaskingRequestSpec(MaskingType.PARTIAL, f"P:{value}")
