"""Best-effort extraction of mask and auth tag from a config summary.

The DDM backend reports a field's masking configuration only as free text
meant for humans (``"mask: D:, auth tag: #DDM_See_PII"`` and variants).
The rules below are tried in order and the first one that matches wins.
Nothing here ever rejects backend data: an unrecognised summary simply
yields an empty ``ParsedConfigSummary``.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Sequence

logger = logging.getLogger(__name__)

PLACEHOLDER = "\u2013"


# ---------------------------------------------------------------------------
# Result
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ParsedConfigSummary:
    """Mask value and auth tag recovered from a summary; either may be absent."""

    mask_value: str | None = None
    auth_tag: str | None = None

    @property
    def is_empty(self) -> bool:
        return self.mask_value is None and self.auth_tag is None

    @property
    def display_mask(self) -> str:
        return self.mask_value or PLACEHOLDER

    @property
    def display_auth_tag(self) -> str:
        return self.auth_tag or PLACEHOLDER


EMPTY_SUMMARY = ParsedConfigSummary()


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

# Longer summaries are cut before matching; real ones are a line or two.
MAX_SUMMARY_LENGTH = 4096

_MASK_LABEL = re.compile(r"mask\s*[:=]", re.IGNORECASE)
_AUTH_TAG_LABEL = re.compile(r"auth\s*tag\s*[:=]", re.IGNORECASE)
_MASK_VALUE_LABEL = re.compile(r"mask\s*value\s*[:=]", re.IGNORECASE)

# A labeled value runs to the next comma, semicolon or newline. A complete
# partial recipe is taken whole since it carries commas of its own.
_DELIMITER = re.compile(r"[,;\n]")
_PARTIAL_RECIPE = re.compile(r"\s*(P:\d+,[^,;\n],\d+)")

# Short forms D:, N:, L:<literal>, P:<start>,<char>,<count>; not part of a
# longer word such as "ID:". A literal ends on a word character, so
# sentence punctuation after it is dropped.
_MASK_TOKEN = re.compile(r"(?<![A-Za-z0-9_])(P:\d+,[^,],\d+|L:[^,;\s]*\w|[DN]:)")
_AUTH_TAG_TOKEN = re.compile(r"#DDM_See_[A-Za-z0-9_.\-#$%&]+", re.IGNORECASE | re.ASCII)


def _labeled_value(text: str, start: int, end: int) -> str:
    """Raw value after a label at *start*, stopping at a delimiter or *end*."""
    recipe = _PARTIAL_RECIPE.match(text, start, end)
    if recipe is not None:
        return recipe.group(1)
    delimiter = _DELIMITER.search(text, start, end)
    stop = delimiter.start() if delimiter else end
    return text[start:stop]


def _line_end(text: str, start: int) -> int:
    end = text.find("\n", start)
    return len(text) if end == -1 else end


# ---------------------------------------------------------------------------
# Extraction rules
# ---------------------------------------------------------------------------


class ExtractionRule(ABC):
    """One heuristic; returns ``None`` when it does not apply to *text*."""

    name: str = "base"

    @abstractmethod
    def try_match(self, text: str) -> ParsedConfigSummary | None:
        ...


class LabeledPairRule(ExtractionRule):
    """A value after *first_label*, then one after *second_label* on the same line.

    Each label pattern is scanned once and the matches are paired in
    order of position.
    """

    def __init__(
        self,
        name: str,
        first_label: re.Pattern[str],
        second_label: re.Pattern[str],
        mask_first: bool = True,
    ) -> None:
        self.name = name
        self.first_label = first_label
        self.second_label = second_label
        self.mask_first = mask_first

    def try_match(self, text: str) -> ParsedConfigSummary | None:
        seconds = list(self.second_label.finditer(text))
        index = 0
        for first in self.first_label.finditer(text):
            while index < len(seconds) and seconds[index].start() <= first.end():
                index += 1
            if index == len(seconds):
                return None
            second = seconds[index]
            if text.find("\n", first.end(), second.start()) != -1:
                continue

            first_value = _labeled_value(text, first.end(), second.start())
            second_value = _labeled_value(
                text, second.end(), _line_end(text, second.end())
            )
            if not first_value or not second_value:
                continue

            if self.mask_first:
                return ParsedConfigSummary(
                    mask_value=_clean(first_value), auth_tag=_clean(second_value)
                )
            return ParsedConfigSummary(
                mask_value=_clean(second_value), auth_tag=_clean(first_value)
            )
        return None

    def __repr__(self) -> str:
        return f"LabeledPairRule({self.name!r})"


class TokenScanRule(ExtractionRule):
    """Look for a mask short form and an auth tag anywhere, independently."""

    name = "token_scan"

    def try_match(self, text: str) -> ParsedConfigSummary | None:
        mask = _MASK_TOKEN.search(text)
        tag = _AUTH_TAG_TOKEN.search(text)
        if mask is None and tag is None:
            return None
        return ParsedConfigSummary(
            mask_value=mask.group(1) if mask else None,
            auth_tag=tag.group(0) if tag else None,
        )

    def __repr__(self) -> str:
        return "TokenScanRule()"


DEFAULT_RULES: tuple[ExtractionRule, ...] = (
    LabeledPairRule("mask_then_auth_tag", _MASK_LABEL, _AUTH_TAG_LABEL),
    LabeledPairRule("auth_tag_then_mask", _AUTH_TAG_LABEL, _MASK_LABEL, mask_first=False),
    LabeledPairRule("mask_value_then_auth_tag", _MASK_VALUE_LABEL, _AUTH_TAG_LABEL),
    TokenScanRule(),
)


def parse_config_summary(
    text: str | None,
    rules: Sequence[ExtractionRule] = DEFAULT_RULES,
) -> ParsedConfigSummary:
    """Apply *rules* in order and return the first match, or an empty result."""
    if not isinstance(text, str) or not text:
        return EMPTY_SUMMARY
    text = text[:MAX_SUMMARY_LENGTH]

    for rule in rules:
        parsed = rule.try_match(text)
        if parsed is not None:
            logger.debug("Config summary matched rule %s", rule.name)
            return parsed
    return EMPTY_SUMMARY
