"""Reusable value rules for semantic fields."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Iterable


@dataclass(frozen=True)
class RangeValidator:
    """Accepts integers (or integer strings) within ``[minimum, maximum]``."""

    minimum: int
    maximum: int

    def __call__(self, value: Any) -> bool:
        try:
            number = int(str(value).strip())
        except ValueError:
            return False
        return self.minimum <= number <= self.maximum

    def describe(self) -> str:
        return f"Must be between {self.minimum}-{self.maximum}."


@dataclass(frozen=True)
class GroupedDigitsNormalizer:
    """
    Regroups a digit string: ``123456789`` → ``123-45-6789`` with the defaults.

    Non-digits are stripped first. If the digit count does not match the
    groups, the bare digits are returned unchanged.
    """

    groups: tuple[int, ...] = (3, 2, 4)
    separator: str = "-"

    def __call__(self, value: Any) -> str:
        digits = re.sub(r"\D", "", str(value))
        if len(digits) != sum(self.groups):
            return digits
        parts = []
        start = 0
        for size in self.groups:
            parts.append(digits[start:start + size])
            start += size
        return self.separator.join(parts)


def missing_terms(text: str, terms: Iterable[str]) -> list[str]:
    """Terms that do not occur in ``text``, compared case-insensitively."""
    lowered = text.lower()
    return [t for t in terms if t.lower() not in lowered]
