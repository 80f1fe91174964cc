"""Reload exported learnings and use them to reorder candidate lists."""

from __future__ import annotations

import json
import os
from typing import Mapping, Sequence

from autoheal.core.types import LearningSnapshot


def load_learnings(path: str | os.PathLike) -> LearningSnapshot | None:
    """Read a snapshot written by ``export_to``. Returns None if missing or unreadable."""
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (FileNotFoundError, UnicodeDecodeError, json.JSONDecodeError):
        return None
    if not isinstance(data, dict):
        return None
    try:
        return LearningSnapshot.from_dict(data)
    except (AttributeError, KeyError, TypeError, ValueError):
        return None


def seed_candidates(
    candidates: Sequence[str], working_fallbacks: Mapping[str, str]
) -> list[str]:
    """
    Promote the fallback that worked last time to index 1.

    The primary stays at index 0 so a heal is still reported as a heal. A
    learned locator missing from ``candidates`` is inserted.
    """
    ordered = list(candidates)
    if not ordered:
        return ordered
    learned = working_fallbacks.get(ordered[0])
    if learned is None or learned == ordered[0]:
        return ordered
    rest = [c for c in ordered[1:] if c != learned]
    return [ordered[0], learned, *rest]
