"""Shared types and dataclasses for autoheal."""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from typing import Any, Sequence


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ResolutionOutcome:
    """The concrete locator a candidate list resolved to."""

    matched_locator: str
    candidate_index: int

    @property
    def healed(self) -> bool:
        return self.candidate_index > 0


@dataclass(frozen=True)
class FailedSelector:
    """Record of a candidate list where every locator failed."""

    primary: str
    fallbacks: tuple[str, ...]
    error: str
    timestamp: datetime.datetime

    @classmethod
    def from_candidates(cls, candidates: Sequence[str], error: str) -> FailedSelector:
        return cls(
            primary=candidates[0],
            fallbacks=tuple(candidates[1:]),
            error=error,
            timestamp=datetime.datetime.now(datetime.timezone.utc),
        )

    @property
    def attempted(self) -> list[str]:
        return [self.primary, *self.fallbacks]

    def to_dict(self) -> dict[str, Any]:
        return {
            "primary": self.primary,
            "fallbacks": list(self.fallbacks),
            "error": self.error,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, d: dict) -> FailedSelector:
        return cls(
            primary=d["primary"],
            fallbacks=tuple(d.get("fallbacks", [])),
            error=d.get("error", ""),
            timestamp=datetime.datetime.fromisoformat(d["timestamp"]),
        )


# ---------------------------------------------------------------------------
# Statistics / learning snapshot
# ---------------------------------------------------------------------------


def format_success_rate(successful_heals: int, total_attempts: int) -> str:
    """Heals per attempt as a percentage string; ``"0%"`` before any attempt."""
    if total_attempts == 0:
        return "0%"
    return f"{successful_heals / total_attempts * 100:.2f}%"


@dataclass
class HealingStats:
    total_attempts: int = 0
    successful_heals: int = 0
    failed_selectors: list[FailedSelector] = field(default_factory=list)

    @property
    def healing_success_rate(self) -> str:
        return format_success_rate(self.successful_heals, self.total_attempts)

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalAttempts": self.total_attempts,
            "successfulHeals": self.successful_heals,
            "healingSuccessRate": self.healing_success_rate,
        }


@dataclass
class LearningSnapshot:
    """Serializable record of one session's healing results."""

    working_fallbacks: dict[str, str]
    failed_selectors: list[FailedSelector]
    stats: HealingStats
    exported_at: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "workingFallbacks": dict(self.working_fallbacks),
            "failedSelectors": [f.to_dict() for f in self.failed_selectors],
            "stats": self.stats.to_dict(),
            "exportedAt": self.exported_at,
        }

    @classmethod
    def from_dict(cls, d: dict) -> LearningSnapshot:
        failed = [FailedSelector.from_dict(f) for f in d.get("failedSelectors", [])]
        raw_stats = d.get("stats", {})
        stats = HealingStats(
            total_attempts=raw_stats.get("totalAttempts", 0),
            successful_heals=raw_stats.get("successfulHeals", 0),
            failed_selectors=list(failed),
        )
        return cls(
            working_fallbacks=dict(d.get("workingFallbacks", {})),
            failed_selectors=failed,
            stats=stats,
            exported_at=d.get("exportedAt", ""),
        )


# ---------------------------------------------------------------------------
# Wait conditions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SelectorCondition:
    locator: str
    state: str = "visible"  # attached / detached / visible / hidden

    def describe(self) -> str:
        return f"selector {self.locator!r} ({self.state})"


@dataclass(frozen=True)
class PredicateCondition:
    expression: str  # JS function or expression evaluated in the page
    arg: Any = None

    def describe(self) -> str:
        return f"predicate {self.expression!r}"


@dataclass(frozen=True)
class LoadStateCondition:
    state: str = "domcontentloaded"

    def describe(self) -> str:
        return f"load state {self.state!r}"


@dataclass(frozen=True)
class UrlCondition:
    pattern: Any  # str glob, compiled regex, or callable accepted by wait_for_url

    def describe(self) -> str:
        pattern = getattr(self.pattern, "pattern", self.pattern)
        return f"url {pattern!r}"


Condition = SelectorCondition | PredicateCondition | LoadStateCondition | UrlCondition


@dataclass(frozen=True)
class RaceResult:
    """Winner of a ConditionRace."""

    index: int
    condition: Condition
    value: Any = None
