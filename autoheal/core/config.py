"""Engine configuration."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass

_DEFAULT_LEARNINGS_PATH = "./test-results/healing-learnings.json"

_TIMEOUT_FIELDS = (
    "retry_delay_ms",
    "selector_timeout_ms",
    "fallback_timeout_ms",
    "navigation_timeout_ms",
    "race_timeout_ms",
)


@dataclass(frozen=True)
class HealingConfig:
    """
    Timeouts and retry bounds shared by every component of one session.

    Fallback candidates get ``fallback_timeout_ms`` rather than
    ``selector_timeout_ms``. Retries in click/fill use a fixed
    ``retry_delay_ms`` pause; there is no backoff.
    """

    max_retries: int = 3
    retry_delay_ms: int = 1000
    selector_timeout_ms: int = 5000
    fallback_timeout_ms: int = 3000
    navigation_timeout_ms: int = 30000
    race_timeout_ms: int = 30000
    wait_until: str = "domcontentloaded"
    debug: bool = False
    learnings_path: str = _DEFAULT_LEARNINGS_PATH

    def __post_init__(self) -> None:
        if self.max_retries < 1:
            raise ValueError(f"max_retries must be >= 1, got {self.max_retries}")
        for name in _TIMEOUT_FIELDS:
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0, got {getattr(self, name)}")

    def with_overrides(self, **overrides) -> HealingConfig:
        return dataclasses.replace(self, **overrides)
