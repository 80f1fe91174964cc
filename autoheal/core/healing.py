"""AutoHealing — one page, one session, every component wired together."""

from __future__ import annotations

import contextlib
import os
import re
from pathlib import Path
from typing import Any, AsyncIterator, Sequence

import structlog
from playwright.async_api import Page

from autoheal.core.config import HealingConfig
from autoheal.core.types import (
    Condition,
    HealingStats,
    LearningSnapshot,
    RaceResult,
    ResolutionOutcome,
)
from autoheal.interaction.executor import InteractionExecutor
from autoheal.resolver.navigation import NavigationResolver
from autoheal.resolver.race import ConditionRace
from autoheal.resolver.selector import SelectorResolver
from autoheal.resolver.waiter import ConditionWaiter
from autoheal.stats.learnings import load_learnings, seed_candidates
from autoheal.stats.tracker import HealingStatsTracker

logger = structlog.get_logger(__name__)


class AutoHealing:
    """
    Sits between a test and a Playwright page.

    Usage:
        healing = AutoHealing(page)
        await healing.goto(["http://localhost:3000", "http://localhost:8000"])
        await healing.fill(["#score", ".credit-score-value"], "750")
        await healing.click(["#calculate", "button:has-text('Calculate')"])
        healing.export_learnings()

    Each instance owns its own tracker; pass ``tracker`` explicitly to share
    one across several facades within the same session.
    """

    def __init__(
        self,
        page: Page,
        config: HealingConfig | None = None,
        *,
        tracker: HealingStatsTracker | None = None,
        learnings: dict[str, str] | None = None,
    ) -> None:
        self.page = page
        self.config = config or HealingConfig()
        self.tracker = tracker or HealingStatsTracker()
        # primary → fallback that worked in an earlier session
        self._learned: dict[str, str] = dict(learnings or {})

        self._waiter = ConditionWaiter(page)
        self._resolver = SelectorResolver(self._waiter, self.tracker, self.config)
        self._navigation = NavigationResolver(page, self._waiter, self.config, self.tracker)
        self._race = ConditionRace(self._waiter, self.config)
        self._executor = InteractionExecutor(
            page, self._resolver, self._waiter, self.tracker, self.config
        )

    # ------------------------------------------------------------------
    # Resolution and interaction
    # ------------------------------------------------------------------

    def candidates(self, candidates: Sequence[str]) -> list[str]:
        """Apply learned fallbacks from a previous session to ``candidates``."""
        return seed_candidates(candidates, self._learned)

    async def find_element(
        self,
        candidates: Sequence[str],
        primary_timeout_ms: float | None = None,
        fallback_timeout_ms: float | None = None,
    ) -> ResolutionOutcome:
        return await self._resolver.resolve(
            self.candidates(candidates), primary_timeout_ms, fallback_timeout_ms
        )

    async def click(self, candidates: Sequence[str], **options: Any) -> str:
        return await self._executor.click(self.candidates(candidates), **options)

    async def fill(self, candidates: Sequence[str], value: str, **options: Any) -> str:
        return await self._executor.fill(self.candidates(candidates), value, **options)

    async def expect_text(self, candidates: Sequence[str], expected: str) -> str:
        return await self._executor.expect_text(self.candidates(candidates), expected)

    async def goto(self, urls: Sequence[str], **options: Any) -> str:
        return await self._navigation.goto(urls, **options)

    async def wait_for_any(
        self, conditions: Sequence[Condition | str], timeout_ms: float | None = None
    ) -> RaceResult:
        return await self._race.wait_for_any(conditions, timeout_ms)

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------

    @property
    def stats(self) -> HealingStats:
        return self.tracker.stats

    def snapshot(self) -> LearningSnapshot:
        return self.tracker.snapshot()

    def export_learnings(self, path: str | os.PathLike | None = None) -> LearningSnapshot:
        return self.tracker.export_to(path or self.config.learnings_path)


def _safe_filename(name: str) -> str:
    return re.sub(r"[^A-Za-z0-9_.-]+", "_", name).strip("_") or "session"


@contextlib.asynccontextmanager
async def healing_session(
    page: Page,
    name: str,
    *,
    results_dir: str | os.PathLike = "test-results",
    config: HealingConfig | None = None,
    reuse_learnings: bool = True,
    healing_cls: type[AutoHealing] = AutoHealing,
) -> AsyncIterator[AutoHealing]:
    """
    Wrap one test: yields a fresh facade and always exports its learnings.

    Learnings go to ``{results_dir}/{name}-learnings.json``. With
    ``reuse_learnings`` the previous export at that path seeds candidate order.
    """
    path = Path(results_dir) / f"{_safe_filename(name)}-learnings.json"
    learned: dict[str, str] = {}
    if reuse_learnings:
        previous = load_learnings(path)
        if previous is not None:
            learned = previous.working_fallbacks

    healing = healing_cls(page, config, learnings=learned)
    body_failed = False
    try:
        yield healing
    except BaseException:
        body_failed = True
        raise
    finally:
        try:
            healing.export_learnings(path)
        except OSError as exc:
            # the test's own failure takes precedence
            if not body_failed:
                raise
            logger.error("learnings_export_failed", path=str(path), error=str(exc))
        stats = healing.stats
        if stats.successful_heals > 0:
            logger.info(
                "session_healed",
                session=name,
                successful_heals=stats.successful_heals,
                healing_success_rate=stats.healing_success_rate,
            )
