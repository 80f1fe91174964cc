"""SelectorResolver — turns a candidate list into one concrete locator."""

from __future__ import annotations

from typing import Sequence

import structlog
from playwright.async_api import Error as PlaywrightError

from autoheal.core.config import HealingConfig
from autoheal.core.errors import ResolutionFailure, WaitTimeoutError
from autoheal.core.types import FailedSelector, ResolutionOutcome, SelectorCondition
from autoheal.resolver.waiter import ConditionWaiter
from autoheal.stats.tracker import HealingStatsTracker

logger = structlog.get_logger(__name__)


class SelectorResolver:
    """
    Tries candidates in list order until one appears.

    Index 0 is the primary and gets ``selector_timeout_ms``; every fallback
    gets the shorter ``fallback_timeout_ms``. Each ``resolve`` call counts as
    exactly one attempt in the tracker, whatever the outcome.
    """

    def __init__(
        self,
        waiter: ConditionWaiter,
        tracker: HealingStatsTracker,
        config: HealingConfig | None = None,
    ) -> None:
        self._waiter = waiter
        self._tracker = tracker
        self._config = config or HealingConfig()

    async def resolve(
        self,
        candidates: Sequence[str],
        primary_timeout_ms: float | None = None,
        fallback_timeout_ms: float | None = None,
    ) -> ResolutionOutcome:
        candidates = list(candidates)
        if not candidates:
            raise ValueError("candidate list must not be empty")

        if primary_timeout_ms is None:
            primary_timeout_ms = self._config.selector_timeout_ms
        if fallback_timeout_ms is None:
            fallback_timeout_ms = self._config.fallback_timeout_ms

        self._tracker.record_attempt(candidates)
        primary = candidates[0]
        last_error = ""

        for index, locator in enumerate(candidates):
            timeout = primary_timeout_ms if index == 0 else fallback_timeout_ms
            if self._config.debug:
                logger.debug(
                    "selector_attempt",
                    locator=locator,
                    position=index + 1,
                    total=len(candidates),
                    timeout_ms=timeout,
                )
            try:
                await self._waiter.wait(SelectorCondition(locator), timeout)
            except (WaitTimeoutError, PlaywrightError) as exc:
                last_error = str(exc)
                if self._config.debug:
                    logger.debug("selector_failed", locator=locator, error=last_error)
                continue

            outcome = ResolutionOutcome(matched_locator=locator, candidate_index=index)
            if outcome.healed:
                self._tracker.record_heal(primary, locator)
                logger.info("selector_healed", original=primary, healed_to=locator)
            return outcome

        record = FailedSelector.from_candidates(candidates, last_error)
        self._tracker.record_failure(record)
        logger.error(
            "all_selectors_failed",
            original=primary,
            selector_count=len(candidates),
            error=last_error,
        )
        raise ResolutionFailure(record)
