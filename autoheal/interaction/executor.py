"""InteractionExecutor — resolve, act, verify, retry."""

from __future__ import annotations

import re
from typing import Any, Sequence

import structlog
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page

from autoheal.core.config import HealingConfig
from autoheal.core.errors import (
    ElementDisappearedError,
    TextMismatchError,
    ValueMismatchError,
)
from autoheal.core.types import PredicateCondition, SelectorCondition
from autoheal.resolver.selector import SelectorResolver
from autoheal.resolver.strategies import to_selector
from autoheal.resolver.waiter import ConditionWaiter
from autoheal.stats.events import EventKind
from autoheal.stats.tracker import HealingStatsTracker

logger = structlog.get_logger(__name__)

# Enabled and laid out (offsetParent is null for display:none ancestors)
_JS_ACTIONABLE = "(el) => !!el && !el.disabled && el.offsetParent !== null"


def text_variations(expected: str) -> list[str]:
    return [
        expected,
        expected.lower(),
        expected.upper(),
        expected.strip(),
        re.sub(r"\s+", " ", expected),
    ]


class InteractionExecutor:
    """
    Performs click/fill on a resolved candidate list.

    Driver errors on a single attempt are retried up to ``max_retries`` with a
    fixed ``retry_delay_ms`` pause. An element that stops being visible between
    attempts ends the call at once with :class:`ElementDisappearedError`.
    """

    def __init__(
        self,
        page: Page,
        resolver: SelectorResolver,
        waiter: ConditionWaiter,
        tracker: HealingStatsTracker,
        config: HealingConfig | None = None,
    ) -> None:
        self._page = page
        self._resolver = resolver
        self._waiter = waiter
        self._tracker = tracker
        self._config = config or HealingConfig()

    async def click(
        self,
        candidates: Sequence[str],
        *,
        max_retries: int | None = None,
        **click_options: Any,
    ) -> str:
        """Click the first candidate that resolves. Returns the matched locator."""
        max_retries = self._retry_bound(max_retries)
        outcome = await self._resolver.resolve(candidates)
        locator = outcome.matched_locator
        selector = to_selector(locator)

        await self._wait_actionable(locator)

        for attempt in range(1, max_retries + 1):
            try:
                await self._page.click(selector, **click_options)
                return locator
            except PlaywrightError as exc:
                if attempt == max_retries:
                    raise
                await self._before_retry("click_retry", locator, attempt, exc)
                if not await self._page.is_visible(selector):
                    raise ElementDisappearedError(locator, attempt) from exc

    async def fill(
        self,
        candidates: Sequence[str],
        value: str,
        *,
        max_retries: int | None = None,
    ) -> str:
        """
        Clear, write and read back ``value``. Returns the matched locator.

        A read-back that differs from ``value`` is retried; after
        ``max_retries`` mismatches :class:`ValueMismatchError` carries both
        the expected and the last observed value.
        """
        max_retries = self._retry_bound(max_retries)
        outcome = await self._resolver.resolve(candidates)
        locator = outcome.matched_locator
        selector = to_selector(locator)

        await self._page.fill(selector, "")

        actual: str | None = None
        for attempt in range(1, max_retries + 1):
            try:
                await self._page.fill(selector, value)
                actual = await self._page.input_value(selector)
            except PlaywrightError as exc:
                if attempt == max_retries:
                    raise
                await self._before_retry("fill_retry", locator, attempt, exc)
                if not await self._page.is_visible(selector):
                    raise ElementDisappearedError(locator, attempt) from exc
                continue

            if actual == value:
                return locator

            if attempt < max_retries:
                await self._before_retry(
                    "fill_retry",
                    locator,
                    attempt,
                    f'expected "{value}", got "{actual}"',
                )

        raise ValueMismatchError(locator, expected=value, actual=actual)

    async def expect_text(self, candidates: Sequence[str], expected: str) -> str:
        """Assert the element's text contains ``expected`` (case/whitespace tolerant)."""
        outcome = await self._resolver.resolve(candidates)
        locator = outcome.matched_locator
        actual = await self._page.text_content(to_selector(locator))
        if actual is not None:
            for variation in text_variations(expected):
                if variation in actual:
                    return locator
        raise TextMismatchError(locator, expected=expected, actual=actual)

    def _retry_bound(self, max_retries: int | None) -> int:
        if max_retries is None:
            return self._config.max_retries
        if max_retries < 1:
            raise ValueError(f"max_retries must be >= 1, got {max_retries}")
        return max_retries

    async def _wait_actionable(self, locator: str) -> None:
        timeout = self._config.selector_timeout_ms
        handle = await self._waiter.wait(SelectorCondition(locator, state="attached"), timeout)
        await self._waiter.wait(PredicateCondition(_JS_ACTIONABLE, arg=handle), timeout)

    async def _before_retry(
        self, event: str, locator: str, attempt: int, error: Exception | str
    ) -> None:
        logger.warning(event, locator=locator, attempt=attempt, error=str(error))
        self._tracker.emit(EventKind.RETRY, action=event, locator=locator, attempt=attempt)
        await self._page.wait_for_timeout(self._config.retry_delay_ms)
