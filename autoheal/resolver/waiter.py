"""ConditionWaiter — the single timeout-bounded wait every component builds on."""

from __future__ import annotations

import time
from typing import Any

from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from autoheal.core.errors import WaitTimeoutError
from autoheal.core.types import (
    Condition,
    LoadStateCondition,
    PredicateCondition,
    SelectorCondition,
    UrlCondition,
)
from autoheal.resolver.strategies import to_selector


def coerce_condition(condition: Condition | str) -> Condition:
    """Bare strings are selector-presence conditions."""
    if isinstance(condition, str):
        return SelectorCondition(condition)
    return condition


class ConditionWaiter:
    """
    Waits for one condition using Playwright's native waiting primitives.

    A driver timeout surfaces as :class:`WaitTimeoutError`; any other driver
    error propagates unchanged.
    """

    def __init__(self, page: Page) -> None:
        self._page = page

    async def wait(self, condition: Condition | str, timeout_ms: float) -> Any:
        condition = coerce_condition(condition)
        t0 = time.monotonic()
        try:
            return await self._dispatch(condition, timeout_ms)
        except PlaywrightTimeoutError as exc:
            elapsed_ms = (time.monotonic() - t0) * 1000
            raise WaitTimeoutError(condition.describe(), elapsed_ms, str(exc)) from exc

    async def _dispatch(self, condition: Condition, timeout_ms: float) -> Any:
        page = self._page
        if isinstance(condition, SelectorCondition):
            return await page.wait_for_selector(
                to_selector(condition.locator),
                state=condition.state,
                timeout=timeout_ms,
            )
        if isinstance(condition, PredicateCondition):
            return await page.wait_for_function(
                condition.expression, arg=condition.arg, timeout=timeout_ms
            )
        if isinstance(condition, LoadStateCondition):
            return await page.wait_for_load_state(condition.state, timeout=timeout_ms)
        if isinstance(condition, UrlCondition):
            return await page.wait_for_url(condition.pattern, timeout=timeout_ms)
        raise TypeError(f"Unsupported wait condition: {condition!r}")
