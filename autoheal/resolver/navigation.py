"""NavigationResolver — goto with fallback URLs."""

from __future__ import annotations

from typing import Sequence

import structlog
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page

from autoheal.core.config import HealingConfig
from autoheal.core.errors import NavigationFailure, WaitTimeoutError
from autoheal.core.types import LoadStateCondition
from autoheal.resolver.waiter import ConditionWaiter
from autoheal.stats.events import EventKind
from autoheal.stats.tracker import HealingStatsTracker

logger = structlog.get_logger(__name__)


class NavigationResolver:
    """Tries each URL once, in order, until one reaches DOMContentLoaded."""

    def __init__(
        self,
        page: Page,
        waiter: ConditionWaiter,
        config: HealingConfig | None = None,
        tracker: HealingStatsTracker | None = None,
    ) -> None:
        self._page = page
        self._waiter = waiter
        self._config = config or HealingConfig()
        self._tracker = tracker

    async def goto(
        self,
        urls: Sequence[str],
        *,
        wait_until: str | None = None,
        timeout_ms: float | None = None,
    ) -> str:
        """Return the first URL that loaded. Raises NavigationFailure when all fail."""
        urls = list(urls)
        if not urls:
            raise ValueError("url list must not be empty")

        wait_until = wait_until or self._config.wait_until
        if timeout_ms is None:
            timeout_ms = self._config.navigation_timeout_ms
        last_error = ""

        for index, url in enumerate(urls):
            logger.info("navigation_attempt", url=url, position=index + 1, total=len(urls))
            try:
                await self._page.goto(url, wait_until=wait_until, timeout=timeout_ms)
                await self._waiter.wait(LoadStateCondition("domcontentloaded"), timeout_ms)
            except (WaitTimeoutError, PlaywrightError) as exc:
                last_error = str(exc)
                logger.warning("navigation_failed", url=url, error=last_error)
                continue

            if self._tracker is not None:
                self._tracker.emit(EventKind.NAVIGATION, url=url, fallback=index > 0)
            return url

        raise NavigationFailure(urls, last_error)
