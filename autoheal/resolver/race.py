"""ConditionRace — wait for whichever of several end-states shows up first."""

from __future__ import annotations

import asyncio
import time
from typing import Sequence

from playwright.async_api import Error as PlaywrightError

from autoheal.core.config import HealingConfig
from autoheal.core.errors import WaitTimeoutError
from autoheal.core.types import Condition, RaceResult
from autoheal.resolver.waiter import ConditionWaiter, coerce_condition


class ConditionRace:
    """
    Runs one wait per condition on the current event loop against a shared deadline.

    The first wait to succeed wins. The losers are cancelled at the asyncio
    level; Playwright may still finish its own side of those waits.
    """

    def __init__(self, waiter: ConditionWaiter, config: HealingConfig | None = None) -> None:
        self._waiter = waiter
        self._config = config or HealingConfig()

    async def wait_for_any(
        self,
        conditions: Sequence[Condition | str],
        timeout_ms: float | None = None,
    ) -> RaceResult:
        resolved = [coerce_condition(c) for c in conditions]
        if not resolved:
            raise ValueError("at least one condition is required")
        if timeout_ms is None:
            timeout_ms = self._config.race_timeout_ms

        t0 = time.monotonic()
        tasks = {
            asyncio.ensure_future(self._waiter.wait(cond, timeout_ms)): index
            for index, cond in enumerate(resolved)
        }
        pending = set(tasks)
        errors: list[str] = []

        try:
            while pending:
                remaining = timeout_ms / 1000 - (time.monotonic() - t0)
                if remaining <= 0:
                    break
                done, pending = await asyncio.wait(
                    pending, timeout=remaining, return_when=asyncio.FIRST_COMPLETED
                )
                if not done:
                    break
                finished = sorted(done, key=tasks.__getitem__)
                failures = [t.exception() for t in finished]
                for task, exc in zip(finished, failures):
                    if exc is None:
                        index = tasks[task]
                        return RaceResult(
                            index=index, condition=resolved[index], value=task.result()
                        )
                for exc in failures:
                    if not isinstance(exc, (WaitTimeoutError, PlaywrightError)):
                        raise exc
                    errors.append(str(exc))
        finally:
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

        elapsed_ms = (time.monotonic() - t0) * 1000
        description = "any of [" + ", ".join(c.describe() for c in resolved) + "]"
        raise WaitTimeoutError(description, elapsed_ms, errors[-1] if errors else "")
