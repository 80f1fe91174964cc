"""Unit tests for SelectorResolver (AsyncMock page, real tracker)."""

from __future__ import annotations

import datetime
from unittest.mock import AsyncMock, MagicMock, call

import pytest
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from autoheal.core.config import HealingConfig
from autoheal.core.errors import ResolutionFailure
from autoheal.core.types import ResolutionOutcome
from autoheal.resolver.selector import SelectorResolver
from autoheal.resolver.waiter import ConditionWaiter
from autoheal.stats.events import EventKind
from autoheal.stats.tracker import HealingStatsTracker


def make_page(present=()) -> AsyncMock:
    """Page where only selectors in ``present`` ever appear."""
    page = AsyncMock()

    def wait_for_selector(selector, state="visible", timeout=None):
        if selector in present:
            return MagicMock(name=f"handle:{selector}")
        raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded waiting for {selector}")

    page.wait_for_selector = AsyncMock(side_effect=wait_for_selector)
    return page


class TestSelectorResolver:
    def setup_method(self):
        self.tracker = HealingStatsTracker()
        self.config = HealingConfig()

    def _resolver(self, page) -> SelectorResolver:
        return SelectorResolver(ConditionWaiter(page), self.tracker, self.config)

    # ------------------------------------------------------------------ primary

    async def test_primary_match_is_not_a_heal(self):
        resolver = self._resolver(make_page(present={"#score"}))
        outcome = await resolver.resolve(["#score", ".credit-score-value"])
        assert outcome == ResolutionOutcome("#score", 0)
        assert outcome.healed is False
        assert self.tracker.stats.successful_heals == 0
        assert self.tracker.working_fallbacks == {}

    # ------------------------------------------------------------------ fallback

    async def test_fallback_heals(self):
        # primary "#score" absent, ".credit-score-value" present
        resolver = self._resolver(make_page(present={".credit-score-value"}))
        outcome = await resolver.resolve(["#score", ".credit-score-value"])
        assert outcome.matched_locator == ".credit-score-value"
        assert outcome.candidate_index == 1
        assert outcome.healed is True
        assert self.tracker.stats.successful_heals == 1
        assert self.tracker.working_fallbacks == {"#score": ".credit-score-value"}

    async def test_fallback_at_index_k(self):
        candidates = ["#a", "#b", "#c", "#d"]
        resolver = self._resolver(make_page(present={"#c", "#d"}))
        before = self.tracker.stats.successful_heals
        outcome = await resolver.resolve(candidates)
        assert outcome.matched_locator == candidates[2]
        assert outcome.candidate_index == 2
        assert self.tracker.stats.successful_heals == before + 1

    async def test_primary_and_fallback_timeouts(self):
        page = make_page(present={"#c"})
        resolver = self._resolver(page)
        await resolver.resolve(["#a", "#b", "#c"])
        assert page.wait_for_selector.await_args_list == [
            call("#a", state="visible", timeout=5000),
            call("#b", state="visible", timeout=3000),
            call("#c", state="visible", timeout=3000),
        ]

    async def test_explicit_timeouts_override_config(self):
        page = make_page(present={"#b"})
        resolver = self._resolver(page)
        await resolver.resolve(["#a", "#b"], primary_timeout_ms=100, fallback_timeout_ms=10)
        timeouts = [c.kwargs["timeout"] for c in page.wait_for_selector.await_args_list]
        assert timeouts == [100, 10]

    async def test_stops_at_first_match(self):
        page = make_page(present={"#a", "#b"})
        resolver = self._resolver(page)
        await resolver.resolve(["#a", "#b"])
        assert page.wait_for_selector.await_count == 1

    async def test_malformed_candidate_is_skipped(self):
        page = make_page(present={"#ok"})
        original = page.wait_for_selector.side_effect

        def wait_for_selector(selector, state="visible", timeout=None):
            if selector == "#bad[":
                raise PlaywrightError("Unexpected token")
            return original(selector, state=state, timeout=timeout)

        page.wait_for_selector.side_effect = wait_for_selector
        outcome = await self._resolver(page).resolve(["#bad[", "#ok"])
        assert outcome.matched_locator == "#ok"

    async def test_repeat_heal_overwrites_mapping(self):
        await self._resolver(make_page(present={"#b"})).resolve(["#a", "#b", "#c"])
        await self._resolver(make_page(present={"#c"})).resolve(["#a", "#b", "#c"])
        assert self.tracker.working_fallbacks == {"#a": "#c"}
        assert self.tracker.stats.successful_heals == 2

    # ------------------------------------------------------------------ exhaustion

    async def test_all_absent_raises_resolution_failure(self):
        resolver = self._resolver(make_page())
        with pytest.raises(ResolutionFailure) as info:
            await resolver.resolve(["#x", ".y", "[data-test=z]"])
        err = info.value
        assert len(err.attempted) == 3
        assert err.attempted == ["#x", ".y", "[data-test=z]"]
        assert "[data-test=z]" in err.last_error
        assert "#x" in str(err)

    async def test_exhaustion_appends_one_failed_selector(self):
        resolver = self._resolver(make_page())
        start = datetime.datetime.now(datetime.timezone.utc)
        with pytest.raises(ResolutionFailure):
            await resolver.resolve(["#x", ".y"])
        failed = self.tracker.stats.failed_selectors
        assert len(failed) == 1
        assert failed[0].primary == "#x"
        assert failed[0].fallbacks == (".y",)
        assert failed[0].timestamp >= start

    # ------------------------------------------------------------------ attempt counting

    async def test_each_call_counts_one_attempt(self):
        await self._resolver(make_page(present={"#a"})).resolve(["#a"])
        await self._resolver(make_page(present={"#b"})).resolve(["#a", "#b"])
        with pytest.raises(ResolutionFailure):
            await self._resolver(make_page()).resolve(["#a", "#b", "#c"])
        assert self.tracker.stats.total_attempts == 3

    async def test_empty_candidate_list_is_rejected_before_counting(self):
        with pytest.raises(ValueError):
            await self._resolver(make_page()).resolve([])
        assert self.tracker.stats.total_attempts == 0

    # ------------------------------------------------------------------ events

    async def test_events_published(self):
        events = []
        self.tracker.subscribe(events.append)
        await self._resolver(make_page(present={"#b"})).resolve(["#a", "#b"])
        with pytest.raises(ResolutionFailure):
            await self._resolver(make_page()).resolve(["#z"])
        kinds = [e.kind for e in events]
        assert kinds == [
            EventKind.ATTEMPT,
            EventKind.HEAL,
            EventKind.ATTEMPT,
            EventKind.FAILURE,
        ]
        assert events[1].data == {"primary": "#a", "matched": "#b"}
        assert events[3].data["primary"] == "#z"
