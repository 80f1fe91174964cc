"""
Live browser integration tests for autoheal.

Run with:
    pytest tests/test_integration_live.py -m integration -v -s

Excluded from the default run because they need a Playwright-controlled
Chromium browser. Pages are served with ``page.set_content`` so no network
is required.
"""

from __future__ import annotations

import asyncio
import json
import os
import tempfile
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from playwright.async_api import Browser, Page, async_playwright

from autoheal import AutoHealing, HealingConfig, healing_session
from autoheal.core.errors import ElementDisappearedError, ResolutionFailure
from autoheal.domain.credit import CreditRepairHealing, generate_test_data

pytestmark = pytest.mark.integration

_FAST = HealingConfig(
    selector_timeout_ms=500,
    fallback_timeout_ms=300,
    retry_delay_ms=50,
    race_timeout_ms=3000,
)

_CREDIT_FORM = """
<html><body>
  <input id="credit-score" type="number">
  <input id="ssn" type="text">
  <div class="fcra-disclosure">
    Under the Fair Credit Reporting Act (FCRA) a consumer report is only
    obtained for a permissible purpose.
  </div>
  <button data-testid="calculate"
          onclick="setTimeout(() => {
            const r = document.createElement('div');
            r.id = 'results';
            r.textContent = 'Score band: fair';
            document.body.appendChild(r);
          }, 100)">Calculate</button>
</body></html>
"""


@pytest_asyncio.fixture
async def browser() -> AsyncGenerator[Browser, None]:
    async with async_playwright() as pw:
        b = await pw.chromium.launch(headless=True, args=["--no-sandbox"])
        yield b
        await b.close()


@pytest_asyncio.fixture
async def page(browser: Browser) -> AsyncGenerator[Page, None]:
    ctx = await browser.new_context()
    pg = await ctx.new_page()
    yield pg
    await ctx.close()


async def test_click_heals_to_aria_label(page: Page):
    await page.set_content(
        """<button aria-label="Calculate" onclick="document.title='clicked'">Go</button>"""
    )
    healing = AutoHealing(page, _FAST)
    matched = await healing.click(["#calculate", "label=Calculate"])
    assert matched == "label=Calculate"
    assert await page.title() == "clicked"
    assert healing.snapshot().working_fallbacks == {"#calculate": "label=Calculate"}


async def test_role_locator_resolves(page: Page):
    await page.set_content("<button>Submit</button>")
    outcome = await AutoHealing(page, _FAST).find_element(["#submit", "role=button::Submit"])
    assert outcome.candidate_index == 1


async def test_fill_verifies_value(page: Page):
    await page.set_content('<input class="credit-score-value">')
    healing = AutoHealing(page, _FAST)
    await healing.fill(["#score", ".credit-score-value"], "750")
    assert await page.input_value(".credit-score-value") == "750"


async def test_unresolvable_candidates(page: Page):
    await page.set_content("<p>empty</p>")
    healing = AutoHealing(page, _FAST)
    with pytest.raises(ResolutionFailure) as info:
        await healing.find_element(["#a", ".b"])
    assert info.value.attempted == ["#a", ".b"]
    assert healing.stats.failed_selectors[0].primary == "#a"


async def test_click_on_removed_element(page: Page):
    # the overlay intercepts clicks until the button is removed
    await page.set_content(
        """
        <button id="go" style="position:absolute;top:0;left:0">Go</button>
        <div id="overlay" style="position:absolute;top:0;left:0;width:400px;height:400px"></div>
        <script>
          setTimeout(() => document.getElementById('go').remove(), 150);
        </script>
        """
    )
    healing = AutoHealing(page, _FAST.with_overrides(retry_delay_ms=300))
    with pytest.raises(ElementDisappearedError):
        await healing.click(["#go"], timeout=100)


async def test_wait_for_any_picks_first_ready(page: Page):
    await page.set_content(
        """<script>setTimeout(() => {
             const d = document.createElement('div'); d.className = 'error';
             document.body.appendChild(d);
           }, 50)</script>"""
    )
    result = await AutoHealing(page, _FAST).wait_for_any(["#results", ".error"])
    assert result.index == 1


async def test_credit_flow_and_session_export(page: Page):
    results_dir = tempfile.mkdtemp()
    await page.set_content(_CREDIT_FORM)
    async with healing_session(
        page, "credit", results_dir=results_dir, config=_FAST, healing_cls=CreditRepairHealing
    ) as healing:
        await healing.perform_credit_calculation(generate_test_data("fair_credit"))
        assert await page.input_value("#ssn") == "987-65-4321"

    with open(os.path.join(results_dir, "credit-learnings.json"), encoding="utf-8") as f:
        data = json.load(f)
    assert data["workingFallbacks"]["[data-testid=\"credit-score\"]"] == "#credit-score"
    assert data["stats"]["successfulHeals"] >= 1


async def test_concurrent_facades_keep_separate_stats(browser: Browser):
    pages = [await browser.new_page() for _ in range(2)]
    for pg in pages:
        await pg.set_content('<button class="b">x</button>')
    facades = [AutoHealing(pg, _FAST) for pg in pages]
    await asyncio.gather(
        facades[0].find_element(["#a", ".b"]),
        facades[1].find_element([".b"]),
    )
    assert facades[0].stats.successful_heals == 1
    assert facades[1].stats.successful_heals == 0
