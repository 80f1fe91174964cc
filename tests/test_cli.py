"""Unit tests for the autoheal CLI (patched Playwright, no browser)."""

from __future__ import annotations

import json
import os
import tempfile
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from playwright.async_api import Error as PlaywrightError

from autoheal import cli


def make_playwright(page) -> tuple[MagicMock, AsyncMock]:
    """async_playwright() stand-in yielding a chromium that opens ``page``."""
    browser = AsyncMock()
    browser.new_page = AsyncMock(return_value=page)
    pw = MagicMock()
    pw.chromium.launch = AsyncMock(return_value=browser)
    cm = MagicMock()
    cm.__aenter__ = AsyncMock(return_value=pw)
    cm.__aexit__ = AsyncMock(return_value=False)
    return cm, browser


def make_app_page() -> AsyncMock:
    """A page where every primary locator exists and inputs echo their value."""
    page = AsyncMock()
    values: dict[str, str] = {}

    def fill(selector, value):
        values[selector] = value

    page.fill = AsyncMock(side_effect=fill)
    page.input_value = AsyncMock(side_effect=lambda selector: values.get(selector, ""))
    page.is_visible = AsyncMock(return_value=True)
    page.text_content = AsyncMock(
        return_value="FCRA: Fair Credit Reporting Act consumer report permissible purpose"
    )
    return page


class TestParser:
    def test_demo_defaults(self):
        args = cli.build_parser().parse_args(["demo"])
        assert args.command == "demo"
        assert args.urls is None
        assert args.scenario == "fair_credit"
        assert args.export.endswith("healing-learnings.json")
        assert args.headed is False

    def test_repeated_urls(self):
        args = cli.build_parser().parse_args(["demo", "--url", "http://a", "--url", "http://b"])
        assert args.urls == ["http://a", "http://b"]

    def test_unknown_scenario_rejected(self):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args(["demo", "--scenario", "platinum"])


class TestMain:
    def test_help(self, capsys):
        assert cli.main(["help"]) == 0
        assert "Commands:" in capsys.readouterr().out

    def test_no_command_prints_help(self, capsys):
        assert cli.main([]) == 0
        assert "demo" in capsys.readouterr().out

    def test_demo_dispatch(self):
        with patch.object(cli, "run_demo", new=AsyncMock(return_value=0)) as run_demo, patch.object(
            cli, "configure_logging"
        ):
            assert cli.main(["demo", "--url", "http://a", "--export", "out.json"]) == 0
        run_demo.assert_awaited_once_with(["http://a"], "fair_credit", "out.json", False)

    def test_demo_default_urls(self):
        with patch.object(cli, "run_demo", new=AsyncMock(return_value=0)) as run_demo, patch.object(
            cli, "configure_logging"
        ):
            cli.main(["demo"])
        assert run_demo.await_args.args[0] == [
            "http://localhost:3000",
            "http://localhost:8000",
            "https://example.com",
        ]


class TestRunDemo:
    def setup_method(self):
        self.export = os.path.join(tempfile.mkdtemp(), "demo", "learnings.json")

    async def test_completes_with_exit_zero(self, capsys):
        page = make_app_page()
        cm, browser = make_playwright(page)
        with patch.object(cli, "async_playwright", return_value=cm):
            code = await cli.run_demo(["http://localhost:3000"], "fair_credit", self.export, False)
        assert code == 0
        browser.close.assert_awaited_once()
        with open(self.export, encoding="utf-8") as f:
            data = json.load(f)
        assert data["stats"]["totalAttempts"] == 4
        assert "totalAttempts" in capsys.readouterr().out

    async def test_structural_failure_exits_one_and_still_exports(self):
        page = make_app_page()
        page.goto.side_effect = PlaywrightError("net::ERR_CONNECTION_REFUSED")
        cm, browser = make_playwright(page)
        with patch.object(cli, "async_playwright", return_value=cm):
            code = await cli.run_demo(["http://a", "http://b"], "good_credit", self.export, False)
        assert code == 1
        assert page.goto.await_count == 2
        assert os.path.isfile(self.export)
        browser.close.assert_awaited_once()
