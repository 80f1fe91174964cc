"""Command-line entry point: ``autoheal demo`` / ``autoheal help``."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys

from playwright.async_api import async_playwright

from autoheal.core.config import HealingConfig
from autoheal.core.errors import AutoHealError
from autoheal.domain.credit import CreditRepairHealing, generate_test_data, scenario_names
from autoheal.log import configure_logging

_DEFAULT_URLS = [
    "http://localhost:3000",
    "http://localhost:8000",
    "https://example.com",
]

_HELP = """\
autoheal: self-healing locators for Playwright tests

Commands:
  demo     Run the auto-healing demo against a local app
  help     Show this help message

Usage in tests:
  async with healing_session(page, "checkout") as healing:
      await healing.click(["#button", ".button", '[data-test="btn"]'])
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="autoheal", description="Self-healing Playwright utilities")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command")

    demo = subparsers.add_parser("demo", help="Run the auto-healing demo")
    demo.add_argument(
        "--url",
        action="append",
        dest="urls",
        metavar="URL",
        help="Target URL, repeat for fallbacks (default: localhost:3000, localhost:8000, example.com)",
    )
    demo.add_argument(
        "--scenario",
        default="fair_credit",
        choices=scenario_names(),
        help="Test data scenario",
    )
    demo.add_argument(
        "--export",
        default=HealingConfig().learnings_path,
        metavar="PATH",
        help="Where to write the learnings JSON",
    )
    demo.add_argument("--headed", action="store_true", help="Show the browser window")

    subparsers.add_parser("help", help="Show usage")
    return parser


async def run_demo(urls: list[str], scenario: str, export_path: str, headed: bool) -> int:
    """Navigate, run the credit calculation flow, print stats. Returns an exit code."""
    config = HealingConfig(debug=True, learnings_path=export_path)
    exit_code = 0

    async with async_playwright() as pw:
        browser = await pw.chromium.launch(headless=not headed)
        try:
            page = await browser.new_page()
            healing = CreditRepairHealing(page, config)
            try:
                url = await healing.goto(urls)
                print(f"  Navigated to {url}")
                await healing.perform_credit_calculation(generate_test_data(scenario))
                print("  Credit calculation flow completed")
            except AutoHealError as exc:
                print(f"  Demo failed: {exc}", file=sys.stderr)
                exit_code = 1
            finally:
                snapshot = healing.export_learnings()
                print("  Healing statistics:")
                print(json.dumps(snapshot.stats.to_dict(), indent=2))
                print(f"  Learnings exported → {export_path}")
        finally:
            await browser.close()

    return exit_code


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command != "demo":
        print(_HELP)
        return 0

    configure_logging(args.verbose)
    return asyncio.run(
        run_demo(args.urls or list(_DEFAULT_URLS), args.scenario, args.export, args.headed)
    )


if __name__ == "__main__":
    sys.exit(main())
