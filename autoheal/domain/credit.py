"""Credit-repair fields, flows and test data."""

from __future__ import annotations

from dataclasses import dataclass, field

import structlog

from autoheal.core.errors import InteractionFailure, ValueMismatchError
from autoheal.core.types import PredicateCondition, RaceResult
from autoheal.domain.registry import DomainHealing, SemanticField
from autoheal.domain.validators import (
    GroupedDigitsNormalizer,
    RangeValidator,
    missing_terms,
)
from autoheal.resolver.strategies import to_selector

logger = structlog.get_logger(__name__)

CREDIT_SCORE_MIN = 300
CREDIT_SCORE_MAX = 850

FCRA_REQUIRED_TERMS = (
    "FCRA",
    "Fair Credit Reporting Act",
    "consumer report",
    "permissible purpose",
)

CREDIT_REPAIR_FIELDS: tuple[SemanticField, ...] = (
    SemanticField(
        name="credit_score",
        candidates=(
            '[data-testid="credit-score"]',
            "#credit-score",
            ".credit-score-value",
            '[aria-label*="credit score"]',
            'input[name*="score"]',
        ),
        validator=RangeValidator(CREDIT_SCORE_MIN, CREDIT_SCORE_MAX),
    ),
    SemanticField(
        name="ssn",
        candidates=(
            '[data-testid="ssn"]',
            "#ssn",
            'input[name="ssn"]',
            'input[placeholder*="SSN"]',
            ".ssn-input",
        ),
        normalizer=GroupedDigitsNormalizer(),
    ),
    SemanticField(
        name="fcra_disclosure",
        candidates=(
            '[data-testid="fcra-disclosure"]',
            ".fcra-disclosure",
            "#fcra-notice",
            '[aria-label*="FCRA"]',
            ".compliance-notice",
        ),
    ),
    SemanticField(
        name="calculate_button",
        candidates=(
            '[data-testid="calculate"]',
            "#calculate-btn",
            ".calculate",
            'button:has-text("Calculate")',
            'input[type="submit"]',
        ),
    ),
    SemanticField(
        name="results",
        candidates=(
            "#results",
            ".calculation-results",
            '[data-testid="results"]',
        ),
    ),
)

_NO_LOADING_INDICATOR = "() => document.querySelector('.loading') === null"


@dataclass
class CreditProfile:
    credit_score: int
    ssn: str | None = None
    income: int = 0
    debts: list[dict] = field(default_factory=list)


_SCENARIOS: dict[str, CreditProfile] = {
    "good_credit": CreditProfile(credit_score=750, ssn="123-45-6789", income=75000),
    "fair_credit": CreditProfile(
        credit_score=650,
        ssn="987-65-4321",
        income=50000,
        debts=[{"type": "credit_card", "amount": 5000}],
    ),
    "poor_credit": CreditProfile(
        credit_score=550,
        ssn="456-78-9123",
        income=35000,
        debts=[
            {"type": "credit_card", "amount": 8000},
            {"type": "auto_loan", "amount": 15000},
        ],
    ),
    "thin_file": CreditProfile(credit_score=620, ssn="789-12-3456", income=40000),
}


def scenario_names() -> list[str]:
    return list(_SCENARIOS)


def generate_test_data(scenario: str = "good_credit") -> CreditProfile:
    """Fresh profile for ``scenario``; unknown names get ``good_credit``."""
    base = _SCENARIOS.get(scenario, _SCENARIOS["good_credit"])
    return CreditProfile(
        credit_score=base.credit_score,
        ssn=base.ssn,
        income=base.income,
        debts=[dict(d) for d in base.debts],
    )


class CreditRepairHealing(DomainHealing):
    """Credit score / SSN / FCRA disclosure flows on top of the field registry."""

    default_fields = CREDIT_REPAIR_FIELDS

    async def enter_credit_score(self, score: int | str) -> str:
        locator = await self.fill_field("credit_score", score)
        expected = int(str(score).strip())
        entered = await self.page.input_value(to_selector(locator))
        try:
            accepted = int(entered) == expected
        except ValueError:
            accepted = False
        if not accepted:
            raise ValueMismatchError(locator, expected=str(expected), actual=entered)
        return locator

    async def enter_ssn(self, ssn: str) -> str:
        return await self.fill_field("ssn", ssn)

    async def validate_fcra_compliance(self) -> tuple[str, list[str]]:
        """
        Check the FCRA disclosure is shown.

        Returns ``(locator, missing_terms)``. An invisible disclosure is an
        error; missing wording is only logged, since copy varies by page.
        """
        outcome = await self.find_field("fcra_disclosure")
        locator = outcome.matched_locator
        selector = to_selector(locator)
        if not await self.page.is_visible(selector):
            raise InteractionFailure(locator, "FCRA disclosure is not visible")

        text = await self.page.text_content(selector) or ""
        missing = missing_terms(text, FCRA_REQUIRED_TERMS)
        if missing:
            logger.warning("fcra_disclosure_incomplete", locator=locator, missing_terms=missing)
        else:
            logger.info("fcra_disclosure_validated", locator=locator)
        return locator, missing

    async def perform_credit_calculation(self, profile: CreditProfile) -> RaceResult:
        """Enter the profile, confirm the disclosure, calculate, wait for a result state."""
        logger.info("credit_calculation_started", credit_score=profile.credit_score)

        await self.enter_credit_score(profile.credit_score)
        if profile.ssn:
            await self.enter_ssn(profile.ssn)
        await self.validate_fcra_compliance()
        await self.click_field("calculate_button")

        result = await self.wait_for_any(
            [
                *self.registry.candidates("results"),
                PredicateCondition(_NO_LOADING_INDICATOR),
            ]
        )
        logger.info("credit_calculation_completed", end_state=result.condition.describe())
        return result
