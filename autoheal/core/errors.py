"""Exception hierarchy for autoheal.

Anything deriving from :class:`AutoHealError` is a failure the engine could
not recover from on its own. Driver errors that a single candidate, URL or
attempt can absorb never leave the component that caught them.
"""

from __future__ import annotations

from typing import Any, Sequence

from autoheal.core.types import FailedSelector


class AutoHealError(Exception):
    """Base class for all autoheal failures."""


class WaitTimeoutError(AutoHealError, TimeoutError):
    """A single wait ran past its timeout."""

    def __init__(self, description: str, elapsed_ms: float, cause: str = "") -> None:
        self.description = description
        self.elapsed_ms = elapsed_ms
        self.cause = cause
        message = f"Timed out after {elapsed_ms:.0f} ms waiting for {description}"
        if cause:
            message += f": {cause}"
        super().__init__(message)


class ResolutionFailure(AutoHealError):
    """Every candidate in a candidate list was exhausted."""

    def __init__(self, record: FailedSelector) -> None:
        self.record = record
        super().__init__(
            f"All selectors failed for: {record.primary} "
            f"(tried {record.attempted}). Last error: {record.error}"
        )

    @property
    def attempted(self) -> list[str]:
        return self.record.attempted

    @property
    def last_error(self) -> str:
        return self.record.error


class NavigationFailure(AutoHealError):
    """Every URL in a navigation list failed to load."""

    def __init__(self, attempted: Sequence[str], last_error: str) -> None:
        self.attempted = list(attempted)
        self.last_error = last_error
        super().__init__(
            f"All navigation attempts failed ({self.attempted}). Last error: {last_error}"
        )


class InteractionFailure(AutoHealError):
    """An action on a resolved element could not be completed."""

    def __init__(self, locator: str, message: str) -> None:
        self.locator = locator
        super().__init__(message)


class ElementDisappearedError(InteractionFailure):
    def __init__(self, locator: str, attempts: int) -> None:
        self.attempts = attempts
        super().__init__(
            locator,
            f"Element disappeared after attempt {attempts}: {locator}",
        )


class ValueMismatchError(InteractionFailure):
    def __init__(self, locator: str, expected: str, actual: str | None) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            locator,
            f'Value mismatch on {locator}: expected "{expected}", got "{actual}"',
        )


class TextMismatchError(InteractionFailure):
    def __init__(self, locator: str, expected: str, actual: str | None) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            locator,
            f'Text assertion failed on {locator}. Expected variations of "{expected}", '
            f'but got "{actual}"',
        )


class ValidationFailure(AutoHealError, ValueError):
    """A value was rejected by a domain rule before any interaction."""

    def __init__(self, field: str, value: Any, reason: str) -> None:
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid value for {field}: {value!r}. {reason}")
