"""Locator strategies: turn an opaque locator string into a Playwright selector."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum


class LocatorKind(str, Enum):
    CSS = "css"
    LABEL = "label"
    ROLE = "role"


def _quote(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


class ElementLocatorStrategy(ABC):
    """One way of addressing an element. Resolution only needs ``to_selector``."""

    @property
    @abstractmethod
    def kind(self) -> LocatorKind: ...

    @abstractmethod
    def matches(self, locator: str) -> bool: ...

    @abstractmethod
    def to_selector(self, locator: str) -> str: ...


class LabelStrategy(ElementLocatorStrategy):
    """``label=Credit score`` → ``[aria-label="Credit score"]``."""

    prefix = "label="

    @property
    def kind(self) -> LocatorKind:
        return LocatorKind.LABEL

    def matches(self, locator: str) -> bool:
        return locator.startswith(self.prefix)

    def to_selector(self, locator: str) -> str:
        label = locator[len(self.prefix):]
        return f"[aria-label={_quote(label)}]"


class RoleStrategy(ElementLocatorStrategy):
    """
    ``role=button::Calculate`` → ``role=button[name="Calculate"]``.

    The ``role::name`` pair uses the same encoding as ROLE_NAME selectors.
    A bare ``role=button`` (no ``::``) selects by role alone.
    """

    prefix = "role="

    @property
    def kind(self) -> LocatorKind:
        return LocatorKind.ROLE

    def matches(self, locator: str) -> bool:
        return locator.startswith(self.prefix) and "[" not in locator

    def to_selector(self, locator: str) -> str:
        body = locator[len(self.prefix):]
        if "::" not in body:
            return f"role={body}"
        role, name = body.split("::", 1)
        return f"role={role}[name={_quote(name)}]"


class CssStrategy(ElementLocatorStrategy):
    """Passthrough. Also carries Playwright engine selectors (``text=``, ``xpath=``, ...)."""

    @property
    def kind(self) -> LocatorKind:
        return LocatorKind.CSS

    def matches(self, locator: str) -> bool:
        return True

    def to_selector(self, locator: str) -> str:
        return locator


# Checked in order; CSS is the catch-all and must stay last
_STRATEGIES: list[ElementLocatorStrategy] = [
    LabelStrategy(),
    RoleStrategy(),
    CssStrategy(),
]


def strategy_for(locator: str) -> ElementLocatorStrategy:
    for strategy in _STRATEGIES:
        if strategy.matches(locator):
            return strategy
    return _STRATEGIES[-1]


def to_selector(locator: str) -> str:
    """Driver selector for ``locator``."""
    return strategy_for(locator).to_selector(locator)
