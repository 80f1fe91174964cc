"""Resolution layer: waiting, candidate resolution, navigation and races."""

from autoheal.resolver.navigation import NavigationResolver
from autoheal.resolver.race import ConditionRace
from autoheal.resolver.selector import SelectorResolver
from autoheal.resolver.strategies import (
    CssStrategy,
    ElementLocatorStrategy,
    LabelStrategy,
    LocatorKind,
    RoleStrategy,
    strategy_for,
    to_selector,
)
from autoheal.resolver.waiter import ConditionWaiter, coerce_condition

__all__ = [
    "ConditionRace",
    "ConditionWaiter",
    "CssStrategy",
    "ElementLocatorStrategy",
    "LabelStrategy",
    "LocatorKind",
    "NavigationResolver",
    "RoleStrategy",
    "SelectorResolver",
    "coerce_condition",
    "strategy_for",
    "to_selector",
]
