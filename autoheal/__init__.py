from autoheal.core.config import HealingConfig
from autoheal.core.errors import (
    AutoHealError,
    ElementDisappearedError,
    InteractionFailure,
    NavigationFailure,
    ResolutionFailure,
    TextMismatchError,
    ValidationFailure,
    ValueMismatchError,
    WaitTimeoutError,
)
from autoheal.core.healing import AutoHealing, healing_session
from autoheal.core.types import (
    FailedSelector,
    HealingStats,
    LearningSnapshot,
    LoadStateCondition,
    PredicateCondition,
    RaceResult,
    ResolutionOutcome,
    SelectorCondition,
    UrlCondition,
)
from autoheal.domain import (
    CreditRepairHealing,
    DomainHealing,
    FieldRegistry,
    SemanticField,
)
from autoheal.stats import HealingStatsTracker

__all__ = [
    "AutoHealing",
    "HealingConfig",
    "healing_session",
    # Types
    "FailedSelector",
    "HealingStats",
    "LearningSnapshot",
    "LoadStateCondition",
    "PredicateCondition",
    "RaceResult",
    "ResolutionOutcome",
    "SelectorCondition",
    "UrlCondition",
    # Errors
    "AutoHealError",
    "ElementDisappearedError",
    "InteractionFailure",
    "NavigationFailure",
    "ResolutionFailure",
    "TextMismatchError",
    "ValidationFailure",
    "ValueMismatchError",
    "WaitTimeoutError",
    # Stats / domain
    "CreditRepairHealing",
    "DomainHealing",
    "FieldRegistry",
    "HealingStatsTracker",
    "SemanticField",
]
