"""Domain extension layer: semantic fields and business-rule checks."""

from autoheal.domain.credit import (
    CREDIT_REPAIR_FIELDS,
    CreditProfile,
    CreditRepairHealing,
    generate_test_data,
)
from autoheal.domain.registry import DomainHealing, FieldRegistry, SemanticField
from autoheal.domain.validators import GroupedDigitsNormalizer, RangeValidator, missing_terms

__all__ = [
    "CREDIT_REPAIR_FIELDS",
    "CreditProfile",
    "CreditRepairHealing",
    "DomainHealing",
    "FieldRegistry",
    "GroupedDigitsNormalizer",
    "RangeValidator",
    "SemanticField",
    "generate_test_data",
    "missing_terms",
]
