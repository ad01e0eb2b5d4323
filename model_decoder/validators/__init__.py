"""
Dependency rule validation for decoded model strings.
"""

from .rules import (
    validate_dependencies,
    codes_by_category,
    rule_from_dict,
    rule_to_dict,
    Condition,
    DependencyRule,
    Restriction,
    Informational,
    Enablement,
    RuleKind,
    Severity,
    ValidationWarning,
)

__all__ = [
    "validate_dependencies",
    "codes_by_category",
    "rule_from_dict",
    "rule_to_dict",
    "Condition",
    "DependencyRule",
    "Restriction",
    "Informational",
    "Enablement",
    "RuleKind",
    "Severity",
    "ValidationWarning",
]
