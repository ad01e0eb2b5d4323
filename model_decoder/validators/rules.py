"""
Dependency Rule Validation

Evaluates a model type's dependency rules against a decoded attribute list
and produces an ordered list of warnings and informational notes.

Rule kinds:
- Restriction: when the condition holds, the affected category must carry
  one of the valid codes, otherwise a WARNING is produced
- Informational: when the condition holds, an INFO note is always produced
- Enablement: when the condition holds, the affected category gains an
  option; an INFO note advertises it until one of the enabled codes is chosen

An affected category the user has not entered yet never produces a warning.
Output order follows rule declaration order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple, Union


logger = logging.getLogger(__name__)


class Severity(str, Enum):
    """Severity classes for validation output."""
    WARNING = "WARNING"
    INFO = "INFO"


class RuleKind(str, Enum):
    RESTRICTION = "restriction"
    INFORMATIONAL = "informational"
    ENABLEMENT = "enablement"


@dataclass(frozen=True)
class Condition:
    """Holds when the category's code is one of ``codes``."""
    category: str
    codes: FrozenSet[str]

    def holds(self, codes_by_category: Mapping[str, str]) -> bool:
        code = codes_by_category.get(self.category)
        return code is not None and code in self.codes


@dataclass(frozen=True)
class DependencyRule:
    """
    Common shape of every dependency rule.

    Attributes:
        condition: Primary trigger
        affects: Category the rule speaks about
        valid_codes: Codes acceptable (or enabled) for ``affects``
        message: Human-readable message
        hint: Suggested fix
        and_condition: Optional second trigger, AND-combined with ``condition``
    """
    kind: ClassVar[RuleKind]

    condition: Condition
    affects: str
    valid_codes: FrozenSet[str]
    message: str
    hint: str = ""
    and_condition: Optional[Condition] = None

    def triggered(self, codes_by_category: Mapping[str, str]) -> bool:
        if not self.condition.holds(codes_by_category):
            return False
        if self.and_condition is not None and not self.and_condition.holds(codes_by_category):
            return False
        return True

    def categories(self) -> Tuple[str, ...]:
        """Categories involved, in condition, AND-condition, affected order."""
        involved = [self.condition.category]
        if self.and_condition is not None:
            involved.append(self.and_condition.category)
        if self.affects not in involved:
            involved.append(self.affects)
        return tuple(involved)

    def code_references(self) -> List[Tuple[str, FrozenSet[str]]]:
        references = [(self.condition.category, self.condition.codes)]
        if self.and_condition is not None:
            references.append((self.and_condition.category, self.and_condition.codes))
        references.append((self.affects, self.valid_codes))
        return references


@dataclass(frozen=True)
class Restriction(DependencyRule):
    kind: ClassVar[RuleKind] = RuleKind.RESTRICTION


@dataclass(frozen=True)
class Informational(DependencyRule):
    kind: ClassVar[RuleKind] = RuleKind.INFORMATIONAL


@dataclass(frozen=True)
class Enablement(DependencyRule):
    kind: ClassVar[RuleKind] = RuleKind.ENABLEMENT


@dataclass(frozen=True)
class ValidationWarning:
    """A warning or informational note produced by one rule."""
    severity: Severity
    message: str
    hint: str
    categories: Tuple[str, ...]
    rule_kind: RuleKind

    @property
    def is_warning(self) -> bool:
        return self.severity == Severity.WARNING

    def to_dict(self) -> Dict[str, Any]:
        return {
            "severity": self.severity.value,
            "message": self.message,
            "hint": self.hint,
            "categories": list(self.categories),
            "rule_kind": self.rule_kind.value,
        }


def _condition_from_dict(data: Mapping[str, Any]) -> Condition:
    return Condition(category=data["category"], codes=frozenset(data["codes"]))


def rule_from_dict(data: Mapping[str, Any]) -> DependencyRule:
    """
    Build a rule variant from its configuration record.

    The record's ``info`` / ``enables`` flags select the variant; setting
    both is rejected.
    """
    info = bool(data.get("info", False))
    enables = bool(data.get("enables", False))
    if info and enables:
        raise ValueError(f"rule for '{data.get('affects')}' cannot be both info and enables")

    if info:
        rule_class = Informational
    elif enables:
        rule_class = Enablement
    else:
        rule_class = Restriction

    and_data = data.get("and")
    return rule_class(
        condition=_condition_from_dict(data["condition"]),
        and_condition=_condition_from_dict(and_data) if and_data else None,
        affects=data["affects"],
        valid_codes=frozenset(data.get("valid_codes", ())),
        message=data["message"],
        hint=data.get("hint", ""),
    )


def rule_to_dict(rule: DependencyRule) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "condition": {
            "category": rule.condition.category,
            "codes": sorted(rule.condition.codes),
        },
        "affects": rule.affects,
        "valid_codes": sorted(rule.valid_codes),
        "message": rule.message,
        "hint": rule.hint,
    }
    if rule.and_condition is not None:
        data["and"] = {
            "category": rule.and_condition.category,
            "codes": sorted(rule.and_condition.codes),
        }
    if isinstance(rule, Informational):
        data["info"] = True
    elif isinstance(rule, Enablement):
        data["enables"] = True
    return data


def codes_by_category(attributes: Union[Mapping[str, str], Iterable[Any]]) -> Dict[str, str]:
    """
    Build the category -> code mapping used for rule evaluation.

    Accepts a ready mapping or an iterable of decoded attributes (anything
    with ``category`` and ``code``). A category seen twice keeps its last code.
    """
    if isinstance(attributes, Mapping):
        return dict(attributes)
    mapping: Dict[str, str] = {}
    for attribute in attributes:
        mapping[attribute.category] = attribute.code
    return mapping


def _evaluate(rule: DependencyRule, codes: Mapping[str, str]) -> Optional[ValidationWarning]:
    affected = codes.get(rule.affects)

    if isinstance(rule, Restriction):
        if affected is None or affected in rule.valid_codes:
            return None
        severity = Severity.WARNING
    elif isinstance(rule, Informational):
        severity = Severity.INFO
    elif isinstance(rule, Enablement):
        if affected is not None and affected in rule.valid_codes:
            return None
        severity = Severity.INFO
    else:
        raise TypeError(f"Unsupported rule type: {type(rule).__name__}")

    return ValidationWarning(
        severity=severity,
        message=rule.message,
        hint=rule.hint,
        categories=rule.categories(),
        rule_kind=rule.kind,
    )


def validate_dependencies(
    attributes: Union[Mapping[str, str], Iterable[Any]],
    rules: Iterable[DependencyRule],
    catalog: Optional[Any] = None,
    grammar_categories: Optional[Iterable[str]] = None,
) -> List[ValidationWarning]:
    """
    Evaluate dependency rules against decoded attributes.

    Args:
        attributes: Decoded attributes (or a category -> code mapping)
        rules: Rules in declaration order
        catalog: Optional code catalog; rules naming a category it does not
            contain are skipped
        grammar_categories: Optional categories the grammar can fill; rules
            naming any other category are skipped

    Returns:
        Warnings and notes in rule declaration order.
    """
    codes = codes_by_category(attributes)
    slots = frozenset(grammar_categories) if grammar_categories is not None else None
    results: List[ValidationWarning] = []

    for rule in rules:
        if catalog is not None:
            missing = [c for c in rule.categories() if c not in catalog]
            if missing:
                logger.debug("Skipping rule '%s': unknown categories %s", rule.message, missing)
                continue
        if slots is not None:
            missing = [c for c in rule.categories() if c not in slots]
            if missing:
                logger.debug("Skipping rule '%s': categories %s are not in the grammar", rule.message, missing)
                continue

        if not rule.triggered(codes):
            continue

        warning = _evaluate(rule, codes)
        if warning is not None:
            results.append(warning)

    return results
