"""
Model String Segment Parser

Decodes equipment model-number strings such as::

    RN-025-3-0-E-A-0-G-0-4:A-3-A-0-1
    \\________ model part ________/ \\ feature part /

into ordered, human-readable attributes.

Pipeline:
- Normalize (dash variants -> '-', uppercase, trim)
- Split model/feature parts on the first colon, then into hyphen segments
- Map segments to categories through the model type's grammar
- Resolve each (category, code) against the Code Catalog
- Run enhancers (derived capacity and airflow data)
- Evaluate dependency rules

User input never raises: partial strings decode to the attributes present,
and anything odd is reported as a notice. Extra colons after the first one
separate feature segments and are reported as MALFORMED_SEPARATOR.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from ..catalog_loader import Grammar, ModelTypeConfig, load_model_type
from ..validators.rules import ValidationWarning, validate_dependencies
from .enhancers import apply_enhancers, get_enhancers
from .resolver import resolve


logger = logging.getLogger(__name__)


class NoticeCode(str, Enum):
    """Non-fatal parse notices."""
    UNKNOWN_CATEGORY = "UNKNOWN_CATEGORY"
    UNKNOWN_CODE = "UNKNOWN_CODE"
    UNRECOGNIZED_SEGMENT = "UNRECOGNIZED_SEGMENT"
    MALFORMED_SEPARATOR = "MALFORMED_SEPARATOR"


MODEL_PART = "model"
FEATURE_PART = "feature"


@dataclass
class DecodeOptions:
    """
    Configuration options for decoding.

    Attributes:
        dash_characters: Characters normalized to a plain hyphen
        uppercase: Uppercase the input before splitting
        enhance: Run the model type's enhancers
        validate: Evaluate dependency rules
        report_unknown: Emit UNKNOWN_CATEGORY / UNKNOWN_CODE notices
    """
    dash_characters: FrozenSet[str] = field(default_factory=lambda: frozenset({
        '\u2010',    # Hyphen
        '\u2011',    # Non-breaking hyphen
        '\u2013',    # En dash
        '\u2014',    # Em dash
        '\u2212',    # Minus sign
    }))
    uppercase: bool = True
    enhance: bool = True
    validate: bool = True
    report_unknown: bool = True


@dataclass
class ParseNotice:
    """A non-fatal observation about the input."""
    code: NoticeCode
    message: str
    segment: Optional[str] = None
    category: Optional[str] = None
    at_index: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'code': self.code.value,
            'message': self.message,
            'segment': self.segment,
            'category': self.category,
            'at_index': self.at_index,
        }


@dataclass(frozen=True)
class Segment:
    """
    One hyphen-delimited chunk of the normalized input.

    ``category`` is None for segments beyond the grammar.
    ``start``/``end`` index the normalized string.
    """
    code: str
    part: str
    start: int
    end: int
    category: Optional[str] = None


@dataclass
class SegmentSplit:
    """Result of splitting one input string."""
    normalized: str
    segments: List[Segment] = field(default_factory=list)
    notices: List[ParseNotice] = field(default_factory=list)

    def mapped(self) -> List[Segment]:
        return [s for s in self.segments if s.category is not None]

    def unmapped(self) -> List[Segment]:
        return [s for s in self.segments if s.category is None]

    def pairs(self) -> List[Tuple[str, str]]:
        """Ordered (category, code) pairs."""
        return [(s.category, s.code) for s in self.mapped()]


@dataclass(frozen=True)
class ParsedAttribute:
    """
    One decoded attribute.

    Attributes:
        category: Category identifier
        code: Raw code token from the input
        name: Resolved category display name
        position: Resolved position label
        description: Resolved (possibly enhanced) description
        start_index: Segment start in the normalized input
        end_index: Segment end in the normalized input
    """
    category: str
    code: str
    name: str
    position: str
    description: str
    start_index: int = 0
    end_index: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'category': self.category,
            'code': self.code,
            'name': self.name,
            'position': self.position,
            'description': self.description,
        }


@dataclass
class DecodeResult:
    """
    Complete result of decoding a model string.

    Attributes:
        raw: Original input string
        normalized: Normalized input
        model_type: Key of the model type used
        attributes: Decoded attributes in segment order
        notices: Parse notices (unknown codes, extra segments, ...)
        warnings: Dependency warnings and notes in rule order
        expected_segments: Number of segments the grammar defines
    """
    raw: str
    normalized: str
    model_type: str
    attributes: List[ParsedAttribute] = field(default_factory=list)
    notices: List[ParseNotice] = field(default_factory=list)
    warnings: List[ValidationWarning] = field(default_factory=list)
    expected_segments: int = 0

    @property
    def is_complete(self) -> bool:
        """True when every grammar slot has a segment."""
        return len(self.attributes) >= self.expected_segments

    @property
    def has_warnings(self) -> bool:
        return any(w.is_warning for w in self.warnings)

    def attribute(self, category: str) -> Optional[ParsedAttribute]:
        found = None
        for attribute in self.attributes:
            if attribute.category == category:
                found = attribute
        return found

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            'raw': self.raw,
            'normalized': self.normalized,
            'model_type': self.model_type,
            'complete': self.is_complete,
            'attributes': [a.to_dict() for a in self.attributes],
            'notices': [n.to_dict() for n in self.notices],
            'warnings': [w.to_dict() for w in self.warnings],
        }


# Segment text never starts or ends with whitespace; blank chunks are dropped
_MODEL_SEGMENT = re.compile(r"[^-\s]+(?:\s+[^-\s]+)*")
_FEATURE_SEGMENT = re.compile(r"[^-:\s]+(?:\s+[^-:\s]+)*")


def normalize_input(text: str, options: Optional[DecodeOptions] = None) -> str:
    """
    Normalize input string.

    - Converts dash variants to '-'
    - Uppercases (unless disabled)
    - Trims whitespace
    """
    options = options or DecodeOptions()
    if options.dash_characters:
        text = text.translate({ord(c): '-' for c in options.dash_characters})
    if options.uppercase:
        text = text.upper()
    return text.strip()


def _map_part(
    text: str,
    offset: int,
    pattern: re.Pattern,
    part: str,
    categories: Tuple[str, ...],
    split: SegmentSplit,
) -> None:
    for i, match in enumerate(pattern.finditer(text)):
        start = offset + match.start()
        end = offset + match.end()
        code = match.group()

        if i < len(categories):
            split.segments.append(Segment(code=code, part=part, start=start, end=end, category=categories[i]))
            continue

        split.segments.append(Segment(code=code, part=part, start=start, end=end))
        split.notices.append(ParseNotice(
            code=NoticeCode.UNRECOGNIZED_SEGMENT,
            message=f"Unrecognized {part} segment '{code}' (expected {len(categories)} {part} segments)",
            segment=code,
            at_index=start,
        ))


def split_segments(
    text: str,
    grammar: Grammar,
    options: Optional[DecodeOptions] = None,
) -> SegmentSplit:
    """
    Split a raw model string into segments mapped to grammar categories.

    Args:
        text: Raw model string
        grammar: Category order for the model and feature parts
        options: Decode options (normalization)

    Returns:
        SegmentSplit with every segment, mapped ones carrying their category.
    """
    normalized = normalize_input(text, options)
    split = SegmentSplit(normalized=normalized)

    model_text, colon, feature_text = normalized.partition(":")
    _map_part(model_text, 0, _MODEL_SEGMENT, MODEL_PART, grammar.model_part, split)

    if colon:
        feature_offset = len(model_text) + 1
        extra = feature_text.find(":")
        if extra >= 0:
            split.notices.append(ParseNotice(
                code=NoticeCode.MALFORMED_SEPARATOR,
                message="Only the first ':' separates the feature string; later colons are read as segment separators",
                at_index=feature_offset + extra,
            ))
        _map_part(feature_text, feature_offset, _FEATURE_SEGMENT, FEATURE_PART, grammar.feature_part, split)

    return split


def parse_segments(
    text: str,
    grammar: Grammar,
    options: Optional[DecodeOptions] = None,
) -> List[Tuple[str, str]]:
    """Ordered (category, code) pairs for the segments the grammar covers."""
    return split_segments(text, grammar, options).pairs()


def decode_model(
    text: str,
    config: ModelTypeConfig,
    options: Optional[DecodeOptions] = None,
) -> DecodeResult:
    """
    Decode a model string against one model-type configuration.

    Args:
        text: Raw model string (complete or partial)
        config: Active model-type configuration
        options: Decode options

    Returns:
        DecodeResult with attributes, notices and dependency warnings
    """
    options = options or DecodeOptions()
    split = split_segments(text, config.grammar, options)
    notices = list(split.notices)

    attributes: List[ParsedAttribute] = []
    for segment in split.mapped():
        resolution = resolve(config.catalog, segment.category, segment.code)

        if options.report_unknown and not resolution.known_category:
            notices.append(ParseNotice(
                code=NoticeCode.UNKNOWN_CATEGORY,
                message=f"Category '{segment.category}' is not in the {config.key} catalog",
                segment=segment.code,
                category=segment.category,
                at_index=segment.start,
            ))
        elif options.report_unknown and not resolution.known_code:
            notices.append(ParseNotice(
                code=NoticeCode.UNKNOWN_CODE,
                message=f"Unknown code '{segment.code}' for {resolution.name} ({resolution.position})",
                segment=segment.code,
                category=segment.category,
                at_index=segment.start,
            ))

        attributes.append(ParsedAttribute(
            category=segment.category,
            code=segment.code,
            name=resolution.name,
            position=resolution.position,
            description=resolution.description,
            start_index=segment.start,
            end_index=segment.end,
        ))

    if options.enhance:
        attributes = apply_enhancers(
            attributes,
            get_enhancers(config.enhancers),
            config.enhancement_tables,
        )

    warnings: List[ValidationWarning] = []
    if options.validate:
        warnings = validate_dependencies(
            attributes, config.rules, config.catalog, config.grammar.categories()
        )

    logger.debug(
        "Decoded %r as %s: %d attributes, %d notices, %d warnings",
        text, config.key, len(attributes), len(notices), len(warnings),
    )

    return DecodeResult(
        raw=text,
        normalized=split.normalized,
        model_type=config.key,
        attributes=attributes,
        notices=notices,
        warnings=warnings,
        expected_segments=len(config.grammar.categories()),
    )


def decode(
    text: str,
    model_type: str = "rn",
    options: Optional[DecodeOptions] = None,
) -> DecodeResult:
    """
    Convenience function to decode a model string.

    Args:
        text: Raw model string
        model_type: Bundled model-type key
        options: Decode options

    Returns:
        DecodeResult
    """
    return decode_model(text, load_model_type(model_type), options)
