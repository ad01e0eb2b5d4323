"""
Core decoding modules: segment parser, lookup resolver and enhancers.
"""

from .parser import (
    decode,
    decode_model,
    split_segments,
    parse_segments,
    normalize_input,
    DecodeOptions,
    DecodeResult,
    ParsedAttribute,
    ParseNotice,
    NoticeCode,
    Segment,
    SegmentSplit,
)
from .resolver import resolve, Resolution
from .enhancers import (
    apply_enhancers,
    classify_heating,
    get_enhancers,
    Enhancer,
    HeatingClass,
    ENHANCERS,
    DEFAULT_ENHANCERS,
)

__all__ = [
    "decode",
    "decode_model",
    "split_segments",
    "parse_segments",
    "normalize_input",
    "DecodeOptions",
    "DecodeResult",
    "ParsedAttribute",
    "ParseNotice",
    "NoticeCode",
    "Segment",
    "SegmentSplit",
    "resolve",
    "Resolution",
    "apply_enhancers",
    "classify_heating",
    "get_enhancers",
    "Enhancer",
    "HeatingClass",
    "ENHANCERS",
    "DEFAULT_ENHANCERS",
]
