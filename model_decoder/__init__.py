"""
Equipment Model-Number Decoder

Decodes structured equipment model-number strings (e.g. packaged rooftop
unit model numbers) into human-readable attributes, flags invalid attribute
combinations, searches codes by description and maps categories to the
characters they occupy.
"""

from .catalog_loader import (
    load_model_type,
    available_model_types,
    validate_config,
    ModelTypeConfig,
    CategoryDefinition,
    CodeCatalog,
    PositionMap,
    PositionRange,
    Grammar,
    NavigationEntry,
    ConfigurationError,
    UnknownModelTypeError,
)
from .core.parser import (
    decode,
    decode_model,
    split_segments,
    parse_segments,
    DecodeOptions,
    DecodeResult,
    ParsedAttribute,
    ParseNotice,
    NoticeCode,
)
from .core.resolver import resolve, Resolution
from .core.enhancers import apply_enhancers, Enhancer, HeatingClass, classify_heating
from .validators.rules import (
    validate_dependencies,
    Condition,
    Restriction,
    Informational,
    Enablement,
    Severity,
    ValidationWarning,
)
from .search import debounced_search, reverse_search, SearchMatch, SearchDebouncer
from .visualize import (
    highlight_indices,
    render_characters,
    live_position_map,
    CharMark,
    MarkKind,
)
from .context import DecoderContext
from .formatters.json_formatter import (
    decode_to_json,
    decode_to_dict,
    format_decode_result_json,
)

__version__ = "1.0.0"
__all__ = [
    "load_model_type",
    "available_model_types",
    "validate_config",
    "ModelTypeConfig",
    "CategoryDefinition",
    "CodeCatalog",
    "PositionMap",
    "PositionRange",
    "Grammar",
    "NavigationEntry",
    "ConfigurationError",
    "UnknownModelTypeError",
    "decode",
    "decode_model",
    "split_segments",
    "parse_segments",
    "DecodeOptions",
    "DecodeResult",
    "ParsedAttribute",
    "ParseNotice",
    "NoticeCode",
    "resolve",
    "Resolution",
    "apply_enhancers",
    "Enhancer",
    "HeatingClass",
    "classify_heating",
    "validate_dependencies",
    "Condition",
    "Restriction",
    "Informational",
    "Enablement",
    "Severity",
    "ValidationWarning",
    "reverse_search",
    "SearchMatch",
    "SearchDebouncer",
    "debounced_search",
    "highlight_indices",
    "render_characters",
    "live_position_map",
    "CharMark",
    "MarkKind",
    "DecoderContext",
    "decode_to_json",
    "decode_to_dict",
    "format_decode_result_json",
]
