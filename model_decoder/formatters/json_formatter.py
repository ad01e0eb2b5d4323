"""
JSON Formatter for decoded model strings

Provides clean output for presentation layers:
- Attributes keyed by category display name, in decode order
- Optional warnings and notices
- Row lists ready for tabular rendering
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from ..core.parser import DecodeOptions, DecodeResult, decode


def attribute_rows(result: DecodeResult) -> List[Dict[str, str]]:
    """One row per decoded attribute, in decode order."""
    return [
        {
            "Position": a.position,
            "Code": a.code,
            "Attribute": a.name,
            "Description": a.description,
        }
        for a in result.attributes
    ]


def warning_rows(result: DecodeResult) -> List[Dict[str, str]]:
    """One row per dependency warning or note, in rule order."""
    return [
        {
            "Severity": w.severity.value,
            "Message": w.message,
            "Hint": w.hint,
            "Categories": ", ".join(w.categories),
        }
        for w in result.warnings
    ]


def format_decode_result_json(
    result: DecodeResult,
    include_warnings: bool = True,
    include_notices: bool = False,
) -> str:
    """
    Format a decode result as JSON.

    Args:
        result: Result from decode_model() or decode()
        include_warnings: Include dependency warnings and notes (default: True)
        include_notices: Include parse notices (default: False)

    Returns:
        JSON string; attributes keyed by display name with code and description
    """
    output: Dict[str, Any] = {
        "Model Type": result.model_type,
        "Model Number": result.normalized,
    }

    attributes: Dict[str, Any] = {}
    for attribute in result.attributes:
        name = attribute.name
        if name in attributes:
            # Unknown categories all share the placeholder name
            name = f"{name} ({attribute.position})"
        attributes[name] = {
            "code": attribute.code,
            "description": attribute.description,
        }
    output["Attributes"] = attributes

    if include_warnings:
        output["Warnings"] = [w.to_dict() for w in result.warnings]

    if include_notices:
        output["Notices"] = [n.to_dict() for n in result.notices]

    return json.dumps(output, ensure_ascii=False, indent=2)


def decode_to_json(
    model_string: str,
    model_type: str = "rn",
    include_warnings: bool = True,
    include_notices: bool = False,
    options: Optional[DecodeOptions] = None,
) -> str:
    """
    Decode a model string and return JSON output.

    Example:
        >>> print(decode_to_json("RN-025-3"))
        {
          "Model Type": "rn",
          "Model Number": "RN-025-3",
          "Attributes": {
            "Series and Generation": {"code": "RN", ...},
            ...
    """
    result = decode(model_string, model_type=model_type, options=options)
    return format_decode_result_json(
        result,
        include_warnings=include_warnings,
        include_notices=include_notices,
    )


def decode_to_dict(
    model_string: str,
    model_type: str = "rn",
    include_notices: bool = False,
    options: Optional[DecodeOptions] = None,
) -> Dict[str, Any]:
    """Decode a model string and return the JSON output as a dictionary."""
    json_str = decode_to_json(
        model_string,
        model_type=model_type,
        include_notices=include_notices,
        options=options,
    )
    return json.loads(json_str)
