"""
Output formatters for decoded model strings.
"""

from .json_formatter import (
    decode_to_json,
    decode_to_dict,
    format_decode_result_json,
    attribute_rows,
    warning_rows,
)

__all__ = [
    "decode_to_json",
    "decode_to_dict",
    "format_decode_result_json",
    "attribute_rows",
    "warning_rows",
]
