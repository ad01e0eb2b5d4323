"""
Decoder context: the active model-type configuration and the latest result.
"""

from __future__ import annotations

import logging
import threading
from typing import Iterable, List, Optional

from .catalog_loader import ModelTypeConfig, available_model_types, load_model_type
from .core.parser import DecodeOptions, DecodeResult, decode_model
from .search import SearchMatch, reverse_search
from .visualize import CharMark, live_position_map, render_characters


logger = logging.getLogger(__name__)


class DecoderContext:
    """
    Owns the active configuration set for one input session.

    Switching model type replaces catalog, positions, grammar and rules in a
    single assignment under the context lock; decodes take the same lock, so
    a switch never lands in the middle of a decode.
    """

    def __init__(self, model_type: str = "rn", options: Optional[DecodeOptions] = None):
        self.options = options or DecodeOptions()
        self._lock = threading.Lock()
        self._config = load_model_type(model_type)
        self.last_result: Optional[DecodeResult] = None

    @property
    def config(self) -> ModelTypeConfig:
        return self._config

    @property
    def model_type(self) -> str:
        return self._config.key

    @staticmethod
    def model_types() -> List[str]:
        return available_model_types()

    def switch_model_type(self, model_type: str) -> ModelTypeConfig:
        """Activate another model type; the previous result is discarded."""
        config = load_model_type(model_type)
        with self._lock:
            previous = self._config.key
            self._config = config
            self.last_result = None
        logger.debug("Switched model type %s -> %s", previous, config.key)
        return config

    def decode(self, text: str) -> DecodeResult:
        with self._lock:
            result = decode_model(text, self._config, self.options)
            self.last_result = result
        return result

    def search(self, query: str) -> List[SearchMatch]:
        return reverse_search(self._config.catalog, query)

    def highlight(self, categories: Iterable[str], text: Optional[str] = None) -> List[CharMark]:
        """Highlight categories over ``text`` (default: the reference string) by the position map."""
        config = self._config
        if text is None:
            text = config.reference_string
        return render_characters(text, config.positions, categories)

    def highlight_live(self, categories: Iterable[str], result: Optional[DecodeResult] = None) -> List[CharMark]:
        """Highlight categories over the normalized live input, by where each segment was parsed."""
        result = result or self.last_result
        if result is None:
            return []
        return render_characters(result.normalized, live_position_map(result.attributes), categories)
