"""
Model-Type Configuration Loader

Loads and validates the per-model-type configuration sets bundled with the
decoder: the Code Catalog, the Position Map, the segment grammar, the
dependency rules, the navigation structure and the enhancement tables.

Each model type ships as one JSON file under ``model_decoder/data/``.
A configuration set is immutable after load; switching model type means
swapping the whole ``ModelTypeConfig`` (see ``DecoderContext``).
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from .validators.rules import DependencyRule, rule_from_dict, rule_to_dict


logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent / "data"

SEPARATORS = frozenset("-:")


class ConfigurationError(ValueError):
    """Raised when a bundled or supplied configuration is inconsistent."""

    def __init__(self, problems: List[str], key: Optional[str] = None):
        self.problems = list(problems)
        self.key = key
        prefix = f"Invalid configuration for model type '{key}'" if key else "Invalid configuration"
        super().__init__(f"{prefix}: " + "; ".join(self.problems))


class UnknownModelTypeError(ConfigurationError):
    """Raised when a model-type key has no bundled configuration."""

    def __init__(self, key: str):
        super().__init__(
            [f"no configuration found (available: {', '.join(available_model_types())})"],
            key=key,
        )


@dataclass(frozen=True)
class CategoryDefinition:
    """
    One attribute slot of a model string.

    Attributes:
        id: Unique category identifier (e.g. 'VOLTAGE', 'B1')
        name: Human-readable display name
        position: Canonical position label shown next to the name
        group: Navigation group tag ('model', 'cooling', ...)
        codes: Read-only mapping of code token -> description
    """
    id: str
    name: str
    position: str
    group: str = ""
    codes: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "codes", MappingProxyType(dict(self.codes)))

    def describe(self, code: str) -> Optional[str]:
        return self.codes.get(code)


class CodeCatalog:
    """
    Ordered registry of category definitions for one model type.
    """

    def __init__(self, categories: Optional[List[CategoryDefinition]] = None):
        self._categories: Dict[str, CategoryDefinition] = {}
        for category in categories or []:
            if category.id in self._categories:
                raise ConfigurationError([f"duplicate category id '{category.id}'"])
            self._categories[category.id] = category

    def get(self, category_id: str) -> Optional[CategoryDefinition]:
        return self._categories.get(category_id)

    def categories(self) -> List[CategoryDefinition]:
        """Return category definitions in document order."""
        return list(self._categories.values())

    def __contains__(self, category_id: str) -> bool:
        return category_id in self._categories

    def __iter__(self) -> Iterator[CategoryDefinition]:
        return iter(self._categories.values())

    def __len__(self) -> int:
        return len(self._categories)


@dataclass(frozen=True)
class PositionRange:
    """
    Half-open character range [start, end) of a category in the canonical
    (separator-inclusive) reference string.

    ``shared_with`` lists categories whose ranges deliberately overlap this
    one (several attributes packed into the same characters).
    """
    category: str
    start: int
    end: int
    shared_with: Tuple[str, ...] = ()

    def indices(self) -> range:
        return range(self.start, self.end)

    def overlaps(self, other: "PositionRange") -> bool:
        return self.start < other.end and other.start < self.end


class PositionMap:
    """Category -> PositionRange for one model type."""

    def __init__(self, ranges: Optional[List[PositionRange]] = None):
        self._ranges: Dict[str, PositionRange] = {r.category: r for r in ranges or []}

    def get(self, category_id: str) -> Optional[PositionRange]:
        return self._ranges.get(category_id)

    def indices(self, category_id: str) -> range:
        """Character indices for a category; empty for unmapped categories."""
        position = self._ranges.get(category_id)
        if position is None:
            return range(0)
        return position.indices()

    def ranges(self) -> List[PositionRange]:
        return list(self._ranges.values())

    def __contains__(self, category_id: str) -> bool:
        return category_id in self._ranges

    def __iter__(self) -> Iterator[PositionRange]:
        return iter(self._ranges.values())

    def __len__(self) -> int:
        return len(self._ranges)


@dataclass(frozen=True)
class Grammar:
    """Ordered category identifiers expected at each segment index."""
    model_part: Tuple[str, ...]
    feature_part: Tuple[str, ...] = ()

    def categories(self) -> Tuple[str, ...]:
        return self.model_part + self.feature_part


@dataclass(frozen=True)
class NavigationEntry:
    """Rendering aid: one line of the reference navigation list."""
    category: Optional[str]
    name: str
    indent: bool = False


@dataclass(frozen=True)
class ModelTypeConfig:
    """
    Complete, read-only configuration set for one model type.
    """
    key: str
    title: str
    catalog: CodeCatalog
    positions: PositionMap
    grammar: Grammar
    reference_string: str
    rules: Tuple[DependencyRule, ...] = ()
    navigation: Tuple[NavigationEntry, ...] = ()
    enhancers: Tuple[str, ...] = ()
    enhancement_tables: Mapping[str, Mapping[str, Mapping[str, Any]]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ModelTypeConfig":
        """Build a configuration from its JSON-compatible dictionary form."""
        missing = [k for k in ("key", "categories", "grammar", "positions", "reference_string") if k not in data]
        if missing:
            raise ConfigurationError(
                [f"missing required key '{k}'" for k in missing], key=data.get("key")
            )

        key = data["key"]
        try:
            categories = [
                CategoryDefinition(
                    id=item["id"],
                    name=item["name"],
                    position=item.get("position", item["id"]),
                    group=item.get("group", ""),
                    codes=item.get("codes", {}),
                )
                for item in data["categories"]
            ]
            catalog = CodeCatalog(categories)

            ranges = []
            for category, entry in data["positions"].items():
                if isinstance(entry, dict):
                    ranges.append(PositionRange(
                        category=category,
                        start=int(entry["start"]),
                        end=int(entry["end"]),
                        shared_with=tuple(entry.get("shared_with", ())),
                    ))
                else:
                    start, end = entry
                    ranges.append(PositionRange(category=category, start=int(start), end=int(end)))

            grammar = Grammar(
                model_part=tuple(data["grammar"].get("model_part", ())),
                feature_part=tuple(data["grammar"].get("feature_part", ())),
            )
            rules = tuple(rule_from_dict(rule) for rule in data.get("rules", []))
            navigation = tuple(
                NavigationEntry(
                    category=item.get("category"),
                    name=item["name"],
                    indent=bool(item.get("indent", False)),
                )
                for item in data.get("navigation", [])
            )
        except ConfigurationError as exc:
            raise ConfigurationError(exc.problems, key=key) from exc
        except (KeyError, TypeError, ValueError) as exc:
            raise ConfigurationError([f"malformed entry: {exc!r}"], key=key) from exc

        tables = {
            name: MappingProxyType({code: MappingProxyType(dict(record)) for code, record in table.items()})
            for name, table in data.get("enhancement_tables", {}).items()
        }

        return cls(
            key=key,
            title=data.get("title", key),
            catalog=catalog,
            positions=PositionMap(ranges),
            grammar=grammar,
            reference_string=data["reference_string"],
            rules=rules,
            navigation=navigation,
            enhancers=tuple(data.get("enhancers", ())),
            enhancement_tables=MappingProxyType(tables),
        )

    def to_dict(self) -> Dict[str, Any]:
        positions: Dict[str, Any] = {}
        for position in self.positions:
            if position.shared_with:
                positions[position.category] = {
                    "start": position.start,
                    "end": position.end,
                    "shared_with": list(position.shared_with),
                }
            else:
                positions[position.category] = [position.start, position.end]

        return {
            "key": self.key,
            "title": self.title,
            "reference_string": self.reference_string,
            "grammar": {
                "model_part": list(self.grammar.model_part),
                "feature_part": list(self.grammar.feature_part),
            },
            "categories": [
                {
                    "id": c.id,
                    "name": c.name,
                    "position": c.position,
                    "group": c.group,
                    "codes": dict(c.codes),
                }
                for c in self.catalog
            ],
            "navigation": [
                {"category": n.category, "name": n.name, "indent": n.indent}
                for n in self.navigation
            ],
            "positions": positions,
            "rules": [rule_to_dict(rule) for rule in self.rules],
            "enhancers": list(self.enhancers),
            "enhancement_tables": {
                name: {code: dict(record) for code, record in table.items()}
                for name, table in self.enhancement_tables.items()
            },
        }

    def to_json(self) -> str:
        """Export configuration to JSON."""
        return json.dumps(self.to_dict(), indent=2)

    @classmethod
    def from_json(cls, json_str: str) -> "ModelTypeConfig":
        """Load configuration from JSON."""
        return cls.from_dict(json.loads(json_str))


def _check_positions(config: ModelTypeConfig) -> List[str]:
    problems = []
    length = len(config.reference_string)
    ranges = config.positions.ranges()

    for position in ranges:
        if position.category not in config.catalog:
            problems.append(f"position map entry '{position.category}' has no catalog entry")
        if position.start < 0 or position.end > length:
            problems.append(
                f"position range for '{position.category}' [{position.start}, {position.end}) "
                f"lies outside the reference string (length {length})"
            )
        if position.end <= position.start:
            problems.append(f"position range for '{position.category}' is empty")

    for i, first in enumerate(ranges):
        for second in ranges[i + 1:]:
            if not first.overlaps(second):
                continue
            documented = (
                second.category in first.shared_with
                or first.category in second.shared_with
            )
            if not documented:
                problems.append(
                    f"undocumented overlap between '{first.category}' "
                    f"[{first.start}, {first.end}) and '{second.category}' "
                    f"[{second.start}, {second.end})"
                )
    return problems


def _check_grammar(config: ModelTypeConfig) -> List[str]:
    """Check grammar references and that segment order agrees with the position map."""
    problems = []
    reference = config.reference_string
    colon = reference.find(":")

    for category in config.grammar.categories():
        if category not in config.catalog:
            problems.append(f"grammar references unknown category '{category}'")

    for part_name, part in (("model", config.grammar.model_part), ("feature", config.grammar.feature_part)):
        previous: Optional[PositionRange] = None
        for category in part:
            position = config.positions.get(category)
            if position is None:
                continue
            if colon >= 0:
                in_model_part = position.end <= colon
                if part_name == "model" and not in_model_part:
                    problems.append(f"model-part category '{category}' is mapped after the colon")
                if part_name == "feature" and position.start <= colon:
                    problems.append(f"feature-part category '{category}' is mapped before the colon")
            if previous is not None and position.start < previous.start:
                problems.append(
                    f"grammar order places '{category}' after '{previous.category}' "
                    f"but its position range starts earlier"
                )
            previous = position

    # The reference string itself must decode cleanly against its own grammar.
    model_text, _, feature_text = reference.partition(":")
    for part, text in ((config.grammar.model_part, model_text), (config.grammar.feature_part, feature_text)):
        segments = [s for s in text.split("-") if s]
        if len(segments) != len(part):
            problems.append(
                f"reference string has {len(segments)} segments where the grammar expects {len(part)}"
            )
        for category, code in zip(part, segments):
            definition = config.catalog.get(category)
            if definition is not None and code not in definition.codes:
                problems.append(f"reference string code '{code}' is not valid for '{category}'")
            position = config.positions.get(category)
            if position is None or position.shared_with:
                continue
            if reference[position.start:position.end] != code:
                problems.append(
                    f"position range for '{category}' covers "
                    f"'{reference[position.start:position.end]}' instead of segment '{code}'"
                )
    return problems


def _check_rules(config: ModelTypeConfig) -> List[str]:
    problems = []
    slots = set(config.grammar.categories())
    for index, rule in enumerate(config.rules):
        for category in rule.categories():
            if category not in config.catalog:
                problems.append(f"rule {index} references unknown category '{category}'")
            elif category not in slots:
                problems.append(f"rule {index} references category '{category}' that is not in the grammar")
        for category, codes in rule.code_references():
            definition = config.catalog.get(category)
            if definition is None:
                continue
            unknown = sorted(set(codes) - set(definition.codes))
            if unknown:
                problems.append(
                    f"rule {index} uses codes {unknown} not defined for '{category}'"
                )
    return problems


def _check_enhancers(config: ModelTypeConfig) -> List[str]:
    from .core.enhancers import ENHANCERS

    problems = []
    for name in config.enhancers:
        enhancer = ENHANCERS.get(name)
        if enhancer is None:
            problems.append(f"unknown enhancer '{name}'")
            continue
        for table in enhancer.tables:
            if table not in config.enhancement_tables:
                problems.append(f"enhancer '{name}' needs missing table '{table}'")
        for category in enhancer.reads + (enhancer.writes,):
            if category not in config.catalog:
                problems.append(f"enhancer '{name}' references unknown category '{category}'")
    return problems


def validate_config(config: ModelTypeConfig) -> List[str]:
    """
    Run the configuration-load validation pass.

    Returns:
        List of human-readable problems; empty when the configuration is sound.
    """
    problems: List[str] = []
    problems.extend(_check_positions(config))
    problems.extend(_check_grammar(config))
    problems.extend(_check_rules(config))
    problems.extend(_check_enhancers(config))
    return problems


def available_model_types() -> List[str]:
    """Keys of the bundled model-type configurations."""
    return sorted(path.stem for path in DATA_DIR.glob("*.json"))


# Global cache of loaded configurations, keyed by model type
_cached_configs: Dict[str, ModelTypeConfig] = {}


def load_model_type(
    key: str,
    json_path: Optional[Path] = None,
    force_reload: bool = False,
    validate: bool = True,
) -> ModelTypeConfig:
    """
    Load a model-type configuration, using cache when possible.

    Args:
        key: Model-type key (e.g. 'rn'); selects ``data/<key>.json``.
        json_path: Optional path to a configuration file outside the package.
        force_reload: Force reload even if cached.
        validate: Run ``validate_config`` and raise on problems.

    Returns:
        ModelTypeConfig ready for use.

    Raises:
        UnknownModelTypeError: no bundled configuration for ``key``.
        ConfigurationError: the configuration failed validation.
    """
    key = key.lower()
    if key in _cached_configs and not force_reload and json_path is None:
        logger.debug("Using cached configuration for model type '%s'", key)
        return _cached_configs[key]

    path = json_path or DATA_DIR / f"{key}.json"
    if not path.exists():
        raise UnknownModelTypeError(key)

    with open(path, "r", encoding="utf-8") as f:
        config = ModelTypeConfig.from_json(f.read())

    if validate:
        problems = validate_config(config)
        if problems:
            raise ConfigurationError(problems, key=config.key)

    logger.info(
        "Loaded model type '%s' from %s (%d categories, %d rules)",
        config.key, path, len(config.catalog), len(config.rules),
    )
    if json_path is None:
        _cached_configs[key] = config
    return config
