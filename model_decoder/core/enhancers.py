"""
Derived-data enhancers.

An enhancer reads a few decoded categories, derives a value from the model
type's enhancement tables and appends it as a bracketed suffix to one
attribute's description, e.g.::

    B3  Heating Capacity  "Heating capacity 4 [180 MBH input / 144 MBH output]"

Enhancers run in declaration order on a copy of the attribute list; later
enhancers see the descriptions written by earlier ones. Re-running on an
already enhanced list leaves it unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple


Tables = Mapping[str, Mapping[str, Mapping[str, Any]]]
DeriveFn = Callable[[Mapping[str, Any], Tables], Optional[str]]


class HeatingClass(str, Enum):
    """Heating classification derived from the heating-type code."""
    ELECTRIC = "electric"
    GAS = "gas"
    NONE = "none"
    OTHER = "other"


# Explicit code sets, not ranges
ELECTRIC_HEAT_CODES = frozenset({"E", "H"})
GAS_HEAT_CODES = frozenset({"G", "P"})
NO_HEAT_CODES = frozenset({"0"})

# Electric heaters are rated at 240V; at 208V output drops to (208/240)^2
DERATED_VOLTAGES = frozenset({208})
DERATE_FACTOR = 0.75


@dataclass(frozen=True)
class Enhancer:
    """
    Declaration of one enhancement step.

    Attributes:
        name: Registry key referenced by model-type configurations
        reads: Categories the derivation looks at
        writes: Category whose description receives the suffix
        tables: Enhancement tables the derivation needs
        derive: Function returning the suffix, or None when nothing applies
    """
    name: str
    reads: Tuple[str, ...]
    writes: str
    tables: Tuple[str, ...]
    derive: DeriveFn


def classify_heating(code: Optional[str]) -> HeatingClass:
    if code in ELECTRIC_HEAT_CODES:
        return HeatingClass.ELECTRIC
    if code in GAS_HEAT_CODES:
        return HeatingClass.GAS
    if code in NO_HEAT_CODES:
        return HeatingClass.NONE
    return HeatingClass.OTHER


def _table_record(tables: Tables, table: str, code: str) -> Optional[Mapping[str, Any]]:
    return tables.get(table, {}).get(code)


def derive_airflow(attributes: Mapping[str, Any], tables: Tables) -> Optional[str]:
    size = attributes.get("SIZE")
    if size is None:
        return None
    record = _table_record(tables, "nominal_airflow", size.code)
    if record is None:
        return None
    return f"[{record['cfm']:,} cfm nominal airflow]"


def derive_heating_capacity(attributes: Mapping[str, Any], tables: Tables) -> Optional[str]:
    """Electric heat in kW (derated at 208V) or gas heat in MBH."""
    heat = attributes.get("B1")
    capacity = attributes.get("B3")
    if heat is None or capacity is None:
        return None

    heating = classify_heating(heat.code)

    if heating == HeatingClass.ELECTRIC:
        record = _table_record(tables, "electric_heat_kw", capacity.code)
        if record is None:
            return None
        kw = float(record["kw"])
        voltage = attributes.get("VOLTAGE")
        rating = _table_record(tables, "voltage_rating", voltage.code) if voltage else None
        if rating is None:
            return f"[{kw:.1f} kW rated]"
        volts = rating["volts"]
        if volts in DERATED_VOLTAGES:
            kw *= DERATE_FACTOR
        return f"[{kw:.1f} kW @ {volts}V]"

    if heating == HeatingClass.GAS:
        record = _table_record(tables, "gas_heat_mbh", capacity.code)
        if record is None:
            return None
        return f"[{record['input']} MBH input / {record['output']} MBH output]"

    return None


AIRFLOW = Enhancer(
    name="airflow",
    reads=("SIZE",),
    writes="SIZE",
    tables=("nominal_airflow",),
    derive=derive_airflow,
)

HEATING_CAPACITY = Enhancer(
    name="heating_capacity",
    reads=("B1", "B3", "VOLTAGE"),
    writes="B3",
    tables=("electric_heat_kw", "gas_heat_mbh", "voltage_rating"),
    derive=derive_heating_capacity,
)

ENHANCERS: Dict[str, Enhancer] = {
    AIRFLOW.name: AIRFLOW,
    HEATING_CAPACITY.name: HEATING_CAPACITY,
}

DEFAULT_ENHANCERS: Tuple[Enhancer, ...] = tuple(ENHANCERS.values())


def get_enhancers(names: Iterable[str]) -> List[Enhancer]:
    """Look up enhancers by name, keeping the given order; unknown names are skipped."""
    return [ENHANCERS[name] for name in names if name in ENHANCERS]


def apply_enhancers(
    attributes: Sequence[Any],
    enhancers: Iterable[Enhancer],
    tables: Tables,
) -> List[Any]:
    """
    Run enhancers over decoded attributes.

    Args:
        attributes: Decoded attributes (dataclass instances with
            ``category``, ``code`` and ``description``)
        enhancers: Enhancers in the order they should run
        tables: Enhancement tables of the active model type

    Returns:
        A new list; the input list and its items are left untouched.
    """
    result = list(attributes)

    for enhancer in enhancers:
        targets = [i for i, a in enumerate(result) if a.category == enhancer.writes]
        if not targets:
            continue

        by_category = {a.category: a for a in result}
        suffix = enhancer.derive(by_category, tables)
        if not suffix:
            continue

        index = targets[-1]
        target = result[index]
        if target.description.endswith(f" {suffix}"):
            continue
        result[index] = replace(target, description=f"{target.description} {suffix}")

    return result
