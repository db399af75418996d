"""
Characterization — raw client input to typed characteristics.

Clients describe a trip with plain strings (from a CLI, a form, a query
string). `characterize` turns them into the values the models expect:

    numbers          "16.5"               -> 16.5
    year             "2010"               -> 2010
    hybridity        "true" / "hybrid"    -> True
    date             "2010-06-01"         -> datetime.date
    locations        "38.89,-77.03"       -> Coordinates
    reference names  "Toyota"             -> AutomobileMake record

Composite vehicle names join their key fields with "/":
"Toyota/Prius", "Toyota/2010", "Toyota/Prius/2010".

A reference name with no matching record is dropped with a warning: the
trip is still evaluable, only less precisely. Unknown characteristic
names and unparseable values are errors.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

import structlog

from .calculations import coerce_date
from .decision.registry import Registry
from .domain import CharacterizationError, CharacteristicStore, is_absent
from .geo import Coordinates
from .reference.lookup import ReferenceData

logger = structlog.get_logger(__name__)

TRUE_WORDS = frozenset({"true", "yes", "y", "1", "hybrid"})
FALSE_WORDS = frozenset({"false", "no", "n", "0", "conventional"})

TEXT = frozenset({"model", "origin", "destination", "automobile_type"})


# =============================================================================
# VALUE PARSERS
# =============================================================================

def parse_bool(text: str) -> bool:
    word = text.strip().lower()
    if word in TRUE_WORDS:
        return True
    if word in FALSE_WORDS:
        return False
    raise ValueError(f"not a yes/no value: '{text}'")


def parse_coordinates(text: str) -> Coordinates:
    lat, sep, lng = text.partition(",")
    if not sep:
        raise ValueError(f"expected 'lat,lng', got '{text}'")
    return Coordinates(float(lat), float(lng))


def parse_urbanity(text: str) -> float:
    value = float(text)
    if not 0.0 <= value <= 1.0:
        raise ValueError(f"urbanity must be between 0 and 1, got {value}")
    return value


def _parts(text: str, count: int) -> list[str]:
    parts = [part.strip() for part in text.split("/")]
    if len(parts) != count or not all(parts):
        raise ValueError(f"expected {count} '/'-separated fields, got '{text}'")
    return parts


Lookup = Callable[[ReferenceData, str], Any]


def _make_year(reference: ReferenceData, text: str) -> Any:
    make, year = _parts(text, 2)
    return reference.find_make_year(make, int(year))


def _make_model(reference: ReferenceData, text: str) -> Any:
    make, model = _parts(text, 2)
    return reference.find_make_model(make, model)


def _make_model_year(reference: ReferenceData, text: str) -> Any:
    make, model, year = _parts(text, 3)
    return reference.find_make_model_year(make, model, int(year))


LOOKUPS: dict[str, Lookup] = {
    "make": lambda reference, text: reference.find_make(text),
    "make_year": _make_year,
    "make_model": _make_model,
    "make_model_year": _make_model_year,
    "make_model_year_variant": lambda reference, text: reference.find_make_model_year_variant(text),
    "size_class": lambda reference, text: reference.find_size_class(text),
    "automobile_fuel": lambda reference, text: reference.find_fuel(text),
    "fuel_type": lambda reference, text: reference.find_fuel_type(text),
    "country": lambda reference, text: reference.find_country(text),
}

PARSERS: dict[str, Callable[[str], Any]] = {
    "year": int,
    "hybridity": parse_bool,
    "date": coerce_date,
    "urbanity": parse_urbanity,
    "origin_location": parse_coordinates,
    "destination_location": parse_coordinates,
}


# =============================================================================
# CHARACTERIZE
# =============================================================================

def characterize_value(name: str, raw: Any, reference: ReferenceData) -> Any:
    """
    Parse one raw value. Non-string values are taken as already typed.

    Returns None for a reference name with no matching record.
    """
    if not isinstance(raw, str):
        return raw
    text = raw.strip()
    try:
        if name in LOOKUPS:
            record = LOOKUPS[name](reference, text)
            if record is None:
                logger.warning("reference_not_found", characteristic=name, value=text)
            return record
        if name in TEXT:
            return text
        return PARSERS.get(name, float)(text)
    except ValueError as exc:
        raise CharacterizationError(f"Cannot read {name}={raw!r}: {exc}") from exc


def characterize(
    raw: Mapping[str, Any],
    reference: ReferenceData,
    model: Registry,
) -> CharacteristicStore:
    """Build a CharacteristicStore for `model` from raw client input."""
    values: dict[str, Any] = {}
    for name, value in raw.items():
        if not model.knows(name):
            raise CharacterizationError(
                f"Model '{model.name}' has no characteristic named '{name}'"
            )
        if is_absent(value) or (isinstance(value, str) and not value.strip()):
            continue
        values[name] = characterize_value(name, value, reference)
    return CharacteristicStore(values)
